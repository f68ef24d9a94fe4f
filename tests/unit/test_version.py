"""Test basic package functionality."""

import interceptor_client


def test_version():
    """Test that package version is defined."""
    assert hasattr(interceptor_client, "__version__")
    assert interceptor_client.__version__ == "0.1.0"


def test_public_exports():
    assert interceptor_client.Client is interceptor_client.client.Client
    assert callable(interceptor_client.create_client)
