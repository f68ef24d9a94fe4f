"""Pytest configuration and shared fixtures for interceptor-client tests."""

import inspect

import httpx
import pytest

from interceptor_client import Client
from interceptor_client.testing import mock_transport


@pytest.fixture(autouse=True)
def clear_env(monkeypatch):
    """Auto-cleanup: Clear token-related environment variables before each test.

    This prevents test pollution when testing token seeding.
    """
    import os

    test_prefixes = ("TEST_", "API_")

    for key in list(os.environ.keys()):
        if any(key.startswith(prefix) for prefix in test_prefixes):
            monkeypatch.delenv(key, raising=False)

    yield


@pytest.fixture
def requests_seen():
    """Every request that reached the mock transport, in order."""
    return []


@pytest.fixture
def make_client(requests_seen):
    """Build a client whose transport records requests and answers via ``handler``."""

    def factory(handler, **kwargs):
        async def recording_handler(request: httpx.Request) -> httpx.Response:
            requests_seen.append(request)
            response = handler(request)
            if inspect.isawaitable(response):
                response = await response
            return response

        kwargs.setdefault("base_url", "https://api.test")
        client = Client(transport=mock_transport(recording_handler), **kwargs)
        return client

    return factory
