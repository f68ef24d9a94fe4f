"""Testing utilities for code built on interceptor-client.

Example:
    ```python
    from interceptor_client import Client
    from interceptor_client.testing import json_response, mock_transport


    async def test_lists_users():
        transport = mock_transport(lambda request: json_response(200, [{"id": 1}]))
        client = Client(base_url="https://api.test", transport=transport)
        response = await client.get("/users")
        assert response.data == [{"id": 1}]
    ```
"""

from collections.abc import Callable
from typing import Any

import httpx

from interceptor_client.transport.base import HttpxTransport

Handler = Callable[[httpx.Request], Any]


def mock_transport(handler: Handler) -> HttpxTransport:
    """Wrap an ``httpx.MockTransport`` handler (sync or async) in a transport."""
    return HttpxTransport(httpx.MockTransport(handler))


def json_response(status: int, data: Any = None, headers: dict[str, str] | None = None) -> httpx.Response:
    """Build a JSON response; ``data=None`` gives an empty body."""
    if data is None:
        return httpx.Response(status, headers=headers)
    return httpx.Response(status, json=data, headers=headers)


__all__ = ["json_response", "mock_transport"]
