"""Transport adapter between the client pipeline and the network.

The pipeline only needs a fetch-like ``send`` primitive. Anything that
implements :class:`Transport` can be plugged into a client; the default
:class:`HttpxTransport` wraps ``httpx.AsyncClient``.

Timeouts are owned by the pipeline, which cancels the ``send`` coroutine
when a request's timer fires, so transports should not add their own.
"""

import logging
from typing import Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)


@runtime_checkable
class Transport(Protocol):
    """Fetch-like primitive used by the client core.

    Implementations return an ``httpx.Response`` with its body already read
    and raise ``httpx.TransportError`` subclasses on connection failures.
    """

    async def send(
        self,
        url: str,
        *,
        method: str,
        headers: httpx.Headers,
        content: bytes | None = None,
    ) -> httpx.Response: ...

    async def aclose(self) -> None: ...


class HttpxTransport:
    """Transport backed by ``httpx.AsyncClient``.

    Args:
        wrapped_transport: Optional httpx transport to send through, e.g.
            ``httpx.MockTransport`` in tests. Defaults to httpx's own.

    Example:
        ```python
        transport = HttpxTransport()
        client = Client(base_url="https://api.example.com", transport=transport)
        ```
    """

    def __init__(self, wrapped_transport: httpx.AsyncBaseTransport | None = None) -> None:
        self._client = httpx.AsyncClient(transport=wrapped_transport, timeout=None)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def send(
        self,
        url: str,
        *,
        method: str,
        headers: httpx.Headers,
        content: bytes | None = None,
    ) -> httpx.Response:
        request = self._client.build_request(method, url, headers=headers, content=content)
        return await self._client.send(request)

    async def aclose(self) -> None:
        if not self._client.is_closed:
            logger.debug("Closing httpx transport")
            await self._client.aclose()
