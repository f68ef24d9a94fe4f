"""Transport layer for the client pipeline.

Modules:
    base: Transport protocol and the httpx-backed adapter

Example:
    ```python
    import httpx

    from interceptor_client.transport import HttpxTransport

    transport = HttpxTransport(httpx.AsyncHTTPTransport(retries=0))
    ```
"""

from interceptor_client.transport.base import HttpxTransport, Transport

__all__ = ["HttpxTransport", "Transport"]
