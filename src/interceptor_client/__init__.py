"""Interceptor Client - async HTTP client with an interceptor pipeline.

This library provides:
- Request, response and error interceptors run in registration order
- Plugins that are replayed onto every client derived with ``create()``
- A bearer token plugin that refreshes the token once a request gets a 401
- A closed error family covering HTTP, transport, timeout and decode failures

Example:
    ```python
    from interceptor_client import create_client
    from interceptor_client.auth import BearerAuth, TokenStore

    client = create_client(base_url="https://api.example.com")
    client.use(BearerAuth.from_store(TokenStore.from_env()))

    users = client.create(base_url="https://api.example.com/users")
    response = await users.get("/42")
    ```
"""

from interceptor_client.client import Client, create_client
from interceptor_client.models import RequestConfig, Response

__version__ = "0.1.0"

__all__ = ["Client", "RequestConfig", "Response", "__version__", "create_client"]
