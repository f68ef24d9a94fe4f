"""Client core: builds requests, runs the interceptor pipeline, owns plugins."""

import asyncio
import json
import logging
from collections.abc import Callable, Mapping
from typing import Any

import httpx

from interceptor_client.errors.exceptions import DecodeError, RequestTimeoutError, TransportError
from interceptor_client.errors.handler import build_status_error
from interceptor_client.models import DEFAULT_TIMEOUT_MS, SUPPORTED_METHODS, RequestConfig, Response
from interceptor_client.pipeline import Interceptors
from interceptor_client.transport.base import HttpxTransport, Transport

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {"Content-Type": "application/json"}

# Keys the verb helpers set themselves
FORCED_KEYS = frozenset(["method", "url", "data"])

Plugin = Callable[["Client"], None]


class Client:
    """Async HTTP client with request/response interceptors and plugins.

    Args:
        base_url: Prefix concatenated verbatim in front of every request URL.
        headers: Default headers, merged over ``Content-Type: application/json``.
        timeout: Default request timeout in milliseconds.
        transport: Transport to send through. When omitted the client creates
            an :class:`HttpxTransport` and closes it in :meth:`aclose`.

    Example:
        ```python
        async with Client(base_url="https://api.example.com") as client:
            client.interceptors.request.use(add_trace_header)
            response = await client.get("/users", params={"page": "1"})
            print(response.data)
        ```
    """

    def __init__(
        self,
        base_url: str | None = None,
        headers: Mapping[str, str] | None = None,
        *,
        timeout: int = DEFAULT_TIMEOUT_MS,
        transport: Transport | None = None,
    ) -> None:
        self.base_url = base_url
        self.default_headers: dict[str, str] = {**DEFAULT_HEADERS, **(headers or {})}
        self.timeout = timeout
        self.interceptors = Interceptors(self)
        self._plugins: list[Plugin] = []
        self._owns_transport = transport is None
        self._transport: Transport = transport if transport is not None else HttpxTransport()

    async def __aenter__(self) -> "Client":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the transport if this client created it."""
        if self._owns_transport:
            await self._transport.aclose()

    @property
    def plugins(self) -> tuple[Plugin, ...]:
        return tuple(self._plugins)

    def use(self, plugin: Plugin) -> None:
        """Register ``plugin`` and apply it to this client immediately."""
        self._plugins.append(plugin)
        plugin(self)

    def create(self, base_url: str | None = None, headers: Mapping[str, str] | None = None) -> "Client":
        """Create a new client and replay every registered plugin onto it.

        The new client shares this client's transport and default timeout,
        but not its base URL, headers or interceptors. Plugins registered on
        either client afterwards stay local to that client.
        """
        instance = type(self)(base_url, headers, timeout=self.timeout, transport=self._transport)
        instance._plugins = list(self._plugins)
        for plugin in instance._plugins:
            logger.debug(f"Applying plugin {getattr(plugin, '__name__', plugin)!r} to derived client")
            plugin(instance)
        return instance

    def build_url(self, url: str, params: Mapping[str, str] | None = None) -> str:
        full_url = f"{self.base_url}{url}" if self.base_url else url
        if params:
            full_url += f"?{httpx.QueryParams(params)}"
        return full_url

    async def request(self, config: RequestConfig | Mapping[str, Any]) -> Response:
        """Send one request through the full interceptor pipeline.

        Errors from any stage (interceptors, transport, timeout, non-2xx
        status, body decoding) go through the response error handlers. A
        handler that returns a value makes that value the result.

        Raises:
            RequestError: Subclass describing the failure, unless recovered.
        """
        try:
            if isinstance(config, RequestConfig):
                config = config.copy()
            else:
                config = RequestConfig(**config).copy()
            config = await self.interceptors.request.run(config)
            response = await self._dispatch(config)
            return await self.interceptors.response.run(response)
        except Exception as exc:
            return await self.interceptors.response.run_error(exc)

    async def _dispatch(self, config: RequestConfig) -> Response:
        method = (config.method or "GET").upper()
        if method not in SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {config.method!r}")

        headers = httpx.Headers(self.default_headers)
        headers.update(config.headers or {})
        timeout = config.timeout if config.timeout is not None else self.timeout
        content = json.dumps(config.data).encode() if config.data is not None else None
        url = self.build_url(config.url, config.params)

        logger.debug(f"{method} {url}")
        try:
            async with asyncio.timeout(timeout / 1000):
                raw = await self._transport.send(url, method=method, headers=headers, content=content)
        except (TimeoutError, httpx.TimeoutException) as exc:
            logger.warning(f"Request {method} {url} timed out after {timeout}ms")
            raise RequestTimeoutError(
                f"Request {method} {url} timed out after {timeout}ms", timeout=timeout, config=config
            ) from exc
        except httpx.TransportError as exc:
            logger.warning(f"Request {method} {url} failed: {exc}")
            raise TransportError(f"Request {method} {url} failed: {exc}", config=config) from exc

        logger.debug(f"{method} {url} -> {raw.status_code}")
        if not raw.is_success:
            raise build_status_error(raw, config)

        if raw.content:
            try:
                data = raw.json()
            except ValueError as exc:
                raise DecodeError(f"Could not decode response body from {method} {url}", config=config) from exc
        else:
            data = None

        return Response(
            data=data,
            status=raw.status_code,
            status_text=raw.reason_phrase,
            headers=raw.headers,
            config=config,
        )

    def _verb_config(self, method: str, url: str, options: dict[str, Any], data: Any = None) -> RequestConfig:
        conflicting = FORCED_KEYS & options.keys()
        if conflicting:
            raise TypeError(f"{method.lower()}() does not accept {', '.join(sorted(conflicting))} in options")
        return RequestConfig(url=url, method=method, data=data, **options)

    async def get(self, url: str, **options: Any) -> Response:
        return await self.request(self._verb_config("GET", url, options))

    async def delete(self, url: str, **options: Any) -> Response:
        return await self.request(self._verb_config("DELETE", url, options))

    async def post(self, url: str, data: Any = None, **options: Any) -> Response:
        return await self.request(self._verb_config("POST", url, options, data))

    async def put(self, url: str, data: Any = None, **options: Any) -> Response:
        return await self.request(self._verb_config("PUT", url, options, data))

    async def patch(self, url: str, data: Any = None, **options: Any) -> Response:
        return await self.request(self._verb_config("PATCH", url, options, data))


def create_client(
    base_url: str | None = None,
    headers: Mapping[str, str] | None = None,
    **kwargs: Any,
) -> Client:
    """Return a fresh :class:`Client`; the library keeps no shared default instance."""
    return Client(base_url, headers, **kwargs)
