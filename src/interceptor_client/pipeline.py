"""Interceptor registries and the chain runners used by the client core.

Handlers may be plain functions or coroutine functions. Registration is
append-only and registration order is execution order.
"""

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, TypeVar

from interceptor_client.models import RequestConfig, Response

if TYPE_CHECKING:
    from interceptor_client.client import Client

logger = logging.getLogger(__name__)

T = TypeVar("T")

RequestHandler = Callable[[RequestConfig], "RequestConfig | Awaitable[RequestConfig]"]
ResponseHandler = Callable[[Response], "Response | Awaitable[Response]"]
ErrorHandler = Callable[[Exception], Any]


async def resolve(value: T | Awaitable[T]) -> T:
    """Await ``value`` if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


async def run_error_chain(handlers: list[ErrorHandler], error: Exception) -> Any:
    """Offer ``error`` to each handler in order.

    The first handler that returns a value recovers the request and that
    value is returned. A handler that raises hands its exception to the
    next one. If none recovers, the last exception is raised.
    """
    for handler in handlers:
        try:
            return await resolve(handler(error))
        except Exception as exc:
            error = exc
    raise error


class RequestInterceptors:
    """Ordered request handlers for one client."""

    def __init__(self, client: "Client") -> None:
        self._client = client
        self.handlers: list[RequestHandler] = []
        self.error_handlers: list[ErrorHandler] = []

    def use(self, on_fulfilled: RequestHandler, on_rejected: ErrorHandler | None = None) -> "Client":
        """Register a config transform and an optional request-phase error handler."""
        self.handlers.append(on_fulfilled)
        if on_rejected is not None:
            self.error_handlers.append(on_rejected)
        logger.debug(f"Registered request interceptor {getattr(on_fulfilled, '__name__', on_fulfilled)!r}")
        return self._client

    async def run(self, config: RequestConfig) -> RequestConfig:
        """Apply every handler in order.

        If a handler raises, the rejection handlers get a chance to recover
        by returning a config, which is then sent as-is.
        """
        try:
            for handler in self.handlers:
                config = await resolve(handler(config))
        except Exception as exc:
            config = await run_error_chain(self.error_handlers, exc)
        return config


class ResponseInterceptors:
    """Ordered response handlers and the separate ordered error handlers."""

    def __init__(self, client: "Client") -> None:
        self._client = client
        self.handlers: list[ResponseHandler] = []
        self.error_handlers: list[ErrorHandler] = []

    def use(
        self,
        on_fulfilled: ResponseHandler | None = None,
        on_rejected: ErrorHandler | None = None,
    ) -> "Client":
        """Register a response transform and/or an error handler."""
        if on_fulfilled is not None:
            self.handlers.append(on_fulfilled)
        if on_rejected is not None:
            self.error_handlers.append(on_rejected)
        return self._client

    async def run(self, response: Response) -> Response:
        for handler in self.handlers:
            response = await resolve(handler(response))
        return response

    async def run_error(self, error: Exception) -> Any:
        return await run_error_chain(self.error_handlers, error)


class Interceptors:
    """The ``client.interceptors`` namespace."""

    def __init__(self, client: "Client") -> None:
        self.request = RequestInterceptors(client)
        self.response = ResponseInterceptors(client)
