"""Structured exceptions raised by the request pipeline.

Every failure that reaches the response error interceptors is one of:

- ``HTTPStatusError``: the server answered with a non-2xx status
- ``TransportError``: the request never produced a response
- ``DecodeError``: a 2xx body could not be decoded
- ``PluginError``: a plugin gave up on the request (e.g. no refresh token)
"""

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    import httpx

    from interceptor_client.errors.models import ProblemDetail
    from interceptor_client.models import RequestConfig


class RequestError(Exception):
    """Base exception for every error produced by the pipeline."""

    def __init__(self, message: str, config: "RequestConfig | None" = None):
        super().__init__(message)
        self.config = config


class HTTPStatusError(RequestError):
    """Non-2xx response."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        status_text: str = "",
        data: Any = None,
        headers: "httpx.Headers | None" = None,
        problem_detail: "ProblemDetail | None" = None,
        config: "RequestConfig | None" = None,
    ):
        super().__init__(message, config=config)
        self.status = status
        self.status_text = status_text
        self.data = data if data is not None else {}
        self.headers = headers
        self.problem_detail = problem_detail


class ClientError(HTTPStatusError):
    """4xx client errors."""

    pass


class BadRequestError(ClientError):
    """400 Bad Request."""

    pass


class UnauthorizedError(ClientError):
    """401 Unauthorized."""

    pass


class ForbiddenError(ClientError):
    """403 Forbidden."""

    pass


class NotFoundError(ClientError):
    """404 Not Found."""

    pass


class ConflictError(ClientError):
    """409 Conflict."""

    pass


class ValidationError(ClientError):
    """422 Unprocessable Entity (validation errors)."""

    def __init__(self, message: str, validation_errors: list[dict] | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.validation_errors = validation_errors if validation_errors is not None else []


class RateLimitError(ClientError):
    """429 Too Many Requests."""

    def __init__(self, message: str, retry_after: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ServerError(HTTPStatusError):
    """5xx server errors."""

    pass


class TransportError(RequestError):
    """Connection-level failure; no response was received."""

    pass


class RequestTimeoutError(TransportError):
    """The request was cancelled because its timeout expired."""

    def __init__(self, message: str, timeout: int | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.timeout = timeout


class DecodeError(RequestError):
    """A successful response body was not valid JSON."""

    pass


class PluginError(RequestError):
    """Raised by a plugin that cannot complete its part of the request."""

    pass


class RefreshTokenMissingError(PluginError):
    """The auth plugin needed to refresh but no refresh token was available."""

    pass
