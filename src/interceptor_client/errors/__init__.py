"""Error family for the request pipeline, with RFC 7807 support."""

from interceptor_client.errors.exceptions import (
    BadRequestError,
    ClientError,
    ConflictError,
    DecodeError,
    ForbiddenError,
    HTTPStatusError,
    NotFoundError,
    PluginError,
    RateLimitError,
    RefreshTokenMissingError,
    RequestError,
    RequestTimeoutError,
    ServerError,
    TransportError,
    UnauthorizedError,
    ValidationError,
)
from interceptor_client.errors.handler import build_status_error, decode_error_body
from interceptor_client.errors.models import ProblemDetail

__all__ = [
    "BadRequestError",
    "ClientError",
    "ConflictError",
    "DecodeError",
    "ForbiddenError",
    "HTTPStatusError",
    "NotFoundError",
    "PluginError",
    "ProblemDetail",
    "RateLimitError",
    "RefreshTokenMissingError",
    "RequestError",
    "RequestTimeoutError",
    "ServerError",
    "TransportError",
    "UnauthorizedError",
    "ValidationError",
    "build_status_error",
    "decode_error_body",
]
