"""Turn non-2xx transport responses into pipeline errors."""

from typing import Any

import httpx

from interceptor_client.errors.exceptions import (
    BadRequestError,
    ClientError,
    ConflictError,
    ForbiddenError,
    HTTPStatusError,
    NotFoundError,
    RateLimitError,
    ServerError,
    UnauthorizedError,
    ValidationError,
)
from interceptor_client.errors.models import ProblemDetail
from interceptor_client.models import RequestConfig

EXCEPTION_MAP: dict[int, type[HTTPStatusError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: ForbiddenError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
    429: RateLimitError,
}


def decode_error_body(response: httpx.Response) -> Any:
    """Decode an error body as JSON, falling back to an empty dict."""
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError:
        return {}


def build_status_error(response: httpx.Response, config: RequestConfig) -> HTTPStatusError:
    """Build the exception for a non-2xx response.

    The body is decoded best-effort. RFC 7807 problem details are used for
    the message when present; otherwise the status line is used.

    Args:
        response: Transport response with a non-2xx status
        config: Request config in effect when the response arrived

    Returns:
        HTTPStatusError subclass chosen from the status code
    """
    status_code = response.status_code
    data = decode_error_body(response)
    problem_detail = ProblemDetail.from_data(data, response.headers.get("content-type", ""))

    if status_code in EXCEPTION_MAP:
        exc_class = EXCEPTION_MAP[status_code]
    elif 400 <= status_code < 500:
        exc_class = ClientError
    elif 500 <= status_code < 600:
        exc_class = ServerError
    else:
        exc_class = HTTPStatusError

    if problem_detail:
        message = problem_detail.to_exception_message()
    else:
        message = f"HTTP {status_code} {response.reason_phrase}".rstrip()

    kwargs: dict[str, Any] = {
        "status": status_code,
        "status_text": response.reason_phrase,
        "data": data,
        "headers": response.headers,
        "problem_detail": problem_detail,
        "config": config,
    }

    if exc_class is RateLimitError:
        retry_after = None
        if "retry-after" in response.headers:
            try:
                retry_after = int(response.headers["retry-after"])
            except (ValueError, TypeError):
                retry_after = None
        return RateLimitError(message, retry_after=retry_after, **kwargs)

    if exc_class is ValidationError:
        validation_errors = None
        if problem_detail and problem_detail.extensions:
            # Explicit key check so an empty list is kept as-is
            if "errors" in problem_detail.extensions:
                validation_errors = problem_detail.extensions.get("errors")
            else:
                validation_errors = problem_detail.extensions.get("validation_errors")
        return ValidationError(message, validation_errors=validation_errors, **kwargs)

    return exc_class(message, **kwargs)
