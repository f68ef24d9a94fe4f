"""Request and response models that flow through the interceptor pipeline."""

from dataclasses import dataclass, field, replace
from typing import Any

import httpx

SUPPORTED_METHODS: frozenset[str] = frozenset(["GET", "POST", "PUT", "DELETE", "PATCH"])

DEFAULT_TIMEOUT_MS = 10000


@dataclass
class RequestConfig:
    """Description of a single request before it reaches the transport.

    Request interceptors receive a config and return one; whatever they
    return replaces the config for every later stage of the pipeline.

    Attributes:
        url: Request URL, relative to the client's base URL if one is set.
        method: HTTP method, case-insensitive (GET, POST, PUT, DELETE, PATCH).
        data: Optional body payload, JSON-encoded on dispatch.
        params: Query parameters, encoded in iteration order.
        headers: Per-request headers, merged over the client defaults.
        timeout: Timeout in milliseconds. None uses the client default.
    """

    url: str
    method: str = "GET"
    data: Any = None
    params: dict[str, str] | None = None
    headers: dict[str, str] = field(default_factory=dict)
    timeout: int | None = None

    def copy(self) -> "RequestConfig":
        """Return a copy that does not alias the headers or params dicts."""
        return replace(
            self,
            headers=dict(self.headers or {}),
            params=dict(self.params) if self.params is not None else None,
        )

    def with_headers(self, extra: dict[str, str]) -> "RequestConfig":
        """Return a copy with ``extra`` merged over the existing headers.

        Header names are compared case-insensitively, so ``extra`` replaces
        an existing ``authorization`` when it sets ``Authorization``.
        """
        merged = self.copy()
        overridden = {name.lower() for name in extra}
        merged.headers = {k: v for k, v in merged.headers.items() if k.lower() not in overridden}
        merged.headers.update(extra)
        return merged


@dataclass(frozen=True)
class Response:
    """Decoded response produced by a successful pipeline pass.

    ``config`` is the request config as it looked after the request
    interceptors ran.
    """

    data: Any
    status: int
    status_text: str
    headers: httpx.Headers
    config: RequestConfig
