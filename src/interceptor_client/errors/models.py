"""RFC 7807 Problem Details models."""

from dataclasses import dataclass
from typing import Any

STANDARD_FIELDS = frozenset(["type", "title", "status", "detail", "instance"])


@dataclass
class ProblemDetail:
    """RFC 7807 Problem Details object.

    See: https://datatracker.ietf.org/doc/html/rfc7807
    """

    type: str | None = None  # URI reference identifying the problem type
    title: str | None = None  # Short, human-readable summary
    status: int | None = None  # HTTP status code
    detail: str | None = None  # Human-readable explanation
    instance: str | None = None  # URI reference identifying specific occurrence

    # Extension members (additional fields from API)
    extensions: dict[str, Any] | None = None

    @classmethod
    def from_data(cls, data: Any, content_type: str = "") -> "ProblemDetail | None":
        """Build problem details from an already decoded error body.

        Bodies served as ``application/problem+json`` are always accepted.
        Other JSON objects are accepted when they carry at least one
        standard field.

        Args:
            data: Decoded response body
            content_type: Value of the response Content-Type header

        Returns:
            ProblemDetail object or None if the body is not RFC 7807 shaped
        """
        if not isinstance(data, dict):
            return None

        if "application/problem+json" not in content_type and not STANDARD_FIELDS & data.keys():
            return None

        extensions = {k: v for k, v in data.items() if k not in STANDARD_FIELDS}

        return cls(
            type=data.get("type"),
            title=data.get("title"),
            status=data.get("status"),
            detail=data.get("detail"),
            instance=data.get("instance"),
            extensions=extensions if extensions else None,
        )

    def to_exception_message(self) -> str:
        """Convert problem details to exception message."""
        lines = []

        if self.title:
            lines.append(self.title)
        elif self.detail:
            lines.append(self.detail)

        if self.title and self.detail and self.title != self.detail:
            lines.append(self.detail)

        if self.type:
            lines.append(f"Problem Type: {self.type}")

        if self.instance:
            lines.append(f"Instance: {self.instance}")

        if self.extensions:
            lines.append("Extension fields:")
            for key, value in self.extensions.items():
                lines.append(f"  - {key}: {value}")

        return "\n".join(lines) if lines else "Unknown API error"
