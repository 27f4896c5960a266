"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Request metadata attached to every event a probe emits.

    Attributes:
        request_id: Caller-supplied X-Request-ID, or one generated per request.
        method: HTTP method of the request being served.
        path: URL path of the request being served.
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", method="DELETE")
        probe = DefaultUserServiceProbe().with_context(context)
    """

    request_id: str | None = None
    method: str | None = None
    path: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.method is not None:
            result["http_method"] = self.method
        if self.path is not None:
            result["http_path"] = self.path
        result.update(self.extra)
        return result
