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
    """Immutable context containing metadata for observability.

    Captures operation-scoped metadata that should be included with all
    instrumentation events, so that log lines from the command path and the
    polling loop can be correlated.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        actor_email: Email of the lab member performing the operation.
        poll_cycle: Sequence number of the watcher poll cycle (if applicable).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", actor_email="a@x.com")
        probe = DefaultResourceUsageServiceProbe().with_context(context)
    """

    request_id: str | None = None
    actor_email: str | None = None
    poll_cycle: int | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.actor_email is not None:
            result["actor_email"] = self.actor_email
        if self.poll_cycle is not None:
            result["poll_cycle"] = self.poll_cycle
        result.update(self.extra)
        return result

    def with_poll_cycle(self, poll_cycle: int) -> ObservationContext:
        """Create a new context with the poll cycle set."""
        return ObservationContext(
            request_id=self.request_id,
            actor_email=self.actor_email,
            poll_cycle=poll_cycle,
            extra=self.extra,
        )

    def with_extra(self, **kwargs: Any) -> ObservationContext:
        """Create a new context with additional metadata."""
        new_extra = {**self.extra, **kwargs}
        return ObservationContext(
            request_id=self.request_id,
            actor_email=self.actor_email,
            poll_cycle=self.poll_cycle,
            extra=new_extra,
        )
