"""Protocol for reservation application service observability.

Defines the interface for domain probes that capture application-level
domain events for reservation commands.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ResourceUsageServiceProbe(Protocol):
    """Domain probe for reservation command operations."""

    def reservation_created(
        self, usage_id: str, owner_email: str, resource_count: int
    ) -> None:
        """Record that a reservation was created."""
        ...

    def reservation_conflict(
        self, resource_description: str, conflicting_usage_id: str
    ) -> None:
        """Record that a reservation was rejected because of a clash."""
        ...

    def reservation_updated(self, usage_id: str, actor_email: str) -> None:
        """Record that a reservation was updated."""
        ...

    def reservation_deleted(self, usage_id: str, actor_email: str) -> None:
        """Record that a reservation was deleted."""
        ...

    def reservation_not_found(self, usage_id: str) -> None:
        """Record that a reservation lookup found nothing."""
        ...

    def authorization_denied(self, usage_id: str, actor_email: str, action: str) -> None:
        """Record that an actor tried to modify someone else's reservation."""
        ...

    def with_context(self, context: ObservationContext) -> ResourceUsageServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultResourceUsageServiceProbe:
    """Default implementation of ResourceUsageServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(
        self, context: ObservationContext
    ) -> DefaultResourceUsageServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultResourceUsageServiceProbe(logger=self._logger, context=context)

    def reservation_created(
        self, usage_id: str, owner_email: str, resource_count: int
    ) -> None:
        self._logger.info(
            "reservation_created",
            usage_id=usage_id,
            owner_email=owner_email,
            resource_count=resource_count,
            **self._get_context_kwargs(),
        )

    def reservation_conflict(
        self, resource_description: str, conflicting_usage_id: str
    ) -> None:
        self._logger.info(
            "reservation_conflict",
            resource=resource_description,
            conflicting_usage_id=conflicting_usage_id,
            **self._get_context_kwargs(),
        )

    def reservation_updated(self, usage_id: str, actor_email: str) -> None:
        self._logger.info(
            "reservation_updated",
            usage_id=usage_id,
            actor=actor_email,
            **self._get_context_kwargs(),
        )

    def reservation_deleted(self, usage_id: str, actor_email: str) -> None:
        self._logger.info(
            "reservation_deleted",
            usage_id=usage_id,
            actor=actor_email,
            **self._get_context_kwargs(),
        )

    def reservation_not_found(self, usage_id: str) -> None:
        self._logger.debug(
            "reservation_not_found",
            usage_id=usage_id,
            **self._get_context_kwargs(),
        )

    def authorization_denied(self, usage_id: str, actor_email: str, action: str) -> None:
        self._logger.warning(
            "reservation_authorization_denied",
            usage_id=usage_id,
            actor=actor_email,
            action=action,
            **self._get_context_kwargs(),
        )
