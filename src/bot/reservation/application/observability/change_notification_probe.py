"""Observability probe for the change notification engine.

Following Domain Oriented Observability, the probe captures poll cycles and
delivery outcomes without cluttering the diffing logic with logging concerns.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ChangeNotificationProbe(Protocol):
    """Protocol for change notification observability."""

    def snapshot_initialized(self, usage_count: int) -> None:
        """Called once the initial snapshot of future reservations is stored."""
        ...

    def changes_detected(self, created: int, updated: int, deleted: int) -> None:
        """Called after each diff with the number of events per kind."""
        ...

    def elapsed_usage_dropped(self, usage_id: str) -> None:
        """Called when a reservation left the snapshot because its period ended."""
        ...

    def notification_sent(self, event_type: str, usage_id: str) -> None:
        """Called when an event was delivered."""
        ...

    def notification_failed(self, event_type: str, usage_id: str, error: str) -> None:
        """Called when an event could not be delivered. Processing continues."""
        ...

    def poll_failed(self, error: str) -> None:
        """Called when fetching the current snapshot failed; the cycle aborts."""
        ...

    def with_context(self, context: ObservationContext) -> ChangeNotificationProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultChangeNotificationProbe:
    """Default implementation using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger().bind(
            component="change_notification"
        )
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultChangeNotificationProbe:
        return DefaultChangeNotificationProbe(logger=self._logger, context=context)

    def snapshot_initialized(self, usage_count: int) -> None:
        self._logger.info(
            "change_snapshot_initialized",
            usage_count=usage_count,
            **self._get_context_kwargs(),
        )

    def changes_detected(self, created: int, updated: int, deleted: int) -> None:
        if created == updated == deleted == 0:
            self._logger.debug("no_changes_detected", **self._get_context_kwargs())
            return
        self._logger.info(
            "changes_detected",
            created=created,
            updated=updated,
            deleted=deleted,
            **self._get_context_kwargs(),
        )

    def elapsed_usage_dropped(self, usage_id: str) -> None:
        self._logger.debug(
            "elapsed_usage_dropped",
            usage_id=usage_id,
            **self._get_context_kwargs(),
        )

    def notification_sent(self, event_type: str, usage_id: str) -> None:
        self._logger.info(
            "change_notification_sent",
            event_type=event_type,
            usage_id=usage_id,
            **self._get_context_kwargs(),
        )

    def notification_failed(self, event_type: str, usage_id: str, error: str) -> None:
        self._logger.warning(
            "change_notification_failed",
            event_type=event_type,
            usage_id=usage_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def poll_failed(self, error: str) -> None:
        self._logger.error(
            "change_poll_failed",
            error=error,
            **self._get_context_kwargs(),
        )
