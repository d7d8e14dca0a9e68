"""Domain probe for the calendar-backed reservation repository."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class CalendarRepositoryProbe(Protocol):
    """Domain probe for calendar synchronization and id reconciliation."""

    def mapping_created(self, usage_id: str, calendar_id: str, event_id: str) -> None:
        """Record that an unmapped event received a reservation id."""
        ...

    def requested_id_overridden(self, requested_id: str, parsed_id: str) -> None:
        """Record that a lookup resolved to an event mapped under another id."""
        ...

    def event_skipped(self, calendar_id: str, event_id: str | None, error: str) -> None:
        """Record that an event could not be read as a reservation."""
        ...

    def event_created(self, usage_id: str, calendar_id: str, event_id: str) -> None:
        """Record that a reservation was written as a new event."""
        ...

    def event_updated(self, usage_id: str, calendar_id: str, event_id: str) -> None:
        """Record that a reservation's event was updated in place."""
        ...

    def event_moved(
        self, usage_id: str, from_calendar_id: str, to_calendar_id: str
    ) -> None:
        """Record that a reservation moved to another calendar."""
        ...

    def event_deleted(self, usage_id: str, calendar_id: str, event_id: str) -> None:
        """Record that a reservation's event was deleted."""
        ...

    def calendar_unreachable(self, calendar_id: str, error: str) -> None:
        """Record a failed Calendar API call."""
        ...

    def with_context(self, context: ObservationContext) -> CalendarRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultCalendarRepositoryProbe:
    """Default implementation of CalendarRepositoryProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger().bind(
            component="calendar_repository"
        )
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultCalendarRepositoryProbe:
        return DefaultCalendarRepositoryProbe(logger=self._logger, context=context)

    def mapping_created(self, usage_id: str, calendar_id: str, event_id: str) -> None:
        self._logger.info(
            "calendar_mapping_created",
            usage_id=usage_id,
            calendar_id=calendar_id,
            event_id=event_id,
            **self._get_context_kwargs(),
        )

    def requested_id_overridden(self, requested_id: str, parsed_id: str) -> None:
        self._logger.warning(
            "calendar_requested_id_overridden",
            requested_id=requested_id,
            parsed_id=parsed_id,
            **self._get_context_kwargs(),
        )

    def event_skipped(self, calendar_id: str, event_id: str | None, error: str) -> None:
        self._logger.warning(
            "calendar_event_skipped",
            calendar_id=calendar_id,
            event_id=event_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def event_created(self, usage_id: str, calendar_id: str, event_id: str) -> None:
        self._logger.info(
            "calendar_event_created",
            usage_id=usage_id,
            calendar_id=calendar_id,
            event_id=event_id,
            **self._get_context_kwargs(),
        )

    def event_updated(self, usage_id: str, calendar_id: str, event_id: str) -> None:
        self._logger.info(
            "calendar_event_updated",
            usage_id=usage_id,
            calendar_id=calendar_id,
            event_id=event_id,
            **self._get_context_kwargs(),
        )

    def event_moved(
        self, usage_id: str, from_calendar_id: str, to_calendar_id: str
    ) -> None:
        self._logger.info(
            "calendar_event_moved",
            usage_id=usage_id,
            from_calendar_id=from_calendar_id,
            to_calendar_id=to_calendar_id,
            **self._get_context_kwargs(),
        )

    def event_deleted(self, usage_id: str, calendar_id: str, event_id: str) -> None:
        self._logger.info(
            "calendar_event_deleted",
            usage_id=usage_id,
            calendar_id=calendar_id,
            event_id=event_id,
            **self._get_context_kwargs(),
        )

    def calendar_unreachable(self, calendar_id: str, error: str) -> None:
        self._logger.error(
            "calendar_unreachable",
            calendar_id=calendar_id,
            error=error,
            **self._get_context_kwargs(),
        )
