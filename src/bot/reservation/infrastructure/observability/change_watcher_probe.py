"""Domain probe for the change watcher loop."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ChangeWatcherProbe(Protocol):
    """Domain probe for the polling loop's lifecycle."""

    def watcher_started(self, poll_interval_seconds: float) -> None:
        ...

    def watcher_stopped(self) -> None:
        ...

    def poll_completed(self, event_count: int, failure_count: int) -> None:
        """Record a finished poll cycle. The cycle number comes from the context."""
        ...

    def poll_cycle_failed(self, error: Exception) -> None:
        """Record a poll cycle that raised. The loop keeps running."""
        ...

    def with_context(self, context: ObservationContext) -> ChangeWatcherProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultChangeWatcherProbe:
    """Default implementation of ChangeWatcherProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger().bind(component="change_watcher")
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultChangeWatcherProbe:
        return DefaultChangeWatcherProbe(logger=self._logger, context=context)

    def watcher_started(self, poll_interval_seconds: float) -> None:
        self._logger.info(
            "change_watcher_started",
            poll_interval_seconds=poll_interval_seconds,
            **self._get_context_kwargs(),
        )

    def watcher_stopped(self) -> None:
        self._logger.info("change_watcher_stopped", **self._get_context_kwargs())

    def poll_completed(self, event_count: int, failure_count: int) -> None:
        self._logger.debug(
            "change_poll_completed",
            event_count=event_count,
            failure_count=failure_count,
            **self._get_context_kwargs(),
        )

    def poll_cycle_failed(self, error: Exception) -> None:
        self._logger.error(
            "change_poll_cycle_failed",
            error=str(error),
            error_type=type(error).__name__,
            **self._get_context_kwargs(),
        )
