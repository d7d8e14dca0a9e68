"""Domain probe for the notification router."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class NotificationRouterProbe(Protocol):
    def no_destinations(self, usage_id: str) -> None:
        """The reserved resources have no notification destination."""
        ...

    def identity_lookup_failed(self, email: str, error: str) -> None:
        """The owner's identity link could not be read; the email is shown."""
        ...

    def delivered(self, destination: str, usage_id: str, event_type: str) -> None:
        ...

    def delivery_failed(
        self, destination: str, usage_id: str, event_type: str, error: str
    ) -> None:
        ...

    def with_context(self, context: ObservationContext) -> NotificationRouterProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultNotificationRouterProbe:
    """Default implementation of NotificationRouterProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger().bind(component="notification")
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultNotificationRouterProbe:
        return DefaultNotificationRouterProbe(logger=self._logger, context=context)

    def no_destinations(self, usage_id: str) -> None:
        self._logger.debug(
            "notification_no_destinations",
            usage_id=usage_id,
            **self._get_context_kwargs(),
        )

    def identity_lookup_failed(self, email: str, error: str) -> None:
        self._logger.warning(
            "notification_identity_lookup_failed",
            email=email,
            error=error,
            **self._get_context_kwargs(),
        )

    def delivered(self, destination: str, usage_id: str, event_type: str) -> None:
        self._logger.info(
            "notification_delivered",
            destination=destination,
            usage_id=usage_id,
            event_type=event_type,
            **self._get_context_kwargs(),
        )

    def delivery_failed(
        self, destination: str, usage_id: str, event_type: str, error: str
    ) -> None:
        self._logger.warning(
            "notification_delivery_failed",
            destination=destination,
            usage_id=usage_id,
            event_type=event_type,
            error=error,
            **self._get_context_kwargs(),
        )
