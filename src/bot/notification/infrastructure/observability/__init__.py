"""Domain probes for notification delivery."""

from notification.infrastructure.observability.router_probe import (
    DefaultNotificationRouterProbe,
    NotificationRouterProbe,
)

__all__ = ["DefaultNotificationRouterProbe", "NotificationRouterProbe"]
