"""Domain probes for reservation application services."""

from reservation.application.observability.change_notification_probe import (
    ChangeNotificationProbe,
    DefaultChangeNotificationProbe,
)
from reservation.application.observability.resource_usage_service_probe import (
    DefaultResourceUsageServiceProbe,
    ResourceUsageServiceProbe,
)

__all__ = [
    "ChangeNotificationProbe",
    "DefaultChangeNotificationProbe",
    "DefaultResourceUsageServiceProbe",
    "ResourceUsageServiceProbe",
]
