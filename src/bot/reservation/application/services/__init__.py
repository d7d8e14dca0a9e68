"""Application services for the reservation context."""

from reservation.application.services.change_notification_service import (
    ChangeNotificationService,
    PollResult,
)
from reservation.application.services.resource_usage_service import (
    ResourceUsageService,
)

__all__ = [
    "ChangeNotificationService",
    "PollResult",
    "ResourceUsageService",
]
