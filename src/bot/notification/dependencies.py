"""Dependency injection for the notification bounded context."""

from functools import lru_cache

from identity.dependencies import get_identity_link_repository
from infrastructure.dependencies import get_resource_config
from notification.infrastructure.router import NotificationRouter


@lru_cache
def get_notification_router() -> NotificationRouter:
    """Get the notifier used by the change watcher (singleton)."""
    return NotificationRouter(
        config=get_resource_config(),
        identity_repository=get_identity_link_repository(),
    )
