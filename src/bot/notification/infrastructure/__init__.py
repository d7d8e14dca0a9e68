"""Notification delivery adapters."""

from notification.infrastructure.router import NotificationRouter
from notification.infrastructure.senders import (
    LogSender,
    NotificationSendError,
    SlackWebhookSender,
)

__all__ = [
    "LogSender",
    "NotificationRouter",
    "NotificationSendError",
    "SlackWebhookSender",
]
