"""Senders delivering a rendered message to one kind of destination."""

from __future__ import annotations

import httpx
import structlog

from infrastructure.resource_config import LogDestination, SlackDestination
from notification.formatter import NotificationMessage
from reservation.ports.exceptions import NotificationError


class NotificationSendError(NotificationError):
    """Raised when a destination rejected or did not receive a message."""

    def __init__(self, destination: str, message: str):
        self.destination = destination
        super().__init__(f"{destination}: {message}")


class SlackWebhookSender:
    """Posts messages to Slack incoming webhooks."""

    def __init__(
        self,
        http_client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 10.0,
    ):
        self._http = http_client or httpx.AsyncClient(timeout=timeout_seconds)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def send(self, destination: SlackDestination, message: NotificationMessage) -> None:
        payload = {
            "text": message.text,
            "blocks": [
                {"type": "section", "text": {"type": "mrkdwn", "text": message.text}}
            ],
        }
        try:
            response = await self._http.post(destination.webhook_url, json=payload)
        except httpx.HTTPError as e:
            raise NotificationSendError(destination.label, f"webhook unreachable: {e}") from e

        if response.is_error:
            raise NotificationSendError(
                destination.label,
                f"webhook returned {response.status_code}: {response.text}",
            )


class LogSender:
    """Writes messages to the application log instead of a chat platform."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger().bind(component="notification")

    async def send(self, destination: LogDestination, message: NotificationMessage) -> None:
        self._logger.info(
            "notification_logged",
            destination=destination.label,
            usage_id=message.usage_id,
            event_type=message.event_type,
            text=message.text,
        )
