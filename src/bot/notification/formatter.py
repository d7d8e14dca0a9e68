"""Rendering of reservation change events into chat messages."""

from __future__ import annotations

from dataclasses import dataclass

from reservation.domain.events import (
    NotificationEvent,
    ResourceUsageCreated,
    ResourceUsageDeleted,
    ResourceUsageUpdated,
)
from reservation.domain.formatting import (
    format_resources,
    format_time_period,
    resource_label,
)


@dataclass(frozen=True)
class NotificationMessage:
    """A rendered notification.

    Attributes:
        text: Plain text body, also usable as Slack mrkdwn
        usage_id: Reservation the message is about
        event_type: ``created``, ``updated`` or ``deleted``
    """

    text: str
    usage_id: str
    event_type: str


def event_type_of(event: NotificationEvent) -> str:
    match event:
        case ResourceUsageCreated():
            return "created"
        case ResourceUsageUpdated():
            return "updated"
        case ResourceUsageDeleted():
            return "deleted"
    raise TypeError(f"Unknown notification event: {event!r}")


_HEADERS = {
    "created": "[New reservation]",
    "updated": "[Updated reservation]",
    "deleted": "[Cancelled reservation]",
}


def format_message(
    event: NotificationEvent, owner_display: str, timezone: str | None = None
) -> NotificationMessage:
    """Render an event for one destination.

    Args:
        event: The change to announce
        owner_display: How to name the owner (a chat mention or the email)
        timezone: IANA timezone of the destination's readers
    """
    usage = event.usage
    event_type = event_type_of(event)

    lines = [
        f"{_HEADERS[event_type]} {owner_display}",
        f"Period: {format_time_period(usage.time_period, timezone)}",
        f"{resource_label(usage.resources)}:",
        format_resources(usage.resources),
    ]
    if event_type == "created" and usage.notes:
        lines.append(f"Notes: {usage.notes}")

    return NotificationMessage(
        text="\n".join(lines), usage_id=usage.id.value, event_type=event_type
    )
