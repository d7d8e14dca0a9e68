"""Notifier protocol (port) for reservation change events."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from reservation.domain.events import NotificationEvent


@runtime_checkable
class INotifier(Protocol):
    """Delivers reservation change events to interested parties."""

    async def notify(self, event: NotificationEvent) -> None:
        """Deliver one event.

        Raises:
            NotificationError: If delivery failed
        """
        ...
