"""Notification router: the INotifier used by change notification.

Fans an event out to the destinations configured for its resources and
addresses the owner by their chat identity when one is linked.
"""

from __future__ import annotations

from identity.domain.value_objects import ExternalSystem
from identity.ports.exceptions import IdentityLinkRepositoryError
from identity.ports.repositories import IIdentityLinkRepository
from infrastructure.resource_config import (
    LogDestination,
    NotificationDestination,
    ResourceConfig,
    SlackDestination,
)
from notification.formatter import NotificationMessage, format_message
from notification.infrastructure.observability import (
    DefaultNotificationRouterProbe,
    NotificationRouterProbe,
)
from notification.infrastructure.senders import LogSender, SlackWebhookSender
from reservation.domain.events import NotificationEvent
from reservation.ports.exceptions import NotificationDeliveryError, NotificationError
from shared_kernel.email_address import EmailAddress


class NotificationRouter:
    """INotifier delivering to every destination of an event's resources.

    Destinations are tried one after the other. A failing destination does
    not prevent delivery to the others; failures are reported together once
    every destination was tried.
    """

    def __init__(
        self,
        config: ResourceConfig,
        identity_repository: IIdentityLinkRepository,
        slack_sender: SlackWebhookSender | None = None,
        log_sender: LogSender | None = None,
        probe: NotificationRouterProbe | None = None,
    ):
        self._config = config
        self._identity_repository = identity_repository
        self._slack_sender = slack_sender or SlackWebhookSender()
        self._log_sender = log_sender or LogSender()
        self._probe = probe or DefaultNotificationRouterProbe()

    async def aclose(self) -> None:
        await self._slack_sender.aclose()

    async def notify(self, event: NotificationEvent) -> None:
        """Deliver an event to its destinations.

        Raises:
            NotificationDeliveryError: If at least one destination failed
        """
        usage = event.usage
        destinations = self.destinations_for(event)
        if not destinations:
            self._probe.no_destinations(usage_id=usage.id.value)
            return

        owner_display = await self._owner_display(usage.owner_email)

        failures: list[tuple[str, str]] = []
        for destination in destinations:
            message = format_message(event, owner_display, destination.timezone)
            try:
                await self._send(destination, message)
            except NotificationError as e:
                failures.append((destination.label, str(e)))
                self._probe.delivery_failed(
                    destination=destination.label,
                    usage_id=message.usage_id,
                    event_type=message.event_type,
                    error=str(e),
                )
                continue
            self._probe.delivered(
                destination=destination.label,
                usage_id=message.usage_id,
                event_type=message.event_type,
            )

        if failures:
            raise NotificationDeliveryError(failures)

    def destinations_for(self, event: NotificationEvent) -> list[NotificationDestination]:
        """Destinations of every resource, first occurrence order, no repeats."""
        destinations: list[NotificationDestination] = []
        for resource in event.usage.resources:
            for destination in self._config.destinations_for(resource):
                if destination not in destinations:
                    destinations.append(destination)
        return destinations

    async def _owner_display(self, email: EmailAddress) -> str:
        try:
            link = await self._identity_repository.find_by_email(email)
        except IdentityLinkRepositoryError as e:
            self._probe.identity_lookup_failed(email=email.value, error=str(e))
            return email.value

        identity = link.identity_for(ExternalSystem.SLACK) if link is not None else None
        if identity is None:
            return email.value
        return f"<@{identity.user_id}>"

    async def _send(
        self, destination: NotificationDestination, message: NotificationMessage
    ) -> None:
        match destination:
            case SlackDestination():
                await self._slack_sender.send(destination, message)
            case LogDestination():
                await self._log_sender.send(destination, message)
