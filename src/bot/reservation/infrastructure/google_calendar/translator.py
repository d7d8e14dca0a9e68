"""Translation between ResourceUsage aggregates and calendar events.

Event layout:
- summary: compact device spec (``"0-2,5"``) for GPUs, room name for rooms
- description: ``"Reserved by: <email>"``, then a blank line and the notes
- start/end: the time period

Events are created by a service account, so the creator field does not name
the lab member. The owner is read from the description's first line when the
creator is the service account, and from the creator otherwise (events added
by hand in the calendar UI).
"""

from __future__ import annotations

from infrastructure.google_calendar import CalendarEvent
from infrastructure.resource_config import ResourceConfig, RoomConfig, ServerConfig
from reservation.domain.aggregates import ResourceUsage
from reservation.domain.exceptions import ResourceSpecError, ResourceUsageError
from reservation.domain.factory import ResourceFactory, format_device_spec
from reservation.domain.value_objects import Gpu, Resource, Room, TimePeriod, UsageId
from reservation.ports.exceptions import ReconciliationError
from shared_kernel.email_address import EmailAddress, InvalidEmailAddressError

OWNER_PREFIX = "Reserved by: "
NOTES_SEPARATOR = "\n\n"


class EventTranslator:
    """Maps reservations onto the calendars of the resource catalog."""

    def __init__(self, config: ResourceConfig, service_account_email: str):
        self._config = config
        self._service_account_email = service_account_email

    def calendar_id_for(self, usage: ResourceUsage) -> str:
        """Calendar holding a reservation.

        All resources must live in one calendar: GPUs of a single server, or
        a single room.

        Raises:
            ReconciliationError: If resources span calendars or are unknown
        """
        first = usage.resources[0]
        match first:
            case Gpu(server=server_name):
                if not all(
                    isinstance(r, Gpu) and r.server == server_name for r in usage.resources
                ):
                    raise ReconciliationError(
                        f"Reservation {usage.id} mixes resources of several calendars"
                    )
                server = self._config.get_server(server_name)
                if server is None:
                    raise ReconciliationError(f"Unknown server: {server_name}")
                return server.calendar_id
            case Room(name=room_name):
                if not all(r == first for r in usage.resources):
                    raise ReconciliationError(
                        f"Reservation {usage.id} mixes resources of several calendars"
                    )
                room = self._config.get_room(room_name)
                if room is None:
                    raise ReconciliationError(f"Unknown room: {room_name}")
                return room.calendar_id
        raise ReconciliationError(f"Unsupported resource: {first!r}")

    def to_event(self, usage: ResourceUsage, event_id: str | None = None) -> CalendarEvent:
        """Event body for a reservation. ``event_id`` is set for updates."""
        description = f"{OWNER_PREFIX}{usage.owner_email.value}"
        if usage.notes:
            description += f"{NOTES_SEPARATOR}{usage.notes}"

        return CalendarEvent(
            id=event_id,
            summary=self._summary_of(usage.resources),
            description=description,
            start=usage.time_period.start,
            end=usage.time_period.end,
        )

    def to_usage(
        self, event: CalendarEvent, calendar_id: str, usage_id: UsageId
    ) -> ResourceUsage:
        """Reservation represented by an event.

        Raises:
            ReconciliationError: If the event cannot be read as a reservation
        """
        context = self._config.context_for_calendar(calendar_id)
        if context is None:
            raise ReconciliationError(f"Unknown calendar: {calendar_id}")

        if event.start is None or event.end is None:
            raise ReconciliationError(f"Event {event.id} has no start or end time")

        try:
            time_period = TimePeriod(start=event.start, end=event.end)
            return ResourceUsage.reconstruct(
                id=usage_id,
                owner_email=self._owner_of(event),
                time_period=time_period,
                resources=self._resources_of(event.summary or "", context),
                notes=self._notes_of(event.description),
            )
        except (ResourceUsageError, InvalidEmailAddressError) as e:
            raise ReconciliationError(f"Event {event.id} is not a valid reservation: {e}") from e

    @staticmethod
    def _summary_of(resources: tuple[Resource, ...]) -> str:
        match resources[0]:
            case Gpu():
                return format_device_spec(
                    r.device_number for r in resources if isinstance(r, Gpu)
                )
            case Room(name=name):
                return name
        raise ReconciliationError(f"Unsupported resource: {resources[0]!r}")

    def _owner_of(self, event: CalendarEvent) -> EmailAddress:
        creator = event.creator_email
        if creator is None:
            raise ReconciliationError(f"Event {event.id} has no creator")

        if creator != self._service_account_email:
            return EmailAddress(creator)

        first_line = (event.description or "").split("\n", 1)[0]
        if not first_line.startswith(OWNER_PREFIX):
            raise ReconciliationError(
                f"Event {event.id} was created by the service account "
                f"but does not name its owner"
            )
        return EmailAddress(first_line.removeprefix(OWNER_PREFIX).strip())

    @staticmethod
    def _notes_of(description: str | None) -> str | None:
        if not description or NOTES_SEPARATOR not in description:
            return None
        _, notes = description.split(NOTES_SEPARATOR, 1)
        return notes or None

    @staticmethod
    def _resources_of(
        summary: str, context: ServerConfig | RoomConfig
    ) -> list[Resource]:
        if isinstance(context, RoomConfig):
            return [Room(name=context.name)]

        try:
            gpus = ResourceFactory.create_gpus_from_spec(
                summary,
                server_name=context.name,
                all_device_ids=context.device_ids,
                device_lookup=context.model_of,
            )
        except ResourceSpecError as e:
            raise ReconciliationError(
                f"Cannot read devices from event title {summary!r}: {e}"
            ) from e
        return list(gpus)
