"""Reservation repository backed by Google Calendar.

Each server and room of the resource catalog owns one calendar, and every
reservation is one event. The calendar is the source of truth: lab members
may also edit events directly in the calendar UI.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Callable

from infrastructure.google_calendar import (
    CalendarEvent,
    GoogleCalendarApiError,
    ICalendarClient,
)
from infrastructure.resource_config import ResourceConfig
from reservation.domain.aggregates import ResourceUsage
from reservation.domain.value_objects import TimePeriod, UsageId
from reservation.infrastructure.google_calendar.id_mapper import (
    CalendarIdMapper,
    ExternalEventId,
)
from reservation.infrastructure.google_calendar.translator import EventTranslator
from reservation.infrastructure.observability import (
    CalendarRepositoryProbe,
    DefaultCalendarRepositoryProbe,
)
from reservation.ports.exceptions import (
    ReconciliationError,
    RepositoryConnectionError,
    ResourceUsageNotFoundError,
)
from shared_kernel.email_address import EmailAddress

MISSING_EVENT_STATUSES = (404, 410)


class GoogleCalendarResourceUsageRepository:
    """IResourceUsageRepository over Google Calendar.

    Ids are resolved in three tiers, most specific first:
    1. the id is a reservation id with a stored mapping
    2. the id is an event id known to the reverse mapping
    3. the id is an unmapped event id; every configured calendar is probed
       and a mapping is created for the event found

    Listing is not paginated by time: every calendar is read from a
    look-back window and filtered in memory.
    """

    def __init__(
        self,
        client: ICalendarClient,
        config: ResourceConfig,
        id_mapper: CalendarIdMapper,
        service_account_email: str,
        lookback: timedelta = timedelta(hours=24),
        probe: CalendarRepositoryProbe | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize the repository.

        Args:
            client: Calendar API client
            config: Resource catalog; gives the calendar of every resource
            id_mapper: Reservation id <-> event id table
            service_account_email: Identity the bot creates events as
            lookback: How far before now event listing starts, so that
                ongoing reservations are included
            probe: Optional domain probe for observability
            clock: Returns "now"; injectable for tests
        """
        self._client = client
        self._config = config
        self._id_mapper = id_mapper
        self._translator = EventTranslator(config, service_account_email)
        self._lookback = lookback
        self._probe = probe or DefaultCalendarRepositoryProbe()
        self._clock = clock or (lambda: datetime.now(UTC))

    async def find_by_id(self, usage_id: UsageId) -> ResourceUsage | None:
        requested = usage_id.value
        location = await self._resolve(requested)

        if location is None:
            usage = await self._find_unmapped_event(requested)
        else:
            event = await self._get_event(location.calendar_id, location.event_id)
            if event is None:
                return None
            usage = await self._to_usage(event, location.calendar_id)

        if usage is not None and usage.id.value != requested:
            # Looked up through the event id; callers expect the id they asked for.
            self._probe.requested_id_overridden(
                requested_id=requested, parsed_id=usage.id.value
            )
            usage = ResourceUsage.reconstruct(
                id=usage_id,
                owner_email=usage.owner_email,
                time_period=usage.time_period,
                resources=usage.resources,
                notes=usage.notes,
            )
        return usage

    async def find_future(self) -> list[ResourceUsage]:
        """List reservations whose end is after now.

        Raises:
            RepositoryConnectionError: If a calendar or the mapping file is
                unreachable
            ReconciliationError: If the mapping file is corrupt
        """
        # A broken mapping store must fail the listing, not every event in it.
        await self._id_mapper.ensure_loaded()

        now = self._clock()
        time_min = now - self._lookback
        usages: list[ResourceUsage] = []

        for calendar_id in self._config.calendar_ids:
            try:
                items = await self._client.list_events(calendar_id, time_min)
            except GoogleCalendarApiError as e:
                raise self._connection_error(calendar_id, e) from e

            for item in items:
                usage = await self._read_listed_event(item, calendar_id, now)
                if usage is not None:
                    usages.append(usage)

        return usages

    async def find_overlapping(self, time_period: TimePeriod) -> list[ResourceUsage]:
        return [
            usage
            for usage in await self.find_future()
            if usage.time_period.overlaps_with(time_period)
        ]

    async def find_by_owner(self, owner_email: EmailAddress) -> list[ResourceUsage]:
        return [
            usage for usage in await self.find_future() if usage.is_owned_by(owner_email)
        ]

    async def save(self, usage: ResourceUsage) -> None:
        target_calendar = self._translator.calendar_id_for(usage)
        domain_id = usage.id.value
        location = await self._id_mapper.get_external_id(domain_id)

        if location is None:
            await self._insert(usage, target_calendar)
            return

        if location.calendar_id == target_calendar:
            event = self._translator.to_event(usage, event_id=location.event_id)
            try:
                await self._client.update_event(
                    location.calendar_id, location.event_id, event
                )
            except GoogleCalendarApiError as e:
                if e.status_code in MISSING_EVENT_STATUSES:
                    # Deleted in the calendar UI since it was read.
                    raise ResourceUsageNotFoundError(domain_id) from e
                raise self._connection_error(location.calendar_id, e) from e
            self._probe.event_updated(
                usage_id=domain_id,
                calendar_id=location.calendar_id,
                event_id=location.event_id,
            )
            return

        # Events cannot change calendars in place: recreate and remap.
        await self._delete_event(location.calendar_id, location.event_id)
        await self._insert(usage, target_calendar)
        self._probe.event_moved(
            usage_id=domain_id,
            from_calendar_id=location.calendar_id,
            to_calendar_id=target_calendar,
        )

    async def delete(self, usage_id: UsageId) -> None:
        requested = usage_id.value
        location = await self._id_mapper.get_external_id(requested)
        domain_id = requested

        if location is None:
            mapped_id = await self._id_mapper.get_domain_id(requested)
            if mapped_id is not None:
                domain_id = mapped_id
                location = await self._id_mapper.get_external_id(mapped_id)
                if location is None:
                    raise ResourceUsageNotFoundError(requested)

        if location is None:
            await self._delete_unmapped_event(requested)
            return

        await self._delete_event(location.calendar_id, location.event_id)
        await self._id_mapper.delete_mapping(domain_id)
        self._probe.event_deleted(
            usage_id=domain_id,
            calendar_id=location.calendar_id,
            event_id=location.event_id,
        )

    async def _resolve(self, requested: str) -> ExternalEventId | None:
        location = await self._id_mapper.get_external_id(requested)
        if location is not None:
            return location

        domain_id = await self._id_mapper.get_domain_id(requested)
        if domain_id is None:
            return None
        return await self._id_mapper.get_external_id(domain_id)

    async def _find_unmapped_event(self, event_id: str) -> ResourceUsage | None:
        for calendar_id in self._config.calendar_ids:
            event = await self._get_event(calendar_id, event_id)
            if event is not None:
                return await self._to_usage(event, calendar_id)
        return None

    async def _delete_unmapped_event(self, event_id: str) -> None:
        for calendar_id in self._config.calendar_ids:
            try:
                deleted = await self._client.delete_event(calendar_id, event_id)
            except GoogleCalendarApiError as e:
                raise self._connection_error(calendar_id, e) from e
            if deleted:
                self._probe.event_deleted(
                    usage_id=event_id, calendar_id=calendar_id, event_id=event_id
                )
                return
        raise ResourceUsageNotFoundError(event_id)

    async def _read_listed_event(
        self, item: dict, calendar_id: str, now: datetime
    ) -> ResourceUsage | None:
        try:
            event = CalendarEvent.from_api(item)
        except ValueError as e:
            self._probe.event_skipped(
                calendar_id=calendar_id, event_id=item.get("id"), error=str(e)
            )
            return None

        if event.id is None or event.end is None or event.end <= now:
            return None

        domain_id = await self._domain_id_for(event.id, calendar_id)
        try:
            return self._translator.to_usage(event, calendar_id, UsageId(domain_id))
        except ReconciliationError as e:
            self._probe.event_skipped(
                calendar_id=calendar_id, event_id=event.id, error=str(e)
            )
            return None

    async def _to_usage(self, event: CalendarEvent, calendar_id: str) -> ResourceUsage:
        if event.id is None:
            raise ReconciliationError(f"Event in {calendar_id} has no id")

        domain_id = await self._domain_id_for(event.id, calendar_id)
        return self._translator.to_usage(event, calendar_id, UsageId(domain_id))

    async def _domain_id_for(self, event_id: str, calendar_id: str) -> str:
        domain_id, created = await self._id_mapper.get_or_create_domain_id(
            calendar_id, event_id
        )
        if created:
            self._probe.mapping_created(
                usage_id=domain_id, calendar_id=calendar_id, event_id=event_id
            )
        return domain_id

    async def _insert(self, usage: ResourceUsage, calendar_id: str) -> None:
        try:
            created = await self._client.insert_event(
                calendar_id, self._translator.to_event(usage)
            )
        except GoogleCalendarApiError as e:
            raise self._connection_error(calendar_id, e) from e

        if not created.id:
            raise ReconciliationError(
                f"Calendar {calendar_id} returned an event without id"
            )

        await self._id_mapper.save_mapping(
            usage.id.value,
            ExternalEventId(calendar_id=calendar_id, event_id=created.id),
        )
        self._probe.event_created(
            usage_id=usage.id.value, calendar_id=calendar_id, event_id=created.id
        )

    async def _get_event(self, calendar_id: str, event_id: str) -> CalendarEvent | None:
        try:
            return await self._client.get_event(calendar_id, event_id)
        except GoogleCalendarApiError as e:
            raise self._connection_error(calendar_id, e) from e

    async def _delete_event(self, calendar_id: str, event_id: str) -> None:
        try:
            await self._client.delete_event(calendar_id, event_id)
        except GoogleCalendarApiError as e:
            raise self._connection_error(calendar_id, e) from e

    def _connection_error(
        self, calendar_id: str, error: GoogleCalendarApiError
    ) -> RepositoryConnectionError:
        self._probe.calendar_unreachable(calendar_id=calendar_id, error=str(error))
        return RepositoryConnectionError(f"Calendar {calendar_id}: {error}")
