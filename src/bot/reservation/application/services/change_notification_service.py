"""Change notification service.

Detects reservation changes made anywhere (bot commands, the calendar UI,
other clients) by polling the repository and diffing consecutive snapshots of
future reservations.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Callable

from reservation.application.observability import (
    ChangeNotificationProbe,
    DefaultChangeNotificationProbe,
)
from reservation.domain.aggregates import ResourceUsage
from reservation.domain.events import (
    NotificationEvent,
    ResourceUsageCreated,
    ResourceUsageDeleted,
    ResourceUsageUpdated,
)
from reservation.ports.notifier import INotifier
from reservation.ports.repositories import IResourceUsageRepository

Snapshot = dict[str, ResourceUsage]


@dataclass
class PollResult:
    """Outcome of one poll cycle.

    Attributes:
        created: Reservations reported as created
        updated: Reservations reported as updated
        deleted: Reservations reported as deleted
        failures: ``(event, error message)`` for events the notifier rejected
    """

    created: list[ResourceUsage] = field(default_factory=list)
    updated: list[ResourceUsage] = field(default_factory=list)
    deleted: list[ResourceUsage] = field(default_factory=list)
    failures: list[tuple[NotificationEvent, str]] = field(default_factory=list)

    @property
    def event_count(self) -> int:
        return len(self.created) + len(self.updated) + len(self.deleted)


class ChangeNotificationService:
    """Diffs snapshots of future reservations and notifies on changes.

    Lifecycle:
    1. Initializing: create() stores the current future reservations as the
       previous snapshot without emitting anything
    2. Polling: each poll_once() diffs a fresh snapshot against the previous
       one and swaps it in

    The previous snapshot is guarded by a single lock held for the whole
    diff-and-swap, so concurrent polls are serialized. Polls are not
    serialized against saves and deletes: a change made between a poll's
    fetch and its diff is reported one cycle late.
    """

    def __init__(
        self,
        repository: IResourceUsageRepository,
        notifier: INotifier,
        probe: ChangeNotificationProbe | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Build an uninitialized service. Prefer create().

        Args:
            repository: Source of future reservations
            notifier: Receives the detected events
            probe: Optional domain probe for observability
            clock: Returns "now"; injectable for tests
        """
        self._repository = repository
        self._notifier = notifier
        self._probe = probe or DefaultChangeNotificationProbe()
        self._clock = clock or (lambda: datetime.now(UTC))
        self._previous_state: Snapshot = {}
        self._lock = asyncio.Lock()

    @classmethod
    async def create(
        cls,
        repository: IResourceUsageRepository,
        notifier: INotifier,
        probe: ChangeNotificationProbe | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> ChangeNotificationService:
        """Create the service and take the initial snapshot.

        Raises:
            RepositoryError: If the initial snapshot cannot be fetched
        """
        service = cls(repository, notifier, probe=probe, clock=clock)
        await service.initialize()
        return service

    async def initialize(self) -> None:
        """Store the current future reservations as the baseline snapshot."""
        current = await self._fetch_snapshot()
        async with self._lock:
            self._previous_state = current
        self._probe.snapshot_initialized(usage_count=len(current))

    async def poll_once(self) -> PollResult:
        """Run one fetch-diff-notify-swap cycle.

        Returns:
            What was detected and which deliveries failed

        Raises:
            RepositoryError: If the snapshot cannot be fetched. The previous
                snapshot is left untouched so the next cycle starts over.
        """
        try:
            current = await self._fetch_snapshot()
        except Exception as e:
            self._probe.poll_failed(error=str(e))
            raise

        async with self._lock:
            result = self._diff(self._previous_state, current, now=self._clock())
            self._probe.changes_detected(
                created=len(result.created),
                updated=len(result.updated),
                deleted=len(result.deleted),
            )

            for event in self._events_of(result):
                await self._deliver(event, result)

            self._previous_state = current

        return result

    def snapshot(self) -> Snapshot:
        """Copy of the previous snapshot, keyed by usage id."""
        return dict(self._previous_state)

    async def _fetch_snapshot(self) -> Snapshot:
        usages = await self._repository.find_future()
        return {usage.id.value: usage for usage in usages}

    def _diff(self, previous: Snapshot, current: Snapshot, now: datetime) -> PollResult:
        result = PollResult()

        for usage_id, usage in current.items():
            before = previous.get(usage_id)
            if before is None:
                result.created.append(usage)
            elif before != usage:
                result.updated.append(usage)

        for usage_id, usage in previous.items():
            if usage_id in current:
                continue
            # Left the future window because it ended, not because it was cancelled.
            if not usage.time_period.is_future(now):
                self._probe.elapsed_usage_dropped(usage_id=usage_id)
                continue
            result.deleted.append(usage)

        return result

    @staticmethod
    def _events_of(result: PollResult) -> list[NotificationEvent]:
        events: list[NotificationEvent] = []
        events.extend(ResourceUsageCreated(usage=u) for u in result.created)
        events.extend(ResourceUsageUpdated(usage=u) for u in result.updated)
        events.extend(ResourceUsageDeleted(usage=u) for u in result.deleted)
        return events

    async def _deliver(self, event: NotificationEvent, result: PollResult) -> None:
        event_type = type(event).__name__
        usage_id = event.usage.id.value
        try:
            await self._notifier.notify(event)
        except Exception as e:
            result.failures.append((event, str(e)))
            self._probe.notification_failed(
                event_type=event_type, usage_id=usage_id, error=str(e)
            )
            return
        self._probe.notification_sent(event_type=event_type, usage_id=usage_id)
