"""In-memory reservation repository.

Used for local runs without calendar credentials and as the repository
double in tests.
"""

from __future__ import annotations

import copy
from datetime import UTC, datetime
from typing import Callable

from reservation.domain.aggregates import ResourceUsage
from reservation.domain.value_objects import TimePeriod, UsageId
from reservation.ports.exceptions import ResourceUsageNotFoundError
from shared_kernel.email_address import EmailAddress


class InMemoryResourceUsageRepository:
    """IResourceUsageRepository keeping aggregates in a dict.

    Aggregates are copied on the way in and out so callers cannot mutate
    stored state without calling save().
    """

    def __init__(self, clock: Callable[[], datetime] | None = None):
        self._usages: dict[str, ResourceUsage] = {}
        self._clock = clock or (lambda: datetime.now(UTC))

    async def find_by_id(self, usage_id: UsageId) -> ResourceUsage | None:
        usage = self._usages.get(usage_id.value)
        return copy.deepcopy(usage) if usage is not None else None

    async def find_future(self) -> list[ResourceUsage]:
        now = self._clock()
        return [
            copy.deepcopy(usage)
            for usage in self._usages.values()
            if usage.time_period.is_future(now)
        ]

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
        self._usages[usage.id.value] = copy.deepcopy(usage)

    async def delete(self, usage_id: UsageId) -> None:
        if self._usages.pop(usage_id.value, None) is None:
            raise ResourceUsageNotFoundError(usage_id.value)
