"""Repository protocols (ports) for the reservation context.

The repository is implemented by the calendar synchronization adapter and by
an in-memory double used in tests and local runs.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from reservation.domain.aggregates import ResourceUsage
from reservation.domain.value_objects import TimePeriod, UsageId
from shared_kernel.email_address import EmailAddress


@runtime_checkable
class IResourceUsageRepository(Protocol):
    """Repository for ResourceUsage aggregate persistence."""

    async def find_by_id(self, usage_id: UsageId) -> ResourceUsage | None:
        """Retrieve a reservation by id.

        Returns:
            The reservation, or None if not found

        Raises:
            RepositoryConnectionError: If the backing store is unreachable
        """
        ...

    async def find_future(self) -> list[ResourceUsage]:
        """List reservations whose end instant is strictly after now."""
        ...

    async def find_overlapping(self, time_period: TimePeriod) -> list[ResourceUsage]:
        """List future reservations whose period overlaps ``time_period``."""
        ...

    async def find_by_owner(self, owner_email: EmailAddress) -> list[ResourceUsage]:
        """List future reservations owned by ``owner_email``."""
        ...

    async def save(self, usage: ResourceUsage) -> None:
        """Create or update a reservation (upsert by id).

        Raises:
            ReconciliationError: If the reservation cannot be represented
            RepositoryConnectionError: If the backing store is unreachable
        """
        ...

    async def delete(self, usage_id: UsageId) -> None:
        """Delete a reservation.

        Raises:
            ResourceUsageNotFoundError: If the reservation does not exist
            RepositoryConnectionError: If the backing store is unreachable
        """
        ...
