"""ResourceUsage aggregate for the reservation context."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from reservation.domain.exceptions import NoResourceItemsError
from reservation.domain.value_objects import Resource, TimePeriod, UsageId
from shared_kernel.email_address import EmailAddress


@dataclass
class ResourceUsage:
    """Aggregate representing one reservation of lab resources.

    Business rules:
    - A reservation references at least one resource
    - The time period is always valid (enforced by TimePeriod)
    - Owner and resources are fixed after creation; only the time period
      and notes can change

    Equality is structural. The change notification service relies on it
    to decide whether a reservation was updated between two snapshots.
    """

    id: UsageId
    owner_email: EmailAddress
    time_period: TimePeriod
    resources: tuple[Resource, ...] = field(default_factory=tuple)
    notes: str | None = None

    def __post_init__(self) -> None:
        self.resources = tuple(self.resources)
        if not self.resources:
            raise NoResourceItemsError()

    @classmethod
    def create(
        cls,
        owner_email: EmailAddress,
        time_period: TimePeriod,
        resources: Sequence[Resource],
        notes: str | None = None,
    ) -> ResourceUsage:
        """Factory method for a brand new reservation.

        Generates a fresh UsageId.

        Raises:
            NoResourceItemsError: If resources is empty
        """
        return cls(
            id=UsageId.generate(),
            owner_email=owner_email,
            time_period=time_period,
            resources=tuple(resources),
            notes=notes,
        )

    @classmethod
    def reconstruct(
        cls,
        id: UsageId,
        owner_email: EmailAddress,
        time_period: TimePeriod,
        resources: Sequence[Resource],
        notes: str | None = None,
    ) -> ResourceUsage:
        """Rehydrate a reservation read back from a repository.

        Same validation as create(), with a caller-supplied id.

        Raises:
            NoResourceItemsError: If resources is empty
        """
        return cls(
            id=id,
            owner_email=owner_email,
            time_period=time_period,
            resources=tuple(resources),
            notes=notes,
        )

    def update_time_period(self, time_period: TimePeriod) -> None:
        """Move the reservation to a new window.

        Conflict checks are the caller's responsibility.
        """
        self.time_period = time_period

    def update_notes(self, notes: str | None) -> None:
        self.notes = notes

    def is_owned_by(self, email: EmailAddress) -> bool:
        return self.owner_email == email
