"""Conflict detection between a candidate reservation and existing ones."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from reservation.domain.aggregates import ResourceUsage
from reservation.domain.formatting import format_resource
from reservation.domain.value_objects import Resource, TimePeriod, UsageId


class OverlappingUsageFinder(Protocol):
    """The slice of the reservation repository the checker needs."""

    async def find_overlapping(self, time_period: TimePeriod) -> list[ResourceUsage]:
        """Return reservations whose period overlaps ``time_period``."""
        ...


@dataclass(frozen=True)
class NoConflict:
    """No existing reservation clashes with the candidate."""


@dataclass(frozen=True)
class ConflictDetected:
    """The candidate clashes with an existing reservation.

    Attributes:
        resource_description: Human-readable description of the clashing resource
        conflicting_usage_id: Id of the reservation already holding it
    """

    resource_description: str
    conflicting_usage_id: UsageId


ConflictCheckResult = NoConflict | ConflictDetected


class ConflictChecker:
    """Detects double-booking of a resource.

    The check is not atomic with the subsequent save: two concurrent
    check-then-save sequences can both pass. With a single bot instance and
    human-paced reservations this window is accepted.
    """

    async def check_conflicts(
        self,
        repository: OverlappingUsageFinder,
        time_period: TimePeriod,
        resources: Sequence[Resource],
        exclude_id: UsageId | None = None,
    ) -> ConflictCheckResult:
        """Report the first clash of ``resources`` during ``time_period``.

        Iteration order is candidate resource, then overlapping reservation
        (repository order), then that reservation's resources.

        Args:
            repository: Source of overlapping reservations
            time_period: Candidate window
            resources: Candidate resources
            exclude_id: Reservation to ignore (the one being updated)

        Returns:
            NoConflict, or ConflictDetected for the first clash found

        Raises:
            RepositoryError: If overlapping reservations cannot be fetched
        """
        overlapping = await repository.find_overlapping(time_period)

        for candidate in resources:
            for existing in overlapping:
                if exclude_id is not None and existing.id == exclude_id:
                    continue
                for existing_resource in existing.resources:
                    if candidate.conflicts_with(existing_resource):
                        return ConflictDetected(
                            resource_description=format_resource(candidate),
                            conflicting_usage_id=existing.id,
                        )

        return NoConflict()
