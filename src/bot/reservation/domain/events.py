"""Domain events for the reservation context.

Events describe a change observed on a reservation. They are produced by the
change notification service when two snapshots of future reservations are
diffed, and consumed by notifiers.
"""

from __future__ import annotations

from dataclasses import dataclass

from reservation.domain.aggregates import ResourceUsage


@dataclass(frozen=True)
class ResourceUsageCreated:
    """A reservation appeared since the previous snapshot."""

    usage: ResourceUsage


@dataclass(frozen=True)
class ResourceUsageUpdated:
    """A reservation present in both snapshots changed structurally.

    Carries the current state of the reservation.
    """

    usage: ResourceUsage


@dataclass(frozen=True)
class ResourceUsageDeleted:
    """A still-future reservation disappeared since the previous snapshot.

    Carries the last known state of the reservation.
    """

    usage: ResourceUsage


NotificationEvent = ResourceUsageCreated | ResourceUsageUpdated | ResourceUsageDeleted
