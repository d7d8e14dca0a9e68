"""Reservation application service.

Orchestrates reservation commands: conflict checks and owner authorization
before touching the repository.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Callable, Sequence

from reservation.application.exceptions import ResourceConflictError
from reservation.application.observability import (
    DefaultResourceUsageServiceProbe,
    ResourceUsageServiceProbe,
)
from reservation.domain.aggregates import ResourceUsage
from reservation.domain.exceptions import ForbiddenError, InvalidTimePeriodError
from reservation.domain.services import (
    ConflictChecker,
    ConflictDetected,
    NoConflict,
    ResourceUsageAuthorizationPolicy,
)
from reservation.domain.value_objects import Resource, TimePeriod, UsageId
from reservation.ports.exceptions import ResourceUsageNotFoundError
from reservation.ports.repositories import IResourceUsageRepository
from shared_kernel.email_address import EmailAddress


class ResourceUsageService:
    """Application service for reservation management.

    Check-then-save is not atomic: a reservation saved by another caller
    between the conflict check and the save is not detected.
    """

    def __init__(
        self,
        repository: IResourceUsageRepository,
        conflict_checker: ConflictChecker | None = None,
        authorization_policy: ResourceUsageAuthorizationPolicy | None = None,
        probe: ResourceUsageServiceProbe | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize ResourceUsageService with dependencies.

        Args:
            repository: Repository for reservation persistence
            conflict_checker: Detects double-booking
            authorization_policy: Owner-only mutation rule
            probe: Optional domain probe for observability
            clock: Returns "now"; injectable for tests
        """
        self._repository = repository
        self._conflict_checker = conflict_checker or ConflictChecker()
        self._policy = authorization_policy or ResourceUsageAuthorizationPolicy()
        self._probe = probe or DefaultResourceUsageServiceProbe()
        self._clock = clock or (lambda: datetime.now(UTC))

    async def create_reservation(
        self,
        owner_email: EmailAddress,
        time_period: TimePeriod,
        resources: Sequence[Resource],
        notes: str | None = None,
    ) -> ResourceUsage:
        """Reserve resources for a window.

        Returns:
            The created reservation

        Raises:
            InvalidTimePeriodError: If the window starts in the past
            NoResourceItemsError: If resources is empty
            ResourceConflictError: If a resource is already reserved
        """
        if time_period.start < self._clock():
            raise InvalidTimePeriodError(
                time_period.start, time_period.end, reason="start is in the past"
            )

        usage = ResourceUsage.create(
            owner_email=owner_email,
            time_period=time_period,
            resources=resources,
            notes=notes,
        )

        await self._ensure_no_conflict(time_period, usage.resources)
        await self._repository.save(usage)

        self._probe.reservation_created(
            usage_id=usage.id.value,
            owner_email=owner_email.value,
            resource_count=len(usage.resources),
        )
        return usage

    async def update_reservation(
        self,
        usage_id: UsageId,
        actor_email: EmailAddress,
        new_time_period: TimePeriod | None = None,
        new_notes: str | None = None,
    ) -> ResourceUsage:
        """Change the window and/or notes of a reservation.

        Only fields that are given are changed.

        Raises:
            ResourceUsageNotFoundError: If the reservation does not exist
            ForbiddenError: If the actor is not the owner
            ResourceConflictError: If the new window clashes
        """
        usage = await self._get_existing(usage_id)
        self._authorize(actor_email, usage, "update")

        if new_time_period is not None:
            await self._ensure_no_conflict(
                new_time_period, usage.resources, exclude_id=usage.id
            )
            usage.update_time_period(new_time_period)

        if new_notes is not None:
            usage.update_notes(new_notes)

        await self._repository.save(usage)

        self._probe.reservation_updated(
            usage_id=usage.id.value, actor_email=actor_email.value
        )
        return usage

    async def delete_reservation(
        self, usage_id: UsageId, actor_email: EmailAddress
    ) -> None:
        """Cancel a reservation.

        Raises:
            ResourceUsageNotFoundError: If the reservation does not exist
            ForbiddenError: If the actor is not the owner
        """
        usage = await self._get_existing(usage_id)
        self._authorize(actor_email, usage, "delete")

        await self._repository.delete(usage_id)

        self._probe.reservation_deleted(
            usage_id=usage.id.value, actor_email=actor_email.value
        )

    async def get_reservation(self, usage_id: UsageId) -> ResourceUsage | None:
        """Get a reservation by id, or None if it does not exist."""
        usage = await self._repository.find_by_id(usage_id)
        if usage is None:
            self._probe.reservation_not_found(usage_id=usage_id.value)
        return usage

    async def list_owner_reservations(
        self, owner_email: EmailAddress
    ) -> list[ResourceUsage]:
        """List future reservations of one lab member, earliest first."""
        usages = await self._repository.find_by_owner(owner_email)
        return sorted(usages, key=lambda u: u.time_period.start)

    async def list_future_reservations(self) -> list[ResourceUsage]:
        """List every future or ongoing reservation, earliest first."""
        usages = await self._repository.find_future()
        return sorted(usages, key=lambda u: u.time_period.start)

    async def _get_existing(self, usage_id: UsageId) -> ResourceUsage:
        usage = await self._repository.find_by_id(usage_id)
        if usage is None:
            self._probe.reservation_not_found(usage_id=usage_id.value)
            raise ResourceUsageNotFoundError(usage_id.value)
        return usage

    def _authorize(
        self, actor_email: EmailAddress, usage: ResourceUsage, action: str
    ) -> None:
        try:
            if action == "update":
                self._policy.authorize_update(actor_email, usage)
            else:
                self._policy.authorize_delete(actor_email, usage)
        except ForbiddenError:
            self._probe.authorization_denied(
                usage_id=usage.id.value, actor_email=actor_email.value, action=action
            )
            raise

    async def _ensure_no_conflict(
        self,
        time_period: TimePeriod,
        resources: Sequence[Resource],
        exclude_id: UsageId | None = None,
    ) -> None:
        result = await self._conflict_checker.check_conflicts(
            self._repository, time_period, resources, exclude_id=exclude_id
        )
        match result:
            case NoConflict():
                return
            case ConflictDetected(
                resource_description=description, conflicting_usage_id=conflicting_id
            ):
                self._probe.reservation_conflict(
                    resource_description=description,
                    conflicting_usage_id=conflicting_id.value,
                )
                raise ResourceConflictError(
                    resource_description=description,
                    conflicting_usage_id=conflicting_id.value,
                )
