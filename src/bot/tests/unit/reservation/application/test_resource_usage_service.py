"""Unit tests for ResourceUsageService."""

from __future__ import annotations

from datetime import timedelta
from unittest.mock import AsyncMock, create_autospec

import pytest

from reservation.application.exceptions import ResourceConflictError
from reservation.application.observability import ResourceUsageServiceProbe
from reservation.application.services import ResourceUsageService
from reservation.domain.exceptions import (
    ForbiddenError,
    InvalidTimePeriodError,
    NoResourceItemsError,
)
from reservation.domain.value_objects import Room, TimePeriod, UsageId
from reservation.infrastructure.in_memory_repository import (
    InMemoryResourceUsageRepository,
)
from reservation.ports.exceptions import (
    RepositoryConnectionError,
    ResourceUsageNotFoundError,
)
from shared_kernel.email_address import EmailAddress

ALICE = EmailAddress("a@x.com")
BOB = EmailAddress("b@x.com")


@pytest.fixture
def repository(clock) -> InMemoryResourceUsageRepository:
    return InMemoryResourceUsageRepository(clock=clock)


@pytest.fixture
def mock_probe():
    return create_autospec(ResourceUsageServiceProbe, instance=True)


@pytest.fixture
def service(repository, mock_probe, clock) -> ResourceUsageService:
    return ResourceUsageService(repository=repository, probe=mock_probe, clock=clock)


def _window(now, start_hour: float, end_hour: float) -> TimePeriod:
    """Window on the fixed day, hours relative to midnight UTC."""
    midnight = now.replace(hour=0, minute=0)
    return TimePeriod(
        start=midnight + timedelta(hours=start_hour),
        end=midnight + timedelta(hours=end_hour),
    )


class TestCreateReservation:
    @pytest.mark.asyncio
    async def test_creates_and_saves(self, service, repository, mock_probe, now, thalys_gpu):
        usage = await service.create_reservation(
            ALICE, _window(now, 10, 12), [thalys_gpu(0)], notes="training"
        )

        stored = await repository.find_by_id(usage.id)
        assert stored == usage
        assert stored.notes == "training"
        mock_probe.reservation_created.assert_called_once_with(
            usage_id=usage.id.value, owner_email="a@x.com", resource_count=1
        )

    @pytest.mark.asyncio
    async def test_conflicting_reservation_is_rejected(
        self, service, repository, mock_probe, now, thalys_gpu
    ):
        """A holds GPU 0 10:00-12:00; B wants GPU 0 11:00-13:00."""
        reservation_a = await service.create_reservation(
            ALICE, _window(now, 10, 12), [thalys_gpu(0)]
        )

        with pytest.raises(ResourceConflictError) as exc_info:
            await service.create_reservation(BOB, _window(now, 11, 13), [thalys_gpu(0)])

        assert exc_info.value.conflicting_usage_id == reservation_a.id.value
        assert exc_info.value.resource_description == "Thalys / A100 80GB PCIe / GPU:0"
        assert len(await repository.find_future()) == 1
        mock_probe.reservation_conflict.assert_called_once()

    @pytest.mark.asyncio
    async def test_other_device_same_window_succeeds(
        self, service, repository, now, thalys_gpu
    ):
        await service.create_reservation(ALICE, _window(now, 10, 12), [thalys_gpu(0)])

        await service.create_reservation(BOB, _window(now, 11, 13), [thalys_gpu(1)])

        assert len(await repository.find_future()) == 2

    @pytest.mark.asyncio
    async def test_back_to_back_reservations_succeed(self, service, now, thalys_gpu):
        await service.create_reservation(ALICE, _window(now, 10, 12), [thalys_gpu(0)])
        await service.create_reservation(BOB, _window(now, 12, 14), [thalys_gpu(0)])

    @pytest.mark.asyncio
    async def test_start_in_the_past_is_rejected(self, service, now, thalys_gpu):
        with pytest.raises(InvalidTimePeriodError) as exc_info:
            await service.create_reservation(
                ALICE, _window(now, 8, 10), [thalys_gpu(0)]
            )

        assert exc_info.value.reason == "start is in the past"

    @pytest.mark.asyncio
    async def test_empty_resources_are_rejected(self, service, now):
        with pytest.raises(NoResourceItemsError):
            await service.create_reservation(ALICE, _window(now, 10, 12), [])

    @pytest.mark.asyncio
    async def test_repository_failure_propagates(self, mock_probe, clock, now, thalys_gpu):
        repository = AsyncMock()
        repository.find_overlapping.return_value = []
        repository.save.side_effect = RepositoryConnectionError("calendar down")
        service = ResourceUsageService(repository=repository, probe=mock_probe, clock=clock)

        with pytest.raises(RepositoryConnectionError):
            await service.create_reservation(ALICE, _window(now, 10, 12), [thalys_gpu(0)])

        mock_probe.reservation_created.assert_not_called()


class TestUpdateReservation:
    @pytest.mark.asyncio
    async def test_owner_can_update_period_and_notes(
        self, service, repository, now, thalys_gpu
    ):
        usage = await service.create_reservation(
            ALICE, _window(now, 10, 12), [thalys_gpu(0)]
        )
        new_period = _window(now, 14, 16)

        updated = await service.update_reservation(
            usage.id, ALICE, new_time_period=new_period, new_notes="moved"
        )

        assert updated.time_period == new_period
        stored = await repository.find_by_id(usage.id)
        assert stored.time_period == new_period
        assert stored.notes == "moved"

    @pytest.mark.asyncio
    async def test_own_reservation_does_not_conflict_with_itself(
        self, service, now, thalys_gpu
    ):
        usage = await service.create_reservation(
            ALICE, _window(now, 10, 12), [thalys_gpu(0)]
        )

        updated = await service.update_reservation(
            usage.id, ALICE, new_time_period=_window(now, 11, 13)
        )

        assert updated.time_period == _window(now, 11, 13)

    @pytest.mark.asyncio
    async def test_update_into_someone_elses_slot_conflicts(
        self, service, now, thalys_gpu
    ):
        blocking = await service.create_reservation(
            BOB, _window(now, 14, 16), [thalys_gpu(0)]
        )
        usage = await service.create_reservation(
            ALICE, _window(now, 10, 12), [thalys_gpu(0)]
        )

        with pytest.raises(ResourceConflictError) as exc_info:
            await service.update_reservation(
                usage.id, ALICE, new_time_period=_window(now, 15, 17)
            )

        assert exc_info.value.conflicting_usage_id == blocking.id.value

    @pytest.mark.asyncio
    async def test_other_user_is_forbidden(
        self, service, repository, mock_probe, now, thalys_gpu
    ):
        usage = await service.create_reservation(
            ALICE, _window(now, 10, 12), [thalys_gpu(0)]
        )

        with pytest.raises(ForbiddenError):
            await service.update_reservation(usage.id, BOB, new_notes="mine now")

        assert (await repository.find_by_id(usage.id)).notes is None
        mock_probe.authorization_denied.assert_called_once_with(
            usage_id=usage.id.value, actor_email="b@x.com", action="update"
        )

    @pytest.mark.asyncio
    async def test_authorization_precedes_conflict_check(
        self, service, mock_probe, now, thalys_gpu
    ):
        await service.create_reservation(ALICE, _window(now, 14, 18), [thalys_gpu(0)])
        usage = await service.create_reservation(
            ALICE, _window(now, 10, 12), [thalys_gpu(0)]
        )

        with pytest.raises(ForbiddenError):
            await service.update_reservation(
                usage.id, BOB, new_time_period=_window(now, 15, 17)
            )

        mock_probe.reservation_conflict.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_reservation(self, service):
        with pytest.raises(ResourceUsageNotFoundError):
            await service.update_reservation(UsageId("missing"), ALICE, new_notes="x")

    @pytest.mark.asyncio
    async def test_only_given_fields_change(self, service, now, thalys_gpu):
        usage = await service.create_reservation(
            ALICE, _window(now, 10, 12), [thalys_gpu(0)], notes="keep"
        )

        updated = await service.update_reservation(
            usage.id, ALICE, new_time_period=_window(now, 13, 14)
        )

        assert updated.notes == "keep"


class TestDeleteReservation:
    @pytest.mark.asyncio
    async def test_owner_can_delete(self, service, repository, mock_probe, now, thalys_gpu):
        usage = await service.create_reservation(
            ALICE, _window(now, 10, 12), [thalys_gpu(0)]
        )

        await service.delete_reservation(usage.id, ALICE)

        assert await repository.find_by_id(usage.id) is None
        mock_probe.reservation_deleted.assert_called_once_with(
            usage_id=usage.id.value, actor_email="a@x.com"
        )

    @pytest.mark.asyncio
    async def test_other_user_is_forbidden(self, service, repository, now, thalys_gpu):
        usage = await service.create_reservation(
            ALICE, _window(now, 10, 12), [thalys_gpu(0)]
        )

        with pytest.raises(ForbiddenError):
            await service.delete_reservation(usage.id, BOB)

        assert await repository.find_by_id(usage.id) is not None

    @pytest.mark.asyncio
    async def test_unknown_reservation(self, service, mock_probe):
        with pytest.raises(ResourceUsageNotFoundError) as exc_info:
            await service.delete_reservation(UsageId("missing"), ALICE)

        assert exc_info.value.usage_id == "missing"
        mock_probe.reservation_not_found.assert_called_once_with(usage_id="missing")


class TestQueries:
    @pytest.mark.asyncio
    async def test_get_reservation_returns_none_when_missing(self, service):
        assert await service.get_reservation(UsageId("missing")) is None

    @pytest.mark.asyncio
    async def test_list_owner_reservations_sorted_by_start(
        self, service, now, thalys_gpu
    ):
        later = await service.create_reservation(
            ALICE, _window(now, 15, 16), [thalys_gpu(0)]
        )
        earlier = await service.create_reservation(
            ALICE, _window(now, 10, 11), [thalys_gpu(1)]
        )
        await service.create_reservation(BOB, _window(now, 10, 11), [Room("Meeting Room A")])

        usages = await service.list_owner_reservations(ALICE)

        assert [u.id for u in usages] == [earlier.id, later.id]

    @pytest.mark.asyncio
    async def test_list_future_reservations(self, service, now, thalys_gpu):
        await service.create_reservation(ALICE, _window(now, 10, 11), [thalys_gpu(0)])
        await service.create_reservation(BOB, _window(now, 10, 11), [thalys_gpu(1)])

        assert len(await service.list_future_reservations()) == 2
