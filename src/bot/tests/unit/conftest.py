"""Unit test fixtures shared by the bounded contexts."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import Callable, Sequence

import pytest

from infrastructure.resource_config import (
    DeviceConfig,
    LogDestination,
    ResourceConfig,
    RoomConfig,
    ServerConfig,
    SlackDestination,
)
from reservation.domain.aggregates import ResourceUsage
from reservation.domain.value_objects import Gpu, Resource, TimePeriod, UsageId
from shared_kernel.email_address import EmailAddress

NOW = datetime(2030, 1, 7, 9, 0, tzinfo=UTC)

THALYS_CALENDAR = "thalys@group.calendar.google.com"
ARIADNE_CALENDAR = "ariadne@group.calendar.google.com"
ROOM_A_CALENDAR = "room-a@group.calendar.google.com"
SLACK_WEBHOOK = "https://hooks.slack.com/services/T000/B000/secret"


@pytest.fixture
def now() -> datetime:
    """Fixed "now" used by every injectable clock."""
    return NOW


@pytest.fixture
def clock(now: datetime) -> Callable[[], datetime]:
    return lambda: now


@pytest.fixture
def resource_config() -> ResourceConfig:
    """Two GPU servers and one room, each with its own calendar."""
    return ResourceConfig(
        servers=(
            ServerConfig(
                name="Thalys",
                calendar_id=THALYS_CALENDAR,
                devices=tuple(
                    DeviceConfig(id=i, model="A100 80GB PCIe") for i in range(4)
                ),
                notifications=(
                    SlackDestination(webhook_url=SLACK_WEBHOOK, timezone="Asia/Tokyo"),
                ),
            ),
            ServerConfig(
                name="Ariadne",
                calendar_id=ARIADNE_CALENDAR,
                devices=(
                    DeviceConfig(id=0, model="RTX 6000 Ada"),
                    DeviceConfig(id=1, model="RTX 6000 Ada"),
                ),
                notifications=(LogDestination(),),
            ),
        ),
        rooms=(
            RoomConfig(
                name="Meeting Room A",
                calendar_id=ROOM_A_CALENDAR,
                notifications=(LogDestination(timezone="Asia/Tokyo"),),
            ),
        ),
    )


@pytest.fixture
def thalys_gpu() -> Callable[[int], Gpu]:
    def _gpu(device_number: int) -> Gpu:
        return Gpu(server="Thalys", device_number=device_number, model="A100 80GB PCIe")

    return _gpu


@pytest.fixture
def make_usage(now: datetime, thalys_gpu: Callable[[int], Gpu]):
    """Build a ResourceUsage relative to the fixed "now"."""

    def _make(
        owner: str = "alice@lab.example",
        start_in: timedelta = timedelta(hours=1),
        duration: timedelta = timedelta(hours=2),
        resources: Sequence[Resource] | None = None,
        notes: str | None = None,
        usage_id: str | None = None,
    ) -> ResourceUsage:
        start = now + start_in
        return ResourceUsage.reconstruct(
            id=UsageId(usage_id) if usage_id else UsageId.generate(),
            owner_email=EmailAddress(owner),
            time_period=TimePeriod(start=start, end=start + duration),
            resources=resources if resources is not None else [thalys_gpu(0)],
            notes=notes,
        )

    return _make
