"""Human-readable rendering of reservations.

Used for conflict messages and notification bodies.
"""

from __future__ import annotations

from typing import Sequence
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from reservation.domain.value_objects import Gpu, Resource, Room, TimePeriod

_DATETIME_FORMAT = "%Y-%m-%d %H:%M"


def format_resource(resource: Resource) -> str:
    """Describe a single resource, e.g. ``"Thalys / A100 / GPU:0"``."""
    match resource:
        case Gpu(server=server, device_number=number, model=model):
            return f"{server} / {model} / GPU:{number}"
        case Room(name=name):
            return name


def format_resources(resources: Sequence[Resource]) -> str:
    """One resource per line."""
    return "\n".join(format_resource(r) for r in resources)


def format_time_period(period: TimePeriod, timezone: str | None = None) -> str:
    """Render a period in the given IANA timezone.

    Unknown or missing timezones fall back to the host's local time, labelled
    with its UTC offset.
    """
    tz = _load_timezone(timezone)
    if tz is None:
        start = period.start.astimezone()
        end = period.end.astimezone()
        label = start.strftime("%z")
    else:
        start = period.start.astimezone(tz)
        end = period.end.astimezone(tz)
        label = tz.key

    return (
        f"{start.strftime(_DATETIME_FORMAT)} - {end.strftime(_DATETIME_FORMAT)} ({label})"
    )


def _load_timezone(name: str | None) -> ZoneInfo | None:
    if not name:
        return None
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return None


def resource_label(resources: Sequence[Resource]) -> str:
    """Heading for a resource list: GPUs, Room or mixed."""
    has_gpu = any(isinstance(r, Gpu) for r in resources)
    has_room = any(isinstance(r, Room) for r in resources)
    if has_gpu and not has_room:
        return "Reserved GPUs"
    if has_room and not has_gpu:
        return "Reserved room"
    return "Reserved resources"
