"""Value objects for the reservation domain.

Value objects are immutable descriptors defined only by their attributes:
the reservation identifier, the reserved time window and the bookable
resources (individual GPUs and rooms).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from uuid import uuid4

from reservation.domain.exceptions import InvalidTimePeriodError


@dataclass(frozen=True)
class UsageId:
    """Identifier for a ResourceUsage aggregate.

    Generated internally at creation and never derived from an external
    calendar event id.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> UsageId:
        """Generate a new UsageId using a random UUID."""
        return cls(value=str(uuid4()))

    @classmethod
    def from_string(cls, value: str) -> UsageId:
        """Create UsageId from a stored or user-supplied value.

        Any non-empty string is accepted: ids coming back from the calendar
        side may be raw event ids that are reconciled by the repository.

        Raises:
            ValueError: If value is empty
        """
        if not value or not value.strip():
            raise ValueError("UsageId cannot be empty")
        return cls(value=value.strip())


@dataclass(frozen=True)
class TimePeriod:
    """A half-open reservation window ``[start, end)``.

    Both instants must be timezone-aware and ``start < end``.
    """

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.start.tzinfo is None or self.end.tzinfo is None:
            raise InvalidTimePeriodError(
                self.start, self.end, reason="timestamps must be timezone-aware"
            )
        if self.start >= self.end:
            raise InvalidTimePeriodError(self.start, self.end)

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def overlaps_with(self, other: TimePeriod) -> bool:
        """Check whether two windows share any instant.

        Touching windows (one ends exactly when the other starts) do not overlap.
        """
        return self.start < other.end and other.start < self.end

    def is_future(self, now: datetime) -> bool:
        """Whether the window has not fully elapsed at ``now``."""
        return self.end > now


@dataclass(frozen=True)
class Gpu:
    """A single GPU device on a lab server (e.g. ``Thalys`` device 0).

    The model is descriptive only; identity is server + device number.
    """

    server: str
    device_number: int
    model: str

    def conflicts_with(self, other: Resource) -> bool:
        """Check if both resources denote the same physical GPU."""
        return (
            isinstance(other, Gpu)
            and self.server == other.server
            and self.device_number == other.device_number
        )


@dataclass(frozen=True)
class Room:
    """A bookable room, identified by its name."""

    name: str

    def conflicts_with(self, other: Resource) -> bool:
        """Check if both resources denote the same room."""
        return isinstance(other, Room) and self.name == other.name


Resource = Gpu | Room
