"""Domain exceptions for the reservation context.

These are validation errors raised by value objects, the aggregate and the
resource factory. They are always returned to the immediate caller and never
retried.
"""

from __future__ import annotations

from datetime import datetime


class ResourceUsageError(ValueError):
    """Base class for reservation domain validation errors."""


class InvalidTimePeriodError(ResourceUsageError):
    """Raised when a time period does not satisfy ``start < end``.

    Also raised for naive datetimes and, by the application layer, for
    reservations starting in the past.
    """

    def __init__(self, start: datetime, end: datetime, reason: str | None = None):
        self.start = start
        self.end = end
        self.reason = reason or "end must be after start"
        super().__init__(
            f"Invalid time period {start.isoformat()} - {end.isoformat()}: {self.reason}"
        )


class NoResourceItemsError(ResourceUsageError):
    """Raised when a reservation is created without any resource."""

    def __init__(self) -> None:
        super().__init__("A reservation needs at least one resource")


class ResourceSpecError(ResourceUsageError):
    """Base class for device-spec notation errors (e.g. ``"0-2,5"``)."""


class EmptySpecificationError(ResourceSpecError):
    """Raised when a device spec contains no device numbers."""

    def __init__(self) -> None:
        super().__init__("Device specification is empty")


class InvalidNumberError(ResourceSpecError):
    """Raised when a device spec part is not a non-negative integer."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Invalid device number: {token!r}")


class InvalidFormatError(ResourceSpecError):
    """Raised when a range part has more than one dash."""

    def __init__(self, token: str):
        self.token = token
        super().__init__(f"Invalid device specification format: {token!r}")


class InvalidRangeError(ResourceSpecError):
    """Raised when a range is inverted (``start > end``)."""

    def __init__(self, start: int, end: int):
        self.start = start
        self.end = end
        super().__init__(f"Invalid device range: {start}-{end}")


class DeviceNotFoundError(ResourceSpecError):
    """Raised when a device number is not configured on the server."""

    def __init__(self, server: str, device_number: int):
        self.server = server
        self.device_number = device_number
        super().__init__(f"Device {device_number} does not exist on {server}")


class ForbiddenError(Exception):
    """Raised when an actor is not allowed to perform an action on a resource.

    Distinct from not-found so that "exists but not yours" is never confused
    with "does not exist".
    """

    def __init__(self, actor: str, action: str, resource: str):
        self.actor = actor
        self.action = action
        self.resource = resource
        super().__init__(f"User {actor} is not allowed to {action} {resource}")
