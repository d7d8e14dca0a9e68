"""Port-level exceptions for the reservation context.

Raised by repository and notifier implementations and handled by the
application layer.
"""


class RepositoryError(Exception):
    """Base class for reservation persistence failures."""


class RepositoryConnectionError(RepositoryError):
    """Raised when the backing store cannot be reached or rejects a call.

    Likely transient. The caller reports it upward; this layer does not retry.
    """


class ResourceUsageNotFoundError(RepositoryError):
    """Raised when a reservation does not exist.

    Not-found is a normal control-flow outcome, distinct from connection
    failures and from authorization failures.
    """

    def __init__(self, usage_id: str):
        self.usage_id = usage_id
        super().__init__(f"Reservation {usage_id} not found")


class ReconciliationError(RepositoryError):
    """Raised when a stored record cannot be mapped to or from the domain.

    Covers unparsable device specs, unknown devices or calendars, missing
    owner information and reservations whose resources span several
    calendars. These are data-integrity problems and are reported, except
    during bulk scans where the offending record is skipped.
    """


class NotificationError(Exception):
    """Base class for notification delivery failures."""


class NotificationDeliveryError(NotificationError):
    """Raised when one or more destinations failed to receive a notification.

    Attributes:
        failures: ``(destination, error message)`` pairs
    """

    def __init__(self, failures: list[tuple[str, str]]):
        self.failures = failures
        details = "; ".join(f"{dest}: {err}" for dest, err in failures)
        super().__init__(f"Notification delivery failed for {len(failures)} destination(s): {details}")
