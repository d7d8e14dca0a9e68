"""Application-level exceptions for the reservation context."""

from __future__ import annotations


class ResourceConflictError(Exception):
    """Raised when a reservation would double-book a resource.

    Carries enough context to render a user-facing message.

    Attributes:
        resource_description: The clashing resource, e.g. "Thalys / A100 / GPU:0"
        conflicting_usage_id: Id of the reservation already holding it
    """

    def __init__(self, resource_description: str, conflicting_usage_id: str):
        self.resource_description = resource_description
        self.conflicting_usage_id = conflicting_usage_id
        super().__init__(
            f"{resource_description} is already reserved by reservation "
            f"{conflicting_usage_id}"
        )
