"""Domain exceptions for the identity context."""

from __future__ import annotations


class IdentityLinkError(Exception):
    """Base class for identity link rule violations."""


class ExternalSystemAlreadyLinkedError(IdentityLinkError):
    """Raised when linking a second identity of the same external system.

    A lab member has at most one account per external system.
    """

    def __init__(self, email: str, system: str, existing_user_id: str):
        self.email = email
        self.system = system
        self.existing_user_id = existing_user_id
        super().__init__(
            f"{email} is already linked to {system} user {existing_user_id}"
        )


class ExternalSystemNotLinkedError(IdentityLinkError):
    """Raised when unlinking a system the member is not linked to."""

    def __init__(self, email: str, system: str):
        self.email = email
        self.system = system
        super().__init__(f"{email} is not linked to {system}")
