"""Application-level exceptions for the identity context."""

from __future__ import annotations


class EmailAlreadyLinkedError(Exception):
    """Raised when an email is already linked to another account of a system."""

    def __init__(self, email: str, system: str):
        self.email = email
        self.system = system
        super().__init__(f"{email} is already linked to another {system} account")


class ExternalAccountAlreadyLinkedError(Exception):
    """Raised when an external account already belongs to another email."""

    def __init__(self, system: str, user_id: str, linked_email: str):
        self.system = system
        self.user_id = user_id
        self.linked_email = linked_email
        super().__init__(
            f"{system} user {user_id} is already linked to {linked_email}"
        )


class IdentityLinkNotFoundError(Exception):
    """Raised when no identity link exists for an email."""

    def __init__(self, email: str):
        self.email = email
        super().__init__(f"No identity link for {email}")
