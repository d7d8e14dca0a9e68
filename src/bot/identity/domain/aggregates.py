"""IdentityLink aggregate for the identity context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from identity.domain.exceptions import (
    ExternalSystemAlreadyLinkedError,
    ExternalSystemNotLinkedError,
)
from identity.domain.value_objects import ExternalIdentity, ExternalSystem
from shared_kernel.email_address import EmailAddress


@dataclass
class IdentityLink:
    """Links a lab member's email to their external platform accounts.

    Business rules:
    - Keyed by email; one link per lab member
    - At most one external identity per external system
    """

    email: EmailAddress
    external_identities: list[ExternalIdentity] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(cls, email: EmailAddress, now: datetime | None = None) -> IdentityLink:
        """Create a link without any external identity."""
        timestamp = now or datetime.now(UTC)
        return cls(email=email, created_at=timestamp, updated_at=timestamp)

    def link(
        self, system: ExternalSystem, user_id: str, now: datetime | None = None
    ) -> ExternalIdentity:
        """Attach an external account.

        Raises:
            ExternalSystemAlreadyLinkedError: If the system is already linked
        """
        existing = self.identity_for(system)
        if existing is not None:
            raise ExternalSystemAlreadyLinkedError(
                email=self.email.value,
                system=system.value,
                existing_user_id=existing.user_id,
            )

        timestamp = now or datetime.now(UTC)
        identity = ExternalIdentity(system=system, user_id=user_id, linked_at=timestamp)
        self.external_identities.append(identity)
        self.updated_at = timestamp
        return identity

    def unlink(self, system: ExternalSystem, now: datetime | None = None) -> None:
        """Detach the account of a system.

        Raises:
            ExternalSystemNotLinkedError: If the system is not linked
        """
        if not self.is_linked(system):
            raise ExternalSystemNotLinkedError(email=self.email.value, system=system.value)
        self.external_identities = [
            i for i in self.external_identities if i.system != system
        ]
        self.updated_at = now or datetime.now(UTC)

    def identity_for(self, system: ExternalSystem) -> ExternalIdentity | None:
        return next((i for i in self.external_identities if i.system == system), None)

    def is_linked(self, system: ExternalSystem) -> bool:
        return self.identity_for(system) is not None
