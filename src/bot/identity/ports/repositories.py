"""Repository protocols (ports) for the identity context."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from identity.domain.aggregates import IdentityLink
from identity.domain.value_objects import ExternalSystem
from shared_kernel.email_address import EmailAddress


@runtime_checkable
class IIdentityLinkRepository(Protocol):
    """Repository for IdentityLink aggregate persistence.

    All methods raise IdentityLinkRepositoryError when the store is unusable.
    """

    async def find_by_email(self, email: EmailAddress) -> IdentityLink | None:
        ...

    async def find_by_external_user_id(
        self, system: ExternalSystem, user_id: str
    ) -> IdentityLink | None:
        """Find the link holding a given external account."""
        ...

    async def find_all(self) -> list[IdentityLink]:
        ...

    async def save(self, link: IdentityLink) -> None:
        """Create or replace the link of an email."""
        ...

    async def delete(self, email: EmailAddress) -> bool:
        """Delete a link. Returns False if there was none.

        Administrative cleanup only; the grant flow never deletes.
        """
        ...
