"""Resource access application service.

Onboards a lab member: grants them access to every resource calendar and
links their chat account to their email, so that notifications can mention
them and calendar events they create are attributed to them.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Callable, Sequence

from identity.application.exceptions import (
    EmailAlreadyLinkedError,
    ExternalAccountAlreadyLinkedError,
    IdentityLinkNotFoundError,
)
from identity.application.observability import (
    DefaultResourceAccessServiceProbe,
    ResourceAccessServiceProbe,
)
from identity.domain.aggregates import IdentityLink
from identity.domain.value_objects import ExternalSystem
from identity.ports.repositories import IIdentityLinkRepository
from identity.ports.resource_access import IResourceCollectionAccess
from shared_kernel.email_address import EmailAddress


class ResourceAccessService:
    """Application service for access provisioning and identity links."""

    def __init__(
        self,
        identity_repository: IIdentityLinkRepository,
        collection_access: IResourceCollectionAccess,
        collection_ids: Sequence[str],
        probe: ResourceAccessServiceProbe | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize ResourceAccessService with dependencies.

        Args:
            identity_repository: Identity link persistence
            collection_access: Grants access to calendars
            collection_ids: Every calendar of the resource catalog
            probe: Optional domain probe for observability
            clock: Returns "now"; injectable for tests
        """
        self._identity_repository = identity_repository
        self._collection_access = collection_access
        self._collection_ids = list(collection_ids)
        self._probe = probe or DefaultResourceAccessServiceProbe()
        self._clock = clock or (lambda: datetime.now(UTC))

    async def grant_access(
        self, system: ExternalSystem, external_user_id: str, email: EmailAddress
    ) -> IdentityLink:
        """Grant calendar access to a member and link their external account.

        Access is granted before the link is saved, so a failed grant leaves
        no link behind and the command can simply be retried. Repeating a
        grant for the same account re-grants access and changes nothing else.

        Returns:
            The saved identity link

        Raises:
            EmailAlreadyLinkedError: If the email is linked to another
                account of the same system
            ExternalAccountAlreadyLinkedError: If the account is linked to
                another email
            ResourceAccessError: If a calendar rejected the grant
        """
        link = await self._identity_repository.find_by_email(email)

        holder = await self._identity_repository.find_by_external_user_id(
            system, external_user_id
        )
        if holder is not None and holder.email != email:
            self._probe.link_rejected(
                email=email.value, system=system.value, reason="account_linked_elsewhere"
            )
            raise ExternalAccountAlreadyLinkedError(
                system=system.value,
                user_id=external_user_id,
                linked_email=holder.email.value,
            )

        existing = link.identity_for(system) if link is not None else None
        if existing is not None and existing.user_id != external_user_id:
            self._probe.link_rejected(
                email=email.value, system=system.value, reason="email_linked_elsewhere"
            )
            raise EmailAlreadyLinkedError(email=email.value, system=system.value)

        await self._grant_all(email)

        if link is not None and existing is not None:
            self._probe.identity_already_linked(email=email.value, system=system.value)
            return link

        now = self._clock()
        if link is None:
            link = IdentityLink.create(email, now=now)
        link.link(system, external_user_id, now=now)
        await self._identity_repository.save(link)

        self._probe.identity_linked(
            email=email.value, system=system.value, user_id=external_user_id
        )
        return link

    async def unlink_identity(self, email: EmailAddress, system: ExternalSystem) -> IdentityLink:
        """Detach a member's external account. Calendar access is kept.

        Raises:
            IdentityLinkNotFoundError: If the email has no link
            ExternalSystemNotLinkedError: If the system is not linked
        """
        link = await self._identity_repository.find_by_email(email)
        if link is None:
            raise IdentityLinkNotFoundError(email.value)

        link.unlink(system, now=self._clock())
        await self._identity_repository.save(link)

        self._probe.identity_unlinked(email=email.value, system=system.value)
        return link

    async def get_link(self, email: EmailAddress) -> IdentityLink | None:
        return await self._identity_repository.find_by_email(email)

    async def _grant_all(self, email: EmailAddress) -> None:
        for collection_id in self._collection_ids:
            await self._collection_access.grant_access(collection_id, email)
        self._probe.access_granted(
            email=email.value, collection_count=len(self._collection_ids)
        )
