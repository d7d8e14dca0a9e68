"""In-memory identity link repository for local runs and tests."""

from __future__ import annotations

import copy

from identity.domain.aggregates import IdentityLink
from identity.domain.value_objects import ExternalSystem
from shared_kernel.email_address import EmailAddress


class InMemoryIdentityLinkRepository:
    def __init__(self, links: list[IdentityLink] | None = None):
        self._links: dict[str, IdentityLink] = {
            link.email.value: copy.deepcopy(link) for link in links or []
        }

    async def find_by_email(self, email: EmailAddress) -> IdentityLink | None:
        link = self._links.get(email.value)
        return copy.deepcopy(link) if link is not None else None

    async def find_by_external_user_id(
        self, system: ExternalSystem, user_id: str
    ) -> IdentityLink | None:
        for link in self._links.values():
            identity = link.identity_for(system)
            if identity is not None and identity.user_id == user_id:
                return copy.deepcopy(link)
        return None

    async def find_all(self) -> list[IdentityLink]:
        return [copy.deepcopy(link) for link in self._links.values()]

    async def save(self, link: IdentityLink) -> None:
        self._links[link.email.value] = copy.deepcopy(link)

    async def delete(self, email: EmailAddress) -> bool:
        return self._links.pop(email.value, None) is not None
