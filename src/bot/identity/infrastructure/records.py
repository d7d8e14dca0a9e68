"""Serialized form of identity links.

Kept apart from the aggregate so the domain stays free of pydantic.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, TypeAdapter

from identity.domain.aggregates import IdentityLink
from identity.domain.value_objects import ExternalIdentity, ExternalSystem
from shared_kernel.email_address import EmailAddress


class ExternalIdentityRecord(BaseModel):
    system: ExternalSystem
    user_id: str
    linked_at: datetime


class IdentityLinkRecord(BaseModel):
    email: str
    external_identities: list[ExternalIdentityRecord] = []
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, link: IdentityLink) -> IdentityLinkRecord:
        return cls(
            email=link.email.value,
            external_identities=[
                ExternalIdentityRecord(
                    system=i.system, user_id=i.user_id, linked_at=i.linked_at
                )
                for i in link.external_identities
            ],
            created_at=link.created_at,
            updated_at=link.updated_at,
        )

    def to_domain(self) -> IdentityLink:
        return IdentityLink(
            email=EmailAddress(self.email),
            external_identities=[
                ExternalIdentity(
                    system=r.system, user_id=r.user_id, linked_at=r.linked_at
                )
                for r in self.external_identities
            ],
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


IdentityLinkFile = TypeAdapter(dict[str, IdentityLinkRecord])
