"""Pydantic models for identity link API requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from identity.domain.aggregates import IdentityLink
from identity.domain.value_objects import ExternalSystem


class GrantAccessRequest(BaseModel):
    """Request model for onboarding a lab member.

    Sent by the chat front end when a member registers their email.
    """

    system: ExternalSystem = Field(default=ExternalSystem.SLACK)
    external_user_id: str = Field(..., min_length=1, description="e.g. Slack user id")
    email: str = Field(..., min_length=3, description="Lab member's email")


class ExternalIdentityResponse(BaseModel):
    system: ExternalSystem
    user_id: str
    linked_at: datetime


class IdentityLinkResponse(BaseModel):
    """Response model for an identity link."""

    email: str
    external_identities: list[ExternalIdentityResponse]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, link: IdentityLink) -> IdentityLinkResponse:
        return cls(
            email=link.email.value,
            external_identities=[
                ExternalIdentityResponse(
                    system=i.system, user_id=i.user_id, linked_at=i.linked_at
                )
                for i in link.external_identities
            ],
            created_at=link.created_at,
            updated_at=link.updated_at,
        )
