"""Domain layer for the identity context."""

from identity.domain.aggregates import IdentityLink
from identity.domain.exceptions import (
    ExternalSystemAlreadyLinkedError,
    ExternalSystemNotLinkedError,
    IdentityLinkError,
)
from identity.domain.value_objects import ExternalIdentity, ExternalSystem

__all__ = [
    "ExternalIdentity",
    "ExternalSystem",
    "ExternalSystemAlreadyLinkedError",
    "ExternalSystemNotLinkedError",
    "IdentityLink",
    "IdentityLinkError",
]
