"""Ports for the identity context."""

from identity.ports.exceptions import (
    IdentityLinkRepositoryError,
    ResourceAccessError,
)
from identity.ports.repositories import IIdentityLinkRepository
from identity.ports.resource_access import IResourceCollectionAccess

__all__ = [
    "IIdentityLinkRepository",
    "IResourceCollectionAccess",
    "IdentityLinkRepositoryError",
    "ResourceAccessError",
]
