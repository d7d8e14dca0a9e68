"""Dependency injection for the identity bounded context."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from identity.application.services import ResourceAccessService
from identity.infrastructure.google_calendar_access import (
    GoogleCalendarCollectionAccess,
    NoopCollectionAccess,
)
from identity.infrastructure.in_memory_repository import InMemoryIdentityLinkRepository
from identity.infrastructure.json_file_repository import JsonFileIdentityLinkRepository
from identity.ports.repositories import IIdentityLinkRepository
from identity.ports.resource_access import IResourceCollectionAccess
from infrastructure.dependencies import get_calendar_client, get_resource_config
from infrastructure.resource_config import ResourceConfig
from infrastructure.settings import get_settings, get_storage_settings


@lru_cache
def get_identity_link_repository() -> IIdentityLinkRepository:
    """Get the identity link repository (singleton).

    Shared with the notification router, which reads links to mention
    owners.
    """
    if get_settings().repository_backend == "in_memory":
        return InMemoryIdentityLinkRepository()
    return JsonFileIdentityLinkRepository(get_storage_settings().identity_links_file)


@lru_cache
def get_collection_access() -> IResourceCollectionAccess:
    """Get the calendar access provisioner (singleton)."""
    if get_settings().repository_backend == "in_memory":
        return NoopCollectionAccess()
    return GoogleCalendarCollectionAccess(get_calendar_client())


def get_resource_access_service(
    repository: Annotated[
        IIdentityLinkRepository, Depends(get_identity_link_repository)
    ],
    collection_access: Annotated[
        IResourceCollectionAccess, Depends(get_collection_access)
    ],
    config: Annotated[ResourceConfig, Depends(get_resource_config)],
) -> ResourceAccessService:
    """Get ResourceAccessService instance granting every configured calendar."""
    return ResourceAccessService(
        identity_repository=repository,
        collection_access=collection_access,
        collection_ids=config.calendar_ids,
    )
