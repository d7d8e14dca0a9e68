"""Dependency injection for the reservation bounded context."""

from datetime import timedelta
from functools import lru_cache
from typing import Annotated

from fastapi import Depends, Header, HTTPException, status

from infrastructure.dependencies import get_calendar_client, get_resource_config
from infrastructure.settings import (
    get_google_calendar_settings,
    get_settings,
    get_storage_settings,
)
from reservation.application.observability import (
    DefaultResourceUsageServiceProbe,
    ResourceUsageServiceProbe,
)
from reservation.application.services import ResourceUsageService
from reservation.infrastructure.google_calendar import (
    CalendarIdMapper,
    GoogleCalendarResourceUsageRepository,
)
from reservation.infrastructure.in_memory_repository import (
    InMemoryResourceUsageRepository,
)
from reservation.ports.repositories import IResourceUsageRepository
from shared_kernel.email_address import EmailAddress, InvalidEmailAddressError
from shared_kernel.observability_context import ObservationContext


@lru_cache
def get_calendar_id_mapper() -> CalendarIdMapper:
    """Get the reservation id <-> event id table (singleton)."""
    return CalendarIdMapper(get_storage_settings().calendar_mappings_file)


@lru_cache
def get_resource_usage_repository() -> IResourceUsageRepository:
    """Get the reservation repository for the configured backend (singleton).

    The repository is shared by request handlers and the change watcher so
    that both see the same id mappings.
    """
    if get_settings().repository_backend == "in_memory":
        return InMemoryResourceUsageRepository()

    calendar_settings = get_google_calendar_settings()
    return GoogleCalendarResourceUsageRepository(
        client=get_calendar_client(),
        config=get_resource_config(),
        id_mapper=get_calendar_id_mapper(),
        service_account_email=calendar_settings.service_account_email,
        lookback=timedelta(hours=calendar_settings.lookback_hours),
    )


def get_actor_email(
    x_actor_email: Annotated[str, Header(description="Email of the acting lab member")],
) -> EmailAddress:
    """Identify the lab member performing the request.

    The chat front end authenticates users and forwards their email.
    """
    try:
        return EmailAddress.from_string(x_actor_email)
    except InvalidEmailAddressError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from e


def get_resource_usage_service_probe(
    x_actor_email: Annotated[str | None, Header()] = None,
) -> ResourceUsageServiceProbe:
    """Get a probe bound to the acting lab member, when one is given."""
    probe = DefaultResourceUsageServiceProbe()
    if x_actor_email is None:
        return probe
    return probe.with_context(ObservationContext(actor_email=x_actor_email.strip()))


def get_resource_usage_service(
    repository: Annotated[
        IResourceUsageRepository, Depends(get_resource_usage_repository)
    ],
    probe: Annotated[
        ResourceUsageServiceProbe, Depends(get_resource_usage_service_probe)
    ],
) -> ResourceUsageService:
    """Get ResourceUsageService instance."""
    return ResourceUsageService(repository=repository, probe=probe)
