"""Shared infrastructure dependencies.

Provides only resources shared by the bounded contexts (resource catalog,
Calendar API client). Does NOT import from bounded contexts to maintain DDD
boundaries.
"""

from functools import lru_cache

from infrastructure.google_calendar import GoogleCalendarClient
from infrastructure.resource_config import ResourceConfig, load_resource_config
from infrastructure.settings import get_google_calendar_settings, get_settings


@lru_cache
def get_resource_config() -> ResourceConfig:
    """Get the resource catalog (singleton).

    Raises:
        FileNotFoundError: If the configured TOML file is missing
        pydantic.ValidationError: If the catalog is inconsistent
    """
    return load_resource_config(get_settings().resource_config_path)


@lru_cache
def get_calendar_client() -> GoogleCalendarClient:
    """Get the application-scoped Calendar API client (singleton).

    The underlying httpx connection pool is shared across requests and the
    change watcher, and closed by the application lifespan.
    """
    return GoogleCalendarClient.from_settings(get_google_calendar_settings())
