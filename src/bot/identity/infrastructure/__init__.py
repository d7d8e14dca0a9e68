"""Identity infrastructure adapters."""

from identity.infrastructure.google_calendar_access import (
    GoogleCalendarCollectionAccess,
)
from identity.infrastructure.in_memory_repository import InMemoryIdentityLinkRepository
from identity.infrastructure.json_file_repository import JsonFileIdentityLinkRepository

__all__ = [
    "GoogleCalendarCollectionAccess",
    "InMemoryIdentityLinkRepository",
    "JsonFileIdentityLinkRepository",
]
