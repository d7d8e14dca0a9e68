"""Google Calendar API v3 access shared by the bounded contexts.

Contains only transport concerns. Mapping calendar events to reservations
and ACL entries to resource access lives in the contexts' adapters.
"""

from infrastructure.google_calendar.client import (
    CalendarEvent,
    GoogleCalendarApiError,
    GoogleCalendarClient,
    ICalendarClient,
)

__all__ = [
    "CalendarEvent",
    "GoogleCalendarApiError",
    "GoogleCalendarClient",
    "ICalendarClient",
]
