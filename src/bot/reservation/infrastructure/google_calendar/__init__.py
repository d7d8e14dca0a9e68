"""Google Calendar backed reservation repository."""

from reservation.infrastructure.google_calendar.id_mapper import (
    CalendarIdMapper,
    ExternalEventId,
)
from reservation.infrastructure.google_calendar.repository import (
    GoogleCalendarResourceUsageRepository,
)
from reservation.infrastructure.google_calendar.translator import EventTranslator

__all__ = [
    "CalendarIdMapper",
    "EventTranslator",
    "ExternalEventId",
    "GoogleCalendarResourceUsageRepository",
]
