"""Domain probes for reservation infrastructure."""

from reservation.infrastructure.observability.calendar_repository_probe import (
    CalendarRepositoryProbe,
    DefaultCalendarRepositoryProbe,
)
from reservation.infrastructure.observability.change_watcher_probe import (
    ChangeWatcherProbe,
    DefaultChangeWatcherProbe,
)

__all__ = [
    "CalendarRepositoryProbe",
    "ChangeWatcherProbe",
    "DefaultCalendarRepositoryProbe",
    "DefaultChangeWatcherProbe",
]
