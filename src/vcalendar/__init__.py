"""
Single-user virtual calendar.

Stores single and recurring events, rejects or skips conflicting insertions,
answers date/range/availability queries and copies events between calendars
that live in different timezones.
"""

from vcalendar.core.copy import CopyEngine, CopyResult, CopyStatus
from vcalendar.core.errors import (
    CalendarError,
    CalendarNotFoundError,
    ConflictingEventError,
    DuplicateCalendarError,
    EventNotFoundError,
    InvalidCalendarNameError,
    InvalidEventError,
    InvalidTimezoneError,
)
from vcalendar.core.timezones import TimezoneService
from vcalendar.models import (
    Calendar,
    CalendarRegistry,
    Event,
    EventProperty,
    EventVisibility,
    RecurringEvent,
    RecurringEventBuilder,
)

__version__ = "0.1.0"

__all__ = [
    "Calendar",
    "CalendarError",
    "CalendarNotFoundError",
    "CalendarRegistry",
    "ConflictingEventError",
    "CopyEngine",
    "CopyResult",
    "CopyStatus",
    "DuplicateCalendarError",
    "Event",
    "EventNotFoundError",
    "EventProperty",
    "EventVisibility",
    "InvalidCalendarNameError",
    "InvalidEventError",
    "InvalidTimezoneError",
    "RecurringEvent",
    "RecurringEventBuilder",
    "TimezoneService",
]
