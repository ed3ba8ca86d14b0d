"""Calendar models: events, recurring series, calendars and the registry."""

from .calendar import Calendar
from .registry import CalendarRegistry
from .schema import (
    Event,
    EventProperty,
    EventVisibility,
    RecurringEvent,
    RecurringEventBuilder,
)

__all__ = [
    "Calendar",
    "CalendarRegistry",
    "Event",
    "EventProperty",
    "EventVisibility",
    "RecurringEvent",
    "RecurringEventBuilder",
]
