# Utility functions for the virtual calendar
# ID generation, date/time parsing, calendar-name validation, recurrence expansion

import uuid
from datetime import date, datetime, time, timedelta
from typing import Any, Iterable, Iterator, Optional, Union

from dateutil import parser as date_parser
from dateutil.rrule import DAILY, rrule, weekday

from vcalendar.config import MAX_RECURRENCE_OCCURRENCES
from vcalendar.core.errors import (
    InvalidCalendarNameError,
    InvalidEventError,
    ValidationError,
)


# ============================================================================
# ID GENERATION
# ============================================================================


def generate_series_id() -> str:
    """Generate an identifier shared by every occurrence of a recurring series."""
    return uuid.uuid4().hex


# ============================================================================
# DATETIME HANDLING
# ============================================================================

DATE_FORMAT = "%Y-%m-%d"
TIME_FORMAT = "%H:%M"
DATETIME_FORMAT = "%Y-%m-%dT%H:%M"


def parse_datetime(value: str) -> datetime:
    """
    Parse a local wall-clock date-time string.

    Supports:
    - 2023-05-10T10:00
    - 2023-05-10T10:00:30

    Offsets are rejected: every calendar stores naive wall-clock times
    expressed in its own timezone.
    """
    if not isinstance(value, str) or "T" not in value:
        raise ValidationError(f"Invalid date-time: {value!r}", field="dateTime")
    try:
        parsed = date_parser.isoparse(value.strip())
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Invalid date-time: {value!r}", field="dateTime") from e
    if parsed.tzinfo is not None:
        raise ValidationError(
            f"Date-time must not carry a UTC offset: {value!r}", field="dateTime"
        )
    return parsed


def parse_date(value: str) -> date:
    """Parse a date string (YYYY-MM-DD)."""
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except (AttributeError, ValueError) as e:
        raise ValidationError(f"Invalid date: {value!r}", field="date") from e


def parse_time(value: str) -> time:
    """Parse a time-of-day string (HH:MM or HH:MM:SS)."""
    if isinstance(value, str):
        for fmt in (TIME_FORMAT, "%H:%M:%S"):
            try:
                return datetime.strptime(value.strip(), fmt).time()
            except ValueError:
                continue
    raise ValidationError(f"Invalid time: {value!r}", field="time")


def format_date(value: Union[date, datetime]) -> str:
    return value.strftime(DATE_FORMAT)


def format_time(value: Union[time, datetime]) -> str:
    return value.strftime(TIME_FORMAT)


def format_datetime(value: datetime) -> str:
    return value.strftime(DATETIME_FORMAT)


def start_of_day(day: date) -> datetime:
    """Local midnight at the start of ``day``."""
    return datetime.combine(day, time.min)


def next_day_start(day: date) -> datetime:
    """Local midnight at the end of ``day`` (start of the following day)."""
    return start_of_day(day) + timedelta(days=1)


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every date from ``start`` to ``end`` inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


# ============================================================================
# WEEKDAYS
# ============================================================================

# Single-letter codes used by the command grammar (R = Thursday, U = Sunday)
WEEKDAY_CODES = {"M": 0, "T": 1, "W": 2, "R": 3, "F": 4, "S": 5, "U": 6}


def _weekday_index(item: Any) -> int:
    if isinstance(item, weekday):
        return item.weekday
    if isinstance(item, str) and item.upper() in WEEKDAY_CODES:
        return WEEKDAY_CODES[item.upper()]
    if isinstance(item, int) and not isinstance(item, bool) and 0 <= item <= 6:
        return item
    raise InvalidEventError(f"Invalid weekday: {item!r}", field="weekdays")


def parse_weekdays(spec: Union[str, Iterable[Any]]) -> frozenset[int]:
    """
    Normalize a weekday specification into a set of ints (0=Monday).

    Accepts a letter string such as "MWF", or an iterable of ints,
    letters, or ``dateutil.rrule`` weekday constants (MO, TU, ...).
    """
    if spec is None:
        raise InvalidEventError("Repeat days cannot be empty", field="weekdays")
    if isinstance(spec, str):
        items: Iterable[Any] = [c for c in spec if not c.isspace() and c != ","]
    else:
        items = spec

    days = frozenset(_weekday_index(item) for item in items)
    if not days:
        raise InvalidEventError("Repeat days cannot be empty", field="weekdays")
    return days


# ============================================================================
# CALENDAR NAMES
# ============================================================================


def normalize_calendar_name(name: Any) -> str:
    """
    Trim a calendar name and strip one pair of surrounding quotes.

    The remaining name must be non-empty and consist only of letters,
    digits and underscores.
    """
    if not isinstance(name, str):
        raise InvalidCalendarNameError(name, "Calendar name cannot be null")

    cleaned = name.strip()
    for quote in ('"', "'"):
        if len(cleaned) >= 2 and cleaned.startswith(quote) and cleaned.endswith(quote):
            cleaned = cleaned[1:-1]
            break

    if not cleaned:
        raise InvalidCalendarNameError(name, "Calendar name cannot be empty")
    if not all(ch.isalnum() or ch == "_" for ch in cleaned):
        raise InvalidCalendarNameError(name)
    return cleaned


# ============================================================================
# RECURRENCE HANDLING
# ============================================================================


def expand_weekly_recurrence(
    first_start: datetime,
    weekdays: Iterable[int],
    count: Optional[int] = None,
    until: Optional[date] = None,
    max_instances: int = MAX_RECURRENCE_OCCURRENCES,
) -> list[datetime]:
    """
    Expand a weekday pattern into occurrence start times.

    Walks forward day by day from ``first_start`` and keeps every day whose
    weekday is in ``weekdays``, until ``count`` occurrences were produced or
    the day passes the inclusive ``until`` date.

    Args:
        first_start: Date and time-of-day of the first candidate occurrence
        weekdays: Weekday indexes (0=Monday)
        count: Number of occurrences to produce
        until: Last date (inclusive) an occurrence may fall on
        max_instances: Upper bound on the size of the expansion

    Returns:
        Ordered list of occurrence start datetimes
    """
    if (count is None) == (until is None):
        raise InvalidEventError("Exactly one of occurrence count or until date is required")
    if count is not None and count > max_instances:
        raise InvalidEventError(
            f"Recurring event cannot exceed {max_instances} occurrences", field="occurrences"
        )

    rule = rrule(
        DAILY,
        dtstart=first_start,
        byweekday=[weekday(day) for day in sorted(weekdays)],
        count=count,
        until=datetime.combine(until, time.max) if until is not None else None,
    )

    instances = []
    for dt in rule:
        instances.append(dt)
        if len(instances) > max_instances:
            raise InvalidEventError(
                f"Recurring event cannot exceed {max_instances} occurrences", field="until"
            )
    return instances
