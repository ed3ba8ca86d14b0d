# Serializers for the virtual calendar
# Converts models to JSON-friendly dicts and CSV rows for export

import csv
import io
import logging
from pathlib import Path
from typing import Any, Iterable, Optional, Union

from vcalendar.config import CSV_HEADER, EXPORT_DIR
from vcalendar.core.utils import format_date, format_datetime, format_time
from vcalendar.models.calendar import Calendar
from vcalendar.models.schema import Event, RecurringEvent

logger = logging.getLogger(__name__)


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================


def _bool_text(value: bool) -> str:
    return "true" if value else "false"


def _clean_dict(d: dict[str, Any], exclude_none: bool = True) -> dict[str, Any]:
    """Remove None values."""
    return {key: value for key, value in d.items() if not (exclude_none and value is None)}


# ============================================================================
# DICT SERIALIZERS
# ============================================================================


def serialize_event(event: Event) -> dict[str, Any]:
    """
    Serialize an Event.

    Response format:
    {
        "subject": "Team Meeting",
        "start": "2023-05-10T10:00",
        "end": "2023-05-10T11:00",
        "allDay": false,
        "visibility": "public",
        "description": "...",   # optional
        "location": "...",      # optional
        "seriesId": "..."       # optional
    }
    All-day events carry "date" instead of "start"/"end".
    """
    result: dict[str, Any] = {
        "subject": event.subject,
        "allDay": event.all_day,
        "visibility": event.visibility.value,
        "description": event.description,
        "location": event.location,
        "seriesId": event.series_id,
    }
    if event.all_day:
        result["date"] = format_date(event.event_date)
    else:
        result["start"] = format_datetime(event.start)
        result["end"] = format_datetime(event.end)
    return _clean_dict(result)


def serialize_recurring_event(recurring_event: RecurringEvent) -> dict[str, Any]:
    result: dict[str, Any] = {
        "seriesId": recurring_event.series_id,
        "subject": recurring_event.subject,
        "startDate": format_date(recurring_event.start_date),
        "allDay": recurring_event.all_day,
        "weekdays": sorted(recurring_event.weekdays),
        "occurrences": recurring_event.occurrences,
        "until": format_date(recurring_event.until) if recurring_event.until else None,
        "visibility": recurring_event.visibility.value,
        "description": recurring_event.description,
        "location": recurring_event.location,
    }
    if not recurring_event.all_day:
        result["startTime"] = format_time(recurring_event.start_time)
        result["endTime"] = format_time(recurring_event.end_time)
    return _clean_dict(result)


def serialize_calendar(calendar: Calendar) -> dict[str, Any]:
    """Serialize a calendar with its events (in store order) and series definitions."""
    return {
        "name": calendar.name,
        "timezone": calendar.timezone,
        "events": [serialize_event(event) for event, _ in calendar.export_entries()],
        "recurringEvents": [serialize_recurring_event(r) for r in calendar.recurring_events],
    }


# ============================================================================
# CSV EXPORT
# ============================================================================


def event_to_csv_row(event: Event) -> list[str]:
    """
    One CSV row matching CSV_HEADER.

    All-day rows repeat the date as the end date and leave both time
    columns empty.
    """
    if event.all_day:
        start_date = end_date = format_date(event.event_date)
        start_time = end_time = ""
    else:
        start_date, start_time = format_date(event.start), format_time(event.start)
        end_date, end_time = format_date(event.end), format_time(event.end)

    return [
        event.subject,
        start_date,
        start_time,
        end_date,
        end_time,
        _bool_text(event.all_day),
        event.description or "",
        event.location or "",
        _bool_text(event.is_public),
    ]


def format_events_csv(events: Iterable[Event]) -> str:
    """
    Render events as CSV text with a header row.

    Fields holding a comma, quote or newline are wrapped in double quotes
    with inner quotes doubled.
    """
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(CSV_HEADER)
    for event in events:
        writer.writerow(event_to_csv_row(event))
    return buffer.getvalue()


def export_calendar_csv(
    calendar: Calendar,
    path: Union[str, Path],
    export_dir: Optional[Path] = None,
) -> Path:
    """
    Write a calendar's events to a CSV file.

    A bare file name is placed under ``export_dir`` (default EXPORT_DIR).

    Returns:
        Absolute path of the written file
    """
    target = Path(path)
    if not target.is_absolute() and target.parent == Path("."):
        target = Path(export_dir or EXPORT_DIR) / target
    target.parent.mkdir(parents=True, exist_ok=True)

    events = [event for event, _ in calendar.export_entries()]
    with open(target, "w", newline="", encoding="utf-8") as f:
        f.write(format_events_csv(events))

    logger.info("Exported %d events from %s to %s", len(events), calendar.name, target)
    return target.resolve()
