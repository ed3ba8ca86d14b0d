# Cross-calendar copying
# Copies events out of the active calendar into a named target calendar

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Callable, Optional

from vcalendar.core.errors import (
    CalendarNotFoundError,
    ConflictingEventError,
    EventNotFoundError,
    ValidationError,
)
from vcalendar.core.timezones import TimezoneService
from vcalendar.core.utils import format_date, format_datetime
from vcalendar.models.calendar import Calendar
from vcalendar.models.registry import CalendarRegistry
from vcalendar.models.schema import Event

logger = logging.getLogger(__name__)


# ============================================================================
# RESULTS
# ============================================================================


class CopyStatus(str, Enum):
    """Aggregate outcome of a copy operation."""

    completed = "completed"
    partial = "partial"
    conflicted = "conflicted"
    no_events = "no_events"


@dataclass
class CopyResult:
    """Counts accumulated while copying; per-item conflicts never abort a batch."""

    source: str
    target_calendar: str
    found: int = 0
    copied: int = 0
    conflicts: int = 0

    @property
    def status(self) -> CopyStatus:
        if self.found == 0:
            return CopyStatus.no_events
        if self.conflicts == 0:
            return CopyStatus.completed
        if self.copied == 0:
            return CopyStatus.conflicted
        return CopyStatus.partial

    @property
    def succeeded(self) -> bool:
        return self.status is CopyStatus.completed

    def summary(self) -> str:
        status = self.status
        if status is CopyStatus.no_events:
            return f"No events found {self.source} to copy."
        if status is CopyStatus.completed:
            noun = "event" if self.copied == 1 else "events"
            return (
                f"Successfully copied {self.copied} {noun} {self.source} "
                f"to calendar '{self.target_calendar}'."
            )
        if status is CopyStatus.conflicted:
            return (
                f"Failed to copy {self.found} event(s) {self.source} to calendar "
                f"'{self.target_calendar}' due to conflicts."
            )
        return (
            f"Copied {self.copied} events, but {self.conflicts} events could not be "
            f"copied due to conflicts."
        )


# ============================================================================
# COPY ENGINE
# ============================================================================


class CopyEngine:
    """
    Duplicates events from the active calendar into another calendar.

    Date and range copies shift each event by a whole number of days and then
    convert its wall-clock start from the source zone to the target zone.
    A single-event copy lands at exactly the requested target date-time.
    Durations are always preserved.
    """

    def __init__(self, registry: CalendarRegistry, timezone_service: Optional[TimezoneService] = None):
        self.registry = registry
        self.timezones = timezone_service or registry.timezones

    def copy_event(
        self,
        subject: str,
        source_start: datetime,
        target_calendar: str,
        target_start: datetime,
    ) -> CopyResult:
        """
        Copy one event to ``target_start`` in the target calendar's own zone.

        Raises:
            CalendarNotFoundError: If the target (or an active source) is missing
            EventNotFoundError: If no source event matches (subject, source_start)
        """
        target = self._target(target_calendar)
        source = self.registry.active_calendar

        event = source.find_event(subject, source_start)
        if event is None:
            raise EventNotFoundError(subject, source_start)

        if event.all_day:
            copied = self._all_day_copy(event, target_start.date())
        else:
            copied = event.with_changes(
                start=target_start,
                end=target_start + event.duration,
                series_id=None,
            )

        result = CopyResult(
            source=f"'{subject}' at {format_datetime(source_start)}",
            target_calendar=target.name,
            found=1,
        )
        self._insert(target, copied, result)
        self._log_result(result)
        return result

    def copy_events_on_date(
        self,
        source_date: date,
        target_calendar: str,
        target_date: date,
    ) -> CopyResult:
        """Copy every event intersecting ``source_date`` so it lands on ``target_date``."""
        target = self._target(target_calendar)
        source = self.registry.active_calendar

        events = source.get_events_on_date(source_date)
        convert = self.timezones.converter(source.timezone, target.timezone)
        day_offset = (target_date - source_date).days

        result = CopyResult(
            source=f"on {format_date(source_date)}",
            target_calendar=target.name,
            found=len(events),
        )
        for event in events:
            self._insert(target, self._shifted_copy(event, day_offset, convert), result)
        self._log_result(result)
        return result

    def copy_events_in_range(
        self,
        start_date: date,
        end_date: date,
        target_calendar: str,
        target_start_date: date,
    ) -> CopyResult:
        """
        Copy every event intersecting [start_date, end_date] into a range
        beginning at ``target_start_date``, keeping relative spacing.
        """
        if end_date < start_date:
            raise ValidationError("End date cannot be before start date", field="end_date")
        target = self._target(target_calendar)
        source = self.registry.active_calendar

        events = source.get_events_in_range(start_date, end_date)
        convert = self.timezones.converter(source.timezone, target.timezone)

        result = CopyResult(
            source=f"between {format_date(start_date)} and {format_date(end_date)}",
            target_calendar=target.name,
            found=len(events),
        )
        for event in events:
            landing_date = target_start_date + (event.event_date - start_date)
            day_offset = (landing_date - event.event_date).days
            self._insert(target, self._shifted_copy(event, day_offset, convert), result)
        self._log_result(result)
        return result

    # ========================================================================
    # HELPERS
    # ========================================================================

    def _target(self, name: str) -> Calendar:
        if not self.registry.has_calendar(name):
            raise CalendarNotFoundError(name)
        return self.registry.get_calendar(name)

    @staticmethod
    def _all_day_copy(event: Event, day: date) -> Event:
        return Event.all_day_event(
            event.subject,
            day,
            description=event.description,
            location=event.location,
            visibility=event.visibility,
        )

    def _shifted_copy(
        self,
        event: Event,
        day_offset: int,
        convert: Callable[[datetime], datetime],
    ) -> Event:
        if event.all_day:
            return self._all_day_copy(event, event.event_date + timedelta(days=day_offset))
        start = convert(event.start + timedelta(days=day_offset))
        return event.with_changes(start=start, end=start + event.duration, series_id=None)

    @staticmethod
    def _insert(target: Calendar, event: Event, result: CopyResult) -> None:
        try:
            target.add_event(event, auto_decline=True)
        except ConflictingEventError:
            result.conflicts += 1
            logger.info(
                "Copy of %r at %s declined by %s: conflict",
                event.subject,
                event.start,
                target.name,
            )
        else:
            result.copied += 1

    @staticmethod
    def _log_result(result: CopyResult) -> None:
        logger.info(
            "Copy %s -> %s: found=%d copied=%d conflicts=%d",
            result.source,
            result.target_calendar,
            result.found,
            result.copied,
            result.conflicts,
        )
