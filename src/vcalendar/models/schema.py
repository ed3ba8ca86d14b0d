# Event model for the virtual calendar
# Single events, recurring series and the builder that validates them

from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Iterable, Optional, Union

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from vcalendar.core.errors import InvalidEventError
from vcalendar.core.utils import (
    expand_weekly_recurrence,
    generate_series_id,
    next_day_start,
    parse_weekdays,
    start_of_day,
)


# ============================================================================
# ENUMS
# ============================================================================


class EventVisibility(str, Enum):
    """Event visibility levels."""

    public = "public"
    private = "private"

    @classmethod
    def parse(cls, value: Any) -> "EventVisibility":
        """Accept an enum member, a bool (True = public) or public/private/true/false."""
        if isinstance(value, cls):
            return value
        if isinstance(value, bool):
            return cls.public if value else cls.private
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in ("public", "true"):
                return cls.public
            if lowered in ("private", "false"):
                return cls.private
        raise InvalidEventError(f"Invalid visibility: {value!r}", field="visibility")


class EventProperty(str, Enum):
    """Event fields that can be changed through the edit operations."""

    subject = "subject"
    description = "description"
    location = "location"
    start = "start"
    end = "end"
    visibility = "visibility"

    @classmethod
    def parse(cls, name: Any) -> Optional["EventProperty"]:
        """Resolve a property name or alias; None when it is not editable."""
        if isinstance(name, cls):
            return name
        if not isinstance(name, str):
            return None
        return PROPERTY_ALIASES.get(name.strip().lower())


PROPERTY_ALIASES = {
    "subject": EventProperty.subject,
    "name": EventProperty.subject,
    "description": EventProperty.description,
    "location": EventProperty.location,
    "start": EventProperty.start,
    "starttime": EventProperty.start,
    "startdatetime": EventProperty.start,
    "end": EventProperty.end,
    "endtime": EventProperty.end,
    "enddatetime": EventProperty.end,
    "visibility": EventProperty.visibility,
    "ispublic": EventProperty.visibility,
    "public": EventProperty.visibility,
}


# ============================================================================
# EVENT
# ============================================================================


class Event(BaseModel):
    """
    A single dated occurrence.

    ``start``/``end`` are naive wall-clock datetimes in the owning calendar's
    timezone. All-day events span local midnight to the next local midnight.
    Events are looked up by ``(subject, start)``; there is no surrogate id.
    Immutable; edits produce a new Event through ``with_changes``.
    """

    model_config = ConfigDict(frozen=True)

    subject: str
    start: datetime
    end: datetime
    description: Optional[str] = None
    location: Optional[str] = None
    visibility: EventVisibility = EventVisibility.public
    all_day: bool = False
    series_id: Optional[str] = None

    @field_validator("subject")
    @classmethod
    def _subject_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise InvalidEventError("Event subject cannot be empty", field="subject")
        return value

    @model_validator(mode="after")
    def _check_interval(self) -> "Event":
        if self.start.tzinfo is not None or self.end.tzinfo is not None:
            raise InvalidEventError("Event times must be naive wall-clock datetimes")
        if self.all_day:
            if self.start != start_of_day(self.start.date()) or self.end != next_day_start(
                self.start.date()
            ):
                raise InvalidEventError("All-day events must span exactly one calendar date")
        elif self.end < self.start:
            raise InvalidEventError("Event end cannot be before its start", field="end")
        return self

    @classmethod
    def all_day_event(
        cls,
        subject: str,
        day: date,
        *,
        description: Optional[str] = None,
        location: Optional[str] = None,
        visibility: EventVisibility = EventVisibility.public,
        series_id: Optional[str] = None,
    ) -> "Event":
        if isinstance(day, datetime):
            day = day.date()
        return cls(
            subject=subject,
            start=start_of_day(day),
            end=next_day_start(day),
            description=description,
            location=location,
            visibility=visibility,
            all_day=True,
            series_id=series_id,
        )

    @property
    def key(self) -> tuple[str, datetime]:
        return (self.subject, self.start)

    @property
    def event_date(self) -> date:
        """Calendar date the event starts on (the stored date for all-day events)."""
        return self.start.date()

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    @property
    def is_public(self) -> bool:
        return self.visibility == EventVisibility.public

    def conflicts_with(self, other: "Event") -> bool:
        """Half-open overlap: touching intervals do not conflict."""
        return self.start < other.end and other.start < self.end

    def overlaps_dates(self, first: date, last: date) -> bool:
        """Whether the event intersects any date from ``first`` to ``last`` inclusive."""
        window_start = start_of_day(first)
        window_end = next_day_start(last)
        if self.start == self.end:
            return window_start <= self.start < window_end
        return self.start < window_end and self.end > window_start

    def occupies(self, day: date) -> bool:
        return self.overlaps_dates(day, day)

    def is_busy_at(self, instant: datetime) -> bool:
        """Inclusive at both ends; all-day events cover any instant on their date."""
        if self.all_day:
            return instant.date() == self.event_date
        return self.start <= instant <= self.end

    def with_changes(self, **changes: Any) -> "Event":
        """Return a validated copy with ``changes`` applied."""
        data = self.model_dump()
        data.update(changes)
        return type(self).model_validate(data)


# ============================================================================
# RECURRING EVENT
# ============================================================================


class RecurringEvent(BaseModel):
    """
    A weekday pattern that expands into concrete Events.

    Exactly one termination rule applies: ``occurrences`` (a positive count)
    or ``until`` (an inclusive last date). Immutable once built.
    """

    model_config = ConfigDict(frozen=True)

    subject: str
    start_date: date
    start_time: time
    end_time: time
    weekdays: frozenset[int]
    occurrences: Optional[int] = None
    until: Optional[date] = None
    description: Optional[str] = None
    location: Optional[str] = None
    visibility: EventVisibility = EventVisibility.public
    all_day: bool = False
    series_id: str = Field(default_factory=generate_series_id)

    @field_validator("weekdays", mode="before")
    @classmethod
    def _normalize_weekdays(cls, value: Any) -> frozenset[int]:
        return parse_weekdays(value)

    @model_validator(mode="after")
    def _check_rule(self) -> "RecurringEvent":
        if not self.subject.strip():
            raise InvalidEventError("Event subject cannot be empty", field="subject")
        if self.occurrences is None and self.until is None:
            raise InvalidEventError("Must specify either occurrences or an until date")
        if self.occurrences is not None and self.until is not None:
            raise InvalidEventError("Cannot specify both occurrences and an until date")
        if self.occurrences is not None and self.occurrences <= 0:
            raise InvalidEventError("Occurrences must be positive", field="occurrences")
        if self.until is not None and self.until < self.start_date:
            raise InvalidEventError("Until date cannot be before the start date", field="until")
        if not self.all_day and self.end_time <= self.start_time:
            raise InvalidEventError("End time must be after start time", field="end")
        return self

    @property
    def first_start(self) -> datetime:
        return datetime.combine(self.start_date, self.start_time)

    @property
    def duration(self) -> timedelta:
        if self.all_day:
            return timedelta(days=1)
        return datetime.combine(self.start_date, self.end_time) - self.first_start

    def expand(self) -> list[Event]:
        """Materialize every occurrence, in date order."""
        starts = expand_weekly_recurrence(
            self.first_start,
            self.weekdays,
            count=self.occurrences,
            until=self.until,
        )
        if self.all_day:
            return [
                Event.all_day_event(
                    self.subject,
                    start.date(),
                    description=self.description,
                    location=self.location,
                    visibility=self.visibility,
                    series_id=self.series_id,
                )
                for start in starts
            ]
        return [
            Event(
                subject=self.subject,
                start=start,
                end=start + self.duration,
                description=self.description,
                location=self.location,
                visibility=self.visibility,
                series_id=self.series_id,
            )
            for start in starts
        ]


class RecurringEventBuilder:
    """
    Collects the parts of a recurring event and validates them on build().

    Example usage:
        series = (
            RecurringEventBuilder("Standup", datetime(2023, 5, 8, 9, 0),
                                  datetime(2023, 5, 8, 9, 15), "MWF")
            .location("Room 4")
            .occurrences(10)
            .build()
        )

    ``occurrences()`` and ``until()`` are mutually exclusive; the last one
    called wins.
    """

    def __init__(
        self,
        subject: str,
        start: Union[datetime, date],
        end: Union[datetime, time, None],
        weekdays: Union[str, Iterable[Any]],
    ):
        self._subject = subject
        self._start = start
        self._end = end
        self._weekdays = weekdays
        self._description: Optional[str] = None
        self._location: Optional[str] = None
        self._visibility = EventVisibility.public
        self._all_day = False
        self._occurrences: Optional[int] = None
        self._until: Optional[date] = None
        self._series_id: Optional[str] = None

    def description(self, description: Optional[str]) -> "RecurringEventBuilder":
        self._description = description
        return self

    def location(self, location: Optional[str]) -> "RecurringEventBuilder":
        self._location = location
        return self

    def visibility(self, visibility: Any) -> "RecurringEventBuilder":
        self._visibility = EventVisibility.parse(visibility)
        return self

    def all_day(self, all_day: bool = True) -> "RecurringEventBuilder":
        self._all_day = all_day
        return self

    def occurrences(self, count: int) -> "RecurringEventBuilder":
        self._occurrences = count
        self._until = None
        return self

    def until(self, until: date) -> "RecurringEventBuilder":
        self._until = until
        self._occurrences = None
        return self

    def series_id(self, series_id: str) -> "RecurringEventBuilder":
        self._series_id = series_id
        return self

    def build(self) -> RecurringEvent:
        if isinstance(self._start, datetime):
            start_date, start_time = self._start.date(), self._start.time()
        elif isinstance(self._start, date):
            start_date, start_time = self._start, time.min
        else:
            raise InvalidEventError("Recurring event needs a start", field="start")

        if self._all_day:
            start_time = end_time = time.min
        elif isinstance(self._end, datetime):
            end_time = self._end.time()
        elif isinstance(self._end, time):
            end_time = self._end
        else:
            raise InvalidEventError("Recurring event needs an end time", field="end")

        data: dict[str, Any] = {
            "subject": self._subject,
            "start_date": start_date,
            "start_time": start_time,
            "end_time": end_time,
            "weekdays": self._weekdays,
            "occurrences": self._occurrences,
            "until": self._until,
            "description": self._description,
            "location": self._location,
            "visibility": self._visibility,
            "all_day": self._all_day,
        }
        if self._series_id is not None:
            data["series_id"] = self._series_id

        try:
            return RecurringEvent.model_validate(data)
        except pydantic.ValidationError as e:
            raise InvalidEventError(f"Invalid recurring event: {e}") from e
