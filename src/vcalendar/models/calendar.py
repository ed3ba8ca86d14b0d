"""
Calendar: a named, timezone-tagged store of events and recurring series.

Every insertion goes through the conflict check. Conflicts use half-open
intervals, so an event ending exactly when another begins does not collide.
"""

import logging
from datetime import date, datetime, time
from typing import Any, Iterable, Optional, Union

import pydantic

from vcalendar.core.errors import (
    ConflictingEventError,
    EventNotFoundError,
    InvalidEventError,
    ValidationError,
)
from vcalendar.core.utils import parse_datetime, parse_time, start_of_day
from .schema import Event, EventProperty, EventVisibility, RecurringEvent

logger = logging.getLogger(__name__)


class Calendar:
    """
    A single calendar's events, kept in insertion order.

    Example usage:
        calendar = Calendar("Work", "America/New_York")
        calendar.add_event(
            Event(subject="Team Meeting",
                  start=datetime(2023, 5, 10, 10, 0),
                  end=datetime(2023, 5, 10, 11, 0)),
            auto_decline=True,
        )
        calendar.get_events_on_date(date(2023, 5, 10))
    """

    def __init__(self, name: str, timezone: str):
        self.name = name
        self.timezone = timezone
        self._events: list[Event] = []
        self._recurring_events: list[RecurringEvent] = []

    def __repr__(self) -> str:
        return f"Calendar(name={self.name!r}, timezone={self.timezone!r}, events={len(self._events)})"

    def __len__(self) -> int:
        return len(self._events)

    @property
    def events(self) -> list[Event]:
        return list(self._events)

    @property
    def recurring_events(self) -> list[RecurringEvent]:
        return list(self._recurring_events)

    def get_all_events(self) -> list[Event]:
        return list(self._events)

    # ========================================================================
    # CONFLICT DETECTION
    # ========================================================================

    def has_conflict(self, event: Event, ignore: Iterable[Event] = ()) -> bool:
        """Whether ``event`` overlaps a stored event other than those in ``ignore``."""
        skipped = {id(e) for e in ignore}
        return any(
            existing.conflicts_with(event)
            for existing in self._events
            if id(existing) not in skipped
        )

    # ========================================================================
    # INSERTION
    # ========================================================================

    def add_event(self, event: Event, auto_decline: bool = False) -> bool:
        """
        Add a single event.

        Returns:
            True when stored; False when it conflicts and ``auto_decline`` is off

        Raises:
            InvalidEventError: If the event is missing or has an empty interval
            ConflictingEventError: If it conflicts and ``auto_decline`` is on
        """
        if event is None:
            raise InvalidEventError("Event cannot be null")
        if not event.all_day and event.end <= event.start:
            raise InvalidEventError("Event end must be after its start", field="end")
        if event.series_id is not None and self.get_recurring_event(event.series_id) is None:
            raise InvalidEventError(
                f"Event belongs to unknown series {event.series_id}", field="series_id"
            )

        if self.has_conflict(event):
            if auto_decline:
                raise ConflictingEventError(
                    f"Cannot add event '{event.subject}' due to conflict with an existing event"
                )
            logger.info("Skipped conflicting event %r at %s in %s", event.subject, event.start, self.name)
            return False

        self._events.append(event)
        logger.debug("Added event %r at %s to %s", event.subject, event.start, self.name)
        return True

    def add_recurring_event(self, recurring_event: RecurringEvent, auto_decline: bool = False) -> int:
        """
        Expand a series and store its occurrences.

        With ``auto_decline`` the registration is all-or-nothing: a single
        conflicting occurrence rejects the whole series. Without it,
        conflicting occurrences are skipped and the rest are stored.

        Returns:
            Number of occurrences stored (0 means the series was not registered)

        Raises:
            InvalidEventError: If the series is missing or already registered
            ConflictingEventError: If any occurrence conflicts and ``auto_decline`` is on
        """
        if recurring_event is None:
            raise InvalidEventError("Recurring event cannot be null")
        if self.get_recurring_event(recurring_event.series_id) is not None:
            raise InvalidEventError(
                f"Recurring event {recurring_event.series_id} is already registered",
                field="series_id",
            )

        occurrences = recurring_event.expand()
        accepted = [occ for occ in occurrences if not self.has_conflict(occ)]
        declined = len(occurrences) - len(accepted)

        if declined and auto_decline:
            raise ConflictingEventError(
                f"Cannot add recurring event '{recurring_event.subject}' due to conflict "
                f"with an existing event"
            )
        if declined:
            logger.info(
                "Skipped %d of %d occurrences of %r in %s due to conflicts",
                declined,
                len(occurrences),
                recurring_event.subject,
                self.name,
            )
        if not accepted:
            return 0

        self._recurring_events.append(recurring_event)
        self._events.extend(accepted)
        logger.info(
            "Registered series %r (%s) with %d occurrences in %s",
            recurring_event.subject,
            recurring_event.series_id,
            len(accepted),
            self.name,
        )
        return len(accepted)

    # ========================================================================
    # QUERIES
    # ========================================================================

    def find_event(self, subject: str, start: datetime) -> Optional[Event]:
        """Exact match on (subject, start); None when absent."""
        for event in self._events:
            if event.subject == subject and event.start == start:
                return event
        return None

    def get_events_on_date(self, day: date) -> list[Event]:
        """Every event intersecting ``day``, including multi-day events."""
        if isinstance(day, datetime):
            day = day.date()
        return sorted((e for e in self._events if e.occupies(day)), key=lambda e: e.start)

    def get_events_in_range(self, start_date: date, end_date: date) -> list[Event]:
        """Every event intersecting the inclusive date range, ordered by start."""
        if isinstance(start_date, datetime):
            start_date = start_date.date()
        if isinstance(end_date, datetime):
            end_date = end_date.date()
        if end_date < start_date:
            raise ValidationError("End date cannot be before start date", field="end_date")
        return sorted(
            (e for e in self._events if e.overlaps_dates(start_date, end_date)),
            key=lambda e: e.start,
        )

    def is_busy(self, instant: datetime) -> bool:
        return any(event.is_busy_at(instant) for event in self._events)

    def get_recurring_event(self, series_id: str) -> Optional[RecurringEvent]:
        for recurring_event in self._recurring_events:
            if recurring_event.series_id == series_id:
                return recurring_event
        return None

    def get_series_events(self, series_id: str) -> list[Event]:
        return [e for e in self._events if e.series_id == series_id]

    def export_entries(self) -> list[tuple[Event, Optional[RecurringEvent]]]:
        """Stored events in insertion order, each paired with its series (or None)."""
        series = {r.series_id: r for r in self._recurring_events}
        return [(event, series.get(event.series_id)) for event in self._events]

    # ========================================================================
    # EDITING
    # ========================================================================

    def edit_single_event(
        self,
        subject: str,
        start: datetime,
        prop: Union[EventProperty, str],
        new_value: Any,
    ) -> bool:
        """
        Change one property of the event identified by (subject, start).

        Returns:
            True when applied; False when ``prop`` is not an editable property

        Raises:
            EventNotFoundError: If no event matches
            InvalidEventError: If ``new_value`` is malformed for ``prop``
            ConflictingEventError: If the new interval overlaps another event
        """
        event = self.find_event(subject, start)
        if event is None:
            raise EventNotFoundError(subject, start)

        parsed = EventProperty.parse(prop)
        if parsed is None:
            logger.warning("Ignoring edit of unknown property %r", prop)
            return False

        updated = self._edited(event, parsed, new_value)
        if self._moves_interval(parsed) and self.has_conflict(updated, ignore=[event]):
            raise ConflictingEventError(f"Updating {parsed.value} would create a conflict")

        self._replace(event, updated)
        logger.info("Edited %s of %r at %s in %s", parsed.value, subject, start, self.name)
        return True

    def edit_events_from_date(
        self,
        subject: str,
        from_date: Union[date, datetime],
        prop: Union[EventProperty, str],
        new_value: Any,
    ) -> int:
        """Apply an edit to every event named ``subject`` starting at or after ``from_date``."""
        threshold = from_date if isinstance(from_date, datetime) else start_of_day(from_date)
        targets = [e for e in self._events if e.subject == subject and e.start >= threshold]
        return self._edit_many(targets, prop, new_value)

    def edit_all_events(
        self,
        subject: str,
        prop: Union[EventProperty, str],
        new_value: Any,
    ) -> int:
        """Apply an edit to every event named ``subject``."""
        targets = [e for e in self._events if e.subject == subject]
        return self._edit_many(targets, prop, new_value)

    def _edit_many(self, targets: list[Event], prop: Union[EventProperty, str], new_value: Any) -> int:
        parsed = EventProperty.parse(prop)
        if parsed is None:
            logger.warning("Ignoring edit of unknown property %r", prop)
            return 0
        if not targets:
            return 0

        updates = [(event, self._edited(event, parsed, new_value)) for event in targets]

        # Validate every candidate before touching the store
        if self._moves_interval(parsed):
            for index, (_, candidate) in enumerate(updates):
                clashes_with_sibling = any(
                    candidate.conflicts_with(other)
                    for other_index, (_, other) in enumerate(updates)
                    if other_index != index
                )
                if clashes_with_sibling or self.has_conflict(candidate, ignore=targets):
                    raise ConflictingEventError(
                        f"Updating {parsed.value} would create a conflict for "
                        f"'{candidate.subject}' at {candidate.start}"
                    )

        for event, candidate in updates:
            self._replace(event, candidate)
        logger.info("Edited %s of %d events in %s", parsed.value, len(updates), self.name)
        return len(updates)

    @staticmethod
    def _moves_interval(prop: EventProperty) -> bool:
        return prop in (EventProperty.start, EventProperty.end)

    def _edited(self, event: Event, prop: EventProperty, value: Any) -> Event:
        changes = self._coerce_change(event, prop, value)
        try:
            updated = event.with_changes(**changes)
        except pydantic.ValidationError as e:
            raise InvalidEventError(f"Invalid value for {prop.value}: {value!r}", field=prop.value) from e
        if not updated.all_day and updated.end <= updated.start:
            raise InvalidEventError("Event end must be after its start", field=prop.value)
        return updated

    @staticmethod
    def _coerce_change(event: Event, prop: EventProperty, value: Any) -> dict[str, Any]:
        if prop is EventProperty.subject:
            if not isinstance(value, str):
                raise InvalidEventError(f"Invalid subject: {value!r}", field="subject")
            return {"subject": value}

        if prop in (EventProperty.description, EventProperty.location):
            if value is not None and not isinstance(value, str):
                raise InvalidEventError(f"Invalid {prop.value}: {value!r}", field=prop.value)
            return {prop.value: value}

        if prop is EventProperty.visibility:
            return {"visibility": EventVisibility.parse(value)}

        # start / end
        # All-day events end at the next midnight; time-only edits stay on their date
        day = event.event_date if event.all_day else getattr(event, prop.value).date()
        if isinstance(value, datetime):
            moved = value
        elif isinstance(value, time):
            moved = datetime.combine(day, value)
        elif isinstance(value, str):
            try:
                if "T" in value:
                    moved = parse_datetime(value)
                else:
                    moved = datetime.combine(day, parse_time(value))
            except ValidationError as e:
                raise InvalidEventError(f"Invalid {prop.value}: {value!r}", field=prop.value) from e
        else:
            raise InvalidEventError(f"Invalid {prop.value}: {value!r}", field=prop.value)

        # Explicit times turn an all-day event into a timed one
        return {prop.value: moved, "all_day": False}

    def _replace(self, old: Event, new: Event) -> None:
        for index, existing in enumerate(self._events):
            if existing is old:
                self._events[index] = new
                return
        raise EventNotFoundError(old.subject, old.start)
