"""
Name-keyed directory of calendars plus the active-calendar pointer.

Name uniqueness is tracked by this registry instance, so separate registries
never see each other's names.
"""

import logging
from typing import Iterator, Optional

from vcalendar.core.errors import (
    CalendarNotFoundError,
    DuplicateCalendarError,
    InvalidCalendarNameError,
)
from vcalendar.core.timezones import TimezoneService
from vcalendar.core.utils import normalize_calendar_name
from .calendar import Calendar

logger = logging.getLogger(__name__)


class CalendarRegistry:
    """
    Owns every calendar of the running process.

    Example usage:
        registry = CalendarRegistry()
        registry.create_calendar("Work", "America/New_York")
        registry.create_calendar("Travel", "Asia/Tokyo")
        registry.use_calendar("Travel")
        registry.active_calendar.add_event(...)
    """

    def __init__(self, timezone_service: Optional[TimezoneService] = None):
        self.timezones = timezone_service or TimezoneService()
        # dict keeps creation order, which drives active-calendar fallback
        self._calendars: dict[str, Calendar] = {}
        self._active_name: Optional[str] = None

    def __contains__(self, name: object) -> bool:
        return self._lookup_key(name) in self._calendars

    @staticmethod
    def _lookup_key(name: object) -> object:
        """Canonical form of ``name``, so lookups accept what create accepts."""
        try:
            return normalize_calendar_name(name)
        except InvalidCalendarNameError:
            return name

    def __len__(self) -> int:
        return len(self._calendars)

    def __iter__(self) -> Iterator[Calendar]:
        return iter(list(self._calendars.values()))

    # ========================================================================
    # LIFECYCLE
    # ========================================================================

    def create_calendar(self, name: str, timezone: Optional[str] = None) -> Calendar:
        """
        Create and register a calendar.

        The first calendar created becomes the active one.

        Raises:
            InvalidCalendarNameError: If the name is empty or has illegal characters
            InvalidTimezoneError: If the timezone is not a known IANA zone
            DuplicateCalendarError: If the name is taken
        """
        name = normalize_calendar_name(name)
        timezone = self.timezones.validate_timezone(
            timezone if timezone is not None else self.timezones.default_timezone
        )
        if name in self._calendars:
            raise DuplicateCalendarError(name)

        calendar = Calendar(name, timezone)
        self._calendars[name] = calendar
        if self._active_name is None:
            self._active_name = name
        logger.info("Created calendar %s (%s)", name, timezone)
        return calendar

    def get_calendar(self, name: str) -> Calendar:
        """Look up a calendar; the name is trimmed and unquoted like on create."""
        calendar = self._calendars.get(self._lookup_key(name))
        if calendar is None:
            raise CalendarNotFoundError(name)
        return calendar

    def has_calendar(self, name: str) -> bool:
        return name in self

    def calendar_names(self) -> list[str]:
        return list(self._calendars)

    def rename_calendar(self, old_name: str, new_name: str) -> Calendar:
        """
        Rename a calendar, keeping its position and active status.

        Raises:
            CalendarNotFoundError: If ``old_name`` is not registered
            InvalidCalendarNameError: If ``new_name`` is not a legal name
            DuplicateCalendarError: If ``new_name`` belongs to another calendar
        """
        calendar = self.get_calendar(old_name)
        old_name = calendar.name
        new_name = normalize_calendar_name(new_name)
        if new_name == old_name:
            return calendar
        if new_name in self._calendars:
            raise DuplicateCalendarError(new_name)

        calendar.name = new_name
        self._calendars = {
            (new_name if key == old_name else key): value
            for key, value in self._calendars.items()
        }
        if self._active_name == old_name:
            self._active_name = new_name
        logger.info("Renamed calendar %s -> %s", old_name, new_name)
        return calendar

    def set_calendar_timezone(self, name: str, timezone: str) -> Calendar:
        """
        Re-tag a calendar with another zone.

        Stored events keep their wall-clock times.
        """
        timezone = self.timezones.validate_timezone(timezone)
        calendar = self.get_calendar(name)
        calendar.timezone = timezone
        logger.info("Calendar %s now uses timezone %s", calendar.name, timezone)
        return calendar

    def remove_calendar(self, name: str) -> Calendar:
        """
        Remove a calendar and free its name.

        If it was active, the earliest remaining calendar becomes active.
        """
        calendar = self._calendars.pop(self.get_calendar(name).name)
        if self._active_name == calendar.name:
            self._active_name = next(iter(self._calendars), None)
        logger.info("Removed calendar %s", calendar.name)
        return calendar

    # ========================================================================
    # ACTIVE CALENDAR
    # ========================================================================

    def use_calendar(self, name: str) -> Calendar:
        calendar = self.get_calendar(name)
        self._active_name = calendar.name
        logger.debug("Active calendar is now %s", calendar.name)
        return calendar

    @property
    def active_calendar_name(self) -> Optional[str]:
        return self._active_name

    @property
    def active_calendar(self) -> Calendar:
        if self._active_name is None:
            raise CalendarNotFoundError()
        return self._calendars[self._active_name]
