"""
Timezone validation and instant-preserving conversion.

Calendars store naive wall-clock datetimes; a datetime only becomes an
absolute instant once it is paired with the owning calendar's zone.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError, available_timezones

from vcalendar.config import DEFAULT_TIMEZONE
from vcalendar.core.errors import InvalidTimezoneError, ValidationError

logger = logging.getLogger(__name__)


class TimezoneService:
    """Validates IANA zone identifiers and converts wall-clock times between zones."""

    def __init__(self, default_timezone: Optional[str] = None):
        self._default_timezone = self.validate_timezone(default_timezone or DEFAULT_TIMEZONE)

    @property
    def default_timezone(self) -> str:
        return self._default_timezone

    def is_valid_timezone(self, tz_name: Any) -> bool:
        if not isinstance(tz_name, str) or not tz_name.strip():
            return False
        try:
            ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError, OSError):
            return False
        return True

    def validate_timezone(self, tz_name: Any) -> str:
        """Return ``tz_name`` unchanged, or raise InvalidTimezoneError."""
        if not self.is_valid_timezone(tz_name):
            raise InvalidTimezoneError(tz_name)
        return tz_name

    def available_timezones(self) -> set[str]:
        return available_timezones()

    def convert(self, dt: datetime, from_zone: str, to_zone: str) -> datetime:
        """
        Re-express a wall-clock time from one zone in another.

        ``dt`` is read as local time in ``from_zone`` (using whatever offset
        that zone has on that date), resolved to an absolute instant, then
        rendered as local time in ``to_zone``. Both zones are validated before
        any arithmetic happens.

        Returns:
            Naive datetime in ``to_zone`` wall-clock time
        """
        self.validate_timezone(from_zone)
        self.validate_timezone(to_zone)
        if dt.tzinfo is not None:
            raise ValidationError("convert() expects a naive wall-clock datetime", field="dateTime")

        if from_zone == to_zone:
            return dt

        converted = dt.replace(tzinfo=ZoneInfo(from_zone)).astimezone(ZoneInfo(to_zone))
        logger.debug("Converted %s %s -> %s %s", dt, from_zone, converted, to_zone)
        return converted.replace(tzinfo=None)

    def converter(self, from_zone: str, to_zone: str) -> Callable[[datetime], datetime]:
        """Bind a zone pair, validating it once up front."""
        self.validate_timezone(from_zone)
        self.validate_timezone(to_zone)
        return lambda dt: self.convert(dt, from_zone, to_zone)

    def to_utc(self, dt: datetime, from_zone: str) -> datetime:
        """Resolve a wall-clock time to an aware UTC datetime."""
        self.validate_timezone(from_zone)
        return dt.replace(tzinfo=ZoneInfo(from_zone)).astimezone(timezone.utc)
