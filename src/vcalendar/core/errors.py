# Calendar error hierarchy
# Typed failures raised by the model and copy layers; rendering is left to callers

from typing import Any, Optional


# ============================================================================
# ERROR REASONS
# ============================================================================

ERROR_NOT_FOUND = "notFound"
ERROR_INVALID = "invalid"
ERROR_DUPLICATE = "duplicate"
ERROR_CONFLICT = "conflict"

ERROR_CALENDAR_NOT_FOUND = "calendarNotFound"
ERROR_EVENT_NOT_FOUND = "eventNotFound"
ERROR_INVALID_EVENT = "invalidEvent"
ERROR_INVALID_TIMEZONE = "invalidTimezone"
ERROR_INVALID_CALENDAR_NAME = "invalidCalendarName"
ERROR_DUPLICATE_CALENDAR = "duplicateCalendar"
ERROR_CONFLICTING_EVENT = "conflictingEvent"


# ============================================================================
# EXCEPTION CLASSES
# ============================================================================


class CalendarError(Exception):
    """Base exception for calendar errors."""

    def __init__(
        self,
        message: str,
        reason: str = ERROR_INVALID,
        field: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.reason = reason
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        """Convert to a plain dict for the presentation layer."""
        detail: dict[str, Any] = {
            "reason": self.reason,
            "message": self.message,
        }
        if self.field:
            detail["field"] = self.field
        return {"error": detail}


class NotFoundError(CalendarError):
    """Resource not found."""

    def __init__(self, message: str = "Not Found", reason: str = ERROR_NOT_FOUND):
        super().__init__(message=message, reason=reason)


class CalendarNotFoundError(NotFoundError):
    """Calendar not found."""

    def __init__(self, name: Optional[str] = None):
        message = f"Calendar not found: {name}" if name else "No active calendar set"
        super().__init__(message=message, reason=ERROR_CALENDAR_NOT_FOUND)
        self.name = name


class EventNotFoundError(NotFoundError):
    """Event not found."""

    def __init__(self, subject: str, start: Any = None):
        message = f"Event not found: {subject}"
        if start is not None:
            message += f" at {start}"
        super().__init__(message=message, reason=ERROR_EVENT_NOT_FOUND)
        self.subject = subject
        self.start = start


class ValidationError(CalendarError):
    """Invalid input data."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        reason: str = ERROR_INVALID,
    ):
        super().__init__(message=message, reason=reason, field=field)


class InvalidEventError(ValidationError):
    """Malformed event parameters: bad interval or recurrence rule."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message=message, field=field, reason=ERROR_INVALID_EVENT)


class InvalidTimezoneError(ValidationError):
    """Unrecognized IANA timezone identifier."""

    def __init__(self, timezone: Any):
        super().__init__(
            message=f"Invalid timezone: {timezone}",
            field="timezone",
            reason=ERROR_INVALID_TIMEZONE,
        )
        self.timezone = timezone


class InvalidCalendarNameError(ValidationError):
    """Calendar name is empty or uses characters other than letters, digits and underscore."""

    def __init__(self, name: Any, message: Optional[str] = None):
        super().__init__(
            message=message or f"Invalid calendar name: {name!r}",
            field="name",
            reason=ERROR_INVALID_CALENDAR_NAME,
        )
        self.name = name


class DuplicateError(CalendarError):
    """Duplicate resource."""

    def __init__(self, message: str = "Resource already exists", reason: str = ERROR_DUPLICATE):
        super().__init__(message=message, reason=reason)


class DuplicateCalendarError(DuplicateError):
    """A calendar with this name already exists."""

    def __init__(self, name: str):
        super().__init__(
            message=f"Calendar with name '{name}' already exists",
            reason=ERROR_DUPLICATE_CALENDAR,
        )
        self.name = name


class ConflictError(CalendarError):
    """Operation would overlap existing data."""

    def __init__(self, message: str, reason: str = ERROR_CONFLICT):
        super().__init__(message=message, reason=reason)


class ConflictingEventError(ConflictError):
    """Insertion or edit would overlap an existing event."""

    def __init__(self, message: str):
        super().__init__(message=message, reason=ERROR_CONFLICTING_EVENT)
