"""
Shared pytest fixtures for all tests.

Every fixture builds fresh objects, so no registry or calendar state leaks
between tests.
"""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from vcalendar.core.copy import CopyEngine
from vcalendar.core.timezones import TimezoneService
from vcalendar.models.calendar import Calendar
from vcalendar.models.registry import CalendarRegistry
from vcalendar.models.schema import Event


@pytest.fixture
def timezone_service():
    """TimezoneService with a fixed default zone."""
    return TimezoneService(default_timezone="America/New_York")


@pytest.fixture
def calendar():
    """Empty standalone calendar in New York time."""
    return Calendar("Work", "America/New_York")


@pytest.fixture
def make_event():
    """Factory for timed events from compact ISO strings."""

    def _make(subject: str, start: str, end: str, **kwargs) -> Event:
        return Event(
            subject=subject,
            start=datetime.fromisoformat(start),
            end=datetime.fromisoformat(end),
            **kwargs,
        )

    return _make


@pytest.fixture
def registry(timezone_service):
    """Registry with an active New York calendar and a Tokyo calendar."""
    reg = CalendarRegistry(timezone_service)
    reg.create_calendar("Work", "America/New_York")
    reg.create_calendar("Tokyo", "Asia/Tokyo")
    return reg


@pytest.fixture
def copy_engine(registry):
    """CopyEngine bound to the shared registry."""
    return CopyEngine(registry)
