"""
Tests for CalendarRegistry: naming rules, active-calendar handling and retagging.
"""

from datetime import datetime

import pytest

from vcalendar.core.errors import (
    CalendarNotFoundError,
    DuplicateCalendarError,
    InvalidCalendarNameError,
    InvalidTimezoneError,
)
from vcalendar.models.registry import CalendarRegistry


class TestCreateCalendar:
    def test_first_calendar_becomes_active(self, timezone_service):
        registry = CalendarRegistry(timezone_service)

        work = registry.create_calendar("Work", "America/New_York")
        registry.create_calendar("Home", "Europe/London")

        assert registry.active_calendar is work
        assert registry.calendar_names() == ["Work", "Home"]
        assert len(registry) == 2

    def test_duplicate_name_rejected(self, registry):
        with pytest.raises(DuplicateCalendarError):
            registry.create_calendar("Work", "Europe/London")

    def test_duplicate_after_quote_stripping_rejected(self, registry):
        with pytest.raises(DuplicateCalendarError):
            registry.create_calendar('"Work"', "Europe/London")

    @pytest.mark.parametrize("name", ["", "   ", "My Calendar", "work-cal", None])
    def test_illegal_names_rejected(self, registry, name):
        with pytest.raises(InvalidCalendarNameError):
            registry.create_calendar(name, "Europe/London")

    def test_name_is_trimmed_and_unquoted(self, registry):
        calendar = registry.create_calendar("  'Personal_2'  ", "Europe/London")

        assert calendar.name == "Personal_2"
        assert "Personal_2" in registry

    def test_unknown_timezone_rejected(self, registry):
        with pytest.raises(InvalidTimezoneError):
            registry.create_calendar("Mars", "Mars/Olympus")
        assert not registry.has_calendar("Mars")

    def test_default_timezone_applied(self, registry):
        assert registry.create_calendar("Home").timezone == "America/New_York"

    def test_registries_are_independent(self, timezone_service):
        first = CalendarRegistry(timezone_service)
        second = CalendarRegistry(timezone_service)

        first.create_calendar("Work", "UTC")
        second.create_calendar("Work", "UTC")

        assert first.get_calendar("Work") is not second.get_calendar("Work")


class TestRenameCalendar:
    def test_rename_keeps_position_and_active_status(self, registry):
        work = registry.get_calendar("Work")

        registry.rename_calendar("Work", "Office")

        assert registry.calendar_names() == ["Office", "Tokyo"]
        assert work.name == "Office"
        assert registry.active_calendar is work
        assert registry.active_calendar_name == "Office"
        assert not registry.has_calendar("Work")

    def test_old_name_becomes_free(self, registry):
        registry.rename_calendar("Work", "Office")

        assert registry.create_calendar("Work", "UTC").name == "Work"

    def test_rename_to_taken_name_rejected(self, registry):
        with pytest.raises(DuplicateCalendarError):
            registry.rename_calendar("Work", "Tokyo")

    def test_rename_unknown_calendar(self, registry):
        with pytest.raises(CalendarNotFoundError):
            registry.rename_calendar("Nope", "Other")

    def test_rename_to_same_name_is_noop(self, registry):
        assert registry.rename_calendar("Work", "Work") is registry.get_calendar("Work")


class TestCalendarTimezone:
    def test_retag_keeps_wall_clock_times(self, registry, make_event):
        work = registry.get_calendar("Work")
        work.add_event(make_event("Team Meeting", "2023-05-10T10:00", "2023-05-10T11:00"))

        registry.set_calendar_timezone("Work", "Europe/London")

        assert work.timezone == "Europe/London"
        assert work.events[0].start == datetime(2023, 5, 10, 10, 0)

    def test_invalid_zone_leaves_calendar_untouched(self, registry):
        with pytest.raises(InvalidTimezoneError):
            registry.set_calendar_timezone("Work", "Not/AZone")

        assert registry.get_calendar("Work").timezone == "America/New_York"

    def test_unknown_calendar(self, registry):
        with pytest.raises(CalendarNotFoundError):
            registry.set_calendar_timezone("Nope", "UTC")


class TestActiveCalendar:
    def test_use_calendar(self, registry):
        tokyo = registry.use_calendar("Tokyo")

        assert registry.active_calendar is tokyo

    def test_use_unknown_calendar_keeps_active(self, registry):
        with pytest.raises(CalendarNotFoundError):
            registry.use_calendar("Nope")

        assert registry.active_calendar_name == "Work"

    def test_removing_active_falls_back_to_earliest(self, registry):
        registry.create_calendar("Home", "UTC")
        registry.use_calendar("Home")

        registry.remove_calendar("Home")

        assert registry.active_calendar_name == "Work"

    def test_removing_last_calendar_clears_active(self, registry):
        registry.remove_calendar("Work")
        registry.remove_calendar("Tokyo")

        assert registry.active_calendar_name is None
        with pytest.raises(CalendarNotFoundError):
            registry.active_calendar

    def test_remove_unknown_calendar(self, registry):
        with pytest.raises(CalendarNotFoundError):
            registry.remove_calendar("Nope")

    def test_lookups_accept_quoted_and_padded_names(self, registry):
        home = registry.create_calendar('"Home"', "UTC")

        assert registry.get_calendar('"Home"') is home
        assert registry.has_calendar("  Home ")
        assert '"Home"' in registry
        assert registry.use_calendar("'Home'") is home
        assert registry.active_calendar_name == "Home"
        assert registry.set_calendar_timezone('"Home"', "Asia/Tokyo").timezone == "Asia/Tokyo"
        assert registry.rename_calendar('"Home"', "House").name == "House"
        assert registry.remove_calendar(' "House" ') is home
        assert registry.calendar_names() == ["Work", "Tokyo"]
        assert registry.active_calendar_name == "Work"

    def test_illegal_lookup_name_is_not_found(self, registry):
        with pytest.raises(CalendarNotFoundError):
            registry.get_calendar("No Such Calendar")

    def test_iteration_follows_creation_order(self, registry):
        assert [c.name for c in registry] == ["Work", "Tokyo"]
