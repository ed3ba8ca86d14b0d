"""
Tests for recurring series: builder validation and day-by-day expansion.
"""

from datetime import date, datetime, time, timedelta

import pytest
from dateutil.rrule import FR, MO, WE

from vcalendar.core.errors import InvalidEventError
from vcalendar.models.schema import EventVisibility, RecurringEvent, RecurringEventBuilder


def mwf_builder(**overrides):
    start = overrides.pop("start", datetime(2023, 5, 8, 14, 0))
    end = overrides.pop("end", datetime(2023, 5, 8, 15, 0))
    weekdays = overrides.pop("weekdays", "MWF")
    return RecurringEventBuilder("Standup", start, end, weekdays)


class TestBuilderValidation:
    def test_empty_weekdays_rejected(self):
        with pytest.raises(InvalidEventError):
            mwf_builder(weekdays="").occurrences(4).build()

    @pytest.mark.parametrize("count", [0, -3])
    def test_non_positive_count_rejected(self, count):
        with pytest.raises(InvalidEventError):
            mwf_builder().occurrences(count).build()

    def test_missing_termination_rule_rejected(self):
        with pytest.raises(InvalidEventError):
            mwf_builder().build()

    def test_until_before_start_rejected(self):
        with pytest.raises(InvalidEventError):
            mwf_builder().until(date(2023, 5, 7)).build()

    def test_until_on_start_date_allowed(self):
        series = mwf_builder().until(date(2023, 5, 8)).build()

        assert [e.start for e in series.expand()] == [datetime(2023, 5, 8, 14, 0)]

    def test_end_not_after_start_rejected(self):
        with pytest.raises(InvalidEventError):
            mwf_builder(end=datetime(2023, 5, 8, 14, 0)).occurrences(2).build()
        with pytest.raises(InvalidEventError):
            mwf_builder(end=datetime(2023, 5, 8, 13, 0)).occurrences(2).build()

    def test_unknown_weekday_letter_rejected(self):
        with pytest.raises(InvalidEventError):
            mwf_builder(weekdays="MXF").occurrences(2).build()

    def test_last_termination_rule_wins(self):
        series = mwf_builder().occurrences(4).until(date(2023, 5, 10)).build()

        assert series.occurrences is None
        assert series.until == date(2023, 5, 10)

    def test_series_is_immutable(self):
        series = mwf_builder().occurrences(4).build()

        with pytest.raises(Exception):
            series.subject = "Other"

    def test_direct_construction_validates(self):
        with pytest.raises(InvalidEventError):
            RecurringEvent(
                subject="Standup",
                start_date=date(2023, 5, 8),
                start_time=time(14, 0),
                end_time=time(15, 0),
                weekdays="MWF",
                occurrences=3,
                until=date(2023, 6, 1),
            )

    def test_occurrence_cap(self):
        with pytest.raises(InvalidEventError):
            mwf_builder().occurrences(100_000).build().expand()


class TestExpansion:
    def test_mwf_four_occurrences(self):
        series = mwf_builder().occurrences(4).build()

        events = series.expand()

        assert [e.start.date() for e in events] == [
            date(2023, 5, 8),
            date(2023, 5, 10),
            date(2023, 5, 12),
            date(2023, 5, 15),
        ]
        for event in events:
            assert event.start.time() == time(14, 0)
            assert event.end.time() == time(15, 0)
            assert event.series_id == series.series_id

    def test_count_yields_exact_number_on_configured_weekdays(self):
        series = mwf_builder(weekdays="TR").occurrences(9).build()

        events = series.expand()

        assert len(events) == 9
        assert all(e.start.weekday() in (1, 3) for e in events)
        assert all(e.duration == timedelta(hours=1) for e in events)

    def test_until_is_inclusive(self):
        series = mwf_builder().until(date(2023, 5, 12)).build()

        assert [e.start.date() for e in series.expand()] == [
            date(2023, 5, 8),
            date(2023, 5, 10),
            date(2023, 5, 12),
        ]

    def test_first_day_not_matching_is_skipped(self):
        series = mwf_builder(start=datetime(2023, 5, 9, 14, 0), weekdays="MW").occurrences(2).build()

        assert [e.start.date() for e in series.expand()] == [date(2023, 5, 10), date(2023, 5, 15)]

    def test_dateutil_weekday_constants(self):
        series = mwf_builder(weekdays=[MO, WE, FR]).occurrences(4).build()

        assert series.weekdays == frozenset({0, 2, 4})

    def test_expansion_is_restartable(self):
        series = mwf_builder().occurrences(6).build()

        assert series.expand() == series.expand()

    def test_all_day_series(self):
        series = (
            RecurringEventBuilder("Gym", date(2023, 5, 8), None, "SU")
            .all_day()
            .occurrences(3)
            .build()
        )

        events = series.expand()

        assert [e.event_date for e in events] == [
            date(2023, 5, 13),
            date(2023, 5, 14),
            date(2023, 5, 20),
        ]
        assert all(e.all_day for e in events)

    def test_metadata_copied_to_occurrences(self):
        series = (
            mwf_builder()
            .description("Daily sync")
            .location("Room 4")
            .visibility("private")
            .occurrences(2)
            .build()
        )

        for event in series.expand():
            assert event.description == "Daily sync"
            assert event.location == "Room 4"
            assert event.visibility is EventVisibility.private
