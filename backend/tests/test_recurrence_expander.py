"""
Tests for the Recurrence Expander

Covers:
- Weekly: first matching weekday on/after the window start, 7*N day steps
- Monthly: day-of-month clamping (31 -> 29/30) without drift
- Daily: every Nth day anchored at the pattern start
- Empty windows are empty sequences, never errors
- Determinism and restartable iteration
- Rule validation (fail-fast)
"""

from datetime import date, time

import pytest

from team_scheduler.errors import InvalidRecurrenceRule
from team_scheduler.models.recurring_pattern import RecurringPattern
from team_scheduler.services.recurrence_expander import Occurrence, expand, python_weekday, validate_pattern


def make_pattern(**overrides) -> RecurringPattern:
    fields = dict(
        id=7,
        series_id=3,
        name="Sunday Run",
        frequency="weekly",
        interval=1,
        day_of_week=0,
        start_time=time(14, 0),
        end_time=time(16, 0),
        location="Court A",
        min_players=4,
        max_players=10,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 31),
        created_by=1,
    )
    fields.update(overrides)
    return RecurringPattern(**fields)


def dates_of(pattern, start, end):
    return [o.date for o in expand(pattern, start, end)]


class TestWeekly:
    def test_sundays_in_january_2024(self):
        """2024-01-01 is a Monday, so the first Sunday on/after it is the 7th."""
        pattern = make_pattern()

        assert dates_of(pattern, date(2024, 1, 1), date(2024, 1, 31)) == [
            date(2024, 1, 7),
            date(2024, 1, 14),
            date(2024, 1, 21),
            date(2024, 1, 28),
        ]

    def test_start_date_on_matching_weekday_is_included(self):
        pattern = make_pattern(day_of_week=1)  # Monday

        result = dates_of(pattern, date(2024, 1, 1), date(2024, 1, 31))

        assert result[0] == date(2024, 1, 1)
        assert len(result) == 5

    def test_window_start_after_pattern_start(self):
        pattern = make_pattern()

        assert dates_of(pattern, date(2024, 1, 15), date(2024, 1, 31)) == [
            date(2024, 1, 21),
            date(2024, 1, 28),
        ]

    def test_biweekly_walk_starts_at_window_start(self):
        pattern = make_pattern(day_of_week=1, interval=2)

        full = dates_of(pattern, date(2024, 1, 1), date(2024, 1, 31))
        later = dates_of(pattern, date(2024, 1, 8), date(2024, 1, 31))

        assert full == [date(2024, 1, 1), date(2024, 1, 15), date(2024, 1, 29)]
        assert later == [date(2024, 1, 8), date(2024, 1, 22)]

    def test_biweekly_sundays_from_later_window(self):
        pattern = make_pattern(day_of_week=0, interval=2)

        assert dates_of(pattern, date(2024, 1, 8), date(2024, 1, 31)) == [
            date(2024, 1, 14),
            date(2024, 1, 28),
        ]

    def test_every_occurrence_is_on_the_requested_weekday(self):
        pattern = make_pattern(day_of_week=5, end_date=date(2024, 6, 30))

        result = dates_of(pattern, date(2024, 1, 1), date(2024, 6, 30))

        assert result
        assert all(d.weekday() == python_weekday(5) for d in result)

    def test_day_of_week_numbering_starts_on_sunday(self):
        assert python_weekday(0) == 6
        assert python_weekday(1) == 0
        assert python_weekday(6) == 5


class TestMonthly:
    def test_clamps_to_month_end_without_drift(self):
        pattern = make_pattern(
            frequency="monthly",
            day_of_week=None,
            start_date=date(2024, 1, 31),
            end_date=date(2024, 4, 30),
        )

        assert dates_of(pattern, date(2024, 1, 1), date(2024, 12, 31)) == [
            date(2024, 1, 31),
            date(2024, 2, 29),
            date(2024, 3, 31),
            date(2024, 4, 30),
        ]

    def test_non_leap_february(self):
        pattern = make_pattern(
            frequency="monthly",
            start_date=date(2023, 1, 30),
            end_date=date(2023, 3, 31),
        )

        assert dates_of(pattern, date(2023, 1, 1), date(2023, 12, 31)) == [
            date(2023, 1, 30),
            date(2023, 2, 28),
            date(2023, 3, 30),
        ]

    def test_every_other_month(self):
        pattern = make_pattern(
            frequency="monthly",
            interval=2,
            start_date=date(2024, 1, 15),
            end_date=date(2024, 12, 31),
        )

        assert dates_of(pattern, date(2024, 3, 1), date(2024, 8, 31)) == [
            date(2024, 3, 15),
            date(2024, 5, 15),
            date(2024, 7, 15),
        ]


class TestDaily:
    def test_every_third_day_anchored_at_pattern_start(self):
        pattern = make_pattern(frequency="daily", interval=3, day_of_week=None)

        # Anchored dates: 1, 4, 7, 10, 13, ...
        assert dates_of(pattern, date(2024, 1, 5), date(2024, 1, 12)) == [
            date(2024, 1, 7),
            date(2024, 1, 10),
        ]

    def test_daily_covers_whole_window(self):
        pattern = make_pattern(frequency="daily", end_date=date(2024, 1, 10))

        assert len(dates_of(pattern, date(2024, 1, 1), date(2024, 1, 31))) == 10


class TestEmptyWindows:
    def test_pattern_start_after_end_is_empty(self):
        pattern = make_pattern(start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))

        assert dates_of(pattern, date(2024, 1, 1), date(2024, 12, 31)) == []

    def test_request_window_outside_pattern_is_empty(self):
        pattern = make_pattern()

        assert dates_of(pattern, date(2024, 3, 1), date(2024, 3, 31)) == []

    def test_inverted_request_window_is_empty(self):
        pattern = make_pattern()

        sequence = expand(pattern, date(2024, 1, 20), date(2024, 1, 10))

        assert sequence.is_empty_window
        assert list(sequence) == []


class TestSequenceProperties:
    def test_determinism(self):
        pattern = make_pattern(end_date=date(2024, 12, 31))

        first = list(expand(pattern, date(2024, 1, 1), date(2024, 12, 31)))
        second = list(expand(pattern, date(2024, 1, 1), date(2024, 12, 31)))

        assert first == second

    def test_sequence_is_restartable(self):
        sequence = expand(make_pattern(), date(2024, 1, 1), date(2024, 1, 31))

        assert list(sequence) == list(sequence)

    def test_ascending_without_duplicates(self):
        pattern = make_pattern(frequency="daily", interval=2, end_date=date(2024, 3, 31))

        result = dates_of(pattern, date(2024, 1, 1), date(2024, 3, 31))

        assert result == sorted(set(result))

    def test_occurrence_carries_pattern_shape(self):
        occurrence = next(iter(expand(make_pattern(), date(2024, 1, 1), date(2024, 1, 31))))

        assert occurrence == Occurrence(
            date=date(2024, 1, 7),
            start_time=time(14, 0),
            end_time=time(16, 0),
            location="Court A",
            min_players=4,
            max_players=10,
            series_id=3,
            pattern_id=7,
        )


class TestValidation:
    def test_valid_pattern_passes(self):
        validate_pattern(make_pattern())

    def test_weekly_requires_day_of_week(self):
        with pytest.raises(InvalidRecurrenceRule, match="day_of_week"):
            validate_pattern(make_pattern(day_of_week=None))

    def test_day_of_week_ignored_for_monthly(self):
        validate_pattern(make_pattern(frequency="monthly", day_of_week=None))

    def test_min_players_above_max_rejected(self):
        with pytest.raises(InvalidRecurrenceRule, match="min_players"):
            validate_pattern(make_pattern(min_players=12, max_players=10))

    def test_non_positive_players_rejected(self):
        with pytest.raises(InvalidRecurrenceRule):
            validate_pattern(make_pattern(min_players=0))

    def test_interval_must_be_positive(self):
        with pytest.raises(InvalidRecurrenceRule, match="Interval"):
            validate_pattern(make_pattern(interval=0))

    def test_unknown_frequency_rejected(self):
        with pytest.raises(InvalidRecurrenceRule, match="frequency"):
            validate_pattern(make_pattern(frequency="bi_weekly"))

    def test_end_time_must_follow_start_time(self):
        with pytest.raises(InvalidRecurrenceRule, match="end_time"):
            validate_pattern(make_pattern(start_time=time(16, 0), end_time=time(14, 0)))

    def test_inverted_dates_only_rejected_when_checked(self):
        pattern = make_pattern(start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))

        validate_pattern(pattern, check_dates=False)
        with pytest.raises(InvalidRecurrenceRule, match="start_date"):
            validate_pattern(pattern)

    def test_invalid_rule_is_a_value_error(self):
        with pytest.raises(ValueError):
            validate_pattern(make_pattern(day_of_week=None))
