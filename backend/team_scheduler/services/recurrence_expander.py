"""
Recurrence Expander

Pure expansion of a recurring pattern into concrete occurrences:
- daily:   every Nth day from pattern.start_date
- weekly:  every Nth week on day_of_week (0=Sunday … 6=Saturday), starting at
           the first matching day in the requested window
- monthly: every Nth month on the start_date's day-of-month, clamped to month end

No I/O. Identical inputs always yield identical sequences.
"""

from dataclasses import dataclass
from datetime import date, time, timedelta
from typing import Iterator, Optional

from dateutil.relativedelta import relativedelta

from team_scheduler.errors import InvalidRecurrenceRule
from team_scheduler.models.recurring_pattern import Frequency, RecurringPattern

VALID_FREQUENCIES = {f.value for f in Frequency}


@dataclass(frozen=True)
class Occurrence:
    """One concrete instance of a pattern on a single date."""

    date: date
    start_time: time
    end_time: time
    location: str
    min_players: int
    max_players: int
    series_id: int
    pattern_id: Optional[int] = None


def _frequency_value(pattern: RecurringPattern) -> str:
    freq = pattern.frequency
    return freq.value if isinstance(freq, Frequency) else str(freq)


def python_weekday(day_of_week: int) -> int:
    """Convert 0=Sunday numbering to date.weekday() numbering (0=Monday)."""
    return (day_of_week - 1) % 7


def validate_pattern(pattern: RecurringPattern, check_dates: bool = True) -> None:
    """
    Reject patterns that cannot be expanded.

    Raises InvalidRecurrenceRule on the first problem found. start_date >
    end_date is only an error when check_dates is set (pattern creation);
    expansion treats it as an empty window.
    """
    frequency = _frequency_value(pattern)
    if frequency not in VALID_FREQUENCIES:
        raise InvalidRecurrenceRule(f"Unknown frequency: {frequency!r}")
    if pattern.interval is None or pattern.interval < 1:
        raise InvalidRecurrenceRule(f"Interval must be a positive integer (got {pattern.interval})")
    if frequency == Frequency.weekly.value:
        if pattern.day_of_week is None:
            raise InvalidRecurrenceRule("Weekly patterns require day_of_week")
        if not 0 <= pattern.day_of_week <= 6:
            raise InvalidRecurrenceRule(f"day_of_week must be 0-6 (got {pattern.day_of_week})")
    if pattern.min_players <= 0 or pattern.max_players <= 0:
        raise InvalidRecurrenceRule("min_players and max_players must be greater than 0")
    if pattern.min_players > pattern.max_players:
        raise InvalidRecurrenceRule(
            f"min_players ({pattern.min_players}) cannot exceed max_players ({pattern.max_players})"
        )
    if pattern.start_time >= pattern.end_time:
        raise InvalidRecurrenceRule("end_time must be after start_time")
    if check_dates and pattern.start_date > pattern.end_date:
        raise InvalidRecurrenceRule("start_date must not be after end_date")


class OccurrenceSequence:
    """
    Lazy, restartable sequence of occurrences.

    Every iteration walks the rule from scratch, so the sequence can be
    consumed more than once and always yields the same dates.
    """

    def __init__(self, pattern: RecurringPattern, window_start: date, window_end: date):
        self.pattern = pattern
        self.window_start = max(pattern.start_date, window_start)
        self.window_end = min(pattern.end_date, window_end)

    @property
    def is_empty_window(self) -> bool:
        return self.window_start > self.window_end

    def __iter__(self) -> Iterator[Occurrence]:
        for day in self._dates():
            yield self._occurrence(day)

    def __repr__(self) -> str:
        return f"OccurrenceSequence(pattern_id={self.pattern.id}, {self.window_start}..{self.window_end})"

    def _occurrence(self, day: date) -> Occurrence:
        p = self.pattern
        return Occurrence(
            date=day,
            start_time=p.start_time,
            end_time=p.end_time,
            location=p.location,
            min_players=p.min_players,
            max_players=p.max_players,
            series_id=p.series_id,
            pattern_id=p.id,
        )

    def _dates(self) -> Iterator[date]:
        if self.is_empty_window:
            return
        frequency = _frequency_value(self.pattern)
        if frequency == Frequency.daily.value:
            yield from self._stepped(self.pattern.start_date, timedelta(days=self.pattern.interval))
        elif frequency == Frequency.weekly.value:
            # Walk starts at the first matching weekday in the effective window
            anchor = self._first_weekday_on_or_after(self.window_start)
            yield from self._stepped(anchor, timedelta(weeks=self.pattern.interval))
        elif frequency == Frequency.monthly.value:
            yield from self._monthly()
        else:
            raise InvalidRecurrenceRule(f"Unknown frequency: {frequency!r}")

    def _first_weekday_on_or_after(self, cursor: date) -> date:
        if self.pattern.day_of_week is None:
            raise InvalidRecurrenceRule("Weekly patterns require day_of_week")
        delta_days = (python_weekday(self.pattern.day_of_week) - cursor.weekday() + 7) % 7
        return cursor + timedelta(days=delta_days)

    def _stepped(self, anchor: date, step: timedelta) -> Iterator[date]:
        # Jump straight to the first step on or after the window start
        current = anchor
        if current < self.window_start:
            steps = -(-(self.window_start - current).days // step.days)
            current = current + step * steps
        while current <= self.window_end:
            yield current
            current += step

    def _monthly(self) -> Iterator[date]:
        anchor = self.pattern.start_date
        k = 0
        while True:
            # Offsets are always taken from the anchor so a clamp (31 -> 30) never drifts
            current = anchor + relativedelta(months=k * self.pattern.interval)
            if current > self.window_end:
                return
            if current >= self.window_start:
                yield current
            k += 1


def expand(pattern: RecurringPattern, window_start: date, window_end: date) -> OccurrenceSequence:
    """
    Expand a pattern over [window_start, window_end] (inclusive).

    The effective window is clamped to the pattern's own dates; an empty
    effective window yields an empty sequence, never an error.
    """
    return OccurrenceSequence(pattern, window_start, window_end)
