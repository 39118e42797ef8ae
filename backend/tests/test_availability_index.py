"""
Tests for AvailabilityIndex lookups and per-slot summaries
"""

from datetime import date, time

from team_scheduler.models.player_availability import AvailabilityStatus, PlayerAvailability
from team_scheduler.services.availability_index import AvailabilityIndex

DAY = date(2024, 3, 5)


def record(user_id, slot, status, day=DAY):
    return PlayerAvailability(user_id=user_id, date=day, time_slot=slot, status=status)


def test_unset_is_none_not_unavailable():
    index = AvailabilityIndex([record(1, "14:00-16:00", "available")])

    assert index.status_of(1, DAY, "14:00-16:00") == AvailabilityStatus.available
    assert index.status_of(2, DAY, "14:00-16:00") is None
    assert index.status_of(1, DAY, "16:00-18:00") is None
    assert index.status_of(1, date(2024, 3, 6), "14:00-16:00") is None


def test_later_record_wins():
    index = AvailabilityIndex(
        [record(1, "14:00-16:00", "available"), record(1, "14:00-16:00", "unavailable")]
    )

    assert index.status_of(1, DAY, "14:00-16:00") == AvailabilityStatus.unavailable
    assert len(index) == 1


def test_summarize_buckets_every_user_once():
    index = AvailabilityIndex(
        [
            record(1, "14:00-16:00", "available"),
            record(2, "14:00-16:00", "available"),
            record(3, "14:00-16:00", "unavailable"),
            record(4, "14:00-16:00", "maybe"),
            record(5, "09:00-11:00", "available"),
        ]
    )

    summary = index.summarize([1, 2, 3, 4, 5, 6, 1], DAY, "14:00-16:00")

    assert summary == {"available": 2, "unavailable": 1, "maybe": 1, "not_set": 2}
    assert sum(summary.values()) == 6


def test_count_by_status():
    index = AvailabilityIndex([record(1, "09:00-11:00", "maybe"), record(2, "09:00-11:00", "maybe")])

    assert index.count([1, 2, 3], DAY, "09:00-11:00", AvailabilityStatus.maybe) == 2
    assert index.count([1, 2, 3], DAY, "09:00-11:00", AvailabilityStatus.available) == 0


class TestStatusForWindow:
    def test_exact_label_match(self):
        index = AvailabilityIndex([record(1, "14:00-16:00", "unavailable")])

        status = index.status_for_window(1, DAY, time(14, 0), time(16, 0))

        assert status == AvailabilityStatus.unavailable

    def test_slot_starting_at_game_start(self):
        index = AvailabilityIndex([record(1, "14:00-16:00", "maybe")])

        status = index.status_for_window(1, DAY, time(14, 0), time(15, 0))

        assert status == AvailabilityStatus.maybe

    def test_most_restrictive_overlapping_slot(self):
        index = AvailabilityIndex(
            [record(1, "14:00-16:00", "available"), record(1, "16:00-18:00", "unavailable")]
        )

        # 15:00-17:00 spans both catalog slots
        status = index.status_for_window(1, DAY, time(15, 0), time(17, 0))

        assert status == AvailabilityStatus.unavailable

    def test_adjacent_slot_does_not_count(self):
        index = AvailabilityIndex([record(1, "16:00-18:00", "unavailable")])

        status = index.status_for_window(1, DAY, time(14, 30), time(16, 0))

        assert status is None

    def test_nothing_recorded(self):
        index = AvailabilityIndex()

        assert index.status_for_window(1, DAY, time(14, 0), time(16, 0)) is None

    def test_slot_at_game_start_does_not_hide_later_slot(self):
        index = AvailabilityIndex(
            [record(1, "14:00-16:00", "available"), record(1, "16:00-18:00", "unavailable")]
        )

        status = index.status_for_window(1, DAY, time(14, 0), time(18, 0))

        assert status == AvailabilityStatus.unavailable
