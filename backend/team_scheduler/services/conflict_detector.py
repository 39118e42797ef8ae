"""
Conflict Detector

Pure deterministic classification of conflicts for one game:
1. location_double_booking - another game (any series), same date + location, overlapping
2. time_overlap            - another game of the same series, same date, other location, overlapping
3. player_unavailable      - attendee marked unavailable for the game's slot
4. capacity_unmet          - attendees not marked unavailable < min_players

All checks run and the result is their union. Capacity runs last because it
counts the outcome of the availability check. Intervals are half-open, so
back-to-back games sharing an endpoint never conflict.
"""

from datetime import date, time
from typing import Iterable, List, Optional, Tuple

from team_scheduler.models.game import Game
from team_scheduler.models.game_attendance import GameAttendance
from team_scheduler.models.player_availability import AvailabilityStatus
from team_scheduler.services.availability_index import AvailabilityIndex
from team_scheduler.utils.conflict_report import (
    AvailabilityWarning,
    Conflict,
    ConflictKind,
    ConflictReport,
    ConflictSeverity,
)
from team_scheduler.utils.time_slots import format_time_slot, intervals_overlap

DECLINED = "declined"


def _hhmm(t: time) -> str:
    return t.strftime("%H:%M")


def location_double_bookings(
    location: str,
    day: date,
    start: time,
    end: time,
    games: Iterable[Game],
    exclude_game_id: Optional[int] = None,
) -> List[Game]:
    """Games at the same location and date whose window intersects [start, end)."""
    hits = [
        g
        for g in games
        if g.id != exclude_game_id
        and g.date == day
        and g.location == location
        and intervals_overlap(start, end, g.start_time, g.end_time)
    ]
    return sorted(hits, key=lambda g: (g.start_time, g.id or 0))


def attendee_ids(attendance: Iterable[GameAttendance]) -> List[int]:
    """Users with a recorded intent to attend (anything but declined), sorted."""
    return sorted({a.user_id for a in attendance if a.status != DECLINED})


class ConflictDetector:
    """
    Compute the conflict report for a persisted game.

    Guarantees:
        - No I/O; inputs are plain records supplied by the caller
        - Deterministic output ordering (check order, then id)
    """

    def detect(
        self,
        game: Game,
        *,
        other_games: Iterable[Game],
        attendance: Iterable[GameAttendance],
        availability: AvailabilityIndex,
    ) -> ConflictReport:
        other_games = [g for g in other_games if g.id != game.id and g.date == game.date]
        attendance = list(attendance)

        conflicts: List[Conflict] = []
        conflicts.extend(self.check_location(game, other_games))
        conflicts.extend(self.check_time_overlap(game, other_games))

        unavailable, warnings = self.check_player_availability(game, attendance, availability)
        conflicts.extend(unavailable)

        unavailable_users = {c.user_id for c in unavailable}
        capacity = self.check_capacity(game, attendance, unavailable_users)
        if capacity is not None:
            conflicts.append(capacity)

        return ConflictReport(
            game_id=game.id,
            conflicts=conflicts,
            warnings=warnings,
            conflict_count=len(conflicts),
        )

    def check_location(self, game: Game, other_games: Iterable[Game]) -> List[Conflict]:
        clashes = location_double_bookings(
            game.location, game.date, game.start_time, game.end_time, other_games, exclude_game_id=game.id
        )
        return [
            Conflict(
                kind=ConflictKind.location_double_booking,
                severity=ConflictSeverity.critical,
                game_id=game.id,
                other_game_id=other.id,
                reason=(
                    f"Location conflict with game '{other.name}' at {game.location} "
                    f"({_hhmm(other.start_time)}-{_hhmm(other.end_time)})"
                ),
            )
            for other in sorted(clashes, key=lambda g: g.id or 0)
        ]

    def check_time_overlap(self, game: Game, other_games: Iterable[Game]) -> List[Conflict]:
        # Same series elsewhere: the roster cannot be in two places at once
        clashes = [
            g
            for g in other_games
            if g.id != game.id
            and g.series_id == game.series_id
            and g.location != game.location
            and intervals_overlap(game.start_time, game.end_time, g.start_time, g.end_time)
        ]
        return [
            Conflict(
                kind=ConflictKind.time_overlap,
                severity=ConflictSeverity.high,
                game_id=game.id,
                other_game_id=other.id,
                reason=(
                    f"Time conflict with game '{other.name}' at {other.location} "
                    f"({_hhmm(other.start_time)}-{_hhmm(other.end_time)})"
                ),
            )
            for other in sorted(clashes, key=lambda g: g.id or 0)
        ]

    def check_player_availability(
        self,
        game: Game,
        attendance: Iterable[GameAttendance],
        availability: AvailabilityIndex,
    ) -> Tuple[List[Conflict], List[AvailabilityWarning]]:
        conflicts: List[Conflict] = []
        warnings: List[AvailabilityWarning] = []
        slot_label = format_time_slot(game.start_time, game.end_time)

        for user_id in attendee_ids(attendance):
            status = availability.status_for_window(user_id, game.date, game.start_time, game.end_time)
            if status == AvailabilityStatus.unavailable:
                conflicts.append(
                    Conflict(
                        kind=ConflictKind.player_unavailable,
                        severity=ConflictSeverity.medium,
                        game_id=game.id,
                        user_id=user_id,
                        reason=f"Player {user_id} is unavailable for {game.date.isoformat()} {slot_label}",
                    )
                )
            elif status == AvailabilityStatus.maybe:
                warnings.append(
                    AvailabilityWarning(
                        game_id=game.id,
                        user_id=user_id,
                        reason=f"Player {user_id} is only 'maybe' for {game.date.isoformat()} {slot_label}",
                    )
                )
        return conflicts, warnings

    def check_capacity(
        self,
        game: Game,
        attendance: Iterable[GameAttendance],
        unavailable_users: Iterable[int],
    ) -> Optional[Conflict]:
        # maybe and unset both count as a seat
        blocked = set(unavailable_users)
        seats = len([uid for uid in attendee_ids(attendance) if uid not in blocked])
        if seats >= game.min_players:
            return None
        return Conflict(
            kind=ConflictKind.capacity_unmet,
            severity=ConflictSeverity.high,
            game_id=game.id,
            reason=f"Only {seats} of the required {game.min_players} players can attend",
        )
