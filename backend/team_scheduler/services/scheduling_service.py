"""
Scheduling Service - orchestration over the repository collaborator

Pipeline for recurring patterns:
1. Load pattern (must exist and be active)
2. Expand occurrences (RecurrenceExpander)
3. Skip occurrences already persisted for (pattern_id, date)
4. Insert the remainder as one batch

Read paths (conflicts, optimal slot, team summary) build an AvailabilityIndex
per call and delegate to ConflictDetector / SlotSearcher.
"""

import logging
from datetime import date
from typing import List, Optional, Sequence

from pydantic import BaseModel

from team_scheduler import config
from team_scheduler.errors import ConstraintViolation, NotFound
from team_scheduler.models.game import Game
from team_scheduler.models.player_availability import AvailabilityStatus, PlayerAvailability
from team_scheduler.models.recurring_pattern import RecurringPattern
from team_scheduler.repository import SchedulingRepository
from team_scheduler.services.availability_index import AvailabilityIndex
from team_scheduler.services.conflict_detector import ConflictDetector
from team_scheduler.services.recurrence_expander import Occurrence, expand, validate_pattern
from team_scheduler.services.slot_searcher import OptimalSlot, SlotSearcher
from team_scheduler.utils.conflict_report import ConflictReport
from team_scheduler.utils.time_slots import parse_time_slot

logger = logging.getLogger(__name__)


class SlotAvailabilityCounts(BaseModel):
    time_slot: str
    available: int
    unavailable: int
    maybe: int
    not_set: int


class TeamAvailabilitySummary(BaseModel):
    team_id: int
    date: date
    member_count: int
    availability_summary: List[SlotAvailabilityCounts]


class SchedulingService:
    def __init__(self, repository: SchedulingRepository, slot_catalog: Optional[Sequence[str]] = None):
        self.repository = repository
        self.slot_catalog = list(slot_catalog) if slot_catalog is not None else config.get_slot_catalog()
        self.detector = ConflictDetector()
        self.searcher = SlotSearcher(self.slot_catalog)

    # ========================================================================
    # Recurring patterns
    # ========================================================================

    def create_recurring_pattern(self, series_id: int, created_by: int, **fields) -> RecurringPattern:
        if self.repository.find_series_by_id(series_id) is None:
            raise NotFound(f"Game series {series_id} not found")

        fields.setdefault("interval", config.DEFAULT_INTERVAL)
        fields.setdefault("min_players", config.DEFAULT_MIN_PLAYERS)
        fields.setdefault("max_players", config.DEFAULT_MAX_PLAYERS)
        pattern = RecurringPattern(series_id=series_id, created_by=created_by, is_active=True, **fields)
        validate_pattern(pattern, check_dates=True)

        pattern = self.repository.insert_pattern(pattern)
        logger.info("Created recurring pattern %s for series %s (%s)", pattern.id, series_id, pattern.frequency)
        return pattern

    def list_recurring_patterns(self, series_id: int) -> List[RecurringPattern]:
        if self.repository.find_series_by_id(series_id) is None:
            raise NotFound(f"Game series {series_id} not found")
        return self.repository.find_patterns_by_series(series_id)

    def set_pattern_active(self, pattern_id: int, is_active: bool) -> RecurringPattern:
        pattern = self.repository.find_pattern_by_id(pattern_id)
        if pattern is None:
            raise NotFound(f"Recurring pattern {pattern_id} not found")
        pattern.is_active = is_active
        return self.repository.update_pattern(pattern)

    def get_active_pattern(self, pattern_id: int) -> RecurringPattern:
        pattern = self.repository.find_pattern_by_id(pattern_id)
        if pattern is None or not pattern.is_active:
            raise NotFound(f"Recurring pattern {pattern_id} not found")
        return pattern

    def expand(self, pattern: RecurringPattern, window_start: date, window_end: date) -> List[Occurrence]:
        validate_pattern(pattern, check_dates=False)
        return list(expand(pattern, window_start, window_end))

    def generate_games_from_pattern(self, pattern_id: int, start_date: date, end_date: date) -> List[int]:
        """
        Persist the pattern's occurrences in [start_date, end_date].

        Idempotent: occurrences already stored for (pattern_id, date) are
        skipped, so overlapping or repeated windows never duplicate games.

        Returns:
            Ids of newly created games, in date order (empty when nothing new)

        Raises:
            NotFound: pattern missing or inactive
            InvalidRecurrenceRule: pattern cannot be expanded
            StorageError: persistence failed (batch aborted)
        """
        pattern = self.get_active_pattern(pattern_id)
        occurrences = self.expand(pattern, start_date, end_date)
        if not occurrences:
            logger.info("Pattern %s: no occurrences in %s..%s", pattern_id, start_date, end_date)
            return []

        pending = [o for o in occurrences if not self.repository.find_games_by_pattern_and_date(pattern_id, o.date)]
        skipped = len(occurrences) - len(pending)
        if not pending:
            logger.info("Pattern %s: all %d occurrences already exist (idempotent)", pattern_id, skipped)
            return []

        try:
            created = self.repository.insert_games([self._build_game(pattern, o) for o in pending])
        except ConstraintViolation:
            # A concurrent generator inserted some of these dates first
            logger.warning("Pattern %s: batch hit uniqueness constraint, inserting individually", pattern_id)
            created = self._insert_individually(pattern, pending)

        logger.info(
            "Pattern %s: generated %d games (%d skipped as existing)",
            pattern_id,
            len(created),
            len(occurrences) - len(created),
        )
        return created

    def _insert_individually(self, pattern: RecurringPattern, pending: List[Occurrence]) -> List[int]:
        created: List[int] = []
        for occurrence in pending:
            if self.repository.find_games_by_pattern_and_date(pattern.id, occurrence.date):
                continue
            try:
                created.extend(self.repository.insert_games([self._build_game(pattern, occurrence)]))
            except ConstraintViolation:
                logger.info("Pattern %s: %s already exists, skipping", pattern.id, occurrence.date)
        return created

    @staticmethod
    def _build_game(pattern: RecurringPattern, occurrence: Occurrence) -> Game:
        return Game(
            series_id=occurrence.series_id,
            pattern_id=occurrence.pattern_id,
            name=f"{pattern.name} - {occurrence.date.isoformat()}",
            description=pattern.description,
            date=occurrence.date,
            start_time=occurrence.start_time,
            end_time=occurrence.end_time,
            location=occurrence.location,
            min_players=occurrence.min_players,
            max_players=occurrence.max_players,
            status="scheduled",
            created_by=pattern.created_by,
        )

    # ========================================================================
    # Player availability
    # ========================================================================

    def set_player_availability(
        self,
        user_id: int,
        day: date,
        time_slot: str,
        status: AvailabilityStatus,
        notes: Optional[str] = None,
    ) -> PlayerAvailability:
        parse_time_slot(time_slot)
        record = PlayerAvailability(
            user_id=user_id,
            date=day,
            time_slot=time_slot,
            status=AvailabilityStatus(status),
            notes=notes or "",
        )
        return self.repository.upsert_availability(record)

    def get_player_availability(self, user_id: int, start_date: date, end_date: date) -> List[PlayerAvailability]:
        return self.repository.find_availability([user_id], start_date, end_date)

    # ========================================================================
    # Read paths
    # ========================================================================

    def detect_conflicts(self, game_id: int) -> ConflictReport:
        game = self.repository.find_game_by_id(game_id)
        if game is None:
            raise NotFound(f"Game {game_id} not found")

        other_games = {g.id: g for g in self.repository.find_games_by_location_and_date(game.location, game.date)}
        for g in self.repository.find_games_by_series_and_date_range(game.series_id, game.date, game.date):
            other_games[g.id] = g
        other_games.pop(game.id, None)

        attendance = self.repository.find_attendance(game.id)
        availability = AvailabilityIndex(
            self.repository.find_availability([a.user_id for a in attendance], game.date, game.date)
        )
        return self.detector.detect(
            game,
            other_games=sorted(other_games.values(), key=lambda g: g.id),
            attendance=attendance,
            availability=availability,
        )

    def series_locations(self, series_id: int, day: date) -> List[str]:
        """Usual locations of a series: its patterns' and same-day games' locations."""
        locations = {p.location for p in self.repository.find_patterns_by_series(series_id)}
        locations.update(g.location for g in self.repository.find_games_by_series_and_date_range(series_id, day, day))
        return sorted(locations)

    def find_optimal_time_slot(
        self,
        series_id: int,
        day: date,
        duration_minutes: int = config.DEFAULT_DURATION_MINUTES,
        min_players: int = config.DEFAULT_MIN_PLAYERS,
        max_players: int = config.DEFAULT_MAX_PLAYERS,
    ) -> Optional[OptimalSlot]:
        if self.repository.find_series_by_id(series_id) is None:
            raise NotFound(f"Game series {series_id} not found")

        roster = self.repository.find_series_members(series_id)
        locations = self.series_locations(series_id, day)
        games: List[Game] = []
        for location in locations:
            games.extend(self.repository.find_games_by_location_and_date(location, day))
        availability = AvailabilityIndex(self.repository.find_availability(roster, day, day))

        slot = self.searcher.find_optimal(
            day,
            duration_minutes,
            min_players,
            max_players,
            roster=roster,
            locations=locations,
            games=games,
            availability=availability,
        )
        if slot is None:
            logger.info("Series %s: no suitable slot on %s", series_id, day)
        return slot

    def team_availability_summary(self, team_id: int, day: date) -> TeamAvailabilitySummary:
        if self.repository.find_team(team_id) is None:
            raise NotFound(f"Team {team_id} not found")

        members = self.repository.find_team_members(team_id)
        availability = AvailabilityIndex(self.repository.find_availability(members, day, day))
        return TeamAvailabilitySummary(
            team_id=team_id,
            date=day,
            member_count=len(members),
            availability_summary=[
                SlotAvailabilityCounts(time_slot=slot, **availability.summarize(members, day, slot))
                for slot in self.slot_catalog
            ],
        )
