"""
Repository collaborator for the scheduling engine.

The engine only talks to storage through SchedulingRepository.
SqlSchedulingRepository is the SQLModel implementation used by the API;
it translates driver errors into ConstraintViolation / StorageError.
"""

import logging
from datetime import date
from typing import Iterable, List, Optional, Protocol

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from team_scheduler.errors import ConstraintViolation, StorageError
from team_scheduler.models.game import Game
from team_scheduler.models.game_attendance import GameAttendance
from team_scheduler.models.game_series import GameSeries, SeriesTeam
from team_scheduler.models.player_availability import PlayerAvailability
from team_scheduler.models.recurring_pattern import RecurringPattern
from team_scheduler.models.team import Team, TeamMember

logger = logging.getLogger(__name__)

UNIQUE_GAME_CONSTRAINT = "uq_game_pattern_date"


class SchedulingRepository(Protocol):
    def find_pattern_by_id(self, pattern_id: int) -> Optional[RecurringPattern]: ...

    def find_patterns_by_series(self, series_id: int) -> List[RecurringPattern]: ...

    def insert_pattern(self, pattern: RecurringPattern) -> RecurringPattern: ...

    def update_pattern(self, pattern: RecurringPattern) -> RecurringPattern: ...

    def find_games_by_pattern_and_date(self, pattern_id: int, day: date) -> List[Game]: ...

    def insert_games(self, games: List[Game]) -> List[int]: ...

    def find_game_by_id(self, game_id: int) -> Optional[Game]: ...

    def find_games_by_series_and_date_range(self, series_id: int, start: date, end: date) -> List[Game]: ...

    def find_games_by_location_and_date(self, location: str, day: date) -> List[Game]: ...

    def find_attendance(self, game_id: int) -> List[GameAttendance]: ...

    def find_availability(self, user_ids: Iterable[int], start: date, end: date) -> List[PlayerAvailability]: ...

    def find_availability_record(self, user_id: int, day: date, time_slot: str) -> Optional[PlayerAvailability]: ...

    def upsert_availability(self, record: PlayerAvailability) -> PlayerAvailability: ...

    def find_series_by_id(self, series_id: int) -> Optional[GameSeries]: ...

    def find_series_members(self, series_id: int) -> List[int]: ...

    def find_team(self, team_id: int) -> Optional[Team]: ...

    def find_team_members(self, team_id: int) -> List[int]: ...


class SqlSchedulingRepository:
    """SchedulingRepository over an SQLModel session."""

    def __init__(self, session: Session):
        self.session = session

    # ------------------------------------------------------------------
    # Write helpers
    # ------------------------------------------------------------------

    def _commit(self) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            if UNIQUE_GAME_CONSTRAINT in str(exc.orig) or "game.pattern_id, game.date" in str(exc.orig):
                raise ConstraintViolation("Game already exists for pattern and date", details=str(exc.orig)) from exc
            raise StorageError(f"Integrity error: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            self.session.rollback()
            raise StorageError(f"Storage failure: {exc}") from exc

    def _read(self, statement):
        try:
            return self.session.exec(statement).all()
        except SQLAlchemyError as exc:
            raise StorageError(f"Storage failure: {exc}") from exc

    def _get(self, model, key):
        try:
            return self.session.get(model, key)
        except SQLAlchemyError as exc:
            raise StorageError(f"Storage failure: {exc}") from exc

    # ------------------------------------------------------------------
    # Patterns
    # ------------------------------------------------------------------

    def find_pattern_by_id(self, pattern_id: int) -> Optional[RecurringPattern]:
        return self._get(RecurringPattern, pattern_id)

    def find_patterns_by_series(self, series_id: int) -> List[RecurringPattern]:
        return list(
            self._read(
                select(RecurringPattern)
                .where(RecurringPattern.series_id == series_id)
                .order_by(RecurringPattern.created_at.desc(), RecurringPattern.id.desc())
            )
        )

    def insert_pattern(self, pattern: RecurringPattern) -> RecurringPattern:
        self.session.add(pattern)
        self._commit()
        self.session.refresh(pattern)
        return pattern

    def update_pattern(self, pattern: RecurringPattern) -> RecurringPattern:
        return self.insert_pattern(pattern)

    # ------------------------------------------------------------------
    # Games
    # ------------------------------------------------------------------

    def find_games_by_pattern_and_date(self, pattern_id: int, day: date) -> List[Game]:
        return list(self._read(select(Game).where(Game.pattern_id == pattern_id, Game.date == day)))

    def insert_games(self, games: List[Game]) -> List[int]:
        """Insert a batch in one transaction; all-or-nothing."""
        if not games:
            return []
        for game in games:
            self.session.add(game)
        self._commit()
        for game in games:
            self.session.refresh(game)
        return [game.id for game in games]

    def find_game_by_id(self, game_id: int) -> Optional[Game]:
        return self._get(Game, game_id)

    def find_games_by_series_and_date_range(self, series_id: int, start: date, end: date) -> List[Game]:
        return list(
            self._read(
                select(Game)
                .where(Game.series_id == series_id, Game.date >= start, Game.date <= end)
                .order_by(Game.date, Game.start_time, Game.id)
            )
        )

    def find_games_by_location_and_date(self, location: str, day: date) -> List[Game]:
        return list(
            self._read(
                select(Game).where(Game.location == location, Game.date == day).order_by(Game.start_time, Game.id)
            )
        )

    def find_attendance(self, game_id: int) -> List[GameAttendance]:
        return list(
            self._read(select(GameAttendance).where(GameAttendance.game_id == game_id).order_by(GameAttendance.user_id))
        )

    # ------------------------------------------------------------------
    # Availability
    # ------------------------------------------------------------------

    def find_availability(self, user_ids: Iterable[int], start: date, end: date) -> List[PlayerAvailability]:
        user_ids = sorted(set(user_ids))
        if not user_ids:
            return []
        return list(
            self._read(
                select(PlayerAvailability)
                .where(
                    PlayerAvailability.user_id.in_(user_ids),
                    PlayerAvailability.date >= start,
                    PlayerAvailability.date <= end,
                )
                .order_by(PlayerAvailability.date, PlayerAvailability.time_slot, PlayerAvailability.user_id)
            )
        )

    def find_availability_record(self, user_id: int, day: date, time_slot: str) -> Optional[PlayerAvailability]:
        rows = self._read(
            select(PlayerAvailability).where(
                PlayerAvailability.user_id == user_id,
                PlayerAvailability.date == day,
                PlayerAvailability.time_slot == time_slot,
            )
        )
        return rows[0] if rows else None

    def upsert_availability(self, record: PlayerAvailability) -> PlayerAvailability:
        existing = self.find_availability_record(record.user_id, record.date, record.time_slot)
        if existing is None:
            self.session.add(record)
            try:
                self.session.commit()
            except IntegrityError as exc:
                # A concurrent writer inserted the same (user, date, slot) first
                self.session.rollback()
                existing = self.find_availability_record(record.user_id, record.date, record.time_slot)
                if existing is None:
                    raise StorageError(f"Integrity error: {exc.orig}") from exc
                logger.info(
                    "Availability for user %s on %s %s inserted concurrently, updating",
                    record.user_id,
                    record.date,
                    record.time_slot,
                )
            except SQLAlchemyError as exc:
                self.session.rollback()
                raise StorageError(f"Storage failure: {exc}") from exc
            else:
                self.session.refresh(record)
                return record

        existing.status = record.status
        existing.notes = record.notes
        self.session.add(existing)
        self._commit()
        self.session.refresh(existing)
        return existing

    # ------------------------------------------------------------------
    # Series / teams
    # ------------------------------------------------------------------

    def find_series_by_id(self, series_id: int) -> Optional[GameSeries]:
        return self._get(GameSeries, series_id)

    def find_series_members(self, series_id: int) -> List[int]:
        rows = self._read(
            select(TeamMember.user_id)
            .join(SeriesTeam, SeriesTeam.team_id == TeamMember.team_id)
            .where(SeriesTeam.series_id == series_id)
        )
        return sorted(set(rows))

    def find_team(self, team_id: int) -> Optional[Team]:
        return self._get(Team, team_id)

    def find_team_members(self, team_id: int) -> List[int]:
        rows = self._read(select(TeamMember.user_id).where(TeamMember.team_id == team_id))
        return sorted(set(rows))
