"""
Slot Searcher

Scores the candidate slots of the catalog for one date and picks the best.

A slot qualifies when:
- its length covers the requested duration
- no game at one of the series' locations overlaps it
- the number of roster players marked 'available' is within [min_players, max_players]

Best slot = most 'available' players; ties go to the earliest start.
"""

import logging
from datetime import date, time
from typing import Iterable, List, Optional, Sequence

from pydantic import BaseModel

from team_scheduler.models.game import Game
from team_scheduler.models.player_availability import AvailabilityStatus
from team_scheduler.services.availability_index import AvailabilityIndex
from team_scheduler.services.conflict_detector import location_double_bookings
from team_scheduler.utils.time_slots import minutes_between, parse_time_slot

logger = logging.getLogger(__name__)


class OptimalSlot(BaseModel):
    time_slot: str
    start_time: time
    end_time: time
    available_players: int
    maybe_players: int
    unset_players: int


class SlotCandidate(BaseModel):
    """Evaluation of a single catalog slot (kept for diagnostics)"""

    time_slot: str
    start_time: time
    end_time: time
    available_players: int = 0
    maybe_players: int = 0
    unset_players: int = 0
    rejected_reason: Optional[str] = None

    @property
    def qualifies(self) -> bool:
        return self.rejected_reason is None


class SlotSearcher:
    def __init__(self, slot_catalog: Sequence[str]):
        self.slot_catalog = list(slot_catalog)

    def evaluate(
        self,
        day: date,
        duration_minutes: int,
        min_players: int,
        max_players: int,
        *,
        roster: Iterable[int],
        locations: Iterable[str],
        games: Iterable[Game],
        availability: AvailabilityIndex,
    ) -> List[SlotCandidate]:
        """Evaluate every catalog slot in catalog order."""
        roster = sorted(set(roster))
        locations = sorted(set(locations))
        games = list(games)
        candidates: List[SlotCandidate] = []

        for label in self.slot_catalog:
            start, end = parse_time_slot(label)
            summary = availability.summarize(roster, day, label)
            candidate = SlotCandidate(
                time_slot=label,
                start_time=start,
                end_time=end,
                available_players=summary["available"],
                maybe_players=summary["maybe"],
                unset_players=summary["not_set"],
            )

            if minutes_between(start, end) < duration_minutes:
                candidate.rejected_reason = "DURATION_TOO_SHORT"
            elif any(location_double_bookings(loc, day, start, end, games) for loc in locations):
                candidate.rejected_reason = "LOCATION_BOOKED"
            elif candidate.available_players < min_players:
                candidate.rejected_reason = "TOO_FEW_PLAYERS"
            elif candidate.available_players > max_players:
                candidate.rejected_reason = "TOO_MANY_PLAYERS"

            candidates.append(candidate)
        return candidates

    def find_optimal(
        self,
        day: date,
        duration_minutes: int,
        min_players: int,
        max_players: int,
        *,
        roster: Iterable[int],
        locations: Iterable[str],
        games: Iterable[Game],
        availability: AvailabilityIndex,
    ) -> Optional[OptimalSlot]:
        """Best qualifying slot, or None when nothing qualifies."""
        candidates = self.evaluate(
            day,
            duration_minutes,
            min_players,
            max_players,
            roster=roster,
            locations=locations,
            games=games,
            availability=availability,
        )
        qualifying = [c for c in candidates if c.qualifies]
        if not qualifying:
            logger.debug(
                "No slot on %s: %s",
                day,
                {c.time_slot: c.rejected_reason for c in candidates},
            )
            return None

        best = min(qualifying, key=lambda c: (-c.available_players, c.start_time))
        return OptimalSlot(
            time_slot=best.time_slot,
            start_time=best.start_time,
            end_time=best.end_time,
            available_players=best.available_players,
            maybe_players=best.maybe_players,
            unset_players=best.unset_players,
        )
