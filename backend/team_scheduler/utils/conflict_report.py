"""
Conflict Report Response Models

Pydantic models shared by:
- ConflictDetector (engine output)
- Route handlers (advanced_scheduling.py)

Conflicts are computed on demand and never persisted.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class ConflictKind(str, Enum):
    location_double_booking = "location_double_booking"
    time_overlap = "time_overlap"
    player_unavailable = "player_unavailable"
    capacity_unmet = "capacity_unmet"


class ConflictSeverity(str, Enum):
    critical = "critical"
    high = "high"
    medium = "medium"


class Conflict(BaseModel):
    """A blocking conflict between a game and another game or a player"""

    kind: ConflictKind
    severity: ConflictSeverity
    game_id: int
    other_game_id: Optional[int] = None
    user_id: Optional[int] = None
    reason: str


class AvailabilityWarning(BaseModel):
    """Soft signal: an attendee answered 'maybe' for the game's slot"""

    game_id: int
    user_id: int
    reason: str


class ConflictReport(BaseModel):
    """All conflicts for one game"""

    game_id: int
    conflicts: List[Conflict]
    warnings: List[AvailabilityWarning]
    conflict_count: int
