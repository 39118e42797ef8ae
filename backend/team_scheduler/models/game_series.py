from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from team_scheduler.models.game import Game
    from team_scheduler.models.recurring_pattern import RecurringPattern


class GameSeries(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    description: Optional[str] = None
    sport_type: Optional[str] = None
    created_by: int
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    games: List["Game"] = Relationship(back_populates="series")
    patterns: List["RecurringPattern"] = Relationship(back_populates="series")


class SeriesTeam(SQLModel, table=True):
    """Links a team's roster to a series."""

    __table_args__ = (SAUniqueConstraint("series_id", "team_id", name="uq_series_team"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    series_id: int = Field(foreign_key="gameseries.id", index=True)
    team_id: int = Field(foreign_key="team.id", index=True)
