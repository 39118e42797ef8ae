import datetime as dt
from datetime import datetime, time
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from team_scheduler.models.game_attendance import GameAttendance
    from team_scheduler.models.game_series import GameSeries
    from team_scheduler.models.recurring_pattern import RecurringPattern


class Game(SQLModel, table=True):
    __table_args__ = (
        # At most one generated game per pattern and date (NULL pattern_id = manual game)
        SAUniqueConstraint("pattern_id", "date", name="uq_game_pattern_date"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    series_id: int = Field(foreign_key="gameseries.id", index=True)
    pattern_id: Optional[int] = Field(default=None, foreign_key="recurringpattern.id", index=True)
    name: str
    description: Optional[str] = None
    date: dt.date = Field(index=True)
    start_time: time
    end_time: time
    location: str
    min_players: int = Field(default=1)
    max_players: int = Field(default=20)
    status: str = Field(default="scheduled")  # scheduled | in_progress | completed | cancelled
    created_by: Optional[int] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    series: "GameSeries" = Relationship(back_populates="games")
    pattern: Optional["RecurringPattern"] = Relationship(back_populates="games")
    attendance: List["GameAttendance"] = Relationship(back_populates="game")
