from datetime import date, datetime, time
from enum import Enum
from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import String
from sqlmodel import Column, Field, Relationship, SQLModel

if TYPE_CHECKING:
    from team_scheduler.models.game import Game
    from team_scheduler.models.game_series import GameSeries


class Frequency(str, Enum):
    daily = "daily"
    weekly = "weekly"
    monthly = "monthly"


class RecurringPattern(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    series_id: int = Field(foreign_key="gameseries.id", index=True)
    name: str
    description: Optional[str] = None

    # Recurrence rule
    frequency: Frequency = Field(sa_column=Column(String, nullable=False))
    interval: int = Field(default=1)  # Every N frequency units
    day_of_week: Optional[int] = Field(default=None)  # 0=Sunday … 6=Saturday, weekly only

    # Shape of each generated game
    start_time: time
    end_time: time
    location: str
    min_players: int = Field(default=1)
    max_players: int = Field(default=20)

    # Inclusive window
    start_date: date
    end_date: date

    is_active: bool = Field(default=True)
    created_by: int
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column_kwargs={"onupdate": datetime.utcnow})

    # Relationships
    series: "GameSeries" = Relationship(back_populates="patterns")
    games: List["Game"] = Relationship(back_populates="pattern")
