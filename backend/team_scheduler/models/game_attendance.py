from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:
    from team_scheduler.models.game import Game


class GameAttendance(SQLModel, table=True):
    __table_args__ = (SAUniqueConstraint("game_id", "user_id", name="uq_attendance_game_user"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    game_id: int = Field(foreign_key="game.id", index=True)
    user_id: int = Field(index=True)
    status: str = Field(default="attending")  # attending | declined | maybe
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)

    # Relationships
    game: "Game" = Relationship(back_populates="attendance")
