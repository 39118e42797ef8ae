import datetime as dt
from datetime import datetime
from enum import Enum
from typing import Optional

from sqlalchemy import String
from sqlalchemy import UniqueConstraint as SAUniqueConstraint
from sqlmodel import Column, Field, SQLModel


class AvailabilityStatus(str, Enum):
    available = "available"
    unavailable = "unavailable"
    maybe = "maybe"


class PlayerAvailability(SQLModel, table=True):
    __table_args__ = (
        SAUniqueConstraint("user_id", "date", "time_slot", name="uq_availability_user_date_slot"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(index=True)
    date: dt.date = Field(index=True)
    time_slot: str  # Catalog label, e.g. "14:00-16:00"
    status: AvailabilityStatus = Field(sa_column=Column(String, nullable=False))
    notes: Optional[str] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow, sa_column_kwargs={"onupdate": datetime.utcnow})
