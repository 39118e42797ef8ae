"""
Scheduling configuration.

Defaults mirror the availability UI; deployments can override the slot
catalog with SLOT_CATALOG="09:00-11:00,11:00-13:00,...".
"""

import os
from typing import List

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SLOT_CATALOG = [
    "09:00-11:00",
    "11:00-13:00",
    "14:00-16:00",
    "16:00-18:00",
    "18:00-20:00",
]

# Smart scheduling request defaults
DEFAULT_DURATION_MINUTES = 120
MIN_DURATION_MINUTES = 30
MAX_DURATION_MINUTES = 480

# Recurring pattern defaults
DEFAULT_INTERVAL = 1
MAX_INTERVAL = 52
DEFAULT_MIN_PLAYERS = 1
DEFAULT_MAX_PLAYERS = 20
MAX_PLAYERS_LIMIT = 100

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Storage
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./scheduling.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() in ("true", "1", "yes")


def get_slot_catalog() -> List[str]:
    """Return the canonical slot catalog, honouring SLOT_CATALOG if set."""
    raw = os.getenv("SLOT_CATALOG", "")
    slots = [s.strip() for s in raw.split(",") if s.strip()]
    return slots or list(DEFAULT_SLOT_CATALOG)
