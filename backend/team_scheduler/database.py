"""
Engine and session wiring for the scheduling tables.

The application engine is built from config.DATABASE_URL; tests build their
own engine and pass it to init_db().
"""

import logging
from pathlib import Path
from typing import Generator, Optional

from sqlalchemy import inspect
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, create_engine

from team_scheduler import config

logger = logging.getLogger(__name__)


def build_engine(url: str, echo: bool = False) -> Engine:
    """Create an engine; file-backed SQLite gets its parent directory created."""
    connect_args = {}
    if url.startswith("sqlite"):
        # Sessions are handed across FastAPI's threadpool
        connect_args["check_same_thread"] = False
        if ":memory:" not in url:
            Path(url.replace("sqlite:///", "", 1)).parent.mkdir(parents=True, exist_ok=True)
    return create_engine(url, echo=echo, connect_args=connect_args)


engine: Engine = build_engine(config.DATABASE_URL, echo=config.SQL_ECHO)


def get_session() -> Generator[Session, None, None]:
    """Get database session"""
    with Session(engine) as session:
        yield session


def init_db(bind: Optional[Engine] = None) -> None:
    """Create any missing scheduling tables on bind (the app engine by default)."""
    # Registers every table with SQLModel.metadata
    import team_scheduler.models  # noqa: F401

    bind = bind if bind is not None else engine
    SQLModel.metadata.create_all(bind)
    logger.debug("Tables present: %s", ", ".join(sorted(inspect(bind).get_table_names())))
