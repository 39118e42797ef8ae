import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from team_scheduler import __version__, config
from team_scheduler.database import init_db
from team_scheduler.logging_config import setup_logging
from team_scheduler.routes import advanced_scheduling

setup_logging(getattr(logging, config.LOG_LEVEL, logging.INFO))
logger = logging.getLogger(__name__)

app = FastAPI(title="Team Scheduling API", version=__version__)

_cors_origins = [
    "http://localhost:3000",
    "http://localhost:5173",
]
_extra = os.getenv("CORS_ORIGINS", "")
if _extra:
    _cors_origins.extend(o.strip() for o in _extra.split(",") if o.strip())

app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(advanced_scheduling.router, prefix="/api/advanced-scheduling", tags=["advanced-scheduling"])


@app.on_event("startup")
def on_startup():
    """Initialize database on startup"""
    init_db()
    logger.info("Database initialized; slot catalog: %s", ", ".join(config.get_slot_catalog()))


@app.get("/")
def root():
    return {"message": "Team Scheduling API", "version": __version__}


@app.get("/health")
def health():
    return {"status": "ok"}
