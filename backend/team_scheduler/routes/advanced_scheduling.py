"""
Advanced Scheduling API Routes

Thin adapter over SchedulingService:
- Recurring patterns (create, list, toggle, generate games)
- Player availability (upsert, range query)
- Conflict detection, optimal time slot, team availability summary

Authentication is an external collaborator; the acting user arrives in the
X-User-Id header.
"""

import logging
from datetime import date, datetime, time
from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from sqlmodel import Session

from team_scheduler import config
from team_scheduler.database import get_session
from team_scheduler.errors import InvalidRecurrenceRule, NotFound, StorageError
from team_scheduler.models.player_availability import AvailabilityStatus
from team_scheduler.models.recurring_pattern import Frequency
from team_scheduler.repository import SqlSchedulingRepository
from team_scheduler.services.scheduling_service import SchedulingService, TeamAvailabilitySummary
from team_scheduler.services.slot_searcher import OptimalSlot
from team_scheduler.utils.conflict_report import ConflictReport
from team_scheduler.utils.time_slots import parse_time_slot

router = APIRouter()
logger = logging.getLogger(__name__)


def get_scheduling_service(session: Session = Depends(get_session)) -> SchedulingService:
    return SchedulingService(SqlSchedulingRepository(session))


# ============================================================================
# Request/Response Models
# ============================================================================


class RecurringPatternCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=1000)
    frequency: Frequency
    interval: int = Field(default=config.DEFAULT_INTERVAL, ge=1, le=config.MAX_INTERVAL)
    day_of_week: Optional[int] = Field(default=None, ge=0, le=6)
    start_time: time
    end_time: time
    location: str = Field(min_length=1, max_length=255)
    min_players: int = Field(default=config.DEFAULT_MIN_PLAYERS, ge=1, le=config.MAX_PLAYERS_LIMIT)
    max_players: int = Field(default=config.DEFAULT_MAX_PLAYERS, ge=1, le=config.MAX_PLAYERS_LIMIT)
    start_date: date
    end_date: date


class RecurringPatternUpdate(BaseModel):
    is_active: bool


class RecurringPatternResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    series_id: int
    name: str
    description: Optional[str] = None
    frequency: Frequency
    interval: int
    day_of_week: Optional[int] = None
    start_time: time
    end_time: time
    location: str
    min_players: int
    max_players: int
    start_date: date
    end_date: date
    is_active: bool
    created_by: int
    created_at: datetime


class GenerateGamesRequest(BaseModel):
    start_date: date
    end_date: date


class GenerateGamesResponse(BaseModel):
    message: str
    generated_game_ids: List[int]
    pattern: RecurringPatternResponse


class AvailabilitySetRequest(BaseModel):
    date: date
    time_slot: str
    status: AvailabilityStatus
    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator("time_slot")
    @classmethod
    def validate_time_slot(cls, v):
        parse_time_slot(v)
        return v


class AvailabilityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    date: date
    time_slot: str
    status: AvailabilityStatus
    notes: Optional[str] = None


class AvailabilitySetResponse(BaseModel):
    message: str
    availability: AvailabilityResponse


class OptimalSlotRequest(BaseModel):
    date: date
    duration: int = Field(
        default=config.DEFAULT_DURATION_MINUTES, ge=config.MIN_DURATION_MINUTES, le=config.MAX_DURATION_MINUTES
    )
    min_players: int = Field(default=config.DEFAULT_MIN_PLAYERS, ge=1, le=config.MAX_PLAYERS_LIMIT)
    max_players: int = Field(default=config.DEFAULT_MAX_PLAYERS, ge=1, le=config.MAX_PLAYERS_LIMIT)

    @model_validator(mode="after")
    def validate_bounds(self):
        if self.min_players > self.max_players:
            raise ValueError("min_players cannot exceed max_players")
        return self


class OptimalSlotResponse(BaseModel):
    message: str
    optimal_slot: OptimalSlot


# ============================================================================
# Recurring Pattern Endpoints
# ============================================================================


@router.post(
    "/series/{series_id}/recurring-patterns",
    response_model=RecurringPatternResponse,
    status_code=201,
)
def create_recurring_pattern(
    series_id: int,
    data: RecurringPatternCreate,
    x_user_id: int = Header(...),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Create a recurring pattern for a series"""
    try:
        return service.create_recurring_pattern(series_id, created_by=x_user_id, **data.model_dump())
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)
    except InvalidRecurrenceRule as e:
        raise HTTPException(status_code=400, detail=e.message)


@router.get("/series/{series_id}/recurring-patterns", response_model=List[RecurringPatternResponse])
def get_recurring_patterns(series_id: int, service: SchedulingService = Depends(get_scheduling_service)):
    """Get all recurring patterns for a series (newest first)"""
    try:
        return service.list_recurring_patterns(series_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.patch("/recurring-patterns/{pattern_id}", response_model=RecurringPatternResponse)
def update_recurring_pattern(
    pattern_id: int,
    data: RecurringPatternUpdate,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Activate or deactivate a pattern"""
    try:
        return service.set_pattern_active(pattern_id, data.is_active)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("/recurring-patterns/{pattern_id}/generate-games", response_model=GenerateGamesResponse)
def generate_games_from_pattern(
    pattern_id: int,
    data: GenerateGamesRequest,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Expand a pattern into games over a window (idempotent)"""
    try:
        generated = service.generate_games_from_pattern(pattern_id, data.start_date, data.end_date)
        pattern = service.get_active_pattern(pattern_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)
    except InvalidRecurrenceRule as e:
        raise HTTPException(status_code=400, detail=e.message)
    except StorageError as e:
        logger.exception("Game generation failed for pattern %s", pattern_id)
        raise HTTPException(status_code=500, detail={"error": e.code, "message": e.message})

    return GenerateGamesResponse(
        message=f"{len(generated)} games generated successfully",
        generated_game_ids=generated,
        pattern=RecurringPatternResponse.model_validate(pattern),
    )


# ============================================================================
# Player Availability Endpoints
# ============================================================================


@router.post("/availability", response_model=AvailabilitySetResponse)
def set_player_availability(
    data: AvailabilitySetRequest,
    x_user_id: int = Header(...),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Record (or overwrite) the acting user's availability for a slot"""
    try:
        record = service.set_player_availability(x_user_id, data.date, data.time_slot, data.status, data.notes)
    except StorageError as e:
        logger.exception("Availability update failed for user %s", x_user_id)
        raise HTTPException(status_code=500, detail={"error": e.code, "message": e.message})
    return AvailabilitySetResponse(
        message="Availability updated successfully",
        availability=AvailabilityResponse.model_validate(record),
    )


@router.get("/availability/{user_id}", response_model=List[AvailabilityResponse])
def get_player_availability(
    user_id: int,
    start_date: date = Query(...),
    end_date: date = Query(...),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Get a user's availability between two dates (inclusive)"""
    if end_date < start_date:
        raise HTTPException(status_code=400, detail="end_date must not be before start_date")
    return service.get_player_availability(user_id, start_date, end_date)


# ============================================================================
# Conflicts / Smart Scheduling / Team Summary
# ============================================================================


@router.get("/games/{game_id}/conflicts", response_model=ConflictReport)
def detect_game_conflicts(game_id: int, service: SchedulingService = Depends(get_scheduling_service)):
    """Classify conflicts for a game"""
    try:
        return service.detect_conflicts(game_id)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)


@router.post("/series/{series_id}/optimal-time-slot", response_model=OptimalSlotResponse)
def find_optimal_time_slot(
    series_id: int,
    data: OptimalSlotRequest,
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Find the best catalog slot for a series on a date"""
    try:
        slot = service.find_optimal_time_slot(
            series_id, data.date, data.duration, data.min_players, data.max_players
        )
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)

    if slot is None:
        raise HTTPException(status_code=404, detail="No suitable time slot found")
    return OptimalSlotResponse(message="Optimal time slot found", optimal_slot=slot)


@router.get("/teams/{team_id}/availability-summary", response_model=TeamAvailabilitySummary)
def get_team_availability_summary(
    team_id: int,
    date: date = Query(...),
    service: SchedulingService = Depends(get_scheduling_service),
):
    """Per-slot availability counts for a team's members on a date"""
    try:
        return service.team_availability_summary(team_id, date)
    except NotFound as e:
        raise HTTPException(status_code=404, detail=e.message)
