"""
API Schemas

Pydantic models for request/response validation.
"""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


# ============ Session Schemas ============

class StartSessionRequest(BaseModel):
    """Request to start a game session."""
    game_id: str = Field(..., min_length=1, description="Game to play")


class SessionHandleResponse(BaseModel):
    """Handle for an active session."""
    session_id: str
    game_id: str
    start_time: datetime


class SessionHistoryResponse(BaseModel):
    """Index row of a finished session."""
    game_id: str
    timestamp: datetime
    duration_ms: int
    trial_count: int
    storage_key: str


# ============ Skill Schemas ============

class SkillResponse(BaseModel):
    """Skill with its current rating."""
    id: str
    name: str
    domain: str
    description: str = ""
    rating: float
    confidence: int
    level: str


class GameResponse(BaseModel):
    """Game and the skills it trains."""
    id: str
    name: str
    skills: list[str]
    intensity: str
    minutes: float


# ============ Plan Schemas ============

class PlanItemResponse(BaseModel):
    """One game in a training plan."""
    game_id: str
    game_name: str
    allocated_minutes: float
    targeted_skills: list[str]
    priority: str
    rationale: str


class PlanResponse(BaseModel):
    """Recommended training session."""
    requested_minutes: float
    total_minutes: float
    items: list[PlanItemResponse]
    focus_skills: list[dict]
    fatigue_level: float
    sessions_today: int
    trials_today: int
    fatigued: bool
    relaxed_recency: bool
    reasoning: list[str]
    explanation: Optional[str] = None


# ============ Health ============

class HealthResponse(BaseModel):
    """Service health."""
    status: str
    database: bool
    skills_loaded: int
    games_loaded: int
    active_session: Optional[str] = None
