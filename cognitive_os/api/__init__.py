"""
API Module

FastAPI server and routes.
"""

from .server import app
from .schemas import (
    StartSessionRequest,
    SessionHandleResponse,
    SessionHistoryResponse,
    SkillResponse,
    GameResponse,
    PlanItemResponse,
    PlanResponse,
    HealthResponse,
)

__all__ = [
    "app",
    "StartSessionRequest",
    "SessionHandleResponse",
    "SessionHistoryResponse",
    "SkillResponse",
    "GameResponse",
    "PlanItemResponse",
    "PlanResponse",
    "HealthResponse",
]
