"""
FastAPI Server

HTTP surface for the rating and recommendation engine.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging

from ..config import Settings
from ..engine import CognitiveEngine
from .schemas import HealthResponse
from .state import state, get_state

from .routes import sessions, profile, games, plan, skills

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize app state on startup."""
    settings = Settings.from_env()
    engine = CognitiveEngine.from_settings(settings)

    pending = engine.pending_recoveries()
    if pending:
        logger.warning("Unfinished sessions available for recovery: %s", ", ".join(pending))

    # Store in state
    state["settings"] = settings
    state["engine"] = engine

    yield

    engine.close()
    state.clear()


# Create app
app = FastAPI(
    title="Cognitive OS",
    description="Skill ratings and training-session recommendations for cognitive games",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(sessions.router, prefix="/sessions", tags=["Sessions"])
app.include_router(profile.router, prefix="/profile", tags=["Profile"])
app.include_router(games.router, prefix="/games", tags=["Games"])
app.include_router(plan.router, prefix="/plan", tags=["Plan"])
app.include_router(skills.router, prefix="/skills", tags=["Skills"])


@app.get("/health", response_model=HealthResponse)
async def health():
    """Health check."""
    engine = get_state("engine")
    handle = engine.tracker.current_handle if engine else None
    return HealthResponse(
        status="healthy" if engine else "starting",
        database=bool(engine and engine.db and engine.db.healthcheck()),
        skills_loaded=len(engine.registry.all_skills()) if engine else 0,
        games_loaded=len(engine.registry.game_ids()) if engine else 0,
        active_session=handle.session_id if handle else None,
    )


@app.get("/")
async def root():
    """Root endpoint."""
    return {"name": "Cognitive OS", "docs": "/docs"}
