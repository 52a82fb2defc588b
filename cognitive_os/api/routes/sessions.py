"""
Session Routes
"""

from typing import Any, Optional

from fastapi import APIRouter, Body, HTTPException

from ...tracker.validation import Err, UsageError
from ..schemas import StartSessionRequest, SessionHandleResponse, SessionHistoryResponse
from ..state import get_engine

router = APIRouter()


def _raise_for(result: Err):
    """Map a rejected call to an HTTP error: 409 for usage, 422 for bad data."""
    error = result.error
    status = 409 if isinstance(error, UsageError) else 422
    raise HTTPException(status, error.to_dict())


@router.post("", response_model=SessionHandleResponse)
async def start_session(request: StartSessionRequest):
    """Start a session; any session still active is closed first."""
    engine = get_engine()

    handle = engine.start_session(request.game_id)
    if handle is None:
        raise HTTPException(404, f"Game '{request.game_id}' not found")

    return SessionHandleResponse(**handle.to_dict())


@router.post("/{session_id}/trials")
async def record_trial(session_id: str, payload: Any = Body(...)):
    """Record one trial for the active session."""
    engine = get_engine()

    result = engine.record_trial(engine.get_handle(session_id), payload)
    if not result:
        _raise_for(result)

    return result.value.to_dict()


@router.post("/{session_id}/result")
async def record_game_result(session_id: str, payload: Any = Body(...)):
    """Record a session-level game result as a single trial."""
    engine = get_engine()

    result = engine.record_game_result(engine.get_handle(session_id), payload)
    if not result:
        _raise_for(result)

    return result.value.to_dict()


@router.post("/{session_id}/end")
async def end_session(session_id: str):
    """End the active session and return its summary."""
    engine = get_engine()

    result = engine.end_session(engine.get_handle(session_id))
    if result is None:
        raise HTTPException(409, UsageError(
            code="no_active_session",
            message=f"Session '{session_id}' is not active",
        ).to_dict())

    return result.to_dict()


@router.post("/recover/{game_id}")
async def recover_session(game_id: str):
    """Archive the snapshot of an abandoned session."""
    engine = get_engine()

    result = engine.recover_session(game_id)
    if result is None:
        raise HTTPException(404, f"No recoverable session for '{game_id}'")

    return result.to_dict()


@router.get("/pending")
async def pending_recoveries():
    """Games with an unfinished session snapshot."""
    engine = get_engine()
    return {"games": engine.pending_recoveries()}


@router.get("/history", response_model=list[SessionHistoryResponse])
async def session_history(game_id: Optional[str] = None):
    """Finished sessions, oldest first."""
    engine = get_engine()
    return [
        SessionHistoryResponse(**entry.to_dict())
        for entry in engine.tracker.get_session_history(game_id)
    ]
