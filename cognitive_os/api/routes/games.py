"""
Game Routes
"""

from fastapi import APIRouter, HTTPException

from ..schemas import GameResponse
from ..state import get_engine

router = APIRouter()


@router.get("", response_model=list[GameResponse])
async def list_games():
    """All games and the skills they train."""
    engine = get_engine()
    registry = engine.registry
    return [GameResponse(**registry.get_game(g).to_dict()) for g in registry.game_ids()]


@router.get("/{game_id}/stats")
async def game_stats(game_id: str):
    """Aggregate statistics across the game's stored sessions."""
    engine = get_engine()
    if not engine.registry.has_game(game_id):
        raise HTTPException(404, f"Game '{game_id}' not found")

    return engine.get_module_stats(game_id).to_dict()
