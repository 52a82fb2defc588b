"""
Profile Routes
"""

from fastapi import APIRouter

from ..state import get_engine

router = APIRouter()


@router.get("")
async def cognitive_profile():
    """Ratings grouped by domain with overall level."""
    engine = get_engine()
    return engine.get_cognitive_profile()


@router.post("/reset")
async def reset_skills():
    """Reset every skill to the default rating."""
    engine = get_engine()
    engine.reset_skills()
    return {"status": "reset", "skills": len(engine.registry.all_skills())}
