"""
Skill Routes
"""

from typing import Optional

from fastapi import APIRouter, HTTPException

from ...rating.engine import skill_level
from ..schemas import SkillResponse
from ..state import get_engine

router = APIRouter()


def _skill_response(skill) -> SkillResponse:
    return SkillResponse(**skill.to_dict(), level=skill_level(skill.rating))


@router.get("")
async def list_skills(domain: Optional[str] = None):
    """List skills, optionally for one domain."""
    engine = get_engine()
    registry = engine.registry

    if domain:
        skills = registry.get_skills_by_domain(domain)
    else:
        skills = registry.all_skills()

    return {
        "skills": [_skill_response(s) for s in skills],
        "total": len(skills),
    }


@router.get("/{skill_id}")
async def get_skill(skill_id: str):
    """Get a skill and the games that train it."""
    engine = get_engine()
    registry = engine.registry

    if not registry.has_skill(skill_id):
        raise HTTPException(404, f"Skill '{skill_id}' not found")

    skill = registry.get_skill(skill_id)
    return {
        **_skill_response(skill).model_dump(),
        "games": registry.get_games_for_skill(skill_id),
    }
