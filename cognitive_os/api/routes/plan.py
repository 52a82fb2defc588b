"""
Training Plan Routes
"""

from typing import Optional

from fastapi import APIRouter, Query

from ..schemas import PlanResponse
from ..state import get_engine

router = APIRouter()


@router.get("", response_model=PlanResponse)
async def compose_plan(
    minutes: Optional[float] = Query(None, gt=0, le=240),
    explain: bool = True,
):
    """Recommend a training session for the available minutes."""
    engine = get_engine()

    plan = engine.compose_session(minutes)
    data = plan.to_dict()
    if explain:
        data["explanation"] = engine.explain_plan(plan)

    return PlanResponse(**data)
