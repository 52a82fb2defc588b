"""
Composer Module

Training-session recommendations from skill ratings and recent activity.
"""

from .planner import PlanItem, SessionPlan, SessionComposer, explain_plan

__all__ = [
    "PlanItem",
    "SessionPlan",
    "SessionComposer",
    "explain_plan",
]
