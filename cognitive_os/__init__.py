"""
Cognitive OS

Skill ratings, session tracking and training-plan recommendations
for cognitive-training games.
"""

from .config import Settings
from .engine import CognitiveEngine
from .composer import SessionPlan, PlanItem, explain_plan
from .skills import SkillRegistry
from .tracker import Ok, Err, SessionHandle, SessionResult

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "CognitiveEngine",
    "SessionPlan",
    "PlanItem",
    "explain_plan",
    "SkillRegistry",
    "Ok",
    "Err",
    "SessionHandle",
    "SessionResult",
]
