"""
Rating Module

Elo-style skill rating and confidence model.
"""

from .engine import (
    RatingEngine,
    RatingOutcome,
    RatingUpdateResult,
    clamp_rating,
    estimate_difficulty_rating,
    expected_score,
    k_factor,
    skill_level,
    MIN_RATING,
    MAX_RATING,
    BASE_DIFFICULTY,
    SKILL_GRAPH_KEY,
)

__all__ = [
    "RatingEngine",
    "RatingOutcome",
    "RatingUpdateResult",
    "clamp_rating",
    "estimate_difficulty_rating",
    "expected_score",
    "k_factor",
    "skill_level",
    "MIN_RATING",
    "MAX_RATING",
    "BASE_DIFFICULTY",
    "SKILL_GRAPH_KEY",
]
