"""
Skills Module

Skill catalog and game-to-skill mapping.
"""

from .catalog import DEFAULT_CATALOG
from .registry import (
    Skill,
    GameInfo,
    SkillRegistry,
    RegistryConfigError,
    DEFAULT_RATING,
    DEFAULT_CONFIDENCE,
)

__all__ = [
    "DEFAULT_CATALOG",
    "Skill",
    "GameInfo",
    "SkillRegistry",
    "RegistryConfigError",
    "DEFAULT_RATING",
    "DEFAULT_CONFIDENCE",
]
