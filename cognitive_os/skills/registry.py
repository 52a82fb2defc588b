"""
Skill Registry

Static catalog of cognitive skills and the mapping from game
identifiers to the skills each game trains.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional
import json
import logging

from .catalog import DEFAULT_CATALOG

logger = logging.getLogger(__name__)

DEFAULT_RATING = 1500
DEFAULT_CONFIDENCE = 100

INTENSITY_LEVELS = ("low", "medium", "high")


class RegistryConfigError(ValueError):
    """Raised when a catalog or game mapping is inconsistent."""


@dataclass
class Skill:
    """A named cognitive dimension tracked with an Elo-style rating."""
    id: str
    name: str
    domain: str
    description: str = ""
    rating: float = DEFAULT_RATING
    confidence: int = DEFAULT_CONFIDENCE

    def reset(self):
        self.rating = DEFAULT_RATING
        self.confidence = DEFAULT_CONFIDENCE

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "domain": self.domain,
            "description": self.description,
            "rating": self.rating,
            "confidence": self.confidence,
        }


@dataclass
class GameInfo:
    """A training game and the skills it exercises."""
    id: str
    name: str
    skill_ids: list[str] = field(default_factory=list)
    intensity: str = "medium"
    minutes: float = 5.0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "skills": list(self.skill_ids),
            "intensity": self.intensity,
            "minutes": self.minutes,
        }


class SkillRegistry:
    """
    Skill and game lookups.

    The catalog is injected configuration: new games or skills are
    added by supplying a different catalog, never by editing engine
    code. Lookups never raise for unknown ids; they log a warning
    and return an empty result.
    """

    def __init__(self, skills: Iterable[Skill], games: Iterable[GameInfo]):
        self._skills: dict[str, Skill] = {}
        for skill in skills:
            if skill.id in self._skills:
                raise RegistryConfigError(f"Duplicate skill id '{skill.id}'")
            self._skills[skill.id] = skill

        self._games: dict[str, GameInfo] = {}
        for game in games:
            if game.id in self._games:
                raise RegistryConfigError(f"Duplicate game id '{game.id}'")
            unknown = [sid for sid in game.skill_ids if sid not in self._skills]
            if unknown:
                raise RegistryConfigError(
                    f"Game '{game.id}' references unknown skills: {', '.join(unknown)}"
                )
            if not game.skill_ids:
                raise RegistryConfigError(f"Game '{game.id}' trains no skills")
            if len(set(game.skill_ids)) != len(game.skill_ids):
                raise RegistryConfigError(f"Game '{game.id}' lists a skill twice")
            if game.intensity not in INTENSITY_LEVELS:
                raise RegistryConfigError(
                    f"Game '{game.id}' has unknown intensity '{game.intensity}'"
                )
            self._games[game.id] = game

    # ============ Construction ============

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "SkillRegistry":
        """
        Build a registry from a catalog mapping.

        Expected shape:
            {
                "skills": [{"id", "name", "domain", "description"}, ...],
                "games": {game_id: {"name", "skills", "intensity", "minutes"}},
            }
        """
        try:
            skills = [
                Skill(
                    id=s["id"],
                    name=s["name"],
                    domain=s["domain"],
                    description=s.get("description", ""),
                )
                for s in config["skills"]
            ]
            games = [
                GameInfo(
                    id=game_id,
                    name=g.get("name", game_id),
                    skill_ids=list(g["skills"]),
                    intensity=g.get("intensity", "medium"),
                    minutes=float(g.get("minutes", 5.0)),
                )
                for game_id, g in config["games"].items()
            ]
        except (KeyError, TypeError, ValueError) as e:
            raise RegistryConfigError(f"Malformed catalog: {e}") from e
        return cls(skills, games)

    @classmethod
    def from_file(cls, path: str) -> "SkillRegistry":
        """Load a catalog from a JSON file."""
        try:
            config = json.loads(Path(path).read_text())
        except (OSError, ValueError) as e:
            raise RegistryConfigError(f"Cannot read catalog {path}: {e}") from e
        return cls.from_config(config)

    @classmethod
    def default(cls) -> "SkillRegistry":
        """Registry with the built-in catalog."""
        return cls.from_config(DEFAULT_CATALOG)

    # ============ Skill lookups ============

    def get_skill(self, skill_id: str) -> Optional[Skill]:
        skill = self._skills.get(skill_id)
        if skill is None:
            logger.warning("Unknown skill: %s", skill_id)
        return skill

    def has_skill(self, skill_id: str) -> bool:
        return skill_id in self._skills

    def all_skills(self) -> list[Skill]:
        """All skills in catalog order."""
        return list(self._skills.values())

    def domains(self) -> list[str]:
        """Domains in order of first appearance."""
        seen = []
        for skill in self._skills.values():
            if skill.domain not in seen:
                seen.append(skill.domain)
        return seen

    def get_skills_by_domain(self, domain: str) -> list[Skill]:
        skills = [s for s in self._skills.values() if s.domain == domain]
        if not skills:
            logger.warning("Unknown domain: %s", domain)
        return skills

    # ============ Game lookups ============

    def game_ids(self) -> list[str]:
        return list(self._games)

    def has_game(self, game_id: str) -> bool:
        return game_id in self._games

    def get_game(self, game_id: str) -> Optional[GameInfo]:
        game = self._games.get(game_id)
        if game is None:
            logger.warning("Unknown game: %s", game_id)
        return game

    def game_name(self, game_id: str) -> str:
        """Friendly game name, falling back to the id."""
        game = self._games.get(game_id)
        return game.name if game else game_id

    def get_module_skills(self, game_id: str) -> list[Skill]:
        """Skills trained by a game, in mapping order."""
        game = self.get_game(game_id)
        if game is None:
            return []
        return [self._skills[sid] for sid in game.skill_ids]

    def get_games_for_skill(self, skill_id: str) -> list[str]:
        """Games that train a skill, in catalog order."""
        if skill_id not in self._skills:
            logger.warning("Unknown skill: %s", skill_id)
            return []
        return [
            game_id
            for game_id, game in self._games.items()
            if skill_id in game.skill_ids
        ]

    def to_dict(self) -> dict:
        return {
            "skills": [s.to_dict() for s in self._skills.values()],
            "games": {gid: g.to_dict() for gid, g in self._games.items()},
        }
