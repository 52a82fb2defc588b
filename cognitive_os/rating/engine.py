"""
Rating Engine

Elo-style skill ratings updated from trial outcomes.

Each skill carries a rating (800-2400) and a confidence count. The
K-factor shrinks as confidence grows, so well-measured skills move
slowly while new ones converge quickly.
"""

from dataclasses import dataclass, asdict
from typing import Mapping, Optional
import logging
import math
import threading

from ..db.store import KeyValueStore, StorageError
from ..skills.registry import Skill, SkillRegistry

logger = logging.getLogger(__name__)

MIN_RATING = 800
MAX_RATING = 2400
BASE_DIFFICULTY = 1500
BASE_K = 32
SKILL_GRAPH_KEY = "skill_graph"

SKILL_LEVELS = [
    (1200, "Novice"),
    (1400, "Intermediate"),
    (1600, "Proficient"),
    (1800, "Advanced"),
]


@dataclass
class RatingOutcome:
    """What the engine needs to know about a trial."""
    correct: bool
    difficulty_rating: Optional[float] = None
    reaction_time_ms: Optional[float] = None


@dataclass
class RatingUpdateResult:
    """Result of one skill update."""
    skill_id: str
    old_rating: float
    new_rating: float
    delta: float
    expected: float
    actual: int

    def to_dict(self) -> dict:
        return asdict(self)


def clamp_rating(rating: float) -> float:
    return max(MIN_RATING, min(MAX_RATING, rating))


def k_factor(confidence: int) -> float:
    """K = 32 * 100 / (confidence + 100)."""
    return BASE_K * (100 / (confidence + 100))


def expected_score(rating: float, difficulty_rating: float) -> float:
    """Logistic probability of success against an item of the given difficulty."""
    return 1 / (1 + 10 ** ((difficulty_rating - rating) / 400))


def estimate_difficulty_rating(difficulty: Optional[Mapping[str, object]]) -> float:
    """
    Map raw difficulty parameters onto the rating scale.

    Averages the numeric parameter values and maps 0-10 linearly onto
    800-2400. Booleans, non-numeric and non-finite values are ignored;
    no usable values gives the base difficulty.
    """
    if not difficulty:
        return BASE_DIFFICULTY

    values = [
        float(v)
        for v in difficulty.values()
        if isinstance(v, (int, float)) and not isinstance(v, bool) and math.isfinite(v)
    ]
    if not values:
        return BASE_DIFFICULTY

    avg = sum(values) / len(values)
    avg = max(0.0, min(10.0, avg))
    return MIN_RATING + (avg / 10) * (MAX_RATING - MIN_RATING)


def skill_level(rating: float) -> str:
    """Label for a rating band."""
    for upper, label in SKILL_LEVELS:
        if rating < upper:
            return label
    return "Expert"


class RatingEngine:
    """
    Maintains and updates skill ratings.

    Features:
    - Confidence-damped Elo updates per skill
    - Batch update of every skill a game trains
    - Write-through persistence of the skill graph snapshot
    - Weakest/strongest queries and a domain-grouped profile
    """

    def __init__(
        self,
        registry: SkillRegistry,
        store: KeyValueStore,
        storage_key: str = SKILL_GRAPH_KEY,
    ):
        self.registry = registry
        self.store = store
        self.storage_key = storage_key
        self._lock = threading.RLock()
        self.load()

    # ============ Persistence ============

    def load(self) -> bool:
        """
        Merge stored ratings onto the catalog.

        Unknown stored ids are ignored so catalog changes never break
        startup. Returns False when nothing usable was loaded.
        """
        try:
            stored = self.store.get(self.storage_key)
        except StorageError as e:
            logger.warning("Failed to load skill ratings: %s", e)
            return False

        if not isinstance(stored, dict):
            return False

        loaded = 0
        with self._lock:
            for skill in self.registry.all_skills():
                entry = stored.get(skill.id)
                if not isinstance(entry, dict):
                    continue
                try:
                    rating = clamp_rating(float(entry["rating"]))
                    confidence = max(0, int(entry["confidence"]))
                except (KeyError, TypeError, ValueError):
                    logger.warning("Ignoring malformed stored rating for %s", skill.id)
                    continue
                skill.rating = rating
                skill.confidence = confidence
                loaded += 1

        logger.info("Loaded ratings for %d skills", loaded)
        return loaded > 0

    def save(self) -> bool:
        """Persist the skill graph snapshot. Storage failures are logged, not raised."""
        snapshot = {
            skill.id: {"rating": skill.rating, "confidence": skill.confidence}
            for skill in self.registry.all_skills()
        }
        try:
            self.store.set(self.storage_key, snapshot)
            return True
        except StorageError as e:
            logger.warning("Failed to save skill ratings: %s", e)
            return False

    # ============ Updates ============

    def update_skill_rating(
        self,
        skill_id: str,
        outcome: RatingOutcome,
    ) -> Optional[RatingUpdateResult]:
        """Apply one Elo update to a skill and persist it."""
        skill = self.registry.get_skill(skill_id)
        if skill is None:
            return None

        difficulty = (
            outcome.difficulty_rating
            if outcome.difficulty_rating is not None
            else BASE_DIFFICULTY
        )

        with self._lock:
            old_rating = skill.rating
            k = k_factor(skill.confidence)
            expected = expected_score(old_rating, difficulty)
            actual = 1 if outcome.correct else 0
            delta = k * (actual - expected)

            skill.rating = clamp_rating(old_rating + delta)
            skill.confidence += 1
            self.save()

        return RatingUpdateResult(
            skill_id=skill_id,
            old_rating=old_rating,
            new_rating=skill.rating,
            delta=delta,
            expected=expected,
            actual=actual,
        )

    def update_module_skills(
        self,
        game_id: str,
        outcome: RatingOutcome,
    ) -> list[RatingUpdateResult]:
        """Update every skill the game trains, independently."""
        skills = self.registry.get_module_skills(game_id)
        results = []
        for skill in skills:
            result = self.update_skill_rating(skill.id, outcome)
            if result is not None:
                results.append(result)
        return results

    def reset_skills(self):
        """Restore every skill to the default rating and confidence."""
        with self._lock:
            for skill in self.registry.all_skills():
                skill.reset()
            self.save()
        logger.info("All skills reset to default")

    # ============ Queries ============

    def get_weakest_skills(self, count: int = 5) -> list[Skill]:
        """Lowest-rated skills; ties keep catalog order."""
        skills = self.registry.all_skills()
        return sorted(skills, key=lambda s: s.rating)[:max(0, count)]

    def get_strongest_skills(self, count: int = 5) -> list[Skill]:
        """Highest-rated skills; ties keep catalog order."""
        skills = self.registry.all_skills()
        return sorted(skills, key=lambda s: -s.rating)[:max(0, count)]

    def get_cognitive_profile(self) -> dict:
        """Ratings grouped by domain, overall average, top and bottom three."""
        skills = self.registry.all_skills()

        domains = {}
        for domain in self.registry.domains():
            members = [s for s in skills if s.domain == domain]
            domains[domain] = {
                "name": domain,
                "skills": [self._skill_view(s) for s in members],
                "avg_rating": sum(s.rating for s in members) / len(members),
            }

        overall = sum(s.rating for s in skills) / len(skills) if skills else 0.0

        return {
            "domains": domains,
            "overall_rating": overall,
            "overall_level": skill_level(overall),
            "weakest": [self._skill_view(s) for s in self.get_weakest_skills(3)],
            "strongest": [self._skill_view(s) for s in self.get_strongest_skills(3)],
        }

    @staticmethod
    def _skill_view(skill: Skill) -> dict:
        view = skill.to_dict()
        view["level"] = skill_level(skill.rating)
        return view
