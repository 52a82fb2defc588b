"""
Session Composer

Recommends a time-boxed training plan from current skill ratings and
recent activity: most of the time goes to games that train the weakest
skills, the rest to a game that has not been played recently.
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Optional
import logging
import math

from ..rating.engine import RatingEngine, skill_level
from ..skills.registry import GameInfo, Skill
from ..tracker.analytics import daily_load, last_played
from ..tracker.performance import PerformanceTracker

logger = logging.getLogger(__name__)

INTENSITY_ORDER = {"low": 0, "medium": 1, "high": 2}


@dataclass
class PlanItem:
    """One recommended game in a plan."""
    game_id: str
    game_name: str
    allocated_minutes: float
    targeted_skills: list[str]
    priority: str  # "focus" or "variety"
    rationale: str

    def to_dict(self) -> dict:
        return {
            "game_id": self.game_id,
            "game_name": self.game_name,
            "allocated_minutes": self.allocated_minutes,
            "targeted_skills": list(self.targeted_skills),
            "priority": self.priority,
            "rationale": self.rationale,
        }


@dataclass
class SessionPlan:
    """A recommended training block."""
    requested_minutes: float
    total_minutes: float
    items: list[PlanItem] = field(default_factory=list)
    focus_skills: list[dict] = field(default_factory=list)
    fatigue_level: float = 0.0
    sessions_today: int = 0
    trials_today: int = 0
    fatigued: bool = False
    relaxed_recency: bool = False
    reasoning: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "requested_minutes": self.requested_minutes,
            "total_minutes": self.total_minutes,
            "items": [i.to_dict() for i in self.items],
            "focus_skills": [dict(s) for s in self.focus_skills],
            "fatigue_level": self.fatigue_level,
            "sessions_today": self.sessions_today,
            "trials_today": self.trials_today,
            "fatigued": self.fatigued,
            "relaxed_recency": self.relaxed_recency,
            "reasoning": list(self.reasoning),
        }


@dataclass
class _Candidate:
    game: GameInfo
    targeted: list[Skill]
    best_rank: int


def _days_ago(now: datetime, then: datetime) -> int:
    return max(0, (now - then).days)


def _recency_text(now: datetime, played: Optional[datetime]) -> str:
    if played is None:
        return "never played"
    days = _days_ago(now, played)
    if days == 0:
        return "played today"
    if days == 1:
        return "played yesterday"
    return f"not played in {days} days"


class SessionComposer:
    """
    Builds training plans.

    Policy:
    - Focus on the weakest skills (deterministic tie order)
    - Skip games played within the recency window unless nothing is left
    - Shorter, lower-intensity plans after a heavy training day
    - Split time between focus and variety games
    """

    def __init__(
        self,
        rating_engine: RatingEngine,
        tracker: PerformanceTracker,
        weakest_count: int = 5,
        recent_days: int = 7,
        focus_share: float = 0.6,
        max_focus_games: int = 2,
        fatigue_session_threshold: int = 3,
        fatigue_trial_threshold: int = 100,
        fatigue_time_factor: float = 0.75,
        clock: Callable[[], datetime] = datetime.now,
    ):
        if fatigue_session_threshold < 1 or fatigue_trial_threshold < 1:
            raise ValueError("Fatigue thresholds must be positive")

        self.rating_engine = rating_engine
        self.registry = rating_engine.registry
        self.tracker = tracker
        self.weakest_count = weakest_count
        self.recent_days = recent_days
        self.focus_share = focus_share
        self.max_focus_games = max_focus_games
        self.fatigue_session_threshold = fatigue_session_threshold
        self.fatigue_trial_threshold = fatigue_trial_threshold
        self.fatigue_time_factor = fatigue_time_factor
        self.clock = clock

    # ============ Fatigue ============

    def estimate_fatigue(self, sessions_today: int, trials_today: int) -> float:
        """0 = fresh, 1 = at or beyond the daily threshold."""
        return min(1.0, max(
            sessions_today / self.fatigue_session_threshold,
            trials_today / self.fatigue_trial_threshold,
        ))

    def is_fatigued(self, sessions_today: int, trials_today: int) -> bool:
        return (
            sessions_today >= self.fatigue_session_threshold
            or trials_today >= self.fatigue_trial_threshold
        )

    # ============ Composition ============

    def compose_session(self, requested_minutes: float = 20.0) -> SessionPlan:
        """Compose a plan for the requested number of minutes."""
        if not isinstance(requested_minutes, (int, float)) or not math.isfinite(requested_minutes) \
                or requested_minutes <= 0:
            logger.warning("compose_session: invalid duration %r", requested_minutes)
            return SessionPlan(
                requested_minutes=0.0,
                total_minutes=0.0,
                reasoning=["No training time requested"],
            )

        now = self.clock()
        entries = self.tracker.get_session_history()
        played = last_played(entries)
        cutoff = now - timedelta(days=self.recent_days)
        recent = {game_id for game_id, when in played.items() if when >= cutoff}

        today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        sessions_today, trials_today = daily_load(entries, today_start)
        fatigued = self.is_fatigued(sessions_today, trials_today)

        total = float(requested_minutes)
        if fatigued:
            total *= self.fatigue_time_factor

        weak = self.rating_engine.get_weakest_skills(self.weakest_count)
        plan = SessionPlan(
            requested_minutes=float(requested_minutes),
            total_minutes=round(total, 1),
            focus_skills=[
                {
                    "id": s.id,
                    "name": s.name,
                    "rating": s.rating,
                    "level": skill_level(s.rating),
                }
                for s in weak
            ],
            fatigue_level=round(self.estimate_fatigue(sessions_today, trials_today), 2),
            sessions_today=sessions_today,
            trials_today=trials_today,
            fatigued=fatigued,
        )

        for skill in weak:
            if not self.registry.get_games_for_skill(skill.id):
                plan.reasoning.append(f"No game currently trains {skill.name}")

        # Focus games
        candidates = self._focus_candidates(weak, fatigued)
        fresh = [c for c in candidates if c.game.id not in recent]
        relaxed_focus = False
        if candidates and not fresh:
            if any(game_id not in recent for game_id in self.registry.game_ids()):
                plan.reasoning.append(
                    f"Every game for your weakest skills was played in the last "
                    f"{self.recent_days} days; training other skills today"
                )
            else:
                relaxed_focus = True
                fresh = sorted(candidates, key=lambda c: played.get(c.game.id, datetime.min))
                plan.reasoning.append(
                    f"Every game was played in the last {self.recent_days} days; "
                    f"recency exclusion relaxed"
                )

        max_focus = 1 if fatigued else self.max_focus_games
        focus = fresh[:max_focus]
        focus_ids = {c.game.id for c in focus}

        # Variety game; a recent one only when the plan would otherwise be empty
        variety, relaxed_variety = self._variety_candidate(
            focus_ids, recent, played, fatigued, allow_recent=not focus,
        )
        if relaxed_variety:
            plan.reasoning.append(
                f"Every other game was played in the last {self.recent_days} days; "
                f"picked the least recently played"
            )
        plan.relaxed_recency = relaxed_focus or relaxed_variety

        # Time allocation
        if focus and variety is not None:
            focus_minutes = total * self.focus_share / len(focus)
            variety_minutes = total * (1 - self.focus_share)
        elif focus:
            focus_minutes = total / len(focus)
            variety_minutes = 0.0
        else:
            focus_minutes = 0.0
            variety_minutes = total

        for candidate in focus:
            plan.items.append(PlanItem(
                game_id=candidate.game.id,
                game_name=candidate.game.name,
                allocated_minutes=round(focus_minutes, 1),
                targeted_skills=[s.id for s in candidate.targeted],
                priority="focus",
                rationale=self._focus_rationale(
                    candidate, weak, now, played.get(candidate.game.id),
                    relaxed_focus, fatigued,
                ),
            ))
            lead = candidate.targeted[0]
            plan.reasoning.append(f"Focus on {lead.name} (rating {lead.rating:.0f})")

        if variety is not None:
            plan.items.append(PlanItem(
                game_id=variety.id,
                game_name=variety.name,
                allocated_minutes=round(variety_minutes, 1),
                targeted_skills=list(variety.skill_ids),
                priority="variety",
                rationale=self._variety_rationale(
                    variety, now, played.get(variety.id), relaxed_variety, fatigued,
                ),
            ))
            plan.reasoning.append("Added a variety game for balanced training")

        if fatigued:
            plan.reasoning.append(
                f"High fatigue: {sessions_today} sessions and {trials_today} trials today; "
                f"plan shortened to {plan.total_minutes:g} minutes with lower-intensity games"
            )

        if not plan.items:
            plan.reasoning.append("No games available to recommend")
            logger.warning("compose_session produced an empty plan")

        return plan

    # ============ Candidate selection ============

    def _focus_candidates(self, weak: list[Skill], fatigued: bool) -> list[_Candidate]:
        """Games training at least one weak skill, best first."""
        rank = {s.id: i for i, s in enumerate(weak)}
        candidates = []
        for game_id in self.registry.game_ids():
            game = self.registry.get_game(game_id)
            targeted = sorted(
                (s for s in weak if s.id in game.skill_ids),
                key=lambda s: rank[s.id],
            )
            if targeted:
                candidates.append(_Candidate(
                    game=game,
                    targeted=targeted,
                    best_rank=rank[targeted[0].id],
                ))

        if fatigued:
            key = lambda c: (
                INTENSITY_ORDER.get(c.game.intensity, 1),
                -len(c.targeted),
                c.best_rank,
                c.game.minutes,
            )
        else:
            key = lambda c: (-len(c.targeted), c.best_rank)
        return sorted(candidates, key=key)

    def _variety_candidate(
        self,
        exclude: set[str],
        recent: set[str],
        played: dict[str, datetime],
        fatigued: bool,
        allow_recent: bool = True,
    ) -> tuple[Optional[GameInfo], bool]:
        """Least recently played game outside the focus set."""
        others = [
            self.registry.get_game(game_id)
            for game_id in self.registry.game_ids()
            if game_id not in exclude
        ]
        if not others:
            return None, False

        def key(game: GameInfo):
            # Never-played games sort first
            last = played.get(game.id, datetime.min)
            if fatigued:
                return (INTENSITY_ORDER.get(game.intensity, 1), game.minutes, last)
            return (last,)

        fresh = [g for g in others if g.id not in recent]
        if fresh:
            return sorted(fresh, key=key)[0], False
        if not allow_recent:
            return None, False
        return sorted(others, key=lambda g: played.get(g.id, datetime.min))[0], True

    # ============ Rationale ============

    def _focus_rationale(
        self,
        candidate: _Candidate,
        weak: list[Skill],
        now: datetime,
        played: Optional[datetime],
        relaxed: bool,
        fatigued: bool,
    ) -> str:
        lead = candidate.targeted[0]
        if candidate.best_rank == 0:
            parts = [f"lowest-rated skill {lead.name} ({lead.rating:.0f})"]
        else:
            parts = [
                f"weak skill {lead.name} ({lead.rating:.0f}, "
                f"#{candidate.best_rank + 1} of {len(weak)} weakest)"
            ]
        if len(candidate.targeted) > 1:
            parts.append("also trains " + ", ".join(s.name for s in candidate.targeted[1:]))

        recency = _recency_text(now, played)
        if relaxed:
            recency += f" (all candidates played within {self.recent_days} days)"
        parts.append(recency)

        if fatigued:
            parts.append(f"{candidate.game.intensity}-intensity pick for a tiring day")
        return "; ".join(parts)

    def _variety_rationale(
        self,
        game: GameInfo,
        now: datetime,
        played: Optional[datetime],
        relaxed: bool,
        fatigued: bool,
    ) -> str:
        names = [s.name for s in self.registry.get_module_skills(game.id)]
        parts = ["variety: trains " + ", ".join(names)]

        recency = _recency_text(now, played)
        if relaxed:
            recency += " (least recently played)"
        parts.append(recency)

        if fatigued:
            parts.append(f"{game.intensity}-intensity pick for a tiring day")
        return "; ".join(parts)


def explain_plan(plan: Optional[SessionPlan]) -> str:
    """Markdown explanation of a plan."""
    if plan is None:
        return "No session plan available"

    lines = [f"**Recommended {plan.total_minutes:g}-Minute Training Session**", ""]

    lines.append("**Focus Areas:**")
    for skill in plan.focus_skills[:2]:
        lines.append(f"- {skill['name']} ({skill['level']} - Rating: {skill['rating']:.0f})")

    lines += ["", "**Training Plan:**"]
    if not plan.items:
        lines.append("Nothing to recommend right now.")
    for idx, item in enumerate(plan.items, start=1):
        lines.append(f"{idx}. {item.game_name} ({item.allocated_minutes:g} min)")
        lines.append(f"   -> {item.rationale}")

    if plan.fatigue_level > 0.3:
        lines += ["", f"**Note:** Fatigue level: {round(plan.fatigue_level * 100)}%"]

    lines += ["", "**Why this plan?**"]
    for reason in plan.reasoning:
        lines.append(f"- {reason}")

    return "\n".join(lines) + "\n"
