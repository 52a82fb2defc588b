"""
Cognitive Engine

Single entry point for games and the API:
Registry → Rating Engine → Performance Tracker → Session Composer
"""

from datetime import datetime
from typing import Any, Callable, Optional
import logging

from pydantic import ValidationError

from .composer.planner import SessionComposer, SessionPlan, explain_plan
from .config import Settings
from .db.session import DatabaseSession, init_db
from .db.store import KeyValueStore, SqlStore
from .rating.engine import RatingEngine
from .skills.registry import SkillRegistry
from .tracker.analytics import ModuleStats
from .tracker.debounce import Scheduler
from .tracker.models import SessionHandle, SessionResult
from .tracker.performance import PerformanceTracker
from .tracker.validation import (
    Err,
    Result,
    TrialValidationError,
    trial_from_game_result,
)

logger = logging.getLogger(__name__)


class CognitiveEngine:
    """
    Complete rating and recommendation system.

    Connects:
    - SkillRegistry (catalog and game mapping)
    - RatingEngine (per-skill Elo ratings)
    - PerformanceTracker (sessions, trials, history)
    - SessionComposer (training plans)
    """

    def __init__(
        self,
        registry: SkillRegistry,
        store: KeyValueStore,
        settings: Optional[Settings] = None,
        scheduler: Optional[Scheduler] = None,
        clock: Callable[[], datetime] = datetime.now,
        db: Optional[DatabaseSession] = None,
    ):
        self.settings = settings or Settings()
        self.registry = registry
        self.store = store
        self.db = db

        self.rating = RatingEngine(registry, store)
        self.tracker = PerformanceTracker(
            self.rating,
            store,
            history_limit=self.settings.history_limit,
            snapshot_delay=self.settings.snapshot_delay_seconds,
            scheduler=scheduler,
            clock=clock,
        )
        self.composer = SessionComposer(
            self.rating,
            self.tracker,
            weakest_count=self.settings.weakest_count,
            recent_days=self.settings.recent_days,
            focus_share=self.settings.focus_share,
            fatigue_session_threshold=self.settings.fatigue_session_threshold,
            fatigue_trial_threshold=self.settings.fatigue_trial_threshold,
            fatigue_time_factor=self.settings.fatigue_time_factor,
            clock=clock,
        )

        # session_id -> handle, for callers that only keep the id
        self._handles: dict[str, SessionHandle] = {}

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> "CognitiveEngine":
        """Build an engine backed by the configured database."""
        settings = settings or Settings.from_env()

        db = init_db(settings.database_url)
        if settings.registry_path:
            registry = SkillRegistry.from_file(settings.registry_path)
        else:
            registry = SkillRegistry.default()

        logger.info(
            "Engine ready: %d skills, %d games, database %s",
            len(registry.all_skills()), len(registry.game_ids()), settings.database_url,
        )
        return cls(registry, SqlStore(db), settings=settings, scheduler=scheduler, db=db)

    def close(self):
        """Write any pending snapshot and release the database."""
        self.tracker.debouncer.flush()
        if self.db is not None:
            self.db.dispose()

    # ============ Sessions ============

    def start_session(self, game_id: str) -> Optional[SessionHandle]:
        handle = self.tracker.start_session(game_id)
        if handle is not None:
            # Starting a session invalidates any previous handle
            self._handles.clear()
            self._handles[handle.session_id] = handle
        return handle

    def get_handle(self, session_id: str) -> Optional[SessionHandle]:
        return self._handles.get(session_id)

    def record_trial(self, handle: Optional[SessionHandle], data: Any) -> Result:
        return self.tracker.record_trial(handle, data)

    def record_game_result(self, handle: Optional[SessionHandle], result: Any) -> Result:
        """Record a session-level game result as a single trial."""
        try:
            trial = trial_from_game_result(result)
        except ValidationError as e:
            return Err(TrialValidationError.from_pydantic(e))
        return self.tracker.record_trial(handle, trial)

    def end_session(self, handle: Optional[SessionHandle]) -> Optional[SessionResult]:
        result = self.tracker.end_session(handle)
        if result is not None:
            self._handles.pop(result.session.session_id, None)
        return result

    def recover_session(self, game_id: str) -> Optional[SessionResult]:
        return self.tracker.recover_session(game_id)

    def pending_recoveries(self) -> list[str]:
        return self.tracker.pending_snapshots()

    # ============ Ratings ============

    def get_cognitive_profile(self) -> dict:
        return self.rating.get_cognitive_profile()

    def get_module_stats(self, game_id: str) -> ModuleStats:
        return self.tracker.get_module_stats(game_id)

    def reset_skills(self):
        self.rating.reset_skills()

    # ============ Planning ============

    def compose_session(self, requested_minutes: Optional[float] = None) -> SessionPlan:
        if requested_minutes is None:
            requested_minutes = self.settings.default_minutes
        return self.composer.compose_session(requested_minutes)

    def explain_plan(self, plan: Optional[SessionPlan]) -> str:
        return explain_plan(plan)
