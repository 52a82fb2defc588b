"""
Performance Tracker

Records rich performance signatures for each trial:
- Correctness and error types
- Reaction and think times
- Difficulty parameters and their rating-scale estimate
- Within-session fatigue

Each recorded trial updates the skills its game trains. Finished
sessions are persisted with a capped history index; the in-progress
session is snapshotted (debounced) for crash recovery.
"""

from datetime import datetime
from functools import partial
from typing import Any, Callable, Optional
import logging
import threading
import uuid

from ..db.store import KeyValueStore, StorageError
from ..rating.engine import RatingEngine, RatingOutcome, estimate_difficulty_rating
from .analytics import ModuleStats, fatigue_index, module_stats, summarize_session
from .debounce import Debouncer, Scheduler
from .history import SessionHistory
from .models import (
    Session,
    SessionHandle,
    SessionHistoryEntry,
    SessionResult,
    Trial,
)
from .validation import (
    Err,
    Ok,
    Result,
    TrialValidationError,
    UsageError,
    validate_trial,
)

logger = logging.getLogger(__name__)

SCRATCH_PREFIX = "session_temp:"


def scratch_key(game_id: str) -> str:
    return f"{SCRATCH_PREFIX}{game_id}"


class PerformanceTracker:
    """
    Session lifecycle: Idle -> Active -> Idle.

    Features:
    - One active session per tracker, addressed by an explicit handle
    - Trial validation before any state changes
    - Per-trial batch rating updates
    - Debounced crash-recovery snapshots
    - Capped, persisted session history
    """

    def __init__(
        self,
        rating_engine: RatingEngine,
        store: KeyValueStore,
        history_limit: int = 100,
        snapshot_delay: float = 1.0,
        scheduler: Optional[Scheduler] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.rating_engine = rating_engine
        self.registry = rating_engine.registry
        self.store = store
        self.clock = clock
        self.history = SessionHistory(store, max_entries=history_limit)
        self.debouncer = Debouncer(snapshot_delay, scheduler)

        self._lock = threading.RLock()
        self._active: Optional[Session] = None

    # ============ Session lifecycle ============

    @property
    def is_active(self) -> bool:
        return self._active is not None

    @property
    def current_handle(self) -> Optional[SessionHandle]:
        with self._lock:
            if self._active is None:
                return None
            return self._handle_for(self._active)

    def start_session(self, game_id: str) -> Optional[SessionHandle]:
        """
        Start a session for a game.

        A session that is still active is closed first: archived when it
        holds trials, discarded when empty. Its handle stops working.
        """
        if not self.registry.has_game(game_id):
            logger.warning("Cannot start session for unknown game: %s", game_id)
            return None

        with self._lock:
            stale = self._active
            if stale is not None:
                if stale.trials:
                    logger.warning(
                        "Session %s (%s) still active; archiving it before starting %s",
                        stale.session_id, stale.game_id, game_id,
                    )
                    self._finish(stale)
                else:
                    logger.warning(
                        "Discarding empty session %s (%s) before starting %s",
                        stale.session_id, stale.game_id, game_id,
                    )
                    self.debouncer.cancel()
                    self._remove_scratch(stale.game_id)
                self._active = None

            session = Session(
                session_id=uuid.uuid4().hex,
                game_id=game_id,
                start_time=self.clock(),
            )
            self._active = session

        logger.info("Started session %s: %s", session.session_id, game_id)
        return self._handle_for(session)

    def record_trial(self, handle: Optional[SessionHandle], data: Any) -> Result:
        """
        Validate, enrich and record a trial.

        Returns Ok(Trial) or Err(UsageError | TrialValidationError).
        """
        with self._lock:
            session = self._resolve(handle, "record_trial")
            if session is None:
                return Err(UsageError(
                    code="no_active_session",
                    message="record_trial called without a matching active session",
                ))

            validated = validate_trial(data)
            if not validated:
                logger.warning("Rejected trial for %s: %s", session.game_id, validated.error.message)
                return validated
            trial_input = validated.value

            if trial_input.game_id is not None and trial_input.game_id != session.game_id:
                error = TrialValidationError(
                    message=(
                        f"Trial game '{trial_input.game_id}' does not match "
                        f"session game '{session.game_id}'"
                    ),
                    errors=[{"field": "game_id", "message": "mismatch", "type": "value_error"}],
                )
                logger.warning(error.message)
                return Err(error)

            trial_index = len(session.trials)
            difficulty = dict(trial_input.difficulty)
            difficulty_rating = (
                trial_input.difficulty_rating
                if trial_input.difficulty_rating is not None
                else estimate_difficulty_rating(difficulty)
            )

            trial = Trial(
                timestamp=self.clock(),
                game_id=session.game_id,
                trial_number=trial_input.trial_number or trial_index + 1,
                correct=trial_input.correct,
                error_type=trial_input.error_type.value if trial_input.error_type else None,
                reaction_time_ms=trial_input.reaction_time_ms,
                think_time_ms=trial_input.think_time_ms,
                difficulty=difficulty,
                difficulty_rating=difficulty_rating,
                fatigue_index=fatigue_index(trial_index),
                score=trial_input.score,
            )
            session.trials.append(trial)

            updates = self.rating_engine.update_module_skills(
                session.game_id,
                RatingOutcome(
                    correct=trial.correct,
                    difficulty_rating=difficulty_rating,
                    reaction_time_ms=trial.reaction_time_ms,
                ),
            )
            session.skill_updates.extend(updates)

        self.debouncer.request(partial(self._write_snapshot, session.session_id))
        return Ok(trial)

    def end_session(self, handle: Optional[SessionHandle]) -> Optional[SessionResult]:
        """Close the active session, persist it and return its summary."""
        with self._lock:
            session = self._resolve(handle, "end_session")
            if session is None:
                return None
            result = self._finish(session)
            self._active = None
        return result

    # ============ Internals ============

    @staticmethod
    def _handle_for(session: Session) -> SessionHandle:
        return SessionHandle(
            session_id=session.session_id,
            game_id=session.game_id,
            start_time=session.start_time,
        )

    def _resolve(self, handle: Optional[SessionHandle], operation: str) -> Optional[Session]:
        if self._active is None:
            logger.warning("%s: no active session", operation)
            return None
        if handle is None or handle.session_id != self._active.session_id:
            logger.warning(
                "%s: handle %s does not match active session %s",
                operation,
                handle.session_id if handle else None,
                self._active.session_id,
            )
            return None
        return self._active

    def _finish(self, session: Session) -> SessionResult:
        """Summarise, persist and index a session."""
        self.debouncer.cancel()

        if session.end_time is None:
            session.end_time = self.clock()
        summary = summarize_session(session)

        self._persist(session)
        self._remove_scratch(session.game_id)

        logger.info(
            "Session ended: %s (%d trials, accuracy %.2f)",
            session.game_id, summary.total_trials, summary.accuracy,
        )
        return SessionResult(session=session, summary=summary)

    def _persist(self, session: Session):
        try:
            self.store.set(session.storage_key, session.to_dict())
        except StorageError as e:
            logger.warning("Failed to save session %s: %s", session.storage_key, e)
            return

        evicted = self.history.append(SessionHistoryEntry.for_session(session))
        for entry in evicted:
            logger.info("Evicted session %s from history", entry.storage_key)

    def _write_snapshot(self, session_id: str):
        # Write under the lock so end_session always removes the record last
        with self._lock:
            session = self._active
            if session is None or session.session_id != session_id:
                return
            try:
                self.store.set(scratch_key(session.game_id), session.to_dict())
            except StorageError as e:
                logger.warning("Failed to save session snapshot: %s", e)

    def _remove_scratch(self, game_id: str):
        try:
            self.store.remove(scratch_key(game_id))
        except StorageError as e:
            logger.warning("Failed to remove session snapshot for %s: %s", game_id, e)

    # ============ Recovery ============

    def pending_snapshots(self) -> list[str]:
        """Games with an unfinished session snapshot in the store."""
        try:
            keys = self.store.keys(SCRATCH_PREFIX)
        except StorageError as e:
            logger.warning("Failed to list session snapshots: %s", e)
            return []
        active_game = self._active.game_id if self._active else None
        return [
            k[len(SCRATCH_PREFIX):]
            for k in keys
            if k[len(SCRATCH_PREFIX):] != active_game
        ]

    def recover_session(self, game_id: str) -> Optional[SessionResult]:
        """
        Archive the last snapshot of an abandoned session.

        Best effort: trials recorded after the last debounced write are
        lost. Rating updates were already applied when the trials were
        recorded and are not replayed.
        """
        with self._lock:
            if self._active is not None and self._active.game_id == game_id:
                logger.warning("Cannot recover %s while its session is active", game_id)
                return None

            try:
                raw = self.store.get(scratch_key(game_id))
            except StorageError as e:
                logger.warning("Failed to load session snapshot for %s: %s", game_id, e)
                return None
            if raw is None:
                logger.warning("No session snapshot to recover for %s", game_id)
                return None

            try:
                session = Session.from_dict(raw)
            except (KeyError, TypeError, ValueError) as e:
                logger.warning("Discarding unreadable snapshot for %s: %s", game_id, e)
                self._remove_scratch(game_id)
                return None

            if self.history.contains(session.storage_key):
                logger.warning(
                    "Session %s for %s is already archived; dropping its snapshot",
                    session.session_id, game_id,
                )
                self._remove_scratch(game_id)
                return None

            session.end_time = session.trials[-1].timestamp if session.trials else session.start_time
            summary = summarize_session(session)
            self._persist(session)
            self._remove_scratch(game_id)

        logger.info("Recovered session %s: %s", session.session_id, game_id)
        return SessionResult(session=session, summary=summary)

    # ============ Queries ============

    def get_session_history(self, game_id: Optional[str] = None) -> list[SessionHistoryEntry]:
        return self.history.entries(game_id)

    def load_session(self, key: str) -> Optional[Session]:
        try:
            raw = self.store.get(key)
        except StorageError as e:
            logger.warning("Failed to load session %s: %s", key, e)
            return None
        if raw is None:
            return None
        try:
            return Session.from_dict(raw)
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Ignoring malformed session %s: %s", key, e)
            return None

    def get_module_stats(self, game_id: str) -> ModuleStats:
        """Aggregate statistics across a game's stored sessions."""
        entries = self.history.entries(game_id)
        if not entries and not self.registry.has_game(game_id):
            logger.warning("Unknown game: %s", game_id)

        sessions = []
        for entry in entries:
            session = self.load_session(entry.storage_key)
            if session is not None:
                sessions.append(session)
        return module_stats(game_id, sessions)

    def clear_all_sessions(self) -> int:
        """Delete every stored session and the history index."""
        with self._lock:
            count = self.history.clear()
        logger.info("Cleared %d stored sessions", count)
        return count
