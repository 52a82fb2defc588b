"""
Session Analytics

Summary statistics for single sessions and aggregates across a
game's session history.
"""

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

import numpy as np

from .models import Session, SessionSummary, Trial

FATIGUE_ONSET = 15
FATIGUE_SPAN = 20
RECENT_SESSION_COUNT = 10


@dataclass
class RecentSessionStats:
    """Accuracy snapshot for one past session."""
    timestamp: datetime
    trials: int
    accuracy: float

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "trials": self.trials,
            "accuracy": self.accuracy,
        }


@dataclass
class ModuleStats:
    """Aggregate statistics for a game across stored sessions."""
    game_id: str
    total_sessions: int = 0
    total_trials: int = 0
    avg_accuracy: float = 0.0
    avg_reaction_time: float = 0.0
    recent_sessions: list[RecentSessionStats] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "game_id": self.game_id,
            "total_sessions": self.total_sessions,
            "total_trials": self.total_trials,
            "avg_accuracy": self.avg_accuracy,
            "avg_reaction_time": self.avg_reaction_time,
            "recent_sessions": [s.to_dict() for s in self.recent_sessions],
        }


def fatigue_index(trial_index: int) -> float:
    """
    Within-session fatigue estimate for a zero-based trial index.

    Zero up to the 15th trial, rising linearly to 1 twenty trials later.
    """
    return min(1.0, max(0.0, (trial_index - FATIGUE_ONSET) / FATIGUE_SPAN))


def _accuracy(trials: list[Trial]) -> float:
    if not trials:
        return 0.0
    return sum(1 for t in trials if t.correct) / len(trials)


def _reaction_times(trials: list[Trial]) -> np.ndarray:
    return np.array(
        [t.reaction_time_ms for t in trials if t.reaction_time_ms is not None],
        dtype=float,
    )


def summarize_session(session: Session) -> SessionSummary:
    """Accuracy, reaction-time, error and fatigue statistics for a session."""
    trials = session.trials
    if not trials:
        return SessionSummary(skill_updates=len(session.skill_updates))

    correct = sum(1 for t in trials if t.correct)

    rts = _reaction_times(trials)
    avg_rt = float(np.mean(rts)) if rts.size else 0.0
    rt_variance = float(np.var(rts)) if rts.size else 0.0

    # Incorrect trials without a reported error type are not broken down
    errors = Counter(t.error_type for t in trials if not t.correct and t.error_type)

    # Positive dropoff means accuracy fell in the second half
    if len(trials) >= 2:
        half = len(trials) // 2
        dropoff = _accuracy(trials[:half]) - _accuracy(trials[half:])
    else:
        dropoff = 0.0

    return SessionSummary(
        total_trials=len(trials),
        correct_count=correct,
        accuracy=correct / len(trials),
        avg_reaction_time=round(avg_rt, 1),
        rt_variance=round(rt_variance, 1),
        error_breakdown=dict(errors),
        fatigue_dropoff=round(dropoff, 2),
        skill_updates=len(session.skill_updates),
    )


def module_stats(game_id: str, sessions: list[Session]) -> ModuleStats:
    """Aggregate a game's stored sessions (oldest first)."""
    if not sessions:
        return ModuleStats(game_id=game_id)

    all_trials = [t for s in sessions for t in s.trials]
    rts = _reaction_times(all_trials)

    return ModuleStats(
        game_id=game_id,
        total_sessions=len(sessions),
        total_trials=len(all_trials),
        avg_accuracy=_accuracy(all_trials),
        avg_reaction_time=float(np.mean(rts)) if rts.size else 0.0,
        recent_sessions=[
            RecentSessionStats(
                timestamp=s.start_time,
                trials=len(s.trials),
                accuracy=s.accuracy,
            )
            for s in sessions[-RECENT_SESSION_COUNT:]
        ],
    )


def daily_load(entries, today_start: datetime) -> tuple[int, int]:
    """Sessions and trials completed since today_start."""
    todays = [e for e in entries if e.timestamp >= today_start]
    return len(todays), sum(e.trial_count for e in todays)


def last_played(entries) -> dict[str, datetime]:
    """Most recent start time per game."""
    latest: dict[str, datetime] = {}
    for entry in entries:
        current: Optional[datetime] = latest.get(entry.game_id)
        if current is None or entry.timestamp > current:
            latest[entry.game_id] = entry.timestamp
    return latest
