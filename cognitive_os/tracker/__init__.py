"""
Tracker Module

Session tracking, trial validation and performance analytics.
"""

from .models import (
    Trial,
    Session,
    SessionHandle,
    SessionSummary,
    SessionResult,
    SessionHistoryEntry,
)
from .validation import (
    ErrorType,
    TrialInput,
    GameResult,
    Ok,
    Err,
    UsageError,
    TrialValidationError,
    validate_trial,
    trial_from_game_result,
)
from .analytics import ModuleStats, RecentSessionStats, fatigue_index, summarize_session
from .debounce import Debouncer, Scheduler, ScheduledTask, ThreadingScheduler
from .history import SessionHistory
from .performance import PerformanceTracker

__all__ = [
    # Models
    "Trial",
    "Session",
    "SessionHandle",
    "SessionSummary",
    "SessionResult",
    "SessionHistoryEntry",
    # Validation
    "ErrorType",
    "TrialInput",
    "GameResult",
    "Ok",
    "Err",
    "UsageError",
    "TrialValidationError",
    "validate_trial",
    "trial_from_game_result",
    # Analytics
    "ModuleStats",
    "RecentSessionStats",
    "fatigue_index",
    "summarize_session",
    # Scheduling
    "Debouncer",
    "Scheduler",
    "ScheduledTask",
    "ThreadingScheduler",
    # Tracking
    "SessionHistory",
    "PerformanceTracker",
]
