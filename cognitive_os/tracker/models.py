"""
Tracker Models

Trials, sessions, summaries and history index entries.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ..rating.engine import RatingUpdateResult


def to_millis(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _parse_time(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


@dataclass(frozen=True)
class Trial:
    """One scored player action; the enriched performance signature."""
    timestamp: datetime
    game_id: str
    trial_number: int
    correct: bool
    error_type: Optional[str] = None
    reaction_time_ms: Optional[float] = None
    think_time_ms: Optional[float] = None
    difficulty: dict = field(default_factory=dict)
    difficulty_rating: float = 1500.0
    fatigue_index: float = 0.0
    score: float = 0.0

    def to_dict(self) -> dict:
        return {
            "timestamp": self.timestamp.isoformat(),
            "game_id": self.game_id,
            "trial_number": self.trial_number,
            "correct": self.correct,
            "error_type": self.error_type,
            "reaction_time_ms": self.reaction_time_ms,
            "think_time_ms": self.think_time_ms,
            "difficulty": dict(self.difficulty),
            "difficulty_rating": self.difficulty_rating,
            "fatigue_index": self.fatigue_index,
            "score": self.score,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Trial":
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            game_id=data["game_id"],
            trial_number=data["trial_number"],
            correct=data["correct"],
            error_type=data.get("error_type"),
            reaction_time_ms=data.get("reaction_time_ms"),
            think_time_ms=data.get("think_time_ms"),
            difficulty=data.get("difficulty") or {},
            difficulty_rating=data.get("difficulty_rating", 1500.0),
            fatigue_index=data.get("fatigue_index", 0.0),
            score=data.get("score", 0.0),
        )


@dataclass
class Session:
    """A bounded sequence of trials for one game."""
    session_id: str
    game_id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    trials: list[Trial] = field(default_factory=list)
    skill_updates: list[RatingUpdateResult] = field(default_factory=list)

    @property
    def duration_ms(self) -> int:
        if self.end_time is None:
            return 0
        return int((self.end_time - self.start_time).total_seconds() * 1000)

    @property
    def storage_key(self) -> str:
        return f"session:{self.game_id}:{to_millis(self.start_time)}"

    @property
    def accuracy(self) -> float:
        if not self.trials:
            return 0.0
        return sum(1 for t in self.trials if t.correct) / len(self.trials)

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "game_id": self.game_id,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat() if self.end_time else None,
            "duration_ms": self.duration_ms,
            "trials": [t.to_dict() for t in self.trials],
            "skill_updates": [u.to_dict() for u in self.skill_updates],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Session":
        return cls(
            session_id=data["session_id"],
            game_id=data["game_id"],
            start_time=datetime.fromisoformat(data["start_time"]),
            end_time=_parse_time(data.get("end_time")),
            trials=[Trial.from_dict(t) for t in data.get("trials", [])],
            skill_updates=[RatingUpdateResult(**u) for u in data.get("skill_updates", [])],
        )


@dataclass(frozen=True)
class SessionHandle:
    """Token returned by start_session and passed to record_trial/end_session."""
    session_id: str
    game_id: str
    start_time: datetime

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "game_id": self.game_id,
            "start_time": self.start_time.isoformat(),
        }


@dataclass
class SessionSummary:
    """Summary statistics for a finished session."""
    total_trials: int = 0
    correct_count: int = 0
    accuracy: float = 0.0
    avg_reaction_time: float = 0.0
    rt_variance: float = 0.0
    error_breakdown: dict[str, int] = field(default_factory=dict)
    fatigue_dropoff: float = 0.0
    skill_updates: int = 0

    def to_dict(self) -> dict:
        return {
            "total_trials": self.total_trials,
            "correct_count": self.correct_count,
            "accuracy": self.accuracy,
            "avg_reaction_time": self.avg_reaction_time,
            "rt_variance": self.rt_variance,
            "error_breakdown": dict(self.error_breakdown),
            "fatigue_dropoff": self.fatigue_dropoff,
            "skill_updates": self.skill_updates,
        }


@dataclass
class SessionResult:
    """What end_session hands back to the game."""
    session: Session
    summary: SessionSummary

    def to_dict(self) -> dict:
        return {
            "session": self.session.to_dict(),
            "summary": self.summary.to_dict(),
        }


@dataclass(frozen=True)
class SessionHistoryEntry:
    """Lightweight index row for listing sessions without loading bodies."""
    game_id: str
    timestamp: datetime
    duration_ms: int
    trial_count: int
    storage_key: str

    def to_dict(self) -> dict:
        return {
            "game_id": self.game_id,
            "timestamp": self.timestamp.isoformat(),
            "duration_ms": self.duration_ms,
            "trial_count": self.trial_count,
            "storage_key": self.storage_key,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SessionHistoryEntry":
        return cls(
            game_id=data["game_id"],
            timestamp=datetime.fromisoformat(data["timestamp"]),
            duration_ms=data.get("duration_ms", 0),
            trial_count=data.get("trial_count", 0),
            storage_key=data["storage_key"],
        )

    @classmethod
    def for_session(cls, session: Session) -> "SessionHistoryEntry":
        return cls(
            game_id=session.game_id,
            timestamp=session.start_time,
            duration_ms=session.duration_ms,
            trial_count=len(session.trials),
            storage_key=session.storage_key,
        )
