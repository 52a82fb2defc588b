"""
Configuration

Engine settings read from the environment (and a .env file when present).
"""

from dataclasses import dataclass
from typing import Optional
import logging
import os

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

ENV_PREFIX = "COGNITIVE_OS_"


def _env(name: str, default: str) -> str:
    return os.getenv(ENV_PREFIX + name, default)


def _env_float(name: str, default: float) -> float:
    raw = _env(name, str(default))
    try:
        return float(raw)
    except ValueError:
        logger.warning("Invalid value %r for %s%s; using %s", raw, ENV_PREFIX, name, default)
        return default


def _env_int(name: str, default: int, minimum: Optional[int] = None) -> int:
    raw = _env(name, str(default))
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid value %r for %s%s; using %s", raw, ENV_PREFIX, name, default)
        return default
    if minimum is not None and value < minimum:
        logger.warning(
            "%s%s must be at least %d, got %d; using %s",
            ENV_PREFIX, name, minimum, value, default,
        )
        return default
    return value


@dataclass
class Settings:
    """Tunables for storage, tracking and session composition."""
    database_url: str = "sqlite:///cognitive_os.db"
    registry_path: Optional[str] = None  # JSON catalog; built-in catalog when unset

    # Tracking
    snapshot_delay_seconds: float = 1.0
    history_limit: int = 100

    # Composition
    weakest_count: int = 5
    recent_days: int = 7
    focus_share: float = 0.6
    fatigue_session_threshold: int = 3
    fatigue_trial_threshold: int = 100
    fatigue_time_factor: float = 0.75
    default_minutes: float = 20.0

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Build settings from COGNITIVE_OS_* variables (DATABASE_URL also honoured)."""
        if dotenv:
            load_dotenv()

        defaults = cls()
        return cls(
            database_url=os.getenv(
                ENV_PREFIX + "DATABASE_URL",
                os.getenv("DATABASE_URL", defaults.database_url),
            ),
            registry_path=_env("REGISTRY_PATH", "") or None,
            snapshot_delay_seconds=_env_float("SNAPSHOT_DELAY", defaults.snapshot_delay_seconds),
            history_limit=_env_int("HISTORY_LIMIT", defaults.history_limit),
            weakest_count=_env_int("WEAKEST_COUNT", defaults.weakest_count),
            recent_days=_env_int("RECENT_DAYS", defaults.recent_days),
            focus_share=_env_float("FOCUS_SHARE", defaults.focus_share),
            fatigue_session_threshold=_env_int(
                "FATIGUE_SESSIONS", defaults.fatigue_session_threshold, minimum=1
            ),
            fatigue_trial_threshold=_env_int(
                "FATIGUE_TRIALS", defaults.fatigue_trial_threshold, minimum=1
            ),
            fatigue_time_factor=_env_float("FATIGUE_TIME_FACTOR", defaults.fatigue_time_factor),
            default_minutes=_env_float("DEFAULT_MINUTES", defaults.default_minutes),
        )
