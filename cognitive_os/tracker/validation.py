"""
Trial Validation

Boundary checks for caller-supplied trial data. Input is validated
before any session or rating state is touched; the outcome is a
tagged result (Ok / Err) rather than an exception.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, Optional, TypeVar, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    ValidationError,
    model_validator,
)

T = TypeVar("T")


class ErrorType(str, Enum):
    """Kinds of incorrect responses games report."""
    MISS = "miss"
    FALSE_ALARM = "false_alarm"
    SWAP = "swap"
    INTRUSION = "intrusion"
    WRONG_POSITION = "wrong_position"
    OTHER = "other"


class TrialInput(BaseModel):
    """Trial data as sent by a game."""
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    correct: StrictBool
    game_id: Optional[str] = Field(None, min_length=1)
    trial_number: Optional[int] = Field(None, ge=1)
    error_type: Optional[ErrorType] = None
    reaction_time_ms: Optional[float] = Field(None, ge=0)
    think_time_ms: Optional[float] = Field(None, ge=0)
    difficulty: dict[str, float] = Field(default_factory=dict)
    difficulty_rating: Optional[float] = Field(None, ge=800, le=2400)
    score: float = 0.0

    @model_validator(mode="after")
    def _error_type_only_when_incorrect(self):
        if self.correct and self.error_type is not None:
            raise ValueError("error_type is only allowed on incorrect trials")
        return self


class GameResult(BaseModel):
    """Session-level result reported by games that do not track trials."""
    model_config = ConfigDict(allow_inf_nan=False)

    accuracy: float = Field(..., ge=0, le=100)  # percent
    level: Optional[float] = Field(None, ge=0)
    score: float = 0.0
    avg_reaction_time: Optional[float] = Field(None, ge=0)


# ============ Tagged results ============

@dataclass(frozen=True)
class UsageError:
    """An operation called out of order or with an unknown id."""
    code: str
    message: str

    kind = "usage"

    def to_dict(self) -> dict:
        return {"kind": self.kind, "code": self.code, "message": self.message}


@dataclass(frozen=True)
class TrialValidationError:
    """Malformed trial input, rejected before mutating state."""
    message: str
    errors: list[dict] = field(default_factory=list)

    kind = "validation"

    @classmethod
    def from_pydantic(cls, exc: ValidationError) -> "TrialValidationError":
        errors = [
            {
                "field": ".".join(str(p) for p in err.get("loc", ())),
                "message": err.get("msg", ""),
                "type": err.get("type", ""),
            }
            for err in exc.errors()
        ]
        fields = ", ".join(e["field"] or "<root>" for e in errors)
        return cls(message=f"Invalid trial: {fields}", errors=errors)

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": self.message, "errors": list(self.errors)}


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    ok = True

    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    error: Union[UsageError, TrialValidationError]

    ok = False

    def __bool__(self) -> bool:
        return False


Result = Union[Ok, Err]


def validate_trial(data: Any) -> Result:
    """Validate raw trial data into a TrialInput."""
    if isinstance(data, TrialInput):
        return Ok(data)
    if not isinstance(data, dict):
        return Err(TrialValidationError(
            message=f"Invalid trial: expected an object, got {type(data).__name__}",
        ))
    try:
        return Ok(TrialInput.model_validate(data))
    except ValidationError as e:
        return Err(TrialValidationError.from_pydantic(e))


def trial_from_game_result(result: Union[GameResult, dict]) -> dict:
    """
    Convert a session-level game result into trial input.

    Accuracy above 75% counts as a correct trial; the level becomes
    the only difficulty parameter.
    """
    if not isinstance(result, GameResult):
        result = GameResult.model_validate(result)

    difficulty = {}
    if result.level is not None:
        difficulty["level"] = result.level

    return {
        "correct": result.accuracy > 75,
        "reaction_time_ms": result.avg_reaction_time,
        "difficulty": difficulty,
        "score": result.score,
    }
