"""
Tests for trial validation and tagged results.
"""

import pytest
from pydantic import ValidationError

from cognitive_os.tracker import (
    Err,
    ErrorType,
    GameResult,
    Ok,
    TrialInput,
    TrialValidationError,
    UsageError,
    trial_from_game_result,
    validate_trial,
)


class TestValidateTrial:
    """Tests for validate_trial."""

    def test_minimal_trial(self):
        """Test only correctness is required."""
        result = validate_trial({"correct": True})

        assert isinstance(result, Ok)
        assert result.value.correct is True
        assert result.value.difficulty == {}

    def test_full_trial(self):
        """Test every field is parsed."""
        result = validate_trial({
            "correct": False,
            "game_id": "symbol_memory",
            "trial_number": 4,
            "error_type": "false_alarm",
            "reaction_time_ms": 640,
            "think_time_ms": 120.5,
            "difficulty": {"level": 3, "items": 6},
            "difficulty_rating": 1700,
            "score": 12,
        })

        assert result
        trial = result.value
        assert trial.error_type is ErrorType.FALSE_ALARM
        assert trial.difficulty == {"level": 3.0, "items": 6.0}
        assert trial.reaction_time_ms == 640

    def test_unknown_fields_ignored(self):
        """Test extra keys from games are dropped."""
        result = validate_trial({"correct": True, "combo": 3})

        assert result
        assert not hasattr(result.value, "combo")

    @pytest.mark.parametrize("payload", [
        {},
        {"correct": "yes"},
        {"correct": 1},
        {"correct": True, "reaction_time_ms": -5},
        {"correct": True, "reaction_time_ms": float("inf")},
        {"correct": True, "trial_number": 0},
        {"correct": True, "difficulty": {"level": "hard"}},
        {"correct": True, "difficulty_rating": 3000},
        {"correct": False, "error_type": "typo"},
    ])
    def test_rejected(self, payload):
        """Test malformed trials come back as validation errors."""
        result = validate_trial(payload)

        assert isinstance(result, Err)
        assert not result
        assert isinstance(result.error, TrialValidationError)
        assert result.error.kind == "validation"
        assert result.error.errors

    def test_error_type_on_correct_trial(self):
        """Test a correct trial cannot carry an error type."""
        result = validate_trial({"correct": True, "error_type": "miss"})

        assert not result
        assert "error_type" in result.error.errors[0]["message"]

    def test_non_object_payload(self):
        """Test non-dict input is rejected without raising."""
        result = validate_trial(["correct"])

        assert not result
        assert "expected an object" in result.error.message

    def test_error_fields_named(self):
        """Test the message names the offending fields."""
        result = validate_trial({"correct": True, "reaction_time_ms": -1})

        assert result.error.errors[0]["field"] == "reaction_time_ms"
        assert "reaction_time_ms" in result.error.message

    def test_model_instance_passes_through(self):
        """Test an already-validated model is accepted."""
        trial = TrialInput(correct=True)

        assert validate_trial(trial).value is trial


class TestTaggedResults:
    """Tests for Ok/Err and error payloads."""

    def test_truthiness(self):
        """Test Ok is truthy and Err falsy."""
        assert Ok(1)
        assert not Err(UsageError(code="x", message="y"))

    def test_usage_error_dict(self):
        """Test usage errors serialise with their kind."""
        error = UsageError(code="no_active_session", message="nothing running")

        assert error.to_dict() == {
            "kind": "usage",
            "code": "no_active_session",
            "message": "nothing running",
        }


class TestGameResultAdapter:
    """Tests for converting session-level results into trials."""

    def test_high_accuracy_is_correct(self):
        """Test accuracy above 75% counts as correct."""
        trial = trial_from_game_result({"accuracy": 80, "level": 4, "score": 900})

        assert trial["correct"] is True
        assert trial["difficulty"] == {"level": 4}
        assert trial["score"] == 900

    def test_threshold_is_exclusive(self):
        """Test exactly 75% is not correct."""
        assert trial_from_game_result({"accuracy": 75})["correct"] is False

    def test_without_level(self):
        """Test a missing level leaves difficulty empty."""
        trial = trial_from_game_result(GameResult(accuracy=90, avg_reaction_time=700))

        assert trial["difficulty"] == {}
        assert trial["reaction_time_ms"] == 700

    def test_converted_trial_validates(self):
        """Test adapter output passes trial validation."""
        assert validate_trial(trial_from_game_result({"accuracy": 50, "level": 2}))

    def test_invalid_result_raises(self):
        """Test out-of-range accuracy is a pydantic error."""
        with pytest.raises(ValidationError):
            trial_from_game_result({"accuracy": 150})
