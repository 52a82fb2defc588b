"""
Tests for the CognitiveEngine facade.
"""

from datetime import timedelta

from cognitive_os.config import Settings
from cognitive_os.engine import CognitiveEngine
from cognitive_os.tracker import Err, Ok, TrialValidationError, UsageError


class TestEngineSessions:
    """Tests for the session operations."""

    def test_full_session(self, engine, clock, make_trial):
        """Test start, record and end through the facade."""
        handle = engine.start_session("music_theory")
        for correct in (True, True, False):
            clock.advance(seconds=4)
            assert engine.record_trial(handle, make_trial(correct=correct))
        result = engine.end_session(handle)

        assert result.summary.total_trials == 3
        assert result.summary.error_breakdown == {"miss": 1}
        assert engine.get_module_stats("music_theory").total_sessions == 1

    def test_handle_lookup(self, engine):
        """Test the session id resolves to the live handle."""
        handle = engine.start_session("symbol_memory")

        assert engine.get_handle(handle.session_id) == handle

        engine.end_session(handle)
        assert engine.get_handle(handle.session_id) is None

    def test_new_session_invalidates_old_handle(self, engine, clock):
        """Test only the latest session id resolves."""
        old = engine.start_session("symbol_memory")
        clock.advance(seconds=10)
        new = engine.start_session("morph_matrix")

        assert engine.get_handle(old.session_id) is None
        assert engine.get_handle(new.session_id) == new

    def test_game_result(self, engine):
        """Test a session-level result is recorded as one trial."""
        handle = engine.start_session("symbol_memory")

        result = engine.record_game_result(handle, {"accuracy": 90, "level": 5})

        assert isinstance(result, Ok)
        assert result.value.correct is True
        assert result.value.difficulty_rating == 1600
        assert engine.registry.get_skill("wm.visual").rating > 1500

    def test_invalid_game_result(self, engine):
        """Test a malformed result is a validation error."""
        handle = engine.start_session("symbol_memory")

        result = engine.record_game_result(handle, {"accuracy": "great"})

        assert isinstance(result, Err)
        assert isinstance(result.error, TrialValidationError)

    def test_game_result_without_session(self, engine):
        """Test a result with no session is a usage error."""
        result = engine.record_game_result(None, {"accuracy": 90})

        assert isinstance(result.error, UsageError)


class TestEngineQueries:
    """Tests for profile, planning and reset."""

    def test_profile_reflects_training(self, engine, make_trial):
        """Test trained skills move in the profile."""
        handle = engine.start_session("symbol_memory")
        engine.record_trial(handle, make_trial(correct=False))
        engine.end_session(handle)

        profile = engine.get_cognitive_profile()

        assert profile["weakest"][0]["id"] == "wm.visual"
        assert profile["weakest"][0]["rating"] == 1492

    def test_plan_uses_default_minutes(self, engine):
        """Test the configured duration is used when none is given."""
        plan = engine.compose_session()

        assert plan.requested_minutes == 20

    def test_plan_avoids_just_played_game(self, engine, clock, make_trial):
        """Test a game played moments ago is not recommended again."""
        handle = engine.start_session("symbol_memory")
        engine.record_trial(handle, make_trial(correct=False))
        engine.end_session(handle)
        clock.advance(minutes=5)

        plan = engine.compose_session(20)

        assert "symbol_memory" not in [i.game_id for i in plan.items]
        assert "Training Plan" in engine.explain_plan(plan)

    def test_reset_skills(self, engine, make_trial):
        """Test reset restores every rating."""
        handle = engine.start_session("symbol_memory")
        engine.record_trial(handle, make_trial())
        engine.reset_skills()

        assert all(s.rating == 1500 for s in engine.registry.all_skills())

    def test_recover(self, engine, scheduler, clock, make_trial):
        """Test recovery through the facade."""
        handle = engine.start_session("symbol_memory")
        engine.record_trial(handle, make_trial())
        scheduler.run_pending()

        restarted = CognitiveEngine(engine.registry, engine.store, clock=clock)

        assert restarted.pending_recoveries() == ["symbol_memory"]
        assert restarted.recover_session("symbol_memory").summary.total_trials == 1


class TestFromSettings:
    """Tests for building a database-backed engine."""

    def test_sqlite_engine_round_trip(self, tmp_path):
        """Test ratings and history persist across engine instances."""
        settings = Settings(database_url=f"sqlite:///{tmp_path / 'engine.db'}")

        first = CognitiveEngine.from_settings(settings)
        handle = first.start_session("symbol_memory")
        first.record_trial(handle, {"correct": True})
        first.end_session(handle)
        first.close()

        second = CognitiveEngine.from_settings(settings)

        assert second.registry.get_skill("wm.visual").rating == 1508
        assert len(second.tracker.get_session_history()) == 1
        second.close()

    def test_custom_registry_path(self, tmp_path):
        """Test a catalog file replaces the built-in one."""
        catalog = tmp_path / "catalog.json"
        catalog.write_text(
            '{"skills": [{"id": "s", "name": "S", "domain": "d"}],'
            ' "games": {"g": {"name": "G", "skills": ["s"]}}}'
        )
        settings = Settings(
            database_url=f"sqlite:///{tmp_path / 'custom.db'}",
            registry_path=str(catalog),
        )

        engine = CognitiveEngine.from_settings(settings)

        assert engine.registry.game_ids() == ["g"]
        engine.close()
