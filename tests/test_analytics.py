"""
Tests for session analytics.
"""

from datetime import datetime, timedelta

import pytest
from cognitive_os.tracker import Session, SessionHistoryEntry, Trial, fatigue_index, summarize_session
from cognitive_os.tracker.analytics import daily_load, last_played, module_stats

START = datetime(2024, 3, 15, 10, 0, 0)


def make_session(outcomes, game_id="symbol_memory", start=START):
    """Session from (correct, reaction_time, error_type) tuples."""
    trials = [
        Trial(
            timestamp=start + timedelta(seconds=i),
            game_id=game_id,
            trial_number=i + 1,
            correct=correct,
            error_type=error_type,
            reaction_time_ms=rt,
        )
        for i, (correct, rt, error_type) in enumerate(outcomes)
    ]
    return Session(session_id=f"s-{start:%H%M}", game_id=game_id, start_time=start, trials=trials)


def entry(game_id, when, trials=10):
    return SessionHistoryEntry(
        game_id=game_id,
        timestamp=when,
        duration_ms=60_000,
        trial_count=trials,
        storage_key=f"session:{game_id}:{when:%Y%m%d%H%M}",
    )


class TestFatigueIndex:
    """Tests for within-session fatigue."""

    @pytest.mark.parametrize("index,expected", [
        (0, 0.0),
        (15, 0.0),
        (16, 0.05),
        (25, 0.5),
        (35, 1.0),
        (100, 1.0),
    ])
    def test_curve(self, index, expected):
        """Test the linear ramp between trials 15 and 35."""
        assert fatigue_index(index) == pytest.approx(expected)


class TestSummarizeSession:
    """Tests for per-session summaries."""

    def test_summary(self):
        """Test accuracy, RT statistics and error breakdown."""
        session = make_session([
            (True, 400, None),
            (True, 600, None),
            (False, None, "miss"),
            (False, 800, None),
        ])

        summary = summarize_session(session)

        assert summary.total_trials == 4
        assert summary.correct_count == 2
        assert summary.accuracy == 0.5
        assert summary.avg_reaction_time == 600.0
        assert summary.rt_variance == pytest.approx(26666.7)
        assert summary.error_breakdown == {"miss": 1}
        assert summary.fatigue_dropoff == 1.0

    def test_odd_trial_count_dropoff(self):
        """Test the extra trial falls in the second half."""
        session = make_session([
            (True, 500, None),
            (False, 500, "swap"),
            (True, 500, None),
        ])

        # First half [T] = 1.0, second half [F, T] = 0.5
        assert summarize_session(session).fatigue_dropoff == 0.5

    def test_improvement_is_negative_dropoff(self):
        """Test getting better over the session gives a negative dropoff."""
        session = make_session([
            (False, 500, "miss"),
            (True, 500, None),
        ])

        assert summarize_session(session).fatigue_dropoff == -1.0

    def test_single_trial(self):
        """Test one trial has no dropoff and zero variance."""
        summary = summarize_session(make_session([(True, 450, None)]))

        assert summary.fatigue_dropoff == 0.0
        assert summary.rt_variance == 0.0
        assert summary.avg_reaction_time == 450.0

    def test_no_reaction_times(self):
        """Test missing reaction times give zeroed RT stats."""
        summary = summarize_session(make_session([(True, None, None), (False, None, "miss")]))

        assert summary.avg_reaction_time == 0.0
        assert summary.rt_variance == 0.0

    def test_empty_session(self):
        """Test an empty session summarises to zeros."""
        summary = summarize_session(make_session([]))

        assert summary.total_trials == 0
        assert summary.accuracy == 0.0
        assert summary.error_breakdown == {}


class TestAggregates:
    """Tests for history aggregates."""

    def test_module_stats(self):
        """Test totals across sessions."""
        sessions = [
            make_session([(True, 400, None)] * 3),
            make_session([(False, 600, "miss")], start=START + timedelta(hours=1)),
        ]

        stats = module_stats("symbol_memory", sessions)

        assert stats.total_trials == 4
        assert stats.avg_accuracy == 0.75
        assert stats.avg_reaction_time == 450
        assert stats.to_dict()["recent_sessions"][1]["accuracy"] == 0.0

    def test_recent_sessions_limited(self):
        """Test only the last ten sessions are listed."""
        sessions = [
            make_session([(True, 400, None)], start=START + timedelta(hours=i))
            for i in range(12)
        ]

        stats = module_stats("symbol_memory", sessions)

        assert len(stats.recent_sessions) == 10
        assert stats.recent_sessions[0].timestamp == START + timedelta(hours=2)

    def test_daily_load(self):
        """Test only today's sessions count."""
        today = datetime(2024, 3, 15)
        entries = [
            entry("symbol_memory", today - timedelta(hours=2), trials=40),
            entry("symbol_memory", today + timedelta(hours=8), trials=20),
            entry("morph_matrix", today + timedelta(hours=9), trials=30),
        ]

        assert daily_load(entries, today) == (2, 50)

    def test_last_played(self):
        """Test the latest start time per game."""
        entries = [
            entry("symbol_memory", START),
            entry("symbol_memory", START + timedelta(days=1)),
            entry("morph_matrix", START - timedelta(days=3)),
        ]

        assert last_played(entries) == {
            "symbol_memory": START + timedelta(days=1),
            "morph_matrix": START - timedelta(days=3),
        }
