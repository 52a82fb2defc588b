#!/usr/bin/env python3
"""
Cognitive OS - Quick Start Script

Run this to exercise the full system against the configured database.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent))

from dotenv import load_dotenv
load_dotenv()


def setup_engine():
    """Initialize database and engine."""
    print("\n" + "="*60)
    print("1. SETTING UP ENGINE")
    print("="*60)

    try:
        from cognitive_os.config import Settings
        from cognitive_os.engine import CognitiveEngine

        settings = Settings.from_env(dotenv=False)
        engine = CognitiveEngine.from_settings(settings)
        print(f"✓ Database: {settings.database_url}")
        print(f"✓ Skills: {len(engine.registry.all_skills())}, games: {len(engine.registry.game_ids())}")
        return engine
    except Exception as e:
        print(f"❌ Engine setup failed: {e}")
        return None


def recover_sessions(engine):
    """Archive sessions left behind by a crash."""
    print("\n" + "="*60)
    print("2. RECOVERING UNFINISHED SESSIONS")
    print("="*60)

    pending = engine.pending_recoveries()
    if not pending:
        print("✓ Nothing to recover")
        return 0

    for game_id in pending:
        result = engine.recover_session(game_id)
        if result:
            print(f"  + {game_id}: {result.summary.total_trials} trials archived")
    return len(pending)


def play_demo_session(engine):
    """Play a short scripted session."""
    print("\n" + "="*60)
    print("3. PLAYING A DEMO SESSION")
    print("="*60)

    handle = engine.start_session("symbol_memory")
    if handle is None:
        print("❌ Could not start session")
        return None

    pattern = [True, True, False, True, True, False, True, True]
    for n, correct in enumerate(pattern, start=1):
        result = engine.record_trial(handle, {
            "correct": correct,
            "trial_number": n,
            "error_type": None if correct else "miss",
            "reaction_time_ms": 600 + 25 * n,
            "difficulty": {"sequence_length": 4 + n // 3},
        })
        if not result:
            print(f"❌ Trial {n} rejected: {result.error.message}")

    # Malformed input is rejected without touching ratings
    rejected = engine.record_trial(handle, {"correct": "yes"})
    print(f"✓ Malformed trial rejected: {rejected.error.message}")

    session = engine.end_session(handle)
    summary = session.summary
    print(f"✓ {summary.total_trials} trials, accuracy {summary.accuracy:.0%}, "
          f"avg RT {summary.avg_reaction_time:.0f} ms")
    return summary


def show_profile(engine):
    """Print the cognitive profile."""
    print("\n" + "="*60)
    print("4. COGNITIVE PROFILE")
    print("="*60)

    profile = engine.get_cognitive_profile()
    for domain in profile["domains"].values():
        print(f"  {domain['name']:12s} {domain['avg_rating']:7.1f}")
    print(f"✓ Overall: {profile['overall_rating']:.0f} ({profile['overall_level']})")
    return profile


def show_plan(engine):
    """Print a recommended session."""
    print("\n" + "="*60)
    print("5. RECOMMENDED SESSION")
    print("="*60)

    plan = engine.compose_session(20)
    print(engine.explain_plan(plan))
    return plan


def main():
    """Run all steps."""
    print("""
╔═══════════════════════════════════════════════════════════╗
║               COGNITIVE OS - QUICK START                  ║
╚═══════════════════════════════════════════════════════════╝
    """)

    engine = setup_engine()
    if engine is None:
        return

    recover_sessions(engine)
    play_demo_session(engine)
    show_profile(engine)
    show_plan(engine)

    engine.close()

    print("""
Next steps:
  1. Run API:  uvicorn cognitive_os.api.server:app --reload
  2. Open:     http://localhost:8000/docs
""")


if __name__ == "__main__":
    main()
