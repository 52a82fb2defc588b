#!/usr/bin/env python3
"""
Simulate Sessions

Play simulated sessions for every game against the configured database
and report how ratings and recommendations move.
"""

import json
import sys
from pathlib import Path

import numpy as np

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from cognitive_os.config import Settings
from cognitive_os.engine import CognitiveEngine
from cognitive_os.rating.engine import expected_score

SESSIONS_PER_GAME = 2
TRIALS_PER_SESSION = 25
TRUE_ABILITY = 1450  # simulated player strength
SEED = 7


def play_session(engine: CognitiveEngine, game_id: str, rng: np.random.Generator) -> dict:
    """Play one session with trials drawn from the simulated ability."""
    handle = engine.start_session(game_id)
    level = 3.0

    for n in range(1, TRIALS_PER_SESSION + 1):
        difficulty = {"level": level, "items": level + 1}
        rating = 800 + (np.mean(list(difficulty.values())) / 10) * 1600
        correct = bool(rng.random() < expected_score(TRUE_ABILITY, rating))

        engine.record_trial(handle, {
            "correct": correct,
            "trial_number": n,
            "error_type": None if correct else str(rng.choice(["miss", "false_alarm", "swap"])),
            "reaction_time_ms": max(150.0, float(rng.normal(650, 120))),
            "difficulty": difficulty,
        })
        # Simple staircase
        level = min(9.0, level + 0.5) if correct else max(1.0, level - 0.5)

    return engine.end_session(handle).summary.to_dict()


def main():
    """Simulate sessions for every game."""
    print("=" * 60)
    print("Cognitive OS - Session Simulation")
    print("=" * 60)

    engine = CognitiveEngine.from_settings(Settings.from_env())
    rng = np.random.default_rng(SEED)

    results = {}
    for game_id in engine.registry.game_ids():
        results[game_id] = [
            play_session(engine, game_id, rng) for _ in range(SESSIONS_PER_GAME)
        ]
        last = results[game_id][-1]
        print(f"  {engine.registry.game_name(game_id):28s} | accuracy {last['accuracy']:.0%}"
              f" | dropoff {last['fatigue_dropoff']:+.2f}")

    profile = engine.get_cognitive_profile()
    print(f"\n📊 Overall rating: {profile['overall_rating']:.0f} ({profile['overall_level']})")
    for skill in profile["weakest"]:
        print(f"   weak: {skill['name']} ({skill['rating']:.0f})")

    plan = engine.compose_session(20)
    print("\n" + engine.explain_plan(plan))

    output_path = Path("simulation_results.json")
    output_path.write_text(json.dumps({
        "sessions": results,
        "profile": profile,
        "plan": plan.to_dict(),
    }, indent=2))
    print(f"✓ Results saved to {output_path}")

    engine.close()


if __name__ == "__main__":
    main()
