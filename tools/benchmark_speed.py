"""
Performance Benchmark
=====================

Measures simulation tick throughput for performance tuning.

Usage:
    python -m tools.benchmark_speed [--steps S] [--frame-ms MS]
"""

from __future__ import annotations

import argparse
import sys
import time
from typing import Optional
import numpy as np

from fruit_run.runner_core.config_loader import load_config
from fruit_run.runner_core.game import RunnerGame
from fruit_run.runner_core.env_gym import FruitRunEnv, ACTION_JUMP


def benchmark_runner_game(
    num_steps: int = 1000,
    seed: int = 42,
    frame_ms: Optional[float] = None,
    jump_prob: float = 0.02
) -> dict:
    """
    Benchmark raw RunnerGame ticks without Gym overhead.

    Args:
        num_steps: Number of ticks.
        seed: Random seed.
        frame_ms: Milliseconds per tick. One nominal frame if None.
        jump_prob: Chance of a jump command before each tick.

    Returns:
        Dict with timing results.
    """
    config = load_config()
    game = RunnerGame(config=config, seed=seed)
    rng = np.random.default_rng(seed)
    if frame_ms is None:
        frame_ms = config.timing.frame_interval_ms

    # Warmup
    game.start_new_session(seed=seed)
    for _ in range(10):
        game.tick(frame_ms)

    game.start_new_session(seed=seed)
    sessions = 1
    start = time.perf_counter()

    for _ in range(num_steps):
        if rng.random() < jump_prob:
            game.request_jump()
        result = game.tick(frame_ms)
        if result.game_over:
            game.start_new_session()
            sessions += 1

    elapsed = time.perf_counter() - start

    return {
        "mode": "runner_game",
        "num_steps": num_steps,
        "sessions": sessions,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def benchmark_env(
    num_steps: int = 1000,
    seed: int = 42,
    jump_prob: float = 0.02
) -> dict:
    """
    Benchmark the Gymnasium environment, observation packing included.

    Args:
        num_steps: Number of steps.
        seed: Random seed.
        jump_prob: Chance of choosing the jump action each step.

    Returns:
        Dict with timing results.
    """
    env = FruitRunEnv()
    rng = np.random.default_rng(seed)

    # Warmup
    env.reset(seed=seed)
    for _ in range(10):
        env.step(0)

    env.reset(seed=seed)
    sessions = 1
    start = time.perf_counter()

    for _ in range(num_steps):
        action = ACTION_JUMP if rng.random() < jump_prob else 0
        _, _, terminated, truncated, _ = env.step(action)
        if terminated or truncated:
            env.reset()
            sessions += 1

    elapsed = time.perf_counter() - start
    env.close()

    return {
        "mode": "gym_env",
        "num_steps": num_steps,
        "sessions": sessions,
        "elapsed_seconds": elapsed,
        "steps_per_second": num_steps / elapsed,
        "ms_per_step": (elapsed * 1000) / num_steps
    }


def run_all_benchmarks(steps: int = 5000, frame_ms: Optional[float] = None) -> list:
    """Run both benchmarks and print a summary table."""
    results = []

    print("=" * 60)
    print("FRUIT RUN SIMULATION PERFORMANCE BENCHMARK")
    print("=" * 60)
    print()

    print("Benchmarking RunnerGame (raw)...")
    result = benchmark_runner_game(num_steps=steps, frame_ms=frame_ms)
    results.append(result)
    print(f"  Steps/sec: {result['steps_per_second']:.1f}")
    print(f"  ms/step:   {result['ms_per_step']:.4f}")
    print()

    print("Benchmarking FruitRunEnv...")
    result = benchmark_env(num_steps=steps)
    results.append(result)
    print(f"  Steps/sec: {result['steps_per_second']:.1f}")
    print(f"  ms/step:   {result['ms_per_step']:.4f}")
    print()

    print("=" * 60)
    print("SUMMARY")
    print("=" * 60)
    print()
    print(f"{'Mode':<20} {'Sessions':>9} {'Steps/s':>12} {'ms/step':>10}")
    print("-" * 53)

    for r in results:
        print(f"{r['mode']:<20} {r['sessions']:>9} "
              f"{r['steps_per_second']:>12.1f} {r['ms_per_step']:>10.4f}")

    return results


def main():
    parser = argparse.ArgumentParser(description="Benchmark Fruit Run simulation performance")
    parser.add_argument("--steps", type=int, default=5000, help="Steps per benchmark")
    parser.add_argument("--frame-ms", type=float, default=None,
                        help="Milliseconds per raw tick (default: one nominal frame)")
    parser.add_argument("--quick", action="store_true", help="Quick benchmark (fewer steps)")

    args = parser.parse_args()

    steps = 500 if args.quick else args.steps

    run_all_benchmarks(steps=steps, frame_ms=args.frame_ms)

    return 0


if __name__ == "__main__":
    sys.exit(main())
