"""
Evaluation Harness
==================

Plays an agent policy through the fixed seed bank and reports how far and how
high it scored.

An agent is a directory holding `agent.py` (or the file itself) exposing
either a `FruitRunAgent` class with `act(obs) -> int` (and optionally
`reset(seed)`), or a module-level `act(obs) -> int` function.

Usage:
    python -m fruit_run.evaluation.run_eval --agent agents/baseline_jumper
"""

from __future__ import annotations

import argparse
import importlib.util
import json
import os
import sys
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union
import numpy as np

from fruit_run.runner_core.env_gym import FruitRunEnv
from fruit_run.runner_core.events import SoundCue

ActFn = Callable[[Dict[str, np.ndarray]], int]

DEFAULT_MAX_FRAMES = 36000  # Ten minutes at 60 FPS


@dataclass
class LoadedAgent:
    """A policy plus its optional per-episode reset hook."""
    name: str
    act: ActFn
    reset: Optional[Callable[..., None]] = None

    def __call__(self, obs: Dict[str, np.ndarray]) -> int:
        return self.act(obs)


@dataclass
class EvalResult:
    """One episode on one seed."""
    seed: int
    final_score: int
    frames: int
    level: int
    jumps: int
    transforms: int
    pickups: int
    termination_reason: str   # "obstacle" or "frame_cap"
    elapsed_time: float
    actions: Optional[List[int]] = None


@dataclass
class EvalSummary:
    """Aggregate over every seed."""
    mean_score: float
    std_score: float
    min_score: int
    max_score: int
    median_score: float
    mean_frames: float
    survival_rate: float      # Share of episodes that reached the frame cap
    best_level: int
    total_time: float
    results: List[EvalResult] = field(default_factory=list)


def load_seed_bank(path: Optional[str] = None) -> List[int]:
    """
    Load the evaluation seeds.

    Args:
        path: JSON file with a "seeds" list. Uses the bundled bank if None.

    Returns:
        List of integer seeds.
    """
    if path is None:
        path = os.path.join(os.path.dirname(__file__), "seed_bank.json")

    with open(path, "r") as f:
        data = json.load(f)

    return [int(seed) for seed in data["seeds"]]


def load_agent(agent_path: Union[str, Path]) -> LoadedAgent:
    """
    Import an agent from disk.

    Args:
        agent_path: Agent directory (containing agent.py) or a .py file.

    Returns:
        LoadedAgent wrapping the policy.

    Raises:
        FileNotFoundError: If no agent file exists at the path.
        ImportError: If the file cannot be imported.
        AttributeError: If the module exposes neither entry point.
    """
    agent_path = Path(agent_path)
    agent_file = agent_path / "agent.py" if agent_path.is_dir() else agent_path
    if not agent_file.exists():
        raise FileNotFoundError(f"Agent file not found: {agent_file}")

    module_name = f"fruit_run_agent_{agent_file.parent.name}"
    spec = importlib.util.spec_from_file_location(module_name, agent_file)
    if spec is None or spec.loader is None:
        raise ImportError(f"Failed to load agent module from {agent_file}")

    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    spec.loader.exec_module(module)

    name = agent_file.parent.name if agent_file.name == "agent.py" else agent_file.stem

    agent_cls = getattr(module, "FruitRunAgent", None)
    if agent_cls is not None:
        instance = agent_cls()
        if not callable(getattr(instance, "act", None)):
            raise AttributeError("FruitRunAgent class must have an 'act' method")
        return LoadedAgent(name=name, act=instance.act, reset=getattr(instance, "reset", None))

    act = getattr(module, "act", None)
    if callable(act):
        return LoadedAgent(name=name, act=act)

    raise AttributeError(
        "Agent module must define a 'FruitRunAgent' class with an 'act' method "
        "or a standalone 'act' function"
    )


def _as_agent(agent: Union[LoadedAgent, ActFn]) -> LoadedAgent:
    if isinstance(agent, LoadedAgent):
        return agent
    return LoadedAgent(name=getattr(agent, "__name__", "agent"), act=agent)


def evaluate_single_seed(
    agent: Union[LoadedAgent, ActFn],
    seed: int,
    max_frames: int = DEFAULT_MAX_FRAMES,
    record_actions: bool = False,
    verbose: bool = False
) -> EvalResult:
    """
    Play one episode.

    Args:
        agent: LoadedAgent or a bare act(obs) callable.
        seed: Episode seed.
        max_frames: Frame cap; reaching it counts as surviving.
        record_actions: If True, keep every action taken.
        verbose: If True, print a one-line result.

    Returns:
        EvalResult for this seed.
    """
    agent = _as_agent(agent)
    if agent.reset is not None:
        agent.reset(seed)

    env = FruitRunEnv(max_frames=max_frames)
    obs, info = env.reset(seed=seed)

    actions: Optional[List[int]] = [] if record_actions else None
    jumps = transforms = pickups = 0
    terminated = truncated = False
    start = time.perf_counter()

    while not (terminated or truncated):
        action = int(agent(obs))
        if actions is not None:
            actions.append(action)

        obs, _, terminated, truncated, info = env.step(action)

        jumps += int(info["jumped"])
        sounds = info["sounds"]
        transforms += sounds.count(SoundCue.TRANSFORM.value)
        # Level-ups also play the bonus cue
        pickups += (
            sounds.count(SoundCue.COLLECT.value)
            + sounds.count(SoundCue.TRANSFORM.value)
            + sounds.count(SoundCue.BONUS.value) - len(info["level_ups"])
        )

    elapsed = time.perf_counter() - start
    env.close()

    result = EvalResult(
        seed=seed,
        final_score=int(info["score"]),
        frames=int(info["frame"]),
        level=int(info["level"]),
        jumps=jumps,
        transforms=transforms,
        pickups=pickups,
        termination_reason="obstacle" if terminated else "frame_cap",
        elapsed_time=elapsed,
        actions=actions
    )

    if verbose:
        print(f"  Seed {seed}: score={result.final_score}, frames={result.frames}, "
              f"level={result.level}, ended by {result.termination_reason}")

    return result


def summarize(results: List[EvalResult], total_time: float) -> EvalSummary:
    """Reduce per-seed results to aggregate statistics."""
    scores = np.array([r.final_score for r in results], dtype=np.int64)
    frames = np.array([r.frames for r in results], dtype=np.float64)
    survived = np.array([r.termination_reason == "frame_cap" for r in results])

    return EvalSummary(
        mean_score=float(scores.mean()),
        std_score=float(scores.std()),
        min_score=int(scores.min()),
        max_score=int(scores.max()),
        median_score=float(np.median(scores)),
        mean_frames=float(frames.mean()),
        survival_rate=float(survived.mean()),
        best_level=max(r.level for r in results),
        total_time=total_time,
        results=list(results)
    )


def format_summary(summary: EvalSummary) -> str:
    """Human-readable summary block."""
    lines = [
        "=" * 50,
        "EVALUATION SUMMARY",
        "=" * 50,
        f"Seeds evaluated: {len(summary.results)}",
        f"Mean score:      {summary.mean_score:.2f} (std {summary.std_score:.2f})",
        f"Score range:     {summary.min_score} .. {summary.max_score}",
        f"Median score:    {summary.median_score:.2f}",
        f"Mean frames:     {summary.mean_frames:.1f}",
        f"Survival rate:   {summary.survival_rate:.0%}",
        f"Best level:      {summary.best_level}",
        f"Total time:      {summary.total_time:.2f}s",
        "=" * 50,
    ]
    return "\n".join(lines)


def evaluate_agent(
    agent: Union[LoadedAgent, ActFn],
    seeds: Optional[List[int]] = None,
    max_frames: int = DEFAULT_MAX_FRAMES,
    record_actions: bool = False,
    verbose: bool = True
) -> EvalSummary:
    """
    Play one episode per seed and summarize.

    Args:
        agent: LoadedAgent or a bare act(obs) callable.
        seeds: Seeds to play. Uses the bundled seed bank if None.
        max_frames: Frame cap per episode.
        record_actions: If True, keep every action taken.
        verbose: If True, print progress and the summary.

    Returns:
        EvalSummary over all seeds.
    """
    if seeds is None:
        seeds = load_seed_bank()
    if not seeds:
        raise ValueError("At least one seed is required")

    if verbose:
        print(f"Evaluating on {len(seeds)} seeds (cap {max_frames} frames)...")

    start = time.perf_counter()
    results = [
        evaluate_single_seed(
            agent,
            seed,
            max_frames=max_frames,
            record_actions=record_actions,
            verbose=verbose
        )
        for seed in seeds
    ]
    summary = summarize(results, time.perf_counter() - start)

    if verbose:
        print()
        print(format_summary(summary))

    return summary


def save_results(
    summary: EvalSummary,
    agent_name: str,
    output_path: str
) -> None:
    """Write the summary and per-seed results (without action logs) as JSON."""
    data: Dict[str, Any] = {
        "agent": agent_name,
        "timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
    }
    data.update(asdict(summary))
    for entry in data["results"]:
        entry.pop("actions", None)

    with open(output_path, "w") as f:
        json.dump(data, f, indent=2)

    print(f"Results saved to {output_path}")


def main():
    parser = argparse.ArgumentParser(description="Evaluate a Fruit Run agent over the seed bank")
    parser.add_argument("--agent", type=str, required=True,
                        help="Agent directory or agent.py file")
    parser.add_argument("--seeds", type=str, default=None,
                        help="Seed bank JSON (bundled bank if not given)")
    parser.add_argument("--max-frames", type=int, default=DEFAULT_MAX_FRAMES,
                        help="Frame cap per episode")
    parser.add_argument("--output", type=str, default=None,
                        help="Where to write results JSON")
    parser.add_argument("--record", action="store_true",
                        help="Keep per-frame actions in memory")
    parser.add_argument("--quiet", action="store_true",
                        help="Only print errors and the save location")

    args = parser.parse_args()

    try:
        agent = load_agent(args.agent)
    except (FileNotFoundError, ImportError, AttributeError) as e:
        print(f"Error loading agent: {e}")
        return 1

    seeds = load_seed_bank(args.seeds) if args.seeds else None

    summary = evaluate_agent(
        agent,
        seeds=seeds,
        max_frames=args.max_frames,
        record_actions=args.record,
        verbose=not args.quiet
    )

    if args.output:
        save_results(summary, agent.name, args.output)

    return 0


if __name__ == "__main__":
    sys.exit(main())
