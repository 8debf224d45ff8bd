"""
Evaluation
==========

Runs agent policies over the fixed seed bank and summarizes their scores.
"""

from fruit_run.evaluation.run_eval import (
    EvalResult,
    EvalSummary,
    LoadedAgent,
    evaluate_agent,
    evaluate_single_seed,
    load_agent,
    load_seed_bank,
)

__all__ = [
    "EvalResult",
    "EvalSummary",
    "LoadedAgent",
    "evaluate_agent",
    "evaluate_single_seed",
    "load_agent",
    "load_seed_bank",
]
