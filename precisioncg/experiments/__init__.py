"""Precision comparison experiments."""

from precisioncg.experiments.runner import solve_problem, run_experiment, main

__all__ = [
    "solve_problem",
    "run_experiment",
    "main",
]
