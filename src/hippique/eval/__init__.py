"""Evaluation helpers (prediction accuracy once results are known)."""

from .accuracy import compute_accuracy_metrics, evaluate_race, summarize_by_scenario

__all__ = [
    "compute_accuracy_metrics",
    "evaluate_race",
    "summarize_by_scenario",
]
