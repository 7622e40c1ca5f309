"""
Prediction accuracy once the finishing order is known.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import pandas as pd

from ..domain.models import AccuracyMetrics, Prediction

logger = logging.getLogger(__name__)

# points by predicted rank of the actual winner
WINNER_POINTS: dict[int, float] = {1: 50.0, 2: 30.0, 3: 20.0, 4: 10.0, 5: 10.0}
TOP3_WEIGHT = 50.0


@dataclass(frozen=True)
class RaceEvaluation:
    race_id: str
    scenario: Optional[str]
    metrics: AccuracyMetrics


def compute_accuracy_metrics(
    predictions: Sequence[Prediction],
    actual_results: Sequence[str],
) -> AccuracyMetrics:
    """
    Args:
        predictions: ranked predictions (rank 1 first)
        actual_results: entrant ids in finishing order
    """
    pred_ids = [p.entrant_id for p in predictions]
    pred_top3 = set(pred_ids[:3])
    actual_top3 = set(actual_results[:3])
    top3_accuracy = len(pred_top3 & actual_top3) / 3.0 * 100.0

    winner_rank: Optional[int] = None
    if actual_results:
        winner = actual_results[0]
        for i, eid in enumerate(pred_ids):
            if eid == winner:
                winner_rank = i + 1
                break

    score = WINNER_POINTS.get(winner_rank, 0.0) if winner_rank is not None else 0.0
    score += top3_accuracy / 100.0 * TOP3_WEIGHT

    return AccuracyMetrics(
        accuracy_score=round(score, 2),
        top3_accuracy=round(top3_accuracy, 2),
        winner_rank_predicted=winner_rank,
    )


def evaluate_race(
    race_id: str,
    predictions: Sequence[Prediction],
    actual_results: Sequence[str],
) -> RaceEvaluation:
    """The scenario is read from the rank-1 prediction."""
    scenario = None
    if predictions and predictions[0].scenario is not None:
        scenario = predictions[0].scenario.kind.value
    return RaceEvaluation(
        race_id=race_id,
        scenario=scenario,
        metrics=compute_accuracy_metrics(predictions, actual_results),
    )


def summarize_by_scenario(evaluations: Sequence[RaceEvaluation]) -> pd.DataFrame:
    """
    Races, mean accuracy and mean top-3 accuracy per scenario.

    Returns an empty frame with the same columns when there is nothing to
    summarize.
    """
    columns = ["scenario", "races", "avg_accuracy", "avg_top3_accuracy", "winner_found_rate"]
    if not evaluations:
        return pd.DataFrame(columns=columns)

    df = pd.DataFrame([{
        "race_id": e.race_id,
        "scenario": e.scenario or "UNKNOWN",
        "accuracy_score": e.metrics.accuracy_score,
        "top3_accuracy": e.metrics.top3_accuracy,
        "winner_top1": e.metrics.winner_rank_predicted == 1,
    } for e in evaluations])

    summary = df.groupby("scenario").agg(
        races=("race_id", "count"),
        avg_accuracy=("accuracy_score", "mean"),
        avg_top3_accuracy=("top3_accuracy", "mean"),
        winner_found_rate=("winner_top1", "mean"),
    ).reset_index()
    summary = summary.sort_values("races", ascending=False, kind="mergesort").reset_index(drop=True)

    logger.info(f"Accuracy summary: {len(df)} races over {len(summary)} scenarios")
    return summary[columns]
