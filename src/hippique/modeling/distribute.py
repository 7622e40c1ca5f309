"""
Scenario-aware probability distribution.

One generic rule driven by the Scenario payload:
  - fixed_shares: the first ranks get exactly those percentages
  - otherwise the top_size best entrants split top_percentage by score share
  - everyone else splits rest_percentage by score share
A group whose scores sum to zero is split equally.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from ..config import ValueBetConfig
from ..domain.models import Prediction, Scenario
from ..scoring.engine import ScoredEntrant


def split_by_score(scores: Sequence[float], mass: float, *, eps: float = 1e-12) -> list[float]:
    """Split `mass` proportionally to scores (equal split if they sum to 0)."""
    if len(scores) == 0:
        return []
    vals = np.array([float(s) for s in scores], dtype=float)
    vals = np.where(np.isfinite(vals), vals, 0.0)
    vals = np.maximum(vals, 0.0)
    s = float(vals.sum())
    if s <= eps:
        return [float(mass) / len(vals)] * len(vals)
    return [float(v) for v in vals / s * float(mass)]


def distribute_probabilities(sorted_scores: Sequence[float], scenario: Scenario) -> list[float]:
    """
    Probabilities (0-100) for scores sorted descending, same order.
    """
    n = len(sorted_scores)
    if n == 0:
        return []

    if scenario.fixed_shares:
        k = min(len(scenario.fixed_shares), n)
        head = [float(s) for s in scenario.fixed_shares[:k]]
        rest_mass = 100.0 - sum(head)
        rest_scores = sorted_scores[k:]
        if not rest_scores:
            return split_by_score(head, 100.0)
        return head + split_by_score(rest_scores, rest_mass)

    top = max(0, min(int(scenario.top_size), n))
    top_scores = sorted_scores[:top]
    rest_scores = sorted_scores[top:]
    if not rest_scores:
        return split_by_score(top_scores, 100.0)
    if not top_scores:
        return split_by_score(rest_scores, 100.0)
    return split_by_score(top_scores, scenario.top_percentage) + split_by_score(
        rest_scores, scenario.rest_percentage
    )


def is_value_bet(probability: float, odds: Optional[float], config: Optional[ValueBetConfig] = None) -> bool:
    """
    Model probability (0-100) vs market-implied 100/odds.

    Flags a ratio edge (> 1.2x implied) or an absolute gap over 5 points.
    Missing odds or odds <= 1 (implied >= 100%) are never a value bet.
    """
    cfg = config or ValueBetConfig()
    if odds is None or odds <= 1:
        return False
    implied = 100.0 / float(odds)
    if probability > implied * cfg.ratio:
        return True
    return abs(probability - implied) > cfg.abs_gap


def build_predictions(
    sorted_entrants: Sequence[ScoredEntrant],
    scenario: Scenario,
    config: Optional[ValueBetConfig] = None,
) -> list[Prediction]:
    """
    Predictions ordered by probability (descending, stable), ranked from 1.

    The scenario is attached to the rank-1 prediction only.
    """
    probs = distribute_probabilities([e.score for e in sorted_entrants], scenario)
    rows = sorted(zip(sorted_entrants, probs), key=lambda x: -x[1])

    out: list[Prediction] = []
    for i, (entrant, p) in enumerate(rows):
        rec = entrant.record
        p_rounded = round(float(p), 2)
        out.append(
            Prediction(
                entrant_id=rec.entrant_id,
                name=rec.name,
                score=round(float(entrant.score), 2),
                probability=p_rounded,
                odds=rec.odds,
                value_bet=is_value_bet(p_rounded, rec.odds, config),
                rank=i + 1,
                scenario=scenario if i == 0 else None,
                draw=rec.draw,
                weight=rec.weight,
            )
        )
    return out
