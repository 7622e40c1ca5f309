"""
Tiercé / Quinté combination generators.

Each generator takes the probability-ranked prediction list, keeps a window
of the best entrants, normalizes their probabilities (0-100) against the
window's total and returns the combinations sorted by probability
(descending), truncated to `limit`. A field smaller than the bet size gives
an empty list.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..config import CombinationConfig, PayoutOddsConfig
from ..domain.models import BetType, Combination, ExpectedValue, Prediction
from .probability import (
    normalize_probs,
    pl_all_top3_order_probs,
    pl_all_trio_set_probs,
    pl_prob_set,
    pl_prob_set_approx,
    pl_step_probs,
)

logger = logging.getLogger(__name__)


def estimate_payout_odds(probability: float, odds_cfg: PayoutOddsConfig) -> float:
    """
    Rough market payout for a combination of probability `probability` (0-1).

    1/p scaled by a bet-type multiplier and the house take. Policy constants,
    not fitted on real pools.
    """
    if probability <= 0:
        return 0.0
    base_odds = 1.0 / probability
    return round(base_odds * odds_cfg.multiplier * (1.0 - odds_cfg.house_take), 1)


def calculate_expected_value(combination: Combination, stake: float, estimated_payout: float) -> ExpectedValue:
    if stake <= 0:
        raise ValueError(f"stake must be > 0: {stake}")
    prob = combination.probability / 100.0
    expected_gain = prob * (estimated_payout * stake)
    expected_loss = (1.0 - prob) * stake
    ev = expected_gain - expected_loss
    return ExpectedValue(
        stake=stake,
        estimated_payout=estimated_payout,
        probability=combination.probability,
        expected_gain=round(expected_gain, 2),
        expected_loss=round(expected_loss, 2),
        expected_value=round(ev, 2),
        ev_percentage=round(ev / stake * 100.0, 2),
        is_profitable=ev > 0,
    )


def with_expected_value(combination: Combination, stake: float, estimated_payout: float) -> Combination:
    ev = calculate_expected_value(combination, stake, estimated_payout)
    return Combination(
        bet_type=combination.bet_type,
        entrant_ids=combination.entrant_ids,
        names=combination.names,
        probability=combination.probability,
        estimated_odds=combination.estimated_odds,
        base_ranks=combination.base_ranks,
        step_probabilities=combination.step_probabilities,
        expected_value=ev,
    )


def _window_probs(horses: Sequence[Prediction]) -> dict[int, float]:
    # keyed by position in the ranked list
    return normalize_probs({i: float(h.probability) for i, h in enumerate(horses)})


def _make(bet_type: BetType, horses: Sequence[Prediction], idx: Sequence[int], prob: float, odds_cfg, steps=()):
    return Combination(
        bet_type=bet_type,
        entrant_ids=tuple(horses[i].entrant_id for i in idx),
        names=tuple(horses[i].name for i in idx),
        probability=min(100.0, prob * 100.0),
        estimated_odds=estimate_payout_odds(prob, odds_cfg),
        base_ranks=tuple(i + 1 for i in idx),
        step_probabilities=tuple(round(s * 100.0, 2) for s in steps),
    )


def _top(combos: list[Combination], limit: int) -> list[Combination]:
    combos.sort(key=lambda c: -c.probability)
    return combos[: max(0, int(limit))]


def generate_tierce_ordre(
    predictions: Sequence[Prediction],
    limit: int = 10,
    config: Optional[CombinationConfig] = None,
) -> list[Combination]:
    """Ordered trios from the top 8 (exact removal-model probability)."""
    cfg = config or CombinationConfig()
    horses = list(predictions[: cfg.ordre_window])
    if len(horses) < 3:
        return []

    p = _window_probs(horses)
    combos = [
        _make(BetType.TIERCE_ORDRE, horses, order, prob, cfg.tierce_ordre_odds, pl_step_probs(p, order))
        for order, prob in pl_all_top3_order_probs(p).items()
    ]
    return _top(combos, limit)


def generate_tierce_desordre(
    predictions: Sequence[Prediction],
    limit: int = 10,
    config: Optional[CombinationConfig] = None,
) -> list[Combination]:
    """Unordered trios from the top 10: exact sum over the 6 orderings."""
    cfg = config or CombinationConfig()
    horses = list(predictions[: cfg.desordre_window])
    if len(horses) < 3:
        return []

    p = _window_probs(horses)
    combos = [
        _make(BetType.TIERCE_DESORDRE, horses, members, prob, cfg.tierce_desordre_odds)
        for members, prob in pl_all_trio_set_probs(p).items()
    ]
    return _top(combos, limit)


def quinte_candidates(n: int, first_bound: int = 6) -> list[tuple[int, int, int, int, int]]:
    """
    Index 5-subsets searched for the quinté.

    Pick k (0-based) stays below min(n - 4 + k, first_bound + k), so at most
    C(10, 5) = 252 subsets are scored whatever the window.
    """
    out = []
    for i in range(min(n - 4, first_bound)):
        for j in range(i + 1, min(n - 3, first_bound + 1)):
            for k in range(j + 1, min(n - 2, first_bound + 2)):
                for m in range(k + 1, min(n - 1, first_bound + 3)):
                    for q in range(m + 1, min(n, first_bound + 4)):
                        out.append((i, j, k, m, q))
    return out


def generate_quinte_desordre(
    predictions: Sequence[Prediction],
    limit: int = 10,
    config: Optional[CombinationConfig] = None,
    *,
    method: Optional[str] = None,
) -> list[Combination]:
    """
    Unordered quintés from the top 10.

    method="approx" (default): one ordering (ranking order) x 120.
    method="exact": sum over the 120 orderings.
    """
    cfg = config or CombinationConfig()
    method = method or cfg.quinte_method
    if method not in ("approx", "exact"):
        raise ValueError(f"Unsupported quinte method: {method}")

    horses = list(predictions[: cfg.quinte_window])
    if len(horses) < 5:
        return []

    p = _window_probs(horses)
    set_prob = pl_prob_set_approx if method == "approx" else pl_prob_set
    candidates = quinte_candidates(len(horses), cfg.quinte_first_bound)
    logger.debug(f"quinte: {len(candidates)} candidate subsets ({method})")

    combos = [
        _make(BetType.QUINTE_DESORDRE, horses, members, set_prob(p, members), cfg.quinte_odds)
        for members in candidates
    ]
    return _top(combos, limit)
