"""
Bet sizing

Fractional Kelly stake for single (simple gagnant) bets.
"""
from __future__ import annotations

from typing import Optional, Sequence

from ..config import KellyConfig
from ..domain.models import KellyRecommendation, Prediction, ValueBet, ValueBetAnalysis


def kelly_criterion(p: float, odds: float) -> float:
    """
    Optimal Kelly fraction

    f* = (p * odds - 1) / (odds - 1)
       = (p * b - q) / b

    where:
        p = win probability (0-1)
        q = 1 - p
        b = odds - 1 (net odds)

    Returns:
        fraction of bankroll (0-1), 0 when negative
    """
    if p <= 0 or p >= 1 or odds <= 1:
        return 0

    q = 1 - p
    b = odds - 1

    f = (p * b - q) / b
    return max(0, f)


def calculate_kelly_bet(
    probability: float,
    odds: Optional[float],
    bankroll: Optional[float] = None,
    config: Optional[KellyConfig] = None,
) -> KellyRecommendation:
    """
    Kelly recommendation for a model probability (0-100) at decimal `odds`.

    Not a value bet (stake 0) when odds are missing or <= 1, when the
    probability is outside (0, 100], or when the Kelly fraction does not
    exceed config.min_kelly. Edge and EV are still reported in the last case.
    """
    cfg = config or KellyConfig()
    if bankroll is None:
        bankroll = cfg.default_bankroll
    if bankroll <= 0:
        raise ValueError(f"bankroll must be > 0: {bankroll}")

    if odds is None or odds <= 1 or probability <= 0 or probability > 100:
        return KellyRecommendation(is_value=False)

    p = probability / 100.0
    q = 1.0 - p
    b = float(odds) - 1.0

    edge = b * p - q
    # kelly_criterion refuses p = 1; a certain winner stakes everything
    full_kelly = 1.0 if p >= 1.0 else kelly_criterion(p, float(odds))
    implied = 100.0 / float(odds)
    probability_edge = round(probability - implied, 2)

    if full_kelly <= cfg.min_kelly:
        return KellyRecommendation(
            is_value=False,
            edge=round(edge, 4),
            expected_value=round(edge * 100.0, 2),
            implied_probability=round(implied, 2),
            probability_edge=probability_edge,
        )

    fractional = full_kelly * cfg.fraction
    stake = max(cfg.min_stake, round(bankroll * fractional, 2))

    return KellyRecommendation(
        is_value=True,
        full_kelly=round(full_kelly * 100.0, 2),
        kelly_fraction=round(fractional * 100.0, 2),
        recommended_stake=stake,
        edge=round(edge, 4),
        expected_value=round(edge * 100.0, 2),
        implied_probability=round(implied, 2),
        probability_edge=probability_edge,
        roi_per_bet=round(edge / max(cfg.min_kelly, fractional) * 100.0, 2),
    )


def analyze_race_value_bets(
    predictions: Sequence[Prediction],
    bankroll: Optional[float] = None,
    config: Optional[KellyConfig] = None,
) -> ValueBetAnalysis:
    """
    Kelly value bets of one race, best expected value first.
    """
    cfg = config or KellyConfig()
    if bankroll is None:
        bankroll = cfg.default_bankroll

    value_bets: list[ValueBet] = []
    for pred in predictions:
        kelly = calculate_kelly_bet(pred.probability, pred.odds, bankroll, cfg)
        if kelly.is_value:
            value_bets.append(ValueBet(prediction=pred, kelly=kelly))

    value_bets.sort(key=lambda v: -v.kelly.expected_value)
    total_stake = sum(v.kelly.recommended_stake for v in value_bets)

    return ValueBetAnalysis(
        value_bets=value_bets,
        count=len(value_bets),
        total_stake=round(total_stake, 2),
        bankroll_usage=round(total_stake / bankroll * 100.0, 2),
        total_expected_value=round(sum(v.kelly.expected_value for v in value_bets), 2),
    )
