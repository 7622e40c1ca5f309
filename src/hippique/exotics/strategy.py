"""
Combination strategies: recommendation, budget split, simulation.

Strategy requests can come from YAML-like dicts:

    strategies:
      - type: value_bets
        budget: 100
      - type: tierce
        budget: 20
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from ..betting.sizing import analyze_race_value_bets
from ..config import Config
from ..domain.models import BetType, Combination, Prediction
from .combinations import (
    calculate_expected_value,
    generate_quinte_desordre,
    generate_tierce_desordre,
    with_expected_value,
)


_RISK: dict[str, str] = {"value_bets": "MEDIUM", "tierce": "HIGH", "quinte": "VERY_HIGH"}


@dataclass(frozen=True)
class StrategyRequest:
    type: str
    budget: float


@dataclass(frozen=True)
class Allocation:
    bet_type: BetType
    names: tuple[str, ...]
    stake: float
    expected_value: float


@dataclass(frozen=True)
class StrategyRecommendation:
    # combinations carry their ExpectedValue, best EV% first
    recommendations: list[Combination] = field(default_factory=list)
    budget_distribution: list[Allocation] = field(default_factory=list)
    total_expected_value: float = 0.0
    risk_level: str = "MEDIUM"


@dataclass(frozen=True)
class SimulationResult:
    type: str
    budget: float
    expected_return: float
    risk_level: Optional[str] = None
    combinations_count: int = 0


def parse_strategies_yaml(obj: Any) -> list[StrategyRequest]:
    """
    Turn a YAML dict/list into StrategyRequests (bad items are skipped).
    """
    if obj is None:
        return []
    if isinstance(obj, dict) and "strategies" in obj:
        items = obj.get("strategies") or []
    else:
        items = obj
    if not isinstance(items, list):
        return []

    out: list[StrategyRequest] = []
    for it in items:
        if not isinstance(it, dict) or "type" not in it:
            continue
        try:
            budget = float(it.get("budget", 0))
        except (TypeError, ValueError):
            continue
        if budget <= 0:
            continue
        out.append(StrategyRequest(type=str(it["type"]), budget=budget))
    return out


def assess_risk_level(recommendations: Sequence[Combination]) -> str:
    tierce = sum(1 for c in recommendations if c.bet_type in (BetType.TIERCE_ORDRE, BetType.TIERCE_DESORDRE))
    quinte = sum(1 for c in recommendations if c.bet_type is BetType.QUINTE_DESORDRE)
    if quinte > tierce:
        return "VERY_HIGH"
    if tierce > 0:
        return "HIGH"
    return "MEDIUM"


def distribute_budget(recommendations: Sequence[Combination], budget: float, *, multiplier: float = 2.0) -> list[Allocation]:
    """
    Give each recommendation, in order, min(remaining, stake * multiplier)
    until the budget runs out. EV is scaled to the allocated stake.
    """
    out: list[Allocation] = []
    remaining = float(budget)
    for combo in recommendations:
        if remaining <= 0:
            break
        ev = combo.expected_value
        if ev is None:
            continue
        allocation = min(remaining, ev.stake * multiplier)
        remaining -= allocation
        out.append(
            Allocation(
                bet_type=combo.bet_type,
                names=combo.names,
                stake=allocation,
                expected_value=round(ev.expected_value / ev.stake * allocation, 2),
            )
        )
    return out


def recommend_best_strategy(
    predictions: Sequence[Prediction],
    budget: float,
    config: Optional[Config] = None,
) -> StrategyRecommendation:
    """
    Profitable tiercé / quinté désordre picks at the assumed average payouts,
    best EV% first, with the budget split over them.
    """
    cfg = config or Config()
    s = cfg.strategy

    candidates = [
        with_expected_value(c, s.stake, s.tierce_payout)
        for c in generate_tierce_desordre(predictions, s.candidates_per_type, cfg.combinations)
    ] + [
        with_expected_value(c, s.stake, s.quinte_payout)
        for c in generate_quinte_desordre(predictions, s.candidates_per_type, cfg.combinations)
    ]
    profitable = [c for c in candidates if c.expected_value is not None and c.expected_value.is_profitable]
    profitable.sort(key=lambda c: -c.expected_value.ev_percentage)  # type: ignore[union-attr]

    distribution = distribute_budget(profitable, budget, multiplier=s.allocation_multiplier)
    top = profitable[: s.max_recommendations]
    return StrategyRecommendation(
        recommendations=top,
        budget_distribution=distribution,
        total_expected_value=round(sum(a.expected_value for a in distribution), 2),
        risk_level=assess_risk_level(top),
    )


def simulate_strategy(
    request: StrategyRequest,
    predictions: Sequence[Prediction],
    config: Optional[Config] = None,
) -> SimulationResult:
    cfg = config or Config()
    s = cfg.strategy

    if request.type == "value_bets":
        analysis = analyze_race_value_bets(predictions, request.budget, cfg.kelly)
        return SimulationResult(
            type="VALUE_BETS",
            budget=request.budget,
            expected_return=analysis.total_expected_value,
            risk_level=_RISK["value_bets"],
            combinations_count=analysis.count,
        )

    if request.type in ("tierce", "quinte"):
        if request.type == "tierce":
            combos = generate_tierce_desordre(predictions, s.simulation_tierce_count, cfg.combinations)
            payout = s.tierce_payout
        else:
            combos = generate_quinte_desordre(predictions, s.simulation_quinte_count, cfg.combinations)
            payout = s.quinte_payout
        total_ev = sum(calculate_expected_value(c, s.stake, payout).expected_value for c in combos)
        return SimulationResult(
            type=request.type.upper(),
            budget=request.budget,
            expected_return=round(total_ev, 2),
            risk_level=_RISK[request.type],
            combinations_count=len(combos),
        )

    return SimulationResult(type="UNKNOWN", budget=request.budget, expected_return=0.0)


def simulate_strategies(
    requests: Sequence[StrategyRequest],
    predictions: Sequence[Prediction],
    config: Optional[Config] = None,
) -> tuple[list[SimulationResult], Optional[SimulationResult]]:
    """Simulate every request; also return the one with the best expected return."""
    results = [simulate_strategy(r, predictions, config) for r in requests]
    if not results:
        return results, None
    best = max(results, key=lambda r: r.expected_return)
    return results, best
