"""Value objects shared by every stage."""

from .models import (
    AccuracyMetrics,
    BetType,
    Combination,
    EntrantRecord,
    EntrantStats,
    ExpectedValue,
    KellyRecommendation,
    Prediction,
    Scenario,
    ScenarioKind,
    ValueBet,
    ValueBetAnalysis,
)

__all__ = [
    "AccuracyMetrics",
    "BetType",
    "Combination",
    "EntrantRecord",
    "EntrantStats",
    "ExpectedValue",
    "KellyRecommendation",
    "Prediction",
    "Scenario",
    "ScenarioKind",
    "ValueBet",
    "ValueBetAnalysis",
]
