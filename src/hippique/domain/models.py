from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


@dataclass(frozen=True)
class EntrantRecord:
    entrant_id: str
    name: str
    race_id: str
    jockey_id: Optional[str] = None
    trainer_id: Optional[str] = None
    # final finishing rank, None before the race
    rank: Optional[int] = None
    # grams carried
    weight: Optional[int] = None
    draw: Optional[int] = None
    musique: Optional[str] = None
    odds: Optional[float] = None
    # prize money won in this race (historical records only)
    earnings: Optional[float] = None


@dataclass(frozen=True)
class EntrantStats:
    races: int = 0
    completed_races: int = 0
    wins: int = 0
    top3: int = 0
    earnings: float = 0.0

    @property
    def win_rate(self) -> float:
        if self.completed_races <= 0:
            return 0.0
        return self.wins / self.completed_races

    @property
    def top3_rate(self) -> float:
        if self.completed_races <= 0:
            return 0.0
        return self.top3 / self.completed_races

    @property
    def earnings_per_race(self) -> float:
        if self.races <= 0:
            return 0.0
        return self.earnings / self.races


class ScenarioKind(str, Enum):
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"
    DOMINANT_FAVORITE = "DOMINANT_FAVORITE"
    CLEAR_TOP_2 = "CLEAR_TOP_2"
    GROUPED_TOP_3 = "GROUPED_TOP_3"
    GROUPED_TOP_4 = "GROUPED_TOP_4"
    GROUPED_TOP_5 = "GROUPED_TOP_5"
    STANDARD_TOP_3 = "STANDARD_TOP_3"


@dataclass(frozen=True)
class Scenario:
    """
    Race shape.

    fixed_shares, when set, gives the exact percentage of the first ranks;
    otherwise the top_size best entrants split top_percentage by score.
    """

    kind: ScenarioKind
    top_size: int
    top_percentage: float
    rest_percentage: float
    fixed_shares: tuple[float, ...] = ()
    gaps: tuple[float, ...] = ()


@dataclass(frozen=True)
class Prediction:
    entrant_id: str
    name: str
    score: float
    probability: float
    odds: Optional[float]
    value_bet: bool
    rank: int
    scenario: Optional[Scenario] = None
    draw: Optional[int] = None
    weight: Optional[int] = None


class BetType(str, Enum):
    TIERCE_ORDRE = "TIERCE_ORDRE"
    TIERCE_DESORDRE = "TIERCE_DESORDRE"
    QUINTE_DESORDRE = "QUINTE_DESORDRE"

    @property
    def ordered(self) -> bool:
        return self is BetType.TIERCE_ORDRE

    @property
    def size(self) -> int:
        return 5 if self is BetType.QUINTE_DESORDRE else 3


@dataclass(frozen=True)
class ExpectedValue:
    stake: float
    estimated_payout: float
    probability: float
    expected_gain: float
    expected_loss: float
    expected_value: float
    ev_percentage: float
    is_profitable: bool


@dataclass(frozen=True)
class Combination:
    bet_type: BetType
    entrant_ids: tuple[str, ...]
    names: tuple[str, ...]
    # 0-100
    probability: float
    estimated_odds: float
    base_ranks: tuple[int, ...]
    # ordered bets only: P(1st), P(2nd | 1st), P(3rd | 1st, 2nd) in %
    step_probabilities: tuple[float, ...] = ()
    expected_value: Optional[ExpectedValue] = None

    @property
    def ordered(self) -> bool:
        return self.bet_type.ordered


@dataclass(frozen=True)
class KellyRecommendation:
    is_value: bool
    # percentages of bankroll
    full_kelly: float = 0.0
    kelly_fraction: float = 0.0
    recommended_stake: float = 0.0
    edge: float = 0.0
    # edge in %
    expected_value: float = 0.0
    implied_probability: float = 0.0
    probability_edge: float = 0.0
    roi_per_bet: Optional[float] = None


@dataclass(frozen=True)
class ValueBet:
    prediction: Prediction
    kelly: KellyRecommendation


@dataclass(frozen=True)
class ValueBetAnalysis:
    value_bets: list[ValueBet] = field(default_factory=list)
    count: int = 0
    total_stake: float = 0.0
    bankroll_usage: float = 0.0
    total_expected_value: float = 0.0


@dataclass(frozen=True)
class AccuracyMetrics:
    accuracy_score: float
    top3_accuracy: float
    winner_rank_predicted: Optional[int]
