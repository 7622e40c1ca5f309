"""
Race prediction pipeline: records -> scores -> scenario -> probabilities.
"""
from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..config import Config
from ..domain.models import EntrantRecord, Prediction
from ..features.aggregates import AggregatesProvider, EmptyAggregates, HistoryAggregates
from ..scoring.engine import ScoredEntrant, score_field
from .distribute import build_predictions
from .scenario import detect_scenario

logger = logging.getLogger(__name__)


def rank_by_score(scored: Sequence[ScoredEntrant]) -> list[ScoredEntrant]:
    """Descending score; ties keep input order."""
    return sorted(scored, key=lambda e: -e.score)


def predict_race(
    records: Sequence[EntrantRecord],
    provider: Optional[AggregatesProvider] = None,
    *,
    config: Optional[Config] = None,
    history: Optional[Iterable[EntrantRecord]] = None,
    reference_year: Optional[int] = None,
) -> list[Prediction]:
    """
    Predictions for one race.

    Args:
        records: the race's entrants (input order breaks score ties)
        provider: historical aggregates lookup
        history: past records to build a HistoryAggregates from (used when
            provider is None)
        reference_year: "current" year of the musique (default: today)
    """
    cfg = config or Config()
    if provider is None:
        provider = HistoryAggregates.from_records(history) if history is not None else EmptyAggregates()

    if not records:
        return []

    scored = score_field(records, provider, config=cfg.scoring, reference_year=reference_year)
    ranked = rank_by_score(scored)
    scenario = detect_scenario([e.score for e in ranked], cfg.scenario)
    predictions = build_predictions(ranked, scenario, cfg.value_bet)

    race_id = records[0].race_id
    n_value = sum(1 for p in predictions if p.value_bet)
    logger.info(
        f"Race {race_id}: {len(predictions)} entrants, scenario={scenario.kind.value}, value_bets={n_value}"
    )
    return predictions
