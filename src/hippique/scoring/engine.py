"""
Per-entrant scoring.

raw score = (form * 0.4 + class * 0.25 + connections * 0.25 + aptitude * 0.1) * 10
clamped to [1, 100]. Each sub-score is nominally 0-10.

Fallback policy:
    Sub-scores are computed through `_guarded`, which never raises: a failure
    becomes a ScoreOutcome carrying a ScoreError. `resolve_outcome` is the
    single place where a failed outcome is replaced by the component's
    neutral value (and logged). Missing data (no musique, unknown jockey,
    no career) is not a failure: it scores neutral directly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Optional, Sequence

from ..config import (
    AptitudeConfig,
    ClassConfig,
    ConnectionsConfig,
    ScoringConfig,
)
from ..domain.models import EntrantRecord
from ..features.aggregates import AggregatesProvider, EmptyAggregates
from ..features.form_history import form_score

logger = logging.getLogger(__name__)

COMPONENTS = ("form", "class", "connections", "aptitude")


@dataclass(frozen=True)
class ScoreError:
    component: str
    reason: str


@dataclass(frozen=True)
class ScoreOutcome:
    component: str
    value: Optional[float] = None
    error: Optional[ScoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None


@dataclass(frozen=True)
class ScoredEntrant:
    record: EntrantRecord
    form: float
    class_: float
    connections: float
    aptitude: float
    score: float
    errors: tuple[ScoreError, ...] = field(default_factory=tuple)


def _clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


def _guarded(component: str, fn: Callable[[], float]) -> ScoreOutcome:
    try:
        value = float(fn())
    except Exception as e:
        return ScoreOutcome(component, error=ScoreError(component, f"{type(e).__name__}: {e}"))
    if value != value:  # NaN
        return ScoreOutcome(component, error=ScoreError(component, "NaN"))
    return ScoreOutcome(component, value=value)


def resolve_outcome(outcome: ScoreOutcome, neutral: float, *, entrant_id: str = "") -> float:
    """Value of a sub-score outcome, or the neutral default if it failed."""
    if outcome.ok:
        return float(outcome.value)  # type: ignore[arg-type]
    reason = outcome.error.reason if outcome.error else "missing value"
    logger.warning(f"{outcome.component} score failed for {entrant_id or '?'} ({reason}); using {neutral}")
    return float(neutral)


def class_score(record: EntrantRecord, provider: AggregatesProvider, config: Optional[ClassConfig] = None) -> float:
    """
    Career class: win rate (damped on small samples) + earnings per race.

    The confidence factor min(1, completed / floor) keeps one lucky win in
    two starts from looking like a champion.
    """
    cfg = config or ClassConfig()
    stats = provider.entrant_stats(record.entrant_id)
    if stats is None or stats.completed_races <= 0:
        return float(cfg.neutral)

    confidence = min(1.0, stats.completed_races / float(cfg.confidence_floor_races))
    win_part = min(cfg.win_rate_cap, stats.win_rate * cfg.win_rate_points) * confidence
    earnings_part = min(cfg.earnings_cap, max(0.0, stats.earnings_per_race) / cfg.earnings_unit)
    return _clamp(win_part + earnings_part, 0.0, 10.0)


def connections_score(
    record: EntrantRecord,
    provider: AggregatesProvider,
    config: Optional[ConnectionsConfig] = None,
) -> float:
    cfg = config or ConnectionsConfig()
    score = float(cfg.neutral)
    if not record.jockey_id:
        return score

    jockey_rate = provider.jockey_win_rate(record.jockey_id)
    if jockey_rate is not None:
        score += (jockey_rate - cfg.reference_rate) * cfg.jockey_scale

    if record.trainer_id:
        synergy = provider.synergy_rate(record.jockey_id, record.trainer_id, min_races=cfg.min_pair_races)
        if synergy is not None:
            score += (synergy - cfg.reference_rate) * cfg.synergy_scale

    return _clamp(score, 0.0, 10.0)


def aptitude_score(
    record: EntrantRecord,
    field_size: Optional[int] = None,
    config: Optional[AptitudeConfig] = None,
) -> float:
    """Draw position and weight carried. Heavier never scores higher."""
    cfg = config or AptitudeConfig()
    score = float(cfg.neutral)

    draw = record.draw
    if draw is not None and int(draw) > 0:
        draw = int(draw)
        if field_size and field_size > 0:
            pct = draw / float(field_size)
            if pct <= cfg.good_draw_pct:
                score += cfg.good_draw_bonus
            elif pct <= cfg.fair_draw_pct:
                score += cfg.fair_draw_bonus
            elif pct > cfg.bad_draw_pct:
                score -= cfg.bad_draw_penalty
        else:
            if draw <= cfg.good_gate_max:
                score += cfg.good_draw_bonus
            elif draw >= cfg.bad_gate_min:
                score -= cfg.bad_draw_penalty

    if record.weight is not None and record.weight > 0:
        kg = record.weight / 1000.0
        if kg > cfg.reference_weight_kg:
            score -= (kg - cfg.reference_weight_kg) * cfg.weight_penalty_per_kg
        else:
            light_line = cfg.reference_weight_kg - cfg.light_margin_kg
            if kg < light_line:
                score += min(cfg.light_bonus_cap, (light_line - kg) * cfg.light_bonus_per_kg)

    return _clamp(score, 0.0, 10.0)


def combine_scores(
    form: float,
    class_: float,
    connections: float,
    aptitude: float,
    config: Optional[ScoringConfig] = None,
) -> float:
    w = (config or ScoringConfig()).weights
    raw = form * w.form + class_ * w.class_ + connections * w.connections + aptitude * w.aptitude
    return _clamp(raw * w.scale, w.min_score, w.max_score)


def score_entrant(
    record: EntrantRecord,
    provider: Optional[AggregatesProvider] = None,
    *,
    field_size: Optional[int] = None,
    config: Optional[ScoringConfig] = None,
    reference_year: Optional[int] = None,
) -> ScoredEntrant:
    cfg = config or ScoringConfig()
    provider = provider or EmptyAggregates()
    if reference_year is None:
        reference_year = date.today().year

    outcomes = {
        "form": _guarded(
            "form", lambda: form_score(record.musique, reference_year=reference_year, config=cfg.form)
        ),
        "class": _guarded("class", lambda: class_score(record, provider, cfg.class_)),
        "connections": _guarded("connections", lambda: connections_score(record, provider, cfg.connections)),
        "aptitude": _guarded("aptitude", lambda: aptitude_score(record, field_size, cfg.aptitude)),
    }
    neutrals = {
        "form": cfg.form.neutral,
        "class": cfg.class_.neutral,
        "connections": cfg.connections.neutral,
        "aptitude": cfg.aptitude.neutral,
    }
    values = {k: resolve_outcome(o, neutrals[k], entrant_id=record.entrant_id) for k, o in outcomes.items()}
    errors = tuple(o.error for o in outcomes.values() if o.error is not None)

    return ScoredEntrant(
        record=record,
        form=values["form"],
        class_=values["class"],
        connections=values["connections"],
        aptitude=values["aptitude"],
        score=combine_scores(values["form"], values["class"], values["connections"], values["aptitude"], cfg),
        errors=errors,
    )


def calculate_probability(
    record: EntrantRecord,
    provider: Optional[AggregatesProvider] = None,
    *,
    field_size: Optional[int] = None,
    config: Optional[ScoringConfig] = None,
    reference_year: Optional[int] = None,
) -> float:
    """Raw probability score of one entrant (1-100, not a probability)."""
    return score_entrant(
        record, provider, field_size=field_size, config=config, reference_year=reference_year
    ).score


def score_field(
    records: Sequence[EntrantRecord],
    provider: Optional[AggregatesProvider] = None,
    *,
    config: Optional[ScoringConfig] = None,
    reference_year: Optional[int] = None,
) -> list[ScoredEntrant]:
    """Score every entrant of one race, in input order."""
    field_size = len(records)
    scored = [
        score_entrant(r, provider, field_size=field_size, config=config, reference_year=reference_year)
        for r in records
    ]
    n_failed = sum(1 for s in scored if s.errors)
    if n_failed:
        logger.warning(f"{n_failed}/{field_size} entrants scored with neutral fallbacks")
    return scored
