"""
Race-shape scenario detection from sorted score gaps.

gap[i] = score[i] - score[i+1] over the first five gaps (missing gaps = 0,
never counted as grouped, so a small field is labelled by its real size).
First match wins:
  1. n < 3                            -> INSUFFICIENT_DATA
  2. gap0 > 15                        -> DOMINANT_FAVORITE (50/18/12 fixed)
  3. gap0 > 10 and gap1 > 10          -> CLEAR_TOP_2 (38/32 fixed)
  4. max(gap0, gap1) <= 5             -> GROUPED_TOP_5 / _4 / _3
  5. otherwise                        -> STANDARD_TOP_3 (70/30)
"""

from __future__ import annotations

from typing import Optional, Sequence

from ..config import ScenarioConfig
from ..domain.models import Scenario, ScenarioKind

N_GAPS = 5


def score_gaps(sorted_scores: Sequence[float], n_gaps: int = N_GAPS) -> tuple[float, ...]:
    gaps = []
    for i in range(n_gaps):
        if i + 1 < len(sorted_scores):
            gaps.append(float(sorted_scores[i]) - float(sorted_scores[i + 1]))
        else:
            gaps.append(0.0)
    return tuple(gaps)


def _split(kind: ScenarioKind, top_size: int, split: tuple[float, float], n: int, gaps) -> Scenario:
    # the whole field fits in the top group: nothing left for "rest"
    if n <= top_size:
        return Scenario(kind, top_size=n, top_percentage=100.0, rest_percentage=0.0, gaps=gaps)
    top, rest = split
    return Scenario(kind, top_size=top_size, top_percentage=float(top), rest_percentage=float(rest), gaps=gaps)


def _fixed(kind: ScenarioKind, shares: Sequence[float], n: int, gaps) -> Scenario:
    shares = tuple(float(s) for s in shares)
    if n <= len(shares):
        # no "rest" group: rescale the shares that are used to 100
        used = shares[:n]
        total = sum(used)
        shares = tuple(s * 100.0 / total for s in used) if total > 0 else tuple(100.0 / n for _ in used)
    top = sum(shares)
    return Scenario(
        kind,
        top_size=len(shares),
        top_percentage=top,
        rest_percentage=max(0.0, 100.0 - top),
        fixed_shares=shares,
        gaps=gaps,
    )


def detect_scenario(sorted_scores: Sequence[float], config: Optional[ScenarioConfig] = None) -> Scenario:
    """
    Classify a field from its scores, sorted descending.

    Ties must already be in input order (stable sort).
    """
    cfg = config or ScenarioConfig()
    n = len(sorted_scores)
    gaps = score_gaps(sorted_scores)

    if n < cfg.min_field:
        return Scenario(
            ScenarioKind.INSUFFICIENT_DATA,
            top_size=n,
            top_percentage=100.0,
            rest_percentage=0.0,
            gaps=gaps,
        )

    if gaps[0] > cfg.dominant_gap:
        return _fixed(ScenarioKind.DOMINANT_FAVORITE, cfg.dominant_shares, n, gaps)

    if gaps[0] > cfg.clear_top2_gap and gaps[1] > cfg.clear_top2_gap:
        return _fixed(ScenarioKind.CLEAR_TOP_2, cfg.clear_top2_shares, n, gaps)

    def grouped(i: int) -> bool:
        # a gap past the end of the field is padding, not a close finish
        return i + 1 < n and gaps[i] <= cfg.grouped_gap

    if grouped(0) and grouped(1):
        if grouped(2) and grouped(3):
            return _split(ScenarioKind.GROUPED_TOP_5, 5, cfg.grouped_top5_split, n, gaps)
        if grouped(2):
            return _split(ScenarioKind.GROUPED_TOP_4, 4, cfg.grouped_top4_split, n, gaps)
        return _split(ScenarioKind.GROUPED_TOP_3, 3, cfg.grouped_top3_split, n, gaps)

    return _split(ScenarioKind.STANDARD_TOP_3, 3, cfg.standard_split, n, gaps)
