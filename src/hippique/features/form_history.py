"""
Musique (compact form history) decoding.

A musique lists an entrant's recent results, most recent first:

    "1p4p(25)Da2p7a"

  - "1p", "4p", "10h": finishing rank + discipline letter (0 = unplaced)
  - "Da", "Tm": disqualified (D) / fell or stopped (T) + discipline letter
  - "(25)": every following token belongs to 2025, until the next marker

Tokens before the first marker belong to the reference year.
"""

from __future__ import annotations

import re
from datetime import date
from typing import Optional

from ..config import FormConfig

# year marker, rank token, non-finish token (order matters: "(25)" first)
_TOKEN_RE = re.compile(r"\((\d{2})\)|(\d+)([a-zA-Z])|([DT])([a-z]?)")


def parse_musique(musique: Optional[str], *, reference_year: Optional[int] = None) -> dict[int, list[str]]:
    """
    Decode a musique into {year: [token, ...]} (left to right order).

    Empty or missing input gives {}; unrecognised characters are skipped.
    """
    if not musique:
        return {}
    if reference_year is None:
        reference_year = date.today().year

    out: dict[int, list[str]] = {}
    active_year = int(reference_year)
    for m in _TOKEN_RE.finditer(str(musique)):
        year_marker, rank, discipline, non_finish, nf_discipline = m.groups()
        if year_marker is not None:
            active_year = 2000 + int(year_marker)
            continue
        if rank is not None:
            token = f"{int(rank)}{discipline}"
        else:
            token = f"{non_finish}{nf_discipline}"
        out.setdefault(active_year, []).append(token)
    return out


def token_points(token: str, config: Optional[FormConfig] = None) -> float:
    cfg = config or FormConfig()
    if not token:
        return cfg.points_other
    if token[0] in ("D", "T"):
        return cfg.points_non_finish

    digits = re.match(r"\d+", token)
    if digits is None:
        return cfg.points_other
    rank = int(digits.group(0))
    if rank == 1:
        return cfg.points_first
    if rank == 2:
        return cfg.points_second
    if rank == 3:
        return cfg.points_third
    if rank in (4, 5):
        return cfg.points_minor_place
    # 0 = unplaced, 6+ = out of the places
    return cfg.points_other


def year_weight(year: int, reference_year: int, config: Optional[FormConfig] = None) -> float:
    cfg = config or FormConfig()
    diff = int(reference_year) - int(year)
    if diff < 0:
        diff = 0
    if diff < len(cfg.year_weights):
        return float(cfg.year_weights[diff])
    return float(cfg.weight_older)


def form_score(
    musique: Optional[str],
    *,
    reference_year: Optional[int] = None,
    config: Optional[FormConfig] = None,
) -> float:
    """
    Recency-weighted average of per-year mean token points (0-10).

    No history -> config.neutral.
    """
    cfg = config or FormConfig()
    if reference_year is None:
        reference_year = date.today().year

    parsed = parse_musique(musique, reference_year=reference_year)
    score = 0.0
    total_weight = 0.0
    for year, tokens in parsed.items():
        if not tokens:
            continue
        w = year_weight(year, reference_year, cfg)
        year_avg = sum(token_points(t, cfg) for t in tokens) / len(tokens)
        score += year_avg * w
        total_weight += w

    if total_weight <= 0:
        return float(cfg.neutral)
    return float(score / total_weight)
