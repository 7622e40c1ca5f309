"""Entrant scoring (form, class, connections, aptitude)."""

from .engine import ScoredEntrant, ScoreError, ScoreOutcome, score_entrant, score_field

__all__ = [
    "ScoredEntrant",
    "ScoreError",
    "ScoreOutcome",
    "score_entrant",
    "score_field",
]
