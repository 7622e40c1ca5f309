"""
Feature extraction

Note:
    aggregates depends on pandas; import it explicitly.
    e.g. from hippique.features.aggregates import HistoryAggregates
"""

from .form_history import form_score, parse_musique

__all__ = [
    "form_score",
    "parse_musique",
    # "HistoryAggregates",
]
