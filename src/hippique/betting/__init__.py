"""
Betting module
"""

from .sizing import analyze_race_value_bets, calculate_kelly_bet, kelly_criterion

__all__ = [
    "analyze_race_value_bets",
    "calculate_kelly_bet",
    "kelly_criterion",
]
