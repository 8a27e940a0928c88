"""
Domain services containing pure business logic.
"""

from domain.services.odds_resolution import resolve_odds
from domain.services.payouts import calculate_commission, calculate_payout
from domain.services.prediction_rules import (
    PREDICTION_RULES,
    judge,
    validate_prediction,
    validate_result,
)

__all__ = [
    "PREDICTION_RULES",
    "calculate_commission",
    "calculate_payout",
    "judge",
    "resolve_odds",
    "validate_prediction",
    "validate_result",
]
