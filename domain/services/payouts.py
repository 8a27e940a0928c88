"""
Settlement arithmetic. Both functions floor, through Money.
"""

from domain.models.money import Money


def calculate_payout(stake: Money, resolved_odds: int) -> Money:
    """Payout for a winning bet: floor(stake * resolved_odds / 100)."""
    return stake.apply_odds(resolved_odds)


def calculate_commission(base: Money, rate_bp: int) -> Money:
    """Commission on a commissionable base: floor(base * rate / 100%), rate in basis points."""
    if rate_bp <= 0:
        return Money.zero()
    return base.scale_bp(rate_bp)
