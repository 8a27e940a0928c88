"""
Bet ledger entry domain model.
"""

from dataclasses import dataclass
from enum import Enum

from domain.models.game import GameType
from domain.models.money import Money


class BetStatus(Enum):
    """Pending -> Won | Lost. Won and Lost are terminal."""

    PENDING = "pending"
    WON = "won"
    LOST = "lost"

    @property
    def is_terminal(self) -> bool:
        return self is not BetStatus.PENDING


@dataclass(frozen=True)
class Bet:
    """
    Immutable record of a placed bet.

    resolved_odds is the multiplier snapshot taken at placement; later odds
    changes never touch it. A settled bet is re-read, never mutated in place.
    """

    bet_id: int
    user_id: int
    game_type: GameType
    stake: Money
    prediction: str
    resolved_odds: int
    odds_source: str
    market_id: int
    status: BetStatus = BetStatus.PENDING
    payout: Money = Money(0)
    created_at: str | None = None
    settled_at: str | None = None
    settlement_error: str | None = None

    @property
    def profit(self) -> Money:
        """Net result for the player: payout minus stake once settled, else zero."""
        if self.status is BetStatus.PENDING:
            return Money.zero()
        return self.payout - self.stake
