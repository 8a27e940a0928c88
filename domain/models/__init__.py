"""
Domain models - pure data structures representing ledger entities.
"""

from domain.models.bet import Bet, BetStatus
from domain.models.game import GameType, MarketKind
from domain.models.market import Market, MarketStatus
from domain.models.money import Money
from domain.models.odds import CommissionRate, GameOdds, OddsResolution, OddsSource, UserDiscount
from domain.models.user import User, UserRole
from domain.models.wallet import (
    LedgerCheck,
    RequestStatus,
    RequestType,
    TransactionReason,
    WalletRequest,
    WalletTransaction,
)

__all__ = [
    "Bet",
    "BetStatus",
    "CommissionRate",
    "GameOdds",
    "GameType",
    "LedgerCheck",
    "Market",
    "MarketKind",
    "MarketStatus",
    "Money",
    "OddsResolution",
    "OddsSource",
    "RequestStatus",
    "RequestType",
    "TransactionReason",
    "User",
    "UserDiscount",
    "UserRole",
    "WalletRequest",
    "WalletTransaction",
]
