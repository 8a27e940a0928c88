"""
Repository layer for data access abstraction.
"""

from repositories.base_repository import BaseRepository
from repositories.bet_repository import BetRepository
from repositories.interfaces import (
    IBetRepository,
    IMarketRepository,
    IOddsRepository,
    IUserRepository,
    IWalletRepository,
    IWalletRequestRepository,
)
from repositories.market_repository import MarketRepository
from repositories.odds_repository import OddsRepository
from repositories.user_repository import UserRepository
from repositories.wallet_repository import WalletRepository
from repositories.wallet_request_repository import WalletRequestRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "WalletRepository",
    "WalletRequestRepository",
    "OddsRepository",
    "MarketRepository",
    "BetRepository",
    "IUserRepository",
    "IWalletRepository",
    "IWalletRequestRepository",
    "IOddsRepository",
    "IMarketRepository",
    "IBetRepository",
]
