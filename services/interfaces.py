"""
Service layer interfaces (ABCs).

These abstract base classes define the contracts for all services in the application.
Services should inherit from their corresponding interface to ensure consistent APIs.

Usage:
    class MyService(IMyService):
        def my_method(self, param: str) -> Money:
            ...
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from domain.models.bet import Bet, BetStatus
    from domain.models.game import GameType, MarketKind
    from domain.models.market import Market, MarketStatus
    from domain.models.money import Money
    from domain.models.odds import CommissionRate, GameOdds, OddsResolution, UserDiscount
    from domain.models.user import User, UserRole
    from domain.models.wallet import (
        LedgerCheck,
        RequestStatus,
        RequestType,
        TransactionReason,
        WalletRequest,
        WalletTransaction,
    )
    from services.settlement_service import SettlementSummary


class IUserService(ABC):
    """Interface for account creation and the ownership hierarchy."""

    @abstractmethod
    def create_admin(self, username: str) -> "User": ...

    @abstractmethod
    def create_subadmin(self, username: str, owner_id: int) -> "User": ...

    @abstractmethod
    def create_player(
        self, username: str, owner_id: int, initial_balance: "Money | int | None" = None
    ) -> "User": ...

    @abstractmethod
    def get_user(self, user_id: int) -> "User": ...

    @abstractmethod
    def list_assigned(self, owner_id: int, role: "UserRole | None" = None) -> list["User"]: ...

    @abstractmethod
    def block_user(self, user_id: int, actor_id: int | None = None) -> "User": ...

    @abstractmethod
    def unblock_user(self, user_id: int, actor_id: int | None = None) -> "User": ...


class IWalletService(ABC):
    """Interface for wallet mutations, history and audits."""

    @abstractmethod
    def debit(
        self,
        user_id: int,
        amount: "Money | int",
        reason: "TransactionReason",
        related_bet_id: int | None = None,
        related_request_id: int | None = None,
    ) -> "WalletTransaction":
        """Remove funds; raises InsufficientBalance without writing anything."""
        ...

    @abstractmethod
    def credit(
        self,
        user_id: int,
        amount: "Money | int",
        reason: "TransactionReason",
        related_bet_id: int | None = None,
        related_request_id: int | None = None,
    ) -> "WalletTransaction": ...

    @abstractmethod
    def get_balance(self, user_id: int) -> "Money": ...

    @abstractmethod
    def get_transactions(
        self, user_id: int, limit: int | None = None, offset: int = 0
    ) -> list["WalletTransaction"]: ...

    @abstractmethod
    def verify_ledger(self, user_id: int) -> "LedgerCheck":
        """Replay the transaction log and compare it with the cached balance."""
        ...

    @abstractmethod
    def verify_all(self) -> list["LedgerCheck"]: ...

    @abstractmethod
    def create_request(
        self,
        user_id: int,
        request_type: "RequestType | str",
        amount: "Money | int",
        notes: str | None = None,
    ) -> "WalletRequest": ...

    @abstractmethod
    def review_request(
        self, request_id: int, reviewer_id: int, approve: bool, notes: str | None = None
    ) -> "WalletRequest": ...

    @abstractmethod
    def list_requests(
        self, reviewer_id: int, status: "RequestStatus | None" = None
    ) -> list["WalletRequest"]: ...


class IOddsService(ABC):
    """Interface for odds configuration and resolution."""

    @abstractmethod
    def resolve_odds(self, game_type: "GameType | str", player_id: int) -> "OddsResolution": ...

    @abstractmethod
    def set_game_odds(
        self,
        scope_subadmin_id: int | None,
        game_type: "GameType | str",
        multiplier: int,
        actor_id: int | None = None,
    ) -> "GameOdds": ...

    @abstractmethod
    def set_user_discount(
        self, user_id: int, game_type: "GameType | str", rate_bp: int, actor_id: int | None = None
    ) -> "UserDiscount": ...

    @abstractmethod
    def set_commission_rate(
        self, subadmin_id: int, game_type: "GameType | str", rate_bp: int, actor_id: int | None = None
    ) -> "CommissionRate": ...


class ICommissionService(ABC):
    """Interface for subadmin commission."""

    @abstractmethod
    def get_rate(self, subadmin_id: int, game_type: "GameType") -> int: ...

    @abstractmethod
    def calculate(self, subadmin_id: int, game_type: "GameType", base: "Money") -> "Money": ...

    @abstractmethod
    def accrue_commission(
        self,
        subadmin_id: int,
        game_type: "GameType",
        base: "Money",
        related_bet_id: int | None = None,
    ) -> "WalletTransaction | None": ...


class IMarketService(ABC):
    """Interface for market lifecycle."""

    @abstractmethod
    def create_market(self, name: str, kind: "MarketKind | str") -> "Market": ...

    @abstractmethod
    def get_market(self, market_id: int) -> "Market": ...

    @abstractmethod
    def list_markets(
        self, status: "MarketStatus | None" = None, kind: "MarketKind | None" = None
    ) -> list["Market"]: ...

    @abstractmethod
    def close_market(self, market_id: int) -> "Market": ...


class IBettingService(ABC):
    """Interface for bet placement and history."""

    @abstractmethod
    def place_bet(
        self,
        user_id: int,
        game_type: "GameType | str",
        stake: "Money | int",
        prediction: str,
        market_id: int,
    ) -> "Bet": ...

    @abstractmethod
    def get_bet_history(
        self,
        user_id: int,
        status: "BetStatus | str | None" = None,
        game_type: "GameType | str | None" = None,
        market_id: int | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list["Bet"]: ...


class ISettlementService(ABC):
    """Interface for result declaration and settlement."""

    @abstractmethod
    def declare_result(self, market_id: int, result: str) -> "SettlementSummary": ...

    @abstractmethod
    def settle_market(self, market_id: int) -> "SettlementSummary": ...
