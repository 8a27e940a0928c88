"""
Abstract repository interfaces for data access.

These interfaces define the contracts implemented by concrete repositories.
"""

from abc import ABC, abstractmethod


class IUserRepository(ABC):
    @abstractmethod
    def add(self, username: str, role, assigned_to: int | None = None, initial_balance: int = 0) -> int: ...

    @abstractmethod
    def get_by_id(self, user_id: int): ...

    @abstractmethod
    def get_by_username(self, username: str): ...

    @abstractmethod
    def get_root_admin(self): ...

    @abstractmethod
    def list_assigned(self, owner_id: int, role=None): ...

    @abstractmethod
    def set_blocked(self, user_id: int, blocked: bool) -> None: ...

    @abstractmethod
    def exists(self, user_id: int) -> bool: ...


class IWalletRepository(ABC):
    @abstractmethod
    def apply_delta(
        self,
        user_id: int,
        delta: int,
        reason,
        related_bet_id: int | None = None,
        related_request_id: int | None = None,
    ): ...

    @abstractmethod
    def get_balance(self, user_id: int) -> int: ...

    @abstractmethod
    def get_transactions(self, user_id: int, limit: int = 50, offset: int = 0): ...

    @abstractmethod
    def get_transactions_for_bet(self, bet_id: int): ...

    @abstractmethod
    def replay(self, user_id: int): ...

    @abstractmethod
    def get_all_user_ids(self) -> list[int]: ...


class IWalletRequestRepository(ABC):
    @abstractmethod
    def create(self, user_id: int, request_type, amount: int, notes: str | None = None) -> int: ...

    @abstractmethod
    def get_by_id(self, request_id: int): ...

    @abstractmethod
    def list_requests(self, status=None, owner_id: int | None = None, user_id: int | None = None): ...

    @abstractmethod
    def review_atomic(self, request_id: int, reviewer_id: int, approve: bool, notes: str | None = None): ...


class IOddsRepository(ABC):
    @abstractmethod
    def set_game_odds(self, game_type, multiplier: int, subadmin_id: int | None = None) -> int: ...

    @abstractmethod
    def get_game_odds(self, game_type, subadmin_id: int | None = None): ...

    @abstractmethod
    def list_game_odds(self, subadmin_id: int | None = None): ...

    @abstractmethod
    def deactivate_game_odds(self, game_type, subadmin_id: int | None = None) -> bool: ...

    @abstractmethod
    def set_user_discount(self, user_id: int, game_type, discount_bp: int) -> int: ...

    @abstractmethod
    def get_user_discount(self, user_id: int, game_type): ...

    @abstractmethod
    def deactivate_user_discount(self, user_id: int, game_type) -> bool: ...

    @abstractmethod
    def set_commission_rate(self, subadmin_id: int, game_type, rate_bp: int) -> int: ...

    @abstractmethod
    def get_commission_rate(self, subadmin_id: int, game_type): ...

    @abstractmethod
    def list_commission_rates(self, subadmin_id: int): ...

    @abstractmethod
    def deactivate_commission_rate(self, subadmin_id: int, game_type) -> bool: ...


class IMarketRepository(ABC):
    @abstractmethod
    def create(self, name: str, kind) -> int: ...

    @abstractmethod
    def get_by_id(self, market_id: int): ...

    @abstractmethod
    def list_markets(self, status=None, kind=None): ...

    @abstractmethod
    def close(self, market_id: int) -> bool: ...

    @abstractmethod
    def close_and_result(self, market_id: int, result: str) -> bool: ...


class IBetRepository(ABC):
    @abstractmethod
    def place_bet_atomic(
        self,
        *,
        user_id: int,
        market_id: int,
        game_type,
        stake: int,
        prediction: str,
        resolved_odds: int,
        odds_source: str,
    ) -> int: ...

    @abstractmethod
    def get_by_id(self, bet_id: int): ...

    @abstractmethod
    def get_pending_bets_for_market(self, market_id: int) -> list[dict]: ...

    @abstractmethod
    def get_bet_history(
        self,
        user_id: int,
        status=None,
        game_type=None,
        market_id: int | None = None,
        limit: int = 50,
        offset: int = 0,
    ): ...

    @abstractmethod
    def settle_bet_atomic(
        self,
        *,
        bet_id: int,
        status,
        payout: int = 0,
        commission_user_id: int | None = None,
        commission: int = 0,
    ) -> bool: ...

    @abstractmethod
    def record_settlement_error(self, bet_id: int, message: str) -> None: ...
