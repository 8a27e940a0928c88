"""
Service container for dependency injection and initialization.

This module centralizes service creation and wiring so scripts and tests build
the engine the same way.

Usage:
    container = ServiceContainer(config)
    await container.initialize()

    # Access services
    betting_service = container.betting_service
    settlement_service = container.settlement_service
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from services.betting_service import BettingService
    from services.commission_service import CommissionService
    from services.market_service import MarketService
    from services.odds_service import OddsService
    from services.settlement_service import SettlementService
    from services.user_service import UserService
    from services.wallet_service import WalletService

import config
from database import Database
from infrastructure.locks import KeyedLockRegistry

# Repositories
from repositories.bet_repository import BetRepository
from repositories.market_repository import MarketRepository
from repositories.odds_repository import OddsRepository
from repositories.user_repository import UserRepository
from repositories.wallet_repository import WalletRepository
from repositories.wallet_request_repository import WalletRequestRepository

logger = logging.getLogger("matka_ledger.infrastructure.container")


@dataclass
class RepositoryContainer:
    """Container for all repositories."""

    user: UserRepository | None = None
    wallet: WalletRepository | None = None
    wallet_request: WalletRequestRepository | None = None
    odds: OddsRepository | None = None
    market: MarketRepository | None = None
    bet: BetRepository | None = None


@dataclass
class ServiceConfig:
    """Configuration for service initialization."""

    # Database
    db_path: str = config.DB_PATH

    # Wallet settings
    starting_balance: int = config.STARTING_BALANCE
    transaction_page_size: int = config.TRANSACTION_HISTORY_PAGE_SIZE

    # Odds and rate bounds
    odds_min_multiplier: int = config.ODDS_MIN_MULTIPLIER
    odds_max_multiplier: int = config.ODDS_MAX_MULTIPLIER
    rate_max_bp: int = config.RATE_MAX_BP

    # Betting settings
    bet_history_page_size: int = config.BET_HISTORY_PAGE_SIZE


class ServiceContainer:
    """
    Central container for all application services.

    Handles proper initialization order and dependency injection. Wallet and
    market lock registries are created once here and shared by every service
    that mutates balances or market state.

    Example:
        container = ServiceContainer(config)
        await container.initialize()

        # Services are now available
        wallet_service = container.wallet_service
    """

    def __init__(self, config: ServiceConfig | None = None):
        """
        Initialize the container with configuration.

        Args:
            config: Service configuration (uses defaults if None)
        """
        self.config = config or ServiceConfig()
        self._initialized = False
        self._repos = RepositoryContainer()

        self._database: Database | None = None
        self._services: dict[str, Any] = {}
        self.user_locks = KeyedLockRegistry("wallets")
        self.market_locks = KeyedLockRegistry("markets")

    @property
    def is_initialized(self) -> bool:
        """Check if container has been initialized."""
        return self._initialized

    async def initialize(self) -> None:
        """
        Initialize all services in correct order.

        This method is idempotent - calling it multiple times has no effect.
        """
        if self._initialized:
            logger.debug("ServiceContainer already initialized, skipping")
            return

        logger.info("Initializing ServiceContainer...")

        self._init_database()
        self._init_repositories()

        # Initialize services in dependency order
        self._init_account_services()
        self._init_pricing_services()
        self._init_market_services()

        self._initialized = True
        logger.info("ServiceContainer initialization complete")

    def _init_database(self) -> None:
        """Initialize database and run migrations."""
        logger.debug(f"Initializing database at {self.config.db_path}")
        self._database = Database(self.config.db_path)

    def _init_repositories(self) -> None:
        """Initialize all repositories."""
        logger.debug("Initializing repositories")

        db_path = self.config.db_path
        self._repos.user = UserRepository(db_path)
        self._repos.wallet = WalletRepository(db_path)
        self._repos.wallet_request = WalletRequestRepository(db_path)
        self._repos.odds = OddsRepository(db_path)
        self._repos.market = MarketRepository(db_path)
        self._repos.bet = BetRepository(db_path)

    def _init_account_services(self) -> None:
        """Users and wallets."""
        logger.debug("Initializing account services")

        from services.user_service import UserService
        from services.wallet_service import WalletService

        self._services["user"] = UserService(
            user_repo=self._repos.user,
            starting_balance=self.config.starting_balance,
        )
        self._services["wallet"] = WalletService(
            wallet_repo=self._repos.wallet,
            user_repo=self._repos.user,
            request_repo=self._repos.wallet_request,
            user_locks=self.user_locks,
            page_size=self.config.transaction_page_size,
        )

    def _init_pricing_services(self) -> None:
        """Odds resolution and commission."""
        logger.debug("Initializing pricing services")

        from services.commission_service import CommissionService
        from services.odds_service import OddsService

        self._services["odds"] = OddsService(
            odds_repo=self._repos.odds,
            user_repo=self._repos.user,
            min_multiplier=self.config.odds_min_multiplier,
            max_multiplier=self.config.odds_max_multiplier,
            max_rate_bp=self.config.rate_max_bp,
        )
        self._services["commission"] = CommissionService(
            odds_repo=self._repos.odds,
            wallet_service=self._services["wallet"],
        )

    def _init_market_services(self) -> None:
        """Markets, betting and settlement."""
        logger.debug("Initializing market services")

        from services.betting_service import BettingService
        from services.market_service import MarketService
        from services.settlement_service import SettlementService

        self._services["market"] = MarketService(
            market_repo=self._repos.market,
            market_locks=self.market_locks,
        )
        self._services["betting"] = BettingService(
            bet_repo=self._repos.bet,
            user_repo=self._repos.user,
            market_repo=self._repos.market,
            odds_service=self._services["odds"],
            user_locks=self.user_locks,
            page_size=self.config.bet_history_page_size,
        )
        self._services["settlement"] = SettlementService(
            bet_repo=self._repos.bet,
            market_repo=self._repos.market,
            user_repo=self._repos.user,
            commission_service=self._services["commission"],
            user_locks=self.user_locks,
            market_locks=self.market_locks,
        )

    # =========================================================================
    # Service accessors
    # =========================================================================

    @property
    def database(self) -> Database | None:
        return self._database

    @property
    def user_repo(self) -> UserRepository:
        """Get user repository."""
        return self._repos.user

    @property
    def wallet_repo(self) -> WalletRepository:
        """Get wallet repository."""
        return self._repos.wallet

    @property
    def odds_repo(self) -> OddsRepository:
        """Get odds repository."""
        return self._repos.odds

    @property
    def market_repo(self) -> MarketRepository:
        """Get market repository."""
        return self._repos.market

    @property
    def bet_repo(self) -> BetRepository:
        """Get bet repository."""
        return self._repos.bet

    @property
    def user_service(self) -> "UserService | None":
        return self._services.get("user")

    @property
    def wallet_service(self) -> "WalletService | None":
        return self._services.get("wallet")

    @property
    def odds_service(self) -> "OddsService | None":
        return self._services.get("odds")

    @property
    def commission_service(self) -> "CommissionService | None":
        return self._services.get("commission")

    @property
    def market_service(self) -> "MarketService | None":
        return self._services.get("market")

    @property
    def betting_service(self) -> "BettingService | None":
        return self._services.get("betting")

    @property
    def settlement_service(self) -> "SettlementService | None":
        return self._services.get("settlement")
