"""
Pytest fixtures for tests.

Performance optimization: Uses a session-scoped schema template so migrations
run once; each test copies the resulting database file instead of
re-initializing.

Service fixtures share one wallet lock registry and one market lock registry,
the same way ServiceContainer wires them.
"""

import shutil

import pytest

from database import Database
from domain.models.game import GameType, MarketKind
from infrastructure.locks import KeyedLockRegistry
from repositories.bet_repository import BetRepository
from repositories.market_repository import MarketRepository
from repositories.odds_repository import OddsRepository
from repositories.user_repository import UserRepository
from repositories.wallet_repository import WalletRepository
from repositories.wallet_request_repository import WalletRequestRepository
from services.betting_service import BettingService
from services.commission_service import CommissionService
from services.market_service import MarketService
from services.odds_service import OddsService
from services.settlement_service import SettlementService
from services.user_service import UserService
from services.wallet_service import WalletService


# =============================================================================
# CENTRALIZED CONSTANTS
# =============================================================================

PLAYER_BALANCE = 10_000
"""Opening balance (paisa) of the standard test player: 100.00."""


@pytest.fixture(scope="session")
def _schema_template_path(tmp_path_factory):
    """
    Create a schema template database once per test session.

    All migrations run ONCE here. Tests copy from this template
    instead of running schema initialization each time.
    """
    template_dir = tmp_path_factory.mktemp("schema_template")
    template_path = str(template_dir / "template.db")
    Database(template_path)
    yield template_path


@pytest.fixture
def temp_db_path(tmp_path):
    """Create a temporary database path (no schema)."""
    path = str(tmp_path / "temp.db")
    yield path


@pytest.fixture
def repo_db_path(_schema_template_path, tmp_path):
    """
    Create a temporary database with initialized schema for repository tests.

    Fast: file copy instead of schema initialization.
    """
    test_db_path = str(tmp_path / "test.db")
    shutil.copy2(_schema_template_path, test_db_path)
    yield test_db_path


# =============================================================================
# REPOSITORIES
# =============================================================================


@pytest.fixture
def user_repository(repo_db_path):
    return UserRepository(repo_db_path)


@pytest.fixture
def wallet_repository(repo_db_path):
    return WalletRepository(repo_db_path)


@pytest.fixture
def wallet_request_repository(repo_db_path):
    return WalletRequestRepository(repo_db_path)


@pytest.fixture
def odds_repository(repo_db_path):
    return OddsRepository(repo_db_path)


@pytest.fixture
def market_repository(repo_db_path):
    return MarketRepository(repo_db_path)


@pytest.fixture
def bet_repository(repo_db_path):
    return BetRepository(repo_db_path)


# =============================================================================
# SERVICES
# =============================================================================


@pytest.fixture
def user_locks():
    return KeyedLockRegistry("wallets")


@pytest.fixture
def market_locks():
    return KeyedLockRegistry("markets")


@pytest.fixture
def user_service(user_repository):
    return UserService(user_repository, starting_balance=1000)


@pytest.fixture
def wallet_service(wallet_repository, user_repository, wallet_request_repository, user_locks):
    return WalletService(
        wallet_repo=wallet_repository,
        user_repo=user_repository,
        request_repo=wallet_request_repository,
        user_locks=user_locks,
    )


@pytest.fixture
def odds_service(odds_repository, user_repository):
    return OddsService(odds_repository, user_repository)


@pytest.fixture
def commission_service(odds_repository, wallet_service):
    return CommissionService(odds_repository, wallet_service)


@pytest.fixture
def market_service(market_repository, market_locks):
    return MarketService(market_repository, market_locks=market_locks)


@pytest.fixture
def betting_service(bet_repository, user_repository, market_repository, odds_service, user_locks):
    return BettingService(
        bet_repo=bet_repository,
        user_repo=user_repository,
        market_repo=market_repository,
        odds_service=odds_service,
        user_locks=user_locks,
    )


@pytest.fixture
def settlement_service(
    bet_repository, market_repository, user_repository, commission_service, user_locks, market_locks
):
    return SettlementService(
        bet_repo=bet_repository,
        market_repo=market_repository,
        user_repo=user_repository,
        commission_service=commission_service,
        user_locks=user_locks,
        market_locks=market_locks,
    )


# =============================================================================
# SCENARIO DATA
# =============================================================================


@pytest.fixture
def hierarchy(user_service):
    """Root admin, one subadmin, and a player owned by the subadmin with 100.00."""
    admin = user_service.create_admin("root")
    subadmin = user_service.create_subadmin("agent", admin.user_id)
    player = user_service.create_player("punter", subadmin.user_id, initial_balance=PLAYER_BALANCE)
    return {"admin": admin, "subadmin": subadmin, "player": player}


@pytest.fixture
def default_odds(odds_service):
    """Global defaults for every game type."""
    defaults = {
        GameType.COIN_FLIP: 195,
        GameType.CRICKET_TOSS: 190,
        GameType.TEAM_MATCH: 190,
        GameType.SATAMATKA_JODI: 9000,
        GameType.SATAMATKA_HARF: 900,
        GameType.SATAMATKA_CROSSING: 900,
        GameType.SATAMATKA_ODD_EVEN: 180,
    }
    for game_type, multiplier in defaults.items():
        odds_service.set_game_odds(None, game_type, multiplier)
    return defaults


@pytest.fixture
def coin_market(market_service):
    return market_service.create_market("Coin flip round 1", MarketKind.COIN_FLIP)


@pytest.fixture
def matka_market(market_service):
    return market_service.create_market("Kalyan open", MarketKind.SATAMATKA)
