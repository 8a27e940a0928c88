"""
Market lifecycle: Open -> Closed -> Resulted.
"""

import logging

from domain.exceptions import NotFound, StateError
from domain.models.game import MarketKind
from domain.models.market import Market, MarketStatus
from infrastructure.locks import KeyedLockRegistry
from repositories.interfaces import IMarketRepository
from services import error_codes
from services.interfaces import IMarketService

logger = logging.getLogger("matka_ledger.services.market")


class MarketService(IMarketService):
    def __init__(self, market_repo: IMarketRepository, market_locks: KeyedLockRegistry | None = None):
        self.market_repo = market_repo
        self.market_locks = market_locks if market_locks is not None else KeyedLockRegistry("markets")

    def create_market(self, name: str, kind: MarketKind | str) -> Market:
        kind = MarketKind.parse(kind)
        name = (name or "").strip()
        if not name:
            raise ValueError("Market name cannot be empty.")
        market_id = self.market_repo.create(name, kind)
        logger.info(f"Opened {kind.value} market {market_id} ({name!r})")
        return self.market_repo.get_by_id(market_id)

    def get_market(self, market_id: int) -> Market:
        market = self.market_repo.get_by_id(market_id)
        if market is None:
            raise NotFound(f"Market {market_id} not found.", code=error_codes.MARKET_NOT_FOUND)
        return market

    def list_markets(
        self, status: MarketStatus | None = None, kind: MarketKind | None = None
    ) -> list[Market]:
        return self.market_repo.list_markets(status=status, kind=kind)

    def close_market(self, market_id: int) -> Market:
        """
        Stop accepting bets. Closing a closed market is a no-op.

        Raises:
            NotFound: If the market does not exist
            StateError: If the market already has a result
        """
        with self.market_locks.hold(market_id):
            market = self.get_market(market_id)
            if market.status is MarketStatus.RESULTED:
                raise StateError(f"Market {market_id} already has a result.")
            if market.status is MarketStatus.OPEN and self.market_repo.close(market_id):
                logger.info(f"Closed market {market_id}")
            return self.get_market(market_id)
