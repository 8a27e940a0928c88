"""
Handles bet placement and bet history.
"""

import logging

from config import BET_HISTORY_PAGE_SIZE
from domain.exceptions import (
    InvalidPrediction,
    LedgerError,
    MarketClosed,
    NotFound,
    PermissionDenied,
    UserBlocked,
)
from domain.models.bet import Bet, BetStatus
from domain.models.game import GameType
from domain.models.money import Money
from domain.services.prediction_rules import validate_prediction
from infrastructure.locks import KeyedLockRegistry
from repositories.interfaces import IBetRepository, IMarketRepository, IUserRepository
from services import error_codes
from services.interfaces import IBettingService
from services.odds_service import OddsService

logger = logging.getLogger("matka_ledger.services.betting")


class BettingService(IBettingService):
    """Validates wagers, snapshots odds and debits stakes."""

    def __init__(
        self,
        bet_repo: IBetRepository,
        user_repo: IUserRepository,
        market_repo: IMarketRepository,
        odds_service: OddsService,
        user_locks: KeyedLockRegistry | None = None,
        page_size: int | None = None,
    ):
        self.bet_repo = bet_repo
        self.user_repo = user_repo
        self.market_repo = market_repo
        self.odds_service = odds_service
        self.user_locks = user_locks if user_locks is not None else KeyedLockRegistry("wallets")
        self.page_size = page_size if page_size is not None else BET_HISTORY_PAGE_SIZE

    def place_bet(
        self,
        user_id: int,
        game_type: GameType | str,
        stake: Money | int,
        prediction: str,
        market_id: int,
    ) -> Bet:
        """
        Place a bet on an open market.

        Checks run cheapest first; the market status is re-checked inside the
        transaction that inserts the bet and debits the stake.

        Raises:
            ValueError: Non-positive stake or unknown game type
            NotFound: Unknown user or market
            PermissionDenied: The user is not a player
            UserBlocked: The player is blocked
            InvalidPrediction: Prediction does not fit the game type, or the
                market does not offer it
            MarketClosed: The market no longer accepts bets
            ConfigurationError: No odds configured for the game type
            LedgerError: The winning payout would not fit the money range
            InsufficientBalance: The wallet cannot cover the stake
        """
        stake = Money.of(stake)
        if not stake.is_positive():
            raise ValueError("Stake must be positive.")
        game_type = GameType.parse(game_type)

        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found.", code=error_codes.USER_NOT_FOUND)
        if not user.is_player:
            raise PermissionDenied(f"Only players can place bets; user {user_id} is a {user.role.value}.")
        if user.is_blocked:
            raise UserBlocked(f"User {user_id} is blocked.")

        normalized = validate_prediction(game_type, prediction)

        market = self.market_repo.get_by_id(market_id)
        if market is None:
            raise NotFound(f"Market {market_id} not found.", code=error_codes.MARKET_NOT_FOUND)
        if not market.accepts(game_type):
            raise InvalidPrediction(
                f"Market {market_id} ({market.kind.value}) does not offer {game_type.value}."
            )
        if not market.is_open:
            raise MarketClosed(f"Market {market_id} is {market.status.value}; betting is closed.")

        resolution = self.odds_service.resolve_odds(game_type, user_id)
        try:
            stake.apply_odds(resolution.multiplier)
        except OverflowError:
            raise LedgerError(
                f"Stake {stake} at {resolution.multiplier} would pay out more than a wallet can hold.",
                code=error_codes.OUT_OF_RANGE,
            ) from None

        with self.user_locks.hold(user_id):
            bet_id = self.bet_repo.place_bet_atomic(
                user_id=user_id,
                market_id=market_id,
                game_type=game_type,
                stake=int(stake),
                prediction=normalized,
                resolved_odds=resolution.multiplier,
                odds_source=resolution.source.value,
            )

        logger.info(
            f"Bet {bet_id}: user {user_id} staked {stake} on {game_type.value} "
            f"{normalized!r} in market {market_id} at {resolution.multiplier} ({resolution.source.value})"
        )
        return self.bet_repo.get_by_id(bet_id)

    def get_bet(self, bet_id: int) -> Bet:
        bet = self.bet_repo.get_by_id(bet_id)
        if bet is None:
            raise NotFound(f"Bet {bet_id} not found.")
        return bet

    def get_bet_history(
        self,
        user_id: int,
        status: BetStatus | str | None = None,
        game_type: GameType | str | None = None,
        market_id: int | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Bet]:
        """A user's bets, newest first."""
        if limit is not None and limit < 1:
            raise ValueError("Limit must be at least 1.")
        if offset < 0:
            raise ValueError("Offset cannot be negative.")
        if isinstance(status, str):
            status = BetStatus(status)
        if game_type is not None:
            game_type = GameType.parse(game_type)
        return self.bet_repo.get_bet_history(
            user_id,
            status=status,
            game_type=game_type,
            market_id=market_id,
            limit=self.page_size if limit is None else limit,
            offset=offset,
        )
