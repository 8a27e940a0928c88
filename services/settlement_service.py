"""
Settlement engine: declares market results and settles pending bets.

Every bet settles in its own immediate transaction whose first statement is
the conditional Pending -> Won/Lost update. A bet that is no longer pending
is skipped, so re-running settlement for a market never pays twice.
"""

import logging
from dataclasses import dataclass, field

from domain.exceptions import AlreadyResulted, MarketNotResulted, NotFound, UnknownGameTypeRule
from domain.models.bet import BetStatus
from domain.models.game import GameType
from domain.models.market import Market, MarketStatus
from domain.models.money import Money
from domain.services.payouts import calculate_payout
from domain.services.prediction_rules import judge, validate_result
from infrastructure.locks import KeyedLockRegistry
from repositories.interfaces import IBetRepository, IMarketRepository, IUserRepository
from services import error_codes
from services.commission_service import CommissionService
from services.interfaces import ISettlementService

logger = logging.getLogger("matka_ledger.services.settlement")


@dataclass
class SettlementSummary:
    """Outcome of one settlement pass over a market."""

    market_id: int
    settled_count: int = 0
    won_count: int = 0
    lost_count: int = 0
    total_payout: Money = Money(0)
    total_commission: Money = Money(0)
    skipped: int = 0
    failed: list[int] = field(default_factory=list)
    already_resulted: bool = False


class SettlementService(ISettlementService):
    def __init__(
        self,
        bet_repo: IBetRepository,
        market_repo: IMarketRepository,
        user_repo: IUserRepository,
        commission_service: CommissionService,
        user_locks: KeyedLockRegistry | None = None,
        market_locks: KeyedLockRegistry | None = None,
    ):
        self.bet_repo = bet_repo
        self.market_repo = market_repo
        self.user_repo = user_repo
        self.commission_service = commission_service
        self.user_locks = user_locks if user_locks is not None else KeyedLockRegistry("wallets")
        self.market_locks = market_locks if market_locks is not None else KeyedLockRegistry("markets")

    def declare_result(self, market_id: int, result: str) -> SettlementSummary:
        """
        Record a market's result and settle its pending bets.

        An open market passes through Closed in the same step. Declaring the
        same result again is a successful no-op that also finishes any bets a
        previous pass left pending.

        Raises:
            NotFound: If the market does not exist
            InvalidResultFormat: If the result does not fit the market kind
            AlreadyResulted: If the market has a different result
        """
        market = self._get_market(market_id)
        normalized = validate_result(market.kind, result)

        already = False
        with self.market_locks.hold(market_id):
            market = self._get_market(market_id)
            if market.status is MarketStatus.RESULTED:
                if market.result != normalized:
                    raise AlreadyResulted(
                        f"Market {market_id} already resulted {market.result!r}; "
                        f"cannot declare {normalized!r}."
                    )
                already = True
            elif not self.market_repo.close_and_result(market_id, normalized):
                # Lost a race with another declaration; re-read decides
                market = self._get_market(market_id)
                if market.result != normalized:
                    raise AlreadyResulted(f"Market {market_id} already resulted {market.result!r}.")
                already = True

        if already:
            logger.info(f"Market {market_id} already resulted {normalized!r}; sweeping pending bets")
        else:
            logger.info(f"Market {market_id} resulted {normalized!r}")

        summary = self.settle_market(market_id)
        summary.already_resulted = already
        return summary

    def settle_market(self, market_id: int) -> SettlementSummary:
        """
        Settle every pending bet of a resulted market.

        A bet that fails to settle, whether its game type or prediction cannot
        be judged or its transaction errors, is logged, marked with a
        settlement_error and left pending; the others still settle.

        Raises:
            NotFound: If the market does not exist
            MarketNotResulted: If the market has no result yet
        """
        market = self._get_market(market_id)
        if market.status is not MarketStatus.RESULTED or market.result is None:
            raise MarketNotResulted(f"Market {market_id} has no result yet.")

        summary = SettlementSummary(market_id=market_id)
        subadmin_cache: dict[int, bool] = {}

        for row in self.bet_repo.get_pending_bets_for_market(market_id):
            bet_id = row["bet_id"]
            try:
                self._settle_one(row, market, summary, subadmin_cache)
            except UnknownGameTypeRule as exc:
                logger.exception(f"Bet {bet_id} in market {market_id} cannot be settled: {exc}")
                self.bet_repo.record_settlement_error(bet_id, str(exc))
                summary.failed.append(bet_id)
            except Exception as exc:
                # The bet's own transaction rolled back; it stays pending for a later sweep
                logger.exception(f"Settling bet {bet_id} in market {market_id} failed: {exc!r}")
                try:
                    self.bet_repo.record_settlement_error(bet_id, f"{type(exc).__name__}: {exc}")
                except Exception:
                    logger.exception(f"Could not record settlement error for bet {bet_id}")
                summary.failed.append(bet_id)

        logger.info(
            f"Settled market {market_id}: {summary.settled_count} bets "
            f"({summary.won_count} won, {summary.lost_count} lost), payout {summary.total_payout}, "
            f"commission {summary.total_commission}, skipped {summary.skipped}, failed {len(summary.failed)}"
        )
        return summary

    def _settle_one(
        self,
        row: dict,
        market: Market,
        summary: SettlementSummary,
        subadmin_cache: dict[int, bool],
    ) -> None:
        bet_id = row["bet_id"]
        player_id = row["user_id"]
        try:
            game_type = GameType(row["game_type"])
        except ValueError:
            raise UnknownGameTypeRule(f"No settlement rule for game type {row['game_type']!r}.") from None

        won = judge(game_type, row["prediction"], market.result)
        stake = Money(int(row["stake"]))

        payout = Money.zero()
        commission = Money.zero()
        commission_user_id = None
        if won:
            payout = calculate_payout(stake, int(row["resolved_odds"]))
        else:
            owner_id = row["owner_id"]
            if owner_id is not None and self._is_subadmin(owner_id, subadmin_cache):
                commission = self.commission_service.calculate(owner_id, game_type, stake)
                if commission.is_positive():
                    commission_user_id = owner_id

        with self.user_locks.hold(player_id, commission_user_id):
            settled = self.bet_repo.settle_bet_atomic(
                bet_id=bet_id,
                status=BetStatus.WON if won else BetStatus.LOST,
                payout=int(payout),
                commission_user_id=commission_user_id,
                commission=int(commission),
            )

        if not settled:
            logger.debug(f"Bet {bet_id} already settled; skipping")
            summary.skipped += 1
            return

        summary.settled_count += 1
        if won:
            summary.won_count += 1
            summary.total_payout = summary.total_payout + payout
        else:
            summary.lost_count += 1
            summary.total_commission = summary.total_commission + commission

    def _is_subadmin(self, user_id: int, cache: dict[int, bool]) -> bool:
        if user_id not in cache:
            owner = self.user_repo.get_by_id(user_id)
            cache[user_id] = owner is not None and owner.is_subadmin
        return cache[user_id]

    def _get_market(self, market_id: int) -> Market:
        market = self.market_repo.get_by_id(market_id)
        if market is None:
            raise NotFound(f"Market {market_id} not found.", code=error_codes.MARKET_NOT_FOUND)
        return market
