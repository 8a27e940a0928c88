"""
Commission accrual for subadmins.
"""

import logging

from domain.models.game import GameType
from domain.models.money import Money
from domain.models.wallet import TransactionReason, WalletTransaction
from domain.services.payouts import calculate_commission
from repositories.interfaces import IOddsRepository
from services.interfaces import ICommissionService
from services.wallet_service import WalletService

logger = logging.getLogger("matka_ledger.services.commission")


class CommissionService(ICommissionService):
    """
    Commission is floor(base * rate_bp / 10000), earned by a subadmin on the
    losing stakes of its players. A subadmin with no active rate earns nothing.
    """

    def __init__(self, odds_repo: IOddsRepository, wallet_service: WalletService):
        self.odds_repo = odds_repo
        self.wallet_service = wallet_service

    def get_rate(self, subadmin_id: int, game_type: GameType) -> int:
        rate = self.odds_repo.get_commission_rate(subadmin_id, game_type)
        return rate.rate_bp if rate is not None and rate.is_active else 0

    def calculate(self, subadmin_id: int, game_type: GameType, base: Money) -> Money:
        return calculate_commission(base, self.get_rate(subadmin_id, game_type))

    def accrue_commission(
        self,
        subadmin_id: int,
        game_type: GameType,
        base: Money,
        related_bet_id: int | None = None,
    ) -> WalletTransaction | None:
        """
        Credit commission for base to the subadmin's wallet.

        Returns None when the computed commission is zero. Settlement writes
        its commission inside the bet transaction instead; this entry point is
        for standalone accruals.
        """
        amount = self.calculate(subadmin_id, game_type, base)
        if not amount.is_positive():
            return None
        txn = self.wallet_service.credit(
            subadmin_id, amount, TransactionReason.COMMISSION, related_bet_id=related_bet_id
        )
        logger.info(f"Accrued commission {amount} to subadmin {subadmin_id} on {base} ({game_type.value})")
        return txn

    def total_earned(self, subadmin_id: int) -> Money:
        totals = self.wallet_service.wallet_repo.get_totals_by_reason(subadmin_id)
        return Money(totals.get(TransactionReason.COMMISSION.value, 0))
