"""
Wallet operations: debits, credits, history, ledger audits and
deposit/withdrawal requests.
"""

import logging

from config import TRANSACTION_HISTORY_PAGE_SIZE
from domain.exceptions import NotFound, UserBlocked
from domain.models.money import Money
from domain.models.wallet import (
    LedgerCheck,
    RequestStatus,
    RequestType,
    TransactionReason,
    WalletRequest,
    WalletTransaction,
)
from infrastructure.locks import KeyedLockRegistry
from repositories.interfaces import (
    IUserRepository,
    IWalletRepository,
    IWalletRequestRepository,
)
from services import error_codes
from services.interfaces import IWalletService
from services.permissions import has_admin_permission, require_can_manage

logger = logging.getLogger("matka_ledger.services.wallet")


class WalletService(IWalletService):
    """
    Every balance change goes through the user's in-process lock and a single
    immediate transaction that checks, logs and updates together.

    Reads are lock-free.
    """

    def __init__(
        self,
        wallet_repo: IWalletRepository,
        user_repo: IUserRepository,
        request_repo: IWalletRequestRepository | None = None,
        user_locks: KeyedLockRegistry | None = None,
        page_size: int | None = None,
    ):
        self.wallet_repo = wallet_repo
        self.user_repo = user_repo
        self.request_repo = request_repo
        self.user_locks = user_locks if user_locks is not None else KeyedLockRegistry("wallets")
        self.page_size = page_size if page_size is not None else TRANSACTION_HISTORY_PAGE_SIZE

    def debit(
        self,
        user_id: int,
        amount: Money | int,
        reason: TransactionReason,
        related_bet_id: int | None = None,
        related_request_id: int | None = None,
    ) -> WalletTransaction:
        """
        Take amount out of the wallet.

        Raises:
            ValueError: If amount is not positive
            InsufficientBalance: If the balance cannot cover it (nothing is written)
        """
        amount = self._positive(amount)
        with self.user_locks.hold(user_id):
            txn = self.wallet_repo.apply_delta(
                user_id,
                -int(amount),
                reason,
                related_bet_id=related_bet_id,
                related_request_id=related_request_id,
            )
        logger.debug(f"Debited {amount} from user {user_id} ({reason.value}); balance {txn.balance_after}")
        return txn

    def credit(
        self,
        user_id: int,
        amount: Money | int,
        reason: TransactionReason,
        related_bet_id: int | None = None,
        related_request_id: int | None = None,
    ) -> WalletTransaction:
        amount = self._positive(amount)
        with self.user_locks.hold(user_id):
            txn = self.wallet_repo.apply_delta(
                user_id,
                int(amount),
                reason,
                related_bet_id=related_bet_id,
                related_request_id=related_request_id,
            )
        logger.debug(f"Credited {amount} to user {user_id} ({reason.value}); balance {txn.balance_after}")
        return txn

    def get_balance(self, user_id: int) -> Money:
        return Money(self.wallet_repo.get_balance(user_id))

    def get_transactions(
        self, user_id: int, limit: int | None = None, offset: int = 0
    ) -> list[WalletTransaction]:
        if limit is not None and limit < 1:
            raise ValueError("Limit must be at least 1.")
        if offset < 0:
            raise ValueError("Offset cannot be negative.")
        return self.wallet_repo.get_transactions(user_id, self.page_size if limit is None else limit, offset)

    def verify_ledger(self, user_id: int) -> LedgerCheck:
        """Replay the user's log and compare the result with the cached balance."""
        check = self.wallet_repo.replay(user_id)
        if not check.consistent:
            logger.error(
                f"Ledger mismatch for user {user_id}: cached={check.cached_balance} "
                f"replayed={check.replayed_balance} over {check.transaction_count} transactions"
            )
        return check

    def verify_all(self) -> list[LedgerCheck]:
        return [self.verify_ledger(user_id) for user_id in self.wallet_repo.get_all_user_ids()]

    # --- Deposit / withdrawal requests ---

    def create_request(
        self,
        user_id: int,
        request_type: RequestType | str,
        amount: Money | int,
        notes: str | None = None,
    ) -> WalletRequest:
        """Record a pending deposit or withdrawal for later review."""
        request_type = RequestType(request_type) if isinstance(request_type, str) else request_type
        amount = self._positive(amount)
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found.", code=error_codes.USER_NOT_FOUND)
        if user.is_blocked:
            raise UserBlocked(f"User {user_id} is blocked.")

        request_id = self._requests().create(user_id, request_type, int(amount), notes)
        logger.info(f"Wallet request {request_id}: {request_type.value} of {amount} by user {user_id}")
        return self._requests().get_by_id(request_id)

    def review_request(
        self,
        request_id: int,
        reviewer_id: int,
        approve: bool,
        notes: str | None = None,
    ) -> WalletRequest:
        """
        Approve or reject a pending request.

        Admins review any request; a subadmin only those of its own players.
        An approved withdrawal that exceeds the balance raises
        InsufficientBalance and leaves the request pending.
        """
        request = self._requests().get_by_id(request_id)
        if request is None:
            raise NotFound(f"Wallet request {request_id} not found.", code=error_codes.REQUEST_NOT_FOUND)
        reviewer = self.user_repo.get_by_id(reviewer_id)
        requester = self.user_repo.get_by_id(request.user_id)
        if reviewer is None or requester is None:
            raise NotFound("Reviewer or requester not found.", code=error_codes.USER_NOT_FOUND)
        require_can_manage(reviewer, requester)

        with self.user_locks.hold(request.user_id):
            reviewed = self._requests().review_atomic(request_id, reviewer_id, approve, notes)

        logger.info(
            f"Wallet request {request_id} {reviewed.status.value} by {reviewer_id} "
            f"({reviewed.request_type.value} {reviewed.amount} for user {reviewed.user_id})"
        )
        return reviewed

    def list_requests(
        self, reviewer_id: int, status: RequestStatus | None = RequestStatus.PENDING
    ) -> list[WalletRequest]:
        """Requests visible to the reviewer: all for admins, own players for subadmins."""
        reviewer = self.user_repo.get_by_id(reviewer_id)
        if reviewer is None:
            raise NotFound(f"User {reviewer_id} not found.", code=error_codes.USER_NOT_FOUND)
        if has_admin_permission(reviewer):
            return self._requests().list_requests(status=status)
        if reviewer.is_subadmin:
            return self._requests().list_requests(status=status, owner_id=reviewer_id)
        return self._requests().list_requests(status=status, user_id=reviewer_id)

    def _requests(self) -> IWalletRequestRepository:
        if self.request_repo is None:
            raise RuntimeError("WalletService was created without a wallet request repository.")
        return self.request_repo

    @staticmethod
    def _positive(amount: Money | int) -> Money:
        amount = Money.of(amount)
        if not amount.is_positive():
            raise ValueError("Amount must be positive.")
        return amount
