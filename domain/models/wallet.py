"""
Wallet transaction and request domain models.
"""

from dataclasses import dataclass
from enum import Enum

from domain.models.money import Money


class TransactionReason(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    BET_STAKE = "bet_stake"
    BET_PAYOUT = "bet_payout"
    COMMISSION = "commission"


@dataclass(frozen=True)
class WalletTransaction:
    """One append-only entry in a user's wallet log."""

    txn_id: int
    user_id: int
    delta: Money
    balance_after: Money
    reason: TransactionReason
    related_bet_id: int | None = None
    related_request_id: int | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class LedgerCheck:
    """Outcome of replaying a user's transaction log against the cached balance."""

    user_id: int
    cached_balance: Money
    replayed_balance: Money
    transaction_count: int

    @property
    def consistent(self) -> bool:
        return self.cached_balance == self.replayed_balance


class RequestType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"


class RequestStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class WalletRequest:
    """A player's deposit or withdrawal request awaiting admin/subadmin review."""

    request_id: int
    user_id: int
    request_type: RequestType
    amount: Money
    status: RequestStatus
    notes: str | None = None
    reviewed_by: int | None = None
    created_at: str | None = None
    reviewed_at: str | None = None
