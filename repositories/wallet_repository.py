"""
Repository for wallet balances and the append-only transaction log.
"""

from __future__ import annotations

import logging
import sqlite3

from domain.exceptions import InsufficientBalance, NotFound
from domain.models.money import Money
from domain.models.wallet import LedgerCheck, TransactionReason, WalletTransaction
from repositories.base_repository import BaseRepository
from repositories.interfaces import IWalletRepository
from services import error_codes

logger = logging.getLogger("matka_ledger.repositories.wallet")


def apply_wallet_delta(
    cursor: sqlite3.Cursor,
    user_id: int,
    delta: int,
    reason: TransactionReason,
    related_bet_id: int | None = None,
    related_request_id: int | None = None,
) -> WalletTransaction:
    """
    Apply one balance change inside an already-open transaction.

    Reads the cached balance, rejects a negative result, updates the cache and
    appends the log row. Callers own the transaction (BEGIN IMMEDIATE), so the
    read and the write cannot be split by another writer.

    Raises:
        NotFound: If the user does not exist
        InsufficientBalance: If the delta would take the balance below zero
    """
    cursor.execute("SELECT balance FROM users WHERE user_id = ?", (user_id,))
    row = cursor.fetchone()
    if not row:
        raise NotFound(f"User {user_id} not found.", code=error_codes.USER_NOT_FOUND)

    balance = int(row["balance"])
    new_balance = balance + delta
    if new_balance < 0:
        raise InsufficientBalance(user_id, balance, -delta)

    cursor.execute(
        "UPDATE users SET balance = ?, updated_at = CURRENT_TIMESTAMP WHERE user_id = ?",
        (new_balance, user_id),
    )
    cursor.execute(
        """
        INSERT INTO wallet_transactions
            (user_id, delta, balance_after, reason, related_bet_id, related_request_id)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        (user_id, delta, new_balance, reason.value, related_bet_id, related_request_id),
    )
    return WalletTransaction(
        txn_id=cursor.lastrowid,
        user_id=user_id,
        delta=Money(delta),
        balance_after=Money(new_balance),
        reason=reason,
        related_bet_id=related_bet_id,
        related_request_id=related_request_id,
    )


class WalletRepository(BaseRepository, IWalletRepository):
    """
    Handles the users.balance cache and the wallet_transactions log.
    """

    def apply_delta(
        self,
        user_id: int,
        delta: int,
        reason: TransactionReason,
        related_bet_id: int | None = None,
        related_request_id: int | None = None,
    ) -> WalletTransaction:
        """Apply a single balance change in its own immediate transaction."""
        with self.atomic_transaction() as conn:
            return apply_wallet_delta(
                conn.cursor(),
                user_id,
                delta,
                reason,
                related_bet_id=related_bet_id,
                related_request_id=related_request_id,
            )

    def get_balance(self, user_id: int) -> int:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT balance FROM users WHERE user_id = ?", (user_id,))
            row = cursor.fetchone()
            if not row:
                raise NotFound(f"User {user_id} not found.", code=error_codes.USER_NOT_FOUND)
            return int(row["balance"])

    def get_transactions(
        self, user_id: int, limit: int = 50, offset: int = 0
    ) -> list[WalletTransaction]:
        """Newest first."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT * FROM wallet_transactions
                WHERE user_id = ?
                ORDER BY txn_id DESC
                LIMIT ? OFFSET ?
                """,
                (user_id, limit, offset),
            )
            return [self._row_to_transaction(row) for row in cursor.fetchall()]

    def get_transactions_for_bet(self, bet_id: int) -> list[WalletTransaction]:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM wallet_transactions WHERE related_bet_id = ? ORDER BY txn_id",
                (bet_id,),
            )
            return [self._row_to_transaction(row) for row in cursor.fetchall()]

    def replay(self, user_id: int) -> LedgerCheck:
        """
        Recompute the balance from the log and compare with the cached value.

        Walks the log in application order and also checks every stored
        balance_after against the running sum; the first divergence is logged.
        """
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT balance FROM users WHERE user_id = ?", (user_id,))
            row = cursor.fetchone()
            if not row:
                raise NotFound(f"User {user_id} not found.", code=error_codes.USER_NOT_FOUND)
            cached = int(row["balance"])

            cursor.execute(
                "SELECT txn_id, delta, balance_after FROM wallet_transactions WHERE user_id = ? ORDER BY txn_id",
                (user_id,),
            )
            running = 0
            count = 0
            for txn in cursor.fetchall():
                running += int(txn["delta"])
                count += 1
                if running != int(txn["balance_after"]):
                    logger.warning(
                        f"Ledger drift for user {user_id} at txn {txn['txn_id']}: "
                        f"running={running} stored={txn['balance_after']}"
                    )

        return LedgerCheck(
            user_id=user_id,
            cached_balance=Money(cached),
            replayed_balance=Money(running),
            transaction_count=count,
        )

    def get_all_user_ids(self) -> list[int]:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT user_id FROM users ORDER BY user_id")
            return [int(row["user_id"]) for row in cursor.fetchall()]

    def get_totals_by_reason(self, user_id: int) -> dict[str, int]:
        """Sum of deltas per reason, e.g. total commission earned."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT reason, COALESCE(SUM(delta), 0) AS total
                FROM wallet_transactions
                WHERE user_id = ?
                GROUP BY reason
                """,
                (user_id,),
            )
            return {row["reason"]: int(row["total"]) for row in cursor.fetchall()}

    @staticmethod
    def _row_to_transaction(row) -> WalletTransaction:
        return WalletTransaction(
            txn_id=row["txn_id"],
            user_id=row["user_id"],
            delta=Money(int(row["delta"])),
            balance_after=Money(int(row["balance_after"])),
            reason=TransactionReason(row["reason"]),
            related_bet_id=row["related_bet_id"],
            related_request_id=row["related_request_id"],
            created_at=row["created_at"],
        )
