"""
Repository for player deposit and withdrawal requests.
"""

from __future__ import annotations

from domain.exceptions import NotFound, StateError
from domain.models.money import Money
from domain.models.wallet import (
    RequestStatus,
    RequestType,
    TransactionReason,
    WalletRequest,
)
from repositories.base_repository import BaseRepository
from repositories.interfaces import IWalletRequestRepository
from repositories.wallet_repository import apply_wallet_delta
from services import error_codes


class WalletRequestRepository(BaseRepository, IWalletRequestRepository):
    """
    Handles the wallet_requests table. Approval moves money through the
    wallet log in the same transaction as the status change.
    """

    def create(
        self, user_id: int, request_type: RequestType, amount: int, notes: str | None = None
    ) -> int:
        if amount <= 0:
            raise ValueError("Request amount must be positive.")
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO wallet_requests (user_id, request_type, amount, notes)
                VALUES (?, ?, ?, ?)
                """,
                (user_id, request_type.value, amount, notes),
            )
            return cursor.lastrowid

    def get_by_id(self, request_id: int) -> WalletRequest | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM wallet_requests WHERE request_id = ?", (request_id,))
            row = cursor.fetchone()
            return self._row_to_request(row) if row else None

    def list_requests(
        self,
        status: RequestStatus | None = None,
        owner_id: int | None = None,
        user_id: int | None = None,
    ) -> list[WalletRequest]:
        """
        List requests, newest first.

        owner_id restricts to requests of players assigned to that admin/subadmin.
        """
        clauses = []
        params: list = []
        if status is not None:
            clauses.append("r.status = ?")
            params.append(status.value)
        if owner_id is not None:
            clauses.append("u.assigned_to = ?")
            params.append(owner_id)
        if user_id is not None:
            clauses.append("r.user_id = ?")
            params.append(user_id)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT r.* FROM wallet_requests r
                JOIN users u ON u.user_id = r.user_id
                {where}
                ORDER BY r.request_id DESC
                """,
                params,
            )
            return [self._row_to_request(row) for row in cursor.fetchall()]

    def review_atomic(
        self,
        request_id: int,
        reviewer_id: int,
        approve: bool,
        notes: str | None = None,
    ) -> WalletRequest:
        """
        Approve or reject a pending request.

        The status flip is conditional on status = 'pending'; on approval the
        deposit credit or withdrawal debit is applied before commit. A failed
        debit rolls the status back, leaving the request pending.

        Raises:
            NotFound: If the request does not exist
            StateError: If the request was already reviewed
            InsufficientBalance: If a withdrawal exceeds the balance
        """
        status = RequestStatus.APPROVED if approve else RequestStatus.REJECTED

        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM wallet_requests WHERE request_id = ?", (request_id,))
            row = cursor.fetchone()
            if not row:
                raise NotFound(
                    f"Wallet request {request_id} not found.", code=error_codes.REQUEST_NOT_FOUND
                )

            cursor.execute(
                """
                UPDATE wallet_requests
                SET status = ?, reviewed_by = ?, reviewed_at = CURRENT_TIMESTAMP,
                    notes = COALESCE(?, notes)
                WHERE request_id = ? AND status = 'pending'
                """,
                (status.value, reviewer_id, notes, request_id),
            )
            if cursor.rowcount == 0:
                raise StateError(f"Wallet request {request_id} is already {row['status']}.")

            if approve:
                amount = int(row["amount"])
                if row["request_type"] == RequestType.DEPOSIT.value:
                    apply_wallet_delta(
                        cursor,
                        row["user_id"],
                        amount,
                        TransactionReason.DEPOSIT,
                        related_request_id=request_id,
                    )
                else:
                    apply_wallet_delta(
                        cursor,
                        row["user_id"],
                        -amount,
                        TransactionReason.WITHDRAWAL,
                        related_request_id=request_id,
                    )

            cursor.execute("SELECT * FROM wallet_requests WHERE request_id = ?", (request_id,))
            return self._row_to_request(cursor.fetchone())

    @staticmethod
    def _row_to_request(row) -> WalletRequest:
        return WalletRequest(
            request_id=row["request_id"],
            user_id=row["user_id"],
            request_type=RequestType(row["request_type"]),
            amount=Money(int(row["amount"])),
            status=RequestStatus(row["status"]),
            notes=row["notes"],
            reviewed_by=row["reviewed_by"],
            created_at=row["created_at"],
            reviewed_at=row["reviewed_at"],
        )
