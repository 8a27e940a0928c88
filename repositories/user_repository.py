"""
Repository for platform users and the ownership hierarchy.
"""

from __future__ import annotations

import sqlite3

from domain.exceptions import NotFound, StateError
from domain.models.money import Money
from domain.models.user import User, UserRole
from domain.models.wallet import TransactionReason
from repositories.base_repository import BaseRepository
from repositories.interfaces import IUserRepository
from repositories.wallet_repository import apply_wallet_delta
from services import error_codes


class UserRepository(BaseRepository, IUserRepository):
    """
    Handles CRUD operations against the users table.
    """

    def add(
        self,
        username: str,
        role: UserRole,
        assigned_to: int | None = None,
        initial_balance: int = 0,
    ) -> int:
        """
        Insert a user and credit any initial balance as a deposit.

        The user row starts at zero and the opening balance goes through the
        wallet log in the same transaction, so replaying the log reproduces it.

        Raises:
            StateError: If the username is taken
        """
        if initial_balance < 0:
            raise ValueError("Initial balance cannot be negative.")

        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            try:
                cursor.execute(
                    """
                    INSERT INTO users (username, role, balance, assigned_to)
                    VALUES (?, ?, 0, ?)
                    """,
                    (username, role.value, assigned_to),
                )
            except sqlite3.IntegrityError as exc:
                raise StateError(
                    f"Username {username!r} is already taken.",
                    code=error_codes.USER_ALREADY_EXISTS,
                ) from exc
            user_id = cursor.lastrowid

            if initial_balance > 0:
                apply_wallet_delta(cursor, user_id, initial_balance, TransactionReason.DEPOSIT)
            return user_id

    def get_by_id(self, user_id: int) -> User | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM users WHERE user_id = ?", (user_id,))
            row = cursor.fetchone()
            return self._row_to_user(row) if row else None

    def get_by_username(self, username: str) -> User | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM users WHERE username = ?", (username,))
            row = cursor.fetchone()
            return self._row_to_user(row) if row else None

    def get_root_admin(self) -> User | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM users WHERE role = 'admin' AND assigned_to IS NULL ORDER BY user_id LIMIT 1"
            )
            row = cursor.fetchone()
            return self._row_to_user(row) if row else None

    def list_assigned(self, owner_id: int, role: UserRole | None = None) -> list[User]:
        with self.connection() as conn:
            cursor = conn.cursor()
            if role is None:
                cursor.execute(
                    "SELECT * FROM users WHERE assigned_to = ? ORDER BY user_id",
                    (owner_id,),
                )
            else:
                cursor.execute(
                    "SELECT * FROM users WHERE assigned_to = ? AND role = ? ORDER BY user_id",
                    (owner_id, role.value),
                )
            return [self._row_to_user(row) for row in cursor.fetchall()]

    def set_blocked(self, user_id: int, blocked: bool) -> None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE users SET is_blocked = ?, updated_at = CURRENT_TIMESTAMP WHERE user_id = ?",
                (1 if blocked else 0, user_id),
            )
            if cursor.rowcount == 0:
                raise NotFound(f"User {user_id} not found.", code=error_codes.USER_NOT_FOUND)

    def exists(self, user_id: int) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT 1 FROM users WHERE user_id = ?", (user_id,))
            return cursor.fetchone() is not None

    @staticmethod
    def _row_to_user(row) -> User:
        return User(
            user_id=row["user_id"],
            username=row["username"],
            role=UserRole(row["role"]),
            balance=Money(int(row["balance"])),
            assigned_to=row["assigned_to"],
            is_blocked=bool(row["is_blocked"]),
            created_at=row["created_at"],
        )
