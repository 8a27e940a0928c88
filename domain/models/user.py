"""
User domain model.
"""

from dataclasses import dataclass
from enum import Enum

from domain.models.money import Money


class UserRole(Enum):
    """Roles in the ownership hierarchy (admin -> subadmin -> player)."""

    ADMIN = "admin"
    SUBADMIN = "subadmin"
    PLAYER = "player"


@dataclass
class User:
    """
    A platform account.

    balance is the cached snapshot of the wallet; the wallet transaction log
    is the source of truth.
    """

    user_id: int
    username: str
    role: UserRole
    balance: Money
    assigned_to: int | None = None  # owning subadmin/admin, None only for the root admin
    is_blocked: bool = False
    created_at: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    @property
    def is_subadmin(self) -> bool:
        return self.role is UserRole.SUBADMIN

    @property
    def is_player(self) -> bool:
        return self.role is UserRole.PLAYER
