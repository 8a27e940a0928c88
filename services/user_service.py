"""
User management: the admin -> subadmin -> player ownership tree.
"""

import logging

from config import STARTING_BALANCE
from domain.exceptions import NotFound, StateError
from domain.models.money import Money
from domain.models.user import User, UserRole
from repositories.interfaces import IUserRepository
from services import error_codes
from services.interfaces import IUserService
from services.permissions import require_can_manage

logger = logging.getLogger("matka_ledger.services.user")


class UserService(IUserService):
    """
    Creates accounts and enforces the ownership rules:
    exactly one root admin; subadmins owned by an admin; players owned by an
    admin or a subadmin.
    """

    def __init__(self, user_repo: IUserRepository, starting_balance: int | None = None):
        self.user_repo = user_repo
        self.starting_balance = starting_balance if starting_balance is not None else STARTING_BALANCE

    def create_admin(self, username: str) -> User:
        if self.user_repo.get_root_admin() is not None:
            raise StateError("A root admin already exists.")
        user_id = self.user_repo.add(self._clean_username(username), UserRole.ADMIN)
        logger.info(f"Created root admin {username!r} (id={user_id})")
        return self.get_user(user_id)

    def create_subadmin(self, username: str, owner_id: int) -> User:
        owner = self.get_user(owner_id)
        if not owner.is_admin:
            raise StateError(
                f"Subadmins must be owned by an admin; user {owner_id} is a {owner.role.value}.",
                code=error_codes.INVALID_OWNER,
            )
        user_id = self.user_repo.add(self._clean_username(username), UserRole.SUBADMIN, assigned_to=owner_id)
        logger.info(f"Created subadmin {username!r} (id={user_id}) under {owner_id}")
        return self.get_user(user_id)

    def create_player(
        self, username: str, owner_id: int, initial_balance: Money | int | None = None
    ) -> User:
        """
        Create a player owned by an admin or subadmin.

        The opening balance (STARTING_BALANCE by default) is credited as a
        deposit transaction.
        """
        owner = self.get_user(owner_id)
        if owner.is_player:
            raise StateError(
                f"Players must be owned by an admin or subadmin; user {owner_id} is a player.",
                code=error_codes.INVALID_OWNER,
            )
        balance = Money.of(initial_balance) if initial_balance is not None else Money(self.starting_balance)
        if balance.is_negative():
            raise ValueError("Initial balance cannot be negative.")

        user_id = self.user_repo.add(
            self._clean_username(username),
            UserRole.PLAYER,
            assigned_to=owner_id,
            initial_balance=int(balance),
        )
        logger.info(f"Created player {username!r} (id={user_id}) under {owner_id} with balance {balance}")
        return self.get_user(user_id)

    def get_user(self, user_id: int) -> User:
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found.", code=error_codes.USER_NOT_FOUND)
        return user

    def get_owner(self, user_id: int) -> User | None:
        user = self.get_user(user_id)
        if user.assigned_to is None:
            return None
        return self.user_repo.get_by_id(user.assigned_to)

    def list_assigned(self, owner_id: int, role: UserRole | None = None) -> list[User]:
        self.get_user(owner_id)
        return self.user_repo.list_assigned(owner_id, role)

    def block_user(self, user_id: int, actor_id: int | None = None) -> User:
        return self._set_blocked(user_id, True, actor_id)

    def unblock_user(self, user_id: int, actor_id: int | None = None) -> User:
        return self._set_blocked(user_id, False, actor_id)

    def _set_blocked(self, user_id: int, blocked: bool, actor_id: int | None) -> User:
        target = self.get_user(user_id)
        if actor_id is not None:
            require_can_manage(self.get_user(actor_id), target)
        if target.is_admin and target.assigned_to is None and blocked:
            raise StateError("The root admin cannot be blocked.")
        self.user_repo.set_blocked(user_id, blocked)
        logger.info(f"User {user_id} {'blocked' if blocked else 'unblocked'}")
        return self.get_user(user_id)

    @staticmethod
    def _clean_username(username: str) -> str:
        cleaned = (username or "").strip()
        if not cleaned:
            raise ValueError("Username cannot be empty.")
        return cleaned
