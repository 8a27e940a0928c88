"""
Tests for account creation and the ownership hierarchy.
"""

import pytest

from domain.exceptions import NotFound, PermissionDenied, StateError
from domain.models.money import Money
from domain.models.user import UserRole
from services import error_codes


class TestCreation:
    def test_hierarchy(self, hierarchy):
        admin, sub, player = hierarchy["admin"], hierarchy["subadmin"], hierarchy["player"]
        assert admin.role is UserRole.ADMIN and admin.assigned_to is None
        assert sub.role is UserRole.SUBADMIN and sub.assigned_to == admin.user_id
        assert player.role is UserRole.PLAYER and player.assigned_to == sub.user_id

    def test_only_one_root_admin(self, user_service, hierarchy):
        with pytest.raises(StateError):
            user_service.create_admin("second_root")

    def test_subadmin_owner_must_be_admin(self, user_service, hierarchy):
        with pytest.raises(StateError) as exc_info:
            user_service.create_subadmin("nested", hierarchy["subadmin"].user_id)
        assert exc_info.value.code == error_codes.INVALID_OWNER

    def test_player_cannot_own_players(self, user_service, hierarchy):
        with pytest.raises(StateError):
            user_service.create_player("child", hierarchy["player"].user_id)

    def test_player_gets_default_starting_balance(self, user_service, wallet_service, hierarchy):
        player = user_service.create_player("fresh", hierarchy["subadmin"].user_id)
        assert player.balance == Money(1000)
        assert wallet_service.verify_ledger(player.user_id).consistent

    def test_negative_opening_balance(self, user_service, hierarchy):
        with pytest.raises(ValueError):
            user_service.create_player("neg", hierarchy["subadmin"].user_id, initial_balance=-1)

    def test_duplicate_username(self, user_service, hierarchy):
        with pytest.raises(StateError):
            user_service.create_player("punter", hierarchy["subadmin"].user_id)

    def test_blank_username(self, user_service, hierarchy):
        with pytest.raises(ValueError):
            user_service.create_player("  ", hierarchy["subadmin"].user_id)

    def test_unknown_owner(self, user_service):
        with pytest.raises(NotFound):
            user_service.create_player("orphan", 77)


class TestQueries:
    def test_get_owner(self, user_service, hierarchy):
        assert user_service.get_owner(hierarchy["player"].user_id).user_id == hierarchy["subadmin"].user_id
        assert user_service.get_owner(hierarchy["admin"].user_id) is None

    def test_list_assigned(self, user_service, hierarchy):
        second = user_service.create_player("second", hierarchy["subadmin"].user_id)
        assigned = user_service.list_assigned(hierarchy["subadmin"].user_id)
        assert {u.user_id for u in assigned} == {hierarchy["player"].user_id, second.user_id}
        assert [u.user_id for u in user_service.list_assigned(hierarchy["admin"].user_id, UserRole.SUBADMIN)] == [
            hierarchy["subadmin"].user_id
        ]


class TestBlocking:
    def test_block_and_unblock(self, user_service, hierarchy):
        player_id = hierarchy["player"].user_id
        assert user_service.block_user(player_id).is_blocked is True
        assert user_service.unblock_user(player_id).is_blocked is False

    def test_root_admin_cannot_be_blocked(self, user_service, hierarchy):
        with pytest.raises(StateError):
            user_service.block_user(hierarchy["admin"].user_id)

    def test_subadmin_blocks_own_player_only(self, user_service, hierarchy):
        other_sub = user_service.create_subadmin("rival", hierarchy["admin"].user_id)
        with pytest.raises(PermissionDenied):
            user_service.block_user(hierarchy["player"].user_id, actor_id=other_sub.user_id)

        blocked = user_service.block_user(hierarchy["player"].user_id, actor_id=hierarchy["subadmin"].user_id)
        assert blocked.is_blocked
