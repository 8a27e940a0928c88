"""Tests for deposit and withdrawal requests."""

import pytest

from domain.exceptions import InsufficientBalance, NotFound, PermissionDenied, StateError, UserBlocked
from domain.models.money import Money
from domain.models.wallet import RequestStatus, RequestType, TransactionReason
from tests.conftest import PLAYER_BALANCE


class TestCreateRequest:
    def test_create_pending(self, wallet_service, hierarchy):
        req = wallet_service.create_request(hierarchy["player"].user_id, "deposit", 500, notes="upi ref 1")
        assert req.status is RequestStatus.PENDING
        assert req.request_type is RequestType.DEPOSIT
        assert req.amount == Money(500)
        # Nothing moves until review
        assert wallet_service.get_balance(hierarchy["player"].user_id) == Money(PLAYER_BALANCE)

    def test_blocked_user_cannot_request(self, wallet_service, user_service, hierarchy):
        user_service.block_user(hierarchy["player"].user_id)
        with pytest.raises(UserBlocked):
            wallet_service.create_request(hierarchy["player"].user_id, RequestType.DEPOSIT, 500)

    def test_amount_positive(self, wallet_service, hierarchy):
        with pytest.raises(ValueError):
            wallet_service.create_request(hierarchy["player"].user_id, RequestType.DEPOSIT, 0)


class TestReviewRequest:
    def test_approve_deposit_credits_with_link(self, wallet_service, hierarchy):
        player_id = hierarchy["player"].user_id
        req = wallet_service.create_request(player_id, RequestType.DEPOSIT, 500)

        reviewed = wallet_service.review_request(req.request_id, hierarchy["subadmin"].user_id, approve=True)

        assert reviewed.status is RequestStatus.APPROVED
        assert reviewed.reviewed_by == hierarchy["subadmin"].user_id
        assert wallet_service.get_balance(player_id) == Money(PLAYER_BALANCE + 500)
        latest = wallet_service.get_transactions(player_id, limit=1)[0]
        assert latest.reason is TransactionReason.DEPOSIT
        assert latest.related_request_id == req.request_id

    def test_approve_withdrawal_debits(self, wallet_service, hierarchy):
        player_id = hierarchy["player"].user_id
        req = wallet_service.create_request(player_id, RequestType.WITHDRAWAL, 4000)

        wallet_service.review_request(req.request_id, hierarchy["admin"].user_id, approve=True)
        assert wallet_service.get_balance(player_id) == Money(PLAYER_BALANCE - 4000)

    def test_withdrawal_over_balance_stays_pending(self, wallet_service, hierarchy, wallet_request_repository):
        player_id = hierarchy["player"].user_id
        req = wallet_service.create_request(player_id, RequestType.WITHDRAWAL, PLAYER_BALANCE + 1)

        with pytest.raises(InsufficientBalance):
            wallet_service.review_request(req.request_id, hierarchy["admin"].user_id, approve=True)

        assert wallet_request_repository.get_by_id(req.request_id).status is RequestStatus.PENDING
        assert wallet_service.get_balance(player_id) == Money(PLAYER_BALANCE)

    def test_reject_moves_nothing(self, wallet_service, hierarchy):
        player_id = hierarchy["player"].user_id
        req = wallet_service.create_request(player_id, RequestType.DEPOSIT, 500)

        reviewed = wallet_service.review_request(
            req.request_id, hierarchy["admin"].user_id, approve=False, notes="no proof"
        )
        assert reviewed.status is RequestStatus.REJECTED
        assert reviewed.notes == "no proof"
        assert wallet_service.get_balance(player_id) == Money(PLAYER_BALANCE)

    def test_second_review_is_state_error(self, wallet_service, hierarchy):
        req = wallet_service.create_request(hierarchy["player"].user_id, RequestType.DEPOSIT, 500)
        wallet_service.review_request(req.request_id, hierarchy["admin"].user_id, approve=True)

        with pytest.raises(StateError):
            wallet_service.review_request(req.request_id, hierarchy["admin"].user_id, approve=True)
        assert wallet_service.get_balance(hierarchy["player"].user_id) == Money(PLAYER_BALANCE + 500)

    def test_subadmin_cannot_review_foreign_player(self, wallet_service, user_service, hierarchy):
        other_sub = user_service.create_subadmin("other", hierarchy["admin"].user_id)
        req = wallet_service.create_request(hierarchy["player"].user_id, RequestType.DEPOSIT, 500)

        with pytest.raises(PermissionDenied):
            wallet_service.review_request(req.request_id, other_sub.user_id, approve=True)

    def test_unknown_request(self, wallet_service, hierarchy):
        with pytest.raises(NotFound):
            wallet_service.review_request(999, hierarchy["admin"].user_id, approve=True)


class TestListRequests:
    def test_visibility_by_role(self, wallet_service, user_service, hierarchy):
        other_sub = user_service.create_subadmin("other", hierarchy["admin"].user_id)
        other_player = user_service.create_player("other_p", other_sub.user_id)
        mine = wallet_service.create_request(hierarchy["player"].user_id, RequestType.DEPOSIT, 100)
        theirs = wallet_service.create_request(other_player.user_id, RequestType.DEPOSIT, 100)

        admin_view = {r.request_id for r in wallet_service.list_requests(hierarchy["admin"].user_id)}
        sub_view = {r.request_id for r in wallet_service.list_requests(hierarchy["subadmin"].user_id)}
        player_view = {r.request_id for r in wallet_service.list_requests(other_player.user_id)}

        assert admin_view == {mine.request_id, theirs.request_id}
        assert sub_view == {mine.request_id}
        assert player_view == {theirs.request_id}
