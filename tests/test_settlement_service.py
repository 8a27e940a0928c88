"""Tests for result declaration and settlement."""

import sqlite3
from concurrent.futures import ThreadPoolExecutor

import pytest

from domain.exceptions import AlreadyResulted, InvalidResultFormat, MarketNotResulted, NotFound
from domain.models.bet import BetStatus
from domain.models.game import GameType, MarketKind
from domain.models.market import MarketStatus
from domain.models.money import Money
from domain.models.wallet import TransactionReason
from tests.conftest import PLAYER_BALANCE


@pytest.fixture
def commission_5pct(odds_service, hierarchy):
    for game_type in GameType:
        odds_service.set_commission_rate(hierarchy["subadmin"].user_id, game_type, 500)


class TestWorkedExamples:
    def test_winning_coin_flip(self, betting_service, settlement_service, wallet_service, hierarchy, default_odds, coin_market):
        """100.00 balance, 20.00 on heads at 1.95x, heads wins: 80.00 + 39.00 = 119.00."""
        player_id = hierarchy["player"].user_id
        bet = betting_service.place_bet(player_id, "coin_flip", 2000, "heads", coin_market.market_id)

        summary = settlement_service.declare_result(coin_market.market_id, "heads")

        assert wallet_service.get_balance(player_id) == Money(11900)
        settled = betting_service.get_bet(bet.bet_id)
        assert settled.status is BetStatus.WON
        assert settled.payout == Money(3900)
        assert settled.profit == Money(1900)
        assert summary.won_count == 1
        assert summary.total_payout == Money(3900)

    def test_losing_coin_flip_pays_commission(
        self, betting_service, settlement_service, wallet_service, hierarchy, default_odds, commission_5pct, coin_market
    ):
        player_id = hierarchy["player"].user_id
        sub_id = hierarchy["subadmin"].user_id
        bet = betting_service.place_bet(player_id, "coin_flip", 2000, "heads", coin_market.market_id)

        summary = settlement_service.declare_result(coin_market.market_id, "tails")

        assert wallet_service.get_balance(player_id) == Money(8000)
        assert wallet_service.get_balance(sub_id) == Money(100)  # 5% of 20.00
        assert betting_service.get_bet(bet.bet_id).status is BetStatus.LOST
        assert summary.lost_count == 1
        assert summary.total_commission == Money(100)

        [commission] = [
            t for t in wallet_service.get_transactions(sub_id) if t.reason is TransactionReason.COMMISSION
        ]
        assert commission.related_bet_id == bet.bet_id

    def test_commission_on_fifty_rupee_loss(
        self, betting_service, settlement_service, wallet_service, hierarchy, default_odds, commission_5pct, matka_market
    ):
        betting_service.place_bet(
            hierarchy["player"].user_id, GameType.SATAMATKA_JODI, 5000, "11", matka_market.market_id
        )
        summary = settlement_service.declare_result(matka_market.market_id, "42")

        assert summary.total_commission == Money(250)
        assert wallet_service.get_balance(hierarchy["subadmin"].user_id) == Money(250)

    def test_winning_bet_earns_no_commission(
        self, betting_service, settlement_service, wallet_service, hierarchy, default_odds, commission_5pct, coin_market
    ):
        betting_service.place_bet(hierarchy["player"].user_id, "coin_flip", 2000, "heads", coin_market.market_id)
        settlement_service.declare_result(coin_market.market_id, "heads")

        assert wallet_service.get_balance(hierarchy["subadmin"].user_id) == Money.zero()

    def test_player_owned_by_admin_generates_no_commission(
        self, betting_service, settlement_service, wallet_service, user_service, hierarchy, default_odds, coin_market
    ):
        direct = user_service.create_player("direct", hierarchy["admin"].user_id, initial_balance=1000)
        betting_service.place_bet(direct.user_id, "coin_flip", 500, "heads", coin_market.market_id)

        summary = settlement_service.declare_result(coin_market.market_id, "tails")
        assert summary.total_commission == Money.zero()
        assert wallet_service.get_balance(hierarchy["admin"].user_id) == Money.zero()


class TestSatamatkaSettlement:
    def test_mixed_modes(self, betting_service, settlement_service, wallet_service, hierarchy, default_odds, matka_market):
        player_id = hierarchy["player"].user_id
        m = matka_market.market_id
        jodi = betting_service.place_bet(player_id, GameType.SATAMATKA_JODI, 100, "42", m)
        harf_l = betting_service.place_bet(player_id, GameType.SATAMATKA_HARF, 100, "L4", m)
        harf_r = betting_service.place_bet(player_id, GameType.SATAMATKA_HARF, 100, "R4", m)
        crossing = betting_service.place_bet(player_id, GameType.SATAMATKA_CROSSING, 100, "2,7", m)
        parity = betting_service.place_bet(player_id, GameType.SATAMATKA_ODD_EVEN, 100, "even", m)

        summary = settlement_service.declare_result(m, "42")

        statuses = {b: betting_service.get_bet(b.bet_id).status for b in (jodi, harf_l, harf_r, crossing, parity)}
        assert statuses[jodi] is BetStatus.WON
        assert statuses[harf_l] is BetStatus.WON
        assert statuses[harf_r] is BetStatus.LOST
        assert statuses[crossing] is BetStatus.WON
        assert statuses[parity] is BetStatus.WON
        # 9000 + 900 + 900 + 180 percent of 1.00 each
        assert summary.total_payout == Money(9000 + 900 + 900 + 180)
        assert wallet_service.get_balance(player_id) == Money(PLAYER_BALANCE - 500 + 10980)


class TestDeclareResult:
    def test_open_market_passes_through_closed(self, settlement_service, market_service, coin_market):
        settlement_service.declare_result(coin_market.market_id, "heads")
        market = market_service.get_market(coin_market.market_id)
        assert market.status is MarketStatus.RESULTED
        assert market.closed_at is not None
        assert market.result == "heads"

    def test_invalid_result_format(self, settlement_service, matka_market):
        with pytest.raises(InvalidResultFormat):
            settlement_service.declare_result(matka_market.market_id, "4")

    def test_unknown_market(self, settlement_service):
        with pytest.raises(NotFound):
            settlement_service.declare_result(999, "heads")

    def test_same_result_again_is_noop(
        self, betting_service, settlement_service, wallet_service, hierarchy, default_odds, coin_market
    ):
        player_id = hierarchy["player"].user_id
        betting_service.place_bet(player_id, "coin_flip", 2000, "heads", coin_market.market_id)

        settlement_service.declare_result(coin_market.market_id, "heads")
        again = settlement_service.declare_result(coin_market.market_id, "heads")

        assert again.already_resulted is True
        assert again.settled_count == 0
        assert wallet_service.get_balance(player_id) == Money(11900)
        assert wallet_service.verify_ledger(player_id).consistent

    def test_different_result_is_rejected(self, settlement_service, coin_market):
        settlement_service.declare_result(coin_market.market_id, "heads")
        with pytest.raises(AlreadyResulted):
            settlement_service.declare_result(coin_market.market_id, "tails")

    def test_concurrent_declarations_pay_once(
        self, betting_service, settlement_service, wallet_service, hierarchy, default_odds, coin_market
    ):
        player_id = hierarchy["player"].user_id
        for _ in range(5):
            betting_service.place_bet(player_id, "coin_flip", 1000, "heads", coin_market.market_id)

        with ThreadPoolExecutor(max_workers=4) as pool:
            summaries = list(pool.map(lambda _: settlement_service.declare_result(coin_market.market_id, "heads"), range(4)))

        assert sum(s.settled_count for s in summaries) == 5
        assert wallet_service.get_balance(player_id) == Money(PLAYER_BALANCE - 5000 + 5 * 1950)
        assert wallet_service.verify_ledger(player_id).consistent


class TestSettleMarket:
    def test_requires_result(self, settlement_service, coin_market):
        with pytest.raises(MarketNotResulted):
            settlement_service.settle_market(coin_market.market_id)

    def test_resettle_skips_settled_bets(
        self, betting_service, settlement_service, wallet_service, hierarchy, default_odds, coin_market
    ):
        player_id = hierarchy["player"].user_id
        betting_service.place_bet(player_id, "coin_flip", 2000, "heads", coin_market.market_id)
        settlement_service.declare_result(coin_market.market_id, "heads")

        summary = settlement_service.settle_market(coin_market.market_id)

        assert summary.settled_count == 0
        assert wallet_service.get_balance(player_id) == Money(11900)

    def test_crash_between_result_and_settlement_is_recovered(
        self, betting_service, settlement_service, market_repository, wallet_service, hierarchy, default_odds, coin_market
    ):
        """Result stored but bets still pending: re-declaring finishes the job."""
        player_id = hierarchy["player"].user_id
        betting_service.place_bet(player_id, "coin_flip", 2000, "heads", coin_market.market_id)
        market_repository.close_and_result(coin_market.market_id, "heads")

        summary = settlement_service.declare_result(coin_market.market_id, "heads")

        assert summary.already_resulted is True
        assert summary.settled_count == 1
        assert wallet_service.get_balance(player_id) == Money(11900)

    def test_unknown_game_type_halts_only_that_bet(
        self, betting_service, settlement_service, bet_repository, wallet_service, hierarchy, default_odds, coin_market, repo_db_path
    ):
        player_id = hierarchy["player"].user_id
        good = betting_service.place_bet(player_id, "coin_flip", 1000, "heads", coin_market.market_id)
        bad = betting_service.place_bet(player_id, "coin_flip", 1000, "heads", coin_market.market_id)
        with sqlite3.connect(repo_db_path) as conn:
            conn.execute("UPDATE bets SET game_type = 'roulette' WHERE bet_id = ?", (bad.bet_id,))

        summary = settlement_service.declare_result(coin_market.market_id, "heads")

        assert summary.failed == [bad.bet_id]
        assert summary.settled_count == 1
        assert bet_repository.get_by_id(good.bet_id).status is BetStatus.WON
        [pending] = bet_repository.get_pending_bets_for_market(coin_market.market_id)
        assert pending["bet_id"] == bad.bet_id
        assert wallet_service.verify_ledger(player_id).consistent

    def test_payout_overflow_halts_only_that_bet(
        self, betting_service, settlement_service, bet_repository, wallet_service, hierarchy, default_odds, coin_market, repo_db_path
    ):
        player_id = hierarchy["player"].user_id
        whale = betting_service.place_bet(player_id, "coin_flip", 1000, "heads", coin_market.market_id)
        small = betting_service.place_bet(player_id, "coin_flip", 1000, "heads", coin_market.market_id)
        with sqlite3.connect(repo_db_path) as conn:
            conn.execute("UPDATE bets SET resolved_odds = ? WHERE bet_id = ?", (2**62, whale.bet_id))

        summary = settlement_service.declare_result(coin_market.market_id, "heads")

        assert summary.failed == [whale.bet_id]
        assert bet_repository.get_by_id(small.bet_id).status is BetStatus.WON
        stuck = bet_repository.get_by_id(whale.bet_id)
        assert stuck.status is BetStatus.PENDING
        assert "OverflowError" in stuck.settlement_error
        assert wallet_service.get_balance(player_id) == Money(PLAYER_BALANCE - 2000 + 1950)
        assert wallet_service.verify_ledger(player_id).consistent

    def test_failed_bet_records_error(
        self, betting_service, settlement_service, hierarchy, default_odds, matka_market, repo_db_path
    ):
        bet = betting_service.place_bet(
            hierarchy["player"].user_id, GameType.SATAMATKA_JODI, 100, "42", matka_market.market_id
        )
        with sqlite3.connect(repo_db_path) as conn:
            conn.execute("UPDATE bets SET prediction = 'banana' WHERE bet_id = ?", (bet.bet_id,))

        summary = settlement_service.declare_result(matka_market.market_id, "42")

        assert summary.failed == [bet.bet_id]
        with sqlite3.connect(repo_db_path) as conn:
            (error,) = conn.execute(
                "SELECT settlement_error FROM bets WHERE bet_id = ?", (bet.bet_id,)
            ).fetchone()
        assert "banana" in error

    def test_every_bet_in_market_is_terminal_after_settlement(
        self, betting_service, settlement_service, market_service, user_service, hierarchy, default_odds
    ):
        market = market_service.create_market("Final", MarketKind.TEAM_MATCH)
        players = [
            user_service.create_player(f"fan{i}", hierarchy["subadmin"].user_id, initial_balance=1000)
            for i in range(4)
        ]
        for i, player in enumerate(players):
            betting_service.place_bet(player.user_id, "team_match", 100, ["team_a", "team_b", "draw", "team_a"][i], market.market_id)

        summary = settlement_service.declare_result(market.market_id, "team_a")

        assert (summary.won_count, summary.lost_count) == (2, 2)
        for player in players:
            assert all(b.status.is_terminal for b in betting_service.get_bet_history(player.user_id))
