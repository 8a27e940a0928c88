"""
Repository for managing betting data.
"""

from __future__ import annotations

from domain.exceptions import MarketClosed, NotFound
from domain.models.bet import Bet, BetStatus
from domain.models.game import GameType
from domain.models.money import Money
from domain.models.wallet import TransactionReason
from repositories.base_repository import BaseRepository
from repositories.interfaces import IBetRepository
from repositories.wallet_repository import apply_wallet_delta
from services import error_codes


class BetRepository(BaseRepository, IBetRepository):
    """
    Handles CRUD operations against the bets table.
    """

    def place_bet_atomic(
        self,
        *,
        user_id: int,
        market_id: int,
        game_type: GameType,
        stake: int,
        prediction: str,
        resolved_odds: int,
        odds_source: str,
    ) -> int:
        """
        Atomically place a bet:
        - ensure the market is still open
        - insert the pending bet with its odds snapshot
        - debit the stake with a bet_stake transaction linked to the bet

        Any failure (closed market, insufficient balance) rolls back both the
        bet row and the debit.
        """
        if stake <= 0:
            raise ValueError("Stake must be positive.")

        with self.atomic_transaction() as conn:
            cursor = conn.cursor()

            cursor.execute("SELECT status FROM markets WHERE market_id = ?", (market_id,))
            row = cursor.fetchone()
            if not row:
                raise NotFound(f"Market {market_id} not found.", code=error_codes.MARKET_NOT_FOUND)
            if row["status"] != "open":
                raise MarketClosed(f"Market {market_id} is {row['status']}; betting is closed.")

            cursor.execute(
                """
                INSERT INTO bets (user_id, market_id, game_type, stake, prediction, resolved_odds, odds_source)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (user_id, market_id, game_type.value, stake, prediction, resolved_odds, odds_source),
            )
            bet_id = cursor.lastrowid

            apply_wallet_delta(
                cursor, user_id, -stake, TransactionReason.BET_STAKE, related_bet_id=bet_id
            )
            return bet_id

    def get_by_id(self, bet_id: int) -> Bet | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM bets WHERE bet_id = ?", (bet_id,))
            row = cursor.fetchone()
            return self._row_to_bet(row) if row else None

    def get_pending_bets_for_market(self, market_id: int) -> list[dict]:
        """
        Raw pending rows for settlement, oldest first.

        Returned as dicts with the stored game_type string so a row whose game
        type is no longer known can still be reported individually.
        """
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT b.bet_id, b.user_id, b.game_type, b.stake, b.prediction,
                       b.resolved_odds, u.assigned_to AS owner_id
                FROM bets b
                JOIN users u ON u.user_id = b.user_id
                WHERE b.market_id = ? AND b.status = 'pending'
                ORDER BY b.bet_id
                """,
                (market_id,),
            )
            return [dict(row) for row in cursor.fetchall()]

    def get_bet_history(
        self,
        user_id: int,
        status: BetStatus | None = None,
        game_type: GameType | None = None,
        market_id: int | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> list[Bet]:
        """Bets for a user, newest first, with optional filters."""
        clauses = ["user_id = ?"]
        params: list = [user_id]
        if status is not None:
            clauses.append("status = ?")
            params.append(status.value)
        if game_type is not None:
            clauses.append("game_type = ?")
            params.append(game_type.value)
        if market_id is not None:
            clauses.append("market_id = ?")
            params.append(market_id)
        params.extend([limit, offset])

        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT * FROM bets
                WHERE {' AND '.join(clauses)}
                ORDER BY bet_id DESC
                LIMIT ? OFFSET ?
                """,
                params,
            )
            return [self._row_to_bet(row) for row in cursor.fetchall()]

    def count_bets_by_status(self, market_id: int) -> dict[str, int]:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT status, COUNT(*) AS n FROM bets WHERE market_id = ? GROUP BY status",
                (market_id,),
            )
            return {row["status"]: int(row["n"]) for row in cursor.fetchall()}

    def settle_bet_atomic(
        self,
        *,
        bet_id: int,
        status: BetStatus,
        payout: int = 0,
        commission_user_id: int | None = None,
        commission: int = 0,
    ) -> bool:
        """
        Atomically settle one bet:
        - flip Pending -> Won/Lost (first statement, conditional on pending)
        - credit the payout to the player for a win
        - credit commission to the owning subadmin for a loss

        Returns False, writing nothing, when the bet was no longer pending.
        """
        if not status.is_terminal:
            raise ValueError("Settlement status must be won or lost.")

        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE bets
                SET status = ?, payout = ?, settled_at = CURRENT_TIMESTAMP, settlement_error = NULL
                WHERE bet_id = ? AND status = 'pending'
                """,
                (status.value, payout, bet_id),
            )
            if cursor.rowcount == 0:
                return False

            cursor.execute("SELECT user_id FROM bets WHERE bet_id = ?", (bet_id,))
            user_id = cursor.fetchone()["user_id"]

            if payout > 0:
                apply_wallet_delta(
                    cursor, user_id, payout, TransactionReason.BET_PAYOUT, related_bet_id=bet_id
                )
            if commission > 0 and commission_user_id is not None:
                apply_wallet_delta(
                    cursor,
                    commission_user_id,
                    commission,
                    TransactionReason.COMMISSION,
                    related_bet_id=bet_id,
                )
            return True

    def record_settlement_error(self, bet_id: int, message: str) -> None:
        """Note why a pending bet could not be judged; the bet stays pending."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE bets SET settlement_error = ? WHERE bet_id = ? AND status = 'pending'",
                (message, bet_id),
            )

    @staticmethod
    def _row_to_bet(row) -> Bet:
        return Bet(
            bet_id=row["bet_id"],
            user_id=row["user_id"],
            game_type=GameType(row["game_type"]),
            stake=Money(int(row["stake"])),
            prediction=row["prediction"],
            resolved_odds=int(row["resolved_odds"]),
            odds_source=row["odds_source"],
            market_id=row["market_id"],
            status=BetStatus(row["status"]),
            payout=Money(int(row["payout"])),
            created_at=row["created_at"],
            settled_at=row["settled_at"],
            settlement_error=row["settlement_error"],
        )
