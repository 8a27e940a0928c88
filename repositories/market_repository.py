"""
Repository for markets (satamatka markets, matches, tosses, coin-flip rounds).
"""

from __future__ import annotations

from domain.models.game import MarketKind
from domain.models.market import Market, MarketStatus
from repositories.base_repository import BaseRepository
from repositories.interfaces import IMarketRepository


class MarketRepository(BaseRepository, IMarketRepository):
    """
    Status changes are conditional updates: each returns False when the market
    was not in the expected source state, and the caller decides what that means.
    """

    def create(self, name: str, kind: MarketKind) -> int:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO markets (name, kind) VALUES (?, ?)",
                (name, kind.value),
            )
            return cursor.lastrowid

    def get_by_id(self, market_id: int) -> Market | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM markets WHERE market_id = ?", (market_id,))
            row = cursor.fetchone()
            return self._row_to_market(row) if row else None

    def list_markets(
        self, status: MarketStatus | None = None, kind: MarketKind | None = None
    ) -> list[Market]:
        clauses = []
        params: list = []
        if status is not None:
            clauses.append("status = ?")
            params.append(status.value)
        if kind is not None:
            clauses.append("kind = ?")
            params.append(kind.value)
        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT * FROM markets {where} ORDER BY market_id DESC", params)
            return [self._row_to_market(row) for row in cursor.fetchall()]

    def close(self, market_id: int) -> bool:
        """Open -> Closed."""
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE markets SET status = 'closed', closed_at = CURRENT_TIMESTAMP
                WHERE market_id = ? AND status = 'open'
                """,
                (market_id,),
            )
            return cursor.rowcount > 0

    def close_and_result(self, market_id: int, result: str) -> bool:
        """
        Open or Closed -> Resulted in one statement.

        An open market gets its closed_at stamped on the way through.
        """
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE markets
                SET status = 'resulted',
                    result = ?,
                    closed_at = COALESCE(closed_at, CURRENT_TIMESTAMP),
                    resulted_at = CURRENT_TIMESTAMP
                WHERE market_id = ? AND status IN ('open', 'closed')
                """,
                (result, market_id),
            )
            return cursor.rowcount > 0

    @staticmethod
    def _row_to_market(row) -> Market:
        return Market(
            market_id=row["market_id"],
            name=row["name"],
            kind=MarketKind(row["kind"]),
            status=MarketStatus(row["status"]),
            result=row["result"],
            created_at=row["created_at"],
            closed_at=row["closed_at"],
            resulted_at=row["resulted_at"],
        )
