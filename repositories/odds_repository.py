"""
Repository for odds configuration: global defaults, subadmin overrides,
per-player discounts and subadmin commission rates.

Every table keeps history rows; at most one row per scope key is active,
enforced by partial unique indexes. Setting a value deactivates the current
row and inserts the replacement in one immediate transaction.
"""

from __future__ import annotations

from domain.models.game import GameType
from domain.models.odds import CommissionRate, GameOdds, UserDiscount
from repositories.base_repository import BaseRepository
from repositories.interfaces import IOddsRepository


class OddsRepository(BaseRepository, IOddsRepository):
    # --- Game odds ---

    def set_game_odds(self, game_type: GameType, multiplier: int, subadmin_id: int | None = None) -> int:
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            if subadmin_id is None:
                cursor.execute(
                    """
                    UPDATE game_odds SET is_active = 0, updated_at = CURRENT_TIMESTAMP
                    WHERE game_type = ? AND subadmin_id IS NULL AND is_active = 1
                    """,
                    (game_type.value,),
                )
            else:
                cursor.execute(
                    """
                    UPDATE game_odds SET is_active = 0, updated_at = CURRENT_TIMESTAMP
                    WHERE game_type = ? AND subadmin_id = ? AND is_active = 1
                    """,
                    (game_type.value, subadmin_id),
                )
            cursor.execute(
                "INSERT INTO game_odds (game_type, subadmin_id, multiplier) VALUES (?, ?, ?)",
                (game_type.value, subadmin_id, multiplier),
            )
            return cursor.lastrowid

    def get_game_odds(self, game_type: GameType, subadmin_id: int | None = None) -> GameOdds | None:
        """Active row for the scope: global default when subadmin_id is None."""
        with self.connection() as conn:
            cursor = conn.cursor()
            if subadmin_id is None:
                cursor.execute(
                    """
                    SELECT * FROM game_odds
                    WHERE game_type = ? AND subadmin_id IS NULL AND is_active = 1
                    """,
                    (game_type.value,),
                )
            else:
                cursor.execute(
                    """
                    SELECT * FROM game_odds
                    WHERE game_type = ? AND subadmin_id = ? AND is_active = 1
                    """,
                    (game_type.value, subadmin_id),
                )
            row = cursor.fetchone()
            return self._row_to_odds(row) if row else None

    def list_game_odds(self, subadmin_id: int | None = None) -> list[GameOdds]:
        with self.connection() as conn:
            cursor = conn.cursor()
            if subadmin_id is None:
                cursor.execute(
                    "SELECT * FROM game_odds WHERE subadmin_id IS NULL AND is_active = 1 ORDER BY game_type"
                )
            else:
                cursor.execute(
                    "SELECT * FROM game_odds WHERE subadmin_id = ? AND is_active = 1 ORDER BY game_type",
                    (subadmin_id,),
                )
            return [self._row_to_odds(row) for row in cursor.fetchall()]

    def deactivate_game_odds(self, game_type: GameType, subadmin_id: int | None = None) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            if subadmin_id is None:
                cursor.execute(
                    """
                    UPDATE game_odds SET is_active = 0, updated_at = CURRENT_TIMESTAMP
                    WHERE game_type = ? AND subadmin_id IS NULL AND is_active = 1
                    """,
                    (game_type.value,),
                )
            else:
                cursor.execute(
                    """
                    UPDATE game_odds SET is_active = 0, updated_at = CURRENT_TIMESTAMP
                    WHERE game_type = ? AND subadmin_id = ? AND is_active = 1
                    """,
                    (game_type.value, subadmin_id),
                )
            return cursor.rowcount > 0

    # --- Player discounts ---

    def set_user_discount(self, user_id: int, game_type: GameType, discount_bp: int) -> int:
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE user_discounts SET is_active = 0
                WHERE user_id = ? AND game_type = ? AND is_active = 1
                """,
                (user_id, game_type.value),
            )
            cursor.execute(
                "INSERT INTO user_discounts (user_id, game_type, discount_bp) VALUES (?, ?, ?)",
                (user_id, game_type.value, discount_bp),
            )
            return cursor.lastrowid

    def get_user_discount(self, user_id: int, game_type: GameType) -> UserDiscount | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT * FROM user_discounts
                WHERE user_id = ? AND game_type = ? AND is_active = 1
                """,
                (user_id, game_type.value),
            )
            row = cursor.fetchone()
            if not row:
                return None
            return UserDiscount(
                discount_id=row["discount_id"],
                user_id=row["user_id"],
                game_type=GameType(row["game_type"]),
                discount_bp=int(row["discount_bp"]),
                is_active=bool(row["is_active"]),
            )

    def deactivate_user_discount(self, user_id: int, game_type: GameType) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE user_discounts SET is_active = 0
                WHERE user_id = ? AND game_type = ? AND is_active = 1
                """,
                (user_id, game_type.value),
            )
            return cursor.rowcount > 0

    # --- Commission rates ---

    def set_commission_rate(self, subadmin_id: int, game_type: GameType, rate_bp: int) -> int:
        with self.atomic_transaction() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE commission_rates SET is_active = 0
                WHERE subadmin_id = ? AND game_type = ? AND is_active = 1
                """,
                (subadmin_id, game_type.value),
            )
            cursor.execute(
                "INSERT INTO commission_rates (subadmin_id, game_type, rate_bp) VALUES (?, ?, ?)",
                (subadmin_id, game_type.value, rate_bp),
            )
            return cursor.lastrowid

    def get_commission_rate(self, subadmin_id: int, game_type: GameType) -> CommissionRate | None:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT * FROM commission_rates
                WHERE subadmin_id = ? AND game_type = ? AND is_active = 1
                """,
                (subadmin_id, game_type.value),
            )
            row = cursor.fetchone()
            return self._row_to_commission(row) if row else None

    def list_commission_rates(self, subadmin_id: int) -> list[CommissionRate]:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT * FROM commission_rates
                WHERE subadmin_id = ? AND is_active = 1
                ORDER BY game_type
                """,
                (subadmin_id,),
            )
            return [self._row_to_commission(row) for row in cursor.fetchall()]

    def deactivate_commission_rate(self, subadmin_id: int, game_type: GameType) -> bool:
        with self.connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE commission_rates SET is_active = 0
                WHERE subadmin_id = ? AND game_type = ? AND is_active = 1
                """,
                (subadmin_id, game_type.value),
            )
            return cursor.rowcount > 0

    @staticmethod
    def _row_to_odds(row) -> GameOdds:
        return GameOdds(
            odds_id=row["odds_id"],
            game_type=GameType(row["game_type"]),
            multiplier=int(row["multiplier"]),
            subadmin_id=row["subadmin_id"],
            is_active=bool(row["is_active"]),
            updated_at=row["updated_at"],
        )

    @staticmethod
    def _row_to_commission(row) -> CommissionRate:
        return CommissionRate(
            commission_id=row["commission_id"],
            subadmin_id=row["subadmin_id"],
            game_type=GameType(row["game_type"]),
            rate_bp=int(row["rate_bp"]),
            is_active=bool(row["is_active"]),
        )
