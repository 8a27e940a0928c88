"""
Schema and migration management for SQLite database.
"""

import logging
import sqlite3

logger = logging.getLogger("matka_ledger.schema")


class SchemaManager:
    """
    Owns schema creation and migrations.

    Call initialize() to ensure schema is present and migrations are applied.
    Monetary columns are INTEGER paisa; odds and rates are INTEGER scaled values.
    """

    def __init__(self, db_path: str, use_uri: bool = False):
        self.db_path = db_path
        self.use_uri = use_uri

    def initialize(self) -> None:
        """Create base schema and apply migrations."""
        logger.info(f"Initializing database schema: {self.db_path}")
        conn = self._connect()
        try:
            cursor = conn.cursor()
            self._create_base_schema(cursor)
            self._create_schema_migrations_table(cursor)
            self._run_migrations(cursor)
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, uri=self.use_uri)
        conn.row_factory = sqlite3.Row
        if not self.use_uri:  # Skip WAL for in-memory databases
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA busy_timeout=5000")
        return conn

    def _create_base_schema(self, cursor) -> None:
        # Users: admin -> subadmin -> player ownership via assigned_to
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS users (
                user_id INTEGER PRIMARY KEY AUTOINCREMENT,
                username TEXT NOT NULL UNIQUE,
                role TEXT NOT NULL CHECK (role IN ('admin', 'subadmin', 'player')),
                balance INTEGER NOT NULL DEFAULT 0 CHECK (balance >= 0),
                assigned_to INTEGER,
                is_blocked INTEGER NOT NULL DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (assigned_to) REFERENCES users(user_id)
            )
            """
        )

        # Wallet transaction log (append-only)
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS wallet_transactions (
                txn_id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                delta INTEGER NOT NULL,
                balance_after INTEGER NOT NULL,
                reason TEXT NOT NULL,
                related_bet_id INTEGER,
                related_request_id INTEGER,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (user_id) REFERENCES users(user_id)
            )
            """
        )

    # --- Migration helpers ---

    def _add_column_if_not_exists(self, cursor, table: str, column: str, column_type: str) -> None:
        try:
            cursor.execute(f"ALTER TABLE {table} ADD COLUMN {column} {column_type}")
        except sqlite3.OperationalError:
            pass

    def _create_schema_migrations_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS schema_migrations (
                name TEXT PRIMARY KEY,
                applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
            """
        )

    def _run_migrations(self, cursor) -> None:
        applied = {row["name"] for row in cursor.execute("SELECT name FROM schema_migrations")}
        for name, action in self._get_migrations():
            if name in applied:
                continue
            logger.info(f"Applying migration: {name}")
            action(cursor)
            cursor.execute(
                "INSERT INTO schema_migrations (name) VALUES (?)",
                (name,),
            )

    def _get_migrations(self):
        return [
            ("create_game_odds_table", self._migration_create_game_odds_table),
            ("create_user_discounts_table", self._migration_create_user_discounts_table),
            ("create_commission_rates_table", self._migration_create_commission_rates_table),
            ("create_markets_table", self._migration_create_markets_table),
            ("create_bets_table", self._migration_create_bets_table),
            ("create_wallet_requests_table", self._migration_create_wallet_requests_table),
            ("add_indexes_v1", self._migration_add_indexes_v1),
            ("add_bet_settlement_error_column", self._migration_add_bet_settlement_error_column),
            ("add_ledger_uniqueness_indexes", self._migration_add_ledger_uniqueness_indexes),
        ]

    def _migration_create_game_odds_table(self, cursor) -> None:
        """subadmin_id NULL is the global admin default; otherwise a subadmin override."""
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS game_odds (
                odds_id INTEGER PRIMARY KEY AUTOINCREMENT,
                game_type TEXT NOT NULL,
                subadmin_id INTEGER,
                multiplier INTEGER NOT NULL,
                is_active INTEGER NOT NULL DEFAULT 1,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (subadmin_id) REFERENCES users(user_id)
            )
            """
        )
        cursor.execute(
            """
            CREATE UNIQUE INDEX IF NOT EXISTS idx_game_odds_active_global
            ON game_odds(game_type) WHERE subadmin_id IS NULL AND is_active = 1
            """
        )
        cursor.execute(
            """
            CREATE UNIQUE INDEX IF NOT EXISTS idx_game_odds_active_subadmin
            ON game_odds(subadmin_id, game_type) WHERE subadmin_id IS NOT NULL AND is_active = 1
            """
        )

    def _migration_create_user_discounts_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS user_discounts (
                discount_id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                game_type TEXT NOT NULL,
                discount_bp INTEGER NOT NULL,
                is_active INTEGER NOT NULL DEFAULT 1,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (user_id) REFERENCES users(user_id)
            )
            """
        )
        cursor.execute(
            """
            CREATE UNIQUE INDEX IF NOT EXISTS idx_user_discounts_active
            ON user_discounts(user_id, game_type) WHERE is_active = 1
            """
        )

    def _migration_create_commission_rates_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS commission_rates (
                commission_id INTEGER PRIMARY KEY AUTOINCREMENT,
                subadmin_id INTEGER NOT NULL,
                game_type TEXT NOT NULL,
                rate_bp INTEGER NOT NULL,
                is_active INTEGER NOT NULL DEFAULT 1,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (subadmin_id) REFERENCES users(user_id)
            )
            """
        )
        cursor.execute(
            """
            CREATE UNIQUE INDEX IF NOT EXISTS idx_commission_rates_active
            ON commission_rates(subadmin_id, game_type) WHERE is_active = 1
            """
        )

    def _migration_create_markets_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS markets (
                market_id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                kind TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'open'
                    CHECK (status IN ('open', 'closed', 'resulted')),
                result TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                closed_at TIMESTAMP,
                resulted_at TIMESTAMP
            )
            """
        )

    def _migration_create_bets_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS bets (
                bet_id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                market_id INTEGER NOT NULL,
                game_type TEXT NOT NULL,
                stake INTEGER NOT NULL CHECK (stake > 0),
                prediction TEXT NOT NULL,
                resolved_odds INTEGER NOT NULL,
                odds_source TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'pending'
                    CHECK (status IN ('pending', 'won', 'lost')),
                payout INTEGER NOT NULL DEFAULT 0,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                settled_at TIMESTAMP,
                FOREIGN KEY (user_id) REFERENCES users(user_id),
                FOREIGN KEY (market_id) REFERENCES markets(market_id)
            )
            """
        )

    def _migration_create_wallet_requests_table(self, cursor) -> None:
        cursor.execute(
            """
            CREATE TABLE IF NOT EXISTS wallet_requests (
                request_id INTEGER PRIMARY KEY AUTOINCREMENT,
                user_id INTEGER NOT NULL,
                request_type TEXT NOT NULL CHECK (request_type IN ('deposit', 'withdrawal')),
                amount INTEGER NOT NULL CHECK (amount > 0),
                status TEXT NOT NULL DEFAULT 'pending'
                    CHECK (status IN ('pending', 'approved', 'rejected')),
                notes TEXT,
                reviewed_by INTEGER,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                reviewed_at TIMESTAMP,
                FOREIGN KEY (user_id) REFERENCES users(user_id),
                FOREIGN KEY (reviewed_by) REFERENCES users(user_id)
            )
            """
        )

    def _migration_add_indexes_v1(self, cursor) -> None:
        """
        Add indexes to improve query performance for common access patterns.
        Safe to run multiple times due to IF NOT EXISTS.
        """
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_users_assigned_to ON users(assigned_to)")
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_wallet_transactions_user ON wallet_transactions(user_id, txn_id)"
        )
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_bets_market_status ON bets(market_id, status)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_bets_user_created ON bets(user_id, bet_id)")
        cursor.execute(
            "CREATE INDEX IF NOT EXISTS idx_wallet_requests_status ON wallet_requests(status, user_id)"
        )

    def _migration_add_bet_settlement_error_column(self, cursor) -> None:
        """Per-bet record of why settlement was halted (bet stays pending)."""
        self._add_column_if_not_exists(cursor, "bets", "settlement_error", "TEXT")

    def _migration_add_ledger_uniqueness_indexes(self, cursor) -> None:
        """
        At most one stake, payout and commission row per (user, bet).
        Storage-level backstop for settle-at-most-once.
        """
        cursor.execute(
            """
            CREATE UNIQUE INDEX IF NOT EXISTS idx_wallet_transactions_bet_reason
            ON wallet_transactions(user_id, related_bet_id, reason)
            WHERE related_bet_id IS NOT NULL
            """
        )
        cursor.execute(
            """
            CREATE UNIQUE INDEX IF NOT EXISTS idx_wallet_transactions_request
            ON wallet_transactions(related_request_id)
            WHERE related_request_id IS NOT NULL
            """
        )
