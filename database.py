"""
Database bootstrap.

Constructing a Database applies the schema and pending migrations for the
given path. Repositories do this lazily through BaseRepository.
"""

import logging
import sqlite3

from infrastructure.schema_manager import SchemaManager

logger = logging.getLogger("matka_ledger.database")


class Database:
    """Handle to an initialized SQLite ledger database."""

    def __init__(self, db_path: str = "matka_ledger.db"):
        self.db_path = db_path
        SchemaManager(db_path).initialize()

    def get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    def table_names(self) -> list[str]:
        """Names of all user tables, for diagnostics and tests."""
        conn = self.get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()
