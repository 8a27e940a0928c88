"""
Shared SQLite plumbing for ledger repositories.
"""

import logging
import sqlite3
from abc import ABC
from contextlib import contextmanager

from config import DB_BUSY_TIMEOUT_MS
from database import Database

logger = logging.getLogger("matka_ledger.repositories")


class BaseRepository(ABC):
    """
    Owns the connection settings every ledger table relies on: WAL journal,
    a busy timeout long enough for queued writers, enforced foreign keys and
    name-addressable rows.
    """

    # Paths whose schema has been brought up to date in this process
    _schema_initialized_paths: set[str] = set()

    def __init__(self, db_path: str):
        self.db_path = db_path
        if db_path not in BaseRepository._schema_initialized_paths:
            Database(db_path)
            BaseRepository._schema_initialized_paths.add(db_path)

    def get_connection(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path, timeout=DB_BUSY_TIMEOUT_MS / 1000)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute(f"PRAGMA busy_timeout={int(DB_BUSY_TIMEOUT_MS)}")
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    @contextmanager
    def _transaction(self, begin: str | None):
        conn = self.get_connection()
        try:
            if begin:
                conn.execute(begin)
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @contextmanager
    def connection(self):
        """Connection for reads and single-statement writes; commits on exit, rolls back on error."""
        with self._transaction(None) as conn:
            yield conn

    @contextmanager
    def atomic_transaction(self):
        """
        Connection inside BEGIN IMMEDIATE.

        The write lock is taken before the first read, so a balance check and
        the wallet row that depends on it see no other writer in between. Use
        for every operation that moves money or changes bet/market status.

        Usage:
            with self.atomic_transaction() as conn:
                cursor = conn.cursor()
                apply_wallet_delta(cursor, ...)
        """
        with self._transaction("BEGIN IMMEDIATE") as conn:
            yield conn

    @contextmanager
    def cursor(self):
        with self.connection() as conn:
            yield conn.cursor()
