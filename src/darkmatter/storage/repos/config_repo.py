"""Config repository - key/value rows describing the vault itself."""

import sqlite3


class ConfigRepo:
    """Repository for vault configuration entries."""

    def __init__(self, conn: sqlite3.Connection):
        """
        Initialize config repository.

        Args:
            conn: SQLite connection with row_factory set
        """
        self.conn = conn

    def get(self, key: str) -> str | None:
        """Get a configuration value, or None if not set."""
        row = self.conn.execute(
            "SELECT value FROM config WHERE key = ?",
            (key,),
        ).fetchone()
        if row:
            return row["value"]
        return None

    def set(self, key: str, value: str) -> None:
        """Insert a configuration value. Existing keys are never overwritten."""
        self.conn.execute(
            "INSERT INTO config (key, value) VALUES (?, ?)",
            (key, value),
        )
