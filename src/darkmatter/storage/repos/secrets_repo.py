"""Secrets repository - encrypted named values with a tag list."""

import sqlite3

from darkmatter.core.types import SecretSummary


class SecretsRepo:
    """Repository for secret records."""

    def __init__(self, conn: sqlite3.Connection):
        """
        Initialize secrets repository.

        Args:
            conn: SQLite connection with row_factory set
        """
        self.conn = conn

    def exists(self, name: str) -> bool:
        """Check whether a secret exists."""
        row = self.conn.execute(
            "SELECT COUNT(id) FROM secrets WHERE name = ?",
            (name,),
        ).fetchone()
        return row[0] > 0

    def insert(self, name: str, body: bytes, tags: str = "") -> None:
        """Create a secret."""
        self.conn.execute(
            "INSERT INTO secrets (name, body, tags) VALUES (?, ?, ?)",
            (name, body, tags),
        )

    def update(self, name: str, body: bytes, tags: str | None = None) -> int:
        """
        Replace the body of a secret, and its tags when given.

        Returns:
            Rows affected
        """
        if tags is None:
            cursor = self.conn.execute(
                "UPDATE secrets SET body = ? WHERE name = ?",
                (body, name),
            )
        else:
            cursor = self.conn.execute(
                "UPDATE secrets SET body = ?, tags = ? WHERE name = ?",
                (body, tags, name),
            )
        return cursor.rowcount

    def delete(self, name: str) -> int:
        """Delete a secret. Returns rows affected."""
        cursor = self.conn.execute("DELETE FROM secrets WHERE name = ?", (name,))
        return cursor.rowcount

    def get_body(self, name: str) -> bytes | None:
        """Get the encrypted body of a secret, or None if not stored."""
        row = self.conn.execute(
            "SELECT body FROM secrets WHERE name = ?",
            (name,),
        ).fetchone()
        if row:
            return bytes(row["body"])
        return None

    def list_all(self) -> list[SecretSummary]:
        """Get all secrets (name and tags only), ordered by name."""
        rows = self.conn.execute(
            "SELECT name, tags FROM secrets ORDER BY name"
        ).fetchall()
        return [SecretSummary(name=row["name"], tags=row["tags"] or "") for row in rows]
