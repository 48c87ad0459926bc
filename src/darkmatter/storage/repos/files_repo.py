"""Files repository - encrypted file bodies keyed by canonical path."""

import sqlite3


class FilesRepo:
    """Repository for file records."""

    def __init__(self, conn: sqlite3.Connection):
        """
        Initialize files repository.

        Args:
            conn: SQLite connection with row_factory set
        """
        self.conn = conn

    def exists(self, path: str) -> bool:
        """Check whether a record exists for the path."""
        row = self.conn.execute(
            "SELECT COUNT(*) FROM flist WHERE realpath = ?",
            (path,),
        ).fetchone()
        return row[0] > 0

    def insert(self, path: str, body: bytes) -> None:
        """Create a record."""
        self.conn.execute(
            "INSERT INTO flist (realpath, body) VALUES (?, ?)",
            (path, body),
        )

    def update(self, path: str, body: bytes) -> int:
        """Replace the body of a record. Returns rows affected."""
        cursor = self.conn.execute(
            "UPDATE flist SET body = ? WHERE realpath = ?",
            (body, path),
        )
        return cursor.rowcount

    def delete(self, path: str) -> int:
        """Delete a record. Returns rows affected."""
        cursor = self.conn.execute("DELETE FROM flist WHERE realpath = ?", (path,))
        return cursor.rowcount

    def get_body(self, path: str) -> bytes | None:
        """Get the encrypted body of a record, or None if not stored."""
        row = self.conn.execute(
            "SELECT body FROM flist WHERE realpath = ?",
            (path,),
        ).fetchone()
        if row:
            return bytes(row["body"])
        return None

    def list_all(self) -> list[str]:
        """Get all stored paths, ordered by path."""
        rows = self.conn.execute(
            "SELECT realpath FROM flist ORDER BY realpath"
        ).fetchall()
        return [row["realpath"] for row in rows]
