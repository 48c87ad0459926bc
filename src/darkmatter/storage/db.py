"""SQLite database connection and initialization."""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from darkmatter.core.errors import StorageEngineError

logger = logging.getLogger(__name__)

# Migrations directory
MIGRATIONS_DIR = Path(__file__).parent / "migrations"


def _run_migrations(conn: sqlite3.Connection) -> None:
    """Run pending database migrations."""
    # Create migrations tracking table if not exists
    conn.execute("""
        CREATE TABLE IF NOT EXISTS _migrations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT UNIQUE NOT NULL,
            applied_at TEXT DEFAULT CURRENT_TIMESTAMP
        )
    """)

    # Get applied migrations
    applied = {
        row[0] for row in conn.execute("SELECT name FROM _migrations").fetchall()
    }

    # Get all migration files
    migration_files = sorted(MIGRATIONS_DIR.glob("*.sql"))

    for migration_file in migration_files:
        if migration_file.name in applied:
            continue

        logger.info("Applying migration: %s", migration_file.name)
        sql = migration_file.read_text()
        conn.executescript(sql)
        conn.execute(
            "INSERT INTO _migrations (name) VALUES (?)",
            (migration_file.name,),
        )
        conn.commit()
        logger.info("Migration applied: %s", migration_file.name)


def _configure(conn: sqlite3.Connection) -> None:
    conn.row_factory = sqlite3.Row
    # Overwrite deleted ciphertext instead of leaving it in free pages
    conn.execute("PRAGMA secure_delete=ON")


def init_db(db_path: Path | str) -> None:
    """
    Create the vault database file and its schema.

    Args:
        db_path: Path to the SQLite database (created if missing)

    Raises:
        StorageEngineError: If SQLite fails to create the schema
    """
    path = Path(db_path)
    try:
        conn = sqlite3.connect(path)
    except sqlite3.Error as exc:
        raise StorageEngineError(reason=str(exc)) from exc
    try:
        _configure(conn)
        _run_migrations(conn)
    except sqlite3.Error as exc:
        raise StorageEngineError(reason=str(exc)) from exc
    finally:
        conn.close()


@contextmanager
def get_connection(db_path: Path | str) -> Generator[sqlite3.Connection, None, None]:
    """
    Open an existing vault database for one operation.

    The file is opened read-write without the create flag, so a missing vault
    is never created implicitly. Changes are committed when the block exits
    cleanly and discarded otherwise.

    Args:
        db_path: Path to an existing SQLite database

    Yields:
        SQLite connection with row factory enabled

    Raises:
        StorageEngineError: On any SQLite failure
    """
    uri = f"{Path(db_path).absolute().as_uri()}?mode=rw"
    try:
        conn = sqlite3.connect(uri, uri=True)
    except sqlite3.Error as exc:
        raise StorageEngineError(reason=str(exc)) from exc

    try:
        _configure(conn)
        yield conn
        conn.commit()
    except sqlite3.Error as exc:
        raise StorageEngineError(reason=str(exc)) from exc
    finally:
        conn.close()
