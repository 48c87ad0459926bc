"""Storage layer for Dark Matter - SQLite database and repositories."""

from darkmatter.storage.db import get_connection, init_db
from darkmatter.storage.repos import (
    ConfigRepo,
    FilesRepo,
    SecretsRepo,
)

__all__ = [
    "get_connection",
    "init_db",
    "ConfigRepo",
    "FilesRepo",
    "SecretsRepo",
]
