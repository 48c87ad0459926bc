"""Vault - encrypted file and secret storage bound to one GnuPG key.

A vault is a single SQLite file in the working directory. ``init`` creates it
and records the bound key; every other operation requires the file to exist,
opens it for the duration of one operation and releases it afterwards.
Payloads are encrypted before they reach storage and decrypted plaintext is
only ever returned to the caller or written to the requested destination.

Example:
    vault = Vault(Path("dm-vault.db"), gateway=GpgGateway())
    vault.init("0xDEADBEEF")
    vault.add_file("notes.txt")
    vault.export_file("notes.txt", confirm=lambda path: True)
"""

import logging
import sqlite3
from collections.abc import Callable
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from darkmatter.core.config import GPG_KEY_HASH_CONFIG
from darkmatter.core.crypto import EncryptionGateway
from darkmatter.core.errors import (
    FileAlreadyExistsError,
    FileNotInStorageError,
    SecretAlreadyExistsError,
    SecretNotInStorageError,
    SourceNotFoundError,
    StorageEngineError,
    VaultAlreadyExistsError,
    VaultIOError,
    VaultNotFoundError,
)
from darkmatter.core.keys import KeyBinding
from darkmatter.core.messages import get_message
from darkmatter.core.types import (
    ExportResult,
    ExportStatus,
    KeyDiagnosis,
    KeyInfo,
    SecretSummary,
    normalize_tags,
    parse_tags,
)
from darkmatter.storage import ConfigRepo, FilesRepo, SecretsRepo, get_connection, init_db

logger = logging.getLogger(__name__)

ConfirmOverwrite = Callable[[Path], bool]


class Vault:
    """Encrypted store for files and secrets."""

    def __init__(
        self,
        path: Path | str,
        gateway: EncryptionGateway,
        cwd: Path | str | None = None,
    ):
        """
        Initialize the vault handle. Nothing is opened until an operation runs.

        Args:
            path: Path to the vault database file
            gateway: Encryption gateway used for every payload
            cwd: Directory relative file names are resolved against
                (defaults to the process working directory)
        """
        self.path = Path(path)
        self.gateway = gateway
        self.keys = KeyBinding(gateway)
        self.cwd = Path(cwd) if cwd is not None else None

    @property
    def exists(self) -> bool:
        """Check if the vault file exists."""
        return self.path.exists()

    def __repr__(self) -> str:
        return f"Vault({self.path})"

    # --- Plumbing ---

    def _base_dir(self) -> Path:
        return (self.cwd or Path.cwd()).absolute()

    def canonical_path(self, filename: Path | str) -> Path:
        """Resolve a file name to the absolute path used as its record id."""
        path = Path(filename).expanduser()
        if not path.is_absolute():
            path = self._base_dir() / path
        return path.resolve()

    @contextmanager
    def _open(self) -> Generator[sqlite3.Connection, None, None]:
        if not self.exists:
            raise VaultNotFoundError(path=str(self.path))
        with get_connection(self.path) as conn:
            yield conn

    def _bound_key(self, conn: sqlite3.Connection) -> str:
        # Read on every use; the binding is never cached across operations.
        key_id = ConfigRepo(conn).get(GPG_KEY_HASH_CONFIG)
        if not key_id:
            raise StorageEngineError(
                reason=get_message("missing_bound_key", key=GPG_KEY_HASH_CONFIG)
            )
        return key_id

    def _encrypt(self, conn: sqlite3.Connection, plaintext: bytes) -> bytes:
        return self.gateway.encrypt(plaintext, self._bound_key(conn))

    @staticmethod
    def _read_source(filename: Path | str, realpath: Path) -> bytes:
        if not realpath.is_file():
            raise SourceNotFoundError(path=str(filename))
        try:
            return realpath.read_bytes()
        except OSError as exc:
            raise VaultIOError(path=str(realpath), reason=exc.strerror or str(exc)) from exc

    @staticmethod
    def _write_destination(destination: Path, content: bytes) -> None:
        try:
            destination.write_bytes(content)
        except OSError as exc:
            raise VaultIOError(
                path=str(destination), reason=exc.strerror or str(exc)
            ) from exc

    # --- Lifecycle ---

    def init(self, key_id: str) -> KeyInfo:
        """
        Create the vault bound to a key.

        Args:
            key_id: GnuPG key id or fingerprint

        Returns:
            KeyInfo of the bound key

        Raises:
            VaultAlreadyExistsError: Vault file already present
            KeyNotFoundError, KeyUnusableError: Key failed validation
            StorageEngineError: Schema creation failed
        """
        if self.exists:
            raise VaultAlreadyExistsError(path=str(self.path))

        info = self.keys.resolve_and_validate(key_id)

        try:
            init_db(self.path)
            with get_connection(self.path) as conn:
                ConfigRepo(conn).set(GPG_KEY_HASH_CONFIG, key_id)
        except StorageEngineError:
            logger.error("Vault creation failed, removing %s", self.path)
            self.path.unlink(missing_ok=True)
            raise

        logger.info("Vault %s initialized with key %s", self.path, key_id)
        return info

    def bound_key(self) -> str:
        """Get the key identifier the vault is bound to."""
        with self._open() as conn:
            return self._bound_key(conn)

    def validate_key(self, key_id: str) -> KeyDiagnosis:
        """Diagnose a key without touching the vault."""
        return self.keys.diagnose(key_id)

    # --- Files ---

    def add_file(self, filename: Path | str) -> Path:
        """
        Encrypt a file and store it under its canonical path.

        Returns:
            Canonical path used as the record id

        Raises:
            SourceNotFoundError: File does not exist
            FileAlreadyExistsError: Path already stored
        """
        realpath = self.canonical_path(filename)
        with self._open() as conn:
            content = self._read_source(filename, realpath)
            files = FilesRepo(conn)
            if files.exists(str(realpath)):
                raise FileAlreadyExistsError(path=str(realpath))
            files.insert(str(realpath), self._encrypt(conn, content))

        logger.info("Added file %s (%d bytes)", realpath, len(content))
        return realpath

    def update_file(self, filename: Path | str) -> Path:
        """
        Re-encrypt a file and replace its stored body.

        Raises:
            SourceNotFoundError: File does not exist
            FileNotInStorageError: Path not stored
        """
        realpath = self.canonical_path(filename)
        with self._open() as conn:
            content = self._read_source(filename, realpath)
            files = FilesRepo(conn)
            if not files.exists(str(realpath)):
                raise FileNotInStorageError(path=str(realpath))
            files.update(str(realpath), self._encrypt(conn, content))

        logger.info("Updated file %s (%d bytes)", realpath, len(content))
        return realpath

    def remove_file(self, filename: Path | str) -> bool:
        """Delete a file record. Returns False if nothing was stored."""
        realpath = self.canonical_path(filename)
        with self._open() as conn:
            removed = FilesRepo(conn).delete(str(realpath)) > 0

        logger.info("Remove file %s: %s", realpath, "removed" if removed else "absent")
        return removed

    def list_files(self) -> list[str]:
        """List stored file paths in lexicographic order."""
        with self._open() as conn:
            return FilesRepo(conn).list_all()

    def export_file(
        self,
        filename: Path | str,
        *,
        confirm: ConfirmOverwrite,
        relative: bool = False,
        force: bool = False,
    ) -> ExportResult:
        """
        Decrypt a stored file and write it to disk.

        Args:
            filename: Path of the stored file (any spelling of it)
            confirm: Asked before overwriting an existing destination
            relative: Write to the working directory under the base name
            force: Overwrite without asking

        Returns:
            ExportResult; CANCELED when the overwrite was declined

        Raises:
            FileNotInStorageError: Path not stored
            DecryptionError: Decryption failed
        """
        realpath = self.canonical_path(filename)
        with self._open() as conn:
            body = FilesRepo(conn).get_body(str(realpath))
        if body is None:
            raise FileNotInStorageError(path=str(realpath))

        plaintext = self.gateway.decrypt(body)

        destination = self._base_dir() / realpath.name if relative else realpath
        if destination.exists() and not force and not confirm(destination):
            logger.info("Export of %s to %s canceled", realpath, destination)
            return ExportResult(status=ExportStatus.CANCELED, destination=destination)

        self._write_destination(destination, plaintext)
        logger.info("Exported %s to %s", realpath, destination)
        return ExportResult(status=ExportStatus.EXPORTED, destination=destination)

    # --- Secrets ---

    def add_secret(self, name: str, value: str, tags: str | None = None) -> None:
        """
        Encrypt and store a named secret.

        Raises:
            SecretAlreadyExistsError: Name already stored
        """
        with self._open() as conn:
            secrets = SecretsRepo(conn)
            if secrets.exists(name):
                raise SecretAlreadyExistsError(name=name)
            body = self._encrypt(conn, value.encode("utf-8"))
            secrets.insert(name, body, normalize_tags(tags))

        logger.info("Added secret %s", name)

    def update_secret(self, name: str, value: str, tags: str | None = None) -> None:
        """
        Re-encrypt a secret, replacing its tags only when tags are given.

        Raises:
            SecretNotInStorageError: Name not stored
        """
        with self._open() as conn:
            secrets = SecretsRepo(conn)
            if not secrets.exists(name):
                raise SecretNotInStorageError(name=name)
            body = self._encrypt(conn, value.encode("utf-8"))
            secrets.update(name, body, normalize_tags(tags) if tags else None)

        logger.info("Updated secret %s", name)

    def remove_secret(self, name: str) -> bool:
        """Delete a secret. Returns False if nothing was stored."""
        with self._open() as conn:
            removed = SecretsRepo(conn).delete(name) > 0

        logger.info("Remove secret %s: %s", name, "removed" if removed else "absent")
        return removed

    def list_secrets(self, tags: str | None = None) -> list[SecretSummary]:
        """
        List secrets ordered by name.

        Args:
            tags: Comma-delimited filter; a secret is listed when it shares
                at least one tag with the filter. Empty lists everything.
        """
        wanted = set(parse_tags(tags))
        with self._open() as conn:
            secrets = SecretsRepo(conn).list_all()
        if not wanted:
            return secrets
        return [secret for secret in secrets if secret.tag_set & wanted]

    def show_secret(self, name: str) -> bytes:
        """
        Decrypt a secret.

        Raises:
            SecretNotInStorageError: Name not stored
            DecryptionError: Decryption failed
        """
        with self._open() as conn:
            body = SecretsRepo(conn).get_body(name)
        if body is None:
            raise SecretNotInStorageError(name=name)
        return self.gateway.decrypt(body)
