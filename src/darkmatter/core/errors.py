"""Error taxonomy for Dark Matter.

Every failure that aborts an operation is a ``DarkMatterError``. The message
and the optional hint are rendered from the message catalog, so the CLI only
has to print ``str(error)`` and ``error.hint``.
"""

from darkmatter.core.messages import get_message


class DarkMatterError(Exception):
    """Base error for all vault failures."""

    message_key = ""
    hint_key: str | None = None

    def __init__(self, **params):
        self.params = params
        super().__init__(self.message)

    @property
    def message(self) -> str:
        return get_message(self.message_key, **self.params)

    @property
    def hint(self) -> str | None:
        if self.hint_key is None:
            return None
        return get_message(self.hint_key, **self.params)

    def __str__(self) -> str:
        return self.message


# --- Vault lifecycle ---


class VaultNotFoundError(DarkMatterError):
    """Raised when an operation needs a vault file that does not exist."""

    message_key = "vault_not_found"


class VaultAlreadyExistsError(DarkMatterError):
    """Raised when init finds an existing vault file."""

    message_key = "vault_already_exists"


class SourceNotFoundError(DarkMatterError):
    """Raised when a file to add or update is missing on disk."""

    message_key = "source_not_found"


# --- Key binding ---


class KeyNotFoundError(DarkMatterError):
    """Raised when the key identifier is not in the keyring."""

    message_key = "key_not_found"
    hint_key = "key_not_found_hint"


class KeyUnusableError(DarkMatterError):
    """Raised when the key exists but has no usable encryption capability."""

    message_key = "key_unusable"
    hint_key = "key_unusable_hint"


# --- Records ---


class RecordAlreadyExistsError(DarkMatterError):
    """Raised when adding a record whose identifier is taken."""


class FileAlreadyExistsError(RecordAlreadyExistsError):
    message_key = "file_already_exists"


class SecretAlreadyExistsError(RecordAlreadyExistsError):
    message_key = "secret_already_exists"


class RecordNotInStorageError(DarkMatterError):
    """Raised when updating or reading a record that is not stored."""


class FileNotInStorageError(RecordNotInStorageError):
    message_key = "file_not_in_storage"


class SecretNotInStorageError(RecordNotInStorageError):
    message_key = "secret_not_in_storage"


# --- Encryption gateway ---


class EncryptionError(DarkMatterError):
    """Base error for encryption failures."""


class EncryptionUnusableKeyError(EncryptionError):
    """Raised when the engine refuses the bound key for encryption."""

    message_key = "encryption_unusable_key"
    hint_key = "encryption_unusable_key_hint"


class EncryptionEngineError(EncryptionError):
    """Raised for any other encryption engine failure."""

    message_key = "encryption_engine"


class DecryptionError(DarkMatterError):
    """Base error for decryption failures."""


class DecryptionKeyUnavailableError(DecryptionError):
    """Raised when no matching private key is available."""

    message_key = "decryption_key_unavailable"
    hint_key = "decryption_key_unavailable_hint"


class DecryptionPassphraseInvalidError(DecryptionError):
    """Raised when unlocking the private key failed."""

    message_key = "decryption_passphrase_invalid"
    hint_key = "decryption_passphrase_invalid_hint"


class DecryptionEngineError(DecryptionError):
    """Raised for any other decryption engine failure."""

    message_key = "decryption_engine"


class GpgUnavailableError(EncryptionEngineError, DecryptionEngineError):
    """Raised when the GnuPG engine cannot be started at all."""

    message_key = "gpg_unavailable"


# --- Storage and filesystem ---


class StorageEngineError(DarkMatterError):
    """Raised when the vault database reports an error."""

    message_key = "storage_engine"


class VaultIOError(DarkMatterError):
    """Raised when reading or writing a plaintext file fails."""

    message_key = "io_error"
