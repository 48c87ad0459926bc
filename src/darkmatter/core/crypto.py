"""Encryption gateway - vault policy on top of GnuPG.

The gateway is the only place that talks to the encryption engine. It
re-checks key capability before every encryption, always produces ASCII
armored (self-describing) ciphertext, and translates engine status codes into
the closed set of errors defined in ``darkmatter.core.errors``.
"""

import logging
import re
from email.utils import parseaddr
from typing import Any, Protocol

import gnupg

from darkmatter.core.errors import (
    DecryptionEngineError,
    DecryptionError,
    DecryptionKeyUnavailableError,
    DecryptionPassphraseInvalidError,
    EncryptionEngineError,
    EncryptionError,
    EncryptionUnusableKeyError,
    GpgUnavailableError,
    KeyNotFoundError,
)
from darkmatter.core.types import KeyInfo, SubkeyInfo, UserId

logger = logging.getLogger(__name__)

_STATUS_LINE = re.compile(r"^\[GNUPG:\] (\S+)", re.MULTILINE)

_UNUSABLE_KEY_TOKENS = {"INV_RECP", "KEYEXPIRED", "KEYREVOKED"}
_NO_SECRET_KEY_TOKENS = {"NO_SECKEY"}
_PASSPHRASE_TOKENS = {"BAD_PASSPHRASE", "MISSING_PASSPHRASE"}


class EncryptionGateway(Protocol):
    """Contract the vault workflow relies on."""

    def lookup(self, key_id: str) -> KeyInfo | None:
        pass

    def encrypt(self, plaintext: bytes, key_id: str) -> bytes:
        pass

    def decrypt(self, ciphertext: bytes) -> bytes:
        pass


def key_info_from_listing(entry: dict[str, Any]) -> KeyInfo:
    """Build a KeyInfo from a python-gnupg ``list_keys`` entry."""
    cap = entry.get("cap") or ""
    validity = entry.get("trust") or ""
    expired = validity == "e"
    revoked = validity == "r"

    subkeys = []
    for sub in entry.get("subkeys") or []:
        # [keyid, capabilities, fingerprint, keygrip]
        sub_id = sub[0] if len(sub) > 0 else None
        sub_cap = sub[1] if len(sub) > 1 else ""
        subkeys.append(SubkeyInfo(key_id=sub_id, can_encrypt="e" in sub_cap.lower()))

    uids = []
    for raw in entry.get("uids") or []:
        name, email = parseaddr(raw)
        uids.append(UserId(name=name or None, email=email or None))

    return KeyInfo(
        key_id=entry.get("keyid") or None,
        fingerprint=entry.get("fingerprint") or None,
        can_encrypt="E" in cap and not expired and not revoked,
        can_sign="S" in cap,
        can_certify="C" in cap,
        can_authenticate="A" in cap,
        expired=expired,
        revoked=revoked,
        subkeys=subkeys,
        uids=uids,
    )


def _status_tokens(result: Any) -> set[str]:
    stderr = getattr(result, "stderr", None) or ""
    return set(_STATUS_LINE.findall(stderr))


def _reason(result: Any) -> str:
    return getattr(result, "status", None) or "unknown error"


def unusable_reason(info: KeyInfo) -> str:
    """Explain why a key cannot encrypt."""
    if info.revoked:
        return "key revoked"
    if info.expired:
        return "key expired"
    return "no encryption capability"


def classify_encryption_failure(result: Any, key_id: str) -> EncryptionError:
    """Map a failed python-gnupg encrypt result to a vault error."""
    tokens = _status_tokens(result)
    status = (getattr(result, "status", None) or "").lower()
    if (
        tokens & _UNUSABLE_KEY_TOKENS
        or "invalid recipient" in status
        or "key expired" in status
    ):
        return EncryptionUnusableKeyError(key_id=key_id, reason=_reason(result))
    return EncryptionEngineError(reason=_reason(result))


def classify_decryption_failure(result: Any) -> DecryptionError:
    """Map a failed python-gnupg decrypt result to a vault error."""
    tokens = _status_tokens(result)
    status = (getattr(result, "status", None) or "").lower()
    if tokens & _NO_SECRET_KEY_TOKENS or "no secret key" in status:
        return DecryptionKeyUnavailableError()
    if tokens & _PASSPHRASE_TOKENS or "bad passphrase" in status:
        return DecryptionPassphraseInvalidError()
    return DecryptionEngineError(reason=_reason(result))


class GpgGateway:
    """Encryption gateway backed by a GnuPG keyring."""

    def __init__(
        self,
        gnupghome: str | None = None,
        gpgbinary: str = "gpg",
        gpg: Any | None = None,
    ):
        """
        Initialize the gateway.

        Args:
            gnupghome: Keyring directory (defaults to the GnuPG default home)
            gpgbinary: GnuPG executable
            gpg: Preconfigured ``gnupg.GPG``-compatible engine
        """
        self.gnupghome = gnupghome
        self.gpgbinary = gpgbinary
        self._gpg = gpg

    @property
    def gpg(self) -> Any:
        """Engine handle, started on first use."""
        if self._gpg is None:
            try:
                self._gpg = gnupg.GPG(gnupghome=self.gnupghome, gpgbinary=self.gpgbinary)
            except (OSError, ValueError) as exc:
                raise GpgUnavailableError(reason=str(exc)) from exc
        return self._gpg

    def lookup(self, key_id: str) -> KeyInfo | None:
        """Find a public key by id or fingerprint."""
        keys = self.gpg.list_keys(keys=[key_id])
        if not keys:
            logger.debug("Key %s not found in keyring", key_id)
            return None
        return key_info_from_listing(keys[0])

    def encrypt(self, plaintext: bytes, key_id: str) -> bytes:
        """
        Encrypt bytes to the given key as armored OpenPGP.

        Raises:
            KeyNotFoundError: Key vanished from the keyring
            EncryptionUnusableKeyError: Key cannot encrypt
            EncryptionEngineError: Any other engine failure
        """
        info = self.lookup(key_id)
        if info is None:
            raise KeyNotFoundError(key_id=key_id)
        if not info.can_encrypt:
            raise EncryptionUnusableKeyError(key_id=key_id, reason=unusable_reason(info))

        recipient = info.fingerprint or key_id
        result = self.gpg.encrypt(plaintext, [recipient], armor=True, always_trust=True)
        if not result.ok:
            logger.warning("Encryption to %s failed: %s", key_id, _reason(result))
            raise classify_encryption_failure(result, key_id)

        ciphertext = bytes(result.data)
        logger.debug("Encrypted %d bytes -> %d bytes", len(plaintext), len(ciphertext))
        return ciphertext

    def decrypt(self, ciphertext: bytes) -> bytes:
        """
        Decrypt armored OpenPGP using the ambient private keyring.

        Raises:
            DecryptionKeyUnavailableError: No matching private key
            DecryptionPassphraseInvalidError: Unlocking the key failed
            DecryptionEngineError: Any other engine failure
        """
        result = self.gpg.decrypt(ciphertext)
        if not result.ok:
            logger.warning("Decryption failed: %s", _reason(result))
            raise classify_decryption_failure(result)

        plaintext = bytes(result.data)
        logger.debug("Decrypted %d bytes -> %d bytes", len(ciphertext), len(plaintext))
        return plaintext
