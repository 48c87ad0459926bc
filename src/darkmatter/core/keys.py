"""Key binding - resolves and validates the key a vault is bound to."""

import logging

from darkmatter.core.crypto import EncryptionGateway
from darkmatter.core.errors import EncryptionError, KeyNotFoundError, KeyUnusableError
from darkmatter.core.types import KeyDiagnosis, KeyInfo

logger = logging.getLogger(__name__)

TEST_MESSAGE = b"Test encryption capability"


class KeyBinding:
    """Validates encryption keys against the engine's keyring."""

    def __init__(self, gateway: EncryptionGateway):
        self.gateway = gateway

    def resolve(self, key_id: str) -> KeyInfo:
        """Look up a key, raising KeyNotFoundError when absent."""
        info = self.gateway.lookup(key_id)
        if info is None:
            raise KeyNotFoundError(key_id=key_id)
        return info

    def resolve_and_validate(self, key_id: str) -> KeyInfo:
        """
        Look up a key and require encryption capability.

        Raises:
            KeyNotFoundError: Key is not in the keyring
            KeyUnusableError: Key is expired, revoked or has no encryption subkey
        """
        info = self.resolve(key_id)
        if not info.can_encrypt:
            logger.info("Key %s cannot be used for encryption", key_id)
            raise KeyUnusableError(key_id=key_id)
        logger.debug("Key %s validated (fingerprint %s)", key_id, info.fingerprint)
        return info

    def diagnose(self, key_id: str) -> KeyDiagnosis:
        """Report key capabilities and run a test encryption when possible."""
        info = self.resolve(key_id)
        if not info.can_encrypt:
            return KeyDiagnosis(info=info)

        try:
            self.gateway.encrypt(TEST_MESSAGE, key_id)
        except EncryptionError as exc:
            return KeyDiagnosis(
                info=info, encryption_test_ok=False, encryption_test_error=str(exc)
            )
        return KeyDiagnosis(info=info, encryption_test_ok=True)
