"""Shared test fixtures and configuration."""

from __future__ import annotations

import base64

import pytest

from darkmatter.core.errors import (
    DecryptionKeyUnavailableError,
    EncryptionUnusableKeyError,
    KeyNotFoundError,
)
from darkmatter.core.types import KeyInfo, SubkeyInfo, UserId
from darkmatter.core.vault import Vault

ARMOR_HEADER = b"-----BEGIN PGP MESSAGE-----\n\n"
ARMOR_FOOTER = b"\n-----END PGP MESSAGE-----\n"

TEST_KEY_ID = "ABCDEF0123456789"


class FakeGateway:
    """In-memory encryption gateway.

    Ciphertext is armored base64 of ``key_id\\nplaintext``; decryption only
    succeeds for keys whose private half was registered.
    """

    def __init__(self):
        self.keys: dict[str, KeyInfo] = {}
        self.private_keys: set[str] = set()
        self.lookups: list[str] = []
        self.encrypt_calls: list[str] = []
        self.encrypt_error: Exception | None = None
        self.decrypt_error: Exception | None = None

    def add_key(
        self, key_id: str, *, can_encrypt: bool = True, private: bool = True, **fields
    ) -> KeyInfo:
        info = KeyInfo(
            key_id=key_id,
            fingerprint=f"FPR{key_id}",
            can_encrypt=can_encrypt,
            **fields,
        )
        self.keys[key_id] = info
        if private:
            self.private_keys.add(key_id)
        return info

    def lookup(self, key_id: str) -> KeyInfo | None:
        self.lookups.append(key_id)
        return self.keys.get(key_id)

    def encrypt(self, plaintext: bytes, key_id: str) -> bytes:
        info = self.lookup(key_id)
        if info is None:
            raise KeyNotFoundError(key_id=key_id)
        if not info.can_encrypt:
            raise EncryptionUnusableKeyError(
                key_id=key_id, reason="no encryption capability"
            )
        if self.encrypt_error is not None:
            raise self.encrypt_error
        self.encrypt_calls.append(key_id)
        payload = base64.b64encode(key_id.encode() + b"\n" + plaintext)
        return ARMOR_HEADER + payload + ARMOR_FOOTER

    def decrypt(self, ciphertext: bytes) -> bytes:
        if self.decrypt_error is not None:
            raise self.decrypt_error
        payload = ciphertext.removeprefix(ARMOR_HEADER).removesuffix(ARMOR_FOOTER)
        key_id, _, plaintext = base64.b64decode(payload).partition(b"\n")
        if key_id.decode() not in self.private_keys:
            raise DecryptionKeyUnavailableError()
        return plaintext


@pytest.fixture
def fake_gateway():
    """Gateway with one usable key registered."""
    gateway = FakeGateway()
    gateway.add_key(
        TEST_KEY_ID,
        can_sign=True,
        can_certify=True,
        subkeys=[SubkeyInfo(key_id="0011223344556677", can_encrypt=True)],
        uids=[UserId(name="Test User", email="test@example.com")],
    )
    return gateway


@pytest.fixture
def vault_dir(tmp_path):
    """Working directory holding the vault file."""
    return tmp_path


@pytest.fixture
def vault(vault_dir, fake_gateway):
    """Uninitialized vault in a temporary working directory."""
    return Vault(vault_dir / "dm-vault.db", gateway=fake_gateway, cwd=vault_dir)


@pytest.fixture
def active_vault(vault):
    """Vault initialized with the test key."""
    vault.init(TEST_KEY_ID)
    return vault


@pytest.fixture
def make_file(vault_dir):
    """Factory for plaintext files inside the working directory."""

    def _make_file(name: str = "a.txt", content: bytes = b"Confidential backup data"):
        path = vault_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        return path

    return _make_file


@pytest.fixture
def key_id():
    """Identifier of the usable test key."""
    return TEST_KEY_ID
