"""Tests for the GnuPG encryption gateway."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

import darkmatter.core.crypto as crypto
from darkmatter.core.crypto import (
    GpgGateway,
    classify_decryption_failure,
    classify_encryption_failure,
    key_info_from_listing,
    unusable_reason,
)
from darkmatter.core.errors import (
    DecryptionEngineError,
    DecryptionKeyUnavailableError,
    DecryptionPassphraseInvalidError,
    EncryptionEngineError,
    EncryptionUnusableKeyError,
    GpgUnavailableError,
    KeyNotFoundError,
)
from darkmatter.core.types import KeyInfo

ARMORED = b"-----BEGIN PGP MESSAGE-----\n\nhQEMA...\n-----END PGP MESSAGE-----\n"


def make_listing(**overrides):
    """Build a python-gnupg list_keys entry."""
    entry = {
        "keyid": "ABCDEF0123456789",
        "fingerprint": "0123456789ABCDEF0123456789ABCDEF01234567",
        "cap": "scESC",
        "trust": "u",
        "subkeys": [["0011223344556677", "e", "FFFF", ""]],
        "uids": ["Test User <test@example.com>"],
    }
    entry.update(overrides)
    return entry


def make_result(ok=True, data=b"", status="", stderr=""):
    return SimpleNamespace(ok=ok, data=data, status=status, stderr=stderr)


@pytest.fixture
def gpg():
    """Mock python-gnupg engine with one usable key."""
    engine = MagicMock()
    engine.list_keys.return_value = [make_listing()]
    engine.encrypt.return_value = make_result(data=ARMORED, status="encryption ok")
    engine.decrypt.return_value = make_result(data=b"plaintext", status="decryption ok")
    return engine


@pytest.fixture
def gateway(gpg):
    return GpgGateway(gpg=gpg)


class TestKeyInfoFromListing:
    """Tests for translating keyring listings."""

    def test_usable_key(self):
        """Capabilities, ids and uids are extracted."""
        info = key_info_from_listing(make_listing())

        assert info.key_id == "ABCDEF0123456789"
        assert info.fingerprint.startswith("0123")
        assert info.can_encrypt is True
        assert info.can_sign is True
        assert info.can_certify is True
        assert info.can_authenticate is False
        assert info.subkeys[0].key_id == "0011223344556677"
        assert info.subkeys[0].can_encrypt is True
        assert info.uids[0].name == "Test User"
        assert info.uids[0].email == "test@example.com"

    def test_sign_only_key(self):
        """A key without an encryption capability cannot encrypt."""
        info = key_info_from_listing(make_listing(cap="scSC", subkeys=[]))

        assert info.can_encrypt is False
        assert info.can_sign is True

    @pytest.mark.parametrize("trust,field", [("e", "expired"), ("r", "revoked")])
    def test_invalid_key_cannot_encrypt(self, trust, field):
        """Expired and revoked keys are never usable for encryption."""
        info = key_info_from_listing(make_listing(trust=trust))

        assert info.can_encrypt is False
        assert getattr(info, field) is True

    def test_missing_fields(self):
        """Sparse listings produce defaults instead of failing."""
        info = key_info_from_listing({})

        assert info.key_id is None
        assert info.can_encrypt is False
        assert info.subkeys == []
        assert info.uids == []

    @pytest.mark.parametrize(
        "info,reason",
        [
            (KeyInfo(revoked=True, expired=True), "key revoked"),
            (KeyInfo(expired=True), "key expired"),
            (KeyInfo(), "no encryption capability"),
        ],
    )
    def test_unusable_reason(self, info, reason):
        """Unusable keys are explained by their most severe problem."""
        assert unusable_reason(info) == reason


class TestFailureClassification:
    """Tests for mapping engine status to errors."""

    @pytest.mark.parametrize(
        "stderr,status",
        [
            ("[GNUPG:] INV_RECP 10 ABCDEF\n", "invalid recipient"),
            ("[GNUPG:] KEYEXPIRED 1600000000\n", ""),
            ("[GNUPG:] KEYREVOKED\n", ""),
            ("", "key expired"),
        ],
    )
    def test_unusable_key_on_encrypt(self, stderr, status):
        """Recipient problems map to EncryptionUnusableKeyError."""
        error = classify_encryption_failure(
            make_result(ok=False, status=status, stderr=stderr), "ABCDEF"
        )

        assert isinstance(error, EncryptionUnusableKeyError)
        assert "ABCDEF" in str(error)

    def test_other_encrypt_failure(self):
        """Unrecognized encryption failures are engine errors."""
        error = classify_encryption_failure(
            make_result(ok=False, stderr="[GNUPG:] FAILURE encrypt 1\n"), "ABCDEF"
        )

        assert isinstance(error, EncryptionEngineError)
        assert not isinstance(error, EncryptionUnusableKeyError)

    @pytest.mark.parametrize(
        "stderr,status,error_cls",
        [
            ("[GNUPG:] NO_SECKEY 1234\n", "", DecryptionKeyUnavailableError),
            ("", "no secret key", DecryptionKeyUnavailableError),
            ("[GNUPG:] BAD_PASSPHRASE 1234\n", "", DecryptionPassphraseInvalidError),
            ("[GNUPG:] MISSING_PASSPHRASE\n", "", DecryptionPassphraseInvalidError),
            ("", "bad passphrase", DecryptionPassphraseInvalidError),
            ("[GNUPG:] NODATA 1\n", "no data was provided", DecryptionEngineError),
        ],
    )
    def test_decrypt_failures(self, stderr, status, error_cls):
        """Decryption status tokens map to the matching error."""
        error = classify_decryption_failure(
            make_result(ok=False, status=status, stderr=stderr)
        )

        assert type(error) is error_cls


class TestGpgGateway:
    """Tests for GpgGateway."""

    def test_lookup_found(self, gateway, gpg):
        """lookup queries the keyring by id."""
        info = gateway.lookup("ABCDEF0123456789")

        assert info.can_encrypt is True
        gpg.list_keys.assert_called_once_with(keys=["ABCDEF0123456789"])

    def test_lookup_missing(self, gateway, gpg):
        """lookup returns None for unknown keys."""
        gpg.list_keys.return_value = []

        assert gateway.lookup("MISSING") is None

    def test_encrypt_is_armored_to_fingerprint(self, gateway, gpg):
        """Encryption targets the key fingerprint with armored output."""
        ciphertext = gateway.encrypt(b"secret", "ABCDEF0123456789")

        assert ciphertext == ARMORED
        gpg.encrypt.assert_called_once_with(
            b"secret",
            ["0123456789ABCDEF0123456789ABCDEF01234567"],
            armor=True,
            always_trust=True,
        )

    def test_encrypt_rechecks_key(self, gateway, gpg):
        """Each encryption looks the key up again."""
        gateway.encrypt(b"one", "ABCDEF0123456789")
        gateway.encrypt(b"two", "ABCDEF0123456789")

        assert gpg.list_keys.call_count == 2

    def test_encrypt_missing_key(self, gateway, gpg):
        """A key removed from the keyring fails before encryption."""
        gpg.list_keys.return_value = []

        with pytest.raises(KeyNotFoundError):
            gateway.encrypt(b"secret", "ABCDEF0123456789")
        gpg.encrypt.assert_not_called()

    def test_encrypt_unusable_key(self, gateway, gpg):
        """A key that lost its capability fails before encryption."""
        gpg.list_keys.return_value = [make_listing(trust="e")]

        with pytest.raises(EncryptionUnusableKeyError, match="key expired"):
            gateway.encrypt(b"secret", "ABCDEF0123456789")
        gpg.encrypt.assert_not_called()

    def test_encrypt_engine_failure(self, gateway, gpg):
        """Engine failures surface as encryption errors."""
        gpg.encrypt.return_value = make_result(
            ok=False, stderr="[GNUPG:] INV_RECP 0 ABCDEF0123456789\n"
        )

        with pytest.raises(EncryptionUnusableKeyError):
            gateway.encrypt(b"secret", "ABCDEF0123456789")

    def test_decrypt(self, gateway, gpg):
        """decrypt returns the plaintext bytes."""
        assert gateway.decrypt(ARMORED) == b"plaintext"
        gpg.decrypt.assert_called_once_with(ARMORED)

    def test_decrypt_without_private_key(self, gateway, gpg):
        """Missing private keys are reported distinctly."""
        gpg.decrypt.return_value = make_result(
            ok=False, status="no secret key", stderr="[GNUPG:] NO_SECKEY ABCD\n"
        )

        with pytest.raises(DecryptionKeyUnavailableError):
            gateway.decrypt(ARMORED)

    def test_engine_start_failure(self, monkeypatch):
        """A missing gpg binary is an engine error, raised lazily."""

        def broken(**kwargs):
            raise OSError("Unable to run gpg (no-such-gpg)")

        monkeypatch.setattr(crypto.gnupg, "GPG", broken)
        gateway = GpgGateway(gpgbinary="no-such-gpg")

        with pytest.raises(GpgUnavailableError, match="no-such-gpg"):
            gateway.lookup("ABCDEF0123456789")

    def test_engine_start_failure_on_decrypt(self, monkeypatch):
        """Decryption reports a missing engine as a decryption engine error."""

        def broken(**kwargs):
            raise OSError("Unable to run gpg")

        monkeypatch.setattr(crypto.gnupg, "GPG", broken)

        with pytest.raises(DecryptionEngineError):
            GpgGateway().decrypt(ARMORED)
