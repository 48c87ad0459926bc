"""Tests for darkmatter.core.config module."""

import logging
from pathlib import Path

import pytest

import darkmatter.core.config as config


class TestEnvHelpers:
    """Tests for environment variable helpers."""

    def test_get_env_returns_value(self, monkeypatch):
        """get_env returns environment variable value."""
        monkeypatch.setenv("TEST_VAR", "test_value")

        assert config.get_env("TEST_VAR") == "test_value"

    def test_get_env_returns_default(self, monkeypatch):
        """get_env returns default when var not set."""
        monkeypatch.delenv("NONEXISTENT_VAR", raising=False)

        assert config.get_env("NONEXISTENT_VAR", "default") == "default"

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("true", True),
            ("True", True),
            ("1", True),
            ("yes", True),
            ("false", False),
            ("False", False),
            ("0", False),
            ("no", False),
        ],
    )
    def test_get_env_bool_parses_known_values(self, monkeypatch, value, expected):
        """get_env_bool parses known values."""
        monkeypatch.setenv("BOOL_VAR", value)

        assert config.get_env_bool("BOOL_VAR") is expected

    @pytest.mark.parametrize("default", [True, False])
    def test_get_env_bool_default(self, monkeypatch, default):
        """get_env_bool returns default for unknown values."""
        monkeypatch.setenv("BOOL_VAR", "maybe")

        assert config.get_env_bool("BOOL_VAR", default) is default


class TestVaultPath:
    """Tests for vault file resolution."""

    def test_relative_name_resolves_against_cwd(self, monkeypatch, tmp_path):
        """Relative names land in the given directory."""
        monkeypatch.setattr(config, "VAULT_FILE_NAME", "dm-vault.db")

        assert config.vault_path(tmp_path) == tmp_path.absolute() / "dm-vault.db"

    def test_defaults_to_process_cwd(self, monkeypatch, tmp_path):
        """Without cwd the process working directory is used."""
        monkeypatch.setattr(config, "VAULT_FILE_NAME", "dm-vault.db")
        monkeypatch.chdir(tmp_path)

        assert config.vault_path() == Path.cwd().absolute() / "dm-vault.db"

    def test_absolute_name_is_kept(self, monkeypatch, tmp_path):
        """An absolute DM_VAULT_FILE ignores the working directory."""
        target = tmp_path / "elsewhere" / "vault.db"
        monkeypatch.setattr(config, "VAULT_FILE_NAME", str(target))

        assert config.vault_path(tmp_path / "other") == target

    def test_result_is_absolute(self, monkeypatch):
        """vault_path always returns an absolute path."""
        monkeypatch.setattr(config, "VAULT_FILE_NAME", "nested/dm.db")

        assert config.vault_path("relative/dir").is_absolute()


class TestLogging:
    """Tests for logging setup."""

    def test_setup_logging_returns_module_logger(self):
        """setup_logging returns the config logger."""
        logger = config.setup_logging("INFO")

        assert isinstance(logger, logging.Logger)
        assert logger.name == "darkmatter.core.config"

    def test_setup_logging_accepts_unknown_level(self):
        """Unknown level names fall back without raising."""
        assert config.setup_logging("chatty") is not None
