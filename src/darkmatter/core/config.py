"""Configuration management for Dark Matter."""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def get_env(key: str, default: str | None = None) -> str | None:
    """Get environment variable with optional default."""
    return os.getenv(key, default)


def get_env_bool(key: str, default: bool = False) -> bool:
    """Get environment variable as boolean."""
    value = os.getenv(key, "").lower()
    if value in ("true", "1", "yes"):
        return True
    if value in ("false", "0", "no"):
        return False
    return default


# Vault database file, relative names are resolved against the working directory
VAULT_FILE_NAME = get_env("DM_VAULT_FILE", "dm-vault.db") or "dm-vault.db"

# Configuration row holding the bound key identifier
GPG_KEY_HASH_CONFIG = "gpg_key_hash"

# GnuPG engine
GNUPG_HOME = get_env("DM_GNUPG_HOME")
GPG_BINARY = get_env("DM_GPG_BINARY", "gpg") or "gpg"

# Locale for user-facing messages
LANGUAGE = get_env("DM_LANG", "en") or "en"

# Logging
DEBUG = get_env_bool("DM_DEBUG")
LOG_LEVEL = get_env("LOG_LEVEL", "DEBUG" if DEBUG else "WARNING")


def vault_path(cwd: Path | str | None = None) -> Path:
    """
    Resolve the vault database path.

    Args:
        cwd: Directory to resolve a relative vault file name against
            (defaults to the process working directory)

    Returns:
        Absolute path to the vault database file
    """
    path = Path(VAULT_FILE_NAME).expanduser()
    if path.is_absolute():
        return path
    base = Path(cwd) if cwd is not None else Path.cwd()
    return base.absolute() / path


def setup_logging(level: str | None = None) -> logging.Logger:
    """Configure and return logger."""
    actual = (level or LOG_LEVEL or "WARNING").upper()
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=getattr(logging, actual, logging.WARNING),
    )
    return logging.getLogger(__name__)
