"""Factory for building the Vault instance with all dependencies wired.

The CLI calls build_vault() once per invocation so that every command sees the
same configuration (vault file location, GnuPG home and binary).
"""

from pathlib import Path

from darkmatter.core.config import GNUPG_HOME, GPG_BINARY, vault_path
from darkmatter.core.crypto import GpgGateway
from darkmatter.core.vault import Vault


def build_vault(
    cwd: Path | str | None = None,
    gnupghome: str | None = None,
    gpgbinary: str | None = None,
) -> Vault:
    """
    Build a fully configured Vault instance.

    Args:
        cwd: Working directory for the vault file and relative paths
            (defaults to the process working directory)
        gnupghome: GnuPG home directory (defaults to DM_GNUPG_HOME)
        gpgbinary: GnuPG executable (defaults to DM_GPG_BINARY)

    Returns:
        Vault bound to a GnuPG gateway
    """
    gateway = GpgGateway(
        gnupghome=gnupghome or GNUPG_HOME,
        gpgbinary=gpgbinary or GPG_BINARY,
    )
    return Vault(vault_path(cwd), gateway=gateway, cwd=cwd)
