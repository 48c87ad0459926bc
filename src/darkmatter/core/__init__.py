"""Dark Matter core library - the vault engine."""

from typing import TYPE_CHECKING

from darkmatter.core.types import (
    ExportResult,
    ExportStatus,
    KeyDiagnosis,
    KeyInfo,
    SecretSummary,
)

if TYPE_CHECKING:
    from darkmatter.core.crypto import GpgGateway
    from darkmatter.core.factory import build_vault
    from darkmatter.core.keys import KeyBinding
    from darkmatter.core.vault import Vault

__all__ = [
    # Core classes
    "Vault",
    "build_vault",
    "GpgGateway",
    "KeyBinding",
    # Types
    "ExportResult",
    "ExportStatus",
    "KeyDiagnosis",
    "KeyInfo",
    "SecretSummary",
]


def __getattr__(name: str):
    if name == "Vault":
        from darkmatter.core.vault import Vault

        return Vault
    if name == "build_vault":
        from darkmatter.core.factory import build_vault

        return build_vault
    if name == "GpgGateway":
        from darkmatter.core.crypto import GpgGateway

        return GpgGateway
    if name == "KeyBinding":
        from darkmatter.core.keys import KeyBinding

        return KeyBinding
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
