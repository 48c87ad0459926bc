"""Shared types and data structures for Dark Matter."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field


class ExportStatus(Enum):
    """Outcome of a file export."""

    EXPORTED = "exported"
    CANCELED = "canceled"


@dataclass(frozen=True)
class ExportResult:
    """Result of exporting a file record to disk."""

    status: ExportStatus
    destination: Path


@dataclass(frozen=True)
class SecretSummary:
    """Listing view of a secret record (never includes the body)."""

    name: str
    tags: str = ""

    @property
    def tag_set(self) -> set[str]:
        return set(parse_tags(self.tags))


def parse_tags(raw: str | None) -> list[str]:
    """Split a comma-delimited tag list into trimmed, unique, non-empty tags."""
    if not raw:
        return []
    tags: list[str] = []
    for part in raw.split(","):
        tag = part.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def normalize_tags(raw: str | None) -> str:
    """Normalize a comma-delimited tag list for storage."""
    return ",".join(parse_tags(raw))


class UserId(BaseModel, frozen=True):
    """User id attached to a key."""

    name: str | None = None
    email: str | None = None


class SubkeyInfo(BaseModel, frozen=True):
    """Subkey summary."""

    key_id: str | None = None
    can_encrypt: bool = False


class KeyInfo(BaseModel, frozen=True):
    """Keyring entry as reported by the encryption engine."""

    key_id: str | None = None
    fingerprint: str | None = None
    can_encrypt: bool = False
    can_sign: bool = False
    can_certify: bool = False
    can_authenticate: bool = False
    expired: bool = False
    revoked: bool = False
    subkeys: list[SubkeyInfo] = Field(default_factory=list)
    uids: list[UserId] = Field(default_factory=list)


@dataclass(frozen=True)
class KeyDiagnosis:
    """Report produced by ``keys validate``."""

    info: KeyInfo
    encryption_test_ok: bool | None = None
    encryption_test_error: str | None = None

    @property
    def usable(self) -> bool:
        return self.info.can_encrypt and self.encryption_test_ok is not False
