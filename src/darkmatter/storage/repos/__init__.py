"""Repository classes for data access."""

from darkmatter.storage.repos.config_repo import ConfigRepo
from darkmatter.storage.repos.files_repo import FilesRepo
from darkmatter.storage.repos.secrets_repo import SecretsRepo

__all__ = [
    "ConfigRepo",
    "FilesRepo",
    "SecretsRepo",
]
