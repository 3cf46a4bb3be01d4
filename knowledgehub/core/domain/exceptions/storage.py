"""Durable local storage exceptions."""

from .base import KnowledgeHubError


class StorageError(KnowledgeHubError):
    """Reading or writing local storage failed."""

    error_code = "KH_STO_001"
