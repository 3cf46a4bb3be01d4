"""Interfaces the core services depend on."""

from .api_port import KnowledgeApiPort
from .notifier_port import NotifierPort
from .storage_port import StoragePort

__all__ = ["KnowledgeApiPort", "NotifierPort", "StoragePort"]
