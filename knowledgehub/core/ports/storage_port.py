"""Durable Local Storage Port Interface."""

from abc import ABC, abstractmethod

# Keys shared by every storage backend
TOKEN_KEY = "token"
USER_KEY = "user"
QA_HISTORY_KEY = "qaHistory"
RECENT_SEARCHES_KEY = "recentSearches"


class StoragePort(ABC):
    """Synchronous string key/value storage that survives restarts.

    Implementations raise ``StorageError`` when the backing store fails.
    """

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored value, or None if the key is absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete ``key``. Removing an absent key is not an error."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Delete every key."""
        ...
