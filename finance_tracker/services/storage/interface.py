"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract key-value interface for persistence.
This allows us to:
1. Keep the ledger in a local JSON file today
2. Use in-memory storage for testing
3. Swap in another backend later without touching the ledger logic

The interface is intentionally tiny - string keys mapped to serialized
string values, mirroring a browser's local storage. Encoding and decoding
of collections is the ledger store's job, not the backend's.
"""

from abc import ABC, abstractmethod
from typing import Optional


class KeyValueStorage(ABC):
    """
    Abstract interface for key-value persistence.

    Any storage implementation (JSON file, in-memory, etc.)
    must implement these methods.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """
        Read the serialized value stored under a key.

        Args:
            key: Storage key (e.g. 'transactions')

        Returns:
            The stored string, or None if the key is absent

        Raises:
            StorageReadError: If the backend cannot be read
        """
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """
        Store a serialized value, replacing any previous one.

        Args:
            key: Storage key
            value: Serialized value

        Raises:
            StorageWriteError: If the value could not be persisted
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a key.

        Returns:
            True if the key existed
        """
        pass

    @abstractmethod
    def keys(self) -> list[str]:
        """List stored keys."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class StorageReadError(StorageError):
    """Stored data could not be read."""
    pass


class StorageWriteError(StorageError):
    """Data could not be persisted."""
    pass
