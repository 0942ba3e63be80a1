"""
Storage Services Package

Provides the abstract key-value interface and concrete implementations.
Currently implements a local JSON file as the backend, but designed to be swappable.
"""

from finance_tracker.services.storage.interface import (
    KeyValueStorage,
    StorageError,
    StorageReadError,
    StorageWriteError,
)
from finance_tracker.services.storage.json_file import JsonFileStorage
from finance_tracker.services.storage.memory import InMemoryStorage

__all__ = [
    # Interface
    "KeyValueStorage",
    # Exceptions
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    # Implementations
    "InMemoryStorage",
    "JsonFileStorage",
]
