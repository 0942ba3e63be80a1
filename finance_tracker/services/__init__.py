"""Services package."""

from finance_tracker.services.storage import (
    InMemoryStorage,
    JsonFileStorage,
    KeyValueStorage,
    StorageError,
    StorageReadError,
    StorageWriteError,
)

__all__ = [
    # Storage services
    "InMemoryStorage",
    "JsonFileStorage",
    "KeyValueStorage",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
]
