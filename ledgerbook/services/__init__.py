"""Services package."""

from ledgerbook.services.storage import (
    DatabaseStorageInterface,
    ImportFormatError,
    JsonFileStorage,
    PersistenceError,
    StorageError,
    WriteStatus,
)

__all__ = [
    "DatabaseStorageInterface",
    "ImportFormatError",
    "JsonFileStorage",
    "PersistenceError",
    "StorageError",
    "WriteStatus",
]
