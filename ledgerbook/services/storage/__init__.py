"""
Storage Services Package

Provides the abstract storage interface and the local JSON file
implementation, plus backup export/import.
"""

from ledgerbook.services.storage.interface import (
    DatabaseStorageInterface,
    ImportFormatError,
    PersistenceError,
    StorageError,
    WriteStatus,
)
from ledgerbook.services.storage.json_file import JsonFileStorage
from ledgerbook.services.storage.backup import (
    export_backup,
    import_backup,
    parse_backup,
    read_backup,
)

__all__ = [
    # Interfaces
    "DatabaseStorageInterface",
    "WriteStatus",
    # Exceptions
    "ImportFormatError",
    "PersistenceError",
    "StorageError",
    # JSON file implementation
    "JsonFileStorage",
    # Backups
    "export_backup",
    "import_backup",
    "parse_backup",
    "read_backup",
]
