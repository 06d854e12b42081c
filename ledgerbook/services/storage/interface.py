"""
Abstract Storage Interface

DESIGN DECISION: The database document is persisted through an abstract
interface so that:
1. The local JSON file can be swapped for another backend
2. Tests can run against a temporary directory
3. The record store never touches the file system itself

The document is always read and written whole.
"""

from abc import ABC, abstractmethod
from enum import Enum

from ledgerbook.models.database import DatabaseSnapshot


class WriteStatus(str, Enum):
    """
    Outcome of a write request.

    SKIPPED means another write was already in flight and this request
    was dropped; the caller's changes are not on disk yet.
    """
    WRITTEN = "written"
    SKIPPED = "skipped"
    FAILED = "failed"


class DatabaseStorageInterface(ABC):
    """
    Abstract interface for database document storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    async def exists(self) -> bool:
        """
        Check whether a committed document exists.

        Returns:
            True if a document has been written before
        """
        pass

    @abstractmethod
    async def init(self) -> DatabaseSnapshot:
        """
        Load the database on startup.

        Creates the document from seed data when none exists. Never
        raises: on any failure the seed data is returned instead.

        Returns:
            The snapshot to start the session with
        """
        pass

    @abstractmethod
    async def read(self) -> DatabaseSnapshot:
        """
        Read and validate the committed document.

        Returns:
            The stored snapshot

        Raises:
            PersistenceError: If the document is missing or invalid
        """
        pass

    @abstractmethod
    async def write(self, snapshot: DatabaseSnapshot) -> WriteStatus:
        """
        Replace the committed document.

        At most one write is in flight; overlapping requests are skipped.
        Never raises.

        Args:
            snapshot: The whole database to persist

        Returns:
            WRITTEN, SKIPPED or FAILED
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class PersistenceError(StorageError):
    """Reading, writing or parsing the backing file failed."""
    pass


class ImportFormatError(StorageError):
    """A backup document is not a valid database export."""
    pass
