"""
Record Store Package

In-memory repositories for collections (with their typed items) and
ledger entries, sharing one database document.
"""

from ledgerbook.store.database import Database
from ledgerbook.store.errors import (
    REQUIRED_FIELDS_MESSAGE,
    NotFoundError,
    StoreError,
    ValidationError,
)
from ledgerbook.store.inventory import CollectionRepository
from ledgerbook.store.ledger import LedgerRepository
from ledgerbook.store.seed import build_empty_snapshot, build_seed_snapshot

__all__ = [
    "CollectionRepository",
    "Database",
    "LedgerRepository",
    "NotFoundError",
    "REQUIRED_FIELDS_MESSAGE",
    "StoreError",
    "ValidationError",
    "build_empty_snapshot",
    "build_seed_snapshot",
]
