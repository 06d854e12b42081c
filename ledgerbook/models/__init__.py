"""
Data Models Package

Pydantic models for the database document, typed field values,
search results and audit events.
"""

from ledgerbook.models.inventory import (
    Collection,
    CollectionItem,
    SchemaField,
    SchemaFieldType,
)
from ledgerbook.models.ledger import (
    BalanceStatus,
    LedgerEntry,
    Organization,
    Transaction,
    TransactionType,
    balance_status,
    compute_balance,
)
from ledgerbook.models.database import AppMeta, DatabaseSnapshot
from ledgerbook.models.values import FieldValue, FieldValueError, format_value
from ledgerbook.models.search import SearchResult, SearchResults, SearchResultType
from ledgerbook.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Inventory models
    "Collection",
    "CollectionItem",
    "SchemaField",
    "SchemaFieldType",
    "FieldValue",
    "FieldValueError",
    "format_value",
    # Ledger models
    "BalanceStatus",
    "LedgerEntry",
    "Organization",
    "Transaction",
    "TransactionType",
    "balance_status",
    "compute_balance",
    # Document
    "AppMeta",
    "DatabaseSnapshot",
    # Search
    "SearchResult",
    "SearchResults",
    "SearchResultType",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
