"""
Audit Models for Ledgerbook

Every mutation of the database is recorded as an audit event.
This provides:
1. Traceability of schema edits and record changes
2. Debugging information when a save or import goes wrong
3. A history of ledger movements per organization

DESIGN DECISION: Audit events are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

from ledgerbook.models.base import utc_now


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Inventory
    COLLECTION_CREATED = "collection_created"
    COLLECTION_UPDATED = "collection_updated"
    COLLECTION_DELETED = "collection_deleted"
    SCHEMA_UPDATED = "schema_updated"
    ITEM_ADDED = "item_added"
    ITEM_UPDATED = "item_updated"
    ITEM_DELETED = "item_deleted"

    # Ledger
    ORGANIZATION_ADDED = "organization_added"
    ORGANIZATION_UPDATED = "organization_updated"
    ORGANIZATION_DELETED = "organization_deleted"
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_UPDATED = "transaction_updated"
    TRANSACTION_DELETED = "transaction_deleted"

    # Validation
    VALIDATION_FAILED = "validation_failed"

    # Persistence
    DATABASE_LOADED = "database_loaded"
    DATABASE_SAVED = "database_saved"
    WRITE_SKIPPED = "write_skipped"
    WRITE_FAILED = "write_failed"

    # Backup and maintenance
    BACKUP_EXPORTED = "backup_exported"
    BACKUP_IMPORTED = "backup_imported"
    IMPORT_REJECTED = "import_rejected"
    DATA_CLEARED = "data_cleared"
    DATA_SEEDED = "data_seeded"
    SETTINGS_UPDATED = "settings_updated"

    # Search
    SEARCH_EXECUTED = "search_executed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=utc_now,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'collection', 'item', 'transaction')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., a batch delete)"
    )

    description: str = Field(
        ...,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.item_added(collection_id, item_id)
        event = AuditEventBuilder.write_skipped("JsonFileStorage")
    """

    @staticmethod
    def collection_created(collection_id: str, name: str, field_count: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.COLLECTION_CREATED,
            entity_type="collection",
            entity_id=collection_id,
            description=f"Collection created: {name}",
            details={"name": name, "field_count": field_count},
        )

    @staticmethod
    def schema_updated(
        collection_id: str,
        old_keys: list[str],
        new_keys: list[str],
    ) -> AuditEvent:
        removed = [key for key in old_keys if key not in new_keys]
        return AuditEvent(
            event_type=AuditEventType.SCHEMA_UPDATED,
            entity_type="collection",
            entity_id=collection_id,
            description=f"Schema updated ({len(new_keys)} fields)",
            details={
                "fields": new_keys,
                "orphaned_keys": removed,
            },
        )

    @staticmethod
    def item_added(collection_id: str, item_id: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ITEM_ADDED,
            entity_type="item",
            entity_id=item_id,
            description="Item added",
            details={"collection_id": collection_id},
        )

    @staticmethod
    def item_updated(collection_id: str, item_id: str, keys: list[str]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ITEM_UPDATED,
            entity_type="item",
            entity_id=item_id,
            description=f"Item updated ({len(keys)} values)",
            details={"collection_id": collection_id, "keys": keys},
        )

    @staticmethod
    def deleted(
        event_type: AuditEventType,
        entity_type: str,
        entity_id: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=event_type,
            entity_type=entity_type,
            entity_id=entity_id,
            correlation_id=correlation_id,
            description=f"{entity_type.capitalize()} deleted",
        )

    @staticmethod
    def transaction_added(
        organization_id: str,
        transaction_id: str,
        transaction_type: str,
        amount: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"{transaction_type} of {amount} recorded",
            details={
                "organization_id": organization_id,
                "type": transaction_type,
                "amount": amount,
            },
        )

    @staticmethod
    def validation_failed(
        entity_type: str,
        entity_id: Optional[str],
        message: str,
        fields: list[str],
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"Validation failed: {message}",
            details={"fields": fields},
        )

    @staticmethod
    def write_skipped(backend: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WRITE_SKIPPED,
            severity=AuditSeverity.WARNING,
            entity_type="database",
            description="Write already in progress, skipped",
            details={"backend": backend},
        )

    @staticmethod
    def import_rejected(source: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.IMPORT_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="backup",
            description="Backup import rejected",
            error_message=reason,
            details={"source": source},
        )

    @staticmethod
    def search_executed(query: str, result_counts: dict[str, int]) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SEARCH_EXECUTED,
            severity=AuditSeverity.DEBUG,
            entity_type="search",
            description=f"Search returned {sum(result_counts.values())} results",
            details={"query": query, "result_counts": result_counts},
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
