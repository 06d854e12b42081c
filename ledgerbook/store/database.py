"""
Database Aggregate

Holds the in-memory database document and the two repositories that
operate on it. Callers keep an explicit handle to a Database; there is
no module-level instance.
"""

from typing import Any, Optional

from ledgerbook.audit import AuditLogger
from ledgerbook.config import AppSettings, get_settings
from ledgerbook.models.audit import AuditEvent, AuditEventType
from ledgerbook.models.database import AppMeta, DatabaseSnapshot
from ledgerbook.models.inventory import SchemaFieldType
from ledgerbook.models.values import format_value
from ledgerbook.store.errors import ValidationError
from ledgerbook.store.inventory import CollectionRepository
from ledgerbook.store.ledger import LedgerRepository
from ledgerbook.store.seed import build_empty_snapshot, build_seed_snapshot


class Database:
    """
    The whole-database aggregate root.

    `collections` and `ledger` are independently addressable, but the
    document they share is replaced, saved and restored as one unit.
    """

    def __init__(
        self,
        snapshot: Optional[DatabaseSnapshot] = None,
        audit_logger: Optional[AuditLogger] = None,
        settings: Optional[AppSettings] = None,
    ):
        self._settings = settings or get_settings().app
        self._audit_logger = audit_logger
        self._snapshot = (
            snapshot.model_copy(deep=True)
            if snapshot is not None
            else build_empty_snapshot(self._settings.app_version, self._settings.default_currency)
        )
        self.collections = CollectionRepository(self, audit_logger)
        self.ledger = LedgerRepository(self, audit_logger)

    @property
    def snapshot(self) -> DatabaseSnapshot:
        """The live document. Mutate it only through the repositories."""
        return self._snapshot

    @property
    def meta(self) -> AppMeta:
        return self._snapshot.meta

    def copy_snapshot(self) -> DatabaseSnapshot:
        """Detached deep copy, safe to hand to storage."""
        return self._snapshot.model_copy(deep=True)

    # -------------------------------------------------------------------------
    # Whole-document operations
    # -------------------------------------------------------------------------

    def replace(self, snapshot: DatabaseSnapshot) -> None:
        """Swap in a complete document (used by import and load)."""
        self._snapshot = snapshot.model_copy(deep=True)

    def reset(self) -> None:
        """Clear every collection and ledger entry; onboarding starts over."""
        self._snapshot = build_empty_snapshot(
            self._settings.app_version,
            self.meta.user_currency or self._settings.default_currency,
        )
        self._audit(AuditEventType.DATA_CLEARED, "All data cleared")

    def load_seed(self) -> None:
        """Replace the document with the sample data."""
        self._snapshot = build_seed_snapshot(
            self._settings.app_version,
            self.meta.user_currency or self._settings.default_currency,
        )
        self._audit(AuditEventType.DATA_SEEDED, "Sample data loaded")

    # -------------------------------------------------------------------------
    # Meta
    # -------------------------------------------------------------------------

    def set_currency(self, symbol: str) -> AppMeta:
        if not symbol or not symbol.strip():
            raise ValidationError("Currency symbol is required", ["userCurrency"])
        self.meta.user_currency = symbol.strip()
        self._audit(AuditEventType.SETTINGS_UPDATED, "Currency changed", {"user_currency": symbol.strip()})
        return self.meta

    def set_organization_name(self, name: str) -> AppMeta:
        self.meta.organization_name = name.strip()
        self._audit(AuditEventType.SETTINGS_UPDATED, "Organization name changed")
        return self.meta

    def complete_onboarding(self) -> AppMeta:
        self.meta.is_new_user = False
        return self.meta

    def format_value(self, value: Any, field_type: SchemaFieldType) -> str:
        """format_value using the user's currency and the configured date format."""
        return format_value(
            value,
            field_type,
            currency_symbol=self.meta.user_currency,
            date_format=self._settings.date_display_format,
        )

    def _audit(
        self,
        event_type: AuditEventType,
        description: str,
        details: Optional[dict] = None,
    ) -> None:
        if self._audit_logger:
            self._audit_logger.log(AuditEvent(
                event_type=event_type,
                entity_type="database",
                description=description,
                details=details or {},
            ))
