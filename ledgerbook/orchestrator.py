"""
Main Orchestrator for Ledgerbook

Ties together the in-memory database, the storage backend, the search
engine and the audit log, and defines the session-level flows:
1. Load (storage -> database)
2. Save (database -> storage, reporting whether the write landed)
3. Backup export / import (whole-document replace)
4. Clear and seed
5. Search across every entity type

The store itself never touches storage. Callers mutate through
`app.database.collections` / `app.database.ledger` and then call save().
"""

from pathlib import Path
from typing import Optional, Union

from ledgerbook.audit import AuditLogger
from ledgerbook.config import AppSettings, get_settings
from ledgerbook.models.audit import AuditEvent, AuditEventBuilder, AuditEventType, AuditSeverity
from ledgerbook.models.search import SearchResults
from ledgerbook.search import SearchEngine
from ledgerbook.services.storage import (
    DatabaseStorageInterface,
    ImportFormatError,
    JsonFileStorage,
    PersistenceError,
    WriteStatus,
)
from ledgerbook.services.storage.backup import export_backup, read_backup
from ledgerbook.store import Database


class LedgerbookApp:
    """
    One user session over one database document.

    All flows are async because storage is; store operations on
    `database` are synchronous.
    """

    def __init__(
        self,
        storage: DatabaseStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        search_engine: Optional[SearchEngine] = None,
        settings: Optional[AppSettings] = None,
    ):
        self._settings = settings or get_settings().app
        self._storage = storage
        self._audit_logger = audit_logger or AuditLogger()
        self._search_engine = search_engine or SearchEngine(self._settings.search_result_limit)
        self.database = Database(audit_logger=self._audit_logger, settings=self._settings)

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    async def load(self) -> Database:
        """Replace the in-memory database with the stored document."""
        snapshot = await self._storage.init()
        self.database.replace(snapshot)
        self._log(
            AuditEventType.DATABASE_LOADED,
            f"Database loaded: {len(snapshot.collections)} collections, "
            f"{len(snapshot.ledger)} ledger entries",
        )
        return self.database

    async def save(self) -> WriteStatus:
        """
        Persist the current document.

        A SKIPPED status means an earlier write was still running and
        these changes are only in memory.
        """
        status = await self._storage.write(self.database.copy_snapshot())
        if status is WriteStatus.WRITTEN:
            self._log(AuditEventType.DATABASE_SAVED, "Database saved")
        elif status is WriteStatus.SKIPPED:
            self._audit_logger.log(AuditEventBuilder.write_skipped(type(self._storage).__name__))
        else:
            self._log(AuditEventType.WRITE_FAILED, "Database write failed", AuditSeverity.ERROR)
        return status

    async def export_backup(self, directory: Union[str, Path]) -> Optional[Path]:
        path = await export_backup(self.database.copy_snapshot(), directory)
        if path is not None:
            self._log(AuditEventType.BACKUP_EXPORTED, f"Backup exported to {path.name}")
        return path

    async def import_backup(self, path: Union[str, Path]) -> bool:
        """
        Replace all data with a backup file.

        The current data is untouched unless the whole file parses.
        """
        try:
            snapshot = await read_backup(path)
        except (ImportFormatError, PersistenceError) as e:
            self._audit_logger.log(AuditEventBuilder.import_rejected(str(path), str(e)))
            return False

        self.database.replace(snapshot)
        self._log(AuditEventType.BACKUP_IMPORTED, "Backup imported")
        return await self.save() is WriteStatus.WRITTEN

    async def clear_data(self) -> WriteStatus:
        self.database.reset()
        return await self.save()

    async def seed_data(self) -> WriteStatus:
        self.database.load_seed()
        return await self.save()

    def search(self, query: str) -> SearchResults:
        """
        Search every entity type.

        Queries shorter than the configured minimum return no results.
        """
        if len(query.strip()) < self._settings.min_query_length:
            return SearchResults(query=query)

        results = self._search_engine.search(self.database.snapshot, query)
        self._audit_logger.log(AuditEventBuilder.search_executed(
            query=query,
            result_counts={
                "collections": len(results.collections),
                "items": len(results.items),
                "organizations": len(results.organizations),
                "ledgers": len(results.ledgers),
            },
        ))
        return results

    def _log(
        self,
        event_type: AuditEventType,
        description: str,
        severity: AuditSeverity = AuditSeverity.INFO,
    ) -> None:
        self._audit_logger.log(AuditEvent(
            event_type=event_type,
            severity=severity,
            entity_type="database",
            description=description,
        ))


def create_app(
    storage: Optional[DatabaseStorageInterface] = None,
    audit_logger: Optional[AuditLogger] = None,
) -> LedgerbookApp:
    """
    Factory function to create the application components.

    Args:
        storage: Storage backend. Defaults to the JSON file configured
                 in StorageSettings.
        audit_logger: Audit log. Defaults to a fresh session log.
    """
    audit_logger = audit_logger or AuditLogger()
    return LedgerbookApp(
        storage=storage or JsonFileStorage(audit_logger=audit_logger),
        audit_logger=audit_logger,
    )
