"""
Local JSON File Storage

DESIGN DECISION: The database is one pretty-printed JSON document in the
data directory. Writes are atomic at the file level: the document is
written to a temp file which then replaces the committed file, so a
crash mid-write leaves the previous snapshot intact.

A single in-progress flag guards the file. A write requested while
another is in flight is skipped and reported as WriteStatus.SKIPPED;
it is not queued or retried.
"""

import asyncio
import os
from pathlib import Path
from typing import Callable, Optional

import structlog
from pydantic import ValidationError as PydanticValidationError
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from ledgerbook.audit import AuditLogger
from ledgerbook.config import StorageSettings, get_settings
from ledgerbook.models.database import DatabaseSnapshot
from ledgerbook.services.storage.interface import (
    DatabaseStorageInterface,
    PersistenceError,
    WriteStatus,
)
from ledgerbook.store.seed import build_seed_snapshot


def _default_seed() -> DatabaseSnapshot:
    app = get_settings().app
    return build_seed_snapshot(app.app_version, app.default_currency)


class JsonFileStorage(DatabaseStorageInterface):
    """
    File-backed implementation of database storage.

    File I/O runs in a worker thread so the event loop is never blocked.
    """

    def __init__(
        self,
        settings: Optional[StorageSettings] = None,
        seed_factory: Optional[Callable[[], DatabaseSnapshot]] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._settings = settings or get_settings().storage
        self._seed_factory = seed_factory or _default_seed
        self._is_writing = False
        self._audit_logger = audit_logger
        self._logger = structlog.get_logger("ledgerbook.storage")

    @property
    def path(self) -> Path:
        return self._settings.db_path

    @property
    def is_writing(self) -> bool:
        return self._is_writing

    async def exists(self) -> bool:
        return await asyncio.to_thread(self.path.is_file)

    async def init(self) -> DatabaseSnapshot:
        """Load the committed document, creating it from seed data if absent."""
        try:
            if not await self.exists():
                self._logger.info("database_missing_seeding", path=str(self.path))
                seed = self._seed_factory()
                await self.write(seed)
                return seed
            return await self.read()
        except Exception as e:
            # Fall back to seed data rather than failing startup
            self._logger.error("database_init_failed", path=str(self.path), error=str(e))
            self._report_error("database_init_failed", e)
            return self._seed_factory()

    async def read(self) -> DatabaseSnapshot:
        try:
            content = await asyncio.to_thread(self.path.read_text, encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to read database: {e}") from e
        except UnicodeDecodeError as e:
            raise PersistenceError(f"Database file is not UTF-8 text: {e}") from e

        try:
            return DatabaseSnapshot.from_json(content)
        except PydanticValidationError as e:
            raise PersistenceError(f"Database file is invalid: {e}") from e

    async def write(self, snapshot: DatabaseSnapshot) -> WriteStatus:
        if self._is_writing:
            self._logger.warning("write_skipped", path=str(self.path))
            return WriteStatus.SKIPPED

        self._is_writing = True
        try:
            payload = snapshot.to_json()
            await asyncio.to_thread(self._write_with_retry, payload)
            return WriteStatus.WRITTEN
        except Exception as e:
            self._logger.error("write_failed", path=str(self.path), error=str(e))
            self._report_error("write_failed", e)
            return WriteStatus.FAILED
        finally:
            self._is_writing = False

    def _report_error(self, error_type: str, error: Exception) -> None:
        if self._audit_logger:
            self._audit_logger.log_error(
                error_type=error_type,
                error_message=str(error),
                details={"path": str(self.path)},
            )

    def _write_with_retry(self, payload: str) -> None:
        for attempt in Retrying(
            stop=stop_after_attempt(self._settings.write_retry_attempts),
            wait=wait_exponential(multiplier=0.05, max=1),
            retry=retry_if_exception_type(OSError),
            reraise=True,
        ):
            with attempt:
                self._replace_file(payload)

    def _replace_file(self, payload: str) -> None:
        """Write to the temp file, then atomically move it into place."""
        temp_path = self._settings.temp_path
        temp_path.parent.mkdir(parents=True, exist_ok=True)
        with open(temp_path, "w", encoding="utf-8") as handle:
            handle.write(payload)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(temp_path, self.path)
