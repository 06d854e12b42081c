"""
Backup Export and Import

A backup is the database document written to a dated file. Import
parses and validates the whole document before anything is replaced;
a file missing meta, collections or ledger is rejected.
"""

import asyncio
import json
from datetime import date
from pathlib import Path
from typing import Optional, Union

import structlog
from pydantic import ValidationError as PydanticValidationError

from ledgerbook.config import get_settings
from ledgerbook.models.base import utc_now
from ledgerbook.models.database import REQUIRED_DOCUMENT_KEYS, DatabaseSnapshot
from ledgerbook.services.storage.interface import ImportFormatError, PersistenceError


logger = structlog.get_logger("ledgerbook.backup")


def backup_filename(prefix: str, day: Optional[date] = None) -> str:
    day = day or date.today()
    return f"{prefix}_{day.isoformat()}.json"


def parse_backup(content: str) -> DatabaseSnapshot:
    """
    Parse and validate a backup document.

    Raises ImportFormatError if the text is not JSON, a top-level key is
    missing, or the document does not validate.
    """
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ImportFormatError(f"Backup is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ImportFormatError("Backup must be a JSON object")

    missing = [key for key in REQUIRED_DOCUMENT_KEYS if data.get(key) is None]
    if missing:
        raise ImportFormatError(f"Backup is missing: {', '.join(missing)}")

    try:
        return DatabaseSnapshot.model_validate(data)
    except PydanticValidationError as e:
        raise ImportFormatError(f"Backup contents are invalid: {e}") from e


async def read_backup(path: Union[str, Path]) -> DatabaseSnapshot:
    """
    Read a backup file.

    Raises PersistenceError if the file cannot be read and
    ImportFormatError if it is not a valid backup.
    """
    try:
        content = await asyncio.to_thread(Path(path).read_text, encoding="utf-8")
    except OSError as e:
        raise PersistenceError(f"Failed to read backup: {e}") from e
    except UnicodeDecodeError as e:
        raise ImportFormatError(f"Backup is not UTF-8 text: {e}") from e
    return parse_backup(content)


async def import_backup(path: Union[str, Path]) -> Optional[DatabaseSnapshot]:
    """Read a backup file, returning None (logged) if it is unusable."""
    try:
        return await read_backup(path)
    except (PersistenceError, ImportFormatError) as e:
        logger.error("import_failed", path=str(path), error=str(e))
        return None


async def export_backup(
    snapshot: DatabaseSnapshot,
    directory: Union[str, Path],
    prefix: Optional[str] = None,
    day: Optional[date] = None,
) -> Optional[Path]:
    """
    Write the document to `<directory>/<prefix>_<YYYY-MM-DD>.json`.

    The exported copy carries a fresh exportDate. Returns the path, or
    None (logged) if the file could not be written.
    """
    prefix = prefix or get_settings().storage.backup_prefix
    exported = snapshot.model_copy(deep=True)
    exported.meta.export_date = utc_now()
    target = Path(directory) / backup_filename(prefix, day)

    def _write() -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(exported.to_json(), encoding="utf-8")

    try:
        await asyncio.to_thread(_write)
    except OSError as e:
        logger.error("export_failed", path=str(target), error=str(e))
        return None
    return target
