"""
Database Document Models

The whole database is a single JSON document with three top-level
keys: meta, collections and ledger. It is loaded, saved, exported and
imported as one unit.
"""

from datetime import datetime

from pydantic import Field

from ledgerbook.models.base import DocumentModel, utc_now
from ledgerbook.models.inventory import Collection
from ledgerbook.models.ledger import LedgerEntry


REQUIRED_DOCUMENT_KEYS = ("meta", "collections", "ledger")


class AppMeta(DocumentModel):
    """Process-wide settings persisted alongside the data."""

    app_version: str = Field(default="1.0.0")
    export_date: datetime = Field(default_factory=utc_now)
    user_currency: str = Field(
        default="₹",
        description="Display symbol, not an ISO code"
    )
    organization_name: str = Field(default="")
    is_new_user: bool = Field(default=False)


class DatabaseSnapshot(DocumentModel):
    """The aggregate root: everything the app stores."""

    meta: AppMeta
    collections: list[Collection] = Field(...)
    ledger: list[LedgerEntry] = Field(...)

    def to_json(self, indent: int = 2) -> str:
        return self.model_dump_json(by_alias=True, indent=indent)

    @classmethod
    def from_json(cls, text: str) -> "DatabaseSnapshot":
        return cls.model_validate_json(text)
