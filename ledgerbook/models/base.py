"""
Shared base for models that appear in the persisted JSON document.

The document uses camelCase keys (createdAt, organizationId, ...), so
every document model aliases its snake_case fields and serializes by
alias. Both spellings are accepted on input.
"""

from datetime import datetime, timezone
from uuid import uuid4

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class DocumentModel(BaseModel):
    """Base class for every model stored in the database document."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    def to_document(self) -> dict:
        """Dump to the JSON-compatible shape used on disk."""
        return self.model_dump(mode="json", by_alias=True)


def new_id() -> str:
    """Collision-free identifier for collections, items and ledger records."""
    return uuid4().hex


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
