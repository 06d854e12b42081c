"""
Inventory Models

A collection is a user-defined table: an ordered schema of typed fields
plus the items stored against it. Item values stay loosely typed on
disk; see ledgerbook.models.values for the typed view.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import Field

from ledgerbook.models.base import DocumentModel, new_id, utc_now


class SchemaFieldType(str, Enum):
    """Field types a collection schema may declare."""
    TEXT = "text"
    NUMBER = "number"
    CURRENCY = "currency"
    DATE = "date"
    BOOLEAN = "boolean"
    SELECT = "select"
    IMAGE = "image"


class SchemaField(DocumentModel):
    """
    One attribute of a collection.

    The key is derived from the label and must be unique among its
    siblings. Options only matter for SELECT fields.
    """

    key: str = Field(
        ...,
        min_length=1,
        description="Machine key used in item values"
    )
    label: str = Field(
        ...,
        description="Display name"
    )
    type: SchemaFieldType = Field(
        default=SchemaFieldType.TEXT,
        description="Value type of the field"
    )
    options: Optional[list[str]] = Field(
        default=None,
        description="Allowed values for select fields, in display order"
    )
    required: bool = Field(
        default=False,
        description="Items must carry a non-empty value for this field"
    )
    default_value: Any = Field(
        default=None,
        description="Value used when an item omits this field"
    )


class CollectionItem(DocumentModel):
    """One record stored in a collection."""

    id: str = Field(default_factory=new_id)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: Optional[datetime] = None
    values: dict[str, Any] = Field(
        default_factory=dict,
        description="Field key -> raw value"
    )

    def get_value(self, key: str) -> Any:
        """Missing keys read as None."""
        return self.values.get(key)


class Collection(DocumentModel):
    """
    A named, schema-typed bucket of items.

    Schema order is significant: index 0 is the title field and index 1
    is shown as the subtitle in list views.
    """

    id: str = Field(default_factory=new_id)
    name: str
    description: Optional[str] = None
    schema_fields: list[SchemaField] = Field(
        default_factory=list,
        alias="schema",
        description="Ordered field definitions"
    )
    data: list[CollectionItem] = Field(default_factory=list)

    @property
    def title_field(self) -> Optional[SchemaField]:
        return self.schema_fields[0] if self.schema_fields else None

    @property
    def subtitle_field(self) -> Optional[SchemaField]:
        return self.schema_fields[1] if len(self.schema_fields) > 1 else None

    def find_item(self, item_id: str) -> Optional[CollectionItem]:
        for item in self.data:
            if item.id == item_id:
                return item
        return None
