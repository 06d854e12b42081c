"""
Collection Repository

CRUD over user-defined collections and their items. Validation runs
before anything is mutated, so a rejected call leaves the database
exactly as it was.

Known behaviors kept on purpose:
- update_schema does not migrate item values. Keys of removed fields
  stay in every item's values.
- update_item does not re-check required fields unless asked to
  (enforce_required=True).
"""

from typing import TYPE_CHECKING, Any, Iterable, Optional

from ledgerbook.audit import AuditLogger, create_correlation_id
from ledgerbook.models.audit import AuditEvent, AuditEventBuilder, AuditEventType
from ledgerbook.models.base import utc_now
from ledgerbook.models.inventory import Collection, CollectionItem, SchemaField
from ledgerbook.models.values import (
    FieldValue,
    FieldValueError,
    format_value,
    is_empty_value,
    stringify_value,
    to_field_value,
)
from ledgerbook.store.errors import (
    REQUIRED_FIELDS_MESSAGE,
    NotFoundError,
    ValidationError,
)
from ledgerbook.store.schema import default_schema, validate_schema

if TYPE_CHECKING:
    from ledgerbook.store.database import Database


def missing_required_fields(
    schema: list[SchemaField],
    values: dict[str, Any],
) -> list[str]:
    """Keys of required fields whose value is missing, None or ""."""
    return [
        field.key
        for field in schema
        if field.required and is_empty_value(values.get(field.key))
    ]


def apply_defaults(schema: list[SchemaField], values: dict[str, Any]) -> dict[str, Any]:
    """Fill default values for fields the caller did not provide."""
    merged = dict(values)
    for field in schema:
        if field.key not in merged and field.default_value is not None:
            merged[field.key] = field.default_value
    return merged


class CollectionRepository:
    """
    Record store for collections and items.

    Operates on the collections list of the database it belongs to.
    """

    def __init__(self, database: "Database", audit_logger: Optional[AuditLogger] = None):
        self._db = database
        self._audit_logger = audit_logger

    @property
    def _collections(self) -> list[Collection]:
        return self._db.snapshot.collections

    # -------------------------------------------------------------------------
    # Collections
    # -------------------------------------------------------------------------

    def list_collections(self) -> list[Collection]:
        return list(self._collections)

    def get_collection(self, collection_id: str) -> Optional[Collection]:
        for collection in self._collections:
            if collection.id == collection_id:
                return collection
        return None

    def create_collection(
        self,
        name: str,
        description: Optional[str] = None,
        schema: Optional[list[SchemaField]] = None,
    ) -> Collection:
        """
        Create an empty collection.

        Without a schema the collection starts with the default title
        field. Raises ValidationError on a blank name or bad schema.
        """
        if not name or not name.strip():
            self._reject("collection", None, "Collection name is required", ["name"])
        schema = default_schema() if schema is None else schema
        try:
            validate_schema(schema)
        except ValidationError as e:
            self._reject("collection", None, e.message, e.fields)

        collection = Collection(
            name=name.strip(),
            description=description.strip() if description else None,
            schema_fields=[field.model_copy(deep=True) for field in schema],
        )
        self._collections.append(collection)

        if self._audit_logger:
            self._audit_logger.log(AuditEventBuilder.collection_created(
                collection_id=collection.id,
                name=collection.name,
                field_count=len(collection.schema_fields),
            ))
        return collection

    def update_collection_details(
        self,
        collection_id: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Collection:
        collection = self._require_collection(collection_id)
        if name is not None and not name.strip():
            self._reject("collection", collection_id, "Collection name is required", ["name"])

        if name is not None:
            collection.name = name.strip()
        if description is not None:
            collection.description = description.strip() or None

        if self._audit_logger:
            self._audit_logger.log(AuditEvent(
                event_type=AuditEventType.COLLECTION_UPDATED,
                entity_type="collection",
                entity_id=collection_id,
                description=f"Collection details updated: {collection.name}",
            ))
        return collection

    def update_schema(self, collection_id: str, new_schema: list[SchemaField]) -> Collection:
        """
        Replace a collection's schema wholesale.

        Existing item values are left as they are, including values for
        fields that no longer exist.
        """
        collection = self._require_collection(collection_id)
        try:
            validate_schema(new_schema)
        except ValidationError as e:
            self._reject("collection", collection_id, e.message, e.fields)

        old_keys = [field.key for field in collection.schema_fields]
        collection.schema_fields = [field.model_copy(deep=True) for field in new_schema]

        if self._audit_logger:
            self._audit_logger.log(AuditEventBuilder.schema_updated(
                collection_id=collection_id,
                old_keys=old_keys,
                new_keys=[field.key for field in collection.schema_fields],
            ))
        return collection

    def delete_collection(self, collection_id: str) -> bool:
        """Delete a collection and all its items. Unknown ids are a no-op."""
        collection = self.get_collection(collection_id)
        if collection is None:
            return False
        self._collections.remove(collection)
        if self._audit_logger:
            self._audit_logger.log_deleted(
                AuditEventType.COLLECTION_DELETED, "collection", collection_id,
            )
        return True

    # -------------------------------------------------------------------------
    # Items
    # -------------------------------------------------------------------------

    def get_item(self, collection_id: str, item_id: str) -> Optional[CollectionItem]:
        collection = self.get_collection(collection_id)
        if collection is None:
            return None
        return collection.find_item(item_id)

    def add_item(self, collection_id: str, values: dict[str, Any]) -> CollectionItem:
        """
        Validate and append a new item.

        Defaults are filled for omitted fields first. Raises
        ValidationError if any required field is still empty.
        """
        collection = self._require_collection(collection_id)
        values = apply_defaults(collection.schema_fields, values)

        missing = missing_required_fields(collection.schema_fields, values)
        if missing:
            self._reject("item", None, REQUIRED_FIELDS_MESSAGE, missing)

        item = CollectionItem(values=values)
        collection.data.append(item)

        if self._audit_logger:
            self._audit_logger.log(AuditEventBuilder.item_added(collection_id, item.id))
        return item

    def update_item(
        self,
        collection_id: str,
        item_id: str,
        partial_values: dict[str, Any],
        enforce_required: bool = False,
    ) -> CollectionItem:
        """
        Shallow-merge `partial_values` into an item's values.

        Keys in the patch overwrite, keys absent from it are kept.
        """
        collection = self._require_collection(collection_id)
        item = collection.find_item(item_id)
        if item is None:
            raise NotFoundError("item", item_id)

        merged = {**item.values, **partial_values}
        if enforce_required:
            missing = missing_required_fields(collection.schema_fields, merged)
            if missing:
                self._reject("item", item_id, REQUIRED_FIELDS_MESSAGE, missing)

        item.values = merged
        item.updated_at = utc_now()

        if self._audit_logger:
            self._audit_logger.log(AuditEventBuilder.item_updated(
                collection_id, item_id, sorted(partial_values),
            ))
        return item

    def delete_item(self, collection_id: str, item_id: str) -> bool:
        """Remove an item. Unknown collection or item ids are a no-op."""
        collection = self.get_collection(collection_id)
        if collection is None:
            return False
        item = collection.find_item(item_id)
        if item is None:
            return False
        collection.data.remove(item)
        if self._audit_logger:
            self._audit_logger.log_deleted(AuditEventType.ITEM_DELETED, "item", item_id)
        return True

    def delete_items(self, collection_id: str, item_ids: Iterable[str]) -> int:
        """
        Delete several items one by one.

        There is no atomicity across the batch. Returns how many were
        actually removed.
        """
        correlation_id = create_correlation_id()
        removed = 0
        collection = self.get_collection(collection_id)
        if collection is None:
            return 0
        for item_id in list(item_ids):
            item = collection.find_item(item_id)
            if item is None:
                continue
            collection.data.remove(item)
            removed += 1
            if self._audit_logger:
                self._audit_logger.log_deleted(
                    AuditEventType.ITEM_DELETED, "item", item_id, correlation_id,
                )
        return removed

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def total_item_count(self) -> int:
        return sum(len(collection.data) for collection in self._collections)

    @staticmethod
    def filter_items(collection: Collection, query: str) -> list[CollectionItem]:
        """
        Case-insensitive substring filter over every schema field value.

        A blank query returns all items.
        """
        if not query.strip():
            return list(collection.data)
        needle = query.lower()
        matches = []
        for item in collection.data:
            for field in collection.schema_fields:
                value = item.values.get(field.key)
                if value is None:
                    continue
                if needle in stringify_value(value).lower():
                    matches.append(item)
                    break
        return matches

    @staticmethod
    def typed_values(collection: Collection, item: CollectionItem) -> dict[str, FieldValue]:
        """
        Typed view of an item's values for the current schema.

        Values that are missing or do not fit their field type are left out.
        """
        typed = {}
        for field in collection.schema_fields:
            try:
                value = to_field_value(field.type, item.values.get(field.key))
            except FieldValueError:
                continue
            if value is not None:
                typed[field.key] = value
        return typed

    @staticmethod
    def display_values(
        collection: Collection,
        item: CollectionItem,
        currency_symbol: str = "",
        date_format: str = "%x",
    ) -> list[tuple[str, str]]:
        """(label, display string) pairs in schema order."""
        return [
            (
                field.label,
                format_value(
                    item.values.get(field.key),
                    field.type,
                    currency_symbol=currency_symbol,
                    date_format=date_format,
                ),
            )
            for field in collection.schema_fields
        ]

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _require_collection(self, collection_id: str) -> Collection:
        collection = self.get_collection(collection_id)
        if collection is None:
            raise NotFoundError("collection", collection_id)
        return collection

    def _reject(
        self,
        entity_type: str,
        entity_id: Optional[str],
        message: str,
        fields: list[str],
    ) -> None:
        if self._audit_logger:
            self._audit_logger.log_validation_failed(entity_type, entity_id, message, fields)
        raise ValidationError(message, fields)
