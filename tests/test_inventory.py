"""
Tests for the record store

Test strategy:
1. Required-field validation gates every item write
2. Rejected and idempotent calls leave the document unchanged
3. Known behaviors (no schema migration, loose update_item) are pinned
4. Database-level operations (meta, reset, seed)
"""

import pytest

from ledgerbook.audit import AuditLogger
from ledgerbook.models.audit import AuditEventType
from ledgerbook.models.inventory import SchemaField, SchemaFieldType
from ledgerbook.models.values import CurrencyValue
from ledgerbook.store import (
    REQUIRED_FIELDS_MESSAGE,
    Database,
    NotFoundError,
    ValidationError,
)


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def db(audit_logger):
    return Database(audit_logger=audit_logger)


@pytest.fixture
def laptops(db):
    return db.collections.create_collection(
        "Laptops",
        description="Refurbished stock",
        schema=[
            SchemaField(key="name", label="Item Name", required=True),
            SchemaField(key="sku", label="SKU"),
            SchemaField(key="price", label="Price", type=SchemaFieldType.CURRENCY),
            SchemaField(
                key="condition",
                label="Condition",
                type=SchemaFieldType.SELECT,
                options=["New", "Good"],
                default_value="Good",
            ),
        ],
    )


class TestCollections:
    """Tests for collection CRUD."""

    def test_create_with_default_schema(self, db):
        """Test a collection without a schema gets the title field."""
        collection = db.collections.create_collection("Spare Parts")
        assert [f.key for f in collection.schema_fields] == ["name"]
        assert collection.data == []
        assert db.collections.get_collection(collection.id) is collection

    def test_create_blank_name_rejected(self, db):
        """Test that a blank name is rejected and nothing is created."""
        with pytest.raises(ValidationError, match="name is required"):
            db.collections.create_collection("   ")
        assert db.collections.list_collections() == []

    def test_long_name_and_description_accepted(self, db, audit_logger):
        """Test collection names and descriptions have no length cap."""
        collection = db.collections.create_collection("x" * 201, description="d" * 1200)
        assert collection.name == "x" * 201
        assert collection.description == "d" * 1200
        assert len(audit_logger.events_of_type(AuditEventType.COLLECTION_CREATED)) == 1

    def test_create_logs_event(self, db, audit_logger):
        """Test that creating a collection is audited."""
        db.collections.create_collection("Spare Parts")
        assert len(audit_logger.events_of_type(AuditEventType.COLLECTION_CREATED)) == 1

    def test_update_details(self, db, laptops):
        """Test renaming a collection and clearing its description."""
        db.collections.update_collection_details(laptops.id, name="Notebooks", description="")
        assert laptops.name == "Notebooks"
        assert laptops.description is None

    def test_unknown_collection_get_is_none(self, db):
        """Test lookups of unknown ids return None."""
        assert db.collections.get_collection("missing") is None
        assert db.collections.get_item("missing", "missing") is None

    def test_delete_unknown_is_noop(self, db, laptops):
        """Test deleting an unknown collection leaves the document as it was."""
        before = db.copy_snapshot().to_document()
        assert db.collections.delete_collection("missing") is False
        assert db.copy_snapshot().to_document() == before

    def test_delete_collection(self, db, laptops, audit_logger):
        """Test deleting a collection."""
        assert db.collections.delete_collection(laptops.id) is True
        assert db.collections.list_collections() == []
        assert len(audit_logger.events_of_type(AuditEventType.COLLECTION_DELETED)) == 1


class TestItemValidation:
    """Tests for the required-field gate."""

    def test_missing_required_field_rejected(self, db, laptops, audit_logger):
        """Test an item without its required field is rejected."""
        with pytest.raises(ValidationError, match=REQUIRED_FIELDS_MESSAGE) as exc_info:
            db.collections.add_item(laptops.id, {"sku": "TP-01"})
        assert exc_info.value.fields == ["name"]
        assert laptops.data == []
        assert len(audit_logger.events_of_type(AuditEventType.VALIDATION_FAILED)) == 1

    def test_empty_string_counts_as_missing(self, db, laptops):
        """Test "" does not satisfy a required field."""
        with pytest.raises(ValidationError):
            db.collections.add_item(laptops.id, {"name": ""})

    def test_add_item(self, db, laptops):
        """Test a valid item is appended with an id and timestamp."""
        item = db.collections.add_item(laptops.id, {"name": "ThinkPad T480", "price": 32000})
        assert laptops.data == [item]
        assert item.id
        assert item.created_at is not None
        assert item.updated_at is None

    def test_defaults_are_applied(self, db, laptops):
        """Test omitted fields take their default value."""
        item = db.collections.add_item(laptops.id, {"name": "ThinkPad"})
        assert item.values["condition"] == "Good"

    def test_explicit_value_beats_default(self, db, laptops):
        """Test a provided value is not replaced by the default."""
        item = db.collections.add_item(laptops.id, {"name": "ThinkPad", "condition": "New"})
        assert item.values["condition"] == "New"

    def test_add_to_unknown_collection(self, db):
        """Test adding to an unknown collection raises NotFoundError."""
        with pytest.raises(NotFoundError, match="collection not found"):
            db.collections.add_item("missing", {"name": "X"})


class TestItemUpdates:
    """Tests for update_item and deletes."""

    def test_shallow_merge(self, db, laptops):
        """Test keys in the patch overwrite and others are kept."""
        item = db.collections.add_item(laptops.id, {"name": "ThinkPad", "sku": "A"})
        db.collections.update_item(laptops.id, item.id, {"sku": "B"})
        assert item.values["name"] == "ThinkPad"
        assert item.values["sku"] == "B"
        assert item.updated_at is not None

    def test_update_does_not_recheck_required(self, db, laptops):
        """Test update_item accepts clearing a required field by default."""
        item = db.collections.add_item(laptops.id, {"name": "ThinkPad"})
        db.collections.update_item(laptops.id, item.id, {"name": ""})
        assert item.values["name"] == ""

    def test_update_enforce_required(self, db, laptops):
        """Test enforce_required rejects clearing a required field."""
        item = db.collections.add_item(laptops.id, {"name": "ThinkPad"})
        with pytest.raises(ValidationError):
            db.collections.update_item(laptops.id, item.id, {"name": ""}, enforce_required=True)
        assert item.values["name"] == "ThinkPad"
        assert item.updated_at is None

    def test_update_unknown_item(self, db, laptops):
        """Test updating an unknown item raises NotFoundError."""
        with pytest.raises(NotFoundError):
            db.collections.update_item(laptops.id, "missing", {"sku": "B"})

    def test_delete_unknown_item_is_noop(self, db, laptops):
        """Test deleting an unknown item leaves the document as it was."""
        db.collections.add_item(laptops.id, {"name": "ThinkPad"})
        before = db.copy_snapshot().to_document()
        assert db.collections.delete_item(laptops.id, "missing") is False
        assert db.collections.delete_item("missing", "missing") is False
        assert db.copy_snapshot().to_document() == before

    def test_delete_items_batch(self, db, laptops, audit_logger):
        """Test batch delete removes what exists and shares a correlation id."""
        first = db.collections.add_item(laptops.id, {"name": "A"})
        second = db.collections.add_item(laptops.id, {"name": "B"})
        third = db.collections.add_item(laptops.id, {"name": "C"})

        removed = db.collections.delete_items(laptops.id, [first.id, "missing", third.id])

        assert removed == 2
        assert laptops.data == [second]
        events = audit_logger.events_of_type(AuditEventType.ITEM_DELETED)
        assert len(events) == 2
        assert events[0].correlation_id == events[1].correlation_id


class TestSchemaChanges:
    """Tests for update_schema."""

    def test_removed_field_values_are_kept(self, db, laptops, audit_logger):
        """Test that dropping a field leaves its values on existing items."""
        item = db.collections.add_item(laptops.id, {"name": "ThinkPad", "sku": "TP-01"})
        db.collections.update_schema(
            laptops.id,
            [field for field in laptops.schema_fields if field.key != "sku"],
        )
        assert "sku" not in [f.key for f in laptops.schema_fields]
        assert item.values["sku"] == "TP-01"

        event = audit_logger.events_of_type(AuditEventType.SCHEMA_UPDATED)[-1]
        assert event.details["orphaned_keys"] == ["sku"]

    def test_invalid_schema_rejected(self, db, laptops):
        """Test a schema with duplicate keys is rejected untouched."""
        with pytest.raises(ValidationError):
            db.collections.update_schema(
                laptops.id,
                [SchemaField(key="a", label="A"), SchemaField(key="a", label="A")],
            )
        assert len(laptops.schema_fields) == 4

    def test_unknown_collection(self, db):
        """Test update_schema on an unknown id raises NotFoundError."""
        with pytest.raises(NotFoundError):
            db.collections.update_schema("missing", [SchemaField(key="a", label="A")])


class TestReads:
    """Tests for filtering and display helpers."""

    def test_filter_items(self, db, laptops):
        """Test case-insensitive filtering over schema values."""
        thinkpad = db.collections.add_item(laptops.id, {"name": "ThinkPad T480"})
        db.collections.add_item(laptops.id, {"name": "MacBook Air"})
        assert db.collections.filter_items(laptops, "think") == [thinkpad]
        assert len(db.collections.filter_items(laptops, " ")) == 2

    def test_display_values(self, db, laptops):
        """Test display pairs follow schema order."""
        item = db.collections.add_item(laptops.id, {"name": "ThinkPad", "price": 100})
        pairs = db.collections.display_values(laptops, item, currency_symbol="₹")
        assert pairs == [
            ("Item Name", "ThinkPad"),
            ("SKU", "N/A"),
            ("Price", "₹100"),
            ("Condition", "Good"),
        ]

    def test_typed_values(self, db, laptops):
        """Test the typed view skips missing values."""
        item = db.collections.add_item(laptops.id, {"name": "ThinkPad", "price": "250"})
        typed = db.collections.typed_values(laptops, item)
        assert isinstance(typed["price"], CurrencyValue)
        assert "sku" not in typed

    def test_total_item_count(self, db, laptops):
        """Test the item count across collections."""
        other = db.collections.create_collection("Spare Parts")
        db.collections.add_item(laptops.id, {"name": "A"})
        db.collections.add_item(other.id, {"name": "B"})
        assert db.collections.total_item_count() == 2


class TestDatabase:
    """Tests for the database aggregate."""

    def test_new_database_is_empty(self, db):
        """Test a fresh database has no data and pending onboarding."""
        assert db.snapshot.collections == []
        assert db.snapshot.ledger == []
        assert db.meta.is_new_user is True

    def test_set_currency(self, db):
        """Test the currency symbol drives formatting."""
        db.set_currency("$")
        assert db.meta.user_currency == "$"
        assert db.format_value(5, SchemaFieldType.CURRENCY) == "$5"

    def test_blank_currency_rejected(self, db):
        """Test a blank currency symbol is rejected."""
        with pytest.raises(ValidationError):
            db.set_currency(" ")

    def test_complete_onboarding(self, db):
        """Test onboarding flips is_new_user."""
        db.set_organization_name("My Shop")
        db.complete_onboarding()
        assert db.meta.organization_name == "My Shop"
        assert db.meta.is_new_user is False

    def test_reset_keeps_currency(self, db, laptops, audit_logger):
        """Test clearing data keeps the chosen currency."""
        db.set_currency("$")
        db.reset()
        assert db.snapshot.collections == []
        assert db.meta.user_currency == "$"
        assert db.meta.is_new_user is True
        assert len(audit_logger.events_of_type(AuditEventType.DATA_CLEARED)) == 1

    def test_load_seed(self, db):
        """Test loading sample data."""
        db.load_seed()
        assert [c.name for c in db.snapshot.collections] == ["Laptops", "Spare Parts"]
        assert len(db.snapshot.ledger) == 2

    def test_copy_snapshot_is_detached(self, db, laptops):
        """Test that a copied snapshot does not follow later changes."""
        copy = db.copy_snapshot()
        db.collections.add_item(laptops.id, {"name": "ThinkPad"})
        assert copy.collections[0].data == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
