"""
Schema Builder Operations

Pure functions over an ordered list of SchemaField. Every function
returns a new list (or field) and leaves its input untouched, so a
half-edited schema never leaks into a stored collection.

The field at index 0 is the title field: it can be renamed and retyped
but never removed.
"""

import re
import time
from typing import Any, Optional

from ledgerbook.models.inventory import SchemaField, SchemaFieldType
from ledgerbook.store.errors import ValidationError


PRIMARY_FIELD_INDEX = 0
NEW_FIELD_LABEL = "New Attribute"

_WHITESPACE = re.compile(r"\s+")


def make_field_key(label: str) -> str:
    """Derive a field key from its label: lowercase, whitespace runs -> "_"."""
    return _WHITESPACE.sub("_", label.lower())


def default_schema() -> list[SchemaField]:
    """Schema a new collection starts with: one required text title field."""
    return [
        SchemaField(
            key="name",
            label="Item Name",
            type=SchemaFieldType.TEXT,
            required=True,
        )
    ]


def _generate_field_key(schema: list[SchemaField]) -> str:
    existing = {field.key for field in schema}
    key = f"field_{int(time.time() * 1000)}"
    suffix = 1
    candidate = key
    while candidate in existing:
        candidate = f"{key}_{suffix}"
        suffix += 1
    return candidate


def add_field(schema: list[SchemaField]) -> list[SchemaField]:
    """Append an optional text field with a generated unique key."""
    field = SchemaField(
        key=_generate_field_key(schema),
        label=NEW_FIELD_LABEL,
        type=SchemaFieldType.TEXT,
        required=False,
    )
    return [*schema, field]


def remove_field(schema: list[SchemaField], index: int) -> list[SchemaField]:
    """
    Remove the field at `index`.

    Index 0 (the title field) and out-of-range indexes are no-ops.
    Item values under the removed key are not touched.
    """
    if index == PRIMARY_FIELD_INDEX or index < 0 or index >= len(schema):
        return list(schema)
    return [field for i, field in enumerate(schema) if i != index]


def rename_field(schema: list[SchemaField], index: int, label: str) -> list[SchemaField]:
    """
    Change a field's label and regenerate its key from it.

    Raises ValidationError if the label is blank or the new key collides
    with a sibling field.
    """
    _check_index(schema, index)
    if not label.strip():
        raise ValidationError("Field label cannot be empty", [schema[index].key])

    key = make_field_key(label.strip())
    for i, field in enumerate(schema):
        if i != index and field.key == key:
            raise ValidationError(f"A field named '{label.strip()}' already exists", [key])

    updated = schema[index].model_copy(update={"label": label.strip(), "key": key})
    return _replace_at(schema, index, updated)


def update_field(
    schema: list[SchemaField],
    index: int,
    field_type: Optional[SchemaFieldType] = None,
    required: Optional[bool] = None,
    default_value: Any = None,
) -> list[SchemaField]:
    """Change a field's type, required flag or default value."""
    _check_index(schema, index)
    changes: dict[str, Any] = {}
    if field_type is not None:
        field_type = SchemaFieldType(field_type)
        changes["type"] = field_type
        if field_type is SchemaFieldType.SELECT and schema[index].options is None:
            changes["options"] = []
    if required is not None:
        changes["required"] = required
    if default_value is not None:
        changes["default_value"] = default_value
    return _replace_at(schema, index, schema[index].model_copy(update=changes))


def add_select_option(field: SchemaField, option: str) -> SchemaField:
    """
    Append a dropdown option.

    Blank options are ignored. Duplicates raise ValidationError.
    """
    option = option.strip()
    if not option:
        return field
    options = list(field.options or [])
    if option in options:
        raise ValidationError(f"Option '{option}' already exists", [field.key])
    return field.model_copy(update={"options": [*options, option]})


def remove_select_option(field: SchemaField, option: str) -> SchemaField:
    options = [o for o in (field.options or []) if o != option]
    return field.model_copy(update={"options": options})


def validate_schema(schema: list[SchemaField]) -> None:
    """
    Check a schema before it is stored.

    Raises ValidationError on an empty schema, duplicate keys, or
    duplicate select options.
    """
    if not schema:
        raise ValidationError("A collection needs at least one field")

    seen: set[str] = set()
    duplicates = []
    for field in schema:
        if field.key in seen:
            duplicates.append(field.key)
        seen.add(field.key)
    if duplicates:
        raise ValidationError("Field names must be unique", duplicates)

    for field in schema:
        options = field.options or []
        if len(options) != len(set(options)):
            raise ValidationError(
                f"Field '{field.label}' has duplicate options",
                [field.key],
            )


def _check_index(schema: list[SchemaField], index: int) -> None:
    if index < 0 or index >= len(schema):
        raise IndexError(f"No field at index {index}")


def _replace_at(
    schema: list[SchemaField],
    index: int,
    field: SchemaField,
) -> list[SchemaField]:
    return [field if i == index else existing for i, existing in enumerate(schema)]
