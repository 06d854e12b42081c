"""
Typed Field Values

Item values are stored exactly as entered (strings, numbers, booleans).
This module gives them a typed view: each schema field type maps to one
variant of the FieldValue union, and formatting dispatches over those
variants instead of inspecting raw Python types.
"""

from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field

from ledgerbook.models.inventory import SchemaFieldType


NOT_AVAILABLE = "N/A"
INVALID_DATE = "Invalid Date"


class FieldValueError(ValueError):
    """A raw value cannot be read as the type its field declares."""

    def __init__(self, field_type: SchemaFieldType, raw: Any):
        self.field_type = field_type
        self.raw = raw
        super().__init__(f"{raw!r} is not a valid {field_type.value} value")


# =============================================================================
# FIELD VALUE VARIANTS
# =============================================================================

class TextValue(BaseModel):
    kind: Literal["text"] = "text"
    value: str


class NumberValue(BaseModel):
    kind: Literal["number"] = "number"
    value: Union[int, float]


class CurrencyValue(BaseModel):
    kind: Literal["currency"] = "currency"
    value: Decimal


class DateValue(BaseModel):
    kind: Literal["date"] = "date"
    value: datetime


class BooleanValue(BaseModel):
    kind: Literal["boolean"] = "boolean"
    value: bool


class SelectValue(BaseModel):
    kind: Literal["select"] = "select"
    value: str


class ImageValue(BaseModel):
    kind: Literal["image"] = "image"
    uri: str


FieldValue = Annotated[
    Union[
        TextValue,
        NumberValue,
        CurrencyValue,
        DateValue,
        BooleanValue,
        SelectValue,
        ImageValue,
    ],
    Field(discriminator="kind"),
]


# =============================================================================
# RAW VALUE HELPERS
# =============================================================================

def is_empty_value(raw: Any) -> bool:
    """Missing, None and "" count as empty; False and 0 do not."""
    return raw is None or (isinstance(raw, str) and raw == "")


def stringify_value(raw: Any) -> str:
    """
    Plain string form of a stored value.

    Integral floats drop their trailing ".0" and booleans render in
    lowercase, matching how values were typed into the document.
    """
    if raw is None:
        return ""
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, float) and raw.is_integer():
        return str(int(raw))
    if isinstance(raw, (list, tuple)):
        return ",".join(stringify_value(part) for part in raw)
    return str(raw)


def parse_date(raw: Any) -> Optional[datetime]:
    """
    Read a stored date.

    Accepts datetimes, dates, ISO-8601 strings (with a trailing Z) and
    epoch milliseconds. Returns None when the value is not a date.
    """
    if isinstance(raw, datetime):
        return raw
    if isinstance(raw, date):
        return datetime(raw.year, raw.month, raw.day)
    if isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        try:
            return datetime.fromtimestamp(raw / 1000, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(raw, str) and raw.strip():
        text = raw.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            return datetime.fromisoformat(text)
        except ValueError:
            return None
    return None


def to_field_value(field_type: SchemaFieldType, raw: Any) -> Optional[FieldValue]:
    """
    Convert a raw stored value to its typed variant.

    Returns None for None. Raises FieldValueError when the value does
    not fit the field type.
    """
    field_type = SchemaFieldType(field_type)
    if raw is None:
        return None

    if field_type is SchemaFieldType.TEXT:
        return TextValue(value=stringify_value(raw))

    if field_type is SchemaFieldType.NUMBER:
        if isinstance(raw, bool):
            raise FieldValueError(field_type, raw)
        if isinstance(raw, int):
            return NumberValue(value=raw)
        if isinstance(raw, str):
            try:
                return NumberValue(value=int(raw.strip()))
            except ValueError:
                pass
        try:
            return NumberValue(value=float(raw))
        except (TypeError, ValueError):
            raise FieldValueError(field_type, raw)

    if field_type is SchemaFieldType.CURRENCY:
        if isinstance(raw, bool):
            raise FieldValueError(field_type, raw)
        try:
            amount = Decimal(stringify_value(raw).strip())
        except InvalidOperation:
            raise FieldValueError(field_type, raw)
        if not amount.is_finite():
            raise FieldValueError(field_type, raw)
        return CurrencyValue(value=amount)

    if field_type is SchemaFieldType.DATE:
        parsed = parse_date(raw)
        if parsed is None:
            raise FieldValueError(field_type, raw)
        return DateValue(value=parsed)

    if field_type is SchemaFieldType.BOOLEAN:
        return BooleanValue(value=bool(raw))

    if field_type is SchemaFieldType.SELECT:
        return SelectValue(value=stringify_value(raw))

    return ImageValue(uri=stringify_value(raw))


# =============================================================================
# FORMATTING
# =============================================================================

def render_field_value(
    value: FieldValue,
    currency_symbol: str = "",
    date_format: str = "%x",
) -> str:
    """Display string for a typed value."""
    if isinstance(value, BooleanValue):
        return "Yes" if value.value else "No"
    if isinstance(value, DateValue):
        return value.value.strftime(date_format)
    if isinstance(value, CurrencyValue):
        return f"{currency_symbol}{value.value}"
    if isinstance(value, NumberValue):
        return stringify_value(value.value)
    if isinstance(value, ImageValue):
        return value.uri
    return value.value


def format_value(
    value: Any,
    field_type: SchemaFieldType,
    currency_symbol: str = "",
    date_format: str = "%x",
) -> str:
    """
    Canonical display string for a stored value.

    None renders as "N/A". Strings in number and currency fields are shown as
    entered. Values that do not fit their field type fall back to their
    plain string form ("Invalid Date" for dates).
    """
    field_type = SchemaFieldType(field_type)
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, str):
        if field_type is SchemaFieldType.NUMBER:
            return value
        if field_type is SchemaFieldType.CURRENCY:
            return f"{currency_symbol}{value}"

    try:
        typed = to_field_value(field_type, value)
    except FieldValueError:
        if field_type is SchemaFieldType.DATE:
            return INVALID_DATE
        text = stringify_value(value)
        if field_type is SchemaFieldType.CURRENCY:
            return f"{currency_symbol}{text}"
        return text

    return render_field_value(typed, currency_symbol, date_format)
