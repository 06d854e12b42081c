"""
Tests for typed field values and display formatting

Test strategy:
1. format_value output for every field type
2. Fallbacks for values that do not fit their field type
3. The FieldValue union and raw-value helpers
"""

import pytest
from datetime import date, datetime, timezone
from decimal import Decimal

from pydantic import TypeAdapter

from ledgerbook.models.inventory import SchemaFieldType
from ledgerbook.models.values import (
    INVALID_DATE,
    NOT_AVAILABLE,
    BooleanValue,
    CurrencyValue,
    DateValue,
    FieldValue,
    FieldValueError,
    ImageValue,
    NumberValue,
    TextValue,
    format_value,
    is_empty_value,
    parse_date,
    render_field_value,
    stringify_value,
    to_field_value,
)


class TestFormatValue:
    """Tests for format_value."""

    @pytest.mark.parametrize("field_type", list(SchemaFieldType))
    def test_none_is_not_available(self, field_type):
        """Test that None renders as N/A for every type."""
        assert format_value(None, field_type) == NOT_AVAILABLE

    def test_boolean_yes_no(self):
        """Test boolean values render as Yes/No."""
        assert format_value(True, SchemaFieldType.BOOLEAN) == "Yes"
        assert format_value(False, SchemaFieldType.BOOLEAN) == "No"

    def test_currency_prefixes_symbol(self):
        """Test currency values get the currency symbol."""
        assert format_value(1500, SchemaFieldType.CURRENCY, currency_symbol="₹") == "₹1500"
        assert format_value("12.50", SchemaFieldType.CURRENCY, currency_symbol="$") == "$12.50"

    def test_currency_integral_float(self):
        """Test that an integral float has no trailing .0."""
        assert format_value(32000.0, SchemaFieldType.CURRENCY, currency_symbol="₹") == "₹32000"

    def test_currency_non_numeric_falls_back(self):
        """Test non-numeric currency values keep their text."""
        assert format_value("abc", SchemaFieldType.CURRENCY, currency_symbol="$") == "$abc"

    def test_date_uses_format(self):
        """Test ISO date strings render with the given format."""
        result = format_value(
            "2024-01-15T00:00:00.000Z",
            SchemaFieldType.DATE,
            date_format="%Y-%m-%d",
        )
        assert result == "2024-01-15"

    def test_date_from_datetime(self):
        """Test datetime values render with the given format."""
        value = datetime(2024, 3, 9, 12, 0)
        assert format_value(value, SchemaFieldType.DATE, date_format="%d/%m/%Y") == "09/03/2024"

    def test_unparseable_date(self):
        """Test that a non-date renders as Invalid Date."""
        assert format_value("next tuesday", SchemaFieldType.DATE) == INVALID_DATE

    def test_number_canonical_form(self):
        """Test numeric values render without a trailing .0."""
        assert format_value(42.0, SchemaFieldType.NUMBER) == "42"
        assert format_value(3.5, SchemaFieldType.NUMBER) == "3.5"

    @pytest.mark.parametrize("text", ["42", "007", "3.50", "1e3", "-0"])
    def test_number_text_shown_as_entered(self, text):
        """Test a number typed as text keeps its exact spelling."""
        assert format_value(text, SchemaFieldType.NUMBER) == text

    def test_large_integer_keeps_precision(self):
        """Test integers beyond float precision render exactly."""
        big = 2 ** 60 + 1
        assert format_value(big, SchemaFieldType.NUMBER) == str(big)
        assert format_value(str(big), SchemaFieldType.NUMBER) == str(big)
        assert to_field_value(SchemaFieldType.NUMBER, str(big)).value == big

    def test_currency_text_shown_as_entered(self):
        """Test a currency amount typed as text keeps its exact spelling."""
        assert format_value("1e3", SchemaFieldType.CURRENCY, currency_symbol="$") == "$1e3"
        assert format_value("0012.50", SchemaFieldType.CURRENCY, currency_symbol="₹") == "₹0012.50"

    def test_number_non_numeric_falls_back(self):
        """Test non-numeric number values keep their text."""
        assert format_value("many", SchemaFieldType.NUMBER) == "many"

    def test_text_select_image_are_plain(self):
        """Test text, select and image render their string form."""
        assert format_value(12, SchemaFieldType.TEXT) == "12"
        assert format_value("Good", SchemaFieldType.SELECT) == "Good"
        uri = "data:image/png;base64,iVBORw0KGgo="
        assert format_value(uri, SchemaFieldType.IMAGE) == uri

    def test_accepts_type_string(self):
        """Test that the field type may be given as its string value."""
        assert format_value(True, "boolean") == "Yes"


class TestFieldValueUnion:
    """Tests for the typed FieldValue variants."""

    def test_to_field_value_variants(self):
        """Test each field type maps to its variant."""
        assert isinstance(to_field_value(SchemaFieldType.TEXT, "x"), TextValue)
        assert isinstance(to_field_value(SchemaFieldType.NUMBER, "1"), NumberValue)
        assert isinstance(to_field_value(SchemaFieldType.CURRENCY, 10), CurrencyValue)
        assert isinstance(to_field_value(SchemaFieldType.DATE, "2024-02-01"), DateValue)
        assert isinstance(to_field_value(SchemaFieldType.BOOLEAN, 1), BooleanValue)
        assert isinstance(to_field_value(SchemaFieldType.IMAGE, "a.png"), ImageValue)

    def test_number_text_reads_as_int_or_float(self):
        """Test integral text reads as int and other text as float."""
        assert to_field_value(SchemaFieldType.NUMBER, "007").value == 7
        assert isinstance(to_field_value(SchemaFieldType.NUMBER, "007").value, int)
        assert to_field_value(SchemaFieldType.NUMBER, "3.50").value == 3.5

    def test_currency_is_decimal(self):
        """Test currency values are read as Decimal."""
        value = to_field_value(SchemaFieldType.CURRENCY, "19.99")
        assert value.value == Decimal("19.99")

    def test_none_stays_none(self):
        """Test that None is not wrapped."""
        assert to_field_value(SchemaFieldType.TEXT, None) is None

    def test_boolean_is_not_a_number(self):
        """Test that booleans are rejected for number fields."""
        with pytest.raises(FieldValueError, match="not a valid number"):
            to_field_value(SchemaFieldType.NUMBER, True)

    def test_bad_date_raises(self):
        """Test that a non-date raises FieldValueError."""
        with pytest.raises(FieldValueError):
            to_field_value(SchemaFieldType.DATE, "soon")

    def test_discriminated_by_kind(self):
        """Test the union picks its variant from the kind tag."""
        adapter = TypeAdapter(FieldValue)
        value = adapter.validate_python({"kind": "boolean", "value": True})
        assert isinstance(value, BooleanValue)
        image = adapter.validate_python({"kind": "image", "uri": "x.png"})
        assert isinstance(image, ImageValue)

    def test_render_field_value(self):
        """Test rendering of typed values."""
        assert render_field_value(BooleanValue(value=False)) == "No"
        assert render_field_value(CurrencyValue(value=Decimal("5")), currency_symbol="€") == "€5"
        assert render_field_value(NumberValue(value=7.0)) == "7"


class TestRawValueHelpers:
    """Tests for emptiness, stringify and date parsing."""

    def test_empty_values(self):
        """Test that only None and "" count as empty."""
        assert is_empty_value(None) is True
        assert is_empty_value("") is True
        assert is_empty_value(0) is False
        assert is_empty_value(False) is False

    def test_stringify(self):
        """Test the plain string form of stored values."""
        assert stringify_value(None) == ""
        assert stringify_value(True) == "true"
        assert stringify_value(5.0) == "5"
        assert stringify_value(2.25) == "2.25"
        assert stringify_value(["a", "b"]) == "a,b"

    def test_parse_date_inputs(self):
        """Test the accepted date representations."""
        assert parse_date(date(2024, 5, 1)) == datetime(2024, 5, 1)
        assert parse_date(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)
        assert parse_date("2024-05-01T10:00:00Z").tzinfo is not None
        assert parse_date("") is None
        assert parse_date(True) is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
