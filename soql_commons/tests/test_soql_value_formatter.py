import pytest

from soql_commons.model.condition_model import Operator
from soql_commons.model.field_metadata_model import FieldMetadata, FieldType
from soql_commons.utils.datetime_utils import to_soql_datetime
from soql_commons.utils.soql_value_formatter import SoqlValueFormatter, format_value, is_numeric


@pytest.fixture
def fields():
    return {
        'Name': FieldMetadata(identifier='Name', field_type=FieldType.TEXT, is_indexed=True),
        'Industry': FieldMetadata(identifier='Industry', field_type=FieldType.PICKLIST,
                                  picklist_values=['Technology', 'Banking']),
        'AnnualRevenue': FieldMetadata(identifier='AnnualRevenue', field_type=FieldType.NUMBER),
        'IsDeleted': FieldMetadata(identifier='IsDeleted', field_type=FieldType.BOOLEAN),
        'CloseDate': FieldMetadata(identifier='CloseDate', field_type=FieldType.DATE),
        'CreatedDate': FieldMetadata(identifier='CreatedDate', field_type=FieldType.DATETIME, is_indexed=True),
    }


@pytest.fixture
def formatter():
    return SoqlValueFormatter()

# ----------------------------
# Typed fields
# ----------------------------

def test_text_field_is_quoted(formatter, fields):
    assert formatter.format("Acme", fields['Name'], "=") == "'Acme'"


@pytest.mark.parametrize("raw", ["1", "Acme Corp", "12abc", "true"])
def test_text_field_always_quoted(formatter, fields, raw):
    assert formatter.format(raw, fields['Name'], Operator.EQUALS) == f"'{raw}'"


def test_picklist_field_is_quoted(formatter, fields):
    assert formatter.format("Technology", fields['Industry'], "!=") == "'Technology'"


@pytest.mark.parametrize("raw", ["100", "2500.50", "-3", "abc"])
def test_number_field_never_quoted(formatter, fields, raw):
    assert formatter.format(raw, fields['AnnualRevenue'], ">") == raw


def test_boolean_field(formatter, fields):
    assert formatter.format("TRUE", fields['IsDeleted'], "=") == "true"
    assert formatter.format("true", fields['IsDeleted'], "=") == "true"
    assert formatter.format("no", fields['IsDeleted'], "=") == "false"


def test_date_field_unquoted(formatter, fields):
    assert formatter.format("2024-01-15", fields['CloseDate'], ">=") == "2024-01-15"


def test_datetime_field_normalized(formatter, fields):
    assert formatter.format("2024-01-15T10:30", fields['CreatedDate'], ">") == "2024-01-15 10:30:00"


def test_datetime_field_keeps_seconds(formatter, fields):
    assert formatter.format("2024-01-15T10:30:45", fields['CreatedDate'], "<") == "2024-01-15 10:30:45"


def test_date_field_wins_over_like(formatter, fields):
    assert formatter.format("2024-01-15", fields['CloseDate'], "LIKE") == "2024-01-15"

# ----------------------------
# Operator specific encoding
# ----------------------------

@pytest.mark.parametrize("field", [None, 'Name', 'AnnualRevenue', 'Industry'])
def test_like_wraps_in_wildcards(formatter, fields, field):
    meta = fields[field] if field else None
    assert formatter.format("acme", meta, "LIKE") == "'%acme%'"


@pytest.mark.parametrize("operator", ["IN", "NOT IN"])
def test_in_splits_trims_and_quotes(formatter, fields, operator):
    assert formatter.format("a, b,c", fields['Name'], operator) == "('a','b','c')"
    assert formatter.format("a, b,c", None, operator) == "('a','b','c')"


def test_in_on_number_field_is_still_quoted(formatter, fields):
    assert formatter.format("1,2", fields['AnnualRevenue'], "IN") == "('1','2')"

# ----------------------------
# Untyped fallback
# ----------------------------

@pytest.mark.parametrize("raw,expected", [
    ("42", "42"),
    ("3.14", "3.14"),
    ("-7", "-7"),
    ("true", "true"),
    ("false", "false"),
    ("null", "null"),
    ("Acme", "'Acme'"),
    ("TRUE", "'TRUE'"),
])
def test_unknown_field_heuristic(formatter, raw, expected):
    assert formatter.format(raw, None, "=") == expected


def test_fallback_mode_ignores_metadata(fields):
    formatter = SoqlValueFormatter(metadata_aware=False)
    assert formatter.format("2024-01-15", fields['CloseDate'], "=") == "'2024-01-15'"
    assert formatter.format("100", fields['Name'], "=") == "100"


def test_quotes_are_not_escaped_by_default(formatter, fields):
    assert formatter.format("O'Brien", fields['Name'], "=") == "'O'Brien'"


def test_quotes_escaped_when_enabled(fields):
    formatter = SoqlValueFormatter(escape_quotes=True)
    assert formatter.format("O'Brien", fields['Name'], "=") == "'O\\'Brien'"
    assert formatter.format("O'B, x", None, "IN") == "('O\\'B','x')"


def test_unsupported_operator(formatter):
    with pytest.raises(ValueError):
        formatter.format("x", None, "BETWEEN")


def test_module_shortcut(fields):
    assert format_value("Technology", fields['Industry'], "=") == "'Technology'"


def test_is_numeric():
    assert is_numeric("10")
    assert is_numeric(" 1e5 ")
    assert not is_numeric("")
    assert not is_numeric("1,000")


def test_to_soql_datetime_passthrough():
    assert to_soql_datetime("2024-01-15") == "2024-01-15"
    assert to_soql_datetime("2024-01-15 08:05") == "2024-01-15 08:05:00"
