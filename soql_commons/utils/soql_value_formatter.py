import re
from typing import List, Optional, Union

from soql_commons.constants.app_constants import AppConstants
from soql_commons.model.condition_model import Operator
from soql_commons.model.field_metadata_model import FieldMetadata, FieldType
from soql_commons.utils.datetime_utils import to_soql_datetime

"""
================================================================================
SOQL Value Formatter
================================================================================
Turns the raw text a user typed for a condition into a literal that can be
placed on the right-hand side of `<field> <operator> <literal>`.

    formatter = SoqlValueFormatter()
    formatter.format("Technology", industry_meta, "=")     # 'Technology'
    formatter.format("100", amount_meta, ">")              # 100
    formatter.format("acme", name_meta, "LIKE")            # '%acme%'
    formatter.format("a, b,c", None, "IN")                 # ('a','b','c')
    formatter.format("2024-01-15T10:30", created_meta, ">")  # 2024-01-15 10:30:00

Rules, first match wins:
    1. date / datetime field      -> unquoted (datetime normalized)
    2. LIKE                       -> '%value%'
    3. IN / NOT IN                -> ('a','b',...) each part trimmed and quoted
    4. number field               -> unquoted as typed
    5. boolean field              -> true / false
    6. unknown field              -> unquoted when numeric or true/false/null,
                                     quoted otherwise
    7. anything else              -> quoted text

Embedded single quotes are passed through as typed unless the formatter is
created with escape_quotes=True.
================================================================================
"""

NUMERIC_PATTERN = re.compile(r"^\s*[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?\s*$")
UNQUOTED_TOKENS = (AppConstants.TRUE, AppConstants.FALSE, AppConstants.NULL)


def is_numeric(raw: str) -> bool:
    return bool(NUMERIC_PATTERN.match(raw))


class SoqlValueFormatter:
    """
    Format raw condition values into query literals.

    :param metadata_aware: when False field metadata is ignored and every value
        goes through the untyped heuristic
    :param escape_quotes: backslash-escape single quotes and backslashes inside
        quoted text literals
    """

    def __init__(self, metadata_aware: bool = True, escape_quotes: bool = False):
        self.metadata_aware = metadata_aware
        self.escape_quotes = escape_quotes

    def _quote(self, raw: str) -> str:
        if self.escape_quotes:
            raw = raw.replace('\\', '\\\\').replace("'", "\\'")
        return f"'{raw}'"

    def _format_multi_values(self, raw: str) -> str:
        parts: List[str] = [self._quote(part.strip()) for part in raw.split(',')]
        return '(' + ','.join(parts) + ')'

    def format(self, raw: str, field_meta: Optional[FieldMetadata],
               operator: Union[Operator, str] = Operator.EQUALS) -> str:
        op = Operator(operator)
        meta = field_meta if self.metadata_aware else None

        if meta is not None and meta.is_date:
            if meta.field_type == FieldType.DATETIME:
                return to_soql_datetime(raw)
            return raw

        if op == Operator.LIKE:
            return self._quote(f"%{raw}%")

        if op in (Operator.IN, Operator.NOT_IN):
            return self._format_multi_values(raw)

        if meta is None:
            # untyped fallback
            if is_numeric(raw) or raw in UNQUOTED_TOKENS:
                return raw
            return self._quote(raw)

        if meta.is_number:
            return raw

        if meta.is_boolean:
            return AppConstants.TRUE if raw.lower() == AppConstants.TRUE else AppConstants.FALSE

        return self._quote(raw)


_default_formatter = SoqlValueFormatter()


def format_value(raw: str, field_meta: Optional[FieldMetadata],
                 operator: Union[Operator, str] = Operator.EQUALS) -> str:
    """Module level shortcut using the metadata-aware formatter"""
    return _default_formatter.format(raw, field_meta, operator)
