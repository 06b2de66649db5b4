import re

# 2024-01-15T10:30, 2024-01-15 10:30:45
DATETIME_TOKEN_PATTERN = re.compile(r"^(\d{4}-\d{2}-\d{2})[T ](\d{1,2}:\d{2})(:\d{2})?(.*)$")


def to_soql_datetime(value: str) -> str:
    """
    Convert a local datetime input value into the literal form used in queries.

    The date/time separator becomes a single space and seconds are appended
    when the input only carries hours and minutes.
    Example: "2024-01-15T10:30" -> "2024-01-15 10:30:00"

    Values without a combined date+time token are returned unchanged.
    """
    match = DATETIME_TOKEN_PATTERN.match(value.strip())
    if not match:
        return value
    date_part, hour_minute, seconds, rest = match.groups()
    return f"{date_part} {hour_minute}{seconds or ':00'}{rest}"
