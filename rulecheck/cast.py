import re
import typing
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal

import dateutil.parser  # type: ignore[import-untyped]

_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
_INTEGER_RE = re.compile(r"^[+-]?(0|[1-9]\d*)$")

# Date-format tokens (as used in rule strings like "date_format:Y-m-d")
# mapped to strptime directives.
_FORMAT_TOKENS = {
    "d": "%d",
    "j": "%d",
    "D": "%a",
    "l": "%A",
    "m": "%m",
    "n": "%m",
    "M": "%b",
    "F": "%B",
    "Y": "%Y",
    "y": "%y",
    "H": "%H",
    "G": "%H",
    "h": "%I",
    "g": "%I",
    "i": "%M",
    "s": "%S",
    "u": "%f",
    "a": "%p",
    "A": "%p",
    "O": "%z",
    "P": "%z",
    "T": "%Z",
    "e": "%Z",
}

_RELATIVE_DAYS = {"today": 0, "tomorrow": 1, "yesterday": -1}


def is_numeric(value: typing.Any) -> bool:
    """Check if a value is a number or a numeric string.

    Booleans are not numeric.

    Args:
        value: The value to check

    Returns:
        True if value is numeric
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float, Decimal)):
        return True
    if isinstance(value, str):
        return _NUMERIC_RE.match(value) is not None
    return False


def is_integer(value: typing.Any) -> bool:
    """Check if a value is an integer or an integer string.

    Args:
        value: The value to check

    Returns:
        True for ints, integral floats and strings such as ``"-12"``
    """
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    if isinstance(value, float):
        return value.is_integer()
    if isinstance(value, str):
        return _INTEGER_RE.match(value.strip()) is not None
    return False


def to_number(value: typing.Any) -> int | float:
    """Cast a numeric value or string to a number.

    Args:
        value: The value to cast

    Returns:
        int when the value is integral, float otherwise

    Raises:
        ValueError: If the value is not numeric
    """
    if not is_numeric(value):
        raise ValueError(f"{value!r} is not numeric")
    number = float(value)
    if number.is_integer() and not isinstance(value, float):
        return int(number)
    return number


def stringify(value: typing.Any) -> str:
    """Render a scalar the way it is compared against rule parameters.

    Args:
        value: The value to render

    Returns:
        String form: ``True`` -> ``"1"``, ``False`` and ``None`` -> ``""``,
        integral floats without a fractional part
    """
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_date(value: typing.Any) -> datetime | None:
    """Parse a free-form date value.

    Args:
        value: datetime, date, or a string such as ``"2024-01-15"`` or ``"tomorrow"``

    Returns:
        The parsed datetime, or None if the value is not a date
    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip().lower()
    if text == "now":
        return datetime.now()
    if text in _RELATIVE_DAYS:
        midnight = datetime.combine(date.today(), time())
        return midnight + timedelta(days=_RELATIVE_DAYS[text])

    try:
        return dateutil.parser.parse(value)
    except (ValueError, OverflowError, dateutil.parser.ParserError):
        return None


def to_strptime_format(fmt: str) -> str:
    """Translate a date-format token string into a strptime format.

    Formats already containing ``%`` directives are returned unchanged.
    A backslash escapes the next character.

    Args:
        fmt: Format such as ``"Y-m-d H:i"``

    Returns:
        Equivalent strptime format
    """
    if "%" in fmt:
        return fmt

    out: list[str] = []
    escaped = False
    for char in fmt:
        if escaped:
            out.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        else:
            out.append(_FORMAT_TOKENS.get(char, char))
    return "".join(out)


def parse_date_with_format(value: typing.Any, fmt: str) -> datetime | None:
    """Parse a date that must match a format exactly.

    Args:
        value: String to parse (datetime values pass through)
        fmt: Date-format token string or strptime format

    Returns:
        The parsed datetime, or None if the value does not match
    """
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None
    try:
        return datetime.strptime(value, to_strptime_format(fmt))
    except ValueError:
        return None


def comparable(first: datetime, second: datetime) -> tuple[datetime, datetime]:
    """Make two datetimes comparable when only one carries a timezone.

    Aware values are converted to UTC and made naive.
    """
    if (first.tzinfo is None) == (second.tzinfo is None):
        return first, second

    def naive(moment: datetime) -> datetime:
        if moment.tzinfo is None:
            return moment
        return moment.astimezone(timezone.utc).replace(tzinfo=None)

    return naive(first), naive(second)
