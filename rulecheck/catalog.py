"""Built-in rule handlers.

Every handler shares one signature::

    handler(attribute, value, parameters, validator) -> bool

and returns True when the value passes. Handlers raise
MissingParameterError when a rule is declared with too few parameters.
"""

import ipaddress
import re
import socket
import typing
import unicodedata
import urllib.parse
from datetime import date, datetime

import dateutil.tz  # type: ignore[import-untyped]
import email_validator
import pydantic

from . import attributes as _attributes
from . import cast as _cast
from . import errors as _errors
from . import record as _record

if typing.TYPE_CHECKING:
    from .validate import Validator

RuleHandler = typing.Callable[
    [str, typing.Any, typing.Sequence[str], "Validator"], bool
]

# Rules that run even when the attribute is absent.
IMPLICIT_RULES = frozenset(
    {
        "Required",
        "Filled",
        "RequiredWith",
        "RequiredWithAll",
        "RequiredWithout",
        "RequiredWithoutAll",
        "RequiredIf",
        "Accepted",
    }
)

SIZE_RULES = frozenset({"Size", "Between", "Min", "Max"})

NUMERIC_RULES = frozenset({"Numeric", "Integer"})

IMAGE_EXTENSIONS = ("jpeg", "jpg", "png", "gif", "bmp")

_ACCEPTED_STRINGS = frozenset({"yes", "on", "1", "true"})

_URL_ADAPTER = pydantic.TypeAdapter(pydantic.AnyUrl)

_DELIMITER_PAIRS = {"(": ")", "{": "}", "[": "]", "<": ">"}

_REGEX_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}


def require_parameter_count(
    count: int, parameters: typing.Sequence[str], rule: str
) -> None:
    """Raise MissingParameterError if a rule has fewer than count parameters."""
    if len(parameters) < count:
        raise _errors.MissingParameterError(rule, count)


# ---------------------------------------------------------------------------
# Presence
# ---------------------------------------------------------------------------


def validate_sometimes(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """Marker rule; only gates the other rules of the attribute."""
    return True


def validate_required(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """Fail for None, blank strings, empty collections and empty uploads."""
    if value is None:
        return False
    if isinstance(value, str) and value.strip() == "":
        return False
    if isinstance(value, (list, tuple, dict, set, frozenset)) and len(value) < 1:
        return False
    if _record.is_file(value):
        return value.tmp_name != ""
    return True


def _is_present(validator: "Validator", attribute: str) -> bool:
    return validate_required(attribute, validator.get_value(attribute), (), validator)


def validate_filled(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """An attribute that is present must not be empty."""
    if _attributes.has_key(validator.get_data(), attribute) or _attributes.has_key(
        validator.get_files(), attribute
    ):
        return validate_required(attribute, value, parameters, validator)
    return True


def _any_failing_required(validator: "Validator", others: typing.Sequence[str]) -> bool:
    return any(not _is_present(validator, key) for key in others)


def _all_failing_required(validator: "Validator", others: typing.Sequence[str]) -> bool:
    return all(not _is_present(validator, key) for key in others)


def validate_required_with(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """Required when any of the other attributes is present."""
    if not _all_failing_required(validator, parameters):
        return validate_required(attribute, value, parameters, validator)
    return True


def validate_required_with_all(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """Required when all of the other attributes are present."""
    if not _any_failing_required(validator, parameters):
        return validate_required(attribute, value, parameters, validator)
    return True


def validate_required_without(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """Required when any of the other attributes is missing."""
    if _any_failing_required(validator, parameters):
        return validate_required(attribute, value, parameters, validator)
    return True


def validate_required_without_all(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """Required when all of the other attributes are missing."""
    if _all_failing_required(validator, parameters):
        return validate_required(attribute, value, parameters, validator)
    return True


def validate_required_if(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """Required when another attribute holds one of the given values."""
    require_parameter_count(2, parameters, "required_if")

    other = _attributes.get_value(validator.get_data(), parameters[0])
    if _loose_in(other, parameters[1:]):
        return validate_required(attribute, value, parameters, validator)
    return True


def _loose_in(value: typing.Any, candidates: typing.Sequence[str]) -> bool:
    if isinstance(value, bool):
        spelled = "true" if value else "false"
        return _cast.stringify(value) in candidates or spelled in candidates
    if isinstance(value, (list, tuple, dict)):
        return False
    return _cast.stringify(value) in candidates


def validate_confirmed(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """Same as ``same:{attribute}_confirmation``."""
    return validate_same(attribute, value, [f"{attribute}_confirmation"], validator)


def validate_same(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    require_parameter_count(1, parameters, "same")

    other = _attributes.get_value(validator.get_data(), parameters[0])
    return other is not None and _identical(value, other)


def validate_different(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    require_parameter_count(1, parameters, "different")

    other = _attributes.get_value(validator.get_data(), parameters[0])
    return other is not None and not _identical(value, other)


def _identical(first: typing.Any, second: typing.Any) -> bool:
    # True and 1, or "1" and 1, are not the same value.
    return type(first) is type(second) and first == second


def validate_accepted(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """Accepts ``"yes"``, ``"on"``, ``"1"``, ``"true"``, ``1`` and ``True``."""
    if not validate_required(attribute, value, parameters, validator):
        return False
    if value is True:
        return True
    if type(value) is int:
        return value == 1
    return isinstance(value, str) and value in _ACCEPTED_STRINGS


def validate_boolean(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """Accepts ``True``, ``False``, ``0``, ``1``, ``"0"`` and ``"1"``."""
    if isinstance(value, bool):
        return True
    if type(value) is int:
        return value in (0, 1)
    return isinstance(value, str) and value in ("0", "1")


# ---------------------------------------------------------------------------
# Shape
# ---------------------------------------------------------------------------


def validate_array(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    return isinstance(value, (list, tuple, dict))


def validate_numeric(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    return _cast.is_numeric(value)


def validate_integer(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    return _cast.is_integer(value)


def validate_digits(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """Only digits, exactly as many as the parameter says."""
    require_parameter_count(1, parameters, "digits")
    length = _bound(parameters[0], "digits")

    text = _cast.stringify(value)
    return (
        text.isdigit()
        and text.isascii()
        and _cast.is_numeric(value)
        and len(text) == length
    )


def validate_digits_between(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """Only digits, with a length between the two parameters."""
    require_parameter_count(2, parameters, "digits_between")
    lower = _bound(parameters[0], "digits_between")
    upper = _bound(parameters[1], "digits_between")

    text = _cast.stringify(value)
    if not (text.isdigit() and text.isascii()):
        return False
    return lower <= len(text) <= upper


# ---------------------------------------------------------------------------
# Size
# ---------------------------------------------------------------------------


def get_size(attribute: str, value: typing.Any, validator: "Validator") -> float:
    """Size of a value, by the type its rules declare.

    Numbers declared numeric/integer are their own size. Arrays are counted
    before strings are measured, file uploads are sized in kilobytes and
    anything else is measured in characters.
    """
    if _cast.is_numeric(value) and validator.has_rule(attribute, NUMERIC_RULES):
        return _cast.to_number(value)
    if isinstance(value, (list, tuple, dict)):
        return len(value)
    if _record.is_file(value):
        return value.kilobytes
    return len(_cast.stringify(value))


def _bound(parameter: str, rule: str) -> int | float:
    try:
        return _cast.to_number(parameter)
    except ValueError:
        raise _errors.ConfigurationError(
            f"Validation rule {rule} expects numeric parameters, got {parameter!r}."
        ) from None


def validate_size(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    require_parameter_count(1, parameters, "size")

    return get_size(attribute, value, validator) == _bound(parameters[0], "size")


def validate_between(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    require_parameter_count(2, parameters, "between")

    size = get_size(attribute, value, validator)
    return _bound(parameters[0], "between") <= size <= _bound(parameters[1], "between")


def validate_min(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    require_parameter_count(1, parameters, "min")

    return get_size(attribute, value, validator) >= _bound(parameters[0], "min")


def validate_max(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    require_parameter_count(1, parameters, "max")

    if _record.is_file(value) and value.tmp_name and not value.is_valid:
        return False
    return get_size(attribute, value, validator) <= _bound(parameters[0], "max")


# ---------------------------------------------------------------------------
# Sets
# ---------------------------------------------------------------------------


def validate_in(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """Value, or every element of a list value, is one of the parameters."""
    if isinstance(value, (list, tuple)):
        return all(_cast.stringify(item) in parameters for item in value)
    if isinstance(value, dict):
        return False
    return _cast.stringify(value) in parameters


def validate_not_in(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    return not validate_in(attribute, value, parameters, validator)


# ---------------------------------------------------------------------------
# Store-backed
# ---------------------------------------------------------------------------


def extra_conditions(segments: typing.Sequence[str]) -> dict[str, str]:
    """Pair trailing rule parameters into column/value conditions.

    Raises:
        ConfigurationError: If a column has no value
    """
    if len(segments) % 2:
        raise _errors.ConfigurationError(
            f"Extra conditions must come in column,value pairs, got {list(segments)!r}."
        )
    return dict(zip(segments[::2], segments[1::2]))


def validate_unique(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """``unique:collection[,column[,except_id[,id_column[,col,val...]]]]``."""
    require_parameter_count(1, parameters, "unique")

    collection = parameters[0]
    column = parameters[1] if len(parameters) > 1 and parameters[1] else attribute

    id_column: str | None = None
    exclude_id: str | None = None
    if len(parameters) > 2:
        exclude_id = parameters[2]
        id_column = parameters[3] if len(parameters) > 3 else "id"
        if exclude_id.lower() == "null":
            exclude_id = None

    extra = extra_conditions(parameters[4:]) if len(parameters) > 4 else {}

    verifier = validator.get_presence_verifier()
    count = verifier.get_count(collection, column, value, exclude_id, id_column, extra)
    return count == 0


def validate_exists(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """``exists:collection[,column[,col,val...]]``; lists need every element."""
    require_parameter_count(1, parameters, "exists")

    collection = parameters[0]
    column = parameters[1] if len(parameters) > 1 and parameters[1] else attribute
    extra = extra_conditions(parameters[2:])

    verifier = validator.get_presence_verifier()
    if isinstance(value, (list, tuple)):
        expected = len(value)
        count = verifier.get_multi_count(collection, column, list(value), extra)
    else:
        expected = 1
        count = verifier.get_count(collection, column, value, None, None, extra)
    return count >= expected


# ---------------------------------------------------------------------------
# Network and format
# ---------------------------------------------------------------------------


def _ip_version(value: typing.Any) -> int | None:
    if not isinstance(value, str):
        return None
    try:
        return ipaddress.ip_address(value).version
    except ValueError:
        return None


def validate_ip(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    return _ip_version(value) is not None


def validate_ip4(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    return _ip_version(value) == 4


def validate_ip6(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    return _ip_version(value) == 6


def validate_email(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    if not isinstance(value, str):
        return False
    try:
        email_validator.validate_email(value, check_deliverability=False)
    except email_validator.EmailNotValidError:
        return False
    return True


def validate_url(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    if not isinstance(value, str):
        return False
    try:
        _URL_ADAPTER.validate_python(value)
    except pydantic.ValidationError:
        return False
    return True


def validate_active_url(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """The host of the URL resolves in DNS."""
    if not isinstance(value, str) or not value.strip():
        return False

    text = value.strip().lower()
    if "://" not in text:
        text = f"//{text}"
    host = urllib.parse.urlsplit(text).hostname
    if not host:
        return False
    try:
        return bool(socket.getaddrinfo(host, None))
    except (socket.gaierror, UnicodeError):
        return False


def _matches_categories(
    value: typing.Any, categories: str, extra: str = ""
) -> bool:
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return False
    text = _cast.stringify(value)
    return bool(text) and all(
        char in extra or unicodedata.category(char)[0] in categories for char in text
    )


def validate_alpha(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """Letters and combining marks only."""
    return _matches_categories(value, "LM")


def validate_alpha_num(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """Letters, marks and numbers only."""
    return _matches_categories(value, "LMN")


def validate_alpha_dash(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """Letters, marks, numbers, dashes and underscores only."""
    return _matches_categories(value, "LMN", "-_")


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Compile a delimited pattern such as ``/^[a-z]+$/i``.

    Patterns without delimiters are compiled as they are. Bracket pairs
    (``[...]``, ``(...)``, ``{...}``, ``<...>``) only count as delimiters
    when modifiers follow, so ``[0-9]`` stays a character class.

    Raises:
        ConfigurationError: If the pattern is not a valid regular expression
    """
    body, flags = pattern, 0
    if len(pattern) > 1 and not pattern[0].isalnum() and pattern[0] not in "\\ ":
        bracketed = pattern[0] in _DELIMITER_PAIRS
        closing = _DELIMITER_PAIRS.get(pattern[0], pattern[0])
        end = pattern.rfind(closing)
        modifiers = pattern[end + 1 :]
        if (
            end > 0
            and (modifiers or not bracketed)
            and all(m in _REGEX_FLAGS or m == "u" for m in modifiers)
        ):
            body = pattern[1:end]
            for modifier in modifiers:
                flags |= _REGEX_FLAGS.get(modifier, 0)
    try:
        return re.compile(body, flags)
    except re.error as exc:
        raise _errors.ConfigurationError(
            f"Invalid regex rule pattern {pattern!r}: {exc}"
        ) from exc


def validate_regex(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    require_parameter_count(1, parameters, "regex")

    if isinstance(value, (list, tuple, dict)) or _record.is_file(value):
        return False
    return compile_pattern(parameters[0]).search(_cast.stringify(value)) is not None


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


def validate_mimes(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """A stored, error-free upload whose extension is in the parameters."""
    if not _record.is_file(value):
        return False
    if not value.is_valid or value.tmp_name == "":
        return False
    return value.extension in {parameter.lower() for parameter in parameters}


def validate_image(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    return validate_mimes(attribute, value, IMAGE_EXTENSIONS, validator)


# ---------------------------------------------------------------------------
# Dates
# ---------------------------------------------------------------------------


def validate_date(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    if isinstance(value, (datetime, date)):
        return True
    return _cast.parse_date(value) is not None


def validate_date_format(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    require_parameter_count(1, parameters, "date_format")

    return _cast.parse_date_with_format(value, parameters[0]) is not None


def _date_format(validator: "Validator", attribute: str) -> str | None:
    rule = validator.get_rule(attribute, ["DateFormat"])
    if rule is not None and rule.parameters:
        return rule.parameters[0]
    return None


def _ordered(first: datetime | None, second: datetime | None) -> bool:
    """True when both dates exist and first is strictly earlier."""
    if first is None or second is None:
        return False
    first, second = _cast.comparable(first, second)
    return first < second


def _with_format(
    validator: "Validator", fmt: str, value: typing.Any, parameter: str
) -> tuple[datetime | None, datetime | None]:
    other = validator.get_value(parameter) or parameter

    def parse(raw: typing.Any) -> datetime | None:
        return _cast.parse_date_with_format(raw, fmt) or _cast.parse_date(raw)

    return parse(value), parse(other)


def _operand(validator: "Validator", parameter: str) -> datetime | None:
    # A parameter that does not parse as a date names another attribute.
    moment = _cast.parse_date(parameter)
    if moment is None:
        moment = _cast.parse_date(validator.get_value(parameter))
    return moment


def validate_before(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    require_parameter_count(1, parameters, "before")

    fmt = _date_format(validator, attribute)
    if fmt is not None:
        mine, other = _with_format(validator, fmt, value, parameters[0])
        return _ordered(mine, other)
    return _ordered(_cast.parse_date(value), _operand(validator, parameters[0]))


def validate_after(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    require_parameter_count(1, parameters, "after")

    fmt = _date_format(validator, attribute)
    if fmt is not None:
        mine, other = _with_format(validator, fmt, value, parameters[0])
        return _ordered(other, mine)
    return _ordered(_operand(validator, parameters[0]), _cast.parse_date(value))


def validate_timezone(
    attribute: str, value: typing.Any, parameters: typing.Sequence[str], validator: "Validator"
) -> bool:
    """A zone identifier such as ``Europe/London``; POSIX TZ strings are rejected."""
    if not isinstance(value, str) or not value.strip():
        return False
    zone = dateutil.tz.gettz(value)
    return zone is not None and not isinstance(zone, dateutil.tz.tzstr)


BUILTIN_RULES: typing.Mapping[str, RuleHandler] = {
    "Sometimes": validate_sometimes,
    "Required": validate_required,
    "Filled": validate_filled,
    "RequiredWith": validate_required_with,
    "RequiredWithAll": validate_required_with_all,
    "RequiredWithout": validate_required_without,
    "RequiredWithoutAll": validate_required_without_all,
    "RequiredIf": validate_required_if,
    "Confirmed": validate_confirmed,
    "Same": validate_same,
    "Different": validate_different,
    "Accepted": validate_accepted,
    "Boolean": validate_boolean,
    "Array": validate_array,
    "Numeric": validate_numeric,
    "Integer": validate_integer,
    "Digits": validate_digits,
    "DigitsBetween": validate_digits_between,
    "Size": validate_size,
    "Between": validate_between,
    "Min": validate_min,
    "Max": validate_max,
    "In": validate_in,
    "NotIn": validate_not_in,
    "Unique": validate_unique,
    "Exists": validate_exists,
    "Ip": validate_ip,
    "Ip4": validate_ip4,
    "Ip6": validate_ip6,
    "Ipv4": validate_ip4,
    "Ipv6": validate_ip6,
    "Email": validate_email,
    "Url": validate_url,
    "ActiveUrl": validate_active_url,
    "Alpha": validate_alpha,
    "AlphaNum": validate_alpha_num,
    "AlphaDash": validate_alpha_dash,
    "Regex": validate_regex,
    "Image": validate_image,
    "Mimes": validate_mimes,
    "Date": validate_date,
    "DateFormat": validate_date_format,
    "Before": validate_before,
    "After": validate_after,
    "Timezone": validate_timezone,
}
