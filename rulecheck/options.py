"""Option enums for validation operations."""

from enum import Enum


class ErrorOption(str, Enum):
    """Options for how to handle failed validations.

    Attributes:
        RETURN: Return failures in the result object without raising
        RAISE: Raise ValidationError as soon as a record fails
        SKIP: Skip failing records silently (only for iterator functions)
    """

    RETURN = "return"
    RAISE = "raise"
    SKIP = "skip"


class AttributeType(str, Enum):
    """Type used to pick the size-qualified message for size rules.

    The type is decided by the rules declared on the attribute, not by
    inspecting its value.
    """

    NUMERIC = "numeric"
    ARRAY = "array"
    FILE = "file"
    STRING = "string"


class Locale(str, Enum):
    """Bundled message catalogs."""

    EN = "en"
    ES = "es"
