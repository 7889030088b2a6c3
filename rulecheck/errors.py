"""Exceptions raised by rulecheck.

Failed rules are ordinary results and never raise on their own. The
exceptions here are for setup bugs, plus ValidationError for callers that
opt in to raising with ErrorOption.RAISE.
"""

import typing

if typing.TYPE_CHECKING:
    from .result import ValidationResult


class RulecheckError(Exception):
    """Base class for all rulecheck exceptions."""


class ValidationError(RulecheckError, ValueError):
    """Raised when a record fails validation and raising was requested.

    Attributes:
        result: The full validation result
        errors: Messages keyed by attribute
    """

    def __init__(self, result: "ValidationResult") -> None:
        """Initialize ValidationError from a validation result.

        Args:
            result: The failed validation result
        """
        self.result = result
        self.errors: dict[str, list[str]] = result.messages.to_dict()
        error_msg = ", ".join(
            f"{attribute}: {'; '.join(messages)}"
            for attribute, messages in self.errors.items()
        )
        super().__init__(f"Validation failed: {error_msg}")


class ConfigurationError(RulecheckError, RuntimeError):
    """Raised for invalid validator setup, such as a missing presence verifier."""


class MissingParameterError(ConfigurationError, TypeError):
    """Raised when a rule receives fewer parameters than it needs."""

    def __init__(self, rule: str, count: int) -> None:
        self.rule = rule
        self.count = count
        super().__init__(
            f"Validation rule {rule} requires at least {count} parameters."
        )


class UnknownRuleError(ConfigurationError, LookupError):
    """Raised when a rule has neither a built-in handler nor an extension."""

    def __init__(self, rule: str) -> None:
        self.rule = rule
        super().__init__(f"Validation rule [{rule}] does not exist.")
