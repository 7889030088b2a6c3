"""Result types for validation operations."""

import typing as _t

from . import messages as _messages
from . import record as _record

if _t.TYPE_CHECKING:
    from .errors import ValidationError

FailedRules = dict[str, dict[str, list[str]]]
"""Attribute -> rule key -> parameters of every rule that failed."""


class ValidationResult(_t.NamedTuple):
    """Outcome of evaluating one record against a rule set.

    Attributes:
        failed_rules: Failed rules and their parameters, keyed by attribute
        messages: Formatted failure messages
    """

    failed_rules: FailedRules
    messages: _messages.MessageBag

    @property
    def valid(self) -> bool:
        """True if no message was recorded."""
        return self.messages.is_empty()

    @property
    def errors(self) -> dict[str, list[str]]:
        """Messages keyed by attribute."""
        return self.messages.to_dict()

    def to_dict(self) -> dict[str, _t.Any]:
        return {
            "valid": self.valid,
            "failed_rules": {
                attribute: {rule: list(params) for rule, params in rules.items()}
                for attribute, rules in self.failed_rules.items()
            },
            "errors": self.errors,
        }


class RecordValidationResult(_t.NamedTuple):
    """Result of validating a single record in a batch.

    Attributes:
        error: ValidationError if the record failed, None otherwise
        result: The full ValidationResult, present whether or not it failed
        value: Original record that was validated
    """

    error: "ValidationError | None"
    result: ValidationResult
    value: _record.Record
