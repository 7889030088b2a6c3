"""Aggregate counts over batch validation results."""

import json
import typing
from collections import Counter
from dataclasses import asdict, dataclass, field

from . import result as _result

AnyResult = _result.RecordValidationResult | _result.ValidationResult


def _percent(part: int, whole: int) -> float:
    return part / whole * 100 if whole else 0.0


@dataclass
class ValidationStats:
    """Statistics about a batch of validation results.

    Attributes:
        total: Total number of records validated
        valid_count: Records that passed every rule
        invalid_count: Records with at least one failed rule
        valid_percentage: Percentage of valid records
        invalid_percentage: Percentage of invalid records
        rule_counts: Failures per rule key (``"required"``, ``"min"``)
        attribute_counts: Failed rules per attribute path
        total_failures: Failed rules across every record
    """

    total: int = 0
    valid_count: int = 0
    invalid_count: int = 0
    valid_percentage: float = 0.0
    invalid_percentage: float = 0.0
    rule_counts: dict[str, int] = field(default_factory=dict)
    attribute_counts: dict[str, int] = field(default_factory=dict)
    total_failures: int = 0

    @classmethod
    def from_results(cls, results: typing.Iterable[AnyResult]) -> "ValidationStats":
        """Compute statistics from batch or single-record results.

        Args:
            results: RecordValidationResult or ValidationResult values
        """
        by_rule: Counter[str] = Counter()
        by_attribute: Counter[str] = Counter()
        total = valid = 0

        for item in results:
            outcome = item.result if isinstance(item, _result.RecordValidationResult) else item
            total += 1
            valid += outcome.valid
            for attribute, failed in outcome.failed_rules.items():
                by_attribute[attribute] += len(failed)
                by_rule.update(failed.keys())

        return cls(
            total=total,
            valid_count=valid,
            invalid_count=total - valid,
            valid_percentage=_percent(valid, total),
            invalid_percentage=_percent(total - valid, total),
            rule_counts=dict(by_rule),
            attribute_counts=dict(by_attribute),
            total_failures=sum(by_rule.values()),
        )

    def top_rules(self, n: int = 10) -> list[tuple[str, int]]:
        """The n rules that failed most often, most frequent first."""
        return Counter(self.rule_counts).most_common(n)

    def top_attributes(self, n: int = 10) -> list[tuple[str, int]]:
        """The n attributes with the most failed rules, most frequent first."""
        return Counter(self.attribute_counts).most_common(n)

    def to_dict(self) -> dict[str, typing.Any]:
        return asdict(self)

    def to_json(self, indent: int | None = None) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    def __repr__(self) -> str:
        return (
            f"ValidationStats(total={self.total}, "
            f"valid={self.valid_count} ({self.valid_percentage:.1f}%), "
            f"failures={self.total_failures})"
        )


def get_stats(results: typing.Iterable[AnyResult]) -> ValidationStats:
    """Shortcut for ``ValidationStats.from_results``.

    Example:
        >>> stats = get_stats(validate_records(records, {"email": "required|email"}))
        >>> stats.top_rules(3)
    """
    return ValidationStats.from_results(results)
