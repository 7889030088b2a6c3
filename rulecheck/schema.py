"""Rule set comparison and drift detection utilities."""

import random
import typing
from dataclasses import dataclass, field

from . import record as _record
from . import rules as _rules
from .validate import validate as _validate_one

if typing.TYPE_CHECKING:
    from .factory import Factory


@dataclass
class RuleChange:
    """Rules added to or removed from one attribute between two rule sets.

    Attributes:
        attribute: Attribute path
        added_rules: Rules only in the new rule set, e.g. ``"max:10"``
        removed_rules: Rules only in the old rule set
    """

    attribute: str
    added_rules: list[str] = field(default_factory=list)
    removed_rules: list[str] = field(default_factory=list)


@dataclass
class RuleSetDiff:
    """Difference between two rule set versions.

    A diff is breaking when it adds any rule: a record that passed the old
    rule set may then fail. Removing rules only ever loosens validation.

    Attributes:
        added_attributes: Attributes only in the new rule set
        removed_attributes: Attributes only in the old rule set
        changed_attributes: Per-attribute rule changes, added attributes included
        is_breaking: Whether records valid under the old rules can now fail
    """

    added_attributes: list[str]
    removed_attributes: list[str]
    changed_attributes: list[RuleChange]
    is_breaking: bool


def _rule_strings(rules: _record.RuleSetInput) -> dict[str, list[str]]:
    return {
        attribute: [str(rule) for rule in parsed]
        for attribute, parsed in _rules.explode_rules(rules).items()
    }


def ruleset_diff(old: _record.RuleSetInput, new: _record.RuleSetInput) -> RuleSetDiff:
    """Compare two rule sets and identify differences.

    Rules are compared in their normalized form, so ``"Max:3"`` and
    ``"max:3"`` are the same rule.

    Example:
        >>> diff = ruleset_diff({"age": "integer"}, {"age": "integer|min:18"})
        >>> diff.changed_attributes[0].added_rules
        ['min:18']
    """
    old_rules = _rule_strings(old)
    new_rules = _rule_strings(new)

    added_attributes = [a for a in new_rules if a not in old_rules]
    removed_attributes = [a for a in old_rules if a not in new_rules]

    changes: list[RuleChange] = []
    for attribute, rules in new_rules.items():
        before = old_rules.get(attribute, [])
        change = RuleChange(
            attribute=attribute,
            added_rules=[rule for rule in rules if rule not in before],
            removed_rules=[rule for rule in before if rule not in rules],
        )
        if change.added_rules or change.removed_rules:
            changes.append(change)

    return RuleSetDiff(
        added_attributes=added_attributes,
        removed_attributes=removed_attributes,
        changed_attributes=changes,
        is_breaking=any(change.added_rules for change in changes),
    )


@dataclass
class DriftReport:
    """Report on how records fare against a new rule set version.

    Attributes:
        total_records: Number of records checked
        compatible_count: Number of records passing the new rules
        incompatible_count: Number of records failing the new rules
        compatibility_percentage: Percentage of compatible records
        regressed_count: Records that passed the old rules but fail the new ones
        breaking_changes: Descriptions of the breaking rule changes
    """

    total_records: int
    compatible_count: int
    incompatible_count: int
    compatibility_percentage: float
    regressed_count: int
    breaking_changes: list[str]


def detect_drift(
    records: typing.Iterable[_record.Record],
    old_rules: _record.RuleSetInput,
    new_rules: _record.RuleSetInput,
    *,
    sample_size: int | None = None,
    factory: "Factory | None" = None,
) -> DriftReport:
    """Validate records against two rule set versions and compare.

    Args:
        records: Iterable of records
        old_rules: Older rule set
        new_rules: Newer rule set
        sample_size: Maximum number of records to sample (None for all)
        factory: Factory used to build validators, e.g. to supply extensions

    Example:
        >>> report = detect_drift(records, v1_rules, v2_rules)
        >>> print(f"Compatibility: {report.compatibility_percentage:.1f}%")
    """
    records_list = list(records)
    if sample_size is not None and len(records_list) > sample_size:
        records_list = random.sample(records_list, sample_size)

    compatible_count = 0
    regressed_count = 0
    for record in records_list:
        if _validate_one(record, new_rules, factory=factory).valid:
            compatible_count += 1
        elif _validate_one(record, old_rules, factory=factory).valid:
            regressed_count += 1

    total = len(records_list)
    diff = ruleset_diff(old_rules, new_rules)
    breaking_changes = [
        f"Attribute '{change.attribute}' gained rules: {', '.join(change.added_rules)}"
        for change in diff.changed_attributes
        if change.added_rules
    ]

    return DriftReport(
        total_records=total,
        compatible_count=compatible_count,
        incompatible_count=total - compatible_count,
        compatibility_percentage=(compatible_count / total * 100) if total > 0 else 0.0,
        regressed_count=regressed_count,
        breaking_changes=breaking_changes,
    )
