"""Parsing of rule expressions into Rule values."""

import csv
import re
import typing

from . import record as _record

_SNAKE_RE = re.compile(r"(.)([A-Z])")


def studly_case(value: str) -> str:
    """Convert a rule name to its dispatch form, e.g. ``required_with`` -> ``RequiredWith``."""
    words = value.replace("-", " ").replace("_", " ").split(" ")
    return "".join(word[:1].upper() + word[1:] for word in words)


def snake_case(value: str, delimiter: str = "_") -> str:
    """Convert a name to snake case, e.g. ``RequiredWith`` -> ``required_with``.

    Strings that are entirely lower case are returned unchanged.
    """
    if value.islower() and value.isalpha():
        return value
    return _SNAKE_RE.sub(rf"\1{delimiter}\2", value).lower()


class Rule(typing.NamedTuple):
    """A parsed rule.

    Attributes:
        name: Dispatch identifier in studly case (``RequiredWith``)
        parameters: Rule parameters, in declaration order
    """

    name: str
    parameters: tuple[str, ...] = ()

    @property
    def key(self) -> str:
        """Snake-case name used for message lookup and failure reports."""
        return snake_case(self.name)

    def __str__(self) -> str:
        if not self.parameters:
            return self.key
        return f"{self.key}:{','.join(self.parameters)}"


def _parse_parameters(name: str, raw: str) -> list[str]:
    if name.strip().lower() == "regex":
        return [raw]
    if raw == "":
        return []
    return next(csv.reader([raw], skipinitialspace=False))


def parse_rule(expression: _record.RuleExpression | Rule) -> Rule | None:
    """Parse a single rule expression.

    String rules follow ``{rule}:{parameters}``: the name is split from the
    parameters on the first colon and parameters are comma separated. The
    ``regex`` rule keeps everything after the first colon as one parameter.

    Args:
        expression: ``"max:3"``, ``("between", ["1", "10"])``,
            ``["between", "1", "10"]`` or an existing Rule

    Returns:
        The parsed Rule, or None for an empty expression
    """
    if isinstance(expression, Rule):
        return expression

    if isinstance(expression, str):
        name, sep, raw = expression.partition(":")
        parameters = _parse_parameters(name, raw) if sep else []
    else:
        items = list(expression)
        if not items:
            return None
        name = str(items[0])
        rest = items[1:]
        if len(rest) == 1 and isinstance(rest[0], (list, tuple)):
            rest = list(rest[0])
        parameters = [str(item) for item in rest]

    name = name.strip()
    if not name:
        return None
    return Rule(studly_case(name), tuple(parameters))


def parse_rules(
    rules: str | typing.Sequence[_record.RuleExpression | Rule],
) -> list[Rule]:
    """Parse the rules declared for one attribute.

    Args:
        rules: Pipe-delimited string or list of rule expressions

    Returns:
        List of Rule, empty segments dropped
    """
    if isinstance(rules, str):
        expressions: typing.Sequence[typing.Any] = rules.split("|")
    elif isinstance(rules, Rule):
        expressions = [rules]
    else:
        expressions = rules

    parsed: list[Rule] = []
    for expression in expressions:
        rule = parse_rule(expression)
        if rule is not None:
            parsed.append(rule)
    return parsed


def explode_rules(rules: _record.RuleSetInput) -> dict[str, list[Rule]]:
    """Parse a full rule set.

    Args:
        rules: Mapping of attribute to its rules

    Returns:
        Dictionary of attribute to list of Rule, in declaration order
    """
    return {attribute: parse_rules(value) for attribute, value in rules.items()}
