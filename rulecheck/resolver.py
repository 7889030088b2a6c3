"""Message resolution and placeholder replacement."""

import typing

from . import attributes as _attributes
from . import cast as _cast
from . import catalog as _catalog
from . import options as _options
from . import rules as _rules

if typing.TYPE_CHECKING:
    from .validate import Validator

Replacer = typing.Callable[[str, str, str, typing.Sequence[str]], str]
"""Custom replacer: (message, attribute, rule_key, parameters) -> message."""


class MessageResolver:
    """Builds the user-facing message for a failed rule.

    Lookup order, first hit wins:

    1. inline custom message ``"{attribute}.{rule}"`` then ``"{rule}"``
    2. catalog ``validation.custom.{attribute}.{rule}``
    3. size rules only: ``validation.{rule}.{type}``
    4. catalog ``validation.{rule}``
    5. fallback message registered with the extension
    6. the key ``validation.{rule}`` itself
    """

    def __init__(self, validator: "Validator") -> None:
        self.validator = validator

    @property
    def translator(self) -> typing.Any:
        return self.validator.translator

    def resolve(self, attribute: str, rule: _rules.Rule) -> str:
        """Get the final message for a failed rule, placeholders replaced."""
        message = self.get_message(attribute, rule)
        return self.do_replacements(message, attribute, rule, list(rule.parameters))

    def _trans(self, key: str) -> str | None:
        line = self.translator.trans(key)
        if isinstance(line, str) and line != key:
            return line
        return None

    def get_message(self, attribute: str, rule: _rules.Rule) -> str:
        """Look up the raw message template for a rule."""
        lower_rule = rule.key

        inline = self._inline_message(
            attribute, lower_rule, self.validator.get_custom_messages()
        )
        if inline is not None:
            return inline

        custom = self._trans(f"validation.custom.{attribute}.{lower_rule}")
        if custom is not None:
            return custom

        if rule.name in _catalog.SIZE_RULES:
            sized = self._trans(
                f"validation.{lower_rule}.{self.attribute_type(attribute).value}"
            )
            if sized is not None:
                return sized

        key = f"validation.{lower_rule}"
        line = self._trans(key)
        if line is not None:
            return line

        fallback = self._inline_message(
            attribute, lower_rule, self.validator.get_fallback_messages()
        )
        return fallback if fallback is not None else key

    @staticmethod
    def _inline_message(
        attribute: str, lower_rule: str, source: typing.Mapping[str, str]
    ) -> str | None:
        for key in (f"{attribute}.{lower_rule}", lower_rule):
            if key in source:
                return source[key]
        return None

    def attribute_type(self, attribute: str) -> _options.AttributeType:
        """Type used for size messages, decided by the declared rules.

        Numeric wins over array, array over file; anything else is a string.
        """
        if self.validator.has_rule(attribute, _catalog.NUMERIC_RULES):
            return _options.AttributeType.NUMERIC
        if self.validator.has_rule(attribute, ["Array"]):
            return _options.AttributeType.ARRAY
        if attribute in self.validator.get_files():
            return _options.AttributeType.FILE
        return _options.AttributeType.STRING

    def do_replacements(
        self,
        message: str,
        attribute: str,
        rule: _rules.Rule,
        parameters: list[str],
    ) -> str:
        """Replace ``:attribute`` and the rule-specific placeholders."""
        name = self.attribute_name(attribute)
        message = (
            message.replace(":ATTRIBUTE", name.upper())
            .replace(":Attribute", name[:1].upper() + name[1:])
            .replace(":attribute", name)
        )

        lower_rule = rule.key
        custom = self.validator.get_replacers().get(lower_rule)
        if custom is not None:
            return custom(message, attribute, lower_rule, parameters)

        replacer = _REPLACERS.get(lower_rule)
        if replacer is not None:
            return replacer(self, message, attribute, parameters)
        return message

    def attribute_name(self, attribute: str) -> str:
        """Displayable name of an attribute.

        Custom attribute names win, then ``validation.attributes.{attribute}``,
        then the attribute with underscores turned into spaces.
        """
        custom = self.validator.get_custom_attributes()
        if attribute in custom:
            return custom[attribute]

        line = self._trans(f"validation.attributes.{attribute}")
        if line is not None:
            return line
        return _rules.snake_case(attribute).replace("_", " ")

    def attribute_list(self, values: typing.Iterable[str]) -> list[str]:
        return [self.attribute_name(value) for value in values]

    def displayable_value(self, attribute: str, value: typing.Any) -> str:
        """Displayable form of a value of an attribute.

        Custom values win, then ``validation.values.{attribute}.{value}``,
        then the value itself.
        """
        text = _cast.stringify(value)
        custom = self.validator.get_custom_values().get(attribute, {})
        if text in custom:
            return custom[text]

        line = self._trans(f"validation.values.{attribute}.{text}")
        return line if line is not None else text


def _replace_min_max(
    resolver: MessageResolver, message: str, attribute: str, parameters: list[str]
) -> str:
    return message.replace(":min", parameters[0]).replace(":max", parameters[1])


def _replace_digits(
    resolver: MessageResolver, message: str, attribute: str, parameters: list[str]
) -> str:
    return message.replace(":digits", parameters[0])


def _replace_size(
    resolver: MessageResolver, message: str, attribute: str, parameters: list[str]
) -> str:
    return message.replace(":size", parameters[0])


def _replace_min(
    resolver: MessageResolver, message: str, attribute: str, parameters: list[str]
) -> str:
    return message.replace(":min", parameters[0])


def _replace_max(
    resolver: MessageResolver, message: str, attribute: str, parameters: list[str]
) -> str:
    return message.replace(":max", parameters[0])


def _replace_in(
    resolver: MessageResolver, message: str, attribute: str, parameters: list[str]
) -> str:
    values = [resolver.displayable_value(attribute, p) for p in parameters]
    return message.replace(":values", ", ".join(values))


def _replace_mimes(
    resolver: MessageResolver, message: str, attribute: str, parameters: list[str]
) -> str:
    return message.replace(":values", ", ".join(parameters))


def _replace_required_with(
    resolver: MessageResolver, message: str, attribute: str, parameters: list[str]
) -> str:
    return message.replace(":values", " / ".join(resolver.attribute_list(parameters)))


def _replace_required_if(
    resolver: MessageResolver, message: str, attribute: str, parameters: list[str]
) -> str:
    other = parameters[0]
    current = _attributes.get_value(resolver.validator.get_data(), other)
    return message.replace(":other", resolver.attribute_name(other)).replace(
        ":value", resolver.displayable_value(other, current)
    )


def _replace_same(
    resolver: MessageResolver, message: str, attribute: str, parameters: list[str]
) -> str:
    return message.replace(":other", resolver.attribute_name(parameters[0]))


def _replace_date_format(
    resolver: MessageResolver, message: str, attribute: str, parameters: list[str]
) -> str:
    return message.replace(":format", parameters[0])


def _replace_date(
    resolver: MessageResolver, message: str, attribute: str, parameters: list[str]
) -> str:
    # A parameter that is not a date names another attribute.
    if _cast.parse_date(parameters[0]) is None:
        return message.replace(":date", resolver.attribute_name(parameters[0]))
    return message.replace(":date", parameters[0])


_REPLACERS: dict[
    str, typing.Callable[[MessageResolver, str, str, list[str]], str]
] = {
    "between": _replace_min_max,
    "digits": _replace_digits,
    "digits_between": _replace_min_max,
    "size": _replace_size,
    "min": _replace_min,
    "max": _replace_max,
    "in": _replace_in,
    "not_in": _replace_in,
    "mimes": _replace_mimes,
    "required_with": _replace_required_with,
    "required_with_all": _replace_required_with,
    "required_without": _replace_required_with,
    "required_without_all": _replace_required_with,
    "required_if": _replace_required_if,
    "same": _replace_same,
    "different": _replace_same,
    "date_format": _replace_date_format,
    "before": _replace_date,
    "after": _replace_date,
}
