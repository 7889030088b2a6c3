"""Factory holding shared validator configuration."""

import typing

from . import options as _options
from . import record as _record
from . import resolver as _resolver
from . import rules as _rules
from . import translation as _translation
from .validate import Extension, Validator

if typing.TYPE_CHECKING:
    from .verifier import PresenceVerifier

ValidatorResolver = typing.Callable[
    [
        _translation.StringTranslator,
        _record.Record,
        _record.RuleSetInput,
        typing.Mapping[str, str],
        typing.Mapping[str, str],
    ],
    Validator,
]
"""Builds a validator from (translator, data, rules, messages, attributes)."""


class Factory:
    """Creates validators that share a translator, extensions and verifier.

    Register custom rules once, then build one validator per record:

        factory = Factory()
        factory.extend("even", lambda attr, value, params, v: int(value) % 2 == 0,
                       ":attribute must be even.")
        factory.make({"n": 3}, {"n": "even"}).fails()  # True
    """

    def __init__(
        self,
        translator: _translation.StringTranslator | None = None,
        *,
        locale: _options.Locale | str = _options.Locale.EN,
    ) -> None:
        """Initialize Factory.

        Args:
            translator: Message catalog; the bundled catalog for locale when None
            locale: Bundled catalog to use when no translator is given
        """
        self.translator = translator or _translation.translator_for(locale)
        self.extensions: dict[str, Extension] = {}
        self.implicit_extensions: dict[str, Extension] = {}
        self.replacers: dict[str, _resolver.Replacer] = {}
        self.fallback_messages: dict[str, str] = {}
        self._verifier: "PresenceVerifier | None" = None
        self._resolver: ValidatorResolver | None = None

    def make(
        self,
        data: _record.Record,
        rules: _record.RuleSetInput,
        messages: typing.Mapping[str, str] | None = None,
        attributes: typing.Mapping[str, str] | None = None,
    ) -> Validator:
        """Create a validator with every registration of this factory applied.

        Args:
            data: Record to validate
            rules: Mapping of attribute path to its rules
            messages: Custom messages
            attributes: Display names keyed by attribute path

        Returns:
            A new, not yet evaluated, Validator
        """
        validator = self._resolve(data, rules, messages or {}, attributes or {})
        if self._verifier is not None:
            validator.set_presence_verifier(self._verifier)
        self._add_extensions(validator)
        return validator

    def _add_extensions(self, validator: Validator) -> None:
        validator.add_extensions(self.extensions)
        validator.add_implicit_extensions(self.implicit_extensions)
        validator.add_replacers(self.replacers)
        validator.set_fallback_messages(self.fallback_messages)

    def _resolve(
        self,
        data: _record.Record,
        rules: _record.RuleSetInput,
        messages: typing.Mapping[str, str],
        attributes: typing.Mapping[str, str],
    ) -> Validator:
        if self._resolver is None:
            return Validator(self.translator, data, rules, messages, attributes)
        return self._resolver(self.translator, data, rules, messages, attributes)

    def _fallback(self, rule: str, message: str | None) -> None:
        if message is not None:
            self.fallback_messages[_rules.snake_case(_rules.studly_case(rule))] = message

    def extend(
        self, rule: str, extension: Extension, message: str | None = None
    ) -> None:
        """Register a custom rule.

        Args:
            rule: Rule name as written in rule strings
            extension: Callable(attribute, value, parameters, validator) -> bool
            message: Message used when the catalog has none for the rule
        """
        self.extensions[rule] = extension
        self._fallback(rule, message)

    def extend_implicit(
        self, rule: str, extension: Extension, message: str | None = None
    ) -> None:
        """Register a custom rule that also runs when the attribute is absent."""
        self.implicit_extensions[rule] = extension
        self._fallback(rule, message)

    def replacer(self, rule: str, replacer: _resolver.Replacer) -> None:
        self.replacers[rule] = replacer

    def resolver(self, resolver: ValidatorResolver) -> None:
        """Use a custom callable, such as a Validator subclass, to build validators."""
        self._resolver = resolver

    def get_translator(self) -> _translation.StringTranslator:
        return self.translator

    def get_presence_verifier(self) -> "PresenceVerifier | None":
        return self._verifier

    def set_presence_verifier(self, verifier: "PresenceVerifier") -> None:
        self._verifier = verifier
