"""String translators backing message lookup."""

import copy
import typing

from . import attributes as _attributes
from . import lang as _lang
from . import options as _options


class StringTranslator(typing.Protocol):
    """Protocol for message catalogs.

    ``trans`` must return the key unchanged when no translation exists.
    """

    def trans(self, key: str) -> typing.Any:
        ...


class CatalogTranslator:
    """Translator over an in-memory catalog nested under ``validation``.

    Overrides are merged over the default catalog, so a caller can add
    ``custom``, ``attributes`` and ``values`` tables or replace messages:

        CatalogTranslator({
            "required": "Please fill in :attribute.",
            "custom": {"username": {"required": "Pick a username"}},
            "attributes": {"dob": "date of birth"},
        })
    """

    default_messages: typing.ClassVar[dict[str, typing.Any]] = {}

    def __init__(self, messages: dict[str, typing.Any] | None = None) -> None:
        catalog = copy.deepcopy(self.default_messages)
        catalog.update(messages or {})
        self.messages: dict[str, typing.Any] = {"validation": catalog}

    def trans(self, key: str) -> typing.Any:
        """Translate a dotted key such as ``validation.min.string``.

        Returns:
            The catalog entry, or the key itself when missing
        """
        return _attributes.get_value(self.messages, key, key)


class DefaultTranslator(CatalogTranslator):
    """English catalog."""

    default_messages = _lang.EN


class EsEsTranslator(CatalogTranslator):
    """Spanish catalog."""

    default_messages = _lang.ES


_TRANSLATORS: dict[_options.Locale, type[CatalogTranslator]] = {
    _options.Locale.EN: DefaultTranslator,
    _options.Locale.ES: EsEsTranslator,
}


def translator_for(
    locale: _options.Locale | str, messages: dict[str, typing.Any] | None = None
) -> CatalogTranslator:
    """Build the bundled translator for a locale.

    Args:
        locale: Locale or its value (``"en"``, ``"es"``)
        messages: Optional catalog overrides

    Raises:
        ValueError: If the locale has no bundled catalog
    """
    return _TRANSLATORS[_options.Locale(locale)](messages)
