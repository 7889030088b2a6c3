"""Ordered, per-attribute container of validation messages."""

import json
import typing


class MessageBag:
    """Messages keyed by attribute, in insertion order.

    Each key keeps a list of unique messages. Output can be formatted with a
    template where ``:message`` is the message and ``:key`` its attribute.

    Attributes:
        format: Default output template
    """

    def __init__(
        self,
        messages: typing.Mapping[str, str | typing.Iterable[str]] | None = None,
        format: str = ":message",
    ) -> None:
        """Initialize MessageBag.

        Args:
            messages: Initial messages, a string or list of strings per key
            format: Default output template
        """
        self._messages: dict[str, list[str]] = {}
        self.format = format
        for key, value in (messages or {}).items():
            self._messages[key] = [value] if isinstance(value, str) else list(value)

    def add(self, key: str, message: str) -> "MessageBag":
        """Add a message unless the key already holds the same message.

        Args:
            key: Attribute the message belongs to
            message: Formatted message

        Returns:
            The bag itself
        """
        if self._is_unique(key, message):
            self._messages.setdefault(key, []).append(message)
        return self

    def merge(
        self, messages: "MessageBag | typing.Mapping[str, str | typing.Iterable[str]]"
    ) -> "MessageBag":
        """Merge other messages into the bag, appending per key.

        Args:
            messages: Another MessageBag or a mapping of key to message(s)

        Returns:
            The bag itself
        """
        if isinstance(messages, MessageBag):
            messages = messages.get_messages()
        for key, value in messages.items():
            incoming = [value] if isinstance(value, str) else list(value)
            self._messages.setdefault(key, []).extend(incoming)
        return self

    def _is_unique(self, key: str, message: str) -> bool:
        return key not in self._messages or message not in self._messages[key]

    def has(self, key: str | None = None) -> bool:
        """Check whether messages exist for a key, or for any key when None."""
        return self.first(key) != ""

    def first(self, key: str | None = None, format: str | None = None) -> str:
        """Get the first message for a key, or of the whole bag when key is None.

        Returns:
            The formatted message, or an empty string
        """
        messages = self.all(format) if key is None else self.get(key, format)
        return messages[0] if messages else ""

    def get(self, key: str, format: str | None = None) -> list[str]:
        """Get all messages for a key.

        Args:
            key: Attribute name
            format: Output template; the bag default when None

        Returns:
            List of formatted messages, empty if the key has none
        """
        if key in self._messages:
            return self._transform(self._messages[key], self._check_format(format), key)
        return []

    def all(self, format: str | None = None) -> list[str]:
        """Get every message in the bag, formatted."""
        fmt = self._check_format(format)
        result: list[str] = []
        for key, messages in self._messages.items():
            result.extend(self._transform(messages, fmt, key))
        return result

    @staticmethod
    def _transform(messages: list[str], format: str, key: str) -> list[str]:
        return [
            format.replace(":message", message).replace(":key", key)
            for message in messages
        ]

    def _check_format(self, format: str | None) -> str:
        return self.format if format is None else format

    def keys(self) -> list[str]:
        """Attributes that hold at least one message."""
        return list(self._messages)

    def get_messages(self) -> dict[str, list[str]]:
        """Raw messages, keyed by attribute."""
        return self._messages

    def set_format(self, format: str = ":message") -> "MessageBag":
        self.format = format
        return self

    def is_empty(self) -> bool:
        return not self.any()

    def any(self) -> bool:
        return self.count() > 0

    def count(self) -> int:
        """Number of messages, counted per message rather than per key."""
        return sum(len(messages) for messages in self._messages.values())

    def __len__(self) -> int:
        return self.count()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __iter__(self) -> typing.Iterator[str]:
        return iter(self.all())

    def to_dict(self) -> dict[str, list[str]]:
        """Copy of the raw messages."""
        return {key: list(messages) for key, messages in self._messages.items()}

    def to_json(self, indent: int | None = None) -> str:
        """Convert the messages to a JSON string.

        Args:
            indent: JSON indentation level (None for compact)
        """
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    def __str__(self) -> str:
        return self.to_json()

    def __repr__(self) -> str:
        return f"MessageBag({self._messages!r})"
