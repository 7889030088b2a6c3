"""Store-backed cardinality lookups for the ``unique`` and ``exists`` rules."""

import typing


class PresenceVerifier(typing.Protocol):
    """Counts matching rows in an external store.

    Implementations talk to whatever store backs the application. Calls are
    blocking and retries, if any, belong to the implementation.
    """

    def get_count(
        self,
        collection: str,
        column: str,
        value: typing.Any,
        exclude_id: str | None = None,
        id_column: str | None = None,
        extra: typing.Mapping[str, str] | None = None,
    ) -> int:
        """Count rows where ``column`` equals ``value``.

        Args:
            collection: Table or collection name
            column: Column to match
            value: Value to match
            exclude_id: Id of a row to leave out of the count
            id_column: Column holding the id, used with exclude_id
            extra: Additional column/value equality conditions

        Returns:
            Number of matching rows
        """
        ...

    def get_multi_count(
        self,
        collection: str,
        column: str,
        values: list[typing.Any],
        extra: typing.Mapping[str, str] | None = None,
    ) -> int:
        """Count rows where ``column`` is any of ``values``."""
        ...
