"""Shared pytest fixtures for rulecheck tests."""

import typing
import pytest
import pydantic

from rulecheck.factory import Factory
from rulecheck.record import FileUpload
from rulecheck.translation import DefaultTranslator


class Signup(pydantic.BaseModel):
    """Test model representing a signup form."""

    username: str
    email: str
    age: int | None = None


class FakePresenceVerifier:
    """In-memory presence verifier over lists of row dictionaries."""

    def __init__(self, tables: dict[str, list[dict[str, typing.Any]]]) -> None:
        self.tables = tables
        self.calls: list[tuple[typing.Any, ...]] = []

    def _rows(
        self, collection: str, extra: typing.Mapping[str, str] | None
    ) -> list[dict[str, typing.Any]]:
        rows = self.tables.get(collection, [])
        for column, value in (extra or {}).items():
            rows = [row for row in rows if str(row.get(column)) == value]
        return rows

    def get_count(
        self,
        collection: str,
        column: str,
        value: typing.Any,
        exclude_id: str | None = None,
        id_column: str | None = None,
        extra: typing.Mapping[str, str] | None = None,
    ) -> int:
        self.calls.append(
            ("count", collection, column, value, exclude_id, id_column, dict(extra or {}))
        )
        rows = [row for row in self._rows(collection, extra) if row.get(column) == value]
        if exclude_id is not None:
            rows = [row for row in rows if str(row.get(id_column or "id")) != exclude_id]
        return len(rows)

    def get_multi_count(
        self,
        collection: str,
        column: str,
        values: list[typing.Any],
        extra: typing.Mapping[str, str] | None = None,
    ) -> int:
        self.calls.append(("multi", collection, column, list(values), dict(extra or {})))
        return len([row for row in self._rows(collection, extra) if row.get(column) in values])


@pytest.fixture
def translator() -> DefaultTranslator:
    """Fixture providing the English translator."""
    return DefaultTranslator()


@pytest.fixture
def signup_model() -> type[pydantic.BaseModel]:
    """Fixture providing the Signup Pydantic model."""
    return Signup


@pytest.fixture
def verifier() -> FakePresenceVerifier:
    """Fixture providing a verifier with users and roles tables."""
    return FakePresenceVerifier(
        {
            "users": [
                {"id": 1, "email": "taken@gmail.com", "active": 1},
                {"id": 2, "email": "old@gmail.com", "active": 0},
            ],
            "roles": [
                {"id": 1, "name": "admin"},
                {"id": 2, "name": "editor"},
            ],
        }
    )


@pytest.fixture
def factory(verifier: FakePresenceVerifier) -> Factory:
    """Fixture providing a Factory wired to the fake verifier."""
    factory = Factory()
    factory.set_presence_verifier(verifier)
    return factory


@pytest.fixture
def avatar() -> FileUpload:
    """Fixture providing a stored 2 KB PNG upload."""
    return FileUpload(name="avatar.PNG", size=2048, tmp_name="/tmp/upload1")


@pytest.fixture
def valid_signups() -> list[dict[str, typing.Any]]:
    """Fixture providing valid signup records."""
    return [
        {"username": "alice", "email": "alice@gmail.com", "age": 30},
        {"username": "bob", "email": "bob@gmail.com", "age": 25},
    ]


@pytest.fixture
def mixed_signups() -> list[dict[str, typing.Any]]:
    """Fixture providing a mix of valid and invalid signup records."""
    return [
        {"username": "alice", "email": "alice@gmail.com", "age": 30},  # Valid
        {"username": "", "email": "bob@gmail.com", "age": 25},  # Missing username
        {"username": "carol", "email": "not-an-email", "age": 12},  # Bad email, too young
        {"username": "dave", "email": "dave@gmail.com"},  # Valid, age optional
    ]


@pytest.fixture
def signup_rules() -> dict[str, str]:
    """Fixture providing the signup rule set."""
    return {
        "username": "required|alpha_dash|max:20",
        "email": "required|email",
        "age": "integer|min:18",
    }
