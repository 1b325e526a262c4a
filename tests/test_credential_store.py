"""Unit tests for the in-memory credential store."""

import pytest

from authgate.adapters.credentials.base import CredentialRecord
from authgate.adapters.credentials.in_memory import InMemoryCredentialStore


def _record(email: str = "carol@example.com") -> CredentialRecord:
    return CredentialRecord(id="c-1", email=email, password_hash="$2b$04$hash", name="Carol")


def test_lookup_ignores_case_and_surrounding_whitespace() -> None:
    store = InMemoryCredentialStore([_record()])

    assert store.find_by_identifier("Carol@Example.COM") is not None
    assert store.find_by_identifier("  carol@example.com ") is not None


def test_unknown_identifier_returns_none() -> None:
    store = InMemoryCredentialStore([_record()])

    assert store.find_by_identifier("dave@example.com") is None
    assert store.find_by_identifier("") is None


def test_add_replaces_existing_record() -> None:
    store = InMemoryCredentialStore([_record()])
    replacement = CredentialRecord(id="c-2", email="CAROL@example.com", password_hash="$2b$04$other")

    store.add(replacement)

    assert len(store) == 1
    assert store.find_by_identifier("carol@example.com").id == "c-2"


def test_add_rejects_empty_email() -> None:
    store = InMemoryCredentialStore()

    with pytest.raises(ValueError):
        store.add(_record(email="  "))


def test_public_fields_and_repr_exclude_password_hash() -> None:
    record = _record()

    assert record.public_fields() == {
        "id": "c-1",
        "email": "carol@example.com",
        "name": "Carol",
        "avatar": None,
    }
    assert "$2b$" not in repr(record)
