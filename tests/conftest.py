"""Pytest configuration and fixtures shared across all test modules.

Environment variables are set before any import that loads settings, so
tests use a cheap bcrypt cost factor and a matching dummy hash.
"""

import os

# CRITICAL: Set these before any imports that might load settings
os.environ["APP_ENV"] = "testing"

# bcrypt hash at cost 4 (the test cost factor); matches no password
TEST_DUMMY_HASH = "$2b$04$N9qo8uLOickgx2ZMRZoMyeIjZAgcfl7p92ldGxad68LJZdL17lhWy"

os.environ.setdefault("AUTH_BCRYPT_ROUNDS", "4")
os.environ.setdefault("AUTH_DUMMY_PASSWORD_HASH", TEST_DUMMY_HASH)
os.environ.setdefault("LOG_LEVEL", "WARNING")

from unittest.mock import Mock

import pytest

from authgate.adapters.credentials.base import CredentialRecord
from authgate.adapters.credentials.in_memory import InMemoryCredentialStore
from authgate.services.password_hasher import PasswordHasher

ALICE_PASSWORD = "Correct-Horse-9"


@pytest.fixture
def clock() -> Mock:
    """Deterministic time source; move it with ``clock.return_value += seconds``."""
    return Mock(return_value=1_000_000.0)


@pytest.fixture(scope="session")
def dummy_hash() -> str:
    return TEST_DUMMY_HASH


@pytest.fixture(scope="session")
def hasher(dummy_hash: str) -> PasswordHasher:
    return PasswordHasher(rounds=4, fallback_hash=dummy_hash)


@pytest.fixture(scope="session")
def alice_password() -> str:
    return ALICE_PASSWORD


@pytest.fixture(scope="session")
def alice_record(hasher: PasswordHasher, alice_password: str) -> CredentialRecord:
    return CredentialRecord(
        id="8d2f6a1e-3c4b-4f5a-9e7d-1a2b3c4d5e6f",
        email="alice@example.com",
        password_hash=hasher.hash(alice_password),
        name="Alice",
        avatar="https://example.com/alice.png",
    )


@pytest.fixture
def store(alice_record: CredentialRecord) -> InMemoryCredentialStore:
    return InMemoryCredentialStore([alice_record])
