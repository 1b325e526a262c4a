"""In-memory credential store.

Emails are matched case-insensitively. Thread-safe: uses a lock around
shared state.
"""

from __future__ import annotations

import threading

from authgate.adapters.credentials.base import AbstractCredentialStore, CredentialRecord


def _normalize(identifier: str) -> str:
    return identifier.strip().casefold()


class InMemoryCredentialStore(AbstractCredentialStore):
    """Credential store kept in a process-local dict."""

    def __init__(self, records: list[CredentialRecord] | None = None) -> None:
        self._lock = threading.RLock()
        self._records: dict[str, CredentialRecord] = {}
        for record in records or []:
            self.add(record)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def add(self, record: CredentialRecord) -> None:
        """Insert or replace the record stored under its email.

        Raises:
            ValueError: If the record has an empty email.
        """
        key = _normalize(record.email)
        if not key:
            raise ValueError("record email must be a non-empty string")
        with self._lock:
            self._records[key] = record

    def find_by_identifier(self, identifier: str) -> CredentialRecord | None:
        with self._lock:
            return self._records.get(_normalize(identifier))
