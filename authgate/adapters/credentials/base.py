"""Credential store interfaces."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CredentialRecord:
    """Stored account as seen by the authentication service.

    Attributes:
        id: Stable account identifier.
        email: Login identifier.
        password_hash: bcrypt hash of the account password.
        name: Optional display name.
        avatar: Optional avatar URL.
    """

    id: str
    email: str
    password_hash: str
    name: str | None = None
    avatar: str | None = None

    def __repr__(self) -> str:
        return f"CredentialRecord(id={self.id!r}, email={self.email!r})"

    def public_fields(self) -> dict[str, Any]:
        """Return every field except the password hash."""
        return {
            "id": self.id,
            "email": self.email,
            "name": self.name,
            "avatar": self.avatar,
        }


class AbstractCredentialStore(ABC):
    """Interface for account lookups."""

    @abstractmethod
    def find_by_identifier(self, identifier: str) -> CredentialRecord | None:
        """Look up an account by login identifier.

        Args:
            identifier: Login identifier (email) as supplied by the caller.

        Returns:
            The matching record, or None if no account exists.
        """
        raise NotImplementedError
