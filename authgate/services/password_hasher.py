"""Password hashing and verification backed by bcrypt.

Hashes are self-describing (``$2b$<cost>$<salt><digest>``), so verification
needs nothing but the plaintext and the stored value. The cost factor is a
process-level setting; callers never choose it per call.

Verification cost depends only on the cost factor embedded in the stored
hash, which is what lets the authentication service hide whether an account
exists by verifying against ``DUMMY_PASSWORD_HASH`` instead.
"""

from __future__ import annotations

import logging
import re

import bcrypt

from authgate.core.errors import HashingAppError

logger = logging.getLogger(__name__)

DEFAULT_ROUNDS = 12

# bcrypt only reads the first 72 bytes of a password; newer releases raise
# instead of truncating, so truncate up front.
BCRYPT_MAX_PASSWORD_BYTES = 72

# Fixed bcrypt hash (cost 12) that matches no password in use. Verified in
# place of a real hash when the account lookup comes back empty.
DUMMY_PASSWORD_HASH = "$2b$12$N9qo8uLOickgx2ZMRZoMyeIjZAgcfl7p92ldGxad68LJZdL17lhWy"

_BCRYPT_HASH_RE = re.compile(r"^\$2[abxy]?\$(\d{2})\$[./A-Za-z0-9]{53}$")


def _encode_password(plaintext: str) -> bytes:
    return plaintext.encode("utf-8")[:BCRYPT_MAX_PASSWORD_BYTES]


class PasswordHasher:
    """Hash and verify passwords with a fixed bcrypt cost factor.

    Attributes:
        rounds: bcrypt cost factor (log2 of the key expansion iterations).
        fallback_hash: Well-formed hash verified in place of a malformed one.
    """

    def __init__(self, rounds: int = DEFAULT_ROUNDS, fallback_hash: str = DUMMY_PASSWORD_HASH) -> None:
        if not 4 <= rounds <= 31:
            raise ValueError("rounds must be between 4 and 31")
        if self.get_cost(fallback_hash) is None:
            raise ValueError("fallback_hash must be a well-formed bcrypt hash")
        self.rounds = rounds
        self.fallback_hash = fallback_hash

    def __repr__(self) -> str:  # pragma: no cover - representation only
        return f"PasswordHasher(rounds={self.rounds})"

    def hash(self, plaintext: str) -> str:
        """Hash a plaintext password with a fresh random salt.

        Args:
            plaintext: Password to hash.

        Returns:
            bcrypt hash string embedding the cost factor and salt.

        Raises:
            HashingAppError: If the system entropy source or memory is exhausted.
        """
        try:
            salt = bcrypt.gensalt(rounds=self.rounds)
            hashed = bcrypt.hashpw(_encode_password(plaintext), salt)
        except (OSError, MemoryError) as exc:
            logger.error(
                "password_hash.failed",
                extra={"operation": "hash", "error_type": type(exc).__name__},
            )
            raise HashingAppError(
                code="password_hashing_failed",
                message="Password hashing could not be completed",
            ) from exc
        return hashed.decode("ascii")

    def verify(self, plaintext: str, stored_hash: str) -> bool:
        """Check a plaintext password against a stored bcrypt hash.

        Malformed stored hashes never match and do not raise. They still cost
        one bcrypt run against ``fallback_hash``, so a corrupt record takes as
        long to reject as a wrong password.

        Args:
            plaintext: Password supplied by the caller.
            stored_hash: Previously computed bcrypt hash.

        Returns:
            True if the password matches the stored hash.

        Raises:
            HashingAppError: If memory or another system resource is exhausted.
        """
        password = _encode_password(plaintext)
        try:
            return self._checkpw(password, stored_hash)
        except (ValueError, TypeError, AttributeError):
            logger.warning(
                "password_verify.malformed_hash",
                extra={"hash_length": len(stored_hash) if isinstance(stored_hash, str) else 0},
            )

        self._checkpw(password, self.fallback_hash)
        return False

    @staticmethod
    def _checkpw(password: bytes, stored_hash: str) -> bool:
        try:
            return bcrypt.checkpw(password, stored_hash.encode("ascii"))
        except (OSError, MemoryError) as exc:
            logger.error(
                "password_hash.failed",
                extra={"operation": "verify", "error_type": type(exc).__name__},
            )
            raise HashingAppError(
                code="password_verification_failed",
                message="Password verification could not be completed",
            ) from exc

    @staticmethod
    def get_cost(stored_hash: str) -> int | None:
        """Return the cost factor embedded in a bcrypt hash, or None if malformed."""
        match = _BCRYPT_HASH_RE.match(stored_hash or "")
        if not match:
            return None
        return int(match.group(1))
