"""Login orchestration: throttle check, account lookup, timing-safe verification.

This service is the only component that decides whether a login succeeds.
It handles:
- Refusing blocked origins before any lookup or hashing work
- Verifying against a fixed dummy hash when the account does not exist, so
  response time does not reveal whether the email is registered
- Reporting exactly one outcome (failure or success) to the rate limiter
- Collapsing every credential failure into one uniform error
"""

from __future__ import annotations

import logging
import math

from authgate.adapters.credentials.base import AbstractCredentialStore
from authgate.adapters.rate_limit.base import AbstractFailureRateLimiter, RateLimitConfig
from authgate.core.errors import InvalidCredentialsAppError, RateLimitedAppError
from authgate.core.logging import hash_identifier
from authgate.schemas.auth import UserPublic
from authgate.services.password_hasher import DUMMY_PASSWORD_HASH, PasswordHasher

logger = logging.getLogger(__name__)


class AuthenticationService:
    """Authenticate email/password pairs on behalf of an origin."""

    def __init__(
        self,
        *,
        store: AbstractCredentialStore,
        hasher: PasswordHasher,
        limiter: AbstractFailureRateLimiter,
        dummy_hash: str = DUMMY_PASSWORD_HASH,
        rate_limit_config: RateLimitConfig | None = None,
    ) -> None:
        """Wire the service to its collaborators.

        Args:
            store: Account lookup.
            hasher: Password hasher; its cost factor should match ``dummy_hash``.
            limiter: Failed-attempt limiter keyed by origin.
            dummy_hash: bcrypt hash verified when the account does not exist.
            rate_limit_config: Optional policy passed to every limiter call.
        """
        self._store = store
        self._hasher = hasher
        self._limiter = limiter
        self._dummy_hash = dummy_hash
        self._rate_limit_config = rate_limit_config

        dummy_cost = PasswordHasher.get_cost(dummy_hash)
        if dummy_cost != hasher.rounds:
            logger.warning(
                "auth.dummy_hash_cost_mismatch",
                extra={"dummy_cost": dummy_cost, "bcrypt_rounds": hasher.rounds},
            )

    @property
    def limiter(self) -> AbstractFailureRateLimiter:
        return self._limiter

    @property
    def rate_limit_config(self) -> RateLimitConfig | None:
        return self._rate_limit_config

    def authenticate(self, identifier: str, plaintext: str, origin_id: str) -> UserPublic:
        """Authenticate a login attempt.

        Args:
            identifier: Login identifier (email).
            plaintext: Password supplied by the caller.
            origin_id: Rate limit key for the caller (e.g., client IP).

        Returns:
            Public fields of the authenticated account.

        Raises:
            RateLimitedAppError: The origin is blocked; nothing else was attempted.
            InvalidCredentialsAppError: Unknown account or wrong password.
            HashingAppError: The hasher ran out of resources; not counted as a failure.
        """
        origin_tag = hash_identifier(origin_id)

        if self._limiter.is_blocked(origin_id, self._rate_limit_config):
            remaining = self._limiter.time_until_unblocked(origin_id)
            retry_after = max(1, math.ceil(remaining))
            logger.warning(
                "auth.rate_limited",
                extra={"origin_hash": origin_tag, "retry_after_s": retry_after},
            )
            raise RateLimitedAppError(retry_after_seconds=retry_after)

        record = self._store.find_by_identifier(identifier)
        stored_hash = record.password_hash if record is not None else self._dummy_hash

        # Always pay the hashing cost, account or not.
        password_ok = self._hasher.verify(plaintext, stored_hash)

        if record is None or not password_ok:
            entry = self._limiter.record_failure(origin_id, self._rate_limit_config)
            logger.info(
                "auth.failure",
                extra={
                    "origin_hash": origin_tag,
                    "identifier_hash": hash_identifier(identifier),
                    "attempts": entry.attempts,
                },
            )
            raise InvalidCredentialsAppError()

        self._limiter.record_success(origin_id)
        logger.info(
            "auth.success",
            extra={"origin_hash": origin_tag, "user_id": record.id},
        )
        return UserPublic(**record.public_fields())
