"""Application-level exception types.

This module defines domain errors used across services/adapters, enabling
consistent error handling, logging, and API responses.

Only two outcomes of a login attempt may reach a caller: invalid credentials
and rate limiting. Hashing failures are operational and surface as 500s.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, NotRequired, TypedDict


class ErrorDetails(TypedDict, total=False):
    """Structured error context for observability and clients."""

    code: str
    message: str
    hint: str
    http_status: int
    retry_after: int
    request_id: str
    context: NotRequired[dict[str, Any]]


@dataclass
class AppError(Exception):
    """Base error for application/domain failures.

    Attributes:
        code: Stable, machine-readable error code.
        message: Human-readable error message.
        details: Optional structured details for debugging/observability.
    """

    code: str
    message: str
    details: ErrorDetails | None = None

    def __post_init__(self) -> None:
        # Populate Exception args so str(error) is useful in logs/tracebacks.
        super().__init__(self.message)


class AuthenticationAppError(AppError):
    """Raised when authentication fails."""


class InvalidCredentialsAppError(AuthenticationAppError):
    """Uniform login failure: unknown account, wrong password or bad stored hash."""

    def __init__(self) -> None:
        super().__init__(
            code="invalid_credentials",
            message="Invalid email or password",
        )


class RateLimitedAppError(AppError):
    """Raised when an origin has exhausted its failed-login budget."""

    def __init__(self, retry_after_seconds: int) -> None:
        super().__init__(
            code="rate_limited",
            message="Too many failed login attempts. Try again later.",
            details={"retry_after": retry_after_seconds},
        )
        self.retry_after_seconds = retry_after_seconds


class HashingAppError(AppError):
    """Raised when the password hasher cannot complete (resource exhaustion)."""
