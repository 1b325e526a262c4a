"""Login throttling wiring for the HTTP layer.

This module builds the limiter and authentication service from settings and
exposes them to routes as FastAPI dependencies.

Design goals:
- Minimal coupling: routes depend on dependency functions only.
- Swap-friendly: the limiter and credential store sit behind abstract
  interfaces and are injected by the app factory.
- No import-time side effects: objects live on ``app.state`` and the cleanup
  timer is owned by the application lifespan.

Rate limiting key: the client origin (network address). Behind a trusted
reverse proxy, the first ``X-Forwarded-For`` hop can be used instead.
"""

from __future__ import annotations

import logging

from fastapi import Request

from authgate.adapters.credentials.base import AbstractCredentialStore
from authgate.adapters.rate_limit.base import AbstractFailureRateLimiter
from authgate.adapters.rate_limit.in_memory import InMemorySlidingWindowRateLimiter
from authgate.core.config import AuthSettings, settings
from authgate.services.authentication_service import AuthenticationService
from authgate.services.password_hasher import PasswordHasher

logger = logging.getLogger(__name__)

UNKNOWN_ORIGIN = "unknown"


def build_authentication_service(
    store: AbstractCredentialStore,
    *,
    limiter: AbstractFailureRateLimiter | None = None,
    hasher: PasswordHasher | None = None,
    auth_settings: AuthSettings | None = None,
) -> AuthenticationService:
    """Assemble the authentication service from configuration.

    Args:
        store: Credential lookup supplied by the hosting application.
        limiter: Optional limiter; an in-memory one is built when omitted.
        hasher: Optional hasher; built from ``bcrypt_rounds`` when omitted.
        auth_settings: Optional settings; defaults to global settings.

    Returns:
        AuthenticationService: Ready-to-use service instance.
    """

    cfg = auth_settings or settings.auth
    rate_limit_config = cfg.rate_limit_config()

    return AuthenticationService(
        store=store,
        hasher=hasher or PasswordHasher(rounds=cfg.bcrypt_rounds, fallback_hash=cfg.dummy_password_hash),
        limiter=limiter or InMemorySlidingWindowRateLimiter(rate_limit_config),
        dummy_hash=cfg.dummy_password_hash,
        rate_limit_config=rate_limit_config,
    )


def get_client_origin(request: Request) -> str:
    """Resolve the rate limiting key for the current request.

    Args:
        request: FastAPI request.

    Returns:
        str: Client address, or ``"unknown"`` when the transport has none.
    """

    if settings.auth.trust_forwarded_for:
        forwarded = request.headers.get("X-Forwarded-For", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop

    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_ORIGIN


def get_authentication_service(request: Request) -> AuthenticationService:
    """FastAPI dependency returning the app's authentication service."""

    return request.app.state.authentication_service
