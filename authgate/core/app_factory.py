"""Application factory for the FastAPI app.

Centralizes app construction (metadata, middleware, handlers, routers and
the lifespan that owns background work) so tests can build isolated
instances with their own credential store and limiter.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from authgate.adapters.credentials.base import AbstractCredentialStore
from authgate.adapters.credentials.in_memory import InMemoryCredentialStore
from authgate.adapters.rate_limit.base import AbstractFailureRateLimiter
from authgate.api.routes import auth_router, health_router
from authgate.core.config import settings
from authgate.core.exception_handlers import setup_exception_handlers
from authgate.core.logging import configure_logging
from authgate.core.middleware import request_id_middleware
from authgate.core.rate_limit import build_authentication_service
from authgate.services.password_hasher import PasswordHasher
from authgate.services.rate_limit_cleanup import RateLimitCleanupTask

logger = logging.getLogger(__name__)


def create_app(
    credential_store: AbstractCredentialStore | None = None,
    *,
    limiter: AbstractFailureRateLimiter | None = None,
    hasher: PasswordHasher | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Args:
        credential_store: Account lookup; an empty in-memory store when omitted.
        limiter: Optional rate limiter override (e.g., a shared store).
        hasher: Optional password hasher override.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    configure_logging(settings.log)

    service = build_authentication_service(
        credential_store or InMemoryCredentialStore(),
        limiter=limiter,
        hasher=hasher,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        """Start the rate limit cleanup timer and stop it on shutdown."""
        cleanup_task: RateLimitCleanupTask | None = None
        if settings.auth.rate_limit_cleanup_enabled:
            cleanup_task = RateLimitCleanupTask(
                service.limiter,
                interval_seconds=settings.auth.rate_limit_cleanup_interval_seconds,
                config=service.rate_limit_config,
            )
            await cleanup_task.start()
        app.state.rate_limit_cleanup = cleanup_task
        logger.info("app.startup", extra={"cleanup_enabled": cleanup_task is not None})
        try:
            yield
        finally:
            if cleanup_task is not None:
                await cleanup_task.stop()
            app.state.rate_limit_cleanup = None
            logger.info("app.shutdown")

    app = FastAPI(
        title=settings.app.name,
        description=(
            "Email/password authentication with timing-safe verification and "
            "per-origin throttling of failed attempts."
        ),
        version="0.1.0",
        debug=settings.app.debug,
        lifespan=lifespan,
    )
    app.state.authentication_service = service
    app.state.rate_limit_cleanup = None

    # Middleware
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(auth_router, prefix="/v1")
    app.include_router(health_router)

    return app
