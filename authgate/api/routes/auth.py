from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends

from authgate.core.rate_limit import get_authentication_service, get_client_origin
from authgate.schemas.auth import LoginRequest, UserPublic
from authgate.services.authentication_service import AuthenticationService

router = APIRouter(tags=["Auth"])


@router.post(
    "/auth/login",
    response_model=UserPublic,
    responses={
        401: {"description": "Invalid email or password"},
        429: {"description": "Too many failed attempts from this origin; see Retry-After"},
    },
)
def login(
    credentials: LoginRequest,
    origin: Annotated[str, Depends(get_client_origin)],
    service: Annotated[AuthenticationService, Depends(get_authentication_service)],
) -> UserPublic:
    """Authenticate an email/password pair.

    Declared as a plain function so FastAPI runs the bcrypt work in its
    threadpool instead of on the event loop.

    Args:
        credentials: Email and password from the request body.
        origin: Client origin used as the rate limiting key.
        service: Authentication service bound to the application.

    Returns:
        UserPublic: The authenticated account without credential material.

    Raises:
        InvalidCredentialsAppError: Rendered as 401 by the global handler.
        RateLimitedAppError: Rendered as 429 with Retry-After.
    """
    return service.authenticate(credentials.email, credentials.password, origin)
