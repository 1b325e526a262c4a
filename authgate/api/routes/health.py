from __future__ import annotations

from fastapi import APIRouter, Request

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(request: Request) -> dict:
    """Liveness probe.

    Also reports whether the rate limit cleanup task is running, which is
    the only background work this service owns.
    """

    cleanup_task = getattr(request.app.state, "rate_limit_cleanup", None)
    return {
        "status": "ok",
        "rate_limit_cleanup": bool(cleanup_task and cleanup_task.running),
    }
