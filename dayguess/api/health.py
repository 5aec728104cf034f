import logging

from fastapi import APIRouter, Request

from dayguess.core.logging import get_request_id

logger = logging.getLogger("dayguess")

router = APIRouter(tags=["health"])


@router.get("/healthz")
def healthz(request: Request):
    """Lightweight liveness check (no deps)."""
    pool = getattr(request.app.state, "pool", ())
    logger.info("health.ok", extra={"request_id": get_request_id(), "pool_size": len(pool)})
    return {"status": "ok", "pool_size": len(pool)}
