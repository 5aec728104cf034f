import logging
import os
from contextlib import asynccontextmanager
from typing import Optional, Sequence

from dotenv import load_dotenv
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.middleware.cors import CORSMiddleware

# Load env from the package directory
package_dir = os.path.dirname(os.path.abspath(__file__))
if "PYTEST_CURRENT_TEST" not in os.environ:
    load_dotenv(dotenv_path=os.path.join(package_dir, ".env"))

from dayguess.api import daily, health, share, streaks
from dayguess.core.config import settings, validate_config
from dayguess.core.errors import (
    AppError,
    app_error_handler,
    http_error_handler,
    unhandled_exception_handler,
)
from dayguess.core.logging import configure_logging
from dayguess.core.middleware.request_id import RequestIdMiddleware
from dayguess.core.storage import KeyValueStorage, build_storage
from dayguess.features.pool.loader import get_pool, load_pool
from dayguess.models.pool import PoolEntry

configure_logging(settings.ENV)
validate_config(strict=getattr(settings, "CONFIG_STRICT", False))


def create_app(
    storage: Optional[KeyValueStorage] = None,
    pool: Optional[Sequence[PoolEntry]] = None,
) -> FastAPI:
    """Build the HTTP app. Storage and pool default to the configured ones."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger = logging.getLogger("dayguess")
        logger.info(f"Starting dayguess backend (pool={len(app.state.pool)} entries)...")
        try:
            yield
        finally:
            logger.info("Stopping dayguess backend...")

    app = FastAPI(title="Real or Fake Day", lifespan=lifespan)
    app.state.storage = storage if storage is not None else build_storage(settings)
    if pool is not None:
        app.state.pool = tuple(pool)
    elif settings.POOL_PATH:
        app.state.pool = load_pool(settings.POOL_PATH)
    else:
        app.state.pool = get_pool()

    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(health.router)
    app.include_router(daily.router, tags=["daily"])
    app.include_router(streaks.router, tags=["streaks"])
    app.include_router(share.router, tags=["share"])
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
