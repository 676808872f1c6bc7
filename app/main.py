"""FastAPI application entry point."""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI
from pydantic import BaseModel, Field

from app.api.v1.endpoints import health
from app.api.v1.router import api_router
from app.core.config import settings
from app.core.database import async_session_maker, close_database, init_database
from app.services.expiration.poller import PolicyExpirationPoller
from app.utils.logging import get_logger

LOGGER = get_logger(__name__, level=settings.log_level)


class RootResponse(BaseModel):
    """Service banner returned at ``/``."""

    message: str = Field(..., description="Service status message")
    version: str = Field(..., description="Running application version")
    api_prefix: str = Field(..., description="Prefix of the versioned REST API")
    health: str = Field(..., description="Path to the health check endpoint")


async def _initialize_database() -> None:
    """Create missing tables, giving up after ``db_init_timeout`` seconds.

    Failures are logged and startup continues; requests then fail until the
    database becomes reachable.
    """
    try:
        await asyncio.wait_for(init_database(create_tables=True), timeout=settings.db_init_timeout)
    except asyncio.TimeoutError:
        LOGGER.error(f"Database initialization timed out after {settings.db_init_timeout}s")
    except Exception as e:
        LOGGER.error(f"Database initialization failed: {e}", exc_info=True)


def build_expiration_poller() -> PolicyExpirationPoller:
    options = settings.policy_expiration
    return PolicyExpirationPoller(
        session_factory=async_session_maker,
        check_interval_seconds=options.check_interval_seconds,
        max_hours_since_expiration=options.max_hours_since_expiration,
        startup_delay_seconds=options.startup_delay_seconds,
        error_backoff_seconds=options.error_backoff_seconds,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Bring up the database and the expiration poller; tear down in reverse."""
    LOGGER.info(
        f"Starting {settings.app_name} {settings.app_version}",
        extra={"environment": settings.environment},
    )
    await _initialize_database()

    poller: Optional[PolicyExpirationPoller] = None
    if settings.policy_expiration.enabled:
        poller = build_expiration_poller()
        poller.start()
        app.state.expiration_poller = poller
    else:
        LOGGER.info("Policy expiration poller disabled by configuration")

    yield

    LOGGER.info("Shutting down application")
    if poller is not None:
        await poller.stop()
    await close_database()


app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description="Owners, cars, insurance policies and claims, with expiration tracking",
    lifespan=lifespan,
)

app.include_router(api_router, prefix=settings.api_v1_prefix)
app.include_router(health.router, prefix="/health", tags=["Health"])


@app.get(
    "/",
    response_model=RootResponse,
    tags=["Root"],
    summary="Service banner",
    operation_id="get_root",
)
async def root() -> RootResponse:
    return RootResponse(
        message="Server is running",
        version=settings.app_version,
        api_prefix=settings.api_v1_prefix,
        health="/health",
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
