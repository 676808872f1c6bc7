"""Health check API endpoints."""

from typing import Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

from app.core.config import settings
from app.core.database import db_client

router = APIRouter()


class PollerStatus(BaseModel):
    state: str
    scans: int
    failures: int
    last_scan_at: Optional[str] = None
    last_error: Optional[str] = None


class HealthCheckResponse(BaseModel):
    status: str = Field(..., description="healthy, or degraded when the database is unreachable")
    version: str = Field(..., description="Running application version")
    service: str = Field(..., description="Service name")
    database: str = Field(..., description="Database backend in use")
    expiration_poller: Optional[PollerStatus] = Field(
        default=None, description="Expiration poller counters; null when the poller is disabled"
    )


@router.get(
    "/",
    response_model=HealthCheckResponse,
    summary="Health check endpoint",
    operation_id="get_service_health_status",
)
async def health_check(request: Request) -> HealthCheckResponse:
    db_health = await db_client.health_check()
    poller = getattr(request.app.state, "expiration_poller", None)

    return HealthCheckResponse(
        status="healthy" if db_health["status"] == "healthy" else "degraded",
        version=settings.app_version,
        service=settings.app_name,
        database=db_health["backend"],
        expiration_poller=PollerStatus(**poller.status()) if poller is not None else None,
    )
