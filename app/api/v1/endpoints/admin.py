"""Administrative endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.errors import to_http_exception
from app.core.config import settings
from app.core.database import get_async_session
from app.core.exceptions import AppError
from app.schemas.expiration import ExpirationCheckResponse
from app.services.expiration.detector import PolicyExpirationService
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


async def get_expiration_service(
    db_session: Annotated[AsyncSession, Depends(get_async_session)]
) -> PolicyExpirationService:
    """Dependency for the expiration detector."""
    return PolicyExpirationService(
        db_session, settings.policy_expiration.max_hours_since_expiration
    )


@router.post(
    "/check-expirations",
    response_model=ExpirationCheckResponse,
    summary="Run the policy expiration check now",
    operation_id="check_expirations",
)
async def check_expirations(
    expiration_service: Annotated[PolicyExpirationService, Depends(get_expiration_service)],
) -> ExpirationCheckResponse:
    """Synchronously run one expiration detector pass.

    Failures are not retried here: storage errors return 503 and anything
    else surfaces as a server error.
    """
    LOGGER.info("Manual expiration check requested")
    try:
        result = await expiration_service.check_and_log_expired_policies()
    except AppError as e:
        raise to_http_exception(e) from e

    return ExpirationCheckResponse(
        message="Expiration check completed. Check logs for details.",
        result=result,
    )
