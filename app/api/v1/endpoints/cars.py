"""Car, policy, claim and history API endpoints."""

from datetime import date
from typing import Annotated, List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.errors import error_detail, to_http_exception
from app.core.database import get_async_session
from app.core.exceptions import AppError, InvalidInputError
from app.schemas.cars import CarResponse, CreateCarRequest, InsuranceValidityResponse
from app.schemas.history import CarHistoryResponse
from app.schemas.policies import (
    ClaimResponse,
    CreateClaimRequest,
    CreatePolicyRequest,
    PolicyResponse,
)
from app.services.car_service import CarService
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)

router = APIRouter()


async def get_car_service(
    db_session: Annotated[AsyncSession, Depends(get_async_session)]
) -> CarService:
    """Dependency for car service."""
    return CarService(db_session)


def _parse_query_date(raw: str) -> date:
    try:
        return date.fromisoformat(raw)
    except ValueError as e:
        error = InvalidInputError("date", "Invalid date format. Use YYYY-MM-DD.", original_error=e)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=error_detail(error)
        ) from e


@router.get(
    "",
    response_model=List[CarResponse],
    summary="List all cars",
    operation_id="list_cars",
)
async def list_cars(
    car_service: Annotated[CarService, Depends(get_car_service)],
) -> List[CarResponse]:
    """List all registered cars with their owners."""
    return await car_service.list_cars()


@router.post(
    "",
    response_model=CarResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a car",
    operation_id="create_car",
)
async def create_car(
    request: CreateCarRequest,
    car_service: Annotated[CarService, Depends(get_car_service)],
) -> CarResponse:
    """Register a car for an existing owner.

    Raises:
        HTTPException 400: Invalid VIN or year
        HTTPException 404: Owner not found
        HTTPException 409: VIN already registered
    """
    try:
        return await car_service.create_car(request)
    except AppError as e:
        LOGGER.info(f"Car creation rejected: {e}", extra={"vin": request.vin})
        raise to_http_exception(e) from e


@router.get(
    "/{car_id}/insurance-valid",
    response_model=InsuranceValidityResponse,
    summary="Check whether a car is insured on a date",
    operation_id="check_insurance_validity",
)
async def check_insurance_validity(
    car_id: int,
    car_service: Annotated[CarService, Depends(get_car_service)],
    date_param: str = Query(..., alias="date", description="Day to check (YYYY-MM-DD)"),
) -> InsuranceValidityResponse:
    """Check insurance validity for one day.

    Raises:
        HTTPException 400: Malformed or out-of-range date, or non-positive car ID
        HTTPException 404: Car not found
    """
    on = _parse_query_date(date_param)
    try:
        valid = await car_service.check_validity(car_id, on)
    except AppError as e:
        raise to_http_exception(e) from e

    return InsuranceValidityResponse(car_id=car_id, date=on, valid=valid)


@router.post(
    "/{car_id}/policies",
    response_model=PolicyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add an insurance policy to a car",
    operation_id="create_policy",
)
async def create_policy(
    car_id: int,
    request: CreatePolicyRequest,
    car_service: Annotated[CarService, Depends(get_car_service)],
) -> PolicyResponse:
    """Create a policy; overlapping date ranges are rejected with 409."""
    try:
        return await car_service.create_policy(car_id, request)
    except AppError as e:
        raise to_http_exception(e) from e


@router.post(
    "/{car_id}/claims",
    response_model=ClaimResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a claim for a car",
    operation_id="register_claim",
)
async def register_claim(
    car_id: int,
    request: CreateClaimRequest,
    car_service: Annotated[CarService, Depends(get_car_service)],
) -> ClaimResponse:
    try:
        return await car_service.register_claim(car_id, request)
    except AppError as e:
        raise to_http_exception(e) from e


@router.get(
    "/{car_id}/history",
    response_model=CarHistoryResponse,
    summary="Get a car's policy and claim history",
    operation_id="get_car_history",
)
async def get_car_history(
    car_id: int,
    car_service: Annotated[CarService, Depends(get_car_service)],
) -> CarHistoryResponse:
    """Return policy start/end and claim events sorted by date."""
    try:
        return await car_service.get_history(car_id)
    except AppError as e:
        raise to_http_exception(e) from e
