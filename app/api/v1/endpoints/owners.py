"""Owner API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from app.api.v1.endpoints.cars import get_car_service
from app.api.v1.errors import to_http_exception
from app.core.exceptions import AppError
from app.schemas.cars import CreateOwnerRequest, OwnerResponse
from app.services.car_service import CarService

router = APIRouter()


@router.post(
    "",
    response_model=OwnerResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register an owner",
    operation_id="create_owner",
)
async def create_owner(
    request: CreateOwnerRequest,
    car_service: Annotated[CarService, Depends(get_car_service)],
) -> OwnerResponse:
    try:
        return await car_service.create_owner(request)
    except AppError as e:
        raise to_http_exception(e) from e
