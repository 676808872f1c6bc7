"""Request-facing operations on owners, cars, policies and claims."""

from datetime import date
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError
from app.database.models import Car, Owner
from app.repositories.car_repository import CarRepository
from app.repositories.claim_repository import ClaimRepository
from app.repositories.owner_repository import OwnerRepository
from app.repositories.policy_repository import PolicyRepository
from app.schemas.cars import (
    CarResponse,
    CreateCarRequest,
    CreateOwnerRequest,
    OwnerResponse,
)
from app.schemas.history import CarHistoryResponse
from app.schemas.policies import (
    ClaimResponse,
    CreateClaimRequest,
    CreatePolicyRequest,
    PolicyResponse,
)
from app.services import validators
from app.services.history_merger import merge_history
from app.services.policy_overlap import find_overlapping
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


def _to_car_response(car: Car, owner: Owner) -> CarResponse:
    return CarResponse(
        id=car.id,
        vin=car.vin,
        make=car.make,
        model=car.model,
        year=car.year_of_manufacture,
        owner_id=car.owner_id,
        owner_name=owner.name,
        owner_email=owner.email,
    )


class CarService:
    """Validates requests and coordinates the car-related repositories.

    Raises ``InvalidInputError`` for bad input, ``NotFoundError`` for missing
    references and ``ConflictError`` for business-rule violations.
    """

    def __init__(self, session: AsyncSession, today: Optional[date] = None):
        """Initialize the service with a database session.

        Args:
            session: Async database session for repository access
            today: Fixed "current date" for validation; defaults to the local date
        """
        self.session = session
        self._today = today
        self.owner_repo = OwnerRepository(session)
        self.car_repo = CarRepository(session)
        self.policy_repo = PolicyRepository(session)
        self.claim_repo = ClaimRepository(session)

    @property
    def today(self) -> date:
        return self._today or date.today()

    async def _require_car(self, car_id: int) -> None:
        if not await self.car_repo.exists(car_id):
            raise NotFoundError("Car", car_id)

    async def create_owner(self, request: CreateOwnerRequest) -> OwnerResponse:
        validators.validate_owner_name(request.name)
        owner = await self.owner_repo.create_owner(request.name.strip(), request.email)
        return OwnerResponse.model_validate(owner)

    async def list_cars(self) -> List[CarResponse]:
        cars = await self.car_repo.list_with_owners()
        return [_to_car_response(car, car.owner) for car in cars]

    async def check_validity(self, car_id: int, on: date) -> bool:
        """Check whether a car is insured on a given day.

        Args:
            car_id: Car ID
            on: Day to check

        Returns:
            True iff some policy of the car has start_date <= on <= end_date

        Raises:
            InvalidInputError: Non-positive car ID or date out of range
            NotFoundError: Car does not exist
        """
        validators.validate_car_id(car_id)
        validators.validate_query_date(on, today=self.today)
        await self._require_car(car_id)

        return await self.policy_repo.any_covering(car_id, on)

    async def create_car(self, request: CreateCarRequest) -> CarResponse:
        """Register a new car for an existing owner.

        Raises:
            InvalidInputError: Bad VIN or year
            ConflictError: VIN already registered
            NotFoundError: Owner does not exist
        """
        validators.validate_vin(request.vin)

        if await self.car_repo.vin_exists(request.vin):
            raise ConflictError(f"A car with VIN '{request.vin}' already exists.")

        validators.validate_year(request.year_of_manufacture)

        owner = None
        if 0 < request.owner_id <= validators.MAX_ID:
            owner = await self.owner_repo.get_by_id(request.owner_id)
        if owner is None:
            raise NotFoundError("Owner", request.owner_id)

        try:
            car = await self.car_repo.create_car(
                vin=request.vin,
                make=request.make,
                model=request.model,
                year_of_manufacture=request.year_of_manufacture,
                owner_id=request.owner_id,
            )
        except IntegrityError as e:
            # Lost a race against a concurrent insert of the same VIN
            raise ConflictError(
                f"A car with VIN '{request.vin}' already exists.", original_error=e
            ) from e

        return _to_car_response(car, owner)

    async def create_policy(self, car_id: int, request: CreatePolicyRequest) -> PolicyResponse:
        """Add a policy to a car.

        Raises:
            InvalidInputError: Bad car ID, provider or dates
            NotFoundError: Car does not exist
            ConflictError: Dates overlap an existing policy of the car
        """
        validators.validate_car_id(car_id)
        await self._require_car(car_id)

        validators.validate_provider(request.provider)
        validators.validate_policy_dates(request.start_date, request.end_date, today=self.today)

        existing = await self.policy_repo.list_for_car(car_id)
        overlapping = find_overlapping(existing, request.start_date, request.end_date)
        if overlapping is not None:
            LOGGER.info(
                f"Rejected policy for car {car_id}: overlaps policy {overlapping.id}",
                extra={"car_id": car_id, "policy_id": overlapping.id},
            )
            raise ConflictError("Policy dates overlap with existing policy.")

        policy = await self.policy_repo.create_policy(
            car_id=car_id,
            provider=request.provider,
            start_date=request.start_date,
            end_date=request.end_date,
        )
        return PolicyResponse.model_validate(policy)

    async def register_claim(self, car_id: int, request: CreateClaimRequest) -> ClaimResponse:
        """Register a claim against a car.

        Raises:
            InvalidInputError: Bad car ID, description, amount or date
            NotFoundError: Car does not exist
        """
        validators.validate_car_id(car_id)
        validators.validate_claim_description(request.description)
        validators.validate_claim_amount(request.amount)
        validators.validate_claim_date(request.claim_date, today=self.today)
        await self._require_car(car_id)

        claim = await self.claim_repo.create_claim(
            car_id=car_id,
            claim_date=request.claim_date,
            description=request.description,
            amount=request.amount,
        )
        return ClaimResponse.model_validate(claim)

    async def get_history(self, car_id: int) -> CarHistoryResponse:
        """Return the car's policy and claim events in date order.

        Raises:
            InvalidInputError: Non-positive car ID
            NotFoundError: Car does not exist
        """
        validators.validate_car_id(car_id)
        await self._require_car(car_id)

        policies = await self.policy_repo.list_for_car(car_id)
        claims = await self.claim_repo.list_for_car(car_id)

        return CarHistoryResponse(car_id=car_id, events=merge_history(policies, claims))
