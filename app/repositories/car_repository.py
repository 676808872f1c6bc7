"""Repository for car data access operations."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.database.models import Car
from app.repositories.base_repository import BaseRepository
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class CarRepository(BaseRepository[Car]):
    """Repository for Car entity operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Car)

    async def vin_exists(self, vin: str) -> bool:
        """Check whether a car with this VIN is already registered.

        Args:
            vin: Vehicle identification number

        Returns:
            True if the VIN is taken
        """
        stmt = select(Car.id).where(Car.vin == vin).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def list_with_owners(self) -> List[Car]:
        """List all cars with their owners loaded, ordered by ID."""
        stmt = select(Car).options(selectinload(Car.owner)).order_by(Car.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create_car(
        self,
        vin: str,
        make: Optional[str],
        model: Optional[str],
        year_of_manufacture: int,
        owner_id: int,
    ) -> Car:
        """Insert a new car.

        The unique constraint on ``vin`` still applies; a concurrent insert
        of the same VIN surfaces as ``IntegrityError``.

        Returns:
            Created Car instance
        """
        car = await self.create(
            vin=vin,
            make=make,
            model=model,
            year_of_manufacture=year_of_manufacture,
            owner_id=owner_id,
        )
        LOGGER.info(f"Created car: {car.id} (VIN {car.vin})")
        return car
