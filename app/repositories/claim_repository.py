"""Repository for claim data access operations."""

from datetime import date
from decimal import Decimal
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models import Claim
from app.repositories.base_repository import BaseRepository


class ClaimRepository(BaseRepository[Claim]):
    """Repository for Claim entity operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Claim)

    async def list_for_car(self, car_id: int) -> List[Claim]:
        """List a car's claims in insertion (ID) order."""
        stmt = select(Claim).where(Claim.car_id == car_id).order_by(Claim.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create_claim(
        self,
        car_id: int,
        claim_date: date,
        description: str,
        amount: Decimal,
    ) -> Claim:
        return await self.create(
            car_id=car_id,
            claim_date=claim_date,
            description=description,
            amount=amount,
        )
