"""Repository for insurance policy data access operations."""

from datetime import date
from typing import List, Optional

from sqlalchemy import exists, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.database.models import Car, InsurancePolicy, ProcessedExpiration
from app.repositories.base_repository import BaseRepository
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class PolicyRepository(BaseRepository[InsurancePolicy]):
    """Repository for InsurancePolicy entity operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, InsurancePolicy)

    async def list_for_car(self, car_id: int) -> List[InsurancePolicy]:
        """List a car's policies in insertion (ID) order."""
        stmt = (
            select(InsurancePolicy)
            .where(InsurancePolicy.car_id == car_id)
            .order_by(InsurancePolicy.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def any_covering(self, car_id: int, on: date) -> bool:
        """Check whether any policy of the car covers the given day.

        Args:
            car_id: Car ID
            on: Day to check; both policy bounds are inclusive

        Returns:
            True if at least one policy has start_date <= on <= end_date
        """
        stmt = select(
            exists().where(
                InsurancePolicy.car_id == car_id,
                InsurancePolicy.start_date <= on,
                InsurancePolicy.end_date >= on,
            )
        )
        result = await self.session.execute(stmt)
        return bool(result.scalar())

    async def list_expired_unprocessed(self, before: date) -> List[InsurancePolicy]:
        """List policies that ended before ``before`` and have no ledger row.

        The dedup ledger is consulted in SQL (``NOT EXISTS``), so the result
        reflects everything persisted by earlier runs, including runs of
        previous processes.

        Args:
            before: Exclusive upper bound for the policy end date

        Returns:
            Candidate policies with car and owner loaded, ordered by ID
        """
        already_processed = (
            select(ProcessedExpiration.id)
            .where(ProcessedExpiration.policy_id == InsurancePolicy.id)
            .exists()
        )
        stmt = (
            select(InsurancePolicy)
            .where(InsurancePolicy.end_date < before)
            .where(~already_processed)
            .options(selectinload(InsurancePolicy.car).selectinload(Car.owner))
            .order_by(InsurancePolicy.id)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def create_policy(
        self,
        car_id: int,
        provider: Optional[str],
        start_date: date,
        end_date: date,
    ) -> InsurancePolicy:
        """Insert a new policy.

        Returns:
            Created InsurancePolicy instance
        """
        policy = await self.create(
            car_id=car_id,
            provider=provider,
            start_date=start_date,
            end_date=end_date,
        )
        LOGGER.info(
            f"Created policy: {policy.id} for car {car_id} "
            f"({start_date.isoformat()} - {end_date.isoformat()})"
        )
        return policy
