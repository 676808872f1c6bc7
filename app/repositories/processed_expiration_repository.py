"""Repository for the processed-expiration dedup ledger."""

from datetime import date, datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models import ProcessedExpiration
from app.repositories.base_repository import BaseRepository


class ProcessedExpirationRepository(BaseRepository[ProcessedExpiration]):
    """Append-only access to ProcessedExpiration rows."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, ProcessedExpiration)

    def stage(
        self,
        policy_id: int,
        expiration_date: date,
        processed_at: datetime,
    ) -> ProcessedExpiration:
        """Add a ledger row to the session without committing.

        The caller commits all rows staged during one detector run together.

        Args:
            policy_id: Reported policy
            expiration_date: Policy end date snapshot
            processed_at: When the expiration was reported

        Returns:
            The pending ProcessedExpiration instance
        """
        row = ProcessedExpiration(
            policy_id=policy_id,
            expiration_date=expiration_date,
            processed_at=processed_at,
        )
        self.session.add(row)
        return row

    async def get_by_policy_id(self, policy_id: int) -> Optional[ProcessedExpiration]:
        stmt = select(ProcessedExpiration).where(ProcessedExpiration.policy_id == policy_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
