"""Repository for owner data access operations."""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.database.models import Owner
from app.repositories.base_repository import BaseRepository
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class OwnerRepository(BaseRepository[Owner]):
    """Repository for Owner entity operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(session, Owner)

    async def create_owner(self, name: str, email: Optional[str] = None) -> Owner:
        """Insert a new owner.

        Args:
            name: Owner display name
            email: Optional contact email

        Returns:
            Created Owner instance
        """
        owner = await self.create(name=name, email=email)
        LOGGER.info(f"Created owner: {owner.id} ({owner.name})")
        return owner
