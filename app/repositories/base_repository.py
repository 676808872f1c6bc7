from typing import Generic, Optional, Type, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.utils.logging import get_logger

ModelType = TypeVar("ModelType")

LOGGER = get_logger(__name__)


class BaseRepository(Generic[ModelType]):
    """Shared reads and inserts for an append-only table.

    Owners, cars, policies, claims and ledger rows are never updated or
    deleted, so there is no update or delete here.
    """

    def __init__(self, session: AsyncSession, model: Type[ModelType]):
        """Bind the repository to a session and a mapped class.

        Args:
            session: SQLAlchemy async session
            model: Mapped class stored by this repository
        """
        self.session = session
        self.model = model

    @property
    def entity_name(self) -> str:
        return self.model.__name__

    async def get_by_id(self, entity_id: int) -> Optional[ModelType]:
        """Load one row by primary key, or None when absent."""
        return await self.session.get(self.model, entity_id)

    async def exists(self, entity_id: int) -> bool:
        stmt = select(self.model.id).where(self.model.id == entity_id).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def count(self) -> int:
        result = await self.session.execute(select(func.count()).select_from(self.model))
        return result.scalar_one()

    async def create(self, **values) -> ModelType:
        """Insert one row and commit it.

        Args:
            **values: Column values for the new row

        Returns:
            The persisted instance with its generated ID

        Raises:
            SQLAlchemyError: After rolling the session back; constraint
                violations arrive as ``IntegrityError``
        """
        instance = self.model(**values)
        self.session.add(instance)
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            LOGGER.error(
                f"Failed to insert {self.entity_name}: {e}",
                extra={"entity": self.entity_name},
            )
            raise
        return instance
