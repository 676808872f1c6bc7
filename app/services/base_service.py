from abc import ABC, abstractmethod
from typing import Any, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AppError, TransientError
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class BaseService(ABC):
    """Base class for services that own a unit of work on one session.

    ``execute`` wraps ``run``: domain errors pass through untouched, while a
    storage failure rolls the session back and surfaces as ``TransientError``
    so nothing from a half-finished run is persisted.
    """

    def __init__(self, session: Optional[AsyncSession] = None):
        self.session = session

    async def execute(self, *args, **kwargs) -> Any:
        """Validate the input, then run the service.

        Raises:
            AppError: Domain errors raised by ``validate`` or ``run``
            TransientError: If the storage layer fails
        """
        self.validate(*args, **kwargs)

        try:
            return await self.run(*args, **kwargs)
        except AppError:
            raise
        except SQLAlchemyError as e:
            LOGGER.error(
                f"Storage failure in {self.__class__.__name__}, rolling back: {e}",
                extra={"service": self.__class__.__name__},
            )
            if self.session is not None:
                await self.session.rollback()
            raise TransientError(f"Storage failure: {e}", original_error=e) from e

    def validate(self, *args, **kwargs) -> None:
        """Hook for input checks; raise ``InvalidInputError`` to reject."""

    @abstractmethod
    async def run(self, *args, **kwargs) -> Any:
        """Core logic, implemented by subclasses."""
