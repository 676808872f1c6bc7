"""Async engine, session factory and schema bootstrap.

The request handlers and the expiration poller both draw sessions from
``async_session_maker``; a session is never shared between the two.
"""

from collections.abc import AsyncGenerator
from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from app.core.config import settings
from app.utils.logging import get_logger

LOGGER = get_logger(__name__)


class Base(DeclarativeBase):
    """Declarative base for the owner, car, policy, claim and ledger tables."""

    pass


def _engine_options() -> Dict[str, Any]:
    options: Dict[str, Any] = {"echo": settings.database_echo, "future": True}
    if settings.db.is_sqlite:
        # SQLite pools do not accept sizing arguments
        return options
    options.update(
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_pre_ping=True,
    )
    return options


engine = create_async_engine(settings.database_url, **_engine_options())

async_session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding one session per request.

    Yields:
        AsyncSession: Database session
    """
    async with async_session_maker() as session:
        yield session


class DatabaseClient:
    """Connectivity checks and table creation for one engine."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    @property
    def backend(self) -> str:
        return self.engine.dialect.name

    async def _ping(self) -> bool:
        async with self.engine.connect() as conn:
            return await conn.scalar(text("SELECT 1")) == 1

    async def connect(self) -> None:
        """Verify the database answers; raises on failure."""
        try:
            await self._ping()
        except Exception:
            LOGGER.error(f"Cannot reach {self.backend} database", exc_info=True)
            raise

        LOGGER.info(f"Connected to {self.backend} database")

    async def create_tables(self) -> None:
        """Create missing tables; existing tables and rows are left alone."""
        # Importing the models registers them on Base.metadata
        from app.database import models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        LOGGER.info(
            "Database schema ready",
            extra={"tables": sorted(Base.metadata.tables)},
        )

    async def dispose(self) -> None:
        await self.engine.dispose()
        LOGGER.info("Database connection pool disposed")

    async def health_check(self) -> dict:
        """Report whether the database currently answers queries."""
        try:
            responsive = await self._ping()
        except Exception as e:
            LOGGER.error("Database health check failed", extra={"error": str(e)})
            return {"status": "unhealthy", "backend": self.backend, "error": str(e)}

        return {"status": "healthy" if responsive else "unhealthy", "backend": self.backend}


db_client = DatabaseClient(engine)


async def init_database(create_tables: bool = True) -> None:
    """Check connectivity and optionally create the schema.

    Args:
        create_tables: Whether to create missing tables on startup
    """
    await db_client.connect()
    if create_tables:
        await db_client.create_tables()


async def close_database() -> None:
    """Dispose the engine; errors are logged, not raised, during shutdown."""
    try:
        await db_client.dispose()
    except Exception as e:
        LOGGER.error("Error closing database", exc_info=True, extra={"error": str(e)})
