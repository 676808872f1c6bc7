"""Pytest configuration and shared fixtures."""

import os

# Settings are read at import time, so the test environment must be in place
# before anything under ``app`` is imported.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["POLICY_EXPIRATION_ENABLED"] = "false"

from collections.abc import AsyncGenerator
from datetime import date
from decimal import Decimal
from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.database import Base, get_async_session
from app.database.models import Car, Claim, InsurancePolicy, Owner
from app.main import app


@pytest_asyncio.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """In-memory SQLite engine with the full schema.

    A StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_maker(db_engine: AsyncEngine) -> async_sessionmaker:
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_maker: async_sessionmaker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as session:
        yield session


@pytest.fixture(autouse=True)
def clear_dependency_overrides():
    """Ensure FastAPI dependency overrides are reset between tests."""
    app.dependency_overrides = {}
    yield
    app.dependency_overrides = {}


@pytest_asyncio.fixture
async def api_client(session_maker: async_sessionmaker) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app, with sessions from the test database.

    Returns:
        AsyncClient: Client issuing requests against the ASGI app
    """

    async def override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def make_owner(db_session: AsyncSession):
    """Factory inserting an owner."""

    async def _make(name: str = "Ana Popescu", email: Optional[str] = "ana@example.com") -> Owner:
        owner = Owner(name=name, email=email)
        db_session.add(owner)
        await db_session.commit()
        return owner

    return _make


@pytest.fixture
def make_car(db_session: AsyncSession, make_owner):
    """Factory inserting a car, creating an owner when none is given."""

    async def _make(
        vin: str = "1HGCM82633A004352",
        owner: Optional[Owner] = None,
        year_of_manufacture: int = 2018,
    ) -> Car:
        if owner is None:
            owner = await make_owner()
        car = Car(
            vin=vin,
            make="Honda",
            model="Accord",
            year_of_manufacture=year_of_manufacture,
            owner_id=owner.id,
        )
        db_session.add(car)
        await db_session.commit()
        return car

    return _make


@pytest.fixture
def make_policy(db_session: AsyncSession):
    """Factory inserting a policy directly, bypassing validation."""

    async def _make(
        car: Car,
        start_date: date,
        end_date: date,
        provider: Optional[str] = "Allianz",
    ) -> InsurancePolicy:
        policy = InsurancePolicy(
            car_id=car.id, provider=provider, start_date=start_date, end_date=end_date
        )
        db_session.add(policy)
        await db_session.commit()
        return policy

    return _make


@pytest.fixture
def make_claim(db_session: AsyncSession):
    """Factory inserting a claim directly."""

    async def _make(
        car: Car,
        claim_date: date,
        description: str = "Rear bumper",
        amount: Decimal = Decimal("1200.00"),
    ) -> Claim:
        claim = Claim(car_id=car.id, claim_date=claim_date, description=description, amount=amount)
        db_session.add(claim)
        await db_session.commit()
        return claim

    return _make
