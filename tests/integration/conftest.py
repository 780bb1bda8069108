"""
Shared fixtures for integration tests.

Each test gets a fresh in-memory SQLite database (via aiosqlite) with
the full schema, plus factories for the rows the services need.
"""

from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from earnhub.models import Base, Offer, ReferralSettings, User, UserOffer


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_maker):
    async with session_maker() as session:
        yield session


@pytest_asyncio.fixture
async def referral_settings(session):
    """Default 100 / 50 / 25 points."""
    row = ReferralSettings(id=1, level1_points=100, level2_points=50, level3_points=25)
    session.add(row)
    await session.commit()
    return row


@pytest.fixture
def make_user(session):
    """Factory creating committed users."""
    counter = {"n": 0}

    async def _make(**overrides) -> User:
        counter["n"] += 1
        n = counter["n"]
        values = {
            "display_name": f"User {n}",
            "email": f"user{n}@example.com",
            "package": "basic",
            "is_verified": True,
        }
        values.update(overrides)
        user = User(**values)
        session.add(user)
        await session.commit()
        return user

    return _make


@pytest.fixture
def make_offer(session):
    """Factory creating committed offers."""

    async def _make(**overrides) -> Offer:
        values = {"title": "Starter", "daily_profit": Decimal("10")}
        values.update(overrides)
        offer = Offer(**values)
        session.add(offer)
        await session.commit()
        return offer

    return _make


@pytest.fixture
def subscribe(session):
    """Factory joining a user to an offer."""

    async def _subscribe(user: User, offer: Offer, **overrides) -> UserOffer:
        user_offer = UserOffer(user_id=user.id, offer_id=offer.id, **overrides)
        session.add(user_offer)
        await session.commit()
        return user_offer

    return _subscribe
