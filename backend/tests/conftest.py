"""
Pytest fixtures for test database, client, and authentication.

Each test gets a fresh in-memory SQLite database (aiosqlite); the app's
get_db dependency is overridden to hand out the test session.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date, time, timedelta
from typing import AsyncGenerator

import pytest_asyncio
from fakeredis import aioredis as fake_aioredis
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from usherhire.main import app
from usherhire.db.base import Base
from usherhire.db.session import get_db, transaction
from usherhire.core.security import create_access_token, hash_password
from usherhire.models import User, Profile, UsherProfile, Event
from usherhire.models.enums import EventStatus, UserType
from usherhire.services import cache_service

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Create tables on a fresh engine, yield a session, dispose afterwards."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def transactional_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests commit or roll back like the real get_db."""

    async def override_get_db():
        async with transaction(db_session):
            yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def fake_redis(monkeypatch):
    """Route the cache and deny-list through an in-memory Redis."""
    fake = fake_aioredis.FakeRedis(decode_responses=True)

    async def get_fake_redis():
        return fake

    monkeypatch.setattr(cache_service, "get_redis", get_fake_redis)
    return fake


async def make_account(
    db: AsyncSession,
    email: str,
    user_type: UserType,
    full_name: str,
    **usher_fields,
) -> Profile:
    user = User(email=email, hashed_password=hash_password("testpassword123"))
    db.add(user)
    await db.flush()

    profile = Profile(id=user.id, email=email, full_name=full_name, user_type=user_type.value)
    db.add(profile)
    await db.flush()

    if user_type == UserType.USHER:
        db.add(
            UsherProfile(
                user_id=user.id,
                experience_years=usher_fields.get("experience_years", 0),
                skills=usher_fields.get("skills", []),
                availability=usher_fields.get("availability", {}),
                availability_status=usher_fields.get("availability_status", "available"),
                bio=usher_fields.get("bio"),
                rating=usher_fields.get("rating", 0),
                total_events=0,
            )
        )

    await db.commit()
    await db.refresh(profile)
    return profile


def headers_for(profile: Profile) -> dict:
    token = create_access_token(data={"sub": str(profile.id), "email": profile.email})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def planner(db_session: AsyncSession) -> Profile:
    return await make_account(db_session, "planner@example.com", UserType.PLANNER, "Pat Planner")


@pytest_asyncio.fixture
async def usher(db_session: AsyncSession) -> Profile:
    return await make_account(db_session, "usher.a@example.com", UserType.USHER, "Alex Usher")


@pytest_asyncio.fixture
async def other_usher(db_session: AsyncSession) -> Profile:
    return await make_account(db_session, "usher.b@example.com", UserType.USHER, "Blake Usher")


@pytest_asyncio.fixture
async def planner_headers(planner: Profile) -> dict:
    return headers_for(planner)


@pytest_asyncio.fixture
async def usher_headers(usher: Profile) -> dict:
    return headers_for(usher)


@pytest_asyncio.fixture
async def other_usher_headers(other_usher: Profile) -> dict:
    return headers_for(other_usher)


async def make_event(
    db: AsyncSession,
    planner: Profile,
    status: EventStatus = EventStatus.PUBLISHED,
    days_ahead: int = 14,
    pay_rate: float = 50,
    title: str = "Gala Dinner",
) -> Event:
    event = Event(
        planner_id=planner.id,
        title=title,
        description="Annual charity gala",
        venue_address="1 Harbour Road",
        event_date=date.today() + timedelta(days=days_ahead),
        start_time=time(18, 0),
        end_time=time(23, 0),
        ushers_needed=2,
        pay_rate=pay_rate,
        status=status.value,
    )
    db.add(event)
    await db.commit()
    await db.refresh(event)
    return event


@pytest_asyncio.fixture
async def published_event(db_session: AsyncSession, planner: Profile) -> Event:
    """Published event E: ushers_needed=2, pay_rate=50."""
    return await make_event(db_session, planner)


@pytest_asyncio.fixture
async def draft_event(db_session: AsyncSession, planner: Profile) -> Event:
    return await make_event(db_session, planner, status=EventStatus.DRAFT, title="Product Launch")
