"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment for Settings; tests never touch real services
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("REDIS_HOST", "localhost")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("FETCH_BACKOFF_BASE_SECONDS", "0")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.models import Base, Member, Product, Wallet


class FakeRedis:
    """In-memory stand-in for the subset of redis.asyncio.Redis the cache uses."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.expiry: dict[str, int | None] = {}
        self.available = True

    def _check(self) -> None:
        if not self.available:
            raise RedisConnectionError("redis is down")

    async def get(self, key: str) -> str | None:
        self._check()
        return self.store.get(key)

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self._check()
        self.store[key] = value
        self.expiry[key] = ex
        return True

    async def delete(self, *keys: str) -> int:
        self._check()
        deleted = 0
        for key in keys:
            if self.store.pop(key, None) is not None:
                deleted += 1
            self.expiry.pop(key, None)
        return deleted


@pytest.fixture
def fake_redis() -> FakeRedis:
    """Fake Redis client for cache tests."""
    return FakeRedis()


@pytest.fixture
def mock_redis_client():
    """Mock Redis client for tests that only check calls."""
    client = AsyncMock()
    client.get = AsyncMock(return_value=None)
    client.set = AsyncMock()
    client.delete = AsyncMock(return_value=0)
    return client


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite engine with the full schema."""
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
def session_maker(engine) -> async_sessionmaker[AsyncSession]:
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest_asyncio.fixture
async def db_session(session_maker):
    """Database session for one test."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def make_member(db_session):
    """
    Factory creating a committed member with an empty wallet.

    The password hash is a placeholder; tests that sign in go through
    AuthService instead.
    """
    counter = {"n": 0}

    async def factory(
        name: str | None = None,
        topup_balance: Decimal = Decimal("0"),
        referrer_id: int | None = None,
    ) -> int:
        counter["n"] += 1
        n = counter["n"]
        member = Member(
            name=name or f"Member {n}",
            email=f"member{n}@example.com",
            mobile=f"98765{n:05d}",
            password_hash="!",
            referral_code=f"CODE{n:04d}",
            referrer_id=referrer_id,
        )
        db_session.add(member)
        await db_session.flush()
        db_session.add(Wallet(member_id=member.id, topup_balance=topup_balance))
        await db_session.commit()
        return member.id

    return factory


@pytest.fixture
def make_product(db_session):
    """Factory creating a committed product."""

    async def factory(
        base_price: Decimal = Decimal("1000"),
        gst: Decimal = Decimal("180"),
        bv_credit: int = 500,
        stock: int = 10,
        is_active: bool = True,
    ) -> int:
        product = Product(
            name="Herbal Kit",
            base_price=base_price,
            gst=gst,
            bv_credit=bv_credit,
            stock=stock,
            is_active=is_active,
        )
        db_session.add(product)
        await db_session.commit()
        return product.id

    return factory
