"""Pytest configuration and shared fixtures."""

import fnmatch
import os
from decimal import Decimal
from typing import Dict, Optional

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DEBUG", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from dealboard.dependencies import get_db
from dealboard.main import app
from dealboard.models import Base, Category, Deal, Shop, User
from dealboard.models.deal import STATUS_APPROVED
from dealboard.models.user import ROLE_ADMIN, ROLE_ROOT_ADMIN, ROLE_USER
from dealboard.services import cache_service
from dealboard.services.auth_service import create_access_token, hash_password
from dealboard.voting import VoteLockRegistry, get_vote_locks


class FakeCache:
    """In-memory stand-in for CacheService."""

    def __init__(self):
        self.store: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self.store.get(key)

    async def set(self, key: str, value: str, ttl: int = 300) -> bool:
        self.store[key] = value
        return True

    async def delete(self, key: str) -> bool:
        return self.store.pop(key, None) is not None

    async def delete_pattern(self, pattern: str) -> int:
        keys = [k for k in self.store if fnmatch.fnmatch(k, pattern)]
        for key in keys:
            del self.store[key]
        return len(keys)

    async def health_check(self) -> bool:
        return True

    async def close(self) -> None:
        pass


# ============================================================================
# DATABASE
# ============================================================================


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite engine shared by every session in one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def test_db(session_factory) -> AsyncSession:
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def fake_cache(monkeypatch) -> FakeCache:
    """Replace the Redis cache singleton for every test."""
    cache = FakeCache()
    monkeypatch.setattr(cache_service, "_cache_instance", cache)
    return cache


# ============================================================================
# ROWS
# ============================================================================


async def _make_user(db: AsyncSession, username: str, role: str) -> User:
    user = User(
        email=f"{username}@example.com",
        username=username,
        hashed_password=hash_password("password123"),
        role=role,
        is_active=True,
    )
    db.add(user)
    await db.commit()
    return user


@pytest_asyncio.fixture
async def sample_user(test_db: AsyncSession) -> User:
    return await _make_user(test_db, "alice", ROLE_USER)


@pytest_asyncio.fixture
async def other_user(test_db: AsyncSession) -> User:
    return await _make_user(test_db, "bob", ROLE_USER)


@pytest_asyncio.fixture
async def admin_user(test_db: AsyncSession) -> User:
    return await _make_user(test_db, "moderator", ROLE_ADMIN)


@pytest_asyncio.fixture
async def root_user(test_db: AsyncSession) -> User:
    return await _make_user(test_db, "root", ROLE_ROOT_ADMIN)


@pytest_asyncio.fixture
async def sample_category(test_db: AsyncSession) -> Category:
    category = Category(name="Electronics", slug="electronics", icon="laptop")
    test_db.add(category)
    await test_db.commit()
    return category


@pytest_asyncio.fixture
async def sample_shop(test_db: AsyncSession) -> Shop:
    shop = Shop(
        name="Test Shop",
        slug="test-shop",
        logo_url="https://example.com/logo.png",
        website_url="https://example.com",
    )
    test_db.add(shop)
    await test_db.commit()
    return shop


@pytest_asyncio.fixture
async def sample_deal(
    test_db: AsyncSession,
    sample_user: User,
    sample_category: Category,
    sample_shop: Shop,
) -> Deal:
    """An approved deal with no votes."""
    deal = Deal(
        user_id=sample_user.id,
        category_id=sample_category.id,
        shop_id=sample_shop.id,
        title="Noise-cancelling headphones",
        description="Lowest price this year",
        original_price=Decimal("299.99"),
        discounted_price=Decimal("199.99"),
        discount_percentage=33,
        affiliate_link="https://example.com/headphones",
        status=STATUS_APPROVED,
        upvotes=0,
        downvotes=0,
        heat_score=0,
        views=0,
    )
    test_db.add(deal)
    await test_db.commit()
    return deal


# ============================================================================
# API
# ============================================================================


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client against the app with the test database and a fresh lock registry."""

    async def _get_test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    locks = VoteLockRegistry()
    app.dependency_overrides[get_db] = _get_test_db
    app.dependency_overrides[get_vote_locks] = lambda: locks

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Build bearer-token headers for a user."""

    def _headers(user: User) -> Dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(user.id)}"}

    return _headers
