import os
import tempfile

# Must be set before the app (and its settings) are imported
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["STORAGE_ROOT"] = tempfile.mkdtemp(prefix="item-cart-storage-")
os.environ["STORAGE"] = "local"

from typing import AsyncGenerator
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.core.deps import get_redis
from app.core.roles import UserRole
from app.core.security import hash_password
from app.db.base import Base
from app.db.sessions import get_async_session
from app.main import app
from app.models.cart import CartItem
from app.models.item import Item
from app.models.user import User


# DATABASE SETUP (SQLite in-memory, SAFE)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# 1x1 transparent PNG
PNG_BASE64 = (
    "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mNkYAAAAAYAAjCB0C8AAAAASUVORK5CYII="
)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


@pytest.fixture
def png_base64():
    return PNG_BASE64


# PYTEST CORE FIXTURES
@pytest.fixture
def test_app():
    app.debug = True
    return app


@pytest.fixture
async def engine():
    """Fresh in-memory database per test, with foreign keys enforced."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    event.listen(test_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
    )
    async with session_factory() as session:
        yield session


# MOCKS
@pytest.fixture
def mock_redis():
    redis = AsyncMock()
    _storage = {}

    async def set_val(key, val, ex=None):
        _storage[key] = val

    async def get_val(key):
        return _storage.get(key)

    async def delete_val(key):
        _storage.pop(key, None)

    async def exists_val(*keys):
        return sum(1 for key in keys if key in _storage)

    redis.set = AsyncMock(side_effect=set_val)
    redis.get = AsyncMock(side_effect=get_val)
    redis.delete = AsyncMock(side_effect=delete_val)
    redis.exists = AsyncMock(side_effect=exists_val)
    redis.ping = AsyncMock(return_value=True)
    redis.store = _storage
    return redis


# DEPENDENCY OVERRIDES
@pytest.fixture(autouse=True)
def override_dependencies(test_app, db_session, mock_redis):

    async def _get_test_session():
        yield db_session

    test_app.dependency_overrides[get_async_session] = _get_test_session
    test_app.dependency_overrides[get_redis] = lambda: mock_redis

    yield

    test_app.dependency_overrides.clear()


# HTTP CLIENT
@pytest.fixture
async def client(test_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://localhost",
    ) as ac:
        yield ac


# DATA FIXTURES
@pytest.fixture
async def test_admin(db_session):
    admin = User(
        name="Admin User",
        email="admin@example.com",
        hashed_password=hash_password("adminpass123"),
        role=UserRole.ADMIN,
        is_active=True,
    )
    db_session.add(admin)
    await db_session.commit()
    await db_session.refresh(admin)
    return admin


@pytest.fixture
async def admin_token(client, test_admin):
    response = await client.post(
        "/api/auth/login",
        json={"email": "admin@example.com", "password": "adminpass123"},
    )
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
async def test_user(db_session):
    user = User(
        name="test user",
        email="user@example.com",
        hashed_password=hash_password("strongpassword123"),
        role=UserRole.USER,
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest.fixture
async def user_token(client, test_user):
    response = await client.post(
        "/api/auth/login",
        json={"email": "user@example.com", "password": "strongpassword123"},
    )
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture
async def sample_items(db_session):
    """Twelve items priced 100, 200, ... 1200."""
    items = [
        Item(
            name=f"Widget {i}" if i % 2 else f"Gadget {i}",
            content=f"Description {i}",
            price=i * 100,
            image=f"/storage/items/seed-{i}.png",
        )
        for i in range(1, 13)
    ]
    db_session.add_all(items)
    await db_session.commit()
    for item in items:
        await db_session.refresh(item)
    return items


@pytest.fixture
async def sample_item(db_session):
    item = Item(
        name="Widget",
        content="A very useful widget",
        price=100,
        image="/storage/items/seed.png",
    )
    db_session.add(item)
    await db_session.commit()
    await db_session.refresh(item)
    return item


@pytest.fixture
async def cart_row(db_session, test_user, sample_item):
    row = CartItem(user_id=test_user.id, item_id=sample_item.id, quantity=2)
    db_session.add(row)
    await db_session.commit()
    await db_session.refresh(row)
    return row
