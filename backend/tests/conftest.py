import os
import uuid

# Point the app's module-level engine at SQLite before anything imports core.config.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["SECRET_KEY"] = "test-secret"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from core.auth import current_active_user, current_active_superuser
from db.database import Base, get_async_session
from db.users import User
from main import app


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'inventory.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(engine, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_maker):
    async with session_maker() as session:
        yield session


@pytest.fixture
def staff_user():
    return User(
        id=uuid.uuid4(),
        email="staff@example.com",
        hashed_password="not-used",
        is_active=True,
        is_superuser=False,
        is_verified=True,
    )


@pytest.fixture
def admin_user():
    return User(
        id=uuid.uuid4(),
        email="admin@example.com",
        hashed_password="not-used",
        is_active=True,
        is_superuser=True,
        is_verified=True,
    )


@pytest.fixture
def override_session(session_maker):
    async def _get_session():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = _get_session
    yield
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def anon_client(override_session):
    """Client with the real fastapi-users authentication in place."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest_asyncio.fixture
async def client(override_session, staff_user, admin_user):
    """Staff client; superuser-only routes see the admin user."""
    app.dependency_overrides[current_active_user] = lambda: staff_user
    app.dependency_overrides[current_active_superuser] = lambda: admin_user
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


@pytest.fixture
def create(client):
    async def _create(path: str, payload: dict) -> dict:
        res = await client.post(path, json=payload)
        assert res.status_code == 201, res.text
        return res.json()

    return _create


@pytest_asyncio.fixture
async def category(create):
    return await create("/api/categories", {"name": "Electronics"})


@pytest_asyncio.fixture
async def supplier(create):
    return await create("/api/suppliers", {"name": "TechSource", "email": "orders@techsource.example"})


@pytest_asyncio.fixture
async def product(create, category, supplier):
    return await create(
        "/api/products",
        {
            "name": "Laptop",
            "sku": "TECH-1001",
            "price": "999.99",
            "cost": "750.00",
            "categoryId": category["id"],
            "supplierId": supplier["id"],
            "reorderPoint": 10,
        },
    )


@pytest_asyncio.fixture
async def warehouse(create):
    return await create("/api/locations", {"name": "Main Warehouse", "type": "Warehouse"})


@pytest_asyncio.fixture
async def shelf(create):
    return await create("/api/locations", {"name": "Front Shelf", "type": "shelf"})
