"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import Pool, StaticPool

from backend.app.main import app
from backend.app.db.session import get_db, Base
from backend.app.core.security import get_password_hash
from backend.app.models.enums import UserRole
from backend.app.models.user import User

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

PASSWORD = "password123"


@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


@pytest.fixture
async def engine():
    """Fresh in-memory database per test: tables created before, dropped after."""
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield test_engine

    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(autouse=True)
def override_db(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides.clear()


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def create_user(db_session):
    """Factory: insert an active user directly and return it."""
    async def _create(username: str, role: UserRole = UserRole.STAFF, location: str = "Goa Beach Resort", **extra):
        user = User(
            username=username,
            email=f"{username}@test.com",
            hashed_password=get_password_hash(PASSWORD),
            role=role,
            location=location,
            is_active=True,
            **extra
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _create


@pytest.fixture
def login(client):
    """Factory: log in through the API and return auth headers."""
    async def _login(username: str, password: str = PASSWORD):
        response = await client.post("/api/auth/login", json={"username": username, "password": password})
        assert response.status_code == 200, response.text
        token = response.json()["data"]["accessToken"]
        return {"Authorization": f"Bearer {token}"}

    return _login


@pytest.fixture
async def master_headers(create_user, login):
    await create_user("master", UserRole.MASTER)
    return await login("master")


@pytest.fixture
async def manager_headers(create_user, login):
    """Operations manager: reviews expense reports."""
    await create_user("opsmanager", UserRole.OPERATIONS_MANAGER)
    return await login("opsmanager")


@pytest.fixture
async def hr_headers(create_user, login):
    await create_user("hradmin", UserRole.HR_ADMIN)
    return await login("hradmin")


@pytest.fixture
async def staff_headers(create_user, login):
    await create_user("staff1", UserRole.STAFF)
    return await login("staff1")


@pytest.fixture
async def other_staff_headers(create_user, login):
    await create_user("staff2", UserRole.STAFF)
    return await login("staff2")
