import os

# Settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("ANNOUNCEMENT_PUBLISH_INTERVAL_SECONDS", "0")

from typing import AsyncGenerator, Dict

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.auth.models import Admin
from app.auth.security import hash_password
from app.db.session import create_all, get_db
from app.main import app


TEST_DATABASE_URL = "sqlite+aiosqlite://"
ADMIN_ID = "ADMIN001"
ADMIN_PASSWORD = "admin123"


@pytest.fixture()
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Fresh in-memory database per test; overrides the FastAPI dependency."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_all(engine)
    async_session = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:

        async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
            yield session

        app.dependency_overrides[get_db] = override_get_db
        yield session

    app.dependency_overrides.pop(get_db, None)
    await engine.dispose()


@pytest.fixture()
async def admin(db_session: AsyncSession) -> Admin:
    obj = Admin(
        admin_id=ADMIN_ID,
        name="System Administrator",
        email="admin@sksschool.com",
        password_hash=hash_password(ADMIN_PASSWORD),
    )
    db_session.add(obj)
    await db_session.commit()
    await db_session.refresh(obj)
    return obj


@pytest.fixture()
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client bound to the FastAPI app (unauthenticated)."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


@pytest.fixture()
async def auth_headers(client: AsyncClient, admin: Admin) -> Dict[str, str]:
    response = await client.post(
        "/api/admin/login", json={"admin_id": ADMIN_ID, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture()
async def admin_client(client: AsyncClient, auth_headers: Dict[str, str]) -> AsyncClient:
    """Client that sends the admin bearer token on every request."""
    client.headers.update(auth_headers)
    return client
