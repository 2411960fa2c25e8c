from datetime import timedelta

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.models import Admin
from app.core.clock import utcnow

ADMIN_ID = "ADMIN001"
ADMIN_PASSWORD = "admin123"


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, admin: Admin) -> None:
    response = await client.post(
        "/api/admin/login", json={"admin_id": ADMIN_ID, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200
    data = response.json()

    assert data["success"] is True
    assert data["token"]
    assert data["token_type"] == "bearer"
    assert data["admin"]["admin_id"] == ADMIN_ID
    assert data["admin"]["name"] == "System Administrator"


@pytest.mark.asyncio
async def test_login_wrong_password_and_unknown_id_share_message(client: AsyncClient, admin: Admin) -> None:
    wrong = await client.post("/api/admin/login", json={"admin_id": ADMIN_ID, "password": "nope"})
    unknown = await client.post("/api/admin/login", json={"admin_id": "GHOST", "password": "nope"})

    assert wrong.status_code == 401
    assert unknown.status_code == 401
    assert wrong.json()["detail"] == unknown.json()["detail"] == "Invalid admin ID or password"


@pytest.mark.asyncio
async def test_oauth_form_login(client: AsyncClient, admin: Admin) -> None:
    response = await client.post(
        "/api/admin/login-oauth", data={"username": ADMIN_ID, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200
    assert response.json()["token_type"] == "bearer"


@pytest.mark.asyncio
async def test_protected_routes_require_token(client: AsyncClient) -> None:
    response = await client.get("/api/students")
    assert response.status_code == 401

    response = await client.get("/api/students", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_returns_current_admin(admin_client: AsyncClient) -> None:
    response = await admin_client.get("/api/admin/me")
    assert response.status_code == 200
    assert response.json()["admin_id"] == ADMIN_ID


@pytest.mark.asyncio
async def test_forgot_password_is_neutral(client: AsyncClient, admin: Admin) -> None:
    known = await client.post("/api/admin/forgot-password", json={"admin_id": ADMIN_ID})
    unknown = await client.post("/api/admin/forgot-password", json={"admin_id": "GHOST"})

    assert known.status_code == unknown.status_code == 200
    assert known.json()["message"] == unknown.json()["message"]


@pytest.mark.asyncio
async def test_reset_password_flow(client: AsyncClient, db_session: AsyncSession, admin: Admin) -> None:
    await client.post("/api/admin/forgot-password", json={"admin_id": ADMIN_ID})
    await db_session.refresh(admin)
    token = admin.reset_token
    assert token and len(token) == 64

    short = await client.post("/api/admin/reset-password", json={"token": token, "new_password": "abc"})
    assert short.status_code == 400

    response = await client.post(
        "/api/admin/reset-password", json={"token": token, "new_password": "newsecret"}
    )
    assert response.status_code == 200

    await db_session.refresh(admin)
    assert admin.reset_token is None

    # Token is single use
    again = await client.post(
        "/api/admin/reset-password", json={"token": token, "new_password": "another1"}
    )
    assert again.status_code == 400
    assert again.json()["detail"] == "Invalid or expired reset token"

    login = await client.post("/api/admin/login", json={"admin_id": ADMIN_ID, "password": "newsecret"})
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_expired_reset_token_rejected(client: AsyncClient, db_session: AsyncSession, admin: Admin) -> None:
    admin.reset_token = "a" * 64
    admin.reset_token_expiry = utcnow() - timedelta(minutes=1)
    await db_session.commit()

    response = await client.post(
        "/api/admin/reset-password", json={"token": "a" * 64, "new_password": "newsecret"}
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid or expired reset token"
