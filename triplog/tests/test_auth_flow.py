"""
Integration tests for Authentication Flow.

Verifies Register -> Login -> Me -> Logout, with self-registration limited
to drivers.
"""

import pytest
from sqlalchemy import select

from triplog.app.core.security import get_password_hash
from triplog.app.models.audit_log import AuditLog
from triplog.app.models.enums import UserRole
from triplog.app.models.user import User
from triplog.app.services.audit import AuditAction

DRIVER_PAYLOAD = {
    "id": "motorista1",
    "name": "Matheus Prux",
    "email": "matheus@empresa.com",
    "password": "123",
}


@pytest.mark.asyncio
async def test_driver_registration_and_me(client):
    response = await client.post("/v1/auth/register", json=DRIVER_PAYLOAD)
    assert response.status_code == 201, response.text
    data = response.json()
    assert data["user_id"] == "motorista1"
    assert data["role"] == "driver"

    headers = {"Authorization": f"Bearer {data['access_token']}"}
    response = await client.get("/v1/auth/me", headers=headers)
    assert response.status_code == 200
    assert response.json() == {"id": "motorista1", "name": "Matheus Prux", "role": "driver"}


@pytest.mark.asyncio
async def test_admin_registration_blocked(client):
    response = await client.post("/v1/auth/register", json={**DRIVER_PAYLOAD, "role": "admin"})
    assert response.status_code == 403
    assert response.json()["error_code"] == "ERR_PERM_001"


@pytest.mark.asyncio
async def test_duplicate_registration_rejected(client):
    response = await client.post("/v1/auth/register", json=DRIVER_PAYLOAD)
    assert response.status_code == 201

    response = await client.post("/v1/auth/register", json=DRIVER_PAYLOAD)
    assert response.status_code == 400
    assert response.json()["details"]["field"] == "id"


@pytest.mark.asyncio
async def test_login_with_seeded_admin(client, db_session):
    db_session.add(User(
        id="admin",
        name="Administrador Sistema",
        hashed_password=get_password_hash("admin"),
        role=UserRole.SUPER_ADMIN,
    ))
    await db_session.commit()

    response = await client.post("/v1/auth/login", json={"id": "admin", "password": "admin"})

    assert response.status_code == 200, response.text
    assert response.json()["role"] == "super_admin"
    assert response.json()["name"] == "Administrador Sistema"


@pytest.mark.asyncio
async def test_login_failures_are_audited(client, db_session):
    await client.post("/v1/auth/register", json=DRIVER_PAYLOAD)

    response = await client.post("/v1/auth/login", json={"id": "motorista1", "password": "wrong"})
    assert response.status_code == 401
    assert response.json()["error_code"] == "ERR_AUTH_001"

    response = await client.post("/v1/auth/login", json={"id": "ghost", "password": "123"})
    assert response.status_code == 401

    result = await db_session.execute(select(AuditLog).where(AuditLog.action == AuditAction.LOGIN_FAILED))
    assert {log.actor_id for log in result.scalars().all()} == {"motorista1", "ghost"}


@pytest.mark.asyncio
async def test_inactive_user_cannot_login(client, db_session):
    db_session.add(User(
        id="antigo",
        name="Motorista Antigo",
        hashed_password=get_password_hash("123"),
        role=UserRole.DRIVER,
        is_active=False,
    ))
    await db_session.commit()

    response = await client.post("/v1/auth/login", json={"id": "antigo", "password": "123"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_revokes_token(client, mock_redis):
    response = await client.post("/v1/auth/register", json=DRIVER_PAYLOAD)
    headers = {"Authorization": f"Bearer {response.json()['access_token']}"}

    response = await client.post("/v1/auth/logout", headers=headers)
    assert response.status_code == 200
    assert response.json()["revoked"] is True
    assert len(mock_redis.store) == 1

    response = await client.get("/v1/auth/me", headers=headers)
    assert response.status_code == 401
    assert response.json()["error_code"] == "ERR_AUTH_002"


@pytest.mark.asyncio
async def test_invalid_token_rejected(client):
    response = await client.get("/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
    assert response.json()["error_code"] == "ERR_AUTH_001"


@pytest.mark.asyncio
async def test_health_and_correlation_id(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "abc-123"})
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["token_store"] == "up"
    assert response.headers["X-Correlation-ID"] == "abc-123"


@pytest.mark.asyncio
async def test_health_reports_unreachable_token_store(client, mock_redis, mocker):
    mocker.patch.object(mock_redis, "ping", side_effect=ConnectionError("refused"))

    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["token_store"] == "down"
