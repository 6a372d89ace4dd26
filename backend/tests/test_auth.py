"""End-to-end tests for authentication endpoints."""

from datetime import date, timedelta
from typing import Any, cast
from uuid import uuid4

import pytest
from argon2 import PasswordHasher
from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement

from core import create_access_token, decode_token, hash_password, verify_password
from models import User


def _eq(column: Any, value: Any) -> ColumnElement[bool]:
    return cast(ColumnElement[bool], column == value)


def build_payload() -> dict[str, str]:
    suffix = uuid4().hex[:8]
    return {
        "email": f"juan_{suffix}@example.com",
        "password": "secreto123",
        "first_name": "Juan",
        "last_name": "Pérez",
        "alias": f"juanp_{suffix}",
        "birth_date": "1990-05-15",
    }


async def _count_users(db_session: AsyncSession) -> int:
    result = await db_session.execute(select(func.count()).select_from(User))
    return int(result.scalar_one())


@pytest.mark.asyncio
async def test_register_creates_user_and_returns_token(
    async_client: AsyncClient,
    db_session: AsyncSession,
):
    payload = build_payload()
    response = await async_client.post("/api/v1/auth/register", json=payload)

    assert response.status_code == 201
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user"]["email"] == payload["email"]
    assert data["user"]["alias"] == payload["alias"]
    assert data["user"]["first_name"] == "Juan"
    assert data["user"]["birth_date"] == "1990-05-15"
    assert "password_hash" not in data["user"]

    claims = decode_token(data["access_token"])
    assert claims["sub"] == str(data["user"]["id"])
    assert claims["email"] == payload["email"]
    assert claims["type"] == "access"

    result = await db_session.execute(select(User).where(_eq(User.alias, payload["alias"])))
    user = result.scalar_one()
    assert user.password_hash != payload["password"]
    assert verify_password(payload["password"], user.password_hash)


@pytest.mark.asyncio
async def test_register_normalizes_email_to_lowercase(async_client: AsyncClient):
    payload = build_payload()
    payload["email"] = "Mixed.Case+alias@Example.COM"

    response = await async_client.post("/api/v1/auth/register", json=payload)

    assert response.status_code == 201
    assert response.json()["user"]["email"] == "mixed.case+alias@example.com"


@pytest.mark.asyncio
async def test_register_rejects_existing_email_with_new_alias(
    async_client: AsyncClient,
    db_session: AsyncSession,
):
    payload = build_payload()
    first = await async_client.post("/api/v1/auth/register", json=payload)
    assert first.status_code == 201

    second_payload = build_payload()
    second_payload["email"] = payload["email"].upper()
    second = await async_client.post("/api/v1/auth/register", json=second_payload)

    assert second.status_code == 409
    assert second.json()["detail"] == "Email o alias ya están en uso"
    assert await _count_users(db_session) == 1


@pytest.mark.asyncio
async def test_register_rejects_existing_alias(
    async_client: AsyncClient,
    db_session: AsyncSession,
):
    payload = build_payload()
    await async_client.post("/api/v1/auth/register", json=payload)

    second_payload = build_payload()
    second_payload["alias"] = payload["alias"]
    response = await async_client.post("/api/v1/auth/register", json=second_payload)

    assert response.status_code == 409
    assert await _count_users(db_session) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("password", "12345"),
        ("email", "not-an-email"),
        ("alias", "   "),
        ("birth_date", "15/05/1990"),
    ],
)
async def test_register_validates_payload(async_client: AsyncClient, field: str, value: str):
    payload = build_payload()
    payload[field] = value

    response = await async_client.post("/api/v1/auth/register", json=payload)

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login_returns_token_for_valid_credentials(async_client: AsyncClient):
    payload = build_payload()
    registered = await async_client.post("/api/v1/auth/register", json=payload)

    response = await async_client.post(
        "/api/v1/auth/login",
        json={"email": payload["email"], "password": payload["password"]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["user"]["id"] == registered.json()["user"]["id"]
    assert decode_token(data["access_token"])["sub"] == str(data["user"]["id"])


@pytest.mark.asyncio
async def test_login_rejects_wrong_password(async_client: AsyncClient):
    payload = build_payload()
    await async_client.post("/api/v1/auth/register", json=payload)

    response = await async_client.post(
        "/api/v1/auth/login",
        json={"email": payload["email"], "password": "incorrecta"},
    )

    assert response.status_code == 401
    assert response.json()["detail"] == "Credenciales inválidas"


@pytest.mark.asyncio
async def test_login_rejects_unknown_email(async_client: AsyncClient):
    response = await async_client.post(
        "/api/v1/auth/login",
        json={"email": "nadie@example.com", "password": "secreto123"},
    )

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_rehashes_outdated_password_hash(
    async_client: AsyncClient,
    db_session: AsyncSession,
):
    weak_hasher = PasswordHasher(time_cost=1, memory_cost=8, parallelism=1)
    user = User(
        email="legacy@example.com",
        alias="legacy",
        password_hash=weak_hasher.hash("secreto123"),
        first_name="Legacy",
        last_name="User",
        birth_date=date(1988, 8, 22),
    )
    db_session.add(user)
    await db_session.commit()
    original_hash = user.password_hash

    response = await async_client.post(
        "/api/v1/auth/login",
        json={"email": "legacy@example.com", "password": "secreto123"},
    )
    assert response.status_code == 200

    await db_session.refresh(user)
    assert user.password_hash != original_hash
    assert verify_password("secreto123", user.password_hash)


@pytest.mark.asyncio
async def test_protected_route_requires_bearer_token(async_client: AsyncClient):
    response = await async_client.get("/api/v1/users/profile")

    assert response.status_code == 401
    assert response.json()["detail"] == "No autorizado"


@pytest.mark.asyncio
async def test_protected_route_rejects_invalid_and_expired_tokens(
    async_client: AsyncClient,
    db_session: AsyncSession,
):
    user = User(
        email="expired@example.com",
        alias="expired",
        password_hash=hash_password("secreto123"),
        first_name="Ex",
        last_name="Pired",
        birth_date=date(1995, 3, 18),
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)

    expired = create_access_token(str(user.id), expires_delta=timedelta(minutes=-5))
    for token in ("not-a-jwt", expired):
        response = await async_client.get(
            "/api/v1/users/profile",
            headers={"Authorization": f"Bearer {token}"},
        )
        assert response.status_code == 401


@pytest.mark.asyncio
async def test_token_for_deleted_user_is_rejected(
    async_client: AsyncClient,
    db_session: AsyncSession,
):
    payload = build_payload()
    registered = await async_client.post("/api/v1/auth/register", json=payload)
    token = registered.json()["access_token"]

    result = await db_session.execute(select(User).where(_eq(User.alias, payload["alias"])))
    await db_session.delete(result.scalar_one())
    await db_session.commit()

    response = await async_client.get(
        "/api/v1/users/profile",
        headers={"Authorization": f"Bearer {token}"},
    )
    assert response.status_code == 401
