"""
Tests for identity endpoints: sign up, sign in, sign out, current user.
"""

import uuid

import pytest
from httpx import AsyncClient
from sqlalchemy import select

from usherhire.models import UsherProfile


@pytest.mark.asyncio
async def test_signup_usher_creates_usher_profile(client: AsyncClient, db_session):
    """Usher signup creates the profile and a zeroed usher profile."""
    response = await client.post("/api/v1/auth/signup", json={
        "email": "new.usher@example.com",
        "password": "securepassword123",
        "full_name": "New Usher",
        "user_type": "usher",
        "phone": "+44 7700 900000",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["user_type"] == "usher"
    assert data["email"] == "new.usher@example.com"
    assert "hashed_password" not in data

    result = await db_session.execute(select(UsherProfile).where(UsherProfile.user_id == uuid.UUID(data["id"])))
    usher_profile = result.scalar_one()
    assert usher_profile.rating == 0
    assert usher_profile.total_events == 0
    assert usher_profile.skills == []
    assert usher_profile.availability == {}
    assert usher_profile.availability_status == "available"


@pytest.mark.asyncio
async def test_signup_planner_has_no_usher_profile(client: AsyncClient, db_session):
    response = await client.post("/api/v1/auth/signup", json={
        "email": "new.planner@example.com",
        "password": "securepassword123",
        "full_name": "New Planner",
        "user_type": "planner",
    })
    assert response.status_code == 201
    result = await db_session.execute(select(UsherProfile))
    assert result.scalars().all() == []


@pytest.mark.asyncio
async def test_signup_duplicate_email(client: AsyncClient, planner):
    """Duplicate email returns 409."""
    response = await client.post("/api/v1/auth/signup", json={
        "email": "planner@example.com",
        "password": "securepassword123",
        "full_name": "Someone Else",
        "user_type": "usher",
    })
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_signup_unknown_user_type(client: AsyncClient):
    response = await client.post("/api/v1/auth/signup", json={
        "email": "admin@example.com",
        "password": "securepassword123",
        "full_name": "Admin",
        "user_type": "admin",
    })
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_signup_weak_password(client: AsyncClient):
    """Password under 8 chars returns 422."""
    response = await client.post("/api/v1/auth/signup", json={
        "email": "weak@example.com",
        "password": "short",
        "full_name": "Weak",
        "user_type": "planner",
    })
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_signin_success(client: AsyncClient, usher):
    """Valid credentials return a token usable on /auth/me."""
    response = await client.post("/api/v1/auth/signin", json={
        "email": "usher.a@example.com",
        "password": "testpassword123",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user_id"] == str(usher.id)

    me = await client.get(
        "/api/v1/auth/me",
        headers={"Authorization": f"Bearer {data['access_token']}"},
    )
    assert me.status_code == 200
    assert me.json() == {"id": str(usher.id), "email": "usher.a@example.com"}


@pytest.mark.asyncio
async def test_signin_wrong_password(client: AsyncClient, usher):
    response = await client.post("/api/v1/auth/signin", json={
        "email": "usher.a@example.com",
        "password": "wrongpassword",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_signin_unknown_email(client: AsyncClient):
    response = await client.post("/api/v1/auth/signin", json={
        "email": "nobody@example.com",
        "password": "anypassword123",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_requires_session(client: AsyncClient):
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_me_rejects_garbage_token(client: AsyncClient):
    response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_signout_without_redis_reports_not_revoked(client: AsyncClient, usher_headers):
    """With Redis disabled the token cannot be deny-listed; sign-out says so."""
    response = await client.post("/api/v1/auth/signout", headers=usher_headers)
    assert response.status_code == 200
    assert response.json()["revoked"] is False


@pytest.mark.asyncio
async def test_revoked_token_is_refused(client: AsyncClient, usher_headers, monkeypatch):
    from usherhire.core import security

    async def always_revoked(jti):
        return True

    monkeypatch.setattr(security, "is_token_revoked", always_revoked)
    response = await client.get("/api/v1/auth/me", headers=usher_headers)
    assert response.status_code == 401
