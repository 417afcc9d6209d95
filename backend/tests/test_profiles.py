"""
Tests for profile edits and the usher directory.
"""

import pytest
from httpx import AsyncClient

from usherhire.models.enums import UserType
from conftest import make_account


@pytest.mark.asyncio
async def test_read_own_profile(client: AsyncClient, usher, usher_headers):
    response = await client.get("/api/v1/profiles/me", headers=usher_headers)
    assert response.status_code == 200
    assert response.json()["full_name"] == "Alex Usher"
    assert response.json()["user_type"] == "usher"


@pytest.mark.asyncio
async def test_update_own_profile(client: AsyncClient, usher_headers):
    response = await client.patch(
        "/api/v1/profiles/me",
        json={"phone": "+44 7700 900123", "avatar_url": "https://cdn.example.com/alex.png"},
        headers=usher_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["phone"] == "+44 7700 900123"
    assert data["avatar_url"] == "https://cdn.example.com/alex.png"
    assert data["full_name"] == "Alex Usher"


@pytest.mark.asyncio
async def test_account_type_is_fixed(client: AsyncClient, usher_headers):
    response = await client.patch("/api/v1/profiles/me", json={"user_type": "planner"}, headers=usher_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_read_other_profile(client: AsyncClient, planner, usher_headers):
    response = await client.get(f"/api/v1/profiles/{planner.id}", headers=usher_headers)
    assert response.status_code == 200
    assert response.json()["user_type"] == "planner"


@pytest.mark.asyncio
async def test_update_usher_profile(client: AsyncClient, usher_headers):
    response = await client.patch(
        "/api/v1/ushers/me",
        json={
            "hourly_rate": 18.5,
            "experience_years": 4,
            "skills": [" crowd control ", "", "ticketing"],
            "availability_status": "busy",
            "bio": "Stadium and theatre work",
        },
        headers=usher_headers,
    )
    assert response.status_code == 200
    data = response.json()
    assert data["skills"] == ["crowd control", "ticketing"]
    assert data["availability_status"] == "busy"
    assert data["experience_years"] == 4
    assert data["rating"] == 0
    assert data["total_events"] == 0


@pytest.mark.asyncio
async def test_usher_cannot_set_own_rating(client: AsyncClient, usher_headers):
    response = await client.patch("/api/v1/ushers/me", json={"rating": 5.0}, headers=usher_headers)
    assert response.status_code == 422

    response = await client.patch("/api/v1/ushers/me", json={"total_events": 40}, headers=usher_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_planner_has_no_usher_profile(client: AsyncClient, planner_headers):
    response = await client.patch("/api/v1/ushers/me", json={"bio": "Not an usher"}, headers=planner_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_search_ushers(client: AsyncClient, db_session, planner_headers):
    """Directory is ordered by rating and filters by text, availability and rating."""
    await make_account(
        db_session, "sam@example.com", UserType.USHER, "Sam Steward",
        skills=["VIP hosting", "Ticketing"], rating=4.8,
    )
    await make_account(
        db_session, "jo@example.com", UserType.USHER, "Jo Guide",
        bio="Museum tours and ticketing", rating=3.9, availability_status="busy",
    )
    await make_account(db_session, "lee@example.com", UserType.USHER, "Lee Runner", rating=4.1)

    response = await client.get("/api/v1/ushers/", headers=planner_headers)
    assert response.status_code == 200
    names = [row["profile"]["full_name"] for row in response.json()]
    assert names == ["Sam Steward", "Lee Runner", "Jo Guide"]

    response = await client.get("/api/v1/ushers/", params={"search": "ticketing"}, headers=planner_headers)
    assert [row["profile"]["full_name"] for row in response.json()] == ["Sam Steward", "Jo Guide"]

    response = await client.get("/api/v1/ushers/", params={"availability_status": "busy"}, headers=planner_headers)
    assert [row["profile"]["full_name"] for row in response.json()] == ["Jo Guide"]

    response = await client.get("/api/v1/ushers/", params={"min_rating": 4.0}, headers=planner_headers)
    assert [row["profile"]["full_name"] for row in response.json()] == ["Sam Steward", "Lee Runner"]


@pytest.mark.asyncio
async def test_read_usher_rejects_planner_id(client: AsyncClient, planner, usher_headers):
    response = await client.get(f"/api/v1/ushers/{planner.id}", headers=usher_headers)
    assert response.status_code == 404
