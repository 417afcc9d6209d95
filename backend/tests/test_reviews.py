"""
Tests for rating completed bookings and the usher's derived mean rating.
"""

import pytest
from httpx import AsyncClient
from sqlalchemy import func, select

from usherhire.core.exceptions import ConflictError
from usherhire.models import Review, UsherProfile
from usherhire.services import booking_service, review_service
from conftest import make_event


async def completed_booking(client: AsyncClient, usher_headers: dict, planner_headers: dict, event_id) -> str:
    response = await client.post("/api/v1/bookings/", json={"event_id": str(event_id)}, headers=usher_headers)
    assert response.status_code == 201, response.text
    booking_id = response.json()["id"]
    for status in ("accepted", "completed"):
        response = await client.post(
            f"/api/v1/bookings/{booking_id}/status", json={"status": status}, headers=planner_headers
        )
        assert response.status_code == 200, response.text
    return booking_id


async def rating_of(db_session, usher_id) -> float:
    result = await db_session.execute(select(UsherProfile.rating).where(UsherProfile.user_id == usher_id))
    return result.scalar_one()


@pytest.mark.asyncio
async def test_full_hiring_scenario(
    client: AsyncClient, db_session, planner, usher, usher_headers, planner_headers, published_event
):
    """
    Apply, accept, complete, rate 4; then a second event rated 5.
    The usher ends with two events worked and a 4.50 rating.
    """
    first = await completed_booking(client, usher_headers, planner_headers, published_event.id)

    response = await client.post(
        f"/api/v1/bookings/{first}/review",
        json={"rating": 4, "comment": "Punctual and friendly"},
        headers=planner_headers,
    )
    assert response.status_code == 201
    review = response.json()
    assert review["reviewer_id"] == str(planner.id)
    assert review["reviewee_id"] == str(usher.id)
    assert review["rating"] == 4
    assert await rating_of(db_session, usher.id) == pytest.approx(4.0)

    second_event = await make_event(db_session, planner, title="Awards Night", days_ahead=21)
    second = await completed_booking(client, usher_headers, planner_headers, second_event.id)

    response = await client.post(f"/api/v1/bookings/{second}/review", json={"rating": 5}, headers=planner_headers)
    assert response.status_code == 201
    assert await rating_of(db_session, usher.id) == pytest.approx(4.5)

    response = await client.get(f"/api/v1/ushers/{usher.id}", headers=planner_headers)
    assert response.status_code == 200
    usher_profile = response.json()["usher_profile"]
    assert usher_profile["rating"] == pytest.approx(4.5)
    assert usher_profile["total_events"] == 2

    response = await client.get(f"/api/v1/ushers/{usher.id}/reviews", headers=usher_headers)
    assert response.status_code == 200
    assert sorted(r["rating"] for r in response.json()) == [4, 5]


@pytest.mark.asyncio
async def test_rating_is_rounded_mean(
    client: AsyncClient, db_session, planner, usher, usher_headers, planner_headers
):
    """Three reviews of 5, 4, 4 average to 4.33."""
    for day, score in zip((10, 11, 12), (5, 4, 4)):
        event = await make_event(db_session, planner, title=f"Conference day {day}", days_ahead=day)
        booking_id = await completed_booking(client, usher_headers, planner_headers, event.id)
        response = await client.post(
            f"/api/v1/bookings/{booking_id}/review", json={"rating": score}, headers=planner_headers
        )
        assert response.status_code == 201

    assert await rating_of(db_session, usher.id) == pytest.approx(4.33)


@pytest.mark.asyncio
async def test_second_review_conflicts(
    client: AsyncClient, db_session, usher, usher_headers, planner_headers, published_event
):
    booking_id = await completed_booking(client, usher_headers, planner_headers, published_event.id)
    response = await client.post(f"/api/v1/bookings/{booking_id}/review", json={"rating": 3}, headers=planner_headers)
    assert response.status_code == 201

    response = await client.post(f"/api/v1/bookings/{booking_id}/review", json={"rating": 5}, headers=planner_headers)
    assert response.status_code == 409
    assert await rating_of(db_session, usher.id) == pytest.approx(3.0)


@pytest.mark.asyncio
async def test_usher_cannot_review(client: AsyncClient, usher_headers, planner_headers, published_event):
    booking_id = await completed_booking(client, usher_headers, planner_headers, published_event.id)
    response = await client.post(f"/api/v1/bookings/{booking_id}/review", json={"rating": 5}, headers=usher_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_review_requires_completed_booking(
    client: AsyncClient, usher_headers, planner_headers, published_event
):
    response = await client.post(
        "/api/v1/bookings/", json={"event_id": str(published_event.id)}, headers=usher_headers
    )
    booking_id = response.json()["id"]
    await client.post(f"/api/v1/bookings/{booking_id}/status", json={"status": "accepted"}, headers=planner_headers)

    response = await client.post(f"/api/v1/bookings/{booking_id}/review", json={"rating": 5}, headers=planner_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
@pytest.mark.parametrize("score", [0, 6, -1])
async def test_rating_out_of_range(
    client: AsyncClient, db_session, usher, usher_headers, planner_headers, published_event, score
):
    booking_id = await completed_booking(client, usher_headers, planner_headers, published_event.id)
    response = await client.post(
        f"/api/v1/bookings/{booking_id}/review", json={"rating": score}, headers=planner_headers
    )
    assert response.status_code == 400
    assert await rating_of(db_session, usher.id) == 0


@pytest.mark.asyncio
async def test_review_missing_booking(client: AsyncClient, planner_headers):
    response = await client.post(
        "/api/v1/bookings/00000000-0000-0000-0000-000000000000/review",
        json={"rating": 4},
        headers=planner_headers,
    )
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_concurrent_review_loses_on_unique_constraint(
    db_session, planner, usher, published_event, monkeypatch
):
    """Two reviews that both passed the existence check: one row, one conflict."""
    planner_id = planner.id
    usher_id = usher.id

    booking = await booking_service.apply_to_event(db_session, usher_id, published_event.id)
    booking_id = booking.id
    await booking_service.transition_booking(db_session, booking_id, planner_id, "accepted")
    await booking_service.transition_booking(db_session, booking_id, planner_id, "completed")
    await db_session.commit()

    async def nothing_found(db, booking_id):
        return None

    monkeypatch.setattr(review_service, "find_review_id", nothing_found)

    await review_service.submit_review(db_session, booking_id, planner_id, 4)
    await db_session.commit()

    with pytest.raises(ConflictError):
        await review_service.submit_review(db_session, booking_id, planner_id, 2)

    count = (await db_session.execute(select(func.count(Review.id)).where(Review.booking_id == booking_id))).scalar_one()
    assert count == 1
    assert await rating_of(db_session, usher_id) == pytest.approx(4.0)


@pytest.mark.asyncio
async def test_fractional_rating_is_invalid_input(
    client: AsyncClient, db_session, usher, usher_headers, planner_headers, published_event
):
    booking_id = await completed_booking(client, usher_headers, planner_headers, published_event.id)
    response = await client.post(
        f"/api/v1/bookings/{booking_id}/review", json={"rating": 4.5}, headers=planner_headers
    )
    assert response.status_code == 400
    assert await rating_of(db_session, usher.id) == 0
