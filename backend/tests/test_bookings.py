"""
Tests for booking endpoints: capacity, payment outcomes, ownership and the
enriched read model.
"""

import asyncio

import pytest
from httpx import AsyncClient


async def create_booking(client: AsyncClient, headers: dict, activity_id: str, participants: int):
    return await client.post(
        "/bookings",
        json={"activityId": activity_id, "participants": participants},
        headers=headers,
    )


@pytest.mark.asyncio
async def test_create_booking(client: AsyncClient, other_auth_headers, other_user, test_activity):
    """A successful booking is paid and linked to its payment."""
    response = await create_booking(client, other_auth_headers, test_activity.id, 2)
    assert response.status_code == 201
    data = response.json()
    assert data["id"] == "booking-1"
    assert data["activityId"] == test_activity.id
    assert data["userId"] == other_user.id
    assert data["participants"] == 2
    assert data["paymentId"] == "payment-1"
    assert data["paymentStatus"] == "paid"


@pytest.mark.asyncio
async def test_create_booking_requires_auth(client: AsyncClient, test_activity):
    response = await client.post("/bookings", json={"activityId": test_activity.id, "participants": 1})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_booking_invalid(client: AsyncClient, auth_headers):
    response = await client.post("/bookings", json={"participants": 0}, headers=auth_headers)
    assert response.status_code == 400
    data = response.json()
    assert data["message"] == "Validation failed"
    assert [e["field"] for e in data["errors"]] == ["activityId", "participants"]


@pytest.mark.asyncio
async def test_create_booking_unknown_activity(client: AsyncClient, auth_headers):
    response = await create_booking(client, auth_headers, "activity-404", 1)
    assert response.status_code == 404
    assert response.json()["message"] == "Activity not found"


@pytest.mark.asyncio
async def test_capacity_exceeded(client: AsyncClient, auth_headers, test_activity):
    """Seats are limited by maxParticipants across all bookings."""
    first = await create_booking(client, auth_headers, test_activity.id, 3)
    assert first.status_code == 201

    rejected = await create_booking(client, auth_headers, test_activity.id, 3)
    assert rejected.status_code == 400
    assert rejected.json()["message"] == "Capacity exceeded. Available: 2, Requested: 3"

    last = await create_booking(client, auth_headers, test_activity.id, 2)
    assert last.status_code == 201


@pytest.mark.asyncio
async def test_declined_payment(client: AsyncClient, auth_headers, container, test_user, activity_payload):
    """Amounts that are a multiple of 1000 are declined with 402."""
    activity = container.activities.create(activity_payload(price=500), test_user.id)

    response = await create_booking(client, auth_headers, activity.id, 2)
    assert response.status_code == 402
    assert response.json() == {"message": "Payment could not be processed", "errors": []}

    listing = await client.get("/bookings", headers=auth_headers)
    assert listing.json() == []

    retry = await create_booking(client, auth_headers, activity.id, 1)
    assert retry.status_code == 201
    assert retry.json()["paymentId"] == "payment-1"


@pytest.mark.asyncio
async def test_concurrent_bookings_never_oversell(client: AsyncClient, auth_headers, test_activity):
    """Parallel requests for the last seats: only as many succeed as fit."""
    responses = await asyncio.gather(*[
        create_booking(client, auth_headers, test_activity.id, 1) for _ in range(10)
    ])

    codes = [r.status_code for r in responses]
    assert codes.count(201) == 5
    assert codes.count(400) == 5


@pytest.mark.asyncio
async def test_list_bookings_is_enriched_and_scoped(
    client: AsyncClient, auth_headers, other_auth_headers, test_activity
):
    await create_booking(client, auth_headers, test_activity.id, 1)
    await create_booking(client, other_auth_headers, test_activity.id, 2)

    response = await client.get("/bookings", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert len(data) == 1
    assert data[0]["participants"] == 1
    assert data[0]["paymentStatus"] == "paid"
    assert data[0]["activity"] == {
        "name": test_activity.name,
        "slug": test_activity.slug,
        "price": 100,
        "date": test_activity.date,
        "duration": 90,
        "location": test_activity.location,
        "status": "published",
    }


@pytest.mark.asyncio
async def test_get_booking(client: AsyncClient, auth_headers, test_activity):
    created = await create_booking(client, auth_headers, test_activity.id, 2)
    booking_id = created.json()["id"]

    response = await client.get(f"/bookings/{booking_id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["activity"]["name"] == test_activity.name


@pytest.mark.asyncio
async def test_get_someone_elses_booking(client: AsyncClient, auth_headers, other_auth_headers, test_activity):
    """Another user's booking looks exactly like a missing one."""
    created = await create_booking(client, auth_headers, test_activity.id, 1)
    booking_id = created.json()["id"]

    foreign = await client.get(f"/bookings/{booking_id}", headers=other_auth_headers)
    missing = await client.get("/bookings/booking-404", headers=other_auth_headers)

    assert foreign.status_code == missing.status_code == 404
    assert foreign.json() == missing.json() == {"message": "Booking not found", "errors": []}




@pytest.mark.asyncio
async def test_list_bookings_skips_deleted_activity(
    client: AsyncClient, auth_headers, other_auth_headers, container, test_user, activity_payload
):
    """Deleting one activity must not hide the user's other bookings."""
    kept = container.activities.create(activity_payload(name="Pottery Class"), test_user.id)
    removed = container.activities.create(activity_payload(name="Harbour Kayak"), test_user.id)
    await create_booking(client, other_auth_headers, kept.id, 1)
    await create_booking(client, other_auth_headers, removed.id, 2)

    deleted = await client.delete(f"/activities/{removed.id}", headers=auth_headers)
    assert deleted.status_code == 204

    response = await client.get("/bookings", headers=other_auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert [b["activityId"] for b in data] == [kept.id]
    assert data[0]["activity"]["name"] == "Pottery Class"
