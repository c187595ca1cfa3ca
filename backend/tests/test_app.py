"""
Tests for application-level endpoints and request middleware.
"""

import pytest
from httpx import AsyncClient

from activity_bookings.main import app


@pytest.mark.asyncio
async def test_root(client: AsyncClient):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["docs"] == "/docs"


@pytest.mark.asyncio
async def test_metrics_after_booking(client: AsyncClient, auth_headers, test_activity):
    await client.post("/bookings", json={"activityId": test_activity.id, "participants": 1}, headers=auth_headers)

    response = await client.get("/metrics")
    assert response.status_code == 200
    assert "booking_attempts_total" in response.text
    assert "gateway_charges_total" in response.text


@pytest.mark.asyncio
async def test_request_id_is_echoed(client: AsyncClient):
    response = await client.get("/activities", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"
    assert response.headers["X-Response-Time"].endswith("ms")


@pytest.mark.asyncio
async def test_request_id_is_assigned(client: AsyncClient):
    response = await client.get("/activities")
    assert len(response.headers["X-Request-ID"]) == 8


@pytest.mark.asyncio
async def test_health_reports_storage_degradation(client: AsyncClient, container, tmp_path):
    app.state.container = container
    try:
        response = await client.get("/health")
        assert response.json()["status"] == "ok"
        assert "X-Storage-Degraded" not in response.headers

        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        container.repositories.payments.entity_file_path = str(blocker / "payments.json")
        container.payments.create_for_booking("booking-1", 10, "user-1", "activity-1")

        response = await client.get("/health")
        assert response.json()["status"] == "degraded"
        assert response.headers["X-Storage-Degraded"] == "true"
    finally:
        del app.state.container


@pytest.mark.asyncio
async def test_malformed_json_uses_error_envelope(client: AsyncClient, auth_headers):
    response = await client.post(
        "/bookings",
        content=b"{not json",
        headers={**auth_headers, "Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json()["message"] == "Validation failed"
