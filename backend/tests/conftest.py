"""
Pytest fixtures for isolated stores, services, HTTP client and authentication.

Every test gets its own container whose JSON documents live in `tmp_path`,
so nothing leaks between tests and the real `db/` directory is never touched.
"""

from datetime import datetime, timezone, timedelta
from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from activity_bookings.main import app
from activity_bookings.api.dependencies import get_container
from activity_bookings.core.config import Settings
from activity_bookings.core.security import create_access_token
from activity_bookings.models.activity import Activity
from activity_bookings.models.user import User
from activity_bookings.services.container import ServiceContainer, build_container


def future_date(days: int = 30) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        DATA_DIR=str(tmp_path),
        ACTIVITIES_FILE=str(tmp_path / "activities.json"),
        ACTIVITIES_SEED_FILE=None,
        USERS_FILE=str(tmp_path / "users.json"),
        BOOKINGS_FILE=str(tmp_path / "bookings.json"),
        PAYMENTS_FILE=str(tmp_path / "payments.json"),
    )


@pytest.fixture
def container(settings: Settings) -> ServiceContainer:
    return build_container(settings)


@pytest.fixture
def activity_payload() -> Callable[..., dict]:
    """Factory for a valid create body; keyword arguments override fields."""

    def make(**overrides) -> dict:
        payload = {
            "name": "Evening Salsa Class",
            "price": 100,
            "date": future_date(),
            "duration": 90,
            "location": "Dance Studio 4",
            "minParticipants": 1,
            "maxParticipants": 5,
            "status": "published",
        }
        payload.update(overrides)
        return payload

    return make


@pytest.fixture
def test_user(container: ServiceContainer) -> User:
    return container.users.create({
        "username": "testuser",
        "email": "test@example.com",
        "password": "testpassword123",
        "terms": True,
    })


@pytest.fixture
def other_user(container: ServiceContainer) -> User:
    return container.users.create({
        "username": "otheruser",
        "email": "other@example.com",
        "password": "otherpassword123",
        "terms": True,
    })


@pytest.fixture
def test_activity(container: ServiceContainer, test_user: User, activity_payload) -> Activity:
    """An activity owned by test_user: price 100, 1-5 participants."""
    return container.activities.create(activity_payload(), test_user.id)


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    token = create_access_token(test_user.id, test_user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers(other_user: User) -> dict:
    token = create_access_token(other_user.id, other_user.email)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def client(container: ServiceContainer) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client that overrides the container dependency with the test container."""
    app.dependency_overrides[get_container] = lambda: container

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
