"""
FastAPI dependencies resolving the service container built at startup.
Tests override `get_container` with a container on a temporary directory.
"""

from fastapi import Depends, Request

from activity_bookings.services.activity_service import ActivityService
from activity_bookings.services.booking_service import BookingService
from activity_bookings.services.container import ServiceContainer
from activity_bookings.services.user_service import UserService


def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_activity_service(container: ServiceContainer = Depends(get_container)) -> ActivityService:
    return container.activities


def get_booking_service(container: ServiceContainer = Depends(get_container)) -> BookingService:
    return container.bookings


def get_user_service(container: ServiceContainer = Depends(get_container)) -> UserService:
    return container.users
