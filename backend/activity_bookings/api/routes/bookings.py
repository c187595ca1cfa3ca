"""
Booking endpoints. Creating a booking charges the mock gateway first; a
declined charge returns 402 and leaves no booking or payment behind.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from activity_bookings.api.dependencies import get_booking_service
from activity_bookings.core.security import get_current_user_id
from activity_bookings.models.booking import Booking
from activity_bookings.schemas.booking import BookingResponse
from activity_bookings.services.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("", response_model=Booking, response_model_exclude_none=True, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: Any = Body(None),
    user_id: str = Depends(get_current_user_id),
    bookings: BookingService = Depends(get_booking_service),
):
    """
    Book seats on an activity.

    400 on validation errors or when the activity has too few seats left,
    404 for an unknown activity, 402 when the payment is declined.
    """
    return bookings.create(payload, user_id)


@router.get("", response_model=list[BookingResponse], response_model_exclude_none=True)
def list_user_bookings(
    user_id: str = Depends(get_current_user_id),
    bookings: BookingService = Depends(get_booking_service),
):
    """
    Get all bookings of the authenticated user with their activity details.
    Bookings of deleted activities are omitted.
    """
    return bookings.list_user_bookings(user_id)


@router.get("/{booking_id}", response_model=BookingResponse, response_model_exclude_none=True)
def get_user_booking(
    booking_id: str,
    user_id: str = Depends(get_current_user_id),
    bookings: BookingService = Depends(get_booking_service),
):
    booking = bookings.get_user_booking_by_id(booking_id, user_id)
    return bookings.enrich_booking_with_activity(booking)
