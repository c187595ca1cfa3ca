"""
Login endpoint.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from activity_bookings.api.dependencies import get_user_service
from activity_bookings.api.routes.users import to_auth_response
from activity_bookings.schemas.user import AuthResponse
from activity_bookings.services.user_service import UserService

router = APIRouter(prefix="/login", tags=["Authentication"])


@router.post("", response_model=AuthResponse)
def login(
    payload: Any = Body(None),
    users: UserService = Depends(get_user_service),
):
    """Authenticate and receive a JWT access token."""
    user = users.authenticate(payload)
    return to_auth_response(user)
