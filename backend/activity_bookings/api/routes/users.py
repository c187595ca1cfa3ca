"""
User registration endpoint.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends, status

from activity_bookings.api.dependencies import get_user_service
from activity_bookings.core.security import create_access_token
from activity_bookings.models.user import User
from activity_bookings.schemas.user import AuthResponse, UserResponse
from activity_bookings.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


def to_auth_response(user: User) -> AuthResponse:
    return AuthResponse(
        user=UserResponse(id=user.id, username=user.username, email=user.email, terms=user.terms),
        access_token=create_access_token(user.id, user.email),
    )


@router.post("", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: Any = Body(None),
    users: UserService = Depends(get_user_service),
):
    """Register a new user account and return an access token."""
    user = users.create(payload)
    return to_auth_response(user)
