from activity_bookings.schemas.activity import ActivityStatusUpdate
from activity_bookings.schemas.booking import BookingActivityInfo, BookingResponse
from activity_bookings.schemas.error import ErrorResponse
from activity_bookings.schemas.user import AuthResponse, UserResponse

__all__ = [
    "ActivityStatusUpdate",
    "BookingActivityInfo", "BookingResponse",
    "ErrorResponse",
    "AuthResponse", "UserResponse",
]
