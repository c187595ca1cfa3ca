"""
Error response envelope shared by every failing endpoint.
"""

from pydantic import BaseModel

from activity_bookings.core.exceptions import FieldError


class ErrorResponse(BaseModel):
    message: str
    errors: list[FieldError] = []
