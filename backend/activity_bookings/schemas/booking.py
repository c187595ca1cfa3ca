"""
Pydantic schemas for booking-related responses.
Request bodies are validated by BookingService so every field error is
reported together.
"""

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from activity_bookings.models.activity import ActivityStatus
from activity_bookings.models.payment import PaymentStatus


class BookingActivityInfo(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str
    slug: str
    price: Union[int, float]
    date: str
    duration: Union[int, float]
    location: str
    status: ActivityStatus


class BookingResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str
    activity_id: str
    user_id: str
    participants: int
    created_at: str
    payment_id: Optional[str] = None
    payment_status: PaymentStatus
    activity: BookingActivityInfo
