"""
Booking model representing a user's reservation on an activity.

Key design decisions:
- A booking is only written after its payment succeeded, so `payment_id`
  is set on every booking this service creates
- `payment_status` is optional for records imported from older documents;
  readers treat a missing value as "pending"
- Bookings are append-only (no delete, no cancel)
"""

from typing import Optional

from activity_bookings.models.base import Entity
from activity_bookings.models.payment import PaymentStatus


class Booking(Entity):
    activity_id: str
    user_id: str
    participants: int
    created_at: str
    payment_id: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, activity={self.activity_id}, participants={self.participants})>"
