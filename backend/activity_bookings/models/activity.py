"""
Activity model: a bookable event with price and participant limits.

Key design decisions:
- `slug` is derived from `name` and never set directly by callers
- `date` keeps the ISO string exactly as submitted
- `status` is a closed enum; transitions between members are unrestricted
"""

from enum import Enum
from typing import Optional, Union

from activity_bookings.models.base import Entity


class ActivityStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"
    CONFIRMED = "confirmed"
    SOLD_OUT = "sold-out"
    DONE = "done"
    CANCELLED = "cancelled"


ACTIVITY_STATUSES = [s.value for s in ActivityStatus]


class Activity(Entity):
    name: str
    slug: str
    price: Union[int, float]
    date: str
    duration: Union[int, float]  # minutes
    location: str
    min_participants: int
    max_participants: int
    status: ActivityStatus
    user_id: str
    created_at: str
    updated_at: Optional[str] = None

    def __repr__(self) -> str:
        return f"<Activity(id={self.id}, slug={self.slug}, status={self.status.value})>"
