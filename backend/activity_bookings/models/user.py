"""
User model. Email is stored lowercased and is unique across the family.
"""

from typing import Optional

from activity_bookings.models.base import Entity


class User(Entity):
    username: str
    email: str
    password: str  # opaque, stored as submitted
    terms: bool
    created_at: str
    updated_at: Optional[str] = None

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email})>"
