"""
Payment model: the ledger row for one successful charge.
"""

from enum import Enum
from typing import Union

from activity_bookings.models.base import Entity


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"


class Payment(Entity):
    booking_id: str
    amount: Union[int, float]
    status: PaymentStatus
    created_at: str

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, booking={self.booking_id}, amount={self.amount})>"
