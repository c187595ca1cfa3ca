"""
Payment ledger: charge first, record only on success.

A declined charge raises PaymentFailed before anything is written, so the
ledger never holds pending or failed rows for a booking attempt.
"""

from typing import Optional, Union

from activity_bookings.core.exceptions import PaymentFailed
from activity_bookings.core.logging import get_logger
from activity_bookings.models.payment import Payment, PaymentStatus
from activity_bookings.repositories.json_repository import JsonRepository
from activity_bookings.services.interfaces.payment_gateway import ChargeContext, PaymentGateway
from activity_bookings.services.validation import utc_now_iso

logger = get_logger(__name__)


class PaymentService:
    def __init__(self, repository: JsonRepository[Payment], gateway: PaymentGateway):
        self.repository = repository
        self.gateway = gateway

    def create_for_booking(
        self,
        booking_id: str,
        amount: Union[int, float],
        user_id: str,
        activity_id: str,
    ) -> Payment:
        result = self.gateway.charge(
            amount,
            ChargeContext(user_id=user_id, booking_id=booking_id, activity_id=activity_id),
        )
        if not result.success:
            logger.warning("payment_declined", booking_id=booking_id, amount=amount)
            raise PaymentFailed()

        payment = Payment(
            id=self.repository.next_id(),
            booking_id=booking_id,
            amount=amount,
            status=PaymentStatus.PAID,
            created_at=utc_now_iso(),
        )
        self.repository.create(payment)

        logger.info(
            "payment_created",
            payment_id=payment.id,
            booking_id=booking_id,
            amount=amount,
            status=payment.status.value,
        )
        return payment

    def get_by_id(self, payment_id: str) -> Optional[Payment]:
        return self.repository.get_by_id(payment_id)

    def get_by_booking_id(self, booking_id: str) -> Optional[Payment]:
        for payment in self.repository.get_all():
            if payment.booking_id == booking_id:
                return payment
        return None
