"""
Mock payment gateway - deterministic, no external calls.
"""

from typing import Union

from activity_bookings.core.logging import get_logger
from activity_bookings.core.metrics import record_charge
from activity_bookings.services.interfaces.payment_gateway import (
    ChargeContext,
    ChargeResult,
    PaymentGateway,
)

logger = get_logger(__name__)

DECLINE_DIVISOR = 1000


class MockPaymentGateway(PaymentGateway):
    """
    Simulated gateway.

    Declines any positive amount evenly divisible by 1000 and approves
    everything else (including 0), so the failure path can be triggered on
    purpose: price 500 x 2 participants is always declined.
    """

    def charge(self, amount: Union[int, float], context: ChargeContext) -> ChargeResult:
        declined = amount > 0 and amount % DECLINE_DIVISOR == 0
        record_charge(not declined)

        if declined:
            logger.info(
                "charge_declined",
                amount=amount,
                booking_id=context.booking_id,
                user_id=context.user_id,
                activity_id=context.activity_id,
            )
            return ChargeResult(success=False)

        logger.info(
            "charge_approved",
            amount=amount,
            booking_id=context.booking_id,
            user_id=context.user_id,
            activity_id=context.activity_id,
        )
        return ChargeResult(success=True)
