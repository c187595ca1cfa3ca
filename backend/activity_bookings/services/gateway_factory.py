"""
Payment gateway factory.
Configures which gateway adapter the payment ledger charges through.
"""

from typing import Optional

from activity_bookings.core.config import Settings, get_settings
from activity_bookings.services.interfaces.payment_gateway import PaymentGateway
from activity_bookings.services.interfaces.mock_gateway import MockPaymentGateway


def get_payment_gateway(settings: Optional[Settings] = None) -> PaymentGateway:
    """
    Build the configured gateway.

    Selected by the PAYMENT_GATEWAY env var. Only "mock" exists: real
    payment networks are not integrated.
    """
    settings = settings or get_settings()
    name = settings.PAYMENT_GATEWAY.strip().lower()

    if name == "mock":
        return MockPaymentGateway()

    raise ValueError(f"Unsupported PAYMENT_GATEWAY: {settings.PAYMENT_GATEWAY!r}")
