"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .payment_gateway import ChargeContext, ChargeResult, PaymentGateway
from .mock_gateway import MockPaymentGateway

__all__ = ['ChargeContext', 'ChargeResult', 'PaymentGateway', 'MockPaymentGateway']
