"""
Payment gateway interface.
Lets the payment ledger charge through any adapter without knowing which.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class ChargeContext:
    """Who is paying for what. Used for logging/audit, never for the decision."""
    user_id: str
    booking_id: str
    activity_id: str


@dataclass(frozen=True)
class ChargeResult:
    success: bool


class PaymentGateway(ABC):
    """
    Interface for payment gateway adapters.

    Implementations:
    - MockPaymentGateway: deterministic simulation, no network calls
    """

    @abstractmethod
    def charge(self, amount: Union[int, float], context: ChargeContext) -> ChargeResult:
        """
        Attempt to charge `amount`.

        Args:
            amount: Total to charge (activity price x participants)
            context: Booking context for audit logging

        Returns:
            ChargeResult with success=False when the charge was declined
        """
        pass
