from activity_bookings.models.activity import Activity, ActivityStatus, ACTIVITY_STATUSES
from activity_bookings.models.booking import Booking
from activity_bookings.models.payment import Payment, PaymentStatus
from activity_bookings.models.user import User

__all__ = [
    "Activity", "ActivityStatus", "ACTIVITY_STATUSES",
    "Booking",
    "Payment", "PaymentStatus",
    "User",
]
