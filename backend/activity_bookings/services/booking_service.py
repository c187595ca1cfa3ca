"""
Booking service: capacity accounting and the charge-then-book transaction.

TRANSACTION ORDER
=================

  1. Validate the request (complete error list)
  2. Resolve the activity                  -> ActivityNotFound
  3. Check remaining capacity              -> CapacityExceeded
  4. amount = price x participants
  5. Reserve the booking id (consumes the counter even if the charge fails)
  6. Charge and record the payment         -> PaymentFailed, nothing written
  7. Write the booking with its payment id

Steps 2-7 run under the booking repository lock, so two concurrent requests
cannot both pass the capacity check for the same remaining seats. A booking
is therefore never stored without a paid payment, and a payment is never
stored without the booking that consumes it.

Known gap: if the booking write fails after a successful charge, the store
absorbs the error (see JsonRepository) and the call still succeeds. There is
no compensating refund.

Capacity is recomputed from the live bookings on every call rather than kept
as a denormalized counter; with file-backed storage the scan is cheap.
"""

from typing import Any, Optional

from activity_bookings.core.exceptions import (
    ActivityNotFound,
    BookingNotFound,
    CapacityExceeded,
    DomainError,
    FieldError,
    PaymentFailed,
    ValidationFailed,
)
from activity_bookings.core.logging import get_logger
from activity_bookings.core.metrics import record_booking_attempt
from activity_bookings.models.booking import Booking
from activity_bookings.models.payment import PaymentStatus
from activity_bookings.repositories.json_repository import JsonRepository
from activity_bookings.schemas.booking import BookingActivityInfo, BookingResponse
from activity_bookings.services.activity_service import ActivityService
from activity_bookings.services.payment_service import PaymentService
from activity_bookings.services.validation import (
    BODY_ERROR,
    as_payload,
    is_non_empty_string,
    is_whole_number,
    utc_now_iso,
)

logger = get_logger(__name__)

_OUTCOMES = (
    (ValidationFailed, "invalid"),
    (ActivityNotFound, "not_found"),
    (CapacityExceeded, "capacity_exceeded"),
    (PaymentFailed, "payment_failed"),
)


def _outcome_of(error: DomainError) -> str:
    for error_type, outcome in _OUTCOMES:
        if isinstance(error, error_type):
            return outcome
    return "error"


class BookingService:
    def __init__(
        self,
        repository: JsonRepository[Booking],
        activity_service: ActivityService,
        payment_service: PaymentService,
    ):
        self.repository = repository
        self.activity_service = activity_service
        self.payment_service = payment_service

    def validate_create(self, data: Any) -> list[FieldError]:
        req = as_payload(data)
        if req is None:
            return [BODY_ERROR]

        errors: list[FieldError] = []

        if not is_non_empty_string(req.get("activityId")):
            errors.append(FieldError(
                field="activityId",
                message="Activity ID is required and must be a non-empty string",
            ))

        participants = req.get("participants")
        if not is_whole_number(participants) or participants < 1:
            errors.append(FieldError(
                field="participants",
                message="Participants is required and must be a whole number (at least 1)",
            ))

        return errors

    def get_bookings_by_activity_id(self, activity_id: str) -> list[Booking]:
        return [b for b in self.repository.get_all() if b.activity_id == activity_id]

    def calculate_available_capacity(self, activity_id: str) -> int:
        """maxParticipants minus participants already booked, floored at 0."""
        activity = self.activity_service.get_by_id(activity_id)
        if activity is None:
            return 0

        booked = sum(b.participants for b in self.get_bookings_by_activity_id(activity_id))
        return max(0, activity.max_participants - booked)

    def create(self, data: Any, user_id: str) -> Booking:
        try:
            booking = self._create(data, user_id)
        except DomainError as e:
            record_booking_attempt(_outcome_of(e))
            raise
        record_booking_attempt("success")
        return booking

    def _create(self, data: Any, user_id: str) -> Booking:
        errors = self.validate_create(data)
        if errors:
            raise ValidationFailed(errors)

        req = as_payload(data)
        activity_id = req["activityId"]
        participants = int(req["participants"])

        with self.repository.lock:
            activity = self.activity_service.get_by_id(activity_id)
            if activity is None:
                raise ActivityNotFound()

            available = self.calculate_available_capacity(activity_id)
            if participants > available:
                logger.warning(
                    "booking_failed_no_capacity",
                    activity_id=activity_id,
                    requested=participants,
                    available=available,
                )
                raise CapacityExceeded(available=available, requested=participants)

            amount = activity.price * participants
            booking_id = self.repository.next_id()

            payment = self.payment_service.create_for_booking(
                booking_id,
                amount,
                user_id,
                activity_id,
            )

            booking = Booking(
                id=booking_id,
                activity_id=activity_id,
                user_id=user_id,
                participants=participants,
                created_at=utc_now_iso(),
                payment_id=payment.id,
                payment_status=PaymentStatus.PAID,
            )
            self.repository.create(booking)

        logger.info(
            "booking_created",
            booking_id=booking_id,
            activity_id=activity_id,
            participants=participants,
            payment_id=payment.id,
        )
        return booking

    def get_all_by_user_id(self, user_id: str) -> list[Booking]:
        return [b for b in self.repository.get_all() if b.user_id == user_id]

    def get_by_id(self, booking_id: str) -> Optional[Booking]:
        return self.repository.get_by_id(booking_id)

    def get_user_booking_by_id(self, booking_id: str, user_id: str) -> Booking:
        """Someone else's booking is reported exactly like a missing one."""
        booking = self.get_by_id(booking_id)
        if booking is None or booking.user_id != user_id:
            raise BookingNotFound()
        return booking

    def enrich_booking_with_activity(self, booking: Booking) -> BookingResponse:
        """Read-only join of a booking with its activity; never writes."""
        activity = self.activity_service.get_by_id(booking.activity_id)
        if activity is None:
            raise ActivityNotFound()

        return BookingResponse(
            id=booking.id,
            activity_id=booking.activity_id,
            user_id=booking.user_id,
            participants=booking.participants,
            created_at=booking.created_at,
            payment_id=booking.payment_id,
            payment_status=self.resolve_payment_status(booking),
            activity=BookingActivityInfo(
                name=activity.name,
                slug=activity.slug,
                price=activity.price,
                date=activity.date,
                duration=activity.duration,
                location=activity.location,
                status=activity.status,
            ),
        )

    def list_user_bookings(self, user_id: str) -> list[BookingResponse]:
        """
        Enriched bookings of one user. A booking whose activity no longer
        exists is left out of the list instead of failing the whole read.
        """
        enriched = []
        for booking in self.get_all_by_user_id(user_id):
            try:
                enriched.append(self.enrich_booking_with_activity(booking))
            except ActivityNotFound:
                logger.warning(
                    "booking_activity_missing",
                    booking_id=booking.id,
                    activity_id=booking.activity_id,
                )
        return enriched

    @staticmethod
    def resolve_payment_status(booking: Booking) -> PaymentStatus:
        return booking.payment_status or PaymentStatus.PENDING
