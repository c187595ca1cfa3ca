"""
Composition root: builds one repository per entity family and wires the
services around them.

Nothing here is a module-level singleton. The application builds a container
at startup and keeps it on `app.state`; tests build their own against a
temporary directory.
"""

from dataclasses import dataclass
from typing import Optional

from activity_bookings.core.config import Settings, get_settings
from activity_bookings.core.logging import get_logger
from activity_bookings.models.activity import Activity
from activity_bookings.models.booking import Booking
from activity_bookings.models.payment import Payment
from activity_bookings.models.user import User
from activity_bookings.repositories.json_repository import JsonRepository, WriteErrorCallback
from activity_bookings.services.activity_service import ActivityService
from activity_bookings.services.booking_service import BookingService
from activity_bookings.services.gateway_factory import get_payment_gateway
from activity_bookings.services.interfaces.payment_gateway import PaymentGateway
from activity_bookings.services.payment_service import PaymentService
from activity_bookings.services.user_service import UserService

logger = get_logger(__name__)


@dataclass
class Repositories:
    activities: JsonRepository[Activity]
    users: JsonRepository[User]
    bookings: JsonRepository[Booking]
    payments: JsonRepository[Payment]

    def all(self) -> list[JsonRepository]:
        return [self.activities, self.users, self.bookings, self.payments]


@dataclass
class ServiceContainer:
    repositories: Repositories
    activities: ActivityService
    users: UserService
    payments: PaymentService
    bookings: BookingService

    @property
    def degraded(self) -> bool:
        """True while any family's last write failed."""
        return any(repo.degraded for repo in self.repositories.all())


def build_repositories(
    settings: Settings,
    on_write_error: Optional[WriteErrorCallback] = None,
) -> Repositories:
    return Repositories(
        activities=JsonRepository(
            Activity, "activity", settings.ACTIVITIES_FILE, settings.ACTIVITIES_SEED_FILE, on_write_error
        ),
        users=JsonRepository(User, "user", settings.USERS_FILE, settings.USERS_SEED_FILE, on_write_error),
        bookings=JsonRepository(
            Booking, "booking", settings.BOOKINGS_FILE, settings.BOOKINGS_SEED_FILE, on_write_error
        ),
        payments=JsonRepository(
            Payment, "payment", settings.PAYMENTS_FILE, settings.PAYMENTS_SEED_FILE, on_write_error
        ),
    )


def load_all_data(repositories: Repositories) -> None:
    """Load seed + persisted data for every family."""
    logger.info("data_loading_started")
    for repository in repositories.all():
        repository.load()
    logger.info("data_loading_completed")


def build_container(
    settings: Optional[Settings] = None,
    gateway: Optional[PaymentGateway] = None,
    on_write_error: Optional[WriteErrorCallback] = None,
) -> ServiceContainer:
    settings = settings or get_settings()
    repositories = build_repositories(settings, on_write_error)
    load_all_data(repositories)

    activities = ActivityService(repositories.activities)
    payments = PaymentService(repositories.payments, gateway or get_payment_gateway(settings))
    return ServiceContainer(
        repositories=repositories,
        activities=activities,
        users=UserService(repositories.users),
        payments=payments,
        bookings=BookingService(repositories.bookings, activities, payments),
    )
