"""
User service handling registration, lookup and credential checks.

Emails are stored lowercased and indexed (email -> user id). The index is
rebuilt from the repository on construction and updated together with every
insert, so lookups never scan the family.

Passwords are stored exactly as submitted and compared verbatim.
"""

import re
from typing import Any, Optional

from activity_bookings.core.exceptions import (
    EmailAlreadyRegistered,
    FieldError,
    InvalidCredentials,
    ValidationFailed,
)
from activity_bookings.core.logging import get_logger
from activity_bookings.models.user import User
from activity_bookings.repositories.json_repository import JsonRepository
from activity_bookings.services.validation import (
    BODY_ERROR,
    as_payload,
    is_non_empty_string,
    utc_now_iso,
)

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6


class UserService:
    def __init__(self, repository: JsonRepository[User]):
        self.repository = repository
        self._email_index: dict[str, str] = {}
        self.rebuild_email_index()

    def rebuild_email_index(self) -> None:
        index = {}
        for user in self.repository.get_all():
            email = user.email.lower()
            if email in index:
                logger.warning("duplicate_email_in_store", email=email, user_id=user.id, kept=index[email])
                continue
            index[email] = user.id
        self._email_index = index

    def validate_register(self, data: Any) -> list[FieldError]:
        req = as_payload(data)
        if req is None:
            return [BODY_ERROR]

        errors: list[FieldError] = []

        if not is_non_empty_string(req.get("username")):
            errors.append(FieldError(field="username", message="Username is required and must be a non-empty string"))

        email = req.get("email")
        if not is_non_empty_string(email):
            errors.append(FieldError(field="email", message="Email is required and must be a non-empty string"))
        elif not EMAIL_PATTERN.match(email):
            errors.append(FieldError(field="email", message="Email must be a valid email address"))

        password = req.get("password")
        if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
            errors.append(FieldError(
                field="password",
                message=f"Password is required and must be at least {MIN_PASSWORD_LENGTH} characters long",
            ))

        if req.get("terms") is not True:
            errors.append(FieldError(field="terms", message="Terms acceptance is required"))

        return errors

    def validate_login(self, data: Any) -> list[FieldError]:
        req = as_payload(data)
        if req is None:
            return [BODY_ERROR]

        errors: list[FieldError] = []
        if not is_non_empty_string(req.get("email")):
            errors.append(FieldError(field="email", message="Email is required and must be a non-empty string"))
        if not is_non_empty_string(req.get("password")):
            errors.append(FieldError(field="password", message="Password is required and must be a non-empty string"))
        return errors

    def create(self, data: Any) -> User:
        """Register a user. Raises EmailAlreadyRegistered for a taken email."""
        errors = self.validate_register(data)
        if errors:
            raise ValidationFailed(errors)

        req = as_payload(data)
        email = req["email"].strip().lower()

        with self.repository.lock:
            if email in self._email_index:
                logger.warning("registration_failed", reason="email_exists", email=email)
                raise EmailAlreadyRegistered()

            user = User(
                id=self.repository.next_id(),
                username=req["username"],
                email=email,
                password=req["password"],
                terms=req["terms"],
                created_at=utc_now_iso(),
            )
            self.repository.create(user)
            self._email_index[email] = user.id

        logger.info("user_registered", user_id=user.id, email=email)
        return user

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self.repository.get_by_id(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        user_id = self._email_index.get(email.strip().lower())
        if user_id is None:
            return None
        return self.repository.get_by_id(user_id)

    def authenticate(self, data: Any) -> User:
        errors = self.validate_login(data)
        if errors:
            raise ValidationFailed(errors)

        req = as_payload(data)
        user = self.get_by_email(req["email"])
        if user is None or user.password != req["password"]:
            logger.warning("login_failed", email=req["email"])
            raise InvalidCredentials()

        logger.info("user_logged_in", user_id=user.id)
        return user
