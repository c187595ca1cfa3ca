"""
Domain error taxonomy.

Services raise these synchronously; the API layer maps each one to a status
code and the ``{"message", "errors"}`` response envelope. Storage I/O errors
are deliberately absent: the repository absorbs them (see JsonRepository).
"""

from typing import Optional

from pydantic import BaseModel


class FieldError(BaseModel):
    field: str
    message: str


class DomainError(Exception):
    status_code: int = 400

    def __init__(self, message: str, errors: Optional[list[FieldError]] = None):
        self.message = message
        self.errors = list(errors or [])
        super().__init__(message)


class ValidationFailed(DomainError):
    """One or more field-level errors, always the complete list."""

    def __init__(self, errors: list[FieldError], message: str = "Validation failed"):
        super().__init__(message, errors)


class EmailAlreadyRegistered(ValidationFailed):
    def __init__(self):
        super().__init__(
            [FieldError(field="email", message="Email is already registered")],
            message="Email is already registered",
        )


class NotFound(DomainError):
    status_code = 404


class ActivityNotFound(NotFound):
    def __init__(self):
        super().__init__("Activity not found")


class BookingNotFound(NotFound):
    def __init__(self):
        super().__init__("Booking not found")


class Forbidden(DomainError):
    status_code = 403


class CapacityExceeded(DomainError):
    def __init__(self, available: int, requested: int):
        self.available = available
        self.requested = requested
        super().__init__(
            f"Capacity exceeded. Available: {available}, Requested: {requested}"
        )


class PaymentFailed(DomainError):
    status_code = 402

    def __init__(self, message: str = "Payment could not be processed"):
        super().__init__(message)


class InvalidCredentials(DomainError):
    status_code = 401

    def __init__(self):
        super().__init__("Invalid email or password")


class AuthenticationRequired(DomainError):
    status_code = 401

    def __init__(self, message: str = "Authentication required"):
        super().__init__(message)
