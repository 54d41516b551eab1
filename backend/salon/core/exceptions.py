"""
Custom exceptions for the application.

Every error that may cross the service boundary derives from SalonError and
carries the HTTP status and error code the API layer responds with.
"""

from typing import List, Optional


class SalonError(Exception):
    """Base class for domain and store errors."""

    status_code = 500
    error_code = "internal_error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(SalonError):
    """Requested entity does not exist."""

    status_code = 404
    error_code = "not_found"

    def __init__(self, entity: str, identifier: object):
        super().__init__(f"{entity} {identifier} not found")
        self.entity = entity
        self.identifier = identifier


class ValidationError(SalonError):
    """Request data failed validation; carries field-level reasons."""

    status_code = 400
    error_code = "validation_error"

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        errors: Optional[List[str]] = None,
    ):
        super().__init__(message)
        self.field = field
        if errors is None:
            errors = [f"{field}: {message}" if field else message]
        self.errors = errors


class ConflictError(SalonError):
    """Operation conflicts with the current state of the store."""

    status_code = 409
    error_code = "conflict"


class SlotConflictError(ConflictError):
    error_code = "slot_conflict"

    def __init__(self, employee_id: int, appointment_date, appointment_time):
        super().__init__(
            f"Employee {employee_id} is already booked on "
            f"{appointment_date} at {appointment_time}"
        )
        self.employee_id = employee_id
        self.appointment_date = appointment_date
        self.appointment_time = appointment_time


class AlreadyCompletedError(ConflictError):
    error_code = "already_completed"

    def __init__(self, appointment_id: int):
        super().__init__(f"Appointment {appointment_id} is already completed")
        self.appointment_id = appointment_id


class InvalidStatusTransitionError(ConflictError):
    error_code = "invalid_status_transition"

    def __init__(self, current: str, requested: str):
        super().__init__(f"Cannot change status from {current} to {requested}")
        self.current = current
        self.requested = requested


class DuplicatePhoneError(ConflictError):
    error_code = "duplicate_phone"

    def __init__(self, phone: str):
        super().__init__(f"A customer with phone {phone} already exists")
        self.phone = phone


class StoreUnavailableError(SalonError):
    """The database could not be reached or dropped the connection."""

    status_code = 503
    error_code = "store_unavailable"
