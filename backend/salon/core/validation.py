"""
Common validation utilities for the salon API.

Each entity validator turns a camelCase JSON payload into snake_case
``cleaned_data`` and collects field-level error messages. Controllers run
the validator before any service or store call and reject the request with
a ValidationError when errors were found.
"""

import json
import logging
import math
import re
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional, Sequence

from werkzeug.routing import IntegerConverter

from salon.core.exceptions import ValidationError
from salon.domain.entities import AppointmentStatus, Gender, PaymentMethod, PaymentStatus

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
TIME_FORMATS = ("%H:%M:%S", "%H:%M")
# Largest value a 64-bit INTEGER column holds
MAX_STORE_INT = 2**63 - 1


class ValidationResult:
    """Container for validation results."""

    def __init__(self):
        self.errors: List[str] = []
        self.is_valid: bool = True
        self.cleaned_data: Dict[str, Any] = {}

    def add_error(self, message: str, field: Optional[str] = None):
        """Add validation error."""
        error_msg = f"{field}: {message}" if field else message
        self.errors.append(error_msg)
        self.is_valid = False
        logger.warning(f"Validation error: {error_msg}")

    def raise_if_invalid(self) -> Dict[str, Any]:
        """Return cleaned data, or raise ValidationError carrying every reason."""
        if not self.is_valid:
            raise ValidationError("Validation failed", errors=list(self.errors))
        return self.cleaned_data


class BaseValidator:
    """Base validator with common validation methods."""

    def validate(
        self, data: Dict[str, Any]
    ) -> ValidationResult:  # pragma: no cover - interface definition
        """Validate data for a specific entity type."""
        raise NotImplementedError("Subclasses must implement validate")

    @staticmethod
    def validate_required_field(
        value: Any, field_name: str, result: ValidationResult
    ) -> bool:
        """Validate that a required field is present and not empty."""
        if (
            value is None
            or value == ""
            or (isinstance(value, str) and value.strip() == "")
        ):
            result.add_error(f"{field_name} is required", field_name)
            return False
        return True

    @staticmethod
    def validate_date(
        value: Any, field_name: str, result: ValidationResult
    ) -> Optional[date]:
        """Validate and convert date field."""
        if value is None or value == "":
            return None

        if isinstance(value, datetime):
            return value.date()

        if isinstance(value, date):
            return value

        if isinstance(value, str):
            try:
                return datetime.strptime(value.strip(), "%Y-%m-%d").date()
            except ValueError:
                result.add_error("Invalid date. Use format YYYY-MM-DD", field_name)
                return None

        result.add_error("Invalid date format", field_name)
        return None

    @staticmethod
    def validate_time(
        value: Any, field_name: str, result: ValidationResult
    ) -> Optional[time]:
        """Validate and convert a HH:MM or HH:MM:SS time field."""
        if value is None or value == "":
            return None

        if isinstance(value, time):
            return value

        if isinstance(value, str):
            for fmt in TIME_FORMATS:
                try:
                    return datetime.strptime(value.strip(), fmt).time()
                except ValueError:
                    continue

        result.add_error("Invalid time. Use format HH:MM or HH:MM:SS", field_name)
        return None

    @staticmethod
    def validate_datetime(
        value: Any, field_name: str, result: ValidationResult
    ) -> Optional[datetime]:
        """Validate an ISO-8601 datetime; a bare date means midnight."""
        if value is None or value == "":
            return None

        if isinstance(value, datetime):
            return value

        if isinstance(value, date):
            return datetime.combine(value, time.min)

        if isinstance(value, str):
            try:
                parsed = datetime.fromisoformat(value.strip())
            except ValueError:
                result.add_error(
                    "Invalid datetime. Use format YYYY-MM-DDTHH:MM:SS", field_name
                )
                return None
            # Stored timestamps are naive local time.
            return parsed.replace(tzinfo=None)

        result.add_error("Invalid datetime format", field_name)
        return None

    @staticmethod
    def validate_float(
        value: Any,
        field_name: str,
        result: ValidationResult,
        min_value: Optional[float] = None,
        max_value: Optional[float] = None,
        positive: bool = False,
    ) -> Optional[float]:
        """Validate and convert a numeric field."""
        if value is None or value == "":
            return None

        if isinstance(value, bool):
            result.add_error("Value must be a number", field_name)
            return None

        try:
            float_value = float(value)
        except (TypeError, ValueError):
            result.add_error("Value must be a number", field_name)
            return None

        if not math.isfinite(float_value):
            result.add_error("Value must be a finite number", field_name)
            return None

        if positive and float_value <= 0:
            result.add_error("Value must be positive", field_name)
            return None

        if min_value is not None and float_value < min_value:
            result.add_error(f"Value must be at least {min_value}", field_name)
            return None

        if max_value is not None and float_value > max_value:
            result.add_error(f"Value must be at most {max_value}", field_name)
            return None

        return float_value

    @staticmethod
    def validate_integer(
        value: Any,
        field_name: str,
        result: ValidationResult,
        min_value: Optional[int] = None,
        max_value: Optional[int] = None,
    ) -> Optional[int]:
        """Validate and convert integer field."""
        if value is None or value == "":
            return None

        if isinstance(value, bool) or (
            isinstance(value, float) and not value.is_integer()
        ):
            result.add_error("Value must be an integer", field_name)
            return None

        try:
            int_value = int(value)
        except (ValueError, TypeError):
            result.add_error("Value must be an integer", field_name)
            return None

        if abs(int_value) > MAX_STORE_INT:
            result.add_error("Value is out of range", field_name)
            return None

        if min_value is not None and int_value < min_value:
            result.add_error(f"Value must be at least {min_value}", field_name)
            return None

        if max_value is not None and int_value > max_value:
            result.add_error(f"Value must be at most {max_value}", field_name)
            return None

        return int_value

    @staticmethod
    def validate_string(
        value: Any,
        field_name: str,
        result: ValidationResult,
        min_length: Optional[int] = None,
        max_length: Optional[int] = None,
        allowed_values: Optional[Sequence[str]] = None,
    ) -> Optional[str]:
        """Validate string field."""
        if value is None:
            return None

        if not isinstance(value, str):
            value = str(value)

        value = value.strip()

        if min_length is not None and len(value) < min_length:
            result.add_error(f"Must be at least {min_length} characters", field_name)
            return None

        if max_length is not None and len(value) > max_length:
            result.add_error(f"Must be at most {max_length} characters", field_name)
            return None

        if allowed_values is not None and value not in allowed_values:
            result.add_error(
                f"Value must be one of: {', '.join(allowed_values)}", field_name
            )
            return None

        return value if value else None

    @classmethod
    def validate_enum(
        cls,
        value: Any,
        field_name: str,
        result: ValidationResult,
        allowed_values: Sequence[str],
    ) -> Optional[str]:
        """Case-insensitive match against a fixed set of upper-case names."""
        if value is None or value == "":
            return None
        return cls.validate_string(
            str(value).upper(), field_name, result, allowed_values=allowed_values
        )

    @staticmethod
    def validate_bool(
        value: Any, field_name: str, result: ValidationResult
    ) -> Optional[bool]:
        """Accept JSON booleans and the strings true/false."""
        if value is None or value == "":
            return None
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.strip().lower() in ("true", "false"):
            return value.strip().lower() == "true"
        result.add_error("Value must be true or false", field_name)
        return None

    @staticmethod
    def validate_string_list(
        value: Any, field_name: str, result: ValidationResult
    ) -> Optional[List[str]]:
        if value is None:
            return None
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            result.add_error("Value must be a list of strings", field_name)
            return None
        return [v.strip() for v in value if v.strip()]

    @classmethod
    def validate_email(
        cls, value: Any, field_name: str, result: ValidationResult
    ) -> Optional[str]:
        email = cls.validate_string(value, field_name, result, max_length=255)
        if email and not EMAIL_PATTERN.match(email):
            result.add_error("Email should be valid", field_name)
            return None
        return email


class CustomerValidator(BaseValidator):
    """Validator for customer payloads."""

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        self.validate_required_field(data.get("name"), "name", result)
        self.validate_required_field(data.get("phone"), "phone", result)
        self.validate_required_field(data.get("gender"), "gender", result)

        name = self.validate_string(data.get("name"), "name", result, max_length=255)
        if name:
            result.cleaned_data["name"] = name

        phone = self.validate_string(data.get("phone"), "phone", result, max_length=30)
        if phone:
            result.cleaned_data["phone"] = phone

        gender = self.validate_enum(data.get("gender"), "gender", result, Gender.ALL)
        if gender:
            result.cleaned_data["gender"] = gender

        result.cleaned_data["email"] = self.validate_email(
            data.get("email"), "email", result
        )

        visit_count = self.validate_integer(
            data.get("visitCount"), "visitCount", result, min_value=0
        )
        result.cleaned_data["visit_count"] = visit_count or 0

        total_spent = self.validate_float(
            data.get("totalSpent"), "totalSpent", result, min_value=0
        )
        result.cleaned_data["total_spent"] = total_spent or 0.0

        result.cleaned_data["last_visit"] = self.validate_datetime(
            data.get("lastVisit"), "lastVisit", result
        )

        preferred = self.validate_string_list(
            data.get("preferredServices"), "preferredServices", result
        )
        result.cleaned_data["preferred_services"] = preferred or []

        result.cleaned_data["notes"] = self.validate_string(
            data.get("notes"), "notes", result
        )
        result.cleaned_data["photo"] = self.validate_string(
            data.get("photo"), "photo", result
        )

        return result


class EmployeeValidator(BaseValidator):
    """Validator for employee payloads."""

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        self.validate_required_field(data.get("name"), "name", result)
        self.validate_required_field(data.get("role"), "role", result)

        name = self.validate_string(data.get("name"), "name", result, max_length=255)
        if name:
            result.cleaned_data["name"] = name

        role = self.validate_string(data.get("role"), "role", result, max_length=100)
        if role:
            result.cleaned_data["role"] = role

        result.cleaned_data["email"] = self.validate_email(
            data.get("email"), "email", result
        )
        result.cleaned_data["phone"] = self.validate_string(
            data.get("phone"), "phone", result, max_length=30
        )
        result.cleaned_data["photo"] = self.validate_string(
            data.get("photo"), "photo", result
        )

        available = self.validate_bool(data.get("available"), "available", result)
        result.cleaned_data["available"] = True if available is None else available

        specialties = self.validate_string_list(
            data.get("specialties"), "specialties", result
        )
        result.cleaned_data["specialties"] = specialties or []

        rating = self.validate_float(
            data.get("rating"), "rating", result, min_value=0, max_value=5
        )
        result.cleaned_data["rating"] = 5.0 if rating is None else rating

        result.cleaned_data["next_available"] = self.validate_datetime(
            data.get("nextAvailable"), "nextAvailable", result
        )
        result.cleaned_data["work_start_time"] = self.validate_time(
            data.get("workStartTime"), "workStartTime", result
        )
        result.cleaned_data["work_end_time"] = self.validate_time(
            data.get("workEndTime"), "workEndTime", result
        )

        return result


class ServiceValidator(BaseValidator):
    """Validator for service catalog payloads."""

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        self.validate_required_field(data.get("name"), "name", result)
        self.validate_required_field(data.get("duration"), "duration", result)
        self.validate_required_field(data.get("price"), "price", result)
        self.validate_required_field(data.get("category"), "category", result)

        name = self.validate_string(data.get("name"), "name", result, max_length=255)
        if name:
            result.cleaned_data["name"] = name

        duration = self.validate_integer(
            data.get("duration"), "duration", result, min_value=1
        )
        if duration is not None:
            result.cleaned_data["duration"] = duration

        price = self.validate_float(data.get("price"), "price", result, positive=True)
        if price is not None:
            result.cleaned_data["price"] = price

        category = self.validate_string(
            data.get("category"), "category", result, max_length=100
        )
        if category:
            result.cleaned_data["category"] = category

        result.cleaned_data["description"] = self.validate_string(
            data.get("description"), "description", result
        )

        return result


class AppointmentValidator(BaseValidator):
    """Validator for appointment payloads.

    References may be flat ids (``customerId``) or nested objects
    (``customer: {"id": 1}``) as sent by the booking client.
    """

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        customer_ref = self._reference(data, "customerId", "customer")
        employee_ref = self._reference(data, "employeeId", "employee")

        self.validate_required_field(customer_ref, "customerId", result)
        self.validate_required_field(employee_ref, "employeeId", result)
        self.validate_required_field(
            data.get("appointmentDate"), "appointmentDate", result
        )
        self.validate_required_field(
            data.get("appointmentTime"), "appointmentTime", result
        )
        self.validate_required_field(data.get("total"), "total", result)

        customer_id = self.validate_integer(
            customer_ref, "customerId", result, min_value=1
        )
        if customer_id is not None:
            result.cleaned_data["customer_id"] = customer_id

        employee_id = self.validate_integer(
            employee_ref, "employeeId", result, min_value=1
        )
        if employee_id is not None:
            result.cleaned_data["employee_id"] = employee_id

        service_ids = self._service_ids(data, result)
        if service_ids is not None:
            result.cleaned_data["service_ids"] = service_ids

        appointment_date = self.validate_date(
            data.get("appointmentDate"), "appointmentDate", result
        )
        if appointment_date:
            result.cleaned_data["appointment_date"] = appointment_date

        appointment_time = self.validate_time(
            data.get("appointmentTime"), "appointmentTime", result
        )
        if appointment_time:
            result.cleaned_data["appointment_time"] = appointment_time

        status = self.validate_enum(
            data.get("status"), "status", result, AppointmentStatus.ALL
        )
        result.cleaned_data["status"] = status or AppointmentStatus.SCHEDULED

        total = self.validate_float(data.get("total"), "total", result, min_value=0)
        if total is not None:
            result.cleaned_data["total"] = total

        result.cleaned_data["notes"] = self.validate_string(
            data.get("notes"), "notes", result
        )

        return result

    @staticmethod
    def _reference(data: Dict[str, Any], flat_key: str, nested_key: str) -> Any:
        if data.get(flat_key) not in (None, ""):
            return data.get(flat_key)
        nested = data.get(nested_key)
        if isinstance(nested, dict):
            return nested.get("id")
        return nested

    def _service_ids(
        self, data: Dict[str, Any], result: ValidationResult
    ) -> Optional[List[int]]:
        if "serviceIds" in data:
            raw = data.get("serviceIds")
        elif "services" in data:
            raw = data.get("services")
        else:
            return []

        if raw is None:
            return []
        if not isinstance(raw, list):
            result.add_error("Value must be a list", "serviceIds")
            return None

        ids: List[int] = []
        for item in raw:
            value = item.get("id") if isinstance(item, dict) else item
            service_id = self.validate_integer(value, "serviceIds", result, min_value=1)
            if service_id is None:
                if value is None:
                    result.add_error("Service id is required", "serviceIds")
                return None
            if service_id not in ids:
                ids.append(service_id)
        return ids


class TallyRecordValidator(BaseValidator):
    """Validator for tally record payloads."""

    def validate(self, data: Dict[str, Any]) -> ValidationResult:
        result = ValidationResult()

        for key in (
            "date",
            "time",
            "customerName",
            "customerPhone",
            "staffName",
            "totalCost",
            "paymentMethod",
        ):
            self.validate_required_field(data.get(key), key, result)

        record_date = self.validate_datetime(data.get("date"), "date", result)
        if record_date:
            result.cleaned_data["date"] = record_date

        record_time = self.validate_time(data.get("time"), "time", result)
        if record_time:
            result.cleaned_data["time"] = record_time

        for key, clean_key in (
            ("customerName", "customer_name"),
            ("customerPhone", "customer_phone"),
            ("staffName", "staff_name"),
        ):
            value = self.validate_string(data.get(key), key, result, max_length=255)
            if value:
                result.cleaned_data[clean_key] = value

        total_cost = self.validate_float(
            data.get("totalCost"), "totalCost", result, positive=True
        )
        if total_cost is not None:
            result.cleaned_data["total_cost"] = total_cost

        payment_method = self.validate_enum(
            data.get("paymentMethod"), "paymentMethod", result, PaymentMethod.ALL
        )
        if payment_method:
            result.cleaned_data["payment_method"] = payment_method

        payment_status = self.validate_enum(
            data.get("paymentStatus"), "paymentStatus", result, PaymentStatus.ALL
        )
        result.cleaned_data["payment_status"] = payment_status or PaymentStatus.PENDING

        result.cleaned_data["payment_date"] = self.validate_datetime(
            data.get("paymentDate"), "paymentDate", result
        )
        result.cleaned_data["upi_transaction_id"] = self.validate_string(
            data.get("upiTransactionId"), "upiTransactionId", result, max_length=100
        )
        result.cleaned_data["services_json"] = self._services_json(data, result)

        return result

    @staticmethod
    def _services_json(data: Dict[str, Any], result: ValidationResult) -> Optional[str]:
        """Accept ``servicesJson`` text or a ``services`` list to serialize."""
        raw = data.get("servicesJson")
        if raw is None and "services" in data:
            raw = data.get("services")
        if raw is None or raw == "":
            return None
        try:
            if isinstance(raw, (list, dict)):
                return json.dumps(raw, allow_nan=False)
            if isinstance(raw, str):
                json.loads(raw, parse_constant=_reject_json_constant)
                return raw
        except ValueError:
            result.add_error("Value must be valid JSON", "servicesJson")
            return None
        result.add_error("Value must be a JSON list or string", "servicesJson")
        return None


def _reject_json_constant(name: str):
    raise ValueError(f"{name} is not a JSON number")


# Factory function to get appropriate validator
def get_validator(entity_type: str) -> BaseValidator:
    """Get validator instance for entity type."""
    validators = {
        "customer": CustomerValidator(),
        "employee": EmployeeValidator(),
        "service": ServiceValidator(),
        "appointment": AppointmentValidator(),
        "tally": TallyRecordValidator(),
    }

    validator = validators.get(entity_type.lower())
    if not validator:
        raise ValueError(f"No validator found for entity type: {entity_type}")

    return validator


def validate_payload(entity_type: str, data: Any) -> Dict[str, Any]:
    """Validate a request body and return its cleaned data.

    Raises ValidationError with every field-level reason when invalid.
    """
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return get_validator(entity_type).validate(data).raise_if_invalid()


# Query-parameter parsing; each raises ValidationError on bad input.


def _parse_param(value: Any, name: str, parser, **kwargs):
    result = ValidationResult()
    parsed = parser(value, name, result, **kwargs)
    result.raise_if_invalid()
    return parsed


def parse_date_param(value: Optional[str], name: str) -> Optional[date]:
    return _parse_param(value, name, BaseValidator.validate_date)


def parse_time_param(value: Optional[str], name: str) -> Optional[time]:
    return _parse_param(value, name, BaseValidator.validate_time)


def parse_datetime_param(value: Optional[str], name: str) -> Optional[datetime]:
    return _parse_param(value, name, BaseValidator.validate_datetime)


def parse_int_param(value: Optional[str], name: str) -> Optional[int]:
    return _parse_param(value, name, BaseValidator.validate_integer, min_value=1)


def parse_bool_param(value: Optional[str], name: str) -> Optional[bool]:
    return _parse_param(value, name, BaseValidator.validate_bool)


def parse_enum_param(
    value: Optional[str], name: str, allowed_values: Sequence[str]
) -> Optional[str]:
    return _parse_param(
        value, name, BaseValidator.validate_enum, allowed_values=allowed_values
    )


def require_param(value: Any, name: str) -> Any:
    """Raise ValidationError when a mandatory query parameter is missing."""
    if value is None or value == "":
        raise ValidationError(f"{name} is required", field=name)
    return value


def parse_choice_param(
    value: Optional[str], name: str, choices: Sequence[str]
) -> Optional[str]:
    """Case-insensitive match returning the canonical spelling of the choice."""
    if value is None or value.strip() == "":
        return None
    for choice in choices:
        if choice.lower() == value.strip().lower():
            return choice
    raise ValidationError(f"Value must be one of: {', '.join(choices)}", field=name)


class StoreIdConverter(IntegerConverter):
    """``<int:...>`` that only matches ids a 64-bit INTEGER column can hold."""

    def __init__(
        self, map, fixed_digits=0, min=None, max=MAX_STORE_INT, signed=False
    ):
        super().__init__(
            map, fixed_digits=fixed_digits, min=min, max=max, signed=signed
        )
