"""
Domain entities - Pure business representation, no framework dependencies.

Relations are explicit foreign-key fields (customer_id, employee_id,
service_ids); resolving them into full records is the repositories' job.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import List, Optional


class Gender:
    MALE = "MALE"
    FEMALE = "FEMALE"

    ALL = (MALE, FEMALE)


class AppointmentStatus:
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    ALL = (SCHEDULED, COMPLETED, CANCELLED)
    TERMINAL = (COMPLETED, CANCELLED)


class PaymentMethod:
    CASH = "CASH"
    CARD = "CARD"
    UPI = "UPI"

    ALL = (CASH, CARD, UPI)


class PaymentStatus:
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"

    ALL = (PENDING, COMPLETED, FAILED, CANCELLED)


@dataclass
class Customer:
    """Domain entity representing a salon customer and their visit statistics."""

    id: Optional[int] = None
    name: str = ""
    phone: str = ""
    email: Optional[str] = None
    gender: str = Gender.FEMALE
    visit_count: int = 0
    total_spent: float = 0.0
    last_visit: Optional[datetime] = None
    preferred_services: List[str] = field(default_factory=list)
    notes: Optional[str] = None
    photo: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate business rules."""
        if self.visit_count < 0:
            raise ValueError("Visit count cannot be negative")
        if self.total_spent < 0:
            raise ValueError("Total spent cannot be negative")


@dataclass
class Employee:
    """Domain entity for salon staff."""

    id: Optional[int] = None
    name: str = ""
    role: str = ""
    email: Optional[str] = None
    phone: Optional[str] = None
    photo: Optional[str] = None
    available: bool = True
    specialties: List[str] = field(default_factory=list)
    rating: float = 5.0
    next_available: Optional[datetime] = None
    work_start_time: Optional[time] = None
    work_end_time: Optional[time] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass
class SalonService:
    """A bookable service from the salon catalog (haircut, facial, ...)."""

    id: Optional[int] = None
    name: str = ""
    duration: int = 0  # minutes
    price: float = 0.0
    category: str = ""
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate business rules."""
        if self.duration <= 0:
            raise ValueError("Duration must be positive")
        if self.price <= 0:
            raise ValueError("Price must be positive")


@dataclass
class Appointment:
    """Domain entity for a booking of one employee at a (date, time) slot."""

    id: Optional[int] = None
    customer_id: int = 0
    employee_id: int = 0
    service_ids: List[int] = field(default_factory=list)
    appointment_date: Optional[date] = None
    appointment_time: Optional[time] = None
    status: str = AppointmentStatus.SCHEDULED
    total: float = 0.0
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate business rules."""
        if self.status not in AppointmentStatus.ALL:
            raise ValueError(f"Invalid appointment status: {self.status}")
        if self.total < 0:
            raise ValueError("Total cannot be negative")

    @property
    def holds_slot(self) -> bool:
        """Whether this appointment occupies its employee's slot."""
        return self.status != AppointmentStatus.CANCELLED


@dataclass
class AppointmentDetails:
    """An appointment together with its explicitly resolved relations."""

    appointment: Appointment
    customer: Optional[Customer] = None
    employee: Optional[Employee] = None
    services: List[SalonService] = field(default_factory=list)


@dataclass
class TallyRecord:
    """Denormalized payment record used for daily revenue reporting."""

    id: Optional[int] = None
    date: Optional[datetime] = None
    time: Optional[time] = None
    customer_name: str = ""
    customer_phone: str = ""
    staff_name: str = ""
    services_json: Optional[str] = None
    total_cost: float = 0.0
    payment_method: str = PaymentMethod.CASH
    payment_status: str = PaymentStatus.PENDING
    payment_date: Optional[datetime] = None
    upi_transaction_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def __post_init__(self):
        """Validate business rules."""
        if self.total_cost <= 0:
            raise ValueError("Total cost must be positive")
        if self.payment_method not in PaymentMethod.ALL:
            raise ValueError(f"Invalid payment method: {self.payment_method}")
        if self.payment_status not in PaymentStatus.ALL:
            raise ValueError(f"Invalid payment status: {self.payment_status}")
