"""
Abstract interfaces for repositories following Interface Segregation Principle.

These interfaces are the "data store" contract the services depend on. Every
method may raise StoreUnavailableError when the database cannot be reached.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, time
from typing import Dict, List, Optional

from .entities import Appointment, Customer, Employee, SalonService, TallyRecord


class ICustomerReader(ABC):
    """Interface for customer read operations."""

    @abstractmethod
    def get_by_id(self, customer_id: int) -> Optional[Customer]:
        """Get customer by ID."""
        pass

    @abstractmethod
    def get_all(self) -> List[Customer]:
        """Get all customers in store order."""
        pass

    @abstractmethod
    def get_by_phone(self, phone: str) -> Optional[Customer]:
        """Get the customer owning a phone number."""
        pass

    @abstractmethod
    def search(self, term: str) -> List[Customer]:
        """Case-insensitive substring match on name, phone or email."""
        pass

    @abstractmethod
    def get_by_gender(self, gender: str) -> List[Customer]:
        pass

    @abstractmethod
    def get_all_ordered(self, sort_key: str) -> List[Customer]:
        """Get all customers sorted descending by visits, spent or lastVisit."""
        pass


class ICustomerWriter(ABC):
    """Interface for customer write operations."""

    @abstractmethod
    def create(self, customer: Customer) -> Customer:
        """Create a new customer."""
        pass

    @abstractmethod
    def update(self, customer: Customer) -> Customer:
        """Update an existing customer."""
        pass

    @abstractmethod
    def delete(self, customer_id: int) -> bool:
        """Delete a customer; False when it did not exist."""
        pass

    @abstractmethod
    def apply_completion(
        self, customer_id: int, amount_spent: float, visited_at: datetime
    ) -> Optional[Customer]:
        """Atomically add one visit and amount_spent; None when absent."""
        pass


class ICustomerRepository(ICustomerReader, ICustomerWriter):
    """Complete customer repository interface combining read/write operations."""

    pass


class IEmployeeRepository(ABC):
    """Employee persistence operations."""

    @abstractmethod
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        pass

    @abstractmethod
    def get_all(self) -> List[Employee]:
        pass

    @abstractmethod
    def get_available_by_rating(self) -> List[Employee]:
        """Available employees, best rated first."""
        pass

    @abstractmethod
    def get_by_role(self, role: str) -> List[Employee]:
        pass

    @abstractmethod
    def create(self, employee: Employee) -> Employee:
        pass

    @abstractmethod
    def update(self, employee: Employee) -> Employee:
        pass

    @abstractmethod
    def delete(self, employee_id: int) -> bool:
        pass


class IServiceCatalogRepository(ABC):
    """Persistence operations for the salon service catalog."""

    @abstractmethod
    def get_by_id(self, service_id: int) -> Optional[SalonService]:
        pass

    @abstractmethod
    def get_by_ids(self, service_ids: List[int]) -> List[SalonService]:
        """Resolve a list of ids; unknown ids are skipped."""
        pass

    @abstractmethod
    def get_all(self) -> List[SalonService]:
        pass

    @abstractmethod
    def get_by_category(self, category: str) -> List[SalonService]:
        pass

    @abstractmethod
    def search_by_name(self, term: str) -> List[SalonService]:
        pass

    @abstractmethod
    def get_all_ordered(self, sort_key: str) -> List[SalonService]:
        """Get all services sorted ascending by price or duration."""
        pass

    @abstractmethod
    def create(self, service: SalonService) -> SalonService:
        pass

    @abstractmethod
    def update(self, service: SalonService) -> SalonService:
        pass

    @abstractmethod
    def delete(self, service_id: int) -> bool:
        pass


class IAppointmentReader(ABC):
    """Interface for appointment read operations."""

    @abstractmethod
    def get_by_id(self, appointment_id: int) -> Optional[Appointment]:
        """Get appointment by ID."""
        pass

    @abstractmethod
    def get_all(self) -> List[Appointment]:
        pass

    @abstractmethod
    def get_by_date(self, appointment_date: date) -> List[Appointment]:
        pass

    @abstractmethod
    def get_by_status(self, status: str) -> List[Appointment]:
        pass

    @abstractmethod
    def get_by_employee_and_date(
        self, employee_id: int, appointment_date: date
    ) -> List[Appointment]:
        pass

    @abstractmethod
    def get_by_date_range(self, start_date: date, end_date: date) -> List[Appointment]:
        """Get appointments between two dates, both inclusive."""
        pass

    @abstractmethod
    def find_conflicts(
        self,
        employee_id: int,
        appointment_date: date,
        appointment_time: time,
        exclude_id: Optional[int] = None,
    ) -> List[Appointment]:
        """Non-cancelled appointments holding the given slot."""
        pass

    @abstractmethod
    def count_by_date_and_status(self, appointment_date: date, status: str) -> int:
        pass


class IAppointmentWriter(ABC):
    """Interface for appointment write operations."""

    @abstractmethod
    def create(self, appointment: Appointment) -> Appointment:
        """Create a new appointment; raises SlotConflictError if the slot is held."""
        pass

    @abstractmethod
    def update(
        self, appointment: Appointment, expected_status: Optional[str] = None
    ) -> Optional[Appointment]:
        """Overwrite an appointment.

        With expected_status, the write only happens while the stored status
        still equals it; None is returned otherwise.
        """
        pass

    @abstractmethod
    def change_status(
        self,
        appointment_id: int,
        expected_status: str,
        new_status: str,
        updated_at: datetime,
    ) -> Optional[Appointment]:
        """Conditional status change; None when the stored status differs."""
        pass

    @abstractmethod
    def delete(self, appointment_id: int) -> bool:
        pass


class IAppointmentRepository(IAppointmentReader, IAppointmentWriter):
    """Complete appointment repository interface."""

    pass


class ITallyRecordRepository(ABC):
    """Persistence operations for payment tally records."""

    @abstractmethod
    def get_by_id(self, record_id: int) -> Optional[TallyRecord]:
        pass

    @abstractmethod
    def get_all(self) -> List[TallyRecord]:
        pass

    @abstractmethod
    def get_by_day(self, day: date) -> List[TallyRecord]:
        """Records whose date falls on the given calendar day."""
        pass

    @abstractmethod
    def get_by_payment_status(self, status: str) -> List[TallyRecord]:
        pass

    @abstractmethod
    def get_by_payment_method(self, method: str) -> List[TallyRecord]:
        pass

    @abstractmethod
    def get_by_date_range(
        self, start: datetime, end: datetime
    ) -> List[TallyRecord]:
        pass

    @abstractmethod
    def sum_completed_revenue(self, day: date) -> float:
        """Sum of total_cost for COMPLETED records on the day, 0.0 when none."""
        pass

    @abstractmethod
    def revenue_by_method(self, day: date) -> Dict[str, float]:
        """COMPLETED revenue on the day split by payment method."""
        pass

    @abstractmethod
    def create(self, record: TallyRecord) -> TallyRecord:
        pass

    @abstractmethod
    def update(self, record: TallyRecord) -> TallyRecord:
        pass

    @abstractmethod
    def delete(self, record_id: int) -> bool:
        pass
