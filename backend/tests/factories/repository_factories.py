"""
Repository test factories following Interface Segregation Principle.

This module provides mock factories for repository interfaces, ensuring
tests only depend on the specific interfaces they need, plus small
builders for domain entities with sensible defaults.
"""

from datetime import date, datetime, time
from unittest.mock import Mock

from salon.domain.entities import (
    Appointment,
    AppointmentStatus,
    Customer,
    Employee,
    PaymentMethod,
    PaymentStatus,
    SalonService,
    TallyRecord,
)
from salon.domain.interfaces import (
    IAppointmentReader,
    IAppointmentRepository,
    ICustomerReader,
    ICustomerRepository,
    ICustomerWriter,
    IEmployeeRepository,
    IServiceCatalogRepository,
    ITallyRecordRepository,
)


class CustomerRepositoryFactory:
    """Factory for creating Customer repository mocks."""

    @staticmethod
    def create_mock_reader() -> Mock:
        """Create mock that only implements ICustomerReader operations."""
        mock_reader = Mock(spec=ICustomerReader)

        # Set up default return values
        mock_reader.get_by_id.return_value = None
        mock_reader.get_by_phone.return_value = None
        mock_reader.get_all.return_value = []
        mock_reader.search.return_value = []

        return mock_reader

    @staticmethod
    def create_mock_writer() -> Mock:
        """Create mock that only implements ICustomerWriter operations."""
        mock_writer = Mock(spec=ICustomerWriter)

        mock_writer.create.return_value = None
        mock_writer.update.return_value = None
        mock_writer.delete.return_value = False
        mock_writer.apply_completion.return_value = None

        return mock_writer

    @staticmethod
    def create_mock_full() -> Mock:
        """Create full repository mock implementing ICustomerRepository."""
        mock_repo = Mock(spec=ICustomerRepository)

        # Read operations
        mock_repo.get_by_id.return_value = None
        mock_repo.get_by_phone.return_value = None
        mock_repo.get_all.return_value = []
        mock_repo.search.return_value = []
        mock_repo.get_by_gender.return_value = []
        mock_repo.get_all_ordered.return_value = []

        # Write operations
        mock_repo.create.return_value = None
        mock_repo.update.return_value = None
        mock_repo.delete.return_value = False
        mock_repo.apply_completion.return_value = None

        return mock_repo


class EmployeeRepositoryFactory:
    @staticmethod
    def create_mock_full() -> Mock:
        mock_repo = Mock(spec=IEmployeeRepository)
        mock_repo.get_by_id.return_value = None
        mock_repo.get_all.return_value = []
        mock_repo.get_available_by_rating.return_value = []
        mock_repo.get_by_role.return_value = []
        mock_repo.create.return_value = None
        mock_repo.update.return_value = None
        mock_repo.delete.return_value = False
        return mock_repo


class ServiceCatalogRepositoryFactory:
    @staticmethod
    def create_mock_full() -> Mock:
        mock_repo = Mock(spec=IServiceCatalogRepository)
        mock_repo.get_by_id.return_value = None
        mock_repo.get_by_ids.return_value = []
        mock_repo.get_all.return_value = []
        mock_repo.create.return_value = None
        mock_repo.update.return_value = None
        mock_repo.delete.return_value = False
        return mock_repo


class AppointmentRepositoryFactory:
    """Factory for creating Appointment repository mocks."""

    @staticmethod
    def create_mock_reader() -> Mock:
        """Create mock that only implements IAppointmentReader operations."""
        mock_reader = Mock(spec=IAppointmentReader)
        mock_reader.get_by_id.return_value = None
        mock_reader.get_all.return_value = []
        mock_reader.find_conflicts.return_value = []
        mock_reader.count_by_date_and_status.return_value = 0
        return mock_reader

    @staticmethod
    def create_mock_full() -> Mock:
        """Create full repository mock implementing IAppointmentRepository."""
        mock_repo = Mock(spec=IAppointmentRepository)

        # Read operations
        mock_repo.get_by_id.return_value = None
        mock_repo.get_all.return_value = []
        mock_repo.get_by_date.return_value = []
        mock_repo.get_by_status.return_value = []
        mock_repo.get_by_employee_and_date.return_value = []
        mock_repo.get_by_date_range.return_value = []
        mock_repo.find_conflicts.return_value = []
        mock_repo.count_by_date_and_status.return_value = 0

        # Write operations
        mock_repo.create.return_value = None
        mock_repo.update.return_value = None
        mock_repo.change_status.return_value = None
        mock_repo.delete.return_value = False

        return mock_repo


class TallyRecordRepositoryFactory:
    @staticmethod
    def create_mock_full() -> Mock:
        mock_repo = Mock(spec=ITallyRecordRepository)
        mock_repo.get_by_id.return_value = None
        mock_repo.get_all.return_value = []
        mock_repo.get_by_day.return_value = []
        mock_repo.sum_completed_revenue.return_value = 0.0
        mock_repo.revenue_by_method.return_value = {}
        mock_repo.create.side_effect = lambda record: record
        mock_repo.update.side_effect = lambda record: record
        mock_repo.delete.return_value = False
        return mock_repo


# Entity builders


def make_customer(**overrides) -> Customer:
    values = dict(
        id=1,
        name="Priya Sharma",
        phone="9876543210",
        email="priya@example.com",
        gender="FEMALE",
    )
    values.update(overrides)
    return Customer(**values)


def make_employee(**overrides) -> Employee:
    values = dict(id=1, name="Anita", role="Stylist", rating=4.5)
    values.update(overrides)
    return Employee(**values)


def make_service(**overrides) -> SalonService:
    values = dict(id=1, name="Haircut", duration=30, price=500.0, category="Hair")
    values.update(overrides)
    return SalonService(**values)


def make_appointment(**overrides) -> Appointment:
    values = dict(
        id=1,
        customer_id=1,
        employee_id=1,
        service_ids=[1],
        appointment_date=date(2024, 6, 1),
        appointment_time=time(10, 0),
        status=AppointmentStatus.SCHEDULED,
        total=500.0,
    )
    values.update(overrides)
    return Appointment(**values)


def make_tally_record(**overrides) -> TallyRecord:
    values = dict(
        id=1,
        date=datetime(2024, 6, 1),
        time=time(11, 30),
        customer_name="Priya Sharma",
        customer_phone="9876543210",
        staff_name="Anita",
        total_cost=500.0,
        payment_method=PaymentMethod.CASH,
        payment_status=PaymentStatus.PENDING,
    )
    values.update(overrides)
    return TallyRecord(**values)
