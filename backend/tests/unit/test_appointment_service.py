"""
Unit tests for AppointmentService.

Covers slot availability, booking with reference and slot checks, the
status lifecycle and the once-only completion credit to the customer.
"""

from datetime import date, time
from unittest.mock import Mock

import pytest

from salon.core.exceptions import (
    AlreadyCompletedError,
    ConflictError,
    InvalidStatusTransitionError,
    NotFoundError,
    SlotConflictError,
    ValidationError,
)
from salon.domain.entities import AppointmentStatus
from salon.services.appointment_service import AppointmentService
from tests.factories.repository_factories import (
    AppointmentRepositoryFactory,
    CustomerRepositoryFactory,
    EmployeeRepositoryFactory,
    ServiceCatalogRepositoryFactory,
    make_appointment,
    make_customer,
    make_employee,
    make_service,
)

SLOT_DATE = date(2024, 6, 1)
SLOT_TIME = time(10, 0)


@pytest.fixture
def appointment_repo() -> Mock:
    return AppointmentRepositoryFactory.create_mock_full()


@pytest.fixture
def customer_repo() -> Mock:
    repo = CustomerRepositoryFactory.create_mock_full()
    repo.get_by_id.return_value = make_customer()
    repo.apply_completion.return_value = make_customer(visit_count=1, total_spent=500.0)
    return repo


@pytest.fixture
def employee_repo() -> Mock:
    repo = EmployeeRepositoryFactory.create_mock_full()
    repo.get_by_id.return_value = make_employee()
    return repo


@pytest.fixture
def service_repo() -> Mock:
    repo = ServiceCatalogRepositoryFactory.create_mock_full()
    repo.get_by_ids.return_value = [make_service()]
    return repo


@pytest.fixture
def service(appointment_repo, customer_repo, employee_repo, service_repo):
    """Initialize AppointmentService with mocked repositories."""
    return AppointmentService(
        appointment_repo, customer_repo, employee_repo, service_repo
    )


def booking_data(**overrides):
    data = dict(
        customer_id=1,
        employee_id=1,
        service_ids=[1],
        appointment_date=SLOT_DATE,
        appointment_time=SLOT_TIME,
        status=AppointmentStatus.SCHEDULED,
        total=500.0,
        notes=None,
    )
    data.update(overrides)
    return data


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.appointment
class TestSlotAvailability:
    def test_free_slot_is_available(self, service, appointment_repo):
        assert service.is_slot_available(1, SLOT_DATE, SLOT_TIME) is True
        appointment_repo.find_conflicts.assert_called_once_with(1, SLOT_DATE, SLOT_TIME)

    def test_booked_slot_is_not_available(self, service, appointment_repo):
        appointment_repo.find_conflicts.return_value = [make_appointment()]

        assert service.is_slot_available(1, SLOT_DATE, SLOT_TIME) is False

    def test_unknown_employee_raises_not_found(self, service, employee_repo):
        employee_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            service.is_slot_available(99, SLOT_DATE, SLOT_TIME)


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.appointment
class TestAppointmentCreation:
    def test_create_stamps_timestamps_and_persists(self, service, appointment_repo):
        appointment_repo.create.side_effect = lambda a: a

        created = service.create_appointment(booking_data())

        assert created.created_at is not None
        assert created.created_at == created.updated_at
        appointment_repo.create.assert_called_once()

    def test_create_in_booked_slot_raises_conflict(self, service, appointment_repo):
        appointment_repo.find_conflicts.return_value = [make_appointment(id=7)]

        with pytest.raises(SlotConflictError):
            service.create_appointment(booking_data())
        appointment_repo.create.assert_not_called()

    def test_cancelled_booking_skips_slot_check(self, service, appointment_repo):
        appointment_repo.create.side_effect = lambda a: a
        appointment_repo.find_conflicts.return_value = [make_appointment(id=7)]

        created = service.create_appointment(
            booking_data(status=AppointmentStatus.CANCELLED)
        )

        assert created.status == AppointmentStatus.CANCELLED
        appointment_repo.find_conflicts.assert_not_called()

    def test_unknown_references_are_listed(self, service, customer_repo, service_repo):
        customer_repo.get_by_id.return_value = None
        service_repo.get_by_ids.return_value = []

        with pytest.raises(ValidationError) as exc_info:
            service.create_appointment(booking_data(service_ids=[1, 2]))

        errors = exc_info.value.errors
        assert "customerId: Customer 1 not found" in errors
        assert "serviceIds: Service 1 not found" in errors
        assert "serviceIds: Service 2 not found" in errors

    def test_create_completed_credits_customer(
        self, service, appointment_repo, customer_repo
    ):
        appointment_repo.create.side_effect = lambda a: a

        service.create_appointment(booking_data(status=AppointmentStatus.COMPLETED))

        customer_repo.apply_completion.assert_called_once()
        args = customer_repo.apply_completion.call_args[0]
        assert args[0] == 1
        assert args[1] == 500.0


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.appointment
class TestAppointmentStatus:
    def test_completion_credits_customer_once(
        self, service, appointment_repo, customer_repo
    ):
        appointment_repo.get_by_id.return_value = make_appointment()
        appointment_repo.change_status.return_value = make_appointment(
            status=AppointmentStatus.COMPLETED
        )

        result = service.update_status(1, AppointmentStatus.COMPLETED)

        assert result.status == AppointmentStatus.COMPLETED
        appointment_repo.change_status.assert_called_once()
        call = appointment_repo.change_status.call_args[0]
        assert call[:3] == (1, AppointmentStatus.SCHEDULED, AppointmentStatus.COMPLETED)
        customer_repo.apply_completion.assert_called_once()
        assert customer_repo.apply_completion.call_args[0][:2] == (1, 500.0)

    def test_completing_twice_raises_already_completed(
        self, service, appointment_repo, customer_repo
    ):
        appointment_repo.get_by_id.return_value = make_appointment(
            status=AppointmentStatus.COMPLETED
        )

        with pytest.raises(AlreadyCompletedError):
            service.update_status(1, AppointmentStatus.COMPLETED)
        appointment_repo.change_status.assert_not_called()
        customer_repo.apply_completion.assert_not_called()

    def test_leaving_terminal_status_is_rejected(self, service, appointment_repo):
        appointment_repo.get_by_id.return_value = make_appointment(
            status=AppointmentStatus.CANCELLED
        )

        with pytest.raises(InvalidStatusTransitionError):
            service.update_status(1, AppointmentStatus.SCHEDULED)

    def test_same_status_is_a_no_op(self, service, appointment_repo):
        existing = make_appointment(status=AppointmentStatus.CANCELLED)
        appointment_repo.get_by_id.return_value = existing

        assert service.update_status(1, AppointmentStatus.CANCELLED) is existing
        appointment_repo.change_status.assert_not_called()

    def test_cancel_does_not_credit_customer(
        self, service, appointment_repo, customer_repo
    ):
        appointment_repo.get_by_id.return_value = make_appointment()
        appointment_repo.change_status.return_value = make_appointment(
            status=AppointmentStatus.CANCELLED
        )

        service.update_status(1, AppointmentStatus.CANCELLED)

        customer_repo.apply_completion.assert_not_called()

    def test_lost_race_to_completion_raises_already_completed(
        self, service, appointment_repo, customer_repo
    ):
        appointment_repo.get_by_id.side_effect = [
            make_appointment(),
            make_appointment(status=AppointmentStatus.COMPLETED),
        ]
        appointment_repo.change_status.return_value = None

        with pytest.raises(AlreadyCompletedError):
            service.update_status(1, AppointmentStatus.COMPLETED)
        customer_repo.apply_completion.assert_not_called()

    def test_lost_race_to_other_write_raises_conflict(self, service, appointment_repo):
        appointment_repo.get_by_id.return_value = make_appointment()
        appointment_repo.change_status.return_value = None

        with pytest.raises(ConflictError):
            service.update_status(1, AppointmentStatus.CANCELLED)

    def test_missing_appointment_raises_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.update_status(42, AppointmentStatus.COMPLETED)

    def test_completion_for_missing_customer_leaves_status_untouched(
        self, service, appointment_repo, customer_repo
    ):
        appointment_repo.get_by_id.return_value = make_appointment()
        customer_repo.get_by_id.return_value = None

        with pytest.raises(NotFoundError):
            service.update_status(1, AppointmentStatus.COMPLETED)
        appointment_repo.change_status.assert_not_called()
        customer_repo.apply_completion.assert_not_called()


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.appointment
class TestAppointmentUpdate:
    def test_update_into_completed_credits_customer(
        self, service, appointment_repo, customer_repo
    ):
        appointment_repo.get_by_id.return_value = make_appointment()
        appointment_repo.update.side_effect = lambda a, expected_status: a

        updated = service.update_appointment(
            1, booking_data(status=AppointmentStatus.COMPLETED, total=650.0)
        )

        assert updated.status == AppointmentStatus.COMPLETED
        kwargs = appointment_repo.update.call_args.kwargs
        assert kwargs["expected_status"] == AppointmentStatus.SCHEDULED
        assert customer_repo.apply_completion.call_args[0][:2] == (1, 650.0)

    def test_update_moving_to_booked_slot_raises_conflict(
        self, service, appointment_repo
    ):
        appointment_repo.get_by_id.return_value = make_appointment()
        appointment_repo.find_conflicts.return_value = [make_appointment(id=2)]

        with pytest.raises(SlotConflictError):
            service.update_appointment(1, booking_data(appointment_time=time(11, 0)))
        kwargs = appointment_repo.find_conflicts.call_args.kwargs
        assert kwargs["exclude_id"] == 1

    def test_update_of_completed_appointment_keeps_credit_single(
        self, service, appointment_repo, customer_repo
    ):
        appointment_repo.get_by_id.return_value = make_appointment(
            status=AppointmentStatus.COMPLETED
        )
        appointment_repo.update.side_effect = lambda a, expected_status: a

        service.update_appointment(
            1, booking_data(status=AppointmentStatus.COMPLETED, notes="Extra wash")
        )

        customer_repo.apply_completion.assert_not_called()

    def test_update_missing_appointment_raises_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.update_appointment(5, booking_data())


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.appointment
class TestAppointmentQueries:
    def test_date_range_with_start_after_end_is_rejected(self, service):
        with pytest.raises(ValidationError):
            service.list_by_date_range(date(2024, 6, 2), date(2024, 6, 1))

    def test_details_resolve_relations(
        self, service, appointment_repo, customer_repo, employee_repo, service_repo
    ):
        appointment_repo.get_by_id.return_value = make_appointment()

        details = service.get_details(1)

        assert details.customer.name == "Priya Sharma"
        assert details.employee.name == "Anita"
        assert [s.name for s in details.services] == ["Haircut"]
        service_repo.get_by_ids.assert_called_once_with([1])

    def test_daily_stats_counts_every_status(self, service, appointment_repo):
        appointment_repo.count_by_date_and_status.side_effect = (
            lambda day, status: {"SCHEDULED": 2, "COMPLETED": 1}.get(status, 0)
        )

        stats = service.daily_stats(SLOT_DATE)

        assert stats == {"SCHEDULED": 2, "COMPLETED": 1, "CANCELLED": 0}

    def test_delete_missing_appointment_raises_not_found(self, service):
        with pytest.raises(NotFoundError):
            service.delete_appointment(3)
