"""
Appointment service following SOLID principles.

Business rules:
- An employee slot (employee, date, time) is held by at most one
  non-cancelled appointment.
- SCHEDULED may move to COMPLETED or CANCELLED; both are terminal.
- The completion side effect (customer visit statistics) is applied once,
  only for the write that actually moved the appointment into COMPLETED.
"""

import logging
from datetime import date, time
from typing import Any, Dict, List

from salon.core import config
from salon.core.exceptions import (
    AlreadyCompletedError,
    ConflictError,
    InvalidStatusTransitionError,
    NotFoundError,
    SlotConflictError,
    ValidationError,
)
from salon.domain.entities import Appointment, AppointmentDetails, AppointmentStatus
from salon.domain.interfaces import (
    IAppointmentRepository,
    ICustomerRepository,
    IEmployeeRepository,
    IServiceCatalogRepository,
)
from salon.services.customer_service import CustomerService

logger = logging.getLogger(__name__)


class AppointmentService:
    """Application service for appointment scheduling and lifecycle."""

    def __init__(
        self,
        appointment_repo: IAppointmentRepository,
        customer_repo: ICustomerRepository,
        employee_repo: IEmployeeRepository,
        service_repo: IServiceCatalogRepository,
    ) -> None:
        self.appointment_repo = appointment_repo
        self.customer_repo = customer_repo
        self.employee_repo = employee_repo
        self.service_repo = service_repo
        self.customer_service = CustomerService(customer_repo)

    # Scheduling rule

    def is_slot_available(
        self, employee_id: int, appointment_date: date, appointment_time: time
    ) -> bool:
        """True iff no non-cancelled appointment holds the employee's slot."""
        if not self.employee_repo.get_by_id(employee_id):
            raise NotFoundError("Employee", employee_id)
        conflicts = self.appointment_repo.find_conflicts(
            employee_id, appointment_date, appointment_time
        )
        return not conflicts

    # Reads

    def list_appointments(self) -> List[Appointment]:
        return self.appointment_repo.get_all()

    def list_by_date(self, appointment_date: date) -> List[Appointment]:
        return self.appointment_repo.get_by_date(appointment_date)

    def list_by_status(self, status: str) -> List[Appointment]:
        return self.appointment_repo.get_by_status(status)

    def list_by_employee_and_date(
        self, employee_id: int, appointment_date: date
    ) -> List[Appointment]:
        return self.appointment_repo.get_by_employee_and_date(
            employee_id, appointment_date
        )

    def list_by_date_range(self, start_date: date, end_date: date) -> List[Appointment]:
        if start_date > end_date:
            raise ValidationError("start must not be after end", field="start")
        return self.appointment_repo.get_by_date_range(start_date, end_date)

    def get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.appointment_repo.get_by_id(appointment_id)
        if not appointment:
            raise NotFoundError("Appointment", appointment_id)
        return appointment

    def get_details(self, appointment_id: int) -> AppointmentDetails:
        """Appointment with its customer, employee and services resolved."""
        appointment = self.get_appointment(appointment_id)
        return AppointmentDetails(
            appointment=appointment,
            customer=self.customer_repo.get_by_id(appointment.customer_id),
            employee=self.employee_repo.get_by_id(appointment.employee_id),
            services=self.service_repo.get_by_ids(appointment.service_ids),
        )

    def daily_stats(self, appointment_date: date) -> Dict[str, int]:
        """Number of appointments per status on the given day."""
        return {
            status: self.appointment_repo.count_by_date_and_status(
                appointment_date, status
            )
            for status in AppointmentStatus.ALL
        }

    # Writes

    def create_appointment(self, data: Dict[str, Any]) -> Appointment:
        """Book an appointment after checking references and slot availability.

        Creating directly as COMPLETED credits the customer like a completion.
        """
        self._check_references(data)
        now = config.local_now()
        appointment = Appointment(**data, created_at=now, updated_at=now)

        if appointment.holds_slot:
            self._ensure_slot_free(appointment)

        created = self.appointment_repo.create(appointment)
        logger.info(
            "Appointment created",
            extra={
                "context": {
                    "appointment_id": created.id,
                    "customer_id": created.customer_id,
                    "employee_id": created.employee_id,
                    "date": created.appointment_date,
                    "time": created.appointment_time,
                    "status": created.status,
                }
            },
        )

        if created.status == AppointmentStatus.COMPLETED:
            self.customer_service.apply_completion(created.customer_id, created.total)
        return created

    def update_appointment(
        self, appointment_id: int, data: Dict[str, Any]
    ) -> Appointment:
        """Overwrite all fields; status changes follow the lifecycle rules."""
        existing = self.get_appointment(appointment_id)
        self._check_references(data)

        appointment = Appointment(
            **data,
            id=appointment_id,
            created_at=existing.created_at,
            updated_at=config.local_now(),
        )
        if appointment.status != existing.status:
            self._check_transition(existing.status, appointment.status)
        if appointment.holds_slot:
            self._ensure_slot_free(appointment, exclude_id=appointment_id)

        updated = self.appointment_repo.update(
            appointment, expected_status=existing.status
        )
        if updated is None:
            self._raise_concurrent_change(appointment_id, appointment.status)

        logger.info(
            "Appointment updated",
            extra={
                "context": {
                    "appointment_id": appointment_id,
                    "from_status": existing.status,
                    "to_status": updated.status,
                }
            },
        )

        if (
            existing.status != AppointmentStatus.COMPLETED
            and updated.status == AppointmentStatus.COMPLETED
        ):
            self.customer_service.apply_completion(updated.customer_id, updated.total)
        return updated

    def update_status(self, appointment_id: int, new_status: str) -> Appointment:
        """Change status; completing credits the customer exactly once."""
        existing = self.get_appointment(appointment_id)

        if existing.status == new_status:
            if new_status == AppointmentStatus.COMPLETED:
                raise AlreadyCompletedError(appointment_id)
            return existing

        self._check_transition(existing.status, new_status)
        if new_status == AppointmentStatus.COMPLETED:
            # The customer must exist before the status is committed
            self.customer_service.get_customer(existing.customer_id)

        changed = self.appointment_repo.change_status(
            appointment_id, existing.status, new_status, config.local_now()
        )
        if changed is None:
            self._raise_concurrent_change(appointment_id, new_status)

        logger.info(
            "Appointment status changed",
            extra={
                "context": {
                    "appointment_id": appointment_id,
                    "from_status": existing.status,
                    "to_status": new_status,
                }
            },
        )

        if new_status == AppointmentStatus.COMPLETED:
            self.customer_service.apply_completion(changed.customer_id, changed.total)
        return changed

    def delete_appointment(self, appointment_id: int) -> None:
        """Hard delete; customer statistics are left as they are."""
        if not self.appointment_repo.delete(appointment_id):
            raise NotFoundError("Appointment", appointment_id)
        logger.info(
            "Appointment deleted", extra={"context": {"appointment_id": appointment_id}}
        )

    # Helpers

    def _check_references(self, data: Dict[str, Any]) -> None:
        errors = []
        customer_id = data.get("customer_id")
        employee_id = data.get("employee_id")
        if not self.customer_repo.get_by_id(customer_id):
            errors.append(f"customerId: Customer {customer_id} not found")
        if not self.employee_repo.get_by_id(employee_id):
            errors.append(f"employeeId: Employee {employee_id} not found")

        service_ids = data.get("service_ids") or []
        if service_ids:
            found = {s.id for s in self.service_repo.get_by_ids(service_ids)}
            for service_id in service_ids:
                if service_id not in found:
                    errors.append(f"serviceIds: Service {service_id} not found")

        if errors:
            raise ValidationError("Unknown references", errors=errors)

    def _ensure_slot_free(self, appointment: Appointment, exclude_id=None) -> None:
        conflicts = self.appointment_repo.find_conflicts(
            appointment.employee_id,
            appointment.appointment_date,
            appointment.appointment_time,
            exclude_id=exclude_id,
        )
        if conflicts:
            logger.warning(
                "Slot already booked",
                extra={
                    "context": {
                        "employee_id": appointment.employee_id,
                        "date": appointment.appointment_date,
                        "time": appointment.appointment_time,
                        "conflicting_ids": [c.id for c in conflicts],
                    }
                },
            )
            raise SlotConflictError(
                appointment.employee_id,
                appointment.appointment_date,
                appointment.appointment_time,
            )

    @staticmethod
    def _check_transition(current: str, requested: str) -> None:
        if current in AppointmentStatus.TERMINAL:
            logger.warning(
                "Rejected status transition",
                extra={"context": {"from_status": current, "to_status": requested}},
            )
            raise InvalidStatusTransitionError(current, requested)

    def _raise_concurrent_change(self, appointment_id: int, requested: str) -> None:
        """The conditional write matched nothing; explain why."""
        current = self.appointment_repo.get_by_id(appointment_id)
        if current is None:
            raise NotFoundError("Appointment", appointment_id)
        if (
            current.status == AppointmentStatus.COMPLETED
            and requested == AppointmentStatus.COMPLETED
        ):
            raise AlreadyCompletedError(appointment_id)
        if current.status in AppointmentStatus.TERMINAL:
            raise InvalidStatusTransitionError(current.status, requested)
        raise ConflictError(f"Appointment {appointment_id} was modified concurrently")
