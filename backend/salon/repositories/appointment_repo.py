"""
Appointment repository.

Slot ownership is enforced by the partial unique index on
(employee_id, appointment_date, appointment_time) for non-cancelled rows;
an IntegrityError raised by it surfaces as SlotConflictError. Status changes
are conditional updates so two concurrent completions cannot both succeed.
"""

import logging
from datetime import date, datetime, time
from typing import List, Optional

from sqlalchemy import func, update
from sqlalchemy.exc import IntegrityError

from salon.core.exceptions import SlotConflictError
from salon.db.base import Appointment as DbAppointment
from salon.db.base import SalonService as DbService
from salon.domain.entities import Appointment as DomainAppointment
from salon.domain.entities import AppointmentStatus
from salon.domain.interfaces import IAppointmentRepository
from salon.repositories.base import SqlAlchemyRepository, store_operation

logger = logging.getLogger(__name__)


class AppointmentRepository(SqlAlchemyRepository, IAppointmentRepository):
    """SQLAlchemy implementation of IAppointmentRepository."""

    @store_operation
    def get_by_id(self, appointment_id: int) -> Optional[DomainAppointment]:
        db_appointment = self.db.get(DbAppointment, appointment_id)
        return self._to_domain(db_appointment) if db_appointment else None

    @store_operation
    def get_all(self) -> List[DomainAppointment]:
        return self._fetch()

    @store_operation
    def get_by_date(self, appointment_date: date) -> List[DomainAppointment]:
        return self._fetch(DbAppointment.appointment_date == appointment_date)

    @store_operation
    def get_by_status(self, status: str) -> List[DomainAppointment]:
        return self._fetch(DbAppointment.status == status)

    @store_operation
    def get_by_employee_and_date(
        self, employee_id: int, appointment_date: date
    ) -> List[DomainAppointment]:
        return self._fetch(
            DbAppointment.employee_id == employee_id,
            DbAppointment.appointment_date == appointment_date,
        )

    @store_operation
    def get_by_date_range(
        self, start_date: date, end_date: date
    ) -> List[DomainAppointment]:
        return self._fetch(
            DbAppointment.appointment_date >= start_date,
            DbAppointment.appointment_date <= end_date,
        )

    @store_operation
    def find_conflicts(
        self,
        employee_id: int,
        appointment_date: date,
        appointment_time: time,
        exclude_id: Optional[int] = None,
    ) -> List[DomainAppointment]:
        criteria = [
            DbAppointment.employee_id == employee_id,
            DbAppointment.appointment_date == appointment_date,
            DbAppointment.appointment_time == appointment_time,
            DbAppointment.status != AppointmentStatus.CANCELLED,
        ]
        if exclude_id is not None:
            criteria.append(DbAppointment.id != exclude_id)
        return self._fetch(*criteria)

    @store_operation
    def count_by_date_and_status(self, appointment_date: date, status: str) -> int:
        return (
            self.db.query(func.count(DbAppointment.id))
            .filter(
                DbAppointment.appointment_date == appointment_date,
                DbAppointment.status == status,
            )
            .scalar()
            or 0
        )

    @store_operation
    def create(self, appointment: DomainAppointment) -> DomainAppointment:
        db_appointment = DbAppointment(
            customer_id=appointment.customer_id,
            employee_id=appointment.employee_id,
            appointment_date=appointment.appointment_date,
            appointment_time=appointment.appointment_time,
            status=appointment.status,
            total=appointment.total,
            notes=appointment.notes,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
        )
        db_appointment.services = self._load_services(appointment.service_ids)
        self.db.add(db_appointment)
        self._commit_or_conflict(appointment)
        self.db.refresh(db_appointment)
        return self._to_domain(db_appointment)

    @store_operation
    def update(
        self, appointment: DomainAppointment, expected_status: Optional[str] = None
    ) -> Optional[DomainAppointment]:
        if not appointment.id:
            raise ValueError("Appointment ID is required for update")

        stmt = (
            update(DbAppointment)
            .where(DbAppointment.id == appointment.id)
            .values(
                customer_id=appointment.customer_id,
                employee_id=appointment.employee_id,
                appointment_date=appointment.appointment_date,
                appointment_time=appointment.appointment_time,
                status=appointment.status,
                total=appointment.total,
                notes=appointment.notes,
                updated_at=appointment.updated_at,
            )
            .execution_options(synchronize_session=False)
        )
        if expected_status is not None:
            stmt = stmt.where(DbAppointment.status == expected_status)

        try:
            result = self.db.execute(stmt)
            if result.rowcount == 0:
                self.db.rollback()
                return None
            db_appointment = self.db.get(
                DbAppointment, appointment.id, populate_existing=True
            )
            db_appointment.services = self._load_services(appointment.service_ids)
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise self._slot_conflict(appointment) from exc

        self.db.refresh(db_appointment)
        return self._to_domain(db_appointment)

    @store_operation
    def change_status(
        self,
        appointment_id: int,
        expected_status: str,
        new_status: str,
        updated_at: datetime,
    ) -> Optional[DomainAppointment]:
        result = self.db.execute(
            update(DbAppointment)
            .where(
                DbAppointment.id == appointment_id,
                DbAppointment.status == expected_status,
            )
            .values(status=new_status, updated_at=updated_at)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            return None
        self.db.commit()
        db_appointment = self.db.get(
            DbAppointment, appointment_id, populate_existing=True
        )
        return self._to_domain(db_appointment)

    @store_operation
    def delete(self, appointment_id: int) -> bool:
        db_appointment = self.db.get(DbAppointment, appointment_id)
        if not db_appointment:
            return False
        self.db.delete(db_appointment)
        self.db.commit()
        return True

    def _fetch(self, *criteria) -> List[DomainAppointment]:
        db_appointments = (
            self.db.query(DbAppointment)
            .filter(*criteria)
            .order_by(
                DbAppointment.appointment_date,
                DbAppointment.appointment_time,
                DbAppointment.id,
            )
            .all()
        )
        return [self._to_domain(a) for a in db_appointments]

    def _load_services(self, service_ids: List[int]) -> List[DbService]:
        if not service_ids:
            return []
        return (
            self.db.query(DbService)
            .filter(DbService.id.in_(service_ids))
            .order_by(DbService.id)
            .all()
        )

    def _commit_or_conflict(self, appointment: DomainAppointment) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise self._slot_conflict(appointment) from exc

    @staticmethod
    def _slot_conflict(appointment: DomainAppointment) -> SlotConflictError:
        logger.warning(
            "Slot uniqueness constraint rejected appointment write",
            extra={
                "context": {
                    "appointment_id": appointment.id,
                    "employee_id": appointment.employee_id,
                    "date": appointment.appointment_date,
                    "time": appointment.appointment_time,
                }
            },
        )
        return SlotConflictError(
            appointment.employee_id,
            appointment.appointment_date,
            appointment.appointment_time,
        )

    def _to_domain(self, db_appointment: DbAppointment) -> DomainAppointment:
        """Convert DB model to domain entity; services become explicit ids."""
        return DomainAppointment(
            id=db_appointment.id,
            customer_id=db_appointment.customer_id,
            employee_id=db_appointment.employee_id,
            service_ids=sorted(s.id for s in db_appointment.services),
            appointment_date=db_appointment.appointment_date,
            appointment_time=db_appointment.appointment_time,
            status=db_appointment.status,
            total=float(db_appointment.total or 0.0),
            notes=db_appointment.notes,
            created_at=db_appointment.created_at,
            updated_at=db_appointment.updated_at,
        )
