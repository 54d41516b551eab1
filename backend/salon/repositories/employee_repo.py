from typing import List, Optional

from sqlalchemy.exc import IntegrityError

from salon.core.exceptions import ConflictError
from salon.db.base import Employee as DbEmployee
from salon.domain.entities import Employee as DomainEmployee
from salon.domain.interfaces import IEmployeeRepository
from salon.repositories.base import SqlAlchemyRepository, store_operation


class EmployeeRepository(SqlAlchemyRepository, IEmployeeRepository):
    """SQLAlchemy implementation of IEmployeeRepository."""

    @store_operation
    def get_by_id(self, employee_id: int) -> Optional[DomainEmployee]:
        db_employee = self.db.get(DbEmployee, employee_id)
        return self._to_domain(db_employee) if db_employee else None

    @store_operation
    def get_all(self) -> List[DomainEmployee]:
        db_employees = self.db.query(DbEmployee).order_by(DbEmployee.id).all()
        return [self._to_domain(e) for e in db_employees]

    @store_operation
    def get_available_by_rating(self) -> List[DomainEmployee]:
        db_employees = (
            self.db.query(DbEmployee)
            .filter(DbEmployee.available.is_(True))
            .order_by(DbEmployee.rating.desc(), DbEmployee.id)
            .all()
        )
        return [self._to_domain(e) for e in db_employees]

    @store_operation
    def get_by_role(self, role: str) -> List[DomainEmployee]:
        db_employees = (
            self.db.query(DbEmployee)
            .filter(DbEmployee.role == role)
            .order_by(DbEmployee.id)
            .all()
        )
        return [self._to_domain(e) for e in db_employees]

    @store_operation
    def create(self, employee: DomainEmployee) -> DomainEmployee:
        db_employee = DbEmployee()
        self._apply(db_employee, employee)
        db_employee.created_at = employee.created_at
        self.db.add(db_employee)
        self.db.commit()
        self.db.refresh(db_employee)
        return self._to_domain(db_employee)

    @store_operation
    def update(self, employee: DomainEmployee) -> DomainEmployee:
        if not employee.id:
            raise ValueError("Employee ID is required for update")

        db_employee = self.db.get(DbEmployee, employee.id)
        if not db_employee:
            raise ValueError(f"Employee with ID {employee.id} not found")

        self._apply(db_employee, employee)
        self.db.commit()
        self.db.refresh(db_employee)
        return self._to_domain(db_employee)

    @store_operation
    def delete(self, employee_id: int) -> bool:
        db_employee = self.db.get(DbEmployee, employee_id)
        if not db_employee:
            return False
        self.db.delete(db_employee)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError(
                f"Employee {employee_id} is still referenced by appointments"
            ) from exc
        return True

    @staticmethod
    def _apply(db_employee: DbEmployee, employee: DomainEmployee) -> None:
        db_employee.name = employee.name
        db_employee.role = employee.role
        db_employee.email = employee.email
        db_employee.phone = employee.phone
        db_employee.photo = employee.photo
        db_employee.available = employee.available
        db_employee.specialties = list(employee.specialties or [])
        db_employee.rating = employee.rating
        db_employee.next_available = employee.next_available
        db_employee.work_start_time = employee.work_start_time
        db_employee.work_end_time = employee.work_end_time
        db_employee.updated_at = employee.updated_at

    def _to_domain(self, db_employee: DbEmployee) -> DomainEmployee:
        return DomainEmployee(
            id=db_employee.id,
            name=db_employee.name,
            role=db_employee.role,
            email=db_employee.email,
            phone=db_employee.phone,
            photo=db_employee.photo,
            available=bool(db_employee.available),
            specialties=list(db_employee.specialties or []),
            rating=db_employee.rating,
            next_available=db_employee.next_available,
            work_start_time=db_employee.work_start_time,
            work_end_time=db_employee.work_end_time,
            created_at=db_employee.created_at,
            updated_at=db_employee.updated_at,
        )
