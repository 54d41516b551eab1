import logging
from typing import Any, Dict, List, Optional

from salon.core import config
from salon.core.exceptions import NotFoundError
from salon.domain.entities import Employee
from salon.domain.interfaces import IEmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Application service for salon staff."""

    def __init__(self, employee_repo: IEmployeeRepository) -> None:
        self.employee_repo = employee_repo

    def list_employees(self) -> List[Employee]:
        return self.employee_repo.get_all()

    def list_available(self) -> List[Employee]:
        """Available employees, best rated first."""
        return self.employee_repo.get_available_by_rating()

    def list_by_role(self, role: str) -> List[Employee]:
        return self.employee_repo.get_by_role(role)

    def get_employee(self, employee_id: int) -> Employee:
        employee = self.employee_repo.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee", employee_id)
        return employee

    def find_employee(self, employee_id: int) -> Optional[Employee]:
        return self.employee_repo.get_by_id(employee_id)

    def create_employee(self, data: Dict[str, Any]) -> Employee:
        now = config.local_now()
        created = self.employee_repo.create(
            Employee(**data, created_at=now, updated_at=now)
        )
        logger.info(
            "Employee created",
            extra={"context": {"employee_id": created.id, "role": created.role}},
        )
        return created

    def update_employee(self, employee_id: int, data: Dict[str, Any]) -> Employee:
        existing = self.get_employee(employee_id)
        updated = self.employee_repo.update(
            Employee(
                **data,
                id=employee_id,
                created_at=existing.created_at,
                updated_at=config.local_now(),
            )
        )
        logger.info("Employee updated", extra={"context": {"employee_id": employee_id}})
        return updated

    def delete_employee(self, employee_id: int) -> None:
        if not self.employee_repo.delete(employee_id):
            raise NotFoundError("Employee", employee_id)
        logger.info("Employee deleted", extra={"context": {"employee_id": employee_id}})

    def update_availability(self, employee_id: int, available: bool) -> Employee:
        """Toggle availability; becoming available stamps nextAvailable = now."""
        employee = self.get_employee(employee_id)
        now = config.local_now()
        employee.available = available
        if available:
            employee.next_available = now
        employee.updated_at = now
        updated = self.employee_repo.update(employee)
        logger.info(
            "Employee availability changed",
            extra={"context": {"employee_id": employee_id, "available": available}},
        )
        return updated
