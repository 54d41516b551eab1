from .appointment_service import AppointmentService
from .catalog_service import CatalogService
from .customer_service import CustomerService
from .employee_service import EmployeeService
from .tally_service import TallyService

__all__ = [
    "AppointmentService",
    "CatalogService",
    "CustomerService",
    "EmployeeService",
    "TallyService",
]
