from .appointment_repo import AppointmentRepository
from .customer_repo import CustomerRepository
from .employee_repo import EmployeeRepository
from .service_repo import ServiceCatalogRepository
from .tally_repo import TallyRecordRepository

__all__ = [
    "AppointmentRepository",
    "CustomerRepository",
    "EmployeeRepository",
    "ServiceCatalogRepository",
    "TallyRecordRepository",
]
