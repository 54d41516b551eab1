"""
Domain package - Pure business logic layer.

This package contains:
- entities.py: Domain entities and status/enumeration constants
- interfaces.py: Repository contracts the services depend on
"""

from .entities import (
    Appointment,
    AppointmentDetails,
    AppointmentStatus,
    Customer,
    Employee,
    Gender,
    PaymentMethod,
    PaymentStatus,
    SalonService,
    TallyRecord,
)
from .interfaces import (
    IAppointmentReader,
    IAppointmentRepository,
    IAppointmentWriter,
    ICustomerReader,
    ICustomerRepository,
    ICustomerWriter,
    IEmployeeRepository,
    IServiceCatalogRepository,
    ITallyRecordRepository,
)

__all__ = [
    # Domain entities
    "Appointment",
    "AppointmentDetails",
    "Customer",
    "Employee",
    "SalonService",
    "TallyRecord",
    # Enumerations
    "AppointmentStatus",
    "Gender",
    "PaymentMethod",
    "PaymentStatus",
    # Repository interfaces
    "IAppointmentRepository",
    "ICustomerRepository",
    "IEmployeeRepository",
    "IServiceCatalogRepository",
    "ITallyRecordRepository",
    # Segregated interfaces
    "IAppointmentReader",
    "IAppointmentWriter",
    "ICustomerReader",
    "ICustomerWriter",
]
