"""
Data Transfer Objects (DTOs) for API responses.

Each response is built from a domain entity with ``from_domain`` and
rendered with ``to_dict`` using the camelCase keys of the client contract.
Dates, times and datetimes are rendered as ISO-8601 strings.
"""

import json
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Any, Dict, List, Optional, Union

from salon.domain.entities import (
    Appointment,
    AppointmentDetails,
    Customer,
    Employee,
    SalonService,
    TallyRecord,
)


def _iso(value: Optional[Union[date, datetime, time]]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass
class CustomerResponse:
    """DTO for customer API responses."""

    id: int
    name: str
    phone: str
    email: Optional[str]
    gender: str
    visit_count: int
    total_spent: float
    last_visit: Optional[datetime]
    preferred_services: List[str]
    notes: Optional[str]
    photo: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_domain(cls, customer: Customer) -> "CustomerResponse":
        return cls(
            id=customer.id,
            name=customer.name,
            phone=customer.phone,
            email=customer.email,
            gender=customer.gender,
            visit_count=customer.visit_count,
            total_spent=customer.total_spent,
            last_visit=customer.last_visit,
            preferred_services=list(customer.preferred_services),
            notes=customer.notes,
            photo=customer.photo,
            created_at=customer.created_at,
            updated_at=customer.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "phone": self.phone,
            "email": self.email,
            "gender": self.gender,
            "visitCount": self.visit_count,
            "totalSpent": self.total_spent,
            "lastVisit": _iso(self.last_visit),
            "preferredServices": self.preferred_services,
            "notes": self.notes,
            "photo": self.photo,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass
class EmployeeResponse:
    """DTO for employee API responses."""

    id: int
    name: str
    role: str
    email: Optional[str]
    phone: Optional[str]
    photo: Optional[str]
    available: bool
    specialties: List[str]
    rating: float
    next_available: Optional[datetime]
    work_start_time: Optional[time]
    work_end_time: Optional[time]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_domain(cls, employee: Employee) -> "EmployeeResponse":
        return cls(
            id=employee.id,
            name=employee.name,
            role=employee.role,
            email=employee.email,
            phone=employee.phone,
            photo=employee.photo,
            available=employee.available,
            specialties=list(employee.specialties),
            rating=employee.rating,
            next_available=employee.next_available,
            work_start_time=employee.work_start_time,
            work_end_time=employee.work_end_time,
            created_at=employee.created_at,
            updated_at=employee.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role,
            "email": self.email,
            "phone": self.phone,
            "photo": self.photo,
            "available": self.available,
            "specialties": self.specialties,
            "rating": self.rating,
            "nextAvailable": _iso(self.next_available),
            "workStartTime": _iso(self.work_start_time),
            "workEndTime": _iso(self.work_end_time),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass
class ServiceResponse:
    """DTO for service catalog responses."""

    id: int
    name: str
    duration: int
    price: float
    category: str
    description: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_domain(cls, service: SalonService) -> "ServiceResponse":
        return cls(
            id=service.id,
            name=service.name,
            duration=service.duration,
            price=service.price,
            category=service.category,
            description=service.description,
            created_at=service.created_at,
            updated_at=service.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "duration": self.duration,
            "price": self.price,
            "category": self.category,
            "description": self.description,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


@dataclass
class AppointmentResponse:
    """DTO for appointment API responses.

    Resolved relations are included only when the caller fetched them.
    """

    id: int
    customer_id: int
    employee_id: int
    service_ids: List[int]
    appointment_date: date
    appointment_time: time
    status: str
    total: float
    notes: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    customer: Optional[CustomerResponse] = None
    employee: Optional[EmployeeResponse] = None
    services: List[ServiceResponse] = field(default_factory=list)
    resolved: bool = False

    @classmethod
    def from_domain(cls, appointment: Appointment) -> "AppointmentResponse":
        return cls(
            id=appointment.id,
            customer_id=appointment.customer_id,
            employee_id=appointment.employee_id,
            service_ids=list(appointment.service_ids),
            appointment_date=appointment.appointment_date,
            appointment_time=appointment.appointment_time,
            status=appointment.status,
            total=appointment.total,
            notes=appointment.notes,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
        )

    @classmethod
    def from_details(cls, details: AppointmentDetails) -> "AppointmentResponse":
        response = cls.from_domain(details.appointment)
        if details.customer:
            response.customer = CustomerResponse.from_domain(details.customer)
        if details.employee:
            response.employee = EmployeeResponse.from_domain(details.employee)
        response.services = [ServiceResponse.from_domain(s) for s in details.services]
        response.resolved = True
        return response

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "id": self.id,
            "customerId": self.customer_id,
            "employeeId": self.employee_id,
            "serviceIds": self.service_ids,
            "appointmentDate": _iso(self.appointment_date),
            "appointmentTime": _iso(self.appointment_time),
            "status": self.status,
            "total": self.total,
            "notes": self.notes,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
        if self.resolved:
            data["customer"] = self.customer.to_dict() if self.customer else None
            data["employee"] = self.employee.to_dict() if self.employee else None
            data["services"] = [s.to_dict() for s in self.services]
        return data


@dataclass
class TallyRecordResponse:
    """DTO for tally record responses."""

    id: int
    date: datetime
    time: time
    customer_name: str
    customer_phone: str
    staff_name: str
    services_json: Optional[str]
    total_cost: float
    payment_method: str
    payment_status: str
    payment_date: Optional[datetime]
    upi_transaction_id: Optional[str]
    created_at: Optional[datetime]
    updated_at: Optional[datetime]

    @classmethod
    def from_domain(cls, record: TallyRecord) -> "TallyRecordResponse":
        return cls(
            id=record.id,
            date=record.date,
            time=record.time,
            customer_name=record.customer_name,
            customer_phone=record.customer_phone,
            staff_name=record.staff_name,
            services_json=record.services_json,
            total_cost=record.total_cost,
            payment_method=record.payment_method,
            payment_status=record.payment_status,
            payment_date=record.payment_date,
            upi_transaction_id=record.upi_transaction_id,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "date": _iso(self.date),
            "time": _iso(self.time),
            "customerName": self.customer_name,
            "customerPhone": self.customer_phone,
            "staffName": self.staff_name,
            "servicesJson": self.services_json,
            "services": self._services(),
            "totalCost": self.total_cost,
            "paymentMethod": self.payment_method,
            "paymentStatus": self.payment_status,
            "paymentDate": _iso(self.payment_date),
            "upiTransactionId": self.upi_transaction_id,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    def _services(self) -> Any:
        if not self.services_json:
            return []
        try:
            return json.loads(self.services_json)
        except ValueError:
            return []


def customers_to_dicts(customers: List[Customer]) -> List[Dict[str, Any]]:
    return [CustomerResponse.from_domain(c).to_dict() for c in customers]


def employees_to_dicts(employees: List[Employee]) -> List[Dict[str, Any]]:
    return [EmployeeResponse.from_domain(e).to_dict() for e in employees]


def services_to_dicts(services: List[SalonService]) -> List[Dict[str, Any]]:
    return [ServiceResponse.from_domain(s).to_dict() for s in services]


def appointments_to_dicts(appointments: List[Appointment]) -> List[Dict[str, Any]]:
    return [AppointmentResponse.from_domain(a).to_dict() for a in appointments]


def tally_records_to_dicts(records: List[TallyRecord]) -> List[Dict[str, Any]]:
    return [TallyRecordResponse.from_domain(r).to_dict() for r in records]
