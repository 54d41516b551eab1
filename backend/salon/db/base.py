from __future__ import annotations

import datetime as dt
from datetime import date, datetime, time
from typing import List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Table,
    Text,
    Time,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .session import Base

# Money columns come back as float to match the domain entities.
Money = Numeric(10, 2, asdecimal=False)


appointment_services = Table(
    "appointment_services",
    Base.metadata,
    Column(
        "appointment_id",
        Integer,
        ForeignKey("appointments.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "service_id",
        Integer,
        ForeignKey("services.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Customer(Base):
    """Customer model with denormalized visit statistics."""

    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(30), nullable=False, unique=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    gender: Mapped[str] = mapped_column(String(10), nullable=False)
    visit_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_spent: Mapped[float] = mapped_column(Money, nullable=False, default=0.0)
    last_visit: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    preferred_services: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    photo: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def __repr__(self):
        return f"<Customer(id={self.id}, name='{self.name}', phone='{self.phone}')>"


class Employee(Base):
    """Salon staff member."""

    __tablename__ = "employees"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    photo: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    available: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    specialties: Mapped[Optional[list]] = mapped_column(JSON, nullable=True)
    rating: Mapped[float] = mapped_column(Float, nullable=False, default=5.0)
    next_available: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    work_start_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    work_end_time: Mapped[Optional[time]] = mapped_column(Time, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def __repr__(self):
        return f"<Employee(id={self.id}, name='{self.name}', role='{self.role}')>"


class SalonService(Base):
    """Catalog entry; table kept as 'services'."""

    __tablename__ = "services"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[float] = mapped_column(Money, nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def __repr__(self):
        return f"<SalonService(id={self.id}, name='{self.name}', price={self.price})>"


class Appointment(Base):
    """Booking of an employee for a customer at a date/time slot."""

    __tablename__ = "appointments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    customer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("customers.id"), nullable=False, index=True
    )
    employee_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("employees.id"), nullable=False, index=True
    )
    appointment_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    appointment_time: Mapped[time] = mapped_column(Time, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="SCHEDULED", index=True
    )
    total: Mapped[float] = mapped_column(Money, nullable=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    services: Mapped[List[SalonService]] = relationship(
        secondary=appointment_services, lazy="selectin"
    )

    __table_args__ = (
        # At most one non-cancelled appointment per employee slot.
        Index(
            "uq_appointments_active_slot",
            "employee_id",
            "appointment_date",
            "appointment_time",
            unique=True,
            sqlite_where=text("status <> 'CANCELLED'"),
            postgresql_where=text("status <> 'CANCELLED'"),
        ),
    )

    def __repr__(self):
        return (
            f"<Appointment(id={self.id}, employee_id={self.employee_id}, "
            f"date={self.appointment_date}, time={self.appointment_time}, "
            f"status='{self.status}')>"
        )


class TallyRecord(Base):
    """Denormalized payment record, no foreign keys."""

    __tablename__ = "tally_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    time: Mapped[dt.time] = mapped_column(Time, nullable=False)
    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_phone: Mapped[str] = mapped_column(String(30), nullable=False)
    staff_name: Mapped[str] = mapped_column(String(255), nullable=False)
    services_json: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    total_cost: Mapped[float] = mapped_column(Money, nullable=False)
    payment_method: Mapped[str] = mapped_column(String(10), nullable=False, index=True)
    payment_status: Mapped[str] = mapped_column(
        String(20), nullable=False, default="PENDING", index=True
    )
    payment_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    upi_transaction_id: Mapped[Optional[str]] = mapped_column(
        String(100), nullable=True
    )
    created_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)

    def __repr__(self):
        return (
            f"<TallyRecord(id={self.id}, customer='{self.customer_name}', "
            f"total_cost={self.total_cost}, status='{self.payment_status}')>"
        )
