"""
Appointment controller for handling HTTP requests following SOLID principles.

This controller:
- Handles HTTP concerns only (Single Responsibility)
- Depends on service abstractions (Dependency Inversion)
- Leaves error mapping to the handlers registered on the app
"""

from flask import Blueprint, request

from salon.core.api_utils import api_response, get_json_body
from salon.core.config import API_PREFIX
from salon.core.limiter_config import READ_LIMIT, WRITE_LIMIT, limiter
from salon.core.validation import (
    parse_date_param,
    parse_enum_param,
    parse_int_param,
    parse_time_param,
    require_param,
    validate_payload,
)
from salon.db.session import SessionLocal
from salon.domain.entities import AppointmentStatus
from salon.repositories import (
    AppointmentRepository,
    CustomerRepository,
    EmployeeRepository,
    ServiceCatalogRepository,
)
from salon.schemas.dtos import AppointmentResponse, appointments_to_dicts
from salon.services.appointment_service import AppointmentService

appointment_bp = Blueprint(
    "appointments", __name__, url_prefix=f"{API_PREFIX}/appointments"
)


def _appointment_service(db) -> AppointmentService:
    return AppointmentService(
        AppointmentRepository(db),
        CustomerRepository(db),
        EmployeeRepository(db),
        ServiceCatalogRepository(db),
    )


@appointment_bp.route("", methods=["GET"])
@limiter.limit(READ_LIMIT)
def list_appointments():
    """List appointments filtered by date, employee, status or date range."""
    args = request.args
    appointment_date = parse_date_param(args.get("date"), "date")
    employee_id = parse_int_param(args.get("employeeId"), "employeeId")
    status = parse_enum_param(args.get("status"), "status", AppointmentStatus.ALL)
    start = parse_date_param(args.get("start"), "start")
    end = parse_date_param(args.get("end"), "end")

    db = SessionLocal()
    try:
        service = _appointment_service(db)
        if appointment_date and employee_id:
            appointments = service.list_by_employee_and_date(
                employee_id, appointment_date
            )
        elif appointment_date:
            appointments = service.list_by_date(appointment_date)
        elif status:
            appointments = service.list_by_status(status)
        elif start and end:
            appointments = service.list_by_date_range(start, end)
        else:
            appointments = service.list_appointments()
        return api_response(
            True, "Appointments retrieved", appointments_to_dicts(appointments)
        )
    finally:
        db.close()


@appointment_bp.route("/<int:appointment_id>", methods=["GET"])
@limiter.limit(READ_LIMIT)
def get_appointment(appointment_id: int):
    """Get one appointment with customer, employee and services resolved."""
    db = SessionLocal()
    try:
        details = _appointment_service(db).get_details(appointment_id)
        return api_response(
            True,
            "Appointment retrieved",
            AppointmentResponse.from_details(details).to_dict(),
        )
    finally:
        db.close()


@appointment_bp.route("", methods=["POST"])
@limiter.limit(WRITE_LIMIT)
def create_appointment():
    data = validate_payload("appointment", get_json_body())
    db = SessionLocal()
    try:
        created = _appointment_service(db).create_appointment(data)
        return api_response(
            True,
            "Appointment created",
            AppointmentResponse.from_domain(created).to_dict(),
            201,
        )
    finally:
        db.close()


@appointment_bp.route("/<int:appointment_id>", methods=["PUT"])
@limiter.limit(WRITE_LIMIT)
def update_appointment(appointment_id: int):
    data = validate_payload("appointment", get_json_body())
    db = SessionLocal()
    try:
        updated = _appointment_service(db).update_appointment(appointment_id, data)
        return api_response(
            True,
            "Appointment updated",
            AppointmentResponse.from_domain(updated).to_dict(),
        )
    finally:
        db.close()


@appointment_bp.route("/<int:appointment_id>", methods=["DELETE"])
@limiter.limit(WRITE_LIMIT)
def delete_appointment(appointment_id: int):
    db = SessionLocal()
    try:
        _appointment_service(db).delete_appointment(appointment_id)
        return api_response(True, "Appointment deleted")
    finally:
        db.close()


@appointment_bp.route("/<int:appointment_id>/status", methods=["PATCH"])
@limiter.limit(WRITE_LIMIT)
def update_appointment_status(appointment_id: int):
    """Change status; accepts ``status`` as query parameter or JSON field."""
    raw_status = request.args.get("status")
    if raw_status is None:
        body = request.get_json(silent=True) or {}
        if isinstance(body, dict):
            raw_status = body.get("status")
    status = parse_enum_param(
        require_param(raw_status, "status"), "status", AppointmentStatus.ALL
    )

    db = SessionLocal()
    try:
        updated = _appointment_service(db).update_status(appointment_id, status)
        return api_response(
            True,
            "Appointment status updated",
            AppointmentResponse.from_domain(updated).to_dict(),
        )
    finally:
        db.close()


@appointment_bp.route("/availability", methods=["GET"])
@limiter.limit(READ_LIMIT)
def check_availability():
    args = request.args
    employee_id = parse_int_param(
        require_param(args.get("employeeId"), "employeeId"), "employeeId"
    )
    appointment_date = parse_date_param(require_param(args.get("date"), "date"), "date")
    appointment_time = parse_time_param(require_param(args.get("time"), "time"), "time")

    db = SessionLocal()
    try:
        available = _appointment_service(db).is_slot_available(
            employee_id, appointment_date, appointment_time
        )
        return api_response(
            True,
            "Slot is available" if available else "Slot is already booked",
            {
                "employeeId": employee_id,
                "date": appointment_date.isoformat(),
                "time": appointment_time.isoformat(),
                "available": available,
            },
        )
    finally:
        db.close()


@appointment_bp.route("/stats", methods=["GET"])
@limiter.limit(READ_LIMIT)
def appointment_stats():
    """Count appointments per status for one day."""
    appointment_date = parse_date_param(
        require_param(request.args.get("date"), "date"), "date"
    )
    db = SessionLocal()
    try:
        counts = _appointment_service(db).daily_stats(appointment_date)
        return api_response(
            True,
            "Appointment statistics retrieved",
            {"date": appointment_date.isoformat(), "counts": counts},
        )
    finally:
        db.close()
