from flask import Blueprint, request

from salon.core.api_utils import api_response, get_json_body
from salon.core.config import API_PREFIX
from salon.core.limiter_config import READ_LIMIT, WRITE_LIMIT, limiter
from salon.core.validation import parse_bool_param, require_param, validate_payload
from salon.db.session import SessionLocal
from salon.repositories import EmployeeRepository
from salon.schemas.dtos import EmployeeResponse, employees_to_dicts
from salon.services.employee_service import EmployeeService

employee_bp = Blueprint("employees", __name__, url_prefix=f"{API_PREFIX}/employees")


@employee_bp.route("", methods=["GET"])
@limiter.limit(READ_LIMIT)
def list_employees():
    """List employees; ``available=true`` returns available staff by rating."""
    available = parse_bool_param(request.args.get("available"), "available")
    db = SessionLocal()
    try:
        service = EmployeeService(EmployeeRepository(db))
        if available:
            employees = service.list_available()
        else:
            employees = service.list_employees()
        return api_response(True, "Employees retrieved", employees_to_dicts(employees))
    finally:
        db.close()


@employee_bp.route("/role/<string:role>", methods=["GET"])
@limiter.limit(READ_LIMIT)
def list_employees_by_role(role: str):
    db = SessionLocal()
    try:
        employees = EmployeeService(EmployeeRepository(db)).list_by_role(role)
        return api_response(True, "Employees retrieved", employees_to_dicts(employees))
    finally:
        db.close()


@employee_bp.route("/<int:employee_id>", methods=["GET"])
@limiter.limit(READ_LIMIT)
def get_employee(employee_id: int):
    db = SessionLocal()
    try:
        employee = EmployeeService(EmployeeRepository(db)).get_employee(employee_id)
        return api_response(
            True, "Employee retrieved", EmployeeResponse.from_domain(employee).to_dict()
        )
    finally:
        db.close()


@employee_bp.route("", methods=["POST"])
@limiter.limit(WRITE_LIMIT)
def create_employee():
    data = validate_payload("employee", get_json_body())
    db = SessionLocal()
    try:
        created = EmployeeService(EmployeeRepository(db)).create_employee(data)
        return api_response(
            True,
            "Employee created",
            EmployeeResponse.from_domain(created).to_dict(),
            201,
        )
    finally:
        db.close()


@employee_bp.route("/<int:employee_id>", methods=["PUT"])
@limiter.limit(WRITE_LIMIT)
def update_employee(employee_id: int):
    data = validate_payload("employee", get_json_body())
    db = SessionLocal()
    try:
        updated = EmployeeService(EmployeeRepository(db)).update_employee(
            employee_id, data
        )
        return api_response(
            True, "Employee updated", EmployeeResponse.from_domain(updated).to_dict()
        )
    finally:
        db.close()


@employee_bp.route("/<int:employee_id>", methods=["DELETE"])
@limiter.limit(WRITE_LIMIT)
def delete_employee(employee_id: int):
    db = SessionLocal()
    try:
        EmployeeService(EmployeeRepository(db)).delete_employee(employee_id)
        return api_response(True, "Employee deleted")
    finally:
        db.close()


@employee_bp.route("/<int:employee_id>/availability", methods=["PATCH"])
@limiter.limit(WRITE_LIMIT)
def update_employee_availability(employee_id: int):
    """Set availability from the ``available`` query parameter or JSON field."""
    raw = request.args.get("available")
    if raw is None:
        body = request.get_json(silent=True) or {}
        if isinstance(body, dict):
            raw = body.get("available")
    available = parse_bool_param(require_param(raw, "available"), "available")

    db = SessionLocal()
    try:
        updated = EmployeeService(EmployeeRepository(db)).update_availability(
            employee_id, available
        )
        return api_response(
            True,
            "Employee availability updated",
            EmployeeResponse.from_domain(updated).to_dict(),
        )
    finally:
        db.close()
