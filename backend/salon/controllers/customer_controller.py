"""
Customer controller - CRUD, search, sort and phone lookup endpoints.
"""

from flask import Blueprint, request

from salon.core.api_utils import api_response, get_json_body
from salon.core.config import API_PREFIX
from salon.core.limiter_config import READ_LIMIT, WRITE_LIMIT, limiter
from salon.core.validation import (
    parse_choice_param,
    parse_enum_param,
    validate_payload,
)
from salon.db.session import SessionLocal
from salon.domain.entities import Gender
from salon.repositories import CustomerRepository
from salon.repositories.customer_repo import SORT_COLUMNS
from salon.schemas.dtos import CustomerResponse, customers_to_dicts
from salon.services.customer_service import CustomerService

customer_bp = Blueprint("customers", __name__, url_prefix=f"{API_PREFIX}/customers")


@customer_bp.route("", methods=["GET"])
@limiter.limit(READ_LIMIT)
def list_customers():
    """List customers; ``search`` wins over ``gender``, which wins over ``sortBy``."""
    search = (request.args.get("search") or "").strip()
    gender = parse_enum_param(request.args.get("gender"), "gender", Gender.ALL)
    sort_by = parse_choice_param(
        request.args.get("sortBy"), "sortBy", list(SORT_COLUMNS)
    )

    db = SessionLocal()
    try:
        service = CustomerService(CustomerRepository(db))
        if search:
            customers = service.search_customers(search)
        elif gender:
            customers = service.list_by_gender(gender)
        elif sort_by:
            customers = service.list_sorted(sort_by)
        else:
            customers = service.list_customers()
        return api_response(True, "Customers retrieved", customers_to_dicts(customers))
    finally:
        db.close()


@customer_bp.route("/<int:customer_id>", methods=["GET"])
@limiter.limit(READ_LIMIT)
def get_customer(customer_id: int):
    db = SessionLocal()
    try:
        customer = CustomerService(CustomerRepository(db)).get_customer(customer_id)
        return api_response(
            True, "Customer retrieved", CustomerResponse.from_domain(customer).to_dict()
        )
    finally:
        db.close()


@customer_bp.route("/phone/<string:phone>", methods=["GET"])
@limiter.limit(READ_LIMIT)
def get_customer_by_phone(phone: str):
    db = SessionLocal()
    try:
        customer = CustomerService(CustomerRepository(db)).get_by_phone(phone)
        return api_response(
            True, "Customer retrieved", CustomerResponse.from_domain(customer).to_dict()
        )
    finally:
        db.close()


@customer_bp.route("", methods=["POST"])
@limiter.limit(WRITE_LIMIT)
def create_customer():
    data = validate_payload("customer", get_json_body())
    db = SessionLocal()
    try:
        created = CustomerService(CustomerRepository(db)).create_customer(data)
        return api_response(
            True,
            "Customer created",
            CustomerResponse.from_domain(created).to_dict(),
            201,
        )
    finally:
        db.close()


@customer_bp.route("/<int:customer_id>", methods=["PUT"])
@limiter.limit(WRITE_LIMIT)
def update_customer(customer_id: int):
    data = validate_payload("customer", get_json_body())
    db = SessionLocal()
    try:
        updated = CustomerService(CustomerRepository(db)).update_customer(
            customer_id, data
        )
        return api_response(
            True, "Customer updated", CustomerResponse.from_domain(updated).to_dict()
        )
    finally:
        db.close()


@customer_bp.route("/<int:customer_id>", methods=["DELETE"])
@limiter.limit(WRITE_LIMIT)
def delete_customer(customer_id: int):
    db = SessionLocal()
    try:
        CustomerService(CustomerRepository(db)).delete_customer(customer_id)
        return api_response(True, "Customer deleted")
    finally:
        db.close()
