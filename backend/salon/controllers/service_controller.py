"""
Service catalog controller.
"""

from flask import Blueprint, request

from salon.core.api_utils import api_response, get_json_body
from salon.core.config import API_PREFIX
from salon.core.limiter_config import READ_LIMIT, WRITE_LIMIT, limiter
from salon.core.validation import parse_choice_param, validate_payload
from salon.db.session import SessionLocal
from salon.repositories import ServiceCatalogRepository
from salon.repositories.service_repo import SORT_COLUMNS
from salon.schemas.dtos import ServiceResponse, services_to_dicts
from salon.services.catalog_service import CatalogService

service_bp = Blueprint("services", __name__, url_prefix=f"{API_PREFIX}/services")


@service_bp.route("", methods=["GET"])
@limiter.limit(READ_LIMIT)
def list_services():
    """List services by ``search``, ``category`` or ``sortBy`` (first one given)."""
    search = (request.args.get("search") or "").strip()
    category = (request.args.get("category") or "").strip()
    sort_by = parse_choice_param(
        request.args.get("sortBy"), "sortBy", list(SORT_COLUMNS)
    )

    db = SessionLocal()
    try:
        service = CatalogService(ServiceCatalogRepository(db))
        if search:
            services = service.search_services(search)
        elif category:
            services = service.list_by_category(category)
        elif sort_by:
            services = service.list_sorted(sort_by)
        else:
            services = service.list_services()
        return api_response(True, "Services retrieved", services_to_dicts(services))
    finally:
        db.close()


@service_bp.route("/<int:service_id>", methods=["GET"])
@limiter.limit(READ_LIMIT)
def get_service(service_id: int):
    db = SessionLocal()
    try:
        found = CatalogService(ServiceCatalogRepository(db)).get_service(service_id)
        return api_response(
            True, "Service retrieved", ServiceResponse.from_domain(found).to_dict()
        )
    finally:
        db.close()


@service_bp.route("", methods=["POST"])
@limiter.limit(WRITE_LIMIT)
def create_service():
    data = validate_payload("service", get_json_body())
    db = SessionLocal()
    try:
        created = CatalogService(ServiceCatalogRepository(db)).create_service(data)
        return api_response(
            True, "Service created", ServiceResponse.from_domain(created).to_dict(), 201
        )
    finally:
        db.close()


@service_bp.route("/<int:service_id>", methods=["PUT"])
@limiter.limit(WRITE_LIMIT)
def update_service(service_id: int):
    data = validate_payload("service", get_json_body())
    db = SessionLocal()
    try:
        updated = CatalogService(ServiceCatalogRepository(db)).update_service(
            service_id, data
        )
        return api_response(
            True, "Service updated", ServiceResponse.from_domain(updated).to_dict()
        )
    finally:
        db.close()


@service_bp.route("/<int:service_id>", methods=["DELETE"])
@limiter.limit(WRITE_LIMIT)
def delete_service(service_id: int):
    db = SessionLocal()
    try:
        CatalogService(ServiceCatalogRepository(db)).delete_service(service_id)
        return api_response(True, "Service deleted")
    finally:
        db.close()
