"""
Tally controller - payment records, payment status and daily revenue.
"""

from flask import Blueprint, request

from salon.core.api_utils import api_response, get_json_body
from salon.core.config import API_PREFIX
from salon.core.limiter_config import READ_LIMIT, WRITE_LIMIT, limiter
from salon.core.validation import (
    parse_date_param,
    parse_datetime_param,
    parse_enum_param,
    require_param,
    validate_payload,
)
from salon.db.session import SessionLocal
from salon.domain.entities import PaymentMethod, PaymentStatus
from salon.repositories import TallyRecordRepository
from salon.schemas.dtos import TallyRecordResponse, tally_records_to_dicts
from salon.services.tally_service import TallyService

tally_bp = Blueprint("tally", __name__, url_prefix=f"{API_PREFIX}/tally")


@tally_bp.route("", methods=["GET"])
@limiter.limit(READ_LIMIT)
def list_tally_records():
    """List records by ``date``, ``status``, ``paymentMethod`` or a date range."""
    args = request.args
    day = parse_date_param(args.get("date"), "date")
    status = parse_enum_param(args.get("status"), "status", PaymentStatus.ALL)
    method = parse_enum_param(
        args.get("paymentMethod"), "paymentMethod", PaymentMethod.ALL
    )
    start = parse_datetime_param(args.get("startDate"), "startDate")
    end = parse_datetime_param(args.get("endDate"), "endDate")

    db = SessionLocal()
    try:
        service = TallyService(TallyRecordRepository(db))
        if day:
            records = service.list_by_day(day)
        elif status:
            records = service.list_by_payment_status(status)
        elif method:
            records = service.list_by_payment_method(method)
        elif start and end:
            records = service.list_by_date_range(start, end)
        else:
            records = service.list_records()
        return api_response(
            True, "Tally records retrieved", tally_records_to_dicts(records)
        )
    finally:
        db.close()


@tally_bp.route("/revenue", methods=["GET"])
@limiter.limit(READ_LIMIT)
def daily_revenue():
    """Completed revenue for one calendar day, in total and per method."""
    day = parse_date_param(require_param(request.args.get("date"), "date"), "date")
    db = SessionLocal()
    try:
        service = TallyService(TallyRecordRepository(db))
        return api_response(
            True,
            "Revenue retrieved",
            {
                "date": day.isoformat(),
                "totalRevenue": service.total_revenue(day),
                "byMethod": service.revenue_by_method(day),
            },
        )
    finally:
        db.close()


@tally_bp.route("/<int:record_id>", methods=["GET"])
@limiter.limit(READ_LIMIT)
def get_tally_record(record_id: int):
    db = SessionLocal()
    try:
        record = TallyService(TallyRecordRepository(db)).get_record(record_id)
        return api_response(
            True,
            "Tally record retrieved",
            TallyRecordResponse.from_domain(record).to_dict(),
        )
    finally:
        db.close()


@tally_bp.route("", methods=["POST"])
@limiter.limit(WRITE_LIMIT)
def create_tally_record():
    data = validate_payload("tally", get_json_body())
    db = SessionLocal()
    try:
        created = TallyService(TallyRecordRepository(db)).create_record(data)
        return api_response(
            True,
            "Tally record created",
            TallyRecordResponse.from_domain(created).to_dict(),
            201,
        )
    finally:
        db.close()


@tally_bp.route("/<int:record_id>", methods=["PUT"])
@limiter.limit(WRITE_LIMIT)
def update_tally_record(record_id: int):
    data = validate_payload("tally", get_json_body())
    db = SessionLocal()
    try:
        updated = TallyService(TallyRecordRepository(db)).update_record(
            record_id, data
        )
        return api_response(
            True,
            "Tally record updated",
            TallyRecordResponse.from_domain(updated).to_dict(),
        )
    finally:
        db.close()


@tally_bp.route("/<int:record_id>", methods=["DELETE"])
@limiter.limit(WRITE_LIMIT)
def delete_tally_record(record_id: int):
    db = SessionLocal()
    try:
        TallyService(TallyRecordRepository(db)).delete_record(record_id)
        return api_response(True, "Tally record deleted")
    finally:
        db.close()


@tally_bp.route("/<int:record_id>/payment-status", methods=["PATCH"])
@limiter.limit(WRITE_LIMIT)
def update_payment_status(record_id: int):
    """Set ``status`` and optional ``upiTransactionId`` (query or JSON)."""
    body = request.get_json(silent=True) or {}
    if not isinstance(body, dict):
        body = {}
    raw_status = request.args.get("status", body.get("status"))
    transaction_id = request.args.get(
        "upiTransactionId", body.get("upiTransactionId")
    )
    status = parse_enum_param(
        require_param(raw_status, "status"), "status", PaymentStatus.ALL
    )

    db = SessionLocal()
    try:
        updated = TallyService(TallyRecordRepository(db)).update_payment_status(
            record_id, status, transaction_id
        )
        return api_response(
            True,
            "Payment status updated",
            TallyRecordResponse.from_domain(updated).to_dict(),
        )
    finally:
        db.close()
