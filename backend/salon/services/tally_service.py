"""
Tally (payment record) service.

paymentDate is stamped by the service whenever a record moves into the
COMPLETED payment status; other statuses leave it untouched.
"""

import logging
import time
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from salon.core import config
from salon.core.exceptions import NotFoundError, ValidationError
from salon.core.logging_config import log_performance
from salon.domain.entities import PaymentMethod, PaymentStatus, TallyRecord
from salon.domain.interfaces import ITallyRecordRepository

logger = logging.getLogger(__name__)


class TallyService:
    """Application service for tally records and revenue reporting."""

    def __init__(self, tally_repo: ITallyRecordRepository) -> None:
        self.tally_repo = tally_repo

    def list_records(self) -> List[TallyRecord]:
        return self.tally_repo.get_all()

    def list_by_day(self, day: date) -> List[TallyRecord]:
        return self.tally_repo.get_by_day(day)

    def list_by_payment_status(self, status: str) -> List[TallyRecord]:
        return self.tally_repo.get_by_payment_status(status)

    def list_by_payment_method(self, method: str) -> List[TallyRecord]:
        return self.tally_repo.get_by_payment_method(method)

    def list_by_date_range(self, start: datetime, end: datetime) -> List[TallyRecord]:
        if start > end:
            raise ValidationError(
                "startDate must not be after endDate", field="startDate"
            )
        return self.tally_repo.get_by_date_range(start, end)

    def get_record(self, record_id: int) -> TallyRecord:
        record = self.tally_repo.get_by_id(record_id)
        if not record:
            raise NotFoundError("Tally record", record_id)
        return record

    def create_record(self, data: Dict[str, Any]) -> TallyRecord:
        now = config.local_now()
        record = TallyRecord(**data, created_at=now, updated_at=now)
        if record.payment_status == PaymentStatus.COMPLETED and not record.payment_date:
            record.payment_date = now
        created = self.tally_repo.create(record)
        logger.info(
            "Tally record created",
            extra={
                "context": {
                    "record_id": created.id,
                    "total_cost": created.total_cost,
                    "payment_method": created.payment_method,
                    "payment_status": created.payment_status,
                }
            },
        )
        return created

    def update_record(self, record_id: int, data: Dict[str, Any]) -> TallyRecord:
        existing = self.get_record(record_id)
        now = config.local_now()
        record = TallyRecord(
            **data, id=record_id, created_at=existing.created_at, updated_at=now
        )
        if record.payment_date is None:
            record.payment_date = existing.payment_date
        if (
            record.payment_status == PaymentStatus.COMPLETED
            and existing.payment_status != PaymentStatus.COMPLETED
            and data.get("payment_date") is None
        ):
            record.payment_date = now
        updated = self.tally_repo.update(record)
        logger.info("Tally record updated", extra={"context": {"record_id": record_id}})
        return updated

    def delete_record(self, record_id: int) -> None:
        if not self.tally_repo.delete(record_id):
            raise NotFoundError("Tally record", record_id)
        logger.info("Tally record deleted", extra={"context": {"record_id": record_id}})

    def update_payment_status(
        self,
        record_id: int,
        new_status: str,
        upi_transaction_id: Optional[str] = None,
    ) -> TallyRecord:
        """Set the payment status; COMPLETED stamps paymentDate = now.

        A supplied transaction id is stored whatever the payment method.
        """
        record = self.get_record(record_id)
        now = config.local_now()
        previous = record.payment_status
        record.payment_status = new_status
        if new_status == PaymentStatus.COMPLETED:
            record.payment_date = now
        if upi_transaction_id:
            record.upi_transaction_id = upi_transaction_id
        record.updated_at = now
        updated = self.tally_repo.update(record)
        logger.info(
            "Payment status changed",
            extra={
                "context": {
                    "record_id": record_id,
                    "from_status": previous,
                    "to_status": new_status,
                    "has_transaction_id": bool(upi_transaction_id),
                }
            },
        )
        return updated

    def total_revenue(self, day: date) -> float:
        """Sum of COMPLETED totalCost on the day; 0.0 when there is none."""
        started = time.perf_counter()
        revenue = self.tally_repo.sum_completed_revenue(day)
        log_performance(
            "total_revenue",
            (time.perf_counter() - started) * 1000,
            date=day.isoformat(),
            revenue=revenue,
        )
        return revenue

    def revenue_by_method(self, day: date) -> Dict[str, float]:
        """COMPLETED revenue per payment method, every method present."""
        totals = {method: 0.0 for method in PaymentMethod.ALL}
        totals.update(self.tally_repo.revenue_by_method(day))
        return totals
