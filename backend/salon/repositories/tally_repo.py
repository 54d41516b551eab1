from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func

from salon.db.base import TallyRecord as DbTallyRecord
from salon.domain.entities import PaymentStatus
from salon.domain.entities import TallyRecord as DomainTallyRecord
from salon.domain.interfaces import ITallyRecordRepository
from salon.repositories.base import SqlAlchemyRepository, store_operation


def _day_bounds(day: date) -> Tuple[datetime, datetime]:
    """Half-open [start, end) range covering one calendar day."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


class TallyRecordRepository(SqlAlchemyRepository, ITallyRecordRepository):
    """Repository for denormalized payment records."""

    @store_operation
    def get_by_id(self, record_id: int) -> Optional[DomainTallyRecord]:
        db_record = self.db.get(DbTallyRecord, record_id)
        return self._to_domain(db_record) if db_record else None

    @store_operation
    def get_all(self) -> List[DomainTallyRecord]:
        return self._fetch()

    @store_operation
    def get_by_day(self, day: date) -> List[DomainTallyRecord]:
        start, end = _day_bounds(day)
        return self._fetch(DbTallyRecord.date >= start, DbTallyRecord.date < end)

    @store_operation
    def get_by_payment_status(self, status: str) -> List[DomainTallyRecord]:
        return self._fetch(DbTallyRecord.payment_status == status)

    @store_operation
    def get_by_payment_method(self, method: str) -> List[DomainTallyRecord]:
        return self._fetch(DbTallyRecord.payment_method == method)

    @store_operation
    def get_by_date_range(
        self, start: datetime, end: datetime
    ) -> List[DomainTallyRecord]:
        return self._fetch(DbTallyRecord.date >= start, DbTallyRecord.date <= end)

    @store_operation
    def sum_completed_revenue(self, day: date) -> float:
        start, end = _day_bounds(day)
        total = (
            self.db.query(func.coalesce(func.sum(DbTallyRecord.total_cost), 0))
            .filter(
                DbTallyRecord.payment_status == PaymentStatus.COMPLETED,
                DbTallyRecord.date >= start,
                DbTallyRecord.date < end,
            )
            .scalar()
        )
        return float(total or 0.0)

    @store_operation
    def revenue_by_method(self, day: date) -> Dict[str, float]:
        start, end = _day_bounds(day)
        rows = (
            self.db.query(
                DbTallyRecord.payment_method, func.sum(DbTallyRecord.total_cost)
            )
            .filter(
                DbTallyRecord.payment_status == PaymentStatus.COMPLETED,
                DbTallyRecord.date >= start,
                DbTallyRecord.date < end,
            )
            .group_by(DbTallyRecord.payment_method)
            .all()
        )
        return {method: float(amount or 0.0) for method, amount in rows}

    @store_operation
    def create(self, record: DomainTallyRecord) -> DomainTallyRecord:
        db_record = DbTallyRecord()
        self._apply(db_record, record)
        db_record.created_at = record.created_at
        self.db.add(db_record)
        self.db.commit()
        self.db.refresh(db_record)
        return self._to_domain(db_record)

    @store_operation
    def update(self, record: DomainTallyRecord) -> DomainTallyRecord:
        if not record.id:
            raise ValueError("Tally record ID is required for update")

        db_record = self.db.get(DbTallyRecord, record.id)
        if not db_record:
            raise ValueError(f"Tally record with ID {record.id} not found")

        self._apply(db_record, record)
        self.db.commit()
        self.db.refresh(db_record)
        return self._to_domain(db_record)

    @store_operation
    def delete(self, record_id: int) -> bool:
        db_record = self.db.get(DbTallyRecord, record_id)
        if not db_record:
            return False
        self.db.delete(db_record)
        self.db.commit()
        return True

    def _fetch(self, *criteria) -> List[DomainTallyRecord]:
        db_records = (
            self.db.query(DbTallyRecord)
            .filter(*criteria)
            .order_by(DbTallyRecord.date, DbTallyRecord.id)
            .all()
        )
        return [self._to_domain(r) for r in db_records]

    @staticmethod
    def _apply(db_record: DbTallyRecord, record: DomainTallyRecord) -> None:
        db_record.date = record.date
        db_record.time = record.time
        db_record.customer_name = record.customer_name
        db_record.customer_phone = record.customer_phone
        db_record.staff_name = record.staff_name
        db_record.services_json = record.services_json
        db_record.total_cost = record.total_cost
        db_record.payment_method = record.payment_method
        db_record.payment_status = record.payment_status
        db_record.payment_date = record.payment_date
        db_record.upi_transaction_id = record.upi_transaction_id
        db_record.updated_at = record.updated_at

    def _to_domain(self, db_record: DbTallyRecord) -> DomainTallyRecord:
        return DomainTallyRecord(
            id=db_record.id,
            date=db_record.date,
            time=db_record.time,
            customer_name=db_record.customer_name,
            customer_phone=db_record.customer_phone,
            staff_name=db_record.staff_name,
            services_json=db_record.services_json,
            total_cost=float(db_record.total_cost),
            payment_method=db_record.payment_method,
            payment_status=db_record.payment_status,
            payment_date=db_record.payment_date,
            upi_transaction_id=db_record.upi_transaction_id,
            created_at=db_record.created_at,
            updated_at=db_record.updated_at,
        )
