"""Customer repository implementation following SOLID principles.

Visit statistics are incremented with SQL expressions so concurrent
completions never lose an update.
"""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import func, or_, update
from sqlalchemy.exc import IntegrityError

from salon.core.exceptions import ConflictError, DuplicatePhoneError
from salon.db.base import Customer as DbCustomer
from salon.domain.entities import Customer as DomainCustomer
from salon.domain.interfaces import ICustomerRepository
from salon.repositories.base import SqlAlchemyRepository, store_operation

# Public sort keys mapped to the column ordered descending.
SORT_COLUMNS = {
    "visits": DbCustomer.visit_count,
    "spent": DbCustomer.total_spent,
    "lastVisit": DbCustomer.last_visit,
}


class CustomerRepository(SqlAlchemyRepository, ICustomerRepository):
    """Repository for Customer persistence operations."""

    @store_operation
    def get_by_id(self, customer_id: int) -> Optional[DomainCustomer]:
        db_customer = self.db.get(DbCustomer, customer_id)
        return self._to_domain(db_customer) if db_customer else None

    @store_operation
    def get_all(self) -> List[DomainCustomer]:
        db_customers = self.db.query(DbCustomer).order_by(DbCustomer.id).all()
        return [self._to_domain(c) for c in db_customers]

    @store_operation
    def get_by_phone(self, phone: str) -> Optional[DomainCustomer]:
        db_customer = self.db.query(DbCustomer).filter_by(phone=phone).first()
        return self._to_domain(db_customer) if db_customer else None

    @store_operation
    def search(self, term: str) -> List[DomainCustomer]:
        lowered = term.lower()
        db_customers = (
            self.db.query(DbCustomer)
            .filter(
                or_(
                    func.lower(DbCustomer.name).contains(lowered, autoescape=True),
                    DbCustomer.phone.contains(term, autoescape=True),
                    func.lower(DbCustomer.email).contains(lowered, autoescape=True),
                )
            )
            .order_by(DbCustomer.id)
            .all()
        )
        return [self._to_domain(c) for c in db_customers]

    @store_operation
    def get_by_gender(self, gender: str) -> List[DomainCustomer]:
        db_customers = (
            self.db.query(DbCustomer)
            .filter(DbCustomer.gender == gender)
            .order_by(DbCustomer.id)
            .all()
        )
        return [self._to_domain(c) for c in db_customers]

    @store_operation
    def get_all_ordered(self, sort_key: str) -> List[DomainCustomer]:
        column = SORT_COLUMNS.get(sort_key)
        if column is None:
            raise ValueError(f"Unsupported customer sort key: {sort_key}")
        db_customers = (
            self.db.query(DbCustomer)
            .order_by(column.desc().nulls_last(), DbCustomer.id)
            .all()
        )
        return [self._to_domain(c) for c in db_customers]

    @store_operation
    def create(self, customer: DomainCustomer) -> DomainCustomer:
        db_customer = DbCustomer()
        self._apply(db_customer, customer)
        db_customer.created_at = customer.created_at
        self.db.add(db_customer)
        self._commit_or_duplicate(customer.phone)
        self.db.refresh(db_customer)
        return self._to_domain(db_customer)

    @store_operation
    def update(self, customer: DomainCustomer) -> DomainCustomer:
        if not customer.id:
            raise ValueError("Customer ID is required for update")

        db_customer = self.db.get(DbCustomer, customer.id)
        if not db_customer:
            raise ValueError(f"Customer with ID {customer.id} not found")

        self._apply(db_customer, customer)
        self._commit_or_duplicate(customer.phone)
        self.db.refresh(db_customer)
        return self._to_domain(db_customer)

    @store_operation
    def delete(self, customer_id: int) -> bool:
        db_customer = self.db.get(DbCustomer, customer_id)
        if not db_customer:
            return False
        self.db.delete(db_customer)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError(
                f"Customer {customer_id} is still referenced by appointments"
            ) from exc
        return True

    @store_operation
    def apply_completion(
        self, customer_id: int, amount_spent: float, visited_at: datetime
    ) -> Optional[DomainCustomer]:
        result = self.db.execute(
            update(DbCustomer)
            .where(DbCustomer.id == customer_id)
            .values(
                visit_count=DbCustomer.visit_count + 1,
                total_spent=DbCustomer.total_spent + amount_spent,
                last_visit=visited_at,
                updated_at=visited_at,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            return None
        self.db.commit()
        db_customer = self.db.get(DbCustomer, customer_id)
        self.db.refresh(db_customer)
        return self._to_domain(db_customer)

    def _commit_or_duplicate(self, phone: str) -> None:
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise DuplicatePhoneError(phone) from exc

    @staticmethod
    def _apply(db_customer: DbCustomer, customer: DomainCustomer) -> None:
        db_customer.name = customer.name
        db_customer.phone = customer.phone
        db_customer.email = customer.email
        db_customer.gender = customer.gender
        db_customer.visit_count = customer.visit_count
        db_customer.total_spent = customer.total_spent
        db_customer.last_visit = customer.last_visit
        db_customer.preferred_services = list(customer.preferred_services or [])
        db_customer.notes = customer.notes
        db_customer.photo = customer.photo
        db_customer.updated_at = customer.updated_at

    def _to_domain(self, db_customer: DbCustomer) -> DomainCustomer:
        """Convert DB model to domain entity."""
        return DomainCustomer(
            id=db_customer.id,
            name=db_customer.name,
            phone=db_customer.phone,
            email=db_customer.email,
            gender=db_customer.gender,
            visit_count=db_customer.visit_count or 0,
            total_spent=float(db_customer.total_spent or 0.0),
            last_visit=db_customer.last_visit,
            preferred_services=list(db_customer.preferred_services or []),
            notes=db_customer.notes,
            photo=db_customer.photo,
            created_at=db_customer.created_at,
            updated_at=db_customer.updated_at,
        )
