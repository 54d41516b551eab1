"""
Customer service following SOLID principles.

Owns the completion side effect on customer statistics; the appointment
service calls ``apply_completion`` exactly once per genuine completion.
"""

import logging
from typing import Any, Dict, List

from salon.core import config
from salon.core.exceptions import NotFoundError
from salon.domain.entities import Customer
from salon.domain.interfaces import ICustomerRepository

logger = logging.getLogger(__name__)


class CustomerService:
    """Application service for customer-related use-cases."""

    def __init__(self, customer_repo: ICustomerRepository) -> None:
        self.customer_repo = customer_repo

    def list_customers(self) -> List[Customer]:
        return self.customer_repo.get_all()

    def search_customers(self, term: str) -> List[Customer]:
        """Case-insensitive substring search over name, phone and email."""
        return self.customer_repo.search(term)

    def list_by_gender(self, gender: str) -> List[Customer]:
        return self.customer_repo.get_by_gender(gender)

    def list_sorted(self, sort_key: str) -> List[Customer]:
        return self.customer_repo.get_all_ordered(sort_key)

    def get_customer(self, customer_id: int) -> Customer:
        customer = self.customer_repo.get_by_id(customer_id)
        if not customer:
            raise NotFoundError("Customer", customer_id)
        return customer

    def get_by_phone(self, phone: str) -> Customer:
        customer = self.customer_repo.get_by_phone(phone)
        if not customer:
            raise NotFoundError("Customer with phone", phone)
        return customer

    def create_customer(self, data: Dict[str, Any]) -> Customer:
        now = config.local_now()
        customer = Customer(**data, created_at=now, updated_at=now)
        created = self.customer_repo.create(customer)
        logger.info(
            "Customer created",
            extra={"context": {"customer_id": created.id, "phone": created.phone}},
        )
        return created

    def update_customer(self, customer_id: int, data: Dict[str, Any]) -> Customer:
        """Overwrite every field of an existing customer."""
        existing = self.get_customer(customer_id)
        customer = Customer(
            **data,
            id=customer_id,
            created_at=existing.created_at,
            updated_at=config.local_now(),
        )
        updated = self.customer_repo.update(customer)
        logger.info("Customer updated", extra={"context": {"customer_id": customer_id}})
        return updated

    def delete_customer(self, customer_id: int) -> None:
        if not self.customer_repo.delete(customer_id):
            raise NotFoundError("Customer", customer_id)
        logger.info("Customer deleted", extra={"context": {"customer_id": customer_id}})

    def apply_completion(self, customer_id: int, amount_spent: float) -> Customer:
        """Credit one visit and amount_spent to the customer, lastVisit = now."""
        customer = self.customer_repo.apply_completion(
            customer_id, amount_spent, config.local_now()
        )
        if not customer:
            logger.warning(
                "Completion credited to unknown customer",
                extra={"context": {"customer_id": customer_id}},
            )
            raise NotFoundError("Customer", customer_id)
        logger.info(
            "Customer visit recorded",
            extra={
                "context": {
                    "customer_id": customer_id,
                    "amount_spent": amount_spent,
                    "visit_count": customer.visit_count,
                    "total_spent": customer.total_spent,
                }
            },
        )
        return customer
