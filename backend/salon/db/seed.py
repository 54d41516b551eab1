"""Demo data for local development, loaded through the services."""

import logging
from datetime import time
from typing import Dict

from salon.repositories import (
    CustomerRepository,
    EmployeeRepository,
    ServiceCatalogRepository,
)
from salon.services import CatalogService, CustomerService, EmployeeService

logger = logging.getLogger(__name__)

DEMO_SERVICES = [
    {"name": "Haircut", "duration": 30, "price": 300.0, "category": "Hair"},
    {"name": "Hair Color", "duration": 90, "price": 1500.0, "category": "Hair"},
    {"name": "Facial", "duration": 60, "price": 800.0, "category": "Skin"},
    {"name": "Manicure", "duration": 45, "price": 500.0, "category": "Nails"},
]

DEMO_EMPLOYEES = [
    {
        "name": "Priya Sharma",
        "role": "Senior Stylist",
        "specialties": ["Haircut", "Hair Color"],
        "rating": 4.8,
    },
    {
        "name": "Arjun Mehta",
        "role": "Stylist",
        "specialties": ["Haircut"],
        "rating": 4.5,
    },
    {
        "name": "Neha Kapoor",
        "role": "Beautician",
        "specialties": ["Facial", "Manicure"],
        "rating": 4.9,
    },
]

DEMO_CUSTOMERS = [
    {"name": "Ananya Rao", "phone": "9000000001", "gender": "FEMALE"},
    {"name": "Rahul Verma", "phone": "9000000002", "gender": "MALE"},
]


def seed_demo_data(db) -> Dict[str, int]:
    """Insert demo services, employees and customers into an empty store.

    Returns the number of rows created per entity; nothing is created when
    customers already exist.
    """
    customer_service = CustomerService(CustomerRepository(db))
    if customer_service.list_customers():
        logger.info("Demo data skipped, store is not empty")
        return {"services": 0, "employees": 0, "customers": 0}

    catalog = CatalogService(ServiceCatalogRepository(db))
    for data in DEMO_SERVICES:
        catalog.create_service({**data, "description": None})

    employees = EmployeeService(EmployeeRepository(db))
    for data in DEMO_EMPLOYEES:
        employees.create_employee(
            {
                **data,
                "email": None,
                "phone": None,
                "photo": None,
                "available": True,
                "next_available": None,
                "work_start_time": time(9, 0),
                "work_end_time": time(18, 0),
            }
        )

    for data in DEMO_CUSTOMERS:
        customer_service.create_customer(data)

    counts = {
        "services": len(DEMO_SERVICES),
        "employees": len(DEMO_EMPLOYEES),
        "customers": len(DEMO_CUSTOMERS),
    }
    logger.info("Demo data created", extra={"context": counts})
    return counts
