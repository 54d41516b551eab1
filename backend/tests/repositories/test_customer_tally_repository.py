"""
Customer, employee, catalog and tally repositories on in-memory SQLite.
"""

from datetime import date, datetime, time

import pytest

from salon.core.exceptions import DuplicatePhoneError
from salon.domain.entities import PaymentMethod, PaymentStatus
from salon.repositories import (
    CustomerRepository,
    EmployeeRepository,
    ServiceCatalogRepository,
    TallyRecordRepository,
)
from tests.factories.repository_factories import (
    make_customer,
    make_employee,
    make_service,
    make_tally_record,
)


@pytest.mark.customer
class TestCustomerRepository:
    @pytest.fixture
    def repo(self, db_session):
        return CustomerRepository(db_session)

    def test_duplicate_phone_is_rejected(self, repo):
        repo.create(make_customer(id=None))

        with pytest.raises(DuplicatePhoneError):
            repo.create(make_customer(id=None, name="Someone Else"))

        assert len(repo.get_all()) == 1

    def test_apply_completion_increments_statistics(self, repo):
        customer = repo.create(make_customer(id=None))
        visited_at = datetime(2024, 6, 1, 10, 45)

        repo.apply_completion(customer.id, 500.0, visited_at)
        updated = repo.apply_completion(customer.id, 250.5, visited_at)

        assert updated.visit_count == 2
        assert updated.total_spent == pytest.approx(750.5)
        assert updated.last_visit == visited_at

    def test_apply_completion_unknown_customer(self, repo):
        assert repo.apply_completion(404, 100.0, datetime(2024, 6, 1)) is None

    def test_search_is_case_insensitive(self, repo):
        repo.create(make_customer(id=None))
        repo.create(
            make_customer(id=None, name="Rahul Verma", phone="9123456780", email=None)
        )

        assert [c.name for c in repo.search("priya")] == ["Priya Sharma"]
        assert [c.name for c in repo.search("91234")] == ["Rahul Verma"]
        assert repo.search("100%") == []

    def test_sorted_by_spent_descending(self, repo):
        low = repo.create(make_customer(id=None, phone="1", total_spent=100.0))
        high = repo.create(make_customer(id=None, phone="2", total_spent=900.0))

        assert [c.id for c in repo.get_all_ordered("spent")] == [high.id, low.id]

    def test_sorted_by_last_visit_puts_never_visited_last(self, repo):
        never = repo.create(make_customer(id=None, phone="1"))
        recent = repo.create(
            make_customer(id=None, phone="2", last_visit=datetime(2024, 6, 1))
        )

        assert [c.id for c in repo.get_all_ordered("lastVisit")] == [
            recent.id,
            never.id,
        ]

    def test_preferred_services_round_trip(self, repo):
        created = repo.create(
            make_customer(id=None, preferred_services=["Haircut", "Facial"])
        )

        assert repo.get_by_phone(created.phone).preferred_services == [
            "Haircut",
            "Facial",
        ]


class TestEmployeeAndCatalogRepositories:
    def test_available_employees_best_rated_first(self, db_session):
        repo = EmployeeRepository(db_session)
        good = repo.create(make_employee(id=None, name="Anita", rating=4.2))
        best = repo.create(make_employee(id=None, name="Ravi", rating=4.9))
        repo.create(make_employee(id=None, name="Off", rating=5.0, available=False))

        assert [e.id for e in repo.get_available_by_rating()] == [best.id, good.id]

    def test_services_sorted_by_price_ascending(self, db_session):
        repo = ServiceCatalogRepository(db_session)
        facial = repo.create(make_service(id=None, name="Facial", price=1200.0))
        haircut = repo.create(make_service(id=None, name="Haircut", price=500.0))

        assert [s.id for s in repo.get_all_ordered("price")] == [haircut.id, facial.id]
        assert [s.id for s in repo.get_by_ids([facial.id, 999])] == [facial.id]


@pytest.mark.tally
class TestTallyRecordRepository:
    @pytest.fixture
    def repo(self, db_session):
        return TallyRecordRepository(db_session)

    def add(self, repo, **overrides):
        return repo.create(make_tally_record(id=None, **overrides))

    def test_revenue_counts_completed_records_of_the_day(self, repo):
        self.add(repo, total_cost=500.0, payment_status=PaymentStatus.COMPLETED)
        self.add(
            repo,
            date=datetime(2024, 6, 1, 18, 30),
            total_cost=1200.0,
            payment_method=PaymentMethod.UPI,
            payment_status=PaymentStatus.COMPLETED,
        )
        self.add(repo, total_cost=300.0, payment_status=PaymentStatus.PENDING)
        self.add(
            repo,
            date=datetime(2024, 6, 2),
            total_cost=999.0,
            payment_status=PaymentStatus.COMPLETED,
        )

        assert repo.sum_completed_revenue(date(2024, 6, 1)) == 1700.0
        assert repo.revenue_by_method(date(2024, 6, 1)) == {
            "CASH": 500.0,
            "UPI": 1200.0,
        }

    def test_revenue_without_records_is_zero(self, repo):
        assert repo.sum_completed_revenue(date(2024, 6, 1)) == 0.0
        assert repo.revenue_by_method(date(2024, 6, 1)) == {}

    def test_records_by_day_and_range(self, repo):
        first = self.add(repo, date=datetime(2024, 6, 1, 9, 0))
        self.add(repo, date=datetime(2024, 6, 2, 0, 0))

        assert [r.id for r in repo.get_by_day(date(2024, 6, 1))] == [first.id]
        assert len(
            repo.get_by_date_range(datetime(2024, 6, 1), datetime(2024, 6, 2))
        ) == 2

    def test_update_keeps_time_and_payment_fields(self, repo):
        record = self.add(repo)
        record.payment_status = PaymentStatus.COMPLETED
        record.payment_date = datetime(2024, 6, 1, 12, 0)

        updated = repo.update(record)

        assert updated.payment_status == PaymentStatus.COMPLETED
        assert updated.payment_date == datetime(2024, 6, 1, 12, 0)
        assert updated.time == time(11, 30)
