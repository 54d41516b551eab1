"""
Unit tests for EmployeeService.
"""

from unittest.mock import Mock

import pytest

from salon.core.exceptions import NotFoundError
from salon.services.employee_service import EmployeeService
from tests.factories.repository_factories import (
    EmployeeRepositoryFactory,
    make_employee,
)


@pytest.fixture
def mock_employee_repo() -> Mock:
    return EmployeeRepositoryFactory.create_mock_full()


@pytest.fixture
def employee_service(mock_employee_repo):
    return EmployeeService(mock_employee_repo)


@pytest.mark.unit
@pytest.mark.services
@pytest.mark.employee
class TestEmployeeService:
    def test_list_available_uses_rating_order(
        self, employee_service, mock_employee_repo
    ):
        mock_employee_repo.get_available_by_rating.return_value = [make_employee()]

        assert len(employee_service.list_available()) == 1
        mock_employee_repo.get_available_by_rating.assert_called_once_with()

    def test_becoming_available_stamps_next_available(
        self, employee_service, mock_employee_repo
    ):
        mock_employee_repo.get_by_id.return_value = make_employee(available=False)
        mock_employee_repo.update.side_effect = lambda e: e

        updated = employee_service.update_availability(1, True)

        assert updated.available is True
        assert updated.next_available is not None

    def test_becoming_unavailable_keeps_next_available(
        self, employee_service, mock_employee_repo
    ):
        mock_employee_repo.get_by_id.return_value = make_employee(next_available=None)
        mock_employee_repo.update.side_effect = lambda e: e

        updated = employee_service.update_availability(1, False)

        assert updated.available is False
        assert updated.next_available is None

    def test_unknown_employee_raises(self, employee_service):
        with pytest.raises(NotFoundError):
            employee_service.update_availability(9, True)

    def test_delete_missing_employee_raises(self, employee_service):
        with pytest.raises(NotFoundError):
            employee_service.delete_employee(9)
