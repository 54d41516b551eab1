import logging
from typing import Any, Dict, List

from salon.core import config
from salon.core.exceptions import NotFoundError
from salon.domain.entities import SalonService
from salon.domain.interfaces import IServiceCatalogRepository

logger = logging.getLogger(__name__)


class CatalogService:
    """Use-cases over the salon service catalog."""

    def __init__(self, service_repo: IServiceCatalogRepository) -> None:
        self.service_repo = service_repo

    def list_services(self) -> List[SalonService]:
        return self.service_repo.get_all()

    def list_by_category(self, category: str) -> List[SalonService]:
        return self.service_repo.get_by_category(category)

    def search_services(self, term: str) -> List[SalonService]:
        return self.service_repo.search_by_name(term)

    def list_sorted(self, sort_key: str) -> List[SalonService]:
        return self.service_repo.get_all_ordered(sort_key)

    def get_service(self, service_id: int) -> SalonService:
        service = self.service_repo.get_by_id(service_id)
        if not service:
            raise NotFoundError("Service", service_id)
        return service

    def create_service(self, data: Dict[str, Any]) -> SalonService:
        now = config.local_now()
        created = self.service_repo.create(
            SalonService(**data, created_at=now, updated_at=now)
        )
        logger.info(
            "Service created",
            extra={"context": {"service_id": created.id, "category": created.category}},
        )
        return created

    def update_service(self, service_id: int, data: Dict[str, Any]) -> SalonService:
        existing = self.get_service(service_id)
        updated = self.service_repo.update(
            SalonService(
                **data,
                id=service_id,
                created_at=existing.created_at,
                updated_at=config.local_now(),
            )
        )
        logger.info("Service updated", extra={"context": {"service_id": service_id}})
        return updated

    def delete_service(self, service_id: int) -> None:
        if not self.service_repo.delete(service_id):
            raise NotFoundError("Service", service_id)
        logger.info("Service deleted", extra={"context": {"service_id": service_id}})
