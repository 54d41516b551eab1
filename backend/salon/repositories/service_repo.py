from typing import List, Optional

from sqlalchemy import func

from salon.db.base import SalonService as DbService
from salon.domain.entities import SalonService as DomainService
from salon.domain.interfaces import IServiceCatalogRepository
from salon.repositories.base import SqlAlchemyRepository, store_operation

SORT_COLUMNS = {
    "price": DbService.price,
    "duration": DbService.duration,
}


class ServiceCatalogRepository(SqlAlchemyRepository, IServiceCatalogRepository):
    """Repository for the salon service catalog."""

    @store_operation
    def get_by_id(self, service_id: int) -> Optional[DomainService]:
        db_service = self.db.get(DbService, service_id)
        return self._to_domain(db_service) if db_service else None

    @store_operation
    def get_by_ids(self, service_ids: List[int]) -> List[DomainService]:
        if not service_ids:
            return []
        db_services = (
            self.db.query(DbService)
            .filter(DbService.id.in_(service_ids))
            .order_by(DbService.id)
            .all()
        )
        return [self._to_domain(s) for s in db_services]

    @store_operation
    def get_all(self) -> List[DomainService]:
        db_services = self.db.query(DbService).order_by(DbService.id).all()
        return [self._to_domain(s) for s in db_services]

    @store_operation
    def get_by_category(self, category: str) -> List[DomainService]:
        db_services = (
            self.db.query(DbService)
            .filter(DbService.category == category)
            .order_by(DbService.id)
            .all()
        )
        return [self._to_domain(s) for s in db_services]

    @store_operation
    def search_by_name(self, term: str) -> List[DomainService]:
        db_services = (
            self.db.query(DbService)
            .filter(func.lower(DbService.name).contains(term.lower(), autoescape=True))
            .order_by(DbService.id)
            .all()
        )
        return [self._to_domain(s) for s in db_services]

    @store_operation
    def get_all_ordered(self, sort_key: str) -> List[DomainService]:
        column = SORT_COLUMNS.get(sort_key)
        if column is None:
            raise ValueError(f"Unsupported service sort key: {sort_key}")
        db_services = (
            self.db.query(DbService).order_by(column.asc(), DbService.id).all()
        )
        return [self._to_domain(s) for s in db_services]

    @store_operation
    def create(self, service: DomainService) -> DomainService:
        db_service = DbService(
            name=service.name,
            duration=service.duration,
            price=service.price,
            category=service.category,
            description=service.description,
            created_at=service.created_at,
            updated_at=service.updated_at,
        )
        self.db.add(db_service)
        self.db.commit()
        self.db.refresh(db_service)
        return self._to_domain(db_service)

    @store_operation
    def update(self, service: DomainService) -> DomainService:
        if not service.id:
            raise ValueError("Service ID is required for update")

        db_service = self.db.get(DbService, service.id)
        if not db_service:
            raise ValueError(f"Service with ID {service.id} not found")

        db_service.name = service.name
        db_service.duration = service.duration
        db_service.price = service.price
        db_service.category = service.category
        db_service.description = service.description
        db_service.updated_at = service.updated_at
        self.db.commit()
        self.db.refresh(db_service)
        return self._to_domain(db_service)

    @store_operation
    def delete(self, service_id: int) -> bool:
        db_service = self.db.get(DbService, service_id)
        if not db_service:
            return False
        self.db.delete(db_service)
        self.db.commit()
        return True

    def _to_domain(self, db_service: DbService) -> DomainService:
        return DomainService(
            id=db_service.id,
            name=db_service.name,
            duration=db_service.duration,
            price=float(db_service.price),
            category=db_service.category,
            description=db_service.description,
            created_at=db_service.created_at,
            updated_at=db_service.updated_at,
        )
