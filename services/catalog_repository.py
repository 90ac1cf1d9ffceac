"""
Catalog Repository - Database access layer for services and spare parts.
"""

import logging
from datetime import datetime
from typing import Optional, Dict, List
from sqlalchemy.orm import Session

from database.models import Service, SparePart, SERVICE_TYPES
from services.pagination import apply_search, apply_updated_since, paginate
from validators import validate_service, validate_spare_part

logger = logging.getLogger(__name__)


class CatalogRepository:
    """Repository for the service catalog and spare parts inventory."""

    def __init__(self, session: Session):
        self.session = session

    # =========================================================================
    # SERVICES
    # =========================================================================

    def list_services(self, service_type: str = None, search: str = None,
                      page: int = 1, per_page: int = 50,
                      updated_since: datetime = None) -> Dict:
        """List services, newest first."""
        query = self.session.query(Service)
        if service_type:
            query = query.filter(Service.service_type == service_type)
        query = apply_search(query, [Service.title, Service.sku, Service.description], search)
        query = apply_updated_since(query, Service, updated_since)
        query = query.order_by(Service.created_at.desc())
        return paginate(query, page, per_page)

    def services_by_type(self) -> Dict[str, List[Dict]]:
        """Public catalog grouped by service type."""
        grouped = {service_type: [] for service_type in SERVICE_TYPES}
        for service in self.session.query(Service).order_by(Service.title).all():
            grouped.setdefault(service.service_type, []).append(service.to_dict())
        return grouped

    def get_service(self, service_id: str) -> Optional[Dict]:
        service = self.session.get(Service, service_id)
        return service.to_dict() if service else None

    def get_service_model(self, service_id: str) -> Optional[Service]:
        return self.session.get(Service, service_id)

    def create_service(self, data: Dict) -> Dict:
        """Create a new catalog service."""
        service = Service(**validate_service(data))
        self.session.add(service)
        self.session.flush()
        logger.info(f"Created service: {service.id} ({service.sku})")
        return service.to_dict()

    def update_service(self, service_id: str, data: Dict) -> Optional[Dict]:
        service = self.session.get(Service, service_id)
        if not service:
            return None

        cleaned = validate_service({**service.to_dict(), **data})
        for key, value in cleaned.items():
            setattr(service, key, value)

        service.updated_at = datetime.utcnow()
        self.session.flush()
        logger.info(f"Updated service: {service_id}")
        return service.to_dict()

    def delete_service(self, service_id: str) -> bool:
        service = self.session.get(Service, service_id)
        if not service:
            return False
        self.session.delete(service)
        self.session.flush()
        logger.info(f"Deleted service: {service_id}")
        return True

    # =========================================================================
    # SPARE PARTS
    # =========================================================================

    def list_spare_parts(self, search: str = None, page: int = 1, per_page: int = 50,
                         updated_since: datetime = None) -> Dict:
        """List spare parts, newest first."""
        query = self.session.query(SparePart)
        query = apply_search(query, [SparePart.name, SparePart.brand, SparePart.sku], search)
        query = apply_updated_since(query, SparePart, updated_since)
        query = query.order_by(SparePart.created_at.desc())
        return paginate(query, page, per_page)

    def get_spare_part(self, part_id: str) -> Optional[Dict]:
        part = self.session.get(SparePart, part_id)
        return part.to_dict() if part else None

    def get_spare_part_model(self, part_id: str) -> Optional[SparePart]:
        return self.session.get(SparePart, part_id)

    def create_spare_part(self, data: Dict) -> Dict:
        """Create a new spare part."""
        part = SparePart(**validate_spare_part(data))
        self.session.add(part)
        self.session.flush()
        logger.info(f"Created spare part: {part.id} ({part.sku})")
        return part.to_dict()

    def update_spare_part(self, part_id: str, data: Dict) -> Optional[Dict]:
        part = self.session.get(SparePart, part_id)
        if not part:
            return None

        cleaned = validate_spare_part({**part.to_dict(), **data})
        for key, value in cleaned.items():
            setattr(part, key, value)

        part.updated_at = datetime.utcnow()
        self.session.flush()
        logger.info(f"Updated spare part: {part_id}")
        return part.to_dict()

    def delete_spare_part(self, part_id: str) -> bool:
        part = self.session.get(SparePart, part_id)
        if not part:
            return False
        self.session.delete(part)
        self.session.flush()
        logger.info(f"Deleted spare part: {part_id}")
        return True
