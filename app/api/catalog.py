"""
Catalog Routes Blueprint

- /api/services: Service catalog (reads are public, writes are admin only)
- /api/services/catalog: Public catalog grouped by service type
- /api/spare-parts: Spare parts inventory (admin only)
"""

import logging
from flask import Blueprint, request

from auth import admin_required
from database.connection import get_db_session
from database.models import SERVICE_TYPES
from services.catalog_repository import CatalogRepository
from validators import ValidationError, validate_choice
from app.api.responses import ok, not_found, api_error
from app.utils.helpers import get_json_body, get_pagination_args, get_updated_since

logger = logging.getLogger(__name__)

catalog_bp = Blueprint('catalog_bp', __name__)


# ============================================================================
# SERVICES
# ============================================================================

@catalog_bp.route('/api/services', methods=['GET'])
def list_services():
    """List catalog services, optionally filtered by service_type"""
    try:
        service_type = request.args.get('service_type')
        if service_type:
            valid, message = validate_choice(service_type, SERVICE_TYPES)
            if not valid:
                raise ValidationError(message, 'service_type')
        page, per_page = get_pagination_args()
        with get_db_session() as db:
            result = CatalogRepository(db).list_services(
                service_type=service_type,
                search=request.args.get('search'),
                page=page,
                per_page=per_page,
                updated_since=get_updated_since()
            )
        return ok(result)
    except Exception as e:
        return api_error(e, "listing services")


@catalog_bp.route('/api/services/catalog', methods=['GET'])
def services_catalog():
    """Public catalog grouped by service type"""
    try:
        with get_db_session() as db:
            grouped = CatalogRepository(db).services_by_type()
        return ok({'catalog': grouped})
    except Exception as e:
        return api_error(e, "loading service catalog")


@catalog_bp.route('/api/services', methods=['POST'])
@admin_required
def create_service():
    try:
        data = get_json_body()
        with get_db_session() as db:
            service = CatalogRepository(db).create_service(data)
        return ok({'service': service}, 201, 'Servicio creado', service['title'])
    except Exception as e:
        return api_error(e, "creating service")


@catalog_bp.route('/api/services/<service_id>', methods=['GET'])
def get_service(service_id):
    try:
        with get_db_session() as db:
            service = CatalogRepository(db).get_service(service_id)
        if not service:
            return not_found('Servicio no encontrado.')
        return ok({'service': service})
    except Exception as e:
        return api_error(e, f"getting service {service_id}")


@catalog_bp.route('/api/services/<service_id>', methods=['PUT', 'PATCH'])
@admin_required
def update_service(service_id):
    try:
        data = get_json_body()
        with get_db_session() as db:
            service = CatalogRepository(db).update_service(service_id, data)
        if not service:
            return not_found('Servicio no encontrado.')
        return ok({'service': service}, title='Servicio actualizado', description=service['title'])
    except Exception as e:
        return api_error(e, f"updating service {service_id}")


@catalog_bp.route('/api/services/<service_id>', methods=['DELETE'])
@admin_required
def delete_service(service_id):
    try:
        with get_db_session() as db:
            deleted = CatalogRepository(db).delete_service(service_id)
        if not deleted:
            return not_found('Servicio no encontrado.')
        return ok(title='Servicio eliminado', description='El servicio fue eliminado del catálogo.')
    except Exception as e:
        return api_error(e, f"deleting service {service_id}")


# ============================================================================
# SPARE PARTS
# ============================================================================

@catalog_bp.route('/api/spare-parts', methods=['GET'])
@admin_required
def list_spare_parts():
    try:
        page, per_page = get_pagination_args()
        with get_db_session() as db:
            result = CatalogRepository(db).list_spare_parts(
                search=request.args.get('search'),
                page=page,
                per_page=per_page,
                updated_since=get_updated_since()
            )
        return ok(result)
    except Exception as e:
        return api_error(e, "listing spare parts")


@catalog_bp.route('/api/spare-parts', methods=['POST'])
@admin_required
def create_spare_part():
    try:
        data = get_json_body()
        with get_db_session() as db:
            part = CatalogRepository(db).create_spare_part(data)
        return ok({'spare_part': part}, 201, 'Refacción creada', part['name'])
    except Exception as e:
        return api_error(e, "creating spare part")


@catalog_bp.route('/api/spare-parts/<part_id>', methods=['GET'])
@admin_required
def get_spare_part(part_id):
    try:
        with get_db_session() as db:
            part = CatalogRepository(db).get_spare_part(part_id)
        if not part:
            return not_found('Refacción no encontrada.')
        return ok({'spare_part': part})
    except Exception as e:
        return api_error(e, f"getting spare part {part_id}")


@catalog_bp.route('/api/spare-parts/<part_id>', methods=['PUT', 'PATCH'])
@admin_required
def update_spare_part(part_id):
    try:
        data = get_json_body()
        with get_db_session() as db:
            part = CatalogRepository(db).update_spare_part(part_id, data)
        if not part:
            return not_found('Refacción no encontrada.')
        return ok({'spare_part': part}, title='Refacción actualizada', description=part['name'])
    except Exception as e:
        return api_error(e, f"updating spare part {part_id}")


@catalog_bp.route('/api/spare-parts/<part_id>', methods=['DELETE'])
@admin_required
def delete_spare_part(part_id):
    try:
        with get_db_session() as db:
            deleted = CatalogRepository(db).delete_spare_part(part_id)
        if not deleted:
            return not_found('Refacción no encontrada.')
        return ok(title='Refacción eliminada', description='La refacción fue eliminada.')
    except Exception as e:
        return api_error(e, f"deleting spare part {part_id}")
