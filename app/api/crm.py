"""
CRM Routes Blueprint

Back-office directory API (admin only):
- /api/clients: Client management with pagination and search
- /api/suppliers: Supplier management with pagination and search
"""

import logging
from flask import Blueprint, request

from auth import admin_required, get_current_user_id
from database.connection import get_db_session
from services.crm_repository import CRMRepository
from app.api.responses import ok, not_found, api_error
from app.utils.helpers import get_json_body, get_pagination_args, get_updated_since

logger = logging.getLogger(__name__)

# Create blueprint
crm_bp = Blueprint('crm_bp', __name__)


# ============================================================================
# CLIENTS
# ============================================================================

@crm_bp.route('/api/clients', methods=['GET'])
@admin_required
def list_clients():
    """List clients, newest first"""
    try:
        page, per_page = get_pagination_args()
        with get_db_session() as db:
            result = CRMRepository(db).list_clients(
                search=request.args.get('search'),
                page=page,
                per_page=per_page,
                updated_since=get_updated_since()
            )
        return ok(result)
    except Exception as e:
        return api_error(e, "listing clients")


@crm_bp.route('/api/clients', methods=['POST'])
@admin_required
def create_client():
    """Create a client"""
    try:
        data = get_json_body()
        with get_db_session() as db:
            client = CRMRepository(db, get_current_user_id()).create_client(data)
        return ok({'client': client}, 201, 'Cliente creado', f"{client['name']} fue agregado.")
    except Exception as e:
        return api_error(e, "creating client")


@crm_bp.route('/api/clients/<client_id>', methods=['GET'])
@admin_required
def get_client(client_id):
    """Get a single client"""
    try:
        with get_db_session() as db:
            client = CRMRepository(db).get_client(client_id)
        if not client:
            return not_found('Cliente no encontrado.')
        return ok({'client': client})
    except Exception as e:
        return api_error(e, f"getting client {client_id}")


@crm_bp.route('/api/clients/<client_id>', methods=['PUT', 'PATCH'])
@admin_required
def update_client(client_id):
    """Update a client"""
    try:
        data = get_json_body()
        with get_db_session() as db:
            client = CRMRepository(db, get_current_user_id()).update_client(client_id, data)
        if not client:
            return not_found('Cliente no encontrado.')
        return ok({'client': client}, title='Cliente actualizado', description=client['name'])
    except Exception as e:
        return api_error(e, f"updating client {client_id}")


@crm_bp.route('/api/clients/<client_id>', methods=['DELETE'])
@admin_required
def delete_client(client_id):
    """Delete a client"""
    try:
        with get_db_session() as db:
            deleted = CRMRepository(db, get_current_user_id()).delete_client(client_id)
        if not deleted:
            return not_found('Cliente no encontrado.')
        return ok(title='Cliente eliminado', description='El cliente fue eliminado.')
    except Exception as e:
        return api_error(e, f"deleting client {client_id}")


# ============================================================================
# SUPPLIERS
# ============================================================================

@crm_bp.route('/api/suppliers', methods=['GET'])
@admin_required
def list_suppliers():
    """List suppliers, newest first"""
    try:
        page, per_page = get_pagination_args()
        with get_db_session() as db:
            result = CRMRepository(db).list_suppliers(
                search=request.args.get('search'),
                page=page,
                per_page=per_page,
                updated_since=get_updated_since()
            )
        return ok(result)
    except Exception as e:
        return api_error(e, "listing suppliers")


@crm_bp.route('/api/suppliers', methods=['POST'])
@admin_required
def create_supplier():
    """Create a supplier"""
    try:
        data = get_json_body()
        with get_db_session() as db:
            supplier = CRMRepository(db, get_current_user_id()).create_supplier(data)
        return ok({'supplier': supplier}, 201, 'Proveedor creado', f"{supplier['name']} fue agregado.")
    except Exception as e:
        return api_error(e, "creating supplier")


@crm_bp.route('/api/suppliers/<supplier_id>', methods=['GET'])
@admin_required
def get_supplier(supplier_id):
    """Get a single supplier"""
    try:
        with get_db_session() as db:
            supplier = CRMRepository(db).get_supplier(supplier_id)
        if not supplier:
            return not_found('Proveedor no encontrado.')
        return ok({'supplier': supplier})
    except Exception as e:
        return api_error(e, f"getting supplier {supplier_id}")


@crm_bp.route('/api/suppliers/<supplier_id>', methods=['PUT', 'PATCH'])
@admin_required
def update_supplier(supplier_id):
    """Update a supplier"""
    try:
        data = get_json_body()
        with get_db_session() as db:
            supplier = CRMRepository(db, get_current_user_id()).update_supplier(supplier_id, data)
        if not supplier:
            return not_found('Proveedor no encontrado.')
        return ok({'supplier': supplier}, title='Proveedor actualizado', description=supplier['name'])
    except Exception as e:
        return api_error(e, f"updating supplier {supplier_id}")


@crm_bp.route('/api/suppliers/<supplier_id>', methods=['DELETE'])
@admin_required
def delete_supplier(supplier_id):
    """Delete a supplier"""
    try:
        with get_db_session() as db:
            deleted = CRMRepository(db, get_current_user_id()).delete_supplier(supplier_id)
        if not deleted:
            return not_found('Proveedor no encontrado.')
        return ok(title='Proveedor eliminado', description='El proveedor fue eliminado.')
    except Exception as e:
        return api_error(e, f"deleting supplier {supplier_id}")
