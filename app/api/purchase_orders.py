"""
Purchase Orders Routes Blueprint (admin only)

- /api/purchase-orders: Purchase order management, folios from the purchaseOrders counter
- /api/purchase-orders/<id>/status: Status transitions
- /api/purchase-orders/<id>/pdf: PDF download
"""

import logging
from flask import Blueprint, current_app, request

from auth import admin_required, get_current_user_id
from database.connection import get_db_session
from services.purchase_order_repository import PurchaseOrderRepository
from services.pdf_service import build_purchase_order_pdf, purchase_order_filename
from app.api.responses import ok, not_found, api_error, pdf_response, company_profile
from app.utils.helpers import get_json_body, get_pagination_args, get_updated_since

logger = logging.getLogger(__name__)

purchase_orders_bp = Blueprint('purchase_orders_bp', __name__)

NOT_FOUND = 'Orden de compra no encontrada.'


def _repository(db):
    return PurchaseOrderRepository(db, current_app.config, get_current_user_id())


@purchase_orders_bp.route('/api/purchase-orders', methods=['GET'])
@admin_required
def list_purchase_orders():
    """List purchase orders, highest folio first"""
    try:
        page, per_page = get_pagination_args()
        with get_db_session() as db:
            result = _repository(db).list_purchase_orders(
                search=request.args.get('search'),
                status=request.args.get('status'),
                supplier_id=request.args.get('supplier_id'),
                page=page,
                per_page=per_page,
                updated_since=get_updated_since()
            )
        return ok(result)
    except Exception as e:
        return api_error(e, "listing purchase orders")


@purchase_orders_bp.route('/api/purchase-orders', methods=['POST'])
@admin_required
def create_purchase_order():
    try:
        data = get_json_body()
        with get_db_session() as db:
            order = _repository(db).create_purchase_order(data)
        return ok(
            {'purchase_order': order}, 201, 'Orden de compra creada',
            f"La orden {order['display_number']} fue guardada."
        )
    except Exception as e:
        return api_error(e, "creating purchase order")


@purchase_orders_bp.route('/api/purchase-orders/<order_id>', methods=['GET'])
@admin_required
def get_purchase_order(order_id):
    try:
        with get_db_session() as db:
            order = _repository(db).get_purchase_order(order_id)
        if not order:
            return not_found(NOT_FOUND)
        return ok({'purchase_order': order})
    except Exception as e:
        return api_error(e, f"getting purchase order {order_id}")


@purchase_orders_bp.route('/api/purchase-orders/<order_id>', methods=['PUT', 'PATCH'])
@admin_required
def update_purchase_order(order_id):
    try:
        data = get_json_body()
        with get_db_session() as db:
            order = _repository(db).update_purchase_order(order_id, data)
        if not order:
            return not_found(NOT_FOUND)
        return ok(
            {'purchase_order': order}, title='Orden de compra actualizada',
            description=f"La orden {order['display_number']} fue actualizada."
        )
    except Exception as e:
        return api_error(e, f"updating purchase order {order_id}")


@purchase_orders_bp.route('/api/purchase-orders/<order_id>/status', methods=['PATCH', 'PUT'])
@admin_required
def update_purchase_order_status(order_id):
    try:
        data = get_json_body()
        with get_db_session() as db:
            order = _repository(db).update_status(order_id, data.get('status'))
        if not order:
            return not_found(NOT_FOUND)
        return ok(
            {'purchase_order': order}, title='Estado actualizado',
            description=f"{order['display_number']}: {order['status']}"
        )
    except Exception as e:
        return api_error(e, f"updating purchase order status {order_id}")


@purchase_orders_bp.route('/api/purchase-orders/<order_id>', methods=['DELETE'])
@admin_required
def delete_purchase_order(order_id):
    try:
        with get_db_session() as db:
            deleted = _repository(db).delete_purchase_order(order_id)
        if not deleted:
            return not_found(NOT_FOUND)
        return ok(title='Orden de compra eliminada', description='La orden de compra fue eliminada.')
    except Exception as e:
        return api_error(e, f"deleting purchase order {order_id}")


@purchase_orders_bp.route('/api/purchase-orders/<order_id>/pdf', methods=['GET'])
@admin_required
def download_purchase_order_pdf(order_id):
    """Download the order as OC01-0001.pdf"""
    try:
        with get_db_session() as db:
            order = _repository(db).get_purchase_order(order_id)
        if not order:
            return not_found(NOT_FOUND)
        content = build_purchase_order_pdf(order, company_profile())
        logger.info(f"Generated PDF for purchase order {order['display_number']}")
        return pdf_response(content, purchase_order_filename(order))
    except Exception as e:
        return api_error(e, f"generating PDF for purchase order {order_id}")
