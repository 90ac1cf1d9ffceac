"""
Purchase Order Repository - supplier orders, their folios and totals.
"""

import logging
from datetime import date, datetime
from typing import Optional, Dict, List
from sqlalchemy.orm import Session

from database.models import PurchaseOrder, Supplier, SparePart, Quote, Project, PURCHASE_ORDER_STATUSES
from services.counters import next_number, PURCHASE_ORDERS
from services.errors import NotFoundError
from services.pagination import apply_search, apply_updated_since, paginate
from services.pricing import calculate_purchase_order_totals, is_priced
from validators import validate_purchase_order, validate_status, parse_date

logger = logging.getLogger(__name__)

DEFAULTS = {
    'DEFAULT_IVA': 16,
    'DEFAULT_PAYMENT_METHOD': 'CRÉDITO',
    'DEFAULT_UNIT': 'PZA',
    'BILL_TO_DEFAULT': (
        "Attn: Lebaref\n"
        "LEBAREF SERVICIO DE MANTENIMIENTO GENERAL S.A. DE C.V.\n"
        "CALLE 55C NO.851 ENTRE 100 A Y 104, FRACCIONAMIENTO LAS AMERICAS C.P. 97302, MERIDA YUCATAN\n"
        "990 101 02 21\n"
        "lebarefmantenimiento@gmail.com"
    ),
}


class PurchaseOrderRepository:
    """Repository for purchase orders."""

    def __init__(self, session: Session, settings: Dict = None, user_id: str = None):
        self.session = session
        self.settings = {**DEFAULTS, **{k: v for k, v in (settings or {}).items() if k in DEFAULTS}}
        self.user_id = user_id

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _resolve_items(self, items) -> List[Dict]:
        """
        Fill inventory lines (spare_part_id) with 'name (brand)' and the part price.

        Lines that already carry a description and price are kept as stored.
        """
        if not isinstance(items, list):
            return items
        resolved = []
        for item in items:
            if isinstance(item, dict) and item.get('spare_part_id') and not is_priced(item):
                part = self.session.get(SparePart, item['spare_part_id'])
                if not part:
                    raise NotFoundError(f"Spare part not found: {item['spare_part_id']}", 'items')
                item = {
                    'description': part.label,
                    'price': part.price,
                    'quantity': 1,
                    'unit': self.settings['DEFAULT_UNIT'],
                    **{k: v for k, v in item.items() if v not in (None, '')},
                }
            resolved.append(item)
        return resolved

    def _apply_supplier(self, data: Dict, refresh: bool = False) -> Dict:
        """Build the supplier name and details block from the supplier record."""
        supplier_id = data.get('supplier_id')
        if not supplier_id:
            return data
        supplier = self.session.get(Supplier, supplier_id)
        if not supplier:
            raise NotFoundError(f"Supplier not found: {supplier_id}", 'supplier_id')
        merged = dict(data)
        if refresh or not merged.get('supplier_name'):
            merged['supplier_name'] = supplier.name
        if refresh or not merged.get('supplier_details'):
            merged['supplier_details'] = supplier.details_block()
        return merged

    def _prepare(self, data: Dict, refresh_supplier: bool = False) -> Dict:
        data = self._apply_supplier(data, refresh=refresh_supplier)
        data = {**data, 'items': self._resolve_items(data.get('items'))}

        quote_id = data.get('quote_id') or None
        if quote_id and not self.session.get(Quote, quote_id):
            raise NotFoundError(f"Quote not found: {quote_id}", 'quote_id')

        cleaned = validate_purchase_order(
            data,
            default_iva=self.settings['DEFAULT_IVA'],
            default_unit=self.settings['DEFAULT_UNIT']
        )
        cleaned.update({
            'supplier_id': data.get('supplier_id') or None,
            'quote_id': quote_id,
            'date': parse_date(data.get('date'), 'date') or date.today(),
            'delivery_date': parse_date(data.get('delivery_date'), 'delivery_date'),
        })
        if not cleaned.get('bill_to_details'):
            cleaned['bill_to_details'] = self.settings['BILL_TO_DEFAULT']
        if not cleaned.get('payment_method'):
            cleaned['payment_method'] = self.settings['DEFAULT_PAYMENT_METHOD']
        cleaned.update(calculate_purchase_order_totals(
            cleaned['items'], cleaned['iva'], cleaned['discount_percentage']
        ))
        return cleaned

    # =========================================================================
    # CRUD
    # =========================================================================

    def list_purchase_orders(self, search: str = None, status: str = None,
                             supplier_id: str = None, page: int = 1, per_page: int = 50,
                             updated_since: datetime = None) -> Dict:
        """List purchase orders, highest folio first."""
        query = self.session.query(PurchaseOrder)
        if status:
            query = query.filter(PurchaseOrder.status == status)
        if supplier_id:
            query = query.filter(PurchaseOrder.supplier_id == supplier_id)
        query = apply_search(
            query,
            [PurchaseOrder.supplier_name, PurchaseOrder.supplier_details,
             PurchaseOrder.observations, PurchaseOrder.shipping_method],
            search
        )
        query = apply_updated_since(query, PurchaseOrder, updated_since)
        query = query.order_by(PurchaseOrder.purchase_order_number.desc())
        return paginate(query, page, per_page)

    def get_purchase_order(self, order_id: str) -> Optional[Dict]:
        order = self.session.get(PurchaseOrder, order_id)
        return order.to_dict() if order else None

    def get_purchase_order_model(self, order_id: str) -> Optional[PurchaseOrder]:
        return self.session.get(PurchaseOrder, order_id)

    def create_purchase_order_model(self, data: Dict) -> PurchaseOrder:
        """Create a purchase order and allocate its folio in the current transaction."""
        cleaned = self._prepare(data)
        order = PurchaseOrder(
            purchase_order_number=next_number(self.session, PURCHASE_ORDERS),
            created_by=self.user_id,
            **cleaned
        )
        self.session.add(order)
        self.session.flush()
        logger.info(f"Created purchase order: {order.display_number} total={order.total}")
        return order

    def create_purchase_order(self, data: Dict) -> Dict:
        return self.create_purchase_order_model(data).to_dict()

    def update_purchase_order(self, order_id: str, data: Dict) -> Optional[Dict]:
        """Update a purchase order. The folio never changes; totals are recomputed."""
        order = self.session.get(PurchaseOrder, order_id)
        if not order:
            return None

        supplier_changed = bool(data.get('supplier_id')) and data['supplier_id'] != order.supplier_id
        merged = {**order.to_dict(), **data}
        cleaned = self._prepare(
            merged,
            refresh_supplier=supplier_changed and 'supplier_details' not in data
        )
        for key, value in cleaned.items():
            setattr(order, key, value)

        order.updated_at = datetime.utcnow()
        self.session.flush()
        logger.info(f"Updated purchase order: {order.display_number}")
        return order.to_dict()

    def update_status(self, order_id: str, status: str) -> Optional[Dict]:
        order = self.session.get(PurchaseOrder, order_id)
        if not order:
            return None
        order.status = validate_status(status, PURCHASE_ORDER_STATUSES)
        order.updated_at = datetime.utcnow()
        self.session.flush()
        logger.info(f"Purchase order {order.display_number} status -> {status}")
        return order.to_dict()

    def delete_purchase_order(self, order_id: str) -> bool:
        order = self.session.get(PurchaseOrder, order_id)
        if not order:
            return False
        self.session.query(Project).filter(Project.purchase_order_id == order_id).update(
            {Project.purchase_order_id: None}, synchronize_session=False
        )
        self.session.delete(order)
        self.session.flush()
        logger.info(f"Deleted purchase order: {order_id}")
        return True
