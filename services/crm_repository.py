"""
CRM Repository - Database access layer for clients and suppliers.
"""

import logging
from datetime import datetime
from typing import Optional, Dict
from sqlalchemy.orm import Session

from database.models import Client, Supplier, Quote, PurchaseOrder
from services.pagination import apply_search, apply_updated_since, paginate
from validators import validate_client, validate_supplier

logger = logging.getLogger(__name__)


class CRMRepository:
    """Repository for client and supplier records."""

    def __init__(self, session: Session, user_id: str = None):
        self.session = session
        self.user_id = user_id  # For tracking who made changes

    # =========================================================================
    # CLIENTS
    # =========================================================================

    def list_clients(self, search: str = None, page: int = 1, per_page: int = 50,
                     updated_since: datetime = None) -> Dict:
        """List clients, newest first."""
        query = self.session.query(Client)
        query = apply_search(query, [Client.name, Client.email, Client.phone, Client.rfc], search)
        query = apply_updated_since(query, Client, updated_since)
        query = query.order_by(Client.created_at.desc())
        return paginate(query, page, per_page)

    def get_client(self, client_id: str) -> Optional[Dict]:
        """Get a client by ID."""
        client = self.session.get(Client, client_id)
        return client.to_dict() if client else None

    def create_client(self, data: Dict) -> Dict:
        """Create a new client."""
        client = Client(**validate_client(data))
        self.session.add(client)
        self.session.flush()
        logger.info(f"Created client: {client.id}")
        return client.to_dict()

    def update_client(self, client_id: str, data: Dict) -> Optional[Dict]:
        """Update a client. Omitted fields keep their values."""
        client = self.session.get(Client, client_id)
        if not client:
            return None

        cleaned = validate_client({**client.to_dict(), **data})
        for key, value in cleaned.items():
            setattr(client, key, value)

        client.updated_at = datetime.utcnow()
        self.session.flush()
        logger.info(f"Updated client: {client_id}")
        return client.to_dict()

    def delete_client(self, client_id: str) -> bool:
        """Delete a client. Quotes keep their copied client data."""
        client = self.session.get(Client, client_id)
        if not client:
            return False
        self.session.query(Quote).filter(Quote.client_id == client_id).update(
            {Quote.client_id: None}, synchronize_session=False
        )
        self.session.delete(client)
        self.session.flush()
        logger.info(f"Deleted client: {client_id}")
        return True

    # =========================================================================
    # SUPPLIERS
    # =========================================================================

    def list_suppliers(self, search: str = None, page: int = 1, per_page: int = 50,
                       updated_since: datetime = None) -> Dict:
        """List suppliers, newest first."""
        query = self.session.query(Supplier)
        query = apply_search(
            query,
            [Supplier.name, Supplier.contact_person, Supplier.email, Supplier.phone, Supplier.rfc],
            search
        )
        query = apply_updated_since(query, Supplier, updated_since)
        query = query.order_by(Supplier.created_at.desc())
        return paginate(query, page, per_page)

    def get_supplier(self, supplier_id: str) -> Optional[Dict]:
        """Get a supplier by ID."""
        supplier = self.session.get(Supplier, supplier_id)
        return supplier.to_dict() if supplier else None

    def get_supplier_model(self, supplier_id: str) -> Optional[Supplier]:
        return self.session.get(Supplier, supplier_id)

    def create_supplier(self, data: Dict) -> Dict:
        """Create a new supplier."""
        supplier = Supplier(**validate_supplier(data))
        self.session.add(supplier)
        self.session.flush()
        logger.info(f"Created supplier: {supplier.id}")
        return supplier.to_dict()

    def update_supplier(self, supplier_id: str, data: Dict) -> Optional[Dict]:
        """Update a supplier. Omitted fields keep their values."""
        supplier = self.session.get(Supplier, supplier_id)
        if not supplier:
            return None

        cleaned = validate_supplier({**supplier.to_dict(), **data})
        for key, value in cleaned.items():
            setattr(supplier, key, value)

        supplier.updated_at = datetime.utcnow()
        self.session.flush()
        logger.info(f"Updated supplier: {supplier_id}")
        return supplier.to_dict()

    def delete_supplier(self, supplier_id: str) -> bool:
        """Delete a supplier. Purchase orders keep their supplier details block."""
        supplier = self.session.get(Supplier, supplier_id)
        if not supplier:
            return False
        self.session.query(PurchaseOrder).filter(PurchaseOrder.supplier_id == supplier_id).update(
            {PurchaseOrder.supplier_id: None}, synchronize_session=False
        )
        self.session.delete(supplier)
        self.session.flush()
        logger.info(f"Deleted supplier: {supplier_id}")
        return True
