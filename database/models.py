"""
SQLAlchemy models for Lebaref CRM.
Defines the tables for clients, suppliers, catalog, commercial documents, tickets and projects.
"""

import uuid
from datetime import datetime
from sqlalchemy import (
    Column, String, Text, Integer, Float, Boolean, DateTime, Date,
    ForeignKey, JSON, Index
)
from sqlalchemy.orm import relationship
from database.connection import Base


def generate_uuid():
    """Generate a new UUID."""
    return str(uuid.uuid4())


def _iso(value):
    return value.isoformat() if value else None


class NumberedDocument:
    """Documents numbered by a counter; subclasses name the prefix and number column."""

    NUMBER_PREFIX = None
    NUMBER_FIELD = None

    @property
    def display_number(self):
        from services.counters import format_document_number
        return format_document_number(self.NUMBER_PREFIX, getattr(self, self.NUMBER_FIELD))


# Status vocabularies (stored verbatim, shown in the UI)
SERVICE_TYPES = ('correctivo', 'preventivo')
TICKET_URGENCIES = ('baja', 'media', 'alta')
TICKET_STATUSES = ('Recibido', 'En Progreso', 'Resuelto')
QUOTE_STATUSES = ('Borrador', 'Enviada', 'Aceptada', 'Rechazada')
PURCHASE_ORDER_STATUSES = ('Borrador', 'Enviada', 'Recibida Parcialmente', 'Recibida')
PROJECT_STATUSES = ('Nuevo', 'En Progreso', 'En Pausa', 'Completado')
PROJECT_PRIORITIES = ('Baja', 'Media', 'Alta')
USER_ROLES = ('user', 'admin')


# =============================================================================
# USERS & AUTHENTICATION
# =============================================================================

class User(Base):
    """Customers and staff. Staff members have the admin role."""
    __tablename__ = 'users'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    email = Column(String(255), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    display_name = Column(String(255))
    role = Column(String(20), default='user', nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    last_login = Column(DateTime)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    tickets = relationship("Ticket", back_populates="user")

    __table_args__ = (
        Index('ix_users_role', 'role'),
    )

    @property
    def is_admin(self):
        return self.role == 'admin'

    def to_dict(self, include_sensitive=False):
        data = {
            'id': self.id,
            'email': self.email,
            'display_name': self.display_name,
            'role': self.role,
            'is_active': self.is_active,
            'last_login': _iso(self.last_login),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }
        if include_sensitive:
            data['password_hash'] = self.password_hash
        return data


# =============================================================================
# COUNTERS
# =============================================================================

class Counter(Base):
    """Named sequence used for quote, purchase order and ticket folios."""
    __tablename__ = 'counters'

    name = Column(String(50), primary_key=True)
    last_number = Column(Integer, default=0, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {
            'name': self.name,
            'last_number': self.last_number,
            'updated_at': _iso(self.updated_at)
        }


# =============================================================================
# CLIENTS & SUPPLIERS
# =============================================================================

class Client(Base):
    """Customer companies and restaurants."""
    __tablename__ = 'clients'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    email = Column(String(255))
    phone = Column(String(50), nullable=False)
    address = Column(Text)
    rfc = Column(String(20))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    quotes = relationship("Quote", back_populates="client")

    __table_args__ = (
        Index('ix_clients_name', 'name'),
        Index('ix_clients_created', 'created_at'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'email': self.email,
            'phone': self.phone,
            'address': self.address,
            'rfc': self.rfc,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class Supplier(Base):
    """Parts and equipment suppliers."""
    __tablename__ = 'suppliers'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    contact_person = Column(String(255))
    email = Column(String(255))
    phone = Column(String(50), nullable=False)
    address = Column(Text)
    rfc = Column(String(20))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    purchase_orders = relationship("PurchaseOrder", back_populates="supplier")

    __table_args__ = (
        Index('ix_suppliers_name', 'name'),
    )

    def details_block(self):
        """Multi-line supplier block printed on purchase orders."""
        return (
            f"{self.name}\n"
            f"RFC: {self.rfc or ''}\n"
            f"{self.address or ''}\n"
            f"Tel: {self.phone or ''}\n"
            f"Correo: {self.email or ''}"
        )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'contact_person': self.contact_person,
            'email': self.email,
            'phone': self.phone,
            'address': self.address,
            'rfc': self.rfc,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


# =============================================================================
# CATALOG
# =============================================================================

class Service(Base):
    """Catalog of repair and maintenance services."""
    __tablename__ = 'services'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    title = Column(String(255), nullable=False)
    sku = Column(String(50), nullable=False)
    price = Column(Float, default=0.0, nullable=False)
    description = Column(Text, nullable=False)
    service_type = Column(String(20), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index('ix_services_type', 'service_type'),
        Index('ix_services_sku', 'sku'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'sku': self.sku,
            'price': self.price,
            'description': self.description,
            'service_type': self.service_type,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


class SparePart(Base):
    """Spare parts sold in the store and ordered from suppliers."""
    __tablename__ = 'spare_parts'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    brand = Column(String(100), nullable=False)
    sku = Column(String(50), nullable=False)
    price = Column(Float, default=0.0, nullable=False)
    description = Column(Text, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    __table_args__ = (
        Index('ix_spare_parts_sku', 'sku'),
    )

    @property
    def label(self):
        return f"{self.name} ({self.brand})"

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'brand': self.brand,
            'sku': self.sku,
            'price': self.price,
            'description': self.description,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


# =============================================================================
# QUOTES
# =============================================================================

class Quote(NumberedDocument, Base):
    """Priced proposal sent to a client. Accepted quotes become tickets."""
    __tablename__ = 'quotes'

    NUMBER_PREFIX = 'COT'
    NUMBER_FIELD = 'quote_number'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    quote_number = Column(Integer, unique=True, nullable=False)
    client_id = Column(String(36), ForeignKey('clients.id', ondelete='SET NULL'))
    client_name = Column(String(255), nullable=False)
    client_address = Column(Text)
    client_phone = Column(String(50))
    rfc = Column(String(20))
    date = Column(Date, nullable=False)
    expiration_date = Column(Date)
    status = Column(String(20), default='Borrador', nullable=False)
    items = Column(JSON, default=list)
    iva = Column(Float, default=16.0)
    subtotal = Column(Float, default=0.0)
    iva_amount = Column(Float, default=0.0)
    total = Column(Float, default=0.0)
    policies = Column(Text)
    observations = Column(Text)
    payment_terms = Column(Text)
    service_kind = Column(String(100))
    work_kind = Column(String(100))
    equipment_location = Column(String(255))
    # Set once the quote has been converted into a ticket
    ticket_id = Column(String(36))
    created_by = Column(String(36))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    client = relationship("Client", back_populates="quotes")

    __table_args__ = (
        Index('ix_quotes_status', 'status'),
        Index('ix_quotes_client', 'client_id'),
    )

    def to_summary(self):
        return {
            'id': self.id,
            'quote_number': self.quote_number,
            'display_number': self.display_number,
            'client_name': self.client_name,
            'status': self.status,
            'total': self.total
        }

    def to_dict(self):
        return {
            'id': self.id,
            'quote_number': self.quote_number,
            'display_number': self.display_number,
            'client_id': self.client_id,
            'client_name': self.client_name,
            'client_address': self.client_address,
            'client_phone': self.client_phone,
            'rfc': self.rfc,
            'date': _iso(self.date),
            'expiration_date': _iso(self.expiration_date),
            'status': self.status,
            'items': self.items or [],
            'iva': self.iva,
            'subtotal': self.subtotal,
            'iva_amount': self.iva_amount,
            'total': self.total,
            'policies': self.policies,
            'observations': self.observations,
            'payment_terms': self.payment_terms,
            'service_kind': self.service_kind,
            'work_kind': self.work_kind,
            'equipment_location': self.equipment_location,
            'ticket_id': self.ticket_id,
            'created_by': self.created_by,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


# =============================================================================
# PURCHASE ORDERS
# =============================================================================

class PurchaseOrder(NumberedDocument, Base):
    """Goods ordered from a supplier, optionally tied to a quote."""
    __tablename__ = 'purchase_orders'

    NUMBER_PREFIX = 'OC01'
    NUMBER_FIELD = 'purchase_order_number'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    purchase_order_number = Column(Integer, unique=True, nullable=False)
    supplier_id = Column(String(36), ForeignKey('suppliers.id', ondelete='SET NULL'))
    supplier_name = Column(String(255), nullable=False)
    supplier_details = Column(Text, nullable=False)
    bill_to_details = Column(Text)
    date = Column(Date, nullable=False)
    delivery_date = Column(Date)
    status = Column(String(30), default='Borrador', nullable=False)
    items = Column(JSON, default=list)
    quote_id = Column(String(36), ForeignKey('quotes.id', ondelete='SET NULL'))
    shipping_method = Column(String(100))
    payment_method = Column(String(100))
    observations = Column(Text)
    discount_percentage = Column(Float, default=0.0)
    iva = Column(Float, default=16.0)
    subtotal = Column(Float, default=0.0)
    discount_amount = Column(Float, default=0.0)
    iva_amount = Column(Float, default=0.0)
    total = Column(Float, default=0.0)
    created_by = Column(String(36))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    supplier = relationship("Supplier", back_populates="purchase_orders")
    quote = relationship("Quote")

    __table_args__ = (
        Index('ix_purchase_orders_status', 'status'),
        Index('ix_purchase_orders_supplier', 'supplier_id'),
    )

    def to_summary(self):
        return {
            'id': self.id,
            'purchase_order_number': self.purchase_order_number,
            'display_number': self.display_number,
            'supplier_name': self.supplier_name,
            'status': self.status,
            'total': self.total
        }

    def to_dict(self):
        return {
            'id': self.id,
            'purchase_order_number': self.purchase_order_number,
            'display_number': self.display_number,
            'supplier_id': self.supplier_id,
            'supplier_name': self.supplier_name,
            'supplier_details': self.supplier_details,
            'bill_to_details': self.bill_to_details,
            'date': _iso(self.date),
            'delivery_date': _iso(self.delivery_date),
            'status': self.status,
            'items': self.items or [],
            'quote_id': self.quote_id,
            'quote_display_number': self.quote.display_number if self.quote else None,
            'shipping_method': self.shipping_method,
            'payment_method': self.payment_method,
            'observations': self.observations,
            'discount_percentage': self.discount_percentage,
            'iva': self.iva,
            'subtotal': self.subtotal,
            'discount_amount': self.discount_amount,
            'iva_amount': self.iva_amount,
            'total': self.total,
            'created_by': self.created_by,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


# =============================================================================
# TICKETS
# =============================================================================

class Ticket(NumberedDocument, Base):
    """Service request raised by a customer, by staff, or from an accepted quote."""
    __tablename__ = 'tickets'

    NUMBER_PREFIX = 'TK'
    NUMBER_FIELD = 'ticket_number'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    ticket_number = Column(Integer, unique=True, nullable=False)
    service_type = Column(String(20), nullable=False)
    equipment_type = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    urgency = Column(String(10), default='media', nullable=False)
    status = Column(String(20), default='Recibido', nullable=False)
    user_id = Column(String(36), ForeignKey('users.id', ondelete='SET NULL'))
    user_email = Column(String(255))
    client_name = Column(String(255))
    client_phone = Column(String(50))
    client_address = Column(Text)
    price = Column(Float)
    quote_id = Column(String(36), ForeignKey('quotes.id', ondelete='SET NULL'))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="tickets")
    quote = relationship("Quote", foreign_keys=[quote_id])

    __table_args__ = (
        Index('ix_tickets_status', 'status'),
        Index('ix_tickets_user', 'user_id'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'ticket_number': self.ticket_number,
            'display_number': self.display_number,
            'service_type': self.service_type,
            'equipment_type': self.equipment_type,
            'description': self.description,
            'urgency': self.urgency,
            'status': self.status,
            'user_id': self.user_id,
            'user_email': self.user_email,
            'client_name': self.client_name,
            'client_phone': self.client_phone,
            'client_address': self.client_address,
            'price': self.price,
            'quote_id': self.quote_id,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }


# =============================================================================
# PROJECTS
# =============================================================================

class Project(Base):
    """Scheduled job grouping a quote and a purchase order."""
    __tablename__ = 'projects'

    id = Column(String(36), primary_key=True, default=generate_uuid)
    client = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    responsible = Column(String(255), nullable=False)
    status = Column(String(20), default='Nuevo', nullable=False)
    priority = Column(String(10), default='Media', nullable=False)
    programmed_date = Column(Date, nullable=False)
    quote_id = Column(String(36), ForeignKey('quotes.id', ondelete='SET NULL'))
    purchase_order_id = Column(String(36), ForeignKey('purchase_orders.id', ondelete='SET NULL'))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    quote = relationship("Quote")
    purchase_order = relationship("PurchaseOrder")

    __table_args__ = (
        Index('ix_projects_status', 'status'),
        Index('ix_projects_programmed', 'programmed_date'),
    )

    def to_dict(self, include_links=False):
        data = {
            'id': self.id,
            'client': self.client,
            'description': self.description,
            'responsible': self.responsible,
            'status': self.status,
            'priority': self.priority,
            'programmed_date': _iso(self.programmed_date),
            'quote_id': self.quote_id,
            'purchase_order_id': self.purchase_order_id,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at)
        }
        if include_links:
            data['quote'] = self.quote.to_summary() if self.quote else None
            data['purchase_order'] = self.purchase_order.to_summary() if self.purchase_order else None
        return data
