"""Initial database schema

Revision ID: 001
Revises:
Create Date: 2026-10-19

Creates all tables for the Lebaref CRM: users, counters, directory,
catalog, quotes, purchase orders, tickets and projects.
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(), default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now()),
    ]


def upgrade() -> None:
    # Users table
    op.create_table('users',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('display_name', sa.String(255)),
        sa.Column('role', sa.String(20), nullable=False, server_default='user'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('last_login', sa.DateTime()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )
    op.create_index('ix_users_role', 'users', ['role'])

    # Counters table
    op.create_table('counters',
        sa.Column('name', sa.String(50), nullable=False),
        sa.Column('last_number', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime(), default=sa.func.now()),
        sa.PrimaryKeyConstraint('name')
    )

    # Clients table
    op.create_table('clients',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255)),
        sa.Column('phone', sa.String(50), nullable=False),
        sa.Column('address', sa.Text()),
        sa.Column('rfc', sa.String(20)),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_clients_name', 'clients', ['name'])
    op.create_index('ix_clients_created', 'clients', ['created_at'])

    # Suppliers table
    op.create_table('suppliers',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('contact_person', sa.String(255)),
        sa.Column('email', sa.String(255)),
        sa.Column('phone', sa.String(50), nullable=False),
        sa.Column('address', sa.Text()),
        sa.Column('rfc', sa.String(20)),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_suppliers_name', 'suppliers', ['name'])

    # Services table
    op.create_table('services',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('sku', sa.String(50), nullable=False),
        sa.Column('price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('service_type', sa.String(20), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_services_type', 'services', ['service_type'])
    op.create_index('ix_services_sku', 'services', ['sku'])

    # Spare parts table
    op.create_table('spare_parts',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('brand', sa.String(100), nullable=False),
        sa.Column('sku', sa.String(50), nullable=False),
        sa.Column('price', sa.Float(), nullable=False, server_default='0'),
        sa.Column('description', sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_spare_parts_sku', 'spare_parts', ['sku'])

    # Quotes table
    op.create_table('quotes',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('quote_number', sa.Integer(), nullable=False),
        sa.Column('client_id', sa.String(36), sa.ForeignKey('clients.id', ondelete='SET NULL')),
        sa.Column('client_name', sa.String(255), nullable=False),
        sa.Column('client_address', sa.Text()),
        sa.Column('client_phone', sa.String(50)),
        sa.Column('rfc', sa.String(20)),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('expiration_date', sa.Date()),
        sa.Column('status', sa.String(20), nullable=False, server_default='Borrador'),
        sa.Column('items', sa.JSON()),
        sa.Column('iva', sa.Float(), server_default='16'),
        sa.Column('subtotal', sa.Float(), server_default='0'),
        sa.Column('iva_amount', sa.Float(), server_default='0'),
        sa.Column('total', sa.Float(), server_default='0'),
        sa.Column('policies', sa.Text()),
        sa.Column('observations', sa.Text()),
        sa.Column('payment_terms', sa.Text()),
        sa.Column('service_kind', sa.String(100)),
        sa.Column('work_kind', sa.String(100)),
        sa.Column('equipment_location', sa.String(255)),
        sa.Column('ticket_id', sa.String(36)),
        sa.Column('created_by', sa.String(36)),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('quote_number')
    )
    op.create_index('ix_quotes_status', 'quotes', ['status'])
    op.create_index('ix_quotes_client', 'quotes', ['client_id'])

    # Purchase orders table
    op.create_table('purchase_orders',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('purchase_order_number', sa.Integer(), nullable=False),
        sa.Column('supplier_id', sa.String(36), sa.ForeignKey('suppliers.id', ondelete='SET NULL')),
        sa.Column('supplier_name', sa.String(255), nullable=False),
        sa.Column('supplier_details', sa.Text(), nullable=False),
        sa.Column('bill_to_details', sa.Text()),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('delivery_date', sa.Date()),
        sa.Column('status', sa.String(30), nullable=False, server_default='Borrador'),
        sa.Column('items', sa.JSON()),
        sa.Column('quote_id', sa.String(36), sa.ForeignKey('quotes.id', ondelete='SET NULL')),
        sa.Column('shipping_method', sa.String(100)),
        sa.Column('payment_method', sa.String(100)),
        sa.Column('observations', sa.Text()),
        sa.Column('discount_percentage', sa.Float(), server_default='0'),
        sa.Column('iva', sa.Float(), server_default='16'),
        sa.Column('subtotal', sa.Float(), server_default='0'),
        sa.Column('discount_amount', sa.Float(), server_default='0'),
        sa.Column('iva_amount', sa.Float(), server_default='0'),
        sa.Column('total', sa.Float(), server_default='0'),
        sa.Column('created_by', sa.String(36)),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('purchase_order_number')
    )
    op.create_index('ix_purchase_orders_status', 'purchase_orders', ['status'])
    op.create_index('ix_purchase_orders_supplier', 'purchase_orders', ['supplier_id'])

    # Tickets table
    op.create_table('tickets',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('ticket_number', sa.Integer(), nullable=False),
        sa.Column('service_type', sa.String(20), nullable=False),
        sa.Column('equipment_type', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('urgency', sa.String(10), nullable=False, server_default='media'),
        sa.Column('status', sa.String(20), nullable=False, server_default='Recibido'),
        sa.Column('user_id', sa.String(36), sa.ForeignKey('users.id', ondelete='SET NULL')),
        sa.Column('user_email', sa.String(255)),
        sa.Column('client_name', sa.String(255)),
        sa.Column('client_phone', sa.String(50)),
        sa.Column('client_address', sa.Text()),
        sa.Column('price', sa.Float()),
        sa.Column('quote_id', sa.String(36), sa.ForeignKey('quotes.id', ondelete='SET NULL')),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('ticket_number')
    )
    op.create_index('ix_tickets_status', 'tickets', ['status'])
    op.create_index('ix_tickets_user', 'tickets', ['user_id'])

    # Projects table
    op.create_table('projects',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('client', sa.String(255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('responsible', sa.String(255), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='Nuevo'),
        sa.Column('priority', sa.String(10), nullable=False, server_default='Media'),
        sa.Column('programmed_date', sa.Date(), nullable=False),
        sa.Column('quote_id', sa.String(36), sa.ForeignKey('quotes.id', ondelete='SET NULL')),
        sa.Column('purchase_order_id', sa.String(36),
                  sa.ForeignKey('purchase_orders.id', ondelete='SET NULL')),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_projects_status', 'projects', ['status'])
    op.create_index('ix_projects_programmed', 'projects', ['programmed_date'])


def downgrade() -> None:
    op.drop_table('projects')
    op.drop_table('tickets')
    op.drop_table('purchase_orders')
    op.drop_table('quotes')
    op.drop_table('spare_parts')
    op.drop_table('services')
    op.drop_table('suppliers')
    op.drop_table('clients')
    op.drop_table('counters')
    op.drop_table('users')
