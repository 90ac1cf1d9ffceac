"""
Database package for Lebaref CRM.
Provides SQLAlchemy models, connection management, and session handling.
"""

from database.connection import (
    Base,
    init_engine,
    get_engine,
    get_db_session,
    init_db,
    check_db_connection
)

from database.models import (
    User,
    Counter,
    Client,
    Supplier,
    Service,
    SparePart,
    Quote,
    PurchaseOrder,
    Ticket,
    Project
)

__all__ = [
    # Connection
    'Base',
    'init_engine',
    'get_engine',
    'get_db_session',
    'init_db',
    'check_db_connection',
    # Models
    'User',
    'Counter',
    'Client',
    'Supplier',
    'Service',
    'SparePart',
    'Quote',
    'PurchaseOrder',
    'Ticket',
    'Project'
]
