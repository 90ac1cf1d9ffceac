"""
Services package for Lebaref CRM.
Contains repository classes for database access plus the counter, pricing, PDF and error-relay services.
"""

from services.crm_repository import CRMRepository
from services.catalog_repository import CatalogRepository
from services.quote_repository import QuoteRepository
from services.purchase_order_repository import PurchaseOrderRepository
from services.ticket_repository import TicketRepository
from services.project_repository import ProjectRepository
from services.users_repository import UsersRepository

__all__ = [
    'CRMRepository',
    'CatalogRepository',
    'QuoteRepository',
    'PurchaseOrderRepository',
    'TicketRepository',
    'ProjectRepository',
    'UsersRepository'
]
