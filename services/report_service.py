"""
Report Service - back-office dashboard figures.
"""

import logging
from typing import Dict
from sqlalchemy import func
from sqlalchemy.orm import Session

from database.models import (
    Client, Supplier, Ticket, Quote, PurchaseOrder, Project, Service, SparePart,
    TICKET_STATUSES, TICKET_URGENCIES, QUOTE_STATUSES, PURCHASE_ORDER_STATUSES, PROJECT_STATUSES
)

logger = logging.getLogger(__name__)


def _count_by(session: Session, column, choices) -> Dict[str, int]:
    counts = {choice: 0 for choice in choices}
    for value, count in session.query(column, func.count()).group_by(column).all():
        counts[value] = count
    return counts


def _sum_where(session: Session, column, condition) -> float:
    return round(float(session.query(func.coalesce(func.sum(column), 0)).filter(condition).scalar()), 2)


def dashboard_summary(session: Session) -> Dict:
    """Counts per status plus accepted-quote and purchase totals."""
    summary = {
        'tickets': {
            'total': session.query(Ticket).count(),
            'by_status': _count_by(session, Ticket.status, TICKET_STATUSES),
            'by_urgency': _count_by(session, Ticket.urgency, TICKET_URGENCIES),
        },
        'quotes': {
            'total': session.query(Quote).count(),
            'by_status': _count_by(session, Quote.status, QUOTE_STATUSES),
            'accepted_total': _sum_where(session, Quote.total, Quote.status == 'Aceptada'),
        },
        'purchase_orders': {
            'total': session.query(PurchaseOrder).count(),
            'by_status': _count_by(session, PurchaseOrder.status, PURCHASE_ORDER_STATUSES),
            'spend_total': _sum_where(session, PurchaseOrder.total, PurchaseOrder.status != 'Borrador'),
        },
        'projects': {
            'total': session.query(Project).count(),
            'by_status': _count_by(session, Project.status, PROJECT_STATUSES),
        },
        'clients': session.query(Client).count(),
        'suppliers': session.query(Supplier).count(),
        'services': session.query(Service).count(),
        'spare_parts': session.query(SparePart).count(),
    }
    logger.debug("Dashboard summary computed")
    return summary
