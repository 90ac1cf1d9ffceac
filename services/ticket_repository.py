"""
Ticket Repository - service requests raised by customers, staff, or accepted quotes.
"""

import logging
from datetime import datetime
from typing import Optional, Dict, List
from sqlalchemy.orm import Session

from database.models import Ticket, Quote, TICKET_STATUSES
from services.counters import next_number, TICKETS
from services.pagination import apply_search, apply_updated_since, paginate
from validators import validate_ticket, validate_status

logger = logging.getLogger(__name__)

# Fields a customer may set on their own request
CUSTOMER_FIELDS = ('service_type', 'equipment_type', 'description', 'urgency')


class TicketRepository:
    """Repository for service tickets."""

    def __init__(self, session: Session):
        self.session = session

    def _insert(self, fields: Dict) -> Ticket:
        """Insert a ticket with the next folio of the tickets counter."""
        ticket = Ticket(ticket_number=next_number(self.session, TICKETS), **fields)
        self.session.add(ticket)
        self.session.flush()
        logger.info(f"Created ticket: {ticket.display_number} ({ticket.id})")
        return ticket

    def create_customer_ticket(self, data: Dict, user: Dict) -> Dict:
        """
        Register a request submitted by a logged-in customer.

        Only the request fields are taken from the payload; the ticket starts
        as 'Recibido' and is tied to the customer's account.
        """
        cleaned = validate_ticket({key: data.get(key) for key in CUSTOMER_FIELDS})
        cleaned['status'] = 'Recibido'
        ticket = self._insert({
            **cleaned,
            'user_id': user['id'],
            'user_email': user['email'],
            'client_name': user.get('display_name'),
        })
        return ticket.to_dict()

    def create_ticket(self, data: Dict, created_by: Dict = None) -> Dict:
        """Create a ticket from the back office (client data and price allowed)."""
        cleaned = validate_ticket(data)
        fields = dict(cleaned)
        if data.get('user_id'):
            fields['user_id'] = data['user_id']
            fields['user_email'] = data.get('user_email')
        elif created_by:
            fields['user_email'] = created_by.get('email')
        ticket = self._insert(fields)
        return ticket.to_dict()

    def create_from_quote(self, quote: Quote) -> Ticket:
        """Open a ticket carrying an accepted quote's client data and total."""
        service_type = (quote.service_kind or '').strip().lower()
        if service_type not in ('correctivo', 'preventivo'):
            service_type = 'correctivo'

        lines = '; '.join(item.get('description', '') for item in (quote.items or []))
        description = f"Generado desde la cotización {quote.display_number}. {lines}"
        if quote.observations:
            description = f"{description}. {quote.observations}"

        return self._insert({
            'service_type': service_type,
            'equipment_type': quote.equipment_location or quote.work_kind or 'Equipo de cocina',
            'description': description[:500],
            'urgency': 'media',
            'status': 'Recibido',
            'client_name': quote.client_name,
            'client_phone': quote.client_phone,
            'client_address': quote.client_address,
            'price': quote.total,
            'quote_id': quote.id,
        })

    def list_user_tickets(self, user_id: str) -> List[Dict]:
        """The given customer's tickets, newest first."""
        tickets = (
            self.session.query(Ticket)
            .filter(Ticket.user_id == user_id)
            .order_by(Ticket.created_at.desc(), Ticket.ticket_number.desc())
            .all()
        )
        return [t.to_dict() for t in tickets]

    def list_tickets(self, status: str = None, urgency: str = None, service_type: str = None,
                     search: str = None, page: int = 1, per_page: int = 50,
                     updated_since: datetime = None) -> Dict:
        """All tickets for the back office, newest first."""
        query = self.session.query(Ticket)
        if status:
            query = query.filter(Ticket.status == status)
        if urgency:
            query = query.filter(Ticket.urgency == urgency)
        if service_type:
            query = query.filter(Ticket.service_type == service_type)
        query = apply_search(
            query,
            [Ticket.equipment_type, Ticket.description, Ticket.client_name, Ticket.user_email],
            search
        )
        query = apply_updated_since(query, Ticket, updated_since)
        query = query.order_by(Ticket.created_at.desc(), Ticket.ticket_number.desc())
        return paginate(query, page, per_page)

    def get_ticket(self, ticket_id: str) -> Optional[Dict]:
        ticket = self.session.get(Ticket, ticket_id)
        return ticket.to_dict() if ticket else None

    def get_ticket_model(self, ticket_id: str) -> Optional[Ticket]:
        return self.session.get(Ticket, ticket_id)

    def update_ticket(self, ticket_id: str, data: Dict) -> Optional[Dict]:
        """Back-office edit. The folio, owner and quote link are kept."""
        ticket = self.session.get(Ticket, ticket_id)
        if not ticket:
            return None

        merged = {**ticket.to_dict(), **data}
        # phones copied from older quotes are only checked when edited
        if 'client_phone' not in data:
            merged.pop('client_phone', None)
        cleaned = validate_ticket(merged)
        for key, value in cleaned.items():
            setattr(ticket, key, value)

        ticket.updated_at = datetime.utcnow()
        self.session.flush()
        logger.info(f"Updated ticket: {ticket.display_number}")
        return ticket.to_dict()

    def update_status(self, ticket_id: str, status: str) -> Optional[Dict]:
        ticket = self.session.get(Ticket, ticket_id)
        if not ticket:
            return None
        ticket.status = validate_status(status, TICKET_STATUSES)
        ticket.updated_at = datetime.utcnow()
        self.session.flush()
        logger.info(f"Ticket {ticket.display_number} status -> {status}")
        return ticket.to_dict()

    def delete_ticket(self, ticket_id: str) -> bool:
        """Delete a ticket; a quote it came from becomes convertible again."""
        ticket = self.session.get(Ticket, ticket_id)
        if not ticket:
            return False
        self.session.query(Quote).filter(Quote.ticket_id == ticket_id).update(
            {Quote.ticket_id: None}, synchronize_session=False
        )
        self.session.delete(ticket)
        self.session.flush()
        logger.info(f"Deleted ticket: {ticket_id}")
        return True
