"""
Quote Repository - priced proposals, their folios, totals and conversion into tickets.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional, Dict, List
from sqlalchemy.orm import Session

from database.models import (
    Quote, Client, Service, Ticket, PurchaseOrder, Project, QUOTE_STATUSES
)
from services.counters import next_number, QUOTES
from services.errors import ConflictError, NotFoundError
from services.pagination import apply_search, apply_updated_since, paginate
from services.pricing import calculate_quote_totals, is_priced
from services.ticket_repository import TicketRepository
from validators import ValidationError, validate_quote, validate_status, parse_date

logger = logging.getLogger(__name__)

DEFAULTS = {
    'DEFAULT_IVA': 16,
    'QUOTE_VALIDITY_DAYS': 15,
    'DEFAULT_QUOTE_POLICIES': (
        'Esta cotización tiene una validez de 15 días a partir de la fecha de emisión. '
        'Los precios no incluyen IVA. El tiempo de entrega puede variar.'
    ),
    'DEFAULT_UNIT': 'PZA',
}

CLIENT_FIELDS = {
    'client_name': 'name',
    'client_phone': 'phone',
    'client_address': 'address',
    'rfc': 'rfc',
}

# Fields a visitor may set when requesting a quote
REQUEST_FIELDS = (
    'client_name', 'client_phone', 'client_address', 'rfc', 'items',
    'observations', 'service_kind', 'work_kind', 'equipment_location',
)


class QuoteRepository:
    """Repository for quotes."""

    def __init__(self, session: Session, settings: Dict = None, user_id: str = None):
        self.session = session
        self.settings = {**DEFAULTS, **{k: v for k, v in (settings or {}).items() if k in DEFAULTS}}
        self.user_id = user_id

    # =========================================================================
    # HELPERS
    # =========================================================================

    def _resolve_items(self, items) -> List[Dict]:
        """
        Fill catalog lines (service_id) with the service title and price.

        Lines that already carry a description and price keep that snapshot,
        so a quote stays editable after its service leaves the catalog.
        """
        if not isinstance(items, list):
            return items
        resolved = []
        for item in items:
            if isinstance(item, dict) and item.get('service_id') and not is_priced(item):
                service = self.session.get(Service, item['service_id'])
                if not service:
                    raise NotFoundError(f"Service not found: {item['service_id']}", 'items')
                item = {
                    'description': service.title,
                    'price': service.price,
                    'quantity': 1,
                    **{k: v for k, v in item.items() if v not in (None, '')},
                }
            resolved.append(item)
        return resolved

    def _apply_client(self, data: Dict) -> Dict:
        """Copy missing client fields from the referenced client record."""
        client_id = data.get('client_id')
        if not client_id:
            return data
        client = self.session.get(Client, client_id)
        if not client:
            raise NotFoundError(f"Client not found: {client_id}", 'client_id')
        merged = dict(data)
        for field, attr in CLIENT_FIELDS.items():
            if not merged.get(field):
                merged[field] = getattr(client, attr)
        return merged

    def _prepare(self, data: Dict) -> Dict:
        """Validate a full quote payload and compute dates and totals."""
        data = self._apply_client(data)
        data = {**data, 'items': self._resolve_items(data.get('items'))}
        cleaned = validate_quote(
            data,
            default_iva=self.settings['DEFAULT_IVA'],
            default_unit=self.settings['DEFAULT_UNIT']
        )

        quote_date = parse_date(data.get('date'), 'date') or date.today()
        expiration = parse_date(data.get('expiration_date'), 'expiration_date')
        if expiration is None:
            expiration = quote_date + timedelta(days=self.settings['QUOTE_VALIDITY_DAYS'])
        if expiration < quote_date:
            raise ValidationError("expiration_date cannot be before date", 'expiration_date')

        cleaned.update({
            'client_id': data.get('client_id') or None,
            'date': quote_date,
            'expiration_date': expiration,
        })
        if not cleaned.get('policies'):
            cleaned['policies'] = self.settings['DEFAULT_QUOTE_POLICIES']
        cleaned.update(calculate_quote_totals(cleaned['items'], cleaned['iva']))
        return cleaned

    # =========================================================================
    # CRUD
    # =========================================================================

    def list_quotes(self, search: str = None, status: str = None, client_id: str = None,
                    page: int = 1, per_page: int = 50, updated_since: datetime = None) -> Dict:
        """List quotes, highest folio first."""
        query = self.session.query(Quote)
        if status:
            query = query.filter(Quote.status == status)
        if client_id:
            query = query.filter(Quote.client_id == client_id)
        query = apply_search(query, [Quote.client_name, Quote.rfc, Quote.observations], search)
        query = apply_updated_since(query, Quote, updated_since)
        query = query.order_by(Quote.quote_number.desc())
        return paginate(query, page, per_page)

    def get_quote(self, quote_id: str) -> Optional[Dict]:
        quote = self.session.get(Quote, quote_id)
        return quote.to_dict() if quote else None

    def get_quote_model(self, quote_id: str) -> Optional[Quote]:
        return self.session.get(Quote, quote_id)

    def create_quote_model(self, data: Dict) -> Quote:
        """Create a quote and allocate its folio in the current transaction."""
        cleaned = self._prepare(data)
        quote = Quote(
            quote_number=next_number(self.session, QUOTES),
            created_by=self.user_id,
            **cleaned
        )
        self.session.add(quote)
        self.session.flush()
        logger.info(f"Created quote: {quote.display_number} total={quote.total}")
        return quote

    def create_quote(self, data: Dict) -> Dict:
        return self.create_quote_model(data).to_dict()

    def submit_request(self, data: Dict) -> Dict:
        """Register a quote requested from the public site as a draft for review."""
        request_data = {key: data.get(key) for key in REQUEST_FIELDS if key in data}
        request_data['status'] = 'Borrador'
        return self.create_quote(request_data)

    def update_quote(self, quote_id: str, data: Dict) -> Optional[Dict]:
        """Update a quote. The folio never changes; totals are recomputed."""
        quote = self.session.get(Quote, quote_id)
        if not quote:
            return None

        merged = {**quote.to_dict(), **data}
        if data.get('client_id') and data['client_id'] != quote.client_id:
            # New client: take its data unless the payload overrides it
            for field in CLIENT_FIELDS:
                if field not in data:
                    merged[field] = None
        cleaned = self._prepare(merged)
        for key, value in cleaned.items():
            setattr(quote, key, value)

        quote.updated_at = datetime.utcnow()
        self.session.flush()
        logger.info(f"Updated quote: {quote.display_number}")
        return quote.to_dict()

    def update_status(self, quote_id: str, status: str) -> Optional[Dict]:
        quote = self.session.get(Quote, quote_id)
        if not quote:
            return None
        quote.status = validate_status(status, QUOTE_STATUSES)
        quote.updated_at = datetime.utcnow()
        self.session.flush()
        logger.info(f"Quote {quote.display_number} status -> {status}")
        return quote.to_dict()

    def delete_quote(self, quote_id: str) -> bool:
        """Delete a quote and clear the references other records hold to it."""
        quote = self.session.get(Quote, quote_id)
        if not quote:
            return False
        for model in (Ticket, PurchaseOrder, Project):
            self.session.query(model).filter(model.quote_id == quote_id).update(
                {model.quote_id: None}, synchronize_session=False
            )
        self.session.delete(quote)
        self.session.flush()
        logger.info(f"Deleted quote: {quote_id}")
        return True

    # =========================================================================
    # CONVERSION
    # =========================================================================

    def convert_to_ticket(self, quote_id: str) -> Optional[Dict]:
        """
        Open a service ticket from an accepted quote.

        Returns:
            Dict with the updated quote and the new ticket, None if the quote does not exist

        Raises:
            ConflictError: If the quote is not accepted or was already converted
        """
        quote = self.session.get(Quote, quote_id)
        if not quote:
            return None
        if quote.status != 'Aceptada':
            raise ConflictError(
                "Solo las cotizaciones aceptadas pueden convertirse en ticket.", 'status'
            )
        if quote.ticket_id:
            raise ConflictError(
                f"La cotización {quote.display_number} ya fue convertida en ticket.", 'ticket_id'
            )

        ticket = TicketRepository(self.session).create_from_quote(quote)
        quote.ticket_id = ticket.id
        quote.updated_at = datetime.utcnow()
        self.session.flush()
        logger.info(f"Converted quote {quote.display_number} into ticket {ticket.display_number}")
        return {'quote': quote.to_dict(), 'ticket': ticket.to_dict()}
