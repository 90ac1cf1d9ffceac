"""
Tickets Routes Blueprint

- POST /api/tickets: Customers submit a service request; admins may add client data and price
- /api/tickets/mine: The logged-in customer's tickets
- /api/tickets (GET), /api/tickets/<id>: Back-office management
- /api/tickets/<id>/service-order.pdf: Printable service order
"""

import logging
from flask import Blueprint, request

from auth import admin_required, login_required, get_current_user, is_admin
from database.connection import get_db_session
from services.ticket_repository import TicketRepository
from services.pdf_service import build_service_order_pdf, service_order_filename
from app.api.responses import ok, not_found, api_error, forbidden, pdf_response, company_profile
from app.utils.helpers import get_json_body, get_pagination_args, get_updated_since

logger = logging.getLogger(__name__)

tickets_bp = Blueprint('tickets_bp', __name__)

NOT_FOUND = 'Ticket no encontrado.'


@tickets_bp.route('/api/tickets', methods=['POST'])
@login_required
def create_ticket():
    """Create a ticket. Customers only set the request fields."""
    try:
        data = get_json_body()
        user = get_current_user()
        if not user:
            return forbidden('create')
        with get_db_session() as db:
            repo = TicketRepository(db)
            if user['role'] == 'admin':
                ticket = repo.create_ticket(data, created_by=user)
            else:
                ticket = repo.create_customer_ticket(data, user)
        return ok(
            {'ticket': ticket}, 201, '¡Ticket Enviado!',
            'Hemos recibido su ticket de soporte y nos pondremos en contacto en breve.'
        )
    except Exception as e:
        return api_error(e, "creating ticket")


@tickets_bp.route('/api/tickets/mine', methods=['GET'])
@login_required
def my_tickets():
    """Tickets of the logged-in customer, newest first"""
    try:
        user = get_current_user()
        if not user:
            return forbidden('list')
        with get_db_session() as db:
            tickets = TicketRepository(db).list_user_tickets(user['id'])
        return ok({'tickets': tickets, 'count': len(tickets)})
    except Exception as e:
        return api_error(e, "listing my tickets")


@tickets_bp.route('/api/tickets', methods=['GET'])
@admin_required
def list_tickets():
    try:
        page, per_page = get_pagination_args()
        with get_db_session() as db:
            result = TicketRepository(db).list_tickets(
                status=request.args.get('status'),
                urgency=request.args.get('urgency'),
                service_type=request.args.get('service_type'),
                search=request.args.get('search'),
                page=page,
                per_page=per_page,
                updated_since=get_updated_since()
            )
        return ok(result)
    except Exception as e:
        return api_error(e, "listing tickets")


@tickets_bp.route('/api/tickets/<ticket_id>', methods=['GET'])
@login_required
def get_ticket(ticket_id):
    """Ticket detail for its owner or an admin"""
    try:
        with get_db_session() as db:
            ticket = TicketRepository(db).get_ticket(ticket_id)
        if not ticket:
            return not_found(NOT_FOUND)
        user = get_current_user()
        if not is_admin() and (not user or ticket['user_id'] != user['id']):
            return forbidden('get')
        return ok({'ticket': ticket})
    except Exception as e:
        return api_error(e, f"getting ticket {ticket_id}")


@tickets_bp.route('/api/tickets/<ticket_id>', methods=['PUT', 'PATCH'])
@admin_required
def update_ticket(ticket_id):
    try:
        data = get_json_body()
        with get_db_session() as db:
            ticket = TicketRepository(db).update_ticket(ticket_id, data)
        if not ticket:
            return not_found(NOT_FOUND)
        return ok(
            {'ticket': ticket}, title='Ticket actualizado',
            description=f"El ticket {ticket['display_number']} fue actualizado."
        )
    except Exception as e:
        return api_error(e, f"updating ticket {ticket_id}")


@tickets_bp.route('/api/tickets/<ticket_id>/status', methods=['PATCH', 'PUT'])
@admin_required
def update_ticket_status(ticket_id):
    try:
        data = get_json_body()
        with get_db_session() as db:
            ticket = TicketRepository(db).update_status(ticket_id, data.get('status'))
        if not ticket:
            return not_found(NOT_FOUND)
        return ok(
            {'ticket': ticket}, title='Estado Actualizado',
            description=f"El ticket ha sido marcado como {ticket['status']}."
        )
    except Exception as e:
        return api_error(e, f"updating ticket status {ticket_id}")


@tickets_bp.route('/api/tickets/<ticket_id>', methods=['DELETE'])
@admin_required
def delete_ticket(ticket_id):
    try:
        with get_db_session() as db:
            deleted = TicketRepository(db).delete_ticket(ticket_id)
        if not deleted:
            return not_found(NOT_FOUND)
        return ok(title='Ticket eliminado', description='El ticket fue eliminado.')
    except Exception as e:
        return api_error(e, f"deleting ticket {ticket_id}")


@tickets_bp.route('/api/tickets/<ticket_id>/service-order.pdf', methods=['GET'])
@admin_required
def download_service_order(ticket_id):
    """Download the service order as ORD-TK-0001.pdf"""
    try:
        with get_db_session() as db:
            ticket = TicketRepository(db).get_ticket(ticket_id)
        if not ticket:
            return not_found(NOT_FOUND)
        content = build_service_order_pdf(ticket, company_profile())
        logger.info(f"Generated service order for ticket {ticket['display_number']}")
        return pdf_response(content, service_order_filename(ticket))
    except Exception as e:
        return api_error(e, f"generating service order for ticket {ticket_id}")
