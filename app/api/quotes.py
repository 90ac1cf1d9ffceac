"""
Quotes Routes Blueprint

- /api/quotes: Quote management (admin only), folios from the quotes counter
- /api/quotes/<id>/status: Status transitions
- /api/quotes/<id>/convert-to-ticket: Open a service ticket from an accepted quote
- /api/quotes/<id>/pdf: PDF download
- /api/quotes/request: Quote request from the public site (logged-in visitors)
"""

import logging
from flask import Blueprint, current_app, request

from auth import admin_required, login_required, get_current_user_id
from database.connection import get_db_session
from services.quote_repository import QuoteRepository
from services.pdf_service import build_quote_pdf, quote_filename
from app.api.responses import ok, not_found, api_error, pdf_response, company_profile
from app.utils.helpers import get_json_body, get_pagination_args, get_updated_since

logger = logging.getLogger(__name__)

quotes_bp = Blueprint('quotes_bp', __name__)

NOT_FOUND = 'Cotización no encontrada.'


def _repository(db):
    return QuoteRepository(db, current_app.config, get_current_user_id())


@quotes_bp.route('/api/quotes', methods=['GET'])
@admin_required
def list_quotes():
    """List quotes, highest folio first"""
    try:
        page, per_page = get_pagination_args()
        with get_db_session() as db:
            result = _repository(db).list_quotes(
                search=request.args.get('search'),
                status=request.args.get('status'),
                client_id=request.args.get('client_id'),
                page=page,
                per_page=per_page,
                updated_since=get_updated_since()
            )
        return ok(result)
    except Exception as e:
        return api_error(e, "listing quotes")


@quotes_bp.route('/api/quotes', methods=['POST'])
@admin_required
def create_quote():
    """Create a quote with the next folio"""
    try:
        data = get_json_body()
        with get_db_session() as db:
            quote = _repository(db).create_quote(data)
        return ok(
            {'quote': quote}, 201, 'Cotización creada',
            f"La cotización {quote['display_number']} fue guardada."
        )
    except Exception as e:
        return api_error(e, "creating quote")


@quotes_bp.route('/api/quotes/request', methods=['POST'])
@login_required
def request_quote():
    """Quote request submitted from the public quote page"""
    try:
        data = get_json_body()
        with get_db_session() as db:
            quote = _repository(db).submit_request(data)
        return ok(
            {'quote': quote}, 201, 'Solicitud enviada',
            f"Recibimos su solicitud {quote['display_number']}. Le contactaremos pronto."
        )
    except Exception as e:
        return api_error(e, "requesting quote")


@quotes_bp.route('/api/quotes/<quote_id>', methods=['GET'])
@admin_required
def get_quote(quote_id):
    try:
        with get_db_session() as db:
            quote = _repository(db).get_quote(quote_id)
        if not quote:
            return not_found(NOT_FOUND)
        return ok({'quote': quote})
    except Exception as e:
        return api_error(e, f"getting quote {quote_id}")


@quotes_bp.route('/api/quotes/<quote_id>', methods=['PUT', 'PATCH'])
@admin_required
def update_quote(quote_id):
    """Update a quote; totals are recomputed and the folio is kept"""
    try:
        data = get_json_body()
        with get_db_session() as db:
            quote = _repository(db).update_quote(quote_id, data)
        if not quote:
            return not_found(NOT_FOUND)
        return ok(
            {'quote': quote}, title='Cotización actualizada',
            description=f"La cotización {quote['display_number']} fue actualizada."
        )
    except Exception as e:
        return api_error(e, f"updating quote {quote_id}")


@quotes_bp.route('/api/quotes/<quote_id>/status', methods=['PATCH', 'PUT'])
@admin_required
def update_quote_status(quote_id):
    try:
        data = get_json_body()
        with get_db_session() as db:
            quote = _repository(db).update_status(quote_id, data.get('status'))
        if not quote:
            return not_found(NOT_FOUND)
        return ok(
            {'quote': quote}, title='Estado actualizado',
            description=f"{quote['display_number']}: {quote['status']}"
        )
    except Exception as e:
        return api_error(e, f"updating quote status {quote_id}")


@quotes_bp.route('/api/quotes/<quote_id>', methods=['DELETE'])
@admin_required
def delete_quote(quote_id):
    try:
        with get_db_session() as db:
            deleted = _repository(db).delete_quote(quote_id)
        if not deleted:
            return not_found(NOT_FOUND)
        return ok(title='Cotización eliminada', description='La cotización fue eliminada.')
    except Exception as e:
        return api_error(e, f"deleting quote {quote_id}")


@quotes_bp.route('/api/quotes/<quote_id>/convert-to-ticket', methods=['POST'])
@admin_required
def convert_quote_to_ticket(quote_id):
    """Open a service ticket from an accepted quote (once per quote)"""
    try:
        with get_db_session() as db:
            result = _repository(db).convert_to_ticket(quote_id)
        if not result:
            return not_found(NOT_FOUND)
        return ok(
            result, 201, 'Ticket creado',
            f"Se generó el ticket {result['ticket']['display_number']} "
            f"desde la cotización {result['quote']['display_number']}."
        )
    except Exception as e:
        return api_error(e, f"converting quote {quote_id}")


@quotes_bp.route('/api/quotes/<quote_id>/pdf', methods=['GET'])
@admin_required
def download_quote_pdf(quote_id):
    """Download the quote as COT-0001.pdf"""
    try:
        with get_db_session() as db:
            quote = _repository(db).get_quote(quote_id)
        if not quote:
            return not_found(NOT_FOUND)
        content = build_quote_pdf(quote, company_profile())
        logger.info(f"Generated PDF for quote {quote['display_number']}")
        return pdf_response(content, quote_filename(quote))
    except Exception as e:
        return api_error(e, f"generating PDF for quote {quote_id}")
