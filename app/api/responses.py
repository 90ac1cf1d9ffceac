"""
Shared JSON response helpers for the API blueprints.
"""

import io
import logging
from flask import jsonify, current_app, send_file

from security import (
    sanitize_error_response, permission_denied_response, report_permission_error
)
from services.errors import CRMError, PermissionDeniedError
from services.error_emitter import error_emitter, PERMISSION_ERROR
from validators import ValidationError, format_validation_error
from app.utils.helpers import notification

logger = logging.getLogger(__name__)

ERROR_TITLE = 'Error'


def ok(payload=None, status=200, title=None, description=None):
    """Success response, with a toast when title is given."""
    body = {'success': True}
    body.update(payload or {})
    if title:
        body['notification'] = notification(title, description or '')
    return jsonify(body), status


def not_found(message='Registro no encontrado.'):
    return jsonify({
        'success': False,
        'error': 'Not Found',
        'message': message,
        'notification': notification(ERROR_TITLE, message, 'destructive')
    }), 404


def api_error(e, action):
    """
    Translate an exception raised while handling a request into a JSON response.

    Args:
        e: The exception
        action: Short description for the log line ("creating quote")
    """
    if isinstance(e, ValidationError):
        body = format_validation_error(e.field, e.message)
        body['notification'] = notification(ERROR_TITLE, e.message, 'destructive')
        return jsonify(body), 400

    if isinstance(e, PermissionDeniedError):
        error_emitter.emit(PERMISSION_ERROR, e)
        return permission_denied_response(e)

    if isinstance(e, CRMError):
        logger.info(f"Rejected {action}: {e.message}")
        return jsonify({
            'success': False,
            'error': e.message,
            'field': e.field,
            'notification': notification(ERROR_TITLE, e.message, 'destructive')
        }), e.status_code

    logger.error(f"Error {action}: {str(e)}", exc_info=True)
    body = sanitize_error_response(e, current_app.debug)
    body['notification'] = notification(
        ERROR_TITLE, 'Ocurrió un error al procesar la solicitud.', 'destructive'
    )
    return jsonify(body), 500


def pdf_response(content, filename):
    """Send generated PDF bytes as a download."""
    return send_file(
        io.BytesIO(content),
        mimetype='application/pdf',
        as_attachment=True,
        download_name=filename
    )


def company_profile():
    """Company block used by the PDF builders."""
    return {
        key: current_app.config[key]
        for key in ('COMPANY_NAME', 'COMPANY_LEGAL_NAME', 'COMPANY_CITY', 'COMPANY_CONTACT_EMAILS')
        if key in current_app.config
    }


def forbidden(operation=None):
    """Deny the current request through the permission-error relay."""
    return permission_denied_response(report_permission_error(operation=operation))
