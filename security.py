"""
Security Utilities & Middleware
Provides security hardening, error handlers and the permission-error relay listener
"""
import os
import secrets
from typing import Dict, Any
from flask import Flask, request, jsonify, Response, current_app, render_template, session, has_request_context
from flask_cors import CORS
import logging

from services.errors import PermissionDeniedError
from services.error_emitter import error_emitter, PERMISSION_ERROR
from logging_config import PERMISSIONS_LOGGER

logger = logging.getLogger(__name__)
permission_logger = logging.getLogger(PERMISSIONS_LOGGER)

PERMISSION_DENIED_NOTIFICATION = {
    'title': 'Error de Permisos',
    'description': 'No tienes permiso para realizar esta acción.',
    'variant': 'destructive'
}

# HTTP method -> document operation reported in permission errors
METHOD_OPERATIONS = {
    'GET': 'get',
    'POST': 'create',
    'PUT': 'update',
    'PATCH': 'update',
    'DELETE': 'delete',
}

HEALTH_PATHS = ('/health', '/ready', '/api/health', '/api/ping', '/api/ready')


class SecurityConfig:
    """Security configuration and validation"""

    @staticmethod
    def generate_secret_key() -> str:
        """
        Generate a cryptographically secure secret key

        Returns:
            Hex-encoded secret key
        """
        return secrets.token_hex(32)

    @staticmethod
    def validate_secret_key(secret_key: str) -> bool:
        """
        Validate that secret key is sufficiently secure

        Args:
            secret_key: Secret key to validate

        Returns:
            True if key is secure, False otherwise
        """
        if not secret_key:
            return False

        # Check minimum length (32 characters for 128-bit security)
        if len(secret_key) < 32:
            logger.warning("Secret key is too short (minimum 32 characters)")
            return False

        weak_keys = ['dev', 'secret', 'password', '12345', 'changeme']
        if any(weak in secret_key.lower() for weak in weak_keys):
            logger.warning("Secret key appears to be weak or default")
            return False

        return True

    @staticmethod
    def ensure_secret_key(config: Dict[str, Any]) -> str:
        """
        Ensure a secure secret key is configured

        Args:
            config: Application configuration dictionary

        Returns:
            Secure secret key
        """
        secret_key = config.get('SECRET_KEY')

        if config.get('TESTING') and secret_key:
            return secret_key

        if not secret_key or not SecurityConfig.validate_secret_key(secret_key):
            if os.environ.get('FLASK_ENV') == 'production':
                logger.error("No secure SECRET_KEY in production! Generating one...")
                logger.error("Add SECRET_KEY to environment variables so sessions survive restarts!")

            secret_key = SecurityConfig.generate_secret_key()
            logger.warning(f"Generated new secret key (length: {len(secret_key)})")

        return secret_key


def setup_security_headers(app: Flask):
    """
    Add security headers to all responses

    Args:
        app: Flask application instance
    """
    @app.after_request
    def add_security_headers(response: Response) -> Response:
        """Add security headers to response"""
        response.headers['X-Frame-Options'] = 'SAMEORIGIN'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
        response.headers['Permissions-Policy'] = 'geolocation=(), microphone=(), camera=()'

        # Strict Transport Security (HTTPS only in production)
        if not app.debug:
            response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'

        response.headers['Content-Security-Policy'] = (
            "default-src 'self'; "
            "script-src 'self' 'unsafe-inline' cdn.tailwindcss.com cdn.jsdelivr.net; "
            "style-src 'self' 'unsafe-inline' cdn.tailwindcss.com fonts.googleapis.com; "
            "font-src 'self' fonts.gstatic.com data:; "
            "img-src 'self' data: https:; "
            "connect-src 'self';"
        )
        return response

    logger.info("Security headers configured")


def setup_cors(app: Flask, config: Dict[str, Any]):
    """
    Configure CORS for the JSON API

    Args:
        app: Flask application instance
        config: Application configuration dictionary
    """
    cors_origins = config.get('CORS_ORIGINS', ['*'])
    cors_methods = config.get('CORS_METHODS', ['GET', 'POST', 'PUT', 'DELETE', 'OPTIONS'])
    cors_headers = config.get('CORS_ALLOW_HEADERS', ['Content-Type', 'Authorization'])

    if not app.debug and '*' in cors_origins:
        logger.warning("Using wildcard CORS in production! Set CORS_ORIGINS environment variable.")

    CORS(
        app,
        resources={r"/api/*": {"origins": cors_origins}},
        methods=cors_methods,
        allow_headers=cors_headers,
        supports_credentials=True,
        max_age=3600
    )

    logger.info(f"CORS configured: origins={cors_origins}")


def sanitize_error_response(error: Exception, include_details: bool = False) -> Dict[str, Any]:
    """
    Sanitize error response to prevent information leakage

    Args:
        error: Exception object
        include_details: Whether to include detailed error info (dev only)

    Returns:
        Sanitized error response dictionary
    """
    error_response = {
        'success': False,
        'error': 'Internal Server Error',
        'message': 'An error occurred while processing your request'
    }

    if include_details:
        error_response['details'] = str(error)
        error_response['type'] = type(error).__name__

    return error_response


# ============================================================================
# PERMISSION ERROR RELAY
# ============================================================================

def report_permission_error(operation: str = None, path: str = None,
                            request_resource_data: Any = None) -> PermissionDeniedError:
    """
    Build a PermissionDeniedError for the current request and publish it.

    Returns:
        The emitted error
    """
    error = PermissionDeniedError(
        path=path or request.path,
        operation=operation or METHOD_OPERATIONS.get(request.method, 'get'),
        request_resource_data=(
            request_resource_data if request_resource_data is not None
            else request.get_json(silent=True)
        )
    )
    error_emitter.emit(PERMISSION_ERROR, error)
    return error


def permission_denied_response(error: PermissionDeniedError):
    """403 JSON response carrying the permission toast."""
    body = {
        'success': False,
        'error': 'Permission denied',
        'notification': PERMISSION_DENIED_NOTIFICATION
    }
    if current_app.debug:
        body['details'] = error.to_dict()
    return jsonify(body), 403


def log_permission_error(error: PermissionDeniedError):
    """Default permission-error listener: one line per denial in permissions.log."""
    user = session.get('user_email', 'anonymous') if has_request_context() else '-'
    permission_logger.warning(
        f"Permission denied: user={user} operation={error.operation} path={error.path}"
    )


def setup_permission_error_listener(app: Flask):
    """
    Subscribe the application's listener to the permission-error relay

    Args:
        app: Flask application instance
    """
    error_emitter.on(PERMISSION_ERROR, log_permission_error)
    logger.info("Permission error listener registered")


# HTTP status -> (error, message shown in the toast)
HTTP_ERRORS = {
    400: ('Bad Request', 'La solicitud no es válida.'),
    401: ('Unauthorized', 'Debes iniciar sesión para continuar.'),
    404: ('Not Found', 'El recurso solicitado no existe.'),
    405: ('Method Not Allowed', 'Método no permitido para esta ruta.'),
    413: ('Payload Too Large', 'La solicitud excede el tamaño máximo permitido.'),
    429: ('Rate Limit Exceeded', 'Demasiadas solicitudes. Intenta más tarde.'),
    503: ('Service Unavailable', 'El servicio no está disponible en este momento.'),
}


def error_body(status: int) -> Dict[str, Any]:
    """JSON body for a generic HTTP error, with its toast"""
    error, message = HTTP_ERRORS[status]
    return {
        'success': False,
        'error': error,
        'message': message,
        'notification': {'title': 'Error', 'description': message, 'variant': 'destructive'}
    }


def setup_error_handlers(app: Flask):
    """
    Register error handlers that return JSON without stack traces

    Pages (non-API paths) get the HTML 404 page instead of JSON.

    Args:
        app: Flask application instance
    """
    include_details = app.debug

    def _wants_json():
        return request.path.startswith('/api/') or request.is_json

    def _json_handler(status):
        def handler(error):
            return jsonify(error_body(status)), status
        return handler

    for status in (400, 401, 405, 413, 429, 503):
        app.register_error_handler(status, _json_handler(status))

    @app.errorhandler(403)
    def forbidden(error):
        """Handle 403 Forbidden through the permission-error relay"""
        return permission_denied_response(report_permission_error())

    @app.errorhandler(404)
    def not_found(error):
        """Handle 404 Not Found"""
        if not _wants_json():
            return render_template('errors/404.html'), 404
        return jsonify(error_body(404)), 404

    @app.errorhandler(500)
    def internal_server_error(error):
        """Handle 500 Internal Server Error"""
        logger.error(f"Internal server error: {error}", exc_info=True)
        return jsonify(sanitize_error_response(error, include_details)), 500

    logger.info("Error handlers registered")


def setup_request_logging(app: Flask):
    """
    Setup request/response logging for security monitoring

    Args:
        app: Flask application instance
    """
    @app.before_request
    def log_request():
        """Log incoming requests"""
        if request.path in HEALTH_PATHS:
            return

        logger.info(
            f"Request: {request.method} {request.path} "
            f"from {request.remote_addr} "
            f"User-Agent: {request.user_agent.string[:100]}"
        )

    @app.after_request
    def log_response(response: Response) -> Response:
        """Log outgoing responses"""
        if request.path in HEALTH_PATHS:
            return response

        logger.info(
            f"Response: {request.method} {request.path} "
            f"status={response.status_code} "
            f"size={response.content_length}"
        )

        return response

    logger.info("Request logging configured")


def validate_environment_variables(required_vars: list, app: Flask):
    """
    Validate that required environment variables are set

    Args:
        required_vars: List of required environment variable names
        app: Flask application instance
    """
    missing_vars = []

    for var in required_vars:
        if not os.environ.get(var):
            missing_vars.append(var)
            logger.warning(f"Missing environment variable: {var}")

    if missing_vars and not app.debug:
        logger.error(f"Missing required environment variables in production: {missing_vars}")
        logger.error("Application may not function correctly!")

    return len(missing_vars) == 0


def setup_security(app: Flask, config: Dict[str, Any]):
    """
    Setup all security features for the application

    Args:
        app: Flask application instance
        config: Application configuration dictionary
    """
    logger.info("Configuring application security...")

    app.secret_key = SecurityConfig.ensure_secret_key(config)

    setup_cors(app, config)
    setup_security_headers(app)
    setup_error_handlers(app)
    setup_permission_error_listener(app)
    setup_request_logging(app)

    if not app.debug:
        validate_environment_variables(['SECRET_KEY', 'DATABASE_URL'], app)

    logger.info("Security configuration complete")
