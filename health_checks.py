"""
Health Check Endpoints

/health and /ready are for the load balancer; /api/health is the detailed
view used from the back office: schema status, the last folio of each
document counter and process metrics.
"""
import os
import time
import psutil
from datetime import datetime
from typing import Dict, Any
from flask import Blueprint, jsonify
from sqlalchemy import inspect
import logging

from database.connection import Base, check_db_connection, get_db_session, get_engine
from database.models import Quote, PurchaseOrder, Ticket
from services.counters import current_number, format_document_number, QUOTES, PURCHASE_ORDERS, TICKETS

logger = logging.getLogger(__name__)

SERVICE_NAME = 'lebaref-crm'
VERSION = '1.0.0'

# counter name -> folio prefix of the document it numbers
DOCUMENT_COUNTERS = {
    QUOTES: Quote.NUMBER_PREFIX,
    PURCHASE_ORDERS: PurchaseOrder.NUMBER_PREFIX,
    TICKETS: Ticket.NUMBER_PREFIX,
}

health_bp = Blueprint('health', __name__)

START_TIME = time.time()


def get_system_metrics() -> Dict[str, Any]:
    """Memory and thread usage of the worker process (empty when psutil fails)."""
    try:
        process = psutil.Process()
        return {
            'cpu_percent': process.cpu_percent(interval=0.1),
            'memory_mb': round(process.memory_info().rss / 1024 / 1024, 2),
            'memory_percent': round(process.memory_percent(), 2),
            'threads': process.num_threads(),
        }
    except Exception as e:
        logger.warning(f"Failed to get system metrics: {e}")
        return {}


def get_uptime() -> Dict[str, Any]:
    uptime_seconds = time.time() - START_TIME
    return {
        'uptime_seconds': round(uptime_seconds, 2),
        'started_at': datetime.fromtimestamp(START_TIME).isoformat()
    }


def check_database() -> Dict[str, Any]:
    """
    Connect and verify that every CRM table exists.

    Returns:
        Dictionary with 'healthy' and, on failure, 'error' or 'missing_tables'
    """
    try:
        check_db_connection()
    except RuntimeError as e:
        logger.error(f"Database check failed: {e}")
        return {'healthy': False, 'error': str(e)}

    existing = set(inspect(get_engine()).get_table_names())
    missing = sorted(set(Base.metadata.tables) - existing)
    if missing:
        logger.error(f"Database schema incomplete, missing tables: {missing}")
        return {'healthy': False, 'missing_tables': missing}
    return {'healthy': True, 'tables': len(existing & set(Base.metadata.tables))}


def get_document_counters() -> Dict[str, Any]:
    """Last folio handed out per document type, e.g. {'quotes': 'COT-0012'}."""
    counters = {}
    with get_db_session() as db:
        for name, prefix in DOCUMENT_COUNTERS.items():
            last = current_number(db, name)
            counters[name] = format_document_number(prefix, last) if last else None
    return counters


@health_bp.route('/health', methods=['GET'])
def health_check():
    """Detailed health: returns 503 when the database or schema is not usable."""
    database = check_database()
    response = {
        'status': 'healthy' if database['healthy'] else 'degraded',
        'timestamp': datetime.utcnow().isoformat(),
        'service': SERVICE_NAME,
        'version': VERSION,
        'environment': os.environ.get('FLASK_ENV', 'development'),
        'uptime': get_uptime(),
        'system': get_system_metrics(),
        'database': database,
    }
    if database['healthy']:
        response['counters'] = get_document_counters()
    return jsonify(response), 200 if database['healthy'] else 503


@health_bp.route('/ping', methods=['GET'])
def ping():
    return 'pong', 200


def liveness_check():
    """200 while the process serves requests; never touches the database."""
    return jsonify({
        'status': 'healthy',
        'timestamp': datetime.utcnow().isoformat(),
        'service': SERVICE_NAME
    }), 200


def readiness_check():
    database = check_database()
    is_ready = database['healthy']
    return jsonify({
        'status': 'ready' if is_ready else 'not_ready',
        'timestamp': datetime.utcnow().isoformat(),
        'checks': {'database': database}
    }), 200 if is_ready else 503


def register_health_checks(app):
    """
    Register health check endpoints with Flask app

    Args:
        app: Flask application instance
    """
    app.register_blueprint(health_bp, url_prefix='/api')
    app.add_url_rule('/health', 'liveness', liveness_check, methods=['GET'])
    app.add_url_rule('/ready', 'readiness', readiness_check, methods=['GET'])
    logger.info("Health check endpoints registered: /health, /ready, /api/health, /api/ping")
