"""
Lebaref CRM - Application Package

This package contains the modular backend structure:
- api/: HTTP route handlers (Flask Blueprints)
- utils/: Shared request helpers and static site content

The app factory and core Flask setup remain in app_init.py at the project root.
Business logic and persistence live in the top-level services/ and database/ packages.
"""

import logging

logger = logging.getLogger(__name__)

# Import blueprints
from app.api.pages import pages_bp
from app.api.auth_routes import auth_bp
from app.api.crm import crm_bp
from app.api.catalog import catalog_bp
from app.api.quotes import quotes_bp
from app.api.purchase_orders import purchase_orders_bp
from app.api.tickets import tickets_bp
from app.api.projects import projects_bp
from app.api.dashboard import dashboard_bp

BLUEPRINTS = [
    pages_bp,
    auth_bp,
    crm_bp,
    catalog_bp,
    quotes_bp,
    purchase_orders_bp,
    tickets_bp,
    projects_bp,
    dashboard_bp,
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.
    Called from app_init.create_app after infrastructure setup.

    Args:
        app: Flask application instance
    """
    for blueprint in BLUEPRINTS:
        app.register_blueprint(blueprint)
    logger.info(f"Registered {len(BLUEPRINTS)} blueprints")


__all__ = [
    'register_blueprints', 'BLUEPRINTS', 'pages_bp', 'auth_bp', 'crm_bp', 'catalog_bp',
    'quotes_bp', 'purchase_orders_bp', 'tickets_bp', 'projects_bp', 'dashboard_bp'
]
