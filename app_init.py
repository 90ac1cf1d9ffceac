"""
Application Initialization Module
Properly initializes Flask app with all infrastructure components
"""
import os
from flask import Flask
from config import get_config, validate_storage_config
from logging_config import setup_logging
from security import setup_security
from health_checks import register_health_checks
from database.connection import init_engine, init_db
from database.seed import seed_database
import logging

logger = logging.getLogger(__name__)


def create_app(config_class=None):
    """
    Application factory that creates and configures Flask app with all infrastructure

    Args:
        config_class: Configuration class; selected from FLASK_ENV when omitted

    Returns:
        Configured Flask application instance
    """
    # Create Flask app
    app = Flask(__name__)

    # Load configuration
    app.config.from_object(config_class or get_config())

    # Fail fast in production without a database
    validate_storage_config(app.config)

    setup_logging(app)

    logger.info("=" * 60)
    logger.info("Initializing Lebaref CRM")
    logger.info("=" * 60)
    logger.info(f"Environment: {os.environ.get('FLASK_ENV', 'development')}")
    logger.info(f"Debug mode: {app.debug}")

    # Setup security (CORS, headers, error handlers, permission-error listener)
    setup_security(app, app.config)

    initialize_database(app)

    # Imported here so blueprint modules load after logging is configured
    from app import register_blueprints
    register_blueprints(app)

    # Register health check endpoints
    register_health_checks(app)

    logger.info("Application initialization complete")
    logger.info("=" * 60)

    return app


def initialize_database(app):
    """
    Bind the engine, create missing tables and seed defaults

    Args:
        app: Flask application instance
    """
    init_engine(
        app.config['DATABASE_URL'],
        echo=app.config.get('DATABASE_ECHO', False),
        pool_size=app.config.get('DATABASE_POOL_SIZE', 5),
        max_overflow=app.config.get('DATABASE_MAX_OVERFLOW', 10)
    )

    if app.config.get('AUTO_CREATE_TABLES', True):
        init_db()

    seed_database(app.config, include_catalog=app.config.get('SEED_CATALOG', True))
