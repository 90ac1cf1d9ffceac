"""
Logging for Lebaref CRM.

Three rotating files under LOG_DIR:
    app.log          everything at LOG_LEVEL and above
    errors.log       ERROR and above, for the on-call check
    permissions.log  denied requests reported through the permission-error relay
"""
import logging
import logging.handlers
from pathlib import Path

PERMISSIONS_LOGGER = 'lebaref.permissions'

# Libraries that are chatty at INFO/DEBUG
QUIET_LOGGERS = {
    'werkzeug': logging.WARNING,
    'sqlalchemy.engine': logging.WARNING,
    'reportlab': logging.WARNING,
    'flask_cors': logging.WARNING,
    'alembic': logging.INFO,
}


def _rotating_handler(path, level, formatter, max_bytes, backup_count):
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count, encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(formatter)
    return handler


def _reset(logger):
    """Close the file handlers a previous app instance attached."""
    for handler in list(logger.handlers):
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            handler.close()
    logger.handlers = []


def setup_logging(app):
    """
    Configure the root logger and the permissions audit logger.

    Args:
        app: Flask application instance

    Returns:
        The root logger
    """
    config = app.config
    log_level = getattr(logging, config['LOG_LEVEL'].upper(), logging.INFO)
    formatter = logging.Formatter(config['LOG_FORMAT'])
    max_bytes = config.get('LOG_MAX_BYTES', 10 * 1024 * 1024)
    backup_count = config.get('LOG_BACKUP_COUNT', 5)

    log_dir = Path(config.get('LOG_DIR', 'logs'))
    log_dir.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    _reset(root_logger)

    console = logging.StreamHandler()
    console.setLevel(log_level)
    console.setFormatter(formatter)
    root_logger.addHandler(console)
    root_logger.addHandler(_rotating_handler(
        log_dir / config['LOG_FILE'], log_level, formatter, max_bytes, backup_count
    ))
    root_logger.addHandler(_rotating_handler(
        log_dir / config.get('ERROR_LOG_FILE', 'errors.log'), logging.ERROR,
        formatter, max_bytes, backup_count
    ))

    # Denials also reach app.log through propagation
    permissions = logging.getLogger(PERMISSIONS_LOGGER)
    _reset(permissions)
    permissions.setLevel(logging.INFO)
    permissions.addHandler(_rotating_handler(
        log_dir / config.get('PERMISSIONS_LOG_FILE', 'permissions.log'), logging.INFO,
        formatter, max_bytes, backup_count
    ))

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)

    app.logger.info(f"Logging initialized at {logging.getLevelName(log_level)} level in {log_dir}")
    return root_logger
