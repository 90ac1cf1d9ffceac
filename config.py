"""
Centralized Configuration for the Lebaref CRM Application
Manages environment-specific settings, secrets, company profile and document defaults.
"""
import os
from datetime import timedelta


class StoragePolicyError(RuntimeError):
    """Raised when the configured storage does not satisfy the environment policy"""


def normalize_database_url(url):
    """Render/Heroku style postgres:// URLs are not accepted by SQLAlchemy"""
    if url and url.startswith('postgres://'):
        return url.replace('postgres://', 'postgresql://', 1)
    return url


class Config:
    """Base configuration with defaults"""

    # Flask Settings
    SECRET_KEY = os.environ.get('SECRET_KEY') or os.urandom(32).hex()
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB max request body

    # CORS Settings
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*').split(',')
    CORS_METHODS = ['GET', 'POST', 'PUT', 'PATCH', 'DELETE', 'OPTIONS']
    CORS_ALLOW_HEADERS = ['Content-Type', 'Authorization', 'X-Requested-With']

    # Database Settings
    BASE_DIR = os.path.dirname(os.path.abspath(__file__))
    DATABASE_URL = normalize_database_url(
        os.environ.get('DATABASE_URL', 'sqlite:///' + os.path.join(BASE_DIR, 'lebaref.db'))
    )
    DATABASE_ECHO = False
    DATABASE_POOL_SIZE = int(os.environ.get('DATABASE_POOL_SIZE', '5'))
    DATABASE_MAX_OVERFLOW = int(os.environ.get('DATABASE_MAX_OVERFLOW', '10'))
    AUTO_CREATE_TABLES = os.environ.get('AUTO_CREATE_TABLES', 'true').lower() == 'true'

    # Logging Configuration
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    LOG_FILE = os.environ.get('LOG_FILE', 'app.log')
    LOG_DIR = os.environ.get('LOG_DIR', 'logs')
    ERROR_LOG_FILE = 'errors.log'
    PERMISSIONS_LOG_FILE = 'permissions.log'
    LOG_MAX_BYTES = 10 * 1024 * 1024
    LOG_BACKUP_COUNT = 5

    # Session Configuration
    SESSION_PERMANENT = False
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)

    # Company profile (printed on quotes, purchase orders and service orders)
    COMPANY_NAME = 'LEBAREF'
    COMPANY_LEGAL_NAME = 'Servicio Técnico, Industrial y Comercial de Gastronomía S.A. De C.V.'
    COMPANY_CITY = 'Mérida'
    COMPANY_CONTACT_EMAILS = ['lebarefmantenimiento@gmail.com', 'corporativo@lebaref.com']
    BILL_TO_DEFAULT = (
        "Attn: Lebaref\n"
        "LEBAREF SERVICIO DE MANTENIMIENTO GENERAL S.A. DE C.V.\n"
        "CALLE 55C NO.851 ENTRE 100 A Y 104, FRACCIONAMIENTO LAS AMERICAS C.P. 97302, MERIDA YUCATAN\n"
        "990 101 02 21\n"
        "lebarefmantenimiento@gmail.com"
    )

    # Document defaults
    DEFAULT_IVA = 16
    QUOTE_VALIDITY_DAYS = 15
    DEFAULT_QUOTE_POLICIES = (
        'Esta cotización tiene una validez de 15 días a partir de la fecha de emisión. '
        'Los precios no incluyen IVA. El tiempo de entrega puede variar.'
    )
    DEFAULT_PAYMENT_METHOD = 'CRÉDITO'
    DEFAULT_UNIT = 'PZA'

    # Bootstrap administrator (created when no admin exists)
    ADMIN_EMAIL = os.environ.get('ADMIN_EMAIL', 'admin@lebaref.com')
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD')
    ADMIN_DISPLAY_NAME = os.environ.get('ADMIN_DISPLAY_NAME', 'Administrador')

    # Load the starter service catalog on first start
    SEED_CATALOG = os.environ.get('SEED_CATALOG', 'true').lower() == 'true'

    # Pagination
    DEFAULT_PER_PAGE = 50
    MAX_PER_PAGE = 200


class DevelopmentConfig(Config):
    """Development-specific configuration"""
    DEBUG = True
    TESTING = False
    LOG_LEVEL = 'DEBUG'
    # Allow all CORS in development
    CORS_ORIGINS = ['*']
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD', 'lebaref123')


class ProductionConfig(Config):
    """Production-specific configuration"""
    DEBUG = False
    TESTING = False
    # Strict CORS in production
    CORS_ORIGINS = os.environ.get('CORS_ORIGINS', 'https://lebaref.com').split(',')
    # Production must point at a real database server
    DATABASE_URL = normalize_database_url(os.environ.get('DATABASE_URL'))
    # Force HTTPS
    PREFERRED_URL_SCHEME = 'https'
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'


class TestingConfig(Config):
    """Testing-specific configuration"""
    DEBUG = True
    TESTING = True
    SECRET_KEY = 'testing-secret-key-with-enough-length-0123456789'
    DATABASE_URL = 'sqlite://'
    LOG_LEVEL = 'WARNING'
    SEED_CATALOG = False
    ADMIN_EMAIL = 'admin@lebaref.com'
    ADMIN_PASSWORD = 'admin-password'


# Configuration selector
config_by_name = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig,
}


def get_config():
    """Get configuration based on FLASK_ENV environment variable"""
    env = os.environ.get('FLASK_ENV', 'development')
    return config_by_name.get(env, DevelopmentConfig)


def is_production(config=None):
    """Check whether the given (or environment-selected) configuration is production"""
    config = config or get_config()
    return not getattr(config, 'DEBUG', False) and not getattr(config, 'TESTING', False)


def validate_storage_config(config):
    """
    Validate that the configured database fits the environment.

    Production requires DATABASE_URL; development and testing fall back to SQLite.

    Raises:
        StoragePolicyError: If production runs without DATABASE_URL
    """
    url = config.get('DATABASE_URL') if isinstance(config, dict) else getattr(config, 'DATABASE_URL', None)
    production = (
        not config.get('DEBUG') and not config.get('TESTING')
        if isinstance(config, dict) else is_production(config)
    )
    if production and not url:
        raise StoragePolicyError(
            "DATABASE_URL must be configured in production."
        )
    return url
