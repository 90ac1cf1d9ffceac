"""
Database seeding for Lebaref CRM.
Creates the bootstrap administrator and the starter service catalog if the database is empty.
"""

import logging
from werkzeug.security import generate_password_hash
from database.connection import get_db_session
from database.models import User, Service

logger = logging.getLogger(__name__)

STARTER_SERVICES = [
    {
        'title': 'Diagnóstico y Reparación de Estufas',
        'sku': 'CORR-EST-01',
        'price': 800.0,
        'service_type': 'correctivo',
        'description': 'Servicio completo para identificar y reparar cualquier tipo de falla '
                       'en estufas industriales y comerciales.',
    },
    {
        'title': 'Reparación Urgente de Sistemas de Refrigeración',
        'sku': 'CORR-REF-01',
        'price': 1200.0,
        'service_type': 'correctivo',
        'description': 'Atención prioritaria para fallas críticas en refrigeradores y congeladores '
                       'comerciales para evitar pérdidas de producto.',
    },
    {
        'title': 'Arreglo de Freidoras Industriales',
        'sku': 'CORR-FRE-01',
        'price': 950.0,
        'service_type': 'correctivo',
        'description': 'Solución a problemas de calentamiento, termostatos y componentes '
                       'eléctricos en freidoras de alto rendimiento.',
    },
    {
        'title': 'Plan de Mantenimiento Anual para Cocinas',
        'sku': 'PREV-FULL-12',
        'price': 0.0,
        'service_type': 'preventivo',
        'description': 'Paquete integral que incluye revisiones trimestrales de todos sus equipos '
                       'para garantizar su óptimo funcionamiento.',
    },
    {
        'title': 'Limpieza y Calibración de Hornos de Convección',
        'sku': 'PREV-HOR-01',
        'price': 1500.0,
        'service_type': 'preventivo',
        'description': 'Mantenimiento profundo para asegurar una cocción uniforme y eficiente, '
                       'prolongando la vida útil del horno.',
    },
    {
        'title': 'Inspección y Limpieza de Campanas de Extracción',
        'sku': 'PREV-CAM-01',
        'price': 1800.0,
        'service_type': 'preventivo',
        'description': 'Servicio esencial para la seguridad, eliminando grasa acumulada y '
                       'asegurando la correcta extracción de humos.',
    },
]


def seed_default_admin(session, email, password, display_name='Administrador'):
    """Create the bootstrap admin user if no admin exists."""
    admin = session.query(User).filter_by(role='admin').first()
    if admin:
        logger.info(f"Admin user already exists: {admin.email}")
        return admin

    if not password:
        logger.warning("No ADMIN_PASSWORD configured, skipping admin bootstrap")
        return None

    admin = User(
        email=email.lower(),
        password_hash=generate_password_hash(password, method='pbkdf2:sha256'),
        display_name=display_name,
        role='admin',
        is_active=True
    )
    session.add(admin)
    session.flush()
    logger.info(f"Created default admin user: {admin.email}")
    return admin


def seed_service_catalog(session):
    """Load the starter service catalog when the services table is empty."""
    if session.query(Service).count():
        return 0

    for data in STARTER_SERVICES:
        session.add(Service(**data))
    session.flush()
    logger.info(f"Seeded {len(STARTER_SERVICES)} catalog services")
    return len(STARTER_SERVICES)


def seed_database(config, include_catalog=True):
    """
    Seed the database with default data if empty.
    Call this at application startup.

    Args:
        config: Flask config mapping (ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_DISPLAY_NAME)
        include_catalog: Also load the starter service catalog
    """
    try:
        with get_db_session() as session:
            seed_default_admin(
                session,
                config.get('ADMIN_EMAIL'),
                config.get('ADMIN_PASSWORD'),
                config.get('ADMIN_DISPLAY_NAME', 'Administrador')
            )
            if include_catalog:
                seed_service_catalog(session)
        logger.info("Database seeding completed successfully")
        return True
    except Exception as e:
        logger.error(f"Database seeding failed: {e}")
        raise


if __name__ == '__main__':
    from config import get_config
    from database.connection import init_engine, init_db

    logging.basicConfig(level=logging.INFO)
    cfg = get_config()
    init_engine(cfg.DATABASE_URL)
    init_db()
    seed_database({k: getattr(cfg, k) for k in dir(cfg) if k.isupper()})
