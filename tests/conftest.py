"""
Pytest configuration and shared fixtures
"""
import sys
import pytest
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

ADMIN_EMAIL = 'admin@lebaref.com'
ADMIN_PASSWORD = 'admin-password'
CUSTOMER_EMAIL = 'cliente@example.com'
CUSTOMER_PASSWORD = 'cliente123'


@pytest.fixture
def app_config():
    """Fixture providing test configuration"""
    from config import TestingConfig
    return TestingConfig


@pytest.fixture
def app(app_config, tmp_path):
    """Flask app on a fresh in-memory SQLite database with the bootstrap admin"""
    from app_init import create_app

    class Config(app_config):
        LOG_DIR = str(tmp_path / 'logs')

    return create_app(Config)


@pytest.fixture
def client(app):
    """Anonymous test client"""
    return app.test_client()


@pytest.fixture
def db_session(app):
    """Session bound to the app's database; committed on exit"""
    from database.connection import get_db_session
    with get_db_session() as session:
        yield session


@pytest.fixture
def admin_client(app):
    """Test client logged in as the bootstrap admin"""
    test_client = app.test_client()
    response = test_client.post('/api/auth/login', json={
        'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD
    })
    assert response.status_code == 200
    return test_client


@pytest.fixture
def customer_client(app):
    """Test client signed up and logged in as a customer"""
    test_client = app.test_client()
    response = test_client.post('/api/auth/signup', json={
        'email': CUSTOMER_EMAIL, 'password': CUSTOMER_PASSWORD, 'display_name': 'Restaurante La Paz'
    })
    assert response.status_code == 201
    return test_client


@pytest.fixture
def client_payload():
    """Fixture providing a valid client"""
    return {
        'name': 'Hotel Gran Mérida',
        'phone': '999 123 4567',
        'email': 'compras@granmerida.mx',
        'address': 'Calle 60 No. 500, Centro, Mérida',
        'rfc': 'hgm010101abc'
    }


@pytest.fixture
def supplier_payload():
    """Fixture providing a valid supplier"""
    return {
        'name': 'Refacciones del Sureste',
        'contact_person': 'Laura Pech',
        'phone': '9991112233',
        'email': 'ventas@refasureste.mx',
        'address': 'Periférico Norte Km 4, Mérida',
        'rfc': 'RSU990101XYZ'
    }


@pytest.fixture
def service_payload():
    """Fixture providing a valid catalog service"""
    return {
        'title': 'Reparación de Marmitas',
        'sku': 'corr-mar-01',
        'price': 1100,
        'description': 'Diagnóstico y reparación de marmitas de gas y eléctricas.',
        'service_type': 'correctivo'
    }


@pytest.fixture
def spare_part_payload():
    """Fixture providing a valid spare part"""
    return {
        'name': 'Termostato',
        'brand': 'Robertshaw',
        'sku': 'TER-RS-200',
        'price': 450.5,
        'description': 'Termostato para freidora de gas.'
    }


@pytest.fixture
def quote_payload():
    """Fixture providing a valid quote with two lines"""
    return {
        'client_name': 'Restaurante El Faisán',
        'client_phone': '9990001122',
        'client_address': 'Calle 47 No. 300',
        'date': '2026-03-01',
        'items': [
            {'description': 'Cambio de termopar', 'quantity': 2, 'price': 350},
            {'description': 'Mano de obra', 'quantity': 1, 'price': 800, 'unit': 'SERV'}
        ],
        'service_kind': 'correctivo',
        'equipment_location': 'Estufa de 6 quemadores'
    }


@pytest.fixture
def purchase_order_payload():
    """Fixture providing a valid purchase order with a 10% discount"""
    return {
        'supplier_name': 'Refacciones del Sureste',
        'supplier_details': 'Refacciones del Sureste\nRFC: RSU990101XYZ',
        'date': '2026-03-02',
        'items': [
            {'description': 'Termostato (Robertshaw)', 'quantity': 4, 'price': 250}
        ],
        'discount_percentage': 10,
        'shipping_method': 'Paquetería'
    }


@pytest.fixture
def ticket_payload():
    """Fixture providing a valid customer ticket"""
    return {
        'service_type': 'correctivo',
        'equipment_type': 'Refrigerador vertical',
        'description': 'El refrigerador no enfría y hace un ruido constante en el compresor.',
        'urgency': 'alta'
    }


@pytest.fixture
def project_payload():
    """Fixture providing a valid project"""
    return {
        'client': 'Hotel Gran Mérida',
        'description': 'Mantenimiento preventivo de la cocina principal.',
        'responsible': 'Carlos Dzib',
        'programmed_date': '2026-04-15',
        'priority': 'Alta'
    }
