"""
Tests for printable documents
"""
import pytest
from services.pdf_service import (
    build_quote_pdf,
    build_purchase_order_pdf,
    build_service_order_pdf,
    quote_filename,
    purchase_order_filename,
    service_order_filename
)


@pytest.fixture
def quote_dict():
    return {
        'display_number': 'COT-0003',
        'client_name': 'Restaurante El Faisán & Hijos',
        'client_address': 'Calle 47 No. 300\nCentro',
        'client_phone': '9990001122',
        'rfc': None,
        'date': '2026-03-01',
        'expiration_date': '2026-03-16',
        'items': [{'description': 'Cambio de termopar <gas>', 'unit': 'PZA', 'quantity': 2, 'price': 350.0}],
        'iva': 16.0,
        'subtotal': 700.0,
        'iva_amount': 112.0,
        'total': 812.0,
        'policies': 'Validez de 15 días.',
        'observations': None,
        'payment_terms': '50% anticipo',
        'service_kind': 'correctivo',
    }


@pytest.fixture
def order_dict():
    return {
        'display_number': 'OC01-0001',
        'supplier_details': 'Refacciones del Sureste\nRFC: RSU990101XYZ',
        'bill_to_details': 'Attn: Lebaref',
        'date': '2026-03-02',
        'delivery_date': None,
        'items': [{'description': 'Termostato (Robertshaw)', 'unit': 'PZA', 'quantity': 4, 'price': 250.0}],
        'discount_percentage': 10.0,
        'iva': 16.0,
        'subtotal': 1000.0,
        'discount_amount': 100.0,
        'iva_amount': 144.0,
        'total': 1044.0,
        'quote_display_number': 'COT-0003',
    }


@pytest.fixture
def ticket_dict():
    return {
        'display_number': 'TK-0001',
        'service_type': 'correctivo',
        'equipment_type': 'Refrigerador vertical',
        'description': 'No enfría y hace ruido en el compresor.',
        'urgency': 'alta',
        'status': 'Recibido',
        'client_name': None,
        'user_email': 'cliente@example.com',
        'price': None,
        'created_at': '2026-03-05T14:30:00',
    }


@pytest.mark.unit
class TestFilenames:
    """Tests for download names"""

    def test_quote_filename(self, quote_dict):
        """Test COT-0003.pdf"""
        assert quote_filename(quote_dict) == 'COT-0003.pdf'

    def test_purchase_order_filename(self, order_dict):
        """Test OC01-0001.pdf"""
        assert purchase_order_filename(order_dict) == 'OC01-0001.pdf'

    def test_service_order_filename(self, ticket_dict):
        """Test ORD-TK-0001.pdf"""
        assert service_order_filename(ticket_dict) == 'ORD-TK-0001.pdf'


@pytest.mark.unit
class TestBuilders:
    """Tests that each document renders to a PDF"""

    def test_quote_pdf(self, quote_dict):
        """Test a quote with markup characters in its text"""
        pdf = build_quote_pdf(quote_dict)
        assert pdf.startswith(b'%PDF')

    def test_purchase_order_pdf(self, order_dict):
        """Test a discounted purchase order"""
        pdf = build_purchase_order_pdf(order_dict, {'COMPANY_NAME': 'LEBAREF'})
        assert pdf.startswith(b'%PDF')

    def test_service_order_pdf(self, ticket_dict):
        """Test a ticket without client data or price"""
        pdf = build_service_order_pdf(ticket_dict)
        assert pdf.startswith(b'%PDF')
