"""
Tests for input validation utilities
"""
import pytest
from datetime import date
from validators import (
    ValidationError,
    validate_required_fields,
    validate_email,
    validate_phone,
    validate_string_length,
    validate_number_range,
    validate_choice,
    sanitize_string,
    validate_client,
    validate_supplier,
    validate_service,
    validate_spare_part,
    validate_quote,
    validate_purchase_order,
    validate_ticket,
    validate_project,
    validate_credentials,
    validate_status,
    parse_date,
)


@pytest.mark.unit
class TestRequiredFields:
    """Tests for required fields validation"""

    def test_validate_all_fields_present(self):
        """Test validation passes when all fields present"""
        is_valid, error = validate_required_fields({'name': 'Ana', 'phone': '9991234567'}, ['name', 'phone'])
        assert is_valid is True
        assert error is None

    def test_validate_empty_string_field(self):
        """Test validation fails when field is empty string"""
        is_valid, error = validate_required_fields({'name': ''}, ['name'])
        assert is_valid is False
        assert 'name' in error


@pytest.mark.unit
class TestFieldChecks:
    """Tests for the generic tuple-returning checks"""

    def test_valid_email(self):
        """Test a normal address"""
        assert validate_email('compras@hotel.mx') == (True, None)

    def test_invalid_email(self):
        """Test an address without domain"""
        is_valid, error = validate_email('compras@')
        assert is_valid is False
        assert error == 'Invalid email format'

    def test_phone_with_separators(self):
        """Test that separators are ignored"""
        assert validate_phone('(999) 123-4567')[0] is True

    def test_phone_too_short(self):
        """Test that fewer than 10 digits fail"""
        assert validate_phone('12345')[0] is False

    def test_string_length_bounds(self):
        """Test min and max length"""
        assert validate_string_length('ab', min_length=3)[0] is False
        assert validate_string_length('abcdef', max_length=5)[0] is False
        assert validate_string_length('abc', min_length=3, max_length=5)[0] is True

    def test_number_range_rejects_bool(self):
        """Test that booleans are not numbers"""
        assert validate_number_range(True)[0] is False

    def test_number_range(self):
        """Test the bounds"""
        assert validate_number_range(-1, min_value=0)[0] is False
        assert validate_number_range(101, max_value=100)[0] is False
        assert validate_number_range(50, 0, 100)[0] is True

    def test_choice(self):
        """Test that the message lists the allowed values"""
        is_valid, error = validate_choice('urgente', ('baja', 'media', 'alta'))
        assert is_valid is False
        assert 'baja, media, alta' in error

    def test_sanitize_string(self):
        """Test null bytes, whitespace and truncation"""
        assert sanitize_string('  ho\x00la  ') == 'hola'
        assert sanitize_string('abcdef', max_length=3) == 'abc'


@pytest.mark.unit
class TestRecordValidators:
    """Tests for the per-record validators"""

    def test_client_cleaned(self, client_payload):
        """Test trimming, lowercase email and uppercase RFC"""
        cleaned = validate_client({**client_payload, 'name': '  Hotel Gran Mérida '})
        assert cleaned['name'] == 'Hotel Gran Mérida'
        assert cleaned['rfc'] == 'HGM010101ABC'
        assert cleaned['email'] == 'compras@granmerida.mx'

    def test_client_requires_phone(self, client_payload):
        """Test that a client without phone is rejected"""
        client_payload.pop('phone')
        with pytest.raises(ValidationError) as exc:
            validate_client(client_payload)
        assert exc.value.field == 'phone'

    def test_client_short_name(self, client_payload):
        """Test the minimum name length"""
        with pytest.raises(ValidationError) as exc:
            validate_client({**client_payload, 'name': 'H'})
        assert exc.value.field == 'name'

    def test_supplier_keeps_contact(self, supplier_payload):
        """Test that suppliers keep the contact person"""
        assert validate_supplier(supplier_payload)['contact_person'] == 'Laura Pech'

    def test_service_sku_uppercased(self, service_payload):
        """Test the SKU is normalized"""
        assert validate_service(service_payload)['sku'] == 'CORR-MAR-01'

    def test_service_description_minimum(self, service_payload):
        """Test that short descriptions are rejected"""
        with pytest.raises(ValidationError) as exc:
            validate_service({**service_payload, 'description': 'Muy corta'})
        assert exc.value.field == 'description'

    def test_service_type_choice(self, service_payload):
        """Test that only correctivo/preventivo are accepted"""
        with pytest.raises(ValidationError) as exc:
            validate_service({**service_payload, 'service_type': 'instalacion'})
        assert exc.value.field == 'service_type'

    def test_spare_part_negative_price(self, spare_part_payload):
        """Test that prices cannot be negative"""
        with pytest.raises(ValidationError) as exc:
            validate_spare_part({**spare_part_payload, 'price': -1})
        assert exc.value.field == 'price'

    def test_quote_defaults(self, quote_payload):
        """Test status, IVA and unit defaults"""
        cleaned = validate_quote(quote_payload)
        assert cleaned['status'] == 'Borrador'
        assert cleaned['iva'] == 16
        assert cleaned['items'][0]['unit'] == 'PZA'
        assert cleaned['items'][1]['unit'] == 'SERV'
        assert cleaned['items'][0]['quantity'] == 2

    def test_quote_requires_items(self, quote_payload):
        """Test that a quote needs at least one line"""
        with pytest.raises(ValidationError) as exc:
            validate_quote({**quote_payload, 'items': []})
        assert exc.value.field == 'items'

    def test_quote_item_quantity(self, quote_payload):
        """Test that quantities below 1 are rejected"""
        quote_payload['items'][0]['quantity'] = 0
        with pytest.raises(ValidationError) as exc:
            validate_quote(quote_payload)
        assert exc.value.field == 'quantity'

    def test_purchase_order_discount_bounds(self, purchase_order_payload):
        """Test that discounts above 100% are rejected"""
        with pytest.raises(ValidationError) as exc:
            validate_purchase_order({**purchase_order_payload, 'discount_percentage': 120})
        assert exc.value.field == 'discount_percentage'

    def test_ticket_description_limits(self, ticket_payload):
        """Test the 20-500 character description window"""
        with pytest.raises(ValidationError):
            validate_ticket({**ticket_payload, 'description': 'No enfría'})
        with pytest.raises(ValidationError):
            validate_ticket({**ticket_payload, 'description': 'x' * 501})

    def test_ticket_default_status(self, ticket_payload):
        """Test that new tickets start as Recibido"""
        assert validate_ticket(ticket_payload)['status'] == 'Recibido'

    def test_ticket_urgency(self, ticket_payload):
        """Test that unknown urgencies are rejected"""
        with pytest.raises(ValidationError) as exc:
            validate_ticket({**ticket_payload, 'urgency': 'critica'})
        assert exc.value.field == 'urgency'

    def test_project_date(self, project_payload):
        """Test that the programmed date is parsed"""
        cleaned = validate_project(project_payload)
        assert cleaned['programmed_date'] == date(2026, 4, 15)
        assert cleaned['status'] == 'Nuevo'

    def test_project_requires_date(self, project_payload):
        """Test that the programmed date is mandatory"""
        project_payload.pop('programmed_date')
        with pytest.raises(ValidationError) as exc:
            validate_project(project_payload)
        assert exc.value.field == 'programmed_date'


@pytest.mark.unit
class TestMiscValidators:
    """Tests for dates, statuses and credentials"""

    def test_parse_date_formats(self):
        """Test strings, dates and ISO timestamps"""
        assert parse_date('2026-03-01', 'date') == date(2026, 3, 1)
        assert parse_date('2026-03-01T10:00:00', 'date') == date(2026, 3, 1)
        assert parse_date(date(2026, 3, 1), 'date') == date(2026, 3, 1)
        assert parse_date('', 'date') is None

    def test_parse_date_invalid(self):
        """Test a malformed date"""
        with pytest.raises(ValidationError):
            parse_date('01/03/2026', 'date')

    def test_validate_status(self):
        """Test status payloads against a vocabulary"""
        assert validate_status('Aceptada', ('Borrador', 'Aceptada')) == 'Aceptada'
        with pytest.raises(ValidationError) as exc:
            validate_status('Cancelada', ('Borrador', 'Aceptada'))
        assert exc.value.field == 'status'

    def test_credentials(self):
        """Test email normalization"""
        email, password = validate_credentials({'email': ' Ana@Example.com ', 'password': 'secreto'})
        assert email == 'ana@example.com'
        assert password == 'secreto'

    def test_short_password(self):
        """Test the six character minimum"""
        with pytest.raises(ValidationError) as exc:
            validate_credentials({'email': 'ana@example.com', 'password': '123'})
        assert exc.value.field == 'password'
