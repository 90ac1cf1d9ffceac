"""
Tests for service tickets
"""
import pytest
from conftest import CUSTOMER_EMAIL


def _submit(customer_client, payload):
    response = customer_client.post('/api/tickets', json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()['ticket']


@pytest.mark.integration
class TestCustomerTickets:
    """Tests for tickets submitted by customers"""

    def test_submit_ticket(self, customer_client, ticket_payload):
        """Test that a customer's ticket starts as Recibido and is tied to the account"""
        response = customer_client.post('/api/tickets', json=ticket_payload)
        assert response.status_code == 201
        data = response.get_json()
        ticket = data['ticket']
        assert ticket['display_number'] == 'TK-0001'
        assert ticket['status'] == 'Recibido'
        assert ticket['user_email'] == CUSTOMER_EMAIL
        assert ticket['client_name'] == 'Restaurante La Paz'
        assert data['notification']['title'] == '¡Ticket Enviado!'

    def test_customer_cannot_set_status_or_price(self, customer_client, ticket_payload):
        """Test that only the request fields are taken from customers"""
        ticket = _submit(customer_client, {**ticket_payload, 'status': 'Resuelto', 'price': 10})
        assert ticket['status'] == 'Recibido'
        assert ticket['price'] is None

    def test_description_too_short(self, customer_client, ticket_payload):
        """Test the description minimum"""
        response = customer_client.post('/api/tickets', json={**ticket_payload, 'description': 'No enfría'})
        assert response.status_code == 400
        assert response.get_json()['field'] == 'description'

    def test_anonymous_cannot_submit(self, client, ticket_payload):
        """Test that submitting requires an account"""
        response = client.post('/api/tickets', json=ticket_payload)
        assert response.status_code == 401
        assert response.get_json()['redirect'] == '/login'

    def test_my_tickets(self, app, customer_client, ticket_payload):
        """Test that customers only see their own tickets"""
        _submit(customer_client, ticket_payload)
        _submit(customer_client, {**ticket_payload, 'urgency': 'baja'})

        other = app.test_client()
        other.post('/api/auth/signup', json={'email': 'otro@example.com', 'password': 'otro123'})
        _submit(other, ticket_payload)

        data = customer_client.get('/api/tickets/mine').get_json()
        assert data['count'] == 2
        assert all(t['user_email'] == CUSTOMER_EMAIL for t in data['tickets'])

    def test_owner_can_read_ticket(self, customer_client, ticket_payload):
        """Test that the owner can open the ticket"""
        ticket = _submit(customer_client, ticket_payload)
        response = customer_client.get(f"/api/tickets/{ticket['id']}")
        assert response.status_code == 200

    def test_other_customer_cannot_read_ticket(self, app, customer_client, ticket_payload):
        """Test that another customer is denied"""
        ticket = _submit(customer_client, ticket_payload)
        other = app.test_client()
        other.post('/api/auth/signup', json={'email': 'otro@example.com', 'password': 'otro123'})
        response = other.get(f"/api/tickets/{ticket['id']}")
        assert response.status_code == 403
        assert response.get_json()['details']['operation'] == 'get'

    def test_customer_cannot_update(self, customer_client, ticket_payload):
        """Test that status changes are admin only"""
        ticket = _submit(customer_client, ticket_payload)
        response = customer_client.patch(f"/api/tickets/{ticket['id']}/status", json={'status': 'Resuelto'})
        assert response.status_code == 403


@pytest.mark.integration
class TestBackOfficeTickets:
    """Tests for ticket management by admins"""

    def test_admin_ticket_with_client_data(self, admin_client, ticket_payload):
        """Test that admins may record client data and a price"""
        ticket = _submit(admin_client, {
            **ticket_payload,
            'client_name': 'Hotel Gran Mérida',
            'client_phone': '9991234567',
            'price': 1500
        })
        assert ticket['client_name'] == 'Hotel Gran Mérida'
        assert ticket['price'] == 1500
        assert ticket['user_id'] is None

    def test_admin_invalid_client_phone(self, admin_client, ticket_payload):
        """Test that a recorded phone must be valid"""
        response = admin_client.post('/api/tickets', json={**ticket_payload, 'client_phone': '123'})
        assert response.status_code == 400

    def test_edit_keeps_stored_phone(self, admin_client, ticket_payload):
        """Test that an edit not touching the phone leaves an old short phone alone"""
        from database.connection import get_db_session
        from database.models import Ticket

        ticket = _submit(admin_client, {**ticket_payload, 'client_phone': '9991234567'})
        with get_db_session() as db:
            db.get(Ticket, ticket['id']).client_phone = '555-1234'

        response = admin_client.patch(f"/api/tickets/{ticket['id']}", json={'urgency': 'baja'})
        assert response.status_code == 200
        updated = response.get_json()['ticket']
        assert updated['urgency'] == 'baja'
        assert updated['client_phone'] == '555-1234'

        response = admin_client.patch(f"/api/tickets/{ticket['id']}", json={'client_phone': '123'})
        assert response.status_code == 400

    def test_status_update(self, admin_client, customer_client, ticket_payload):
        """Test the status toast and the owner's view"""
        ticket = _submit(customer_client, ticket_payload)
        response = admin_client.patch(f"/api/tickets/{ticket['id']}/status", json={'status': 'En Progreso'})
        assert response.status_code == 200
        data = response.get_json()
        assert data['notification']['title'] == 'Estado Actualizado'
        assert data['notification']['description'] == 'El ticket ha sido marcado como En Progreso.'

        mine = customer_client.get('/api/tickets/mine').get_json()['tickets']
        assert mine[0]['status'] == 'En Progreso'

    def test_invalid_status(self, admin_client, customer_client, ticket_payload):
        """Test that unknown statuses are rejected"""
        ticket = _submit(customer_client, ticket_payload)
        response = admin_client.patch(f"/api/tickets/{ticket['id']}/status", json={'status': 'Cerrado'})
        assert response.status_code == 400

    def test_list_filters(self, admin_client, customer_client, ticket_payload):
        """Test urgency and search filters"""
        _submit(customer_client, ticket_payload)
        _submit(customer_client, {**ticket_payload, 'urgency': 'baja', 'equipment_type': 'Horno de convección'})

        assert admin_client.get('/api/tickets?urgency=alta').get_json()['total'] == 1
        data = admin_client.get('/api/tickets?search=horno').get_json()
        assert data['total'] == 1
        assert data['items'][0]['urgency'] == 'baja'

    def test_list_requires_admin(self, customer_client):
        """Test that the full list is not available to customers"""
        assert customer_client.get('/api/tickets').status_code == 403

    def test_update_keeps_owner(self, admin_client, customer_client, ticket_payload):
        """Test that editing a ticket keeps its owner and folio"""
        ticket = _submit(customer_client, ticket_payload)
        response = admin_client.put(f"/api/tickets/{ticket['id']}", json={'price': 900})
        updated = response.get_json()['ticket']
        assert updated['price'] == 900
        assert updated['user_id'] == ticket['user_id']
        assert updated['display_number'] == ticket['display_number']

    def test_service_order_pdf(self, admin_client, customer_client, ticket_payload):
        """Test the service order file name"""
        ticket = _submit(customer_client, ticket_payload)
        response = admin_client.get(f"/api/tickets/{ticket['id']}/service-order.pdf")
        assert response.status_code == 200
        assert response.mimetype == 'application/pdf'
        assert 'ORD-TK-0001.pdf' in response.headers['Content-Disposition']

    def test_missing_ticket(self, admin_client):
        """Test 404 for an unknown ticket"""
        response = admin_client.get('/api/tickets/no-existe')
        assert response.status_code == 404
        assert response.get_json()['message'] == 'Ticket no encontrado.'
