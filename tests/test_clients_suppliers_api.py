"""
Tests for the client and supplier directory endpoints
"""
import pytest


def _create_client(admin_client, payload):
    response = admin_client.post('/api/clients', json=payload)
    assert response.status_code == 201
    return response.get_json()['client']


@pytest.mark.integration
class TestClientsAPI:
    """Tests for /api/clients"""

    def test_create_client(self, admin_client, client_payload):
        """Test creating a client normalizes RFC and email"""
        response = admin_client.post('/api/clients', json=client_payload)
        assert response.status_code == 201
        data = response.get_json()
        assert data['client']['rfc'] == 'HGM010101ABC'
        assert data['client']['id']
        assert data['notification']['title'] == 'Cliente creado'

    def test_create_client_invalid_phone(self, admin_client, client_payload):
        """Test that a short phone is rejected with the field name"""
        response = admin_client.post('/api/clients', json={**client_payload, 'phone': '123'})
        assert response.status_code == 400
        data = response.get_json()
        assert data['field'] == 'phone'
        assert data['notification']['variant'] == 'destructive'

    def test_list_and_search(self, admin_client, client_payload):
        """Test listing with a search term"""
        _create_client(admin_client, client_payload)
        _create_client(admin_client, {**client_payload, 'name': 'Taquería Don Beto', 'rfc': None})

        data = admin_client.get('/api/clients?search=taquer').get_json()
        assert data['total'] == 1
        assert data['items'][0]['name'] == 'Taquería Don Beto'

        everything = admin_client.get('/api/clients').get_json()
        assert everything['total'] == 2
        assert everything['page'] == 1
        assert everything['pages'] == 1

    def test_pagination(self, admin_client, client_payload):
        """Test page and per_page"""
        for idx in range(3):
            _create_client(admin_client, {**client_payload, 'name': f'Cliente {idx}'})
        data = admin_client.get('/api/clients?page=2&per_page=2').get_json()
        assert data['total'] == 3
        assert data['pages'] == 2
        assert len(data['items']) == 1

    def test_invalid_pagination(self, admin_client):
        """Test that non-numeric pages are rejected"""
        assert admin_client.get('/api/clients?page=uno').status_code == 400

    def test_updated_since_filter(self, admin_client, client_payload):
        """Test that a timestamp in the future returns nothing"""
        _create_client(admin_client, client_payload)
        data = admin_client.get('/api/clients?updated_since=2999-01-01T00:00:00').get_json()
        assert data['total'] == 0

    def test_updated_since_with_offset(self, admin_client, client_payload):
        """Test that timestamps with a UTC offset are accepted"""
        _create_client(admin_client, client_payload)
        past = admin_client.get('/api/clients', query_string={'updated_since': '2000-01-01T00:00:00-06:00'})
        assert past.status_code == 200
        assert past.get_json()['total'] == 1
        future = admin_client.get('/api/clients?updated_since=2999-01-01T00:00:00Z')
        assert future.get_json()['total'] == 0

    def test_search_wildcards_are_literal(self, admin_client, client_payload):
        """Test that % and _ in a search term do not match everything"""
        _create_client(admin_client, client_payload)
        assert admin_client.get('/api/clients', query_string={'search': '%'}).get_json()['total'] == 0
        assert admin_client.get('/api/clients?search=_').get_json()['total'] == 0

    def test_update_keeps_omitted_fields(self, admin_client, client_payload):
        """Test a partial update"""
        created = _create_client(admin_client, client_payload)
        response = admin_client.patch(f"/api/clients/{created['id']}", json={'address': 'Nueva dirección'})
        assert response.status_code == 200
        updated = response.get_json()['client']
        assert updated['address'] == 'Nueva dirección'
        assert updated['name'] == client_payload['name']

    def test_delete_client(self, admin_client, client_payload):
        """Test deleting then fetching a client"""
        created = _create_client(admin_client, client_payload)
        assert admin_client.delete(f"/api/clients/{created['id']}").status_code == 200
        response = admin_client.get(f"/api/clients/{created['id']}")
        assert response.status_code == 404
        assert response.get_json()['message'] == 'Cliente no encontrado.'

    def test_requires_admin(self, client, customer_client, client_payload):
        """Test that anonymous users get 401 and customers 403"""
        assert client.get('/api/clients').status_code == 401
        assert customer_client.get('/api/clients').status_code == 403


@pytest.mark.integration
class TestSuppliersAPI:
    """Tests for /api/suppliers"""

    def test_create_supplier(self, admin_client, supplier_payload):
        """Test creating a supplier"""
        response = admin_client.post('/api/suppliers', json=supplier_payload)
        assert response.status_code == 201
        supplier = response.get_json()['supplier']
        assert supplier['contact_person'] == 'Laura Pech'

    def test_update_supplier(self, admin_client, supplier_payload):
        """Test replacing the contact"""
        supplier = admin_client.post('/api/suppliers', json=supplier_payload).get_json()['supplier']
        response = admin_client.put(f"/api/suppliers/{supplier['id']}", json={'contact_person': 'Jorge Canul'})
        assert response.get_json()['supplier']['contact_person'] == 'Jorge Canul'

    def test_missing_supplier(self, admin_client):
        """Test 404 for an unknown supplier"""
        response = admin_client.delete('/api/suppliers/no-existe')
        assert response.status_code == 404
        assert response.get_json()['message'] == 'Proveedor no encontrado.'
