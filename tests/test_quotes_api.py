"""
Tests for quotes, their folios, totals and conversion into tickets
"""
import pytest


def _create_quote(admin_client, payload):
    response = admin_client.post('/api/quotes', json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()['quote']


def _accept(admin_client, quote_id):
    response = admin_client.patch(f'/api/quotes/{quote_id}/status', json={'status': 'Aceptada'})
    assert response.status_code == 200
    return response.get_json()['quote']


@pytest.mark.integration
class TestCreateQuote:
    """Tests for POST /api/quotes"""

    def test_totals_and_folio(self, admin_client, quote_payload):
        """Test server-side totals, the first folio and default dates"""
        quote = _create_quote(admin_client, quote_payload)
        assert quote['quote_number'] == 1
        assert quote['display_number'] == 'COT-0001'
        assert quote['subtotal'] == 1500.0
        assert quote['iva_amount'] == 240.0
        assert quote['total'] == 1740.0
        assert quote['status'] == 'Borrador'
        assert quote['expiration_date'] == '2026-03-16'
        assert '15 días' in quote['policies']
        assert quote['created_by']

    def test_client_totals_are_ignored(self, admin_client, quote_payload):
        """Test that totals sent by the client are recomputed"""
        quote = _create_quote(admin_client, {**quote_payload, 'total': 1, 'subtotal': 1})
        assert quote['total'] == 1740.0

    def test_folios_are_sequential(self, admin_client, quote_payload):
        """Test consecutive folios"""
        first = _create_quote(admin_client, quote_payload)
        second = _create_quote(admin_client, quote_payload)
        assert second['quote_number'] == first['quote_number'] + 1
        assert second['display_number'] == 'COT-0002'

    def test_failed_create_does_not_consume_folio(self, admin_client, quote_payload):
        """Test that a rejected quote leaves the counter untouched"""
        bad = admin_client.post('/api/quotes', json={**quote_payload, 'items': []})
        assert bad.status_code == 400
        assert _create_quote(admin_client, quote_payload)['display_number'] == 'COT-0001'

    def test_custom_iva(self, admin_client, quote_payload):
        """Test a quote with 8% IVA"""
        quote = _create_quote(admin_client, {**quote_payload, 'iva': 8})
        assert quote['iva_amount'] == 120.0
        assert quote['total'] == 1620.0

    def test_expiration_before_date(self, admin_client, quote_payload):
        """Test that the validity cannot end before the quote date"""
        response = admin_client.post('/api/quotes', json={**quote_payload, 'expiration_date': '2026-02-01'})
        assert response.status_code == 400
        assert response.get_json()['field'] == 'expiration_date'

    def test_short_client_phone(self, admin_client, quote_payload):
        """Test that a recorded phone needs ten digits"""
        response = admin_client.post('/api/quotes', json={**quote_payload, 'client_phone': '555-1234'})
        assert response.status_code == 400
        assert response.get_json()['field'] == 'client_phone'

    def test_catalog_line(self, admin_client, quote_payload, service_payload):
        """Test that a service_id line takes the catalog title and price"""
        service = admin_client.post('/api/services', json=service_payload).get_json()['service']
        quote = _create_quote(admin_client, {**quote_payload, 'items': [{'service_id': service['id']}]})
        line = quote['items'][0]
        assert line['description'] == 'Reparación de Marmitas'
        assert line['price'] == 1100.0
        assert line['quantity'] == 1
        assert quote['subtotal'] == 1100.0

    def test_unknown_catalog_service(self, admin_client, quote_payload):
        """Test that a missing service is a 404"""
        response = admin_client.post('/api/quotes', json={**quote_payload, 'items': [{'service_id': 'nope'}]})
        assert response.status_code == 404

    def test_client_record_fills_fields(self, admin_client, quote_payload, client_payload):
        """Test that client_id copies the client's name and phone"""
        client = admin_client.post('/api/clients', json=client_payload).get_json()['client']
        payload = {k: v for k, v in quote_payload.items() if not k.startswith('client_')}
        quote = _create_quote(admin_client, {**payload, 'client_id': client['id']})
        assert quote['client_id'] == client['id']
        assert quote['client_name'] == 'Hotel Gran Mérida'
        assert quote['client_phone'] == client['phone']
        assert quote['rfc'] == 'HGM010101ABC'

    def test_customers_cannot_create(self, customer_client, quote_payload):
        """Test that the back-office endpoint is admin only"""
        assert customer_client.post('/api/quotes', json=quote_payload).status_code == 403


@pytest.mark.integration
class TestQuoteRequest:
    """Tests for quote requests from the public site"""

    def test_request_creates_draft(self, admin_client, customer_client, quote_payload):
        """Test that a visitor's request becomes a draft quote"""
        response = customer_client.post('/api/quotes/request', json={**quote_payload, 'status': 'Aceptada', 'iva': 0})
        assert response.status_code == 201
        quote = response.get_json()['quote']
        assert quote['status'] == 'Borrador'
        assert quote['iva'] == 16

        data = admin_client.get('/api/quotes?status=Borrador').get_json()
        assert data['total'] == 1

    def test_request_requires_login(self, client, quote_payload):
        """Test that anonymous visitors must log in"""
        assert client.post('/api/quotes/request', json=quote_payload).status_code == 401


@pytest.mark.integration
class TestUpdateQuote:
    """Tests for editing quotes"""

    def test_update_recomputes_totals(self, admin_client, quote_payload):
        """Test that changed lines recompute totals and keep the folio"""
        quote = _create_quote(admin_client, quote_payload)
        response = admin_client.put(f"/api/quotes/{quote['id']}", json={
            'items': [{'description': 'Visita técnica', 'quantity': 1, 'price': 500}]
        })
        assert response.status_code == 200
        updated = response.get_json()['quote']
        assert updated['total'] == 580.0
        assert updated['display_number'] == quote['display_number']
        assert updated['client_name'] == quote['client_name']

    def test_edit_after_service_removed(self, admin_client, quote_payload, service_payload):
        """Test that catalog lines keep their stored title and price"""
        service = admin_client.post('/api/services', json=service_payload).get_json()['service']
        quote = _create_quote(admin_client, {**quote_payload, 'items': [{'service_id': service['id']}]})
        assert admin_client.delete(f"/api/services/{service['id']}").status_code == 200

        response = admin_client.patch(f"/api/quotes/{quote['id']}", json={'observations': 'Incluye visita'})
        assert response.status_code == 200
        line = response.get_json()['quote']['items'][0]
        assert line['description'] == 'Reparación de Marmitas'
        assert line['price'] == 1100.0

    def test_edit_after_client_removed(self, admin_client, quote_payload, client_payload):
        """Test that deleting the client leaves the quote editable"""
        client = admin_client.post('/api/clients', json=client_payload).get_json()['client']
        quote = _create_quote(admin_client, {**quote_payload, 'client_id': client['id']})
        assert admin_client.delete(f"/api/clients/{client['id']}").status_code == 200

        response = admin_client.patch(f"/api/quotes/{quote['id']}", json={'observations': 'Sin cambios'})
        assert response.status_code == 200
        updated = response.get_json()['quote']
        assert updated['client_id'] is None
        assert updated['client_name'] == quote['client_name']

    def test_invalid_status(self, admin_client, quote_payload):
        """Test that unknown statuses are rejected"""
        quote = _create_quote(admin_client, quote_payload)
        response = admin_client.patch(f"/api/quotes/{quote['id']}/status", json={'status': 'Cancelada'})
        assert response.status_code == 400

    def test_list_search(self, admin_client, quote_payload):
        """Test searching by client name"""
        _create_quote(admin_client, quote_payload)
        _create_quote(admin_client, {**quote_payload, 'client_name': 'Cafetería Marlín'})
        data = admin_client.get('/api/quotes?search=marl').get_json()
        assert data['total'] == 1
        assert data['items'][0]['client_name'] == 'Cafetería Marlín'

    def test_missing_quote(self, admin_client):
        """Test 404 for an unknown quote"""
        response = admin_client.get('/api/quotes/no-existe')
        assert response.status_code == 404
        assert response.get_json()['message'] == 'Cotización no encontrada.'


@pytest.mark.integration
class TestConvertToTicket:
    """Tests for opening tickets from accepted quotes"""

    def test_only_accepted_quotes(self, admin_client, quote_payload):
        """Test that drafts cannot be converted"""
        quote = _create_quote(admin_client, quote_payload)
        response = admin_client.post(f"/api/quotes/{quote['id']}/convert-to-ticket")
        assert response.status_code == 409

    def test_convert_accepted_quote(self, admin_client, quote_payload):
        """Test that the ticket carries the quote's client data and total"""
        quote = _create_quote(admin_client, quote_payload)
        _accept(admin_client, quote['id'])

        response = admin_client.post(f"/api/quotes/{quote['id']}/convert-to-ticket")
        assert response.status_code == 201
        result = response.get_json()
        ticket = result['ticket']
        assert ticket['display_number'] == 'TK-0001'
        assert ticket['status'] == 'Recibido'
        assert ticket['service_type'] == 'correctivo'
        assert ticket['equipment_type'] == 'Estufa de 6 quemadores'
        assert ticket['client_name'] == 'Restaurante El Faisán'
        assert ticket['price'] == 1740.0
        assert ticket['quote_id'] == quote['id']
        assert 'COT-0001' in ticket['description']
        assert result['quote']['ticket_id'] == ticket['id']

    def test_convert_only_once(self, admin_client, quote_payload):
        """Test that a converted quote cannot be converted again"""
        quote = _create_quote(admin_client, quote_payload)
        _accept(admin_client, quote['id'])
        admin_client.post(f"/api/quotes/{quote['id']}/convert-to-ticket")
        response = admin_client.post(f"/api/quotes/{quote['id']}/convert-to-ticket")
        assert response.status_code == 409
        assert response.get_json()['field'] == 'ticket_id'

    def test_deleting_ticket_allows_reconversion(self, admin_client, quote_payload):
        """Test that removing the ticket frees the quote"""
        quote = _create_quote(admin_client, quote_payload)
        _accept(admin_client, quote['id'])
        ticket = admin_client.post(f"/api/quotes/{quote['id']}/convert-to-ticket").get_json()['ticket']

        assert admin_client.delete(f"/api/tickets/{ticket['id']}").status_code == 200
        assert admin_client.get(f"/api/quotes/{quote['id']}").get_json()['quote']['ticket_id'] is None
        response = admin_client.post(f"/api/quotes/{quote['id']}/convert-to-ticket")
        assert response.status_code == 201
        assert response.get_json()['ticket']['display_number'] == 'TK-0002'

    def test_deleting_quote_clears_ticket_reference(self, admin_client, quote_payload):
        """Test that tickets survive their quote"""
        quote = _create_quote(admin_client, quote_payload)
        _accept(admin_client, quote['id'])
        ticket = admin_client.post(f"/api/quotes/{quote['id']}/convert-to-ticket").get_json()['ticket']

        assert admin_client.delete(f"/api/quotes/{quote['id']}").status_code == 200
        remaining = admin_client.get(f"/api/tickets/{ticket['id']}").get_json()['ticket']
        assert remaining['quote_id'] is None


@pytest.mark.integration
class TestQuotePdf:
    """Tests for the quote download"""

    def test_pdf_download(self, admin_client, quote_payload):
        """Test the PDF content type and file name"""
        quote = _create_quote(admin_client, quote_payload)
        response = admin_client.get(f"/api/quotes/{quote['id']}/pdf")
        assert response.status_code == 200
        assert response.mimetype == 'application/pdf'
        assert 'COT-0001.pdf' in response.headers['Content-Disposition']
        assert response.data.startswith(b'%PDF')
