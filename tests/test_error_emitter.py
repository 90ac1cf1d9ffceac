"""
Tests for the permission-error relay
"""
import pytest
from services.error_emitter import ErrorEmitter, PERMISSION_ERROR
from services.errors import PermissionDeniedError


@pytest.fixture
def emitter():
    """Fresh emitter, independent of the application-wide one"""
    return ErrorEmitter()


@pytest.mark.unit
class TestErrorEmitter:
    """Tests for subscription and delivery"""

    def test_emit_delivers_payload(self, emitter):
        """Test that listeners receive the emitted error"""
        received = []
        emitter.on(PERMISSION_ERROR, received.append)
        error = PermissionDeniedError('/api/quotes', 'create', {'client_name': 'X'})

        assert emitter.emit(PERMISSION_ERROR, error) == 1
        assert received == [error]

    def test_every_listener_called(self, emitter):
        """Test that each subscribed listener receives the payload"""
        calls = []
        emitter.on(PERMISSION_ERROR, lambda e: calls.append('first'))
        emitter.on(PERMISSION_ERROR, lambda e: calls.append('second'))
        assert emitter.emit(PERMISSION_ERROR, None) == 2
        assert sorted(calls) == ['first', 'second']

    def test_on_is_idempotent(self, emitter):
        """Test that subscribing twice delivers once"""
        received = []
        emitter.on(PERMISSION_ERROR, received.append)
        emitter.on(PERMISSION_ERROR, received.append)
        assert emitter.listener_count(PERMISSION_ERROR) == 1

    def test_off(self, emitter):
        """Test unsubscribing"""
        listener = emitter.on(PERMISSION_ERROR, lambda e: None)
        assert emitter.off(PERMISSION_ERROR, listener) is True
        assert emitter.off(PERMISSION_ERROR, listener) is False
        assert emitter.emit(PERMISSION_ERROR, None) == 0

    def test_unknown_event(self, emitter):
        """Test that only declared events are accepted"""
        with pytest.raises(ValueError):
            emitter.on('quota-error', lambda e: None)
        with pytest.raises(ValueError):
            emitter.emit('quota-error', None)

    def test_failing_listener_is_isolated(self, emitter):
        """Test that a raising listener does not stop the others"""
        received = []

        def boom(error):
            raise RuntimeError('listener failed')

        emitter.on(PERMISSION_ERROR, boom)
        emitter.on(PERMISSION_ERROR, received.append)
        assert emitter.emit(PERMISSION_ERROR, 'payload') == 1
        assert received == ['payload']

    def test_clear(self, emitter):
        """Test removing every listener"""
        emitter.on(PERMISSION_ERROR, lambda e: None)
        emitter.clear()
        assert emitter.listener_count(PERMISSION_ERROR) == 0


@pytest.mark.unit
class TestPermissionDeniedError:
    """Tests for the error payload"""

    def test_to_dict(self):
        """Test the context carried by the error"""
        error = PermissionDeniedError('/api/tickets/1', 'update', {'status': 'Resuelto'})
        assert error.status_code == 403
        assert error.to_dict() == {
            'path': '/api/tickets/1',
            'operation': 'update',
            'request_resource_data': {'status': 'Resuelto'}
        }
        assert 'update on /api/tickets/1' in str(error)


@pytest.mark.integration
class TestPermissionRelay:
    """Tests for denials raised by the API"""

    def test_customer_denied_admin_route(self, app, customer_client):
        """Test that the relay receives the denied request"""
        from services.error_emitter import error_emitter
        received = []
        error_emitter.on(PERMISSION_ERROR, received.append)
        try:
            response = customer_client.post('/api/clients', json={'name': 'Intruso'})
        finally:
            error_emitter.off(PERMISSION_ERROR, received.append)

        assert response.status_code == 403
        body = response.get_json()
        assert body['notification']['title'] == 'Error de Permisos'
        assert body['details']['operation'] == 'create'
        assert received[0].path == '/api/clients'
        assert received[0].request_resource_data == {'name': 'Intruso'}

    def test_failing_listener_keeps_403(self, app, customer_client):
        """Test that a broken listener does not turn a denial into a 500"""
        from services.error_emitter import error_emitter

        def boom(error):
            raise RuntimeError('listener failed')

        error_emitter.on(PERMISSION_ERROR, boom)
        try:
            response = customer_client.get('/api/clients')
        finally:
            error_emitter.off(PERMISSION_ERROR, boom)

        assert response.status_code == 403
        assert response.get_json()['notification']['title'] == 'Error de Permisos'
