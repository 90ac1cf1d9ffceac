"""
Tests for health check endpoints
"""
import pytest
import time
from unittest.mock import patch
from health_checks import (
    get_system_metrics,
    get_uptime,
    check_database,
    START_TIME,
    SERVICE_NAME
)


@pytest.mark.unit
class TestSystemMetrics:
    """Tests for system metrics collection"""

    def test_get_system_metrics_returns_dict(self):
        """Test that get_system_metrics returns a dictionary"""
        metrics = get_system_metrics()
        assert isinstance(metrics, dict)

    def test_system_metrics_has_memory_info(self):
        """Test that system metrics includes memory info"""
        metrics = get_system_metrics()
        if metrics:
            assert 'memory_mb' in metrics
            assert 'memory_percent' in metrics
            assert 'threads' in metrics

    @patch('health_checks.psutil.Process')
    def test_system_metrics_handles_errors(self, mock_process):
        """Test that get_system_metrics handles errors gracefully"""
        mock_process.side_effect = Exception("Test error")
        metrics = get_system_metrics()
        assert metrics == {}


@pytest.mark.unit
class TestUptime:
    """Tests for uptime calculation"""

    def test_uptime_has_required_fields(self):
        """Test that uptime includes all required fields"""
        uptime = get_uptime()
        assert 'uptime_seconds' in uptime
        assert 'started_at' in uptime

    def test_uptime_is_positive(self):
        """Test that uptime is never negative"""
        assert get_uptime()['uptime_seconds'] >= 0

    def test_start_time_in_past(self):
        """Test that START_TIME is not in the future"""
        assert START_TIME <= time.time()


@pytest.mark.unit
class TestDatabaseCheck:
    """Tests for the database check"""

    @patch('health_checks.get_engine')
    @patch('health_checks.inspect')
    @patch('health_checks.check_db_connection')
    def test_missing_tables(self, mock_check, mock_inspect, mock_engine):
        """Test that a schema without the ticket tables is unhealthy"""
        mock_check.return_value = True
        mock_inspect.return_value.get_table_names.return_value = ['users', 'clients']
        result = check_database()
        assert result['healthy'] is False
        assert 'tickets' in result['missing_tables']
        assert 'users' not in result['missing_tables']

    @patch('health_checks.check_db_connection')
    def test_unreachable_database(self, mock_check):
        """Test a failing connection reports the error"""
        mock_check.side_effect = RuntimeError("Cannot connect to database: refused")
        result = check_database()
        assert result['healthy'] is False
        assert 'refused' in result['error']


@pytest.mark.integration
class TestHealthEndpoints:
    """Tests for the registered health routes"""

    def test_liveness(self, client):
        """Test /health answers without touching the database"""
        response = client.get('/health')
        assert response.status_code == 200
        data = response.get_json()
        assert data['status'] == 'healthy'
        assert data['service'] == SERVICE_NAME

    def test_readiness(self, client):
        """Test /ready reports the database check"""
        response = client.get('/ready')
        assert response.status_code == 200
        data = response.get_json()
        assert data['status'] == 'ready'
        assert data['checks']['database']['healthy'] is True

    @patch('health_checks.check_db_connection')
    def test_readiness_not_ready(self, mock_check, client):
        """Test /ready returns 503 when the database is down"""
        mock_check.side_effect = RuntimeError("Cannot connect to database")
        response = client.get('/ready')
        assert response.status_code == 503
        assert response.get_json()['status'] == 'not_ready'

    def test_detailed_health(self, client):
        """Test /api/health carries uptime and database status"""
        response = client.get('/api/health')
        assert response.status_code == 200
        data = response.get_json()
        assert data['status'] == 'healthy'
        assert data['database']['healthy'] is True
        assert 'uptime' in data
        assert data['counters'] == {'quotes': None, 'purchaseOrders': None, 'tickets': None}

    @patch('health_checks.check_db_connection')
    def test_detailed_health_degraded(self, mock_check, client):
        """Test /api/health returns 503 and 'degraded' without a database"""
        mock_check.side_effect = RuntimeError("Cannot connect to database")
        response = client.get('/api/health')
        assert response.status_code == 503
        assert response.get_json()['status'] == 'degraded'

    def test_ping(self, client):
        """Test /api/ping"""
        response = client.get('/api/ping')
        assert response.status_code == 200
        assert response.data == b'pong'

    def test_schema_complete(self, app):
        """Test that a migrated database reports every CRM table"""
        result = check_database()
        assert result == {'healthy': True, 'tables': 10}

    def test_counters_show_last_folio(self, client, admin_client, quote_payload, ticket_payload):
        """Test that /api/health shows the last folio per document type"""
        admin_client.post('/api/quotes', json=quote_payload)
        admin_client.post('/api/quotes', json=quote_payload)
        admin_client.post('/api/tickets', json=ticket_payload)

        counters = client.get('/api/health').get_json()['counters']
        assert counters == {'quotes': 'COT-0002', 'purchaseOrders': None, 'tickets': 'TK-0001'}
