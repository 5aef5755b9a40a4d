# ============================================================================
# INTEGRATION HEALTH ROUTE TESTS
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Tests - HTTP endpoints
# PURPOSE: Verify routing, validation and status codes of the health API
# CREATED: 12 OCT 2026
# ============================================================================
"""
Integration Health Route Tests

Uses FastAPI TestClient with a mocked IntegrationHealthService.

Run with:
    pytest tests/test_health_routes.py -v
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.health_routes import router, set_health_services
from core.contracts import IntegrationHealthStatus, IntegrationType
from core.models.health import HealthCounts, HealthHistoryEntry, HealthSummary
from health.router import probe_router

from conftest import WORKSPACE_ID, make_record


BASE = f"/api/v1/workspaces/{WORKSPACE_ID}/integrations"


# ============================================================================
# FIXTURES
# ============================================================================

def _make_test_app(service_mock, scheduler_mock=None):
    """Create a test FastAPI app with health routes and mocked service."""
    app = FastAPI()
    app.include_router(probe_router)
    app.include_router(router, prefix="/api/v1")
    set_health_services(health_service=service_mock, scheduler=scheduler_mock)
    return app


@pytest.fixture
def svc():
    return AsyncMock()


@pytest.fixture
def client(svc):
    return TestClient(_make_test_app(svc))


@pytest.fixture(autouse=True)
def _reset_services():
    yield
    set_health_services(None, None)


# ============================================================================
# QUERIES
# ============================================================================

class TestQueries:

    def test_get_all_health(self, svc, client):
        svc.get_all_health = AsyncMock(return_value=[
            make_record(IntegrationType.SLACK, "healthy"),
            make_record(IntegrationType.JIRA, "unhealthy", consecutive_failures=3),
        ])

        resp = client.get(f"{BASE}/health")

        assert resp.status_code == 200
        data = resp.json()
        assert [r["integration_type"] for r in data] == ["slack", "jira"]
        assert data[1]["status"] == "unhealthy"
        assert data[1]["is_failing"] is True

    def test_summary(self, svc, client):
        svc.get_health_summary = AsyncMock(return_value=HealthSummary(
            overall=IntegrationHealthStatus.DEGRADED,
            counts=HealthCounts(healthy=2, degraded=1),
        ))

        resp = client.get(f"{BASE}/health/summary")

        assert resp.status_code == 200
        assert resp.json() == {
            "overall": "degraded",
            "counts": {"healthy": 2, "degraded": 1, "unhealthy": 0, "disconnected": 0},
        }

    def test_get_one(self, svc, client):
        svc.get_health = AsyncMock(return_value=make_record(IntegrationType.GITHUB, "degraded"))

        resp = client.get(f"{BASE}/github/health")

        assert resp.status_code == 200
        assert resp.json()["integration_type"] == "github"
        svc.get_health.assert_awaited_once_with(WORKSPACE_ID, IntegrationType.GITHUB)

    def test_get_one_missing_is_404(self, svc, client):
        svc.get_health = AsyncMock(return_value=None)
        resp = client.get(f"{BASE}/slack/health")
        assert resp.status_code == 404

    def test_history_passes_limit(self, svc, client):
        svc.get_health_history = AsyncMock(return_value=[
            HealthHistoryEntry(
                timestamp="2026-10-12T12:00:00.000Z",
                status="unhealthy",
                response_time_ms=120,
                error="Probe timeout",
            ),
        ])

        resp = client.get(f"{BASE}/linear/health/history", params={"limit": 5})

        assert resp.status_code == 200
        entry = resp.json()[0]
        assert entry["responseTimeMs"] == 120
        assert entry["error"] == "Probe timeout"
        svc.get_health_history.assert_awaited_once_with(WORKSPACE_ID, IntegrationType.LINEAR, 5)

    def test_history_omits_missing_error(self, svc, client):
        svc.get_health_history = AsyncMock(return_value=[
            HealthHistoryEntry(
                timestamp="2026-10-12T12:05:00.000Z",
                status="healthy",
                response_time_ms=40,
            ),
        ])

        resp = client.get(f"{BASE}/slack/health/history")

        assert resp.status_code == 200
        assert resp.json() == [
            {"timestamp": "2026-10-12T12:05:00.000Z", "status": "healthy", "responseTimeMs": 40},
        ]

    @pytest.mark.parametrize("limit", [0, -5])
    def test_history_rejects_non_positive_limit(self, svc, client, limit):
        resp = client.get(f"{BASE}/slack/health/history", params={"limit": limit})

        assert resp.status_code == 422
        svc.get_health_history.assert_not_called()


# ============================================================================
# VALIDATION
# ============================================================================

class TestValidation:

    def test_invalid_type_is_400_listing_valid_types(self, svc, client):
        resp = client.get(f"{BASE}/myspace/health")

        assert resp.status_code == 400
        detail = resp.json()["detail"]
        assert "Invalid integration type 'myspace'" in detail
        for value in IntegrationType.values():
            assert value in detail
        svc.get_health.assert_not_called()

    def test_invalid_type_on_command_is_400(self, svc, client):
        resp = client.post(f"{BASE}/teams/health/check")
        assert resp.status_code == 400
        svc.force_health_check.assert_not_called()

    def test_non_uuid_workspace_is_422(self, client):
        resp = client.get("/api/v1/workspaces/not-a-uuid/integrations/health")
        assert resp.status_code == 422

    def test_uninitialized_service_is_503(self):
        app = _make_test_app(None)
        resp = TestClient(app).get(f"{BASE}/health")
        assert resp.status_code == 503

    def test_error_responses_documented(self, client):
        schema = client.get("/openapi.json").json()

        assert "ErrorResponse" in schema["components"]["schemas"]
        one = schema["paths"]["/api/v1/workspaces/{workspace_id}/integrations/{integration_type}/health"]["get"]
        assert {"400", "404"} <= set(one["responses"])


# ============================================================================
# COMMANDS
# ============================================================================

class TestCommands:

    def test_force_check(self, svc, client):
        svc.force_health_check = AsyncMock(
            return_value=make_record(IntegrationType.WEBHOOKS, "disconnected")
        )

        resp = client.post(f"{BASE}/webhooks/health/check")

        assert resp.status_code == 200
        assert resp.json()["status"] == "disconnected"

    def test_retry(self, svc, client):
        svc.retry_failed = AsyncMock(return_value={"retried_count": 1})

        resp = client.post(f"{BASE}/supabase/health/retry")

        assert resp.status_code == 200
        assert resp.json() == {"retried_count": 1}
        svc.retry_failed.assert_awaited_once_with(WORKSPACE_ID, IntegrationType.SUPABASE)


# ============================================================================
# SCHEDULER AND PROBES
# ============================================================================

class TestSchedulerAndProbes:

    def test_scheduler_stats(self, svc):
        scheduler = MagicMock()
        scheduler.stats = {
            "enabled": True,
            "running": True,
            "interval_seconds": 300.0,
            "max_concurrent_workspaces": 10,
            "started_at": None,
            "cycles": 2,
            "last_cycle_at": None,
            "last_cycle_duration_ms": 15,
            "workspaces_checked": 4,
            "integrations_checked": 11,
            "errors": 0,
        }
        client = TestClient(_make_test_app(svc, scheduler))

        resp = client.get("/api/v1/integrations/health/scheduler")

        assert resp.status_code == 200
        assert resp.json()["cycles"] == 2

    def test_scheduler_missing_is_503(self, client):
        resp = client.get("/api/v1/integrations/health/scheduler")
        assert resp.status_code == 503

    def test_livez(self, client):
        resp = client.get("/livez")
        assert resp.status_code == 200
        assert resp.json()["status"] == "alive"
