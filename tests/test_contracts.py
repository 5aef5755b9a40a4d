# ============================================================================
# CONTRACT AND CONFIGURATION TESTS
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Tests - Enums, validation, sanitization, defaults
# PURPOSE: Verify shared contracts and environment-driven defaults
# CREATED: 12 OCT 2026
# ============================================================================
"""
Contract and Configuration Tests

Run with:
    pytest tests/test_contracts.py -v
"""

import pytest

from core.config import (
    HistoryDefaults,
    ProbeDefaults,
    SchedulerDefaults,
    get_defaults,
    reset_defaults,
)
from core.contracts import IntegrationHealthStatus, IntegrationType, parse_integration_type
from health.core import DEFAULT_PROBE_ERROR, sanitize_probe_error


# ============================================================================
# INTEGRATION TYPE VALIDATION
# ============================================================================

class TestParseIntegrationType:

    @pytest.mark.parametrize("value", IntegrationType.values())
    def test_accepts_every_type(self, value):
        assert parse_integration_type(value) == IntegrationType(value)

    def test_case_and_whitespace_insensitive(self):
        assert parse_integration_type(" Slack ") == IntegrationType.SLACK

    def test_passes_enum_through(self):
        assert parse_integration_type(IntegrationType.JIRA) is IntegrationType.JIRA

    @pytest.mark.parametrize("value", ["", "teams", "slack2", "web hooks"])
    def test_rejects_unknown(self, value):
        with pytest.raises(ValueError) as exc:
            parse_integration_type(value)
        message = str(exc.value)
        assert message.startswith(f"Invalid integration type '{value}'")
        assert "slack, discord, linear, jira, github, railway, vercel, supabase, webhooks" in message

    def test_nine_types(self):
        assert len(IntegrationType) == 9


class TestHealthStatus:

    def test_success_and_failure_partition(self):
        assert {s for s in IntegrationHealthStatus if s.is_success()} == {
            IntegrationHealthStatus.HEALTHY,
            IntegrationHealthStatus.DEGRADED,
        }
        assert {s for s in IntegrationHealthStatus if s.is_failure()} == {
            IntegrationHealthStatus.UNHEALTHY,
            IntegrationHealthStatus.DISCONNECTED,
        }


# ============================================================================
# ERROR SANITIZATION
# ============================================================================

class TestSanitizeProbeError:

    @pytest.mark.parametrize("raw,expected", [
        ("401 Bearer xoxb-123-abc", "401 Bearer [REDACTED]"),
        ("bearer abc.def", "Bearer [REDACTED]"),
        ("sent Authorization: lin_api_xyz", "sent Authorization: [REDACTED]"),
        ("url?token=s3cr3t&x=1", "url?token=[REDACTED]"),
        ("token: abc", "token=[REDACTED]"),
        ("plain failure", "plain failure"),
    ])
    def test_redacts_credentials(self, raw, expected):
        assert sanitize_probe_error(raw) == expected

    def test_accepts_exception(self):
        assert sanitize_probe_error(RuntimeError("Bearer abc")) == "Bearer [REDACTED]"

    @pytest.mark.parametrize("empty", [None, "", RuntimeError()])
    def test_empty_uses_default(self, empty):
        assert sanitize_probe_error(empty) == DEFAULT_PROBE_ERROR


# ============================================================================
# DEFAULTS
# ============================================================================

class TestDefaults:

    def test_builtin_values(self):
        assert ProbeDefaults().timeout_ms == 10000
        assert ProbeDefaults().timeout_seconds == 10.0
        history = HistoryDefaults()
        assert history.retention_days == 30
        assert history.max_entries == 8640
        assert history.max_query_limit == 100
        assert history.retention_ms == 30 * 24 * 60 * 60 * 1000
        assert SchedulerDefaults().interval_seconds == 300

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("INTEGRATION_HEALTH_PROBE_TIMEOUT_MS", "2500")
        monkeypatch.setenv("INTEGRATION_HEALTH_INTERVAL_SEC", "60")
        monkeypatch.setenv("INTEGRATION_HEALTH_SCHEDULER_ENABLED", "false")
        reset_defaults()
        try:
            defaults = get_defaults()
            assert defaults.probes.timeout_ms == 2500
            assert defaults.scheduler.interval_seconds == 60
            assert defaults.scheduler.enabled is False
            assert get_defaults() is defaults
        finally:
            reset_defaults()
