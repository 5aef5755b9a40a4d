# ============================================================================
# PROBE DISPATCHER TESTS
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Tests - Timeout-bounded probe execution
# PURPOSE: Verify timeouts, load failures, not-connected and fan-out
# CREATED: 12 OCT 2026
# ============================================================================
"""
Probe Dispatcher Tests

Uses stub probers registered into a ProberRegistry directly, the real
HealthRecorder and the in-memory fakes from conftest.

Run with:
    pytest tests/test_dispatcher.py -v
"""

import asyncio
import logging
from typing import Optional
from uuid import uuid4

from core.config import ProbeDefaults
from core.contracts import IntegrationHealthStatus, IntegrationType
from health.core import IntegrationProber, NIL_INTEGRATION_ID, ProbeResult
from health.dispatcher import PROBE_TIMEOUT_ERROR, ProbeDispatcher
from health.recorder import HealthRecorder
from health.registry import ProberRegistry

from conftest import WORKSPACE_ID, make_record


# ============================================================================
# STUB PROBERS
# ============================================================================

class StubConfig:
    def __init__(self):
        self.id = uuid4()


class StubProber(IntegrationProber):
    """Prober whose load/probe behavior is set per test."""

    def __init__(self, integration_type, config=None, result=None, load_error=None,
                 probe_error=None, delay: float = 0.0):
        super().__init__(context=None)
        self.integration_type = integration_type
        self.config = config
        self.result = result or ProbeResult.healthy()
        self.load_error = load_error
        self.probe_error = probe_error
        self.delay = delay
        self.probed = 0

    async def load(self, workspace_id) -> Optional[StubConfig]:
        if self.load_error:
            raise self.load_error
        return self.config

    async def probe(self, config) -> ProbeResult:
        self.probed += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.probe_error:
            raise self.probe_error
        return self.result


def _make_dispatcher(health_repo, history_store, alert_sink, clock, *probers, timeout_ms=10000):
    recorder = HealthRecorder(health_repo, history_store, alert_sink=alert_sink, clock=clock)
    registry = ProberRegistry({p.integration_type: p for p in probers})
    return ProbeDispatcher(registry, recorder, ProbeDefaults(timeout_ms=timeout_ms))


def _check(dispatcher, integration_type):
    async def run():
        record = await dispatcher.check_integration(WORKSPACE_ID, integration_type)
        await dispatcher.recorder.wait_for_alerts()
        return record

    return asyncio.run(run())


# ============================================================================
# SINGLE INTEGRATION
# ============================================================================

class TestCheckIntegration:

    def test_healthy_probe_recorded(self, health_repo, history_store, alert_sink, clock):
        config = StubConfig()
        prober = StubProber(IntegrationType.SLACK, config=config)
        dispatcher = _make_dispatcher(health_repo, history_store, alert_sink, clock, prober)

        record = _check(dispatcher, IntegrationType.SLACK)

        assert record.status == IntegrationHealthStatus.HEALTHY
        assert record.integration_id == config.id
        assert record.response_time_ms is not None
        assert record.response_time_ms >= 0

    def test_not_connected_returns_none_and_records_nothing(
        self, health_repo, history_store, alert_sink, clock
    ):
        prober = StubProber(IntegrationType.LINEAR, config=None)
        dispatcher = _make_dispatcher(health_repo, history_store, alert_sink, clock, prober)

        assert _check(dispatcher, IntegrationType.LINEAR) is None
        assert prober.probed == 0
        assert health_repo.records == {}

    def test_timeout_is_unhealthy(self, health_repo, history_store, alert_sink, clock):
        prober = StubProber(IntegrationType.JIRA, config=StubConfig(), delay=1.0)
        dispatcher = _make_dispatcher(
            health_repo, history_store, alert_sink, clock, prober, timeout_ms=20
        )

        record = _check(dispatcher, IntegrationType.JIRA)

        assert record.status == IntegrationHealthStatus.UNHEALTHY
        assert record.last_error_message == PROBE_TIMEOUT_ERROR
        assert record.response_time_ms == 20
        assert record.consecutive_failures == 1

    def test_probe_exception_is_unhealthy_and_sanitized(
        self, health_repo, history_store, alert_sink, clock
    ):
        prober = StubProber(
            IntegrationType.DISCORD,
            config=StubConfig(),
            probe_error=RuntimeError("failed with Authorization: secret-value"),
        )
        dispatcher = _make_dispatcher(health_repo, history_store, alert_sink, clock, prober)

        record = _check(dispatcher, IntegrationType.DISCORD)

        assert record.status == IntegrationHealthStatus.UNHEALTHY
        assert "secret-value" not in record.last_error_message
        assert "Authorization: [REDACTED]" in record.last_error_message

    def test_load_failure_recorded_with_nil_id(self, health_repo, history_store, alert_sink, clock):
        prober = StubProber(IntegrationType.SLACK, load_error=ConnectionError("db gone"))
        dispatcher = _make_dispatcher(health_repo, history_store, alert_sink, clock, prober)

        record = _check(dispatcher, IntegrationType.SLACK)

        assert record.status == IntegrationHealthStatus.UNHEALTHY
        assert record.integration_id == NIL_INTEGRATION_ID
        assert record.last_error_message == "db gone"
        assert prober.probed == 0

    def test_load_failure_keeps_existing_integration_id(
        self, health_repo, history_store, alert_sink, clock
    ):
        existing = health_repo.seed(make_record(IntegrationType.SLACK))
        prober = StubProber(IntegrationType.SLACK, load_error=ConnectionError("db gone"))
        dispatcher = _make_dispatcher(health_repo, history_store, alert_sink, clock, prober)

        record = _check(dispatcher, IntegrationType.SLACK)

        assert record.integration_id == existing.integration_id

    def test_load_failure_log_is_redacted(
        self, health_repo, history_store, alert_sink, clock, caplog
    ):
        prober = StubProber(
            IntegrationType.LINEAR, load_error=RuntimeError("refused Bearer lin_api_secret")
        )
        dispatcher = _make_dispatcher(health_repo, history_store, alert_sink, clock, prober)

        with caplog.at_level(logging.WARNING, logger="health.dispatcher"):
            _check(dispatcher, IntegrationType.LINEAR)

        messages = [r.getMessage() for r in caplog.records if r.name == "health.dispatcher"]
        assert any("Bearer [REDACTED]" in m for m in messages)
        assert "lin_api_secret" not in caplog.text

    def test_unregistered_type_returns_none(self, health_repo, history_store, alert_sink, clock):
        dispatcher = _make_dispatcher(health_repo, history_store, alert_sink, clock)
        assert _check(dispatcher, IntegrationType.VERCEL) is None


# ============================================================================
# WORKSPACE FAN-OUT
# ============================================================================

class TestCheckWorkspaceHealth:

    def test_all_types_settled(self, health_repo, history_store, alert_sink, clock):
        probers = [
            StubProber(IntegrationType.SLACK, config=StubConfig()),
            StubProber(IntegrationType.GITHUB, config=StubConfig(), result=ProbeResult.degraded("stale")),
            StubProber(IntegrationType.JIRA, config=None),
            StubProber(IntegrationType.LINEAR, config=StubConfig(), probe_error=ValueError("bad")),
        ]
        dispatcher = _make_dispatcher(health_repo, history_store, alert_sink, clock, *probers)

        async def run():
            records = await dispatcher.check_workspace_health(WORKSPACE_ID)
            await dispatcher.recorder.wait_for_alerts()
            return records

        records = asyncio.run(run())

        by_type = {r.integration_type: r.status for r in records}
        assert by_type == {
            IntegrationType.SLACK: IntegrationHealthStatus.HEALTHY,
            IntegrationType.GITHUB: IntegrationHealthStatus.DEGRADED,
            IntegrationType.LINEAR: IntegrationHealthStatus.UNHEALTHY,
        }

    def test_recorder_failure_does_not_abort_others(self, history_store, alert_sink, clock):
        class FlakyRepo:
            def __init__(self):
                self.saved = []

            async def get(self, workspace_id, integration_type):
                return None

            async def upsert(self, record):
                if record.integration_type == IntegrationType.SLACK:
                    raise ConnectionError("write failed")
                self.saved.append(record)
                return record

        repo = FlakyRepo()
        probers = [
            StubProber(IntegrationType.SLACK, config=StubConfig()),
            StubProber(IntegrationType.DISCORD, config=StubConfig()),
        ]
        dispatcher = _make_dispatcher(repo, history_store, alert_sink, clock, *probers)

        records = asyncio.run(dispatcher.check_workspace_health(WORKSPACE_ID))

        assert [r.integration_type for r in records] == [IntegrationType.DISCORD]
