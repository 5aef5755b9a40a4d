# ============================================================================
# HEALTH CHECK SCHEDULER TESTS
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Tests - Periodic sweep over workspaces
# PURPOSE: Verify cycle fan-out, failure isolation, lifecycle and stats
# CREATED: 12 OCT 2026
# ============================================================================
"""
Health Check Scheduler Tests

Run with:
    pytest tests/test_scheduler.py -v
"""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

from core.config import SchedulerDefaults
from health.scheduler import HealthCheckScheduler

from conftest import make_record


def _make_scheduler(workspace_ids, check=None, enabled=True, max_concurrent=10, sleep=None):
    integrations = MagicMock()
    integrations.find_distinct_workspace_ids = AsyncMock(return_value=workspace_ids)
    dispatcher = MagicMock()
    dispatcher.check_workspace_health = AsyncMock(side_effect=check or (lambda ws: [make_record()]))
    defaults = SchedulerDefaults(
        enabled=enabled,
        interval_seconds=0.01,
        max_concurrent_workspaces=max_concurrent,
    )
    return HealthCheckScheduler(dispatcher, integrations, defaults, sleep=sleep)


class TestRunCycle:

    def test_checks_every_workspace(self):
        workspaces = [uuid4(), uuid4(), uuid4()]
        scheduler = _make_scheduler(workspaces)

        summary = asyncio.run(scheduler.run_cycle())

        assert summary["workspaces"] == 3
        assert summary["records"] == 3
        assert summary["errors"] == 0
        checked = {c.args[0] for c in scheduler.dispatcher.check_workspace_health.await_args_list}
        assert checked == set(workspaces)
        assert scheduler.stats["cycles"] == 1
        assert scheduler.stats["integrations_checked"] == 3

    def test_workspace_failure_isolated(self):
        bad = uuid4()
        good = uuid4()

        def check(ws):
            if ws == bad:
                raise RuntimeError("workspace exploded")
            return [make_record(), make_record()]

        scheduler = _make_scheduler([bad, good], check=check)

        summary = asyncio.run(scheduler.run_cycle())

        assert summary["workspaces"] == 1
        assert summary["records"] == 2
        assert summary["errors"] == 1

    def test_failure_log_is_redacted(self, caplog):
        def check(ws):
            raise RuntimeError("callback url?token=s3cr3t failed")

        scheduler = _make_scheduler([uuid4()], check=check)

        with caplog.at_level(logging.ERROR, logger="health.scheduler"):
            asyncio.run(scheduler.run_cycle())

        assert "token=[REDACTED]" in caplog.text
        assert "s3cr3t" not in caplog.text

    def test_discovery_failure_ends_cycle(self):
        scheduler = _make_scheduler([])
        scheduler.integrations.find_distinct_workspace_ids = AsyncMock(
            side_effect=ConnectionError("db down")
        )

        summary = asyncio.run(scheduler.run_cycle())

        assert summary["errors"] == 1
        scheduler.dispatcher.check_workspace_health.assert_not_awaited()
        assert scheduler.stats["cycles"] == 0

    def test_concurrency_bounded(self):
        active = 0
        peak = 0

        async def check(ws):
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1
            return []

        scheduler = _make_scheduler([uuid4() for _ in range(6)], check=check, max_concurrent=2)

        asyncio.run(scheduler.run_cycle())

        assert peak == 2


class TestLifecycle:

    def test_disabled_does_not_start(self):
        scheduler = _make_scheduler([], enabled=False)

        async def run():
            await scheduler.start()
            return scheduler.is_running

        assert asyncio.run(run()) is False

    def test_start_runs_cycles_until_stopped(self):
        sleeps = []

        async def fake_sleep(seconds):
            sleeps.append(seconds)
            await asyncio.sleep(0)

        scheduler = _make_scheduler([uuid4()], sleep=fake_sleep)

        async def run():
            await scheduler.start()
            for _ in range(50):
                if scheduler.stats["cycles"] >= 2:
                    break
                await asyncio.sleep(0.01)
            await scheduler.stop()

        asyncio.run(run())

        assert scheduler.stats["cycles"] >= 2
        assert scheduler.is_running is False
        assert sleeps[0] == 0.01

    def test_stop_wakes_interval_wait(self):
        scheduler = _make_scheduler([uuid4()])
        scheduler.defaults = SchedulerDefaults(interval_seconds=3600)

        async def run():
            await scheduler.start()
            await asyncio.sleep(0)
            await asyncio.wait_for(scheduler.stop(), timeout=1.0)

        asyncio.run(run())

        assert scheduler.stats["cycles"] == 0
        assert scheduler.stats["started_at"] is not None
