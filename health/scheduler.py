# ============================================================================
# HEALTH CHECK SCHEDULER
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - Periodic health check driver
# PURPOSE: Discover workspaces and probe all of their integrations
# CREATED: 12 OCT 2026
# ============================================================================
"""
Health Check Scheduler

Owned background task started in the application lifespan:

    start() -> loop: wait interval, run_cycle() ... -> stop()

Each cycle:
1. Discover workspace ids with at least one integration row
2. check_workspace_health() for each, at most max_concurrent_workspaces
   at a time
3. Per-workspace failures are logged and counted; the cycle continues

A discovery failure ends the cycle early; the next tick retries.
run_cycle() can also be called directly (tests, manual sweeps).
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional
from uuid import UUID

from core.config import SchedulerDefaults
from core.logging import ComponentType, get_logger, log_context
from health.core import sanitize_probe_error
from health.dispatcher import ProbeDispatcher
from repositories.integration_repo import IntegrationRepository

logger = get_logger(__name__, ComponentType.SCHEDULER)

SleepFn = Callable[[float], Awaitable[None]]


class HealthCheckScheduler:
    """
    Periodic health check loop.

    Args:
        dispatcher: Runs and records probes for one workspace
        integrations: Source of workspace ids
        defaults: Interval, enable flag and concurrency bound
        sleep: Replaces the interval wait (tests); the default wait wakes
               early when stop() is called
    """

    def __init__(
        self,
        dispatcher: ProbeDispatcher,
        integrations: IntegrationRepository,
        defaults: Optional[SchedulerDefaults] = None,
        sleep: Optional[SleepFn] = None,
    ):
        self.dispatcher = dispatcher
        self.integrations = integrations
        self.defaults = defaults or SchedulerDefaults()
        self._sleep = sleep

        # State
        self._running = False
        self._stop_event = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

        # Stats
        self._started_at: Optional[datetime] = None
        self._cycles = 0
        self._last_cycle_at: Optional[datetime] = None
        self._last_cycle_duration_ms: Optional[int] = None
        self._workspaces_checked = 0
        self._integrations_checked = 0
        self._errors = 0

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    async def start(self) -> None:
        """Start the background loop. No-op when disabled or already running."""
        if not self.defaults.enabled:
            logger.info("Health check scheduler disabled (INTEGRATION_HEALTH_SCHEDULER_ENABLED=false)")
            return

        if self._running:
            logger.warning("Health check scheduler already running")
            return

        self._running = True
        self._stop_event.clear()
        self._started_at = datetime.now(timezone.utc)
        self._task = asyncio.create_task(self._loop(), name="integration-health-scheduler")

        logger.info(
            f"Health check scheduler started (interval={self.defaults.interval_seconds}s, "
            f"max_concurrent_workspaces={self.defaults.max_concurrent_workspaces})"
        )

    async def stop(self) -> None:
        """Signal the loop to stop and wait for it."""
        self._running = False
        self._stop_event.set()

        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None

        logger.info(
            f"Health check scheduler stopped (cycles={self._cycles}, "
            f"workspaces_checked={self._workspaces_checked}, errors={self._errors})"
        )

    async def _wait_interval(self) -> bool:
        """Wait one interval. Returns True if stop was requested."""
        if self._sleep is not None:
            await self._sleep(self.defaults.interval_seconds)
            return self._stop_event.is_set()

        try:
            await asyncio.wait_for(self._stop_event.wait(), timeout=self.defaults.interval_seconds)
            return True
        except asyncio.TimeoutError:
            return False

    async def _loop(self) -> None:
        while self._running and not self._stop_event.is_set():
            if await self._wait_interval():
                break

            try:
                await self.run_cycle()
            except asyncio.CancelledError:
                break
            except Exception as e:
                self._errors += 1
                logger.error(f"Error in health check cycle: {sanitize_probe_error(e)}")

        logger.info("Health check loop exited")

    # =========================================================================
    # CYCLE
    # =========================================================================

    async def run_cycle(self) -> Dict[str, Any]:
        """
        Run one sweep over every workspace with integrations.

        Returns:
            Summary of this cycle (workspaces, records, errors, duration)
        """
        started = datetime.now(timezone.utc)
        summary = {"workspaces": 0, "records": 0, "errors": 0, "duration_ms": 0}

        try:
            workspace_ids = await self.integrations.find_distinct_workspace_ids()
        except Exception as e:
            self._errors += 1
            summary["errors"] = 1
            logger.error(
                f"Health check cycle aborted: workspace discovery failed: {sanitize_probe_error(e)}"
            )
            return summary

        logger.info(f"Health check cycle starting for {len(workspace_ids)} workspaces")

        semaphore = asyncio.Semaphore(max(1, self.defaults.max_concurrent_workspaces))

        async def check_one(workspace_id: UUID) -> int:
            async with semaphore:
                with log_context(workspace_id=workspace_id, operation="scheduled_check"):
                    records = await self.dispatcher.check_workspace_health(workspace_id)
                    return len(records)

        outcomes = await asyncio.gather(
            *(check_one(ws) for ws in workspace_ids),
            return_exceptions=True,
        )

        for workspace_id, outcome in zip(workspace_ids, outcomes):
            if isinstance(outcome, BaseException):
                summary["errors"] += 1
                logger.error(
                    f"Health check failed for workspace {workspace_id}: {sanitize_probe_error(outcome)}"
                )
            else:
                summary["workspaces"] += 1
                summary["records"] += outcome

        finished = datetime.now(timezone.utc)
        summary["duration_ms"] = int((finished - started).total_seconds() * 1000)

        self._cycles += 1
        self._last_cycle_at = finished
        self._last_cycle_duration_ms = summary["duration_ms"]
        self._workspaces_checked += summary["workspaces"]
        self._integrations_checked += summary["records"]
        self._errors += summary["errors"]

        logger.info(
            f"Health check cycle complete: {summary['workspaces']} workspaces, "
            f"{summary['records']} integrations, {summary['errors']} errors "
            f"in {summary['duration_ms']}ms"
        )
        return summary

    # =========================================================================
    # STATUS
    # =========================================================================

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def stats(self) -> Dict[str, Any]:
        """Get scheduler statistics."""
        return {
            "enabled": self.defaults.enabled,
            "running": self._running,
            "interval_seconds": self.defaults.interval_seconds,
            "max_concurrent_workspaces": self.defaults.max_concurrent_workspaces,
            "started_at": self._started_at.isoformat() if self._started_at else None,
            "cycles": self._cycles,
            "last_cycle_at": self._last_cycle_at.isoformat() if self._last_cycle_at else None,
            "last_cycle_duration_ms": self._last_cycle_duration_ms,
            "workspaces_checked": self._workspaces_checked,
            "integrations_checked": self._integrations_checked,
            "errors": self._errors,
        }


__all__ = ["HealthCheckScheduler"]
