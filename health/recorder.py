# ============================================================================
# HEALTH RECORDER
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - Persist probe outcomes
# PURPOSE: Update health records, history, rolling stats and fire alerts
# CREATED: 12 OCT 2026
# ============================================================================
"""
Health Recorder

Turns one ProbeResult into persistent state:

1. Load the (workspace, type) record, or start a new one
2. Overwrite status / latency / details / checked_at / integration_id
3. Success (healthy, degraded): last_success_at = now, failures reset
   Failure (unhealthy, disconnected): last_error_* set, failures + 1
4. Append a history entry
5. error_count_24h from the trailing 24h of history
6. uptime_30d from the trailing 30 days of history
7. Prune entries older than 30 days, trim to max_entries
8. Upsert the record
9. Evaluate alerts in a separate task

History steps are best-effort: a Redis failure is logged and the record
is still persisted with fallback statistics. Alert failures never reach
the caller.
"""

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Set
from uuid import UUID

from core.config import AlertDefaults, HistoryDefaults
from core.contracts import IntegrationHealthStatus, IntegrationType
from core.logging import ComponentType, get_logger
from core.models.health import HealthHistoryEntry, IntegrationHealthRecord, utcnow
from health.alerts import AlertSink, LoggingAlertSink, evaluate_alerts
from health.core import NIL_INTEGRATION_ID, ProbeResult, sanitize_probe_error
from repositories.health_repo import HealthRecordRepository
from repositories.history_store import HealthHistoryStore

logger = get_logger(__name__, ComponentType.RECORDER)


def to_epoch_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def to_iso(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a Z suffix."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class HealthRecorder:
    """Persists probe results and keeps the rolling statistics current."""

    def __init__(
        self,
        health_repo: HealthRecordRepository,
        history: HealthHistoryStore,
        alert_sink: Optional[AlertSink] = None,
        history_defaults: Optional[HistoryDefaults] = None,
        alert_defaults: Optional[AlertDefaults] = None,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.health_repo = health_repo
        self.history = history
        self.alert_sink = alert_sink or LoggingAlertSink()
        self.history_defaults = history_defaults or HistoryDefaults()
        self.alert_defaults = alert_defaults or AlertDefaults()
        self.clock = clock
        self._alert_tasks: Set[asyncio.Task] = set()

    # =========================================================================
    # RECORDING
    # =========================================================================

    async def record_probe_result(
        self,
        workspace_id: UUID,
        integration_type: IntegrationType,
        integration_id: Optional[UUID],
        result: ProbeResult,
    ) -> IntegrationHealthRecord:
        """
        Apply one probe result to the (workspace, type) health record.

        Args:
            workspace_id: Workspace the integration belongs to
            integration_type: Which integration was probed
            integration_id: Provider record id, None if it could not be resolved
            result: Outcome of the probe

        Returns:
            The persisted record
        """
        now = self.clock()
        status = IntegrationHealthStatus(result.status)
        error = sanitize_probe_error(result.error) if result.error else None

        record = await self.health_repo.get(workspace_id, integration_type)
        previous_status = record.status if record else None

        if record is None:
            record = IntegrationHealthRecord(
                workspace_id=workspace_id,
                integration_type=integration_type,
                integration_id=integration_id or NIL_INTEGRATION_ID,
                status=status,
                checked_at=now,
                created_at=now,
                updated_at=now,
            )

        record.status = status
        record.response_time_ms = result.response_time_ms
        record.health_details = dict(result.details or {})
        record.checked_at = now
        record.updated_at = now
        if integration_id is not None:
            record.integration_id = integration_id

        if status.is_success():
            record.last_success_at = now
            record.consecutive_failures = 0
        else:
            record.last_error_at = now
            record.last_error_message = error or sanitize_probe_error(None)
            record.consecutive_failures += 1

        await self._update_history(record, result, error, now)

        saved = await self.health_repo.upsert(record)

        logger.debug(
            f"Recorded {integration_type.value} for {workspace_id}: {status.value} "
            f"(failures={saved.consecutive_failures}, uptime={saved.uptime_30d})"
        )

        self._spawn_alerts(saved, previous_status)
        return saved

    async def record_disconnected(
        self,
        workspace_id: UUID,
        integration_type: IntegrationType,
    ) -> IntegrationHealthRecord:
        """
        Disconnected view of an integration that has no configuration.

        An existing record is marked disconnected and persisted. When no
        record exists an unsaved one is returned, so unconfigured
        integrations never gain a row.
        """
        now = self.clock()
        record = await self.health_repo.get(workspace_id, integration_type)

        if record is None:
            return IntegrationHealthRecord(
                workspace_id=workspace_id,
                integration_type=integration_type,
                integration_id=NIL_INTEGRATION_ID,
                status=IntegrationHealthStatus.DISCONNECTED,
                checked_at=now,
                created_at=now,
                updated_at=now,
            )

        record.status = IntegrationHealthStatus.DISCONNECTED
        record.checked_at = now
        record.updated_at = now
        return await self.health_repo.upsert(record)

    # =========================================================================
    # HISTORY AND ROLLING STATISTICS
    # =========================================================================

    async def _update_history(
        self,
        record: IntegrationHealthRecord,
        result: ProbeResult,
        error: Optional[str],
        now: datetime,
    ) -> None:
        workspace_id = record.workspace_id
        integration_type = record.integration_type
        now_ms = to_epoch_ms(now)

        entry = HealthHistoryEntry(
            timestamp=to_iso(now),
            status=record.status,
            response_time_ms=result.response_time_ms,
            error=error,
        )
        try:
            await self.history.append(workspace_id, integration_type, entry, now_ms)
        except Exception as e:
            logger.warning(
                f"Failed to append health history for {integration_type.value}: {sanitize_probe_error(e)}"
            )

        error_count = await self.count_recent_errors(workspace_id, integration_type, now)
        if error_count is not None:
            record.error_count_24h = error_count

        record.uptime_30d = await self.calculate_uptime_30d(workspace_id, integration_type, now)

        await self.prune_history(workspace_id, integration_type, now)

    async def count_recent_errors(
        self,
        workspace_id: UUID,
        integration_type: IntegrationType,
        now: Optional[datetime] = None,
    ) -> Optional[int]:
        """
        Unhealthy/disconnected entries in the trailing error window.

        Returns:
            The count, or None when history could not be read
        """
        now = now or self.clock()
        since_ms = to_epoch_ms(now) - self.history_defaults.error_window_ms
        try:
            entries = await self.history.range_since(workspace_id, integration_type, since_ms)
        except Exception as e:
            logger.warning(
                f"Failed to count recent errors for {integration_type.value}: {sanitize_probe_error(e)}"
            )
            return None
        return sum(1 for entry in entries if IntegrationHealthStatus(entry.status).is_failure())

    async def calculate_uptime_30d(
        self,
        workspace_id: UUID,
        integration_type: IntegrationType,
        now: Optional[datetime] = None,
    ) -> float:
        """
        Percent of healthy/degraded checks over the retention window.

        100.0 when there is no history or history cannot be read.
        """
        now = now or self.clock()
        since_ms = to_epoch_ms(now) - self.history_defaults.retention_ms
        try:
            entries = await self.history.range_since(workspace_id, integration_type, since_ms)
        except Exception as e:
            logger.warning(
                f"Failed to calculate uptime for {integration_type.value}: {sanitize_probe_error(e)}"
            )
            return 100.0

        if not entries:
            return 100.0

        successes = sum(1 for entry in entries if IntegrationHealthStatus(entry.status).is_success())
        return round(successes / len(entries) * 100, 2)

    async def prune_history(
        self,
        workspace_id: UUID,
        integration_type: IntegrationType,
        now: Optional[datetime] = None,
    ) -> None:
        """Drop entries past retention, then cap the set size."""
        now = now or self.clock()
        cutoff = now - timedelta(days=self.history_defaults.retention_days)
        try:
            await self.history.prune_before(workspace_id, integration_type, to_epoch_ms(cutoff))
            await self.history.trim(workspace_id, integration_type, self.history_defaults.max_entries)
        except Exception as e:
            logger.warning(
                f"Failed to prune health history for {integration_type.value}: {sanitize_probe_error(e)}"
            )

    # =========================================================================
    # ALERTS
    # =========================================================================

    def _spawn_alerts(
        self,
        record: IntegrationHealthRecord,
        previous_status: Optional[IntegrationHealthStatus],
    ) -> None:
        task = asyncio.create_task(self._handle_alerts(record, previous_status))
        self._alert_tasks.add(task)
        task.add_done_callback(self._alert_tasks.discard)

    async def _handle_alerts(
        self,
        record: IntegrationHealthRecord,
        previous_status: Optional[IntegrationHealthStatus],
    ) -> None:
        try:
            for alert in evaluate_alerts(record, previous_status, self.alert_defaults):
                await self.alert_sink.emit(alert)
        except Exception as e:
            # Fire-and-forget - log but don't raise
            logger.warning(
                f"Alert handling failed for {record.integration_type.value}: {sanitize_probe_error(e)}"
            )

    async def wait_for_alerts(self) -> None:
        """Wait for in-flight alert tasks (tests and shutdown)."""
        if self._alert_tasks:
            await asyncio.gather(*list(self._alert_tasks), return_exceptions=True)


__all__ = ["HealthRecorder", "to_epoch_ms", "to_iso"]
