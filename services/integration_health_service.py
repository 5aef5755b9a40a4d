# ============================================================================
# INTEGRATION HEALTH SERVICE
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Service - Query and command surface for integration health
# PURPOSE: Read records/history/summary, force checks and retries
# CREATED: 12 OCT 2026
# ============================================================================
"""
IntegrationHealthService

Coordination layer between the HTTP routes and the health engine.

Queries:
- get_all_health / get_health: persisted records
- get_health_summary: worst-status roll-up with per-status counts
- get_health_history: newest-first history from the sorted set

Commands:
- force_health_check: probe now and record the outcome
- retry_failed: re-probe once when the integration is not healthy

Pattern: Constructor injection of repositories and engine components,
async methods, no HTTP concerns.
"""

from typing import Any, Dict, List, Optional
from uuid import UUID

from core.config import HistoryDefaults
from core.contracts import IntegrationHealthStatus, IntegrationType
from core.logging import ComponentType, get_logger
from core.models.health import (
    HealthCounts,
    HealthHistoryEntry,
    HealthSummary,
    IntegrationHealthRecord,
)
from health.dispatcher import ProbeDispatcher
from health.recorder import HealthRecorder
from repositories.health_repo import HealthRecordRepository
from repositories.history_store import HealthHistoryStore

logger = get_logger(__name__, ComponentType.SERVICE)


class IntegrationHealthService:
    """Business rules for reading and refreshing integration health."""

    def __init__(
        self,
        health_repo: HealthRecordRepository,
        history: HealthHistoryStore,
        dispatcher: ProbeDispatcher,
        recorder: HealthRecorder,
        history_defaults: Optional[HistoryDefaults] = None,
    ):
        self.health_repo = health_repo
        self.history = history
        self.dispatcher = dispatcher
        self.recorder = recorder
        self.history_defaults = history_defaults or HistoryDefaults()

    # ================================================================
    # QUERIES
    # ================================================================

    async def get_all_health(self, workspace_id: UUID) -> List[IntegrationHealthRecord]:
        return await self.health_repo.list_for_workspace(workspace_id)

    async def get_health(
        self,
        workspace_id: UUID,
        integration_type: IntegrationType,
    ) -> Optional[IntegrationHealthRecord]:
        return await self.health_repo.get(workspace_id, integration_type)

    async def get_health_summary(self, workspace_id: UUID) -> HealthSummary:
        """
        Roll up all records for a workspace.

        overall = unhealthy if any unhealthy, else degraded if any degraded,
        else healthy. Disconnected integrations are only counted.
        """
        records = await self.health_repo.list_for_workspace(workspace_id)

        counts = HealthCounts()
        for record in records:
            status = IntegrationHealthStatus(record.status)
            setattr(counts, status.value, getattr(counts, status.value) + 1)

        if counts.unhealthy > 0:
            overall = IntegrationHealthStatus.UNHEALTHY
        elif counts.degraded > 0:
            overall = IntegrationHealthStatus.DEGRADED
        else:
            overall = IntegrationHealthStatus.HEALTHY

        return HealthSummary(overall=overall, counts=counts)

    async def get_health_history(
        self,
        workspace_id: UUID,
        integration_type: IntegrationType,
        limit: Optional[int] = None,
    ) -> List[HealthHistoryEntry]:
        """
        Newest-first history entries.

        Args:
            limit: Capped at max_query_limit; defaults to max_query_limit

        Returns:
            Entries, or [] when the history store cannot be read or
            limit is not positive
        """
        max_limit = self.history_defaults.max_query_limit
        if limit is None:
            limit = max_limit
        if limit <= 0:
            return []
        limit = min(limit, max_limit)

        try:
            return await self.history.latest(workspace_id, integration_type, limit)
        except Exception as e:
            logger.warning(f"Failed to read health history for {integration_type.value}: {e}")
            return []

    # ================================================================
    # COMMANDS
    # ================================================================

    async def force_health_check(
        self,
        workspace_id: UUID,
        integration_type: IntegrationType,
    ) -> IntegrationHealthRecord:
        """
        Probe one integration immediately.

        Returns:
            The updated record. When the integration is not connected, a
            disconnected record (persisted only if one already existed).
        """
        logger.info(f"Forced health check: {integration_type.value} in {workspace_id}")
        record = await self.dispatcher.check_integration(workspace_id, integration_type)
        if record is not None:
            return record
        return await self.recorder.record_disconnected(workspace_id, integration_type)

    async def retry_failed(
        self,
        workspace_id: UUID,
        integration_type: IntegrationType,
    ) -> Dict[str, Any]:
        """
        Re-probe an integration that is currently not healthy.

        Returns:
            {"retried_count": 0} if there is no record or it is healthy,
            else {"retried_count": 1} after one probe
        """
        record = await self.health_repo.get(workspace_id, integration_type)
        if record is None or IntegrationHealthStatus(record.status) == IntegrationHealthStatus.HEALTHY:
            return {"retried_count": 0}

        logger.info(
            f"Retrying {integration_type.value} in {workspace_id} "
            f"(status={IntegrationHealthStatus(record.status).value})"
        )
        await self.dispatcher.check_integration(workspace_id, integration_type)
        return {"retried_count": 1}


__all__ = ["IntegrationHealthService"]
