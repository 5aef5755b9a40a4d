# ============================================================================
# HEALTH HISTORY STORE
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - Rolling time series of probe outcomes
# PURPOSE: Redis sorted-set access for per-integration health history
# CREATED: 12 OCT 2026
# ============================================================================
"""
Health History Store

One sorted set per (workspace, integration type):

    integration-health:history:{workspace_id}:{integration_type}

Members are HealthHistoryEntry JSON, scores are epoch milliseconds.
Redis errors propagate to the caller; the recorder and the query
service decide how to degrade.
"""

import logging
from typing import List, Union
from uuid import UUID

import redis.asyncio as aioredis
from pydantic import ValidationError

from core.contracts import IntegrationType
from core.models.health import HealthHistoryEntry

logger = logging.getLogger(__name__)


class HealthHistoryStore:
    """Sorted-set backed history, newest entries have the highest score."""

    def __init__(self, client: aioredis.Redis, key_prefix: str = "integration-health:history"):
        self.client = client
        self.key_prefix = key_prefix

    def key(self, workspace_id: Union[str, UUID], integration_type: IntegrationType) -> str:
        return f"{self.key_prefix}:{workspace_id}:{IntegrationType(integration_type).value}"

    async def append(
        self,
        workspace_id: Union[str, UUID],
        integration_type: IntegrationType,
        entry: HealthHistoryEntry,
        score_ms: int,
    ) -> None:
        """ZADD one entry scored by its check time."""
        await self.client.zadd(self.key(workspace_id, integration_type), {entry.to_json(): score_ms})

    async def range_since(
        self,
        workspace_id: Union[str, UUID],
        integration_type: IntegrationType,
        min_score_ms: int,
    ) -> List[HealthHistoryEntry]:
        """Entries with score >= min_score_ms, oldest first."""
        raw = await self.client.zrangebyscore(
            self.key(workspace_id, integration_type), min_score_ms, "+inf"
        )
        return self._parse_all(raw)

    async def latest(
        self,
        workspace_id: Union[str, UUID],
        integration_type: IntegrationType,
        limit: int,
    ) -> List[HealthHistoryEntry]:
        """Newest `limit` entries, newest first."""
        raw = await self.client.zrevrange(self.key(workspace_id, integration_type), 0, limit - 1)
        return self._parse_all(raw)

    async def prune_before(
        self,
        workspace_id: Union[str, UUID],
        integration_type: IntegrationType,
        cutoff_ms: int,
    ) -> int:
        """Remove entries scored strictly below cutoff_ms. Returns count removed."""
        return await self.client.zremrangebyscore(
            self.key(workspace_id, integration_type), "-inf", f"({cutoff_ms}"
        )

    async def trim(
        self,
        workspace_id: Union[str, UUID],
        integration_type: IntegrationType,
        max_entries: int,
    ) -> int:
        """Keep only the newest max_entries members. Returns count removed."""
        return await self.client.zremrangebyrank(
            self.key(workspace_id, integration_type), 0, -(max_entries + 1)
        )

    @staticmethod
    def _parse_all(raw: List[str]) -> List[HealthHistoryEntry]:
        entries = []
        for member in raw:
            try:
                entries.append(HealthHistoryEntry.model_validate_json(member))
            except ValidationError:
                logger.debug(f"Skipping unparseable history entry: {member[:80]!r}")
        return entries


__all__ = ["HealthHistoryStore"]
