# ============================================================================
# INTEGRATION CONFIGURATION REPOSITORY
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - Read-only access to provider configuration tables
# PURPOSE: Load per-workspace provider config for the health probes
# CREATED: 12 OCT 2026
# ============================================================================
"""
Integration Configuration Repository

Read-only view over the tables owned by the individual integration
modules. Secrets are returned still encrypted; probes decrypt them with
the workspace key only when needed.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from psycopg import sql
from psycopg.rows import dict_row
from psycopg_pool import AsyncConnectionPool

from core.contracts import IntegrationProvider
from core.models.integrations import (
    SlackIntegration,
    DiscordIntegration,
    LinearIntegration,
    JiraIntegration,
    IntegrationConnection,
    OutgoingWebhook,
)
from .database import (
    TABLE_SLACK,
    TABLE_DISCORD,
    TABLE_LINEAR,
    TABLE_JIRA,
    TABLE_CONNECTIONS,
    TABLE_WEBHOOKS,
)

logger = logging.getLogger(__name__)

_WORKSPACE_TABLES = (
    TABLE_SLACK,
    TABLE_DISCORD,
    TABLE_LINEAR,
    TABLE_JIRA,
    TABLE_CONNECTIONS,
    TABLE_WEBHOOKS,
)


class IntegrationRepository:
    """Repository for provider configuration records."""

    def __init__(self, pool: AsyncConnectionPool):
        self.pool = pool

    async def _fetch_one(self, table: sql.Identifier, workspace_id: UUID) -> Optional[Dict[str, Any]]:
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL("SELECT * FROM {} WHERE workspace_id = %s LIMIT 1").format(table),
                (workspace_id,),
            )
            return await result.fetchone()

    async def find_slack(self, workspace_id: UUID) -> Optional[SlackIntegration]:
        row = await self._fetch_one(TABLE_SLACK, workspace_id)
        return SlackIntegration.model_validate(row) if row else None

    async def find_discord(self, workspace_id: UUID) -> Optional[DiscordIntegration]:
        row = await self._fetch_one(TABLE_DISCORD, workspace_id)
        return DiscordIntegration.model_validate(row) if row else None

    async def find_linear(self, workspace_id: UUID) -> Optional[LinearIntegration]:
        row = await self._fetch_one(TABLE_LINEAR, workspace_id)
        return LinearIntegration.model_validate(row) if row else None

    async def find_jira(self, workspace_id: UUID) -> Optional[JiraIntegration]:
        row = await self._fetch_one(TABLE_JIRA, workspace_id)
        return JiraIntegration.model_validate(row) if row else None

    async def find_connection(
        self,
        workspace_id: UUID,
        provider: IntegrationProvider,
    ) -> Optional[IntegrationConnection]:
        """Generic connection row for GitHub/Railway/Vercel/Supabase."""
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL(
                    "SELECT * FROM {} WHERE workspace_id = %s AND provider = %s LIMIT 1"
                ).format(TABLE_CONNECTIONS),
                (workspace_id, IntegrationProvider(provider).value),
            )
            row = await result.fetchone()
            return IntegrationConnection.model_validate(row) if row else None

    async def list_webhooks(self, workspace_id: UUID) -> List[OutgoingWebhook]:
        """All outgoing webhooks for a workspace, active or not."""
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL("SELECT * FROM {} WHERE workspace_id = %s").format(TABLE_WEBHOOKS),
                (workspace_id,),
            )
            rows = await result.fetchall()
            return [OutgoingWebhook.model_validate(row) for row in rows]

    async def _distinct_workspace_ids(self, table: sql.Identifier) -> List[UUID]:
        async with self.pool.connection() as conn:
            result = await conn.execute(
                sql.SQL("SELECT DISTINCT workspace_id FROM {}").format(table)
            )
            rows = await result.fetchall()
            return [row[0] for row in rows]

    async def find_distinct_workspace_ids(self) -> List[UUID]:
        """
        Every workspace with at least one integration row of any kind.

        One DISTINCT query per provider table, run concurrently, then
        unioned. Order of the result is unspecified.
        """
        results = await asyncio.gather(
            *(self._distinct_workspace_ids(table) for table in _WORKSPACE_TABLES)
        )
        workspace_ids = set()
        for ids in results:
            workspace_ids.update(ids)
        logger.debug(f"Discovered {len(workspace_ids)} workspaces with integrations")
        return list(workspace_ids)


__all__ = ["IntegrationRepository"]
