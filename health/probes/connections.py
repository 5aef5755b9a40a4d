# ============================================================================
# CONNECTION STATUS PROBES
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Probes - GitHub, Railway, Vercel, Supabase
# PURPOSE: Derive health from the shared integration_connections table
# CREATED: 12 OCT 2026
# ============================================================================
"""
Connection Status Probes

GitHub, Railway, Vercel and Supabase share one connection table. Their
health is derived from the stored connection status and last-use time;
no provider API is called.

    error         -> unhealthy
    expired       -> unhealthy
    disconnected  -> disconnected
    active, unused for more than stale_connection_days -> degraded
    active        -> healthy
"""

import math
from typing import Optional
from uuid import UUID

from core.contracts import ConnectionStatus, IntegrationProvider, IntegrationType
from core.models.integrations import IntegrationConnection
from health.core import IntegrationProber, ProbeResult
from health.registry import register_prober


class ConnectionProber(IntegrationProber):
    """Status-only probe over an IntegrationConnection row."""

    provider: IntegrationProvider

    async def load(self, workspace_id: UUID) -> Optional[IntegrationConnection]:
        return await self.context.integrations.find_connection(workspace_id, self.provider)

    async def probe(self, connection: IntegrationConnection) -> ProbeResult:
        name = self.integration_type.value
        status = ConnectionStatus(connection.status)
        details = {"connectionStatus": status.value}

        if status == ConnectionStatus.ERROR:
            return ProbeResult.unhealthy(f"{name} connection in error state", **details)
        if status == ConnectionStatus.EXPIRED:
            return ProbeResult.unhealthy(f"{name} connection expired", **details)
        if status == ConnectionStatus.DISCONNECTED:
            return ProbeResult.disconnected(f"{name} disconnected", **details)

        if connection.last_used_at is not None:
            last_used = connection.last_used_at
            if last_used.tzinfo is None:
                last_used = last_used.replace(tzinfo=self.context.clock().tzinfo)
            idle_days = (self.context.clock() - last_used).total_seconds() / 86400
            if idle_days > self.context.defaults.stale_connection_days:
                days = math.floor(idle_days)
                return ProbeResult.degraded(
                    f"{name} not used in {days} days",
                    daysSinceLastUse=days,
                    **details,
                )

        return ProbeResult.healthy(**details)


@register_prober
class GitHubProber(ConnectionProber):
    integration_type = IntegrationType.GITHUB
    provider = IntegrationProvider.GITHUB


@register_prober
class RailwayProber(ConnectionProber):
    integration_type = IntegrationType.RAILWAY
    provider = IntegrationProvider.RAILWAY


@register_prober
class VercelProber(ConnectionProber):
    integration_type = IntegrationType.VERCEL
    provider = IntegrationProvider.VERCEL


@register_prober
class SupabaseProber(ConnectionProber):
    integration_type = IntegrationType.SUPABASE
    provider = IntegrationProvider.SUPABASE


__all__ = [
    "ConnectionProber",
    "GitHubProber",
    "RailwayProber",
    "VercelProber",
    "SupabaseProber",
]
