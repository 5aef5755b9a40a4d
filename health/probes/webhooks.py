# ============================================================================
# OUTGOING WEBHOOK PROBE
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Probes - Aggregate outgoing webhook delivery health
# PURPOSE: Roll per-webhook failure counters into one health status
# CREATED: 12 OCT 2026
# ============================================================================
"""
Outgoing Webhook Probe

All of a workspace's webhooks are reported as a single integration.
A webhook is failing once consecutive_failures >= max_consecutive_failures.

    no active webhooks            -> disconnected
    0 failing                     -> healthy
    failing > half of active      -> unhealthy
    otherwise                     -> degraded
"""

from typing import List, Optional
from uuid import UUID

from core.contracts import IntegrationType
from core.models.integrations import OutgoingWebhook
from health.core import IntegrationProber, ProbeResult
from health.registry import register_prober


@register_prober
class WebhooksProber(IntegrationProber):
    """Aggregate delivery health of outgoing webhooks."""

    integration_type = IntegrationType.WEBHOOKS

    async def load(self, workspace_id: UUID) -> Optional[List[OutgoingWebhook]]:
        webhooks = await self.context.integrations.list_webhooks(workspace_id)
        return webhooks or None

    def integration_id(self, webhooks: List[OutgoingWebhook]) -> UUID:
        # The aggregate record is linked to the first webhook
        return webhooks[0].id

    async def probe(self, webhooks: List[OutgoingWebhook]) -> ProbeResult:
        active = [w for w in webhooks if w.is_active]
        if not active:
            return ProbeResult.disconnected("No active webhooks")

        failing = sum(1 for w in active if w.is_failing)
        total = len(active)
        details = {"activeWebhooks": total, "failingWebhooks": failing}

        if failing == 0:
            return ProbeResult.healthy(**details)
        if failing > total / 2:
            return ProbeResult.unhealthy(f"{failing}/{total} webhooks failing", **details)
        return ProbeResult.degraded(f"{failing}/{total} webhooks failing", **details)


__all__ = ["WebhooksProber"]
