# ============================================================================
# MESSAGING PROBES
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Probes - Slack and Discord
# PURPOSE: Verify chat integrations can still authenticate / deliver
# CREATED: 12 OCT 2026
# ============================================================================
"""
Messaging Probes

Slack:
    POST https://slack.com/api/auth.test with the decrypted bot token.
    Slack answers 200 even for bad tokens; the verdict is the "ok" flag.

Discord:
    GET on the decrypted default webhook URL. A valid webhook answers 200
    with its metadata; deleted webhooks answer 404.
"""

import logging
from typing import Optional
from uuid import UUID

from core.contracts import IntegrationType
from core.models.integrations import DiscordIntegration, SlackIntegration
from health.core import ProbeResult
from health.probes.http import HttpProber, json_body
from health.registry import register_prober

logger = logging.getLogger(__name__)


@register_prober
class SlackProber(HttpProber):
    """Slack bot token check via auth.test."""

    integration_type = IntegrationType.SLACK

    async def load(self, workspace_id: UUID) -> Optional[SlackIntegration]:
        return await self.context.integrations.find_slack(workspace_id)

    async def check(self, slack: SlackIntegration) -> ProbeResult:
        if not slack.is_active:
            return ProbeResult.disconnected(f"Slack status: {slack.status}")

        token = self.decrypt(slack.workspace_id, slack.bot_token, slack.bot_token_iv)
        response = await self.context.http.post(
            self.context.defaults.slack_auth_test_url,
            headers={"Authorization": f"Bearer {token}"},
            timeout=self.timeout_seconds,
        )
        data = json_body(response)

        if data.get("ok"):
            if slack.error_count > 0:
                return ProbeResult.degraded(
                    tokenValid=True,
                    errorCount=slack.error_count,
                    lastError=slack.last_error,
                )
            return ProbeResult.healthy(tokenValid=True, messageCount=slack.message_count)

        return ProbeResult.unhealthy(
            data.get("error") or "Slack auth.test failed",
            tokenValid=False,
        )


@register_prober
class DiscordProber(HttpProber):
    """Discord webhook reachability check."""

    integration_type = IntegrationType.DISCORD

    async def load(self, workspace_id: UUID) -> Optional[DiscordIntegration]:
        return await self.context.integrations.find_discord(workspace_id)

    async def check(self, discord: DiscordIntegration) -> ProbeResult:
        if not discord.is_active:
            return ProbeResult.disconnected(f"Discord status: {discord.status}")

        webhook_url = self.decrypt(
            discord.workspace_id,
            discord.default_webhook_url,
            discord.default_webhook_url_iv,
        )
        response = await self.context.http.get(webhook_url, timeout=self.timeout_seconds)

        if response.status_code == 200:
            if discord.error_count > 0:
                return ProbeResult.degraded(webhookValid=True, errorCount=discord.error_count)
            return ProbeResult.healthy(webhookValid=True, messageCount=discord.message_count)

        return ProbeResult.unhealthy(
            f"Discord webhook returned {response.status_code}",
            webhookValid=False,
        )


__all__ = ["SlackProber", "DiscordProber"]
