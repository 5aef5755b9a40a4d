# ============================================================================
# ISSUE TRACKER PROBES
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Probes - Linear and Jira
# PURPOSE: Verify OAuth tokens for issue trackers are still accepted
# CREATED: 12 OCT 2026
# ============================================================================
"""
Issue Tracker Probes

Linear:
    POST https://api.linear.app/graphql with "{ viewer { id } }".
    Linear takes the raw token in the Authorization header (no Bearer).

Jira:
    Token expiry is checked locally first; an expired token is reported
    without calling Atlassian. Otherwise GET .../rest/api/3/myself.
"""

import logging
from datetime import timedelta
from typing import Optional
from uuid import UUID

from core.contracts import IntegrationType
from core.models.integrations import JiraIntegration, LinearIntegration
from health.core import ProbeResult
from health.probes.http import HttpProber, json_body
from health.registry import register_prober

logger = logging.getLogger(__name__)

LINEAR_VIEWER_QUERY = "{ viewer { id } }"


@register_prober
class LinearProber(HttpProber):
    """Linear token check via the viewer query."""

    integration_type = IntegrationType.LINEAR

    async def load(self, workspace_id: UUID) -> Optional[LinearIntegration]:
        return await self.context.integrations.find_linear(workspace_id)

    async def check(self, linear: LinearIntegration) -> ProbeResult:
        if not linear.is_active:
            return ProbeResult.disconnected("Linear integration inactive")

        token = self.decrypt(linear.workspace_id, linear.access_token, linear.access_token_iv)
        response = await self.context.http.post(
            self.context.defaults.linear_graphql_url,
            json={"query": LINEAR_VIEWER_QUERY},
            headers={"Authorization": token},
            timeout=self.timeout_seconds,
        )
        viewer = (json_body(response).get("data") or {}).get("viewer") or {}

        if viewer.get("id"):
            if linear.error_count > 0:
                return ProbeResult.degraded(tokenValid=True, errorCount=linear.error_count)
            return ProbeResult.healthy(tokenValid=True, syncCount=linear.sync_count)

        return ProbeResult.unhealthy("Linear token validation failed", tokenValid=False)


@register_prober
class JiraProber(HttpProber):
    """Jira token check via the myself endpoint, with local expiry checks."""

    integration_type = IntegrationType.JIRA

    async def load(self, workspace_id: UUID) -> Optional[JiraIntegration]:
        return await self.context.integrations.find_jira(workspace_id)

    def _time_until_expiry(self, jira: JiraIntegration) -> Optional[timedelta]:
        """None means the token never expires."""
        expires_at = jira.token_expires_at
        if expires_at is None:
            return None
        now = self.context.clock()
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=now.tzinfo)
        return expires_at - now

    async def check(self, jira: JiraIntegration) -> ProbeResult:
        if not jira.is_active:
            return ProbeResult.disconnected("Jira integration inactive")

        remaining = self._time_until_expiry(jira)
        if remaining is not None and remaining <= timedelta(0):
            return ProbeResult.unhealthy("Jira token expired", tokenExpired=True)

        warning_window = timedelta(hours=self.context.defaults.jira_expiry_warning_hours)
        expiring_soon = remaining is not None and remaining < warning_window

        token = self.decrypt(jira.workspace_id, jira.access_token, jira.access_token_iv)
        response = await self.context.http.get(
            f"{self.context.defaults.jira_api_base_url}/{jira.cloud_id}/rest/api/3/myself",
            headers={"Authorization": f"Bearer {token}"},
            timeout=self.timeout_seconds,
        )

        if response.status_code != 200:
            return ProbeResult.unhealthy(
                f"Jira API returned {response.status_code}",
                tokenValid=False,
            )

        if expiring_soon:
            return ProbeResult.degraded(
                f"Jira token expiring within {self.context.defaults.jira_expiry_warning_hours} hours",
                tokenValid=True,
                tokenExpiringSoon=True,
            )
        if jira.error_count > 0:
            return ProbeResult.degraded(tokenValid=True, errorCount=jira.error_count)
        return ProbeResult.healthy(tokenValid=True, syncCount=jira.sync_count)


__all__ = ["LinearProber", "JiraProber", "LINEAR_VIEWER_QUERY"]
