# ============================================================================
# PROVIDER PROBES
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Probes - Built-in prober registration
# PURPOSE: Import every built-in prober so it registers itself
# CREATED: 12 OCT 2026
# ============================================================================
"""
Built-in provider probes, one per IntegrationType.

Importing this package registers:
- messaging: Slack, Discord
- trackers: Linear, Jira
- connections: GitHub, Railway, Vercel, Supabase
- webhooks: outgoing webhooks (aggregate)
"""

from health.probes.messaging import SlackProber, DiscordProber
from health.probes.trackers import LinearProber, JiraProber
from health.probes.connections import (
    ConnectionProber,
    GitHubProber,
    RailwayProber,
    VercelProber,
    SupabaseProber,
)
from health.probes.webhooks import WebhooksProber

__all__ = [
    "SlackProber",
    "DiscordProber",
    "LinearProber",
    "JiraProber",
    "ConnectionProber",
    "GitHubProber",
    "RailwayProber",
    "VercelProber",
    "SupabaseProber",
    "WebhooksProber",
]
