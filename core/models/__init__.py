# ============================================================================
# MODELS MODULE
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Model exports
# PURPOSE: Central export point for all Pydantic models
# CREATED: 12 OCT 2026
# ============================================================================
"""
Models Module - Central Export Point

Health models carry SQL metadata via __sql_* ClassVar attributes for DDL
generation. Provider configuration models are read-only views of tables
owned elsewhere.
"""

from core.models.health import (
    utcnow,
    IntegrationHealthRecord,
    HealthHistoryEntry,
    HealthCounts,
    HealthSummary,
)
from core.models.integrations import (
    SlackIntegration,
    DiscordIntegration,
    LinearIntegration,
    JiraIntegration,
    IntegrationConnection,
    OutgoingWebhook,
)

__all__ = [
    # Health
    "utcnow",
    "IntegrationHealthRecord",
    "HealthHistoryEntry",
    "HealthCounts",
    "HealthSummary",
    # Provider configuration
    "SlackIntegration",
    "DiscordIntegration",
    "LinearIntegration",
    "JiraIntegration",
    "IntegrationConnection",
    "OutgoingWebhook",
]
