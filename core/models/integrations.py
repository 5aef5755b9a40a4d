# ============================================================================
# PROVIDER CONFIGURATION MODELS
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core model - Read-only views of provider configuration rows
# PURPOSE: Typed records for the credential store tables the probes read
# CREATED: 12 OCT 2026
# EXPORTS: SlackIntegration, DiscordIntegration, LinearIntegration,
#          JiraIntegration, IntegrationConnection, OutgoingWebhook
# DEPENDENCIES: pydantic
# ============================================================================
"""
Provider Configuration Models

These tables are owned by the integration modules; the health monitor
only reads them. Secret columns hold ciphertext in the
"authTagHex:ciphertextHex" format with a separate hex IV column and are
decrypted on demand with the workspace key.
"""

from datetime import datetime
from typing import ClassVar, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from core.contracts import ConnectionStatus, IntegrationProvider


class SlackIntegration(BaseModel):
    """Maps to: slack_integrations table"""
    __sql_table__: ClassVar[str] = "slack_integrations"

    id: UUID
    workspace_id: UUID
    status: str = "active"
    bot_token: str
    bot_token_iv: str
    error_count: int = 0
    last_error: Optional[str] = None
    message_count: int = 0

    @property
    def is_active(self) -> bool:
        return self.status == "active"


class DiscordIntegration(BaseModel):
    """Maps to: discord_integrations table"""
    __sql_table__: ClassVar[str] = "discord_integrations"

    id: UUID
    workspace_id: UUID
    status: str = "active"
    default_webhook_url: str
    default_webhook_url_iv: str
    error_count: int = 0
    last_error: Optional[str] = None
    message_count: int = 0

    @property
    def is_active(self) -> bool:
        return self.status == "active"


class LinearIntegration(BaseModel):
    """Maps to: linear_integrations table"""
    __sql_table__: ClassVar[str] = "linear_integrations"

    id: UUID
    workspace_id: UUID
    is_active: bool = True
    access_token: str
    access_token_iv: str
    error_count: int = 0
    sync_count: int = 0
    last_error: Optional[str] = None


class JiraIntegration(BaseModel):
    """
    Maps to: jira_integrations table

    token_expires_at of None means the token never expires.
    """
    __sql_table__: ClassVar[str] = "jira_integrations"

    id: UUID
    workspace_id: UUID
    is_active: bool = True
    access_token: str
    access_token_iv: str
    cloud_id: str
    token_expires_at: Optional[datetime] = None
    error_count: int = 0
    sync_count: int = 0
    last_error: Optional[str] = None


class IntegrationConnection(BaseModel):
    """
    Maps to: integration_connections table

    Shared table for GitHub, Railway, Vercel and Supabase connections.
    """
    __sql_table__: ClassVar[str] = "integration_connections"

    id: UUID
    workspace_id: UUID
    provider: IntegrationProvider
    status: ConnectionStatus = ConnectionStatus.ACTIVE
    last_used_at: Optional[datetime] = None


class OutgoingWebhook(BaseModel):
    """
    Maps to: outgoing_webhooks table

    A webhook is failing once consecutive_failures reaches
    max_consecutive_failures.
    """
    __sql_table__: ClassVar[str] = "outgoing_webhooks"

    id: UUID
    workspace_id: UUID
    is_active: bool = True
    consecutive_failures: int = Field(default=0, ge=0)
    max_consecutive_failures: int = Field(default=3, ge=1)

    @property
    def is_failing(self) -> bool:
        return self.consecutive_failures >= self.max_consecutive_failures


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SlackIntegration",
    "DiscordIntegration",
    "LinearIntegration",
    "JiraIntegration",
    "IntegrationConnection",
    "OutgoingWebhook",
]
