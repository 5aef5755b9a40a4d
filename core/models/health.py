# ============================================================================
# INTEGRATION HEALTH MODELS
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core model - Persisted health state and history entries
# PURPOSE: Track the latest health of one integration per workspace
# CREATED: 12 OCT 2026
# EXPORTS: IntegrationHealthRecord, HealthHistoryEntry, HealthCounts, HealthSummary
# DEPENDENCIES: pydantic
# ============================================================================
"""
Integration Health Models

IntegrationHealthRecord is the single mutable row per
(workspace_id, integration_type). It is created lazily the first time a
probe result is recorded and is never deleted by the monitor.

HealthHistoryEntry is one JSON member of the rolling Redis sorted set.
Its wire format uses camelCase keys (responseTimeMs) so entries written
by other producers remain readable.
"""

from datetime import datetime, timezone
from typing import Any, ClassVar, Dict, List, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, computed_field

from core.contracts import IntegrationHealthStatus, IntegrationType


def utcnow() -> datetime:
    """Timezone-aware current UTC time."""
    return datetime.now(timezone.utc)


class IntegrationHealthRecord(BaseModel):
    """
    Latest health state of one integration in one workspace.

    Maps to: integration_health_checks table

    Counters:
        consecutive_failures: reset to 0 on healthy/degraded, +1 otherwise
        error_count_24h: failures in the trailing 24h of history
        uptime_30d: percent of healthy/degraded checks over 30 days
    """

    # =========================================================================
    # SQL DDL METADATA (Used by PydanticToSQL generator)
    # =========================================================================
    __sql_table__: ClassVar[str] = "integration_health_checks"
    __sql_schema__: ClassVar[str] = "public"
    __sql_primary_key__: ClassVar[List[str]] = ["id"]
    __sql_unique__: ClassVar[List[tuple]] = [
        ("uq_integration_health_workspace_type", ["workspace_id", "integration_type"]),
    ]
    __sql_indexes__: ClassVar[List[tuple]] = [
        ("idx_integration_health_workspace", ["workspace_id"]),
        ("idx_integration_health_status", ["status"]),
        ("idx_integration_health_failing", ["workspace_id", "consecutive_failures"],
         "consecutive_failures > 0"),
    ]

    # Identity
    id: UUID = Field(default_factory=uuid4)
    workspace_id: UUID
    integration_type: IntegrationType
    integration_id: UUID = Field(
        ...,
        description="Provider record id (nil UUID when none could be resolved)"
    )

    # Latest probe outcome
    status: IntegrationHealthStatus
    response_time_ms: Optional[int] = Field(default=None, ge=0)
    health_details: Dict[str, Any] = Field(
        default_factory=dict,
        description="Provider-specific probe details"
    )

    # Success / failure tracking
    last_success_at: Optional[datetime] = None
    last_error_at: Optional[datetime] = None
    last_error_message: Optional[str] = Field(
        default=None,
        description="Sanitized error from the most recent failure"
    )
    consecutive_failures: int = Field(default=0, ge=0)
    error_count_24h: int = Field(default=0, ge=0)
    uptime_30d: float = Field(default=100.0, ge=0, le=100)

    # Timestamps
    checked_at: datetime = Field(default_factory=utcnow)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @computed_field
    @property
    def is_failing(self) -> bool:
        """True when the latest check was unhealthy or disconnected."""
        return IntegrationHealthStatus(self.status).is_failure()


class HealthHistoryEntry(BaseModel):
    """
    One point in the rolling 30-day history.

    Stored as a JSON member of the sorted set
    integration-health:history:{workspace_id}:{integration_type}
    with score = epoch milliseconds of the check.
    """
    model_config = ConfigDict(populate_by_name=True)

    timestamp: str = Field(..., description="ISO-8601 time of the check")
    status: IntegrationHealthStatus
    response_time_ms: int = Field(default=0, alias="responseTimeMs")
    error: Optional[str] = None

    def to_json(self) -> str:
        """Serialize for the sorted set (camelCase, error omitted when absent)."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


class HealthCounts(BaseModel):
    """Per-status record counts for one workspace."""
    healthy: int = 0
    degraded: int = 0
    unhealthy: int = 0
    disconnected: int = 0


class HealthSummary(BaseModel):
    """
    Workspace-level roll-up.

    overall is the worst of unhealthy > degraded > healthy;
    disconnected integrations are counted but never change overall.
    """
    overall: IntegrationHealthStatus = IntegrationHealthStatus.HEALTHY
    counts: HealthCounts = Field(default_factory=HealthCounts)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "utcnow",
    "IntegrationHealthRecord",
    "HealthHistoryEntry",
    "HealthCounts",
    "HealthSummary",
]
