# ============================================================================
# API SCHEMAS
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - Response schemas
# PURPOSE: Pydantic models for the integration health API
# CREATED: 12 OCT 2026
# ============================================================================
"""
API Schemas

Response models for the integration health API.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from core.contracts import IntegrationHealthStatus, IntegrationType


# ============================================================================
# RESPONSE SCHEMAS
# ============================================================================

class HealthRecordResponse(BaseModel):
    """Current health state of one integration."""
    id: UUID
    workspace_id: UUID
    integration_type: IntegrationType
    integration_id: UUID
    status: IntegrationHealthStatus
    response_time_ms: Optional[int] = None
    health_details: Dict[str, Any] = {}
    last_success_at: Optional[datetime] = None
    last_error_at: Optional[datetime] = None
    last_error_message: Optional[str] = None
    consecutive_failures: int = 0
    error_count_24h: int = 0
    uptime_30d: float = 100.0
    is_failing: bool = False
    checked_at: datetime
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class HealthCountsResponse(BaseModel):
    """Per-status record counts."""
    healthy: int = 0
    degraded: int = 0
    unhealthy: int = 0
    disconnected: int = 0

    model_config = {"from_attributes": True}


class HealthSummaryResponse(BaseModel):
    """Workspace roll-up of integration health."""
    overall: IntegrationHealthStatus
    counts: HealthCountsResponse

    model_config = {"from_attributes": True}


class HistoryEntryResponse(BaseModel):
    """One history point, newest first in list responses."""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    timestamp: str
    status: IntegrationHealthStatus
    response_time_ms: int = Field(default=0, alias="responseTimeMs")
    error: Optional[str] = None


class RetryResponse(BaseModel):
    """Result of a retry request."""
    retried_count: int = Field(..., ge=0, le=1)


class SchedulerStatsResponse(BaseModel):
    """Background scheduler statistics."""
    enabled: bool
    running: bool
    interval_seconds: float
    max_concurrent_workspaces: int
    started_at: Optional[str] = None
    cycles: int = 0
    last_cycle_at: Optional[str] = None
    last_cycle_duration_ms: Optional[int] = None
    workspaces_checked: int = 0
    integrations_checked: int = 0
    errors: int = 0


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthRecordResponse",
    "HealthCountsResponse",
    "HealthSummaryResponse",
    "HistoryEntryResponse",
    "RetryResponse",
    "SchedulerStatsResponse",
    "ErrorResponse",
]
