# ============================================================================
# INTEGRATION HEALTH ROUTES
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - HTTP endpoints for integration health
# PURPOSE: Query health state and trigger checks per workspace
# CREATED: 12 OCT 2026
# ============================================================================
"""
Integration Health Routes

Mounted under /api/v1 by main.py.

Endpoints:
- GET  /workspaces/{workspace_id}/integrations/health                         - All records
- GET  /workspaces/{workspace_id}/integrations/health/summary                 - Roll-up
- GET  /workspaces/{workspace_id}/integrations/{integration_type}/health         - One record
- GET  /workspaces/{workspace_id}/integrations/{integration_type}/health/history - History
- POST /workspaces/{workspace_id}/integrations/{integration_type}/health/check   - Force check
- POST /workspaces/{workspace_id}/integrations/{integration_type}/health/retry   - Retry failed
- GET  /integrations/health/scheduler                                         - Scheduler stats

Invalid integration types are rejected with 400 before the service is
called. Non-UUID workspace ids are rejected by FastAPI with 422.
"""

import logging
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query

from core.contracts import IntegrationType, parse_integration_type
from api.schemas import (
    ErrorResponse,
    HealthRecordResponse,
    HealthSummaryResponse,
    HistoryEntryResponse,
    RetryResponse,
    SchedulerStatsResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["integration-health"])


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================

_health_service = None
_scheduler = None


def set_health_services(health_service, scheduler=None):
    """Called by main.py at startup to inject the health service and scheduler."""
    global _health_service, _scheduler
    _health_service = health_service
    _scheduler = scheduler


def _get_health_service():
    """Get the health service, raising 503 if not initialized."""
    if _health_service is None:
        raise HTTPException(503, "Integration health service not initialized")
    return _health_service


def _get_scheduler():
    """Get the scheduler, raising 503 if not initialized."""
    if _scheduler is None:
        raise HTTPException(503, "Health check scheduler not initialized")
    return _scheduler


def _parse_type(integration_type: str) -> IntegrationType:
    """Map an invalid integration type to HTTP 400."""
    try:
        return parse_integration_type(integration_type)
    except ValueError as e:
        raise HTTPException(400, str(e))


# ============================================================================
# WORKSPACE QUERIES
# ============================================================================

@router.get(
    "/workspaces/{workspace_id}/integrations/health",
    response_model=List[HealthRecordResponse],
)
async def get_all_health(workspace_id: UUID):
    """Current health of every monitored integration in a workspace."""
    svc = _get_health_service()
    return await svc.get_all_health(workspace_id)


@router.get(
    "/workspaces/{workspace_id}/integrations/health/summary",
    response_model=HealthSummaryResponse,
)
async def get_health_summary(workspace_id: UUID):
    """Worst-status roll-up with per-status counts."""
    svc = _get_health_service()
    return await svc.get_health_summary(workspace_id)


# ============================================================================
# PER-INTEGRATION QUERIES
# ============================================================================

@router.get(
    "/workspaces/{workspace_id}/integrations/{integration_type}/health",
    response_model=HealthRecordResponse,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid integration type"},
        404: {"model": ErrorResponse, "description": "No health record"},
    },
)
async def get_health(workspace_id: UUID, integration_type: str):
    """Current health of one integration."""
    parsed = _parse_type(integration_type)
    svc = _get_health_service()

    record = await svc.get_health(workspace_id, parsed)
    if record is None:
        raise HTTPException(404, f"No health record for {parsed.value} in workspace {workspace_id}")
    return record


@router.get(
    "/workspaces/{workspace_id}/integrations/{integration_type}/health/history",
    response_model=List[HistoryEntryResponse],
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}},
)
async def get_health_history(
    workspace_id: UUID,
    integration_type: str,
    limit: Optional[int] = Query(None, ge=1, description="Max entries (capped at 100)"),
):
    """Newest-first health history. Entries without an error omit the field."""
    parsed = _parse_type(integration_type)
    svc = _get_health_service()
    return await svc.get_health_history(workspace_id, parsed, limit)


# ============================================================================
# COMMANDS
# ============================================================================

@router.post(
    "/workspaces/{workspace_id}/integrations/{integration_type}/health/check",
    response_model=HealthRecordResponse,
    responses={400: {"model": ErrorResponse}},
)
async def force_health_check(workspace_id: UUID, integration_type: str):
    """
    Probe one integration now.

    An unconnected integration yields a disconnected record.
    """
    parsed = _parse_type(integration_type)
    svc = _get_health_service()
    return await svc.force_health_check(workspace_id, parsed)


@router.post(
    "/workspaces/{workspace_id}/integrations/{integration_type}/health/retry",
    response_model=RetryResponse,
    responses={400: {"model": ErrorResponse}},
)
async def retry_failed(workspace_id: UUID, integration_type: str):
    """Re-probe an integration that is not currently healthy."""
    parsed = _parse_type(integration_type)
    svc = _get_health_service()
    return await svc.retry_failed(workspace_id, parsed)


# ============================================================================
# SCHEDULER
# ============================================================================

@router.get(
    "/integrations/health/scheduler",
    response_model=SchedulerStatsResponse,
    responses={503: {"model": ErrorResponse, "description": "Scheduler not initialized"}},
)
async def get_scheduler_stats():
    """Background scheduler statistics."""
    scheduler = _get_scheduler()
    return scheduler.stats
