# ============================================================================
# API MODULE
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - FastAPI routes
# PURPOSE: HTTP API for integration health
# CREATED: 12 OCT 2026
# ============================================================================
"""
API Module

FastAPI routes for the integration health monitor.
"""

from .health_routes import router, set_health_services
from .schemas import (
    HealthRecordResponse,
    HealthSummaryResponse,
    HistoryEntryResponse,
    RetryResponse,
    SchedulerStatsResponse,
)

__all__ = [
    "router",
    "set_health_services",
    "HealthRecordResponse",
    "HealthSummaryResponse",
    "HistoryEntryResponse",
    "RetryResponse",
    "SchedulerStatsResponse",
]
