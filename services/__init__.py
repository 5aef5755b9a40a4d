# ============================================================================
# SERVICES MODULE
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - Business logic layer
# PURPOSE: Integration health query/command service
# CREATED: 12 OCT 2026
# ============================================================================
"""
Services Module

Business logic between the HTTP routes and the health engine.

Usage:
    from services import IntegrationHealthService

    service = IntegrationHealthService(health_repo, history, dispatcher, recorder)
    summary = await service.get_health_summary(workspace_id)
"""

from .integration_health_service import IntegrationHealthService

__all__ = [
    "IntegrationHealthService",
]
