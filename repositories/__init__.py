# ============================================================================
# REPOSITORIES MODULE
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - Data access layer
# PURPOSE: PostgreSQL and Redis access for health monitoring
# CREATED: 12 OCT 2026
# ============================================================================
"""
Repositories Module

Provides data access for the integration health monitor.
PostgreSQL via psycopg3 async with connection pooling; history via
redis.asyncio sorted sets.

Usage:
    from repositories import HealthRecordRepository, init_pool

    pool = await init_pool()
    health_repo = HealthRecordRepository(pool)
    record = await health_repo.get(workspace_id, IntegrationType.SLACK)
"""

from .database import init_pool, close_pool
from .health_repo import HealthRecordRepository
from .integration_repo import IntegrationRepository
from .history_store import HealthHistoryStore

__all__ = [
    "init_pool",
    "close_pool",
    "HealthRecordRepository",
    "IntegrationRepository",
    "HealthHistoryStore",
]
