# ============================================================================
# HEALTH RECORD REPOSITORY
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - Health record persistence
# PURPOSE: Database access for integration_health_checks table
# CREATED: 12 OCT 2026
# ============================================================================
"""
Health Record Repository

One row per (workspace_id, integration_type). Writes are upserts on that
unique key, so concurrent recorders for the same pair are last-write-wins.
All SQL uses psycopg sql.SQL composition for injection safety.
"""

import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from psycopg import sql
from psycopg.rows import dict_row
from psycopg.types.json import Json
from psycopg_pool import AsyncConnectionPool

from core.contracts import IntegrationType
from core.models.health import IntegrationHealthRecord
from .database import TABLE_HEALTH_CHECKS

logger = logging.getLogger(__name__)


class HealthRecordRepository:
    """Repository for IntegrationHealthRecord entities."""

    def __init__(self, pool: AsyncConnectionPool):
        self.pool = pool

    async def get(
        self,
        workspace_id: UUID,
        integration_type: IntegrationType,
    ) -> Optional[IntegrationHealthRecord]:
        """Get the record for one integration, or None if never recorded."""
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL(
                    "SELECT * FROM {} WHERE workspace_id = %s AND integration_type = %s"
                ).format(TABLE_HEALTH_CHECKS),
                (workspace_id, IntegrationType(integration_type).value),
            )
            row = await result.fetchone()
            return self._row_to_model(row) if row else None

    async def list_for_workspace(self, workspace_id: UUID) -> List[IntegrationHealthRecord]:
        """All records for a workspace, ordered by integration type."""
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL(
                    "SELECT * FROM {} WHERE workspace_id = %s ORDER BY integration_type"
                ).format(TABLE_HEALTH_CHECKS),
                (workspace_id,),
            )
            rows = await result.fetchall()
            return [self._row_to_model(row) for row in rows]

    async def upsert(self, record: IntegrationHealthRecord) -> IntegrationHealthRecord:
        """
        Insert or update the record for (workspace_id, integration_type).

        On conflict the existing row keeps its id and created_at; every
        other column is overwritten.
        """
        async with self.pool.connection() as conn:
            conn.row_factory = dict_row
            result = await conn.execute(
                sql.SQL("""
                    INSERT INTO {} (
                        id, workspace_id, integration_type, integration_id,
                        status, response_time_ms, health_details,
                        last_success_at, last_error_at, last_error_message,
                        consecutive_failures, error_count_24h, uptime_30d,
                        checked_at, created_at, updated_at
                    ) VALUES (
                        %(id)s, %(workspace_id)s, %(integration_type)s, %(integration_id)s,
                        %(status)s, %(response_time_ms)s, %(health_details)s,
                        %(last_success_at)s, %(last_error_at)s, %(last_error_message)s,
                        %(consecutive_failures)s, %(error_count_24h)s, %(uptime_30d)s,
                        %(checked_at)s, %(created_at)s, %(updated_at)s
                    )
                    ON CONFLICT (workspace_id, integration_type) DO UPDATE SET
                        integration_id = EXCLUDED.integration_id,
                        status = EXCLUDED.status,
                        response_time_ms = EXCLUDED.response_time_ms,
                        health_details = EXCLUDED.health_details,
                        last_success_at = EXCLUDED.last_success_at,
                        last_error_at = EXCLUDED.last_error_at,
                        last_error_message = EXCLUDED.last_error_message,
                        consecutive_failures = EXCLUDED.consecutive_failures,
                        error_count_24h = EXCLUDED.error_count_24h,
                        uptime_30d = EXCLUDED.uptime_30d,
                        checked_at = EXCLUDED.checked_at,
                        updated_at = EXCLUDED.updated_at
                    RETURNING *
                """).format(TABLE_HEALTH_CHECKS),
                {
                    "id": record.id,
                    "workspace_id": record.workspace_id,
                    "integration_type": IntegrationType(record.integration_type).value,
                    "integration_id": record.integration_id,
                    "status": record.status.value,
                    "response_time_ms": record.response_time_ms,
                    "health_details": Json(record.health_details),
                    "last_success_at": record.last_success_at,
                    "last_error_at": record.last_error_at,
                    "last_error_message": record.last_error_message,
                    "consecutive_failures": record.consecutive_failures,
                    "error_count_24h": record.error_count_24h,
                    "uptime_30d": record.uptime_30d,
                    "checked_at": record.checked_at,
                    "created_at": record.created_at,
                    "updated_at": record.updated_at,
                },
            )
            row = await result.fetchone()
            logger.debug(
                f"Upserted health record {record.workspace_id}/{record.integration_type.value} "
                f"status={record.status.value}"
            )
            return self._row_to_model(row) if row else record

    def _row_to_model(self, row: Dict[str, Any]) -> IntegrationHealthRecord:
        """Convert a database row to an IntegrationHealthRecord."""
        return IntegrationHealthRecord(
            id=row["id"],
            workspace_id=row["workspace_id"],
            integration_type=row["integration_type"],
            integration_id=row["integration_id"],
            status=row["status"],
            response_time_ms=row.get("response_time_ms"),
            health_details=row.get("health_details") or {},
            last_success_at=row.get("last_success_at"),
            last_error_at=row.get("last_error_at"),
            last_error_message=row.get("last_error_message"),
            consecutive_failures=row.get("consecutive_failures") or 0,
            error_count_24h=row.get("error_count_24h") or 0,
            uptime_30d=float(row["uptime_30d"]) if row.get("uptime_30d") is not None else 100.0,
            checked_at=row["checked_at"],
            created_at=row["created_at"],
            updated_at=row.get("updated_at") or row["created_at"],
        )


__all__ = ["HealthRecordRepository"]
