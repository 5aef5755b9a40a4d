# ============================================================================
# DATABASE CONNECTION POOL
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - Async PostgreSQL connection management
# PURPOSE: Provide connection pooling for psycopg3 async
# CREATED: 12 OCT 2026
# ============================================================================
"""
Database Connection Pool

Manages async PostgreSQL connections using psycopg3 and psycopg_pool.
One pool per application, opened in the FastAPI lifespan.

Connection settings come from DATABASE_URL, or from the individual
POSTGRES_* variables when DATABASE_URL is unset.

Usage:
    from repositories.database import init_pool

    pool = await init_pool()
    async with pool.connection() as conn:
        result = await conn.execute("SELECT 1")
"""

import os
import logging
from typing import Optional

from psycopg import sql
from psycopg_pool import AsyncConnectionPool

logger = logging.getLogger(__name__)

# Global pool instance
_pool: Optional[AsyncConnectionPool] = None


def get_connection_string() -> str:
    """
    Get database connection string from environment.

    Priority:
    1. DATABASE_URL environment variable
    2. Individual POSTGRES_* components
    """
    if url := os.environ.get("DATABASE_URL"):
        return url

    host = os.environ.get("POSTGRES_HOST", "localhost")
    port = os.environ.get("POSTGRES_PORT", "5432")
    name = os.environ.get("POSTGRES_DB", "postgres")
    user = os.environ.get("POSTGRES_USER", "postgres")
    password = os.environ.get("POSTGRES_PASSWORD", "")
    sslmode = os.environ.get("POSTGRES_SSLMODE", "prefer")

    return f"postgresql://{user}:{password}@{host}:{port}/{name}?sslmode={sslmode}"


def mask_connection_string(conninfo: str) -> str:
    """Drop credentials from a connection string before logging it."""
    if "@" in conninfo:
        return conninfo.split("@")[-1]
    if "password=" in conninfo:
        return conninfo.split("password=")[0] + "password=***"
    return conninfo


async def init_pool(
    min_size: int = 2,
    max_size: int = 10,
    connection_string: Optional[str] = None,
) -> AsyncConnectionPool:
    """
    Initialize the global connection pool.

    Args:
        min_size: Minimum connections to maintain
        max_size: Maximum connections allowed
        connection_string: Override connection string (defaults to env)
    """
    global _pool

    if _pool is not None:
        logger.warning("Pool already initialized, returning existing pool")
        return _pool

    conninfo = connection_string or get_connection_string()
    logger.info(f"Initializing connection pool: {mask_connection_string(conninfo)}")

    _pool = AsyncConnectionPool(
        conninfo=conninfo,
        min_size=min_size,
        max_size=max_size,
        open=False,
    )

    await _pool.open()
    logger.info(f"Connection pool opened (min={min_size}, max={max_size})")

    return _pool


async def close_pool() -> None:
    """Close the global connection pool."""
    global _pool

    if _pool is not None:
        await _pool.close()
        _pool = None
        logger.info("Connection pool closed")


# ============================================================================
# SCHEMA CONSTANTS
# ============================================================================

SCHEMA = os.environ.get("DB_SCHEMA", "public")

# Table identifiers, for use with sql.SQL().format()
TABLE_HEALTH_CHECKS = sql.Identifier(SCHEMA, "integration_health_checks")

# Provider tables (read-only)
TABLE_SLACK = sql.Identifier(SCHEMA, "slack_integrations")
TABLE_DISCORD = sql.Identifier(SCHEMA, "discord_integrations")
TABLE_LINEAR = sql.Identifier(SCHEMA, "linear_integrations")
TABLE_JIRA = sql.Identifier(SCHEMA, "jira_integrations")
TABLE_CONNECTIONS = sql.Identifier(SCHEMA, "integration_connections")
TABLE_WEBHOOKS = sql.Identifier(SCHEMA, "outgoing_webhooks")


__all__ = [
    "get_connection_string",
    "mask_connection_string",
    "init_pool",
    "close_pool",
    "SCHEMA",
    "TABLE_HEALTH_CHECKS",
    "TABLE_SLACK",
    "TABLE_DISCORD",
    "TABLE_LINEAR",
    "TABLE_JIRA",
    "TABLE_CONNECTIONS",
    "TABLE_WEBHOOKS",
]
