# ============================================================================
# PROCESS PROBE ROUTER
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Infrastructure - FastAPI liveness/readiness endpoints
# PURPOSE: Container probes for the monitor process itself
# CREATED: 12 OCT 2026
# ============================================================================
"""
Process Probe Router

Endpoints:
    GET /livez   - Liveness probe (is the process alive?)
                   Instant, no external dependencies.

    GET /readyz  - Readiness probe (can we serve queries?)
                   Pings PostgreSQL and Redis. PostgreSQL down -> 503;
                   Redis down -> 200 with "degraded", since history is
                   best-effort.

These report on the monitor process, not on the integrations it monitors.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from __version__ import __version__, BUILD_DATE

logger = logging.getLogger(__name__)

probe_router = APIRouter(tags=["Probes"])

READINESS_TIMEOUT_SECONDS = 5.0


# ============================================================================
# DEPENDENCY INJECTION
# ============================================================================
# Set by main.py at startup

_pool = None
_redis = None


def set_probe_dependencies(pool, redis_client) -> None:
    """Called by main.py at startup."""
    global _pool, _redis
    _pool = pool
    _redis = redis_client


async def _check_postgres() -> Optional[str]:
    """None when reachable, else an error description."""
    if _pool is None:
        return "not initialized"
    try:
        async with _pool.connection() as conn:
            await asyncio.wait_for(conn.execute("SELECT 1"), timeout=READINESS_TIMEOUT_SECONDS)
        return None
    except Exception as e:
        return f"{type(e).__name__}: {e}"


async def _check_redis() -> Optional[str]:
    """None when reachable, else an error description."""
    if _redis is None:
        return "not initialized"
    try:
        await asyncio.wait_for(_redis.ping(), timeout=READINESS_TIMEOUT_SECONDS)
        return None
    except Exception as e:
        return f"{type(e).__name__}: {e}"


# ============================================================================
# LIVENESS PROBE
# ============================================================================

@probe_router.get("/livez")
async def liveness_probe():
    """
    Liveness probe.

    Returns 200 if the process is alive. No external checks.
    """
    return {"status": "alive", "version": __version__, "build_date": BUILD_DATE}


# ============================================================================
# READINESS PROBE
# ============================================================================

@probe_router.get("/readyz")
async def readiness_probe():
    """
    Readiness probe.

    Returns:
        200: PostgreSQL reachable (Redis may be degraded)
        503: PostgreSQL unreachable
    """
    postgres_error, redis_error = await asyncio.gather(_check_postgres(), _check_redis())

    checks: Dict[str, Any] = {
        "postgres": {"status": "unhealthy", "error": postgres_error} if postgres_error else {"status": "healthy"},
        "redis": {"status": "degraded", "error": redis_error} if redis_error else {"status": "healthy"},
    }

    if postgres_error:
        logger.warning(f"Readiness check failed: postgres {postgres_error}")
        return JSONResponse(status_code=503, content={"status": "not_ready", "checks": checks})

    return {"status": "degraded" if redis_error else "ready", "checks": checks}


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "probe_router",
    "set_probe_dependencies",
]
