# ============================================================================
# INTEGRATION HEALTH MONITOR - MAIN APPLICATION
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - FastAPI application entry point
# PURPOSE: Main application with the health check scheduler
# CREATED: 12 OCT 2026
# ============================================================================
"""
Integration Health Monitor Main Application

FastAPI application that:
1. Provides HTTP API for integration health per workspace
2. Runs the health check scheduler in the background
3. Manages database, Redis and outbound HTTP connections

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import asyncio
import os
from contextlib import asynccontextmanager

import httpx
import psycopg
from fastapi import FastAPI

from __version__ import __version__, BUILD_DATE, SERVICE_NAME
from core.config import get_defaults
from core.schema import PydanticToSQL
from repositories.database import SCHEMA, init_pool, close_pool, get_connection_string
from repositories import HealthRecordRepository, IntegrationRepository, HealthHistoryStore
from infrastructure import WorkspaceEncryptionService, init_redis, close_redis
from health import (
    ProbeContext,
    ProberRegistry,
    ProbeDispatcher,
    HealthRecorder,
    HealthCheckScheduler,
    LoggingAlertSink,
    probe_router,
    set_probe_dependencies,
)
from services import IntegrationHealthService
from api import router as health_api_router, set_health_services

# Configure logging using our structured logging system
from core.logging import ComponentType, configure_logging, get_logger

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__, ComponentType.API)

# Global instances
_scheduler: HealthCheckScheduler = None


def _bootstrap_schema() -> int:
    """Create the integration_health_checks table if missing (development)."""
    generator = PydanticToSQL(schema_name=SCHEMA)
    with psycopg.connect(get_connection_string(), autocommit=True) as conn:
        return generator.execute(conn)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Initializes services on startup, cleans up on shutdown.
    """
    global _scheduler

    logger.info(f"Starting {SERVICE_NAME} v{__version__} (Build {BUILD_DATE})")
    defaults = get_defaults()

    # Optional: Bootstrap schema on startup (for development)
    if os.environ.get("AUTO_BOOTSTRAP_SCHEMA", "").lower() == "true":
        logger.info("Auto-bootstrap enabled, deploying schema...")
        try:
            count = await asyncio.to_thread(_bootstrap_schema)
            logger.info(f"Schema bootstrap completed ({count} statements)")
        except psycopg.Error as e:
            logger.warning(f"Schema bootstrap failed (may already exist): {e}")

    # Initialize database pool
    pool = await init_pool()
    logger.info("Database pool initialized")

    # Initialize Redis (history store)
    redis_client = await init_redis()

    # Shared collaborators for probes
    encryption = WorkspaceEncryptionService.from_env()
    http_client = httpx.AsyncClient(timeout=defaults.probes.timeout_seconds)

    integrations = IntegrationRepository(pool)
    health_repo = HealthRecordRepository(pool)
    history = HealthHistoryStore(redis_client, key_prefix=defaults.history.key_prefix)

    context = ProbeContext(
        integrations=integrations,
        encryption=encryption,
        http=http_client,
        defaults=defaults.probes,
    )
    registry = ProberRegistry.from_context(context)
    logger.info(f"Registered {len(registry)} integration probers")

    recorder = HealthRecorder(
        health_repo,
        history,
        alert_sink=LoggingAlertSink(),
        history_defaults=defaults.history,
        alert_defaults=defaults.alerts,
    )
    dispatcher = ProbeDispatcher(registry, recorder, defaults.probes)
    health_service = IntegrationHealthService(
        health_repo,
        history,
        dispatcher,
        recorder,
        history_defaults=defaults.history,
    )
    _scheduler = HealthCheckScheduler(dispatcher, integrations, defaults.scheduler)

    # Set services for API routes
    set_health_services(health_service=health_service, scheduler=_scheduler)
    set_probe_dependencies(pool, redis_client)

    # Start scheduler
    await _scheduler.start()

    yield

    # Shutdown
    logger.info(f"Shutting down {SERVICE_NAME}...")

    await _scheduler.stop()
    await recorder.wait_for_alerts()
    await http_client.aclose()
    await close_redis()
    await close_pool()

    logger.info(f"{SERVICE_NAME} stopped")


# Create FastAPI app
app = FastAPI(
    title="Integration Health Monitor",
    description="Liveness monitoring for third-party workspace integrations",
    version=__version__,
    lifespan=lifespan,
)

# Include process probe routes (no prefix - /livez, /readyz)
app.include_router(probe_router)

# Include API routes
app.include_router(health_api_router, prefix="/api/v1")


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": __version__,
        "build_date": BUILD_DATE,
        "status": "running",
        "docs": "/docs",
    }


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
