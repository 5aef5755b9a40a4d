# ============================================================================
# INTEGRATION HEALTH MODULE
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - Probing, recording and scheduling
# PURPOSE: Periodic liveness checks for third-party workspace integrations
# CREATED: 12 OCT 2026
# ============================================================================
"""
Integration Health Module

Plugin-based probing engine:
- IntegrationProber: Base class for provider probes (one per type)
- ProberRegistry: Probers bound to shared collaborators
- ProbeDispatcher: Timeout-bounded probe execution
- HealthRecorder: Record state, history, rolling stats, alerts
- HealthCheckScheduler: Periodic sweep over all workspaces

Usage:
    from health import ProbeContext, ProberRegistry, ProbeDispatcher

    registry = ProberRegistry.from_context(context)
    dispatcher = ProbeDispatcher(registry, recorder)
    records = await dispatcher.check_workspace_health(workspace_id)
"""

from health.core import (
    NIL_INTEGRATION_ID,
    ProbeResult,
    ProbeContext,
    IntegrationProber,
    sanitize_probe_error,
)
from health.registry import (
    ProberRegistry,
    register_prober,
    get_prober_classes,
)
from health.alerts import (
    AlertSink,
    LoggingAlertSink,
    HealthAlert,
    evaluate_alerts,
)
from health.recorder import HealthRecorder
from health.dispatcher import ProbeDispatcher
from health.scheduler import HealthCheckScheduler
from health.router import probe_router, set_probe_dependencies

__all__ = [
    # Core types
    "NIL_INTEGRATION_ID",
    "ProbeResult",
    "ProbeContext",
    "IntegrationProber",
    "sanitize_probe_error",
    # Registry
    "ProberRegistry",
    "register_prober",
    "get_prober_classes",
    # Alerts
    "AlertSink",
    "LoggingAlertSink",
    "HealthAlert",
    "evaluate_alerts",
    # Execution
    "HealthRecorder",
    "ProbeDispatcher",
    "HealthCheckScheduler",
    # Router
    "probe_router",
    "set_probe_dependencies",
]
