# ============================================================================
# HEALTH ALERTS
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - Edge-triggered health alerts
# PURPOSE: Decide which alerts a recorded result fires and emit them
# CREATED: 12 OCT 2026
# ============================================================================
"""
Health Alerts

Alerts fire on edges, not levels:

    consecutive_failures == unhealthy_threshold (3)    -> WARNING  unhealthy
    consecutive_failures == escalation_threshold (12)  -> ERROR    escalated
    previous in {unhealthy, degraded}, now healthy     -> INFO     recovered

A failing integration therefore warns once at 3 and escalates once at 12
(about one hour at the default 5-minute cadence), however long it stays down.

Alerts go to an AlertSink. The default sink writes structured log lines
to the "integration_health.alerts" logger.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from core.config import AlertDefaults
from core.contracts import IntegrationHealthStatus
from core.models.health import IntegrationHealthRecord

logger = logging.getLogger(__name__)

ALERT_LOGGER_NAME = "integration_health.alerts"


class AlertKind(str, Enum):
    UNHEALTHY = "unhealthy"
    ESCALATED = "escalated"
    RECOVERED = "recovered"


class AlertSeverity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass
class HealthAlert:
    """One alert about one integration in one workspace."""
    kind: AlertKind
    severity: AlertSeverity
    workspace_id: str
    integration_type: str
    status: IntegrationHealthStatus
    consecutive_failures: int
    message: str
    previous_status: Optional[IntegrationHealthStatus] = None
    last_error_message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for structured logging."""
        return {
            "alert": self.kind.value,
            "severity": self.severity.value,
            "workspace_id": self.workspace_id,
            "integration_type": self.integration_type,
            "status": self.status.value,
            "previous_status": self.previous_status.value if self.previous_status else None,
            "consecutive_failures": self.consecutive_failures,
            "last_error_message": self.last_error_message,
        }


def evaluate_alerts(
    record: IntegrationHealthRecord,
    previous_status: Optional[IntegrationHealthStatus],
    thresholds: Optional[AlertDefaults] = None,
) -> List[HealthAlert]:
    """
    Alerts fired by the transition to `record`.

    Args:
        record: The record as just persisted
        previous_status: Status before this result, None for a new record
        thresholds: Consecutive-failure thresholds
    """
    thresholds = thresholds or AlertDefaults()
    integration = record.integration_type.value
    workspace = str(record.workspace_id)
    failures = record.consecutive_failures
    alerts: List[HealthAlert] = []

    def make(kind: AlertKind, severity: AlertSeverity, message: str) -> HealthAlert:
        return HealthAlert(
            kind=kind,
            severity=severity,
            workspace_id=workspace,
            integration_type=integration,
            status=record.status,
            consecutive_failures=failures,
            message=message,
            previous_status=previous_status,
            last_error_message=record.last_error_message,
        )

    if failures == thresholds.unhealthy_threshold:
        alerts.append(make(
            AlertKind.UNHEALTHY,
            AlertSeverity.WARNING,
            f"Integration {integration} is unhealthy for workspace {workspace}",
        ))

    if failures == thresholds.escalation_threshold:
        alerts.append(make(
            AlertKind.ESCALATED,
            AlertSeverity.ERROR,
            f"Integration {integration} has been unhealthy for "
            f"{failures} consecutive checks for workspace {workspace}",
        ))

    if (
        previous_status in (IntegrationHealthStatus.UNHEALTHY, IntegrationHealthStatus.DEGRADED)
        and record.status == IntegrationHealthStatus.HEALTHY
    ):
        alerts.append(make(
            AlertKind.RECOVERED,
            AlertSeverity.INFO,
            f"Integration {integration} has recovered for workspace {workspace}",
        ))

    return alerts


class AlertSink(ABC):
    """Destination for health alerts."""

    @abstractmethod
    async def emit(self, alert: HealthAlert) -> None:
        """Deliver one alert."""


class LoggingAlertSink(AlertSink):
    """Writes alerts as log records at a level matching their severity."""

    LEVELS = {
        AlertSeverity.INFO: logging.INFO,
        AlertSeverity.WARNING: logging.WARNING,
        AlertSeverity.ERROR: logging.ERROR,
    }

    def __init__(self, alert_logger: Optional[logging.Logger] = None):
        self.logger = alert_logger or logging.getLogger(ALERT_LOGGER_NAME)

    async def emit(self, alert: HealthAlert) -> None:
        self.logger.log(
            self.LEVELS[alert.severity],
            alert.message,
            extra={"extra": alert.to_dict()},
        )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ALERT_LOGGER_NAME",
    "AlertKind",
    "AlertSeverity",
    "HealthAlert",
    "evaluate_alerts",
    "AlertSink",
    "LoggingAlertSink",
]
