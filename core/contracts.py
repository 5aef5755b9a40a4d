# ============================================================================
# BASE CONTRACTS & ENUMS
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Foundation - Core enums shared across probes, storage and API
# PURPOSE: Define integration type and health status enums
# CREATED: 12 OCT 2026
# EXPORTS: IntegrationType, IntegrationHealthStatus, IntegrationProvider,
#          ConnectionStatus, parse_integration_type
# ============================================================================
"""
Base contracts for the integration health monitor.

These enums cross every boundary:
- SQL (integration_health_checks table)
- Redis (history entry JSON)
- HTTP (path parameters and response bodies)
"""

from enum import Enum
from typing import Union


# ============================================================================
# INTEGRATION TYPES
# ============================================================================

class IntegrationType(str, Enum):
    """
    Closed set of integration kinds monitored per workspace.

    Adding a provider means adding a member here and registering
    one prober for it.
    """
    SLACK = "slack"
    DISCORD = "discord"
    LINEAR = "linear"
    JIRA = "jira"
    GITHUB = "github"
    RAILWAY = "railway"
    VERCEL = "vercel"
    SUPABASE = "supabase"
    WEBHOOKS = "webhooks"

    @classmethod
    def values(cls) -> list:
        """All valid string values, in declaration order."""
        return [member.value for member in cls]


class IntegrationHealthStatus(str, Enum):
    """
    Normalized health status.

    Severity (worst wins for summaries):
        healthy < degraded < unhealthy
    disconnected is counted on its own and never escalates the overall status.
    """
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"
    DISCONNECTED = "disconnected"

    def is_success(self) -> bool:
        """Healthy and degraded both count as a successful probe."""
        return self in (IntegrationHealthStatus.HEALTHY, IntegrationHealthStatus.DEGRADED)

    def is_failure(self) -> bool:
        """Unhealthy and disconnected both count as a failed probe."""
        return not self.is_success()


# ============================================================================
# GENERIC CONNECTION CONTRACTS
# ============================================================================

class IntegrationProvider(str, Enum):
    """Providers stored in the shared integration_connections table."""
    GITHUB = "github"
    RAILWAY = "railway"
    VERCEL = "vercel"
    SUPABASE = "supabase"


class ConnectionStatus(str, Enum):
    """Lifecycle state of a generic integration connection."""
    ACTIVE = "active"
    DISCONNECTED = "disconnected"
    EXPIRED = "expired"
    ERROR = "error"


# ============================================================================
# VALIDATION
# ============================================================================

def parse_integration_type(value: Union[str, IntegrationType]) -> IntegrationType:
    """
    Validate an externally supplied integration type.

    Args:
        value: Raw type string (e.g. from a URL path)

    Returns:
        Matching IntegrationType

    Raises:
        ValueError: If value is not one of the nine supported types
    """
    if isinstance(value, IntegrationType):
        return value
    try:
        return IntegrationType(str(value).strip().lower())
    except ValueError:
        raise ValueError(
            f"Invalid integration type '{value}'. "
            f"Valid types: {', '.join(IntegrationType.values())}"
        ) from None


__all__ = [
    "IntegrationType",
    "IntegrationHealthStatus",
    "IntegrationProvider",
    "ConnectionStatus",
    "parse_integration_type",
]
