# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for probing, history, alerting, scheduling
# CREATED: 12 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides defaults for the integration health monitor.
Each group can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
    """Read a boolean flag from the environment."""
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class ProbeDefaults:
    """
    Defaults for individual provider probes.

    The timeout bounds every probe, network-bound or not.
    """
    timeout_ms: int = 10000

    # Generic connections (GitHub/Railway/Vercel/Supabase) unused for
    # longer than this are reported degraded
    stale_connection_days: int = 7

    # Jira tokens expiring sooner than this are reported degraded
    jira_expiry_warning_hours: int = 24

    # Provider endpoints
    slack_auth_test_url: str = "https://slack.com/api/auth.test"
    linear_graphql_url: str = "https://api.linear.app/graphql"
    jira_api_base_url: str = "https://api.atlassian.com/ex/jira"

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000.0

    @classmethod
    def from_env(cls) -> "ProbeDefaults":
        """Create from environment variables."""
        return cls(
            timeout_ms=int(os.getenv("INTEGRATION_HEALTH_PROBE_TIMEOUT_MS", 10000)),
            stale_connection_days=int(os.getenv("INTEGRATION_HEALTH_STALE_DAYS", 7)),
            jira_expiry_warning_hours=int(os.getenv("INTEGRATION_HEALTH_JIRA_EXPIRY_HOURS", 24)),
        )


@dataclass(frozen=True)
class HistoryDefaults:
    """
    Defaults for the rolling health history.

    max_entries covers 30 days of checks at a 5-minute cadence (30 * 288).
    """
    key_prefix: str = "integration-health:history"
    retention_days: int = 30
    error_window_hours: int = 24
    max_entries: int = 8640
    max_query_limit: int = 100

    @property
    def retention_ms(self) -> int:
        return self.retention_days * 24 * 60 * 60 * 1000

    @property
    def error_window_ms(self) -> int:
        return self.error_window_hours * 60 * 60 * 1000

    @classmethod
    def from_env(cls) -> "HistoryDefaults":
        """Create from environment variables."""
        return cls(
            key_prefix=os.getenv("INTEGRATION_HEALTH_HISTORY_PREFIX", "integration-health:history"),
            retention_days=int(os.getenv("INTEGRATION_HEALTH_RETENTION_DAYS", 30)),
            max_entries=int(os.getenv("INTEGRATION_HEALTH_MAX_HISTORY", 8640)),
        )


@dataclass(frozen=True)
class AlertDefaults:
    """
    Consecutive-failure thresholds for edge-triggered alerts.

    At a 5-minute cadence, 12 failures is roughly one hour.
    """
    unhealthy_threshold: int = 3
    escalation_threshold: int = 12

    @classmethod
    def from_env(cls) -> "AlertDefaults":
        """Create from environment variables."""
        return cls(
            unhealthy_threshold=int(os.getenv("INTEGRATION_HEALTH_ALERT_THRESHOLD", 3)),
            escalation_threshold=int(os.getenv("INTEGRATION_HEALTH_ESCALATION_THRESHOLD", 12)),
        )


@dataclass(frozen=True)
class SchedulerDefaults:
    """Defaults for the periodic health check scheduler."""
    enabled: bool = True
    interval_seconds: float = 300.0
    max_concurrent_workspaces: int = 10

    @classmethod
    def from_env(cls) -> "SchedulerDefaults":
        """Create from environment variables."""
        return cls(
            enabled=_env_bool("INTEGRATION_HEALTH_SCHEDULER_ENABLED", True),
            interval_seconds=float(os.getenv("INTEGRATION_HEALTH_INTERVAL_SEC", 300)),
            max_concurrent_workspaces=int(
                os.getenv("INTEGRATION_HEALTH_MAX_CONCURRENT_WORKSPACES", 10)
            ),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    probes: ProbeDefaults = field(default_factory=ProbeDefaults)
    history: HistoryDefaults = field(default_factory=HistoryDefaults)
    alerts: AlertDefaults = field(default_factory=AlertDefaults)
    scheduler: SchedulerDefaults = field(default_factory=SchedulerDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            probes=ProbeDefaults.from_env(),
            history=HistoryDefaults.from_env(),
            alerts=AlertDefaults.from_env(),
            scheduler=SchedulerDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ProbeDefaults",
    "HistoryDefaults",
    "AlertDefaults",
    "SchedulerDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
