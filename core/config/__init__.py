# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 12 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the health monitor.
"""

from core.config.defaults import (
    ProbeDefaults,
    HistoryDefaults,
    AlertDefaults,
    SchedulerDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "ProbeDefaults",
    "HistoryDefaults",
    "AlertDefaults",
    "SchedulerDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
