# ============================================================================
# CORE MODULE
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core module initialization
# PURPOSE: Export core contracts, models, and schema utilities
# CREATED: 12 OCT 2026
# ============================================================================

from core.contracts import (
    IntegrationType,
    IntegrationHealthStatus,
    IntegrationProvider,
    ConnectionStatus,
    parse_integration_type,
)
from core.models import (
    IntegrationHealthRecord,
    HealthHistoryEntry,
    HealthSummary,
)
from core.schema import PydanticToSQL

__all__ = [
    # Enums
    "IntegrationType",
    "IntegrationHealthStatus",
    "IntegrationProvider",
    "ConnectionStatus",
    "parse_integration_type",
    # Models
    "IntegrationHealthRecord",
    "HealthHistoryEntry",
    "HealthSummary",
    # Schema
    "PydanticToSQL",
]
