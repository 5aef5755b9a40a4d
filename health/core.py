# ============================================================================
# INTEGRATION PROBE CORE TYPES
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - Base classes for provider probes
# PURPOSE: Prober plugin interface, probe result type, error sanitizing
# CREATED: 12 OCT 2026
# ============================================================================
"""
Integration Probe Core Types

Defines the plugin interface every provider probe implements and the
ephemeral result it produces.

Probe contract:
- Expected failures (auth rejected, non-200, disabled integration,
  expired token) are returned as unhealthy/disconnected results with an
  error message. Probes do not raise for them.
- Network errors inside network-bound probes are caught and returned as
  unhealthy with a sanitized message.
- Anything else that escapes probe() is caught by the dispatcher and
  recorded as unhealthy.

Status Severity (worst wins for summaries):
    healthy < degraded < unhealthy
    disconnected is counted separately
"""

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, ClassVar, Dict, Optional, Union
from uuid import UUID

import httpx

from core.config import ProbeDefaults
from core.contracts import IntegrationHealthStatus, IntegrationType
from core.models.health import utcnow
from infrastructure.encryption import WorkspaceEncryptionService
from repositories.integration_repo import IntegrationRepository


# Recorded when no provider record id could be resolved
NIL_INTEGRATION_ID = UUID(int=0)

DEFAULT_PROBE_ERROR = "Unknown probe error"

_REDACTIONS = (
    (re.compile(r"Bearer\s+[^\s\"'}]+", re.IGNORECASE), "Bearer [REDACTED]"),
    (re.compile(r"Authorization:\s*[^\s\"'}]+", re.IGNORECASE), "Authorization: [REDACTED]"),
    (re.compile(r"token[=:]\s*[^\s\"'}]+", re.IGNORECASE), "token=[REDACTED]"),
)


def sanitize_probe_error(error: Union[BaseException, str, None]) -> str:
    """
    Strip credentials from an error before it is logged or stored.

    Accepts an exception or a message. Empty input yields a generic
    message so recorded failures always carry text.
    """
    message = str(error) if error is not None else ""
    if not message:
        return DEFAULT_PROBE_ERROR
    for pattern, replacement in _REDACTIONS:
        message = pattern.sub(replacement, message)
    return message


@dataclass
class ProbeResult:
    """Outcome of a single provider probe."""
    status: IntegrationHealthStatus
    response_time_ms: int = 0
    error: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def healthy(cls, **details) -> "ProbeResult":
        """Create healthy result."""
        return cls(status=IntegrationHealthStatus.HEALTHY, details=details)

    @classmethod
    def degraded(cls, error: Optional[str] = None, **details) -> "ProbeResult":
        """Create degraded result."""
        return cls(status=IntegrationHealthStatus.DEGRADED, error=error, details=details)

    @classmethod
    def unhealthy(cls, error: str, **details) -> "ProbeResult":
        """Create unhealthy result."""
        return cls(status=IntegrationHealthStatus.UNHEALTHY, error=error, details=details)

    @classmethod
    def disconnected(cls, error: str, **details) -> "ProbeResult":
        """Create disconnected result."""
        return cls(status=IntegrationHealthStatus.DISCONNECTED, error=error, details=details)

    @classmethod
    def from_exception(cls, e: BaseException) -> "ProbeResult":
        """Create unhealthy result from an exception, secrets redacted."""
        return cls.unhealthy(sanitize_probe_error(e))


@dataclass
class ProbeContext:
    """Collaborators shared by every prober."""
    integrations: IntegrationRepository
    encryption: WorkspaceEncryptionService
    http: httpx.AsyncClient
    defaults: ProbeDefaults = field(default_factory=ProbeDefaults)
    clock: Callable[[], datetime] = utcnow


class IntegrationProber(ABC):
    """
    Base class for provider probes.

    Subclass, set integration_type, and implement load() and probe().
    Register with @register_prober.

    Attributes:
        integration_type: The IntegrationType this prober handles
        network_bound: True if probe() makes an outbound call

    Example:
        @register_prober
        class SlackProber(IntegrationProber):
            integration_type = IntegrationType.SLACK
            network_bound = True

            async def load(self, workspace_id):
                return await self.context.integrations.find_slack(workspace_id)

            async def probe(self, config):
                ...
    """

    integration_type: ClassVar[IntegrationType]
    network_bound: ClassVar[bool] = False

    def __init__(self, context: ProbeContext):
        self.context = context

    @abstractmethod
    async def load(self, workspace_id: UUID) -> Optional[Any]:
        """
        Load this provider's configuration for a workspace.

        Returns:
            Configuration, or None if the workspace has not connected it
        """

    def integration_id(self, config: Any) -> UUID:
        """Provider record id the health record is linked to."""
        return config.id

    @abstractmethod
    async def probe(self, config: Any) -> ProbeResult:
        """
        Check liveness of one loaded configuration.

        Returns:
            ProbeResult with status, optional error and details
        """

    def decrypt(self, workspace_id: UUID, encrypted_data: str, iv: str) -> str:
        """Decrypt a stored secret with the workspace key."""
        return self.context.encryption.decrypt_with_workspace_key(workspace_id, encrypted_data, iv)

    @property
    def timeout_seconds(self) -> float:
        return self.context.defaults.timeout_seconds


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "NIL_INTEGRATION_ID",
    "DEFAULT_PROBE_ERROR",
    "sanitize_probe_error",
    "ProbeResult",
    "ProbeContext",
    "IntegrationProber",
]
