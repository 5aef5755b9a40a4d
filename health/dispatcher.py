# ============================================================================
# PROBE DISPATCHER
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - Timeout-bounded probe execution
# PURPOSE: Resolve an integration, run its probe, hand the result on
# CREATED: 12 OCT 2026
# ============================================================================
"""
Probe Dispatcher

check_integration(workspace_id, type):
1. Load the provider configuration; none means "not connected" and
   nothing is recorded
2. Run the probe under asyncio.wait_for with the probe timeout
3. Pass the result and the resolved integration id to the recorder

Failure handling:
- Timeout: unhealthy, response_time_ms = timeout, "Probe timeout"
- Exception from probe(): unhealthy with the sanitized message
- Exception from load(): unhealthy with the sanitized message, recorded
  against the existing record's integration id (nil id if none)

check_workspace_health runs all types concurrently and settles all of
them; one provider's failure never aborts the others.
"""

import asyncio
import time
from typing import List, Optional
from uuid import UUID

from core.config import ProbeDefaults
from core.contracts import IntegrationType
from core.logging import ComponentType, get_logger, log_context
from core.models.health import IntegrationHealthRecord
from health.core import ProbeResult, sanitize_probe_error
from health.recorder import HealthRecorder
from health.registry import ProberRegistry

logger = get_logger(__name__, ComponentType.DISPATCHER)

PROBE_TIMEOUT_ERROR = "Probe timeout"


class ProbeDispatcher:
    """Runs provider probes with timeouts and records their outcome."""

    def __init__(
        self,
        registry: ProberRegistry,
        recorder: HealthRecorder,
        defaults: Optional[ProbeDefaults] = None,
    ):
        self.registry = registry
        self.recorder = recorder
        self.defaults = defaults or ProbeDefaults()

    async def check_integration(
        self,
        workspace_id: UUID,
        integration_type: IntegrationType,
    ) -> Optional[IntegrationHealthRecord]:
        """
        Probe and record one integration.

        Returns:
            Updated record, or None if the integration is not connected
        """
        prober = self.registry.get(integration_type)
        if prober is None:
            logger.warning(f"No prober registered for {integration_type.value}")
            return None

        with log_context(workspace_id=workspace_id, integration_type=integration_type):
            try:
                config = await prober.load(workspace_id)
            except Exception as e:
                logger.warning(
                    f"Failed to load {integration_type.value} configuration: {sanitize_probe_error(e)}"
                )
                result = ProbeResult.from_exception(e)
                return await self.recorder.record_probe_result(
                    workspace_id, integration_type, None, result
                )

            if config is None:
                return None

            result = await self._run_probe(prober, config)
            return await self.recorder.record_probe_result(
                workspace_id,
                integration_type,
                prober.integration_id(config),
                result,
            )

    async def _run_probe(self, prober, config) -> ProbeResult:
        """Run prober.probe(config) under the probe timeout and time it."""
        started = time.monotonic()
        try:
            result = await asyncio.wait_for(
                prober.probe(config),
                timeout=self.defaults.timeout_seconds,
            )
            result.response_time_ms = int((time.monotonic() - started) * 1000)
            return result

        except asyncio.TimeoutError:
            logger.warning(
                f"Probe {prober.integration_type.value} timed out after {self.defaults.timeout_ms}ms"
            )
            result = ProbeResult.unhealthy(PROBE_TIMEOUT_ERROR)
            result.response_time_ms = self.defaults.timeout_ms
            return result

        except Exception as e:
            logger.warning(f"Probe {prober.integration_type.value} raised {type(e).__name__}")
            result = ProbeResult.from_exception(e)
            result.response_time_ms = int((time.monotonic() - started) * 1000)
            return result

    async def check_workspace_health(self, workspace_id: UUID) -> List[IntegrationHealthRecord]:
        """
        Probe every integration type for one workspace concurrently.

        Returns:
            Records that were updated; unconnected types are omitted
        """
        types = self.registry.types()
        outcomes = await asyncio.gather(
            *(self.check_integration(workspace_id, t) for t in types),
            return_exceptions=True,
        )

        records: List[IntegrationHealthRecord] = []
        for integration_type, outcome in zip(types, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(
                    f"Health check for {integration_type.value} in workspace "
                    f"{workspace_id} failed: {sanitize_probe_error(outcome)}"
                )
            elif outcome is not None:
                records.append(outcome)

        return records


__all__ = ["ProbeDispatcher", "PROBE_TIMEOUT_ERROR"]
