# ============================================================================
# HTTP PROBER BASE
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Probes - Shared base for network-bound probes
# PURPOSE: Convert transport failures into sanitized unhealthy results
# CREATED: 12 OCT 2026
# ============================================================================
"""
HTTP Prober Base

Network-bound probers implement check(); probe() wraps it so that any
httpx transport or protocol error becomes an unhealthy result with the
credentials stripped from the message.
"""

import logging
from abc import abstractmethod
from typing import Any, Dict

import httpx

from health.core import IntegrationProber, ProbeResult, sanitize_probe_error

logger = logging.getLogger(__name__)


def json_body(response: httpx.Response) -> Dict[str, Any]:
    """Decoded JSON object body, or {} when the body is not a JSON object."""
    try:
        data = response.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


class HttpProber(IntegrationProber):
    """Base class for probers that call a provider API."""

    network_bound = True

    async def probe(self, config: Any) -> ProbeResult:
        try:
            return await self.check(config)
        except httpx.HTTPError as e:
            message = sanitize_probe_error(f"{type(e).__name__}: {e}" if str(e) else type(e).__name__)
            logger.info(f"{self.integration_type.value} probe network error: {message}")
            return ProbeResult.unhealthy(message)

    @abstractmethod
    async def check(self, config: Any) -> ProbeResult:
        """Perform the provider call; httpx errors may propagate."""


__all__ = ["json_body", "HttpProber"]
