# ============================================================================
# PROBER REGISTRY
# ============================================================================
# SUBSYSTEM: INTEGRATION HEALTH
# STATUS: Core - Provider probe registration
# PURPOSE: Register and look up one prober per integration type
# CREATED: 12 OCT 2026
# ============================================================================
"""
Prober Registry

Prober classes register themselves by integration type with a decorator.
A ProberRegistry binds every registered class to a ProbeContext.

Usage:
    # Decorator registration
    @register_prober
    class SlackProber(IntegrationProber):
        integration_type = IntegrationType.SLACK
        ...

    # Bind to collaborators
    registry = ProberRegistry.from_context(context)
    prober = registry.get(IntegrationType.SLACK)
"""

import logging
from typing import Dict, Iterator, List, Optional, Type

from core.contracts import IntegrationType
from health.core import IntegrationProber, ProbeContext

logger = logging.getLogger(__name__)

_prober_classes: Dict[IntegrationType, Type[IntegrationProber]] = {}


def register_prober(cls: Type[IntegrationProber]) -> Type[IntegrationProber]:
    """
    Decorator to register a prober class for its integration_type.

    Raises:
        ValueError: If the class does not declare integration_type
    """
    integration_type = getattr(cls, "integration_type", None)
    if integration_type is None:
        raise ValueError(f"{cls.__name__} must declare integration_type")

    if integration_type in _prober_classes:
        logger.warning(f"Overwriting prober for {integration_type.value}: {cls.__name__}")

    _prober_classes[integration_type] = cls
    logger.debug(f"Registered prober: {cls.__name__} ({integration_type.value})")
    return cls


def get_prober_classes() -> Dict[IntegrationType, Type[IntegrationProber]]:
    """All registered prober classes, importing the built-in probes first."""
    import health.probes  # noqa: F401  (registers built-in probers)
    return dict(_prober_classes)


class ProberRegistry:
    """
    Prober instances bound to one ProbeContext.

    Iterates in IntegrationType declaration order.
    """

    def __init__(self, probers: Dict[IntegrationType, IntegrationProber]):
        self._probers = probers

    @classmethod
    def from_context(cls, context: ProbeContext) -> "ProberRegistry":
        """Instantiate every registered prober class with the given context."""
        classes = get_prober_classes()
        missing = [t.value for t in IntegrationType if t not in classes]
        if missing:
            logger.warning(f"No prober registered for: {', '.join(missing)}")
        return cls({t: classes[t](context) for t in IntegrationType if t in classes})

    def get(self, integration_type: IntegrationType) -> Optional[IntegrationProber]:
        """Get the prober for a type, or None if unregistered."""
        return self._probers.get(IntegrationType(integration_type))

    def types(self) -> List[IntegrationType]:
        return list(self._probers.keys())

    def __iter__(self) -> Iterator[IntegrationProber]:
        return iter(self._probers.values())

    def __len__(self) -> int:
        return len(self._probers)

    def __contains__(self, integration_type: IntegrationType) -> bool:
        return integration_type in self._probers


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "register_prober",
    "get_prober_classes",
    "ProberRegistry",
]
