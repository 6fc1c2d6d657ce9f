"""
Gateway Registry

Central in-memory registry of gateway adapter classes, keyed by identifier.
Built-in gateways register themselves on import via @register_gateway().
"""

from typing import Dict, List, Optional, Type
from subscription_gateway.payments.base import SubscriptionGateway
import logging

logger = logging.getLogger(__name__)


class GatewayRegistry:
    """
    Central registry for all gateway adapters.

    Singleton: every GatewayRegistry() call returns the same instance.
    """

    _instance: Optional['GatewayRegistry'] = None
    _registry: Dict[str, Type[SubscriptionGateway]] = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        self._registry = {}
        logger.info("GatewayRegistry initialized")

    def register(
        self,
        gateway_class: Type[SubscriptionGateway],
        identifier: Optional[str] = None
    ) -> None:
        """
        Register a gateway adapter.

        Args:
            gateway_class: Class inheriting from SubscriptionGateway
            identifier: Optional override (uses gateway_class.identifier if not provided)

        Raises:
            TypeError: If gateway_class doesn't inherit from SubscriptionGateway
            ValueError: If the class has no identifier
        """
        if not isinstance(gateway_class, type) or not issubclass(gateway_class, SubscriptionGateway):
            raise TypeError(
                f"{getattr(gateway_class, '__name__', gateway_class)} must inherit from SubscriptionGateway"
            )

        key = identifier or gateway_class.identifier
        if not key:
            raise ValueError(f"{gateway_class.__name__} has no identifier")

        if key in self._registry:
            existing = self._registry[key]
            logger.warning(
                f"Gateway {key} already registered ({existing.__name__}), "
                f"overwriting with {gateway_class.__name__}"
            )

        self._registry[key] = gateway_class
        logger.info(f"Registered gateway: {gateway_class.__name__} (identifier={key})")

    def unregister(self, identifier: str) -> bool:
        if identifier not in self._registry:
            return False
        del self._registry[identifier]
        logger.info(f"Unregistered gateway {identifier}")
        return True

    def get(self, identifier: str) -> Optional[Type[SubscriptionGateway]]:
        return self._registry.get(identifier)

    def get_all(self) -> Dict[str, Type[SubscriptionGateway]]:
        return self._registry.copy()

    def list_identifiers(self) -> List[str]:
        return list(self._registry.keys())

    def clear(self) -> None:
        """
        Clear all registered gateways.

        Warning: This is mainly for testing.
        """
        count = len(self._registry)
        self._registry.clear()
        logger.warning(f"Registry cleared ({count} gateways removed)")

    def __len__(self) -> int:
        return len(self._registry)

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._registry

    def __repr__(self) -> str:
        return f"<GatewayRegistry gateways={len(self._registry)}>"


def register_gateway(identifier: Optional[str] = None):
    """
    Decorator to register a gateway class.

    Usage:
        @register_gateway()
        class MyGateway(SubscriptionGateway):
            identifier = "my-gateway"
            ...
    """
    def decorator(gateway_class: Type[SubscriptionGateway]):
        GatewayRegistry().register(gateway_class, identifier)
        return gateway_class
    return decorator


def get_registry() -> GatewayRegistry:
    return GatewayRegistry()
