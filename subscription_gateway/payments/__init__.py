"""
Subscription gateways - adapters between the host and external billing providers.

Usage:
    from subscription_gateway.payments import get_gateway

    gateway = get_gateway(subscription.gateway, session=db)
    checkout_url = gateway.subscribe(subscription)

Importing this package registers the built-in gateways.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from subscription_gateway.database.repositories.gateway_configuration_repository import (
    GatewayConfigurationRepository,
)
from subscription_gateway.payments.base import ConfigField, SubscriptionGateway
from subscription_gateway.payments.example_gateway import ExampleSubscriptionGateway
from subscription_gateway.payments.exceptions import (
    GatewayConfigError,
    GatewayConnectionError,
    GatewayError,
    GatewayNotFoundError,
    GatewayRequestError,
    SubscriptionNotFoundError,
    UnsupportedCurrencyError,
)
from subscription_gateway.payments.http_client import GatewayHttpClient, GatewayResponse
from subscription_gateway.payments.registry import get_registry, register_gateway

logger = logging.getLogger(__name__)


def get_gateway(
    identifier: str,
    session: Optional[Session] = None,
    http_client: Optional[GatewayHttpClient] = None,
) -> SubscriptionGateway:
    """
    Build a gateway instance with its stored configuration.

    Args:
        identifier: Registered gateway identifier
        session: When given, stored (decrypted) config values are loaded
        http_client: Client to use for outbound calls (default: new GatewayHttpClient)

    Raises:
        GatewayNotFoundError: If no gateway is registered under identifier
    """
    gateway_class = get_registry().get(identifier)
    if gateway_class is None:
        raise GatewayNotFoundError(f"Gateway '{identifier}' not found")

    gateway = gateway_class(http_client=http_client)
    if session is not None:
        gateway.configure(
            GatewayConfigurationRepository(session).get_values(identifier, gateway.secret_keys())
        )
    return gateway


__all__ = [
    "get_gateway",
    "get_registry",
    "register_gateway",
    "SubscriptionGateway",
    "ConfigField",
    "ExampleSubscriptionGateway",
    "GatewayHttpClient",
    "GatewayResponse",
    "GatewayError",
    "GatewayConfigError",
    "GatewayConnectionError",
    "GatewayNotFoundError",
    "GatewayRequestError",
    "SubscriptionNotFoundError",
    "UnsupportedCurrencyError",
]
