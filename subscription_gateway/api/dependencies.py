"""Shared FastAPI dependencies."""

from subscription_gateway.payments import GatewayHttpClient


def get_http_client() -> GatewayHttpClient:
    """Outbound client handed to gateways (overridden in tests)."""
    return GatewayHttpClient()
