from typing import Dict, Optional


class GatewayError(RuntimeError):
    """Base class for gateway errors."""


class GatewayConfigError(GatewayError):
    """Raised when configuration values do not satisfy the declared fields."""

    def __init__(self, message: str, errors: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.errors = errors or {}


class GatewayNotFoundError(GatewayError):
    """Raised when no gateway is registered under an identifier."""


class GatewayRequestError(GatewayError):
    """Raised when the remote subscription API answers with a failure."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GatewayConnectionError(GatewayError):
    """Raised when the remote subscription API cannot be reached."""


class SubscriptionNotFoundError(GatewayError):
    """Raised when a callback references a subscription we do not know."""


class UnsupportedCurrencyError(GatewayError):
    """Raised when a gateway is asked to bill in a currency it does not list."""
