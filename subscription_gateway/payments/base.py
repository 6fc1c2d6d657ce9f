"""
Subscription Gateway - Abstract base for payment gateway adapters.

A gateway adapter is invoked by the host in response to:
- a user starting a subscription (subscribe)
- the browser coming back from the provider's checkout (callback)
- the provider notifying us server-to-server (webhook)
- the periodic status poll and cancellation (check_subscription, cancel_subscription)

Each operation performs at most one outbound request and one change on the
subscription record.
"""

import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from subscription_gateway.payments.exceptions import GatewayConfigError
from subscription_gateway.payments.http_client import GatewayHttpClient

if TYPE_CHECKING:
    from subscription_gateway.database.models.subscription import Subscription
    from subscription_gateway.database.repositories.subscription_repository import SubscriptionRepository


@dataclass
class ConfigField:
    """A configuration value the gateway needs from the administrator."""
    key: str
    label: str
    description: str = ""
    type: str = "text"  # text | select
    options: Dict[str, str] = field(default_factory=dict)
    rules: List[str] = field(default_factory=list)  # required, string
    secret: bool = False

    @property
    def required(self) -> bool:
        return "required" in self.rules

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "description": self.description,
            "type": self.type,
            "options": dict(self.options),
            "rules": list(self.rules),
            "secret": self.secret,
        }


class SubscriptionGateway(ABC):
    """Abstract subscription gateway. Subclass once per external provider."""

    identifier: str = ""
    version: str = "0.0.0"
    currencies: List[str] = []

    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        http_client: Optional[GatewayHttpClient] = None,
    ):
        self._config = dict(config or {})
        self.http = http_client or GatewayHttpClient()

    # ==================== Configuration ====================

    @abstractmethod
    def config_fields(self) -> Dict[str, ConfigField]:
        """Declare the config fields required for the gateway."""
        pass

    def configure(self, values: Mapping[str, Any]) -> None:
        self._config = dict(values)

    def get_config(self, key: str, default: Any = None) -> Any:
        """
        Read a configuration value.

        Stored values win; otherwise GATEWAY_<IDENTIFIER>_<KEY> from the
        environment; otherwise `default`.
        """
        value = self._config.get(key)
        if value not in (None, ""):
            return value
        env_value = os.getenv(self.env_var_name(key))
        if env_value:
            return env_value
        return default

    @classmethod
    def env_var_name(cls, key: str) -> str:
        return f"GATEWAY_{cls.identifier}_{key}".upper().replace("-", "_")

    def secret_keys(self) -> List[str]:
        return [key for key, f in self.config_fields().items() if f.secret]

    def validate_config(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Check values against the declared fields.

        Returns:
            Cleaned values (undeclared keys dropped, strings stripped)

        Raises:
            GatewayConfigError: with a per-field error map
        """
        cleaned: Dict[str, Any] = {}
        errors: Dict[str, str] = {}

        for key, cfg in self.config_fields().items():
            value = values.get(key)
            if isinstance(value, str):
                value = value.strip()

            if value in (None, ""):
                if cfg.required:
                    errors[key] = f"{cfg.label} is required"
                continue
            if "string" in cfg.rules and not isinstance(value, str):
                errors[key] = f"{cfg.label} must be a string"
                continue
            if cfg.type == "select" and not (isinstance(value, str) and value in cfg.options):
                allowed = ", ".join(cfg.options)
                errors[key] = f"{cfg.label} must be one of: {allowed}"
                continue
            cleaned[key] = value

        if errors:
            raise GatewayConfigError(f"Invalid configuration for {self.identifier}", errors)
        return cleaned

    def supports_currency(self, currency: str) -> bool:
        return (currency or "").upper() in {c.upper() for c in self.currencies}

    def describe(self) -> Dict[str, Any]:
        return {
            "identifier": self.identifier,
            "version": self.version,
            "currencies": list(self.currencies),
            "config_fields": [f.to_dict() for f in self.config_fields().values()],
        }

    # ==================== Subscription lifecycle ====================

    @abstractmethod
    def subscribe(self, subscription: "Subscription") -> str:
        """
        Create the subscription on the gateway.

        Returns:
            URL of the gateway's checkout page the user must be sent to
        """
        pass

    @abstractmethod
    def callback(self, params: Mapping[str, Any], subscriptions: "SubscriptionRepository") -> str:
        """
        Handle the browser coming back from the gateway.

        Args:
            params: Query parameters of the callback request
            subscriptions: Repository to look the record up

        Returns:
            URL the browser should be redirected to
        """
        pass

    @abstractmethod
    def webhook(self, payload: Mapping[str, Any], subscriptions: "SubscriptionRepository") -> None:
        """Handle a server-to-server notification from the gateway."""
        pass

    @abstractmethod
    def check_subscription(self, subscription: "Subscription") -> bool:
        """Return True while the subscription is still active on the gateway."""
        pass

    @abstractmethod
    def cancel_subscription(self, subscription: "Subscription") -> bool:
        """Cancel on the gateway. Returns True on success."""
        pass

    def __repr__(self) -> str:
        return f"<{type(self).__name__} identifier={self.identifier} version={self.version}>"
