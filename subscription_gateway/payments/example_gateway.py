"""
Example Subscription Gateway - reference adapter for a hypothetical provider.

Remote API (bearer auth with the configured client secret):
    POST {base}/api/v1/subscriptions/create
    GET  {base}/api/v1/subscriptions/{id}
    GET  {base}/api/v1/subscriptions/{id}/cancel

Flow:
    subscribe()  -> create remote subscription, send user to its checkout page
    callback()   -> user is back; confirm status remotely, activate if active
    webhook()    -> provider tells us the subscription was activated/cancelled
    check_subscription() / cancel_subscription() -> status poll and cancel
"""

import logging
from typing import Any, Dict, Mapping, Optional

from subscription_gateway.database.models.subscription import Subscription
from subscription_gateway.database.repositories.subscription_repository import SubscriptionRepository
from subscription_gateway.payments.base import ConfigField, SubscriptionGateway
from subscription_gateway.payments.exceptions import (
    GatewayError,
    GatewayRequestError,
    SubscriptionNotFoundError,
    UnsupportedCurrencyError,
)
from subscription_gateway.payments.http_client import GatewayHttpClient
from subscription_gateway.payments.registry import register_gateway
from subscription_gateway.utils.enums import GatewayEvent, GatewayMode, RemoteStatus

logger = logging.getLogger(__name__)


@register_gateway()
class ExampleSubscriptionGateway(SubscriptionGateway):
    identifier = "example-subscription-gateway"
    version = "1.0.0"
    currencies = ["USD", "EUR"]

    BASE_URLS = {
        GatewayMode.LIVE: "https://example.app",
        GatewayMode.SANDBOX: "https://sandbox.example.app",
    }

    def config_fields(self) -> Dict[str, ConfigField]:
        """
        These values can be read back with self.get_config("key").
        """
        return {
            "mode": ConfigField(
                key="mode",
                label="Mode (Sandbox/Live)",
                description="Select sandbox for testing or live for production",
                type="select",
                options={GatewayMode.SANDBOX: "Sandbox", GatewayMode.LIVE: "Live"},
                rules=["required"],
            ),
            "client_id": ConfigField(
                key="client_id",
                label="Client ID",
                description="Example Client ID for the gateway",
                type="text",
                rules=["required", "string"],
            ),
            "client_secret": ConfigField(
                key="client_secret",
                label="Client Secret",
                description="Example Client Secret for the gateway",
                type="text",
                rules=["required", "string"],
                secret=True,
            ),
        }

    # ── Helpers ──

    @property
    def base_url(self) -> str:
        mode = self.get_config("mode", GatewayMode.LIVE)
        return self.BASE_URLS.get(mode, self.BASE_URLS[GatewayMode.LIVE])

    def _api_url(self, path: str) -> str:
        return f"{self.base_url}/api/v1/subscriptions{path}"

    def _client(self) -> GatewayHttpClient:
        return self.http.with_token(self.get_config("client_secret", ""))

    # ── Lifecycle ──

    def subscribe(self, subscription: Subscription) -> str:
        """Create the subscription on the gateway and return its checkout URL."""
        if not self.supports_currency(subscription.currency):
            raise UnsupportedCurrencyError(
                f"{self.identifier} does not support currency {subscription.currency}"
            )

        response = self._client().post(self._api_url("/create"), json={
            "name": subscription.name,
            "amount": f"{subscription.amount:.2f}",
            "currency": subscription.currency,
            "custom_id": subscription.id,
            "interval": {
                "period": "day",
                "frequency": subscription.frequency,
            },
            "success_url": subscription.callback_url(),  # brings the user back to callback()
            "cancel_url": subscription.cancel_url(),
            "webhook_url": subscription.webhook_url(),
        })

        if response.failed:
            logger.error(
                f"Create subscription failed for {subscription.id}: [{response.status_code}] {response.text}"
            )
            raise GatewayRequestError("Failed to create subscription", response.status_code)

        remote_id = response.get("subscription_id")
        redirect_url = response.get("redirect_url")
        if not remote_id or not redirect_url:
            raise GatewayRequestError("Gateway response is missing subscription_id or redirect_url")

        # Keep the remote id for callbacks, polls and cancellation
        subscription.update(subscription_id=str(remote_id))
        logger.info(f"Subscription {subscription.id} created remotely as {remote_id}")

        return redirect_url

    def callback(self, params: Mapping[str, Any], subscriptions: SubscriptionRepository) -> str:
        # callback_url() puts the record token in the query; some providers
        # only echo their own subscription_id back
        token = params.get("token")
        if token:
            subscription = subscriptions.get_by_token(token)
        else:
            subscription = subscriptions.get_by_remote_id(params.get("subscription_id"))

        if subscription is None or subscription.gateway != self.identifier:
            raise SubscriptionNotFoundError("Subscription not found")
        if not subscription.subscription_id:
            raise GatewayRequestError("Subscription was never created on the gateway")

        response = self._client().get(self._api_url(f"/{subscription.subscription_id}"))

        if response.failed:
            raise GatewayRequestError("Failed to retrieve subscription", response.status_code)

        if response.get("status") == RemoteStatus.ACTIVE:
            subscription.activate(response.get("id", subscription.subscription_id), response.json())
            logger.info(f"Subscription {subscription.id} activated from callback")
        else:
            logger.info(
                f"Subscription {subscription.id} not active after callback (remote status={response.get('status')})"
            )

        return subscription.return_url()

    def webhook(self, payload: Mapping[str, Any], subscriptions: SubscriptionRepository) -> None:
        event = payload.get("event")
        custom_id = payload.get("custom_id")
        subscription_id = payload.get("id")

        if event not in (GatewayEvent.SUBSCRIPTION_ACTIVATED, GatewayEvent.SUBSCRIPTION_CANCELLED):
            logger.info(f"Ignoring webhook event {event!r}")
            return

        subscription = self._find_by_custom_id(custom_id, subscriptions)
        if subscription is None:
            logger.warning(f"Webhook {event} for unknown subscription custom_id={custom_id!r}")
            return
        if subscription.gateway != self.identifier:
            logger.warning(
                f"Webhook {event} for subscription {subscription.id} owned by {subscription.gateway}, ignoring"
            )
            return

        if event == GatewayEvent.SUBSCRIPTION_ACTIVATED:
            subscription.activate(subscription_id, dict(payload))
            logger.info(f"Subscription {subscription.id} activated from webhook")
        else:
            subscription.cancel()
            logger.info(f"Subscription {subscription.id} cancelled from webhook")

    def check_subscription(self, subscription: Subscription) -> bool:
        """Called every 12 hours by the status job."""
        if not subscription.subscription_id:
            return False
        try:
            response = self._client().get(self._api_url(f"/{subscription.subscription_id}"))
        except GatewayError as e:
            logger.warning(f"Status check for {subscription.id} failed: {e}")
            return False

        if response.failed:
            return False

        return response.get("status") == RemoteStatus.ACTIVE

    def cancel_subscription(self, subscription: Subscription) -> bool:
        if not subscription.subscription_id:
            return False
        try:
            response = self._client().get(self._api_url(f"/{subscription.subscription_id}/cancel"))
        except GatewayError as e:
            logger.warning(f"Cancel for {subscription.id} failed: {e}")
            return False

        if response.failed:
            return False

        return True

    @staticmethod
    def _find_by_custom_id(custom_id: Any, subscriptions: SubscriptionRepository) -> Optional[Subscription]:
        # custom_id is the local integer id we sent; JSON true/1.9 must not coerce to 1
        if isinstance(custom_id, bool):
            return None
        if isinstance(custom_id, str) and custom_id.isascii() and custom_id.isdigit():
            custom_id = int(custom_id)
        if not isinstance(custom_id, int):
            return None
        return subscriptions.get_by_id(custom_id)
