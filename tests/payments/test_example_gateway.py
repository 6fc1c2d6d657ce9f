"""
Example subscription gateway against a fake remote API.

The fake HTTP client answers from a (method, url) route table and records every
call, so these tests check both what is sent and what ends up on the record.
"""

import pytest

from subscription_gateway.database.repositories.subscription_repository import SubscriptionRepository
from subscription_gateway.payments import (
    ExampleSubscriptionGateway,
    GatewayRequestError,
    SubscriptionNotFoundError,
    UnsupportedCurrencyError,
    get_registry,
)
from subscription_gateway.utils.enums import SubscriptionStatus

SANDBOX_API = "https://sandbox.example.app/api/v1/subscriptions"
LIVE_API = "https://example.app/api/v1/subscriptions"


@pytest.fixture
def gateway(fake_http):
    return ExampleSubscriptionGateway(
        config={"mode": "sandbox", "client_id": "client-123", "client_secret": "s3cr3t"},
        http_client=fake_http,
    )


@pytest.fixture
def repo(db_session):
    return SubscriptionRepository(db_session)


class TestSubscribe:

    def test_creates_remote_subscription_and_returns_checkout(self, gateway, fake_http, make_subscription):
        subscription = make_subscription()
        fake_http.add("POST", f"{SANDBOX_API}/create", json={
            "subscription_id": "sub_123",
            "redirect_url": "https://sandbox.example.app/checkout/sub_123",
        })

        url = gateway.subscribe(subscription)

        assert url == "https://sandbox.example.app/checkout/sub_123"
        assert subscription.subscription_id == "sub_123"
        assert subscription.status == SubscriptionStatus.PENDING

    def test_request_payload(self, gateway, fake_http, make_subscription):
        subscription = make_subscription(frequency=7)
        fake_http.add("POST", f"{SANDBOX_API}/create", json={
            "subscription_id": "sub_1",
            "redirect_url": "https://sandbox.example.app/checkout/sub_1",
        })

        gateway.subscribe(subscription)

        call = fake_http.calls[0]
        assert call["method"] == "POST"
        assert call["token"] == "s3cr3t"
        assert call["json"] == {
            "name": "Pro plan",
            "amount": "9.99",
            "currency": "USD",
            "custom_id": subscription.id,
            "interval": {"period": "day", "frequency": 7},
            "success_url": subscription.callback_url(),
            "cancel_url": subscription.cancel_url(),
            "webhook_url": subscription.webhook_url(),
        }
        assert f"token={subscription.token}" in call["json"]["success_url"]

    def test_remote_failure_raises(self, gateway, fake_http, make_subscription):
        subscription = make_subscription()
        fake_http.add("POST", f"{SANDBOX_API}/create", status=422, json={"error": "bad amount"})

        with pytest.raises(GatewayRequestError) as exc_info:
            gateway.subscribe(subscription)

        assert exc_info.value.status_code == 422
        assert subscription.subscription_id is None

    def test_incomplete_response_raises(self, gateway, fake_http, make_subscription):
        subscription = make_subscription()
        fake_http.add("POST", f"{SANDBOX_API}/create", json={"subscription_id": "sub_1"})

        with pytest.raises(GatewayRequestError):
            gateway.subscribe(subscription)
        assert subscription.subscription_id is None

    def test_unsupported_currency(self, gateway, fake_http, make_subscription):
        subscription = make_subscription(currency="BRL")

        with pytest.raises(UnsupportedCurrencyError):
            gateway.subscribe(subscription)
        assert fake_http.calls == []

    def test_live_mode_uses_live_host(self, fake_http, make_subscription):
        gateway = ExampleSubscriptionGateway(
            config={"mode": "live", "client_id": "c", "client_secret": "live-secret"},
            http_client=fake_http,
        )
        fake_http.add("POST", f"{LIVE_API}/create", json={
            "subscription_id": "sub_live",
            "redirect_url": "https://example.app/checkout/sub_live",
        })

        assert gateway.subscribe(make_subscription()) == "https://example.app/checkout/sub_live"
        assert fake_http.calls[0]["token"] == "live-secret"


class TestCallback:

    def test_activates_when_remote_is_active(self, gateway, fake_http, repo, make_subscription):
        subscription = make_subscription(subscription_id="sub_123")
        remote = {"id": "sub_123", "status": "active", "plan": "pro"}
        fake_http.add("GET", f"{SANDBOX_API}/sub_123", json=remote)

        redirect = gateway.callback({"token": subscription.token}, repo)

        assert redirect == subscription.return_url()
        assert subscription.status == SubscriptionStatus.ACTIVE
        assert subscription.activated_at is not None
        assert subscription.gateway_data == remote

    def test_leaves_pending_when_remote_not_active(self, gateway, fake_http, repo, make_subscription):
        subscription = make_subscription(subscription_id="sub_123")
        fake_http.add("GET", f"{SANDBOX_API}/sub_123", json={"id": "sub_123", "status": "approval_pending"})

        gateway.callback({"token": subscription.token}, repo)

        assert subscription.status == SubscriptionStatus.PENDING
        assert subscription.activated_at is None

    def test_finds_record_by_remote_id(self, gateway, fake_http, repo, make_subscription):
        subscription = make_subscription(subscription_id="sub_777")
        fake_http.add("GET", f"{SANDBOX_API}/sub_777", json={"id": "sub_777", "status": "active"})

        gateway.callback({"subscription_id": "sub_777"}, repo)

        assert subscription.is_active

    def test_unknown_subscription(self, gateway, fake_http, repo):
        with pytest.raises(SubscriptionNotFoundError):
            gateway.callback({"token": "nope"}, repo)
        assert fake_http.calls == []

    def test_never_created_remotely(self, gateway, repo, make_subscription):
        subscription = make_subscription()

        with pytest.raises(GatewayRequestError):
            gateway.callback({"token": subscription.token}, repo)

    def test_remote_failure_raises(self, gateway, fake_http, repo, make_subscription):
        subscription = make_subscription(subscription_id="sub_123")
        fake_http.add("GET", f"{SANDBOX_API}/sub_123", status=500)

        with pytest.raises(GatewayRequestError):
            gateway.callback({"token": subscription.token}, repo)
        assert subscription.status == SubscriptionStatus.PENDING


class TestWebhook:

    def test_activated_event(self, gateway, fake_http, repo, make_subscription):
        subscription = make_subscription()
        payload = {"event": "SUBSCRIPTION.ACTIVATED", "custom_id": str(subscription.id), "id": "sub_9"}

        gateway.webhook(payload, repo)

        assert subscription.status == SubscriptionStatus.ACTIVE
        assert subscription.subscription_id == "sub_9"
        assert subscription.gateway_data == payload
        assert fake_http.calls == []

    def test_cancelled_event(self, gateway, repo, make_subscription):
        subscription = make_subscription(subscription_id="sub_9", status=SubscriptionStatus.ACTIVE)

        gateway.webhook({"event": "SUBSCRIPTION.CANCELLED", "custom_id": subscription.id, "id": "sub_9"}, repo)

        assert subscription.status == SubscriptionStatus.CANCELLED
        assert subscription.cancelled_at is not None

    def test_other_events_are_ignored(self, gateway, repo, make_subscription):
        subscription = make_subscription()

        gateway.webhook({"event": "PAYMENT.COMPLETED", "custom_id": subscription.id}, repo)

        assert subscription.status == SubscriptionStatus.PENDING

    @pytest.mark.parametrize("custom_id", ["999", "abc", None, True, 1.9, "1.0", " 1", "²"])
    def test_unknown_custom_id_is_ignored(self, gateway, repo, make_subscription, custom_id):
        # id 1 exists, so any lenient int() coercion would hit it
        subscription = make_subscription()
        assert subscription.id == 1

        gateway.webhook({"event": "SUBSCRIPTION.ACTIVATED", "custom_id": custom_id, "id": "x"}, repo)

        assert subscription.status == SubscriptionStatus.PENDING
        assert subscription.subscription_id is None


class OtherGateway(ExampleSubscriptionGateway):
    identifier = "other-gateway"


@pytest.fixture
def other_gateway(fake_http):
    registry = get_registry()
    registry.register(OtherGateway)
    yield OtherGateway(
        config={"mode": "sandbox", "client_id": "other", "client_secret": "other-secret"},
        http_client=fake_http,
    )
    registry.unregister(OtherGateway.identifier)


class TestGatewayOwnership:
    """A gateway only acts on subscriptions created for it."""

    def test_webhook_for_foreign_record_is_ignored(self, other_gateway, fake_http, repo, make_subscription):
        subscription = make_subscription(subscription_id="sub_1")

        other_gateway.webhook({"event": "SUBSCRIPTION.CANCELLED", "custom_id": subscription.id, "id": "sub_1"}, repo)
        other_gateway.webhook({"event": "SUBSCRIPTION.ACTIVATED", "custom_id": subscription.id, "id": "evil"}, repo)

        assert subscription.status == SubscriptionStatus.PENDING
        assert subscription.subscription_id == "sub_1"

    def test_callback_for_foreign_record_is_not_found(self, other_gateway, fake_http, repo, make_subscription):
        subscription = make_subscription(subscription_id="sub_1")
        fake_http.add("GET", f"{SANDBOX_API}/sub_1", json={"id": "sub_1", "status": "active"})

        with pytest.raises(SubscriptionNotFoundError):
            other_gateway.callback({"token": subscription.token}, repo)
        with pytest.raises(SubscriptionNotFoundError):
            other_gateway.callback({"subscription_id": "sub_1"}, repo)

        assert fake_http.calls == []
        assert subscription.status == SubscriptionStatus.PENDING

    def test_owner_still_handles_its_records(self, other_gateway, repo, make_subscription):
        subscription = make_subscription(gateway="other-gateway")

        other_gateway.webhook({"event": "SUBSCRIPTION.ACTIVATED", "custom_id": str(subscription.id), "id": "sub_o"}, repo)

        assert subscription.is_active


class TestCheckAndCancel:

    def test_check_active(self, gateway, fake_http, make_subscription):
        subscription = make_subscription(subscription_id="sub_1")
        fake_http.add("GET", f"{SANDBOX_API}/sub_1", json={"status": "active"})

        assert gateway.check_subscription(subscription) is True

    def test_check_inactive(self, gateway, fake_http, make_subscription):
        subscription = make_subscription(subscription_id="sub_1")
        fake_http.add("GET", f"{SANDBOX_API}/sub_1", json={"status": "suspended"})

        assert gateway.check_subscription(subscription) is False

    def test_check_without_remote_id(self, gateway, fake_http, make_subscription):
        assert gateway.check_subscription(make_subscription()) is False
        assert fake_http.calls == []

    def test_check_unreachable(self, gateway, fake_http, make_subscription):
        fake_http.unreachable = True
        assert gateway.check_subscription(make_subscription(subscription_id="sub_1")) is False

    def test_check_remote_error(self, gateway, make_subscription):
        # no route registered: the fake answers 404
        assert gateway.check_subscription(make_subscription(subscription_id="sub_1")) is False

    def test_cancel_success(self, gateway, fake_http, make_subscription):
        subscription = make_subscription(subscription_id="sub_1")
        fake_http.add("GET", f"{SANDBOX_API}/sub_1/cancel", json={"status": "cancelled"})

        assert gateway.cancel_subscription(subscription) is True
        assert fake_http.calls[0]["token"] == "s3cr3t"

    def test_cancel_failure(self, gateway, fake_http, make_subscription):
        subscription = make_subscription(subscription_id="sub_1")
        fake_http.add("GET", f"{SANDBOX_API}/sub_1/cancel", status=500)

        assert gateway.cancel_subscription(subscription) is False

    def test_cancel_unreachable(self, gateway, fake_http, make_subscription):
        fake_http.unreachable = True
        assert gateway.cancel_subscription(make_subscription(subscription_id="sub_1")) is False
