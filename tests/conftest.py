"""
Pytest global configuration.

- SQLite in-memory database swapped into the session module (no PostgreSQL needed)
- FastAPI TestClient with the outbound HTTP client replaced by a recording fake
- Helpers to store gateway configuration and create subscription records
"""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SCHEDULER_ENABLED"] = "false"
os.environ.setdefault("APP_URL", "http://testserver")
os.environ.setdefault("FRONTEND_URL", "http://frontend.test")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import subscription_gateway.database.session as db_session_module
from subscription_gateway.database.session import Base
import subscription_gateway.database.models  # noqa: F401 - registers all models with Base.metadata
from subscription_gateway.api.dependencies import get_http_client
from subscription_gateway.api.main import app
from subscription_gateway.database.models.subscription import Subscription
from subscription_gateway.database.repositories.gateway_configuration_repository import (
    GatewayConfigurationRepository,
)
from subscription_gateway.payments import ExampleSubscriptionGateway, GatewayConnectionError, GatewayResponse

GATEWAY_ID = ExampleSubscriptionGateway.identifier
SANDBOX_API = "https://sandbox.example.app/api/v1/subscriptions"
GATEWAY_CONFIG = {"mode": "sandbox", "client_id": "client-123", "client_secret": "s3cr3t"}


# ============================================================================
# FAKE HTTP CLIENT
# ============================================================================

class FakeHttpClient:
    """Stands in for GatewayHttpClient: canned responses, recorded calls."""

    def __init__(self):
        self.routes = {}
        self.calls = []
        self.token = None
        self.unreachable = False

    def add(self, method, url, status=200, json=None):
        self.routes[(method, url)] = GatewayResponse(status, json or {}, "")

    def with_token(self, token):
        self.token = token
        return self

    def get(self, url, params=None):
        return self._request("GET", url, params=params)

    def post(self, url, json=None):
        return self._request("POST", url, json=json)

    def _request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, "token": self.token, **kwargs})
        if self.unreachable:
            raise GatewayConnectionError(f"{method} {url} failed: connection refused")
        return self.routes.get((method, url), GatewayResponse(404, {"error": "not found"}, "not found"))


# ============================================================================
# DATABASE FIXTURES
# ============================================================================

@pytest.fixture(scope="function")
def test_db_engine():
    """In-memory SQLite engine swapped in for the global engine/SessionLocal."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)

    original_engine = db_session_module.engine
    original_session_local = db_session_module.SessionLocal
    db_session_module.engine = engine
    db_session_module.SessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
        expire_on_commit=False,
    )

    yield engine

    db_session_module.engine = original_engine
    db_session_module.SessionLocal = original_session_local
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(test_db_engine):
    session = db_session_module.SessionLocal()
    yield session
    session.close()


# ============================================================================
# FASTAPI CLIENT
# ============================================================================

@pytest.fixture
def fake_http():
    return FakeHttpClient()


@pytest.fixture(scope="function")
def test_client(test_db_engine, fake_http):
    app.dependency_overrides[get_http_client] = lambda: fake_http
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


# ============================================================================
# DATA FIXTURES
# ============================================================================

@pytest.fixture
def configured_gateway(db_session):
    """Store sandbox configuration for the example gateway."""
    GatewayConfigurationRepository(db_session).save_values(
        GATEWAY_ID,
        GATEWAY_CONFIG,
        secret_keys=["client_secret"],
    )
    db_session.commit()
    return GATEWAY_CONFIG


@pytest.fixture
def make_subscription(db_session):
    def _make(**overrides):
        fields = {
            "name": "Pro plan",
            "amount": Decimal("9.99"),
            "currency": "USD",
            "frequency": 30,
            "gateway": GATEWAY_ID,
        }
        fields.update(overrides)
        subscription = Subscription(**fields)
        db_session.add(subscription)
        db_session.commit()
        return subscription
    return _make


@pytest.fixture
def sample_subscription_payload():
    return {
        "name": "Pro plan",
        "amount": "9.99",
        "currency": "usd",
        "frequency": 30,
        "gateway": GATEWAY_ID,
    }
