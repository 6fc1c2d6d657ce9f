"""Subscription model - recurring billing agreement handled by a gateway."""

import secrets
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional

from sqlalchemy import DateTime, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from subscription_gateway.core import config
from subscription_gateway.database.models.model_base import JsonType, SqlAlchemyModel
from subscription_gateway.utils.enums import SubscriptionStatus


def generate_token() -> str:
    return secrets.token_hex(16)


class Subscription(SqlAlchemyModel):
    __tablename__ = "subscriptions"

    token: Mapped[str] = mapped_column(
        String(64),
        unique=True,
        nullable=False,
        index=True,
        default=generate_token,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    frequency: Mapped[int] = mapped_column(Integer, nullable=False, default=30)  # days
    gateway: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    subscription_id: Mapped[Optional[str]] = mapped_column(String(255), index=True)  # remote id
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=SubscriptionStatus.PENDING,
    )  # pending, active, cancelled, expired
    gateway_data: Mapped[Dict[str, Any]] = mapped_column(JsonType, default=dict, nullable=False)

    activated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    last_checked_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    # ── State changes used by gateways ──

    def update(self, **fields: Any) -> "Subscription":
        """Set column values; unknown keys are ignored."""
        for key, value in fields.items():
            if key in self.__table__.columns:
                setattr(self, key, value)
        return self

    def activate(self, subscription_id: Optional[str], data: Optional[Dict[str, Any]] = None) -> "Subscription":
        if subscription_id:
            self.subscription_id = str(subscription_id)
        self.status = SubscriptionStatus.ACTIVE
        self.activated_at = datetime.now(timezone.utc)
        self.cancelled_at = None
        self.gateway_data = dict(data or {})
        return self

    def cancel(self) -> "Subscription":
        self.status = SubscriptionStatus.CANCELLED
        self.cancelled_at = datetime.now(timezone.utc)
        return self

    def expire(self) -> "Subscription":
        self.status = SubscriptionStatus.EXPIRED
        return self

    @property
    def is_active(self) -> bool:
        return self.status == SubscriptionStatus.ACTIVE

    # ── URLs handed to the gateway ──

    def callback_url(self) -> str:
        return f"{config.APP_URL}/gateways/{self.gateway}/callback?token={self.token}"

    def webhook_url(self) -> str:
        return f"{config.APP_URL}/gateways/{self.gateway}/webhook"

    def cancel_url(self) -> str:
        return f"{config.FRONTEND_URL}/subscriptions/{self.token}?status=cancelled"

    def return_url(self) -> str:
        return f"{config.FRONTEND_URL}/subscriptions/{self.token}"

    def __repr__(self) -> str:
        return f"<Subscription id={self.id} gateway={self.gateway} status={self.status}>"
