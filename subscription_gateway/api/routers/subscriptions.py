"""
Subscriptions Router - host endpoints around the subscription record.

Creating a record does not contact the gateway; `subscribe` does, and sends
the browser to the gateway's checkout page.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from subscription_gateway.api.dependencies import get_http_client
from subscription_gateway.api.schemas.subscription import (
    CancelResponse,
    CheckResponse,
    SubscriptionCreate,
    SubscriptionListResponse,
    SubscriptionResponse,
)
from subscription_gateway.database.models.subscription import Subscription
from subscription_gateway.database.repositories.subscription_repository import SubscriptionRepository
from subscription_gateway.database.session import get_db
from subscription_gateway.payments import GatewayHttpClient, UnsupportedCurrencyError, get_gateway
from subscription_gateway.utils.enums import SubscriptionStatus

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_subscription_or_404(db: Session, subscription_id: int) -> Subscription:
    subscription = SubscriptionRepository(db).get_by_id(subscription_id)
    if not subscription:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return subscription


@router.post("", response_model=SubscriptionResponse, status_code=201)
def create_subscription(payload: SubscriptionCreate, db: Session = Depends(get_db)):
    """Create a pending subscription for a registered gateway."""
    gateway = get_gateway(payload.gateway)
    currency = payload.currency.upper()
    if not gateway.supports_currency(currency):
        raise UnsupportedCurrencyError(f"{gateway.identifier} does not support currency {currency}")

    subscription = SubscriptionRepository(db).create(
        name=payload.name,
        amount=payload.amount,
        currency=currency,
        frequency=payload.frequency,
        gateway=payload.gateway,
        status=SubscriptionStatus.PENDING,
        gateway_data={},
    )
    logger.info(f"Created subscription {subscription.id} ({subscription.gateway}, {subscription.currency})")
    return subscription


@router.get("", response_model=SubscriptionListResponse)
def list_subscriptions(
    status: Optional[str] = Query(None),
    gateway: Optional[str] = Query(None),
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    repo = SubscriptionRepository(db)
    items = repo.list(status=status, gateway=gateway, skip=skip, limit=limit)
    return SubscriptionListResponse(
        items=[SubscriptionResponse.model_validate(s) for s in items],
        total=repo.count(status=status, gateway=gateway),
    )


@router.get("/{subscription_id}", response_model=SubscriptionResponse)
def get_subscription(subscription_id: int, db: Session = Depends(get_db)):
    return _get_subscription_or_404(db, subscription_id)


@router.post("/{subscription_id}/subscribe")
def start_subscription(
    subscription_id: int,
    db: Session = Depends(get_db),
    http_client: GatewayHttpClient = Depends(get_http_client),
):
    """Create the subscription on its gateway and redirect to the checkout page."""
    subscription = _get_subscription_or_404(db, subscription_id)
    if subscription.is_active:
        raise HTTPException(status_code=409, detail="Subscription is already active")

    gateway = get_gateway(subscription.gateway, session=db, http_client=http_client)
    checkout_url = gateway.subscribe(subscription)
    db.flush()
    return RedirectResponse(checkout_url, status_code=303)


@router.post("/{subscription_id}/check", response_model=CheckResponse)
def check_subscription(
    subscription_id: int,
    db: Session = Depends(get_db),
    http_client: GatewayHttpClient = Depends(get_http_client),
):
    """Ask the gateway whether the subscription is still active."""
    subscription = _get_subscription_or_404(db, subscription_id)
    gateway = get_gateway(subscription.gateway, session=db, http_client=http_client)
    active = gateway.check_subscription(subscription)
    if subscription.is_active and not active:
        subscription.expire()
        logger.info(f"Subscription {subscription.id} expired after manual check")
    db.flush()
    return CheckResponse(active=active, subscription=SubscriptionResponse.model_validate(subscription))


@router.post("/{subscription_id}/cancel", response_model=CancelResponse)
def cancel_subscription(
    subscription_id: int,
    db: Session = Depends(get_db),
    http_client: GatewayHttpClient = Depends(get_http_client),
):
    subscription = _get_subscription_or_404(db, subscription_id)
    if subscription.status == SubscriptionStatus.CANCELLED:
        raise HTTPException(status_code=409, detail="Subscription is already cancelled")

    gateway = get_gateway(subscription.gateway, session=db, http_client=http_client)
    if not gateway.cancel_subscription(subscription):
        raise HTTPException(status_code=502, detail="Gateway could not cancel the subscription")

    subscription.cancel()
    db.flush()
    logger.info(f"Subscription {subscription.id} cancelled")
    return CancelResponse(cancelled=True, subscription=SubscriptionResponse.model_validate(subscription))
