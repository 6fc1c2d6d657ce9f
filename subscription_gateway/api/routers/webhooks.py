"""
Webhooks Router - inbound traffic from gateways.

- GET  /gateways/{identifier}/callback : browser redirected back after checkout
- POST /gateways/{identifier}/webhook  : server-to-server notification
"""

import asyncio
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session

from subscription_gateway.api.dependencies import get_http_client
from subscription_gateway.database.repositories.subscription_repository import SubscriptionRepository
from subscription_gateway.database.session import get_db, get_session
from subscription_gateway.payments import GatewayHttpClient, get_gateway

logger = logging.getLogger(__name__)

router = APIRouter()

WEBHOOK_ACK = ["success"]


async def _read_payload(request: Request) -> Dict[str, Any]:
    """Query parameters merged with a JSON or form body (body wins)."""
    payload: Dict[str, Any] = dict(request.query_params)
    content_type = request.headers.get("content-type", "")
    if "application/json" in content_type:
        try:
            body = await request.json()
        except ValueError:
            logger.warning("Webhook body is not valid JSON")
            body = None
        if isinstance(body, dict):
            payload.update(body)
    elif "form" in content_type:
        form = await request.form()
        payload.update({key: value for key, value in form.items() if isinstance(value, str)})
    return payload


@router.get("/{identifier}/callback")
def gateway_callback(
    identifier: str,
    request: Request,
    db: Session = Depends(get_db),
    http_client: GatewayHttpClient = Depends(get_http_client),
):
    """The user comes back from the gateway's checkout page."""
    gateway = get_gateway(identifier, session=db, http_client=http_client)
    redirect_url = gateway.callback(dict(request.query_params), SubscriptionRepository(db))
    db.flush()
    return RedirectResponse(redirect_url, status_code=302)


def _handle_webhook_sync(identifier: str, payload: Dict[str, Any]) -> None:
    """Sync helper: config decryption and record updates (run in thread to avoid blocking)."""
    with get_session() as db:
        gateway = get_gateway(identifier, session=db)
        gateway.webhook(payload, SubscriptionRepository(db))


@router.post("/{identifier}/webhook")
async def gateway_webhook(identifier: str, request: Request):
    """Receive a webhook from the gateway. Always acknowledged with 200."""
    payload = await _read_payload(request)
    logger.info(f"Webhook from {identifier}: event={payload.get('event')!r}")

    await asyncio.to_thread(_handle_webhook_sync, identifier, payload)
    return JSONResponse(WEBHOOK_ACK, status_code=200)
