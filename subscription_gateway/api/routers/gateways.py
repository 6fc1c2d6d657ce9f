"""
Gateways Router - registered gateways and their configuration.
"""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from subscription_gateway.api.schemas.gateway import (
    GatewayConfigResponse,
    GatewayConfigUpdate,
    GatewayListResponse,
    GatewayResponse,
)
from subscription_gateway.database.repositories.gateway_configuration_repository import (
    GatewayConfigurationRepository,
)
from subscription_gateway.database.session import get_db
from subscription_gateway.payments import SubscriptionGateway, get_gateway, get_registry

logger = logging.getLogger(__name__)

router = APIRouter()

SECRET_MASK = "********"


def _masked(gateway: SubscriptionGateway, values: dict) -> dict:
    secrets = set(gateway.secret_keys())
    return {key: SECRET_MASK if key in secrets and value else value for key, value in values.items()}


@router.get("", response_model=GatewayListResponse)
def list_gateways(db: Session = Depends(get_db)):
    """List registered gateways with their declared configuration fields."""
    configs = GatewayConfigurationRepository(db)
    items = []
    for identifier in sorted(get_registry().list_identifiers()):
        gateway = get_gateway(identifier)
        items.append(GatewayResponse(**gateway.describe(), configured=configs.is_configured(identifier)))
    return GatewayListResponse(items=items, total=len(items))


@router.get("/{identifier}/config", response_model=GatewayConfigResponse)
def get_gateway_config(identifier: str, db: Session = Depends(get_db)):
    gateway = get_gateway(identifier)
    repo = GatewayConfigurationRepository(db)
    row = repo.get(identifier)
    values = repo.get_values(identifier, gateway.secret_keys())
    return GatewayConfigResponse(
        gateway=identifier,
        values=_masked(gateway, values),
        updated_by=row.updated_by if row else None,
        updated_at=row.updated_at if row else None,
    )


@router.put("/{identifier}/config", response_model=GatewayConfigResponse)
def update_gateway_config(identifier: str, payload: GatewayConfigUpdate, db: Session = Depends(get_db)):
    """Validate values against the gateway's declared fields and store them."""
    gateway = get_gateway(identifier)
    values = gateway.validate_config(payload.values)
    row = GatewayConfigurationRepository(db).save_values(
        identifier,
        values,
        secret_keys=gateway.secret_keys(),
        updated_by=payload.updated_by or "api",
    )
    return GatewayConfigResponse(
        gateway=identifier,
        values=_masked(gateway, values),
        updated_by=row.updated_by,
        updated_at=row.updated_at,
    )
