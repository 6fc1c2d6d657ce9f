"""Database models package - import all models so Alembic can discover them."""

from subscription_gateway.database.models.model_base import SqlAlchemyModel
from subscription_gateway.database.models.subscription import Subscription
from subscription_gateway.database.models.gateway_configuration import GatewayConfiguration

__all__ = [
    "SqlAlchemyModel",
    "Subscription",
    "GatewayConfiguration",
]
