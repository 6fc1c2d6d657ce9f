from subscription_gateway.api.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionResponse,
    SubscriptionListResponse,
    CheckResponse,
    CancelResponse,
)
from subscription_gateway.api.schemas.gateway import (
    ConfigFieldResponse,
    GatewayResponse,
    GatewayListResponse,
    GatewayConfigUpdate,
    GatewayConfigResponse,
)
