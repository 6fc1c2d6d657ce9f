"""
String constants for subscription and gateway fields.
Using plain strings (not Enums) so values map 1:1 to what is stored and sent.
"""


class SubscriptionStatus:
    PENDING = "pending"
    ACTIVE = "active"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class GatewayMode:
    SANDBOX = "sandbox"
    LIVE = "live"


class GatewayEvent:
    SUBSCRIPTION_ACTIVATED = "SUBSCRIPTION.ACTIVATED"
    SUBSCRIPTION_CANCELLED = "SUBSCRIPTION.CANCELLED"


class RemoteStatus:
    ACTIVE = "active"
