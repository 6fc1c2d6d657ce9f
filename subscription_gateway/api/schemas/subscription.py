from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class SubscriptionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    currency: str = Field(..., min_length=3, max_length=3)
    frequency: int = Field(..., gt=0, description="Billing frequency in days")
    gateway: str = Field(..., min_length=1, max_length=100)


class SubscriptionResponse(BaseModel):
    id: int
    token: str
    name: str
    amount: Decimal
    currency: str
    frequency: int
    gateway: str
    subscription_id: Optional[str] = None
    status: str
    gateway_data: Dict[str, Any] = Field(default_factory=dict)
    activated_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    last_checked_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    model_config = ConfigDict(from_attributes=True)


class SubscriptionListResponse(BaseModel):
    items: List[SubscriptionResponse]
    total: int


class CheckResponse(BaseModel):
    active: bool
    subscription: SubscriptionResponse


class CancelResponse(BaseModel):
    cancelled: bool
    subscription: SubscriptionResponse
