from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class ConfigFieldResponse(BaseModel):
    key: str
    label: str
    description: str = ""
    type: str
    options: Dict[str, str] = Field(default_factory=dict)
    rules: List[str] = Field(default_factory=list)
    secret: bool = False


class GatewayResponse(BaseModel):
    identifier: str
    version: str
    currencies: List[str]
    config_fields: List[ConfigFieldResponse]
    configured: bool = False


class GatewayListResponse(BaseModel):
    items: List[GatewayResponse]
    total: int


class GatewayConfigUpdate(BaseModel):
    values: Dict[str, Any]
    updated_by: Optional[str] = None


class GatewayConfigResponse(BaseModel):
    gateway: str
    values: Dict[str, Any]
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None
