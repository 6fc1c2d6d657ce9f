from datetime import datetime
from typing import Any, Dict

from sqlalchemy import (
    DateTime,
    String,
    func,
)
from sqlalchemy.orm import (
    Mapped,
    mapped_column,
)

from subscription_gateway.database.models.model_base import JsonType
from subscription_gateway.database.session import Base


class GatewayConfiguration(Base):
    __tablename__ = "gateway_configurations"

    gateway: Mapped[str] = mapped_column(
        String(100),
        primary_key=True,
    )

    # Secret fields are stored encrypted (see GatewayConfigurationRepository)
    values: Mapped[Dict[str, Any]] = mapped_column(
        JsonType,
        nullable=False,
        default=dict,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=func.now(),
        nullable=False,
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    updated_by: Mapped[str] = mapped_column(
        String(255),
        default="system",
    )

    def __repr__(self) -> str:
        return f"<GatewayConfiguration gateway={self.gateway}>"
