"""Subscriptions and gateway configurations

Revision ID: 001_subscriptions
Revises:
Create Date: 2026-10-18

Tables:
- subscriptions (host-owned subscription records)
- gateway_configurations (per-gateway config values, secrets encrypted)
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects.postgresql import JSONB

revision = "001_subscriptions"
down_revision = None
branch_labels = None
depends_on = None

JsonType = sa.JSON().with_variant(JSONB(), "postgresql")


def upgrade() -> None:
    # ── subscriptions ──
    op.create_table(
        "subscriptions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("token", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("currency", sa.String(3), nullable=False, server_default="USD"),
        sa.Column("frequency", sa.Integer(), nullable=False, server_default="30"),
        sa.Column("gateway", sa.String(100), nullable=False),
        sa.Column("subscription_id", sa.String(255)),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("gateway_data", JsonType, nullable=False, server_default="{}"),
        sa.Column("activated_at", sa.DateTime(timezone=True)),
        sa.Column("cancelled_at", sa.DateTime(timezone=True)),
        sa.Column("last_checked_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )
    op.create_index("ix_subscriptions_token", "subscriptions", ["token"], unique=True)
    op.create_index("ix_subscriptions_gateway", "subscriptions", ["gateway"])
    op.create_index("ix_subscriptions_subscription_id", "subscriptions", ["subscription_id"])

    # ── gateway_configurations ──
    op.create_table(
        "gateway_configurations",
        sa.Column("gateway", sa.String(100), primary_key=True),
        sa.Column("values", JsonType, nullable=False, server_default="{}"),
        sa.Column("updated_by", sa.String(255), server_default="system"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("CURRENT_TIMESTAMP")),
    )


def downgrade() -> None:
    op.drop_table("gateway_configurations")
    op.drop_index("ix_subscriptions_subscription_id", table_name="subscriptions")
    op.drop_index("ix_subscriptions_gateway", table_name="subscriptions")
    op.drop_index("ix_subscriptions_token", table_name="subscriptions")
    op.drop_table("subscriptions")
