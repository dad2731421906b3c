"""marketplace_and_favorites

Revision ID: 8b2d4e6f1a93
Revises: 3f9c1a7e2b10
Create Date: 2026-10-19 15:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8b2d4e6f1a93'
down_revision: Union[str, Sequence[str], None] = '3f9c1a7e2b10'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "marketplace_categories",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("icon", sa.String(100), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "marketplace_items",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("seller_id", sa.UUID(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "category_id",
            sa.UUID(),
            sa.ForeignKey("marketplace_categories.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("condition", sa.String(20), nullable=False),
        sa.Column("price", sa.Numeric(12, 2), nullable=False),
        sa.Column("original_price", sa.Numeric(12, 2), nullable=True),
        sa.Column("is_negotiable", sa.Boolean(), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("images", sa.JSON(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("view_count", sa.Integer(), nullable=False),
        sa.Column("sold_at", sa.DateTime(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("price > 0", name="ck_marketplace_items_price_positive"),
    )
    op.create_index("ix_marketplace_items_seller_id", "marketplace_items", ["seller_id"])
    op.create_index("ix_marketplace_items_category_id", "marketplace_items", ["category_id"])
    op.create_index("ix_marketplace_items_city", "marketplace_items", ["city"])
    op.create_index("ix_marketplace_items_status", "marketplace_items", ["status"])

    op.create_table(
        "favorite_properties",
        sa.Column("id", sa.UUID(), primary_key=True),
        sa.Column("user_id", sa.UUID(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column(
            "property_id", sa.UUID(), sa.ForeignKey("properties.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("created_at", sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.UniqueConstraint("user_id", "property_id", name="uq_favorite_properties_user_property"),
    )
    op.create_index("ix_favorite_properties_user_id", "favorite_properties", ["user_id"])
    op.create_index("ix_favorite_properties_property_id", "favorite_properties", ["property_id"])


def downgrade() -> None:
    op.drop_table("favorite_properties")
    op.drop_table("marketplace_items")
    op.drop_table("marketplace_categories")
