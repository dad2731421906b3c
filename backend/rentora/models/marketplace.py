"""Peer-to-peer marketplace models: second-hand items listed by any user."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentora.database import Base, TimestampMixin, UUIDPrimaryKeyMixin
from rentora.models.enums import ListingStatus


class MarketplaceCategory(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Grouping for marketplace items such as furniture or electronics."""

    __tablename__ = "marketplace_categories"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    icon: Mapped[str | None] = mapped_column(String(100), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)


class MarketplaceItem(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """An item offered for sale by its seller."""

    __tablename__ = "marketplace_items"

    seller_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("marketplace_categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    condition: Mapped[str] = mapped_column(String(20), nullable=False)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    original_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    is_negotiable: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # [{"url": ..., "caption": ..., "isPrimary": ...}] in display order
    images: Mapped[list] = mapped_column(JSON, default=list)
    status: Mapped[str] = mapped_column(
        String(20),
        default=ListingStatus.ACTIVE.value,
        nullable=False,
        index=True,
    )
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    sold_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    category: Mapped["MarketplaceCategory"] = relationship(lazy="selectin")
    seller: Mapped["User"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (CheckConstraint("price > 0", name="ck_marketplace_items_price_positive"),)

    def __repr__(self) -> str:
        return f"<MarketplaceItem(id={self.id}, title={self.title}, status={self.status})>"
