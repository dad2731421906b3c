"""Property model: rentable rooms, apartments, houses, villas, and more."""

import uuid
from datetime import datetime
from decimal import Decimal

from sqlalchemy import JSON, Boolean, CheckConstraint, Float, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentora.database import Base, TimestampMixin, UUIDPrimaryKeyMixin
from rentora.models.enums import PriceUnit, PropertyStatus


class Property(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A listing owned by a host and bookable by guests."""

    __tablename__ = "properties"

    owner_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    price_unit: Mapped[str] = mapped_column(String(20), nullable=False, default=PriceUnit.DAILY.value)
    bedrooms: Mapped[int | None] = mapped_column(Integer, default=None)
    bathrooms: Mapped[int | None] = mapped_column(Integer, default=None)
    area_sq_ft: Mapped[float | None] = mapped_column(Float, default=None)
    furnished: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    address: Mapped[str] = mapped_column(String(255), nullable=False)
    city: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    state: Mapped[str] = mapped_column(String(100), nullable=False)
    zip_code: Mapped[str] = mapped_column(String(20), nullable=False)
    amenities: Mapped[list] = mapped_column(JSON, default=list)
    rules: Mapped[list] = mapped_column(JSON, default=list)
    available_from: Mapped[datetime | None] = mapped_column(default=None)
    available_to: Mapped[datetime | None] = mapped_column(default=None)
    min_stay_days: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    max_stay_days: Mapped[int | None] = mapped_column(Integer, default=None)
    status: Mapped[str] = mapped_column(
        String(50),
        default=PropertyStatus.PENDING_VERIFICATION.value,
        nullable=False,
        index=True,
    )
    is_featured: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    view_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Derived by the rating aggregator; never set from request bodies.
    rating: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    review_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Relationships
    owner: Mapped["User"] = relationship(back_populates="properties", lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (
        CheckConstraint("min_stay_days >= 1", name="ck_properties_min_stay_positive"),
        CheckConstraint("price >= 0", name="ck_properties_price_non_negative"),
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, title={self.title!r}, type={self.type!r})>"
