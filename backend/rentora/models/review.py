"""Review model: ratings for properties and completed service bookings."""

import uuid

from sqlalchemy import CheckConstraint, ForeignKey, Integer, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from rentora.database import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Review(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A 1-5 star review targeting exactly one property or service booking."""

    __tablename__ = "reviews"

    reviewer_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    reviewee_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    property_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    service_booking_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("service_bookings.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("reviewer_id", "property_id", name="uq_reviews_reviewer_property"),
        UniqueConstraint("reviewer_id", "service_booking_id", name="uq_reviews_reviewer_service_booking"),
        CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_rating_range"),
        CheckConstraint(
            "(property_id IS NULL) <> (service_booking_id IS NULL)",
            name="ck_reviews_single_target",
        ),
    )

    def __repr__(self) -> str:
        return f"<Review(id={self.id}, reviewer_id={self.reviewer_id}, rating={self.rating})>"
