"""Saved properties: a user's bookmark on a listing."""

import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from rentora.database import Base, UUIDPrimaryKeyMixin


class FavoriteProperty(UUIDPrimaryKeyMixin, Base):
    """One user's favorite property. A property can be saved at most once per user."""

    __tablename__ = "favorite_properties"

    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    property_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    property: Mapped["Property"] = relationship(lazy="selectin")  # type: ignore[name-defined]  # noqa: F821

    __table_args__ = (UniqueConstraint("user_id", "property_id", name="uq_favorite_properties_user_property"),)
