"""Curated book list model."""

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.user import User


class ReadingList(Base, UUIDMixin, TimestampMixin):
    """User-curated list of books."""

    __tablename__ = "lists"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, default=True, server_default="true")
    header_image_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    theme_color: Mapped[str | None] = mapped_column(String(20), nullable=True)
    # Maintained by the list item handlers
    items_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    owner: Mapped["User"] = relationship("User", backref="lists")

    __table_args__ = (Index("idx_lists_public_items", "is_public", "items_count"),)

    def __repr__(self) -> str:
        return f"<ReadingList {self.name[:30]} ({self.id})>"
