"""Reading log model."""

import uuid
from datetime import date
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base, TimestampMixin, UUIDMixin

if TYPE_CHECKING:
    from app.models.book import Book
    from app.models.user import User


LOG_STATUSES = ["want_to_read", "reading", "read", "dnf"]


class ReadingLog(Base, UUIDMixin, TimestampMixin):
    """A user's entry for one book: status, rating and review."""

    __tablename__ = "logs"

    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    book_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("books.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    status: Mapped[str] = mapped_column(String(20), nullable=False, default="want_to_read")
    # Rating 1-5 stars
    rating: Mapped[int | None] = mapped_column(Integer, nullable=True)
    review: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    finish_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    is_public: Mapped[bool] = mapped_column(Boolean, default=True, server_default="true")
    spoiler_flag: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false")

    # Relationships
    user: Mapped["User"] = relationship("User", backref="logs")
    book: Mapped["Book"] = relationship("Book", backref="logs")

    __table_args__ = (
        UniqueConstraint("user_id", "book_id", name="uq_logs_user_book"),
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="check_log_rating"),
        CheckConstraint(
            "status IN ('want_to_read', 'reading', 'read', 'dnf')",
            name="check_log_status",
        ),
        # Trending / serendipity aggregate over read logs per book
        Index("idx_logs_book_status", "book_id", "status"),
    )

    def __repr__(self) -> str:
        return f"<ReadingLog {self.status} user={self.user_id} book={self.book_id}>"
