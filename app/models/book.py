"""Book cache model.

Books are keyed by the catalog volume ID, so rows fetched from the external
catalog and rows already in the store share one identity space.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base


class Book(Base):
    """Locally cached book metadata."""

    __tablename__ = "books"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)

    # Metadata
    title: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    authors: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list, server_default="{}")
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    cover_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    published_date: Mapped[str | None] = mapped_column(String(20), nullable=True)
    page_count: Mapped[int | None] = mapped_column(Integer, nullable=True)
    categories: Mapped[list[str]] = mapped_column(ARRAY(Text), default=list, server_default="{}")
    isbn_10: Mapped[str | None] = mapped_column(String(10), nullable=True)
    isbn_13: Mapped[str | None] = mapped_column(String(13), nullable=True)
    language: Mapped[str | None] = mapped_column(String(10), nullable=True)
    publisher: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Catalog-reported rating, not the platform average
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    ratings_count: Mapped[int | None] = mapped_column(Integer, nullable=True)

    raw_data: Mapped[dict | None] = mapped_column(JSONB, nullable=True)
    api_source: Mapped[str] = mapped_column(String(20), default="google", server_default="google")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    def __repr__(self) -> str:
        return f"<Book {self.title[:30]} ({self.id})>"
