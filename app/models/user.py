"""User account model."""

from sqlalchemy import Boolean, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.models.base import Base, TimestampMixin, UUIDMixin


class User(Base, UUIDMixin, TimestampMixin):
    """Reader account (OAuth-backed or guest)."""

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str | None] = mapped_column(String(255), unique=True, nullable=True)
    picture: Mapped[str | None] = mapped_column(Text, nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Guest sessions are upgraded to full accounts after OAuth login
    is_guest: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false")
    guest_session_id: Mapped[str | None] = mapped_column(String(64), unique=True, nullable=True)

    def __repr__(self) -> str:
        return f"<User {self.username} ({self.id})>"
