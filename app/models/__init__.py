"""SQLAlchemy models package."""

from app.models.base import Base
from app.models.book import Book
from app.models.reading_list import ReadingList
from app.models.reading_log import LOG_STATUSES, ReadingLog
from app.models.social import Follow
from app.models.user import User

__all__ = [
    "Base",
    "User",
    "Book",
    "ReadingLog",
    "LOG_STATUSES",
    "Follow",
    "ReadingList",
]
