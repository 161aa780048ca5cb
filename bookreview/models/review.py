"""
Review Model

Business Rules:
- One review per user per book. This is checked by the router before
  create() through user_has_reviewed(); it is not a stored constraint, so
  two concurrent duplicate submissions can both be written.
- timestamp is set on creation and refreshed on every update.
"""

from datetime import UTC, datetime
from typing import Any

from bookreview.database import REVIEWS, Record
from bookreview.models.base import CollectionModel


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with milliseconds, e.g. 2024-01-15T10:30:00.000Z"""
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ReviewModel(CollectionModel):
    collection = REVIEWS

    def find_by_book_id(self, book_id: str) -> list[Record]:
        return self.find_by(lambda review: review.get("bookId") == book_id)

    def find_by_user_id(self, user_id: str) -> list[Record]:
        return self.find_by(lambda review: review.get("userId") == user_id)

    def user_has_reviewed(self, user_id: str, book_id: str) -> bool:
        return any(
            review.get("userId") == user_id and review.get("bookId") == book_id
            for review in self.find_all()
        )

    def create(self, data: dict[str, Any]) -> Record:
        return super().create({**data, "timestamp": utc_timestamp()})

    def update(self, record_id: str, data: dict[str, Any]) -> Record | None:
        return super().update(record_id, {**data, "timestamp": utc_timestamp()})
