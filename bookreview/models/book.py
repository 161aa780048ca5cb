"""
Book Model

Books carry two denormalized fields kept in sync with reviews:
- averageRating: mean review rating rounded to 1 decimal (0 with no reviews)
- reviewCount: number of reviews

They are recomputed from scratch by services.ratings, never patched
incrementally.
"""

from bookreview.database import BOOKS, Record
from bookreview.models.base import CollectionModel


class BookModel(CollectionModel):
    collection = BOOKS

    def find_by_genre(self, genre: str) -> list[Record]:
        return self.find_by(lambda book: genre in book.get("genres", []))

    def find_by_ids(self, book_ids: list[str]) -> list[Record]:
        """Return books in the order of `book_ids`, skipping unknown ids."""
        by_id = {book["id"]: book for book in self.find_all()}
        return [by_id[book_id] for book_id in book_ids if book_id in by_id]
