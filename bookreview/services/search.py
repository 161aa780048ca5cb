"""
Search Service

Text search over books with optional filters.

Matching:
- query: case-insensitive substring of title OR author
- filters are then applied as a conjunction (every given filter must match)

No sorting or pagination happens here; routers compose search_books() with
services.pagination.paginate() when they need pages.
"""

from dataclasses import dataclass

from bookreview.database import Record


@dataclass
class SearchFilters:
    """
    Optional book filters. None means "not filtered".

    - genre: exact membership in the book's genres
    - year_from / year_to: inclusive bounds on publishedYear
    - min_rating / max_rating: inclusive bounds on averageRating
    - has_reviews: True keeps reviewed books, False keeps unreviewed ones
    """

    genre: str | None = None
    year_from: int | None = None
    year_to: int | None = None
    min_rating: float | None = None
    max_rating: float | None = None
    has_reviews: bool | None = None

    @property
    def has_filters(self) -> bool:
        """Check if any filters are applied."""
        return any(
            value is not None
            for value in (
                self.genre,
                self.year_from,
                self.year_to,
                self.min_rating,
                self.max_rating,
                self.has_reviews,
            )
        )


def matches_query(book: Record, query: str) -> bool:
    term = query.lower()
    return (
        term in str(book.get("title", "")).lower()
        or term in str(book.get("author", "")).lower()
    )


def matches_filters(book: Record, filters: SearchFilters) -> bool:
    if filters.genre is not None and filters.genre not in book.get("genres", []):
        return False

    year = book.get("publishedYear")
    if filters.year_from is not None and (year is None or year < filters.year_from):
        return False
    if filters.year_to is not None and (year is None or year > filters.year_to):
        return False

    rating = book.get("averageRating", 0)
    if filters.min_rating is not None and rating < filters.min_rating:
        return False
    if filters.max_rating is not None and rating > filters.max_rating:
        return False

    if filters.has_reviews is not None:
        reviewed = book.get("reviewCount", 0) > 0
        if reviewed != filters.has_reviews:
            return False

    return True


def search_books(
    books: list[Record],
    query: str,
    filters: SearchFilters | None = None,
) -> list[Record]:
    """
    Find books whose title or author contains `query`, then apply filters.

    Examples:
        search_books(books, "harry")
        search_books(books, "tolkien", SearchFilters(genre="Fantasy", min_rating=4))

    Returns:
        Matching books in their original collection order
    """
    filters = filters or SearchFilters()
    return [
        book
        for book in books
        if matches_query(book, query) and matches_filters(book, filters)
    ]


def filter_by_min_rating(books: list[Record], min_rating: float | None) -> list[Record]:
    """Keep books whose averageRating is at least `min_rating` (None keeps all)."""
    if min_rating is None:
        return list(books)
    return [book for book in books if book.get("averageRating", 0) >= min_rating]
