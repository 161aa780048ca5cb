"""
Book Pydantic Schemas

Schemas:
- BookResponse: Full book record
- BookSummary: Minimal book info embedded in review responses
- BookListResponse: Sorted, paginated list with navigation links
- BookSearchResponse: Unpaginated search results
- BookRatingStats: Rating distribution for one book
- RatingRecalculationResponse: Result of an admin recalculation
"""

from typing import Any

from pydantic import ConfigDict, Field

from bookreview.schemas.common import CamelModel


class BookResponse(CamelModel):
    """
    Book as stored and returned by the API.

    average_rating and review_count are derived from reviews and are
    read-only for clients.
    """

    id: str = Field(..., description="Book UUID")
    title: str = Field(..., description="Book title", examples=["Dune"])
    author: str = Field(..., description="Author name", examples=["Frank Herbert"])
    description: str | None = Field(default=None, description="Book description")
    cover_image: str | None = Field(default=None, description="Cover image URL")
    genres: list[str] = Field(default_factory=list, description="Ordered genre names")
    published_year: int | None = Field(
        default=None,
        description="Year of publication (negative for BCE)",
        examples=[1965, -800],
    )
    average_rating: float = Field(
        default=0,
        ge=0,
        le=5,
        description="Mean review rating rounded to 1 decimal (0 means no reviews)",
    )
    review_count: int = Field(default=0, ge=0, description="Number of reviews")


class BookSummary(CamelModel):
    """Minimal book info for embedding in review responses."""

    id: str
    title: str
    author: str | None = None
    cover_image: str | None = None


class BookListResponse(CamelModel):
    """
    Paginated book list.

    sort_by/sort_order echo the values actually used, which differ from the
    request when it asked for an unknown field.
    """

    books: list[BookResponse]
    total_books: int = Field(..., ge=0)
    page: int
    limit: int
    total_pages: int = Field(..., ge=0)
    sort_by: str
    sort_order: str
    links: dict[str, str | None] = Field(
        ..., description="self, first, last, prev and next page URLs"
    )
    filters: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "books": [],
                "totalBooks": 25,
                "page": 1,
                "limit": 10,
                "totalPages": 3,
                "sortBy": "title",
                "sortOrder": "asc",
                "links": {
                    "self": "/api/books?page=1&limit=10&sortBy=title&sortOrder=asc",
                    "first": "/api/books?page=1&limit=10&sortBy=title&sortOrder=asc",
                    "last": "/api/books?page=3&limit=10&sortBy=title&sortOrder=asc",
                    "prev": None,
                    "next": "/api/books?page=2&limit=10&sortBy=title&sortOrder=asc",
                },
                "filters": {"minRating": "any"},
            }
        }
    )


class BookSearchResponse(CamelModel):
    books: list[BookResponse]
    count: int
    query: str
    filters: dict[str, Any]


class BookRatingStats(CamelModel):
    """Aggregated rating statistics for a book."""

    book_id: str
    title: str
    average_rating: float
    review_count: int
    distribution: dict[int, int] = Field(
        default_factory=lambda: {1: 0, 2: 0, 3: 0, 4: 0, 5: 0},
        description="Count of each rating (1-5)",
    )
    positive_percentage: int = Field(
        ...,
        ge=0,
        le=100,
        description="Share of 4 and 5 star ratings",
    )


class RatingRecalculationResponse(CamelModel):
    message: str
    book_id: str
    average_rating: float
    review_count: int
