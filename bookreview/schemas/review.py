"""
Review Pydantic Schemas

Schemas:
- ReviewCreate: Create a new review (text + rating)
- ReviewUpdate: Update an existing review
- ReviewResponse: Review with optional embedded user or book
- ReviewListResponse: Sorted, paginated list of reviews
- ReviewMutationResponse: {"message", "review"} envelope
- BookDetailResponse: One book, optionally with its reviews

Business Rules:
- Rating must be an integer from 1 to 5
- Text must not be empty
- One review per user per book (checked by the router on create)
"""

from pydantic import BaseModel, Field, field_validator

from bookreview.schemas.book import BookResponse, BookSummary
from bookreview.schemas.common import CamelModel


def _validate_rating(v: int | None) -> int | None:
    if v is not None and not 1 <= v <= 5:
        raise ValueError("Rating must be between 1 and 5")
    return v


def _validate_text(v: str | None) -> str | None:
    if v is not None:
        v = v.strip()
        if not v:
            raise ValueError("Review text cannot be empty")
    return v


class ReviewCreate(BaseModel):
    """
    Schema for creating a new review.

    Example request body:
    {
        "text": "One of the best books I've ever read...",
        "rating": 5
    }
    """

    text: str = Field(
        ...,
        max_length=5000,
        description="Review text",
        examples=["A masterpiece of world-building."],
    )
    rating: int = Field(..., description="Rating from 1 to 5 stars", examples=[4, 5])

    @field_validator("text")
    @classmethod
    def text_must_not_be_blank(cls, v):
        return _validate_text(v)

    @field_validator("rating")
    @classmethod
    def rating_must_be_in_range(cls, v):
        return _validate_rating(v)


class ReviewUpdate(BaseModel):
    """Schema for updating a review. Omitted fields keep their value."""

    text: str | None = Field(default=None, max_length=5000)
    rating: int | None = Field(default=None)

    @field_validator("text")
    @classmethod
    def text_must_not_be_blank(cls, v):
        return _validate_text(v)

    @field_validator("rating")
    @classmethod
    def rating_must_be_in_range(cls, v):
        return _validate_rating(v)


class ReviewAuthor(CamelModel):
    """Public info about the user who wrote a review."""

    id: str
    name: str | None = None


class ReviewResponse(CamelModel):
    """
    Review as returned by the API.

    Book review lists embed `user`; user review lists embed `book`.
    """

    id: str = Field(..., description="Review UUID")
    book_id: str = Field(..., description="ID of the reviewed book")
    user_id: str = Field(..., description="ID of the review author")
    text: str
    rating: int = Field(..., ge=1, le=5)
    timestamp: str = Field(
        ...,
        description="ISO-8601 time of creation or last update",
        examples=["2024-01-15T10:30:00.000Z"],
    )
    user: ReviewAuthor | None = None
    book: BookSummary | None = None


class ReviewListResponse(CamelModel):
    reviews: list[ReviewResponse]
    total_reviews: int = Field(..., ge=0)
    page: int
    limit: int
    total_pages: int = Field(..., ge=0)
    sort_by: str
    sort_order: str


class ReviewMutationResponse(BaseModel):
    message: str
    review: ReviewResponse


class BookDetailResponse(BaseModel):
    """A book; `reviews` and `message` are present with includeReviews=true."""

    book: BookResponse
    reviews: list[ReviewResponse] | None = None
    message: str | None = None
