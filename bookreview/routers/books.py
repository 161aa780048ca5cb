"""
Books Router

Read endpoints for books plus rating maintenance.

Endpoints:
- GET /books - Sorted, paginated list (optionally filtered by minRating)
- GET /books/search - Search by title/author with filters
- GET /books/{book_id} - Get a single book (optionally with its reviews)
- GET /books/{book_id}/ratings - Rating distribution for a book
- POST /books/{book_id}/ratings/recalculate - Recompute a book's rating (admin)

Books are created by the seed script; there are no create/update endpoints.
"""

import logging
from urllib.parse import urlencode

from fastapi import APIRouter, HTTPException, Query, Request, status

from bookreview.config import get_settings
from bookreview.dependencies import (
    AdminUser,
    Books,
    Pagination,
    Reviews,
    get_book_or_404,
)
from bookreview.schemas.book import (
    BookListResponse,
    BookRatingStats,
    BookSearchResponse,
    RatingRecalculationResponse,
)
from bookreview.schemas.review import BookDetailResponse
from bookreview.services.pagination import BOOK_SORTING, paginate
from bookreview.services.rate_limiter import limiter
from bookreview.services.ratings import (
    calculate_rating_distribution,
    positive_rating_percentage,
    recalculate_book_rating,
)
from bookreview.services.search import SearchFilters, filter_by_min_rating, search_books

logger = logging.getLogger(__name__)

settings = get_settings()

# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        404: {"description": "Book not found"},
    },
)


# =============================================================================
# Helper Functions
# =============================================================================


def _page_link(base: str, page: int, params: dict) -> str:
    return f"{base}?{urlencode({'page': page, **params})}"


def build_page_links(
    base: str,
    page: int,
    total_pages: int,
    limit: int,
    sort_by: str,
    sort_order: str,
    min_rating: float | None = None,
) -> dict[str, str | None]:
    """
    Navigation links for a book list page.

    prev is None on page 1; next is None on the last page (and past it).
    """
    params = {"limit": limit, "sortBy": sort_by, "sortOrder": sort_order}
    if min_rating is not None:
        params["minRating"] = min_rating

    return {
        "self": _page_link(base, page, params),
        "first": _page_link(base, 1, params),
        "last": _page_link(base, total_pages, params),
        "prev": _page_link(base, page - 1, params) if page > 1 else None,
        "next": _page_link(base, page + 1, params) if page < total_pages else None,
    }


# =============================================================================
# List and Search Endpoints
# =============================================================================


@router.get(
    "",
    response_model=BookListResponse,
    summary="List books",
    description="""
    Get a sorted, paginated list of books.

    **Sort fields:** title, author, publishedYear, averageRating, reviewCount.
    Unknown fields fall back to title; sortOrder is descending only for "desc".

    **minRating** filters books before pagination, so totals and page
    counts describe the filtered set.
    """,
)
@limiter.limit(settings.rate_limit_default)
def list_books(
    request: Request,
    books: Books,
    pagination: Pagination,
    min_rating: float | None = Query(
        default=None,
        alias="minRating",
        ge=0,
        le=5,
        description="Only books with averageRating >= this value",
    ),
) -> BookListResponse:
    candidates = filter_by_min_rating(books.find_all(), min_rating)

    result = paginate(
        candidates,
        pagination.page,
        pagination.limit,
        pagination.sort_by,
        pagination.sort_order,
        BOOK_SORTING,
    )

    return BookListResponse(
        books=result.items,
        total_books=result.total_items,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
        sort_by=result.sort_by,
        sort_order=result.sort_order,
        links=build_page_links(
            f"{settings.api_prefix}/books",
            result.page,
            result.total_pages,
            result.limit,
            result.sort_by,
            result.sort_order,
            min_rating,
        ),
        filters={"minRating": min_rating if min_rating is not None else "any"},
    )


@router.get(
    "/search",
    response_model=BookSearchResponse,
    summary="Search books",
    description="""
    Case-insensitive substring search over title and author.

    **Optional filters** (all must match): genre, yearFrom, yearTo,
    minRating, maxRating, hasReviews (true/false).
    """,
)
@limiter.limit(settings.rate_limit_search)
def search(
    request: Request,
    books: Books,
    q: str | None = Query(default=None, description="Search term", examples=["harry"]),
    genre: str | None = Query(default=None, description="Exact genre name"),
    year_from: int | None = Query(default=None, alias="yearFrom"),
    year_to: int | None = Query(default=None, alias="yearTo"),
    min_rating: float | None = Query(default=None, alias="minRating"),
    max_rating: float | None = Query(default=None, alias="maxRating"),
    has_reviews: str | None = Query(
        default=None,
        alias="hasReviews",
        description="'true' for reviewed books only, anything else for unreviewed",
    ),
) -> BookSearchResponse:
    if q is None or not q.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Search query is required",
        )

    filters = SearchFilters(
        genre=genre or None,
        year_from=year_from,
        year_to=year_to,
        min_rating=min_rating,
        max_rating=max_rating,
        has_reviews=has_reviews.lower() == "true" if has_reviews else None,
    )

    results = search_books(books.find_all(), q.strip(), filters)

    return BookSearchResponse(
        books=results,
        count=len(results),
        query=q,
        filters={
            "genre": filters.genre or "all",
            "yearFrom": filters.year_from if filters.year_from is not None else "any",
            "yearTo": filters.year_to if filters.year_to is not None else "any",
            "minRating": filters.min_rating if filters.min_rating is not None else "any",
            "maxRating": filters.max_rating if filters.max_rating is not None else "any",
            "hasReviews": filters.has_reviews if filters.has_reviews is not None else "any",
        },
    )


# =============================================================================
# Single Book Endpoints
# =============================================================================


@router.get(
    "/{book_id}",
    response_model=BookDetailResponse,
    response_model_exclude_none=True,
    summary="Get a book by ID",
    description="Retrieve a book. Pass includeReviews=true to embed its reviews.",
)
@limiter.limit(settings.rate_limit_default)
def get_book(
    request: Request,
    book_id: str,
    books: Books,
    reviews: Reviews,
    include_reviews: bool = Query(default=False, alias="includeReviews"),
) -> BookDetailResponse:
    book = get_book_or_404(books, book_id)

    if not include_reviews:
        return BookDetailResponse(book=book)

    return BookDetailResponse(
        book=book,
        reviews=reviews.find_by_book_id(book_id),
        message="Successfully retrieved book with reviews",
    )


@router.get(
    "/{book_id}/ratings",
    response_model=BookRatingStats,
    summary="Get book rating statistics",
    description="Average rating, review count and the 1-5 star distribution.",
)
@limiter.limit(settings.rate_limit_default)
def get_book_ratings(
    request: Request,
    book_id: str,
    books: Books,
    reviews: Reviews,
) -> BookRatingStats:
    book = get_book_or_404(books, book_id)

    distribution = calculate_rating_distribution(reviews.find_by_book_id(book_id))

    return BookRatingStats(
        book_id=book_id,
        title=book["title"],
        average_rating=book.get("averageRating", 0),
        review_count=book.get("reviewCount", 0),
        distribution=distribution,
        positive_percentage=positive_rating_percentage(distribution),
    )


@router.post(
    "/{book_id}/ratings/recalculate",
    response_model=RatingRecalculationResponse,
    summary="Recalculate a book's rating",
    description="Recompute averageRating and reviewCount from the reviews. Admin only.",
)
@limiter.limit(settings.rate_limit_write)
def recalculate_rating(
    request: Request,
    book_id: str,
    books: Books,
    reviews: Reviews,
    admin: AdminUser,
) -> RatingRecalculationResponse:
    summary = recalculate_book_rating(books, reviews, book_id)
    if summary is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book not found",
        )

    logger.info(f"Rating for book {book_id} recalculated by {admin['id']}")

    return RatingRecalculationResponse(
        message="Book rating recalculated successfully",
        book_id=summary.book_id,
        average_rating=summary.average_rating,
        review_count=summary.review_count,
    )
