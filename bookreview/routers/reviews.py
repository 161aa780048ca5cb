"""
Reviews Router

Endpoints for book reviews.

Endpoints:
- GET /books/{book_id}/reviews - Sorted, paginated reviews for a book
- POST /books/{book_id}/reviews - Create a review (authenticated)
- PUT /reviews/{review_id} - Update a review (owner only)
- DELETE /reviews/{review_id} - Delete a review (owner only)

Business Rules:
- One review per user per book (checked before create, not stored)
- Only the review author can update or delete their review
- Every create/update/delete recomputes the book's averageRating and
  reviewCount and drops the author's cached recommendations
"""

import logging

from fastapi import APIRouter, HTTPException, Request, status

from bookreview.config import get_settings
from bookreview.database import Record
from bookreview.dependencies import (
    Books,
    CurrentUser,
    Pagination,
    Reviews,
    Users,
    get_book_or_404,
)
from bookreview.models import ReviewModel
from bookreview.schemas.common import MessageResponse
from bookreview.schemas.review import (
    ReviewCreate,
    ReviewListResponse,
    ReviewMutationResponse,
    ReviewUpdate,
)
from bookreview.services.cache import invalidate_recommendation_cache
from bookreview.services.pagination import REVIEW_SORTING, paginate
from bookreview.services.rate_limiter import limiter
from bookreview.services.ratings import recalculate_book_rating

logger = logging.getLogger(__name__)

settings = get_settings()

# =============================================================================
# Router Configuration
# =============================================================================

router = APIRouter(
    tags=["Reviews"],
    responses={
        404: {"description": "Review or book not found"},
    },
)


# =============================================================================
# Helper Functions
# =============================================================================


def get_review_or_404(reviews: ReviewModel, review_id: str) -> Record:
    review = reviews.find_by_id(review_id)
    if review is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Review not found",
        )
    return review


def require_owner(review: Record, user: Record, action: str) -> None:
    if review.get("userId") != user["id"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You can only {action} your own reviews",
        )


# =============================================================================
# Book Review Endpoints
# =============================================================================


@router.get(
    "/books/{book_id}/reviews",
    response_model=ReviewListResponse,
    summary="List reviews for a book",
    description="""
    Get a sorted, paginated list of reviews for a book, each with its
    author's id and name.

    **Sort fields:** timestamp (default, newest first), rating.
    """,
)
@limiter.limit(settings.rate_limit_default)
def list_book_reviews(
    request: Request,
    book_id: str,
    books: Books,
    reviews: Reviews,
    users: Users,
    pagination: Pagination,
) -> ReviewListResponse:
    get_book_or_404(books, book_id)

    result = paginate(
        reviews.find_by_book_id(book_id),
        pagination.page,
        pagination.limit,
        pagination.sort_by,
        pagination.sort_order,
        REVIEW_SORTING,
    )

    names = {user["id"]: user.get("name") for user in users.find_all()}
    items = [
        {**review, "user": {"id": review["userId"], "name": names.get(review["userId"])}}
        for review in result.items
    ]

    return ReviewListResponse(
        reviews=items,
        total_reviews=result.total_items,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
        sort_by=result.sort_by,
        sort_order=result.sort_order,
    )


@router.post(
    "/books/{book_id}/reviews",
    response_model=ReviewMutationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a review",
    description="Create a review for a book. Requires authentication. One review per book per user.",
)
@limiter.limit(settings.rate_limit_write)
def create_review(
    request: Request,
    book_id: str,
    review_data: ReviewCreate,
    books: Books,
    reviews: Reviews,
    current_user: CurrentUser,
) -> ReviewMutationResponse:
    """
    Create a new review for a book.

    Raises:
        HTTPException: 404 if book not found
        HTTPException: 409 if the user already reviewed this book
    """
    get_book_or_404(books, book_id)

    if reviews.user_has_reviewed(current_user["id"], book_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You have already reviewed this book",
        )

    review = reviews.create(
        {
            "bookId": book_id,
            "userId": current_user["id"],
            "text": review_data.text,
            "rating": review_data.rating,
        }
    )

    recalculate_book_rating(books, reviews, book_id)
    invalidate_recommendation_cache(current_user["id"])

    logger.info(f"Review {review['id']} created for book {book_id}")

    return ReviewMutationResponse(message="Review created successfully", review=review)


# =============================================================================
# Individual Review Endpoints
# =============================================================================


@router.put(
    "/reviews/{review_id}",
    response_model=ReviewMutationResponse,
    summary="Update a review",
    description="Update your own review. Only the review author can update.",
)
@limiter.limit(settings.rate_limit_write)
def update_review(
    request: Request,
    review_id: str,
    review_data: ReviewUpdate,
    books: Books,
    reviews: Reviews,
    current_user: CurrentUser,
) -> ReviewMutationResponse:
    """
    Update an existing review. The timestamp is refreshed.

    Raises:
        HTTPException: 404 if review not found
        HTTPException: 403 if user is not the review author
    """
    review = get_review_or_404(reviews, review_id)
    require_owner(review, current_user, "update")

    update_data = review_data.model_dump(exclude_unset=True, exclude_none=True)
    updated = reviews.update(review_id, update_data)
    if updated is None:
        # Deleted by a concurrent request between lookup and write
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Review not found",
        )

    recalculate_book_rating(books, reviews, review["bookId"])
    invalidate_recommendation_cache(current_user["id"])

    return ReviewMutationResponse(message="Review updated successfully", review=updated)


@router.delete(
    "/reviews/{review_id}",
    response_model=MessageResponse,
    summary="Delete a review",
    description="Delete your own review. Only the review author can delete.",
)
@limiter.limit(settings.rate_limit_write)
def delete_review(
    request: Request,
    review_id: str,
    books: Books,
    reviews: Reviews,
    current_user: CurrentUser,
) -> MessageResponse:
    review = get_review_or_404(reviews, review_id)
    require_owner(review, current_user, "delete")

    book_id = review["bookId"]
    reviews.delete(review_id)

    recalculate_book_rating(books, reviews, book_id)
    invalidate_recommendation_cache(current_user["id"])

    logger.info(f"Review {review_id} deleted")

    return MessageResponse(message="Review deleted successfully")
