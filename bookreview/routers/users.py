"""
Users Router

Profile and favorites endpoints. Every route requires authentication.

Endpoints:
- GET /users/favorites - Current user's favorite books
- POST /users/favorites/{book_id} - Add a favorite (idempotent)
- DELETE /users/favorites/{book_id} - Remove a favorite
- GET /users/{user_id} - Public profile with review statistics
- PUT /users/{user_id} - Update own profile
- PUT /users/{user_id}/password - Change own password
- GET /users/{user_id}/reviews - Sorted, paginated reviews by a user
- GET /users/{user_id}/favorites - A user's favorite books

The /favorites routes are declared before /{user_id} so that "favorites"
is never captured as a user id.
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
    get_user_or_404,
)
from bookreview.schemas.common import MessageResponse
from bookreview.schemas.review import ReviewListResponse
from bookreview.schemas.user import (
    FavoriteBooksResponse,
    FavoritesResponse,
    PasswordChange,
    UserProfileEnvelope,
    UserUpdate,
    UserUpdateResponse,
)
from bookreview.services.cache import invalidate_recommendation_cache
from bookreview.services.pagination import REVIEW_SORTING, paginate
from bookreview.services.rate_limiter import limiter
from bookreview.services.ratings import calculate_average_rating

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(
    prefix="/users",
    tags=["Users"],
    responses={
        401: {"description": "Not authenticated"},
        404: {"description": "User or book not found"},
    },
)


def require_self(user_id: str, current_user: Record, action: str) -> None:
    if user_id != current_user["id"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"You can only {action} your own profile",
        )


# =============================================================================
# Current User Favorites
# =============================================================================


@router.get(
    "/favorites",
    response_model=FavoriteBooksResponse,
    summary="Get my favorite books",
)
@limiter.limit(settings.rate_limit_default)
def get_my_favorites(
    request: Request,
    books: Books,
    current_user: CurrentUser,
) -> FavoriteBooksResponse:
    return FavoriteBooksResponse(
        books=books.find_by_ids(current_user.get("favorites", []))
    )


@router.post(
    "/favorites/{book_id}",
    response_model=FavoritesResponse,
    summary="Add a book to favorites",
    description="Adding a book that is already a favorite changes nothing.",
)
@limiter.limit(settings.rate_limit_write)
def add_favorite(
    request: Request,
    book_id: str,
    books: Books,
    users: Users,
    current_user: CurrentUser,
) -> FavoritesResponse:
    get_book_or_404(books, book_id)

    user = get_user_or_404(users, current_user["id"])
    updated = users.add_favorite(user["id"], book_id)
    invalidate_recommendation_cache(user["id"])

    return FavoritesResponse(
        message="Book added to favorites",
        favorites=updated["favorites"],
    )


@router.delete(
    "/favorites/{book_id}",
    response_model=FavoritesResponse,
    summary="Remove a book from favorites",
)
@limiter.limit(settings.rate_limit_write)
def remove_favorite(
    request: Request,
    book_id: str,
    books: Books,
    users: Users,
    current_user: CurrentUser,
) -> FavoritesResponse:
    get_book_or_404(books, book_id)

    user = get_user_or_404(users, current_user["id"])
    updated = users.remove_favorite(user["id"], book_id)
    invalidate_recommendation_cache(user["id"])

    return FavoritesResponse(
        message="Book removed from favorites",
        favorites=updated["favorites"],
    )


# =============================================================================
# Profile Endpoints
# =============================================================================


@router.get(
    "/{user_id}",
    response_model=UserProfileEnvelope,
    summary="Get a user profile",
    description="User data (never the password) with review statistics.",
)
@limiter.limit(settings.rate_limit_default)
def get_user_profile(
    request: Request,
    user_id: str,
    users: Users,
    reviews: Reviews,
    current_user: CurrentUser,
) -> UserProfileEnvelope:
    user = get_user_or_404(users, user_id)

    average_rating, total_reviews = calculate_average_rating(
        reviews.find_by_user_id(user_id)
    )

    return UserProfileEnvelope(
        user={
            **user,
            "stats": {"totalReviews": total_reviews, "averageRating": average_rating},
        }
    )


@router.put(
    "/{user_id}",
    response_model=UserUpdateResponse,
    summary="Update a user profile",
    description="Update name, bio or location. Users can only update themselves.",
)
@limiter.limit(settings.rate_limit_write)
def update_user_profile(
    request: Request,
    user_id: str,
    profile: UserUpdate,
    users: Users,
    current_user: CurrentUser,
) -> UserUpdateResponse:
    require_self(user_id, current_user, "update")

    updated = users.update_profile(user_id, profile.model_dump(exclude_unset=True))
    if updated is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    return UserUpdateResponse(message="Profile updated successfully", user=updated)


@router.put(
    "/{user_id}/password",
    response_model=MessageResponse,
    summary="Change password",
    description="Requires the current password. Users can only change their own.",
)
@limiter.limit(settings.rate_limit_write)
def change_password(
    request: Request,
    user_id: str,
    passwords: PasswordChange,
    users: Users,
    current_user: CurrentUser,
) -> MessageResponse:
    require_self(user_id, current_user, "update")

    if not users.verify_password(current_user, passwords.current_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect",
        )

    users.update_password(user_id, passwords.new_password)
    logger.info(f"Password changed for user {user_id}")

    return MessageResponse(message="Password updated successfully")


# =============================================================================
# User Content Endpoints
# =============================================================================


@router.get(
    "/{user_id}/reviews",
    response_model=ReviewListResponse,
    summary="List reviews by a user",
    description="Sorted, paginated reviews, each with a summary of the reviewed book.",
)
@limiter.limit(settings.rate_limit_default)
def list_user_reviews(
    request: Request,
    user_id: str,
    users: Users,
    books: Books,
    reviews: Reviews,
    pagination: Pagination,
    current_user: CurrentUser,
) -> ReviewListResponse:
    get_user_or_404(users, user_id)

    result = paginate(
        reviews.find_by_user_id(user_id),
        pagination.page,
        pagination.limit,
        pagination.sort_by,
        pagination.sort_order,
        REVIEW_SORTING,
    )

    books_by_id = {book["id"]: book for book in books.find_all()}
    items = []
    for review in result.items:
        book = books_by_id.get(review["bookId"])
        if book is not None:
            review = {
                **review,
                "book": {
                    "id": book["id"],
                    "title": book["title"],
                    "author": book.get("author"),
                    "coverImage": book.get("coverImage"),
                },
            }
        items.append(review)

    return ReviewListResponse(
        reviews=items,
        total_reviews=result.total_items,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
        sort_by=result.sort_by,
        sort_order=result.sort_order,
    )


@router.get(
    "/{user_id}/favorites",
    response_model=FavoriteBooksResponse,
    summary="Get a user's favorite books",
)
@limiter.limit(settings.rate_limit_default)
def get_user_favorites(
    request: Request,
    user_id: str,
    users: Users,
    books: Books,
    current_user: CurrentUser,
) -> FavoriteBooksResponse:
    user = get_user_or_404(users, user_id)
    return FavoriteBooksResponse(books=books.find_by_ids(user.get("favorites", [])))
