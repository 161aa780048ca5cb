"""
Recommendations Router

Endpoints:
- GET /recommendations - Personalized recommendations for the current user

Query parameters:
- limit: number of books to return (1-50, default 5)
- genre: only recommend books in this genre
- refresh: "true" ignores the cached list
"""

import logging

from fastapi import APIRouter, Query, Request

from bookreview.config import get_settings
from bookreview.dependencies import Books, CurrentUser, Reviews, Users
from bookreview.schemas.recommendation import RecommendationListResponse
from bookreview.services.rate_limiter import limiter
from bookreview.services.recommendations import get_recommendations_for_user

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(
    prefix="/recommendations",
    tags=["Recommendations"],
    responses={
        401: {"description": "Not authenticated"},
    },
)


@router.get(
    "",
    response_model=RecommendationListResponse,
    summary="Get book recommendations",
    description="""
    Recommend unread books from the user's reviews and favorites.

    Users without enough history get the top-rated books instead.
    """,
)
@limiter.limit(settings.rate_limit_default)
def get_recommendations(
    request: Request,
    users: Users,
    books: Books,
    reviews: Reviews,
    current_user: CurrentUser,
    limit: int = Query(default=5, ge=1, le=50, description="Number of books"),
    genre: str | None = Query(default=None, description="Only this genre"),
    refresh: bool = Query(default=False, description="Bypass the cache"),
) -> RecommendationListResponse:
    recommendations = get_recommendations_for_user(
        current_user["id"],
        users,
        books,
        reviews,
        limit=limit,
        genre=genre,
        force_refresh=refresh,
    )

    return RecommendationListResponse(
        success=True,
        count=len(recommendations),
        data=recommendations,
    )
