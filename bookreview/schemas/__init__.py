"""
Pydantic Schemas Package

Request and response schemas for the API. Records use camelCase keys on
the wire; see schemas.common.CamelModel.
"""

from bookreview.schemas.book import (
    BookListResponse,
    BookRatingStats,
    BookResponse,
    BookSearchResponse,
    BookSummary,
    RatingRecalculationResponse,
)
from bookreview.schemas.common import CamelModel, MessageResponse
from bookreview.schemas.recommendation import (
    RecommendationItem,
    RecommendationListResponse,
)
from bookreview.schemas.review import (
    BookDetailResponse,
    ReviewAuthor,
    ReviewCreate,
    ReviewListResponse,
    ReviewMutationResponse,
    ReviewResponse,
    ReviewUpdate,
)
from bookreview.schemas.user import (
    AuthResponse,
    FavoriteBooksResponse,
    FavoritesResponse,
    PasswordChange,
    UserCreate,
    UserEnvelope,
    UserProfileEnvelope,
    UserLogin,
    UserProfileResponse,
    UserResponse,
    UserStats,
    UserUpdate,
    UserUpdateResponse,
)

__all__ = [
    "AuthResponse",
    "BookDetailResponse",
    "BookListResponse",
    "BookRatingStats",
    "BookResponse",
    "BookSearchResponse",
    "BookSummary",
    "CamelModel",
    "FavoriteBooksResponse",
    "FavoritesResponse",
    "MessageResponse",
    "PasswordChange",
    "RatingRecalculationResponse",
    "RecommendationItem",
    "RecommendationListResponse",
    "ReviewAuthor",
    "ReviewCreate",
    "ReviewListResponse",
    "ReviewMutationResponse",
    "ReviewResponse",
    "ReviewUpdate",
    "UserCreate",
    "UserEnvelope",
    "UserProfileEnvelope",
    "UserLogin",
    "UserProfileResponse",
    "UserResponse",
    "UserStats",
    "UserUpdate",
    "UserUpdateResponse",
]
