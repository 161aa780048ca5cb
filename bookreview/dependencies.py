"""
FastAPI Dependencies Module

Reusable components injected into route handlers with Depends().

Common Dependency Patterns:
- Collection models bound to the app's data store (per-request)
- Authentication (Bearer JWT -> user record)
- Pagination parameters with lenient coercion
"""

import re
from typing import Annotated

from fastapi import Depends, HTTPException, Query, status
from fastapi.security import OAuth2PasswordBearer

from bookreview.config import get_settings
from bookreview.database import JsonFileStore, Record, get_store
from bookreview.models import BookModel, ReviewModel, UserModel
from bookreview.services.security import verify_token_type

settings = get_settings()

MAX_LIMIT = 100
LEADING_INT = re.compile(r"\s*([+-]?\d+)")
DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10

# =============================================================================
# Type Aliases with Annotated
# =============================================================================
# Route signatures stay short:
#   def list_books(books: Books): ...

Store = Annotated[JsonFileStore, Depends(get_store)]


def get_book_model(store: Store) -> BookModel:
    return BookModel(store)


def get_review_model(store: Store) -> ReviewModel:
    return ReviewModel(store)


def get_user_model(store: Store) -> UserModel:
    return UserModel(store)


Books = Annotated[BookModel, Depends(get_book_model)]
Reviews = Annotated[ReviewModel, Depends(get_review_model)]
Users = Annotated[UserModel, Depends(get_user_model)]


# =============================================================================
# Pagination Parameters
# =============================================================================
def _coerce_positive_int(raw: str | None, default: int, name: str) -> int:
    """
    Parse a page/limit query value.

    Reads the leading integer, so "1.5" is 1 and "10abc" is 10. Absent or
    non-numeric values use the default; numbers below 1 are rejected with 400.
    """
    match = LEADING_INT.match(raw) if raw is not None else None
    if match is None:
        return default
    value = int(match.group(1))
    if value < 1:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"{name} must be a positive integer",
        )
    return value


class PaginationParams:
    """
    Common pagination and sorting parameters for list endpoints.

    page and limit arrive as strings so that junk such as ?page=abc falls
    back to the defaults instead of failing validation. sort_by/sort_order
    are passed through untouched; services.pagination resolves them against
    the entity's allow-list.

    Usage in route:
        @router.get("/books")
        def list_books(books: Books, pagination: Pagination):
            page = paginate(books.find_all(), pagination.page, pagination.limit, ...)
    """

    def __init__(
        self,
        page: str | None = Query(
            default=None,
            description="Page number (1-indexed)",
            examples=["1", "2"],
        ),
        limit: str | None = Query(
            default=None,
            description=f"Items per page (max {MAX_LIMIT})",
            examples=["10", "25"],
        ),
        sort_by: str | None = Query(
            default=None,
            alias="sortBy",
            description="Field to sort by; unknown fields use the default",
        ),
        sort_order: str | None = Query(
            default=None,
            alias="sortOrder",
            description="'asc' or 'desc'",
        ),
    ) -> None:
        self.page = _coerce_positive_int(page, DEFAULT_PAGE, "Page")
        self.limit = _coerce_positive_int(limit, DEFAULT_LIMIT, "Limit")
        if self.limit > MAX_LIMIT:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Limit cannot exceed {MAX_LIMIT}",
            )
        self.sort_by = sort_by
        self.sort_order = sort_order


Pagination = Annotated[PaginationParams, Depends()]


# =============================================================================
# Lookup Helpers
# =============================================================================
def get_book_or_404(books: BookModel, book_id: str) -> Record:
    """Get a book by ID or raise 404."""
    book = books.find_by_id(book_id)
    if book is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Book not found",
        )
    return book


def get_user_or_404(users: UserModel, user_id: str) -> Record:
    """Get a user by ID or raise 404."""
    user = users.find_by_id(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


# =============================================================================
# JWT Authentication
# =============================================================================
# OAuth2PasswordBearer extracts "Authorization: Bearer <token>" and answers
# 401 when the header is missing. The login endpoint takes JSON, so the
# Swagger "Authorize" form is informational only.

oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.api_prefix}/auth/login",
    auto_error=True,
)


def get_current_user(
    users: Users,
    token: str = Depends(oauth2_scheme),
) -> Record:
    """
    Extract and validate the current user from the JWT token.

    Raises:
        HTTPException: 401 if the token is invalid or the user is gone
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = verify_token_type(token, "access")
    if payload is None:
        raise credentials_exception

    user_id = payload.get("sub")
    if user_id is None:
        raise credentials_exception

    user = users.find_by_id(str(user_id))
    if user is None:
        raise credentials_exception

    return user


def get_admin_user(current_user: Record = Depends(get_current_user)) -> Record:
    """
    Require an admin account (isAdmin on the user record).

    Raises:
        HTTPException: 403 if the user is not an admin
    """
    if not current_user.get("isAdmin"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin privileges required",
        )
    return current_user


CurrentUser = Annotated[Record, Depends(get_current_user)]
AdminUser = Annotated[Record, Depends(get_admin_user)]
