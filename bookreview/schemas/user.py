"""
User Pydantic Schemas

Schemas:
- UserCreate / UserLogin: Registration and login bodies
- UserResponse: User data (never exposes the password hash)
- UserProfileResponse: UserResponse plus review statistics
- UserUpdate: Profile update fields
- PasswordChange: Current + new password
- AuthResponse, UserEnvelope, UserProfileEnvelope, UserUpdateResponse:
  Response envelopes
- FavoritesResponse, FavoriteBooksResponse: Favorites endpoints
"""

import re

from pydantic import BaseModel, EmailStr, Field, field_validator

from bookreview.schemas.book import BookResponse
from bookreview.schemas.common import CamelModel


def _password_must_be_strong(v: str) -> str:
    """Require at least one letter and one number."""
    if not re.search(r"[A-Za-z]", v):
        raise ValueError("Password must contain at least one letter")
    if not re.search(r"\d", v):
        raise ValueError("Password must contain at least one number")
    return v


class UserCreate(BaseModel):
    """
    Registration data.

    Example request body:
    {
        "email": "jane@example.com",
        "password": "SecurePass123",
        "name": "Jane Doe"
    }
    """

    email: EmailStr = Field(..., examples=["jane@example.com"])
    password: str = Field(..., min_length=8, max_length=72)
    name: str = Field(..., min_length=1, max_length=255, examples=["Jane Doe"])

    @field_validator("password")
    @classmethod
    def password_must_be_strong(cls, v: str) -> str:
        return _password_must_be_strong(v)

    @field_validator("name")
    @classmethod
    def name_must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Name cannot be empty or whitespace")
        return v.strip()


class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserResponse(CamelModel):
    """User data safe to return to clients."""

    id: str
    email: str
    name: str | None = None
    favorites: list[str] = Field(default_factory=list)
    bio: str | None = None
    location: str | None = None
    is_admin: bool = False


class UserStats(CamelModel):
    total_reviews: int = Field(..., ge=0)
    average_rating: float = Field(..., ge=0, le=5)


class UserProfileResponse(UserResponse):
    stats: UserStats


class UserUpdate(BaseModel):
    """Profile update. All fields optional; omitted fields are unchanged."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    bio: str | None = Field(default=None, max_length=1000)
    location: str | None = Field(default=None, max_length=255)


class PasswordChange(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=72)

    @field_validator("new_password")
    @classmethod
    def new_password_must_be_strong(cls, v: str) -> str:
        return _password_must_be_strong(v)


class AuthResponse(BaseModel):
    message: str
    user: UserResponse
    token: str


class UserEnvelope(BaseModel):
    user: UserResponse


class UserProfileEnvelope(BaseModel):
    user: UserProfileResponse


class UserUpdateResponse(BaseModel):
    message: str
    user: UserResponse


class FavoritesResponse(BaseModel):
    message: str
    favorites: list[str]


class FavoriteBooksResponse(BaseModel):
    books: list[BookResponse]
