"""
API Routers Package

Each module defines an APIRouter; main.create_app() mounts them all under
settings.api_prefix.
"""

from bookreview.routers import auth, books, recommendations, reviews, users

__all__ = ["auth", "books", "recommendations", "reviews", "users"]
