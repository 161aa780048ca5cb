"""
pytest Fixtures for Book Review API Tests

This file contains shared fixtures used across all test files.

Every test gets its own data directory under pytest's tmp_path, so tests
never share JSON files. The client fixture builds a fresh app around that
store and enters it as a context manager, which runs the startup hook
(data file creation and the rating recalculation pass).

Sample data fixtures write through the collection models. Books are
created with averageRating/reviewCount of 0 and ratings only ever come from
reviews, so the startup recalculation never changes fixture data.
"""

# =============================================================================
# TEST ENVIRONMENT SETUP
# =============================================================================
# IMPORTANT: Set environment variables BEFORE importing the app
# This disables rate limiting and Redis and sets a test secret key
import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CACHE_ENABLED"] = "false"
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-at-least-32-characters-long"

from collections.abc import Generator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from bookreview.database import JsonFileStore, Record
from bookreview.main import create_app
from bookreview.models import BookModel, ReviewModel, UserModel
from bookreview.services.ratings import recalculate_book_rating
from bookreview.services.security import create_access_token


# =============================================================================
# HELPERS
# =============================================================================


def get_auth_header(user: Record) -> dict:
    """Create an authorization header for a user record."""
    token = create_access_token({"sub": user["id"], "email": user["email"]})
    return {"Authorization": f"Bearer {token}"}


def make_book(title: str, author: str = "Test Author", **fields) -> dict:
    """Book payload with the derived rating fields zeroed."""
    return {
        "title": title,
        "author": author,
        "description": f"Description for {title}",
        "coverImage": None,
        "genres": [],
        "publishedYear": 2000,
        "averageRating": 0,
        "reviewCount": 0,
        **fields,
    }


# =============================================================================
# STORE AND CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def store(data_dir: Path) -> JsonFileStore:
    """A fresh, initialized store per test."""
    store = JsonFileStore(data_dir)
    store.initialize()
    return store


@pytest.fixture
def book_model(store: JsonFileStore) -> BookModel:
    return BookModel(store)


@pytest.fixture
def review_model(store: JsonFileStore) -> ReviewModel:
    return ReviewModel(store)


@pytest.fixture
def user_model(store: JsonFileStore) -> UserModel:
    return UserModel(store)


@pytest.fixture
def client(store: JsonFileStore) -> Generator[TestClient, None, None]:
    """
    Create a test client serving the per-test store.

    Using TestClient as a context manager runs the lifespan startup and
    shutdown code.
    """
    app = create_app(store)
    with TestClient(app) as test_client:
        yield test_client


# =============================================================================
# SAMPLE DATA FIXTURES
# =============================================================================


@pytest.fixture
def sample_book(book_model: BookModel) -> Record:
    return book_model.create(
        make_book(
            "Harry Potter and the Philosopher's Stone",
            author="J.K. Rowling",
            genres=["Fantasy", "Young Adult"],
            publishedYear=1997,
        )
    )


@pytest.fixture
def second_book(book_model: BookModel) -> Record:
    return book_model.create(
        make_book(
            "The Hobbit",
            author="J.R.R. Tolkien",
            genres=["Fantasy"],
            publishedYear=1937,
        )
    )


@pytest.fixture
def many_books(book_model: BookModel) -> list[Record]:
    """25 books titled "Book 01" to "Book 25" (more than two default pages)."""
    return [
        book_model.create(make_book(f"Book {i:02d}", publishedYear=1990 + i))
        for i in range(1, 26)
    ]


@pytest.fixture
def sample_user(user_model: UserModel) -> Record:
    return user_model.create(
        {
            "email": "testuser@example.com",
            "password": "SecurePass123",
            "name": "Test User",
        }
    )


@pytest.fixture
def second_user(user_model: UserModel) -> Record:
    """A second user for ownership scenarios."""
    return user_model.create(
        {
            "email": "seconduser@example.com",
            "password": "SecurePass456",
            "name": "Second User",
        }
    )


@pytest.fixture
def admin_user(user_model: UserModel) -> Record:
    return user_model.create(
        {
            "email": "admin@example.com",
            "password": "AdminPass123",
            "name": "Admin User",
            "isAdmin": True,
        }
    )


@pytest.fixture
def sample_review(
    book_model: BookModel,
    review_model: ReviewModel,
    sample_book: Record,
    sample_user: Record,
) -> Record:
    """A 4-star review of sample_book by sample_user, with the book's rating updated."""
    review = review_model.create(
        {
            "bookId": sample_book["id"],
            "userId": sample_user["id"],
            "text": "I really enjoyed reading this book.",
            "rating": 4,
        }
    )
    recalculate_book_rating(book_model, review_model, sample_book["id"])
    return review
