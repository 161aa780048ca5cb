"""
Recommendations Service

Personalized book recommendations built from the user's preference profile
(see services.preferences).

Algorithm:
1. Skip books the user has already reviewed or favorited
2. Score each remaining book by genre affinity (x0.6) and author
   affinity (x0.8)
3. Add a small boost for well-rated books (averageRating / 5 x 0.2)
4. Keep books with any genre or author affinity, best score first

Features:
- Full per-user list cached in Redis, filtered by genre/limit on the way out
- refresh=True bypasses the cache
- Cold start or any failure falls back to the top-rated books
"""

import logging
from typing import Any

from bookreview.database import Record
from bookreview.models import BookModel, ReviewModel, UserModel
from bookreview.services.cache import cache_get, cache_set, make_cache_key
from bookreview.services.pagination import BOOK_SORTING, sort_records
from bookreview.services.preferences import UserPreferences, get_user_preferences

logger = logging.getLogger(__name__)

GENRE_WEIGHT = 0.6
AUTHOR_WEIGHT = 0.8
RATING_WEIGHT = 0.2


def score_book(book: Record, preferences: UserPreferences) -> tuple[float, float, list[str]]:
    """
    Score a candidate book against a preference profile.

    Returns:
        (total score, affinity part of the score, reasons)
    """
    reasons = []
    affinity = 0.0

    matched_genres = [
        genre for genre in book.get("genres", []) if preferences.genre_score(genre) > 0
    ]
    if matched_genres:
        affinity += GENRE_WEIGHT * sum(preferences.genre_score(g) for g in matched_genres)
        reasons.append(f"Matches your interest in {', '.join(matched_genres)}")

    author = book.get("author")
    author_score = preferences.author_score(author) if author else 0.0
    if author_score > 0:
        affinity += AUTHOR_WEIGHT * author_score
        reasons.append(f"By {author}, an author you enjoy")

    average_rating = book.get("averageRating") or 0
    if average_rating >= 4:
        reasons.append(f"Highly rated by readers ({average_rating}/5)")

    return affinity + RATING_WEIGHT * average_rating / 5, affinity, reasons


def generate_recommendations(
    user: Record,
    books: list[Record],
    user_reviews: list[Record],
) -> list[dict[str, Any]]:
    """Rank unread books for `user`; empty when there is no affinity signal."""
    preferences = get_user_preferences(user, books, user_reviews)

    seen = {review.get("bookId") for review in user_reviews}
    seen.update(user.get("favorites", []))

    scored = []
    for book in books:
        if book["id"] in seen:
            continue
        score, affinity, reasons = score_book(book, preferences)
        if affinity > 0:
            scored.append({"book": book, "score": round(score, 3), "reasons": reasons})

    scored.sort(key=lambda item: item["score"], reverse=True)
    return scored


def default_recommendations(
    books: list[Record],
    limit: int,
    genre: str | None = None,
) -> list[dict[str, Any]]:
    """Top-rated books, used for new users and as the failure fallback."""
    candidates = sort_records(books, "averageRating", "desc", BOOK_SORTING)
    if genre:
        candidates = [book for book in candidates if genre in book.get("genres", [])]
    return [
        {
            "book": book,
            "score": round(RATING_WEIGHT * (book.get("averageRating") or 0) / 5, 3),
            "reasons": ["Popular with readers"],
        }
        for book in candidates[:limit]
    ]


def filter_recommendations(
    recommendations: list[dict[str, Any]],
    limit: int,
    genre: str | None = None,
) -> list[dict[str, Any]]:
    if genre:
        recommendations = [
            item for item in recommendations if genre in item["book"].get("genres", [])
        ]
    return recommendations[:limit]


def get_recommendations_for_user(
    user_id: str,
    users: UserModel,
    books: BookModel,
    reviews: ReviewModel,
    limit: int = 5,
    genre: str | None = None,
    force_refresh: bool = False,
) -> list[dict[str, Any]]:
    """
    Get personalized recommendations for a user.

    Args:
        user_id: ID of the user
        users, books, reviews: Collection models
        limit: Number of recommendations to return
        genre: Only return books in this genre
        force_refresh: Ignore cached recommendations

    Returns:
        List of {"book", "score", "reasons"} dicts, best first
    """
    cache_key = make_cache_key("recommendations", user_id)

    try:
        if not force_refresh:
            cached = cache_get(cache_key)
            if cached is not None:
                return filter_recommendations(cached, limit, genre)

        user = users.find_by_id(user_id)
        if user is None:
            raise LookupError(f"User with ID {user_id} not found")

        recommendations = generate_recommendations(
            user,
            books.find_all(),
            reviews.find_by_user_id(user_id),
        )
        if not recommendations:
            return default_recommendations(books.find_all(), limit, genre)

        cache_set(cache_key, recommendations)
        return filter_recommendations(recommendations, limit, genre)
    except Exception as e:
        logger.error(f"Error generating recommendations for {user_id}: {e}")
        return default_recommendations(books.find_all(), limit, genre)
