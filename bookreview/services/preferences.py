"""
Preference Service

Builds a reading-preference profile for a user from their reviews and
favorite books.

Signals and weights:
- Reviews weigh by rating: 5 -> 2.0, 4 -> 1.5, 3 -> 1.0, 2 -> 0.5, 1 -> 0.25
- Favorites weigh 2 each
- Themes come from a genre -> themes map, counting only 4-5 star reviews
  (weight 1) and favorites (weight 2)
- Publication eras: classic (<= 1950), modern (1951-2000),
  contemporary (2001-2100)
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any

from bookreview.database import Record
from bookreview.services.ratings import is_valid_rating

REVIEW_WEIGHTS = {5: 2.0, 4: 1.5, 3: 1.0, 2: 0.5, 1: 0.25}
FAVORITE_WEIGHT = 2

GENRE_THEMES = {
    "Fantasy": ["magic", "adventure", "mythical creatures"],
    "Science Fiction": ["technology", "space", "future", "dystopian"],
    "Mystery": ["crime", "detective", "suspense"],
    "Romance": ["love", "relationships", "emotional"],
    "Thriller": ["suspense", "tension", "psychological"],
    "Horror": ["fear", "supernatural", "suspense"],
    "Historical Fiction": ["history", "period", "cultural"],
    "Biography": ["life story", "personal journey"],
    "Self-help": ["personal development", "motivation"],
    "Business": ["entrepreneurship", "leadership", "strategy"],
}

ERAS = {
    "classic": (0, 1950),
    "modern": (1951, 2000),
    "contemporary": (2001, 2100),
}


@dataclass
class UserPreferences:
    genres: list[dict[str, Any]] = field(default_factory=list)
    authors: list[dict[str, Any]] = field(default_factory=list)
    rating_pattern: dict[str, Any] = field(default_factory=dict)
    favorite_themes: list[dict[str, Any]] = field(default_factory=list)
    publication_era: dict[str, Any] = field(default_factory=dict)

    def genre_score(self, genre: str) -> float:
        return next((g["score"] for g in self.genres if g["genre"] == genre), 0.0)

    def author_score(self, author: str) -> float:
        return next((a["score"] for a in self.authors if a["author"] == author), 0.0)


def review_weight(review: Record) -> float:
    return REVIEW_WEIGHTS.get(review.get("rating"), 0)


def _ranked(scores: dict[str, float], label: str) -> list[dict[str, Any]]:
    return sorted(
        ({label: name, "score": score} for name, score in scores.items()),
        key=lambda entry: entry["score"],
        reverse=True,
    )


def _reviewed_books(reviews: list[Record], books_by_id: dict[str, Record]):
    for review in reviews:
        book = books_by_id.get(review.get("bookId"))
        if book is not None:
            yield review, book


def extract_genre_preferences(
    reviews: list[Record],
    favorite_books: list[Record],
    books_by_id: dict[str, Record],
) -> list[dict[str, Any]]:
    scores: dict[str, float] = defaultdict(float)
    for review, book in _reviewed_books(reviews, books_by_id):
        for genre in book.get("genres", []):
            scores[genre] += review_weight(review)
    for book in favorite_books:
        for genre in book.get("genres", []):
            scores[genre] += FAVORITE_WEIGHT
    return _ranked(scores, "genre")


def extract_author_preferences(
    reviews: list[Record],
    favorite_books: list[Record],
    books_by_id: dict[str, Record],
) -> list[dict[str, Any]]:
    scores: dict[str, float] = defaultdict(float)
    for review, book in _reviewed_books(reviews, books_by_id):
        if book.get("author"):
            scores[book["author"]] += review_weight(review)
    for book in favorite_books:
        if book.get("author"):
            scores[book["author"]] += FAVORITE_WEIGHT
    return _ranked(scores, "author")


def analyze_rating_pattern(reviews: list[Record]) -> dict[str, Any]:
    """Average rating, per-star counts and bias (positive > 4, negative < 3)."""
    ratings = [review.get("rating") for review in reviews]
    ratings = [rating for rating in ratings if is_valid_rating(rating)]
    if not ratings:
        return {"averageRating": 0, "ratingDistribution": {}, "ratingBias": "neutral"}

    average = sum(ratings) / len(ratings)
    distribution = {
        star: sum(1 for rating in ratings if rating == star)
        for star in range(1, 6)
    }

    bias = "neutral"
    if average > 4:
        bias = "positive"
    elif average < 3:
        bias = "negative"

    return {
        "averageRating": average,
        "ratingDistribution": distribution,
        "ratingBias": bias,
    }


def extract_theme_preferences(
    reviews: list[Record],
    favorite_books: list[Record],
    books_by_id: dict[str, Record],
) -> list[dict[str, Any]]:
    scores: dict[str, float] = defaultdict(float)
    high_rated = [review for review in reviews if review.get("rating", 0) >= 4]
    for _, book in _reviewed_books(high_rated, books_by_id):
        for genre in book.get("genres", []):
            for theme in GENRE_THEMES.get(genre, []):
                scores[theme] += 1
    for book in favorite_books:
        for genre in book.get("genres", []):
            for theme in GENRE_THEMES.get(genre, []):
                scores[theme] += FAVORITE_WEIGHT
    return _ranked(scores, "theme")


def analyze_publication_era(
    reviews: list[Record],
    favorite_books: list[Record],
    books_by_id: dict[str, Record],
) -> dict[str, Any]:
    counts = {era: 0 for era in ERAS}

    def add(year: Any, weight: int) -> None:
        if not isinstance(year, int):
            return
        for era, (start, end) in ERAS.items():
            if start <= year <= end:
                counts[era] += weight
                break

    for _, book in _reviewed_books(reviews, books_by_id):
        add(book.get("publishedYear"), 1)
    for book in favorite_books:
        add(book.get("publishedYear"), FAVORITE_WEIGHT)

    preferred = "contemporary"
    best = 0
    for era, count in counts.items():
        if count > best:
            best = count
            preferred = era

    return {"eras": counts, "preferredEra": preferred}


def get_user_preferences(
    user: Record,
    books: list[Record],
    reviews: list[Record],
) -> UserPreferences:
    """
    Build the preference profile of `user`.

    Args:
        user: User record (favorites are read from it)
        books: Every book in the collection
        reviews: Every review written by this user
    """
    books_by_id = {book["id"]: book for book in books}
    favorite_books = [
        books_by_id[book_id]
        for book_id in user.get("favorites", [])
        if book_id in books_by_id
    ]

    return UserPreferences(
        genres=extract_genre_preferences(reviews, favorite_books, books_by_id),
        authors=extract_author_preferences(reviews, favorite_books, books_by_id),
        rating_pattern=analyze_rating_pattern(reviews),
        favorite_themes=extract_theme_preferences(reviews, favorite_books, books_by_id),
        publication_era=analyze_publication_era(reviews, favorite_books, books_by_id),
    )
