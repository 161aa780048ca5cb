"""
Ratings Service

Maintains the denormalized rating fields on book records:
- averageRating: mean of all review ratings, rounded to 1 decimal place
- reviewCount: total number of reviews

Both are recomputed from the full set of a book's reviews after every review
create, update and delete, and for every book once at startup. They are
never incremented or patched in place.

Rounding
========
Averages are rounded the way a "multiply by 10, round, divide by 10" helper
does it on floats: the scaled float is rounded to the nearest integer with
halves going away from zero. Decimal is used only to round the exact value
of the scaled float, so 4.25 -> 42.5 -> 43 -> 4.3.
"""

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from bookreview.database import Record
from bookreview.models.book import BookModel
from bookreview.models.review import ReviewModel

logger = logging.getLogger(__name__)


@dataclass
class RatingSummary:
    """Result of recomputing one book's rating fields."""

    book_id: str
    average_rating: float
    review_count: int


@dataclass
class RecalculationReport:
    """Outcome of recomputing every book; failures never abort the batch."""

    updated: int = 0
    failed: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.failed


def round_half_up(value: float, places: int = 1) -> float:
    """
    Round `value` to `places` decimals, halves away from zero.

    Examples:
        >>> round_half_up(4.25)
        4.3
        >>> round_half_up(13 / 3)
        4.3
        >>> round_half_up(66.5, 0)
        67.0
    """
    factor = 10 ** places
    scaled = Decimal(value * factor).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return float(scaled / factor)


def is_valid_rating(rating: object) -> bool:
    return (
        isinstance(rating, (int, float))
        and not isinstance(rating, bool)
        and 1 <= rating <= 5
    )


def calculate_average_rating(reviews: list[Record]) -> tuple[float, int]:
    """
    Compute (averageRating, reviewCount) for a set of reviews.

    Only numeric ratings from 1 to 5 are averaged, but reviewCount counts
    every review. Returns (0, 0) for an empty set or when no rating is valid.
    """
    review_count = len(reviews)
    ratings = [review.get("rating") for review in reviews]
    ratings = [rating for rating in ratings if is_valid_rating(rating)]
    if not ratings:
        return 0, 0

    return round_half_up(sum(ratings) / len(ratings), 1), review_count


def calculate_rating_distribution(reviews: list[Record]) -> dict[int, int]:
    """
    Count reviews per star rating (1-5).

    Ratings outside 1-5 or non-numeric ratings are ignored; fractional
    ratings are rounded to the nearest star.
    """
    distribution = {1: 0, 2: 0, 3: 0, 4: 0, 5: 0}
    for review in reviews:
        rating = review.get("rating")
        if is_valid_rating(rating):
            distribution[int(round_half_up(rating, 0))] += 1
    return distribution


def positive_rating_percentage(distribution: dict[int, int]) -> int:
    """Percentage (0-100) of ratings that are 4 or 5 stars."""
    total = sum(distribution.values())
    if total == 0:
        return 0
    positive = distribution.get(4, 0) + distribution.get(5, 0)
    return int(round_half_up(positive / total * 100, 0))


def recalculate_book_rating(
    books: BookModel,
    reviews: ReviewModel,
    book_id: str,
) -> RatingSummary | None:
    """
    Recalculate and persist a book's rating aggregations.

    Called after any review create/update/delete. On delete the caller must
    capture the book id before removing the review.

    Args:
        books: Book collection model
        reviews: Review collection model
        book_id: ID of the book to update

    Returns:
        The new summary, or None if the book does not exist
    """
    book = books.find_by_id(book_id)
    if book is None:
        return None

    average_rating, review_count = calculate_average_rating(
        reviews.find_by_book_id(book_id)
    )

    books.update(
        book_id,
        {"averageRating": average_rating, "reviewCount": review_count},
    )

    return RatingSummary(
        book_id=book_id,
        average_rating=average_rating,
        review_count=review_count,
    )


def recalculate_all_book_ratings(
    books: BookModel,
    reviews: ReviewModel,
) -> RecalculationReport:
    """
    Recalculate rating aggregations for every book, one at a time.

    Run once at startup. A failure on one book is logged and skipped; this
    function does not raise.

    Returns:
        Report with the number of updated books and the ids that failed
    """
    report = RecalculationReport()

    try:
        book_ids = [book["id"] for book in books.find_all()]
    except Exception as e:
        logger.error(f"Could not load books for rating recalculation: {e}")
        report.failed.append("*")
        return report

    for book_id in book_ids:
        try:
            if recalculate_book_rating(books, reviews, book_id) is None:
                report.failed.append(book_id)
            else:
                report.updated += 1
        except Exception as e:
            logger.error(f"Failed to recalculate rating for book {book_id}: {e}")
            report.failed.append(book_id)

    return report
