#!/usr/bin/env python3
"""
Data Seed Script

Populates the JSON data files with sample data for development.

USAGE:
    # From the project root with the package installed
    python scripts/seed_data.py

    # Keep existing records and only add samples that are missing
    python scripts/seed_data.py --keep

This script:
1. Creates the data directory configured in settings (DATA_DIR)
2. Clears existing users, books and reviews (unless --keep)
3. Creates sample users, books and reviews
4. Recomputes every book's averageRating and reviewCount
"""

import argparse
import sys
from pathlib import Path

# Add project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from bookreview.config import get_settings
from bookreview.database import BOOKS, COLLECTIONS, REVIEWS, JsonFileStore, Record
from bookreview.models import BookModel, ReviewModel, UserModel
from bookreview.services.ratings import recalculate_all_book_ratings

SAMPLE_PASSWORD = "Password123"


def clear_data(store: JsonFileStore) -> None:
    """Empty every collection."""
    print("Clearing existing data...")
    for collection in COLLECTIONS:
        store.write_all(collection, [])
    print("Data cleared.")


def create_users(users: UserModel) -> dict[str, Record]:
    """
    Create sample users, all with the same development password.

    A user whose email already exists is reused, so emails stay unique when
    seeding with --keep.
    """
    print("Creating users...")
    users_data = [
        {"key": "alice", "name": "Alice Reader", "email": "alice@example.com", "isAdmin": True},
        {"key": "bob", "name": "Bob Bookworm", "email": "bob@example.com"},
        {"key": "carol", "name": "Carol Critic", "email": "carol@example.com"},
    ]

    created = {}
    for data in users_data:
        key = data.pop("key")
        existing = users.find_by_email(data["email"])
        if existing is not None:
            created[key] = existing
            print(f"  Kept existing user: {data['email']}")
            continue
        created[key] = users.create({**data, "password": SAMPLE_PASSWORD})
        print(f"  Created user: {data['email']}")

    return created


def create_books(books: BookModel) -> dict[str, Record]:
    """
    Create sample books. Rating fields start at zero and are derived later.

    A book with the same title and author is reused instead of duplicated.
    """
    print("Creating books...")
    books_data = [
        {
            "key": "mockingbird",
            "title": "To Kill a Mockingbird",
            "author": "Harper Lee",
            "description": "Scout Finch, her brother Jem, and their father Atticus, "
                           "a lawyer defending a Black man in a racist Southern town.",
            "genres": ["Fiction", "Classic", "Coming-of-Age"],
            "publishedYear": 1960,
        },
        {
            "key": "1984",
            "title": "1984",
            "author": "George Orwell",
            "description": "A totalitarian regime controls information and surveils its "
                           "citizens while Winston Smith rebels against the system.",
            "genres": ["Fiction", "Dystopian", "Classic", "Science Fiction"],
            "publishedYear": 1949,
        },
        {
            "key": "pride",
            "title": "Pride and Prejudice",
            "author": "Jane Austen",
            "description": "Elizabeth Bennet deals with manners, upbringing, morality, "
                           "education and marriage.",
            "genres": ["Fiction", "Romance", "Classic"],
            "publishedYear": 1813,
        },
        {
            "key": "hobbit",
            "title": "The Hobbit",
            "author": "J.R.R. Tolkien",
            "description": "Bilbo Baggins is swept into a quest to reclaim a dwarf "
                           "kingdom from the dragon Smaug.",
            "genres": ["Fantasy", "Classic", "Adventure"],
            "publishedYear": 1937,
        },
        {
            "key": "harry",
            "title": "Harry Potter and the Philosopher's Stone",
            "author": "J.K. Rowling",
            "description": "An orphaned boy learns on his eleventh birthday that he "
                           "is a wizard.",
            "genres": ["Fantasy", "Young Adult"],
            "publishedYear": 1997,
        },
        {
            "key": "dune",
            "title": "Dune",
            "author": "Frank Herbert",
            "description": "Paul Atreides and his family take control of the desert "
                           "planet Arrakis.",
            "genres": ["Science Fiction", "Adventure"],
            "publishedYear": 1965,
        },
        {
            "key": "gone-girl",
            "title": "Gone Girl",
            "author": "Gillian Flynn",
            "description": "On their fifth anniversary, Nick Dunne's wife Amy disappears.",
            "genres": ["Mystery", "Thriller"],
            "publishedYear": 2012,
        },
        {
            "key": "odyssey",
            "title": "The Odyssey",
            "author": "Homer",
            "description": "Odysseus' ten-year journey home after the fall of Troy.",
            "genres": ["Classic", "Poetry"],
            "publishedYear": -700,
        },
    ]

    existing = {(book.get("title"), book.get("author")): book for book in books.find_all()}

    created = {}
    for data in books_data:
        key = data.pop("key")
        book = existing.get((data["title"], data["author"]))
        if book is not None:
            created[key] = book
            print(f"  Kept existing book: {data['title']}")
            continue
        created[key] = books.create(
            {
                **data,
                "coverImage": f"https://example.com/covers/{key}.jpg",
                "averageRating": 0,
                "reviewCount": 0,
            }
        )
        print(f"  Created book: {data['title']}")

    return created


def create_reviews(
    reviews: ReviewModel,
    users: dict[str, Record],
    books: dict[str, Record],
) -> list[Record]:
    """Create sample reviews, at most one per user per book."""
    print("Creating reviews...")
    reviews_data = [
        ("alice", "mockingbird", 5, "A timeless story about justice and empathy."),
        ("bob", "mockingbird", 4, "Powerful, if slow in places."),
        ("carol", "mockingbird", 5, "Atticus Finch is unforgettable."),
        ("alice", "1984", 4, "Chilling and more relevant every year."),
        ("carol", "1984", 3, "Important, but bleak to the point of exhausting."),
        ("bob", "hobbit", 5, "The perfect adventure."),
        ("carol", "hobbit", 4, "Charming from start to finish."),
        ("alice", "harry", 4, "Pure fun and a great start to the series."),
        ("bob", "harry", 5, "Read it in a single sitting."),
        ("bob", "dune", 4, "Dense world-building that pays off."),
        ("carol", "gone-girl", 2, "Clever twist, unlikeable everyone."),
    ]

    created = []
    for user_key, book_key, rating, text in reviews_data:
        if reviews.user_has_reviewed(users[user_key]["id"], books[book_key]["id"]):
            continue
        created.append(
            reviews.create(
                {
                    "bookId": books[book_key]["id"],
                    "userId": users[user_key]["id"],
                    "text": text,
                    "rating": rating,
                }
            )
        )

    print(f"  Created {len(created)} reviews")
    return created


def seed_data(clear_existing: bool = True, store: JsonFileStore | None = None) -> None:
    """
    Main seeding function.

    Args:
        clear_existing: If True, clears existing data before seeding.
        store: Store to seed; defaults to one at settings.data_dir.
    """
    print("=" * 60)
    print("Starting data seed...")
    print("=" * 60)

    settings = get_settings()
    if store is None:
        store = JsonFileStore(settings.data_dir)
    store.initialize()

    try:
        if clear_existing:
            clear_data(store)

        book_model = BookModel(store)
        review_model = ReviewModel(store)

        users = create_users(UserModel(store))
        books = create_books(book_model)
        reviews = create_reviews(review_model, users, books)

        report = recalculate_all_book_ratings(book_model, review_model)
        if not report.success:
            raise RuntimeError(f"Rating recalculation failed for {report.failed}")

        print("=" * 60)
        print("Data seeding completed successfully!")
        print("=" * 60)
        print("\nSummary:")
        print(f"  - Users: {len(users)} (password: {SAMPLE_PASSWORD})")
        print(f"  - Books: {len(store.read_all(BOOKS))}")
        print(f"  - Reviews: {len(reviews)} new, {len(store.read_all(REVIEWS))} total")
        print(f"  - Data directory: {store.data_dir.resolve()}")
        print(f"\nYou can now access the API at http://localhost:{settings.port}")
        print(f"API documentation at http://localhost:{settings.port}/docs")

    except Exception as e:
        print(f"Error seeding data: {e}")
        raise


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Seed the JSON data files with sample users, books and reviews"
    )
    parser.add_argument(
        "--keep",
        action="store_true",
        help="Keep existing records instead of clearing them first",
    )
    args = parser.parse_args(argv)

    seed_data(clear_existing=not args.keep)


if __name__ == "__main__":
    main()
