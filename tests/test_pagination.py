"""
Tests for sorting and pagination

Covers:
- page slicing and totals (including empty and past-the-end pages)
- allow-listed sort fields with fallback to the default
- sort order parsing and stability
- the input list is never reordered
"""

from bookreview.services.pagination import (
    BOOK_SORTING,
    REVIEW_SORTING,
    paginate,
    sort_records,
    total_pages_for,
)


def books_titled(*titles):
    return [{"id": str(i), "title": title} for i, title in enumerate(titles)]


def numbered_books(count):
    return [
        {"id": str(i), "title": f"Book {i:02d}", "averageRating": 0}
        for i in range(1, count + 1)
    ]


class TestPaginate:
    def test_first_page(self):
        page = paginate(numbered_books(25), page=1, limit=10)

        assert len(page.items) == 10
        assert page.total_items == 25
        assert page.total_pages == 3
        assert page.items[0]["title"] == "Book 01"

    def test_last_partial_page(self):
        page = paginate(numbered_books(25), page=3, limit=10)

        assert [b["title"] for b in page.items] == [
            "Book 21", "Book 22", "Book 23", "Book 24", "Book 25",
        ]

    def test_page_past_the_end_is_empty(self):
        page = paginate(numbered_books(25), page=4, limit=10)

        assert page.items == []
        assert page.total_items == 25
        assert page.total_pages == 3

    def test_empty_collection(self):
        page = paginate([], page=1, limit=10)

        assert page.items == []
        assert page.total_items == 0
        assert page.total_pages == 0

    def test_echoes_resolved_sort(self):
        page = paginate(numbered_books(3), page=1, limit=10, sort_by="bogus", sort_order="sideways")

        assert page.sort_by == "title"
        assert page.sort_order == "asc"

    def test_total_pages(self):
        assert total_pages_for(0, 10) == 0
        assert total_pages_for(10, 10) == 1
        assert total_pages_for(11, 10) == 2


class TestSortRecords:
    def test_unknown_field_falls_back_to_title_ascending(self):
        books = books_titled("Cathedral", "anathem", "Beloved")

        result = sort_records(books, "bogus", None)

        assert [b["title"] for b in result] == ["anathem", "Beloved", "Cathedral"]

    def test_descending_numeric(self):
        books = [{"id": str(r), "averageRating": r} for r in (3, 5, 1, 4, 2)]

        result = sort_records(books, "averageRating", "desc")

        assert [b["averageRating"] for b in result] == [5, 4, 3, 2, 1]

    def test_order_is_case_insensitive(self):
        books = [{"id": str(r), "reviewCount": r} for r in (1, 3, 2)]

        assert [b["reviewCount"] for b in sort_records(books, "reviewCount", "DESC")] == [3, 2, 1]
        assert [b["reviewCount"] for b in sort_records(books, "reviewCount", "nope")] == [1, 2, 3]

    def test_accented_titles_collate_with_their_base_letter(self):
        books = books_titled("Zola", "Émile", "apple", "éclair", "Eve")

        result = sort_records(books, "title", "asc")

        assert [b["title"] for b in result] == ["apple", "éclair", "Émile", "Eve", "Zola"]

    def test_accented_authors_sort_descending(self):
        books = [{"id": str(i), "author": a} for i, a in enumerate(["Ödön", "Nabokov", "Zweig"])]

        result = sort_records(books, "author", "desc")

        assert [b["author"] for b in result] == ["Zweig", "Ödön", "Nabokov"]

    def test_published_year_numeric_not_lexical(self):
        books = [{"id": str(y), "publishedYear": y} for y in (1997, -800, 200)]

        result = sort_records(books, "publishedYear", "asc")

        assert [b["publishedYear"] for b in result] == [-800, 200, 1997]

    def test_stable_for_equal_keys(self):
        books = [
            {"id": "a", "averageRating": 4},
            {"id": "b", "averageRating": 5},
            {"id": "c", "averageRating": 4},
        ]

        ascending = sort_records(books, "averageRating", "asc")
        descending = sort_records(books, "averageRating", "desc")

        assert [b["id"] for b in ascending] == ["a", "c", "b"]
        assert [b["id"] for b in descending] == ["b", "a", "c"]

    def test_does_not_mutate_input(self):
        books = books_titled("Cathedral", "anathem", "Beloved")
        original = list(books)

        sort_records(books, "title", "desc")
        paginate(books, page=1, limit=2, sort_by="title")

        assert books == original


class TestReviewSorting:
    def test_newest_first_by_default(self):
        reviews = [
            {"id": "old", "timestamp": "2023-01-01T00:00:00.000Z", "rating": 5},
            {"id": "new", "timestamp": "2024-06-01T12:00:00.000Z", "rating": 1},
            {"id": "mid", "timestamp": "2023-09-15T08:30:00.000Z", "rating": 3},
        ]

        page = paginate(reviews, page=1, limit=10, sorting=REVIEW_SORTING)

        assert [r["id"] for r in page.items] == ["new", "mid", "old"]
        assert page.sort_by == "timestamp"
        assert page.sort_order == "desc"

    def test_sort_by_rating(self):
        reviews = [{"id": str(r), "rating": r} for r in (2, 5, 3)]

        result = sort_records(reviews, "rating", "asc", REVIEW_SORTING)

        assert [r["rating"] for r in result] == [2, 3, 5]

    def test_book_fields_are_not_allowed_for_reviews(self):
        assert REVIEW_SORTING.resolve("title", None) == ("timestamp", "desc")
        assert BOOK_SORTING.resolve("timestamp", None) == ("title", "asc")
