"""
Tests for book search

- case-insensitive substring match on title or author
- every given filter must match
- results keep collection order
"""

import pytest

from bookreview.services.search import SearchFilters, filter_by_min_rating, search_books

BOOKS = [
    {
        "id": "hp1",
        "title": "Harry Potter and the Philosopher's Stone",
        "author": "J.K. Rowling",
        "genres": ["Fantasy", "Young Adult"],
        "publishedYear": 1997,
        "averageRating": 4.5,
        "reviewCount": 12,
    },
    {
        "id": "hobbit",
        "title": "The Hobbit",
        "author": "J.R.R. Tolkien",
        "genres": ["Fantasy"],
        "publishedYear": 1937,
        "averageRating": 4.2,
        "reviewCount": 3,
    },
    {
        "id": "hp2",
        "title": "Harry Potter and the Chamber of Secrets",
        "author": "J.K. Rowling",
        "genres": ["Fantasy", "Young Adult"],
        "publishedYear": 1998,
        "averageRating": 0,
        "reviewCount": 0,
    },
    {
        "id": "dune",
        "title": "Dune",
        "author": "Frank Herbert",
        "genres": ["Science Fiction"],
        "publishedYear": 1965,
        "averageRating": 3.9,
        "reviewCount": 7,
    },
]


def ids(books):
    return [book["id"] for book in books]


class TestQuery:
    def test_title_match_is_case_insensitive(self):
        assert ids(search_books(BOOKS, "harry")) == ["hp1", "hp2"]
        assert ids(search_books(BOOKS, "HARRY")) == ["hp1", "hp2"]

    def test_author_match(self):
        assert ids(search_books(BOOKS, "tolkien")) == ["hobbit"]

    def test_substring_anywhere(self):
        assert ids(search_books(BOOKS, "chamber")) == ["hp2"]

    def test_no_match(self):
        assert search_books(BOOKS, "zzz") == []


class TestFilters:
    @pytest.mark.parametrize(
        "filters, expected",
        [
            (SearchFilters(genre="Young Adult"), ["hp1", "hp2"]),
            (SearchFilters(genre="Science Fiction"), []),
            (SearchFilters(year_from=1998), ["hp2"]),
            (SearchFilters(year_to=1997), ["hp1"]),
            (SearchFilters(min_rating=4.5), ["hp1"]),
            (SearchFilters(max_rating=4), ["hp2"]),
            (SearchFilters(has_reviews=True), ["hp1"]),
            (SearchFilters(has_reviews=False), ["hp2"]),
        ],
    )
    def test_single_filter(self, filters, expected):
        assert ids(search_books(BOOKS, "harry", filters)) == expected

    def test_filters_combine(self):
        filters = SearchFilters(genre="Fantasy", year_from=1930, max_rating=4.4)

        assert ids(search_books(BOOKS, "t", filters)) == ["hobbit", "hp2"]

    def test_has_filters(self):
        assert SearchFilters().has_filters is False
        assert SearchFilters(has_reviews=False).has_filters is True


class TestMinRating:
    def test_keeps_books_at_or_above(self):
        assert ids(filter_by_min_rating(BOOKS, 4.2)) == ["hp1", "hobbit"]

    def test_none_keeps_everything(self):
        result = filter_by_min_rating(BOOKS, None)

        assert ids(result) == ids(BOOKS)
        assert result is not BOOKS
