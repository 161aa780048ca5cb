"""
Tests for Books Endpoints

Tests:
- GET /api/books (pagination, sorting, minRating, links)
- GET /api/books/search
- GET /api/books/{book_id}
- GET /api/books/{book_id}/ratings
- POST /api/books/{book_id}/ratings/recalculate (admin)
"""

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from bookreview.models import BookModel, ReviewModel
from bookreview.services.ratings import recalculate_all_book_ratings
from tests.conftest import get_auth_header, make_book


# =============================================================================
# Helper Functions
# =============================================================================


def add_reviews(review_model: ReviewModel, book: dict, *ratings: int) -> None:
    for index, rating in enumerate(ratings):
        review_model.create(
            {"bookId": book["id"], "userId": f"user-{index}", "text": "Review", "rating": rating}
        )


# =============================================================================
# List Books
# =============================================================================


class TestListBooks:
    """Tests for GET /api/books"""

    def test_list_books_empty(self, client: TestClient):
        response = client.get("/api/books")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["books"] == []
        assert data["totalBooks"] == 0
        assert data["totalPages"] == 0
        assert data["links"]["prev"] is None
        assert data["links"]["next"] is None

    def test_default_pagination(self, client: TestClient, many_books):
        response = client.get("/api/books")

        data = response.json()
        assert len(data["books"]) == 10
        assert data["totalBooks"] == 25
        assert data["totalPages"] == 3
        assert data["page"] == 1
        assert data["limit"] == 10
        assert data["sortBy"] == "title"
        assert data["sortOrder"] == "asc"
        assert data["books"][0]["title"] == "Book 01"

    def test_third_page(self, client: TestClient, many_books):
        response = client.get("/api/books?page=3&limit=10")

        data = response.json()
        assert [b["title"] for b in data["books"]] == [f"Book {i}" for i in range(21, 26)]
        assert data["links"]["next"] is None
        assert data["links"]["prev"] == "/api/books?page=2&limit=10&sortBy=title&sortOrder=asc"

    def test_page_past_the_end(self, client: TestClient, many_books):
        response = client.get("/api/books?page=4")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["books"] == []
        assert data["totalBooks"] == 25

    def test_links(self, client: TestClient, many_books):
        data = client.get("/api/books?page=2&limit=5&sortBy=publishedYear&sortOrder=desc").json()

        links = data["links"]
        assert links["self"] == "/api/books?page=2&limit=5&sortBy=publishedYear&sortOrder=desc"
        assert links["first"] == "/api/books?page=1&limit=5&sortBy=publishedYear&sortOrder=desc"
        assert links["last"] == "/api/books?page=5&limit=5&sortBy=publishedYear&sortOrder=desc"
        assert links["next"].startswith("/api/books?page=3&")
        assert data["books"][0]["publishedYear"] == 2010

    def test_invalid_sort_falls_back(self, client: TestClient, many_books):
        data = client.get("/api/books?sortBy=bogus&sortOrder=sideways").json()

        assert data["sortBy"] == "title"
        assert data["sortOrder"] == "asc"
        assert data["books"][0]["title"] == "Book 01"

    def test_sort_by_rating_descending(
        self, client: TestClient, book_model: BookModel, review_model: ReviewModel
    ):
        for rating in (3, 5, 1, 4, 2):
            book = book_model.create(make_book(f"Rated {rating}"))
            add_reviews(review_model, book, rating)
        recalculate_all_book_ratings(book_model, review_model)

        data = client.get("/api/books?sortBy=averageRating&sortOrder=desc").json()

        assert [b["averageRating"] for b in data["books"]] == [5, 4, 3, 2, 1]

    def test_min_rating_filters_before_pagination(
        self, client: TestClient, book_model: BookModel, review_model: ReviewModel
    ):
        for i in range(12):
            book = book_model.create(make_book(f"Good {i:02d}"))
            add_reviews(review_model, book, 5)
        book_model.create(make_book("Unrated"))
        recalculate_all_book_ratings(book_model, review_model)

        data = client.get("/api/books?minRating=4&limit=10").json()

        assert data["totalBooks"] == 12
        assert data["totalPages"] == 2
        assert len(data["books"]) == 10
        assert data["filters"] == {"minRating": 4}
        assert "minRating=4" in data["links"]["self"]

    def test_filters_default_to_any(self, client: TestClient):
        assert client.get("/api/books").json()["filters"] == {"minRating": "any"}

    @pytest.mark.parametrize("query", ["page=abc", "limit=abc", "page=&limit="])
    def test_non_numeric_values_use_defaults(self, client: TestClient, many_books, query):
        response = client.get(f"/api/books?{query}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["page"] == 1
        assert response.json()["limit"] == 10

    @pytest.mark.parametrize(
        "query,page,limit",
        [("page=2.7", 2, 10), ("limit=5abc", 1, 5), ("page=3x&limit=1.9", 3, 1)],
    )
    def test_leading_integer_is_used(self, client: TestClient, many_books, query, page, limit):
        response = client.get(f"/api/books?{query}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["page"] == page
        assert response.json()["limit"] == limit

    @pytest.mark.parametrize("query", ["page=0", "page=-1", "limit=0", "limit=101"])
    def test_out_of_range_values_rejected(self, client: TestClient, query):
        response = client.get(f"/api/books?{query}")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "message" in response.json()

    def test_limit_of_100_allowed(self, client: TestClient, many_books):
        response = client.get("/api/books?limit=100")

        assert response.status_code == status.HTTP_200_OK
        assert len(response.json()["books"]) == 25


# =============================================================================
# Search
# =============================================================================


class TestSearchBooks:
    """Tests for GET /api/books/search"""

    def test_search_by_title(self, client: TestClient, sample_book, second_book):
        response = client.get("/api/books/search?q=harry")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["count"] == 1
        assert data["books"][0]["title"] == "Harry Potter and the Philosopher's Stone"
        assert data["query"] == "harry"
        assert data["filters"]["genre"] == "all"
        assert data["filters"]["hasReviews"] == "any"

    def test_search_by_author(self, client: TestClient, sample_book, second_book):
        data = client.get("/api/books/search?q=TOLKIEN").json()

        assert [b["title"] for b in data["books"]] == ["The Hobbit"]

    def test_search_with_filters(self, client: TestClient, sample_book, second_book):
        data = client.get("/api/books/search?q=the&genre=Fantasy&yearFrom=1990").json()

        assert [b["id"] for b in data["books"]] == [sample_book["id"]]
        assert data["filters"]["yearFrom"] == 1990

    def test_has_reviews_filter(
        self, client: TestClient, sample_review, sample_book, second_book
    ):
        reviewed = client.get("/api/books/search?q=the&hasReviews=true").json()
        unreviewed = client.get("/api/books/search?q=the&hasReviews=false").json()

        assert [b["id"] for b in reviewed["books"]] == [sample_book["id"]]
        assert [b["id"] for b in unreviewed["books"]] == [second_book["id"]]

    @pytest.mark.parametrize("query", ["", "?q=", "?q=%20%20"])
    def test_query_required(self, client: TestClient, query):
        response = client.get(f"/api/books/search{query}")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json() == {"message": "Search query is required"}


# =============================================================================
# Single Book
# =============================================================================


class TestGetBook:
    """Tests for GET /api/books/{book_id}"""

    def test_get_book(self, client: TestClient, sample_book):
        response = client.get(f"/api/books/{sample_book['id']}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["book"]["title"] == sample_book["title"]
        assert data["book"]["genres"] == ["Fantasy", "Young Adult"]
        assert "reviews" not in data

    def test_get_book_with_reviews(self, client: TestClient, sample_review, sample_book):
        response = client.get(f"/api/books/{sample_book['id']}?includeReviews=true")

        data = response.json()
        assert data["message"] == "Successfully retrieved book with reviews"
        assert [r["id"] for r in data["reviews"]] == [sample_review["id"]]
        assert data["book"]["averageRating"] == 4.0
        assert data["book"]["reviewCount"] == 1

    def test_get_book_not_found(self, client: TestClient):
        response = client.get("/api/books/does-not-exist")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json() == {"message": "Book not found"}


class TestBookRatings:
    """Tests for GET /api/books/{book_id}/ratings"""

    def test_rating_stats(
        self, client: TestClient, book_model: BookModel, review_model: ReviewModel
    ):
        book = book_model.create(make_book("Dune"))
        add_reviews(review_model, book, 4, 4, 5)
        recalculate_all_book_ratings(book_model, review_model)

        response = client.get(f"/api/books/{book['id']}/ratings")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["bookId"] == book["id"]
        assert data["title"] == "Dune"
        assert data["averageRating"] == 4.3
        assert data["reviewCount"] == 3
        assert data["distribution"] == {"1": 0, "2": 0, "3": 0, "4": 2, "5": 1}
        assert data["positivePercentage"] == 100

    def test_rating_stats_not_found(self, client: TestClient):
        response = client.get("/api/books/missing/ratings")

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestRecalculateRating:
    """Tests for POST /api/books/{book_id}/ratings/recalculate"""

    def test_admin_recalculates(
        self,
        client: TestClient,
        book_model: BookModel,
        review_model: ReviewModel,
        admin_user,
    ):
        book = book_model.create(make_book("Dune"))
        add_reviews(review_model, book, 2, 3)

        response = client.post(
            f"/api/books/{book['id']}/ratings/recalculate",
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["message"] == "Book rating recalculated successfully"
        assert data["averageRating"] == 2.5
        assert data["reviewCount"] == 2
        assert book_model.find_by_id(book["id"])["averageRating"] == 2.5

    def test_non_admin_forbidden(self, client: TestClient, sample_book, sample_user):
        response = client.post(
            f"/api/books/{sample_book['id']}/ratings/recalculate",
            headers=get_auth_header(sample_user),
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_requires_auth(self, client: TestClient, sample_book):
        response = client.post(f"/api/books/{sample_book['id']}/ratings/recalculate")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_missing_book(self, client: TestClient, admin_user):
        response = client.post(
            "/api/books/missing/ratings/recalculate",
            headers=get_auth_header(admin_user),
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND
