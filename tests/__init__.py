"""
Test Suite for the Book Review API

Test Organization:
- conftest.py: Shared fixtures (per-test data directory, client, sample data)
- test_database.py / test_models.py: JSON store and collection models
- test_ratings.py, test_pagination.py, test_search.py: core services
- test_preferences.py, test_recommendations.py: recommendation engine
- test_auth.py, test_books.py, test_reviews.py, test_users.py: API endpoints

Running Tests:
    # Run all tests
    pytest

    # Run specific file
    pytest tests/test_books.py

    # Run with verbose output
    pytest -v
"""
