"""
Services Package

Business logic that routers compose:
- ratings: averageRating/reviewCount maintenance
- pagination: allow-listed sorting and page slicing
- search: text search with filters
- preferences / recommendations: personalized suggestions
- security, cache, rate_limiter: ambient infrastructure
"""
