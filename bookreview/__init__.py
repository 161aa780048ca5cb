"""
Book Review API Package

Backend for a book review platform: books, reviews, users, favorites and
recommendations, persisted in flat JSON files.

Package Structure:
- config.py: Application configuration using Pydantic Settings
- database.py: JSON file store (one file per collection)
- main.py: FastAPI application factory and configuration
- dependencies.py: Dependency injection functions
- models/: Collection models (read/write records of one entity type)
- schemas/: Pydantic request/response schemas
- routers/: API route handlers
- services/: Business logic (ratings, pagination, search, recommendations)
"""

__version__ = "0.1.0"
