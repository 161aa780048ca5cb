"""
Collection Models Package

Each model wraps one JSON collection of the data store.

Models:
- BookModel: books with denormalized rating fields
- ReviewModel: reviews with timestamps and the one-review-per-book check
- UserModel: users with hashed passwords and favorites
"""

from bookreview.models.base import CollectionModel
from bookreview.models.book import BookModel
from bookreview.models.review import ReviewModel
from bookreview.models.user import UserModel

__all__ = ["CollectionModel", "BookModel", "ReviewModel", "UserModel"]
