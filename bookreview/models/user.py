"""
User Model

Passwords are stored as bcrypt hashes (see services.security) and are never
changed through profile updates.

favorites is a list of book ids; uniqueness is enforced here by
add_favorite(), not by the file format.
"""

from typing import Any

from bookreview.database import USERS, Record
from bookreview.models.base import CollectionModel
from bookreview.services.security import hash_password, verify_password


class UserModel(CollectionModel):
    collection = USERS

    def create(self, data: dict[str, Any]) -> Record:
        """Create a user, hashing the plain text password first."""
        return super().create(
            {
                "favorites": [],
                **data,
                "password": hash_password(data["password"]),
            }
        )

    def find_by_email(self, email: str) -> Record | None:
        for user in self.find_all():
            if user.get("email") == email:
                return user
        return None

    def verify_password(self, user: Record, password: str) -> bool:
        hashed = user.get("password")
        if not hashed:
            return False
        return verify_password(password, hashed)

    def update_profile(self, user_id: str, data: dict[str, Any]) -> Record | None:
        """Update profile fields; a `password` key in `data` is ignored."""
        update_data = {key: value for key, value in data.items() if key != "password"}
        return self.update(user_id, update_data)

    def update_password(self, user_id: str, new_password: str) -> Record | None:
        return self.update(user_id, {"password": hash_password(new_password)})

    def add_favorite(self, user_id: str, book_id: str) -> Record | None:
        user = self.find_by_id(user_id)
        if user is None:
            return None
        favorites = list(user.get("favorites", []))
        if book_id not in favorites:
            favorites.append(book_id)
        return self.update(user_id, {"favorites": favorites})

    def remove_favorite(self, user_id: str, book_id: str) -> Record | None:
        user = self.find_by_id(user_id)
        if user is None:
            return None
        favorites = [fav for fav in user.get("favorites", []) if fav != book_id]
        return self.update(user_id, {"favorites": favorites})
