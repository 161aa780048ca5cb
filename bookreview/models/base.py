"""
Base Collection Model

Generic CRUD over one JSON collection. Every operation reads the entire
collection fresh from the store; mutations write the entire collection back.
"""

import uuid
from collections.abc import Callable
from typing import Any

from bookreview.database import JsonFileStore, Record


class CollectionModel:
    """
    CRUD operations shared by every entity model.

    Subclasses set `collection` to the name of their backing file.

    Lookups return None (or False for delete) when the id is absent;
    they never raise for a missing record.
    """

    collection: str = ""

    def __init__(self, store: JsonFileStore) -> None:
        self.store = store

    def find_all(self) -> list[Record]:
        return self.store.read_all(self.collection)

    def find_by_id(self, record_id: str) -> Record | None:
        for item in self.find_all():
            if item.get("id") == record_id:
                return item
        return None

    def find_by(self, predicate: Callable[[Record], bool]) -> list[Record]:
        return [item for item in self.find_all() if predicate(item)]

    def create(self, data: dict[str, Any]) -> Record:
        """Append a new record with a generated UUID and rewrite the file."""
        items = self.find_all()
        new_item = {"id": str(uuid.uuid4()), **data}
        items.append(new_item)
        self.store.write_all(self.collection, items)
        return new_item

    def update(self, record_id: str, data: dict[str, Any]) -> Record | None:
        """Shallow-merge `data` onto the record; None if it doesn't exist."""
        items = self.find_all()
        for index, item in enumerate(items):
            if item.get("id") == record_id:
                updated = {**item, **data}
                items[index] = updated
                self.store.write_all(self.collection, items)
                return updated
        return None

    def delete(self, record_id: str) -> bool:
        """Remove the record; False if nothing was deleted."""
        items = self.find_all()
        remaining = [item for item in items if item.get("id") != record_id]
        if len(remaining) == len(items):
            return False
        self.store.write_all(self.collection, remaining)
        return True
