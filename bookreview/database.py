"""
Data Store Module

Flat-file persistence for the Book Review API.

Each collection (users, books, reviews) lives in its own JSON file holding
an array of records:

    data/
      users.json
      books.json
      reviews.json

Read/Write Semantics
====================
- read_all() loads the whole file on every call (no in-process caching)
- write_all() replaces the whole file
- a missing file reads as an empty collection and is created as []

There is no locking. Two requests mutating the same collection at the same
time can interleave between read and write, and the later write wins
(lost update). Callers must not assume transactions or partial writes.

Store Lifetime
==============
One JsonFileStore is constructed at process start (see main.lifespan) and
handed to request handlers through the get_store dependency.
"""

import json
import logging
from pathlib import Path
from typing import Any

from fastapi import Request

logger = logging.getLogger(__name__)

USERS = "users"
BOOKS = "books"
REVIEWS = "reviews"

COLLECTIONS = (USERS, BOOKS, REVIEWS)

Record = dict[str, Any]


class JsonFileStore:
    """
    Read-whole-file / write-whole-file store for JSON collections.

    Usage:
        store = JsonFileStore(Path("data"))
        store.initialize()

        books = store.read_all("books")
        books.append({"id": "...", "title": "Dune"})
        store.write_all("books", books)
    """

    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir)

    def path_for(self, collection: str) -> Path:
        """Return the backing file path of a collection."""
        return self.data_dir / f"{collection}.json"

    def initialize(self) -> None:
        """
        Create the data directory and an empty file for every collection
        that does not exist yet. Existing files are left untouched.
        """
        self.data_dir.mkdir(parents=True, exist_ok=True)
        for collection in COLLECTIONS:
            path = self.path_for(collection)
            if not path.exists():
                path.write_text("[]", encoding="utf-8")
                logger.info(f"Created empty collection file {path}")

    def read_all(self, collection: str) -> list[Record]:
        """
        Load every record of a collection.

        Raises:
            OSError: For I/O errors other than a missing file
            json.JSONDecodeError: If the file is not valid JSON
        """
        path = self.path_for(collection)
        try:
            with path.open(encoding="utf-8") as f:
                return json.load(f)
        except FileNotFoundError:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            path.write_text("[]", encoding="utf-8")
            return []

    def write_all(self, collection: str, records: list[Record]) -> None:
        """
        Replace the contents of a collection with the given records.

        The records are serialized first and written to a sibling temp file
        that then replaces the collection file, so a failed write leaves the
        previous contents intact.
        """
        path = self.path_for(collection)
        text = json.dumps(records, indent=2, ensure_ascii=False)
        tmp_path = path.with_suffix(".json.tmp")
        tmp_path.write_text(text, encoding="utf-8")
        tmp_path.replace(path)


# =============================================================================
# Dependency Injection
# =============================================================================
def get_store(request: Request) -> JsonFileStore:
    """
    Store dependency for FastAPI.

    Returns the store created by the application lifespan. Tests either
    pass their own store to create_app() or override this dependency.
    """
    return request.app.state.store
