"""
Tests for the JSON file store

- initialize() creates the directory and empty collections
- read_all() on a missing file returns [] and creates it
- malformed files and I/O errors propagate
"""

import json

import pytest

from bookreview.database import BOOKS, COLLECTIONS, JsonFileStore


class TestInitialize:
    def test_creates_every_collection(self, tmp_path):
        store = JsonFileStore(tmp_path / "data")
        store.initialize()

        for collection in COLLECTIONS:
            path = store.path_for(collection)
            assert path.exists()
            assert json.loads(path.read_text(encoding="utf-8")) == []

    def test_keeps_existing_files(self, tmp_path):
        store = JsonFileStore(tmp_path)
        store.path_for(BOOKS).write_text('[{"id": "b1"}]', encoding="utf-8")

        store.initialize()

        assert store.read_all(BOOKS) == [{"id": "b1"}]


class TestReadAll:
    def test_missing_file_reads_empty_and_is_created(self, tmp_path):
        store = JsonFileStore(tmp_path / "fresh")

        assert store.read_all(BOOKS) == []
        assert store.path_for(BOOKS).exists()

    def test_malformed_json_raises(self, store):
        store.path_for(BOOKS).write_text("{not json", encoding="utf-8")

        with pytest.raises(json.JSONDecodeError):
            store.read_all(BOOKS)

    def test_directory_in_place_of_file_raises(self, store):
        path = store.path_for(BOOKS)
        path.unlink()
        path.mkdir()

        with pytest.raises(OSError):
            store.read_all(BOOKS)


class TestWriteAll:
    def test_replaces_collection(self, store):
        store.write_all(BOOKS, [{"id": "b1"}, {"id": "b2"}])
        store.write_all(BOOKS, [{"id": "b3"}])

        assert store.read_all(BOOKS) == [{"id": "b3"}]

    def test_writes_readable_utf8(self, store):
        store.write_all(BOOKS, [{"id": "b1", "title": "Cien años de soledad"}])

        text = store.path_for(BOOKS).read_text(encoding="utf-8")
        assert "Cien años de soledad" in text
        assert text.startswith("[\n  {")

    def test_unserializable_records_leave_file_intact(self, store):
        store.write_all(BOOKS, [{"id": "b1"}])

        with pytest.raises(TypeError):
            store.write_all(BOOKS, [{"id": "b2"}, {"id": "b3", "tags": {"not", "json"}}])

        assert store.read_all(BOOKS) == [{"id": "b1"}]
        assert not store.path_for(BOOKS).with_suffix(".json.tmp").exists()
