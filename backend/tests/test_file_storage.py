"""Tests for the local upload store."""

import pytest

from assetvault.services.file_storage import LocalFileStorage, StoragePathError


@pytest.fixture
def store(tmp_path):
    return LocalFileStorage(tmp_path / "uploads")


class TestLocalFileStorage:
    def test_write_returns_relative_path(self, store):
        path = store.write(["t1", "c1", "a1", "file.txt"], b"data")
        assert path == "t1/c1/a1/file.txt"
        assert (store.root / path).read_bytes() == b"data"
        assert store.url_for(path) == "/uploads/t1/c1/a1/file.txt"

    def test_delete_missing_file(self, store):
        assert store.delete("t1/c1/nope.txt") is False

    def test_delete_tree(self, store):
        store.write(["t1", "c1", "a1", "x.bin"], b"x")
        assert store.delete_tree(["t1", "c1"]) is True
        assert not store.exists(["t1", "c1"])

    def test_delete_missing_tree(self, store):
        assert store.delete_tree(["t1", "ghost"]) is False

    def test_refuses_paths_outside_root(self, store):
        with pytest.raises(StoragePathError):
            store.write(["..", "escape.txt"], b"x")
        with pytest.raises(StoragePathError):
            store.delete_tree([])

    def test_scoped_file(self, store):
        path = store.write(["t1", "c1", "a1", "file.txt"], b"data")
        assert store.scoped_file(["t1", "c1"], path) == store.root / path
        assert store.scoped_file(["t1", "c2"], path) is None
        assert store.scoped_file(["t1", "c1"], "t1/c1/a1/missing.txt") is None
        assert store.scoped_file(["t1", "c1"], "t1/c1") is None

    def test_scoped_file_rejects_traversal(self, store):
        store.write(["t1", "c2", "a1", "file.txt"], b"data")
        assert store.scoped_file(["t1", "c1"], "t1/c1/../c2/a1/file.txt") is None
        assert store.scoped_file(["t1", "c1"], "../outside.txt") is None
