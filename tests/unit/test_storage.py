"""Unit tests for storage backends and atomic writes."""

import pytest

from mdexport.history.storage import FileStorage, MemoryStorage, StorageBackend
from mdexport.services.file_operations import atomic_write


class TestMemoryStorage:
    """Tests for MemoryStorage."""

    def test_get_missing(self):
        assert MemoryStorage().get("k") is None

    def test_set_get(self):
        storage = MemoryStorage()
        storage.set("k", b"v")

        assert storage.get("k") == b"v"

    def test_satisfies_protocol(self):
        assert isinstance(MemoryStorage(), StorageBackend)


class TestFileStorage:
    """Tests for FileStorage."""

    def test_get_missing(self, tmp_path):
        """Test missing keys read as None without creating the directory."""
        storage = FileStorage(tmp_path / "store")

        assert storage.get("k") is None
        assert not (tmp_path / "store").exists()

    def test_set_creates_directory(self, tmp_path):
        """Test set creates the directory and one file per key."""
        storage = FileStorage(tmp_path / "store")

        storage.set("last_session", b'"# Draft"')

        assert (tmp_path / "store" / "last_session.json").read_bytes() == b'"# Draft"'
        assert storage.get("last_session") == b'"# Draft"'

    def test_overwrite(self, tmp_path):
        storage = FileStorage(tmp_path)
        storage.set("k", b"old")
        storage.set("k", b"new")

        assert storage.get("k") == b"new"

    @pytest.mark.parametrize("key", ["../escape", "a/b", "", "sp ace"])
    def test_invalid_keys(self, tmp_path, key):
        """Test keys that could escape the directory are rejected."""
        with pytest.raises(ValueError, match="Invalid storage key"):
            FileStorage(tmp_path).get(key)

    def test_satisfies_protocol(self, tmp_path):
        assert isinstance(FileStorage(tmp_path), StorageBackend)


class TestAtomicWrite:
    """Test atomic_write function."""

    def test_atomic_write_creates_new_file(self, tmp_path):
        """Test that atomic_write creates a new file successfully."""
        target = tmp_path / "export.md"
        content = "# Test Content\n- Item 1\n- Item 2"

        atomic_write(target, content)

        assert target.read_text(encoding="utf-8") == content

    def test_atomic_write_bytes(self, tmp_path):
        """Test that bytes are written unchanged."""
        target = tmp_path / "export.pdf"

        atomic_write(target, b"%PDF-1.4\x00\xff")

        assert target.read_bytes() == b"%PDF-1.4\x00\xff"

    def test_atomic_write_overwrites_existing_file(self, tmp_path):
        """Test that atomic_write overwrites existing file."""
        target = tmp_path / "existing.md"
        target.write_text("Old content")

        atomic_write(target, "New content")

        assert target.read_text() == "New content"

    def test_atomic_write_cleans_up_temp_file_on_error(self, tmp_path, monkeypatch):
        """Test that atomic_write cleans up temporary file on error."""
        target = tmp_path / "file.md"

        def failing_replace(self, *args, **kwargs):
            raise OSError("Simulated rename error")

        monkeypatch.setattr(type(target), "replace", failing_replace)

        with pytest.raises(OSError, match="Simulated rename error"):
            atomic_write(target, "Content")

        assert list(tmp_path.glob(".*.tmp.*")) == []
        assert not target.exists()
