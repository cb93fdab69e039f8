"""Unit tests for the export workflow."""

import pytest

from mdexport.history.storage import MemoryStorage
from mdexport.history.store import HistoryStore
from mdexport.models.config import Config, RenderConfig
from mdexport.services.exporter import Exporter, ExportFormat

SAMPLE = "# Title\n\nSome **bold** text.\n\n- a\n- b"


class TestExport:
    """Tests for Exporter.export."""

    def test_html(self):
        data = Exporter().export(SAMPLE, ExportFormat.HTML).decode("utf-8")

        assert data.startswith("<!DOCTYPE html>")
        assert "<p>Some <strong>bold</strong> text.</p>" in data

    def test_html_uses_configured_theme(self):
        config = Config(render=RenderConfig(theme="dark", title="Notes"))

        data = Exporter(config).export(SAMPLE, ExportFormat.HTML).decode("utf-8")

        assert "#0d1117" in data
        assert "<title>Notes</title>" in data

    def test_word(self):
        data = Exporter().export(SAMPLE, ExportFormat.WORD).decode("utf-8")

        assert "xmlns:w=" in data

    def test_text(self):
        data = Exporter().export(SAMPLE, ExportFormat.TEXT)

        assert data == b"Title\nSome bold text.\na\nb"

    def test_markdown_passthrough(self):
        assert Exporter().export(SAMPLE, ExportFormat.MARKDOWN) == SAMPLE.encode("utf-8")

    def test_pdf(self):
        assert Exporter().export(SAMPLE, ExportFormat.PDF).startswith(b"%PDF-")

    def test_format_from_string(self):
        assert Exporter().export("x", "text") == b"x"

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            Exporter().export("x", "rtf")


class TestExportToFile:
    """Tests for Exporter.export_to_file."""

    @pytest.mark.parametrize("fmt,name", [
        (ExportFormat.HTML, "export.html"),
        (ExportFormat.WORD, "export.doc"),
        (ExportFormat.PDF, "export.pdf"),
        (ExportFormat.TEXT, "export.txt"),
        (ExportFormat.MARKDOWN, "export.md"),
    ])
    def test_file_names(self, tmp_path, fmt, name):
        path = Exporter().export_to_file(SAMPLE, fmt, tmp_path)

        assert path == tmp_path / name
        assert path.read_bytes() == Exporter().export(SAMPLE, fmt)

    def test_commits_to_history(self, tmp_path, store):
        exporter = Exporter(history=store)

        exporter.export_to_file(SAMPLE, ExportFormat.HTML, tmp_path)

        assert store.items[0].content == SAMPLE
        assert store.load_last_session() == SAMPLE

    def test_history_failure_does_not_fail_export(self, tmp_path, failing_storage_factory, clock):
        history = HistoryStore(failing_storage_factory(), clock=clock)
        exporter = Exporter(history=history)

        path = exporter.export_to_file(SAMPLE, ExportFormat.TEXT, tmp_path)

        assert path.exists()
        assert history.items[0].content == SAMPLE

    def test_whitespace_document_exported_not_committed(self, tmp_path):
        store = HistoryStore(MemoryStorage())

        Exporter(history=store).export_to_file("   ", ExportFormat.TEXT, tmp_path)

        assert store.items == []
