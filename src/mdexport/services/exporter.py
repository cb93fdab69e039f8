"""Export workflow: Markdown text in, rendered artifact out.

Mirrors the editor's export actions. Each export parses the text once,
renders it in the requested format and, when writing to disk, records the
source text in history.
"""

from enum import Enum
from pathlib import Path
from typing import Optional

from mdexport.history.store import HistoryStore
from mdexport.markdown.parser import parse_blocks
from mdexport.models.config import Config
from mdexport.renderers.document import render_document, write_pdf
from mdexport.renderers.html import render_html
from mdexport.renderers.plain_text import render_plain_text
from mdexport.renderers.word import render_word_html
from mdexport.services.exceptions import HistoryUnavailableError
from mdexport.services.file_operations import atomic_write
from mdexport.utils.logging import get_logger

logger = get_logger(__name__)


class ExportFormat(str, Enum):
    """Supported export formats."""

    HTML = "html"
    WORD = "word"
    PDF = "pdf"
    TEXT = "text"
    MARKDOWN = "markdown"

    @property
    def extension(self) -> str:
        return _EXTENSIONS[self]


_EXTENSIONS = {
    ExportFormat.HTML: "html",
    ExportFormat.WORD: "doc",
    ExportFormat.PDF: "pdf",
    ExportFormat.TEXT: "txt",
    ExportFormat.MARKDOWN: "md",
}


class Exporter:
    """
    Render Markdown documents to export formats.

    Example:
        >>> exporter = Exporter(Config(), history=store)
        >>> path = exporter.export_to_file("# Notes", ExportFormat.HTML, Path("/tmp"))
        >>> path.name
        'export.html'
    """

    def __init__(self, config: Optional[Config] = None, history: Optional[HistoryStore] = None):
        self.config = config or Config()
        self.history = history

    def export(self, text: str, fmt: ExportFormat) -> bytes:
        """
        Render text in the requested format.

        Args:
            text: Markdown source
            fmt: Target format

        Returns:
            Encoded artifact (UTF-8 for text formats, PDF bytes for pdf)
        """
        fmt = ExportFormat(fmt)
        if fmt is ExportFormat.MARKDOWN:
            return text.encode("utf-8")

        blocks = parse_blocks(text)
        render = self.config.render

        if fmt is ExportFormat.HTML:
            return render_html(blocks, theme=render.theme, title=render.title).encode("utf-8")
        if fmt is ExportFormat.WORD:
            return render_word_html(blocks, title=render.title).encode("utf-8")
        if fmt is ExportFormat.TEXT:
            return render_plain_text(blocks).encode("utf-8")
        if fmt is ExportFormat.PDF:
            pages = render_document(blocks, self.config.document)
            return write_pdf(pages, title=render.title)

        raise ValueError(f"Unsupported export format: {fmt!r}")

    def export_to_file(self, text: str, fmt: ExportFormat, directory: Path) -> Path:
        """
        Render text and write it to `export.<ext>` in a directory.

        The text is committed to history after a successful write. History
        failures are logged but do not fail the export.

        Returns:
            Path of the written file

        Raises:
            OSError: If the export file could not be written
        """
        fmt = ExportFormat(fmt)
        data = self.export(text, fmt)

        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"export.{fmt.extension}"
        atomic_write(path, data)
        logger.info("export_written", format=fmt.value, path=str(path), size=len(data))

        if self.history is not None:
            try:
                self.history.commit(text)
            except HistoryUnavailableError as e:
                logger.warning("export_history_commit_failed", error=str(e))

        return path
