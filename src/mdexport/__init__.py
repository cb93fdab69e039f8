"""mdexport - Markdown to structured document pipeline.

Parses Markdown into a flat sequence of typed blocks and renders them as
HTML, Word-compatible HTML, paginated PDF pages or plain text. A bounded
history store keeps recently committed documents.

Example:
    >>> from mdexport import parse_blocks, render_plain_text
    >>> render_plain_text(parse_blocks("# Title\\n\\nSome **bold** text."))
    'Title\\nSome bold text.'
"""

from mdexport.history.storage import FileStorage, MemoryStorage, StorageBackend
from mdexport.history.store import HistoryStore
from mdexport.markdown.inline import format_inline, parse_inline
from mdexport.markdown.parser import BlockParser, parse_blocks
from mdexport.models import Block, BlockKind, HistoryItem, RichTextRun
from mdexport.renderers.document import Page, render_document, write_pdf
from mdexport.renderers.html import render_html, render_html_body
from mdexport.renderers.plain_text import render_plain_text
from mdexport.renderers.preview import render_preview
from mdexport.renderers.word import render_word_html

__version__ = "0.1.0"

__all__ = [
    "Block",
    "BlockKind",
    "BlockParser",
    "FileStorage",
    "HistoryItem",
    "HistoryStore",
    "MemoryStorage",
    "Page",
    "RichTextRun",
    "StorageBackend",
    "format_inline",
    "parse_blocks",
    "parse_inline",
    "render_document",
    "render_html",
    "render_html_body",
    "render_plain_text",
    "render_preview",
    "render_word_html",
    "write_pdf",
]
