"""Data models for mdexport."""

from mdexport.models.block import Block, BlockKind, RichTextRun, runs_plain_text
from mdexport.models.history import HistoryItem, derive_title

__all__ = [
    "Block",
    "BlockKind",
    "RichTextRun",
    "runs_plain_text",
    "HistoryItem",
    "derive_title",
]
