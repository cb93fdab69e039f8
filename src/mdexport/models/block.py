"""Block model for parsed Markdown documents.

A document is parsed into a flat, ordered sequence of Block values. Each
block carries its structural identity (kind, heading level, code language)
and its inline-formatted content as a list of RichTextRun spans.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class BlockKind(str, Enum):
    """Closed set of block types produced by the block parser."""

    HEADING = "heading"
    PARAGRAPH = "paragraph"
    UNORDERED_LIST_ITEM = "unordered_list_item"
    ORDERED_LIST_ITEM = "ordered_list_item"
    QUOTE = "quote"
    CODE_BLOCK = "code_block"
    HORIZONTAL_RULE = "horizontal_rule"


@dataclass(frozen=True)
class RichTextRun:
    """Span of text tagged with inline style flags."""

    text: str
    bold: bool = False
    italic: bool = False
    code: bool = False

    def same_style(self, other: "RichTextRun") -> bool:
        """Return True if both runs carry identical style flags."""
        return (self.bold, self.italic, self.code) == (other.bold, other.italic, other.code)


def runs_plain_text(runs: list[RichTextRun]) -> str:
    """Concatenate run text, discarding style flags."""
    return "".join(run.text for run in runs)


@dataclass(frozen=True)
class Block:
    """One classified structural unit of a Markdown document.

    Attributes:
        kind: Block type
        raw_content: Source text with block-prefix markers stripped
                     (empty for horizontal rules)
        rich_content: Inline-formatted runs derived from raw_content
        source_line_index: Originating line number (identity key only)
        level: Heading level 1..6, None for other kinds
        language: Code fence language tag, None for other kinds
    """

    kind: BlockKind
    raw_content: str
    rich_content: tuple[RichTextRun, ...] = field(default_factory=tuple)
    source_line_index: int = 0
    level: Optional[int] = None
    language: Optional[str] = None

    def __post_init__(self):
        if self.kind is BlockKind.HEADING:
            if self.level is None or not 1 <= self.level <= 6:
                raise ValueError(f"Heading level must be 1..6, got {self.level!r}")
        elif self.level is not None:
            raise ValueError(f"level is only valid for headings, not {self.kind.value}")

        if self.kind is BlockKind.CODE_BLOCK:
            if self.language is None:
                object.__setattr__(self, "language", "")
        elif self.language is not None:
            raise ValueError(f"language is only valid for code blocks, not {self.kind.value}")

        # Accept lists from callers but store an immutable sequence
        if not isinstance(self.rich_content, tuple):
            object.__setattr__(self, "rich_content", tuple(self.rich_content))

    @property
    def plain_text(self) -> str:
        """Rich content text with style flags discarded."""
        return runs_plain_text(list(self.rich_content))

    @property
    def is_list_item(self) -> bool:
        return self.kind in (BlockKind.UNORDERED_LIST_ITEM, BlockKind.ORDERED_LIST_ITEM)
