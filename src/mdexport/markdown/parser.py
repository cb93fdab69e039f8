"""Line-oriented Markdown block parser.

Splits a document into an ordered list of Block values in a single
forward pass. The only state carried between lines is the open code
fence; everything else is classified line by line from its prefix.
"""

import re
from dataclasses import dataclass, field
from typing import Optional

from mdexport.markdown.inline import format_inline
from mdexport.models.block import Block, BlockKind, RichTextRun
from mdexport.utils.logging import get_logger

logger = get_logger(__name__)

FENCE = "```"
MAX_HEADING_LEVEL = 6
UNORDERED_MARKERS = ("- ", "* ", "+ ")
QUOTE_MARKER = "> "
RULE_LINES = ("---", "***", "___")
ORDERED_PREFIX = re.compile(r"^\d+\.\s")


@dataclass
class _CodeFenceState:
    """Open code fence carried across lines."""

    language: str
    start_line: int
    buffer: list[str] = field(default_factory=list)


class BlockParser:
    """Single-pass block scanner.

    Example:
        >>> blocks = BlockParser().parse("# Title\\n\\nSome **bold** text.")
        >>> [(b.kind.value, b.raw_content) for b in blocks]
        [('heading', 'Title'), ('paragraph', 'Some **bold** text.')]
    """

    def __init__(self):
        self._fence: Optional[_CodeFenceState] = None
        self._blocks: list[Block] = []

    @property
    def inside_code_block(self) -> bool:
        return self._fence is not None

    def parse(self, text: str) -> list[Block]:
        """
        Parse a Markdown document into blocks.

        Args:
            text: Full document text

        Returns:
            Blocks in source order. Blank lines and fence lines produce no
            block; an unterminated code fence discards its buffered lines.
        """
        self._fence = None
        self._blocks = []

        for index, line in enumerate(text.split("\n")):
            self._feed(index, line.rstrip("\r"))

        if self._fence is not None:
            logger.debug(
                "unterminated_code_fence_dropped",
                start_line=self._fence.start_line,
                dropped_lines=len(self._fence.buffer),
            )
            self._fence = None

        blocks = self._blocks
        self._blocks = []
        logger.debug("document_parsed", block_count=len(blocks))
        return blocks

    def _feed(self, index: int, line: str) -> None:
        trimmed = line.strip()

        if trimmed.startswith(FENCE):
            self._toggle_fence(index, trimmed)
            return

        if self._fence is not None:
            # Indentation inside code is significant
            self._fence.buffer.append(line)
            return

        if not trimmed:
            return

        self._blocks.append(classify_line(trimmed, index))

    def _toggle_fence(self, index: int, trimmed: str) -> None:
        if self._fence is None:
            self._fence = _CodeFenceState(
                language=trimmed[len(FENCE):].strip(),
                start_line=index,
            )
            return

        content = "\n".join(self._fence.buffer)
        self._blocks.append(Block(
            kind=BlockKind.CODE_BLOCK,
            raw_content=content,
            rich_content=(RichTextRun(text=content),) if content else (),
            source_line_index=self._fence.start_line,
            language=self._fence.language,
        ))
        self._fence = None


def classify_line(trimmed: str, index: int = 0) -> Block:
    """
    Classify one non-blank, non-code line by its prefix.

    Args:
        trimmed: Line with surrounding whitespace removed
        index: Source line number

    Returns:
        Block of the most specific matching kind (Paragraph when none match)
    """
    for level in range(MAX_HEADING_LEVEL, 0, -1):
        prefix = "#" * level + " "
        if trimmed.startswith(prefix):
            return _text_block(BlockKind.HEADING, trimmed[len(prefix):], index, level=level)

    if trimmed.startswith(UNORDERED_MARKERS):
        return _text_block(BlockKind.UNORDERED_LIST_ITEM, trimmed[2:], index)

    match = ORDERED_PREFIX.match(trimmed)
    if match:
        return _text_block(BlockKind.ORDERED_LIST_ITEM, trimmed[match.end():], index)

    if trimmed.startswith(QUOTE_MARKER):
        return _text_block(BlockKind.QUOTE, trimmed[len(QUOTE_MARKER):], index)

    if trimmed in RULE_LINES:
        return Block(kind=BlockKind.HORIZONTAL_RULE, raw_content="", source_line_index=index)

    return _text_block(BlockKind.PARAGRAPH, trimmed, index)


def _text_block(kind: BlockKind, content: str, index: int, level: Optional[int] = None) -> Block:
    return Block(
        kind=kind,
        raw_content=content,
        rich_content=tuple(format_inline(content)),
        source_line_index=index,
        level=level,
    )


def parse_blocks(text: str) -> list[Block]:
    """Parse a Markdown document into blocks with a fresh parser."""
    return BlockParser().parse(text)
