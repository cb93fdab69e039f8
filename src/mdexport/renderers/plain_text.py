"""Plain text rendering for parsed Markdown blocks."""

from typing import Iterable

from mdexport.models.block import Block, BlockKind

RULE_TEXT = "---"


def render_plain_text(blocks: Iterable[Block]) -> str:
    """
    Render blocks as plain text, one line per block.

    Inline markers are dropped only where the inline formatter parsed them;
    a line that fell back to literal text keeps its asterisks and backticks.

    Args:
        blocks: Parsed blocks in source order

    Returns:
        Newline-joined text, trimmed of surrounding whitespace
    """
    lines = []
    for block in blocks:
        if block.kind is BlockKind.HORIZONTAL_RULE:
            lines.append(RULE_TEXT)
        elif block.kind is BlockKind.CODE_BLOCK:
            lines.append(block.raw_content)
        else:
            lines.append(block.plain_text)
    return "\n".join(lines).strip()
