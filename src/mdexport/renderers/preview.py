"""Rich text preview of parsed Markdown blocks.

Builds a rich.text.Text for terminal display (or any host that can show
Rich renderables), styling runs the way the editor preview pane does.
"""

from typing import Iterable

from rich.text import Text

from mdexport.models.block import Block, BlockKind, RichTextRun

HEADING_STYLES = {
    1: "bold underline",
    2: "bold",
    3: "bold",
    4: "bold dim",
    5: "bold dim",
    6: "bold dim",
}
CODE_STYLE = "cyan on #222222"
QUOTE_STYLE = "dim italic"
RULE_WIDTH = 40


def run_style(run: RichTextRun) -> str:
    """Rich style string for a run's flags."""
    styles = []
    if run.bold:
        styles.append("bold")
    if run.italic:
        styles.append("italic")
    if run.code:
        styles.append(CODE_STYLE)
    return " ".join(styles)


def _append_runs(text: Text, runs: Iterable[RichTextRun], base_style: str = "") -> None:
    for run in runs:
        style = " ".join(s for s in (base_style, run_style(run)) if s)
        text.append(run.text, style=style or None)


def render_preview(blocks: Iterable[Block]) -> Text:
    """
    Render blocks to Rich Text with styles.

    Supports headings, paragraphs, bulleted and numbered lists, quotes,
    code blocks and rules, one line (or code region) per block.

    Args:
        blocks: Parsed blocks in source order

    Returns:
        Rich Text object with styled content
    """
    text = Text()
    ordinal = 0
    first = True

    for block in blocks:
        if not first:
            text.append("\n")
        first = False

        kind = block.kind
        ordinal = ordinal + 1 if kind is BlockKind.ORDERED_LIST_ITEM else 0

        if kind is BlockKind.HEADING:
            _append_runs(text, block.rich_content, HEADING_STYLES[block.level])
        elif kind is BlockKind.PARAGRAPH:
            _append_runs(text, block.rich_content)
        elif kind is BlockKind.UNORDERED_LIST_ITEM:
            text.append("• ", style="bold")
            _append_runs(text, block.rich_content)
        elif kind is BlockKind.ORDERED_LIST_ITEM:
            text.append(f"{ordinal}. ", style="bold")
            _append_runs(text, block.rich_content)
        elif kind is BlockKind.QUOTE:
            text.append("▌ ", style="dim")
            _append_runs(text, block.rich_content, QUOTE_STYLE)
        elif kind is BlockKind.CODE_BLOCK:
            text.append(block.raw_content, style=CODE_STYLE)
        elif kind is BlockKind.HORIZONTAL_RULE:
            text.append("─" * RULE_WIDTH, style="dim")
        else:
            raise ValueError(f"Unhandled block kind: {kind!r}")

    return text
