"""HTML rendering for parsed Markdown blocks.

render_html_body is the one block-to-HTML conversion; both the standalone
HTML export and the Word-compatible export wrap its output.
"""

import html
from typing import Iterable

from mdexport.models.block import Block, BlockKind, RichTextRun

DEFAULT_TITLE = "Markdown Export"

_BASE_CSS = """\
body {{
    font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Helvetica, Arial, sans-serif;
    line-height: 1.6;
    padding: 20px;
    background-color: {background};
    color: {foreground};
}}
.markdown-body {{
    box-sizing: border-box;
    min-width: 200px;
    max-width: 980px;
    margin: 0 auto;
    padding: 45px;
}}
blockquote {{
    margin: 0 0 16px 0;
    padding: 0 1em;
    color: {muted};
    border-left: 0.25em solid {border};
}}
code {{
    font-family: SFMono-Regular, Menlo, Consolas, monospace;
    font-size: 85%;
    padding: 0.2em 0.4em;
    background-color: {code_background};
    border-radius: 6px;
}}
pre {{
    padding: 16px;
    overflow: auto;
    background-color: {code_background};
    border-radius: 6px;
}}
pre code {{
    padding: 0;
    background-color: transparent;
}}
hr {{
    height: 0.25em;
    border: 0;
    background-color: {border};
}}
"""

THEMES = {
    "light": {
        "background": "#ffffff",
        "foreground": "#24292e",
        "muted": "#6a737d",
        "border": "#dfe2e5",
        "code_background": "#f6f8fa",
    },
    "dark": {
        "background": "#0d1117",
        "foreground": "#c9d1d9",
        "muted": "#8b949e",
        "border": "#30363d",
        "code_background": "#161b22",
    },
}


def theme_css(theme: str = "light") -> str:
    """
    Return the stylesheet for a theme.

    Raises:
        ValueError: If the theme is not "light" or "dark"
    """
    try:
        palette = THEMES[theme]
    except KeyError:
        raise ValueError(f"Unknown theme: {theme!r} (expected one of {sorted(THEMES)})") from None
    return _BASE_CSS.format(**palette)


def escape(text: str) -> str:
    """Escape &, <, >, " and ' for insertion into HTML."""
    return html.escape(text, quote=True)


def runs_to_html(runs: Iterable[RichTextRun]) -> str:
    """Convert rich text runs to minimal inline HTML.

    Each run is escaped and wrapped innermost-first in <code>, <em>,
    <strong> according to its flags.
    """
    parts = []
    for run in runs:
        fragment = escape(run.text)
        if run.code:
            fragment = f"<code>{fragment}</code>"
        if run.italic:
            fragment = f"<em>{fragment}</em>"
        if run.bold:
            fragment = f"<strong>{fragment}</strong>"
        parts.append(fragment)
    return "".join(parts)


def render_html_body(blocks: Iterable[Block]) -> str:
    """
    Convert blocks to the HTML fragment placed inside <body>.

    Consecutive list items of one kind share a single <ul> or <ol>; the
    wrapper is closed as soon as any other block kind appears.

    Args:
        blocks: Parsed blocks in source order

    Returns:
        Newline-joined HTML elements (empty string for no blocks)
    """
    lines: list[str] = []
    in_unordered_list = False
    in_ordered_list = False

    for block in blocks:
        kind = block.kind

        if in_unordered_list and kind is not BlockKind.UNORDERED_LIST_ITEM:
            lines.append("</ul>")
            in_unordered_list = False
        if in_ordered_list and kind is not BlockKind.ORDERED_LIST_ITEM:
            lines.append("</ol>")
            in_ordered_list = False

        if kind is BlockKind.HEADING:
            # Headings carry plain text only
            lines.append(f"<h{block.level}>{escape(block.plain_text)}</h{block.level}>")
        elif kind is BlockKind.PARAGRAPH:
            lines.append(f"<p>{runs_to_html(block.rich_content)}</p>")
        elif kind is BlockKind.UNORDERED_LIST_ITEM:
            if not in_unordered_list:
                lines.append("<ul>")
                in_unordered_list = True
            lines.append(f"<li>{runs_to_html(block.rich_content)}</li>")
        elif kind is BlockKind.ORDERED_LIST_ITEM:
            if not in_ordered_list:
                lines.append("<ol>")
                in_ordered_list = True
            lines.append(f"<li>{runs_to_html(block.rich_content)}</li>")
        elif kind is BlockKind.QUOTE:
            lines.append(f"<blockquote><p>{runs_to_html(block.rich_content)}</p></blockquote>")
        elif kind is BlockKind.CODE_BLOCK:
            lines.append(f"<pre><code>{escape(block.raw_content)}</code></pre>")
        elif kind is BlockKind.HORIZONTAL_RULE:
            lines.append("<hr>")
        else:
            raise ValueError(f"Unhandled block kind: {kind!r}")

    if in_unordered_list:
        lines.append("</ul>")
    if in_ordered_list:
        lines.append("</ol>")

    return "\n".join(lines)


def render_html(blocks: Iterable[Block], theme: str = "light", title: str = DEFAULT_TITLE) -> str:
    """
    Render blocks as a complete HTML document with an embedded stylesheet.

    Args:
        blocks: Parsed blocks in source order
        theme: "light" or "dark"
        title: Document title

    Returns:
        UTF-8 HTML document string; byte-identical for identical input
    """
    css = theme_css(theme)
    body = render_html_body(blocks)
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        f'<head><meta charset="utf-8"><title>{escape(title)}</title><style>\n{css}</style></head>\n'
        f'<body class="markdown-body">\n{body}\n</body>\n'
        "</html>\n"
    )
