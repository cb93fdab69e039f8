"""Paginated document rendering.

Blocks are laid out into fixed-size pages of absolutely positioned draw
commands. Every block is wrapped once by layout_block; that single layout
provides both the height used for page breaking and the fragments that
get drawn, so measurement and drawing can never disagree.

Text is split into fragments per font: characters the style font has no
glyph for are measured and drawn with a Unicode fallback font (a TrueType
file or reportlab's built-in CJK CID font), never with a substitute that
the measurement did not see.

Coordinates in draw commands are top-down (y grows towards the page
bottom). write_pdf flips them for reportlab's bottom-up canvas.
"""

import io
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Iterable, Optional, Union

from reportlab.lib.colors import HexColor
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas

from mdexport.models.block import Block, BlockKind, RichTextRun
from mdexport.models.config import FontConfig, PageLayout
from mdexport.utils.logging import get_logger

logger = get_logger(__name__)

_DEFAULT_FONTS = FontConfig()
FONT_REGULAR = _DEFAULT_FONTS.regular
FONT_BOLD = _DEFAULT_FONTS.bold
FONT_ITALIC = _DEFAULT_FONTS.italic
FONT_BOLD_ITALIC = _DEFAULT_FONTS.bold_italic
FONT_MONO = _DEFAULT_FONTS.mono
FONT_MONO_BOLD = _DEFAULT_FONTS.mono_bold

# Unicode TrueType fonts commonly installed on Linux, macOS and Windows
SYSTEM_FALLBACK_FONTS = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
    "/Library/Fonts/Arial Unicode.ttf",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    "C:/Windows/Fonts/arialuni.ttf",
    "C:/Windows/Fonts/segoeui.ttf",
)

# Text encoding of the standard PDF fonts
STANDARD_FONT_ENCODING = "cp1252"

TEXT_COLOR = "#24292e"
QUOTE_COLOR = "#6a737d"
RULE_COLOR = "#d0d7de"
CODE_BACKGROUND = "#f6f8fa"

BULLET = "•"
MARKER_GAP = 6.0
CODE_PADDING = 6.0
QUOTE_RULE_WIDTH = 3.0
TAB_SIZE = 4
EMPTY_DOCUMENT_TEXT = "No content"

_TOKEN = re.compile(r"\S+|\s+")
_SLOTS = ("regular", "bold", "italic", "bold_italic", "mono", "mono_bold")

@dataclass(frozen=True)
class DrawText:
    """Text drawn with its baseline at (x, y)."""

    x: float
    y: float
    text: str
    font: str
    size: float
    color: str = TEXT_COLOR


@dataclass(frozen=True)
class DrawLine:
    x1: float
    y1: float
    x2: float
    y2: float
    width: float = 1.0
    color: str = RULE_COLOR


@dataclass(frozen=True)
class DrawRect:
    """Filled rectangle with its top-left corner at (x, y)."""

    x: float
    y: float
    width: float
    height: float
    fill: str = CODE_BACKGROUND


DrawCommand = Union[DrawText, DrawLine, DrawRect]


@dataclass
class Page:
    """One fixed-size page of positioned draw commands."""

    number: int
    width: float
    height: float
    commands: list[DrawCommand] = field(default_factory=list)

    def texts(self) -> list[str]:
        """Text of every DrawText command in drawing order."""
        return [c.text for c in self.commands if isinstance(c, DrawText)]


@dataclass(frozen=True)
class _Fragment:
    text: str
    font: str
    size: float
    width: float


@dataclass
class _Line:
    fragments: list[_Fragment]
    height: float


@dataclass
class BlockLayout:
    """Wrapped lines of one block plus everything needed to draw them."""

    block: Block
    lines: list[_Line]
    indent: float
    base_font: str
    size: float
    color: str = TEXT_COLOR
    marker: Optional[str] = None
    pad_top: float = 0.0
    pad_bottom: float = 0.0

    @property
    def height(self) -> float:
        return self.pad_top + sum(line.height for line in self.lines) + self.pad_bottom



@dataclass(frozen=True)
class FontSet:
    """Registered font names for each style slot, plus ordered fallbacks."""

    regular: str = FONT_REGULAR
    bold: str = FONT_BOLD
    italic: str = FONT_ITALIC
    bold_italic: str = FONT_BOLD_ITALIC
    mono: str = FONT_MONO
    mono_bold: str = FONT_MONO_BOLD
    fallbacks: tuple[str, ...] = ()

    def for_run(self, run: RichTextRun, base_bold: bool = False) -> str:
        """Pick the slot font matching a run's style flags."""
        bold = run.bold or base_bold
        if run.code:
            return self.mono_bold if bold else self.mono
        if bold and run.italic:
            return self.bold_italic
        if bold:
            return self.bold
        if run.italic:
            return self.italic
        return self.regular

    def segments(self, text: str, font: str) -> list[tuple[str, str]]:
        """
        Split text into (font, text) pieces.

        Characters `font` cannot show go to the first fallback that can.
        When none can, the character stays with `font`.
        """
        pieces: list[tuple[str, str]] = []
        for char in text:
            chosen = self._font_for_char(font, char)
            if pieces and pieces[-1][0] == chosen:
                pieces[-1] = (chosen, pieces[-1][1] + char)
            else:
                pieces.append((chosen, char))
        return pieces

    def measure(self, text: str, font: str, size: float) -> float:
        """Width of text in points, summed over its per-font segments."""
        return sum(pdfmetrics.stringWidth(piece, name, size) for name, piece in self.segments(text, font))

    def _font_for_char(self, font: str, char: str) -> str:
        if has_glyph(font, char):
            return font
        for fallback in self.fallbacks:
            if has_glyph(fallback, char):
                return fallback
        return font


@lru_cache(maxsize=None)
def has_glyph(font_name: str, char: str) -> bool:
    """Whether a registered font can draw a character."""
    font = pdfmetrics.getFont(font_name)
    if isinstance(font, TTFont):
        return ord(char) in font.face.charToGlyph
    if isinstance(font, UnicodeCIDFont):
        return True
    try:
        char.encode(STANDARD_FONT_ENCODING)
    except UnicodeEncodeError:
        return False
    return True


def _register_ttf(path: str) -> str:
    """Register a TrueType file under its file stem and return that name."""
    font_path = Path(path).expanduser()
    name = font_path.stem
    pdfmetrics.registerFont(TTFont(name, str(font_path)))
    return name


def _register_slot(value: str) -> str:
    if value.lower().endswith(".ttf"):
        return _register_ttf(value)
    # Raises KeyError for unknown standard font names
    pdfmetrics.getFont(value)
    return value


@lru_cache(maxsize=None)
def resolve_fonts(config: FontConfig) -> FontSet:
    """
    Register the configured fonts and build the FontSet used for layout.

    Fallbacks are, in order: configured TrueType files, well-known system
    Unicode fonts that exist (when search_system_fonts is set), then the
    built-in CID font. A fallback file that cannot be loaded is skipped.

    Args:
        config: Font section of the page layout

    Returns:
        FontSet naming registered fonts only
    """
    slots = {slot: _register_slot(getattr(config, slot)) for slot in _SLOTS}

    candidates = list(config.fallback_fonts)
    if config.search_system_fonts:
        candidates.extend(path for path in SYSTEM_FALLBACK_FONTS if Path(path).exists())

    fallbacks: list[str] = []
    for path in candidates:
        try:
            name = _register_ttf(path)
        except (OSError, TTFError) as e:
            logger.warning("fallback_font_unavailable", path=path, error=str(e))
            continue
        if name not in fallbacks:
            fallbacks.append(name)

    if config.cid_fallback:
        pdfmetrics.registerFont(UnicodeCIDFont(config.cid_fallback))
        fallbacks.append(config.cid_fallback)

    logger.debug("fonts_resolved", fallbacks=fallbacks)
    return FontSet(**slots, fallbacks=tuple(fallbacks))


def default_fonts() -> FontSet:
    return resolve_fonts(_DEFAULT_FONTS)


def font_for_run(run: RichTextRun, base_bold: bool = False, fonts: Optional[FontSet] = None) -> str:
    """Pick the PDF font matching a run's style flags."""
    return (fonts or default_fonts()).for_run(run, base_bold)


def measure(text: str, font: str, size: float, fonts: Optional[FontSet] = None) -> float:
    """Width of text in points for the given font and size."""
    return (fonts or default_fonts()).measure(text, font, size)


def _fragments(text: str, font: str, size: float, fonts: FontSet) -> list[_Fragment]:
    return [
        _Fragment(piece, name, size, pdfmetrics.stringWidth(piece, name, size))
        for name, piece in fonts.segments(text, font)
    ]


def wrap_runs(
    runs: Iterable[RichTextRun],
    width: float,
    size: float,
    line_height: float,
    base_bold: bool = False,
    fonts: Optional[FontSet] = None,
) -> list[_Line]:
    """
    Word-wrap styled runs to a maximum line width.

    Whitespace at a line break is dropped. A single word wider than the
    line is split across lines character by character.

    Returns:
        Wrapped lines; always at least one (possibly empty) line
    """
    fonts = fonts or default_fonts()
    lines: list[_Line] = []
    current: list[_Fragment] = []
    current_width = 0.0

    def finish_line():
        nonlocal current, current_width
        while current and not current[-1].text.strip():
            current_width -= current[-1].width
            current.pop()
        lines.append(_Line(fragments=_merge_fragments(current), height=line_height))
        current = []
        current_width = 0.0

    def add(pieces: list[_Fragment]):
        nonlocal current_width
        current.extend(pieces)
        current_width += sum(piece.width for piece in pieces)

    for run in runs:
        font = fonts.for_run(run, base_bold)
        for token in _TOKEN.findall(run.text):
            pieces = _fragments(token, font, size, fonts)
            token_width = sum(piece.width for piece in pieces)

            if not token.strip():
                if current:
                    add(pieces)
                continue

            if current and current_width + token_width > width:
                finish_line()

            if token_width > width:
                for part in _split_to_width(token, font, size, width - current_width, width, fonts):
                    part_pieces = _fragments(part, font, size, fonts)
                    if current and current_width + sum(p.width for p in part_pieces) > width:
                        finish_line()
                    add(part_pieces)
                continue

            add(pieces)

    if current or not lines:
        finish_line()
    return lines


def _merge_fragments(fragments: list[_Fragment]) -> list[_Fragment]:
    """Join neighbouring fragments drawn with the same font and size."""
    merged: list[_Fragment] = []
    for fragment in fragments:
        if merged and (merged[-1].font, merged[-1].size) == (fragment.font, fragment.size):
            previous = merged.pop()
            fragment = _Fragment(
                previous.text + fragment.text, fragment.font, fragment.size,
                previous.width + fragment.width,
            )
        merged.append(fragment)
    return merged


def _split_to_width(
    word: str, font: str, size: float, first_width: float, width: float, fonts: FontSet,
) -> list[str]:
    """Split an over-long word into pieces that each fit the line width."""
    pieces = []
    available = first_width if first_width > 0 else width
    piece = ""
    for char in word:
        if piece and fonts.measure(piece + char, font, size) > available:
            pieces.append(piece)
            piece = ""
            available = width
        piece += char
    if piece:
        pieces.append(piece)
    return pieces


def wrap_code(
    text: str, width: float, size: float, line_height: float, fonts: Optional[FontSet] = None,
) -> list[_Line]:
    """Hard-wrap code lines to the width, preserving indentation."""
    fonts = fonts or default_fonts()
    lines = []
    for source_line in text.split("\n"):
        source_line = source_line.expandtabs(TAB_SIZE)
        chunks = _split_to_width(source_line, fonts.mono, size, width, width, fonts) or [""]
        for chunk in chunks:
            lines.append(_Line(fragments=_fragments(chunk, fonts.mono, size, fonts), height=line_height))
    return lines


def layout_block(block: Block, layout: PageLayout, ordinal: int = 0) -> BlockLayout:
    """
    Measure and wrap a block to the page content width.

    Args:
        block: Block to lay out
        layout: Page geometry, font sizes and fonts
        ordinal: Position within a run of ordered list items (1-based)

    Returns:
        BlockLayout whose height is exactly what drawing will consume
    """
    fonts = resolve_fonts(layout.fonts)
    width = layout.content_width
    kind = block.kind

    if kind is BlockKind.HEADING:
        size = layout.heading_size(block.level)
        lines = wrap_runs(block.rich_content, width, size, size * layout.leading, base_bold=True, fonts=fonts)
        return BlockLayout(block, lines, indent=0.0, base_font=fonts.bold, size=size)

    if kind in (BlockKind.UNORDERED_LIST_ITEM, BlockKind.ORDERED_LIST_ITEM):
        size = layout.body_font_size
        indent = layout.list_indent
        lines = wrap_runs(block.rich_content, width - indent, size, size * layout.leading, fonts=fonts)
        marker = BULLET if kind is BlockKind.UNORDERED_LIST_ITEM else f"{ordinal}."
        return BlockLayout(block, lines, indent=indent, base_font=fonts.regular, size=size, marker=marker)

    if kind is BlockKind.QUOTE:
        size = layout.body_font_size
        indent = layout.quote_indent
        lines = wrap_runs(block.rich_content, width - indent, size, size * layout.leading, fonts=fonts)
        return BlockLayout(block, lines, indent=indent, base_font=fonts.regular, size=size, color=QUOTE_COLOR)

    if kind is BlockKind.CODE_BLOCK:
        size = layout.code_font_size
        lines = wrap_code(block.raw_content, width - 2 * CODE_PADDING, size, size * layout.leading, fonts=fonts)
        return BlockLayout(
            block, lines, indent=CODE_PADDING, base_font=fonts.mono, size=size,
            pad_top=CODE_PADDING, pad_bottom=CODE_PADDING,
        )

    if kind is BlockKind.HORIZONTAL_RULE:
        return BlockLayout(
            block, [_Line(fragments=[], height=layout.rule_height)],
            indent=0.0, base_font=fonts.regular, size=layout.body_font_size,
        )

    if kind is BlockKind.PARAGRAPH:
        size = layout.body_font_size
        lines = wrap_runs(block.rich_content, width, size, size * layout.leading, fonts=fonts)
        return BlockLayout(block, lines, indent=0.0, base_font=fonts.regular, size=size)

    raise ValueError(f"Unhandled block kind: {kind!r}")


class _PageComposer:
    """Places block layouts onto pages, tracking the vertical cursor."""

    def __init__(self, layout: PageLayout):
        self.layout = layout
        self.fonts = resolve_fonts(layout.fonts)
        self.pages: list[Page] = []
        self.y = layout.content_top
        self._new_page()

    @property
    def page(self) -> Page:
        return self.pages[-1]

    @property
    def at_top(self) -> bool:
        return self.y <= self.layout.content_top

    def _new_page(self) -> None:
        self.pages.append(Page(
            number=len(self.pages) + 1,
            width=self.layout.page_width,
            height=self.layout.page_height,
        ))
        self.y = self.layout.content_top

    def place(self, block_layout: BlockLayout) -> None:
        bottom = self.layout.content_bottom
        content_height = bottom - self.layout.content_top

        if self.y + block_layout.height > bottom and not self.at_top:
            if block_layout.height <= content_height:
                logger.debug(
                    "page_break",
                    page=self.page.number,
                    line=block_layout.block.source_line_index,
                )
                self._new_page()

        # Blocks taller than a page continue line by line
        remaining = list(block_layout.lines)
        first = True
        while remaining:
            pad_top = block_layout.pad_top if first else 0.0
            taken = []
            used = pad_top
            for index, line in enumerate(remaining):
                is_last = index == len(remaining) - 1
                needed = used + line.height + (block_layout.pad_bottom if is_last else 0.0)
                if self.y + needed > bottom:
                    break
                taken.append(line)
                used += line.height

            if not taken:
                if not self.at_top:
                    self._new_page()
                    continue
                # Single line taller than the content box
                taken = [remaining[0]]
                used = pad_top + remaining[0].height

            remaining = remaining[len(taken):]
            pad_bottom = block_layout.pad_bottom if not remaining else 0.0
            self._draw_segment(block_layout, taken, first, pad_top, pad_bottom)
            self.y += used + pad_bottom
            first = False
            if remaining:
                self._new_page()

        self.y += self.layout.block_spacing

    def _draw_segment(
        self,
        block_layout: BlockLayout,
        lines: list[_Line],
        first: bool,
        pad_top: float,
        pad_bottom: float,
    ) -> None:
        commands = self.page.commands
        left = self.layout.margin
        top = self.y
        height = pad_top + sum(line.height for line in lines) + pad_bottom
        kind = block_layout.block.kind

        if kind is BlockKind.CODE_BLOCK:
            commands.append(DrawRect(left, top, self.layout.content_width, height))
        elif kind is BlockKind.QUOTE:
            commands.append(DrawLine(
                left + QUOTE_RULE_WIDTH / 2, top, left + QUOTE_RULE_WIDTH / 2, top + height,
                width=QUOTE_RULE_WIDTH,
            ))
        elif kind is BlockKind.HORIZONTAL_RULE:
            middle = top + height / 2
            commands.append(DrawLine(left, middle, left + self.layout.content_width, middle))
            return

        line_top = top + pad_top
        ascent = pdfmetrics.getAscent(block_layout.base_font, block_layout.size)
        for index, line in enumerate(lines):
            baseline = line_top + (line.height - block_layout.size) / 2 + ascent
            if first and index == 0 and block_layout.marker:
                marker_width = pdfmetrics.stringWidth(block_layout.marker, self.fonts.regular, block_layout.size)
                commands.append(DrawText(
                    left + block_layout.indent - MARKER_GAP - marker_width, baseline,
                    block_layout.marker, self.fonts.regular, block_layout.size, block_layout.color,
                ))
            x = left + block_layout.indent
            for fragment in line.fragments:
                commands.append(DrawText(
                    x, baseline, fragment.text, fragment.font, fragment.size, block_layout.color,
                ))
                x += fragment.width
            line_top += line.height


def render_document(blocks: Iterable[Block], layout: Optional[PageLayout] = None) -> list[Page]:
    """
    Lay out blocks onto fixed-size pages.

    Args:
        blocks: Parsed blocks in source order
        layout: Page geometry and fonts; defaults to A4 with 72pt margins

    Returns:
        One or more pages. Empty input yields a single page carrying a
        diagnostic line instead of an empty document.
    """
    if layout is None:
        layout = PageLayout()

    blocks = list(blocks)
    composer = _PageComposer(layout)

    if not blocks:
        size = layout.body_font_size
        italic = composer.fonts.italic
        composer.page.commands.append(DrawText(
            layout.margin, layout.content_top + pdfmetrics.getAscent(italic, size),
            EMPTY_DOCUMENT_TEXT, italic, size, QUOTE_COLOR,
        ))
        return composer.pages

    ordinal = 0
    for block in blocks:
        ordinal = ordinal + 1 if block.kind is BlockKind.ORDERED_LIST_ITEM else 0
        composer.place(layout_block(block, layout, ordinal))

    logger.debug("document_rendered", blocks=len(blocks), pages=len(composer.pages))
    return composer.pages


def write_pdf(pages: list[Page], title: str = "Markdown Export", compress: bool = True) -> bytes:
    """
    Serialise pages to PDF bytes.

    Output is produced in reportlab's invariant mode, so identical pages
    always give identical bytes. Pass compress=False to keep page content
    streams readable.
    """
    buffer = io.BytesIO()
    first = pages[0] if pages else Page(number=1, width=PageLayout().page_width, height=PageLayout().page_height)
    pdf = canvas.Canvas(
        buffer, pagesize=(first.width, first.height), invariant=1,
        pageCompression=1 if compress else 0,
    )
    pdf.setTitle(title)

    for page in pages or [first]:
        pdf.setPageSize((page.width, page.height))
        for command in page.commands:
            _draw_command(pdf, page.height, command)
        pdf.showPage()

    pdf.save()
    return buffer.getvalue()


def _draw_command(pdf: canvas.Canvas, page_height: float, command: DrawCommand) -> None:
    if isinstance(command, DrawText):
        pdf.setFillColor(HexColor(command.color))
        pdf.setFont(command.font, command.size)
        pdf.drawString(command.x, page_height - command.y, command.text)
    elif isinstance(command, DrawLine):
        pdf.setStrokeColor(HexColor(command.color))
        pdf.setLineWidth(command.width)
        pdf.line(command.x1, page_height - command.y1, command.x2, page_height - command.y2)
    elif isinstance(command, DrawRect):
        pdf.setFillColor(HexColor(command.fill))
        pdf.rect(
            command.x, page_height - command.y - command.height,
            command.width, command.height, stroke=0, fill=1,
        )
    else:
        raise TypeError(f"Unknown draw command: {command!r}")
