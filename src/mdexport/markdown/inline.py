"""Inline Markdown to rich text conversion.

Interprets **bold**, *italic* and `code` spans (and their nesting) within a
single line. A "***" opener is read as bold around italic first and, if that
cannot close, as italic around bold, so both ***a* b** and ***a** b* parse.

Parsing is strict: an unterminated or empty delimiter is a parse failure,
and format_inline then falls back to the literal line so that one
malformed sequence never blocks rendering of a document.
"""

from dataclasses import dataclass
from typing import Optional

from mdexport.models.block import RichTextRun
from mdexport.services.exceptions import InlineParseError
from mdexport.utils.logging import get_logger

logger = get_logger(__name__)

BOLD = "**"
ITALIC = "*"
CODE = "`"


@dataclass(frozen=True)
class InlineParseResult:
    """Outcome of parse_inline: runs on success, error otherwise."""

    runs: Optional[list[RichTextRun]] = None
    error: Optional[InlineParseError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def parse_inline(line: str) -> InlineParseResult:
    """
    Parse inline Markdown into rich text runs.

    Args:
        line: Single line of Markdown without block prefix

    Returns:
        InlineParseResult carrying either merged runs or the parse error

    Example:
        >>> [(r.text, r.bold) for r in parse_inline("Some **bold** text").runs]
        [('Some ', False), ('bold', True), (' text', False)]
        >>> parse_inline("2 * 3").ok
        False
    """
    parser = _InlineParser(line)
    try:
        runs = parser.parse()
    except InlineParseError as e:
        return InlineParseResult(error=e)
    return InlineParseResult(runs=_merge_runs(runs))


def format_inline(line: str) -> list[RichTextRun]:
    """
    Convert a line to rich text runs, degrading to literal text on failure.

    Args:
        line: Single line of Markdown without block prefix

    Returns:
        List of runs; a single unstyled run holding the original line when
        the inline markup could not be interpreted
    """
    result = parse_inline(line)
    if result.ok:
        return result.runs

    logger.debug(
        "inline_parse_fallback",
        reason=result.error.reason,
        position=result.error.position,
    )
    if not line:
        return []
    return [RichTextRun(text=line)]


class _InlineParser:
    """Recursive scanner over one line of inline Markdown."""

    def __init__(self, text: str):
        self.text = text
        self.pos = 0
        # (pos, closer, bold, italic) -> error, so retries never rescan a dead end
        self._failed: dict[tuple, InlineParseError] = {}

    def parse(self) -> list[RichTextRun]:
        return self._parse_until(None, bold=False, italic=False)

    def _parse_until(self, closer: Optional[str], bold: bool, italic: bool) -> list[RichTextRun]:
        """Collect runs until `closer` (or end of text when closer is None)."""
        key = (self.pos, closer, bold, italic)
        if key in self._failed:
            raise self._failed[key]
        try:
            return self._scan(closer, bold, italic)
        except InlineParseError as e:
            self._failed[key] = e
            raise

    def _scan(self, closer: Optional[str], bold: bool, italic: bool) -> list[RichTextRun]:
        text = self.text
        runs: list[RichTextRun] = []
        buffer: list[str] = []
        start = self.pos

        def flush():
            if buffer:
                runs.append(RichTextRun(text="".join(buffer), bold=bold, italic=italic))
                buffer.clear()

        while self.pos < len(text):
            i = self.pos

            # Code spans are literal: no emphasis inside
            if text[i] == CODE:
                end = text.find(CODE, i + 1)
                if end == -1:
                    raise InlineParseError(text, i, "Unterminated code span")
                if end == i + 1:
                    raise InlineParseError(text, i, "Empty code span")
                flush()
                runs.append(RichTextRun(text=text[i + 1:end], bold=bold, italic=italic, code=True))
                self.pos = end + 1
                continue

            if text.startswith(BOLD, i):
                if closer == BOLD:
                    flush()
                    self._close(start, runs)
                    self.pos = i + len(BOLD)
                    return runs
                if not bold:
                    flush()
                    self.pos = i + len(BOLD)
                    try:
                        runs.extend(self._parse_until(BOLD, bold=True, italic=italic))
                    except InlineParseError:
                        if italic or not text.startswith(BOLD + ITALIC, i):
                            raise
                        # "***" read as italic around bold, as in ***a** b*
                        self.pos = i + len(ITALIC)
                        runs.extend(self._parse_until(ITALIC, bold=False, italic=True))
                    continue

            if text[i] == ITALIC:
                if closer == ITALIC:
                    flush()
                    self._close(start, runs)
                    self.pos = i + len(ITALIC)
                    return runs
                if not italic:
                    flush()
                    self.pos = i + len(ITALIC)
                    runs.extend(self._parse_until(ITALIC, bold=bold, italic=True))
                    continue
                raise InlineParseError(text, i, "Unexpected emphasis marker")

            buffer.append(text[i])
            self.pos = i + 1

        if closer is not None:
            raise InlineParseError(text, start, f"Unterminated '{closer}' span")

        flush()
        return runs

    def _close(self, start: int, runs: list[RichTextRun]) -> None:
        if not runs:
            raise InlineParseError(self.text, start, "Empty emphasis span")


def _merge_runs(runs: list[RichTextRun]) -> list[RichTextRun]:
    """Merge adjacent runs that share the same style flags."""
    merged: list[RichTextRun] = []
    for run in runs:
        if not run.text:
            continue
        if merged and merged[-1].same_style(run):
            previous = merged.pop()
            merged.append(RichTextRun(
                text=previous.text + run.text,
                bold=run.bold,
                italic=run.italic,
                code=run.code,
            ))
        else:
            merged.append(run)
    return merged
