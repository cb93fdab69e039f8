"""End-to-end tests: Markdown text through parser, renderers and history."""

from textwrap import dedent

from mdexport import (
    HistoryStore,
    MemoryStorage,
    parse_blocks,
    render_document,
    render_html,
    render_plain_text,
    render_word_html,
    write_pdf,
)
from mdexport.models.block import BlockKind

DOCUMENT = dedent("""\
    # Release Notes

    Some **bold** and *italic* text with `code`.

    ## Changes
    - Faster parser
    - Fewer bugs
    1. Install
    2. Run

    > Quoted *remark*

    ```python
    def main():
        return 0
    ```

    ---
    Done.""")


class TestFullPipeline:
    """Tests running every renderer over one document."""

    def test_block_sequence(self):
        blocks = parse_blocks(DOCUMENT)

        assert [b.kind for b in blocks] == [
            BlockKind.HEADING,
            BlockKind.PARAGRAPH,
            BlockKind.HEADING,
            BlockKind.UNORDERED_LIST_ITEM,
            BlockKind.UNORDERED_LIST_ITEM,
            BlockKind.ORDERED_LIST_ITEM,
            BlockKind.ORDERED_LIST_ITEM,
            BlockKind.QUOTE,
            BlockKind.CODE_BLOCK,
            BlockKind.HORIZONTAL_RULE,
            BlockKind.PARAGRAPH,
        ]

    def test_html(self):
        html = render_html(parse_blocks(DOCUMENT))

        assert "<h1>Release Notes</h1>" in html
        assert "<ul>\n<li>Faster parser</li>\n<li>Fewer bugs</li>\n</ul>\n<ol>" in html
        assert "<blockquote><p>Quoted <em>remark</em></p></blockquote>" in html
        assert "<pre><code>def main():\n    return 0</code></pre>" in html

    def test_word(self):
        assert "<h2>Changes</h2>" in render_word_html(parse_blocks(DOCUMENT))

    def test_plain_text(self):
        text = render_plain_text(parse_blocks(DOCUMENT))

        assert text.splitlines()[:2] == [
            "Release Notes",
            "Some bold and italic text with code.",
        ]
        assert "def main():\n    return 0\n---\nDone." in text
        assert "#" not in text
        assert "**" not in text

    def test_pdf(self):
        pages = render_document(parse_blocks(DOCUMENT))

        assert len(pages) == 1
        assert write_pdf(pages).startswith(b"%PDF-")

    def test_empty_input_every_renderer(self):
        """Test empty text yields well-formed output from every renderer."""
        blocks = parse_blocks("")

        assert "<body" in render_html(blocks)
        assert "WordSection1" in render_word_html(blocks)
        assert len(render_document(blocks)) == 1
        assert render_plain_text(blocks) == ""

    def test_history_session(self):
        """Test committing edits then resuming the last session."""
        storage = MemoryStorage()
        store = HistoryStore(storage, max_items=20)
        store.commit(DOCUMENT)
        store.commit(DOCUMENT + "\n\nMore.")
        store.commit(DOCUMENT)

        reopened = HistoryStore(storage, max_items=20)

        assert len(reopened) == 2
        assert reopened.resume() == DOCUMENT
        assert reopened.items[0].title == DOCUMENT[:50] + "..."
