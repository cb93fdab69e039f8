"""Unit tests for Word-compatible HTML rendering."""

from mdexport.markdown.parser import parse_blocks
from mdexport.renderers.html import render_html_body
from mdexport.renderers.word import render_word_html


class TestRenderWordHtml:
    """Tests for the Word document wrapper."""

    def test_office_namespaces(self):
        """Test xmlns:o and xmlns:w declarations."""
        html = render_word_html([])

        assert 'xmlns:o="urn:schemas-microsoft-com:office:office"' in html
        assert 'xmlns:w="urn:schemas-microsoft-com:office:word"' in html

    def test_word_metadata(self):
        """Test ProgId meta and conditional WordDocument block."""
        html = render_word_html([])

        assert '<meta name="ProgId" content="Word.Document">' in html
        assert "<!--[if gte mso 9]>" in html
        assert "<w:WordDocument>" in html
        assert "<![endif]-->" in html

    def test_print_stylesheet(self):
        """Test A4 page size and section wrapper."""
        html = render_word_html([])

        assert "@page WordSection1" in html
        assert "size: 595.3pt 841.9pt" in html
        assert '<div class="WordSection1">' in html

    def test_shares_body_with_html_renderer(self):
        """Test the body is the shared block-to-HTML output."""
        blocks = parse_blocks("# T\n\n- a\n- b\n\n> q\n\n```\ncode\n```")

        html = render_word_html(blocks)

        assert render_html_body(blocks) in html

    def test_structure_preserved(self):
        """Test headings, lists, quotes and code survive."""
        html = render_word_html(parse_blocks("## H\n1. one\n> q\n```\nx\n```"))

        assert "<h2>H</h2>" in html
        assert "<ol>\n<li>one</li>\n</ol>" in html
        assert "<blockquote>" in html
        assert "<pre><code>x</code></pre>" in html
