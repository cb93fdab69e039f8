"""Unit tests for HTML rendering."""

import pytest

from mdexport.markdown.parser import parse_blocks
from mdexport.models.block import RichTextRun
from mdexport.renderers.html import render_html, render_html_body, runs_to_html, theme_css


class TestRunsToHtml:
    """Tests for inline HTML conversion."""

    def test_flags_map_to_tags(self):
        """Test bold, italic and code wrapping."""
        html = runs_to_html([
            RichTextRun("a "),
            RichTextRun("b", bold=True),
            RichTextRun(" "),
            RichTextRun("c", italic=True),
            RichTextRun(" "),
            RichTextRun("d", code=True),
        ])

        assert html == "a <strong>b</strong> <em>c</em> <code>d</code>"

    def test_combined_flags_nest(self):
        """Test a bold italic code run nests all three tags."""
        html = runs_to_html([RichTextRun("x", bold=True, italic=True, code=True)])

        assert html == "<strong><em><code>x</code></em></strong>"

    def test_text_is_escaped(self):
        """Test special characters are escaped inside runs."""
        html = runs_to_html([RichTextRun("<a href=\"x\">'&'</a>")])

        assert html == "&lt;a href=&quot;x&quot;&gt;&#x27;&amp;&#x27;&lt;/a&gt;"


class TestRenderHtmlBody:
    """Tests for block-to-HTML body conversion."""

    def test_scenario_list_then_paragraph(self):
        """Test one <ul> wraps both items and closes before the paragraph."""
        body = render_html_body(parse_blocks("- a\n- b\n\nc"))

        assert body.count("<ul>") == 1
        assert body.count("</ul>") == 1
        assert body.count("<li>") == 2
        assert body == "<ul>\n<li>a</li>\n<li>b</li>\n</ul>\n<p>c</p>"

    def test_list_closed_at_end(self):
        """Test a trailing list is closed."""
        body = render_html_body(parse_blocks("1. one\n2. two"))

        assert body == "<ol>\n<li>one</li>\n<li>two</li>\n</ol>"

    def test_switching_list_kinds(self):
        """Test an ordered item after unordered ones closes the <ul>."""
        body = render_html_body(parse_blocks("- a\n1. b\n- c"))

        assert body == "<ul>\n<li>a</li>\n</ul>\n<ol>\n<li>b</li>\n</ol>\n<ul>\n<li>c</li>\n</ul>"

    def test_scenario_code_block(self):
        """Test fenced code renders as pre/code without highlighting."""
        body = render_html_body(parse_blocks("```py\nprint(1)\n```"))

        assert "<pre><code>print(1)</code></pre>" in body

    def test_code_block_escaped_not_formatted(self):
        """Test code content is escaped and never inline-formatted."""
        body = render_html_body(parse_blocks("```\nif a < b and **x**:\n```"))

        assert body == "<pre><code>if a &lt; b and **x**:</code></pre>"

    def test_heading_plain_text(self):
        """Test headings drop inline styling and are escaped."""
        body = render_html_body(parse_blocks("## A **bold** <tag>"))

        assert body == "<h2>A bold &lt;tag&gt;</h2>"

    def test_paragraph_inline_formatting(self):
        """Test paragraphs carry inline tags."""
        body = render_html_body(parse_blocks("Some **bold** and `code`"))

        assert body == "<p>Some <strong>bold</strong> and <code>code</code></p>"

    def test_quote_and_rule(self):
        """Test blockquote and hr output."""
        body = render_html_body(parse_blocks("> *quoted*\n---"))

        assert body == "<blockquote><p><em>quoted</em></p></blockquote>\n<hr>"

    def test_fallback_text_is_escaped(self):
        """Test literal markers from inline fallback are escaped text."""
        body = render_html_body(parse_blocks("a < 2 * b"))

        assert body == "<p>a &lt; 2 * b</p>"

    def test_empty(self):
        """Test no blocks gives an empty body."""
        assert render_html_body([]) == ""


class TestRenderHtml:
    """Tests for the complete HTML document."""

    def test_document_wrapper(self):
        """Test doctype, charset, inline style and body class."""
        html = render_html(parse_blocks("# Hi"))

        assert html.startswith("<!DOCTYPE html>")
        assert '<meta charset="utf-8">' in html
        assert "<style>" in html
        assert '<body class="markdown-body">' in html
        assert "<h1>Hi</h1>" in html
        assert html.rstrip().endswith("</html>")

    def test_empty_input_is_well_formed(self):
        """Test empty text renders an empty body document."""
        html = render_html(parse_blocks(""))

        assert '<body class="markdown-body">\n\n</body>' in html

    def test_idempotent(self):
        """Test rendering twice yields identical output."""
        blocks = parse_blocks("# T\n\n- a\n- b\n\n```\nx\n```")

        assert render_html(blocks) == render_html(blocks)

    def test_dark_theme(self):
        """Test theme selects the stylesheet."""
        light = render_html([], theme="light")
        dark = render_html([], theme="dark")

        assert "#ffffff" in light
        assert "#0d1117" in dark
        assert "#0d1117" not in light

    def test_unknown_theme(self):
        """Test unknown theme names are rejected."""
        with pytest.raises(ValueError, match="Unknown theme"):
            theme_css("sepia")

    def test_title_escaped(self):
        """Test the title is escaped."""
        html = render_html([], title="A & B")

        assert "<title>A &amp; B</title>" in html
