"""Word-compatible HTML export.

Word opens HTML files that declare the Office namespaces and carry a
WordDocument settings block in a conditional comment. The body is the
shared HTML body; only the wrapper and the print stylesheet differ.
"""

from typing import Iterable

from mdexport.models.block import Block
from mdexport.renderers.html import DEFAULT_TITLE, escape, render_html_body

# A4 in points with 1 inch margins
_WORD_CSS = """\
@page WordSection1 {
    size: 595.3pt 841.9pt;
    margin: 72.0pt 72.0pt 72.0pt 72.0pt;
    mso-header-margin: 35.4pt;
    mso-footer-margin: 35.4pt;
    mso-paper-source: 0;
}
div.WordSection1 {
    page: WordSection1;
}
body {
    font-family: Calibri, Arial, sans-serif;
    font-size: 12pt;
    line-height: 1.5;
}
h1 { font-size: 24pt; }
h2 { font-size: 20pt; }
h3 { font-size: 18pt; }
h4 { font-size: 16pt; }
h5 { font-size: 14pt; }
h6 { font-size: 12pt; }
blockquote {
    margin-left: 18pt;
    padding-left: 9pt;
    border-left: solid #999999 2.25pt;
    color: #555555;
    mso-border-left-alt: solid #999999 2.25pt;
}
code {
    font-family: "Courier New", Courier, monospace;
    font-size: 10pt;
}
pre {
    font-family: "Courier New", Courier, monospace;
    font-size: 10pt;
    background: #f2f2f2;
    padding: 6pt;
    mso-shading: #f2f2f2;
}
"""

_WORD_SETTINGS = """\
<!--[if gte mso 9]><xml>
<w:WordDocument>
<w:View>Print</w:View>
<w:Zoom>100</w:Zoom>
<w:DoNotOptimizeForBrowser/>
</w:WordDocument>
</xml><![endif]-->"""


def render_word_html(blocks: Iterable[Block], title: str = DEFAULT_TITLE) -> str:
    """
    Render blocks as an HTML document Word opens as a native document.

    Args:
        blocks: Parsed blocks in source order
        title: Document title

    Returns:
        HTML string with Office namespace declarations and print styling
    """
    body = render_html_body(blocks)
    return (
        '<html xmlns:o="urn:schemas-microsoft-com:office:office" '
        'xmlns:w="urn:schemas-microsoft-com:office:word" '
        'xmlns="http://www.w3.org/TR/REC-html40">\n'
        "<head>\n"
        '<meta charset="utf-8">\n'
        '<meta name="ProgId" content="Word.Document">\n'
        '<meta name="Generator" content="Microsoft Word 15">\n'
        f"<title>{escape(title)}</title>\n"
        f"{_WORD_SETTINGS}\n"
        f"<style>\n{_WORD_CSS}</style>\n"
        "</head>\n"
        f'<body lang="EN-US">\n<div class="WordSection1">\n{body}\n</div>\n</body>\n'
        "</html>\n"
    )
