"""
Tests for the outline HTML report.
"""

from talkdeck.audit import OutlineHTMLGenerator
from talkdeck.audit.html_generator import describe_block
from talkdeck.loader import DocumentLoader
from talkdeck.models import CodeBlock, DeckMetadata, ExecuteOptions


def test_report_lists_slides_in_order(sample_text, tmp_path):
    deck = DocumentLoader().parse(sample_text)

    path = OutlineHTMLGenerator().generate(deck, tmp_path / "report" / "talk.outline.html")
    html = path.read_text(encoding="utf-8")

    assert html.index("Why interfaces?") < html.index("A first check") < html.index("Demo")
    assert "Interface Testing in Practice" in html
    assert "Ada Example (Example University)" in html
    assert "incremental" in html
    assert "Mention the abc module." in html
    assert "https://example.org/demo" in html


def test_report_escapes_content(tmp_path):
    deck = DocumentLoader().parse("## Risky\n\n<b>not html</b> & more\n")

    html = OutlineHTMLGenerator().generate(deck, tmp_path / "o.html").read_text(encoding="utf-8")

    assert "&lt;b&gt;not html&lt;/b&gt; &amp; more" in html


def test_describe_code_block():
    meta = DeckMetadata(execute=ExecuteOptions(echo=False))
    chunk = CodeBlock(language="python", source="a\nb", executable=True, label="fig-demo")

    assert describe_block(chunk, meta) == "python | #fig-demo | executed | no echo | 2 lines"
    assert describe_block(CodeBlock(source="x"), meta) == "text | 1 lines"


def test_describe_code_block_uses_document_eval():
    meta = DeckMetadata(execute=ExecuteOptions(eval=False))

    assert describe_block(CodeBlock(language="python", source="x", executable=True), meta) == (
        "python | not evaluated | echo | 1 lines"
    )
    assert describe_block(
        CodeBlock(language="python", source="x", executable=True, eval=True), meta
    ) == "python | executed | echo | 1 lines"
    assert describe_block(CodeBlock(language="html", source="<b>x</b>", raw=True), meta) == (
        "html | raw | 1 lines"
    )
