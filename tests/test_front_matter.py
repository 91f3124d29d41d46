"""
Tests for metadata header parsing.
"""

import pytest

from talkdeck.exceptions import ParseError
from talkdeck.loader import DocumentLoader, build_metadata, split_front_matter


def test_split_front_matter():
    lines = ["---", "title: T", "---", "", "# S"]
    header, body_start = split_front_matter(lines)

    assert header == "title: T"
    assert body_start == 3


def test_split_without_header():
    header, body_start = split_front_matter(["# S"])

    assert header is None
    assert body_start == 0


def test_header_closed_with_dots():
    header, body_start = split_front_matter(["---", "title: T", "...", "body"])

    assert header == "title: T"
    assert body_start == 3


def test_sample_metadata(sample_text):
    meta = DocumentLoader().parse(sample_text).meta

    assert meta.subtitle == "Contracts for duck-typed code"
    assert meta.date == "2024-07-10"
    assert meta.output_format == "revealjs"
    assert meta.theme == "simple"
    assert meta.format_options == {"theme": "simple", "slide-number": True}
    assert meta.execute.echo is True
    assert [a.name for a in meta.authors] == ["Ada Example", "Grace Sample"]
    assert meta.authors[0].email == "ada@example.org"
    assert meta.authors[0].affiliation == "Example University"
    assert meta.authors[1].email is None


def test_author_forms():
    assert [a.name for a in build_metadata({"author": "Solo"}).authors] == ["Solo"]

    meta = build_metadata(
        {
            "author": {
                "name": "Ada",
                "affiliations": [{"name": "Lab A"}, {"name": "Lab B"}],
            }
        }
    )
    assert meta.authors[0].affiliation == "Lab A, Lab B"

    with pytest.raises(ParseError):
        build_metadata({"author": [{"email": "nobody@example.org"}]})


def test_format_forms():
    assert build_metadata({"format": "html"}).output_format == "html"
    assert build_metadata({}).output_format == "revealjs"
    assert build_metadata({"format": {"revealjs": "default"}}).format_options == {}

    meta = build_metadata({"format": {"revealjs": {"theme": ["dark", "custom.scss"]}}})
    assert meta.theme == "dark"

    with pytest.raises(ParseError):
        build_metadata({"format": 3})


def test_unknown_keys_kept_as_extra():
    meta = build_metadata({"title": "T", "bibliography": "refs.bib"})

    assert meta.extra == {"bibliography": "refs.bib"}


def test_execute_must_be_mapping():
    with pytest.raises(ParseError):
        build_metadata({"execute": "yes"})


def test_unterminated_header():
    with pytest.raises(ParseError) as exc_info:
        DocumentLoader().parse("---\ntitle: T\n\n# S\n")

    assert exc_info.value.line == 1


def test_invalid_yaml_reports_document_line():
    with pytest.raises(ParseError) as exc_info:
        DocumentLoader().parse("---\ntitle: T\nauthor: [unclosed\n---\n")

    assert exc_info.value.line is not None
    assert exc_info.value.line >= 2


def test_header_must_be_mapping():
    with pytest.raises(ParseError):
        DocumentLoader().parse("---\n- a\n- b\n---\n")


def test_execute_echo_fenced():
    """`echo: fenced` is accepted document-wide, as it is per chunk."""
    text = "---\nexecute:\n  echo: fenced\n---\n\n## S\n\n```{python}\nx\n```\n"
    deck = DocumentLoader().parse(text)

    assert deck.meta.execute.echo == "fenced"
    assert deck.slides[0].code_blocks()[0].effective_echo(deck.meta) is True
