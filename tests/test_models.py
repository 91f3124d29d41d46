"""
Tests for Deck data models.
"""

import pytest
from pydantic import ValidationError

from talkdeck.models import (
    Author,
    CodeBlock,
    Deck,
    DeckMetadata,
    DivBlock,
    ExecuteOptions,
    ListBlock,
    ListItem,
    ProseBlock,
    Section,
    Slide,
    iter_blocks,
)


def test_effective_echo_precedence():
    """Chunk option beats document option beats the default."""
    meta = DeckMetadata()
    assert CodeBlock(source="x").effective_echo(meta) is True

    meta = DeckMetadata(execute=ExecuteOptions(echo=False))
    assert CodeBlock(source="x").effective_echo(meta) is False
    assert CodeBlock(source="x", echo=True).effective_echo(meta) is True

    meta = DeckMetadata(execute=ExecuteOptions(echo="fenced"))
    assert CodeBlock(source="x").effective_echo(meta) is True


def test_effective_eval_precedence():
    assert CodeBlock(source="x").effective_eval(DeckMetadata()) is True

    meta = DeckMetadata(execute=ExecuteOptions(eval=False))
    assert CodeBlock(source="x").effective_eval(meta) is False
    assert CodeBlock(source="x", eval=True).effective_eval(meta) is True


def test_heading_level_validation():
    """Heading blocks are only for level 3 and deeper."""
    with pytest.raises(ValidationError):
        Slide(blocks=[{"kind": "heading", "level": 2, "text": "too shallow"}])


def test_deck_slides_order():
    """Front slides come first, then each section's slides in order."""
    deck = Deck(
        front_slides=[Slide(title="Title")],
        sections=[
            Section(title="One", slides=[Slide(title="A"), Slide(title="B")]),
            Section(title="Two", slides=[Slide(title="C")]),
        ],
    )

    assert [s.title for s in deck.slides] == ["Title", "A", "B", "C"]


def test_slide_notes_and_code_blocks():
    """Notes come from `.notes` divs; code blocks are found inside divs too."""
    slide = Slide(
        title="Demo",
        blocks=[
            ProseBlock(text="Intro"),
            DivBlock(classes=["columns"], blocks=[CodeBlock(language="python", source="pass")]),
            DivBlock(classes=["notes"], blocks=[ProseBlock(text="Say hello")]),
        ],
    )

    assert slide.notes == "Say hello"
    assert [b.source for b in slide.code_blocks()] == ["pass"]
    assert Slide(title="Empty").notes is None


def test_iter_blocks_is_depth_first():
    inner = ProseBlock(text="inner")
    div = DivBlock(blocks=[inner])
    after = ProseBlock(text="after")

    assert list(iter_blocks([div, after])) == [div, inner, after]


def test_deck_serialization():
    """Test Deck JSON serialization keeps nested block types."""
    deck = Deck(
        meta=DeckMetadata(title="Talk", authors=[Author(name="Ada")]),
        sections=[
            Section(
                title="One",
                slides=[
                    Slide(
                        title="A",
                        blocks=[
                            ListBlock(items=[ListItem(text="x"), ListItem(text="y", level=1)]),
                            DivBlock(
                                classes=["notes"],
                                blocks=[CodeBlock(language="python", source="1", echo=False)],
                            ),
                        ],
                    )
                ],
            )
        ],
    )

    # Serialize to dict
    data = deck.to_dict()
    assert "meta" in data
    assert "sections" in data
    assert data["sections"][0]["slides"][0]["blocks"][1]["kind"] == "div"

    # Deserialize from dict
    deck2 = Deck.from_dict(data)
    assert deck2 == deck
    code = deck2.sections[0].slides[0].blocks[1].blocks[0]
    assert isinstance(code, CodeBlock)
    assert code.echo is False
