"""
Advanced usage examples for talkdeck.

Shows how to:
- Check a document without rendering
- Inspect code chunks and their echo settings
- Render to another format
- Rebuild from a saved outline JSON
"""

from pathlib import Path
from talkdeck import DeckBuildPipeline, DocumentLoader, ParseError


def example_check_only():
    """Parse the document and list its slides."""
    print("\n[Example 1] Check only")

    try:
        deck = DocumentLoader().load(Path("examples/talk.qmd"))
    except ParseError as e:
        print(f"✗ {e}")
        return

    for number, slide in enumerate(deck.slides, start=1):
        print(f"  {number:2d}. {slide.title or '(untitled)'}")


def example_code_chunks():
    """Show which chunks will display their source."""
    print("\n[Example 2] Code chunks")

    deck = DocumentLoader().load(Path("examples/talk.qmd"))
    for slide in deck.slides:
        for chunk in slide.code_blocks():
            echo = chunk.effective_echo(deck.meta)
            print(f"  {slide.title}: {chunk.language} label={chunk.label} echo={echo}")


def example_other_format():
    """Render the same document as a standalone HTML page."""
    print("\n[Example 3] HTML page instead of revealjs")

    pipeline = DeckBuildPipeline(output_format="html", generate_audit=False)
    result = pipeline.process(
        document_path=Path("examples/talk.qmd"),
        output_dir=Path("output/talk_html"),
    )

    print(f"✓ HTML: {result['html']}")


def example_from_outline():
    """Rebuild from an outline saved by a previous run."""
    print("\n[Example 4] Rebuild from outline JSON")

    result = DeckBuildPipeline.from_outline(
        outline_path=Path("output/talk/talk.outline.json"),
        output_dir=Path("output/talk_rebuilt"),
    )

    print(f"✓ Slideshow: {result['html']}")


if __name__ == "__main__":
    example_check_only()
    example_code_chunks()

    # Uncomment to run (requires quarto):
    # example_other_format()
    # example_from_outline()
