"""
Basic usage example for talkdeck.

This example shows how to build the sample talk into an HTML slideshow
using the Python API. Requires the `quarto` executable on PATH.
"""

from pathlib import Path
from talkdeck import DeckBuildPipeline


def main():
    # Initialize pipeline with default settings (quarto, format from the header)
    pipeline = DeckBuildPipeline(
        generate_audit=True,  # Generate outline HTML for QA
        save_intermediate=True,  # Save outline JSON
    )

    # Build the document
    document_path = Path("examples/talk.qmd")
    output_dir = Path("output/talk")

    result = pipeline.process(document_path=document_path, output_dir=output_dir)

    print("\n✓ Build complete!")
    print(f"  Slideshow: {result['html']}")
    print(f"  Outline JSON: {result['outline']}")
    print(f"  Outline HTML: {result['audit']}")


if __name__ == "__main__":
    main()
