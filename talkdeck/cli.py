"""
Command-line interface for talkdeck.
"""

import sys
import argparse
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from talkdeck import __version__
from talkdeck.config import BuildSettings
from talkdeck.exceptions import TalkdeckError
from talkdeck.pipeline import DeckBuildPipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="talkdeck",
        description="talkdeck: build an HTML slideshow from a slide content document",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Build the slideshow into ./output/talk
  talkdeck talk.qmd

  # Only parse the document and report its structure
  talkdeck talk.qmd --check

  # Show the renderer command without running it
  talkdeck talk.qmd --dry-run

  # Render a previously saved outline
  talkdeck --from-outline output/talk/talk.outline.json

Environment Variables:
  TALKDECK_RENDERER     External renderer executable (default: quarto)
  TALKDECK_OUTPUT_DIR   Default output root (default: output)
  TALKDECK_FORMAT       Output format override (default: from document)
        """,
    )

    parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        help="Content document, or outline JSON (with --from-outline)",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"talkdeck {__version__}",
    )

    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        help="Output directory (default: <output root>/<document name>)",
    )

    parser.add_argument(
        "--to",
        dest="output_format",
        help="Output format passed to the renderer (default: from document header)",
    )

    parser.add_argument(
        "--renderer",
        help="External renderer executable",
    )

    parser.add_argument(
        "--check",
        action="store_true",
        help="Parse the document and print its outline, do not render",
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Parse the document and print the renderer command, do not render",
    )

    parser.add_argument(
        "--no-audit",
        action="store_true",
        help="Skip outline HTML generation",
    )

    parser.add_argument(
        "--no-intermediate",
        action="store_true",
        help="Don't save the outline JSON",
    )

    parser.add_argument(
        "--from-outline",
        action="store_true",
        help="Render from a saved outline JSON instead of a document",
    )

    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print tracebacks on errors",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    load_dotenv()  # Load .env file if present

    parser = build_parser()
    args = parser.parse_args(argv)
    settings = BuildSettings.from_env()

    # Validate input
    if not args.input:
        parser.print_help()
        return 1

    if not args.input.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    renderer_binary = args.renderer or settings.renderer
    output_format = args.output_format or settings.output_format

    try:
        if args.from_outline:
            DeckBuildPipeline.from_outline(
                outline_path=args.input,
                output_dir=args.output,
                renderer_binary=renderer_binary,
                output_format=output_format,
                generate_audit=not args.no_audit,
            )
            return 0

        pipeline = DeckBuildPipeline(
            renderer_binary=renderer_binary,
            output_format=output_format,
            output_root=settings.output_root,
            generate_audit=not args.no_audit,
            save_intermediate=not args.no_intermediate,
        )

        if args.check:
            deck = pipeline.check(args.input)
            print_outline(deck)
            return 0

        if args.dry_run:
            deck = pipeline.check(args.input)
            output_dir = args.output or pipeline.output_root / args.input.stem
            command = pipeline.renderer.build_command(
                args.input,
                output_format or deck.meta.output_format,
                output_dir,
            )
            print(" ".join(str(part) for part in command))
            return 0

        pipeline.process(document_path=args.input, output_dir=args.output)
        return 0

    except KeyboardInterrupt:
        print("\n\nInterrupted by user", file=sys.stderr)
        return 130

    except (TalkdeckError, OSError, ValueError) as e:
        print(f"\nError: {e}", file=sys.stderr)
        if args.debug:
            import traceback
            traceback.print_exc()
        return 1


def print_outline(deck) -> None:
    """Print sections and slides, one per line, in presentation order."""
    if deck.meta.title:
        print(deck.meta.title)
    for slide in deck.front_slides:
        print(f"  - {slide.title or '(untitled)'}")
    for section in deck.sections:
        print(f"# {section.title}")
        for slide in section.slides:
            marker = " [incremental]" if slide.incremental else ""
            print(f"  - {slide.title or '(untitled)'}{marker}")


if __name__ == "__main__":
    sys.exit(main())
