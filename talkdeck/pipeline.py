"""
Main orchestration pipeline for talkdeck.

Coordinates document loading, external rendering and the outline report.
"""

import json
from pathlib import Path
from typing import Optional

from talkdeck.audit import OutlineHTMLGenerator
from talkdeck.loader import DocumentLoader
from talkdeck.models import Deck
from talkdeck.renderers import BaseRenderer, ExternalRenderer


class DeckBuildPipeline:
    """
    One-shot build of a slide deck from its content document.

    Pipeline stages:
    1. Load: parse the document into a Deck (ParseError aborts the build
       before anything is written)
    2. (Optional) Save the parsed outline as JSON
    3. Render: hand the document to the external renderer
    4. (Optional) Outline: generate the HTML outline report
    """

    def __init__(
        self,
        renderer_binary: Optional[str] = None,
        output_format: Optional[str] = None,
        output_root: str = "output",
        generate_audit: bool = True,
        save_intermediate: bool = True,
        renderer: Optional[BaseRenderer] = None,
    ):
        """
        Initialize pipeline.

        Args:
            renderer_binary: External renderer executable (default: quarto)
            output_format: Override the format named in the document header
            output_root: Parent of the default per-document output directory
            generate_audit: Generate the outline HTML report
            save_intermediate: Save the parsed outline JSON
            renderer: Use this renderer instead of an ExternalRenderer
        """
        self.output_format = output_format
        self.output_root = Path(output_root)
        self.generate_audit = generate_audit
        self.save_intermediate = save_intermediate

        self.loader = DocumentLoader()
        self.renderer = renderer or ExternalRenderer(binary=renderer_binary)
        self.audit_generator = OutlineHTMLGenerator() if generate_audit else None

    def check(self, document_path: Path) -> Deck:
        """Parse a document without rendering it."""
        deck = self.loader.load(document_path)
        print(
            f"[Load] {document_path}: {len(deck.sections)} sections, "
            f"{len(deck.slides)} slides"
        )
        return deck

    def process(self, document_path: Path, output_dir: Optional[Path] = None) -> dict:
        """
        Build a document through the full pipeline.

        Args:
            document_path: Path to the content document
            output_dir: Output directory (default: <output_root>/<document stem>)

        Returns:
            Dictionary with paths to generated files:
            {
                "html": Path to the rendered slideshow,
                "outline": Path to outline JSON (if enabled),
                "audit": Path to outline HTML (if enabled)
            }
        """
        document_path = Path(document_path)

        if not document_path.exists():
            raise FileNotFoundError(f"Document not found: {document_path}")

        print(f"\n{'='*60}")
        print(f"talkdeck build")
        print(f"{'='*60}")
        print(f"Input: {document_path}")

        print(f"[Stage 1/2] Loading document")
        deck = self.check(document_path)

        if output_dir is None:
            output_dir = self.output_root / document_path.stem
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        print(f"Output: {output_dir}")

        outline_path = None
        if self.save_intermediate:
            outline_path = self._save_outline(deck, output_dir / f"{document_path.stem}.outline.json")

        print(f"\n[Stage 2/2] Rendering with {self.renderer.name}")
        html_path = self.renderer.render(deck, output_dir, output_format=self.output_format)

        audit_path = None
        if self.generate_audit and self.audit_generator:
            audit_path = self.audit_generator.generate(
                deck, output_dir / f"{document_path.stem}.outline.html"
            )

        self._print_summary(html_path, outline_path, audit_path)
        return {
            "html": html_path,
            "outline": outline_path,
            "audit": audit_path,
        }

    def _save_outline(self, deck: Deck, path: Path) -> Path:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(deck.to_dict(), f, indent=2, ensure_ascii=False)
        print(f"[Stage 1/2] Saved outline to {path}")
        return path

    @staticmethod
    def _print_summary(html_path, outline_path, audit_path) -> None:
        print(f"\n{'='*60}")
        print(f"✓ Build Complete")
        print(f"{'='*60}")
        print(f"Slideshow: {html_path}")
        if outline_path:
            print(f"Outline JSON: {outline_path}")
        if audit_path:
            print(f"Outline HTML: {audit_path}")
        print(f"{'='*60}\n")

    @classmethod
    def from_outline(
        cls,
        outline_path: Path,
        output_dir: Optional[Path] = None,
        renderer_binary: Optional[str] = None,
        output_format: Optional[str] = None,
        generate_audit: bool = True,
        renderer: Optional[BaseRenderer] = None,
    ) -> dict:
        """
        Render a deck from a saved outline JSON.

        The outline is serialized back into a document next to the output,
        so edits made to the JSON are what gets rendered.

        Returns:
            Dictionary with paths to generated files
        """
        outline_path = Path(outline_path)

        if not outline_path.exists():
            raise FileNotFoundError(f"Outline not found: {outline_path}")

        with open(outline_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        deck = Deck.from_dict(data)
        deck.source_path = None
        stem = outline_path.stem.replace(".outline", "")

        if output_dir is None:
            output_dir = outline_path.parent
        output_dir = Path(output_dir)

        print(f"\n{'='*60}")
        print(f"talkdeck build (from outline)")
        print(f"{'='*60}")
        print(f"Outline: {outline_path}")
        print(f"Output: {output_dir}")
        print(f"{'='*60}\n")

        pipeline = cls(
            renderer_binary=renderer_binary,
            output_format=output_format,
            generate_audit=generate_audit,
            save_intermediate=False,
            renderer=renderer,
        )

        print(f"[Stage 1/1] Rendering with {pipeline.renderer.name}")
        html_path = pipeline.renderer.render(
            deck, output_dir, output_format=output_format, stem=stem
        )

        audit_path = None
        if generate_audit and pipeline.audit_generator:
            audit_path = pipeline.audit_generator.generate(
                deck, output_dir / f"{stem}.outline.html"
            )

        pipeline._print_summary(html_path, None, audit_path)
        return {
            "html": html_path,
            "audit": audit_path,
        }
