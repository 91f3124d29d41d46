"""
Delegate rendering to an external command-line renderer.

The default is the `quarto` executable:

    quarto render talk.qmd --to revealjs --output-dir output/talk

Failures are reported as RenderError with the renderer's stderr attached.
Nothing is retried.
"""

import os
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

from talkdeck.exceptions import RenderError
from talkdeck.models import Deck
from talkdeck.renderers.base import BaseRenderer
from talkdeck.writer import DocumentWriter

# Artifact extension per output format; anything else is treated as HTML.
ARTIFACT_SUFFIXES = {
    "revealjs": ".html",
    "html": ".html",
    "pptx": ".pptx",
    "beamer": ".pdf",
    "pdf": ".pdf",
}


class ExternalRenderer(BaseRenderer):
    """Run an external renderer on the deck's source document."""

    DEFAULT_BINARY = "quarto"
    SOURCE_SUFFIX = ".qmd"

    def __init__(
        self,
        binary: Optional[str] = None,
        writer: Optional[DocumentWriter] = None,
    ):
        super().__init__()
        self.binary = binary or os.getenv("TALKDECK_RENDERER", self.DEFAULT_BINARY)
        self.writer = writer or DocumentWriter()

    def build_command(self, source: Path, output_format: str, output_dir: Path) -> List[str]:
        return [
            self.binary,
            "render",
            str(source),
            "--to",
            output_format,
            "--output-dir",
            str(output_dir),
        ]

    def artifact_path(self, source: Path, output_format: str, output_dir: Path) -> Path:
        suffix = ARTIFACT_SUFFIXES.get(output_format, ".html")
        return output_dir / f"{source.stem}{suffix}"

    def prepare_source(self, deck: Deck, output_dir: Path, stem: Optional[str] = None) -> Path:
        """
        Return the document to hand to the renderer.

        The deck's own source file is used as-is when it exists; otherwise
        the deck is serialized into `output_dir`.
        """
        if deck.source_path and Path(deck.source_path).exists():
            return Path(deck.source_path)

        if stem is None:
            stem = Path(deck.source_path).stem if deck.source_path else "deck"
        source = output_dir / f"{stem}{self.SOURCE_SUFFIX}"
        source.write_text(self.writer.write(deck), encoding="utf-8")
        print(f"[Render] Wrote document to {source}")
        return source

    def render(
        self,
        deck: Deck,
        output_dir: Path,
        output_format: Optional[str] = None,
        stem: Optional[str] = None,
    ) -> Path:
        executable = shutil.which(self.binary)
        if executable is None:
            raise RenderError(f"Renderer '{self.binary}' not found on PATH")

        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        output_format = output_format or deck.meta.output_format
        source = self.prepare_source(deck, output_dir, stem=stem)
        command = self.build_command(source, output_format, output_dir.resolve())
        command[0] = executable

        print(f"[Render] {' '.join(command)}")
        try:
            completed = subprocess.run(
                command,
                capture_output=True,
                text=True,
            )
        except OSError as e:
            raise RenderError(f"Failed to start renderer '{self.binary}': {e}") from e

        if completed.returncode != 0:
            raise RenderError(
                f"Renderer '{self.binary}' exited with status {completed.returncode}",
                returncode=completed.returncode,
                stderr=completed.stderr,
            )

        artifact = self.artifact_path(source, output_format, output_dir)
        if not artifact.exists():
            raise RenderError(
                f"Renderer '{self.binary}' finished but produced no {artifact.name}",
                returncode=completed.returncode,
                stderr=completed.stderr,
            )

        print(f"[Render] Saved slideshow to {artifact}")
        return artifact
