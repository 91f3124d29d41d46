"""
Base renderer interface.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from talkdeck.models import Deck


class BaseRenderer(ABC):
    """Abstract base class for rendering delegates."""

    def __init__(self):
        self.name = self.__class__.__name__.replace("Renderer", "").lower()

    @abstractmethod
    def render(
        self,
        deck: Deck,
        output_dir: Path,
        output_format: Optional[str] = None,
        stem: Optional[str] = None,
    ) -> Path:
        """
        Render a deck into a slideshow artifact.

        Args:
            deck: Parsed deck (its source file is used when it has one)
            output_dir: Directory that receives the artifact
            output_format: Overrides the format named in the deck metadata
            stem: File name stem for decks without a source file

        Returns:
            Path to the produced artifact

        Raises:
            RenderError: the renderer is unavailable or rejected the input
        """
        pass
