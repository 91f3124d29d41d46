"""
talkdeck: build conference slide decks from a single content document.

Loads a markup document (YAML header, `#` sections, `##` slides, code
chunks, images and iframes) into an ordered Deck, then hands it to an
external renderer that produces the HTML slideshow.
"""

__version__ = "0.1.0"
__author__ = "talkdeck contributors"

from talkdeck.exceptions import ParseError, RenderError, TalkdeckError
from talkdeck.models import Deck, Section, Slide, CodeBlock, DeckMetadata
from talkdeck.loader import DocumentLoader
from talkdeck.pipeline import DeckBuildPipeline

__all__ = [
    "Deck",
    "Section",
    "Slide",
    "CodeBlock",
    "DeckMetadata",
    "DocumentLoader",
    "DeckBuildPipeline",
    "ParseError",
    "RenderError",
    "TalkdeckError",
]
