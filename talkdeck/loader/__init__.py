"""
Document loading: content document text into an ordered Deck.
"""

from talkdeck.loader.document import DocumentLoader
from talkdeck.loader.front_matter import build_metadata, split_front_matter

__all__ = ["DocumentLoader", "build_metadata", "split_front_matter"]
