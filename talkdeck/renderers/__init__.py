"""
Rendering delegates that turn a Deck into a viewable slideshow.

Rendering itself is done by an external tool invoked as a subprocess.
"""

from talkdeck.renderers.base import BaseRenderer
from talkdeck.renderers.external import ExternalRenderer

__all__ = ["BaseRenderer", "ExternalRenderer"]
