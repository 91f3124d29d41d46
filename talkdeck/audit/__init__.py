"""
Outline HTML generator for QA.

Creates a static HTML report of a parsed deck's structure.
"""

from talkdeck.audit.html_generator import OutlineHTMLGenerator

__all__ = ["OutlineHTMLGenerator"]
