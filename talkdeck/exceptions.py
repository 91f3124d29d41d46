"""
Errors raised while loading or rendering a deck.

Both kinds are terminal: a build that hits one is aborted and the error is
reported to whoever started it.
"""

from typing import Optional


class TalkdeckError(Exception):
    """Base class for all talkdeck errors."""


class ParseError(TalkdeckError):
    """The content document is malformed."""

    def __init__(self, message: str, line: Optional[int] = None):
        self.message = message
        self.line = line
        if line is not None:
            super().__init__(f"line {line}: {message}")
        else:
            super().__init__(message)


class RenderError(TalkdeckError):
    """The external renderer is unavailable or rejected the document."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
    ):
        self.message = message
        self.returncode = returncode
        self.stderr = stderr
        if stderr:
            message = f"{message}\n{stderr.rstrip()}"
        super().__init__(message)
