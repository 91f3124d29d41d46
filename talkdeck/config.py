"""
Build settings read from the environment.

The CLI calls `load_dotenv()` first, so a `.env` file next to the document
works the same as exported variables.
"""

import os
from typing import Optional

from pydantic import BaseModel


class BuildSettings(BaseModel):
    """Defaults for a build; CLI flags take precedence."""

    renderer: str = "quarto"
    output_root: str = "output"
    output_format: Optional[str] = None

    @classmethod
    def from_env(cls) -> "BuildSettings":
        return cls(
            renderer=os.getenv("TALKDECK_RENDERER", "quarto"),
            output_root=os.getenv("TALKDECK_OUTPUT_DIR", "output"),
            output_format=os.getenv("TALKDECK_FORMAT") or None,
        )
