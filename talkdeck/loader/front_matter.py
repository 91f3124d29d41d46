"""
YAML metadata header handling.

The header is the block between an opening `---` on the first line and the
next `---` (or `...`) line.
"""

import datetime
from typing import Any, Dict, List, Optional, Tuple

import yaml
from pydantic import ValidationError

from talkdeck.exceptions import ParseError
from talkdeck.models import Author, DeckMetadata, ExecuteOptions

HEADER_OPEN = "---"
HEADER_CLOSE = ("---", "...")

KNOWN_KEYS = {"title", "subtitle", "author", "date", "format", "execute"}


def split_front_matter(lines: List[str]) -> Tuple[Optional[str], int]:
    """
    Split the header off a document.

    Returns:
        (header_text, body_start) where body_start is the 0-based index of
        the first body line. header_text is None when there is no header.
    """
    if not lines or lines[0].rstrip() != HEADER_OPEN:
        return None, 0

    for index in range(1, len(lines)):
        if lines[index].rstrip() in HEADER_CLOSE:
            return "\n".join(lines[1:index]), index + 1

    raise ParseError("metadata header is never closed", line=1)


def parse_header(text: str, first_line: int = 2) -> Dict[str, Any]:
    """Load header YAML; `first_line` is the document line the YAML starts on."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = first_line + mark.line if mark is not None else first_line
        problem = getattr(e, "problem", None) or str(e)
        raise ParseError(f"invalid metadata header: {problem}", line=line) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParseError("metadata header must be a mapping", line=first_line)
    return data


def build_metadata(header: Dict[str, Any]) -> DeckMetadata:
    """Normalize the loosely-typed header mapping into DeckMetadata."""
    output_format, format_options = _parse_format(header.get("format"))

    theme = format_options.get("theme")
    if isinstance(theme, list):
        theme = theme[0] if theme else None

    execute = header.get("execute") or {}
    if not isinstance(execute, dict):
        raise ParseError("'execute' must be a mapping", line=1)

    authors = _parse_authors(header.get("author"))
    try:
        return DeckMetadata(
            title=_as_text(header.get("title")),
            subtitle=_as_text(header.get("subtitle")),
            authors=authors,
            date=_as_text(header.get("date")),
            output_format=output_format,
            theme=str(theme) if theme is not None else None,
            incremental=bool(format_options.get("incremental", False)),
            format_options=format_options,
            execute=ExecuteOptions(**execute),
            extra={k: v for k, v in header.items() if k not in KNOWN_KEYS},
        )
    except ValidationError as e:
        raise ParseError(f"invalid metadata header: {e}", line=1) from e


def _as_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    return str(value)


def _parse_format(value: Any) -> Tuple[str, Dict[str, Any]]:
    if value is None:
        return "revealjs", {}
    if isinstance(value, str):
        return value, {}
    if isinstance(value, dict) and value:
        name, options = next(iter(value.items()))
        if options is None or options == "default":
            options = {}
        if not isinstance(options, dict):
            raise ParseError(f"options for format '{name}' must be a mapping", line=1)
        return str(name), dict(options)
    raise ParseError("'format' must be a format name or a mapping", line=1)


def _parse_authors(value: Any) -> List[Author]:
    if value is None:
        return []
    entries = value if isinstance(value, list) else [value]

    authors = []
    for entry in entries:
        if isinstance(entry, str):
            authors.append(Author(name=entry))
            continue
        if not isinstance(entry, dict) or not entry.get("name"):
            raise ParseError("each author needs a name", line=1)
        affiliation = entry.get("affiliation", entry.get("affiliations"))
        authors.append(
            Author(
                name=str(entry["name"]),
                email=_as_text(entry.get("email")),
                affiliation=_affiliation_text(affiliation),
            )
        )
    return authors


def _affiliation_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, dict):
        return _as_text(value.get("name"))
    if isinstance(value, list):
        names = [_affiliation_text(item) for item in value]
        return ", ".join(name for name in names if name) or None
    return str(value)
