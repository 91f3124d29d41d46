"""
Line patterns and attribute parsing shared by the loader and writer.
"""

import re
from typing import Dict, List, Optional, Tuple

HEADING_RE = re.compile(r"^(#{1,6})(?:\s+(.*?))?\s*$")
HEADING_ATTRS_RE = re.compile(r"^(.*?)\s*\{([^{}]*)\}\s*$")
SLIDE_BREAK_RE = re.compile(r"^ {0,3}-{3,}\s*$")
SETEXT_UNDERLINE_RE = re.compile(r"^ {0,3}(=+|-{2,})\s*$")
FENCE_RE = re.compile(r"^( {0,3})(`{3,}|~{3,})\s*(.*?)\s*$")
DIV_OPEN_RE = re.compile(r"^ {0,3}(:{3,})\s*([^:\s].*?)\s*$")
DIV_CLOSE_RE = re.compile(r"^ {0,3}:{3,}\s*$")
LIST_ITEM_RE = re.compile(r"^(\s*)([-*+]|\d+[.)])(?:\s+(.*?))?\s*$")
IMAGE_RE = re.compile(
    r"^\s*!\[(?P<alt>[^\]]*)\]\((?P<src>[^)\s]+)(?:\s+\"(?P<title>[^\"]*)\")?\)"
    r"(?:\{(?P<attrs>[^}]*)\})?\s*$"
)
IFRAME_START_RE = re.compile(r"^\s*<iframe\b", re.IGNORECASE)
IFRAME_END_RE = re.compile(r"</iframe\s*>|/>\s*$", re.IGNORECASE)
IFRAME_TAG_RE = re.compile(r"<iframe\b(?P<attrs>[^>]*?)/?>", re.IGNORECASE | re.DOTALL)
HTML_ATTR_RE = re.compile(
    r"([A-Za-z_:][-\w:.]*)(?:\s*=\s*(?:\"([^\"]*)\"|'([^']*)'|([^\s\"'>]+)))?"
)
CHUNK_OPTION_RE = re.compile(r"^\s*(?:#\||//\||--\||%%\|)\s?(.*)$")

_ATTR_TOKEN_RE = re.compile(
    r"#(?P<id>[^\s}]+)"
    r"|\.(?P<cls>[^\s}]+)"
    r"|(?P<key>[-\w]+)=(?:\"(?P<dq>[^\"]*)\"|'(?P<sq>[^']*)'|(?P<bare>[^\s}]+))"
    r"|(?P<word>[^\s}]+)"
)

# Languages whose chunk options use a comment prefix other than `#|`.
OPTION_PREFIXES = {
    "js": "//|",
    "ojs": "//|",
    "javascript": "//|",
    "dot": "//|",
    "sql": "--|",
    "mermaid": "%%|",
}


def parse_attributes(text: str) -> Tuple[Optional[str], List[str], Dict[str, str]]:
    """
    Parse a `{#id .class key=value}` attribute block (braces optional).

    Bare words are treated as classes so that `::: notes` and
    `::: {.notes}` mean the same thing.
    """
    text = text.strip()
    if text.startswith("{") and text.endswith("}"):
        text = text[1:-1]

    identifier = None
    classes: List[str] = []
    attrs: Dict[str, str] = {}
    for match in _ATTR_TOKEN_RE.finditer(text):
        if match.group("id"):
            identifier = match.group("id")
        elif match.group("cls"):
            classes.append(match.group("cls"))
        elif match.group("key"):
            value = match.group("dq")
            if value is None:
                value = match.group("sq")
            if value is None:
                value = match.group("bare")
            attrs[match.group("key")] = value
        else:
            classes.append(match.group("word"))
    return identifier, classes, attrs


def format_attributes(
    identifier: Optional[str], classes: List[str], attrs: Dict[str, str]
) -> str:
    """Inverse of `parse_attributes`; returns "" when there is nothing to write."""
    parts = []
    if identifier:
        parts.append(f"#{identifier}")
    parts.extend(f".{cls}" for cls in classes)
    for key, value in attrs.items():
        parts.append(f'{key}="{value}"')
    return "{" + " ".join(parts) + "}" if parts else ""


def parse_html_attributes(text: str) -> Dict[str, str]:
    attrs: Dict[str, str] = {}
    for match in HTML_ATTR_RE.finditer(text):
        value = next((g for g in match.groups()[1:] if g is not None), "")
        attrs[match.group(1).lower()] = value
    return attrs


def is_block_start(line: str) -> bool:
    """True if `line` opens a construct that interrupts a paragraph."""
    return bool(
        HEADING_RE.match(line)
        or SLIDE_BREAK_RE.match(line)
        or FENCE_RE.match(line)
        or DIV_OPEN_RE.match(line)
        or DIV_CLOSE_RE.match(line)
        or IFRAME_START_RE.match(line)
        or IMAGE_RE.match(line)
        or LIST_ITEM_RE.match(line)
    )
