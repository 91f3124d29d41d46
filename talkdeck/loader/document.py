"""
Document loader: parse a content document into a Deck.

A `#` heading opens a section, a `##` heading (or a bare `---` line) opens
a slide. Code chunks, images, iframes and fenced divs are kept as leaf
blocks of whichever slide or section they appear in.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from talkdeck.exceptions import ParseError
from talkdeck.loader.front_matter import build_metadata, parse_header, split_front_matter
from talkdeck.loader.syntax import (
    CHUNK_OPTION_RE,
    DIV_CLOSE_RE,
    DIV_OPEN_RE,
    FENCE_RE,
    HEADING_ATTRS_RE,
    HEADING_RE,
    IFRAME_END_RE,
    IFRAME_START_RE,
    IFRAME_TAG_RE,
    IMAGE_RE,
    LIST_ITEM_RE,
    SETEXT_UNDERLINE_RE,
    SLIDE_BREAK_RE,
    is_block_start,
    parse_attributes,
    parse_html_attributes,
)
from talkdeck.models import (
    Block,
    CodeBlock,
    Deck,
    DeckMetadata,
    DivBlock,
    HeadingBlock,
    IFrameBlock,
    ImageBlock,
    ListBlock,
    ListItem,
    ProseBlock,
    Section,
    Slide,
    iter_blocks,
)


class DocumentLoader:
    """
    Parse content documents into Decks.

    Parsing is pure: the same text always yields an equal Deck, and nothing
    is reordered, merged or dropped.
    """

    def load(self, path: Union[str, Path]) -> Deck:
        """Read and parse a document from disk."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Document not found: {path}")

        text = path.read_text(encoding="utf-8")
        return self.parse(text, source_path=str(path))

    def parse(self, text: str, source_path: Optional[str] = None) -> Deck:
        """Parse document text."""
        # A leading byte-order mark would hide the header.
        if text.startswith("\ufeff"):
            text = text[1:]
        lines = text.replace("\r\n", "\n").replace("\r", "\n").split("\n")

        header, body_start = split_front_matter(lines)
        if header is None:
            meta = DeckMetadata()
        else:
            meta = build_metadata(parse_header(header, first_line=2))

        deck = _BodyParser(lines, body_start, meta).parse()
        deck.source_path = source_path
        return deck


class _BodyParser:
    """Cursor over the document body. `pos` is a 0-based line index."""

    def __init__(self, lines: List[str], start: int, meta: DeckMetadata):
        self.lines = lines
        self.pos = start
        self.meta = meta

    @property
    def lineno(self) -> int:
        return self.pos + 1

    def parse(self) -> Deck:
        deck = Deck(meta=self.meta)
        section: Optional[Section] = None
        slide: Optional[Slide] = None

        while self.pos < len(self.lines):
            line = self.lines[self.pos]

            if not line.strip():
                self.pos += 1
                continue

            heading = self._slide_heading()
            if heading:
                level, text, width = heading
                title, identifier, classes, attrs = _split_heading(text)
                if level == 1:
                    if not title:
                        raise ParseError("section heading has no title", line=self.lineno)
                    section = Section(
                        title=title,
                        identifier=identifier,
                        classes=classes,
                        attributes=attrs,
                        line=self.lineno,
                    )
                    deck.sections.append(section)
                    slide = None
                else:
                    slide = Slide(
                        title=title or None,
                        identifier=identifier,
                        classes=classes,
                        attributes=attrs,
                        line=self.lineno,
                    )
                    (section.slides if section else deck.front_slides).append(slide)
                self.pos += width
                continue

            if SLIDE_BREAK_RE.match(line):
                slide = Slide(line=self.lineno)
                (section.slides if section else deck.front_slides).append(slide)
                self.pos += 1
                continue

            if DIV_CLOSE_RE.match(line):
                raise ParseError("closing ':::' without an open div", line=self.lineno)

            block = self._read_block()
            if slide is not None:
                slide.blocks.append(block)
            elif section is not None:
                section.blocks.append(block)
            else:
                deck.preamble.append(block)

        for each in deck.slides:
            each.incremental = self._is_incremental(each)
        return deck

    def _slide_heading(self):
        """(level, text, lines used) when the cursor is on a `#` or `##` heading."""
        line = self.lines[self.pos]
        atx = HEADING_RE.match(line)
        if atx:
            level = len(atx.group(1))
            return (level, atx.group(2), 1) if level <= 2 else None
        level = self._setext_level()
        if level:
            return level, line, 2
        return None

    def _setext_level(self) -> Optional[int]:
        """Level of a `Title` line underlined with `===` (1) or `---` (2)."""
        if self.pos + 1 >= len(self.lines) or is_block_start(self.lines[self.pos]):
            return None
        underline = SETEXT_UNDERLINE_RE.match(self.lines[self.pos + 1])
        if underline is None:
            return None
        return 1 if underline.group(1).startswith("=") else 2

    def _is_incremental(self, slide: Slide) -> bool:
        if "nonincremental" in slide.classes:
            return False
        if "incremental" in slide.classes:
            return True
        for block in iter_blocks(slide.blocks):
            if isinstance(block, DivBlock) and "incremental" in block.classes:
                return True
        return self.meta.incremental

    # --- blocks ---

    def _read_block(self) -> Block:
        """Read one block starting at the current (non-blank) line."""
        line = self.lines[self.pos]

        if FENCE_RE.match(line):
            return self._read_code()
        if DIV_OPEN_RE.match(line):
            return self._read_div()
        if IFRAME_START_RE.match(line):
            return self._read_iframe()

        image = IMAGE_RE.match(line)
        if image:
            return self._read_image(image)

        heading = HEADING_RE.match(line)
        if heading:
            level = len(heading.group(1))
            if level <= 2:
                raise ParseError("slide heading inside a div", line=self.lineno)
            block = HeadingBlock(level=level, text=heading.group(2) or "", line=self.lineno)
            self.pos += 1
            return block
        if self._setext_level():
            raise ParseError("slide heading inside a div", line=self.lineno)

        if LIST_ITEM_RE.match(line):
            return self._read_list()
        return self._read_prose()

    def _read_prose(self) -> ProseBlock:
        start = self.lineno
        collected = [self.lines[self.pos].strip()]
        self.pos += 1
        while self.pos < len(self.lines):
            line = self.lines[self.pos]
            if not line.strip() or is_block_start(line):
                break
            collected.append(line.strip())
            self.pos += 1
        return ProseBlock(text="\n".join(collected), line=start)

    def _read_list(self) -> ListBlock:
        start = self.lineno
        first = LIST_ITEM_RE.match(self.lines[self.pos])
        ordered = first.group(2)[0].isdigit()
        items: List[ListItem] = []
        indents: List[int] = []

        while self.pos < len(self.lines):
            line = self.lines[self.pos]

            if not line.strip():
                nxt = self._next_nonblank()
                following = LIST_ITEM_RE.match(self.lines[nxt]) if nxt is not None else None
                if following and following.group(2)[0].isdigit() == ordered:
                    self.pos = nxt
                    continue
                break

            item = LIST_ITEM_RE.match(line)
            if item:
                indent = len(item.group(1).expandtabs(4))
                while indents and indents[-1] > indent:
                    indents.pop()
                if not indents or indents[-1] < indent:
                    indents.append(indent)
                items.append(ListItem(text=item.group(3) or "", level=len(indents) - 1))
                self.pos += 1
                continue

            if is_block_start(line) and not line[:1].isspace():
                break

            # Continuation of the previous item.
            last = items[-1]
            last.text = f"{last.text} {line.strip()}".strip()
            self.pos += 1

        return ListBlock(ordered=ordered, items=items, line=start)

    def _read_code(self) -> CodeBlock:
        start = self.lineno
        fence = FENCE_RE.match(self.lines[self.pos])
        indent = len(fence.group(1))
        marker = fence.group(2)
        language, executable, raw, options = _parse_fence_info(fence.group(3), start)
        self.pos += 1

        body: List[str] = []
        while True:
            if self.pos >= len(self.lines):
                raise ParseError("code block is never closed", line=start)
            line = self.lines[self.pos]
            closing = FENCE_RE.match(line)
            if (
                closing
                and closing.group(2)[0] == marker[0]
                and len(closing.group(2)) >= len(marker)
                and not closing.group(3)
            ):
                self.pos += 1
                break
            body.append(_dedent(line, indent))
            self.pos += 1

        if executable:
            option_lines = []
            while body and CHUNK_OPTION_RE.match(body[0]):
                option_lines.append(CHUNK_OPTION_RE.match(body.pop(0)).group(1))
            if option_lines:
                options.update(_parse_chunk_options(option_lines, start + 1))

        return CodeBlock(
            language=language,
            source="\n".join(body),
            executable=executable,
            raw=raw,
            label=_option_text(options.get("label")),
            echo=_option_flag(options, "echo", start),
            eval=_option_flag(options, "eval", start),
            options=options,
            line=start,
        )

    def _read_div(self) -> DivBlock:
        start = self.lineno
        opening = DIV_OPEN_RE.match(self.lines[self.pos])
        identifier, classes, attrs = parse_attributes(opening.group(2))
        if identifier:
            attrs = {"id": identifier, **attrs}
        self.pos += 1

        blocks: List[Block] = []
        while True:
            if self.pos >= len(self.lines):
                raise ParseError("div is never closed", line=start)
            line = self.lines[self.pos]
            if not line.strip():
                self.pos += 1
                continue
            if DIV_CLOSE_RE.match(line):
                self.pos += 1
                break
            if SLIDE_BREAK_RE.match(line):
                raise ParseError("slide break inside a div", line=self.lineno)
            blocks.append(self._read_block())

        return DivBlock(classes=classes, attributes=attrs, blocks=blocks, line=start)

    def _read_iframe(self) -> IFrameBlock:
        start = self.lineno
        collected = []
        while True:
            if self.pos >= len(self.lines):
                raise ParseError("iframe is never closed", line=start)
            line = self.lines[self.pos]
            collected.append(line)
            self.pos += 1
            if IFRAME_END_RE.search(line):
                break

        tag = IFRAME_TAG_RE.search("\n".join(collected))
        if tag is None:
            raise ParseError("malformed iframe tag", line=start)
        attrs = parse_html_attributes(tag.group("attrs"))
        src = attrs.pop("src", None)
        if not src:
            raise ParseError("iframe has no src", line=start)
        return IFrameBlock(src=src, attributes=attrs, line=start)

    def _read_image(self, match) -> ImageBlock:
        start = self.lineno
        attrs: Dict[str, str] = {}
        if match.group("title"):
            attrs["title"] = match.group("title")
        if match.group("attrs"):
            identifier, classes, kv = parse_attributes(match.group("attrs"))
            if identifier:
                attrs["id"] = identifier
            if classes:
                attrs["class"] = " ".join(classes)
            attrs.update(kv)
        self.pos += 1
        return ImageBlock(src=match.group("src"), alt=match.group("alt"), attributes=attrs, line=start)

    def _next_nonblank(self) -> Optional[int]:
        index = self.pos
        while index < len(self.lines) and not self.lines[index].strip():
            index += 1
        return index if index < len(self.lines) else None


def _split_heading(text: Optional[str]):
    text = (text or "").strip()
    match = HEADING_ATTRS_RE.match(text)
    if match:
        identifier, classes, attrs = parse_attributes(match.group(2))
        return match.group(1).strip(), identifier, classes, attrs
    return text, None, [], {}


def _parse_fence_info(info: str, line: int):
    """Return (language, executable, raw, inline options) for a fence info string."""
    info = info.strip()
    if not info:
        return None, False, False, {}

    if info.startswith("{") and info.endswith("}"):
        inner = info[1:-1].strip()
        if not inner:
            return None, False, False, {}
        first, _, rest = inner.partition(" ")
        if first.startswith("="):
            # {=html} passes content through to that output format untouched.
            return first[1:], False, True, {}
        identifier, classes, attrs = parse_attributes(rest)
        options: Dict[str, Any] = {k: _coerce(v) for k, v in attrs.items()}
        if identifier:
            options["label"] = identifier
        if first.startswith("."):
            return first[1:], False, False, options
        return first.rstrip(","), True, False, options

    if "`" in info:
        raise ParseError("backtick in code fence info string", line=line)
    return info.split()[0], False, False, {}


def _parse_chunk_options(option_lines: List[str], first_line: int) -> Dict[str, Any]:
    try:
        data = yaml.safe_load("\n".join(option_lines))
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = first_line + mark.line if mark is not None else first_line
        raise ParseError("invalid code chunk options", line=line) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ParseError("code chunk options must be 'key: value' lines", line=first_line)
    return data


def _coerce(value: str) -> Any:
    lowered = value.lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    return value


def _option_flag(options: Dict[str, Any], key: str, line: int) -> Optional[bool]:
    value = options.get(key)
    if value is None or isinstance(value, bool):
        return value
    # `echo: fenced` shows the source together with its fence.
    if key == "echo" and value == "fenced":
        return True
    raise ParseError(f"code chunk option '{key}' must be true or false", line=line)


def _option_text(value: Any) -> Optional[str]:
    return None if value is None else str(value)


def _dedent(line: str, width: int) -> str:
    if not width:
        return line
    stripped = len(line) - len(line.lstrip(" "))
    return line[min(stripped, width):]
