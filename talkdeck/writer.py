"""
Serialize a Deck back into content-document markup.

Used when a deck has no source file on disk (for example one restored from
a saved outline) but still has to be handed to the external renderer.
"""

import re
from typing import Any, Dict, List, Optional

import yaml

from talkdeck.loader.syntax import OPTION_PREFIXES, format_attributes
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
    ProseBlock,
    Section,
    Slide,
)


class DocumentWriter:
    """Render Decks as markup that DocumentLoader parses back to the same structure."""

    def write(self, deck: Deck) -> str:
        parts: List[str] = []

        header = self.header(deck.meta)
        if header:
            parts.append(header)

        parts.extend(self.block(b, deck.meta) for b in deck.preamble)
        for slide in deck.front_slides:
            parts.extend(self.slide(slide, deck.meta))
        for section in deck.sections:
            parts.extend(self.section(section, deck.meta))

        return "\n\n".join(parts) + "\n"

    def header(self, meta: DeckMetadata) -> str:
        data: Dict[str, Any] = {}
        if meta.title is not None:
            data["title"] = meta.title
        if meta.subtitle is not None:
            data["subtitle"] = meta.subtitle
        if meta.authors:
            data["author"] = [a.model_dump(exclude_none=True) for a in meta.authors]
        if meta.date is not None:
            data["date"] = meta.date

        options = dict(meta.format_options)
        if meta.theme is not None:
            options["theme"] = meta.theme
        if meta.incremental:
            options["incremental"] = True
        data["format"] = {meta.output_format: options} if options else meta.output_format

        execute = meta.execute.model_dump(exclude_none=True)
        if execute:
            data["execute"] = execute
        data.update(meta.extra)

        dumped = yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
        return f"---\n{dumped}---"

    def section(self, section: Section, meta: DeckMetadata) -> List[str]:
        parts = [_heading("#", section.title, section.identifier, section.classes, section.attributes)]
        parts.extend(self.block(b, meta) for b in section.blocks)
        for slide in section.slides:
            parts.extend(self.slide(slide, meta))
        return parts

    def slide(self, slide: Slide, meta: DeckMetadata) -> List[str]:
        if slide.title is None and not (slide.identifier or slide.classes or slide.attributes):
            opening = "---"
        else:
            opening = _heading("##", slide.title or "", slide.identifier, slide.classes, slide.attributes)
        return [opening] + [self.block(b, meta) for b in slide.blocks]

    def block(self, block: Block, meta: Optional[DeckMetadata] = None) -> str:
        if isinstance(block, ProseBlock):
            return block.text
        if isinstance(block, HeadingBlock):
            return f"{'#' * block.level} {block.text}"
        if isinstance(block, ListBlock):
            return "\n".join(
                f"{'  ' * item.level}{'1.' if block.ordered else '-'} {item.text}".rstrip()
                for item in block.items
            )
        if isinstance(block, CodeBlock):
            return _code(block)
        if isinstance(block, ImageBlock):
            return _image(block)
        if isinstance(block, IFrameBlock):
            attrs = "".join(
                f' {k}="{v}"' if v else f" {k}" for k, v in block.attributes.items()
            )
            return f'<iframe src="{block.src}"{attrs}></iframe>'
        if isinstance(block, DivBlock):
            attrs = dict(block.attributes)
            identifier = attrs.pop("id", None)
            opening = "::: " + (format_attributes(identifier, block.classes, attrs) or "{}")
            inner = [self.block(b, meta) for b in block.blocks]
            return "\n\n".join([opening] + inner + [":::"])
        raise TypeError(f"Unknown block type: {type(block).__name__}")


def _heading(marks: str, title: str, identifier, classes, attrs) -> str:
    suffix = format_attributes(identifier, classes, attrs)
    return " ".join(part for part in (marks, title, suffix) if part)


def _code(block: CodeBlock) -> str:
    longest = max((len(run) for run in re.findall(r"`{3,}", block.source)), default=2)
    fence = "`" * max(3, longest + 1)

    if block.raw:
        info = "{=" + (block.language or "") + "}"
    elif block.executable:
        info = "{" + (block.language or "") + "}"
    else:
        info = block.language or ""

    lines = [fence + info]
    if block.executable:
        prefix = OPTION_PREFIXES.get((block.language or "").lower(), "#|")
        for key, value in block.options.items():
            lines.append(f"{prefix} {key}: {_yaml_scalar(value)}")
    if block.source:
        lines.append(block.source)
    lines.append(fence)
    return "\n".join(lines)


def _image(block: ImageBlock) -> str:
    attrs = dict(block.attributes)
    title = attrs.pop("title", None)
    identifier = attrs.pop("id", None)
    classes = attrs.pop("class", "").split()
    target = f'{block.src} "{title}"' if title else block.src
    return f"![{block.alt}]({target}){format_attributes(identifier, classes, attrs)}"


def _yaml_scalar(value: Any) -> str:
    dumped = yaml.safe_dump(value, default_flow_style=True).strip()
    if dumped.endswith("\n..."):
        dumped = dumped[: -len("\n...")]
    elif dumped.endswith("..."):
        dumped = dumped[: -len("...")].strip()
    return dumped
