"""
Generate outline HTML reports for authoring QA.

Lists every section, slide and block of a parsed deck in presentation
order, with code-chunk flags and media sources, so the author can check
the structure before (or without) running the external renderer.
"""

from pathlib import Path
from typing import Any, Dict, List
from jinja2 import Template

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
    Slide,
)

SUMMARY_CHARS = 80


class OutlineHTMLGenerator:
    """
    Generate static HTML outline reports.

    Features:
    - Title block with authors, date, format and theme
    - One card per slide, grouped by section
    - Block list with code language, label and effective echo
    - Speaker notes and incremental-reveal markers
    """

    HTML_TEMPLATE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{ meta.title or "Deck" }} - Outline</title>
    <style>
        * {
            margin: 0;
            padding: 0;
            box-sizing: border-box;
        }

        body {
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Oxygen, Ubuntu, Cantarell, sans-serif;
            background: #f5f5f5;
            padding: 20px;
        }

        .header, .section, .slide-container {
            background: white;
            padding: 20px;
            border-radius: 8px;
            margin-bottom: 20px;
            box-shadow: 0 2px 4px rgba(0,0,0,0.1);
        }

        .header .meta, .slide-stats {
            color: #666;
            font-size: 14px;
        }

        .section > h2 {
            color: #333;
            border-bottom: 2px solid #eee;
            padding-bottom: 10px;
            margin-bottom: 15px;
        }

        .slide-container h3 {
            color: #333;
        }

        .badge {
            display: inline-block;
            padding: 2px 8px;
            border-radius: 10px;
            font-size: 12px;
            background: #e3f2fd;
            color: #1565c0;
            margin-left: 6px;
        }

        .block-item {
            border-left: 3px solid #4CAF50;
            padding: 6px 10px;
            margin: 8px 0;
            font-size: 14px;
        }

        .block-item.code { border-color: #9C27B0; }
        .block-item.image, .block-item.iframe { border-color: #2196F3; }
        .block-item.div { border-color: #FF9800; }

        .notes {
            background: #fffde7;
            padding: 8px;
            margin-top: 10px;
            font-size: 13px;
            white-space: pre-wrap;
        }
    </style>
</head>
<body>
    <div class="header">
        <h1>{{ meta.title or "Untitled deck" }}</h1>
        {% if meta.subtitle %}<h2>{{ meta.subtitle }}</h2>{% endif %}
        <div class="meta">
            {% for author in meta.authors %}
            {{ author.name }}{% if author.affiliation %} ({{ author.affiliation }}){% endif %}{% if not loop.last %}, {% endif %}
            {% endfor %}
            <br>
            <strong>Date:</strong> {{ meta.date or "-" }} |
            <strong>Format:</strong> {{ meta.output_format }} |
            <strong>Theme:</strong> {{ meta.theme or "default" }} |
            <strong>Slides:</strong> {{ total_slides }}
        </div>
    </div>

    {% macro slide_card(entry) %}
    <div class="slide-container">
        <h3>
            {{ entry.number }}. {{ entry.slide.title or "(untitled)" }}
            {% if entry.slide.incremental %}<span class="badge">incremental</span>{% endif %}
        </h3>
        <div class="slide-stats">Line {{ entry.slide.line }} | Blocks: {{ entry.blocks|length }}</div>
        {% for block in entry.blocks %}
        <div class="block-item {{ block.kind }}">
            <code>{{ block.kind }}</code> {{ block.summary }}
        </div>
        {% endfor %}
        {% if entry.slide.notes %}
        <div class="notes">{{ entry.slide.notes }}</div>
        {% endif %}
    </div>
    {% endmacro %}

    {% for entry in front_slides %}{{ slide_card(entry) }}{% endfor %}

    {% for section in sections %}
    <div class="section">
        <h2>{{ section.title }}</h2>
        {% for entry in section.slides %}{{ slide_card(entry) }}{% endfor %}
    </div>
    {% endfor %}
</body>
</html>
"""

    def generate(self, deck: Deck, output_path: Path) -> Path:
        """
        Generate outline HTML report.

        Args:
            deck: Parsed deck
            output_path: Path to save HTML file

        Returns:
            Path to generated HTML file
        """
        print(f"[Outline] Generating HTML report for {len(deck.slides)} slides")

        template = Template(self.HTML_TEMPLATE, autoescape=True)

        counter = iter(range(1, len(deck.slides) + 1))
        front_slides = [self._slide_entry(s, next(counter), deck.meta) for s in deck.front_slides]
        sections = [
            {
                "title": section.title,
                "slides": [self._slide_entry(s, next(counter), deck.meta) for s in section.slides],
            }
            for section in deck.sections
        ]

        html_content = template.render(
            meta=deck.meta,
            total_slides=len(deck.slides),
            front_slides=front_slides,
            sections=sections,
        )

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(html_content)

        print(f"[Outline] Saved HTML report to {output_path}")
        return output_path

    def _slide_entry(self, slide: Slide, number: int, meta: DeckMetadata) -> Dict[str, Any]:
        blocks: List[Dict[str, str]] = []
        for block in slide.blocks:
            if isinstance(block, DivBlock) and block.is_notes:
                continue
            blocks.append({"kind": block.kind, "summary": describe_block(block, meta)})
        return {"number": number, "slide": slide, "blocks": blocks}


def describe_block(block: Block, meta: DeckMetadata) -> str:
    """One-line, human readable description of a block."""
    if isinstance(block, ProseBlock):
        return _shorten(block.text)
    if isinstance(block, HeadingBlock):
        return _shorten(block.text)
    if isinstance(block, ListBlock):
        kind = "numbered" if block.ordered else "bulleted"
        return f"{len(block.items)} {kind} items"
    if isinstance(block, CodeBlock):
        parts = [block.language or "text"]
        if block.label:
            parts.append(f"#{block.label}")
        if block.raw:
            parts.append("raw")
        if block.executable:
            parts.append("executed" if block.effective_eval(meta) else "not evaluated")
            parts.append("echo" if block.effective_echo(meta) else "no echo")
        parts.append(f"{len(block.source.splitlines())} lines")
        return " | ".join(parts)
    if isinstance(block, ImageBlock):
        return f"{block.src}" + (f" ({block.alt})" if block.alt else "")
    if isinstance(block, IFrameBlock):
        return block.src
    if isinstance(block, DivBlock):
        classes = " ".join(f".{c}" for c in block.classes) or "div"
        return f"{classes} with {len(block.blocks)} blocks"
    return ""


def _shorten(text: str) -> str:
    text = " ".join(text.split())
    if len(text) <= SUMMARY_CHARS:
        return text
    return text[: SUMMARY_CHARS - 3] + "..."
