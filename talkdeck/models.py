"""
Core data models for talkdeck.

A parsed content document is a Deck: document metadata plus sections,
slides and blocks in the exact order they were authored.
"""

from typing import Annotated, List, Optional, Literal, Dict, Any, Union
from pydantic import BaseModel, ConfigDict, Field


class Author(BaseModel):
    """One entry of the document's author list."""

    name: str
    email: Optional[str] = None
    affiliation: Optional[str] = None


class ExecuteOptions(BaseModel):
    """Document-wide code execution options (`execute:` in the header)."""

    model_config = ConfigDict(extra="allow")

    echo: Optional[Union[bool, Literal["fenced"]]] = None
    eval: Optional[bool] = None
    warning: Optional[bool] = None
    output: Optional[bool] = None


class DeckMetadata(BaseModel):
    """Presentation metadata consumed by the external renderer."""

    title: Optional[str] = None
    subtitle: Optional[str] = None
    authors: List[Author] = Field(default_factory=list)
    date: Optional[str] = None
    output_format: str = "revealjs"
    theme: Optional[str] = None
    incremental: bool = False
    format_options: Dict[str, Any] = Field(default_factory=dict)
    execute: ExecuteOptions = Field(default_factory=ExecuteOptions)
    extra: Dict[str, Any] = Field(
        default_factory=dict, description="Header keys talkdeck does not interpret"
    )


# --- Blocks ---


class ProseBlock(BaseModel):
    """A paragraph of narrative text."""

    kind: Literal["prose"] = "prose"
    line: int = Field(ge=1, default=1)
    text: str


class ListItem(BaseModel):
    text: str
    level: int = Field(ge=0, default=0)


class ListBlock(BaseModel):
    """A bulleted or numbered list."""

    kind: Literal["list"] = "list"
    line: int = Field(ge=1, default=1)
    ordered: bool = False
    items: List[ListItem] = Field(default_factory=list)


class HeadingBlock(BaseModel):
    """A level 3+ heading inside a slide."""

    kind: Literal["heading"] = "heading"
    line: int = Field(ge=1, default=1)
    level: int = Field(ge=3)
    text: str


class CodeBlock(BaseModel):
    """
    A labeled code snippet.

    `executable` chunks (written as ```{python}) are run by the external
    renderer; plain fences are only displayed. Chunk options come from the
    `#|` lines at the top of the chunk. `raw` blocks (```{=html}) are passed
    through to the named output format as-is.
    """

    kind: Literal["code"] = "code"
    line: int = Field(ge=1, default=1)
    language: Optional[str] = None
    source: str = ""
    executable: bool = False
    raw: bool = False
    label: Optional[str] = None
    echo: Optional[bool] = None
    eval: Optional[bool] = None
    options: Dict[str, Any] = Field(default_factory=dict)

    def effective_echo(self, meta: DeckMetadata) -> bool:
        """Whether the renderer shows this chunk's source."""
        if self.echo is not None:
            return self.echo
        if meta.execute.echo is not None:
            return meta.execute.echo is not False
        return True

    def effective_eval(self, meta: DeckMetadata) -> bool:
        """Whether the renderer runs this chunk."""
        if self.eval is not None:
            return self.eval
        if meta.execute.eval is not None:
            return meta.execute.eval
        return True


class ImageBlock(BaseModel):
    """A standalone image reference."""

    kind: Literal["image"] = "image"
    line: int = Field(ge=1, default=1)
    src: str
    alt: str = ""
    attributes: Dict[str, str] = Field(default_factory=dict)


class IFrameBlock(BaseModel):
    """An embedded frame (live demo, video, external page)."""

    kind: Literal["iframe"] = "iframe"
    line: int = Field(ge=1, default=1)
    src: str
    attributes: Dict[str, str] = Field(default_factory=dict)


class DivBlock(BaseModel):
    """A fenced `:::` container. Class `notes` marks speaker notes."""

    kind: Literal["div"] = "div"
    line: int = Field(ge=1, default=1)
    classes: List[str] = Field(default_factory=list)
    attributes: Dict[str, str] = Field(default_factory=dict)
    blocks: List["Block"] = Field(default_factory=list)

    @property
    def is_notes(self) -> bool:
        return "notes" in self.classes


Block = Annotated[
    Union[ProseBlock, ListBlock, HeadingBlock, CodeBlock, ImageBlock, IFrameBlock, DivBlock],
    Field(discriminator="kind"),
]

DivBlock.model_rebuild()


def iter_blocks(blocks: List[Block]):
    """Yield blocks depth-first, descending into divs, in document order."""
    for block in blocks:
        yield block
        if isinstance(block, DivBlock):
            yield from iter_blocks(block.blocks)


def block_text(block: Block) -> str:
    """Plain text of a block, used for notes and outlines."""
    if isinstance(block, (ProseBlock, HeadingBlock)):
        return block.text
    if isinstance(block, ListBlock):
        return "\n".join(item.text for item in block.items)
    if isinstance(block, CodeBlock):
        return block.source
    if isinstance(block, DivBlock):
        return "\n".join(block_text(b) for b in block.blocks)
    return ""


# --- Document structure ---


class Slide(BaseModel):
    """One displayed unit: a `##` heading and the blocks under it."""

    title: Optional[str] = None
    identifier: Optional[str] = None
    classes: List[str] = Field(default_factory=list)
    attributes: Dict[str, str] = Field(default_factory=dict)
    incremental: bool = False
    blocks: List[Block] = Field(default_factory=list)
    line: int = Field(ge=1, default=1)

    def code_blocks(self) -> List[CodeBlock]:
        return [b for b in iter_blocks(self.blocks) if isinstance(b, CodeBlock)]

    @property
    def notes(self) -> Optional[str]:
        texts = [
            block_text(b)
            for b in self.blocks
            if isinstance(b, DivBlock) and b.is_notes
        ]
        return "\n\n".join(texts) if texts else None


class Section(BaseModel):
    """A major part of the talk, opened by a `#` heading."""

    title: str
    identifier: Optional[str] = None
    classes: List[str] = Field(default_factory=list)
    attributes: Dict[str, str] = Field(default_factory=dict)
    blocks: List[Block] = Field(default_factory=list)
    slides: List[Slide] = Field(default_factory=list)
    line: int = Field(ge=1, default=1)


class Deck(BaseModel):
    """
    The parsed content document.

    `preamble` holds blocks written before any heading and `front_slides`
    holds slides written before the first section.
    """

    meta: DeckMetadata = Field(default_factory=DeckMetadata)
    preamble: List[Block] = Field(default_factory=list)
    front_slides: List[Slide] = Field(default_factory=list)
    sections: List[Section] = Field(default_factory=list)
    source_path: Optional[str] = None

    @property
    def slides(self) -> List[Slide]:
        """All slides in presentation order."""
        slides = list(self.front_slides)
        for section in self.sections:
            slides.extend(section.slides)
        return slides

    def to_dict(self) -> Dict[str, Any]:
        """Export to dict for JSON serialization."""
        return self.model_dump(mode="json", exclude_none=True)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Deck":
        """Load from dict."""
        return cls.model_validate(data)
