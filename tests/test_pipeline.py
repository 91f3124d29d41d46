"""
Tests for the build pipeline.
"""

import json

import pytest

from talkdeck.exceptions import ParseError, RenderError
from talkdeck.models import Deck
from talkdeck.pipeline import DeckBuildPipeline
from talkdeck.renderers import BaseRenderer


def test_process_writes_all_outputs(fake_renderer, sample_path, tmp_path):
    pipeline = DeckBuildPipeline(renderer=fake_renderer)
    output_dir = tmp_path / "out"

    result = pipeline.process(sample_path, output_dir=output_dir)

    assert result["html"] == output_dir / "talk.html"
    assert result["outline"] == output_dir / "talk.outline.json"
    assert result["audit"] == output_dir / "talk.outline.html"
    for path in result.values():
        assert path.exists()

    with open(result["outline"], encoding="utf-8") as f:
        deck = Deck.from_dict(json.load(f))
    assert [s.title for s in deck.slides] == ["Why interfaces?", "A first check", "Demo"]


def test_process_default_output_dir(fake_renderer, sample_path, tmp_path):
    pipeline = DeckBuildPipeline(
        renderer=fake_renderer,
        output_root=str(tmp_path / "builds"),
        generate_audit=False,
        save_intermediate=False,
    )

    result = pipeline.process(sample_path)

    assert result["html"] == tmp_path / "builds" / "talk" / "talk.html"
    assert result["outline"] is None
    assert result["audit"] is None


def test_output_format_override(fake_renderer, sample_path, tmp_path):
    pipeline = DeckBuildPipeline(renderer=fake_renderer, output_format="html")
    pipeline.process(sample_path, output_dir=tmp_path / "out")

    assert fake_renderer.calls[0][2] == "html"


def test_parse_error_aborts_before_output(fake_renderer, tmp_path):
    document = tmp_path / "broken.qmd"
    document.write_text("# A\n\n## B\n\n```python\nunterminated\n", encoding="utf-8")
    output_dir = tmp_path / "out"

    with pytest.raises(ParseError):
        DeckBuildPipeline(renderer=fake_renderer).process(document, output_dir=output_dir)

    assert not output_dir.exists()
    assert fake_renderer.calls == []


def test_render_error_propagates(sample_path, tmp_path):
    class FailingRenderer(BaseRenderer):
        def render(self, deck, output_dir, output_format=None, stem=None):
            raise RenderError("renderer rejected input")

    pipeline = DeckBuildPipeline(renderer=FailingRenderer())

    with pytest.raises(RenderError, match="rejected"):
        pipeline.process(sample_path, output_dir=tmp_path / "out")


def test_missing_document(fake_renderer, tmp_path):
    with pytest.raises(FileNotFoundError):
        DeckBuildPipeline(renderer=fake_renderer).process(tmp_path / "missing.qmd")


def test_from_outline(fake_renderer, sample_path, tmp_path):
    first = DeckBuildPipeline(renderer=fake_renderer, generate_audit=False)
    result = first.process(sample_path, output_dir=tmp_path / "out")

    rebuilt = DeckBuildPipeline.from_outline(
        result["outline"],
        output_dir=tmp_path / "rebuilt",
        renderer=fake_renderer,
    )

    assert rebuilt["html"] == tmp_path / "rebuilt" / "talk.html"
    assert rebuilt["audit"].exists()
    deck, _, _, stem = fake_renderer.calls[-1]
    assert stem == "talk"
    assert deck.source_path is None
    assert len(deck.slides) == 3
