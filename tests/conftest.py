"""
Shared fixtures: a small talk document and a renderer stand-in.
"""

from pathlib import Path
from typing import Optional

import pytest

from talkdeck.models import Deck
from talkdeck.renderers import BaseRenderer

SAMPLE_DOCUMENT = '''---
title: "Interface Testing in Practice"
subtitle: "Contracts for duck-typed code"
author:
  - name: Ada Example
    email: ada@example.org
    affiliation: Example University
  - Grace Sample
date: 2024-07-10
format:
  revealjs:
    theme: simple
    slide-number: true
execute:
  echo: true
---

# Motivation

## Why interfaces? {.incremental}

- Duck typing is flexible
- Silent breakage is not

## A first check

```{python}
#| echo: false
#| label: setup
import abc
```

```python
class Sized:
    pass
```

::: notes
Mention the abc module.
:::

# In practice

## Demo

<iframe src="https://example.org/demo" width="100%" height="500"></iframe>

![Architecture](img/arch.png){width="60%"}
'''


@pytest.fixture
def sample_text() -> str:
    return SAMPLE_DOCUMENT


@pytest.fixture
def sample_path(tmp_path) -> Path:
    path = tmp_path / "talk.qmd"
    path.write_text(SAMPLE_DOCUMENT, encoding="utf-8")
    return path


class FakeRenderer(BaseRenderer):
    """Writes a placeholder slideshow instead of running a real renderer."""

    def __init__(self):
        super().__init__()
        self.calls = []

    def render(
        self,
        deck: Deck,
        output_dir: Path,
        output_format: Optional[str] = None,
        stem: Optional[str] = None,
    ) -> Path:
        self.calls.append((deck, output_dir, output_format, stem))
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        if stem is None:
            stem = Path(deck.source_path).stem if deck.source_path else "deck"
        artifact = output_dir / f"{stem}.html"
        artifact.write_text("<html></html>", encoding="utf-8")
        return artifact


@pytest.fixture
def fake_renderer() -> FakeRenderer:
    return FakeRenderer()
