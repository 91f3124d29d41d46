"""
Tests for the command-line interface.
"""

import pytest

from talkdeck import cli


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("TALKDECK_RENDERER", "TALKDECK_OUTPUT_DIR", "TALKDECK_FORMAT"):
        monkeypatch.delenv(name, raising=False)


def test_check_prints_outline(sample_path, capsys):
    assert cli.main([str(sample_path), "--check"]) == 0

    out = capsys.readouterr().out
    assert "# Motivation" in out
    assert "  - Why interfaces? [incremental]" in out
    assert "  - Demo" in out


def test_dry_run_prints_command(sample_path, capsys):
    assert cli.main([str(sample_path), "--dry-run", "--to", "html", "--renderer", "myquarto"]) == 0

    out = capsys.readouterr().out.strip().splitlines()[-1]
    assert out.startswith(f"myquarto render {sample_path} --to html --output-dir ")


def test_format_from_environment(sample_path, capsys, monkeypatch):
    monkeypatch.setenv("TALKDECK_FORMAT", "pptx")

    assert cli.main([str(sample_path), "--dry-run"]) == 0
    assert "--to pptx" in capsys.readouterr().out


def test_parse_error_exit_code(tmp_path, capsys):
    document = tmp_path / "broken.qmd"
    document.write_text("## S\n\n```python\nx\n", encoding="utf-8")

    assert cli.main([str(document), "--check"]) == 1
    assert "line 3: code block is never closed" in capsys.readouterr().err


def test_missing_input(tmp_path, capsys):
    assert cli.main([str(tmp_path / "missing.qmd")]) == 1
    assert "Input file not found" in capsys.readouterr().err


def test_no_input_prints_help(capsys):
    assert cli.main([]) == 1
    assert "usage: talkdeck" in capsys.readouterr().out
