"""Tests for deliberation/output.py."""

from pathlib import Path

import pytest

from deliberation.models import DebateResult, QuorumResponse
from deliberation.output import _preview, _slug, print_debate, print_quorum, save_debate
from tests.conftest import make_round, response


def test_slug_basic():
    assert _slug("Should we use YAML or JSON?") == "should-we-use-yaml-or-json"


def test_slug_max_len():
    long_text = "a" * 100
    assert len(_slug(long_text)) <= 40


def test_slug_special_chars():
    result = _slug("API vs. SDK (2024)")
    assert "." not in result
    assert "(" not in result
    assert ")" not in result


def test_preview_truncates():
    assert _preview("one two three", words=2) == "one two..."
    assert _preview("one two", words=2) == "one two"


@pytest.fixture
def sample_debate_result() -> DebateResult:
    rnd = make_round(1, "Tabs are clearer.", "However, spaces align.", models=["claude-a", "gpt-b"])
    rnd.summary = "2 participants contributed. Significant debate with differing viewpoints."
    return DebateResult(
        topic="Should we use tabs or spaces?",
        models=["claude-a", "gpt-b"],
        rounds=[rnd],
        final_synthesis="# Debate Summary: 1 Rounds\nBoth have merit.",
        duration_sec=10.5,
    )


def test_save_debate_creates_file(tmp_path: Path, sample_debate_result: DebateResult):
    saved = save_debate(sample_debate_result, tmp_path / "output")
    assert saved.exists()
    assert saved.suffix == ".md"


def test_save_debate_creates_output_dir(tmp_path: Path, sample_debate_result: DebateResult):
    output_dir = tmp_path / "nested" / "output"
    assert not output_dir.exists()
    save_debate(sample_debate_result, output_dir)
    assert output_dir.exists()


def test_save_debate_content(tmp_path: Path, sample_debate_result: DebateResult):
    content = save_debate(sample_debate_result, tmp_path).read_text(encoding="utf-8")
    assert content.startswith("# Debate: Should we use tabs or spaces?")
    assert "**Participants:** claude-a, gpt-b" in content
    assert "## Round 1" in content
    assert "### gpt-b" in content
    assert "However, spaces align." in content
    assert "## Synthesis" in content
    assert "## Verdict" not in content


def test_save_debate_includes_verdict(tmp_path: Path, sample_debate_result: DebateResult):
    sample_debate_result.winner = "claude-a"
    sample_debate_result.judge_reasoning = "claude-a wins on clarity."
    content = save_debate(sample_debate_result, tmp_path).read_text(encoding="utf-8")
    assert "## Verdict" in content
    assert "**Winner:** claude-a" in content
    assert "claude-a wins on clarity." in content


def test_save_debate_filename_has_slug(tmp_path: Path, sample_debate_result: DebateResult):
    saved = save_debate(sample_debate_result, tmp_path)
    assert saved.name.endswith("_should-we-use-tabs-or-spaces.md")


def test_save_debate_slug_override(tmp_path: Path, sample_debate_result: DebateResult):
    saved = save_debate(sample_debate_result, tmp_path, slug_override="custom")
    assert saved.name.endswith("_custom.md")


def test_print_quorum_without_consensus(capsys):
    result = QuorumResponse(
        query="q",
        responses=[response("claude-a", "Yes."), response("gpt-b", "No.")],
        agreement=0.0,
        threshold=0.67,
        consensus=None,
    )
    print_quorum(result)
    out = capsys.readouterr().out
    assert "No consensus" in out
    assert "claude-a" in out


def test_print_debate_shows_winner(capsys, sample_debate_result: DebateResult):
    sample_debate_result.winner = "gpt-b"
    print_debate(sample_debate_result)
    out = capsys.readouterr().out
    assert "Winner:" in out
    assert "gpt-b" in out
