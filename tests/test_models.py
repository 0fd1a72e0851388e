"""Tests for deliberation/models.py dataclasses."""

from deliberation.models import (
    Completion,
    DebateConfig,
    DebateRound,
    DebateTurn,
    ModelQuery,
    ModelResponse,
    QuorumResponse,
    TokenUsage,
)


def test_completion_defaults():
    c = Completion(text="hi", model="claude-a")
    assert c.usage == TokenUsage()
    assert c.latency_sec == 0.0


def test_model_query_optional_fields():
    q = ModelQuery(query="Why?", models=["claude-a", "gpt-b"])
    assert q.system_prompt is None
    assert q.temperature is None
    assert q.timeout_sec is None


def test_model_response_fields():
    r = ModelResponse(model="gpt-b", content="Because.", usage=TokenUsage(1, 2, 3), latency_sec=1.2)
    assert r.model == "gpt-b"
    assert r.usage.total_tokens == 3


def test_quorum_response_models_follow_responses():
    result = QuorumResponse(
        query="q",
        responses=[ModelResponse("gpt-b", "x"), ModelResponse("claude-a", "y")],
        agreement=0.5,
        threshold=0.5,
        consensus=None,
    )
    assert result.models == ["gpt-b", "claude-a"]
    assert result.common_points == []
    assert result.disagreements == []


def test_debate_round_defaults():
    rnd = DebateRound(round_number=1)
    assert rnd.turns == []
    assert rnd.key_points == []
    assert rnd.summary == ""


def test_debate_turn_references_default_empty():
    turn = DebateTurn(model="claude-a", round_number=2, content="Point.")
    assert turn.referenced_turns == []


def test_debate_config_defaults():
    config = DebateConfig(topic="Cats vs dogs", models=["claude-a", "gpt-b"])
    assert config.rounds == 3
    assert config.judge_model is None
    assert config.round_duration_sec is None
