"""Tests for deliberation/agreement.py."""

import pytest

from deliberation.agreement import AgreementDetector, find_common_points, find_disagreements
from deliberation.errors import ValidationError
from tests.conftest import COFFEE_POINTS, response


@pytest.fixture
def detector() -> AgreementDetector:
    return AgreementDetector()


def test_identical_responses_score_one(detector, coffee_responses):
    detection = detector.detect_agreement(coffee_responses)
    assert detection.agreement_score == 1.0


def test_identical_responses_share_all_points(detector, coffee_responses):
    detection = detector.detect_agreement(coffee_responses)
    assert detection.common_points == [
        "moderate coffee intake is linked to lower mortality",
        "caffeine improves alertness and focus",
        "pregnant women should limit caffeine",
    ]


def test_requires_two_responses(detector):
    with pytest.raises(ValidationError):
        detector.detect_agreement([response("claude-a", COFFEE_POINTS)])


def test_partial_overlap_is_jaccard(detector):
    detection = detector.detect_agreement([
        response("claude-a", "- apples are sweet fruits"),
        response("gpt-b", "- apples are sour fruits"),
    ])
    # {apples, are, fruits} / {apples, are, fruits, sweet, sour}
    assert detection.agreement_score == 0.6


def test_disjoint_responses_score_zero(detector):
    detection = detector.detect_agreement([
        response("claude-a", "- apples are sweet fruits"),
        response("gpt-b", "- bananas grow in tropical climates"),
    ])
    assert detection.agreement_score == 0.0


def test_score_is_mean_over_pairs(detector):
    same = "- apples are sweet fruits"
    detection = detector.detect_agreement([
        response("claude-a", same),
        response("gpt-b", same),
        response("gemini-c", "- bananas grow in tropical climates"),
    ])
    # pairs: 1.0, 0.0, 0.0
    assert detection.agreement_score == 0.33


def test_common_points_need_majority():
    points = [
        ["shared point one", "only in first"],
        ["shared point one"],
        ["only in third"],
    ]
    assert find_common_points(points) == ["shared point one"]


def test_common_points_capped_at_ten():
    points = [[f"point {i}" for i in range(15)]] * 2
    assert len(find_common_points(points)) == 10


def test_disagreement_detected_on_polar_positions(detector):
    detection = detector.detect_agreement([
        response("claude-a", "- Daily coffee consumption overall is beneficial"),
        response("gpt-b", "- Daily coffee consumption overall is harmful"),
    ])
    assert len(detection.disagreements) == 1
    dis = detection.disagreements[0]
    assert dis.topic == "Daily coffee consumption overall"
    assert [p.model for p in dis.positions] == ["claude-a", "gpt-b"]
    assert dis.positions[1].position == "Daily coffee consumption overall is harmful"


def test_disagreement_topics_come_from_first_response_only():
    points = [
        ["Neutral statement about tea"],
        ["Remote work overall is beneficial"],
        ["Remote work overall is harmful"],
    ]
    assert find_disagreements(["a", "b", "c"], points) == []


def test_no_disagreement_without_polar_words():
    points = [["Tabs versus spaces debate rages"], ["Tabs versus spaces debate continues"]]
    assert find_disagreements(["a", "b"], points) == []


def test_confidence_saturates_with_long_consistent_responses(detector):
    body = "- " + "x" * 1998
    detection = detector.detect_agreement([response("claude-a", body), response("gpt-b", body)])
    # count 0.4, consistency 1.0, tokens 1.0
    assert detection.confidence == 0.8


def test_confidence_drops_with_inconsistent_lengths(detector):
    short = detector.detect_agreement([
        response("claude-a", "- " + "x" * 98),
        response("gpt-b", "- " + "x" * 98),
    ])
    skewed = detector.detect_agreement([
        response("claude-a", "- " + "x" * 8),
        response("gpt-b", "- " + "x" * 188),
    ])
    assert skewed.confidence < short.confidence
    assert 0.0 <= skewed.confidence <= 1.0


def test_identical_prose_without_points_scores_one(detector):
    detection = detector.detect_agreement([
        response("claude-a", "Paris is the capital of France."),
        response("gpt-b", "Paris is the capital of France."),
    ])
    assert detection.common_points == []
    assert detection.agreement_score == 1.0


def test_prose_comparison_ignores_case_and_punctuation(detector):
    detection = detector.detect_agreement([
        response("claude-a", "Paris is the capital of France."),
        response("gpt-b", "paris is the capital of france"),
    ])
    assert detection.agreement_score == 1.0


def test_different_prose_without_points_scores_zero(detector):
    detection = detector.detect_agreement([
        response("claude-a", "Paris is the capital of France."),
        response("gpt-b", "Lyon is the capital of France."),
    ])
    assert detection.agreement_score == 0.0


def test_prose_against_points_uses_point_overlap(detector):
    detection = detector.detect_agreement([
        response("claude-a", "Paris is the capital of France."),
        response("gpt-b", "- Paris is the capital of France"),
    ])
    assert detection.agreement_score == 0.0
