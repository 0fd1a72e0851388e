"""Tests for deliberation/text_analysis.py."""

from deliberation.text_analysis import (
    contradiction_polarity,
    extract_points,
    is_key_point,
    jaccard,
    normalize_point,
    point_words,
    split_sentences,
    topic_of,
)


def test_normalize_point_strips_punctuation_and_case():
    assert normalize_point("  Coffee,   is GOOD!  ") == "coffee is good"


def test_extract_points_strips_numbered_and_bullet_markers():
    content = "1. Drink water every morning\n- Sleep at least seven hours\n* Walk outside daily"
    assert extract_points(content) == [
        "Drink water every morning",
        "Sleep at least seven hours",
        "Walk outside daily",
    ]


def test_extract_points_skips_short_lines():
    assert extract_points("- short\n1. tiny\nok") == []


def test_extract_points_keeps_keyword_lines_only():
    content = "The weather was nice today.\nYou should test before deploying."
    assert extract_points(content) == ["You should test before deploying."]


def test_extract_points_caps_at_twenty():
    content = "\n".join(f"- point number {i} here" for i in range(30))
    assert len(extract_points(content)) == 20


def test_is_key_point_families():
    assert is_key_point("This is critical for success")
    assert is_key_point("I recommend a staged rollout")
    assert is_key_point("Therefore the cache wins")
    assert is_key_point("Finally, measure everything")
    assert not is_key_point("The sky was blue")


def test_point_words_unions_normalized_words():
    assert point_words(["Apples are red.", "Apples, pears!"]) == {"apples", "are", "red", "pears"}


def test_jaccard():
    assert jaccard({"a", "b"}, {"a", "b"}) == 1.0
    assert jaccard({"a", "b", "c"}, {"a", "b", "d"}) == 0.5
    assert jaccard(set(), {"a"}) == 0.0


def test_topic_of_takes_first_four_words():
    assert topic_of("Daily coffee consumption overall is beneficial") == "Daily coffee consumption overall"


def test_contradiction_polarity():
    assert contradiction_polarity("This is beneficial") == (True, False)
    assert contradiction_polarity("This is harmful") == (False, True)
    assert contradiction_polarity("Plain statement here") == (False, False)


def test_split_sentences():
    assert split_sentences("One. Two! Three?") == ["One", "Two", "Three"]
