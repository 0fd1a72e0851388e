"""Keyword heuristics shared by agreement detection and debate rounds.

Everything here is a pure string function so scores stay reproducible:
lexical overlap and fixed keyword lists, no embeddings.
"""

import re

MIN_POINT_LENGTH = 10
MAX_POINTS_PER_RESPONSE = 20
TOPIC_WORDS = 4

_NUMBERED_RE = re.compile(r"^\d+\.")
_NUMBERED_STRIP_RE = re.compile(r"^\d+\.\s*")
_BULLET_RE = re.compile(r"^[-*•]\s")
_BULLET_STRIP_RE = re.compile(r"^[-*•]\s*")
_PUNCTUATION_RE = re.compile(r"[^\w\s]")
_WHITESPACE_RE = re.compile(r"\s+")
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")

# Lines outside a list are kept only when they hit one of these families.
KEY_POINT_FAMILIES: dict[str, re.Pattern[str]] = {
    "importance": re.compile(r"important|critical|essential|key|main|primary|fundamental", re.IGNORECASE),
    "recommendation": re.compile(r"recommend|suggest|advise|propose", re.IGNORECASE),
    "obligation": re.compile(r"should|must|need to|have to", re.IGNORECASE),
    "causal": re.compile(r"therefore|thus|consequently|as a result", re.IGNORECASE),
    "ordinal": re.compile(r"first|second|third|finally", re.IGNORECASE),
}

ARGUMENT_MARKERS = re.compile(r"\b(argue|claim|assert|believe|propose|suggest|recommend)\b", re.IGNORECASE)

# (name, positive polarity, negative polarity)
CONTRADICTION_PATTERNS: list[tuple[str, re.Pattern[str], re.Pattern[str]]] = [
    (
        "assent",
        re.compile(r"\b(yes|agree|correct|true|should)\b", re.IGNORECASE),
        re.compile(r"\b(no|disagree|incorrect|false|should not)\b", re.IGNORECASE),
    ),
    (
        "valence",
        re.compile(r"\b(beneficial|advantage|positive)\b", re.IGNORECASE),
        re.compile(r"\b(harmful|disadvantage|negative)\b", re.IGNORECASE),
    ),
    (
        "direction",
        re.compile(r"\b(increase|more|higher)\b", re.IGNORECASE),
        re.compile(r"\b(decrease|less|lower)\b", re.IGNORECASE),
    ),
]

AGREEMENT_MARKERS = re.compile(r"\b(agree|support|concur)\b", re.IGNORECASE)
CONSENSUS_MARKERS = re.compile(r"\b(agree|support|concur|consensus)\b", re.IGNORECASE)
DISAGREEMENT_MARKERS = re.compile(r"\b(disagree|challenge|counter|however|but)\b", re.IGNORECASE)


def normalize_point(text: str) -> str:
    """Lowercase, drop punctuation, collapse whitespace."""
    stripped = _PUNCTUATION_RE.sub("", text.lower())
    return _WHITESPACE_RE.sub(" ", stripped).strip()


def is_key_point(sentence: str) -> bool:
    return any(pattern.search(sentence) for pattern in KEY_POINT_FAMILIES.values())


def extract_points(content: str) -> list[str]:
    """Pull comparable statements out of a free-text answer.

    Numbered and bulleted lines are taken with their marker removed; any
    other line must look like a key point. Lines under 10 characters are
    ignored and at most 20 points are returned.
    """
    points: list[str] = []
    for line in content.splitlines():
        trimmed = line.strip()
        if len(trimmed) < MIN_POINT_LENGTH:
            continue
        if _NUMBERED_RE.match(trimmed):
            points.append(_NUMBERED_STRIP_RE.sub("", trimmed, count=1))
        elif _BULLET_RE.match(trimmed):
            points.append(_BULLET_STRIP_RE.sub("", trimmed, count=1))
        elif is_key_point(trimmed):
            points.append(trimmed)
    return points[:MAX_POINTS_PER_RESPONSE]


def point_words(points: list[str]) -> set[str]:
    """Union of normalized words across a response's points."""
    words: set[str] = set()
    for point in points:
        words.update(normalize_point(point).split())
    return words


def jaccard(a: set[str], b: set[str]) -> float:
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


def topic_of(point: str, words: int = TOPIC_WORDS) -> str:
    return " ".join(point.split()[:words])


def contradiction_polarity(point: str) -> tuple[bool, bool]:
    """Return (matches a positive pattern, matches a negative pattern)."""
    positive = any(pos.search(point) for _, pos, _ in CONTRADICTION_PATTERNS)
    negative = any(neg.search(point) for _, _, neg in CONTRADICTION_PATTERNS)
    return positive, negative


def split_sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_SPLIT_RE.split(text) if s.strip()]
