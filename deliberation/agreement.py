"""Agreement detection: how much do N free-text answers overlap?"""

import logging
import math
from itertools import combinations

from deliberation.errors import ValidationError
from deliberation.models import AgreementDetection, Disagreement, ModelResponse, Position
from deliberation import text_analysis as ta

logger = logging.getLogger(__name__)

MAX_COMMON_POINTS = 10
MAX_DISAGREEMENTS = 5

_FULL_COUNT = 5          # responses at which the count score saturates
_CHARS_PER_TOKEN = 4
_FULL_TOKENS = 500       # average tokens at which the volume score saturates


def _round2(value: float) -> float:
    return round(value, 2)


def agreement_score(
    points_by_response: list[list[str]],
    contents: list[str] | None = None,
) -> float:
    """Mean pairwise Jaccard index of the responses' point vocabularies.

    A pair where neither side yields any points is compared on its whole
    normalized text instead: 1.0 when equal, 0.0 otherwise.
    """
    if len(points_by_response) < 2:
        return 1.0
    vocabularies = [ta.point_words(points) for points in points_by_response]
    if contents is None:
        texts = [""] * len(points_by_response)
    else:
        texts = [ta.normalize_point(c) for c in contents]

    similarities: list[float] = []
    for (words_a, text_a), (words_b, text_b) in combinations(zip(vocabularies, texts), 2):
        if not words_a and not words_b:
            similarities.append(1.0 if text_a and text_a == text_b else 0.0)
        else:
            similarities.append(ta.jaccard(words_a, words_b))
    return _round2(sum(similarities) / len(similarities))


def find_common_points(points_by_response: list[list[str]]) -> list[str]:
    """Normalized points found in at least half of the responses."""
    majority = math.ceil(len(points_by_response) / 2)
    counts: dict[str, int] = {}
    for points in points_by_response:
        for normalized in dict.fromkeys(ta.normalize_point(p) for p in points):
            counts[normalized] = counts.get(normalized, 0) + 1
    common = [point for point, count in counts.items() if point and count >= majority]
    return common[:MAX_COMMON_POINTS]


def find_disagreements(
    models: list[str],
    points_by_response: list[list[str]],
) -> list[Disagreement]:
    """Topics where two or more responses take a polar stance.

    Candidate topics come from the first response's points only.
    """
    if not points_by_response:
        return []

    topics = dict.fromkeys(ta.topic_of(p) for p in points_by_response[0])
    disagreements: list[Disagreement] = []

    for topic in topics:
        needle = ta.normalize_point(topic)
        if not needle:
            continue
        positions: list[Position] = []
        for model, points in zip(models, points_by_response):
            related = [p for p in points if needle in ta.normalize_point(p)]
            if not related:
                continue
            polar = [ta.contradiction_polarity(p) for p in related]
            if any(pos or neg for pos, neg in polar):
                positions.append(Position(model=model, position=related[0]))
        if len(positions) >= 2:
            disagreements.append(Disagreement(topic=topic, positions=positions))
        if len(disagreements) >= MAX_DISAGREEMENTS:
            break

    return disagreements


def detection_confidence(responses: list[ModelResponse]) -> float:
    """Mean of participant-count, length-consistency and token-volume scores."""
    lengths = [len(r.content) for r in responses]
    mean_length = sum(lengths) / len(lengths)

    count_score = min(1.0, len(responses) / _FULL_COUNT)
    if mean_length > 0:
        variance = sum((length - mean_length) ** 2 for length in lengths) / len(lengths)
        consistency = max(0.0, 1 - variance / (mean_length * mean_length))
    else:
        consistency = 0.0
    token_score = min(1.0, (mean_length / _CHARS_PER_TOKEN) / _FULL_TOKENS)

    return _round2((count_score + consistency + token_score) / 3)


class AgreementDetector:
    """Scores agreement between model responses with lexical heuristics."""

    def detect_agreement(self, responses: list[ModelResponse]) -> AgreementDetection:
        """Analyze responses for common ground and polar disagreements.

        Raises:
            ValidationError: Fewer than 2 responses.
        """
        if len(responses) < 2:
            raise ValidationError("Agreement detection requires at least 2 responses")

        points_by_response = [ta.extract_points(r.content) for r in responses]
        models = [r.model for r in responses]

        detection = AgreementDetection(
            agreement_score=agreement_score(points_by_response, [r.content for r in responses]),
            common_points=find_common_points(points_by_response),
            disagreements=find_disagreements(models, points_by_response),
            confidence=detection_confidence(responses),
        )
        logger.debug(
            "Agreement %.2f over %d responses: %d common, %d disagreements",
            detection.agreement_score,
            len(responses),
            len(detection.common_points),
            len(detection.disagreements),
        )
        return detection
