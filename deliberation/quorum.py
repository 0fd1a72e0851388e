"""Quorum gate: turn an agreement score into a consensus answer, or None."""

import logging

from deliberation.agreement import AgreementDetector
from deliberation.errors import InsufficientResponsesError
from deliberation.models import ModelResponse, QuorumResponse
from deliberation.text_analysis import normalize_point

logger = logging.getLogger(__name__)

MIN_QUORUM_SIZE = 2


class QuorumManager:
    """Decides whether responses agree enough to carry a consensus answer."""

    def __init__(self, detector: AgreementDetector | None = None) -> None:
        self._detector = detector or AgreementDetector()

    def check_quorum(
        self,
        query: str,
        responses: list[ModelResponse],
        threshold: float,
    ) -> QuorumResponse:
        """Score agreement and attach a consensus when ``threshold`` is met.

        A None consensus means the panel did not agree enough; it is a valid
        outcome, not an error.

        Raises:
            InsufficientResponsesError: Fewer than 2 responses.
        """
        if not self.is_valid_quorum(responses):
            raise InsufficientResponsesError(len(responses), MIN_QUORUM_SIZE)

        detection = self._detector.detect_agreement(responses)

        consensus: str | None = None
        if detection.agreement_score >= threshold:
            consensus = self.synthesize_consensus(responses, detection.common_points)
            logger.info(
                "Quorum reached: agreement %.2f >= threshold %.2f",
                detection.agreement_score,
                threshold,
            )
        else:
            logger.info(
                "No quorum: agreement %.2f < threshold %.2f",
                detection.agreement_score,
                threshold,
            )

        return QuorumResponse(
            query=query,
            responses=responses,
            agreement=detection.agreement_score,
            threshold=threshold,
            consensus=consensus,
            common_points=detection.common_points,
            disagreements=detection.disagreements,
        )

    def synthesize_consensus(self, responses: list[ModelResponse], common_points: list[str]) -> str:
        """Pick the response covering the most common points and label it.

        Ties keep the earliest response. The percentage is the share of common
        points the chosen response covers.
        """
        best = responses[0]
        best_included = 0
        for response in responses:
            content = normalize_point(response.content)
            included = sum(1 for point in common_points if point in content)
            if included > best_included:
                best, best_included = response, included

        percent = round(best_included / len(common_points) * 100) if common_points else 0
        return f"Consensus ({percent}% agreement):\n\n{best.content}"

    def is_valid_quorum(self, responses: list[ModelResponse], min_size: int = MIN_QUORUM_SIZE) -> bool:
        return len(responses) >= min_size

    @staticmethod
    def get_recommended_threshold(model_count: int) -> float:
        """70% for a pair, 60% for 3-4 models, simple majority from 5 up."""
        if model_count <= 2:
            return 0.7
        if model_count <= 4:
            return 0.6
        return 0.5
