"""Merge several model responses into one answer plus recommendations."""

import logging

from deliberation.agreement import AgreementDetector
from deliberation.errors import ValidationError
from deliberation.models import AgreementDetection, ModelResponse, SynthesisResult
from deliberation.providers.base import ModelBackend

logger = logging.getLogger(__name__)

DEFAULT_SYNTHESIS_MODEL = "claude-sonnet-4-5-20250929"
SYNTHESIS_TEMPERATURE = 0.5

SYNTHESIS_SYSTEM_PROMPT = """You are a meta-AI that synthesizes responses from multiple AI models.
Your goal is to create a unified, comprehensive answer that:
1. Incorporates all common points where models agree
2. Addresses disagreements by presenting multiple perspectives
3. Provides clear, actionable recommendations
4. Maintains objectivity and acknowledges uncertainty where appropriate"""


def build_synthesis_prompt(
    query: str,
    responses: list[ModelResponse],
    analysis: AgreementDetection,
) -> str:
    parts: list[str] = [
        f'Original question: "{query}"',
        f"I have received {len(responses)} responses from different AI models.",
        "## Individual Responses:",
    ]
    for idx, response in enumerate(responses, start=1):
        parts.append(f"### Model {idx} ({response.model}):\n{response.content}")

    parts.append(
        "## Agreement Analysis:\n"
        f"- Agreement Score: {analysis.agreement_score}\n"
        f"- Confidence: {analysis.confidence}"
    )
    if analysis.common_points:
        parts.append("Common Points:\n" + "\n".join(f"- {p}" for p in analysis.common_points))
    if analysis.disagreements:
        lines = ["Disagreements:"]
        for dis in analysis.disagreements:
            lines.append(f"- Topic: {dis.topic}")
            lines.extend(f"  - {pos.model}: {pos.position}" for pos in dis.positions)
        parts.append("\n".join(lines))

    parts.append(
        "Please synthesize these responses into a unified, comprehensive answer "
        "that addresses the original question."
    )
    return "\n\n".join(parts)


def rule_based_synthesis(responses: list[ModelResponse], analysis: AgreementDetection) -> str:
    """Deterministic synthesis used when no synthesis model is reachable."""
    lines: list[str] = [f"Synthesis of {len(responses)} AI responses:", ""]

    if analysis.common_points:
        lines.append(f"**Common Ground (Agreement: {analysis.agreement_score}):**")
        lines.extend(f"- {point}" for point in analysis.common_points)
        lines.append("")

    if analysis.disagreements:
        lines.append("**Areas of Disagreement:**")
        for dis in analysis.disagreements:
            lines.append("")
            lines.append(f"Topic: {dis.topic}")
            lines.extend(f"- {pos.model}: {pos.position}" for pos in dis.positions)
        lines.append("")

    longest = max(responses, key=lambda r: len(r.content))
    lines.append(f"**Detailed Response (from {longest.model}):**")
    lines.append(longest.content)
    return "\n".join(lines)


def generate_recommendations(analysis: AgreementDetection) -> list[str]:
    recommendations: list[str] = []

    if analysis.agreement_score >= 0.8:
        recommendations.append("High agreement across models - proceed with confidence")
    elif analysis.agreement_score >= 0.5:
        recommendations.append("Moderate agreement - consider addressing disagreements")
    else:
        recommendations.append(
            "Low agreement - significant divergence in responses, recommend further investigation"
        )

    if analysis.confidence >= 0.8:
        recommendations.append("High confidence in agreement analysis")
    elif analysis.confidence < 0.5:
        recommendations.append("Low confidence - consider gathering more responses")

    if analysis.disagreements:
        recommendations.append(
            f"{len(analysis.disagreements)} disagreements identified - review each perspective"
        )

    if not analysis.common_points:
        recommendations.append(
            "No clear common points - responses may be addressing different aspects"
        )

    return recommendations


class SynthesisAgent:
    """Meta-agent that folds N responses into a single answer.

    Without a backend every synthesis is rule-based; with one, a failed
    synthesis call degrades to the rule-based text instead of raising.
    """

    def __init__(
        self,
        backend: ModelBackend | None = None,
        synthesis_model: str = DEFAULT_SYNTHESIS_MODEL,
        detector: AgreementDetector | None = None,
    ) -> None:
        self._backend = backend
        self._synthesis_model = synthesis_model
        self._detector = detector or AgreementDetector()

    async def synthesize(
        self,
        query: str,
        responses: list[ModelResponse],
        synthesis_model: str | None = None,
    ) -> SynthesisResult:
        """Synthesize ``responses`` to ``query``.

        Raises:
            ValidationError: Fewer than 2 responses.
        """
        if len(responses) < 2:
            raise ValidationError("Synthesis requires at least 2 responses")

        analysis = self._detector.detect_agreement(responses)
        model = synthesis_model or self._synthesis_model
        text, used_model = await self._generate_synthesis(query, responses, analysis, model)

        return SynthesisResult(
            original_responses=responses,
            synthesis=text,
            agreement_analysis=analysis,
            recommendations=generate_recommendations(analysis),
            synthesizer=used_model,
        )

    async def _generate_synthesis(
        self,
        query: str,
        responses: list[ModelResponse],
        analysis: AgreementDetection,
        model: str,
    ) -> tuple[str, str | None]:
        if self._backend is None:
            return rule_based_synthesis(responses, analysis), None

        logger.info("Running synthesis via %s", model)
        try:
            completion = await self._backend.complete(
                model,
                build_synthesis_prompt(query, responses, analysis),
                system_prompt=SYNTHESIS_SYSTEM_PROMPT,
                temperature=SYNTHESIS_TEMPERATURE,
            )
        except Exception as exc:
            logger.warning("AI synthesis failed, falling back to rule-based synthesis: %s", exc)
            return rule_based_synthesis(responses, analysis), None

        if not completion.text.strip():
            logger.warning("Synthesizer %s returned empty content, using rule-based synthesis", model)
            return rule_based_synthesis(responses, analysis), None

        return completion.text, model

    async def compare_synthesis_methods(
        self,
        query: str,
        responses: list[ModelResponse],
        synthesis_models: list[str],
    ) -> dict[str, SynthesisResult]:
        """Run one synthesis per model, in order, skipping models that fail."""
        results: dict[str, SynthesisResult] = {}
        for model in synthesis_models:
            try:
                results[model] = await self.synthesize(query, responses, synthesis_model=model)
            except Exception as exc:
                logger.warning("Synthesis with model %s failed: %s", model, exc)
        return results
