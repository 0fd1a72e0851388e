"""Debate orchestration: sequential rounds, early stop, synthesis, optional judge."""

import logging
import re
import time
from collections.abc import Callable

from deliberation.errors import ValidationError
from deliberation.models import (
    ConfigValidation,
    DebateConfig,
    DebateResult,
    DebateRound,
    ModelQuery,
    ModelResponse,
)
from deliberation.parallel_query import ParallelQueryEngine
from deliberation.providers.base import ProviderError
from deliberation.round_manager import RoundConfig, RoundManager
from deliberation.synthesis import SynthesisAgent

logger = logging.getLogger(__name__)

MAX_ROUNDS = 10
MAX_FALLBACK_KEY_POINTS = 15
TURN_TEMPERATURE = 0.7

NO_CLEAR_WINNER = "No clear winner"
JUDGEMENT_FAILED = "Judgement failed"


def _participants(rounds: list[DebateRound]) -> list[str]:
    """Models that actually spoke, in first-seen order."""
    return list(dict.fromkeys(turn.model for rnd in rounds for turn in rnd.turns))


def parse_winner(judgement: str, participants: list[str]) -> str | None:
    """Find the participant the judge declared the winner, if any."""
    for participant in participants:
        name = re.escape(participant) + r"(?![\w-]|[.:]\w)"
        patterns = [
            rf"{name}\s+(?:wins|won|is the winner)",
            rf"winner\s+is\s+{name}",
            rf"declare\s+{name}\s+(?:as\s+)?(?:the\s+)?winner",
        ]
        if any(re.search(p, judgement, re.IGNORECASE) for p in patterns):
            return participant
    return None


def build_judge_prompt(topic: str, rounds: list[DebateRound]) -> str:
    lines = [
        f'You are an impartial judge evaluating a debate on: "{topic}"',
        "",
        f"The debate had {len(rounds)} rounds with the following participants:",
    ]
    lines.extend(f"- {p}" for p in _participants(rounds))
    lines += ["", "## Debate Transcript:", ""]

    for rnd in rounds:
        lines += [f"### Round {rnd.round_number}:", ""]
        for idx, turn in enumerate(rnd.turns, start=1):
            lines += [f"{idx}. **{turn.model}:**", turn.content, ""]

    lines += [
        "## Your Task:",
        "Evaluate the debate and determine:",
        "1. Which participant made the strongest arguments",
        "2. Who provided the best evidence and reasoning",
        "3. Who addressed counterarguments most effectively",
        "",
        "Declare a winner and provide your reasoning.",
    ]
    return "\n".join(lines)


def format_debate_synthesis(rounds: list[DebateRound], synthesis: str) -> str:
    lines = [f"# Debate Summary: {len(rounds)} Rounds", "", "## Round-by-Round Overview:", ""]
    for rnd in rounds:
        lines.append(f"**Round {rnd.round_number}:** {rnd.summary}")
        lines.append("Key Points:")
        lines.extend(f"- {kp}" for kp in rnd.key_points)
        lines.append("")
    lines += ["## Final Synthesis:", "", synthesis]
    return "\n".join(lines)


def fallback_synthesis(rounds: list[DebateRound]) -> str:
    lines = [f"Debate Summary ({len(rounds)} rounds):", ""]
    lines.extend(f"Round {rnd.round_number}: {rnd.summary}" for rnd in rounds)
    lines += ["", "Key Points Across All Rounds:"]
    key_points = [kp for rnd in rounds for kp in rnd.key_points]
    lines.extend(f"- {kp}" for kp in key_points[:MAX_FALLBACK_KEY_POINTS])
    return "\n".join(lines)


class DebateProtocol:
    """Structured multi-round debate where models challenge each other in turn."""

    def __init__(
        self,
        query_engine: ParallelQueryEngine,
        synthesis_agent: SynthesisAgent | None = None,
        round_manager: RoundManager | None = None,
        max_rounds: int = MAX_ROUNDS,
    ) -> None:
        self._query_engine = query_engine
        self._max_rounds = max_rounds
        self._synthesis = synthesis_agent or SynthesisAgent()
        self._rounds = round_manager or RoundManager()

    async def debate(
        self,
        config: DebateConfig,
        on_round_complete: Callable[[DebateRound], None] | None = None,
    ) -> DebateResult:
        """Run up to ``config.rounds`` rounds and assemble the result.

        Stops early once the latest round reaches consensus or stops raising
        new friction. Synthesis and judge failures degrade, never raise.

        Raises:
            ValidationError: Fewer than 2 participants.
        """
        if len(config.models) < 2:
            raise ValidationError("Debate requires at least 2 models")

        start = time.monotonic()
        rounds: list[DebateRound] = []

        for round_num in range(1, config.rounds + 1):
            logger.info("Executing debate round %d/%d...", round_num, config.rounds)

            rnd = await self._rounds.execute_round(
                RoundConfig(
                    models=config.models,
                    round_number=round_num,
                    topic=config.topic,
                    previous_rounds=list(rounds),
                    round_duration_sec=config.round_duration_sec,
                ),
                self._query_model,
            )
            rounds.append(rnd)

            if on_round_complete:
                on_round_complete(rnd)

            if self._rounds.has_consensus(rounds):
                logger.info("Consensus reached in round %d", round_num)
                break

            if not self._rounds.should_continue_round(rnd, config.rounds):
                logger.info("Debate concluded after round %d", round_num)
                break

        final_synthesis = await self._synthesize_debate(config.topic, rounds)

        winner: str | None = None
        judge_reasoning: str | None = None
        if config.judge_model:
            winner, judge_reasoning = await self._judge_debate(config.topic, rounds, config.judge_model)

        return DebateResult(
            topic=config.topic,
            models=config.models,
            rounds=rounds,
            final_synthesis=final_synthesis,
            duration_sec=time.monotonic() - start,
            winner=winner,
            judge_reasoning=judge_reasoning,
        )

    async def _query_model(self, model_id: str, prompt: str) -> str:
        result = await self._query_engine.execute(
            ModelQuery(query=prompt, models=[model_id], temperature=TURN_TEMPERATURE)
        )
        if not result.responses:
            raise ProviderError(model_id, f"No response from model: {model_id}")
        return result.responses[0].content

    async def _synthesize_debate(self, topic: str, rounds: list[DebateRound]) -> str:
        responses = [
            ModelResponse(model=turn.model, content=turn.content)
            for rnd in rounds
            for turn in rnd.turns
        ]
        try:
            result = await self._synthesis.synthesize(topic, responses)
        except Exception as exc:
            logger.warning("Failed to synthesize debate, using fallback: %s", exc)
            return fallback_synthesis(rounds)
        return format_debate_synthesis(rounds, result.synthesis)

    async def _judge_debate(
        self,
        topic: str,
        rounds: list[DebateRound],
        judge_model: str,
    ) -> tuple[str, str]:
        try:
            judgement = await self._query_model(judge_model, build_judge_prompt(topic, rounds))
        except Exception as exc:
            logger.warning("Failed to get judge verdict from %s: %s", judge_model, exc)
            return JUDGEMENT_FAILED, "Unable to render verdict: the judge model did not respond."

        winner = parse_winner(judgement, _participants(rounds))
        return winner or NO_CLEAR_WINNER, judgement

    def validate_config(self, config: DebateConfig) -> ConfigValidation:
        errors: list[str] = []
        if len(config.models) < 2:
            errors.append("Debate requires at least 2 models")
        if config.rounds < 1:
            errors.append("Debate requires at least 1 round")
        if config.rounds > self._max_rounds:
            errors.append(f"Maximum {self._max_rounds} rounds allowed")
        if not config.topic or not config.topic.strip():
            errors.append("Debate topic cannot be empty")
        return ConfigValidation(valid=not errors, errors=errors)
