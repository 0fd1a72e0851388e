"""One debate round: sequential turns, each speaker seeing everything said so far."""

import logging
import re
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

from deliberation.models import DebateRound, DebateTurn
from deliberation import text_analysis as ta

logger = logging.getLogger(__name__)

MAX_KEY_POINTS = 10
MIN_KEY_POINT_LENGTH = 20

QueryModel = Callable[[str, str], Awaitable[str]]

_PREVIOUS_REFERENCE_RE = re.compile(r"\b(?:previous|earlier)\s+(?:point|argument)", re.IGNORECASE)


@dataclass
class RoundConfig:
    models: list[str]
    round_number: int
    topic: str
    previous_rounds: list[DebateRound] = field(default_factory=list)
    round_duration_sec: float | None = None  # advisory budget, never cancels a turn


def build_round_context(topic: str, previous_rounds: list[DebateRound]) -> str:
    if not previous_rounds:
        return f"Debate Topic: {topic}\n\nThis is the first round of debate."

    parts = [f"Debate Topic: {topic}", f"Previous Rounds ({len(previous_rounds)}):"]
    for rnd in previous_rounds:
        lines = [f"## Round {rnd.round_number}:", f"Summary: {rnd.summary}", "Key Points:"]
        lines.extend(f"- {kp}" for kp in rnd.key_points)
        parts.append("\n".join(lines))
    return "\n\n".join(parts)


def build_turn_prompt(
    topic: str,
    context: str,
    previous_turns: list[DebateTurn],
    round_number: int,
) -> str:
    """Prompt for the next speaker.

    Only the first speaker of round 1 opens the debate; everyone else
    responds to what came before.
    """
    if round_number == 1 and not previous_turns:
        return (
            f"{context}\n\n"
            f"You are the first to speak in Round {round_number}.\n"
            f'Present your position on: "{topic}"\n'
            "Provide clear arguments and reasoning."
        )

    parts = [context]
    if previous_turns:
        arguments = "\n\n".join(
            f"{idx}. {turn.model}:\n{turn.content}"
            for idx, turn in enumerate(previous_turns, start=1)
        )
        parts.append(f"Previous arguments in this round:\n\n{arguments}")
    parts.append(
        "Now it's your turn.\n"
        "Respond to the previous arguments, either:\n"
        "- Supporting and building on them\n"
        "- Challenging them with counterarguments\n"
        "- Offering a different perspective\n"
        "\nBe specific about which points you're addressing."
    )
    return "\n\n".join(parts)


def detect_references(content: str, previous_turns: list[DebateTurn]) -> list[int]:
    """Indices of same-round turns that ``content`` refers back to."""
    references: list[int] = []
    for idx, turn in enumerate(previous_turns):
        if turn.model in content:
            references.append(idx)
            continue
        numbered = re.compile(rf"\b(?:point|argument|position)\s*{idx + 1}\b", re.IGNORECASE)
        if numbered.search(content) or _PREVIOUS_REFERENCE_RE.search(content):
            references.append(idx)
    return references


def summarize_round(turns: list[DebateTurn]) -> str:
    if not turns:
        return "No turns in this round"

    has_agreement = any(ta.AGREEMENT_MARKERS.search(t.content) for t in turns)
    has_disagreement = any(ta.DISAGREEMENT_MARKERS.search(t.content) for t in turns)

    if has_agreement and has_disagreement:
        tone = "Mixed perspectives with both agreement and counterarguments."
    elif has_agreement:
        tone = "General agreement among participants."
    elif has_disagreement:
        tone = "Significant debate with differing viewpoints."
    else:
        tone = "Diverse perspectives presented."
    return f"{len(turns)} participants contributed. {tone}"


def extract_key_points(turns: list[DebateTurn]) -> list[str]:
    key_points: list[str] = []
    for turn in turns:
        for sentence in ta.split_sentences(turn.content):
            if len(sentence) < MIN_KEY_POINT_LENGTH:
                continue
            if ta.is_key_point(sentence) or ta.ARGUMENT_MARKERS.search(sentence):
                key_points.append(f"{turn.model}: {sentence}")
    return key_points[:MAX_KEY_POINTS]


class RoundManager:
    """Runs debate rounds and judges when a debate has run its course."""

    async def execute_round(self, config: RoundConfig, query_model: QueryModel) -> DebateRound:
        """Give every participant one turn, strictly in configured order.

        A participant whose call fails is skipped; the round carries on.
        """
        turns: list[DebateTurn] = []
        context = build_round_context(config.topic, config.previous_rounds)
        start = time.monotonic()

        for model in config.models:
            prompt = build_turn_prompt(config.topic, context, turns, config.round_number)
            try:
                content = await query_model(model, prompt)
            except Exception as exc:
                logger.warning("Model %s failed in round %d: %s", model, config.round_number, exc)
                continue

            turns.append(
                DebateTurn(
                    model=model,
                    round_number=config.round_number,
                    content=content,
                    referenced_turns=detect_references(content, turns),
                )
            )

        elapsed = time.monotonic() - start
        if config.round_duration_sec is not None and elapsed > config.round_duration_sec:
            logger.warning(
                "Round %d took %.1fs, over its %.1fs budget",
                config.round_number,
                elapsed,
                config.round_duration_sec,
            )

        logger.info(
            "Round %d complete: %d/%d participants spoke",
            config.round_number,
            len(turns),
            len(config.models),
        )

        return DebateRound(
            round_number=config.round_number,
            turns=turns,
            summary=summarize_round(turns),
            key_points=extract_key_points(turns),
        )

    def should_continue_round(self, rnd: DebateRound, max_rounds: int) -> bool:
        """Continue while under the cap and the round still shows friction or new points."""
        if rnd.round_number >= max_rounds:
            return False
        has_disagreement = any(ta.DISAGREEMENT_MARKERS.search(t.content) for t in rnd.turns)
        return has_disagreement or bool(rnd.key_points)

    def has_consensus(self, rounds: list[DebateRound]) -> bool:
        """True when at least two thirds of the last round's turns signal agreement."""
        if not rounds or not rounds[-1].turns:
            return False
        turns = rounds[-1].turns
        agreeing = sum(1 for t in turns if ta.CONSENSUS_MARKERS.search(t.content))
        return agreeing * 3 >= len(turns) * 2
