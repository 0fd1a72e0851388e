"""Deliberation: parallel query + quorum, single or multi-round."""

import logging

from deliberation.errors import InsufficientResponsesError, ValidationError
from deliberation.models import ModelQuery, QuorumResponse
from deliberation.parallel_query import ParallelQueryEngine
from deliberation.quorum import MIN_QUORUM_SIZE, QuorumManager

logger = logging.getLogger(__name__)


def formulate_follow_up_query(original_query: str, topics: list[str]) -> str:
    return (
        f"{original_query}\n\n"
        f"In the previous round, there were disagreements on: {', '.join(topics)}. "
        "Please address these specifically."
    )


class DeliberationEngine:
    """Asks several models the same question and checks whether they agree."""

    def __init__(
        self,
        query_engine: ParallelQueryEngine,
        quorum_manager: QuorumManager | None = None,
    ) -> None:
        self._query_engine = query_engine
        self._quorum = quorum_manager or QuorumManager()

    async def deliberate(
        self,
        query: str,
        models: list[str],
        threshold: float | None = None,
        *,
        system_prompt: str | None = None,
        temperature: float | None = None,
        timeout_sec: float | None = None,
    ) -> QuorumResponse:
        """Query ``models`` in parallel and evaluate quorum over the answers.

        The threshold defaults to the recommended value for the number of
        models that actually answered.

        Raises:
            ValidationError: Fewer than 2 models requested.
            InsufficientResponsesError: Fewer than 2 models answered.
        """
        if len(models) < MIN_QUORUM_SIZE:
            raise ValidationError("Deliberation requires at least 2 models")

        result = await self._query_engine.execute(
            ModelQuery(
                query=query,
                models=models,
                system_prompt=system_prompt,
                temperature=temperature,
                timeout_sec=timeout_sec,
            )
        )

        if len(result.responses) < MIN_QUORUM_SIZE:
            raise InsufficientResponsesError(len(result.responses), MIN_QUORUM_SIZE)

        if threshold is None:
            threshold = self._quorum.get_recommended_threshold(len(result.responses))

        return self._quorum.check_quorum(query, result.responses, threshold)

    async def deliberate_multi_round(
        self,
        query: str,
        models: list[str],
        rounds: int,
        threshold: float | None = None,
        **kwargs,
    ) -> list[QuorumResponse]:
        """Repeat deliberation, steering each round at the last disagreements.

        Stops early on consensus, or when a round without consensus surfaced
        no disagreement topics to probe.

        Raises:
            ValidationError: Fewer than 1 round requested.
        """
        if rounds < 1:
            raise ValidationError("Deliberation requires at least 1 round")

        results: list[QuorumResponse] = []
        current_query = query

        for round_num in range(1, rounds + 1):
            result = await self.deliberate(current_query, models, threshold, **kwargs)
            results.append(result)

            if result.consensus is not None:
                logger.info("Consensus reached in round %d", round_num)
                break

            if not result.disagreements:
                logger.info("No disagreements to probe after round %d, stopping", round_num)
                break

            current_query = formulate_follow_up_query(
                query, [d.topic for d in result.disagreements]
            )

        return results

    async def get_available_models(self) -> list[str]:
        return await self._query_engine.get_available_models()

    async def validate_models(self, models: list[str]) -> tuple[list[str], list[str]]:
        """Split ``models`` into (available, unavailable) by the advisory catalogue."""
        catalogue = set(await self.get_available_models())
        available = [m for m in models if m in catalogue]
        unavailable = [m for m in models if m not in catalogue]
        return available, unavailable
