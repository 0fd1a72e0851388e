"""Model health checks — ping each participant before starting a run."""

import asyncio
import logging

from deliberation.providers.base import ModelBackend

logger = logging.getLogger(__name__)

_PING_PROMPT = "Reply with the word OK only."
_TIMEOUT_SEC = 15.0


async def _check_one(backend: ModelBackend, model_id: str) -> tuple[str, bool, str]:
    """Ping a single model. Returns (model_id, ok, error_message)."""
    try:
        await asyncio.wait_for(
            backend.complete(model_id, _PING_PROMPT, temperature=0.0),
            timeout=_TIMEOUT_SEC,
        )
        return model_id, True, ""
    except Exception as exc:
        logger.debug("Health check failed for %s: %s", model_id, exc)
        return model_id, False, str(exc) or type(exc).__name__


async def run_health_checks(
    backend: ModelBackend,
    models: list[str],
) -> dict[str, tuple[bool, str]]:
    """Ping all models in parallel through ``backend`` (usually the router).

    Returns:
        Dict mapping model id -> (ok, error_message).
        error_message is "" when ok is True.
    """
    results = await asyncio.gather(*(_check_one(backend, m) for m in models))
    return {model_id: (ok, err) for model_id, ok, err in results}
