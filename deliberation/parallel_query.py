"""Parallel query dispatch: fan a prompt out to N models, fan in the successes."""

import asyncio
import logging
import time

from config.config_loader import RouteConfig
from deliberation.errors import ValidationError
from deliberation.models import Completion, DeliberationResult, ModelQuery, ModelResponse
from deliberation.providers.base import ModelBackend, ProviderError, UnknownProviderError
from deliberation.routing import resolve_backend

logger = logging.getLogger(__name__)

DEFAULT_TEMPERATURE = 0.7


class ParallelQueryEngine(ModelBackend):
    """Routes participant ids to backends and queries them concurrently.

    The engine is itself a ModelBackend: ``complete`` routes a single id, so
    synthesis and judging can target any configured model.
    """

    def __init__(
        self,
        backends: dict[str, ModelBackend],
        routes: list[RouteConfig] | None = None,
    ) -> None:
        self._backends = dict(backends)
        self._routes = routes

    def name(self) -> str:
        return "router"

    def backend_for(self, model_id: str) -> ModelBackend:
        """Resolve ``model_id`` to a configured backend without any network call."""
        backend_name = resolve_backend(model_id, self._routes)
        backend = self._backends.get(backend_name)
        if backend is None:
            raise UnknownProviderError(model_id, f"No provider configured for model: {model_id}")
        return backend

    async def complete(
        self,
        model_id: str,
        prompt: str,
        *,
        system_prompt: str | None = None,
        temperature: float | None = None,
        timeout_sec: float | None = None,
    ) -> Completion:
        backend = self.backend_for(model_id)
        call = backend.complete(
            model_id,
            prompt,
            system_prompt=system_prompt,
            temperature=temperature,
            timeout_sec=timeout_sec,
        )
        if not timeout_sec:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=timeout_sec)
        except TimeoutError as exc:
            raise ProviderError(backend.name(), f"Query timeout for model: {model_id}") from exc

    async def _query_model(self, model_id: str, query: ModelQuery) -> ModelResponse | ProviderError:
        """Query one model. Never raises — returns ProviderError on failure."""
        temperature = query.temperature if query.temperature is not None else DEFAULT_TEMPERATURE
        try:
            completion = await self.complete(
                model_id,
                query.query,
                system_prompt=query.system_prompt,
                temperature=temperature,
                timeout_sec=query.timeout_sec,
            )
        except ProviderError as exc:
            logger.warning("Model %s query failed: %s", model_id, exc)
            return exc
        except Exception as exc:
            logger.warning("Model %s unexpected failure: %s", model_id, exc)
            return ProviderError(model_id, f"Unexpected error: {exc}")

        return ModelResponse(
            model=model_id,
            content=completion.text,
            usage=completion.usage,
            latency_sec=completion.latency_sec,
        )

    async def execute(self, query: ModelQuery) -> DeliberationResult:
        """Query every model in ``query.models`` concurrently.

        Failed, timed-out or unroutable models are logged and left out; they
        never cancel their siblings.

        Raises:
            ValidationError: Empty or duplicated participant list.
        """
        if not query.models:
            raise ValidationError("At least one model is required")
        if len(set(query.models)) != len(query.models):
            raise ValidationError(f"Duplicate model ids in query: {query.models}")

        start = time.monotonic()
        results = await asyncio.gather(*(self._query_model(m, query) for m in query.models))
        duration = time.monotonic() - start

        responses: list[ModelResponse] = []
        models: list[str] = []
        for model_id, result in zip(query.models, results):
            if isinstance(result, ModelResponse):
                responses.append(result)
                models.append(model_id)

        logger.info(
            "Parallel query complete: %d/%d models succeeded in %.2fs",
            len(responses),
            len(query.models),
            duration,
        )

        return DeliberationResult(
            query=query.query,
            models=models,
            responses=responses,
            parallel_duration_sec=duration,
        )

    async def get_available_models(self) -> list[str]:
        """Advisory catalogue across every configured backend."""
        models: list[str] = []
        for backend in self._backends.values():
            try:
                models.extend(await backend.list_models())
            except Exception as exc:
                logger.warning("Could not list models for %s: %s", backend.name(), exc)
        return models

    async def list_models(self) -> list[str]:
        return await self.get_available_models()
