"""OpenAI backend using openai SDK with native async."""

import asyncio
import logging
import os
import time

from openai import AsyncOpenAI

from config.config_loader import BackendConfig
from deliberation.models import Completion, TokenUsage
from deliberation.providers.base import ModelBackend, ProviderError

logger = logging.getLogger(__name__)


class OpenAIProvider(ModelBackend):
    """OpenAI backend via openai SDK. Also the base for OpenAI-compatible APIs."""

    _label = "OpenAI"

    def __init__(self, config: BackendConfig) -> None:
        self._config = config
        self._client = AsyncOpenAI(api_key=self._api_key(), base_url=config.base_url)

    def _api_key(self) -> str:
        api_key = os.environ.get(self._config.api_key_env or "", "").strip()
        if not api_key:
            raise ProviderError(self._config.name, f"Missing API key: {self._config.api_key_env}")
        return api_key

    def name(self) -> str:
        return self._config.name

    async def list_models(self) -> list[str]:
        return list(self._config.models)

    async def complete(
        self,
        model_id: str,
        prompt: str,
        *,
        system_prompt: str | None = None,
        temperature: float | None = None,
        timeout_sec: float | None = None,
    ) -> Completion:
        timeout = timeout_sec or self._config.timeout_sec
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        kwargs: dict = {
            "model": model_id,
            "messages": messages,
            "max_tokens": self._config.max_tokens,
        }
        if temperature is not None:
            kwargs["temperature"] = temperature

        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.chat.completions.create(**kwargs),
                timeout=timeout,
            )
        except TimeoutError as exc:
            raise ProviderError(self._config.name, f"Request timed out after {timeout}s") from exc
        except Exception as exc:
            raise ProviderError(self._config.name, f"API call failed: {exc}") from exc

        latency = time.monotonic() - start

        choice = response.choices[0] if response.choices else None
        if not choice or not choice.message.content:
            raise ProviderError(self._config.name, f"Empty response content from {model_id}")

        usage = TokenUsage()
        if response.usage:
            usage = TokenUsage(
                prompt_tokens=response.usage.prompt_tokens,
                completion_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            )

        logger.info("%s %s: %.2fs, %d tokens", self._label, model_id, latency, usage.total_tokens)

        return Completion(
            text=choice.message.content,
            model=response.model or model_id,
            usage=usage,
            latency_sec=latency,
        )
