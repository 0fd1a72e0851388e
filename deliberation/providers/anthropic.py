"""Anthropic Claude backend using anthropic SDK with native async."""

import asyncio
import logging
import os
import time

import anthropic as anthropic_sdk

from config.config_loader import BackendConfig
from deliberation.models import Completion, TokenUsage
from deliberation.providers.base import ModelBackend, ProviderError

logger = logging.getLogger(__name__)


class AnthropicProvider(ModelBackend):
    """Anthropic Claude backend via anthropic SDK."""

    def __init__(self, config: BackendConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env or "", "").strip()
        if not api_key:
            raise ProviderError(config.name, f"Missing API key: {config.api_key_env}")
        self._client = anthropic_sdk.AsyncAnthropic(api_key=api_key)

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
        kwargs: dict = {
            "model": model_id,
            "max_tokens": self._config.max_tokens,
            "messages": [{"role": "user", "content": prompt}],
        }
        if system_prompt:
            kwargs["system"] = system_prompt
        if temperature is not None:
            kwargs["temperature"] = temperature

        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.messages.create(**kwargs),
                timeout=timeout,
            )
        except TimeoutError as exc:
            raise ProviderError(self._config.name, f"Request timed out after {timeout}s") from exc
        except Exception as exc:
            raise ProviderError(self._config.name, f"API call failed: {exc}") from exc

        latency = time.monotonic() - start

        text_blocks = [b.text for b in (response.content or []) if b.type == "text"]
        if not text_blocks:
            raise ProviderError(self._config.name, f"No text blocks in response from {model_id}")

        usage = TokenUsage()
        if response.usage:
            usage = TokenUsage(
                prompt_tokens=response.usage.input_tokens,
                completion_tokens=response.usage.output_tokens,
                total_tokens=response.usage.input_tokens + response.usage.output_tokens,
            )

        logger.info("Anthropic %s: %.2fs, %d tokens", model_id, latency, usage.total_tokens)

        return Completion(
            text="\n".join(text_blocks),
            model=response.model or model_id,
            usage=usage,
            latency_sec=latency,
        )
