"""Gemini backend using google-genai SDK with native async."""

import asyncio
import logging
import os
import time

from google import genai
from google.genai import types as genai_types

from config.config_loader import BackendConfig
from deliberation.models import Completion, TokenUsage
from deliberation.providers.base import ModelBackend, ProviderError

logger = logging.getLogger(__name__)


class GeminiProvider(ModelBackend):
    """Google Gemini backend via google-genai SDK."""

    def __init__(self, config: BackendConfig) -> None:
        self._config = config
        api_key = os.environ.get(config.api_key_env or "", "").strip()
        if not api_key:
            raise ProviderError(config.name, f"Missing API key: {config.api_key_env}")
        self._client = genai.Client(api_key=api_key)

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
        start = time.monotonic()
        try:
            response = await asyncio.wait_for(
                self._client.aio.models.generate_content(
                    model=model_id,
                    contents=prompt,
                    config=genai_types.GenerateContentConfig(
                        max_output_tokens=self._config.max_tokens,
                        system_instruction=system_prompt,
                        temperature=temperature,
                    ),
                ),
                timeout=timeout,
            )
        except TimeoutError as exc:
            raise ProviderError(self._config.name, f"Request timed out after {timeout}s") from exc
        except Exception as exc:
            raise ProviderError(self._config.name, f"API call failed: {exc}") from exc

        latency = time.monotonic() - start

        if not response.text:
            raise ProviderError(self._config.name, f"Empty response text from {model_id}")

        usage = TokenUsage()
        meta = response.usage_metadata
        if meta:
            usage = TokenUsage(
                prompt_tokens=meta.prompt_token_count or 0,
                completion_tokens=meta.candidates_token_count or 0,
                total_tokens=meta.total_token_count or 0,
            )

        logger.info("Gemini %s: %.2fs, %d tokens", model_id, latency, usage.total_tokens)

        return Completion(text=response.text, model=model_id, usage=usage, latency_sec=latency)
