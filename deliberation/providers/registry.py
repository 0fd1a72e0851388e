"""Instantiate backends for every configured family that has credentials."""

import logging

from config.config_loader import AppConfig
from deliberation.providers.anthropic import AnthropicProvider
from deliberation.providers.base import ModelBackend
from deliberation.providers.gemini import GeminiProvider
from deliberation.providers.ollama import OllamaProvider
from deliberation.providers.openai_provider import OpenAIProvider
from deliberation.providers.xai import XAIProvider

logger = logging.getLogger(__name__)

PROVIDER_CLASSES: dict[str, type[ModelBackend]] = {
    "anthropic": AnthropicProvider,
    "openai": OpenAIProvider,
    "google": GeminiProvider,
    "xai": XAIProvider,
    "ollama": OllamaProvider,
}


def build_backends(config: AppConfig) -> dict[str, ModelBackend]:
    """Build all available backends. Returns dict keyed by backend name."""
    backends: dict[str, ModelBackend] = {}
    for name in sorted(config.available_backends):
        if name not in PROVIDER_CLASSES:
            logger.warning("Backend '%s' unknown, skipping", name)
            continue
        try:
            backends[name] = PROVIDER_CLASSES[name](config.backends[name])
        except Exception as exc:
            logger.warning("Failed to instantiate backend '%s': %s", name, exc)
    return backends
