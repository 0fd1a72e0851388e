"""xAI Grok backend using openai SDK (OpenAI-compatible API)."""

from config.config_loader import BackendConfig
from deliberation.providers.base import ProviderError
from deliberation.providers.openai_provider import OpenAIProvider


class XAIProvider(OpenAIProvider):
    """xAI Grok backend via OpenAI-compatible API."""

    _label = "xAI"

    def __init__(self, config: BackendConfig) -> None:
        if not config.base_url:
            raise ProviderError(config.name, "base_url is required for xAI provider")
        super().__init__(config)
