"""Local Ollama backend through its OpenAI-compatible endpoint."""

from config.config_loader import BackendConfig
from deliberation.providers.base import ProviderError
from deliberation.providers.openai_provider import OpenAIProvider

_DEFAULT_BASE_URL = "http://localhost:11434/v1"


class OllamaProvider(OpenAIProvider):
    """Ollama needs no API key; the catalogue comes from the running server."""

    _label = "Ollama"

    def __init__(self, config: BackendConfig) -> None:
        if not config.base_url:
            config.base_url = _DEFAULT_BASE_URL
        super().__init__(config)

    def _api_key(self) -> str:
        # the OpenAI client insists on a key, Ollama ignores it
        return "ollama"

    async def list_models(self) -> list[str]:
        try:
            page = await self._client.models.list()
        except Exception as exc:
            raise ProviderError(self._config.name, f"Could not list models: {exc}") from exc
        return [m.id for m in page.data]
