"""Abstract capability interface shared by every model backend."""

from abc import ABC, abstractmethod

from deliberation.models import Completion


class ProviderError(Exception):
    """Raised when a backend call fails."""

    def __init__(self, provider_name: str, message: str) -> None:
        self.provider_name = provider_name
        super().__init__(f"[{provider_name}] {message}")


class UnknownProviderError(ProviderError):
    """Raised when a participant id maps to no configured backend."""

    def __init__(self, model_id: str, message: str | None = None) -> None:
        self.model_id = model_id
        super().__init__("router", message or f"Unknown model provider for: {model_id}")


class ModelBackend(ABC):
    """One backend family (Anthropic, OpenAI, Google, ...)."""

    @abstractmethod
    def name(self) -> str:
        """Return the short backend name (e.g. 'anthropic', 'google')."""
        ...

    @abstractmethod
    async def complete(
        self,
        model_id: str,
        prompt: str,
        *,
        system_prompt: str | None = None,
        temperature: float | None = None,
        timeout_sec: float | None = None,
    ) -> Completion:
        """Send a single-turn prompt to ``model_id``.

        Args:
            model_id: Participant id, passed to the SDK as the model name.
            prompt: The full user prompt.
            system_prompt: Optional system instruction.
            temperature: Sampling temperature, SDK default when None.
            timeout_sec: Overrides the backend's configured timeout.

        Returns:
            Completion with text, token usage and latency.

        Raises:
            ProviderError: On API failure, timeout, or empty content.
        """
        ...

    async def list_models(self) -> list[str]:
        """Advisory catalogue of models this backend can serve."""
        return []
