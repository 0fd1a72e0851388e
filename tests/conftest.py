"""Shared pytest fixtures."""

from collections.abc import Callable
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from config.config_loader import AppConfig, BackendConfig, DefaultsConfig
from deliberation.models import Completion, DebateRound, DebateTurn, ModelResponse, TokenUsage
from deliberation.parallel_query import ParallelQueryEngine
from deliberation.providers.base import ModelBackend, ProviderError

Reply = str | Exception | list | Callable[[str], str]

COFFEE_POINTS = (
    "Here is my view:\n"
    "- Moderate coffee intake is linked to lower mortality\n"
    "- Caffeine improves alertness and focus\n"
    "- Pregnant women should limit caffeine\n"
)


class MockBackend(ModelBackend):
    """Test double backend answering from a per-model script.

    A reply can be a string, an exception to raise, a list consumed one
    item per call, or a callable taking the prompt.
    """

    def __init__(
        self,
        backend_name: str = "mock",
        replies: dict[str, Reply] | None = None,
        default: str = "Mock response",
        catalogue: list[str] | None = None,
    ) -> None:
        self._name = backend_name
        self._replies = dict(replies or {})
        self._default = default
        self._catalogue = list(catalogue or [])
        self.prompts: list[tuple[str, str]] = []
        # Shadow the class method with an AsyncMock at the instance level.
        self.complete = AsyncMock(side_effect=self._answer)  # type: ignore[method-assign]

    def name(self) -> str:
        return self._name

    async def list_models(self) -> list[str]:
        return list(self._catalogue)

    async def _answer(self, model_id: str, prompt: str, **kwargs) -> Completion:
        self.prompts.append((model_id, prompt))
        reply = self._replies.get(model_id, self._default)
        if isinstance(reply, list):
            reply = reply.pop(0)
        if isinstance(reply, Exception):
            raise reply
        text = reply(prompt) if callable(reply) else reply
        return Completion(text=text, model=model_id, usage=TokenUsage(10, 20, 30), latency_sec=0.1)

    async def complete(  # type: ignore[override]
        self,
        model_id: str,
        prompt: str,
        *,
        system_prompt: str | None = None,
        temperature: float | None = None,
        timeout_sec: float | None = None,
    ) -> Completion:
        """Default implementation; replaced by AsyncMock in __init__."""
        return await self._answer(model_id, prompt)


def make_engine(backend: ModelBackend) -> ParallelQueryEngine:
    """Router that sends claude-/gpt-/gemini- ids to the same backend."""
    return ParallelQueryEngine({"anthropic": backend, "openai": backend, "google": backend})


def response(model: str, content: str) -> ModelResponse:
    return ModelResponse(model=model, content=content)


def make_round(number: int, *contents: str, models: list[str] | None = None) -> DebateRound:
    names = models or [f"model-{i}" for i in range(len(contents))]
    return DebateRound(
        round_number=number,
        turns=[DebateTurn(model=m, round_number=number, content=c) for m, c in zip(names, contents)],
    )


@pytest.fixture
def mock_backend() -> MockBackend:
    return MockBackend()


@pytest.fixture
def failing_backend() -> MockBackend:
    backend = MockBackend("broken")
    backend.complete = AsyncMock(side_effect=ProviderError("broken", "API error"))
    return backend


@pytest.fixture
def sample_backend_config() -> BackendConfig:
    return BackendConfig(
        name="anthropic",
        sdk="anthropic",
        api_key_env="TEST_API_KEY",
        timeout_sec=30,
        max_tokens=1024,
    )


@pytest.fixture
def sample_defaults_config(tmp_path: Path) -> DefaultsConfig:
    return DefaultsConfig(
        rounds=2,
        output_dir=tmp_path / "output",
        synthesizer="claude-synth",
        default_panel=["claude-a", "gpt-b", "gemini-c"],
    )


@pytest.fixture
def sample_app_config(sample_defaults_config: DefaultsConfig, sample_backend_config: BackendConfig) -> AppConfig:
    return AppConfig(
        defaults=sample_defaults_config,
        backends={"anthropic": sample_backend_config},
        available_backends={"anthropic"},
    )


@pytest.fixture
def coffee_responses() -> list[ModelResponse]:
    return [response("claude-a", COFFEE_POINTS), response("gpt-b", COFFEE_POINTS)]
