"""Participant id -> backend name resolution. Pure functions of (id, routes)."""

from config.config_loader import RouteConfig
from deliberation.providers.base import UnknownProviderError

DEFAULT_ROUTES: list[RouteConfig] = [
    RouteConfig(backend="anthropic", prefixes=["claude-"]),
    RouteConfig(backend="openai", prefixes=["gpt-", "o1-", "o3-", "o4-"]),
    RouteConfig(backend="google", prefixes=["gemini-"]),
    RouteConfig(backend="xai", prefixes=["grok-"]),
    RouteConfig(backend="ollama", substrings=["llama", "mistral", "phi", "qwen"]),
]


def resolve_backend(model_id: str, routes: list[RouteConfig] | None = None) -> str:
    """Return the backend name serving ``model_id``.

    Prefix rules are checked across all routes before any substring rule, so a
    ``gpt-`` id containing ``phi`` still goes to OpenAI.

    Raises:
        UnknownProviderError: No route matches.
    """
    table = DEFAULT_ROUTES if routes is None else routes
    for route in table:
        if any(model_id.startswith(prefix) for prefix in route.prefixes):
            return route.backend
    for route in table:
        if any(fragment in model_id for fragment in route.substrings):
            return route.backend
    raise UnknownProviderError(model_id)
