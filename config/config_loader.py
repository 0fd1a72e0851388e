"""Load settings.yaml into typed dataclasses. Reports which backends have keys."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"


@dataclass
class BackendConfig:
    name: str
    sdk: str
    timeout_sec: int
    max_tokens: int
    api_key_env: str | None = None      # None for keyless local backends (ollama)
    base_url: str | None = None
    models: list[str] = field(default_factory=list)  # advisory catalogue
    enabled: bool = True


@dataclass
class RouteConfig:
    backend: str
    prefixes: list[str] = field(default_factory=list)
    substrings: list[str] = field(default_factory=list)


@dataclass
class DefaultsConfig:
    rounds: int
    output_dir: Path
    synthesizer: str | None = None
    judge: str | None = None
    temperature: float = 0.7
    timeout_sec: float | None = None
    max_rounds: int = 10
    default_panel: list[str] = field(default_factory=list)


@dataclass
class AppConfig:
    defaults: DefaultsConfig
    backends: dict[str, BackendConfig]
    routes: list[RouteConfig] = field(default_factory=list)
    available_backends: set[str] = field(default_factory=set)


def _optional_str(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def load_config(settings_path: Path = _SETTINGS_PATH) -> AppConfig:
    """Load and validate configuration from settings.yaml.

    Raises FileNotFoundError if settings file missing.
    Logs missing API keys but does not raise — callers check
    available_backends.
    """
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    defaults_raw = raw["defaults"]
    timeout_raw = defaults_raw.get("timeout_sec")
    defaults = DefaultsConfig(
        rounds=int(defaults_raw["rounds"]),
        output_dir=Path(defaults_raw["output_dir"]),
        synthesizer=_optional_str(defaults_raw.get("synthesizer")),
        judge=_optional_str(defaults_raw.get("judge")),
        temperature=float(defaults_raw.get("temperature", 0.7)),
        timeout_sec=float(timeout_raw) if timeout_raw is not None else None,
        max_rounds=int(defaults_raw.get("max_rounds", 10)),
        default_panel=list(defaults_raw.get("default_panel", [])),
    )

    routes = [
        RouteConfig(
            backend=backend_name,
            prefixes=list(route_raw.get("prefixes", [])),
            substrings=list(route_raw.get("substrings", [])),
        )
        for backend_name, route_raw in (raw.get("routing") or {}).items()
    ]

    backends: dict[str, BackendConfig] = {}
    available_backends: set[str] = set()

    for backend_name, backend_raw in raw["backends"].items():
        backend_cfg = BackendConfig(
            name=backend_name,
            sdk=backend_raw["sdk"],
            timeout_sec=int(backend_raw["timeout_sec"]),
            max_tokens=int(backend_raw["max_tokens"]),
            api_key_env=_optional_str(backend_raw.get("api_key_env")),
            base_url=_optional_str(backend_raw.get("base_url")),
            models=list(backend_raw.get("models", [])),
            enabled=bool(backend_raw.get("enabled", True)),
        )
        backends[backend_name] = backend_cfg

        if not backend_cfg.enabled:
            logger.info("Backend disabled in settings: %s", backend_name)
            continue

        if backend_cfg.api_key_env is None:
            available_backends.add(backend_name)
            logger.info("Backend available (no key required): %s", backend_name)
            continue

        api_key = os.environ.get(backend_cfg.api_key_env, "").strip()
        if api_key:
            available_backends.add(backend_name)
            logger.info("Backend available: %s", backend_name)
        else:
            logger.info(
                "Backend skipped (no API key): %s — set %s in .env",
                backend_name,
                backend_cfg.api_key_env,
            )

    return AppConfig(
        defaults=defaults,
        backends=backends,
        routes=routes,
        available_backends=available_backends,
    )
