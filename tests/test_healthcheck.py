"""Unit tests for deliberation/healthcheck.py — no real API calls."""

import asyncio

import deliberation.healthcheck as hc
from deliberation.healthcheck import run_health_checks
from deliberation.providers.base import ProviderError
from tests.conftest import MockBackend, make_engine


async def test_all_models_pass():
    """All models succeed -> all marked ok, no errors."""
    results = await run_health_checks(MockBackend(default="OK"), ["claude-a", "gemini-c"])

    assert results["claude-a"] == (True, "")
    assert results["gemini-c"] == (True, "")


async def test_one_model_fails():
    """A model that raises returns ok=False with the error message."""
    backend = MockBackend(replies={"grok-x": ProviderError("xai", "403 Forbidden")})

    results = await run_health_checks(backend, ["claude-a", "grok-x"])

    assert results["claude-a"] == (True, "")
    ok, err = results["grok-x"]
    assert ok is False
    assert "403" in err


async def test_unroutable_model_fails_through_router():
    results = await run_health_checks(make_engine(MockBackend()), ["claude-a", "mystery-model"])

    assert results["claude-a"] == (True, "")
    ok, err = results["mystery-model"]
    assert ok is False
    assert "mystery-model" in err


async def test_empty_model_list():
    assert await run_health_checks(MockBackend(), []) == {}


async def test_ping_uses_zero_temperature(mock_backend):
    await run_health_checks(mock_backend, ["claude-a"])
    assert mock_backend.complete.await_args.kwargs["temperature"] == 0.0


async def test_timeout_counts_as_failure(monkeypatch):
    """A model that hangs past the timeout is marked as failed."""

    async def hang(*args, **kwargs):
        await asyncio.sleep(9999)

    backend = MockBackend()
    backend.complete.side_effect = hang
    monkeypatch.setattr(hc, "_TIMEOUT_SEC", 0.05)

    results = await run_health_checks(backend, ["slow-model"])

    ok, err = results["slow-model"]
    assert ok is False
    assert err == "TimeoutError"
