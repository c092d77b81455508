"""Shared fixtures for API integration tests.

Uses FastAPI TestClient (in-memory, no network) and a scripted provider
patched in place of the real LLM backend, so tests run without API keys.
"""

from __future__ import annotations

import os
import sys
from typing import Iterator, List, Optional

import pytest

# Ensure project root is on sys.path
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "..", ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# Never pick up real credentials or a local provider choice
for _var in ("OPENAI_API_KEY", "ANTHROPIC_API_KEY", "GOOGLE_API_KEY", "LLM_PROVIDER", "LLM_MODEL"):
    os.environ.pop(_var, None)


class ScriptedProvider:
    """Stand-in LLM provider that replays a fixed list of chunks."""

    provider_name = "scripted"
    default_model = "scripted-model"

    def __init__(self, chunks=(), *, fail_on_open: bool = False, fail_after: Optional[int] = None):
        self.chunks = list(chunks)
        self.fail_on_open = fail_on_open
        self.fail_after = fail_after
        self.calls: List[tuple] = []

    def stream_text(self, system_prompt, user_content, *, config=None) -> Iterator[str]:
        from core.providers.base import LLMError

        self.calls.append((system_prompt, user_content, config))
        if self.fail_on_open:
            raise LLMError("invalid api key", provider=self.provider_name)
        for i, chunk in enumerate(self.chunks):
            if self.fail_after is not None and i == self.fail_after:
                raise LLMError("upstream dropped", provider=self.provider_name)
            yield chunk


@pytest.fixture(autouse=True)
def _fresh_settings():
    from src.config.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture()
def client():
    """FastAPI TestClient — no network, no server startup needed."""
    from fastapi.testclient import TestClient

    from services.api.app.main import app

    return TestClient(app)


@pytest.fixture()
def use_provider(monkeypatch):
    """Install a ScriptedProvider for the request; returns it for inspection."""
    from services.api.app.routers import proposals

    def _install(*chunks, **kwargs) -> ScriptedProvider:
        provider = ScriptedProvider(chunks, **kwargs)
        monkeypatch.setattr(proposals, "_get_provider", lambda settings: provider)
        return provider

    return _install
