"""Provider lookup for the relay.

Maps a provider name from settings to its implementation class and the
model used when ``LLM_MODEL`` is not set.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from .base import LLMProvider

# Models known to accept inline PDF/image parts; "standard" is the default.
MODEL_CATALOG: List[Dict[str, Any]] = [
    {"provider": "openai", "model_id": "gpt-4o", "tier": "standard"},
    {"provider": "openai", "model_id": "gpt-4o-mini", "tier": "fast"},
    {"provider": "anthropic", "model_id": "claude-sonnet-4-5-20250929", "tier": "standard"},
    {"provider": "anthropic", "model_id": "claude-haiku-4-5-20251001", "tier": "fast"},
    {"provider": "google", "model_id": "gemini-2.5-pro", "tier": "standard"},
    {"provider": "google", "model_id": "gemini-2.0-flash", "tier": "fast"},
]

SUPPORTED_PROVIDERS = ("openai", "anthropic", "google")


def get_models_for_provider(provider: str) -> List[Dict[str, Any]]:
    return [m for m in MODEL_CATALOG if m["provider"] == provider]


def get_default_model_for_provider(provider: str) -> Optional[str]:
    """Standard-tier model for *provider*, else its first listed model."""
    models = get_models_for_provider(provider)
    for m in models:
        if m["tier"] == "standard":
            return m["model_id"]
    return models[0]["model_id"] if models else None


def get_provider(provider_name: str, model: Optional[str] = None) -> LLMProvider:
    """Instantiate the provider named in settings.

    Raises
    ------
    ValueError
        If *provider_name* is not one of :data:`SUPPORTED_PROVIDERS`.
    """
    kwargs: Dict[str, Any] = {}
    if model:
        kwargs["default_model"] = model

    if provider_name == "openai":
        from .openai_provider import OpenAIProvider
        return OpenAIProvider(**kwargs)
    if provider_name == "anthropic":
        from .anthropic_provider import AnthropicProvider
        return AnthropicProvider(**kwargs)
    if provider_name == "google":
        from .google_provider import GoogleProvider
        return GoogleProvider(**kwargs)
    raise ValueError(
        f"Unknown LLM provider: {provider_name!r}. "
        f"Supported: {', '.join(SUPPORTED_PROVIDERS)}"
    )
